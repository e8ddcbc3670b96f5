"""
config.py
---------
Central configuration for the concierge itinerary engine.
All values are read from environment variables (with a backend/.env file
loaded first when present), never hard-coded at call sites.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)

# ── Venue catalog ─────────────────────────────────────────────────────────────
# One delimiter-separated file per venue category, all in CATALOG_DIR.
CATALOG_DIR: Path = Path(
    os.getenv("CATALOG_DIR", str(Path(__file__).parent / "data" / "catalog"))
)
CATALOG_DELIMITER: str = os.getenv("CATALOG_DELIMITER", ";")
CATALOG_ENCODING: str  = os.getenv("CATALOG_ENCODING", "utf-8")

# category value → file name inside CATALOG_DIR
CATALOG_FILES: dict[str, str] = {
    "restaurants": os.getenv("CATALOG_FILE_RESTAURANTS", "restaurants.csv"),
    "museums":     os.getenv("CATALOG_FILE_MUSEUMS",     "musees.csv"),
    "activities":  os.getenv("CATALOG_FILE_ACTIVITIES",  "activites.csv"),
    "spas":        os.getenv("CATALOG_FILE_SPAS",        "spas.csv"),
    "shopping":    os.getenv("CATALOG_FILE_SHOPPING",    "shopping.csv"),
    "nightlife":   os.getenv("CATALOG_FILE_NIGHTLIFE",   "nightlife.csv"),
    "transport":   os.getenv("CATALOG_FILE_TRANSPORT",   "transports.csv"),
}

# Slug part of a venue id is cut to this many characters.
VENUE_ID_MAX_LENGTH: int = int(os.getenv("VENUE_ID_MAX_LENGTH", "50"))

# ── Allocation ────────────────────────────────────────────────────────────────
DEFAULT_CITY: str  = os.getenv("DEFAULT_CITY", "paris")
MAX_TRIP_DAYS: int = int(os.getenv("MAX_TRIP_DAYS", "21"))

# Below this many open venues the availability filter is ignored and the
# exclusion-only pool is used instead.
AVAILABILITY_MIN_CANDIDATES: int = int(os.getenv("AVAILABILITY_MIN_CANDIDATES", "2"))

# Transport venue mentioned in the internal program intro (name substring).
TRANSPORT_PROVIDER_KEYWORD: str = os.getenv("TRANSPORT_PROVIDER_KEYWORD", "chabe")

# ── Exclusion list storage ────────────────────────────────────────────────────
# "memory"   → process-local store (default, used by tests)
# "postgres" → excluded_venues table via db.connection
EXCLUSION_BACKEND: str = os.getenv("EXCLUSION_BACKEND", "memory")

# ── PostgreSQL ────────────────────────────────────────────────────────────────
# Schema defined in db/schema.sql
# Apply with: python scripts/run_migrations.py
POSTGRES_HOST: str     = os.getenv("POSTGRES_HOST",     "localhost")
POSTGRES_PORT: int     = int(os.getenv("POSTGRES_PORT", "5432"))
POSTGRES_DB: str       = os.getenv("POSTGRES_DB",       "concierge")
POSTGRES_USER: str     = os.getenv("POSTGRES_USER",     "concierge_user")
POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "concierge_pass")
POSTGRES_MIN_CONN: int = int(os.getenv("POSTGRES_MIN_CONN", "1"))
POSTGRES_MAX_CONN: int = int(os.getenv("POSTGRES_MAX_CONN", "10"))

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# JSONL audit trail of generations and concierge edits (one file per program)
AUDIT_LOG_ENABLED: bool = os.getenv("AUDIT_LOG_ENABLED", "false").lower() in ("1", "true", "yes")
LOGS_DIR: Path = Path(os.getenv("LOGS_DIR", str(Path(__file__).parent / "logs")))
