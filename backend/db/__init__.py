"""
db/
----
Database access layer of the concierge engine.

Storage:
  PostgreSQL (psycopg2), used only when EXCLUSION_BACKEND=postgres
    tables: excluded_venues
    schema: db/schema.sql
    apply:  python scripts/run_migrations.py

Public exports:
    from db import get_conn, close_pool
    from db.repositories import exclusion_repo
"""

from db.connection import get_conn, close_pool

__all__ = ["get_conn", "close_pool"]
