#!/usr/bin/env python
"""
scripts/run_migrations.py
--------------------------
Creates the excluded_venues table from db/schema.sql on the configured
Postgres database.  Only needed with EXCLUSION_BACKEND=postgres.

Usage:
    python scripts/run_migrations.py             # apply
    python scripts/run_migrations.py --dry-run   # list statements only
    python scripts/run_migrations.py --verify    # check the table exists

Exit codes:
    0: success
    1: connection failed, SQL error, or table missing (--verify)

Connection settings are the POSTGRES_* variables read by config.py.
Every statement is IF NOT EXISTS and the whole file runs in one
transaction, so applying twice is harmless.
"""

from __future__ import annotations

import argparse
import pathlib
import re
import sys

# Add the backend directory to sys.path so that config is importable
_BACKEND_DIR = pathlib.Path(__file__).resolve().parent.parent
if str(_BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(_BACKEND_DIR))

import psycopg2  # noqa: E402

import config  # noqa: E402
from db.connection import connection_kwargs  # noqa: E402

SCHEMA_FILE = _BACKEND_DIR / "db" / "schema.sql"
REQUIRED_TABLES = ("excluded_venues",)


def load_statements(path: pathlib.Path = SCHEMA_FILE) -> list[str]:
    """Statements of ``path`` with comments removed, in file order."""
    sql = path.read_text(encoding="utf-8")
    sql = re.sub(r"/\*.*?\*/", "", sql, flags=re.DOTALL)
    sql = re.sub(r"--[^\n]*", "", sql)
    return [s.strip() for s in sql.split(";") if s.strip()]


def _summary(statement: str, width: int = 70) -> str:
    return " ".join(statement.split())[:width]


def apply(statements: list[str]) -> None:
    conn = psycopg2.connect(**connection_kwargs())
    try:
        with conn, conn.cursor() as cur:
            for stmt in statements:
                cur.execute(stmt)
                print(f"  [✓] {_summary(stmt)}")
    finally:
        conn.close()


def missing_tables() -> list[str]:
    conn = psycopg2.connect(**connection_kwargs())
    try:
        with conn.cursor() as cur:
            cur.execute(
                "SELECT table_name FROM information_schema.tables WHERE table_name = ANY(%s)",
                (list(REQUIRED_TABLES),),
            )
            found = {row[0] for row in cur.fetchall()}
    finally:
        conn.close()
    return [t for t in REQUIRED_TABLES if t not in found]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the concierge exclusion table.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", action="store_true", help="Print statements without executing them.")
    mode.add_argument("--verify", action="store_true", help="Only check that the tables exist.")
    args = parser.parse_args(argv)

    print(f"[migrations] Target DB : {config.POSTGRES_DB} @ {config.POSTGRES_HOST}:{config.POSTGRES_PORT}")
    try:
        if args.verify:
            missing = missing_tables()
            if missing:
                print(f"[migrations] Missing tables: {', '.join(missing)}", file=sys.stderr)
                return 1
            print("[migrations] Schema is up to date.")
            return 0

        statements = load_statements()
        print(f"[migrations] {len(statements)} statements from {SCHEMA_FILE.name}")
        if args.dry_run:
            for i, stmt in enumerate(statements, 1):
                print(f"  [{i:03d}] {_summary(stmt)}")
            return 0

        apply(statements)
    except (OSError, psycopg2.Error) as exc:
        print(f"[migrations] ERROR: {exc}", file=sys.stderr)
        return 1

    print("[migrations] Schema applied.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
