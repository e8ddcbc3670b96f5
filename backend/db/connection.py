"""
db/connection.py
----------------
Lazily-built psycopg2 ThreadedConnectionPool for the Postgres exclusion store.

Usage:
    from db.connection import get_conn

    with get_conn() as conn:
        exclusion_repo.upsert_exclusion(conn, "user_001", "Le Cinq", "restaurants")

Commit on clean exit, rollback and re-raise on exception, connection always
returned to the pool.  Nothing connects until the first get_conn(), so the
default in-memory backend never touches the database.

Connection settings come from config.POSTGRES_* (see config.py).
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Generator

import psycopg2
import psycopg2.pool

import config

logger = logging.getLogger(__name__)

_pool: psycopg2.pool.ThreadedConnectionPool | None = None
_pool_lock = threading.Lock()


def connection_kwargs() -> dict:
    """psycopg2.connect() keyword arguments built from config."""
    return {
        "host":     config.POSTGRES_HOST,
        "port":     config.POSTGRES_PORT,
        "dbname":   config.POSTGRES_DB,
        "user":     config.POSTGRES_USER,
        "password": config.POSTGRES_PASSWORD,
    }


def get_pool() -> psycopg2.pool.ThreadedConnectionPool:
    global _pool
    with _pool_lock:
        if _pool is None or _pool.closed:
            logger.info(
                "Opening Postgres pool %s@%s:%s/%s",
                config.POSTGRES_USER, config.POSTGRES_HOST, config.POSTGRES_PORT, config.POSTGRES_DB,
            )
            _pool = psycopg2.pool.ThreadedConnectionPool(
                minconn=config.POSTGRES_MIN_CONN,
                maxconn=config.POSTGRES_MAX_CONN,
                **connection_kwargs(),
            )
        return _pool


@contextmanager
def get_conn() -> Generator:
    """Borrow a pooled connection for one unit of work."""
    pool = get_pool()
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def close_pool() -> None:
    """Close every pooled connection (application shutdown)."""
    global _pool
    with _pool_lock:
        if _pool is not None and not _pool.closed:
            _pool.closeall()
        _pool = None
