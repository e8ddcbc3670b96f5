"""
db/repositories/exclusion_repo.py
---------------------------------
CRUD operations for the `excluded_venues` table.

Source: db/schema.sql Table excluded_venues

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.connection.get_conn().
"""

from __future__ import annotations


def upsert_exclusion(
    conn,
    user_id: str,
    venue_name: str,
    category: str,
    reason: str | None = None,
) -> dict:
    """
    Insert an exclusion, or refresh the reason of an existing one.

    Uniqueness is (user_id, lower(venue_name), category), so re-excluding the
    same venue with different casing is a no-op apart from the reason.
    """
    sql = """
        INSERT INTO excluded_venues (user_id, venue_name, venue_name_key, category, reason)
        VALUES (%s, %s, %s, %s, %s)
        ON CONFLICT (user_id, venue_name_key, category)
        DO UPDATE SET
            reason = COALESCE(EXCLUDED.reason, excluded_venues.reason)
        RETURNING user_id, venue_name, category, reason, created_at
    """
    key = venue_name.strip().lower()
    with conn.cursor() as cur:
        cur.execute(sql, (user_id, venue_name.strip(), key, category, reason))
        cols = [d[0] for d in cur.description]
        return dict(zip(cols, cur.fetchone()))


def get_excluded_names(conn, user_id: str) -> set[str]:
    """Lower-cased venue names excluded by ``user_id`` (all categories)."""
    sql = "SELECT venue_name_key FROM excluded_venues WHERE user_id = %s"
    with conn.cursor() as cur:
        cur.execute(sql, (user_id,))
        return {row[0] for row in cur.fetchall()}


def list_exclusions(conn, user_id: str) -> list[dict]:
    sql = """
        SELECT user_id, venue_name, category, reason, created_at
        FROM excluded_venues
        WHERE user_id = %s
        ORDER BY created_at DESC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (user_id,))
        cols = [d[0] for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]


def delete_exclusion(conn, user_id: str, venue_name: str, category: str) -> bool:
    """Returns True when a row was removed."""
    sql = """
        DELETE FROM excluded_venues
        WHERE user_id = %s AND venue_name_key = %s AND category = %s
    """
    with conn.cursor() as cur:
        cur.execute(sql, (user_id, venue_name.strip().lower(), category))
        return cur.rowcount > 0
