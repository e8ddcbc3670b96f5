"""
modules/exclusions/exclusion_store.py
-------------------------------------
Per-client permanent exclusion list.

Every generation, regeneration and category switch for a user consults
``names_for(user_id)``.  Adding the same (user, venue name, category) twice
is a no-op apart from refreshing the reason.

Backends:
    InMemoryExclusionStore  : process-local, default
    PostgresExclusionStore  : excluded_venues table (db/schema.sql)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

import config
from db.connection import get_conn
from db.repositories import exclusion_repo

logger = logging.getLogger(__name__)


@dataclass
class ExclusionRecord:
    user_id: str
    venue_name: str
    category: str
    reason: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def key(self) -> tuple[str, str, str]:
        return self.user_id, self.venue_name.strip().lower(), self.category


class ExclusionStore(Protocol):
    def add(self, user_id: str, venue_name: str, category: str, reason: Optional[str] = None) -> ExclusionRecord: ...
    def names_for(self, user_id: str) -> set[str]: ...
    def list_for(self, user_id: str) -> list[ExclusionRecord]: ...
    def remove(self, user_id: str, venue_name: str, category: str) -> bool: ...


class InMemoryExclusionStore:
    """Thread-safe dict-backed store."""

    def __init__(self) -> None:
        self._records: dict[tuple[str, str, str], ExclusionRecord] = {}
        self._lock = threading.Lock()

    def add(self, user_id: str, venue_name: str, category: str, reason: Optional[str] = None) -> ExclusionRecord:
        record = ExclusionRecord(
            user_id=user_id,
            venue_name=venue_name.strip(),
            category=category,
            reason=reason,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            existing = self._records.get(record.key)
            if existing is not None:
                if reason is not None:
                    existing.reason = reason
                return existing
            self._records[record.key] = record
        return record

    def names_for(self, user_id: str) -> set[str]:
        with self._lock:
            return {name for uid, name, _ in self._records if uid == user_id}

    def list_for(self, user_id: str) -> list[ExclusionRecord]:
        with self._lock:
            return [r for r in self._records.values() if r.user_id == user_id]

    def remove(self, user_id: str, venue_name: str, category: str) -> bool:
        with self._lock:
            return self._records.pop((user_id, venue_name.strip().lower(), category), None) is not None


class PostgresExclusionStore:
    """Store backed by the excluded_venues table; one pooled connection per call."""

    def add(self, user_id: str, venue_name: str, category: str, reason: Optional[str] = None) -> ExclusionRecord:
        with get_conn() as conn:
            row = exclusion_repo.upsert_exclusion(conn, user_id, venue_name, category, reason)
        return ExclusionRecord(
            user_id=row["user_id"],
            venue_name=row["venue_name"],
            category=row["category"],
            reason=row["reason"],
            created_at=str(row["created_at"]),
        )

    def names_for(self, user_id: str) -> set[str]:
        with get_conn() as conn:
            return exclusion_repo.get_excluded_names(conn, user_id)

    def list_for(self, user_id: str) -> list[ExclusionRecord]:
        with get_conn() as conn:
            rows = exclusion_repo.list_exclusions(conn, user_id)
        return [
            ExclusionRecord(r["user_id"], r["venue_name"], r["category"], r["reason"], str(r["created_at"]))
            for r in rows
        ]

    def remove(self, user_id: str, venue_name: str, category: str) -> bool:
        with get_conn() as conn:
            return exclusion_repo.delete_exclusion(conn, user_id, venue_name, category)


# Module-level singleton; built lazily on first call to get_exclusion_store()
_store: ExclusionStore | None = None


def build_exclusion_store(backend: str | None = None) -> ExclusionStore:
    backend = (backend or config.EXCLUSION_BACKEND).lower()
    if backend == "memory":
        return InMemoryExclusionStore()
    if backend == "postgres":
        return PostgresExclusionStore()
    raise ValueError(f"Unknown EXCLUSION_BACKEND {backend!r} (expected 'memory' or 'postgres')")


def get_exclusion_store() -> ExclusionStore:
    global _store
    if _store is None:
        _store = build_exclusion_store()
        logger.info("Exclusion store: %s", type(_store).__name__)
    return _store
