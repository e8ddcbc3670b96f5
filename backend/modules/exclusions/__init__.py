"""
modules/exclusions package: per-client permanent venue exclusions.
"""
from modules.exclusions.exclusion_store import (
    ExclusionRecord,
    ExclusionStore,
    InMemoryExclusionStore,
    PostgresExclusionStore,
    build_exclusion_store,
    get_exclusion_store,
)

__all__ = [
    "ExclusionRecord",
    "ExclusionStore",
    "InMemoryExclusionStore",
    "PostgresExclusionStore",
    "build_exclusion_store",
    "get_exclusion_store",
]
