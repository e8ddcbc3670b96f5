"""
modules/catalog/venue_catalog.py
--------------------------------
Per-category venue cache backed by the catalog files.

Usage:
    from modules.catalog import get_catalog

    catalog = get_catalog()
    restaurants = catalog.load(VenueCategory.RESTAURANTS)

The cache is compute-once: two threads missing at the same time may both
parse the file, the second insert simply wins.  Only successful reads are
cached, so a file that was missing can be picked up later without a clear().
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable, Optional, Union

import config
from modules.catalog.csv_reader import read_catalog_file
from modules.catalog.normalizer import normalize_records
from modules.validation.ingestion_validator import filter_valid, validate_venue
from schemas.venue import Venue, VenueCategory

logger = logging.getLogger(__name__)

CategoryLike = Union[VenueCategory, str]


class VenueCatalog:
    """Injectable catalog: one instance per directory, tests build their own."""

    def __init__(
        self,
        catalog_dir: Path | str | None = None,
        files: dict[str, str] | None = None,
        delimiter: str | None = None,
        encoding: str | None = None,
    ) -> None:
        self.catalog_dir = Path(catalog_dir) if catalog_dir else config.CATALOG_DIR
        self.files = dict(files or config.CATALOG_FILES)
        self.delimiter = delimiter or config.CATALOG_DELIMITER
        self.encoding = encoding or config.CATALOG_ENCODING
        self._cache: dict[VenueCategory, list[Venue]] = {}
        self._lock = threading.Lock()

    # ── public API ────────────────────────────────────────────────────────

    def load(self, category: CategoryLike) -> list[Venue]:
        """Venues of one category; parsed on first call, cached afterwards."""
        category = VenueCategory(category)
        cached = self._cache.get(category)
        if cached is not None:
            return cached

        venues = self._read(category)
        if venues is None:
            return []
        with self._lock:
            self._cache[category] = venues
        logger.info("Loaded %d %s venues from %s", len(venues), category.value, self.path_for(category))
        return venues

    def reload(self, category: CategoryLike) -> list[Venue]:
        category = VenueCategory(category)
        with self._lock:
            self._cache.pop(category, None)
        return self.load(category)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def load_all(self) -> dict[VenueCategory, list[Venue]]:
        return {category: self.load(category) for category in VenueCategory}

    def stats(self) -> dict[str, int]:
        return {category.value: len(venues) for category, venues in self.load_all().items()}

    def search(
        self,
        query: str,
        categories: Optional[Iterable[CategoryLike]] = None,
    ) -> list[Venue]:
        """Case-insensitive name substring search."""
        needle = query.strip().lower()
        wanted = [VenueCategory(c) for c in categories] if categories else list(VenueCategory)
        return [
            venue
            for category in wanted
            for venue in self.load(category)
            if needle in venue.name.lower()
        ]

    def get_by_id(self, venue_id: str) -> Optional[Venue]:
        prefix, sep, _ = venue_id.partition("-")
        if not sep:
            return None
        try:
            category = VenueCategory(prefix)
        except ValueError:
            return None
        return next((v for v in self.load(category) if v.id == venue_id), None)

    def path_for(self, category: VenueCategory) -> Path:
        return self.catalog_dir / self.files[category.value]

    # ── internals ─────────────────────────────────────────────────────────

    def _read(self, category: VenueCategory) -> Optional[list[Venue]]:
        if category.value not in self.files:
            logger.warning("No catalog file configured for %s", category.value)
            return None
        records = read_catalog_file(self.path_for(category), self.delimiter, self.encoding)
        if records is None:
            return None
        return filter_valid(normalize_records(records, category), validate_venue, label="venue")


# Module-level singleton; built lazily on first call to get_catalog()
_catalog: VenueCatalog | None = None


def get_catalog() -> VenueCatalog:
    """Return the process-wide catalog over config.CATALOG_DIR."""
    global _catalog
    if _catalog is None:
        _catalog = VenueCatalog()
    return _catalog
