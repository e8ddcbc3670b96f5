"""
tests/helpers.py
----------------
Temporary on-disk catalogs and pre-wired engine objects for the test cases.
"""

from __future__ import annotations

import random
import tempfile
import unittest
from pathlib import Path
from typing import Iterable, Sequence

import config
from modules.catalog import VenueCatalog
from modules.editing import ProgramEditor
from modules.exclusions import InMemoryExclusionStore
from modules.observability import AuditLogger
from modules.planning import ProgramGenerator
from schemas.requests import GenerateProgramRequest

SAMPLE_CATALOG_DIR = Path(__file__).resolve().parent.parent / "data" / "catalog"

# Default headers per category value, in the catalog's French spelling
HEADERS: dict[str, tuple[str, ...]] = {
    "restaurants": ("Nom", "Catégorie", "Adresse", "Horaires", "Expérience"),
    "museums":     ("Nom", "Catégorie", "Adresse", "Horaires"),
    "activities":  ("Nom", "Catégorie", "Adresse", "Horaires"),
    "nightlife":   ("Nom", "Catégorie", "Adresse", "Horaires"),
    "spas":        ("Nom", "Adresse", "Horaires"),
    "shopping":    ("Nom", "Adresse", "Rendez-vous"),
    "transport":   ("Nom", "Type", "Contact"),
}


def _cell(value: str) -> str:
    if ";" in value or "\n" in value or '"' in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def csv_text(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    lines = [";".join(_cell(h) for h in headers)]
    for row in rows:
        lines.append(";".join(_cell(v) for v in row))
    return "\n".join(lines) + "\n"


def week(hours: str) -> str:
    """Same opening hours every day of the week."""
    days = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")
    return "\n".join(f"{d} : {hours}" for d in days)


def request(**overrides) -> GenerateProgramRequest:
    base = {"duration": 3, "intensity": "moderate"}
    base.update(overrides)
    return GenerateProgramRequest(**base)


class CatalogTestCase(unittest.TestCase):
    """Gives each test its own catalog directory."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.catalog_dir = Path(self._tmp.name)
        self.store = InMemoryExclusionStore()
        self.audit = AuditLogger(logs_dir=self.catalog_dir / "logs", enabled=False)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, category: str, rows: Iterable[Sequence[str]], headers: Sequence[str] | None = None) -> Path:
        path = self.catalog_dir / config.CATALOG_FILES[category]
        path.write_text(csv_text(headers or HEADERS[category], rows), encoding="utf-8")
        return path

    def make_catalog(self, **categories: Iterable[Sequence[str]]) -> VenueCatalog:
        for category, rows in categories.items():
            self.write(category, rows)
        return VenueCatalog(catalog_dir=self.catalog_dir)

    def generator(self, catalog: VenueCatalog, seed: int = 7) -> ProgramGenerator:
        return ProgramGenerator(
            catalog=catalog, rng=random.Random(seed), exclusion_store=self.store, audit=self.audit,
        )

    def editor(self, catalog: VenueCatalog, seed: int = 11) -> ProgramEditor:
        return ProgramEditor(
            catalog=catalog, rng=random.Random(seed), exclusion_store=self.store, audit=self.audit,
        )


def sample_catalog() -> VenueCatalog:
    """The Paris catalog shipped in data/catalog."""
    return VenueCatalog(catalog_dir=SAMPLE_CATALOG_DIR)
