"""
modules/catalog/queries.py
--------------------------
Category-specific accessors over a VenueCatalog.

Strict matching: "aucun"/"none" are stripped from tag sets, and an empty
remaining set yields [].  A missing interest never falls back to unrelated
venues.  Exclusions are venue names compared case-insensitively.
"""

from __future__ import annotations

import random
from typing import Callable, Iterable, Optional

from modules.catalog.venue_catalog import VenueCatalog
from schemas.venue import NONE_TAGS, ONE_SHOT_ACTIVITIES, Venue, VenueCategory

LUXURY_GIANTS: tuple[str, ...] = ("Hermès", "Hermes", "Dior", "Chanel", "Louis Vuitton")

CABARET_TAG = "cabarets"


def clean_tags(tags: Optional[Iterable[str]]) -> frozenset[str]:
    """Drop blanks and the "no interest" sentinels."""
    return frozenset(
        t.strip().lower() for t in (tags or ()) if t and t.strip() and t.strip().lower() not in NONE_TAGS
    )


def excluded_set(names: Optional[Iterable[str]]) -> set[str]:
    return {n.strip().lower() for n in (names or ()) if n}


def is_luxury_giant(venue: Venue) -> bool:
    name = venue.name.lower()
    return any(giant.lower() in name for giant in LUXURY_GIANTS)


def is_hermes(venue: Venue) -> bool:
    name = venue.name.lower()
    return "hermès" in name or "hermes" in name


def is_one_shot(venue: Venue) -> bool:
    return venue.sub_category in ONE_SHOT_ACTIVITIES


class VenueQueries:
    """Selection queries bound to one catalog."""

    def __init__(self, catalog: VenueCatalog) -> None:
        self.catalog = catalog

    def _tagged(
        self,
        category: VenueCategory,
        tags: Optional[Iterable[str]],
        excluded: Optional[Iterable[str]],
    ) -> list[Venue]:
        wanted = clean_tags(tags)
        if not wanted:
            return []
        skip = excluded_set(excluded)
        return [
            v for v in self.catalog.load(category)
            if v.sub_category in wanted and v.name_key not in skip
        ]

    # ── tag-driven categories ─────────────────────────────────────────────

    def restaurants(self, tags, excluded=None) -> list[Venue]:
        return self._tagged(VenueCategory.RESTAURANTS, tags, excluded)

    def museums(self, tags, excluded=None) -> list[Venue]:
        return self._tagged(VenueCategory.MUSEUMS, tags, excluded)

    def activities(self, tags, excluded=None) -> list[Venue]:
        return self._tagged(VenueCategory.ACTIVITIES, tags, excluded)

    def regular_activities(self, tags, excluded=None) -> list[Venue]:
        """Selected activities minus the once-per-trip sub-categories."""
        return [v for v in self.activities(tags, excluded) if not is_one_shot(v)]

    def one_shot_activities(self, tags, excluded=None) -> list[Venue]:
        return [v for v in self.activities(tags, excluded) if is_one_shot(v)]

    def nightlife(self, tags, excluded=None) -> list[Venue]:
        return self._tagged(VenueCategory.NIGHTLIFE, tags, excluded)

    def cabarets(self, excluded=None) -> list[Venue]:
        return self._tagged(VenueCategory.NIGHTLIFE, [CABARET_TAG], excluded)

    def regular_nightlife(self, tags, excluded=None) -> list[Venue]:
        return self._tagged(VenueCategory.NIGHTLIFE, clean_tags(tags) - {CABARET_TAG}, excluded)

    # ── untagged categories ───────────────────────────────────────────────

    def spas(self, excluded=None) -> list[Venue]:
        return self.venues_with_exclusions(VenueCategory.SPAS, excluded)

    def shopping(self, selected_shops=None, excluded=None) -> list[Venue]:
        """All shops, or only the whitelisted names when ``selected_shops`` is given."""
        shops = self.venues_with_exclusions(VenueCategory.SHOPPING, excluded)
        whitelist = excluded_set(selected_shops)
        if not whitelist:
            return shops
        return [v for v in shops if v.name_key in whitelist]

    def luxury_giants(self, excluded=None) -> list[Venue]:
        return [v for v in self.venues_with_exclusions(VenueCategory.SHOPPING, excluded) if is_luxury_giant(v)]

    def transports(self) -> list[Venue]:
        return list(self.catalog.load(VenueCategory.TRANSPORT))

    def eiffel_restaurants(self, excluded=None) -> list[Venue]:
        return [v for v in self.venues_with_exclusions(VenueCategory.RESTAURANTS, excluded) if v.is_eiffel_view]

    # ── generic ───────────────────────────────────────────────────────────

    def venues_with_exclusions(self, category, excluded=None) -> list[Venue]:
        skip = excluded_set(excluded)
        return [v for v in self.catalog.load(category) if v.name_key not in skip]

    def random_venues(
        self,
        category,
        count: int,
        excluded=None,
        rng: Optional[random.Random] = None,
    ) -> list[Venue]:
        return take_random(self.venues_with_exclusions(category, excluded), count, rng)

    def for_category(self, category, tags=None, excluded=None) -> list[Venue]:
        """Dispatch through CATEGORY_QUERIES."""
        return CATEGORY_QUERIES[VenueCategory(category)](self, tags, excluded)


def take_random(venues: list[Venue], count: int, rng: Optional[random.Random] = None) -> list[Venue]:
    """Uniform shuffle, take the first ``count``."""
    if not venues or count <= 0:
        return []
    pool = list(venues)
    (rng or random).shuffle(pool)
    return pool[:count]


CATEGORY_QUERIES: dict[VenueCategory, Callable[[VenueQueries, Optional[Iterable[str]], Optional[Iterable[str]]], list[Venue]]] = {
    VenueCategory.RESTAURANTS: lambda q, tags, ex: q.restaurants(tags, ex),
    VenueCategory.MUSEUMS:     lambda q, tags, ex: q.museums(tags, ex),
    VenueCategory.ACTIVITIES:  lambda q, tags, ex: q.activities(tags, ex),
    VenueCategory.NIGHTLIFE:   lambda q, tags, ex: q.nightlife(tags, ex),
    VenueCategory.SPAS:        lambda q, tags, ex: q.spas(ex),
    VenueCategory.SHOPPING:    lambda q, tags, ex: q.shopping(tags, ex),
    VenueCategory.TRANSPORT:   lambda q, tags, ex: q.venues_with_exclusions(VenueCategory.TRANSPORT, ex),
}
