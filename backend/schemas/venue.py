"""
schemas/venue.py
----------------
Venue records produced by the catalog loader.

A Venue is read-only once loaded: the catalog cache hands the same objects
to every generation and edit, so nothing downstream may mutate them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class VenueCategory(str, Enum):
    """Fixed set of catalog categories (one source file each)."""

    RESTAURANTS = "restaurants"
    MUSEUMS     = "museums"
    ACTIVITIES  = "activities"
    NIGHTLIFE   = "nightlife"
    SPAS        = "spas"
    SHOPPING    = "shopping"
    TRANSPORT   = "transport"


# ── Sub-category tags ─────────────────────────────────────────────────────────
# Values are the tags clients pick in the questionnaire.

RESTAURANT_TAGS: frozenset[str] = frozenset({
    "brasserie", "cuisine_monde", "trendy", "etoile", "confidentiel",
})
MUSEUM_TAGS: frozenset[str] = frozenset({
    "art_contemporain_classique", "patrimoine_monument", "art_moderne", "incontournable",
})
ACTIVITY_TAGS: frozenset[str] = frozenset({
    "enfant_famille", "culture_visite", "activite_creative",
    "tour_voiture", "croisiere", "helicoptere",
})
NIGHTLIFE_TAGS: frozenset[str] = frozenset({
    "palace_lounge_rooftops", "speakeasy_bar_vins", "clubs_festifs", "cabarets",
})

# "no interest" sentinels, never real tags
NONE_TAGS: frozenset[str] = frozenset({"aucun", "none"})

# Activities allowed at most once per trip
ONE_SHOT_ACTIVITIES: frozenset[str] = frozenset({"tour_voiture", "croisiere", "helicoptere"})


@dataclass(frozen=True)
class DayHours:
    """One opening window, times as "HH:MM"."""
    open: str
    close: str


@dataclass(frozen=True)
class Venue:
    """
    A normalised point of interest.

    ``id`` is ``"{category}-{slug}"`` and is stable across reloads as long
    as the source name does not change.  ``opening_hours`` maps French day
    names to either a tuple of DayHours or one of the markers in
    ``modules.catalog.availability`` (closed / on request / show).
    """
    id: str
    name: str
    category: VenueCategory
    sub_category: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    hours: Optional[str] = None
    type: Optional[str] = None
    style: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None
    price_range: Optional[str] = None
    is_eiffel_view: bool = False
    reservation_required: bool = False
    opening_hours: dict = field(default_factory=dict, compare=False, hash=False, repr=False)

    @property
    def name_key(self) -> str:
        """Case-insensitive key used for uniqueness and exclusion checks."""
        return self.name.strip().lower()
