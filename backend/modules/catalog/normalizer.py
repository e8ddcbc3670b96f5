"""
modules/catalog/normalizer.py
-----------------------------
Turns raw catalog rows (locale-specific headers) into Venue records.

Header resolution is a substring match on the folded header (lower-case,
accents stripped); the first column that matches a field wins.

Sub-category derivation is one pure keyword function per category, kept in
SUBCATEGORY_MAPPERS.  Every mapper has an explicit default tag so no venue
of a tagged category is ever left unmapped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Callable, Optional

import config
from modules.catalog.availability import parse_opening_hours
from modules.catalog.text import fold
from schemas.venue import Venue, VenueCategory

logger = logging.getLogger(__name__)


# ── Header table ──────────────────────────────────────────────────────────────
# field → predicate on the folded header

HEADER_RULES: list[tuple[str, Callable[[str], bool]]] = [
    ("name",         lambda h: "nom" in h),
    ("address",      lambda h: "adresse" in h or "lieu" in h),
    ("phone",        lambda h: "telephone" in h or h == "contact"),
    ("hours",        lambda h: "horaire" in h),
    ("type",         lambda h: h == "type" or "type de cuisine" in h),
    ("style",        lambda h: "style" in h or "ambiance" in h or "remarques" in h),
    ("description",  lambda h: "pourquoi" in h or "description" in h),
    ("experience",   lambda h: h == "experience"),
    ("price_range",  lambda h: "prix" in h or "tarif" in h),
    ("sub_category", lambda h: h.startswith("categorie")),
    ("rendez_vous",  lambda h: "rendez-vous" in h or "rendez vous" in h),
]


def resolve_headers(headers: list[str]) -> dict[str, str]:
    """Map each known field to the first source header that matches it."""
    resolved: dict[str, str] = {}
    for header in headers:
        folded = fold(header)
        for field_name, matches in HEADER_RULES:
            if field_name not in resolved and matches(folded):
                resolved[field_name] = header
                break
    return resolved


# ── Sub-category mappers ──────────────────────────────────────────────────────

def map_restaurant(raw: str) -> str:
    text = fold(raw)
    if "brasserie" in text or "institution" in text:
        return "brasserie"
    if "cuisine du monde" in text:
        return "cuisine_monde"
    if "trendy" in text or "festif" in text:
        return "trendy"
    if "etoile" in text:
        return "etoile"
    if "confidentiel" in text:
        return "confidentiel"
    return "brasserie"


def map_museum(raw: str) -> str:
    text = fold(raw)
    if "incontournable" in text:
        return "incontournable"
    if "art moderne" in text:
        return "art_moderne"
    if "patrimoine" in text or "monument" in text:
        return "patrimoine_monument"
    if "contemporain" in text or "classique" in text:
        return "art_contemporain_classique"
    return "patrimoine_monument"


def map_activity(raw: str) -> str:
    text = fold(raw)
    if "enfant" in text or "famille" in text:
        return "enfant_famille"
    if "culture" in text or "visite" in text or "excursion" in text:
        return "culture_visite"
    if "creative" in text:
        return "activite_creative"
    if "voiture" in text or "prestige" in text:
        return "tour_voiture"
    if "croisiere" in text or "seine" in text:
        return "croisiere"
    if "helicoptere" in text:
        return "helicoptere"
    return "culture_visite"


def map_nightlife(raw: str) -> str:
    text = fold(raw)
    if "cabaret" in text:
        return "cabarets"
    if "club" in text or "festif" in text:
        return "clubs_festifs"
    if "speakeasy" in text or "bar a vins" in text:
        return "speakeasy_bar_vins"
    return "palace_lounge_rooftops"


SUBCATEGORY_MAPPERS: dict[VenueCategory, Callable[[str], str]] = {
    VenueCategory.RESTAURANTS: map_restaurant,
    VenueCategory.MUSEUMS:     map_museum,
    VenueCategory.ACTIVITIES:  map_activity,
    VenueCategory.NIGHTLIFE:   map_nightlife,
}


def requires_appointment(raw: str) -> bool:
    """Shopping "rendez-vous" column: yes or recommended."""
    text = fold(raw)
    return "oui" in text or "recommand" in text


# ── Identifiers ───────────────────────────────────────────────────────────────

def slugify(name: str, max_length: int | None = None) -> str:
    limit = config.VENUE_ID_MAX_LENGTH if max_length is None else max_length
    slug = re.sub(r"[^a-z0-9]+", "-", fold(name)).strip("-")
    return slug[:limit]


def venue_id(name: str, category: VenueCategory) -> str:
    return f"{category.value}-{slugify(name)}"


# ── Row → Venue ───────────────────────────────────────────────────────────────

def _value(record: dict[str, str], headers: dict[str, str], field_name: str) -> Optional[str]:
    header = headers.get(field_name)
    if header is None:
        return None
    value = (record.get(header) or "").strip()
    return value or None


def normalize_record(
    record: dict[str, str],
    category: VenueCategory,
    headers: dict[str, str] | None = None,
) -> Optional[Venue]:
    """Build a Venue from one row; None when the row has no usable name."""
    headers = headers if headers is not None else resolve_headers(list(record))
    name = _value(record, headers, "name")
    if not name:
        return None

    raw_category = _value(record, headers, "sub_category") or ""
    mapper = SUBCATEGORY_MAPPERS.get(category)
    sub_category = mapper(raw_category) if mapper else None

    reservation_required = False
    if category is VenueCategory.SHOPPING:
        reservation_required = requires_appointment(_value(record, headers, "rendez_vous") or "")

    experience = _value(record, headers, "experience")
    hours = _value(record, headers, "hours")

    return Venue(
        id=venue_id(name, category),
        name=name,
        category=category,
        sub_category=sub_category,
        address=_value(record, headers, "address"),
        phone=_value(record, headers, "phone"),
        hours=hours,
        type=_value(record, headers, "type"),
        style=_value(record, headers, "style"),
        description=_value(record, headers, "description"),
        experience=experience,
        price_range=_value(record, headers, "price_range"),
        is_eiffel_view="tour eiffel" in fold(experience or ""),
        reservation_required=reservation_required,
        opening_hours=parse_opening_hours(hours),
    )


def normalize_records(records: list[dict[str, str]], category: VenueCategory) -> list[Venue]:
    """
    Normalise every row of one category file.

    Nameless rows are dropped.  Two rows whose names slug to the same id get
    "-2", "-3"... suffixes so ids stay unique within the category.
    """
    if not records:
        return []
    headers = resolve_headers(list(records[0]))
    if "name" not in headers:
        logger.warning("No name column in %s catalog (headers: %s)", category.value, list(records[0]))
        return []

    venues: list[Venue] = []
    seen: dict[str, int] = {}
    dropped = 0
    for record in records:
        venue = normalize_record(record, category, headers)
        if venue is None:
            dropped += 1
            continue
        count = seen.get(venue.id, 0) + 1
        seen[venue.id] = count
        if count > 1:
            venue = replace(venue, id=f"{venue.id}-{count}")
        venues.append(venue)

    if dropped:
        logger.debug("Dropped %d nameless rows from %s catalog", dropped, category.value)
    return venues