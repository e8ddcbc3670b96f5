"""
modules/catalog package: catalog loading, opening hours and selection queries.
"""
from modules.catalog.availability import (
    day_of_week_fr,
    filter_by_availability,
    is_open_at,
    parse_opening_hours,
    prefer_available,
)
from modules.catalog.queries import VenueQueries, is_hermes, is_luxury_giant
from modules.catalog.venue_catalog import VenueCatalog, get_catalog

__all__ = [
    "VenueCatalog",
    "VenueQueries",
    "get_catalog",
    "parse_opening_hours",
    "is_open_at",
    "day_of_week_fr",
    "filter_by_availability",
    "prefer_available",
    "is_luxury_giant",
    "is_hermes",
]
