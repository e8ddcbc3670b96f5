"""
modules/planning/option_builder.py
----------------------------------
Venue → ActivityOption / ActivitySlot construction shared by the generator
and the editor.
"""

from __future__ import annotations

import uuid
from typing import Optional

from modules.catalog.queries import is_hermes
from schemas.itinerary import (
    CATEGORY_TO_TYPE,
    ActivityOption,
    ActivitySlot,
    ActivityType,
    TimeSlot,
)
from schemas.venue import Venue, VenueCategory

SHOPPING_MAX_OPTIONS = 4
DEFAULT_MAX_OPTIONS = 2

EIFFEL_PREFIX = "Vue Tour Eiffel."
HERMES_NOTE = (
    "Attention, l'obtention des RDV chez Hermes fonctionne sur un systeme "
    "de loterie et n'est pas garantie."
)

_DEFAULT_DESCRIPTIONS: dict[VenueCategory, str] = {
    VenueCategory.RESTAURANTS: "Une adresse raffinee pour une experience culinaire memorable",
    VenueCategory.MUSEUMS:     "Un lieu culturel incontournable a decouvrir",
    VenueCategory.ACTIVITIES:  "Une experience unique a vivre",
    VenueCategory.SPAS:        "Un moment de detente et de bien-etre",
    VenueCategory.SHOPPING:    "Une boutique de prestige pour vos achats",
    VenueCategory.NIGHTLIFE:   "Une soiree parisienne inoubliable",
    VenueCategory.TRANSPORT:   "Un service de transport avec chauffeur",
}


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def option_id(group_id: str, n: int) -> str:
    return f"{group_id}-opt-{n}"


def max_options_for(category: VenueCategory) -> int:
    return SHOPPING_MAX_OPTIONS if category is VenueCategory.SHOPPING else DEFAULT_MAX_OPTIONS


def type_for(category: VenueCategory) -> ActivityType:
    return CATEGORY_TO_TYPE.get(category, ActivityType.EXPERIENCE)


def describe(venue: Venue) -> str:
    """The venue's own description, else style/cuisine/experience, else a category default."""
    if venue.description:
        return venue.description
    parts = [p for p in (
        venue.style,
        f"Cuisine: {venue.type}" if venue.type and venue.category is VenueCategory.RESTAURANTS else None,
        venue.experience,
    ) if p]
    if parts:
        return ". ".join(parts)
    return _DEFAULT_DESCRIPTIONS.get(venue.category, "Une experience exceptionnelle")


def build_option(venue: Venue, group_id: str, n: int, selected: bool = False) -> ActivityOption:
    option = ActivityOption(id=option_id(group_id, n), option_group_id=group_id, category=venue.category)
    apply_venue(option, venue)
    option.is_selected = selected
    return option


def apply_venue(option: ActivityOption, venue: Venue) -> None:
    """Overwrite the option's venue snapshot in place (id, group and selection are kept)."""
    description = describe(venue)
    if venue.is_eiffel_view and "tour eiffel" not in description.lower():
        description = f"{EIFFEL_PREFIX} {description}".strip()

    option.category = venue.category
    option.venue_id = venue.id
    option.venue_name = venue.name
    option.venue_address = venue.address
    option.venue_phone = venue.phone
    option.venue_hours = venue.hours
    option.venue_style = venue.style
    option.venue_type = venue.type
    option.venue_description = description
    option.sub_category = venue.sub_category
    option.is_eiffel_view = venue.is_eiffel_view
    option.reservation_required = venue.category is VenueCategory.SHOPPING and venue.reservation_required
    option.reservation_note = HERMES_NOTE if venue.category is VenueCategory.SHOPPING and is_hermes(venue) else None


def build_options(venues: list[Venue], group_id: str) -> list[ActivityOption]:
    """Options for one group; the first one is selected."""
    return [build_option(v, group_id, i + 1, selected=(i == 0)) for i, v in enumerate(venues)]


def build_slot(
    time_slot: TimeSlot,
    venues: list[Venue],
    fallback_category: VenueCategory,
    time: Optional[str] = None,
) -> ActivitySlot:
    """
    Slot holding ``venues`` as options.  With no venues the slot still
    exists (zero options) and is flagged ``needs_attention``.
    """
    group_id = new_id()
    category = venues[0].category if venues else fallback_category
    return ActivitySlot(
        id=group_id,
        time_slot=time_slot,
        time=time,
        type=type_for(category),
        category=category,
        options=build_options(venues, group_id),
    )
