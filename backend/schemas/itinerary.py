"""
schemas/itinerary.py
--------------------
Dataclass definitions for the program (itinerary) structures returned by the
allocation engine and edited by the concierge.

  Program ─┬─ ProgramDay ─┬─ ActivitySlot ─┬─ ActivityOption
           │              │                └─ ActivityOption ...
           │              └─ ActivitySlot ...
           └─ ProgramDay ...

An ActivitySlot is also the "option group": every ActivityOption it holds
carries ``option_group_id == slot.id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from schemas.venue import VenueCategory


class TimeSlot(str, Enum):
    """Ordered slot sequence of a day."""
    MORNING   = "morning"
    LUNCH     = "lunch"
    AFTERNOON = "afternoon"
    DINNER    = "dinner"
    EVENING   = "evening"


# Fallback time when a slot carries no explicit time
DEFAULT_SLOT_TIMES: dict[TimeSlot, str] = {
    TimeSlot.MORNING:   "10:00",
    TimeSlot.LUNCH:     "12:30",
    TimeSlot.AFTERNOON: "14:30",
    TimeSlot.DINNER:    "19:30",
    TimeSlot.EVENING:   "22:00",
}


class ActivityType(str, Enum):
    DINING     = "dining"
    CULTURE    = "culture"
    WELLNESS   = "wellness"
    SHOPPING   = "shopping"
    EXPERIENCE = "experience"
    LEISURE    = "leisure"
    TRANSPORT  = "transport"
    NIGHTLIFE  = "nightlife"


CATEGORY_TO_TYPE: dict[VenueCategory, ActivityType] = {
    VenueCategory.RESTAURANTS: ActivityType.DINING,
    VenueCategory.MUSEUMS:     ActivityType.CULTURE,
    VenueCategory.ACTIVITIES:  ActivityType.EXPERIENCE,
    VenueCategory.SPAS:        ActivityType.WELLNESS,
    VenueCategory.SHOPPING:    ActivityType.SHOPPING,
    VenueCategory.NIGHTLIFE:   ActivityType.NIGHTLIFE,
    VenueCategory.TRANSPORT:   ActivityType.TRANSPORT,
}


class VerificationStatus(str, Enum):
    PENDING    = "pending"
    VERIFIED   = "verified"
    TO_CONFIRM = "to_confirm"


class ProgramStatus(str, Enum):
    DRAFT     = "draft"
    VALIDATED = "validated"


@dataclass
class ActivityOption:
    """One candidate venue bound to a slot (a snapshot, not a live Venue)."""
    id: str
    option_group_id: str
    category: VenueCategory
    venue_id: str = ""
    venue_name: str = ""
    venue_address: Optional[str] = None
    venue_phone: Optional[str] = None
    venue_hours: Optional[str] = None
    venue_style: Optional[str] = None
    venue_type: Optional[str] = None
    venue_description: Optional[str] = None
    sub_category: Optional[str] = None
    is_eiffel_view: bool = False
    reservation_required: bool = False
    reservation_note: Optional[str] = None
    is_selected: bool = False


@dataclass
class ActivitySlot:
    """
    A time-boxed unit of a day and the option group it holds.

    ``is_rest`` marks the slot as free time.  Toggling it never touches
    ``options``, so the previous selection comes back when rest is undone.
    """
    id: str
    time_slot: TimeSlot
    type: ActivityType
    category: VenueCategory
    time: Optional[str] = None
    options: list[ActivityOption] = field(default_factory=list)
    concierge_notes: Optional[str] = None
    verification_status: VerificationStatus = VerificationStatus.PENDING
    is_rest: bool = False

    @property
    def effective_time(self) -> str:
        return self.time or DEFAULT_SLOT_TIMES[self.time_slot]

    @property
    def needs_attention(self) -> bool:
        """No venue could be allocated; the concierge has to resolve it."""
        return not self.is_rest and not self.options

    @property
    def selected_options(self) -> list[ActivityOption]:
        return [o for o in self.options if o.is_selected]


@dataclass
class ProgramDay:
    id: str
    day_number: int
    actual_date: Optional[str] = None     # ISO-8601 YYYY-MM-DD
    theme_internal: Optional[str] = None
    theme_client: Optional[str] = None
    activities: list[ActivitySlot] = field(default_factory=list)


@dataclass
class Program:
    """
    Top-level output of the allocation engine.

    Invariant: ``len(days) == duration`` and day numbers are ``1..duration``.
    """
    id: str
    user_id: str
    city: str
    duration: int
    profile: str
    pace: str
    intensity: str
    guests: int
    interests: list[str] = field(default_factory=list)
    title: Optional[str] = None
    intro_internal: Optional[str] = None
    intro_client: Optional[str] = None
    closing_internal: Optional[str] = None
    closing_client: Optional[str] = None
    status: ProgramStatus = ProgramStatus.DRAFT
    validated_at: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    days: list[ProgramDay] = field(default_factory=list)

    # ── traversal helpers ─────────────────────────────────────────────────

    def iter_slots(self) -> Iterator[tuple[ProgramDay, ActivitySlot]]:
        for day in self.days:
            for slot in day.activities:
                yield day, slot

    def iter_options(self) -> Iterator[tuple[ProgramDay, ActivitySlot, ActivityOption]]:
        for day, slot in self.iter_slots():
            for option in slot.options:
                yield day, slot, option

    def used_venue_names(self) -> set[str]:
        """Lower-cased names of every venue offered anywhere in the program."""
        return {
            option.venue_name.strip().lower()
            for _, _, option in self.iter_options()
            if option.venue_name
        }
