"""
modules/validation/ingestion_validator.py
-----------------------------------------
Data-quality guards for catalog venues and generated/edited programs.

  Venue (after normalisation, before caching):
    ✓ Non-empty name
    ✓ id is "{category}-{slug}" with a non-empty slug
    ✓ tagged categories (restaurants, museums, activities, nightlife)
      carry a sub-category

  Program structure (after generation):
    ✓ len(days) == duration, day numbers exactly 1..duration
    ✓ every option points at its own slot (option_group_id == slot.id)
    ✓ at most 4 options per slot, at most 2 outside shopping
    ✓ at most one selected option outside shopping

  Program selection (before validation by the concierge):
    ✓ every non-rest slot has exactly one selected option,
      or 1 to 4 for shopping

Usage:
    from modules.validation import validate_venue, filter_valid

    clean = filter_valid(venues, validate_venue)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from schemas.itinerary import Program
from schemas.venue import VenueCategory

logger = logging.getLogger(__name__)

T = TypeVar("T")

TAGGED_CATEGORIES = frozenset({
    VenueCategory.RESTAURANTS, VenueCategory.MUSEUMS,
    VenueCategory.ACTIVITIES, VenueCategory.NIGHTLIFE,
})


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The validated object (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: Any = field(default=None, repr=False)

    def __bool__(self) -> bool:
        return self.valid


def _result(errors: list[str], record: Any) -> ValidationResult:
    return ValidationResult(valid=not errors, errors=errors, record=record)


# ── Venue validation ───────────────────────────────────────────────────────────

def validate_venue(venue) -> ValidationResult:
    errors: list[str] = []

    if not venue.name or not venue.name.strip():
        errors.append("name must not be empty")

    prefix = f"{venue.category.value}-"
    if not venue.id.startswith(prefix) or len(venue.id) == len(prefix):
        errors.append(f"id={venue.id!r} must be '{prefix}<slug>'")

    if venue.category in TAGGED_CATEGORIES and not venue.sub_category:
        errors.append(f"{venue.category.value} venue {venue.name!r} has no sub-category")

    return _result(errors, venue)


# ── Program validation ─────────────────────────────────────────────────────────

def validate_program_structure(program: Program) -> ValidationResult:
    errors: list[str] = []

    if len(program.days) != program.duration:
        errors.append(f"{len(program.days)} days for a duration of {program.duration}")
    numbers = [d.day_number for d in program.days]
    if numbers != list(range(1, len(program.days) + 1)):
        errors.append(f"day numbers {numbers} are not contiguous from 1")

    for day, slot in program.iter_slots():
        where = f"day {day.day_number} {slot.time_slot.value}"
        limit = 4 if slot.category is VenueCategory.SHOPPING else 2
        if len(slot.options) > limit:
            errors.append(f"{where}: {len(slot.options)} options (max {limit})")
        stray = [o.id for o in slot.options if o.option_group_id != slot.id]
        if stray:
            errors.append(f"{where}: options {stray} belong to another group")
        if slot.category is not VenueCategory.SHOPPING and len(slot.selected_options) > 1:
            errors.append(f"{where}: {len(slot.selected_options)} options selected")

    return _result(errors, program)


def validate_selection(program: Program) -> ValidationResult:
    """Selection completeness required to move a program to 'validated'."""
    errors: list[str] = []

    for day, slot in program.iter_slots():
        if slot.is_rest:
            continue
        where = f"day {day.day_number} {slot.time_slot.value} ({slot.id})"
        selected = len(slot.selected_options)
        if not slot.options:
            errors.append(f"{where}: no venue proposed")
        elif slot.category is VenueCategory.SHOPPING:
            if not 1 <= selected <= 4:
                errors.append(f"{where}: {selected} boutiques selected (expected 1 to 4)")
        elif selected != 1:
            errors.append(f"{where}: {selected} options selected (expected exactly 1)")

    return _result(errors, program)


# ── Batch filter ───────────────────────────────────────────────────────────────

def filter_valid(
    records: list[T],
    validator: Callable[[T], ValidationResult],
    label: str = "record",
) -> list[T]:
    """Keep records that pass ``validator``; log the ones that do not."""
    kept: list[T] = []
    for record in records:
        result = validator(record)
        if result.valid:
            kept.append(record)
        else:
            logger.warning("Dropping invalid %s: %s", label, "; ".join(result.errors))
    return kept
