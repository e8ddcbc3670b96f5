"""
modules/editing/program_editor.py
---------------------------------
Post-generation edits a concierge makes on a Program, applied in place.

Usage:
    from modules.editing import ProgramEditor

    editor = ProgramEditor(catalog=catalog, rng=random.Random(7))
    venue = editor.regenerate_option(program, option_id)
    options = editor.switch_activity_type(program, slot.id, "spas")

Slots are addressed by their id (the option group id) or by the id of any
option they hold.  Every edit bumps ``program.updated_at`` and writes an
audit event.

Regenerate and switch re-run the selection queries against the same
catalog, excluding every venue name already in the program and the
client's persisted exclusions.  Exhausted pools raise
NoAlternativesError / NoVenuesError and leave the program untouched.
"""

from __future__ import annotations

import logging
import random
import re
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Union

from modules.catalog.availability import prefer_available
from modules.catalog.queries import VenueQueries, is_one_shot
from modules.catalog.venue_catalog import VenueCatalog, get_catalog
from modules.errors import (
    InvalidInputError,
    InvalidSelectionError,
    NoAlternativesError,
    NotFoundError,
    NoVenuesError,
)
from modules.exclusions.exclusion_store import ExclusionRecord, ExclusionStore, get_exclusion_store
from modules.observability.logger import AuditLogger
from modules.planning.option_builder import (
    apply_venue,
    build_option,
    max_options_for,
    type_for,
)
from modules.validation.ingestion_validator import validate_selection
from schemas.itinerary import (
    ActivityOption,
    ActivitySlot,
    ProgramDay,
    Program,
    ProgramStatus,
)
from schemas.requests import TIME_PATTERN
from schemas.venue import ONE_SHOT_ACTIVITIES, Venue, VenueCategory

logger = logging.getLogger(__name__)

SWITCH_DEFAULT_TIME = "14:00"
SWITCH_MIN_CANDIDATES = 2

_TIME_RE = re.compile(TIME_PATTERN)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProgramEditor:
    """
    Slot-level mutations.  Collaborators mirror ProgramGenerator so both
    can share one catalog, RNG, exclusion store and audit trail.
    """

    def __init__(
        self,
        catalog: VenueCatalog | None = None,
        rng: random.Random | None = None,
        exclusion_store: ExclusionStore | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self.catalog = catalog or get_catalog()
        self.queries = VenueQueries(self.catalog)
        self.rng = rng or random.Random()
        self.exclusions = exclusion_store if exclusion_store is not None else get_exclusion_store()
        self.audit = audit or AuditLogger()

    # ── lookups ───────────────────────────────────────────────────────────

    @staticmethod
    def find_slot(program: Program, slot_or_option_id: str) -> tuple[ProgramDay, ActivitySlot]:
        for day, slot in program.iter_slots():
            if slot.id == slot_or_option_id or any(o.id == slot_or_option_id for o in slot.options):
                return day, slot
        raise NotFoundError(f"Activity {slot_or_option_id!r} not found in program {program.id}")

    @staticmethod
    def find_option(program: Program, option_id: str) -> tuple[ActivitySlot, ActivityOption]:
        for _, slot, option in program.iter_options():
            if option.id == option_id:
                return slot, option
        raise NotFoundError(f"Option {option_id!r} not found in program {program.id}")

    # ── selection ─────────────────────────────────────────────────────────

    def select_option(self, program: Program, option_id: str) -> ActivitySlot:
        """Select ``option_id`` and deselect its siblings."""
        slot, _ = self.find_option(program, option_id)
        for option in slot.options:
            option.is_selected = option.id == option_id
        self._touch(program, "option_selected", {"group_id": slot.id, "option_id": option_id})
        return slot

    def select_multiple(self, program: Program, option_ids: Iterable[str]) -> ActivitySlot:
        """
        Select exactly ``option_ids`` within one group.  More than one id is
        only allowed for shopping groups, and never more than four.
        """
        ids = list(dict.fromkeys(option_ids))
        if not ids:
            raise InvalidSelectionError("At least one option must be selected")
        if len(ids) > 4:
            raise InvalidSelectionError(f"At most 4 options can be selected, got {len(ids)}")

        slots = [self.find_option(program, oid)[0] for oid in ids]
        slot = slots[0]
        if any(s.id != slot.id for s in slots):
            raise InvalidSelectionError("Selected options belong to different activity groups")
        if len(ids) > 1 and slot.category is not VenueCategory.SHOPPING:
            raise InvalidSelectionError(
                f"Only shopping activities accept several selections ({slot.category.value} group)"
            )

        chosen = set(ids)
        for option in slot.options:
            option.is_selected = option.id in chosen
        self._touch(program, "options_selected", {"group_id": slot.id, "option_ids": ids})
        return slot

    # ── regenerate / switch ───────────────────────────────────────────────

    def regenerate_option(self, program: Program, option_id: str) -> Venue:
        """
        Replace one option's venue with a random unused venue of the same
        category.  Raises NoAlternativesError (option unchanged) when the
        pool is empty after exclusions.
        """
        slot, option = self.find_option(program, option_id)
        excluded = (
            program.used_venue_names()
            | {option.venue_name.strip().lower()}
            | self.exclusions.names_for(program.user_id)
        )
        one_shot_elsewhere = any(
            o.sub_category in ONE_SHOT_ACTIVITIES
            for _, _, o in program.iter_options()
            if o.id != option.id
        )

        candidates = [
            v for v in self.queries.venues_with_exclusions(option.category, excluded)
            if not (one_shot_elsewhere and is_one_shot(v))
        ]
        if not candidates:
            logger.info("No alternative %s venue for option %s", option.category.value, option_id)
            raise NoAlternativesError(
                f"No alternative venues available in {option.category.value}"
            )

        previous = option.venue_name
        venue = self.rng.choice(candidates)
        apply_venue(option, venue)
        self._touch(program, "option_regenerated", {
            "group_id": slot.id,
            "option_id": option.id,
            "previous": previous,
            "venue": venue.name,
        })
        return venue

    def switch_activity_type(
        self,
        program: Program,
        group_id: str,
        new_category: Union[VenueCategory, str],
        day_date: Union[date, str, None] = None,
        slot_time: Optional[str] = None,
    ) -> list[ActivityOption]:
        """
        Replace a slot's whole option set with 2 fresh venues (4 for shopping)
        from ``new_category``.

        Opening hours are applied when a date is known (the slot's day by
        default, at the slot time or 14:00).  When fewer than 2 venues are
        open the exclusion-only pool is used instead.  Unlike the selection
        queries used by generation, no sub-category filter applies here.
        One-shot activities are left out when another slot already holds one,
        and the new set never carries more than one.
        """
        try:
            category = VenueCategory(new_category)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown category {new_category!r}") from exc

        day, slot = self.find_slot(program, group_id)
        on_date = _as_date(day_date if day_date is not None else day.actual_date)
        time = slot_time or slot.time or SWITCH_DEFAULT_TIME

        excluded = program.used_venue_names() | self.exclusions.names_for(program.user_id)
        one_shot_elsewhere = any(
            o.sub_category in ONE_SHOT_ACTIVITIES
            for _, s, o in program.iter_options()
            if s.id != slot.id
        )
        pool = [
            v for v in self.queries.venues_with_exclusions(category, excluded)
            if not (one_shot_elsewhere and is_one_shot(v))
        ]
        pool = prefer_available(pool, on_date, time, SWITCH_MIN_CANDIDATES)
        if not pool:
            raise NoVenuesError(f"No venues available for {category.value}")

        shuffled = list(pool)
        self.rng.shuffle(shuffled)
        chosen = _at_most_one_one_shot(shuffled, max_options_for(category))

        previous = slot.category
        slot.options = [build_option(v, slot.id, i + 1, selected=(i == 0)) for i, v in enumerate(chosen)]
        slot.category = category
        slot.type = type_for(category)
        slot.is_rest = False

        self._touch(program, "activity_switched", {
            "group_id": slot.id,
            "from": previous.value,
            "to": category.value,
            "venues": [v.name for v in chosen],
        })
        return slot.options

    # ── slot fields ───────────────────────────────────────────────────────

    def toggle_rest(self, program: Program, group_id: str) -> ActivitySlot:
        """Flip ``is_rest``; options and their selection are left as they are."""
        _, slot = self.find_slot(program, group_id)
        slot.is_rest = not slot.is_rest
        self._touch(program, "rest_toggled", {"group_id": slot.id, "is_rest": slot.is_rest})
        return slot

    def update_time(self, program: Program, group_id: str, time: str) -> ActivitySlot:
        if not time or not _TIME_RE.match(time):
            raise InvalidInputError(f"Invalid time {time!r}, expected HH:MM")
        _, slot = self.find_slot(program, group_id)
        slot.time = time
        self._touch(program, "time_updated", {"group_id": slot.id, "time": time})
        return slot

    def update_notes(self, program: Program, group_id: str, notes: Optional[str]) -> ActivitySlot:
        _, slot = self.find_slot(program, group_id)
        slot.concierge_notes = notes or None
        self._touch(program, "notes_updated", {"group_id": slot.id})
        return slot

    # ── program fields ────────────────────────────────────────────────────

    def update_program_title(self, program: Program, title: str) -> Program:
        title = (title or "").strip()
        if not title:
            raise InvalidInputError("Title must not be empty")
        program.title = title
        self._touch(program, "title_updated", {"title": title})
        return program

    def update_day_title(
        self,
        program: Program,
        day_number: int,
        theme_client: Optional[str] = None,
        theme_internal: Optional[str] = None,
    ) -> ProgramDay:
        day = next((d for d in program.days if d.day_number == day_number), None)
        if day is None:
            raise NotFoundError(f"Day {day_number} not found in program {program.id}")
        if theme_client is not None:
            day.theme_client = theme_client
        if theme_internal is not None:
            day.theme_internal = theme_internal
        self._touch(program, "day_title_updated", {"day_number": day_number})
        return day

    def validate_program(self, program: Program) -> Program:
        """Move a draft to 'validated' once every active slot has its selection."""
        result = validate_selection(program)
        if not result.valid:
            raise InvalidSelectionError("; ".join(result.errors))
        program.status = ProgramStatus.VALIDATED
        program.validated_at = _now()
        self._touch(program, "program_validated", {})
        return program

    # ── exclusions ────────────────────────────────────────────────────────

    def exclude_venue(
        self,
        user_id: str,
        venue_name: str,
        category: Union[VenueCategory, str],
        reason: Optional[str] = None,
    ) -> ExclusionRecord:
        """Persist an exclusion for every later generation, regeneration and switch."""
        if not venue_name or not venue_name.strip():
            raise InvalidInputError("venue_name must not be empty")
        try:
            category = VenueCategory(category)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown category {category!r}") from exc

        record = self.exclusions.add(user_id, venue_name.strip(), category.value, reason)
        logger.info("Excluded %r (%s) for %s", record.venue_name, category.value, user_id)
        self.audit.log(f"user-{user_id}", "venue_excluded", {
            "venue_name": record.venue_name,
            "category": category.value,
            "reason": reason,
        })
        return record

    # ── internals ─────────────────────────────────────────────────────────

    def _touch(self, program: Program, event_type: str, payload: dict) -> None:
        program.updated_at = _now()
        self.audit.log(program.id, event_type, payload)


def _at_most_one_one_shot(venues: list[Venue], count: int) -> list[Venue]:
    """First ``count`` venues of ``venues``, skipping every one-shot after the first."""
    chosen: list[Venue] = []
    has_one_shot = False
    for venue in venues:
        if len(chosen) == count:
            break
        if is_one_shot(venue):
            if has_one_shot:
                continue
            has_one_shot = True
        chosen.append(venue)
    return chosen


def _as_date(value: Union[date, str, None]) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc
