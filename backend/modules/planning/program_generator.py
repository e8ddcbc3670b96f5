"""
modules/planning/program_generator.py
-------------------------------------
Allocation engine: questionnaire answers → Program.

Structure (which days and slots exist) is deterministic; venue choice among
qualifying candidates is a uniform shuffle through the injected RNG.

Constraints held for the whole trip:
  - a venue name (case-insensitive) is offered at most once, in any slot
  - request exclusions and the client's persisted exclusions never appear
  - one-shot activities (car tour, cruise, helicopter) appear at most once,
    as the single one-shot option of their slot
  - opening hours are a soft preference (modules.catalog.availability)

An empty candidate pool never raises: the slot is kept with zero options
and surfaces as ``needs_attention``.

Afternoon priority, per slot:
    spa day → shopping → one-shot → regular activities → mixed pool
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

import config
from modules.catalog.availability import prefer_available
from modules.catalog.queries import VenueQueries, clean_tags, excluded_set, is_luxury_giant
from modules.catalog.venue_catalog import VenueCatalog, get_catalog
from modules.exclusions.exclusion_store import ExclusionStore, get_exclusion_store
from modules.observability.logger import AuditLogger
from modules.planning import slot_schedule as schedule
from modules.planning import themes
from modules.planning.option_builder import SHOPPING_MAX_OPTIONS, build_slot, new_id
from modules.validation.ingestion_validator import validate_program_structure
from schemas.itinerary import ActivitySlot, Program, ProgramDay, TimeSlot
from schemas.requests import GenerateProgramRequest
from schemas.venue import Venue, VenueCategory

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = 2


@dataclass
class CandidatePools:
    """Per-request venue pools, already filtered by tags and exclusions."""
    restaurants: list[Venue] = field(default_factory=list)
    museums: list[Venue] = field(default_factory=list)
    regular_activities: list[Venue] = field(default_factory=list)
    one_shots: list[Venue] = field(default_factory=list)
    spas: list[Venue] = field(default_factory=list)
    shops: list[Venue] = field(default_factory=list)
    luxury_giants: list[Venue] = field(default_factory=list)
    cabarets: list[Venue] = field(default_factory=list)
    regular_nightlife: list[Venue] = field(default_factory=list)
    transports: list[Venue] = field(default_factory=list)

    @property
    def mixed(self) -> list[Venue]:
        return self.museums + self.regular_activities + self.spas + self.shops


@dataclass
class AllocationState:
    """Trip-wide bookkeeping for one generate() call."""
    used: set[str] = field(default_factory=set)
    one_shot_placed: bool = False
    spa_placed: bool = False
    shopping_used: int = 0
    last_shopping_day: Optional[int] = None
    luxury_giant_placed: bool = False
    cabaret_placed: bool = False

    def mark(self, slot: ActivitySlot) -> None:
        self.used.update(o.venue_name.strip().lower() for o in slot.options if o.venue_name)


class ProgramGenerator:
    """
    Builds Programs from a catalog.

    Args:
        catalog:          venue source (defaults to the process catalog)
        rng:              random source; pass a seeded Random for reproducible runs
        exclusion_store:  persisted per-client exclusions
        audit:            JSONL audit trail
        min_candidates:   availability filter threshold (config default)
    """

    def __init__(
        self,
        catalog: VenueCatalog | None = None,
        rng: random.Random | None = None,
        exclusion_store: ExclusionStore | None = None,
        audit: AuditLogger | None = None,
        min_candidates: int | None = None,
    ) -> None:
        self.catalog = catalog or get_catalog()
        self.queries = VenueQueries(self.catalog)
        self.rng = rng or random.Random()
        self.exclusions = exclusion_store if exclusion_store is not None else get_exclusion_store()
        self.audit = audit or AuditLogger()
        self.min_candidates = (
            config.AVAILABILITY_MIN_CANDIDATES if min_candidates is None else min_candidates
        )

    # ── public API ────────────────────────────────────────────────────────

    def generate(self, user_id: str, request: GenerateProgramRequest) -> Program:
        excluded = excluded_set(request.excluded_venues) | self.exclusions.names_for(user_id)
        pools = self._pools(request, excluded)
        state = AllocationState()
        themer = themes.DayThemer(request.city)
        duration = request.duration

        days: list[ProgramDay] = []
        for day_number in range(1, duration + 1):
            actual_date = (
                request.start_date + timedelta(days=day_number - 1) if request.start_date else None
            )
            day = self._build_day(day_number, actual_date, request, pools, state)
            is_cabaret_day = any(
                s.time_slot is TimeSlot.EVENING and any(o.sub_category == "cabarets" for o in s.options)
                for s in day.activities
            )
            day.theme_internal, day.theme_client = themer.theme_for(
                day_number, duration, day.activities, is_cabaret_day
            )
            days.append(day)

        program = self._assemble(user_id, request, pools, days)

        result = validate_program_structure(program)
        if not result.valid:
            logger.error("Generated program %s is malformed: %s", program.id, result.errors)

        attention = sum(1 for _, s in program.iter_slots() if s.needs_attention)
        logger.info(
            "Generated program %s for %s: %d days, %d slots, %d needing attention",
            program.id, user_id, duration, sum(len(d.activities) for d in days), attention,
        )
        self.audit.log(program.id, "program_generated", {
            "user_id": user_id,
            "request": request.model_dump(mode="json"),
            "excluded_count": len(excluded),
            "needs_attention": attention,
        })
        return program

    # ── pools ─────────────────────────────────────────────────────────────

    def _pools(self, request: GenerateProgramRequest, excluded: set[str]) -> CandidatePools:
        q = self.queries
        nightlife_tags = clean_tags(request.nightlife_categories)

        shops: list[Venue] = []
        giants: list[Venue] = []
        if request.wants_shopping:
            shops = q.shopping(request.selected_shops, excluded)
            giants = (
                [v for v in shops if is_luxury_giant(v)]
                if request.selected_shops else q.luxury_giants(excluded)
            )

        return CandidatePools(
            restaurants=q.restaurants(request.restaurant_categories, excluded),
            museums=q.museums(request.museum_categories, excluded),
            regular_activities=q.regular_activities(request.activity_categories, excluded),
            one_shots=q.one_shot_activities(request.activity_categories, excluded),
            spas=q.spas(excluded) if request.wants_spa else [],
            shops=shops,
            luxury_giants=giants,
            cabarets=q.cabarets(excluded) if "cabarets" in nightlife_tags else [],
            regular_nightlife=q.regular_nightlife(nightlife_tags, excluded),
            transports=q.transports(),
        )

    # ── days ──────────────────────────────────────────────────────────────

    def _build_day(
        self,
        day_number: int,
        actual_date: Optional[date],
        request: GenerateProgramRequest,
        pools: CandidatePools,
        state: AllocationState,
    ) -> ProgramDay:
        duration = request.duration
        is_cabaret_day = (
            bool(pools.cabarets)
            and not state.cabaret_placed
            and day_number == schedule.cabaret_day(duration)
            and bool(self._fresh(pools.cabarets, state))
        )
        arrival = request.arrival_time if request.arrival_time_known and day_number == 1 else None
        departure = (
            request.departure_time if request.departure_time_known and day_number == duration else None
        )
        planned = schedule.plan_day(
            day_number,
            duration,
            request.intensity.value,
            wants_evening=is_cabaret_day or bool(pools.regular_nightlife),
            arrival_time=arrival,
            departure_time=departure,
        )
        earliest = schedule.first_available_minutes(arrival) if arrival else None

        # planned is already in sequence order, so times are fitted as we go
        slots: list[ActivitySlot] = []
        previous: Optional[str] = None
        for slot_plan in planned:
            raw = schedule.time_for_slot(slot_plan, self.rng, is_cabaret_day)
            time = schedule.fit_time(raw, previous, earliest)
            if time is None:
                logger.info(
                    "Day %d: dropped %s slot, no time left before midnight",
                    day_number, slot_plan.time_slot.value,
                )
                continue
            slot = self._fill(slot_plan, time, day_number, actual_date, request, pools, state, is_cabaret_day)
            state.mark(slot)
            slots.append(slot)
            previous = time

        return ProgramDay(
            id=new_id(),
            day_number=day_number,
            actual_date=actual_date.isoformat() if actual_date else None,
            activities=slots,
        )

    def _fill(
        self,
        slot_plan: schedule.PlannedSlot,
        time: str,
        day_number: int,
        on_date: Optional[date],
        request: GenerateProgramRequest,
        pools: CandidatePools,
        state: AllocationState,
        is_cabaret_day: bool,
    ) -> ActivitySlot:
        time_slot = slot_plan.time_slot

        if time_slot is TimeSlot.MORNING:
            chosen = self._draw(self._candidates(pools.museums, state, on_date, time), DEFAULT_OPTIONS)
            if chosen and len(chosen) < DEFAULT_OPTIONS:
                chosen += self._draw(
                    self._candidates(pools.regular_activities, state, on_date, time),
                    DEFAULT_OPTIONS - len(chosen), taken=chosen,
                )
            if not chosen:
                chosen = self._draw(
                    self._candidates(pools.regular_activities, state, on_date, time), DEFAULT_OPTIONS
                )
            fallback = VenueCategory.MUSEUMS if clean_tags(request.museum_categories) else VenueCategory.ACTIVITIES
            return build_slot(time_slot, chosen, fallback, time)

        if time_slot is TimeSlot.LUNCH:
            chosen = self._draw(self._candidates(pools.restaurants, state, on_date, time), DEFAULT_OPTIONS)
            return build_slot(time_slot, chosen, VenueCategory.RESTAURANTS, time)

        if time_slot is TimeSlot.DINNER:
            chosen = self._varied_dinner(self._candidates(pools.restaurants, state, on_date, time))
            return build_slot(time_slot, chosen, VenueCategory.RESTAURANTS, time)

        if time_slot is TimeSlot.EVENING:
            if is_cabaret_day:
                chosen = self._draw(self._candidates(pools.cabarets, state, on_date, time), DEFAULT_OPTIONS)
                state.cabaret_placed = bool(chosen)
            else:
                chosen = self._draw(
                    self._candidates(pools.regular_nightlife, state, on_date, time), DEFAULT_OPTIONS
                )
            return build_slot(time_slot, chosen, VenueCategory.NIGHTLIFE, time)

        chosen = self._afternoon(day_number, request.duration, time, on_date, pools, state)
        return build_slot(time_slot, chosen, VenueCategory.ACTIVITIES, time)

    def _afternoon(
        self,
        day_number: int,
        duration: int,
        time: str,
        on_date: Optional[date],
        pools: CandidatePools,
        state: AllocationState,
    ) -> list[Venue]:
        if pools.spas and not state.spa_placed and day_number == schedule.spa_day(duration):
            chosen = self._draw(self._candidates(pools.spas, state, on_date, time), DEFAULT_OPTIONS)
            if chosen:
                state.spa_placed = True
                return chosen

        if (pools.shops or pools.luxury_giants) and self._shopping_allowed(day_number, duration, state):
            chosen = self._shopping(time, on_date, pools, state)
            if chosen:
                state.shopping_used += 1
                state.last_shopping_day = day_number
                return chosen

        if (
            pools.one_shots
            and not state.one_shot_placed
            and day_number >= schedule.one_shot_start_day(duration)
        ):
            shot = self._draw(self._candidates(pools.one_shots, state, on_date, time), 1)
            if shot:
                state.one_shot_placed = True
                alternative = self._draw(
                    self._candidates(pools.regular_activities, state, on_date, time), 1, taken=shot
                )
                return shot + alternative

        chosen = self._draw(
            self._candidates(pools.regular_activities, state, on_date, time), DEFAULT_OPTIONS
        )
        if len(chosen) < DEFAULT_OPTIONS:
            chosen += self._draw(
                self._candidates(pools.mixed, state, on_date, time),
                DEFAULT_OPTIONS - len(chosen), taken=chosen,
            )
        return chosen

    @staticmethod
    def _shopping_allowed(day_number: int, duration: int, state: AllocationState) -> bool:
        if state.shopping_used >= schedule.max_shopping_slots(duration):
            return False
        return state.last_shopping_day is None or day_number - state.last_shopping_day >= 3

    def _shopping(
        self,
        time: str,
        on_date: Optional[date],
        pools: CandidatePools,
        state: AllocationState,
    ) -> list[Venue]:
        """Up to 4 boutiques, with a luxury giant the first time one is available."""
        giants = self._candidates(pools.luxury_giants, state, on_date, time)
        chosen: list[Venue] = []
        if not state.luxury_giant_placed:
            chosen = self._draw(giants, 1)
            state.luxury_giant_placed = bool(chosen)
        chosen += self._draw(
            self._candidates(pools.shops, state, on_date, time),
            SHOPPING_MAX_OPTIONS - len(chosen), taken=chosen,
        )
        if len(chosen) < SHOPPING_MAX_OPTIONS:
            chosen += self._draw(giants, SHOPPING_MAX_OPTIONS - len(chosen), taken=chosen)
        return chosen

    def _varied_dinner(self, candidates: list[Venue]) -> list[Venue]:
        """Two restaurants from distinct sub-categories when the pool allows it."""
        by_tag: dict[str, list[Venue]] = {}
        for venue in candidates:
            by_tag.setdefault(venue.sub_category or "", []).append(venue)
        tags = sorted(by_tag)
        self.rng.shuffle(tags)

        chosen: list[Venue] = []
        for tag in tags:
            if len(chosen) >= DEFAULT_OPTIONS:
                break
            chosen += self._draw(by_tag[tag], 1, taken=chosen)
        if len(chosen) < DEFAULT_OPTIONS:
            chosen += self._draw(candidates, DEFAULT_OPTIONS - len(chosen), taken=chosen)
        return chosen

    # ── candidate helpers ─────────────────────────────────────────────────

    @staticmethod
    def _fresh(venues: list[Venue], state: AllocationState) -> list[Venue]:
        return [v for v in venues if v.name_key not in state.used]

    def _candidates(
        self,
        venues: list[Venue],
        state: AllocationState,
        on_date: Optional[date],
        time: str,
    ) -> list[Venue]:
        return prefer_available(self._fresh(venues, state), on_date, time, self.min_candidates)

    def _draw(self, pool: list[Venue], count: int, taken: Iterable[Venue] = ()) -> list[Venue]:
        """Shuffle ``pool`` and take up to ``count`` venues with distinct names."""
        if count <= 0 or not pool:
            return []
        seen = {v.name_key for v in taken}
        shuffled = list(pool)
        self.rng.shuffle(shuffled)
        chosen: list[Venue] = []
        for venue in shuffled:
            if venue.name_key in seen:
                continue
            chosen.append(venue)
            seen.add(venue.name_key)
            if len(chosen) == count:
                break
        return chosen

    # ── program ───────────────────────────────────────────────────────────

    def _assemble(
        self,
        user_id: str,
        request: GenerateProgramRequest,
        pools: CandidatePools,
        days: list[ProgramDay],
    ) -> Program:
        now = datetime.now(timezone.utc).isoformat()
        start, end = request.start_date, request.end_date
        if start and not end:
            end = start + timedelta(days=request.duration - 1)

        slot_count = sum(len(d.activities) for d in days)
        attention = sum(1 for d in days for s in d.activities if s.needs_attention)
        transport = themes.find_transport(pools.transports, config.TRANSPORT_PROVIDER_KEYWORD)

        return Program(
            id=new_id(),
            user_id=user_id,
            city=request.city.strip().lower(),
            duration=request.duration,
            profile=request.profile.value,
            pace=request.pace.value,
            intensity=request.intensity.value,
            guests=request.guests,
            interests=list(request.interests),
            title=themes.program_title(request),
            intro_internal=themes.intro_internal(request.duration, request.guests, transport),
            intro_client=themes.intro_client(request.city, request.duration),
            closing_internal=themes.closing_internal(slot_count, attention),
            closing_client=themes.CLOSING_CLIENT,
            start_date=start.isoformat() if start else None,
            end_date=end.isoformat() if end else None,
            created_at=now,
            updated_at=now,
            days=days,
        )
