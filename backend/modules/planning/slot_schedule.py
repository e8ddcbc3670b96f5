"""
modules/planning/slot_schedule.py
---------------------------------
Structural skeleton of each day: which slots exist and at what time.

Activity slots per day come from a fixed table, never a formula, so the
intensity can change without touching the lunch/dinner guarantee:

    relaxed   → 1  [afternoon]
    moderate  → 2  [morning, afternoon]
    intense   → 3  [morning, afternoon, afternoon]

Lunch and dinner exist every day.  The evening slot is a bonus on top of
the activity count and only exists when nightlife is wanted that day.

Arrival/departure trimming only applies when the client actually gave the
time (``*_known``); otherwise every day is a full day.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from math import ceil
from typing import Optional

from schemas.itinerary import TimeSlot

INTENSITY_ACTIVITIES: dict[str, int] = {
    "relaxed":  1,
    "moderate": 2,
    "intense":  3,
}

CORE_LAYOUTS: dict[str, tuple[TimeSlot, ...]] = {
    "relaxed":  (TimeSlot.AFTERNOON,),
    "moderate": (TimeSlot.MORNING, TimeSlot.AFTERNOON),
    "intense":  (TimeSlot.MORNING, TimeSlot.AFTERNOON, TimeSlot.AFTERNOON),
}

ARRIVAL_BUFFER_MINUTES = 4 * 60
TIME_VARIATIONS = (0, 15, 30)
CHRONOLOGY_GAP_MINUTES = 30
LAST_MINUTE = 23 * 60 + 59

# (hour, minute, max extra minutes)
_SLOT_BASES: dict[str, tuple[int, int, int]] = {
    "morning":          (10, 0, 60),
    "lunch":            (12, 30, 30),
    "afternoon":        (14, 30, 60),
    "second_afternoon": (16, 30, 30),
    "dinner":           (19, 30, 30),
    "cabaret_dinner":   (18, 0, 30),
    "evening":          (22, 0, 60),
}


@dataclass(frozen=True)
class PlannedSlot:
    time_slot: TimeSlot
    ordinal: int = 0        # 1 for the second afternoon of an intense day


def format_minutes(total: int) -> str:
    total = max(0, min(total, LAST_MINUTE))
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_hhmm(value: str) -> int:
    hours, _, minutes = value.partition(":")
    return int(hours or 0) * 60 + int(minutes or 0)


def activities_per_day(intensity: str) -> int:
    return INTENSITY_ACTIVITIES.get(intensity, INTENSITY_ACTIVITIES["moderate"])


def core_layout(intensity: str) -> tuple[TimeSlot, ...]:
    return CORE_LAYOUTS.get(intensity, CORE_LAYOUTS["moderate"])


def cabaret_day(duration: int) -> int:
    if duration <= 2:
        return 1
    if duration == 3:
        return 2
    return ceil(duration / 2)


def spa_day(duration: int) -> int:
    """Middle of the trip, never the first day."""
    return max(2, ceil(duration / 2))


def one_shot_start_day(duration: int) -> int:
    return ceil(duration / 2)


def max_shopping_slots(duration: int) -> int:
    return max(1, duration // 3)


def first_available_minutes(arrival_time: str) -> int:
    return parse_hhmm(arrival_time) + ARRIVAL_BUFFER_MINUTES


def plan_day(
    day_number: int,
    duration: int,
    intensity: str,
    wants_evening: bool,
    arrival_time: Optional[str] = None,
    departure_time: Optional[str] = None,
) -> list[PlannedSlot]:
    """
    Slots of one day in sequence order.

    ``arrival_time`` / ``departure_time`` are only passed for the first /
    last day when the client actually knows them.
    """
    core = core_layout(intensity)
    keep_morning = TimeSlot.MORNING in core
    keep_lunch = keep_dinner = True
    afternoons = sum(1 for s in core if s is TimeSlot.AFTERNOON)

    if arrival_time is not None:
        start_hour = first_available_minutes(arrival_time) // 60
        keep_morning = keep_morning and start_hour < 12
        keep_lunch = start_hour < 14
        if start_hour >= 18:
            afternoons = 0
        keep_dinner = start_hour < 21

    if departure_time is not None:
        dep_hour = parse_hhmm(departure_time) // 60
        keep_morning = keep_morning and dep_hour > 12
        keep_lunch = keep_lunch and dep_hour > 14
        afternoons = min(afternoons, 1) if dep_hour > 17 else 0
        keep_dinner = keep_dinner and dep_hour > 21

    is_last_of_many = duration > 1 and day_number == duration

    plan: list[PlannedSlot] = []
    if keep_morning:
        plan.append(PlannedSlot(TimeSlot.MORNING))
    if keep_lunch:
        plan.append(PlannedSlot(TimeSlot.LUNCH))
    plan.extend(PlannedSlot(TimeSlot.AFTERNOON, i) for i in range(afternoons))
    if keep_dinner:
        plan.append(PlannedSlot(TimeSlot.DINNER))
    if wants_evening and not is_last_of_many:
        plan.append(PlannedSlot(TimeSlot.EVENING))
    return plan


def varied_time(base: str, rng: random.Random) -> str:
    hour, minute, cap = _SLOT_BASES[base]
    start = hour * 60 + minute
    return format_minutes(min(start + rng.choice(TIME_VARIATIONS), start + cap))


def time_for_slot(planned: PlannedSlot, rng: random.Random, is_cabaret_day: bool = False) -> str:
    if planned.time_slot is TimeSlot.AFTERNOON:
        return varied_time("second_afternoon" if planned.ordinal else "afternoon", rng)
    if planned.time_slot is TimeSlot.DINNER:
        return varied_time("cabaret_dinner" if is_cabaret_day else "dinner", rng)
    return varied_time(planned.time_slot.value, rng)


def fit_time(time: str, previous: Optional[str] = None, earliest: Optional[int] = None) -> Optional[str]:
    """
    ``time`` moved to ``earliest`` minutes when before it, then to 30 min
    after ``previous`` when not after it.  None when that leaves the day.
    """
    minutes = parse_hhmm(time)
    if earliest is not None:
        minutes = max(minutes, earliest)
    if previous is not None and minutes <= parse_hhmm(previous):
        minutes = parse_hhmm(previous) + CHRONOLOGY_GAP_MINUTES
    if minutes > LAST_MINUTE:
        return None
    return format_minutes(minutes)


def enforce_chronology(times: list[str]) -> list[Optional[str]]:
    """Strictly increasing times; entries that no longer fit before midnight become None."""
    fixed: list[Optional[str]] = []
    previous: Optional[str] = None
    for t in times:
        t = fit_time(t, previous)
        if t is not None:
            previous = t
        fixed.append(t)
    return fixed
