"""
modules/catalog/availability.py
-------------------------------
Opening-hours parsing and the soft availability filter.

Hours text in the catalog looks like:

    lundi : 10:00-18:00
    mardi : Fermé
    mercredi : 12:00–14:30, 19:00–23:00
    jeudi : Sur mesure
    vendredi : spectacle 19h, spectacle 21h

Hours data in the source files is unreliable, so availability is only ever
a preference: ``prefer_available`` falls back to the unfiltered list when
too few venues survive.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Iterable, Optional, Union

import config
from modules.catalog.text import fold
from schemas.venue import DayHours, Venue

logger = logging.getLogger(__name__)

FRENCH_DAYS: tuple[str, ...] = (
    "lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche",
)

# Markers stored instead of a list of windows
CLOSED     = "ferme"
ON_REQUEST = "sur_mesure"
SHOW       = "spectacle"

DaySchedule = Union[tuple[DayHours, ...], str]

_DAY_LINE = re.compile(
    r"^(lundi|mardi|mercredi|jeudi|vendredi|samedi|dimanche)\s*:\s*(.+)$",
    re.IGNORECASE,
)
_RANGE = re.compile(r"(\d{1,2}:\d{2})\s*[-–]\s*(\d{1,2}:\d{2})")


def to_minutes(hhmm: str) -> int:
    hours, _, minutes = hhmm.partition(":")
    return int(hours or 0) * 60 + int(minutes or 0)


def parse_opening_hours(text: Optional[str]) -> dict[str, DaySchedule]:
    """Parse raw hours text into ``{day: windows | marker}``; unknown lines are ignored."""
    result: dict[str, DaySchedule] = {}
    if not text:
        return result

    for line in text.splitlines():
        match = _DAY_LINE.match(line.strip())
        if not match:
            continue
        day = match.group(1).lower()
        value = fold(match.group(2))

        if value.startswith("ferme"):
            result[day] = CLOSED
        elif "sur mesure" in value or "selon" in value:
            result[day] = ON_REQUEST
        elif "spectacle" in value:
            result[day] = SHOW
        else:
            windows = tuple(
                DayHours(open=m.group(1), close=m.group(2))
                for m in _RANGE.finditer(value)
            )
            if windows:
                result[day] = windows
    return result


def is_open_at(venue: Venue, day_name: str, time: str) -> bool:
    """
    True when ``venue`` can be visited on ``day_name`` at ``time`` ("HH:MM").

    A day without any information counts as open.  Windows whose close is
    before their open run past midnight.  Bounds are inclusive.
    """
    schedule = venue.opening_hours or parse_opening_hours(venue.hours)
    day = schedule.get(day_name.lower())
    if day is None:
        return True
    if day == CLOSED:
        return False
    if day in (ON_REQUEST, SHOW):
        return True

    check = to_minutes(time)
    for window in day:
        opens, closes = to_minutes(window.open), to_minutes(window.close)
        if closes < opens:
            if check >= opens or check <= closes:
                return True
        elif opens <= check <= closes:
            return True
    return False


def day_of_week_fr(on_date: date) -> str:
    return FRENCH_DAYS[on_date.weekday()]


def filter_by_availability(venues: Iterable[Venue], on_date: date, time: str) -> list[Venue]:
    day_name = day_of_week_fr(on_date)
    return [v for v in venues if is_open_at(v, day_name, time)]


def prefer_available(
    venues: list[Venue],
    on_date: Optional[date],
    time: str,
    minimum: int | None = None,
) -> list[Venue]:
    """
    Filtered list, or the unfiltered one when fewer than ``minimum`` venues
    are open (or no date is known).
    """
    if on_date is None:
        return list(venues)
    minimum = config.AVAILABILITY_MIN_CANDIDATES if minimum is None else minimum
    open_now = filter_by_availability(venues, on_date, time)
    if len(open_now) < minimum:
        logger.debug(
            "Only %d/%d venues open on %s at %s; ignoring opening hours",
            len(open_now), len(venues), on_date, time,
        )
        return list(venues)
    return open_now
