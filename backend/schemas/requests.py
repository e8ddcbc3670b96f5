"""
schemas/requests.py
-------------------
Pydantic request models: the questionnaire payload that drives generation
and the small bodies of the concierge edit endpoints.

Malformed categories/tags are rejected here, before any allocation work.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

import config
from schemas.venue import (
    ACTIVITY_TAGS,
    MUSEUM_TAGS,
    NIGHTLIFE_TAGS,
    NONE_TAGS,
    RESTAURANT_TAGS,
    VenueCategory,
)

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Profile(str, Enum):
    FAMILLE  = "famille"
    COUPLE   = "couple"
    VIP      = "vip"
    UHNW     = "uhnw"
    BUSINESS = "business"
    SOLO     = "solo"


class Pace(str, Enum):
    RELAXED  = "relaxed"
    BALANCED = "balanced"
    INTENSE  = "intense"


class Intensity(str, Enum):
    RELAXED  = "relaxed"
    MODERATE = "moderate"
    INTENSE  = "intense"


def _check_tags(values: list[str], allowed: frozenset[str], label: str) -> list[str]:
    cleaned = [v.strip().lower() for v in values if v and v.strip()]
    unknown = [v for v in cleaned if v not in allowed and v not in NONE_TAGS]
    if unknown:
        raise ValueError(f"unknown {label} categories: {', '.join(sorted(set(unknown)))}")
    return cleaned


class GenerateProgramRequest(BaseModel):
    """Questionnaire answers for one trip."""

    city: str = Field(config.DEFAULT_CITY, min_length=1)
    duration: int = Field(..., ge=1, le=config.MAX_TRIP_DAYS)
    profile: Profile = Profile.COUPLE
    pace: Pace = Pace.BALANCED
    intensity: Intensity = Intensity.MODERATE
    guests: int = Field(2, ge=1)
    interests: list[str] = Field(default_factory=list)
    start_date: Optional[date] = Field(None, description="ISO-8601 date YYYY-MM-DD")
    end_date:   Optional[date] = Field(None, description="ISO-8601 date YYYY-MM-DD")

    arrival_time_known: bool = False
    arrival_time: str = Field("14:00", pattern=TIME_PATTERN)
    departure_time_known: bool = False
    departure_time: str = Field("12:00", pattern=TIME_PATTERN)

    restaurant_categories: list[str] = Field(default_factory=list)
    museum_categories:     list[str] = Field(default_factory=list)
    activity_categories:   list[str] = Field(default_factory=list)
    nightlife_categories:  list[str] = Field(default_factory=list)
    wants_spa: bool = False
    wants_shopping: bool = False
    selected_shops: list[str] = Field(default_factory=list)
    excluded_venues: list[str] = Field(default_factory=list)

    @field_validator("restaurant_categories")
    @classmethod
    def _restaurants(cls, v: list[str]) -> list[str]:
        return _check_tags(v, RESTAURANT_TAGS, "restaurant")

    @field_validator("museum_categories")
    @classmethod
    def _museums(cls, v: list[str]) -> list[str]:
        return _check_tags(v, MUSEUM_TAGS, "museum")

    @field_validator("activity_categories")
    @classmethod
    def _activities(cls, v: list[str]) -> list[str]:
        return _check_tags(v, ACTIVITY_TAGS, "activity")

    @field_validator("nightlife_categories")
    @classmethod
    def _nightlife(cls, v: list[str]) -> list[str]:
        return _check_tags(v, NIGHTLIFE_TAGS, "nightlife")

    @model_validator(mode="after")
    def _check_dates(self) -> "GenerateProgramRequest":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) must be >= start_date ({self.start_date})"
            )
        return self


# ── Edit bodies ────────────────────────────────────────────────────────────────

class SelectOptionsRequest(BaseModel):
    option_ids: list[str] = Field(..., min_length=1, max_length=4)


class SwitchTypeRequest(BaseModel):
    category: VenueCategory
    day_date: Optional[date] = None
    slot_time: Optional[str] = Field(None, pattern=TIME_PATTERN)


class UpdateTimeRequest(BaseModel):
    time: str = Field(..., pattern=TIME_PATTERN)


class UpdateNotesRequest(BaseModel):
    notes: Optional[str] = None


class UpdateTitleRequest(BaseModel):
    title: str = Field(..., min_length=1)


class UpdateDayTitleRequest(BaseModel):
    theme_client: Optional[str] = None
    theme_internal: Optional[str] = None


class ExcludeVenueRequest(BaseModel):
    venue_name: str = Field(..., min_length=1)
    category: VenueCategory
    reason: Optional[str] = None
