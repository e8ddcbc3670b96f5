"""
modules/planning/stats.py
-------------------------
Summary counters over a Program, shown on the concierge dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from schemas.itinerary import ActivityType, Program


@dataclass
class ProgramStats:
    total_activities: int = 0
    total_meals: int = 0
    categories_used: list[str] = field(default_factory=list)
    completion_percentage: float = 0.0
    needs_attention: int = 0
    rest_slots: int = 0


def program_stats(program: Program) -> ProgramStats:
    """
    Count slots, meals and categories; completion is the share of slots
    with at least one selected option.
    """
    stats = ProgramStats()
    selected = 0
    for _, slot in program.iter_slots():
        stats.total_activities += 1
        if slot.category.value not in stats.categories_used:
            stats.categories_used.append(slot.category.value)
        if slot.type is ActivityType.DINING:
            stats.total_meals += 1
        if slot.selected_options:
            selected += 1
        if slot.needs_attention:
            stats.needs_attention += 1
        if slot.is_rest:
            stats.rest_slots += 1

    if stats.total_activities:
        stats.completion_percentage = round(selected / stats.total_activities * 100, 1)
    return stats
