from __future__ import annotations

import unittest

from modules.planning import program_stats
from modules.validation import (
    filter_valid,
    validate_program_structure,
    validate_selection,
    validate_venue,
)
from schemas.itinerary import (
    ActivityOption,
    ActivitySlot,
    ActivityType,
    Program,
    ProgramDay,
    TimeSlot,
)
from schemas.venue import Venue, VenueCategory


def _slot(slot_id, time_slot, category, n_options=2, selected=(0,), kind=None, is_rest=False):
    options = [
        ActivityOption(
            id=f"{slot_id}-opt-{i + 1}", option_group_id=slot_id, category=category,
            venue_name=f"{slot_id} venue {i + 1}", is_selected=i in selected,
        )
        for i in range(n_options)
    ]
    return ActivitySlot(
        id=slot_id, time_slot=time_slot, type=kind or ActivityType.EXPERIENCE,
        category=category, options=options, is_rest=is_rest,
    )


def _program(*days):
    return Program(
        id="prog", user_id="user_001", city="paris", duration=len(days), profile="couple",
        pace="balanced", intensity="moderate", guests=2,
        days=[ProgramDay(id=f"d{i}", day_number=i, activities=list(slots)) for i, slots in enumerate(days, 1)],
    )


class TestVenueValidation(unittest.TestCase):
    def test_valid_venue(self):
        venue = Venue(id="restaurants-kei", name="Kei", category=VenueCategory.RESTAURANTS, sub_category="etoile")
        self.assertTrue(validate_venue(venue))

    def test_tagged_category_requires_sub_category(self):
        venue = Venue(id="museums-louvre", name="Louvre", category=VenueCategory.MUSEUMS)
        result = validate_venue(venue)
        self.assertFalse(result.valid)
        self.assertIn("sub-category", result.errors[0])
        self.assertTrue(validate_venue(Venue(id="spas-ritz", name="Ritz", category=VenueCategory.SPAS)))

    def test_id_must_carry_category_prefix(self):
        venue = Venue(id="spa-ritz", name="Ritz", category=VenueCategory.SPAS)
        self.assertFalse(validate_venue(venue))
        venue = Venue(id="spas-", name="Ritz", category=VenueCategory.SPAS)
        self.assertFalse(validate_venue(venue))

    def test_filter_valid_drops_and_logs(self):
        good = Venue(id="spas-ritz", name="Ritz", category=VenueCategory.SPAS)
        bad = Venue(id="spas-x", name="  ", category=VenueCategory.SPAS)
        with self.assertLogs("modules.validation.ingestion_validator", level="WARNING") as logs:
            kept = filter_valid([good, bad], validate_venue, label="venue")
        self.assertEqual(kept, [good])
        self.assertIn("Dropping invalid venue", logs.output[0])


class TestProgramValidation(unittest.TestCase):
    def test_well_formed_program(self):
        program = _program(
            [_slot("a", TimeSlot.LUNCH, VenueCategory.RESTAURANTS),
             _slot("b", TimeSlot.AFTERNOON, VenueCategory.SHOPPING, n_options=4, selected=(0, 2))],
        )
        self.assertTrue(validate_program_structure(program))
        self.assertTrue(validate_selection(program))

    def test_structure_errors(self):
        program = _program(
            [_slot("a", TimeSlot.LUNCH, VenueCategory.RESTAURANTS, n_options=3, selected=(0, 1))],
        )
        program.duration = 2
        program.days[0].activities[0].options[0].option_group_id = "elsewhere"
        errors = validate_program_structure(program).errors
        self.assertEqual(len(errors), 4)

    def test_selection_rules(self):
        program = _program(
            [_slot("a", TimeSlot.LUNCH, VenueCategory.RESTAURANTS, selected=()),
             _slot("b", TimeSlot.AFTERNOON, VenueCategory.ACTIVITIES, n_options=0),
             _slot("c", TimeSlot.DINNER, VenueCategory.RESTAURANTS, n_options=0, is_rest=True)],
        )
        result = validate_selection(program)
        self.assertEqual(len(result.errors), 2)
        self.assertIn("(a)", result.errors[0])
        self.assertIn("no venue proposed", result.errors[1])


class TestProgramStats(unittest.TestCase):
    def test_counts_and_completion(self):
        program = _program(
            [_slot("a", TimeSlot.MORNING, VenueCategory.MUSEUMS, kind=ActivityType.CULTURE),
             _slot("b", TimeSlot.LUNCH, VenueCategory.RESTAURANTS, kind=ActivityType.DINING)],
            [_slot("c", TimeSlot.AFTERNOON, VenueCategory.ACTIVITIES, n_options=0),
             _slot("d", TimeSlot.DINNER, VenueCategory.RESTAURANTS, kind=ActivityType.DINING, selected=()),
             _slot("e", TimeSlot.EVENING, VenueCategory.NIGHTLIFE, is_rest=True)],
        )
        stats = program_stats(program)
        self.assertEqual(stats.total_activities, 5)
        self.assertEqual(stats.total_meals, 2)
        self.assertEqual(stats.categories_used, ["museums", "restaurants", "activities", "nightlife"])
        self.assertEqual(stats.completion_percentage, 60.0)
        self.assertEqual(stats.needs_attention, 1)
        self.assertEqual(stats.rest_slots, 1)

    def test_empty_program(self):
        stats = program_stats(_program())
        self.assertEqual(stats.total_activities, 0)
        self.assertEqual(stats.completion_percentage, 0.0)


if __name__ == "__main__":
    unittest.main()
