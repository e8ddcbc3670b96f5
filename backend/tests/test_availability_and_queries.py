from __future__ import annotations

import random
import unittest
from datetime import date

from modules.catalog.availability import (
    CLOSED,
    ON_REQUEST,
    SHOW,
    day_of_week_fr,
    filter_by_availability,
    is_open_at,
    parse_opening_hours,
    prefer_available,
)
from modules.catalog.queries import CATEGORY_QUERIES, VenueQueries, is_hermes, is_luxury_giant
from schemas.venue import DayHours, Venue, VenueCategory
from tests.helpers import CatalogTestCase, week

MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)


def _venue(name: str, hours: str | None = None) -> Venue:
    return Venue(
        id=f"museums-{name.lower()}", name=name, category=VenueCategory.MUSEUMS,
        sub_category="incontournable", hours=hours, opening_hours=parse_opening_hours(hours),
    )


class TestOpeningHours(unittest.TestCase):
    def test_parse_markers_and_ranges(self):
        parsed = parse_opening_hours(
            "lundi : Fermé\n"
            "Mardi : 09:00-12:00, 14:00–18:00\n"
            "mercredi : Sur mesure\n"
            "jeudi : selon réservation\n"
            "vendredi : spectacle 21h\n"
            "horaires variables\n"
        )
        self.assertEqual(parsed["lundi"], CLOSED)
        self.assertEqual(parsed["mardi"], (DayHours("09:00", "12:00"), DayHours("14:00", "18:00")))
        self.assertEqual(parsed["mercredi"], ON_REQUEST)
        self.assertEqual(parsed["jeudi"], ON_REQUEST)
        self.assertEqual(parsed["vendredi"], SHOW)
        self.assertNotIn("samedi", parsed)

    def test_empty_text(self):
        self.assertEqual(parse_opening_hours(None), {})
        self.assertEqual(parse_opening_hours(""), {})

    def test_is_open_at(self):
        venue = _venue("Louvre", "lundi : 09:00-18:00\nmardi : Fermé")
        self.assertTrue(is_open_at(venue, "lundi", "09:00"))
        self.assertTrue(is_open_at(venue, "lundi", "18:00"))
        self.assertFalse(is_open_at(venue, "lundi", "18:01"))
        self.assertFalse(is_open_at(venue, "mardi", "12:00"))
        self.assertTrue(is_open_at(venue, "dimanche", "03:00"))

    def test_overnight_window_wraps_midnight(self):
        bar = _venue("Hemingway", "samedi : 18:00-02:00")
        self.assertTrue(is_open_at(bar, "samedi", "23:30"))
        self.assertTrue(is_open_at(bar, "samedi", "01:45"))
        self.assertFalse(is_open_at(bar, "samedi", "12:00"))

    def test_hours_text_used_when_not_pre_parsed(self):
        venue = Venue(id="museums-x", name="X", category=VenueCategory.MUSEUMS, hours="lundi : Fermé")
        self.assertFalse(is_open_at(venue, "lundi", "10:00"))

    def test_day_of_week(self):
        self.assertEqual(day_of_week_fr(MONDAY), "lundi")
        self.assertEqual(day_of_week_fr(date(2026, 3, 8)), "dimanche")


class TestPreferAvailable(unittest.TestCase):
    def setUp(self):
        self.open_a = _venue("A", week("09:00-18:00"))
        self.open_b = _venue("B", week("09:00-18:00"))
        self.closed = _venue("C", "mardi : Fermé")

    def test_filter(self):
        self.assertEqual(
            filter_by_availability([self.open_a, self.closed], TUESDAY, "10:00"), [self.open_a]
        )

    def test_enough_open_venues_are_kept(self):
        kept = prefer_available([self.open_a, self.open_b, self.closed], TUESDAY, "10:00", minimum=2)
        self.assertEqual(kept, [self.open_a, self.open_b])

    def test_too_few_open_falls_back_to_all(self):
        venues = [self.open_a, self.closed]
        self.assertEqual(prefer_available(venues, TUESDAY, "10:00", minimum=2), venues)

    def test_no_date_means_no_filter(self):
        venues = [self.closed]
        self.assertEqual(prefer_available(venues, None, "10:00", minimum=1), venues)


class TestSelectionQueries(CatalogTestCase):
    def setUp(self):
        super().setUp()
        catalog = self.make_catalog(
            restaurants=[
                ("Le Cinq", "Étoilé", "", "", ""),
                ("Kei", "Étoilé", "", "", ""),
                ("Brasserie Lipp", "Brasserie", "", "", ""),
                ("Girafe", "Trendy", "", "", "Vue Tour Eiffel"),
            ],
            activities=[
                ("Tour en Rolls", "Tour en voiture de prestige", "", ""),
                ("Croisière privée", "Croisière", "", ""),
                ("Atelier parfum", "Activité créative", "", ""),
                ("Visite du Marais", "Culture / Visite", "", ""),
            ],
            nightlife=[
                ("Moulin Rouge", "Cabaret", "", ""),
                ("Bar Hemingway", "Speakeasy", "", ""),
                ("Raspoutine", "Club", "", ""),
            ],
            spas=[("Ritz Spa", "", ""), ("Dior Spa", "", "")],
            shopping=[
                ("Hermès Faubourg", "", "Oui"),
                ("Chanel Cambon", "", "Recommandé"),
                ("Goyard", "", "Non"),
            ],
            transport=[("Chabé", "Chauffeur", "+33 1")],
        )
        self.q = VenueQueries(catalog)

    def names(self, venues):
        return sorted(v.name for v in venues)

    def test_strict_matching_never_falls_back(self):
        self.assertEqual(self.q.restaurants([]), [])
        self.assertEqual(self.q.restaurants(["aucun"]), [])
        self.assertEqual(self.q.restaurants(["none", " "]), [])
        self.assertEqual(self.q.museums(["incontournable"]), [])

    def test_tags_select_matching_venues(self):
        self.assertEqual(self.names(self.q.restaurants(["etoile"])), ["Kei", "Le Cinq"])
        self.assertEqual(self.names(self.q.restaurants(["etoile", "aucun"])), ["Kei", "Le Cinq"])
        self.assertEqual(self.names(self.q.restaurants(["etoile", "trendy"])), ["Girafe", "Kei", "Le Cinq"])

    def test_exclusions_are_case_insensitive(self):
        self.assertEqual(self.names(self.q.restaurants(["etoile"], ["  le cinq "])), ["Kei"])
        self.assertEqual(self.names(self.q.spas(["RITZ SPA"])), ["Dior Spa"])

    def test_one_shots_are_split_from_regular_activities(self):
        tags = ["tour_voiture", "croisiere", "activite_creative"]
        self.assertEqual(self.names(self.q.one_shot_activities(tags)), ["Croisière privée", "Tour en Rolls"])
        self.assertEqual(self.names(self.q.regular_activities(tags)), ["Atelier parfum"])
        self.assertEqual(len(self.q.activities(tags)), 3)

    def test_cabarets_are_split_from_regular_nightlife(self):
        self.assertEqual(self.names(self.q.cabarets()), ["Moulin Rouge"])
        tags = ["cabarets", "speakeasy_bar_vins"]
        self.assertEqual(self.names(self.q.regular_nightlife(tags)), ["Bar Hemingway"])
        self.assertEqual(self.names(self.q.nightlife(tags)), ["Bar Hemingway", "Moulin Rouge"])

    def test_shopping_whitelist_and_giants(self):
        self.assertEqual(len(self.q.shopping()), 3)
        self.assertEqual(self.names(self.q.shopping(["goyard"])), ["Goyard"])
        self.assertEqual(self.names(self.q.luxury_giants()), ["Chanel Cambon", "Hermès Faubourg"])
        hermes = self.q.shopping(["Hermès Faubourg"])[0]
        self.assertTrue(is_luxury_giant(hermes))
        self.assertTrue(is_hermes(hermes))
        self.assertTrue(hermes.reservation_required)

    def test_eiffel_and_transport(self):
        self.assertEqual(self.names(self.q.eiffel_restaurants()), ["Girafe"])
        self.assertEqual(self.names(self.q.transports()), ["Chabé"])

    def test_category_table_dispatch(self):
        self.assertEqual(set(CATEGORY_QUERIES), set(VenueCategory))
        self.assertEqual(self.names(self.q.for_category("restaurants", ["brasserie"])), ["Brasserie Lipp"])
        self.assertEqual(len(self.q.for_category(VenueCategory.SPAS, None, ["dior spa"])), 1)

    def test_random_venues_is_seedable(self):
        first = self.q.random_venues("restaurants", 2, rng=random.Random(3))
        second = self.q.random_venues("restaurants", 2, rng=random.Random(3))
        self.assertEqual([v.id for v in first], [v.id for v in second])
        self.assertEqual(len(first), 2)


if __name__ == "__main__":
    unittest.main()
