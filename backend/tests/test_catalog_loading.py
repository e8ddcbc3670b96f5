from __future__ import annotations

import unittest
from pathlib import Path

from modules.catalog import VenueCatalog
from modules.catalog.availability import CLOSED, parse_opening_hours
from modules.catalog.csv_reader import parse_rows, read_catalog_file
from modules.catalog.normalizer import (
    map_activity,
    map_museum,
    map_nightlife,
    map_restaurant,
    normalize_records,
    resolve_headers,
    slugify,
    venue_id,
)
from modules.catalog.text import fold
from schemas.venue import VenueCategory
from tests.helpers import CatalogTestCase, sample_catalog


class TestParseRows(unittest.TestCase):
    def test_quoted_cell_keeps_delimiter_and_newlines(self):
        content = 'Nom;Horaires\n"Le Cinq";"lundi : 12:00-14:00\nmardi : Fermé"\nArpège;"a;b"\n'
        rows = parse_rows(content)
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["Horaires"], "lundi : 12:00-14:00\nmardi : Fermé")
        self.assertEqual(rows[1]["Horaires"], "a;b")

    def test_carriage_returns_bom_and_blank_lines_are_dropped(self):
        content = "\ufeffNom;Adresse\r\n\r\nLe Cinq;Paris\r\n;\r\n"
        rows = parse_rows(content)
        self.assertEqual(rows, [{"Nom": "Le Cinq", "Adresse": "Paris"}])

    def test_short_rows_are_padded_and_values_stripped(self):
        rows = parse_rows("Nom;Adresse;Téléphone\n  Kei  ;1er\n")
        self.assertEqual(rows, [{"Nom": "Kei", "Adresse": "1er", "Téléphone": ""}])

    def test_empty_content(self):
        self.assertEqual(parse_rows(""), [])

    def test_custom_delimiter(self):
        rows = parse_rows("Nom,Adresse\nKei,Paris\n", delimiter=",")
        self.assertEqual(rows[0]["Adresse"], "Paris")

    def test_missing_file_returns_none(self):
        self.assertIsNone(read_catalog_file(Path("/nonexistent/catalog/restaurants.csv")))


class TestNormalizer(unittest.TestCase):
    def test_header_variants_resolve(self):
        headers = resolve_headers([
            "Nom du lieu", "Catégorie", "Lieu de rendez-vous", "Contact", "Horaires d'ouverture",
            "Type de cuisine", "Style / Ambiance", "Pourquoi y aller", "Expérience", "Tarif",
        ])
        self.assertEqual(headers["name"], "Nom du lieu")
        self.assertEqual(headers["sub_category"], "Catégorie")
        self.assertEqual(headers["address"], "Lieu de rendez-vous")
        self.assertEqual(headers["phone"], "Contact")
        self.assertEqual(headers["hours"], "Horaires d'ouverture")
        self.assertEqual(headers["type"], "Type de cuisine")
        self.assertEqual(headers["style"], "Style / Ambiance")
        self.assertEqual(headers["description"], "Pourquoi y aller")
        self.assertEqual(headers["experience"], "Expérience")
        self.assertEqual(headers["price_range"], "Tarif")
        self.assertNotIn("rendez_vous", headers)

    def test_first_matching_column_wins(self):
        headers = resolve_headers(["Nom", "Nom commercial", "Remarques"])
        self.assertEqual(headers["name"], "Nom")
        self.assertEqual(headers["style"], "Remarques")

    def test_address_header_anywhere_in_the_label(self):
        self.assertEqual(resolve_headers(["Nom", "Votre adresse"])["address"], "Votre adresse")
        self.assertEqual(resolve_headers(["Nom", "Point de rencontre (lieu)"])["address"], "Point de rencontre (lieu)")
        self.assertNotIn("address", resolve_headers(["Nom", "Rendez-vous"]))

    def test_fold_is_shared_by_headers_and_hours(self):
        self.assertEqual(fold("  Catégorie ÉTOILÉE "), "categorie etoilee")
        self.assertEqual(fold(None), "")
        self.assertEqual(parse_opening_hours("mardi : FERMÉ"), {"mardi": CLOSED})

    def test_subcategory_keywords(self):
        self.assertEqual(map_restaurant("Étoilé Michelin"), "etoile")
        self.assertEqual(map_restaurant("Brasserie / Institution"), "brasserie")
        self.assertEqual(map_restaurant("Cuisine du monde"), "cuisine_monde")
        self.assertEqual(map_restaurant(""), "brasserie")
        self.assertEqual(map_museum("Incontournable - Monument"), "incontournable")
        self.assertEqual(map_museum("Art contemporain / classique"), "art_contemporain_classique")
        self.assertEqual(map_museum("???"), "patrimoine_monument")
        self.assertEqual(map_activity("Tour en voiture de prestige"), "tour_voiture")
        self.assertEqual(map_activity("Croisière"), "croisiere")
        self.assertEqual(map_activity("Hélicoptère"), "helicoptere")
        self.assertEqual(map_activity("Enfant / Famille"), "enfant_famille")
        self.assertEqual(map_nightlife("Cabaret"), "cabarets")
        self.assertEqual(map_nightlife("Speakeasy / Bar à vins"), "speakeasy_bar_vins")
        self.assertEqual(map_nightlife(""), "palace_lounge_rooftops")

    def test_slug_ids(self):
        self.assertEqual(slugify("L'Oiseau Blanc"), "l-oiseau-blanc")
        self.assertEqual(slugify("Café  de   Flore!"), "cafe-de-flore")
        self.assertEqual(len(slugify("x" * 80)), 50)
        self.assertEqual(venue_id("Le Cinq", VenueCategory.RESTAURANTS), "restaurants-le-cinq")

    def test_records_become_venues(self):
        records = [
            {"Nom": "Le Jules Verne", "Catégorie": "Étoilé", "Expérience": "Vue Tour Eiffel",
             "Horaires": "lundi : 12:00-14:00"},
            {"Nom": "", "Catégorie": "Étoilé", "Expérience": "", "Horaires": ""},
            {"Nom": "Le  Jules Verne", "Catégorie": "Brasserie", "Expérience": "", "Horaires": ""},
        ]
        venues = normalize_records(records, VenueCategory.RESTAURANTS)
        self.assertEqual([v.id for v in venues], ["restaurants-le-jules-verne", "restaurants-le-jules-verne-2"])
        first = venues[0]
        self.assertTrue(first.is_eiffel_view)
        self.assertEqual(first.sub_category, "etoile")
        self.assertIn("lundi", first.opening_hours)
        self.assertFalse(venues[1].is_eiffel_view)

    def test_shopping_appointment_flag(self):
        records = [
            {"Nom": "Hermès", "Rendez-vous": "Oui"},
            {"Nom": "Dior", "Rendez-vous": "Recommandé"},
            {"Nom": "Goyard", "Rendez-vous": "Non"},
        ]
        venues = normalize_records(records, VenueCategory.SHOPPING)
        self.assertEqual([v.reservation_required for v in venues], [True, True, False])
        self.assertIsNone(venues[0].sub_category)

    def test_file_without_name_column_is_empty(self):
        self.assertEqual(normalize_records([{"Adresse": "Paris"}], VenueCategory.SPAS), [])


class TestVenueCatalog(CatalogTestCase):
    def test_load_is_cached_until_reload(self):
        self.write("spas", [("Spa A", "Paris", "")])
        catalog = VenueCatalog(catalog_dir=self.catalog_dir)
        self.assertEqual(len(catalog.load("spas")), 1)

        self.write("spas", [("Spa A", "Paris", ""), ("Spa B", "Paris", "")])
        self.assertEqual(len(catalog.load(VenueCategory.SPAS)), 1)
        self.assertEqual(len(catalog.reload("spas")), 2)

    def test_missing_file_is_empty_and_picked_up_later(self):
        catalog = VenueCatalog(catalog_dir=self.catalog_dir)
        self.assertEqual(catalog.load("museums"), [])
        self.write("museums", [("Musée du Louvre", "Incontournable", "Paris", "")])
        self.assertEqual(len(catalog.load("museums")), 1)

    def test_stats_search_and_lookup(self):
        catalog = self.make_catalog(
            restaurants=[("Le Cinq", "Étoilé", "Paris", "", ""), ("Kei", "Étoilé", "Paris", "", "")],
            spas=[("Ritz Paris Spa", "Paris", "")],
        )
        stats = catalog.stats()
        self.assertEqual(stats["restaurants"], 2)
        self.assertEqual(stats["spas"], 1)
        self.assertEqual(stats["museums"], 0)

        self.assertEqual([v.name for v in catalog.search("cinq")], ["Le Cinq"])
        self.assertEqual(catalog.search("ritz", categories=["restaurants"]), [])
        self.assertEqual(catalog.get_by_id("restaurants-kei").name, "Kei")
        self.assertIsNone(catalog.get_by_id("unknown-kei"))
        self.assertIsNone(catalog.get_by_id("restaurants-nobody"))

    def test_clear_empties_the_cache(self):
        catalog = self.make_catalog(spas=[("Spa A", "Paris", "")])
        catalog.load("spas")
        catalog.clear()
        (self.catalog_dir / "spas.csv").unlink()
        self.assertEqual(catalog.load("spas"), [])


class TestSampleCatalog(unittest.TestCase):
    def test_every_category_loads(self):
        stats = sample_catalog().stats()
        for category in VenueCategory:
            self.assertGreater(stats[category.value], 0, category.value)

    def test_ids_unique_within_category(self):
        for category, venues in sample_catalog().load_all().items():
            ids = [v.id for v in venues]
            self.assertEqual(len(ids), len(set(ids)), category.value)
            self.assertTrue(all(i.startswith(f"{category.value}-") for i in ids))


if __name__ == "__main__":
    unittest.main()
