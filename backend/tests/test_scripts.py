from __future__ import annotations

import contextlib
import io
import json
import unittest
from unittest import mock

from scripts import catalog_stats, run_migrations
from tests.helpers import CatalogTestCase


class TestCatalogStatsScript(CatalogTestCase):
    def setUp(self):
        super().setUp()
        self.make_catalog(
            restaurants=[("Le Cinq", "Étoilé", "", "", ""), ("Lipp", "Brasserie", "", "", "")],
            spas=[("Ritz Spa", "", "")],
        )

    def run_main(self, *args):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = catalog_stats.main(["--catalog-dir", str(self.catalog_dir), *args])
        self.assertEqual(code, 0)
        return out.getvalue()

    def test_json_report_with_tags(self):
        report = json.loads(self.run_main("--json", "--tags", "--category", "restaurants"))
        self.assertEqual(list(report), ["restaurants"])
        self.assertEqual(report["restaurants"]["count"], 2)
        self.assertEqual(report["restaurants"]["sub_categories"], {"etoile": 1, "brasserie": 1})

    def test_table_report(self):
        text = self.run_main()
        self.assertIn("spas", text)
        self.assertIn("total", text)

    def test_search(self):
        hits = json.loads(self.run_main("--search", "CINQ", "--json"))
        self.assertEqual([h["id"] for h in hits], ["restaurants-le-cinq"])


class TestMigrationScript(unittest.TestCase):
    def test_schema_statements(self):
        statements = run_migrations.load_statements()
        self.assertEqual(len(statements), 2)
        self.assertTrue(statements[0].startswith("CREATE TABLE IF NOT EXISTS excluded_venues"))
        self.assertNotIn("--", statements[0])
        self.assertNotIn("/*", statements[0])

    def test_dry_run_never_connects(self):
        with mock.patch.object(run_migrations.psycopg2, "connect") as connect, \
                contextlib.redirect_stdout(io.StringIO()):
            self.assertEqual(run_migrations.main(["--dry-run"]), 0)
        connect.assert_not_called()

    def test_verify_reports_missing_table(self):
        conn = mock.MagicMock()
        conn.cursor.return_value.__enter__.return_value.fetchall.return_value = []
        with mock.patch.object(run_migrations.psycopg2, "connect", return_value=conn), \
                contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
            self.assertEqual(run_migrations.main(["--verify"]), 1)
        conn.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
