"""
scripts/catalog_stats.py
------------------------
Inspect the venue catalog: per-category counts, sub-category breakdown and
name search.

Usage:
    cd backend
    python scripts/catalog_stats.py
    python scripts/catalog_stats.py --category restaurants --tags
    python scripts/catalog_stats.py --search "tour eiffel"
    python scripts/catalog_stats.py --catalog-dir /srv/catalog --json

Options:
    --catalog-dir  Directory holding the category files (default: config.CATALOG_DIR)
    --category     Restrict output to one category
    --tags         Also print the sub-category breakdown
    --search       Case-insensitive substring search on names
    --json         Print a JSON document instead of a table
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections import Counter

# ── Make sure backend root is on path ─────────────────────────────────────────
_SCRIPT_DIR  = os.path.dirname(os.path.abspath(__file__))
_BACKEND_DIR = os.path.dirname(_SCRIPT_DIR)
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

# ── Imports (after path fix) ───────────────────────────────────────────────────
import config  # noqa: E402  (must come after sys.path fix)
from modules.catalog import VenueCatalog  # noqa: E402
from schemas.venue import VenueCategory  # noqa: E402


def collect(catalog: VenueCatalog, categories: list[VenueCategory], with_tags: bool) -> dict:
    report: dict = {}
    for category in categories:
        venues = catalog.load(category)
        entry: dict = {"count": len(venues), "file": str(catalog.path_for(category))}
        if with_tags:
            entry["sub_categories"] = dict(
                Counter(v.sub_category or "-" for v in venues).most_common()
            )
        report[category.value] = entry
    return report


def print_report(report: dict) -> None:
    print(f"\n{'Category':<14} {'Venues':>7}  File")
    print("─" * 60)
    for name, entry in report.items():
        print(f"{name:<14} {entry['count']:>7}  {entry['file']}")
        for tag, count in entry.get("sub_categories", {}).items():
            print(f"    {tag:<22} {count:>4}")
    print("─" * 60)
    print(f"{'total':<14} {sum(e['count'] for e in report.values()):>7}\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Venue catalog statistics.")
    parser.add_argument("--catalog-dir", default=None, help="Catalog directory")
    parser.add_argument(
        "--category", choices=[c.value for c in VenueCategory], default=None,
        help="Only this category",
    )
    parser.add_argument("--tags", action="store_true", help="Show sub-category breakdown")
    parser.add_argument("--search", default=None, help="Search venue names")
    parser.add_argument("--json", action="store_true", help="JSON output")
    args = parser.parse_args(argv)

    catalog = VenueCatalog(catalog_dir=args.catalog_dir or config.CATALOG_DIR)
    categories = [VenueCategory(args.category)] if args.category else list(VenueCategory)

    if args.search:
        hits = catalog.search(args.search, categories)
        if args.json:
            print(json.dumps([
                {"id": v.id, "name": v.name, "category": v.category.value, "sub_category": v.sub_category}
                for v in hits
            ], ensure_ascii=False, indent=2))
        else:
            for v in hits:
                print(f"  {v.id:<40} {v.name}  [{v.sub_category or '-'}]")
            print(f"\n{len(hits)} match(es) for {args.search!r}")
        return 0

    report = collect(catalog, categories, args.tags)
    if args.json:
        print(json.dumps(report, ensure_ascii=False, indent=2))
    else:
        print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
