"""
modules/catalog/csv_reader.py
-----------------------------
Reads one hand-maintained catalog file into a list of header→value dicts.

The files are exported from spreadsheets, so:
  - the delimiter is ";" by default (config.CATALOG_DELIMITER)
  - quoted fields may embed the delimiter and raw newlines
  - CR characters are noise and are dropped
  - blank logical lines are skipped
  - short rows are padded with "" so every header has a value
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Optional

import config

logger = logging.getLogger(__name__)


def parse_rows(content: str, delimiter: str = ";") -> list[dict[str, str]]:
    """Parse already-decoded file content.  First logical line is the header."""
    content = content.replace("\r", "")
    if content.startswith("\ufeff"):
        content = content[1:]

    reader = csv.reader(io.StringIO(content), delimiter=delimiter, quotechar='"')
    rows = [row for row in reader if any(cell.strip() for cell in row)]
    if not rows:
        return []

    headers = [h.strip() for h in rows[0]]
    records: list[dict[str, str]] = []
    for row in rows[1:]:
        values = [cell.strip() for cell in row]
        if len(values) < len(headers):
            values.extend([""] * (len(headers) - len(values)))
        records.append(dict(zip(headers, values)))
    return records


def read_catalog_file(
    path: Path,
    delimiter: str | None = None,
    encoding: str | None = None,
) -> Optional[list[dict[str, str]]]:
    """
    Read and parse ``path``.

    Returns None when the file is missing or cannot be read/parsed; the
    problem is logged and never raised.
    """
    if not path.exists():
        logger.warning("Catalog file not found: %s", path)
        return None

    try:
        content = path.read_text(encoding=encoding or config.CATALOG_ENCODING)
        return parse_rows(content, delimiter or config.CATALOG_DELIMITER)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        logger.error("Could not read catalog file %s: %s", path, exc)
        return None
