"""
modules/catalog/text.py
-----------------------
Accent- and case-insensitive matching of catalog text ("Fermé", "Étoilé",
"Catégorie") shared by the normalizer, the hours parser and the themes.
"""

from __future__ import annotations

import unicodedata


def fold(text: str | None) -> str:
    """Lower-case, strip diacritics and surrounding whitespace."""
    decomposed = unicodedata.normalize("NFD", text or "")
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower().strip()
