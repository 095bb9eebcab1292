"""
Collation Helpers

Ordering used everywhere the catalogue is sorted (records by name, facet
tokens). Comparison ignores case and diacritics ("base" sensitivity), so
"Écran", "ecran" and "Ecran" sort together. Ties fall back to the raw string
so the resulting order is total and stable for a fixed input.
"""

from __future__ import annotations

import unicodedata
from typing import Tuple


def strip_diacritics(value: str) -> str:
    """Remove combining marks after canonical decomposition."""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def base_form(value: str) -> str:
    return strip_diacritics(str(value or "")).casefold()


def collation_key(value: str) -> Tuple[str, str]:
    """Sort key: case/diacritic-insensitive first, raw string as tie-breaker."""
    text = str(value or "")
    return (base_form(text), text)
