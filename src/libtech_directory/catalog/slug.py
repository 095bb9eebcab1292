from __future__ import annotations

import re

from .collation import strip_diacritics

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    Derive a URL-safe identifier: lowercase ASCII letters, digits and single
    hyphens, no leading or trailing hyphen.

    >>> slugify("Café Accessibilité")
    'cafe-accessibilite'
    """
    text = strip_diacritics(str(value or "").lower())
    return _NON_SLUG_CHARS.sub("-", text).strip("-")
