"""
Schema Resolver

Maps logical field keys ("name", "needs", ...) onto the column headers of the
dataset currently loaded. Header names differ between spreadsheet editions
("Besoin" / "Besoins" / "Besoin_fr"), so each key lists candidate base names in
priority order, optionally preferring a locale-suffixed variant (`Nom_fr`).

Design Goals
------------
- Literal matching only: header and base names are never compiled into
  patterns, so characters such as "(" or "?" in a header are inert.
- No memoization: a resolver is cheap to build and always reflects the header
  set and locale it was built with.
- Lookup misses are values, not errors: unresolved keys read as "".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Record

DEFAULT_NAME_HEADER = "Nom"


@dataclass(frozen=True)
class FieldSpec:
    """Candidate base header names for one logical key.

    `exact_only` keys never fall back to substring matching.
    """

    bases: Tuple[str, ...]
    localized: bool = True
    exact_only: bool = False


COLUMN_MAP: Dict[str, FieldSpec] = {
    "name": FieldSpec(("Nom",)),
    "description": FieldSpec(("Description",)),
    "needs": FieldSpec(("Besoin", "Besoins")),
    "technology": FieldSpec(("Technologie", "Type de technologie", "Type_technologie")),
    "age": FieldSpec(("Tranche d'âge", "Tranche d'age", "Tranche_age", "Age")),
    "disability": FieldSpec(("Handicap",)),
    "langs": FieldSpec(("Langue", "Langues")),
    "price": FieldSpec(("Prix", "Tarif", "Coût", "Cout")),
    "location": FieldSpec(("Localisation", "Pays", "Pays fournisseurs")),
    # Detail page only
    "image": FieldSpec(("Image", "Illustration", "Photo", "Visuel"), exact_only=True),
    "image_caption": FieldSpec(
        ("Description image", "Description_image", "Légende image", "Legende image"),
        localized=False,
    ),
    "website": FieldSpec(("Site", "Site web", "URL", "Lien"), localized=False, exact_only=True),
    "date": FieldSpec(("Date", "Année"), localized=False, exact_only=True),
    "structure": FieldSpec(("Structure", "Organisme", "Organisation"), localized=False, exact_only=True),
}


def _fold(value: str) -> str:
    return str(value or "").strip().lower()


class SchemaResolver:
    """
    Resolves logical keys against one header set and one locale.
    """

    def __init__(
        self,
        headers: Sequence[str],
        locale: str,
        column_map: Optional[Dict[str, FieldSpec]] = None,
    ) -> None:
        self.headers: List[str] = list(headers)
        self.locale = locale
        self._column_map = column_map if column_map is not None else COLUMN_MAP

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def candidates(self, key: str) -> List[str]:
        """Ordered exact-match candidates for `key` (suffixed variant first)."""
        spec = self._column_map.get(key)
        if spec is None:
            return []
        out: List[str] = []
        for base in spec.bases:
            if spec.localized and self.locale:
                out.append(f"{base}_{self.locale}")
            out.append(base)
        return out

    def resolve(self, key: str) -> Optional[str]:
        """
        Return the header that best matches `key`, or None.

        Exact (case-insensitive, trimmed) candidates are tried first, in
        candidate order. Failing that, the first header (in header order)
        containing any base name (in base order) wins, unless the key is
        exact-only.
        """
        spec = self._column_map.get(key)
        if spec is None:
            return None

        index: Dict[str, str] = {}
        for header in self.headers:
            index.setdefault(_fold(header), header)

        for candidate in self.candidates(key):
            hit = index.get(_fold(candidate))
            if hit is not None:
                return hit

        if spec.exact_only:
            return None

        for base in spec.bases:
            needle = _fold(base)
            if not needle:
                continue
            for header in self.headers:
                if needle in _fold(header):
                    return header

        return None

    # ------------------------------------------------------------------
    # Value access
    # ------------------------------------------------------------------

    def value(self, record: Record, key: str) -> str:
        header = self.resolve(key)
        if header is None:
            return ""
        return record.get(header).strip()

    def name_key(self) -> str:
        return self.resolve("name") or (self.headers[0] if self.headers else DEFAULT_NAME_HEADER)

    def name_of(self, record: Record) -> str:
        return record.get(self.name_key()).strip()
