"""
Facet Definitions and Index Builder

The directory is filtered along seven fixed categories, each bound to one
logical field. Cells hold comma-separated tokens ("Vision, Audition"); the
facet index lists the distinct tokens seen per category.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Set, Tuple

from .collation import collation_key
from .models import Record
from .schema import SchemaResolver


@dataclass(frozen=True)
class FacetDefinition:
    key: str
    label: str
    display_name: str


FACETS: Tuple[FacetDefinition, ...] = (
    FacetDefinition("needs", "Besoin", "Need"),
    FacetDefinition("technology", "Technologie", "Technology"),
    FacetDefinition("age", "Tranche d'âge", "Age range"),
    FacetDefinition("disability", "Handicap", "Disability"),
    FacetDefinition("langs", "Langue", "Language"),
    FacetDefinition("price", "Prix", "Price"),
    FacetDefinition("location", "Localisation", "Location"),
)

FACET_LABELS: Tuple[str, ...] = tuple(f.label for f in FACETS)


class UnknownFacetError(ValueError):
    """Raised when a facet label is not one of the fixed categories."""


def get_facet(label: str) -> FacetDefinition:
    for facet in FACETS:
        if facet.label == label:
            return facet
    raise UnknownFacetError(f"Unknown facet category: {label!r}")


def split_tokens(value: str) -> List[str]:
    """Split a multi-value cell on commas, trimming and dropping empties."""
    return [piece.strip() for piece in str(value or "").split(",") if piece.strip()]


def build_facet_index(
    records: Iterable[Record],
    resolver: SchemaResolver,
) -> Dict[str, List[str]]:
    """
    Distinct tokens per facet label, sorted case/diacritic-insensitively.

    Every label is present in the result, possibly with an empty list.
    """
    seen: Dict[str, Set[str]] = {facet.label: set() for facet in FACETS}
    headers = {facet.label: resolver.resolve(facet.key) for facet in FACETS}

    for record in records:
        for facet in FACETS:
            header = headers[facet.label]
            if header is None:
                continue
            seen[facet.label].update(split_tokens(record.get(header)))

    return {label: sorted(tokens, key=collation_key) for label, tokens in seen.items()}


def visible_tokens(
    tokens: List[str],
    expanded: bool,
    limit: int,
) -> Tuple[List[str], bool]:
    """
    Tokens to display for one facet block and whether a toggle is needed.

    Display only: filtering always considers every token.
    """
    has_more = len(tokens) > limit
    if expanded or not has_more:
        return list(tokens), has_more
    return list(tokens[:limit]), has_more
