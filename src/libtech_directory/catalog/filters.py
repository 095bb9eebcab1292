"""
Filter Engine

Decides which records are visible for a given facet selection and search
query, and orders the result by name.

Facet semantics are a single disjunction: a record matches when ANY selected
token of ANY category appears in its cell for that category. Selecting a token
in a second category therefore widens the result instead of narrowing it.
The free-text search is then applied on top (AND).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..config import settings
from .collation import collation_key
from .facets import FACETS, FACET_LABELS, get_facet, split_tokens
from .models import Record
from .schema import SchemaResolver


class FilterState:
    """Selected tokens per facet label. Tokens are compared by value."""

    def __init__(self) -> None:
        self._selected: Dict[str, Set[str]] = {label: set() for label in FACET_LABELS}

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "FilterState":
        state = cls()
        for label, token in pairs:
            get_facet(label)
            token = token.strip()
            if token:
                state._selected[label].add(token)
        return state

    def toggle(self, label: str, token: str) -> bool:
        """
        Select `token` if unselected, otherwise deselect it.

        Returns
        -------
        bool
            True if the token is selected after the call. Blank tokens are
            ignored and report False.

        Raises
        ------
        UnknownFacetError
            If `label` is not a facet category.
        """
        get_facet(label)
        token = token.strip()
        if not token:
            return False
        selected = self._selected[label]
        if token in selected:
            selected.discard(token)
            return False
        selected.add(token)
        return True

    def selected(self, label: str) -> Set[str]:
        return set(self._selected.get(label, ()))

    def is_selected(self, label: str, token: str) -> bool:
        return token in self._selected.get(label, ())

    def is_active(self) -> bool:
        return any(self._selected.values())

    def clear(self) -> None:
        for tokens in self._selected.values():
            tokens.clear()


def matches_facets(record: Record, filters: FilterState, resolver: SchemaResolver) -> bool:
    if not filters.is_active():
        return True
    for facet in FACETS:
        selected = filters.selected(facet.label)
        if not selected:
            continue
        tokens = split_tokens(resolver.value(record, facet.key))
        if any(token in selected for token in tokens):
            return True
    return False


def normalize_query(query: Optional[str]) -> str:
    return str(query or "").strip().lower()


def matches_search(record: Record, query: Optional[str], min_length: Optional[int] = None) -> bool:
    """
    Case-insensitive substring search over every cell of the record and
    its identifier.

    Queries shorter than `min_length` (default `settings.search_min_length`)
    match everything.
    """
    needle = normalize_query(query)
    if min_length is None:
        min_length = settings.search_min_length
    if len(needle) < min_length:
        return True
    return any(needle in str(value).lower() for value in record.searchable())


def sort_by_name(records: Iterable[Record], resolver: SchemaResolver) -> List[Record]:
    name_header = resolver.name_key()
    return sorted(records, key=lambda r: collation_key(r.get(name_header)))


def filter_records(
    records: Iterable[Record],
    filters: FilterState,
    query: Optional[str],
    resolver: SchemaResolver,
) -> List[Record]:
    """Facet step, then search step, then name ordering."""
    matched = [r for r in records if matches_facets(r, filters, resolver)]
    matched = [r for r in matched if matches_search(r, query)]
    return sort_by_name(matched, resolver)
