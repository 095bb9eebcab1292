"""
Catalogue Package

Column resolution, facet indexing, filtering and pagination over the
in-memory directory. The network loader lives in `catalog.loader` and is not
re-exported here.
"""

from .models import Record, Dataset, EMPTY_DATASET
from .schema import SchemaResolver, FieldSpec, COLUMN_MAP
from .slug import slugify
from .facets import (
    FACETS,
    FACET_LABELS,
    FacetDefinition,
    UnknownFacetError,
    build_facet_index,
    get_facet,
    split_tokens,
    visible_tokens,
)
from .filters import FilterState, filter_records, matches_facets, matches_search
from .pagination import Page, paginate

__all__ = [
    "Record",
    "Dataset",
    "EMPTY_DATASET",
    "SchemaResolver",
    "FieldSpec",
    "COLUMN_MAP",
    "slugify",
    "FACETS",
    "FACET_LABELS",
    "FacetDefinition",
    "UnknownFacetError",
    "build_facet_index",
    "get_facet",
    "split_tokens",
    "visible_tokens",
    "FilterState",
    "filter_records",
    "matches_facets",
    "matches_search",
    "Page",
    "paginate",
]
