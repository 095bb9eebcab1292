"""
Catalogue Routes

Stateless JSON access to the directory. Every request carries its whole query
(facet tokens, search text, page), so the same pure pipeline that backs the
HTML pages can serve any client-side frontend.
"""

from __future__ import annotations

from typing import Annotated, List, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .dependencies import get_api_locale, get_loader, get_state, resolver_for
from .models import DatasetInfo, FacetOptions, RecordDetail, RecordPage, RecordSummary, ReloadResult
from ..catalog.facets import FACETS, UnknownFacetError, build_facet_index
from ..catalog.filters import FilterState, filter_records
from ..catalog.loader import DatasetLoader
from ..catalog.pagination import paginate
from ..config import settings
from ..state import AppState

router = APIRouter(prefix="/api", tags=["catalog"])


def parse_facet_params(values: List[str]) -> List[Tuple[str, str]]:
    """
    Parse `facet=<label>:<token>` parameters.

    Raises
    ------
    UnknownFacetError
        If a parameter has no separator.
    """
    pairs: List[Tuple[str, str]] = []
    for raw in values:
        label, sep, token = raw.partition(":")
        if not sep:
            raise UnknownFacetError(f"Facet parameter must be '<label>:<token>', got {raw!r}")
        pairs.append((label.strip(), token.strip()))
    return pairs


@router.get(
    "/records",
    response_model=RecordPage,
    summary="Filtered, paginated directory listing",
)
async def list_records(
    state: Annotated[AppState, Depends(get_state)],
    locale: Annotated[str, Depends(get_api_locale)],
    q: Annotated[str, Query(max_length=200)] = "",
    facet: Annotated[List[str], Query()] = [],
    page: Annotated[int, Query(ge=1)] = 1,
) -> RecordPage:
    """
    Apply facet tokens (OR across all of them), then the search text, then
    slice the requested page. Out-of-range pages are clamped.
    """
    filters = FilterState.from_pairs(parse_facet_params(facet))
    resolver = resolver_for(state, locale)
    matched = filter_records(state.dataset.records, filters, q, resolver)
    result = paginate(matched, page, settings.page_size)

    return RecordPage(
        items=[RecordSummary.from_record(r, resolver) for r in result.items],
        page=result.page,
        page_size=result.page_size,
        total_items=result.total_items,
        total_pages=result.total_pages,
        has_previous=result.has_previous,
        has_next=result.has_next,
    )


@router.get("/records/{identifier}", response_model=RecordDetail)
async def get_record(
    identifier: str,
    state: Annotated[AppState, Depends(get_state)],
    locale: Annotated[str, Depends(get_api_locale)],
) -> RecordDetail:
    record = state.dataset.lookup(identifier)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No record with identifier '{identifier}'",
        )
    return RecordDetail.from_record(record, resolver_for(state, locale))


@router.get("/facets", response_model=List[FacetOptions])
async def list_facets(
    state: Annotated[AppState, Depends(get_state)],
    locale: Annotated[str, Depends(get_api_locale)],
) -> List[FacetOptions]:
    index = build_facet_index(state.dataset.records, resolver_for(state, locale))
    return [
        FacetOptions(label=f.label, display_name=f.display_name, tokens=index[f.label])
        for f in FACETS
    ]


@router.get("/dataset", response_model=DatasetInfo)
async def dataset_info(state: Annotated[AppState, Depends(get_state)]) -> DatasetInfo:
    dataset = state.dataset
    notice = state.notice
    generation = state.generation
    return DatasetInfo(
        headers=list(dataset.headers),
        record_count=len(dataset),
        generation=generation,
        loaded_at=dataset.loaded_at if generation else None,
        last_error=notice.message if notice else None,
    )


@router.post("/reload", response_model=ReloadResult)
async def reload_dataset(
    state: Annotated[AppState, Depends(get_state)],
    loader: Annotated[DatasetLoader, Depends(get_loader)],
) -> ReloadResult:
    """
    Fetch a fresh copy of the CSV, bypassing caches.

    A `LoadError` propagates to the registered handler (HTTP 502); the
    previous dataset remains in service.
    """
    dataset = await loader.load(bust_cache=True)
    if dataset is None:
        return ReloadResult(status="superseded", record_count=len(state.dataset), generation=state.generation)
    return ReloadResult(status="reloaded", record_count=len(dataset), generation=state.generation)
