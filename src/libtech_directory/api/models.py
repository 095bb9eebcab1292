"""
API Models for the Directory Service

Pydantic models used for response validation of the JSON catalogue API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from ..catalog.models import Record
from ..catalog.schema import SchemaResolver
from ..catalog.facets import FACETS


# ---------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------

class RecordSummary(BaseModel):
    """
    One card of the directory listing.
    """
    identifier: str = Field(..., min_length=1)
    name: str
    description: str = ""

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_record(cls, record: Record, resolver: SchemaResolver) -> "RecordSummary":
        return cls(
            identifier=record.identifier,
            name=resolver.name_of(record),
            description=resolver.value(record, "description"),
        )


class RecordDetail(RecordSummary):
    """
    Full listing: logical fields resolved for the requested locale, plus the
    raw cells as published.
    """
    fields: Dict[str, str] = Field(default_factory=dict)
    cells: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Record, resolver: SchemaResolver) -> "RecordDetail":
        logical = {facet.key: resolver.value(record, facet.key) for facet in FACETS}
        for key in ("image", "image_caption", "website", "date", "structure"):
            logical[key] = resolver.value(record, key)
        return cls(
            identifier=record.identifier,
            name=resolver.name_of(record),
            description=resolver.value(record, "description"),
            fields=logical,
            cells=dict(record.cells),
        )


class RecordPage(BaseModel):
    """
    One page of filtered, name-ordered results.
    """
    items: List[RecordSummary]
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_items: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=1)
    has_previous: bool
    has_next: bool


# ---------------------------------------------------------------------
# Facets & Dataset
# ---------------------------------------------------------------------

class FacetOptions(BaseModel):
    label: str
    display_name: str
    tokens: List[str]


class DatasetInfo(BaseModel):
    headers: List[str]
    record_count: int = Field(..., ge=0)
    generation: int = Field(..., ge=0)
    loaded_at: Optional[datetime] = None
    last_error: Optional[str] = None


class ReloadResult(BaseModel):
    status: str
    record_count: int = Field(..., ge=0)
    generation: int = Field(..., ge=0)
