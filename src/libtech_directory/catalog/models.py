"""
Catalogue Data Models

A `Record` is one row of the published spreadsheet: the raw cells keyed by
(trimmed) column header, plus the identifier derived once at load time.
A `Dataset` is one complete load: headers, records in display order and the
identifier index. Datasets are never mutated; a reload builds a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional


@dataclass(frozen=True)
class Record:
    """One directory listing."""

    identifier: str
    cells: Mapping[str, str]
    position: int = 0

    def get(self, header: Optional[str], default: str = "") -> str:
        if header is None:
            return default
        value = self.cells.get(header)
        return default if value is None else value

    def values(self) -> List[str]:
        return list(self.cells.values())

    def searchable(self) -> List[str]:
        """Cell values plus the identifier."""
        return [self.identifier, *self.cells.values()]


@dataclass(frozen=True)
class Dataset:
    """An immutable snapshot of the directory."""

    headers: List[str] = field(default_factory=list)
    records: List[Record] = field(default_factory=list)
    by_identifier: Dict[str, Record] = field(default_factory=dict)
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self.records)

    def lookup(self, identifier: str) -> Optional[Record]:
        return self.by_identifier.get(identifier)


EMPTY_DATASET = Dataset()
