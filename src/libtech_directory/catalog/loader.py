"""
Dataset Loader

Downloads the published CSV, parses it into `Record` objects and installs the
resulting `Dataset` into the application state.

Design Goals
------------
- Parsing is a pure function of the CSV text (`parse_csv`), testable offline.
- Transport is plain httpx, injectable for tests.
- A failed load never replaces the dataset already installed.
- Overlapping loads are ordered by generation: only the latest one installs.
"""

from __future__ import annotations

import csv
import io
import logging
import time
from typing import Dict, List, Optional

import httpx

from ..config import settings
from ..state import AppState, app_state
from .collation import collation_key
from .models import Dataset, Record
from .schema import SchemaResolver
from .slug import slugify

logger = logging.getLogger("libtech.loader")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class LoadError(RuntimeError):
    """Raised when the dataset cannot be downloaded or parsed."""


# ---------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------

def _is_blank_row(cells: Dict[str, str]) -> bool:
    return all(not str(v or "").strip() for v in cells.values())


def parse_csv(text: str, locale: str) -> Dataset:
    """
    Parse CSV text (header row first) into a sorted `Dataset`.

    Parameters
    ----------
    text : str
        Raw CSV document.
    locale : str
        Locale used to resolve the name column for identifiers and ordering.

    Raises
    ------
    LoadError
        If the CSV is malformed.
    """
    reader = csv.DictReader(io.StringIO(text), restval="")
    rows: List[Dict[str, str]] = []
    try:
        for raw in reader:
            cells: Dict[str, str] = {}
            for key, value in raw.items():
                # Cells beyond the header row land under None
                if key is None:
                    continue
                cells[str(key).strip()] = "" if value is None else str(value)
            if cells and not _is_blank_row(cells):
                rows.append(cells)
        fieldnames = reader.fieldnames
    except csv.Error as exc:
        raise LoadError(f"Malformed CSV: {exc}") from exc

    if fieldnames:
        headers = [str(h or "").strip() for h in fieldnames]
    else:
        headers = list(rows[0].keys()) if rows else []

    resolver = SchemaResolver(headers, locale)
    name_header = resolver.name_key()

    records: List[Record] = []
    for position, cells in enumerate(rows):
        name = cells.get(name_header, "").strip()
        identifier = slugify(name or f"item-{position}") or slugify(f"item-{position}")
        records.append(Record(identifier=identifier, cells=cells, position=position))

    by_identifier = {record.identifier: record for record in records}
    records.sort(key=lambda r: collation_key(r.get(name_header)))

    return Dataset(headers=headers, records=records, by_identifier=by_identifier)


# ---------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------

class DatasetLoader:
    """
    Fetches the CSV source and installs parsed datasets into an `AppState`.
    """

    def __init__(
        self,
        state: AppState,
        url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Parameters
        ----------
        state : AppState
            State receiving loaded datasets.
        url : Optional[str]
            CSV location; defaults to `settings.csv_url`.
        client : Optional[httpx.AsyncClient]
            Shared client. When None, a short-lived client is created per fetch.
        """
        self._state = state
        self.url = url or str(settings.csv_url)
        self._client = client

    async def fetch_text(self, bust_cache: bool = False) -> str:
        """
        Download the CSV document.

        With `bust_cache`, a timestamp parameter and a no-cache header make
        sure intermediaries cannot answer with a stale copy.
        """
        url = httpx.URL(self.url)
        headers: Dict[str, str] = {}
        if bust_cache:
            url = url.copy_add_param("_", str(int(time.time() * 1000)))
            headers["Cache-Control"] = "no-cache"

        try:
            if self._client is not None:
                return await self._download(self._client, url, headers)
            async with httpx.AsyncClient(
                timeout=settings.request_timeout_seconds,
                follow_redirects=True,
            ) as client:
                return await self._download(client, url, headers)
        except httpx.HTTPStatusError as exc:
            raise LoadError(
                f"Dataset request failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise LoadError(f"Dataset request failed: {type(exc).__name__}") from exc

    async def _download(
        self,
        client: httpx.AsyncClient,
        url: httpx.URL,
        headers: Dict[str, str],
    ) -> str:
        chunks: List[bytes] = []
        async with client.stream("GET", url, headers=headers) as resp:
            resp.raise_for_status()
            if "text/html" in resp.headers.get("content-type", ""):
                raise LoadError("Dataset URL returned an HTML page instead of CSV")
            async for chunk in resp.aiter_bytes():
                chunks.append(chunk)
        try:
            return b"".join(chunks).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise LoadError("Dataset is not valid UTF-8") from exc

    async def load(self, bust_cache: bool = False) -> Optional[Dataset]:
        """
        Fetch, parse and install a dataset.

        Returns
        -------
        Optional[Dataset]
            The installed dataset, or None when a newer load superseded this one.

        Raises
        ------
        LoadError
            On transport or parse failure. The previous dataset stays active.
        """
        generation = self._state.begin_load()
        logger.info("Loading dataset (generation %d) from %s", generation, self.url)

        try:
            text = await self.fetch_text(bust_cache=bust_cache)
            dataset = parse_csv(text, settings.default_locale)
        except LoadError as exc:
            logger.error("Dataset load %d failed: %s", generation, exc)
            self._state.record_failure(generation, str(exc))
            raise

        if not self._state.install(dataset, generation):
            logger.info("Discarding stale dataset load (generation %d)", generation)
            return None

        logger.info(
            "Dataset installed (generation %d): %d records, %d columns",
            generation,
            len(dataset),
            len(dataset.headers),
        )
        return dataset


def get_loader() -> DatasetLoader:
    return DatasetLoader(app_state)
