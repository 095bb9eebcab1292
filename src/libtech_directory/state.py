"""
Application State

Process-wide holder for the dataset currently served, replacing scattered
module globals with one explicit object.

Design choices
--------------
- The dataset itself is immutable; installing a load swaps the reference.
- Loads carry a monotonically increasing generation. Only the latest issued
  generation may install its result, so a slow earlier load can never
  overwrite a newer one.
- A failed load leaves the installed dataset in place and records a notice
  that the presentation layer shows to visitors.
- Listeners subscribe to dataset changes instead of polling shared variables.
- Thread-safe access using a re-entrant lock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Callable, List, Optional

from .catalog.models import EMPTY_DATASET, Dataset

logger = logging.getLogger("libtech.state")

DatasetListener = Callable[[Dataset, int], None]


@dataclass(frozen=True)
class LoadNotice:
    """User-visible report of the last failed load."""

    generation: int
    message: str
    occurred_at: datetime


class AppState:
    """
    Holds the installed dataset, load generations and the last load failure.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._dataset: Dataset = EMPTY_DATASET
        self._issued = 0
        self._installed = 0
        self._notice: Optional[LoadNotice] = None
        self._listeners: List[DatasetListener] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def dataset(self) -> Dataset:
        with self._lock:
            return self._dataset

    @property
    def generation(self) -> int:
        """Generation of the installed dataset (0 before the first load)."""
        with self._lock:
            return self._installed

    @property
    def notice(self) -> Optional[LoadNotice]:
        with self._lock:
            return self._notice

    # ------------------------------------------------------------------
    # Load lifecycle
    # ------------------------------------------------------------------

    def begin_load(self) -> int:
        """Issue a new load generation."""
        with self._lock:
            self._issued += 1
            return self._issued

    def install(self, dataset: Dataset, generation: int) -> bool:
        """
        Install `dataset` if `generation` is the latest issued one.

        Returns
        -------
        bool
            False when the load was superseded and its result discarded.
        """
        with self._lock:
            if generation != self._issued:
                return False
            self._dataset = dataset
            self._installed = generation
            self._notice = None
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(dataset, generation)
            except Exception:
                logger.exception("Dataset listener %r failed", listener)
        return True

    def record_failure(self, generation: int, message: str) -> None:
        """Remember a failed load for display. Stale failures are ignored."""
        with self._lock:
            if generation != self._issued:
                return
            self._notice = LoadNotice(
                generation=generation,
                message=message,
                occurred_at=datetime.now(timezone.utc),
            )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: DatasetListener) -> Callable[[], None]:
        """Register `listener`; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def reset(self) -> None:
        """Drop the dataset and all bookkeeping. Intended for tests."""
        with self._lock:
            self._dataset = EMPTY_DATASET
            self._issued = 0
            self._installed = 0
            self._notice = None
            self._listeners.clear()


# Global singleton used by the application.
app_state = AppState()
