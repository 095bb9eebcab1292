"""
Browse Session Store

In-memory per-visitor browsing state for the HTML catalogue: selected facet
tokens, expanded facet blocks, search text and current page.

Design choices
--------------
- In-memory only (no persistence across process restarts).
- Page resets to 1 whenever the selection or the search text changes, but not
  when a facet block is expanded or collapsed.
- Bounded: the least recently used session is evicted past the limit.
- Thread-safe access using a re-entrant lock.
- Global singleton `browse_sessions` for typical application use, while still
  allowing custom instances to be created for tests.
"""

from __future__ import annotations

import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from threading import RLock
from typing import Optional, Set

from ..catalog.facets import get_facet
from ..catalog.filters import FilterState, normalize_query
from ..config import settings


@dataclass
class BrowseState:
    """Directory view state of one visitor."""

    filters: FilterState = field(default_factory=FilterState)
    expanded: Set[str] = field(default_factory=set)
    query: str = ""
    page: int = 1

    def toggle_token(self, label: str, token: str) -> bool:
        if not token.strip():
            get_facet(label)
            return False
        selected = self.filters.toggle(label, token)
        self.page = 1
        return selected

    def clear_filters(self) -> None:
        self.filters.clear()
        self.page = 1

    def set_query(self, query: Optional[str]) -> None:
        text = str(query or "").strip()
        if normalize_query(text) != normalize_query(self.query):
            self.page = 1
        self.query = text

    def toggle_expanded(self, label: str) -> bool:
        get_facet(label)
        if label in self.expanded:
            self.expanded.discard(label)
            return False
        self.expanded.add(label)
        return True

    def go_to_page(self, page: int) -> None:
        # Upper bound is applied at render time, once the result size is known
        self.page = max(1, page)


class BrowseSessionStore:
    """
    Maps session IDs to `BrowseState` objects.
    """

    def __init__(self, max_sessions: Optional[int] = None) -> None:
        """
        Parameters
        ----------
        max_sessions : Optional[int]
            If provided, at most this many sessions are kept; the least
            recently used one is dropped first.
        """
        self._store: "OrderedDict[str, BrowseState]" = OrderedDict()
        self._lock = RLock()
        self._max_sessions = max_sessions

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    def get(self, session_id: str) -> BrowseState:
        """
        Return the state for `session_id`, creating it if unknown.

        The returned object is live: mutations are visible to later requests
        of the same session.
        """
        with self._lock:
            state = self._store.get(session_id)
            if state is None:
                state = BrowseState()
                self._store[session_id] = state
                self._evict()
            else:
                self._store.move_to_end(session_id)
            return state

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._store.pop(session_id, None)

    # ------------------------------------------------------------------
    # Utility operations
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        """Intended primarily for test setup/teardown."""
        with self._lock:
            self._store.clear()

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _evict(self) -> None:
        if self._max_sessions is None or self._max_sessions <= 0:
            return
        while len(self._store) > self._max_sessions:
            self._store.popitem(last=False)


# Global singleton used by the application.
browse_sessions = BrowseSessionStore(max_sessions=settings.max_browse_sessions)
