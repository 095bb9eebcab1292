from typing import Optional

from fastapi import Query, Request

from ..catalog.loader import DatasetLoader, get_loader as _build_loader
from ..catalog.schema import SchemaResolver
from ..preferences import Preferences, normalize_lang, read_preferences
from ..sessions.store import BrowseSessionStore, browse_sessions
from ..state import AppState, app_state


def get_state() -> AppState:
    return app_state


def get_loader() -> DatasetLoader:
    return _build_loader()


def get_session_store() -> BrowseSessionStore:
    return browse_sessions


def get_preferences(request: Request) -> Preferences:
    return read_preferences(request.cookies)


def get_api_locale(
    request: Request,
    lang: Optional[str] = Query(default=None, max_length=8),
) -> str:
    """Explicit `lang` query parameter first, then the preference cookie."""
    if lang:
        return normalize_lang(lang)
    return read_preferences(request.cookies).lang


def resolver_for(state: AppState, locale: str) -> SchemaResolver:
    # Built per request so locale and header changes apply immediately
    return SchemaResolver(state.dataset.headers, locale)
