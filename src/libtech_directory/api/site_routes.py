"""
Site Routes

HTML pages of the directory. The route table mirrors the public navigation:
home, directory, detail, submission, contact, about and the footer pages.
Unknown paths render the home page.

Directory state (selected tokens, expanded facet blocks, search text, page)
lives in a server-side browse session identified by a cookie.
"""

from __future__ import annotations

import logging
from typing import Annotated, Dict, List, Optional, Tuple
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import BaseModel, Field, ValidationError

from .dependencies import get_preferences, get_session_store, get_state, resolver_for
from ..catalog.facets import build_facet_index, get_facet
from ..catalog.filters import filter_records
from ..catalog.pagination import paginate
from ..config import settings
from ..preferences import Preferences, normalize_font_size, normalize_lang, write_preferences
from ..sessions.store import BrowseSessionStore, BrowseState
from ..state import AppState
from ..views import pages
from ..views.layout import render_page

logger = logging.getLogger("libtech.site")

router = APIRouter(tags=["site"], default_response_class=HTMLResponse)

SESSION_MAX_AGE = 30 * 24 * 3600


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

async def read_form(request: Request) -> Dict[str, str]:
    """Decode an urlencoded body, keeping the first value of each field."""
    body = (await request.body()).decode("utf-8", errors="replace")
    return {key: values[0] for key, values in parse_qs(body, keep_blank_values=True).items()}


def browse_session(request: Request, store: BrowseSessionStore) -> Tuple[str, BrowseState, bool]:
    session_id = request.cookies.get(settings.session_cookie_name)
    is_new = not session_id or not store.has_session(session_id)
    if is_new:
        session_id = store.new_session_id()
    return session_id, store.get(session_id), is_new


def remember_session(response: Response, session_id: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        session_id,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
    )


def safe_next(target: Optional[str]) -> str:
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return "/"


def html_page(
    title: str,
    body: str,
    request: Request,
    prefs: Preferences,
    state: AppState,
    status_code: int = 200,
) -> HTMLResponse:
    content = render_page(title, body, path=request.url.path, prefs=prefs, notice=state.notice)
    return HTMLResponse(content=content, status_code=status_code)


class SubmissionForm(BaseModel):
    techname: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    category: str = ""
    author: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    privacy: str = Field(..., min_length=1)


# ---------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------

@router.get("/repertoire")
async def directory(
    request: Request,
    state: Annotated[AppState, Depends(get_state)],
    store: Annotated[BrowseSessionStore, Depends(get_session_store)],
    prefs: Annotated[Preferences, Depends(get_preferences)],
    q: Annotated[Optional[str], Query(max_length=200)] = None,
    page: Annotated[Optional[int], Query()] = None,
) -> HTMLResponse:
    session_id, browse, is_new = browse_session(request, store)
    if q is not None:
        browse.set_query(q)
    if page is not None:
        browse.go_to_page(page)

    dataset = state.dataset
    resolver = resolver_for(state, prefs.lang)
    matched = filter_records(dataset.records, browse.filters, browse.query, resolver)
    result = paginate(matched, browse.page, settings.page_size)
    browse.page = result.page

    body = pages.directory_body(
        result,
        resolver,
        build_facet_index(dataset.records, resolver),
        browse,
        settings.facet_preview_limit,
    )
    response = html_page("Répertoire", body, request, prefs, state)
    if is_new:
        remember_session(response, session_id)
    return response


async def _mutate_browse(request: Request, store: BrowseSessionStore, action: str) -> RedirectResponse:
    form = await read_form(request)
    session_id, browse, is_new = browse_session(request, store)

    if action == "clear":
        browse.clear_filters()
    else:
        label = form.get("facet", "")
        try:
            get_facet(label)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown facet")
        if action == "toggle":
            browse.toggle_token(label, form.get("value", ""))
        else:
            browse.toggle_expanded(label)

    response = RedirectResponse("/repertoire", status_code=status.HTTP_303_SEE_OTHER)
    if is_new:
        remember_session(response, session_id)
    return response


@router.post("/repertoire/filtres")
async def toggle_token(
    request: Request,
    store: Annotated[BrowseSessionStore, Depends(get_session_store)],
) -> RedirectResponse:
    return await _mutate_browse(request, store, "toggle")


@router.post("/repertoire/filtres/affichage")
async def toggle_facet_display(
    request: Request,
    store: Annotated[BrowseSessionStore, Depends(get_session_store)],
) -> RedirectResponse:
    return await _mutate_browse(request, store, "expand")


@router.post("/repertoire/filtres/effacer")
async def clear_filters(
    request: Request,
    store: Annotated[BrowseSessionStore, Depends(get_session_store)],
) -> RedirectResponse:
    return await _mutate_browse(request, store, "clear")


@router.get("/repertoire/{identifier}")
async def detail(
    identifier: str,
    request: Request,
    state: Annotated[AppState, Depends(get_state)],
    prefs: Annotated[Preferences, Depends(get_preferences)],
) -> HTMLResponse:
    dataset = state.dataset
    record = dataset.lookup(identifier)
    if record is None:
        return html_page("Élément introuvable", pages.not_found_body(), request, prefs, state, 404)

    resolver = resolver_for(state, prefs.lang)
    title = resolver.name_of(record) or "(sans nom)"
    return html_page(title, pages.detail_body(record, resolver, dataset), request, prefs, state)


# ---------------------------------------------------------------------
# Submission (no backend: nothing is stored or sent)
# ---------------------------------------------------------------------

@router.get("/soumettre")
async def submission_form(
    request: Request,
    state: Annotated[AppState, Depends(get_state)],
    prefs: Annotated[Preferences, Depends(get_preferences)],
) -> HTMLResponse:
    return html_page("Soumettre", pages.submission_body(), request, prefs, state)


@router.post("/soumettre")
async def submit(
    request: Request,
    state: Annotated[AppState, Depends(get_state)],
    prefs: Annotated[Preferences, Depends(get_preferences)],
) -> HTMLResponse:
    form = await read_form(request)
    try:
        SubmissionForm(**{k: v for k, v in form.items() if k in SubmissionForm.model_fields})
    except ValidationError as exc:
        missing: List[str] = sorted({str(err["loc"][0]) for err in exc.errors()})
        body = pages.submission_body(missing=missing)
        return html_page("Soumettre", body, request, prefs, state, status.HTTP_422_UNPROCESSABLE_ENTITY)

    logger.info("Submission form received (not stored)")
    return html_page("Soumettre", pages.submission_body(confirmed=True), request, prefs, state)


# ---------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------

@router.post("/preferences")
async def update_preferences(request: Request) -> RedirectResponse:
    form = await read_form(request)
    prefs = Preferences(
        lang=normalize_lang(form.get("lang")),
        font_size=normalize_font_size(form.get("font_size")),
    )
    response = RedirectResponse(safe_next(form.get("next")), status_code=status.HTTP_303_SEE_OTHER)
    write_preferences(response, prefs)
    return response


# ---------------------------------------------------------------------
# Static pages
# ---------------------------------------------------------------------

STATIC_PAGES = {
    "/contact": ("Contact", pages.contact_body),
    "/a-propos": ("À propos", pages.about_body),
    "/plan-du-site": ("Plan du site", lambda: pages.placeholder_body("Plan du site")),
    "/mentions-legales": ("Mentions légales", lambda: pages.placeholder_body("Mentions légales")),
    "/confidentialite": (
        "Politique de confidentialité",
        lambda: pages.placeholder_body("Politique de confidentialité"),
    ),
}


@router.get("/")
async def home(
    request: Request,
    state: Annotated[AppState, Depends(get_state)],
    prefs: Annotated[Preferences, Depends(get_preferences)],
) -> HTMLResponse:
    return html_page("Accueil", pages.home_body(), request, prefs, state)


@router.get("/{path:path}")
async def static_or_home(
    path: str,
    request: Request,
    state: Annotated[AppState, Depends(get_state)],
    prefs: Annotated[Preferences, Depends(get_preferences)],
) -> HTMLResponse:
    """Known static pages by path; anything else falls back to the home page."""
    if path.startswith("api/"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    entry = STATIC_PAGES.get("/" + path.rstrip("/"))
    if entry is None:
        return html_page("Accueil", pages.home_body(), request, prefs, state)
    title, render = entry
    return html_page(title, render(), request, prefs, state)
