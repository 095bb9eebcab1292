"""
Visitor Preferences

Two values survive between visits: the interface language and the font size.
They are kept in long-lived cookies, read on every request and written when
the visitor changes them. Unknown values silently fall back to defaults.

The language tag doubles as the locale used to pick localized columns
(`Nom_fr`, `Nom_en`, ...).
"""

from __future__ import annotations

from typing import Literal, Mapping, Optional

from fastapi import Response
from pydantic import BaseModel, ConfigDict

from .config import settings

LANG_COOKIE = "libtech_lang"
FONT_COOKIE = "libtech_font"
COOKIE_MAX_AGE = 365 * 24 * 3600

FontSize = Literal["normal", "large", "x-large"]
FONT_SIZES = ("normal", "large", "x-large")

FONT_SIZE_CSS = {
    "normal": "100%",
    "large": "120%",
    "x-large": "140%",
}


class Preferences(BaseModel):
    lang: str
    font_size: FontSize = "normal"

    model_config = ConfigDict(frozen=True, extra="forbid")


def normalize_lang(value: Optional[str]) -> str:
    tag = str(value or "").strip().lower()
    return tag if tag in settings.locales else settings.default_locale


def normalize_font_size(value: Optional[str]) -> FontSize:
    size = str(value or "").strip().lower()
    return size if size in FONT_SIZES else "normal"  # type: ignore[return-value]


def read_preferences(cookies: Mapping[str, str]) -> Preferences:
    return Preferences(
        lang=normalize_lang(cookies.get(LANG_COOKIE)),
        font_size=normalize_font_size(cookies.get(FONT_COOKIE)),
    )


def write_preferences(response: Response, prefs: Preferences) -> None:
    response.set_cookie(LANG_COOKIE, prefs.lang, max_age=COOKIE_MAX_AGE, samesite="lax")
    response.set_cookie(FONT_COOKIE, prefs.font_size, max_age=COOKIE_MAX_AGE, samesite="lax")
