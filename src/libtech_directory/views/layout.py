"""
Page Shell

Common HTML frame for every page: navigation, visitor preferences and the
notice shown after a failed dataset load.
"""

from __future__ import annotations

from html import escape
from typing import Optional

from ..preferences import FONT_SIZE_CSS, FONT_SIZES, Preferences
from ..config import settings
from ..state import LoadNotice

NAV_ITEMS = (
    ("/", "Accueil"),
    ("/repertoire", "Répertoire"),
    ("/soumettre", "Soumettre"),
    ("/contact", "Contact"),
    ("/a-propos", "À propos"),
)

FOOTER_ITEMS = (
    ("/plan-du-site", "Plan du site"),
    ("/mentions-legales", "Mentions légales"),
    ("/confidentialite", "Confidentialité"),
)

FONT_LABELS = {"normal": "Normale", "large": "Grande", "x-large": "Très grande"}

STYLE = """
body { font-family: system-ui, sans-serif; margin: 0; color: #0f172a; }
header, footer { background: #315A77; color: #fff; padding: 12px 22px; }
header a, footer a { color: #fff; margin-right: 14px; }
a[aria-current="page"] { font-weight: 700; text-decoration: underline; }
.notice { background: #fee2e2; color: #7f1d1d; padding: 10px 22px; }
.page { padding: 22px; }
.grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(240px, 1fr)); gap: 16px; }
.card { border: 1px solid #cbd5e1; border-radius: 10px; padding: 14px; }
.repo-layout { display: grid; grid-template-columns: 260px 1fr; gap: 22px; }
.facet { margin-bottom: 18px; }
.facet form { display: inline; }
.opt { display: block; background: none; border: 0; padding: 2px 0; cursor: pointer; text-align: left; }
.pager { margin-top: 18px; display: flex; gap: 12px; align-items: center; }
.meta { color: #64748b; }
"""


def is_nav_active(href: str, path: str) -> bool:
    if href == "/repertoire":
        return path == "/repertoire" or path.startswith("/repertoire/")
    return href == path


def _nav(path: str) -> str:
    links = []
    for href, label in NAV_ITEMS:
        current = "page" if is_nav_active(href, path) else "false"
        links.append(f'<a href="{href}" data-nav aria-current="{current}">{escape(label)}</a>')
    return "".join(links)


def _preferences_form(prefs: Preferences, path: str) -> str:
    lang_opts = "".join(
        f'<option value="{escape(tag)}"{" selected" if tag == prefs.lang else ""}>{escape(tag.upper())}</option>'
        for tag in settings.locales
    )
    font_opts = "".join(
        f'<option value="{size}"{" selected" if size == prefs.font_size else ""}>{FONT_LABELS[size]}</option>'
        for size in FONT_SIZES
    )
    return f"""
      <form method="post" action="/preferences" class="prefs">
        <input type="hidden" name="next" value="{escape(path)}">
        <label>Langue <select id="lang" name="lang">{lang_opts}</select></label>
        <label>Taille du texte <select id="font" name="font_size">{font_opts}</select></label>
        <button type="submit">Appliquer</button>
      </form>"""


def render_page(
    title: str,
    body: str,
    *,
    path: str,
    prefs: Preferences,
    notice: Optional[LoadNotice] = None,
) -> str:
    """Wrap `body` (already escaped HTML) in the site frame."""
    banner = ""
    if notice is not None:
        banner = (
            '<div class="notice" role="alert">Erreur CSV : les données n\'ont pas pu être '
            "mises à jour. La dernière version chargée reste affichée.</div>"
        )
    body_class = "home" if path == "/" else ""
    footer = "".join(f'<a href="{href}">{escape(label)}</a>' for href, label in FOOTER_ITEMS)

    return f"""<!DOCTYPE html>
<html lang="{escape(prefs.lang)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)} · LibTech</title>
  <style>{STYLE}</style>
</head>
<body class="{body_class}" style="font-size:{FONT_SIZE_CSS[prefs.font_size]}">
  <header>
    <nav>{_nav(path)}</nav>
    {_preferences_form(prefs, path)}
  </header>
  {banner}
  <main id="page">{body}</main>
  <footer>{footer}</footer>
</body>
</html>"""
