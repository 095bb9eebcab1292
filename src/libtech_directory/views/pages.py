"""
Page Bodies

HTML fragments for each route. Everything interpolated from the dataset goes
through `html.escape`. These functions only render; they never filter or
mutate state.
"""

from __future__ import annotations

import re
from html import escape
from typing import Dict, List, Optional

from ..catalog.facets import FACETS, visible_tokens
from ..catalog.models import Dataset, Record
from ..catalog.pagination import Page
from ..catalog.schema import SchemaResolver
from ..sessions.store import BrowseState

DESCRIPTION_PREVIEW = 140

_URL = re.compile(r"^(https?:)?//", re.IGNORECASE)
_IMAGE = re.compile(r"\.(png|jpe?g|gif|webp|bmp|svg)(\?.*)?$", re.IGNORECASE)


def is_url(value: str) -> bool:
    return bool(_URL.match(str(value or "")))


def is_image(value: str) -> bool:
    return bool(_IMAGE.search(str(value or "")))


def truncate(text: str, limit: int = DESCRIPTION_PREVIEW) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].strip() + "…"


def count_label(total: int) -> str:
    return "1 élément" if total == 1 else f"{total} éléments"


# ---------------------------------------------------------------------
# Home
# ---------------------------------------------------------------------

def home_body() -> str:
    return """
      <section class="page">
        <div class="home-hero">
          <h2>LIBTECH — Répertoire des technologies accessibles</h2>
          <p>Recherchez une techno, un besoin, une langue…</p>
          <form action="/repertoire" method="get" class="search-wrap" role="search">
            <input id="homeSearchInput" name="q" type="search"
                   placeholder="Rechercher… (min 2 caractères)" autocomplete="off" autofocus>
            <button class="btn" type="submit">Rechercher</button>
          </form>
        </div>
      </section>"""


# ---------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------

def card(record: Record, resolver: SchemaResolver) -> str:
    name = resolver.name_of(record) or "(sans nom)"
    description = truncate(resolver.value(record, "description"))
    ident = escape(record.identifier)
    desc_html = escape(description) if description else '<span class="meta">Pas de description</span>'
    return f"""
      <article class="card" data-slug="{ident}">
        <div class="title"><em><strong>{escape(name)}</strong></em></div>
        <div class="desc">{desc_html} <a href="/repertoire/{ident}">Voir plus…</a></div>
      </article>"""


def facet_blocks(index: Dict[str, List[str]], browse: BrowseState, limit: int) -> str:
    blocks = []
    for facet in FACETS:
        label = facet.label
        expanded = label in browse.expanded
        tokens, has_more = visible_tokens(index.get(label, []), expanded, limit)

        opts = []
        for token in tokens:
            mark = "☑" if browse.filters.is_selected(label, token) else "☐"
            opts.append(
                f'<form method="post" action="/repertoire/filtres">'
                f'<input type="hidden" name="facet" value="{escape(label)}">'
                f'<button class="opt" name="value" value="{escape(token)}">{mark} {escape(token)}</button>'
                f"</form>"
            )
        opts_html = "".join(opts) or '<div class="opt">(aucun)</div>'

        toggle = ""
        if has_more:
            text = "Voir moins" if expanded else "Voir plus"
            toggle = (
                f'<form method="post" action="/repertoire/filtres/affichage">'
                f'<input type="hidden" name="facet" value="{escape(label)}">'
                f'<button class="see-more">{text}</button></form>'
            )
        blocks.append(f'<div class="facet"><h4>{escape(label)}</h4>{opts_html}{toggle}</div>')

    clear = ""
    if browse.filters.is_active():
        clear = (
            '<form method="post" action="/repertoire/filtres/effacer">'
            '<button class="btn">Effacer les filtres</button></form>'
        )
    return "".join(blocks) + clear


def pager(page: Page) -> str:
    def _link(target: int, text: str, enabled: bool) -> str:
        if not enabled:
            return f'<span class="btn" aria-disabled="true">{text}</span>'
        return f'<a class="btn" href="/repertoire?page={target}">{text}</a>'

    return (
        '<nav class="pager" aria-label="Pagination">'
        f"{_link(page.page - 1, '← Précédent', page.has_previous)}"
        f"<span>Page {page.page} / {page.total_pages}</span>"
        f"{_link(page.page + 1, 'Suivant →', page.has_next)}"
        "</nav>"
    )


def directory_body(
    page: Page,
    resolver: SchemaResolver,
    facet_index: Dict[str, List[str]],
    browse: BrowseState,
    preview_limit: int,
) -> str:
    cards = "".join(card(r, resolver) for r in page.items) or '<div class="meta">Aucun résultat.</div>'
    return f"""
      <section class="page">
        <div class="repo-topbar">
          <form action="/repertoire" method="get" role="search">
            <input id="q" name="q" type="search" value="{escape(browse.query)}"
                   placeholder="Rechercher… (min 2 caractères)">
            <button class="btn" type="submit">Rechercher</button>
          </form>
          <span class="pill" id="count" aria-live="polite">{count_label(page.total_items)}</span>
        </div>
        <div class="repo-layout">
          <aside class="sidebar" id="facetRoot" aria-label="Filtres">
            {facet_blocks(facet_index, browse, preview_limit)}
          </aside>
          <div>
            <div class="grid" id="gridRoot">{cards}</div>
            {pager(page)}
          </div>
        </div>
      </section>"""


# ---------------------------------------------------------------------
# Detail
# ---------------------------------------------------------------------

BACK_LINK = '<p><a class="btn" href="/repertoire">← Retour au répertoire</a></p>'


def not_found_body() -> str:
    return f'<section class="page"><p>Élément introuvable.</p>{BACK_LINK}</section>'


def _image_url(record: Record, resolver: SchemaResolver, dataset: Dataset) -> str:
    url = resolver.value(record, "image")
    if is_url(url) and is_image(url):
        return url
    for header in dataset.headers:
        candidate = record.get(header).strip()
        if is_url(candidate) and is_image(candidate):
            return candidate
    return ""


def detail_body(record: Record, resolver: SchemaResolver, dataset: Dataset) -> str:
    name = resolver.name_of(record) or "(sans nom)"
    disability = resolver.value(record, "disability")
    needs = resolver.value(record, "needs")
    description = resolver.value(record, "description")

    image_url = _image_url(record, resolver, dataset)
    if image_url and is_url(image_url) and is_image(image_url):
        image_html = f'<img src="{escape(image_url)}" alt="image">'
    else:
        image_html = "<span>Image</span>"
    caption = resolver.value(record, "image_caption")

    facts = []
    site = resolver.value(record, "website")
    if site:
        facts.append(
            f'<dt>Site</dt><dd><a href="{escape(site)}" target="_blank" '
            f'rel="noopener noreferrer">{escape(site)}</a></dd>'
        )
    for key, title in (
        ("location", "Localisation"),
        ("langs", "Langue"),
        ("date", "Date"),
        ("structure", "Structure"),
    ):
        value = resolver.value(record, key)
        if value:
            facts.append(f"<dt>{title}</dt><dd>{escape(value)}</dd>")

    return f"""
      <section class="page article">
        <div class="sheet">
          <div class="left">
            <div class="title">{escape(name)}</div>
            <div class="line">
              <div><span class="label">Handicap :</span> {escape(disability)}</div>
              <div><span class="label">Besoin :</span> {escape(needs)}</div>
            </div>
            <div class="desc">
              <h4>Description</h4>
              <div class="descbox">{escape(description) if description else "Pas de description"}</div>
            </div>
          </div>
          <div class="right">
            <div class="imagebox">{image_html}</div>
            <div class="imgcap">{escape(caption)}</div>
            <dl>{"".join(facts)}</dl>
            {BACK_LINK}
          </div>
        </div>
      </section>"""


# ---------------------------------------------------------------------
# Static pages
# ---------------------------------------------------------------------

def contact_body() -> str:
    return """
      <section class="page article">
        <div class="hero"><h2>Contact</h2></div>
        <div class="section">
          <p>Une question sur LibTech, une suggestion de technologie d'assistance ou une
          correction à proposer ? Écrivez-nous, nous serons ravis d'échanger avec vous.</p>
          <a class="btn" href="mailto:promom2sc@gmail.com">Nous écrire</a>
        </div>
      </section>"""


def about_body() -> str:
    return """
      <section class="page article">
        <div class="hero"><h2>À propos</h2></div>
        <div class="section">
          <p>LibTech est une plateforme collaborative dédiée aux technologies d'assistance,
          développée dans le cadre du Master TECH de l'Université de Bordeaux. Elle vise à
          rendre plus accessibles les solutions d'assistance existantes en proposant un
          répertoire clair, actualisé et pensé pour tous.</p>
          <h3>Mission</h3>
          <p>Faciliter l'accès à l'information sur les technologies d'assistance en proposant
          un répertoire structuré, fiable et simple à explorer.</p>
          <h3>Vision</h3>
          <p>Construire une ressource vivante et évolutive, améliorée chaque année par les
          nouvelles promotions du Master TECH.</p>
        </div>
      </section>"""


def submission_body(confirmed: bool = False, missing: Optional[List[str]] = None) -> str:
    """
    Submission form. Nothing is stored: a valid submission only shows the
    confirmation and an empty form again.
    """
    message = ""
    if confirmed:
        message = (
            '<div id="soumettreModal" class="modal" role="status"><div class="modal-box">'
            "<p><strong>Merci ! Votre technologie a bien été soumise.<br>"
            "L'équipe LibTech vous contactera si nécessaire.</strong></p>"
            '<a class="btn" href="/soumettre">Fermer</a></div></div>'
        )
    elif missing:
        fields = ", ".join(escape(name) for name in missing)
        message = f'<div class="notice" role="alert">Champs obligatoires manquants : {fields}</div>'

    return f"""
      <section class="page article">
        <div class="hero"><h2>Soumettre une technologie</h2></div>
        {message}
        <form id="soumettreForm" method="post" action="/soumettre" class="section soumettre-form">
          <h3>Informations sur la technologie</h3>
          <label>Nom de la technologie <input name="techname" type="text" required></label>
          <label>Brève description <textarea name="description" required></textarea></label>
          <label>Lien du produit / site web <input name="url" type="url" required></label>
          <label>Catégorie (facultatif) <input name="category" type="text"></label>
          <h3>Informations sur l'auteur</h3>
          <label>Nom / Prénom <input name="author" type="text" required></label>
          <label>Email <input name="email" type="email" required></label>
          <label class="checkbox-row"><input type="checkbox" name="privacy" required>
            <span>J'accepte la politique de confidentialité</span></label>
          <div class="submit-row"><button class="btn submit-btn" type="submit">Envoyer</button></div>
        </form>
      </section>"""


def placeholder_body(title: str) -> str:
    return (
        f'<section class="page article"><div class="hero"><h2>{escape(title)}</h2></div>'
        '<div class="section"><p>(Contenu à compléter.)</p></div></section>'
    )
