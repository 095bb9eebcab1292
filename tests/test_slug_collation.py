import re

import pytest

from libtech_directory.catalog.collation import base_form, collation_key
from libtech_directory.catalog.slug import slugify

SLUG_SHAPE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def test_slug_strips_diacritics_and_spaces():
    assert slugify("Café Accessibilité") == "cafe-accessibilite"


@pytest.mark.parametrize(
    "value",
    [
        "Café Accessibilité",
        "  --Loupe électronique (v2)!-- ",
        "ÉCRAN   BRAILLE",
        "item-12",
        "Synthèse vocale / TTS",
    ],
)
def test_slug_is_idempotent_and_url_safe(value):
    once = slugify(value)
    assert slugify(once) == once
    assert SLUG_SHAPE.match(once)


def test_slug_of_empty_value():
    assert slugify("") == ""
    assert slugify(None) == ""


def test_base_form_ignores_case_and_accents():
    assert base_form("Écran") == base_form("ecran") == base_form("ECRAN")


def test_collation_orders_accented_names_with_their_base_letter():
    names = ["Zoom", "écran", "Beta", "Ecran", "alpha"]
    assert sorted(names, key=collation_key) == ["alpha", "Beta", "Ecran", "écran", "Zoom"]
