import pytest

from libtech_directory.catalog.facets import (
    FACET_LABELS,
    UnknownFacetError,
    build_facet_index,
    get_facet,
    split_tokens,
    visible_tokens,
)
from libtech_directory.catalog.loader import parse_csv
from libtech_directory.catalog.pagination import paginate
from libtech_directory.catalog.schema import SchemaResolver


# ---------------------------------------------------------------------
# Facet index
# ---------------------------------------------------------------------

def test_every_category_is_present(sample_dataset, sample_resolver):
    index = build_facet_index(sample_dataset.records, sample_resolver)
    assert list(index) == list(FACET_LABELS)


def test_tokens_are_distinct_trimmed_and_sorted(sample_dataset, sample_resolver):
    index = build_facet_index(sample_dataset.records, sample_resolver)
    assert index["Besoin"] == ["Mobilité", "Vision"]
    assert index["Langue"] == ["Anglais", "Français"]
    assert index["Tranche d'âge"] == ["Adulte", "Enfant"]
    assert index["Localisation"] == ["Belgique", "Canada", "France"]


def test_unresolved_category_has_no_tokens():
    dataset = parse_csv("Nom,Prix\nLoupe,Gratuit\n", "fr")
    index = build_facet_index(dataset.records, SchemaResolver(dataset.headers, "fr"))
    assert index["Prix"] == ["Gratuit"]
    assert index["Handicap"] == []


def test_index_order_is_stable(sample_dataset, sample_resolver):
    first = build_facet_index(sample_dataset.records, sample_resolver)
    second = build_facet_index(list(reversed(sample_dataset.records)), sample_resolver)
    assert first == second


def test_split_tokens_drops_empty_pieces():
    assert split_tokens(" Vision, ,Audition ,") == ["Vision", "Audition"]


def test_get_facet():
    assert get_facet("Langue").key == "langs"
    with pytest.raises(UnknownFacetError):
        get_facet("Language")


def test_visible_tokens_preview_and_expand():
    tokens = [f"t{i}" for i in range(8)]
    shown, has_more = visible_tokens(tokens, expanded=False, limit=5)
    assert shown == tokens[:5] and has_more
    shown, has_more = visible_tokens(tokens, expanded=True, limit=5)
    assert shown == tokens and has_more
    shown, has_more = visible_tokens(tokens[:5], expanded=False, limit=5)
    assert shown == tokens[:5] and not has_more


# ---------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------

def test_twenty_five_items_make_three_pages():
    items = list(range(25))
    sizes = [len(paginate(items, page, 12).items) for page in (1, 2, 3)]
    assert sizes == [12, 12, 1]
    assert paginate(items, 1, 12).total_pages == 3


def test_requested_page_is_clamped():
    items = list(range(25))
    assert paginate(items, 5, 12).page == 3
    assert paginate(items, 0, 12).page == 1
    assert paginate(items, -4, 12).items == items[:12]


@pytest.mark.parametrize("total, size", [(0, 12), (1, 12), (12, 12), (13, 12), (40, 7)])
def test_pages_cover_the_list_exactly_once(total, size):
    items = list(range(total))
    first = paginate(items, 1, size)
    pages = [paginate(items, n, size).items for n in range(1, first.total_pages + 1)]
    assert [x for page in pages for x in page] == items


def test_empty_list_has_one_empty_page():
    page = paginate([], 3, 12)
    assert page.page == 1
    assert page.total_pages == 1
    assert page.items == []
    assert not page.has_previous and not page.has_next


def test_navigation_flags():
    items = list(range(25))
    assert not paginate(items, 1, 12).has_previous
    assert paginate(items, 1, 12).has_next
    assert paginate(items, 3, 12).has_previous
    assert not paginate(items, 3, 12).has_next


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        paginate([1, 2], 1, 0)
