"""
Filter Engine Tests

Facet selection is one disjunction across every category; the search text
narrows the facet result further.
"""

import pytest

from libtech_directory.catalog.facets import UnknownFacetError
from libtech_directory.catalog.filters import FilterState, filter_records, matches_search
from libtech_directory.catalog.loader import parse_csv
from libtech_directory.catalog.schema import SchemaResolver

from samples import SCENARIO_CSV


def names(records):
    return [r.get("Nom") for r in records]


@pytest.fixture
def scenario():
    dataset = parse_csv(SCENARIO_CSV, "fr")
    return dataset, SchemaResolver(dataset.headers, "fr")


class TestFacetSelection:

    def test_single_token(self, scenario):
        dataset, resolver = scenario
        filters = FilterState()
        filters.toggle("Besoin", "Mobilité")
        assert names(filter_records(dataset.records, filters, "", resolver)) == ["Alpha", "Gamma"]

    def test_second_category_widens_the_result(self, scenario):
        dataset, resolver = scenario
        filters = FilterState()
        filters.toggle("Besoin", "Mobilité")
        filters.toggle("Technologie", "Robot")
        result = filter_records(dataset.records, filters, "", resolver)
        assert names(result) == ["Alpha", "Beta", "Gamma"]

    def test_no_selection_is_a_no_op(self, sample_dataset, sample_resolver):
        result = filter_records(sample_dataset.records, FilterState(), "", sample_resolver)
        assert result == sample_dataset.records

    def test_toggle_twice_deselects(self):
        filters = FilterState()
        assert filters.toggle("Prix", "Gratuit") is True
        assert filters.toggle("Prix", "Gratuit") is False
        assert not filters.is_active()

    def test_unknown_category_is_rejected(self):
        with pytest.raises(UnknownFacetError):
            FilterState().toggle("Couleur", "Rouge")
        with pytest.raises(UnknownFacetError):
            FilterState.from_pairs([("Couleur", "Rouge")])

    def test_tokens_match_inside_multi_value_cells(self, sample_dataset, sample_resolver):
        filters = FilterState.from_pairs([("Tranche d'âge", "Enfant")])
        result = filter_records(sample_dataset.records, filters, "", sample_resolver)
        assert names(result) == ["Beta", "écran Braille"]

    def test_tokens_are_case_sensitive(self, sample_dataset, sample_resolver):
        filters = FilterState.from_pairs([("Prix", "gratuit")])
        assert filter_records(sample_dataset.records, filters, "", sample_resolver) == []

    def test_token_absent_from_dataset_matches_nothing(self, sample_dataset, sample_resolver):
        filters = FilterState.from_pairs([("Localisation", "Suisse")])
        assert filter_records(sample_dataset.records, filters, "", sample_resolver) == []

    @pytest.mark.parametrize(
        "first, extra",
        [
            (("Besoin", "Vision"), ("Besoin", "Mobilité")),
            (("Besoin", "Vision"), ("Prix", "Gratuit")),
            (("Langue", "Anglais"), ("Localisation", "Belgique")),
            (("Handicap", "Moteur"), ("Handicap", "Auditif")),
        ],
    )
    def test_more_tokens_never_shrink_the_result(self, sample_dataset, sample_resolver, first, extra):
        filters = FilterState.from_pairs([first])
        before = filter_records(sample_dataset.records, filters, "", sample_resolver)
        filters.toggle(*extra)
        after = filter_records(sample_dataset.records, filters, "", sample_resolver)
        assert set(r.identifier for r in before) <= set(r.identifier for r in after)


class TestSearch:

    def test_short_queries_do_not_filter(self, sample_dataset, sample_resolver):
        for query in ("", " ", "r", " R "):
            result = filter_records(sample_dataset.records, FilterState(), query, sample_resolver)
            assert len(result) == len(sample_dataset)

    def test_substring_is_case_insensitive(self, sample_dataset, sample_resolver):
        result = filter_records(sample_dataset.records, FilterState(), "  FRANCE ", sample_resolver)
        assert names(result) == ["Beta", "Café Accessibilité"]

    def test_search_applies_after_facets(self, sample_dataset, sample_resolver):
        filters = FilterState.from_pairs([("Besoin", "Vision")])
        result = filter_records(sample_dataset.records, filters, "robot", sample_resolver)
        assert names(result) == ["Beta"]

    def test_search_alone(self, sample_dataset):
        record = sample_dataset.lookup("ecran-braille")
        assert matches_search(record, "tactile")
        assert not matches_search(record, "robot")
        assert matches_search(record, "x")

    def test_unaccented_query_finds_record_through_identifier(self):
        dataset = parse_csv("Nom,Prix\nCafé Accessibilité,Gratuit\n", "fr")
        resolver = SchemaResolver(dataset.headers, "fr")
        for query in ("cafe", "cafe-acc"):
            result = filter_records(dataset.records, FilterState(), query, resolver)
            assert names(result) == ["Café Accessibilité"]


class TestBlankTokens:

    def test_blank_token_is_ignored(self, sample_dataset, sample_resolver):
        filters = FilterState.from_pairs([("Besoin", ""), ("Prix", "  ")])
        assert not filters.is_active()
        assert filters.toggle("Besoin", "") is False
        assert not filters.is_active()
        result = filter_records(sample_dataset.records, filters, "", sample_resolver)
        assert len(result) == len(sample_dataset)

    def test_tokens_are_trimmed(self):
        filters = FilterState.from_pairs([("Prix", " Gratuit ")])
        assert filters.is_selected("Prix", "Gratuit")
