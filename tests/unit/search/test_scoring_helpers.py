"""Unit tests for schema, statistics and proximity helpers."""

import math

import pytest

from blog_search.search.phrase import MAX_PHRASE_BONUS, get_min_span, proximity_multiplier
from blog_search.search.schema import (
    DEFAULT_FIELD_BOOSTS,
    FieldType,
    ListField,
    Schema,
    TextField,
    create_default_schema,
)
from blog_search.search.stats import bm25, calculate_idf, compute_field_length_stats, coordination


class TestSchema:
    def test_default_schema_fields_and_boost_order(self):
        schema = create_default_schema()

        assert schema.field_names == ("title", "excerpt", "categories", "tags")
        assert schema.get_boost("title") > schema.get_boost("tags") == schema.get_boost("categories")
        assert schema.get_boost("categories") > schema.get_boost("excerpt")
        assert [f.name for f in schema.text_fields] == ["title", "excerpt"]

    def test_overrides_apply_to_known_fields_only(self):
        schema = create_default_schema()

        boosts = schema.boosts({"title": 9, "url": 100})

        assert boosts["title"] == 9.0
        assert "url" not in boosts
        assert boosts["excerpt"] == DEFAULT_FIELD_BOOSTS["excerpt"]

    def test_restrict_drops_unknown_and_keeps_schema_order(self):
        schema = create_default_schema()

        assert schema.restrict(["tags", "nope", "title"]) == ("title", "tags")
        assert schema.restrict(None) == schema.field_names
        assert schema.restrict(["nope"]) == ()

    def test_duplicate_field_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            Schema(fields=(TextField("title"), ListField("title")))

    def test_to_dict_reports_field_types(self):
        data = create_default_schema().to_dict()

        assert data["fields"][0] == {"name": "title", "type": FieldType.TEXT.value, "boost": 5.0}
        assert data["fields"][3]["type"] == FieldType.LIST.value

    def test_membership(self):
        schema = create_default_schema()

        assert "excerpt" in schema
        assert "teaser" not in schema
        assert len(schema) == 4


class TestStats:
    def test_idf_rarer_terms_weigh_more(self):
        assert calculate_idf(1, 40) > calculate_idf(10, 40) > calculate_idf(40, 40)

    def test_idf_term_in_every_document_is_near_zero(self):
        assert calculate_idf(40, 40) == pytest.approx(1e-3)
        assert calculate_idf(5, 5, floor=0.0) == 0.0

    def test_idf_degenerate_inputs(self):
        assert calculate_idf(0, 10) == 0.0
        assert calculate_idf(3, 0) == 0.0
        assert calculate_idf(2, 10, floor=0.0) == pytest.approx(math.log(5))

    def test_bm25_increases_with_term_frequency(self):
        assert bm25(1, 10, 10.0) < bm25(2, 10, 10.0) < bm25(5, 10, 10.0)

    def test_bm25_decreases_with_field_length(self):
        assert bm25(1, 2, 10.0) > bm25(1, 10, 10.0) > bm25(1, 30, 10.0)

    def test_bm25_saturates(self):
        assert bm25(1000, 10, 10.0, k1=1.2) < 1.2 + 1

    def test_bm25_zero_frequency(self):
        assert bm25(0, 10, 10.0) == 0.0

    def test_field_length_stats(self):
        stats = compute_field_length_stats({"title": {0: 2, 1: 4}, "tags": {}})

        assert stats["title"].average_length == 3.0
        assert stats["title"].total_terms == 6
        assert stats["tags"].average_length == 0.0

    def test_coordination(self):
        assert coordination(2, 2) == 1.0
        assert coordination(1, 2) == 0.25
        assert coordination(1, 2, exponent=1.0) == 0.5
        assert coordination(0, 2) == 0.0
        assert coordination(1, 0) == 0.0


class TestProximity:
    def test_adjacent_terms_span_equals_term_count(self):
        assert get_min_span({"0": [3], "1": [4]}) == 2

    def test_picks_tightest_window(self):
        assert get_min_span({"0": [0, 10], "1": [5, 11]}) == 2

    def test_missing_term_is_infinite(self):
        assert get_min_span({"0": [1], "1": []}) == float("inf")
        assert get_min_span({}) == float("inf")

    def test_single_term(self):
        assert get_min_span({"0": [7]}) == 1.0

    def test_shared_position_cannot_satisfy_two_terms(self):
        assert get_min_span({"0": [3], "1": [3]}) == float("inf")
        assert get_min_span({"0": [3, 8], "1": [3, 9]}) == 2

    def test_three_terms(self):
        assert get_min_span({"0": [0, 20], "1": [9, 21], "2": [5, 22]}) == 3

    def test_multiplier_range(self):
        assert proximity_multiplier(2, 2) == MAX_PHRASE_BONUS
        assert proximity_multiplier(6, 2) == 1.0
        assert 1.0 < proximity_multiplier(3, 2) < MAX_PHRASE_BONUS
        assert proximity_multiplier(float("inf"), 2) == 1.0
        assert proximity_multiplier(1, 1) == 1.0
