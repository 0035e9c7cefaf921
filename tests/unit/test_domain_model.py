"""Unit tests for the document model and search value objects."""

from pydantic import ValidationError
import pytest

from blog_search.domain import Document, MalformedDocumentError, ScoredResult, SearchOptions


pytestmark = pytest.mark.unit


class TestDocument:
    def test_from_record_applies_defaults(self):
        document = Document.from_record({"url": "/p"})

        assert document.title == ""
        assert document.excerpt == ""
        assert document.categories == ()
        assert document.tags == ()
        assert document.teaser is None

    def test_from_record_keeps_teaser_unindexed(self):
        document = Document.from_record({"url": "/p", "teaser": {"image": "x.png"}})

        assert document.teaser == {"image": "x.png"}
        assert document.field_value("teaser") is None

    def test_list_fields_are_coerced(self):
        document = Document.from_record({"url": "/p", "tags": "AWS", "categories": ["cloud", 3, None]})

        assert document.tags == ("AWS",)
        assert document.categories == ("cloud", "3")

    def test_scalar_text_is_coerced(self):
        assert Document.from_record({"url": "/p", "title": 2007}).title == "2007"

    @pytest.mark.parametrize("record", [{}, {"url": ""}, {"url": "  "}, {"url": None}, {"url": 12}])
    def test_missing_or_blank_url_is_malformed(self, record):
        with pytest.raises(MalformedDocumentError) as exc_info:
            Document.from_record(record, position=4)

        assert exc_info.value.code == "missing_url"
        assert exc_info.value.position == 4
        assert str(exc_info.value) == "record 4: missing url"

    def test_non_mapping_is_malformed(self):
        with pytest.raises(MalformedDocumentError) as exc_info:
            Document.from_record(["url", "/p"])

        assert exc_info.value.code == "not_an_object"
        assert isinstance(exc_info.value, ValueError)

    def test_direct_construction_rejects_blank_url(self):
        with pytest.raises((ValidationError, ValueError)):
            Document(url="   ")

    def test_identity_is_url(self):
        first = Document(url="/p", title="One")
        second = Document(url="/p", title="Two")

        assert first == second
        assert len({first, second}) == 1

    def test_to_dict_round_trips_fields(self):
        record = {"url": "/p", "title": "T", "excerpt": "E", "categories": ["c"], "tags": ["t"], "teaser": None}

        assert Document.from_record(record).to_dict() == record


class TestSearchOptions:
    def test_defaults(self):
        options = SearchOptions()

        assert options.fields is None
        assert options.boosts == {}
        assert options.limit is None
        assert options.prefix_match is False

    def test_fields_accept_any_iterable(self):
        assert SearchOptions(fields=["title", "tags"]).fields == frozenset({"title", "tags"})

    @pytest.mark.parametrize(
        "kwargs",
        [{"limit": -1}, {"boosts": {"title": -1.0}}, {"timeout_ms": 0}, {"max_candidates": 0}],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            SearchOptions(**kwargs)

    def test_options_are_frozen(self):
        options = SearchOptions()

        with pytest.raises(ValidationError):
            options.limit = 3  # type: ignore[misc]


def test_scored_result_equality():
    assert ScoredResult(ref="/a", score=1.5) == ScoredResult(ref="/a", score=1.5)
