"""Unit tests for the tokenizer and analyzer pipeline."""

import pytest

from blog_search.search.analyzers import (
    AnalyzerPipeline,
    LowercaseFilter,
    PorterStemFilter,
    RegexTokenizer,
    StandardAnalyzer,
    StopFilter,
    Token,
    get_analyzer,
    tokenize,
)


def _terms(tokens):
    return [token.term for token in tokens]


class TestStandardAnalyzer:
    def test_splits_on_punctuation_and_lowercases(self):
        tokens = StandardAnalyzer()("Hello, World! foo_bar 42", "title")

        assert _terms(tokens) == ["hello", "world", "foo", "bar", "42"]
        assert [token.position for token in tokens] == [0, 1, 2, 3, 4]
        assert {token.field for token in tokens} == {"title"}

    def test_keeps_non_ascii_letters(self):
        assert _terms(StandardAnalyzer()("Øredev 2007")) == ["øredev", "2007"]

    def test_does_not_deduplicate(self):
        terms = _terms(StandardAnalyzer()("pytest fixtures and more fixtures"))

        assert terms.count("fixtures") == 2

    def test_only_punctuation_yields_nothing(self):
        assert StandardAnalyzer()("--- ... !!!") == []

    def test_records_character_offsets(self):
        token = StandardAnalyzer()("  Spring")[0]

        assert (token.start_char, token.end_char) == (2, 8)

    def test_english_profile_removes_stopwords_and_stems(self):
        tokens = get_analyzer("english")("The testing of mocks")

        assert _terms(tokens) == ["test", "mock"]
        assert [token.position for token in tokens] == [0, 1]


class TestPipeline:
    def test_filters_are_pluggable_stages(self):
        pipeline = AnalyzerPipeline(RegexTokenizer(), [LowercaseFilter(), StopFilter(["b"])])

        tokens = pipeline("A B C")

        assert _terms(tokens) == ["a", "c"]
        assert [token.position for token in tokens] == [0, 1]

    def test_stem_filter_leaves_short_words(self):
        stemmed = list(PorterStemFilter()([Token(term="is", field="", position=0)]))

        assert stemmed[0].term == "is"

    def test_token_copy_with_overrides_single_attribute(self):
        token = Token(term="x", field="title", position=3)

        assert token.copy_with(position=0) == Token(term="x", field="title", position=0)


class TestGetAnalyzer:
    def test_name_is_case_insensitive(self):
        assert _terms(get_analyzer("ENGLISH")("running tests")) == ["runn", "test"]

    def test_none_returns_default(self):
        assert _terms(get_analyzer(None)("The Tests")) == ["the", "tests"]

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown analyzer"):
            get_analyzer("klingon")


class TestTokenize:
    def test_none_is_empty(self):
        assert tokenize(None, "excerpt") == []

    def test_empty_string_is_empty(self):
        assert tokenize("", "excerpt") == []

    def test_sequence_positions_continue_across_elements(self):
        tokens = tokenize(["Spring Boot", "Java"], "tags")

        assert _terms(tokens) == ["spring", "boot", "java"]
        assert [token.position for token in tokens] == [0, 1, 2]
        assert {token.field for token in tokens} == {"tags"}

    def test_sequence_skips_none_elements(self):
        assert _terms(tokenize([None, "", "CloudFormation"], "tags")) == ["cloudformation"]

    def test_uses_supplied_analyzer(self):
        assert _terms(tokenize("the mocks", "excerpt", get_analyzer("english"))) == ["mock"]
