"""Unit tests for query parsing."""

from blog_search.search.analyzers import get_analyzer
from blog_search.search.query import QueryClause, parse_query


ANALYZER = get_analyzer("default")


def test_blank_queries_have_no_clauses():
    assert parse_query("", ANALYZER) == ()
    assert parse_query("   ", ANALYZER) == ()
    assert parse_query(None, ANALYZER) == ()
    assert parse_query("?!", ANALYZER) == ()


def test_clauses_are_normalized_like_documents():
    assert parse_query("AWS Lambda", ANALYZER) == (QueryClause("aws"), QueryClause("lambda"))


def test_punctuation_inside_a_word_splits_it():
    assert parse_query("Node.js", ANALYZER) == (QueryClause("node"), QueryClause("js"))


def test_repeated_words_collapse_to_one_clause():
    assert parse_query("spring Spring SPRING boot", ANALYZER) == (QueryClause("spring"), QueryClause("boot"))


def test_wildcard_ignored_without_prefix_match():
    assert parse_query("spr*", ANALYZER) == (QueryClause("spr"),)


def test_trailing_wildcard_marks_prefix_clause():
    clauses = parse_query("spring integ*", ANALYZER, prefix_match=True)

    assert clauses == (QueryClause("spring"), QueryClause("integ", is_prefix=True))
    assert str(clauses[1]) == "integ*"


def test_wildcard_applies_to_last_term_of_chunk_only():
    clauses = parse_query("node.j*", ANALYZER, prefix_match=True)

    assert clauses == (QueryClause("node"), QueryClause("j", is_prefix=True))


def test_prefix_clause_absorbs_exact_clause_on_same_term():
    assert parse_query("java java*", ANALYZER, prefix_match=True) == (QueryClause("java", is_prefix=True),)
    assert parse_query("java* java", ANALYZER, prefix_match=True) == (QueryClause("java", is_prefix=True),)


def test_exact_clause_kept_when_prefix_is_a_different_term():
    clauses = parse_query("spring spr*", ANALYZER, prefix_match=True)

    assert clauses == (QueryClause("spring"), QueryClause("spr", is_prefix=True))
