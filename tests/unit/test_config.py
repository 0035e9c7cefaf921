"""Unit tests for environment-driven settings."""

from pathlib import Path

from pydantic import ValidationError
import pytest

from blog_search.config import Settings


pytestmark = pytest.mark.unit


def test_defaults():
    settings = Settings()

    assert settings.corpus_path is None
    assert settings.field_boosts() == {"title": 5.0, "tags": 2.0, "categories": 2.0, "excerpt": 1.0}
    assert settings.analyzer == "default"
    assert settings.build_workers == 1
    assert settings.search_defaults().limit is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BLOG_SEARCH_TITLE_BOOST", "8")
    monkeypatch.setenv("BLOG_SEARCH_DEFAULT_LIMIT", "5")
    monkeypatch.setenv("BLOG_SEARCH_ANALYZER", "english")
    monkeypatch.setenv("BLOG_SEARCH_CORPUS_PATH", "/tmp/lunr-store.js")
    monkeypatch.setenv("BLOG_SEARCH_PHRASE_BONUS", "false")

    settings = Settings()

    assert settings.title_boost == 8.0
    assert settings.search_defaults().limit == 5
    assert settings.analyzer == "english"
    assert settings.corpus_path == Path("/tmp/lunr-store.js")
    assert settings.phrase_bonus is False


def test_unrelated_variables_are_ignored(monkeypatch):
    monkeypatch.setenv("BLOG_SEARCH_SOMETHING_ELSE", "1")

    assert Settings().title_boost == 5.0


def test_title_must_outweigh_excerpt():
    with pytest.raises(ValidationError, match="TITLE_BOOST"):
        Settings(title_boost=1.0, excerpt_boost=1.0)


@pytest.mark.parametrize(
    "overrides",
    [{"bm25_b": 1.5}, {"tags_boost": -1}, {"build_workers": 0}, {"analyzer": "klingon"}, {"max_prefix_expansions": 0}],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)
