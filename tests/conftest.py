"""Shared test fixtures and configuration."""

import os

import pytest

from blog_search.search.indexer import build
from blog_search.store import load_corpus


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop BLOG_SEARCH_* variables so Settings always starts from defaults."""
    for key in list(os.environ):
        if key.upper().startswith("BLOG_SEARCH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(scope="session")
def corpus_records():
    """Raw records of the packaged blog corpus."""
    return load_corpus()


@pytest.fixture(scope="session")
def blog_index(corpus_records):
    """Index built once from the packaged corpus."""
    return build(corpus_records)


@pytest.fixture
def small_corpus():
    """Hand-written corpus with predictable term placement."""
    return [
        {
            "url": "/posts/alpha",
            "title": "Python Packaging",
            "excerpt": "Notes on wheels and sdists.",
            "categories": ["python"],
            "tags": ["packaging", "tools"],
        },
        {
            "url": "/posts/beta",
            "title": "Release Notes",
            "excerpt": "This release improves python packaging for everyone.",
            "categories": ["news"],
            "tags": ["release"],
        },
        {
            "url": "/posts/gamma",
            "title": "Testing Tools",
            "excerpt": "pytest fixtures and more fixtures",
            "categories": ["testing"],
            "tags": ["pytest", "tools"],
            "teaser": None,
        },
    ]
