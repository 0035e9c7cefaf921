"""Immutable index snapshot produced by the indexer.

An ``Index`` bundles the document store, the inverted index and the
per-document/per-corpus statistics. Nothing on it is mutated after the build
returns; a corpus change means building a new ``Index``.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
import hashlib
from types import MappingProxyType

import orjson

from blog_search.search.analyzers import Analyzer, get_analyzer
from blog_search.search.models import Posting
from blog_search.search.schema import Schema
from blog_search.search.stats import FieldLengthStats
from blog_search.store import DocumentStore


_EMPTY_MAPPING: Mapping = MappingProxyType({})


@dataclass(frozen=True)
class BuildReport:
    """Outcome of an index build."""

    documents_indexed: int
    documents_rejected: int
    errors: tuple[str, ...]
    term_count: int


@dataclass(frozen=True, eq=False)
class Index:
    """Read-only inverted index over one corpus snapshot."""

    store: DocumentStore
    schema: Schema
    postings: Mapping[str, tuple[Posting, ...]]
    doc_freq: Mapping[str, int]
    field_lengths: Mapping[str, Mapping[int, int]]
    field_stats: Mapping[str, FieldLengthStats]
    vocabulary: tuple[str, ...]
    analyzer_name: str = "default"
    analyzer: Analyzer = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.analyzer is None:
            object.__setattr__(self, "analyzer", get_analyzer(self.analyzer_name))

    @property
    def document_count(self) -> int:
        return len(self.store)

    @property
    def report(self) -> BuildReport:
        return BuildReport(
            documents_indexed=len(self.store),
            documents_rejected=len(self.store.rejected),
            errors=tuple(str(exc) for exc in self.store.rejected),
            term_count=len(self.vocabulary),
        )

    def get_postings(self, term: str) -> tuple[Posting, ...]:
        return self.postings.get(term, ())

    def document_frequency(self, term: str) -> int:
        return self.doc_freq.get(term, 0)

    def field_length(self, field_name: str, doc_id: int) -> int:
        return self.field_lengths.get(field_name, _EMPTY_MAPPING).get(doc_id, 0)

    def prefix_terms(self, prefix: str, limit: int | None = None) -> tuple[str, ...]:
        """Return indexed terms starting with ``prefix`` in lexical order."""
        if not prefix:
            return ()
        matches: list[str] = []
        start = bisect_left(self.vocabulary, prefix)
        for term in self.vocabulary[start:]:
            if not term.startswith(prefix):
                break
            matches.append(term)
            if limit is not None and len(matches) >= limit:
                break
        return tuple(matches)

    @cached_property
    def fingerprint(self) -> str:
        """Deterministic digest of postings and statistics.

        Two builds of the same corpus with the same schema and analyzer produce
        the same fingerprint.
        """
        payload = {
            "analyzer": self.analyzer_name,
            "schema": self.schema.to_dict(),
            "documents": [document.url for document in self.store],
            "postings": {term: [p.to_dict() for p in postings] for term, postings in self.postings.items()},
            "field_lengths": {name: dict(lengths) for name, lengths in self.field_lengths.items()},
            "doc_freq": dict(self.doc_freq),
        }
        serialized = orjson.dumps(payload, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS)
        return hashlib.sha256(serialized).hexdigest()
