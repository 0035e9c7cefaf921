"""Search service orchestration layer.

Owns the current index snapshot and its lifecycle: build, many queries,
optional rebuild-and-swap. A rebuild runs to completion before the new
snapshot replaces the old one, so queries never observe a half-built index
and a failed rebuild leaves the previous snapshot serving.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import logging
from pathlib import Path
import threading
from typing import Any

from blog_search.config import Settings
from blog_search.domain.search import ResultRecord, ScoredResult, SearchOptions, SearchOutcome
from blog_search.search.bm25_engine import BM25SearchEngine
from blog_search.search.formatter import format_results
from blog_search.search.index import BuildReport, Index
from blog_search.search.indexer import build
from blog_search.store import DocumentStore, load_corpus


logger = logging.getLogger(__name__)


class NotBuiltError(RuntimeError):
    """Raised when a query is issued before any index was successfully built."""


def create_engine(index: Index, settings: Settings | None = None) -> BM25SearchEngine:
    """Create a query engine for ``index`` using the configured ranking constants."""

    active = settings or Settings()
    return BM25SearchEngine(
        index,
        field_boosts=active.field_boosts(),
        k1=active.bm25_k1,
        b=active.bm25_b,
        coordination_exponent=active.coordination_exponent,
        enable_phrase_bonus=active.phrase_bonus,
        max_prefix_expansions=active.max_prefix_expansions,
    )


def search(
    index: Index | None,
    query: str,
    options: SearchOptions | None = None,
    *,
    settings: Settings | None = None,
) -> list[ScoredResult]:
    """Evaluate ``query`` against an explicit ``index`` value.

    Raises:
        NotBuiltError: ``index`` is ``None``, i.e. no build has succeeded.
    """

    if index is None:
        raise NotBuiltError("search() requires a built index; call build() first")
    return create_engine(index, settings).search(query, options)


@dataclass(frozen=True)
class _Snapshot:
    index: Index
    engine: BM25SearchEngine


class SearchService:
    """High-level search API over a swappable index snapshot.

    Queries read the snapshot reference once, so a query that started before
    a rebuild finishes against the snapshot it started with.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._lock = threading.Lock()
        self._snapshot: _Snapshot | None = None

    @property
    def is_built(self) -> bool:
        return self._snapshot is not None

    @property
    def index(self) -> Index:
        return self._require_snapshot().index

    @property
    def report(self) -> BuildReport:
        return self._require_snapshot().index.report

    def build(self, corpus: DocumentStore | Iterable[Any] | Path | str | None = None) -> Index:
        """Build a new snapshot and make it current.

        Args:
            corpus: records, a ``DocumentStore``, or a corpus file path.
                ``None`` loads ``settings.corpus_path`` (the packaged corpus
                when unset).

        Any exception propagates and the previous snapshot stays in place.
        """

        records: DocumentStore | Iterable[Any]
        if corpus is None or isinstance(corpus, (str, Path)):
            records = load_corpus(corpus if corpus is not None else self.settings.corpus_path)
        else:
            records = corpus

        index = build(records, analyzer_name=self.settings.analyzer, workers=self.settings.build_workers)
        snapshot = _Snapshot(index=index, engine=create_engine(index, self.settings))

        with self._lock:
            previous = self._snapshot
            self._snapshot = snapshot

        if previous is not None:
            logger.info(
                "Swapped index snapshot %s -> %s",
                previous.index.fingerprint[:12],
                index.fingerprint[:12],
            )
        return index

    def rebuild(self, corpus: DocumentStore | Iterable[Any] | Path | str | None = None) -> Index:
        """Rebuild from a (possibly changed) corpus; alias of :meth:`build`."""
        return self.build(corpus)

    def search(self, query: str, options: SearchOptions | None = None) -> list[ScoredResult]:
        """Return ranked results for ``query`` from the current snapshot."""
        return self.execute(query, options).results

    def execute(self, query: str, options: SearchOptions | None = None) -> SearchOutcome:
        """Evaluate ``query`` and return results with candidate-scan bookkeeping."""

        snapshot = self._require_snapshot()
        return snapshot.engine.run(query, options or self.settings.search_defaults())

    run_query = execute

    def format(
        self,
        results: Sequence[ScoredResult],
        *,
        snippet_length: int | None = None,
    ) -> list[ResultRecord]:
        """Map ranked results to presentation records of the current snapshot."""

        length = snippet_length if snippet_length is not None else self.settings.snippet_length
        return format_results(results, self._require_snapshot().index.store, snippet_length=length)

    def _require_snapshot(self) -> _Snapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise NotBuiltError("No index has been built yet; call SearchService.build() first")
        return snapshot
