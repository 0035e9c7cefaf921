"""Index construction for the blog corpus.

``build`` runs once per corpus snapshot: it validates the records into a
``DocumentStore``, analyzes every indexable field of every document and
assembles the inverted index plus the statistics the query engine scores
with. Per-document analysis is independent, so it can run on a thread pool;
results are always merged in corpus order, which keeps postings order,
term frequencies and document frequencies identical to a sequential build.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
import time
from types import MappingProxyType
from typing import Any

from blog_search.domain.model import Document
from blog_search.observability.metrics import BUILD_LATENCY, INDEX_DOC_COUNT, REJECTED_DOCUMENTS, track_latency
from blog_search.observability.tracing import create_span
from blog_search.search.analyzers import Analyzer, get_analyzer, tokenize
from blog_search.search.index import Index
from blog_search.search.models import Posting
from blog_search.search.schema import Schema, create_default_schema
from blog_search.search.stats import compute_field_length_stats
from blog_search.store import DocumentStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _DocumentAnalysis:
    """Terms of a single document, keyed by (term, field)."""

    doc_id: int
    field_lengths: Mapping[str, int]
    positions: Mapping[tuple[str, str], tuple[int, ...]]


def analyze_document(doc_id: int, document: Document, schema: Schema, analyzer: Analyzer) -> _DocumentAnalysis:
    """Tokenize every indexed field of one document."""

    field_lengths: dict[str, int] = {}
    positions: dict[tuple[str, str], list[int]] = defaultdict(list)
    for indexed_field in schema:
        tokens = tokenize(document.field_value(indexed_field.name), indexed_field.name, analyzer)
        field_lengths[indexed_field.name] = len(tokens)
        for token in tokens:
            positions[(token.term, indexed_field.name)].append(token.position)

    return _DocumentAnalysis(
        doc_id=doc_id,
        field_lengths=field_lengths,
        positions={key: tuple(value) for key, value in positions.items()},
    )


def build(
    documents: DocumentStore | Iterable[Any],
    *,
    schema: Schema | None = None,
    analyzer_name: str = "default",
    workers: int = 1,
) -> Index:
    """Build an immutable ``Index`` from a corpus.

    Args:
        documents: a ``DocumentStore`` or raw corpus records / ``Document`` values.
            Records without a ``url`` are rejected and reported on
            ``Index.report``; every other missing field indexes as empty.
        schema: indexed fields and boosts; defaults to the blog schema.
        analyzer_name: analyzer used for both documents and queries.
        workers: threads used for per-document analysis.
    """

    active_schema = schema or create_default_schema()
    analyzer = get_analyzer(analyzer_name)

    with create_span("index.build", attributes={"index.analyzer": analyzer_name, "index.workers": workers}) as span:
        with track_latency(BUILD_LATENCY, analyzer=analyzer_name):
            started = time.perf_counter()
            store = documents if isinstance(documents, DocumentStore) else DocumentStore.from_records(documents)
            for rejected in store.rejected:
                REJECTED_DOCUMENTS.labels(code=rejected.code).inc()

            analyses = _analyze_all(store, active_schema, analyzer, workers)
            index = _assemble(store, active_schema, analyzer_name, analyzer, analyses)

        span.set_attribute("index.documents", index.document_count)
        span.set_attribute("index.rejected", len(store.rejected))

    INDEX_DOC_COUNT.labels(analyzer=analyzer_name).set(index.document_count)
    logger.info(
        "Built index: %d documents, %d rejected, %d terms in %.1fms",
        index.document_count,
        len(store.rejected),
        len(index.vocabulary),
        (time.perf_counter() - started) * 1000,
    )
    return index


def _analyze_all(
    store: DocumentStore,
    schema: Schema,
    analyzer: Analyzer,
    workers: int,
) -> list[_DocumentAnalysis]:
    if workers <= 1 or len(store) <= 1:
        return [analyze_document(doc_id, document, schema, analyzer) for doc_id, document in store.items()]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # map() yields in submission order, i.e. corpus order
        futures = executor.map(
            lambda item: analyze_document(item[0], item[1], schema, analyzer),
            list(store.items()),
        )
        return list(futures)


def _assemble(
    store: DocumentStore,
    schema: Schema,
    analyzer_name: str,
    analyzer: Analyzer,
    analyses: list[_DocumentAnalysis],
) -> Index:
    postings: dict[str, list[Posting]] = defaultdict(list)
    docs_by_term: dict[str, set[int]] = defaultdict(set)
    field_lengths: dict[str, dict[int, int]] = {f.name: {} for f in schema}

    for analysis in sorted(analyses, key=lambda item: item.doc_id):
        for field_name, length in analysis.field_lengths.items():
            field_lengths[field_name][analysis.doc_id] = length
        # schema field order inside a document keeps postings ordering stable
        for (term, field_name), positions in sorted(
            analysis.positions.items(), key=lambda item: (item[0][0], schema.field_names.index(item[0][1]))
        ):
            postings[term].append(
                Posting(doc_id=analysis.doc_id, field=field_name, frequency=len(positions), positions=positions)
            )
            docs_by_term[term].add(analysis.doc_id)

    frozen_postings = {term: tuple(entries) for term, entries in postings.items()}
    frozen_lengths = {name: MappingProxyType(lengths) for name, lengths in field_lengths.items()}

    return Index(
        store=store,
        schema=schema,
        postings=MappingProxyType(frozen_postings),
        doc_freq=MappingProxyType({term: len(doc_ids) for term, doc_ids in docs_by_term.items()}),
        field_lengths=MappingProxyType(frozen_lengths),
        field_stats=MappingProxyType(compute_field_length_stats(field_lengths)),
        vocabulary=tuple(sorted(frozen_postings)),
        analyzer_name=analyzer_name,
        analyzer=analyzer,
    )
