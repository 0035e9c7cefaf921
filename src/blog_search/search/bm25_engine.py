"""BM25F-style query evaluation over an ``Index`` snapshot.

Evaluation is a pure function of the index and the query:

1. parse the query into clauses with the index's analyzer
2. expand each clause to indexed terms and collect postings from the allowed
   fields; every document with at least one posting is a candidate
3. score each candidate as the sum over matched postings of
   ``bm25(tf, field_length) * idf(term) * boost(field)``, scaled by the
   matched-clause coordination factor and an optional proximity bonus
4. rank by score descending, ties by corpus order, then apply the limit
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass
import logging
import time

from blog_search.domain.search import ScoredResult, SearchOptions, SearchOutcome
from blog_search.observability.metrics import SEARCH_COUNT, SEARCH_LATENCY, track_latency
from blog_search.observability.tracing import create_span
from blog_search.search.index import Index
from blog_search.search.models import Posting
from blog_search.search.phrase import get_min_span, proximity_multiplier
from blog_search.search.query import QueryClause, parse_query
from blog_search.search.stats import bm25, calculate_idf, coordination


logger = logging.getLogger(__name__)

DEFAULT_MAX_PREFIX_EXPANSIONS = 50
_DEFAULT_OPTIONS = SearchOptions()


@dataclass(frozen=True)
class _Hit:
    clause_idx: int
    term: str
    posting: Posting
    idf: float


class BM25SearchEngine:
    """Score and rank documents of one index snapshot."""

    def __init__(
        self,
        index: Index,
        *,
        field_boosts: Mapping[str, float] | None = None,
        k1: float = 1.2,
        b: float = 0.75,
        coordination_exponent: float = 2.0,
        enable_phrase_bonus: bool = True,
        max_prefix_expansions: int = DEFAULT_MAX_PREFIX_EXPANSIONS,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.index = index
        self.field_boosts = index.schema.boosts(field_boosts)
        self.k1 = k1
        self.b = b
        self.coordination_exponent = coordination_exponent
        self.enable_phrase_bonus = enable_phrase_bonus
        self.max_prefix_expansions = max(1, max_prefix_expansions)
        self._clock = clock

    def search(self, query: str, options: SearchOptions | None = None) -> list[ScoredResult]:
        """Return ranked ``ScoredResult`` values for ``query``."""
        return self.run(query, options).results

    def run(self, query: str, options: SearchOptions | None = None) -> SearchOutcome:
        """Evaluate ``query`` and return results with scan bookkeeping."""

        opts = options or _DEFAULT_OPTIONS
        mode = "prefix" if opts.prefix_match else "exact"
        with create_span("search.query", attributes={"search.mode": mode}) as span:
            with track_latency(SEARCH_LATENCY, mode=mode):
                outcome = self._evaluate(query, opts)
            span.set_attribute("search.results", len(outcome.results))
            span.set_attribute("search.partial", outcome.partial)

        if outcome.partial:
            SEARCH_COUNT.labels(outcome="partial").inc()
            logger.warning(
                "Search budget exhausted after %d of %d candidates",
                outcome.scored_candidates,
                outcome.total_candidates,
            )
        else:
            SEARCH_COUNT.labels(outcome="hit" if outcome.results else "empty").inc()
        logger.debug("Query %r -> %d results (terms=%s)", query, len(outcome.results), outcome.terms)
        return outcome

    # --- pipeline stages --------------------------------------------------

    def _evaluate(self, query: str, opts: SearchOptions) -> SearchOutcome:
        started = self._clock()
        clauses = parse_query(query, self.index.analyzer, prefix_match=opts.prefix_match)
        fields = self.index.schema.restrict(opts.fields)
        if not clauses or not fields or self.index.document_count == 0:
            return SearchOutcome(results=[])

        boosts = dict(self.field_boosts)
        for name, weight in opts.boosts.items():
            if name in boosts:
                boosts[name] = float(weight)

        hits_by_doc, terms = self._collect_candidates(clauses, frozenset(fields))
        candidates = sorted(hits_by_doc)

        deadline = started + opts.timeout_ms / 1000.0 if opts.timeout_ms is not None else None
        scores: dict[int, float] = {}
        partial = False
        for position, doc_id in enumerate(candidates):
            if opts.max_candidates is not None and position >= opts.max_candidates:
                partial = True
                break
            if deadline is not None and position > 0 and self._clock() > deadline:
                partial = True
                break
            scores[doc_id] = self._score_document(doc_id, hits_by_doc[doc_id], len(clauses), boosts, fields)

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        if opts.limit is not None:
            ranked = ranked[: opts.limit]

        results = [ScoredResult(ref=self.index.store[doc_id].url, score=score) for doc_id, score in ranked]
        return SearchOutcome(
            results=results,
            terms=terms,
            total_candidates=len(candidates),
            scored_candidates=len(scores),
            partial=partial,
        )

    def _expand(self, clause: QueryClause) -> tuple[str, ...]:
        if clause.is_prefix:
            return self.index.prefix_terms(clause.term, limit=self.max_prefix_expansions)
        if clause.term in self.index.postings:
            return (clause.term,)
        return ()

    def _collect_candidates(
        self,
        clauses: tuple[QueryClause, ...],
        fields: frozenset[str],
    ) -> tuple[dict[int, list[_Hit]], list[str]]:
        total_docs = self.index.document_count
        hits_by_doc: dict[int, list[_Hit]] = defaultdict(list)
        matched_terms: list[str] = []

        for clause_idx, clause in enumerate(clauses):
            for term in self._expand(clause):
                idf = calculate_idf(self.index.document_frequency(term), total_docs)
                matched = False
                for posting in self.index.get_postings(term):
                    if posting.field not in fields:
                        continue
                    hits_by_doc[posting.doc_id].append(_Hit(clause_idx, term, posting, idf))
                    matched = True
                if matched and term not in matched_terms:
                    matched_terms.append(term)

        return hits_by_doc, matched_terms

    def _score_document(
        self,
        doc_id: int,
        hits: list[_Hit],
        clause_count: int,
        boosts: Mapping[str, float],
        fields: tuple[str, ...],
    ) -> float:
        score = 0.0
        for hit in _claimed(hits):
            field_name = hit.posting.field
            stats = self.index.field_stats.get(field_name)
            avg_length = stats.average_length if stats is not None else 0.0
            doc_length = self.index.field_length(field_name, doc_id) or hit.posting.frequency
            weight = bm25(hit.posting.frequency, doc_length, avg_length, k1=self.k1, b=self.b)
            score += weight * hit.idf * boosts.get(field_name, 1.0)

        matched_clauses = len({hit.clause_idx for hit in hits})
        score *= coordination(matched_clauses, clause_count, exponent=self.coordination_exponent)

        if self.enable_phrase_bonus and clause_count >= 2 and matched_clauses == clause_count:
            score *= self._phrase_multiplier(hits, clause_count, fields)
        return score

    def _phrase_multiplier(self, hits: list[_Hit], clause_count: int, fields: tuple[str, ...]) -> float:
        """Best proximity multiplier over the free-text fields of one document."""

        best = 1.0
        for text_field in self.index.schema.text_fields:
            if text_field.name not in fields:
                continue
            clause_positions: dict[str, list[int]] = defaultdict(list)
            for hit in _claimed(hits):
                if hit.posting.field == text_field.name:
                    clause_positions[str(hit.clause_idx)].extend(hit.posting.positions)
            if len(clause_positions) < clause_count:
                continue
            span = get_min_span({key: sorted(value) for key, value in clause_positions.items()})
            best = max(best, proximity_multiplier(span, clause_count))
        return best


def _claimed(hits: list[_Hit]) -> list[_Hit]:
    """Keep the first clause's hit for each (term, field) posting.

    Overlapping clauses (``spring spr*``) still each count as matched for
    coordination, but a posting is scored and positioned only once.
    """
    seen: set[tuple[str, str]] = set()
    claimed: list[_Hit] = []
    for hit in sorted(hits, key=lambda item: item.clause_idx):
        key = (hit.term, hit.posting.field)
        if key not in seen:
            seen.add(key)
            claimed.append(hit)
    return claimed
