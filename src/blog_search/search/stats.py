"""Statistical helpers for TF-IDF style scoring.

The functions here stay independent of the index layout so they can be unit
tested on their own. Only monotonicity matters to callers: term weight grows
with term frequency, shrinks with field length, and rarer terms weigh more.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import math


# upper bound on doc_length / avg_doc_length
_MAX_LENGTH_RATIO = 4.0


@dataclass(frozen=True)
class FieldLengthStats:
    """Token totals of one field across the corpus."""

    field: str
    total_terms: int
    document_count: int

    @property
    def average_length(self) -> float:
        return self.total_terms / self.document_count if self.document_count else 0.0


def compute_field_length_stats(field_lengths: Mapping[str, Mapping[int, int]]) -> dict[str, FieldLengthStats]:
    """Summarize per-document field lengths, keyed by field name."""

    return {
        name: FieldLengthStats(name, sum(max(n, 0) for n in per_doc.values()), len(per_doc))
        for name, per_doc in field_lengths.items()
    }


def calculate_idf(doc_freq: int, total_docs: int, *, floor: float = 1e-3) -> float:
    """Return ``log(N / df)`` plus a small floor.

    A term present in every document scores just the floor, so it still ranks
    by field boost without contributing meaningfully to relevance.
    """

    if total_docs <= 0 or doc_freq <= 0:
        return 0.0
    df = min(doc_freq, total_docs)
    return math.log(total_docs / df) + floor


def bm25(tf: int, doc_length: int, avg_doc_length: float, *, k1: float = 1.2, b: float = 0.75) -> float:
    """Compute the saturating BM25 term weight without IDF.

    Increasing in ``tf``, non-increasing in ``doc_length``.
    """

    if tf <= 0:
        return 0.0
    length_ratio = min(doc_length / max(avg_doc_length, 1e-9), _MAX_LENGTH_RATIO)
    return tf * (k1 + 1) / (tf + k1 * (1 - b + b * length_ratio))


def coordination(matched_clauses: int, total_clauses: int, *, exponent: float = 2.0) -> float:
    """Return the matched-clause coordination factor in ``[0, 1]``."""

    if total_clauses <= 0 or matched_clauses <= 0:
        return 0.0
    return (min(matched_clauses, total_clauses) / total_clauses) ** exponent
