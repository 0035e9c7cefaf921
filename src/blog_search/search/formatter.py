"""Map ranked results back to presentation records."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from blog_search.domain.search import ResultRecord, ScoredResult
from blog_search.search.snippet import truncate_excerpt
from blog_search.store import DocumentStore


logger = logging.getLogger(__name__)


def format_results(
    results: Iterable[ScoredResult],
    store: DocumentStore,
    *,
    snippet_length: int | None = None,
) -> list[ResultRecord]:
    """Attach title, excerpt, categories and tags to each ranked ``ref``.

    Order is preserved. A ``ref`` that is not in ``store`` is dropped.
    """

    records: list[ResultRecord] = []
    for result in results:
        document = store.get_by_url(result.ref)
        if document is None:
            logger.debug("Dropping result for unknown ref %s", result.ref)
            continue
        records.append(
            ResultRecord(
                url=document.url,
                title=document.title,
                excerpt=truncate_excerpt(document.excerpt, snippet_length),
                categories=list(document.categories),
                tags=list(document.tags),
                score=result.score,
            )
        )
    return records
