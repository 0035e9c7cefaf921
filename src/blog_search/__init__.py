"""blog-search: ranked full-text search over a blog post corpus.

Typical use::

    from blog_search import build, load_corpus, search

    index = build(load_corpus())
    results = search(index, "AWS Lambda")

``SearchService`` wraps the same operations around a swappable snapshot for
long-lived callers that rebuild when the corpus changes.
"""

from blog_search.domain.model import Document, MalformedDocumentError
from blog_search.domain.search import ResultRecord, ScoredResult, SearchOptions, SearchOutcome
from blog_search.search.formatter import format_results
from blog_search.search.index import BuildReport, Index
from blog_search.search.indexer import build
from blog_search.service_layer.search_service import NotBuiltError, SearchService, search
from blog_search.store import CorpusLoadError, DocumentStore, load_corpus


__all__ = [
    "BuildReport",
    "CorpusLoadError",
    "Document",
    "DocumentStore",
    "Index",
    "MalformedDocumentError",
    "NotBuiltError",
    "ResultRecord",
    "ScoredResult",
    "SearchOptions",
    "SearchOutcome",
    "SearchService",
    "build",
    "format_results",
    "load_corpus",
    "search",
]
