"""Domain layer - documents and search value objects.

No dependencies on the index or on infrastructure; everything here is plain
validated data.
"""

from blog_search.domain.model import Document, MalformedDocumentError
from blog_search.domain.search import ResultRecord, ScoredResult, SearchOptions, SearchOutcome


__all__ = [
    "Document",
    "MalformedDocumentError",
    "ResultRecord",
    "ScoredResult",
    "SearchOptions",
    "SearchOutcome",
]
