"""Query parsing: raw query text to term clauses.

Queries go through the same analyzer as the documents, so normalization is
symmetric. With prefix matching enabled a trailing ``*`` on a whitespace
delimited chunk turns that chunk's last term into a prefix clause.
"""

from __future__ import annotations

from dataclasses import dataclass

from blog_search.search.analyzers import Analyzer


QUERY_FIELD = "query"
_WILDCARD = "*"


@dataclass(frozen=True)
class QueryClause:
    """A single query term, optionally matched as a prefix."""

    term: str
    is_prefix: bool = False

    def __str__(self) -> str:
        return f"{self.term}{_WILDCARD}" if self.is_prefix else self.term


def parse_query(query: str | None, analyzer: Analyzer, *, prefix_match: bool = False) -> tuple[QueryClause, ...]:
    """Split ``query`` into de-duplicated clauses, in first-seen order.

    An exact clause is dropped when a prefix clause on the same term covers it.
    """

    if not query or not query.strip():
        return ()

    clauses: list[QueryClause] = []
    seen: set[QueryClause] = set()
    for chunk in query.split():
        wildcard = prefix_match and chunk.endswith(_WILDCARD)
        tokens = analyzer(chunk, QUERY_FIELD)
        for idx, token in enumerate(tokens):
            clause = QueryClause(term=token.term, is_prefix=wildcard and idx == len(tokens) - 1)
            if clause in seen:
                continue
            seen.add(clause)
            clauses.append(clause)

    prefixed = {clause.term for clause in clauses if clause.is_prefix}
    return tuple(clause for clause in clauses if clause.is_prefix or clause.term not in prefixed)
