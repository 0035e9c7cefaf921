"""Command line front end: query the blog corpus from a terminal.

Builds the index from the packaged corpus (or ``--corpus``), runs one query
and prints the ranked results as text or JSON.
"""

# ruff: noqa: T201  # CLI intentionally prints results

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path
import sys
import textwrap

import orjson
from pydantic import ValidationError

from blog_search.config import Settings
from blog_search.domain.search import ResultRecord, SearchOptions
from blog_search.observability.logging import configure_logging
from blog_search.observability.metrics import get_metrics
from blog_search.search.schema import DEFAULT_FIELD_BOOSTS
from blog_search.service_layer.search_service import SearchService
from blog_search.store import CorpusLoadError


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blog-search",
        description="Full-text search over the blog post corpus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """
            Examples:
              blog-search spring
              blog-search "AWS Lambda" --limit 5
              blog-search gradle --field title
              blog-search "integ*" --prefix --json
              blog-search docker --corpus ./assets/js/lunr/lunr-store.js
            """
        ).strip(),
    )
    parser.add_argument("query", help="Free-text query")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of results (default: all)")
    parser.add_argument(
        "--field",
        dest="fields",
        action="append",
        default=None,
        metavar="FIELD",
        help=f"Restrict matching to a field; pass multiple times ({', '.join(DEFAULT_FIELD_BOOSTS)})",
    )
    parser.add_argument(
        "--prefix",
        action="store_true",
        help="Treat a trailing '*' on a query word as a prefix match",
    )
    parser.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="Corpus file: JSON array or lunr-store.js (default: packaged posts)",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument(
        "--snippet-length",
        type=int,
        default=None,
        help="Truncate excerpts to this many characters",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus metrics after the results",
    )
    return parser


def _render_text(records: Sequence[ResultRecord]) -> str:
    if not records:
        return "No results."
    lines: list[str] = []
    for rank, record in enumerate(records, start=1):
        lines.append(f"{rank:>2}. {record.title or record.url}  [{record.score:.3f}]")
        lines.append(f"    {record.url}")
        if record.tags:
            lines.append(f"    tags: {', '.join(record.tags)}")
        if record.excerpt:
            lines.append(f"    {record.excerpt}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    configure_logging(level=settings.log_level, json_output=settings.log_json)

    try:
        options = SearchOptions(
            fields=frozenset(args.fields) if args.fields else None,
            limit=args.limit if args.limit is not None else settings.default_limit,
            prefix_match=args.prefix,
        )
    except ValidationError as exc:
        print(f"Invalid search options: {exc}", file=sys.stderr)
        return 2

    service = SearchService(settings)
    try:
        service.build(args.corpus)
    except CorpusLoadError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    report = service.report
    if report.documents_rejected:
        print(f"Skipped {report.documents_rejected} malformed record(s)", file=sys.stderr)

    results = service.search(args.query, options)
    records = service.format(results, snippet_length=args.snippet_length)

    if args.json:
        payload = [record.model_dump() for record in records]
        print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
    else:
        print(_render_text(records))

    if args.metrics:
        print(get_metrics().decode())
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
