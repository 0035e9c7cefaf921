"""Document store: the immutable corpus snapshot an index is built from.

Records are validated once when the store is created. Malformed records are
rejected individually and kept in ``DocumentStore.rejected`` so callers can
report them; the remaining documents get dense integer ids in corpus order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

import orjson

from blog_search.domain.model import Document, MalformedDocumentError


logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent / "data"
_JS_ASSIGNMENT_PREFIX = b"var store ="


class CorpusLoadError(RuntimeError):
    """Raised when a corpus file cannot be read or decoded."""


def default_corpus_path() -> Path:
    """Path of the blog corpus shipped with the package."""
    return _DATA_DIR / "posts.json"


def load_corpus(path: Path | str | None = None) -> list[Any]:
    """Load raw corpus records from a JSON array or a ``lunr-store.js`` file.

    The site generator emits ``var store = [...]``; that assignment is
    stripped before decoding so the artefact can be read as-is.
    """

    corpus_path = Path(path) if path is not None else default_corpus_path()
    try:
        raw = corpus_path.read_bytes()
    except OSError as exc:
        raise CorpusLoadError(f"Unable to read corpus {corpus_path}: {exc}") from exc

    payload = raw.strip()
    if payload.startswith(_JS_ASSIGNMENT_PREFIX):
        payload = payload[len(_JS_ASSIGNMENT_PREFIX) :].strip().rstrip(b";")

    try:
        records = orjson.loads(payload)
    except orjson.JSONDecodeError as exc:
        raise CorpusLoadError(f"Corpus {corpus_path} is not valid JSON: {exc}") from exc

    if not isinstance(records, list):
        raise CorpusLoadError(f"Corpus {corpus_path} must contain a JSON array, got {type(records).__name__}")

    logger.debug("Loaded %d corpus records from %s", len(records), corpus_path)
    return records


class DocumentStore:
    """Ordered, read-only collection of validated documents."""

    def __init__(
        self,
        documents: Iterable[Document],
        rejected: Iterable[MalformedDocumentError] = (),
    ) -> None:
        self._documents: tuple[Document, ...] = tuple(documents)
        self._rejected: tuple[MalformedDocumentError, ...] = tuple(rejected)
        by_url: dict[str, int] = {}
        for doc_id, document in enumerate(self._documents):
            if document.url in by_url:
                msg = f"Duplicate document url: {document.url}"
                raise ValueError(msg)
            by_url[document.url] = doc_id
        self._by_url: Mapping[str, int] = MappingProxyType(by_url)

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> DocumentStore:
        """Validate raw records, skipping (and recording) malformed ones."""

        documents: list[Document] = []
        rejected: list[MalformedDocumentError] = []
        seen_urls: set[str] = set()

        for position, record in enumerate(records):
            if isinstance(record, Document):
                document = record
            else:
                try:
                    document = Document.from_record(record, position=position)
                except MalformedDocumentError as exc:
                    logger.warning("Rejected corpus %s", exc)
                    rejected.append(exc)
                    continue

            if document.url in seen_urls:
                exc = MalformedDocumentError(
                    "duplicate url", position=position, url=document.url, code="duplicate_url"
                )
                logger.warning("Rejected corpus %s (%s)", exc, document.url)
                rejected.append(exc)
                continue

            seen_urls.add(document.url)
            documents.append(document)

        return cls(documents, rejected)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __getitem__(self, doc_id: int) -> Document:
        return self._documents[doc_id]

    @property
    def rejected(self) -> tuple[MalformedDocumentError, ...]:
        return self._rejected

    def items(self) -> Iterator[tuple[int, Document]]:
        """Yield ``(doc_id, document)`` pairs in corpus order."""
        return enumerate(self._documents)

    def doc_id_for(self, url: str) -> int | None:
        return self._by_url.get(url)

    def get_by_url(self, url: str) -> Document | None:
        doc_id = self._by_url.get(url)
        if doc_id is None:
            return None
        return self._documents[doc_id]
