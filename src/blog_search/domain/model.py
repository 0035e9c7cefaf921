"""Domain model - blog post documents.

The corpus arrives as loosely-typed records. ``Document.from_record`` turns
each record into a validated, immutable value once at load time so the rest
of the engine never has to probe for missing keys:

- ``url`` is required and must be a non-blank string
- ``title``/``excerpt`` default to ``""``
- ``categories``/``tags`` default to ``()``
- ``teaser`` is passed through untouched and never indexed
"""

from collections.abc import Mapping, Sequence
from typing import Any, Self

from pydantic import Field, ValidationError
from pydantic.dataclasses import dataclass


class MalformedDocumentError(ValueError):
    """Raised when a corpus record cannot become a ``Document``."""

    def __init__(
        self,
        reason: str,
        *,
        position: int | None = None,
        url: str | None = None,
        code: str = "invalid_field",
    ) -> None:
        self.reason = reason
        self.code = code
        self.position = position
        self.url = url
        where = f"record {position}" if position is not None else "record"
        super().__init__(f"{where}: {reason}")


@dataclass(frozen=True)
class Document:
    """One blog post from the corpus.

    Identity is the ``url``; the integer ``doc_id`` used inside an index is
    assigned by the store and is only meaningful within one build.
    """

    url: str = Field(min_length=1)
    title: str = ""
    excerpt: str = ""
    categories: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    teaser: Any = None

    def __post_init__(self) -> None:
        if not self.url.strip():
            raise ValueError("Document url must not be blank")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return False
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)

    def field_value(self, name: str) -> str | tuple[str, ...] | None:
        """Return the raw value for an indexable field, ``None`` if unknown."""
        if name in ("title", "excerpt", "categories", "tags"):
            return getattr(self, name)
        return None

    @classmethod
    def from_record(cls, record: Any, *, position: int | None = None) -> Self:
        """Validate a raw corpus record.

        Raises:
            MalformedDocumentError: record is not a mapping or lacks a usable url.
        """
        if not isinstance(record, Mapping):
            raise MalformedDocumentError(
                f"expected an object, got {type(record).__name__}", position=position, code="not_an_object"
            )

        url = record.get("url")
        if not isinstance(url, str) or not url.strip():
            raise MalformedDocumentError("missing url", position=position, code="missing_url")

        try:
            return cls(
                url=url,
                title=_coerce_text(record.get("title")),
                excerpt=_coerce_text(record.get("excerpt")),
                categories=_coerce_terms(record.get("categories")),
                tags=_coerce_terms(record.get("tags")),
                teaser=record.get("teaser"),
            )
        except ValidationError as exc:
            raise MalformedDocumentError(str(exc), position=position, url=url) from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "excerpt": self.excerpt,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "teaser": self.teaser,
        }


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_terms(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value if item is not None)
    return (str(value),)
