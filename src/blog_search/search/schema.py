"""
Schema definition for the blog post index.

Describes which document fields are indexed and how much each one weighs in
scoring (BM25F style per-field boosts). Two kinds of indexed field exist:

- TextField: a single free-text value (title, excerpt)
- ListField: a sequence of short strings analyzed element by element
  (categories, tags)

Fields not listed in the schema (url, teaser) are stored on the document but
never indexed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    """Types of indexed fields."""

    TEXT = "text"
    LIST = "list"


@dataclass(frozen=True)
class IndexedField:
    """Base definition shared by all indexed fields."""

    name: str
    boost: float = 1.0

    @property
    def field_type(self) -> FieldType:  # pragma: no cover - overridden
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.field_type.value, "boost": self.boost}


@dataclass(frozen=True)
class TextField(IndexedField):
    """Analyzed free-text field such as a title or an excerpt."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.TEXT


@dataclass(frozen=True)
class ListField(IndexedField):
    """Sequence-of-strings field; each element is analyzed on its own."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.LIST


@dataclass(frozen=True)
class Schema:
    """Ordered collection of indexed fields.

    Example:
        schema = Schema(
            fields=(
                TextField("title", boost=5.0),
                TextField("excerpt"),
                ListField("tags", boost=2.0),
            )
        )
    """

    fields: tuple[IndexedField, ...]

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            msg = f"Duplicate field names in schema: {names}"
            raise ValueError(msg)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)

    def __iter__(self) -> Iterator[IndexedField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def text_fields(self) -> list[TextField]:
        """Return the free-text fields (used for proximity scoring)."""
        return [f for f in self.fields if isinstance(f, TextField)]

    def get_boost(self, field_name: str) -> float:
        for f in self.fields:
            if f.name == field_name:
                return f.boost
        return 1.0

    def boosts(self, overrides: Mapping[str, float] | None = None) -> dict[str, float]:
        """Return per-field boosts, applying overrides for known fields only."""
        resolved = {f.name: f.boost for f in self.fields}
        for name, weight in (overrides or {}).items():
            if name in resolved:
                resolved[name] = float(weight)
        return resolved

    def restrict(self, names: Iterable[str] | None) -> tuple[str, ...]:
        """Return schema field names present in ``names``, in schema order.

        ``None`` means every indexed field; unknown names are dropped.
        """
        if names is None:
            return self.field_names
        wanted = set(names)
        return tuple(name for name in self.field_names if name in wanted)

    def to_dict(self) -> dict[str, Any]:
        return {"fields": [f.to_dict() for f in self.fields]}


DEFAULT_FIELD_BOOSTS: dict[str, float] = {
    "title": 5.0,
    "tags": 2.0,
    "categories": 2.0,
    "excerpt": 1.0,
}


def create_default_schema(boosts: Mapping[str, float] | None = None) -> Schema:
    """
    Create the schema used for blog posts.

    Fields (default boosts):
    - title: post title (text, boost=5.0)
    - excerpt: post summary (text, boost=1.0)
    - categories: post categories (list, boost=2.0)
    - tags: post tags (list, boost=2.0)
    """
    resolved = {**DEFAULT_FIELD_BOOSTS, **(boosts or {})}
    return Schema(
        fields=(
            TextField("title", boost=resolved["title"]),
            TextField("excerpt", boost=resolved["excerpt"]),
            ListField("categories", boost=resolved["categories"]),
            ListField("tags", boost=resolved["tags"]),
        )
    )
