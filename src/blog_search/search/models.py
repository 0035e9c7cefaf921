"""Search data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Posting:
    """Occurrences of one term in one field of one document."""

    doc_id: int
    field: str
    frequency: int = 0
    positions: tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "doc_id": self.doc_id,
            "field": self.field,
            "frequency": self.frequency,
            "positions": list(self.positions),
        }
