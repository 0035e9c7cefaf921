"""Domain models for search requests and results.

Value objects are immutable (frozen) pydantic models so a query's options and
its outcome cannot drift after they are created.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchOptions(BaseModel):
    """Per-query options.

    ``fields`` restricts matching to a subset of indexed fields (unknown names
    are ignored), ``boosts`` overrides per-field weights, ``limit`` truncates
    the ranked list and ``prefix_match`` enables trailing ``*`` prefix clauses.
    ``timeout_ms`` and ``max_candidates`` are advisory budgets: once exceeded
    the engine ranks whatever it has scored so far.
    """

    model_config = ConfigDict(frozen=True)

    fields: frozenset[str] | None = None
    boosts: dict[str, float] = Field(default_factory=dict)
    limit: int | None = Field(default=None, ge=0)
    prefix_match: bool = False
    timeout_ms: float | None = Field(default=None, gt=0)
    max_candidates: int | None = Field(default=None, ge=1)

    @field_validator("boosts")
    @classmethod
    def _check_boosts(cls, value: dict[str, float]) -> dict[str, float]:
        for name, weight in value.items():
            if weight < 0:
                raise ValueError(f"boost for field '{name}' must be >= 0")
        return value


class ScoredResult(BaseModel):
    """One ranked hit: the document url and its relevance score."""

    model_config = ConfigDict(frozen=True)

    ref: str
    score: float


class SearchOutcome(BaseModel):
    """Ranked results plus bookkeeping about how they were produced."""

    model_config = ConfigDict(frozen=True)

    results: list[ScoredResult]
    terms: list[str] = Field(default_factory=list)
    total_candidates: int = 0
    scored_candidates: int = 0
    partial: bool = False


class ResultRecord(BaseModel):
    """Presentation record produced by the result formatter."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    excerpt: str
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    score: float = 0.0
