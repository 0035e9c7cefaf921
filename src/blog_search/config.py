"""Centralized configuration for blog-search using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blog_search.domain.search import SearchOptions


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``BLOG_SEARCH_*`` variables.

    Validated once at construction; engine and CLI read their defaults here.
    """

    model_config = SettingsConfigDict(
        env_prefix="BLOG_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    corpus_path: Path | None = Field(default=None, description="Corpus file; packaged posts.json when unset")

    # Field boosts
    title_boost: float = Field(default=5.0, ge=0, description="Weight of title matches")
    tags_boost: float = Field(default=2.0, ge=0, description="Weight of tag matches")
    categories_boost: float = Field(default=2.0, ge=0, description="Weight of category matches")
    excerpt_boost: float = Field(default=1.0, ge=0, description="Weight of excerpt matches")

    # Ranking
    bm25_k1: float = Field(default=1.2, ge=0, description="Term frequency saturation")
    bm25_b: float = Field(default=0.75, ge=0, le=1, description="Field length normalization strength")
    coordination_exponent: float = Field(
        default=2.0, ge=0, description="Exponent of the matched/total clause ratio applied to scores"
    )
    phrase_bonus: bool = Field(default=True, description="Reward query terms appearing close together")
    max_prefix_expansions: int = Field(default=50, ge=1, description="Maximum terms a prefix clause expands to")
    analyzer: Literal["default", "english"] = Field(
        default="default", description="Analyzer profile: default (no stemming) or english (stopwords + stemming)"
    )

    # Query defaults
    default_limit: int | None = Field(default=None, ge=0, description="Result limit when the caller gives none")
    snippet_length: int | None = Field(default=None, ge=1, description="Excerpt length in formatted results")

    # Build
    build_workers: int = Field(default=1, ge=1, description="Threads used to analyze documents during build")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_boost_order(self) -> "Settings":
        # title matches must outrank excerpt-only matches
        if self.title_boost <= self.excerpt_boost:
            raise ValueError(
                "BLOG_SEARCH_TITLE_BOOST must be greater than BLOG_SEARCH_EXCERPT_BOOST "
                f"(got {self.title_boost} <= {self.excerpt_boost})"
            )
        return self

    def field_boosts(self) -> dict[str, float]:
        """Per-field boosts keyed by schema field name."""
        return {
            "title": self.title_boost,
            "tags": self.tags_boost,
            "categories": self.categories_boost,
            "excerpt": self.excerpt_boost,
        }

    def search_defaults(self) -> SearchOptions:
        """Default options for queries that do not supply their own."""
        return SearchOptions(limit=self.default_limit)
