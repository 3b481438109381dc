"""
Pydantic models for skillbook configuration.

Defines all configuration schemas using Pydantic v2 for validation,
defaults, and serialization.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_STOP_WORDS = [
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "how",
    "i", "in", "is", "it", "of", "on", "or", "the", "to", "use", "when",
    "with",
]


class StoreConfig(BaseModel):
    """Where documents are loaded from and how skill files are recognised."""

    root: Path = Path(".")
    skill_file: str = Field(
        default="SKILL.md",
        description="File name that marks a directory as a skill",
    )
    exclude_dirs: list[str] = Field(
        default_factory=list,
        description=(
            "Additional directories to skip (besides defaults: "
            ".git, node_modules, __pycache__, .venv, venv and hidden dirs)"
        ),
    )

    model_config = {"extra": "forbid"}

    @field_validator("skill_file")
    @classmethod
    def _validate_skill_file(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError("skill_file must be a bare file name")
        return v


class MatcherConfig(BaseModel):
    """Trigger matcher configuration.

    A query token hits a description token when both are equal, or when the
    query token has at least min_substring_length characters and is a
    substring of the description token.
    """

    min_token_overlap: int = Field(
        default=1,
        ge=1,
        description="Minimum number of distinct query tokens that must hit a description",
    )
    min_substring_length: int = Field(
        default=3,
        ge=1,
        description="Shortest query token allowed to match inside a longer word",
    )
    stop_words: list[str] = Field(
        default_factory=lambda: list(DEFAULT_STOP_WORDS),
        description="Query tokens ignored before matching",
    )
    include_references: bool = Field(
        default=False,
        description="If True, reference documents are ranked too (not only skills)",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of candidates returned (None = all)",
    )

    model_config = {"extra": "forbid"}

    @field_validator("stop_words")
    @classmethod
    def _lower_stop_words(cls, v: list[str]) -> list[str]:
        return [w.lower() for w in v]


class LoggingConfig(BaseModel):
    """Logging system configuration."""

    level: Literal["debug", "info", "human", "warn", "error"] = "human"
    file: Path | None = None
    verbose: int = 0

    model_config = {"extra": "forbid"}


class AppConfig(BaseModel):
    """Complete skillbook configuration."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
