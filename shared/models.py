"""
Data models for give-me-hours.

This module provides:
- The immutable Commit record produced by the log parser
- Run configuration (ReportConfig) replacing a free-form option bag
- Estimation results, work sessions and summary results
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, computed_field

from config.settings import DEFAULT_WORD_LIMIT

DEFAULT_THRESHOLD_SECONDS = 3600.0
NO_MESSAGES = "No commit messages"
NO_COMMITS = "No commits found in the specified date range"


class SummaryStrategy(Enum):
    """How a summary text was produced."""
    EMPTY = "empty"
    SINGLE = "single"
    RANKED = "ranked"
    FALLBACK = "fallback"


class Commit(BaseModel):
    """One version-control change event."""

    timestamp: datetime = Field(..., description="Commit time, timezone-aware")
    author: str = Field(..., description="Author display name")
    message: str = Field(default="", description="Commit subject line")

    model_config = {"frozen": True}

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v):
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("Commit timestamp must carry timezone information")
        return v


class WorkSession(BaseModel):
    """A run of commits separated by gaps no larger than the threshold."""

    start: datetime
    end: datetime
    commit_count: int = Field(default=1, ge=1)
    seconds: int = Field(default=0, ge=0, description="Gap seconds counted in this session")

    @computed_field
    @property
    def span_seconds(self) -> int:
        return int((self.end - self.start).total_seconds())


class EstimateResult(BaseModel):
    """Output of the working-time estimator."""

    total_seconds: int = Field(default=0, ge=0)
    trace: List[str] = Field(default_factory=list)
    sessions: List[WorkSession] = Field(default_factory=list)
    commit_count: int = Field(default=0, ge=0)


class SummaryCandidate(BaseModel):
    """A deduplicated commit message considered for the summary."""

    text: str
    index: int = Field(..., ge=0, description="Position among the survivors")
    score: Optional[float] = None


class SummaryResult(BaseModel):
    """Tagged summarizer output."""

    text: str
    strategy: SummaryStrategy
    selected: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.strategy is SummaryStrategy.EMPTY


class DateRange(BaseModel):
    """Inclusive since/before bounds handed to git log."""

    since: str
    before: str


class ReportConfig(BaseModel):
    """
    Explicit configuration for one report run.

    Every field has a default; CLI strings are normalized before they
    reach this model, so a ValidationError here means a programming error.
    """

    authors: List[str] = Field(default_factory=list, description="Author filters (OR)")
    since: str = Field(..., description="Inclusive lower bound")
    before: str = Field(..., description="Inclusive upper bound or 'today'")
    threshold_seconds: float = Field(default=DEFAULT_THRESHOLD_SECONDS, gt=0)
    debug: bool = False
    word_limit: int = Field(default=DEFAULT_WORD_LIMIT, gt=0)
    padding_before_seconds: float = Field(default=0.0, ge=0)
    rounding_seconds: float = Field(default=0.0, ge=0)
    repo_path: str = "."
    summary: bool = False

    @field_validator("authors", mode="before")
    @classmethod
    def split_authors(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [author.strip() for author in v if author and author.strip()]
