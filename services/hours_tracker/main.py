"""
Hours Tracker Service.

Turns a report configuration into the hours report: resolves the date
range, reads and parses the commit log, estimates working time and,
when asked, summarizes the commit messages of the same range.
"""

import logging
from datetime import datetime, tzinfo
from typing import List, Optional

from pydantic import BaseModel, Field

from config.settings import settings
from services.commit_summary.summarizer import CommitSummarizer, parse_word_limit
from services.hours_tracker.estimator import WorkingTimeEstimator
from services.hours_tracker.git_log import CommitLogReader, parse_git_log
from shared.durations import format_duration, parse_duration, round_up_seconds
from shared.models import (
    DEFAULT_THRESHOLD_SECONDS,
    NO_COMMITS,
    Commit,
    DateRange,
    EstimateResult,
    ReportConfig,
    SummaryResult,
)
from shared.timeutils import day_range, default_range, local_now, resolve_before

logger = logging.getLogger(__name__)


class HoursReport(BaseModel):
    """Result of one report run."""

    date_range: DateRange
    commits: List[Commit] = Field(default_factory=list)
    estimate: Optional[EstimateResult] = None
    summary: Optional[SummaryResult] = None

    @property
    def has_commits(self) -> bool:
        return bool(self.commits)

    @property
    def total_seconds(self) -> int:
        return self.estimate.total_seconds if self.estimate else 0

    def headline(self) -> str:
        if not self.has_commits:
            return NO_COMMITS
        return (
            f'From "{self.date_range.since}" to "{self.date_range.before}" : '
            f"{format_duration(self.total_seconds)}"
        )

    def lines(self) -> List[str]:
        """Output lines: debug trace, the headline, then the summary."""
        output = []
        if self.estimate:
            output.extend(self.estimate.trace)
        output.append(self.headline())
        if self.summary is not None and self.has_commits:
            output.append(self.summary.text)
        return output


def _hours_option(value: Optional[str], name: str) -> float:
    """Read an hours-based option (e.g. "0.25" or "15m") as seconds, never negative."""
    if value is None or str(value).strip() == "":
        return 0.0
    seconds = parse_duration(value, default=0.0)
    if seconds < 0:
        logger.warning(f"Ignoring negative {name}: {value!r}")
        return 0.0
    return seconds


def resolve_date_range(
    now: datetime,
    since: Optional[str] = None,
    before: Optional[str] = None,
    day: Optional[str] = None,
) -> DateRange:
    """Explicit bounds win over a day shortcut, which wins over last month."""
    base = day_range(day, now) if day else default_range(now)
    return DateRange(since=since or base.since, before=before or base.before)


def build_report_config(
    now: datetime,
    author: Optional[str] = None,
    since: Optional[str] = None,
    before: Optional[str] = None,
    day: Optional[str] = None,
    duration: Optional[str] = None,
    debug: bool = False,
    words=None,
    padding_before: Optional[str] = None,
    hours_rounding: Optional[str] = None,
    repo_path: Optional[str] = None,
    summary: bool = False,
) -> ReportConfig:
    """Normalize raw option values into a ReportConfig.

    Unusable duration and word-limit values fall back to their defaults
    instead of failing.

    Raises:
        ValueError: if ``day`` is not today, yesterday or YYYY-MM-DD
    """
    date_range = resolve_date_range(now, since, before, day)

    threshold = parse_duration(duration or settings.hours.duration, DEFAULT_THRESHOLD_SECONDS)
    if threshold <= 0:
        logger.warning(f"Threshold must be positive, using {format_duration(int(DEFAULT_THRESHOLD_SECONDS))}")
        threshold = DEFAULT_THRESHOLD_SECONDS

    if padding_before is None and settings.hours.padding_before:
        padding_before = str(settings.hours.padding_before)
    if hours_rounding is None and settings.hours.hours_rounding:
        hours_rounding = str(settings.hours.hours_rounding)

    return ReportConfig(
        authors=author or [],
        since=date_range.since,
        before=date_range.before,
        threshold_seconds=threshold,
        debug=debug,
        word_limit=parse_word_limit(words if words is not None else settings.hours.word_limit),
        padding_before_seconds=_hours_option(padding_before, "padding"),
        rounding_seconds=_hours_option(hours_rounding, "rounding"),
        repo_path=repo_path or settings.git.repo_path,
        summary=summary,
    )


class HoursTrackerService:
    """Core hours tracking service with business logic."""

    def __init__(
        self,
        reader: Optional[CommitLogReader] = None,
        summarizer: Optional[CommitSummarizer] = None,
        tz: Optional[tzinfo] = None,
    ):
        self.reader = reader
        self.summarizer = summarizer or CommitSummarizer(
            max_sentences=settings.hours.summary_sentences
        )
        self.tz = tz

    def _reader_for(self, config: ReportConfig) -> CommitLogReader:
        return self.reader or CommitLogReader(config.repo_path)

    def collect_commits(self, config: ReportConfig, date_range: DateRange) -> List[Commit]:
        """Read and parse the commits for ``config`` within ``date_range``.

        Raises:
            GitLogError: if the log cannot be retrieved
        """
        raw_output = self._reader_for(config).read(date_range, config.authors)
        commits = parse_git_log(raw_output, default_tz=self.tz)
        logger.info(f"Read {len(commits)} commits between {date_range.since} and {date_range.before}")
        return commits

    def estimate(self, commits: List[Commit], config: ReportConfig) -> EstimateResult:
        estimator = WorkingTimeEstimator(
            config.threshold_seconds,
            debug=config.debug,
            tz=self.tz,
            padding_before_seconds=config.padding_before_seconds,
        )
        result = estimator.estimate(commits)
        if config.rounding_seconds:
            rounded = round_up_seconds(result.total_seconds, config.rounding_seconds)
            result = result.model_copy(update={"total_seconds": rounded})
        return result

    def summarize(self, commits: List[Commit], config: ReportConfig) -> SummaryResult:
        return self.summarizer.summarize([commit.message for commit in commits], config.word_limit)

    def run(self, config: ReportConfig, now: Optional[datetime] = None) -> HoursReport:
        """Build the hours report for ``config``.

        Raises:
            GitLogError: if the log cannot be retrieved
        """
        now = now or local_now(self.tz)
        date_range = DateRange(since=config.since, before=resolve_before(config.before, now))
        commits = self.collect_commits(config, date_range)

        if not commits:
            logger.info("No commits found in range")
            return HoursReport(date_range=date_range)

        return HoursReport(
            date_range=date_range,
            commits=commits,
            estimate=self.estimate(commits, config),
            summary=self.summarize(commits, config) if config.summary else None,
        )
