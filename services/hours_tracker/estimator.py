"""
Working-time estimation from commit timestamps.

Commits are ordered by time and every gap between neighbouring commits
that does not exceed the threshold is counted as work. A larger gap ends
the current work session; the idle time is not counted.
"""

import logging
import math
from datetime import tzinfo
from typing import Iterable, List, Optional

from shared.durations import format_duration
from shared.models import Commit, EstimateResult, WorkSession
from shared.timeutils import format_timestamp

logger = logging.getLogger(__name__)


def sort_commits(commits: Iterable[Commit]) -> List[Commit]:
    """Order commits by timestamp; equal timestamps keep their input order."""
    return sorted(commits, key=lambda commit: commit.timestamp)


def gap_seconds(previous: Commit, current: Commit) -> int:
    """Whole seconds between two commits, rounded down."""
    return math.floor((current.timestamp - previous.timestamp).total_seconds())


class WorkingTimeEstimator:
    """Gap-threshold working-time estimator."""

    def __init__(
        self,
        threshold_seconds: float,
        debug: bool = False,
        tz: Optional[tzinfo] = None,
        padding_before_seconds: float = 0.0,
    ):
        if threshold_seconds <= 0:
            raise ValueError("Threshold must be a positive number of seconds")
        if padding_before_seconds < 0:
            raise ValueError("Session padding cannot be negative")
        self.threshold_seconds = threshold_seconds
        self.debug = debug
        self.tz = tz
        self.padding_before_seconds = padding_before_seconds

    def _trace_line(self, commit: Commit, gap: Optional[int] = None) -> str:
        line = f"{format_timestamp(commit.timestamp, self.tz)} {commit.author} {commit.message}"
        if gap is not None:
            line += f" ({format_duration(gap)} >)"
        return line

    def estimate(self, commits: Iterable[Commit]) -> EstimateResult:
        """Estimate total working seconds for ``commits``."""
        ordered = sort_commits(commits)
        if not ordered:
            return EstimateResult()

        trace: List[str] = []
        sessions: List[WorkSession] = []
        session = WorkSession(start=ordered[0].timestamp, end=ordered[0].timestamp)
        total = 0

        for previous, current in zip(ordered, ordered[1:]):
            gap = gap_seconds(previous, current)
            if self.debug:
                trace.append(self._trace_line(previous, gap))

            if gap <= self.threshold_seconds:
                total += gap
                session = session.model_copy(update={
                    "end": current.timestamp,
                    "commit_count": session.commit_count + 1,
                    "seconds": session.seconds + gap,
                })
            else:
                sessions.append(session)
                session = WorkSession(start=current.timestamp, end=current.timestamp)

        sessions.append(session)

        if self.debug:
            trace.append(self._trace_line(ordered[-1]))

        if self.padding_before_seconds:
            total += int(self.padding_before_seconds * len(sessions))

        logger.debug(
            f"Estimated {format_duration(total)} over {len(ordered)} commits "
            f"in {len(sessions)} session(s)"
        )
        return EstimateResult(
            total_seconds=total,
            trace=trace,
            sessions=sessions,
            commit_count=len(ordered),
        )


def estimate(
    commits: Iterable[Commit],
    threshold_seconds: float,
    debug: bool = False,
    tz: Optional[tzinfo] = None,
) -> EstimateResult:
    """Convenience wrapper around WorkingTimeEstimator."""
    return WorkingTimeEstimator(threshold_seconds, debug=debug, tz=tz).estimate(commits)
