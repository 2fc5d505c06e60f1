"""
Git log retrieval and parsing.

CommitLogReader runs a single ``git log`` for a date range and author
filter and returns its raw text; parse_git_log turns that text into
Commit records, skipping lines it cannot read.
"""

import logging
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from git import Repo, InvalidGitRepositoryError, NoSuchPathError
from git.exc import CommandError
from pydantic import ValidationError

from config.settings import settings
from shared.models import Commit, DateRange

logger = logging.getLogger(__name__)

FIELD_DELIMITER = "|"
GIT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"


class GitLogError(Exception):
    """Exception raised when the commit log cannot be retrieved."""
    pass


class CommitLogReader:
    """Reads raw ``timestamp|author|message`` lines from a repository."""

    def __init__(self, repo_path: str = ".", log_format: Optional[str] = None):
        self.repo_path = repo_path
        self.log_format = log_format or settings.git.log_format

    def build_log_args(
        self,
        date_range: Optional[DateRange] = None,
        authors: Sequence[str] = (),
    ) -> List[str]:
        """Build the ``git log`` argument list."""
        args = [f"--pretty=format:{self.log_format}", "--reverse"]
        if date_range and date_range.since and date_range.before:
            args.append(f"--since={date_range.since}")
            args.append(f"--before={date_range.before}")
        # Repeated --author options match any of the names
        for author in authors:
            args.append(f"--author={author}")
        return args

    def read(
        self,
        date_range: Optional[DateRange] = None,
        authors: Sequence[str] = (),
    ) -> str:
        """Run ``git log`` and return its complete output.

        Raises:
            GitLogError: if the repository cannot be opened or git fails
        """
        args = self.build_log_args(date_range, authors)
        command = "git log " + " ".join(args)
        logger.debug(f"Running: {command}")

        try:
            repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise GitLogError(f"Not a Git repository: {self.repo_path}")

        try:
            return repo.git.log(*args)
        except CommandError as e:
            stderr = (getattr(e, "stderr", "") or "").strip()
            logger.error(f"Git command failed: {command}")
            raise GitLogError(f"Git command failed: {command}\nError: {stderr or e}")


def parse_timestamp(value: str, default_tz: Optional[tzinfo] = None) -> datetime:
    """Parse a git ``%ai`` or ISO-8601 timestamp into an aware datetime.

    Timestamps without an offset are read as local time (``default_tz``
    when given).

    Raises:
        ValueError: if ``value`` is not a valid date
    """
    value = value.strip()
    try:
        parsed = datetime.strptime(value, GIT_TIMESTAMP_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(value)

    if parsed.tzinfo is None:
        if default_tz is not None:
            return parsed.replace(tzinfo=default_tz)
        return parsed.astimezone()
    return parsed


def parse_line(line: str, default_tz: Optional[tzinfo] = None) -> Optional[Commit]:
    """Parse one log line; returns None when the line is malformed."""
    parts = line.rstrip("\r\n").split(FIELD_DELIMITER)
    if len(parts) < 3:
        return None

    raw_timestamp, author = parts[0].strip(), parts[1].strip()
    # The message may itself contain the delimiter
    message = FIELD_DELIMITER.join(parts[2:])
    if not raw_timestamp or not author or not message.strip():
        return None

    try:
        timestamp = parse_timestamp(raw_timestamp, default_tz)
        return Commit(timestamp=timestamp, author=author, message=message)
    except (ValueError, ValidationError):
        return None


def parse_git_log(raw_output: str, default_tz: Optional[tzinfo] = None) -> List[Commit]:
    """Parse raw ``git log`` output into commits, in input order."""
    commits = []
    skipped = 0
    for line in raw_output.splitlines():
        if not line.strip():
            continue
        commit = parse_line(line, default_tz)
        if commit is None:
            skipped += 1
            logger.debug(f"Error parsing commit: {line}")
            continue
        commits.append(commit)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed log line(s)")
    return commits
