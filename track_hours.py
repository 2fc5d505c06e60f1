#!/usr/bin/env python3
"""
give-me-hours - working hours from Git commit history

This CLI estimates how long someone actually worked on a repository by
looking at the time between their commits:
- Gaps up to the threshold (default 1h) count as work
- Larger gaps are treated as breaks between sessions
- Optional padding before each session and rounding of the total
- Optional extractive summary of the commit messages in the range

Usage:
    python track_hours.py [DAY] [OPTIONS]

Examples:
    python track_hours.py                              # Last calendar month
    python track_hours.py today --summary              # Today, with a summary
    python track_hours.py yesterday -a "Jane Doe"      # One author, yesterday
    python track_hours.py -s 2024-01-01 -b today -d 30m
    python track_hours.py 2025-08-15 --hours-rounding 0.5 --padding-before 0.25
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.settings import settings
from services.hours_tracker.git_log import GitLogError
from services.hours_tracker.main import HoursReport, HoursTrackerService, build_report_config
from shared.durations import format_duration
from shared.timeutils import format_timestamp, local_now

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.monitoring.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class HoursTrackerCLI:
    """CLI interface for hours tracking."""

    def __init__(self, service: Optional[HoursTrackerService] = None):
        self.console = Console()
        self.err_console = Console(stderr=True)
        self.service = service or HoursTrackerService()

    def print_line(self, line: str):
        """Print plain text without markup or wrapping."""
        self.console.print(line, markup=False, highlight=False, soft_wrap=True)

    def display_report(self, report: HoursReport):
        """Print trace lines, the headline and the optional summary."""
        for line in report.lines():
            self.print_line(line)

    def display_sessions(self, report: HoursReport):
        """Show detected work sessions on stderr."""
        if not report.estimate or not report.estimate.sessions:
            return

        table = Table(title="Work Sessions", show_header=True, header_style="bold magenta")
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Start", style="green")
        table.add_column("End", style="green")
        table.add_column("Commits", style="yellow")
        table.add_column("Counted", style="white")

        tz = self.service.tz
        for number, session in enumerate(report.estimate.sessions, start=1):
            table.add_row(
                str(number),
                format_timestamp(session.start, tz),
                format_timestamp(session.end, tz),
                str(session.commit_count),
                format_duration(session.seconds),
            )

        self.err_console.print(table)

    def display_error_message(self, error: str, suggestion: str = ""):
        """Display error message with helpful suggestions."""
        error_text = Text()
        error_text.append("Error occurred\n\n", style="bold white")
        error_text.append("Error: ", style="red")
        error_text.append(f"{error}\n", style="white")

        if suggestion:
            error_text.append("Suggestion: ", style="yellow")
            error_text.append(f"{suggestion}", style="white")

        panel = Panel(error_text, title="Error", border_style="red")
        self.err_console.print(panel)


@click.command()
@click.version_option(version=settings.version, prog_name=settings.app_name)
@click.argument('day', required=False)
@click.option(
    '--author', '-a',
    help='Author name (comma-separated for multiple)'
)
@click.option(
    '--since', '-s',
    help='Since (after) date (default: first day of last month)'
)
@click.option(
    '--before', '-b',
    help='Before date, or "today" (default: last day of last month)'
)
@click.option(
    '--duration', '-d',
    help=f'Longest gap still counted as work (default: {settings.hours.duration})'
)
@click.option(
    '--padding-before',
    help='Hours added before the first commit of each session'
)
@click.option(
    '--hours-rounding',
    help='Round the total up to a multiple of this many hours'
)
@click.option(
    '--summary',
    is_flag=True,
    help='Also summarize the commit messages in the range'
)
@click.option(
    '--words', '-w',
    help=f'Maximum number of words in the summary (default: {settings.hours.word_limit})'
)
@click.option(
    '--repo-path',
    default=None,
    help='Path to Git repository (default: current directory)',
    type=click.Path(exists=True, file_okay=False, dir_okay=True)
)
@click.option(
    '--debug',
    is_flag=True,
    default=settings.debug,
    help='Print every commit with the gap to the next one'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging'
)
def track_hours(
    day: Optional[str],
    author: Optional[str],
    since: Optional[str],
    before: Optional[str],
    duration: Optional[str],
    padding_before: Optional[str],
    hours_rounding: Optional[str],
    summary: bool,
    words: Optional[str],
    repo_path: Optional[str],
    debug: bool,
    verbose: bool
):
    """Calculate working hours using git commits.

    DAY may be "today", "yesterday" or a YYYY-MM-DD date.
    """
    if verbose or debug:
        logging.getLogger().setLevel(logging.DEBUG)

    cli = HoursTrackerCLI()
    now = local_now()

    try:
        config = build_report_config(
            now,
            author=author,
            since=since,
            before=before,
            day=day,
            duration=duration,
            debug=debug,
            words=words,
            padding_before=padding_before,
            hours_rounding=hours_rounding,
            repo_path=repo_path,
            summary=summary,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="DAY")

    try:
        report = cli.service.run(config, now=now)
    except GitLogError as e:
        logger.error(f"Retrieval failed: {e}")
        cli.display_error_message(
            str(e),
            "Make sure you're in a Git repository or specify the correct path with --repo-path"
        )
        sys.exit(1)

    cli.display_report(report)
    if debug:
        cli.display_sessions(report)


if __name__ == "__main__":
    track_hours()
