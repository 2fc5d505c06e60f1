"""
Unit tests for Hours Tracker Service main module.

This module tests option normalization, date range resolution and the
report pipeline with a mocked commit log reader.
"""

import pytest
from unittest.mock import Mock
from datetime import datetime, timezone, timedelta

from services.hours_tracker.git_log import CommitLogReader, GitLogError
from services.hours_tracker.main import (
    HoursReport,
    HoursTrackerService,
    build_report_config,
    resolve_date_range,
)
from shared.models import NO_COMMITS, DateRange, ReportConfig, SummaryStrategy

CET = timezone(timedelta(hours=1))
NOW = datetime(2024, 3, 10, 18, 30, 0, tzinfo=CET)

SAMPLE_LOG = "\n".join([
    "2024-02-05 09:00:00 +0100|Jane Doe|parser crash",
    "2024-02-05 09:40:00 +0100|Jane Doe|parser crash login cache",
    "2024-02-05 10:10:00 +0100|Jane Doe|login cache",
    "2024-02-05 15:00:00 +0100|Jane Doe|update readme",
])


class TestResolveDateRange:
    """Test cases for resolve_date_range."""

    def test_default_is_previous_month(self):
        result = resolve_date_range(NOW)
        assert result.since == "2024-02-01 00:00:00 +0100"
        assert result.before == "2024-02-29 23:59:59 +0100"

    def test_day_shortcut(self):
        result = resolve_date_range(NOW, day="yesterday")
        assert result.since == "2024-03-09 00:00:00 +0100"
        assert result.before == "2024-03-09 23:59:59 +0100"

    def test_explicit_bounds_override_day(self):
        result = resolve_date_range(NOW, since="2024-03-01", day="today")
        assert result.since == "2024-03-01"
        assert result.before == "2024-03-10 23:59:59 +0100"

    def test_invalid_day(self):
        with pytest.raises(ValueError):
            resolve_date_range(NOW, day="tomorrowish")


class TestBuildReportConfig:
    """Test cases for build_report_config."""

    def test_defaults(self):
        config = build_report_config(NOW)

        assert config.authors == []
        assert config.threshold_seconds == 3600
        assert config.word_limit == 200
        assert config.padding_before_seconds == 0
        assert config.rounding_seconds == 0
        assert config.summary is False

    def test_options_normalized(self):
        config = build_report_config(
            NOW,
            author="Jane Doe,John Roe",
            duration="30m",
            words="50",
            padding_before="0.25",
            hours_rounding="0.5",
            summary=True,
        )

        assert config.authors == ["Jane Doe", "John Roe"]
        assert config.threshold_seconds == 1800
        assert config.word_limit == 50
        assert config.padding_before_seconds == 900
        assert config.rounding_seconds == 1800
        assert config.summary is True

    @pytest.mark.parametrize("duration", ["abc", "0m"])
    def test_unusable_duration_falls_back(self, duration):
        assert build_report_config(NOW, duration=duration).threshold_seconds == 3600

    def test_invalid_words_fall_back(self):
        assert build_report_config(NOW, words="many").word_limit == 200

    def test_negative_padding_ignored(self):
        assert build_report_config(NOW, padding_before="-1").padding_before_seconds == 0


class TestHoursReport:
    """Test cases for HoursReport."""

    def test_headline_without_commits(self):
        report = HoursReport(date_range=DateRange(since="a", before="b"))
        assert report.headline() == NO_COMMITS
        assert report.lines() == [NO_COMMITS]
        assert report.total_seconds == 0


class TestHoursTrackerService:
    """Test cases for HoursTrackerService class."""

    @pytest.fixture
    def reader(self):
        reader = Mock(spec=CommitLogReader)
        reader.read.return_value = SAMPLE_LOG
        return reader

    @pytest.fixture
    def service(self, reader):
        return HoursTrackerService(reader=reader, tz=CET)

    @pytest.fixture
    def config(self):
        return ReportConfig(
            authors=["Jane Doe"],
            since="2024-02-01 00:00:00 +0100",
            before="2024-02-29 23:59:59 +0100",
        )

    def test_run_builds_report(self, service, reader, config):
        report = service.run(config, now=NOW)

        assert report.has_commits
        assert report.total_seconds == 70 * 60
        assert report.headline() == (
            'From "2024-02-01 00:00:00 +0100" to "2024-02-29 23:59:59 +0100" : 1h10m'
        )
        assert report.summary is None
        reader.read.assert_called_once_with(
            DateRange(since=config.since, before=config.before), ["Jane Doe"]
        )

    def test_run_resolves_today(self, service, reader, config):
        config = config.model_copy(update={"before": "today"})

        report = service.run(config, now=NOW)

        assert report.date_range.before == "2024-03-10 18:30:00 +0100"

    def test_run_without_commits(self, service, reader, config):
        reader.read.return_value = ""

        report = service.run(config.model_copy(update={"summary": True}), now=NOW)

        assert not report.has_commits
        assert report.lines() == [NO_COMMITS]

    def test_run_with_debug_trace(self, service, config):
        report = service.run(config.model_copy(update={"debug": True}), now=NOW)

        lines = report.lines()
        assert lines[0] == "2024-02-05 09:00:00 +0100 Jane Doe parser crash (40m >)"
        assert lines[3] == "2024-02-05 15:00:00 +0100 Jane Doe update readme"
        assert lines[4].endswith(": 1h10m")

    def test_run_with_summary(self, service, config):
        report = service.run(config.model_copy(update={"summary": True}), now=NOW)

        assert report.summary.strategy is SummaryStrategy.RANKED
        assert "parser crash login cache" in report.summary.selected
        assert report.lines()[-1] == report.summary.text

    def test_rounding_and_padding(self, service, config):
        config = config.model_copy(update={
            "padding_before_seconds": 900,
            "rounding_seconds": 1800,
        })

        report = service.run(config, now=NOW)

        # 70m of gaps plus 2 sessions of 15m padding, rounded up to 2h
        assert report.total_seconds == 7200
        assert len(report.estimate.sessions) == 2

    def test_git_errors_propagate(self, service, reader, config):
        reader.read.side_effect = GitLogError("Not a Git repository: /tmp")

        with pytest.raises(GitLogError):
            service.run(config, now=NOW)

    def test_default_reader_uses_repo_path(self, config):
        service = HoursTrackerService()
        reader = service._reader_for(config.model_copy(update={"repo_path": "/srv/repo"}))
        assert reader.repo_path == "/srv/repo"
