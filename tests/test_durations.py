"""
Unit tests for the duration parsing and formatting helpers.
"""

import pytest

from shared.durations import format_duration, parse_duration, round_up_seconds


class TestParseDuration:
    """Test cases for parse_duration."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1h", 3600),
            ("1.5h", 5400),
            ("30m", 1800),
            ("45s", 45),
            ("2H", 7200),
            ("90M", 5400),
        ],
    )
    def test_units(self, value, expected):
        """Test that h, m and s units are honoured case-insensitively."""
        assert parse_duration(value) == expected

    def test_bare_number_is_hours(self):
        """Test that a number without a unit is read as hours."""
        assert parse_duration("45") == 162000
        assert parse_duration("0.5") == 1800

    def test_unknown_unit_falls_back_to_hours(self):
        """Test that an unrecognized unit keeps the hours interpretation."""
        assert parse_duration("2d") == 7200

    def test_first_unit_match_wins(self):
        """Test that only the first number-unit pair is read."""
        assert parse_duration("1h30m") == 3600

    def test_unparseable_uses_default(self):
        """Test that garbage input falls back to the default."""
        assert parse_duration("soon") == 3600
        assert parse_duration("soon", default=60) == 60

    def test_none_uses_default(self):
        """Test that a missing value falls back to the default."""
        assert parse_duration(None) == 3600


class TestFormatDuration:
    """Test cases for format_duration."""

    def test_zero(self):
        assert format_duration(0) == "0s"

    def test_all_components(self):
        assert format_duration(3661) == "1h1m1s"

    def test_omits_zero_components(self):
        assert format_duration(5400) == "1h30m"
        assert format_duration(3600) == "1h"
        assert format_duration(3601) == "1h1s"
        assert format_duration(120) == "2m"

    def test_seconds_only(self):
        assert format_duration(59) == "59s"

    def test_large_hours(self):
        assert format_duration(100 * 3600 + 5 * 60) == "100h5m"

    def test_lossy_fractional_parse(self):
        """Test that a fractional duration formats to whole components."""
        assert format_duration(int(parse_duration("1.5h"))) == "1h30m"


class TestRoundUpSeconds:
    """Test cases for round_up_seconds."""

    def test_rounds_up_to_increment(self):
        assert round_up_seconds(3601, 1800) == 5400

    def test_exact_multiple_unchanged(self):
        assert round_up_seconds(3600, 1800) == 3600

    def test_disabled_increment(self):
        assert round_up_seconds(3601, 0) == 3601

    def test_zero_total_stays_zero(self):
        assert round_up_seconds(0, 1800) == 0
