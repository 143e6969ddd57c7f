"""
Tests for date normalization.

Validates:
- MM/YY and MM/YYYY resolve to the first of the month (two-digit years -> 2000s)
- Bare years and "MonthName YYYY"
- "Present"/"current" resolve to today
- Out-of-range years and invalid months are rejected
- Fallback formats (ISO, YYYY-MM, long dates)
- Non-string input never raises
"""

from datetime import date, datetime, timedelta

import pytest

from stacks.services.reconcile.dates import DATE_STRATEGIES, is_current_marker, normalize_date


# ── Strategy precedence ──────────────────────────────────────────────

class TestStrategies:

    def test_strategy_order(self):
        assert [name for name, _ in DATE_STRATEGIES] == [
            "current",
            "month_slash_year",
            "year",
            "month_name_year",
            "general",
        ]

    def test_two_digit_year(self):
        assert normalize_date("03/24") == date(2024, 3, 1)

    def test_four_digit_year_with_month(self):
        assert normalize_date("11/2018") == date(2018, 11, 1)

    def test_bare_year(self):
        assert normalize_date("2019") == date(2019, 1, 1)

    @pytest.mark.parametrize("raw", ["Present", "present", "CURRENT", " Present "])
    def test_present_is_today(self, raw):
        result = normalize_date(raw)
        assert result is not None
        assert abs(result - date.today()) <= timedelta(days=1)

    @pytest.mark.parametrize("raw,expected", [
        ("March 2021", date(2021, 3, 1)),
        ("Mar 2021", date(2021, 3, 1)),
        ("september 2015", date(2015, 9, 1)),
        ("Sep. 2015", date(2015, 9, 1)),
    ])
    def test_month_name_year(self, raw, expected):
        assert normalize_date(raw) == expected


# ── Rejections ───────────────────────────────────────────────────────

class TestRejections:

    def test_not_a_date(self):
        assert normalize_date("not-a-date") is None

    def test_invalid_month(self):
        assert normalize_date("13/2024") is None

    def test_month_zero(self):
        assert normalize_date("00/2024") is None

    @pytest.mark.parametrize("raw", ["1850", "2150", "01/1850", "June 1776", "1776-07-04"])
    def test_year_out_of_bounds(self, raw):
        assert normalize_date(raw) is None

    @pytest.mark.parametrize("raw", [None, 2019, 3.5, [], {}, ""])
    def test_non_string_or_empty(self, raw):
        assert normalize_date(raw) is None

    def test_unknown_month_name(self):
        assert normalize_date("Smarch 2021") is None


# ── Fallback parser ──────────────────────────────────────────────────

class TestFallback:

    def test_iso_date(self):
        assert normalize_date("2020-05-17") == date(2020, 5, 17)

    def test_year_month(self):
        assert normalize_date("2020-05") == date(2020, 5, 1)

    def test_long_date(self):
        assert normalize_date("January 15, 2020") == date(2020, 1, 15)

    def test_day_month_year(self):
        assert normalize_date("15/01/2020") == date(2020, 1, 15)

    def test_date_and_datetime_passthrough(self):
        assert normalize_date(date(2021, 2, 3)) == date(2021, 2, 3)
        assert normalize_date(datetime(2021, 2, 3, 10, 30)) == date(2021, 2, 3)


# ── Currently-working inference ──────────────────────────────────────

class TestCurrentMarker:

    @pytest.mark.parametrize("raw", [None, "", "   ", "Present", "current"])
    def test_open_ended(self, raw):
        assert is_current_marker(raw) is True

    @pytest.mark.parametrize("raw", ["2020", "03/2021", 2020])
    def test_closed(self, raw):
        assert is_current_marker(raw) is False
