"""Tests for calendar month arithmetic."""

from datetime import date

import pytest

from paycal_core.dates import (
    YearMonth,
    first_step_on_or_after,
    generate_date_range,
    iter_months,
    month_key,
)
from paycal_core.exceptions import ValidationError


class TestYearMonth:
    """Test suite for YearMonth."""

    def test_parse_month_key(self):
        """A "YYYY-MM" key should parse to its year and month."""
        assert YearMonth.parse("2024-02") == YearMonth(2024, 2)

    def test_parse_date_and_passthrough(self):
        """Dates map to their month and YearMonth values pass through."""
        month = YearMonth(2024, 7)
        assert YearMonth.parse(date(2024, 7, 19)) == month
        assert YearMonth.parse(month) is month

    @pytest.mark.parametrize("value", ["2024", "2024-13", "January", None])
    def test_parse_rejects_malformed_keys(self, value):
        """Malformed keys should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            YearMonth.parse(value)
        assert exc_info.value.field == "month"

    def test_key_is_zero_padded(self):
        """Keys should match the ledger format."""
        assert YearMonth(2024, 3).key == "2024-03"
        assert str(YearMonth(2024, 11)) == "2024-11"

    def test_month_bounds(self):
        """Start and end should cover the whole month, leap years included."""
        february = YearMonth(2024, 2)
        assert february.start == date(2024, 2, 1)
        assert february.end == date(2024, 2, 29)
        assert YearMonth(2023, 2).days == 28

    def test_clamp_day_to_month_length(self):
        """Day 31 in April should land on April 30, never roll into May."""
        assert YearMonth(2024, 4).clamp_day(31) == date(2024, 4, 30)
        assert YearMonth(2024, 2).clamp_day(30) == date(2024, 2, 29)
        assert YearMonth(2024, 1).clamp_day(15) == date(2024, 1, 15)

    def test_add_crosses_year_boundaries(self):
        """Month arithmetic should wrap years in both directions."""
        assert YearMonth(2024, 12).next() == YearMonth(2025, 1)
        assert YearMonth(2024, 1).previous() == YearMonth(2023, 12)
        assert YearMonth(2024, 3).add(14) == YearMonth(2025, 5)

    def test_contains(self):
        january = YearMonth(2024, 1)
        assert january.contains(date(2024, 1, 31))
        assert not january.contains(date(2024, 2, 1))

    def test_ordering(self):
        """Months should order chronologically."""
        assert YearMonth(2023, 12) < YearMonth(2024, 1) < YearMonth(2024, 2)


class TestMonthHelpers:
    """Test suite for module-level date helpers."""

    def test_iter_months_inclusive(self):
        """Both ends of the range should be included."""
        months = list(iter_months(YearMonth(2023, 11), YearMonth(2024, 2)))
        assert [m.key for m in months] == ["2023-11", "2023-12", "2024-01", "2024-02"]

    def test_iter_months_empty_when_reversed(self):
        assert list(iter_months(YearMonth(2024, 2), YearMonth(2024, 1))) == []

    def test_month_key(self):
        assert month_key(date(2024, 9, 5)) == "2024-09"

    def test_generate_date_range(self):
        days = generate_date_range(date(2024, 2, 27), date(2024, 3, 1))
        assert days == [
            date(2024, 2, 27),
            date(2024, 2, 28),
            date(2024, 2, 29),
            date(2024, 3, 1),
        ]


class TestFirstStepOnOrAfter:
    """Test suite for anchor stepping."""

    def test_steps_forward(self):
        """The first step on or after the target is returned."""
        assert first_step_on_or_after(date(2024, 1, 5), 14, date(2024, 1, 6)) == date(2024, 1, 19)

    def test_target_on_step_is_kept(self):
        assert first_step_on_or_after(date(2024, 1, 5), 14, date(2024, 1, 19)) == date(2024, 1, 19)

    def test_steps_backward_from_future_anchor(self):
        """Anchors after the target step backwards."""
        assert first_step_on_or_after(date(2024, 3, 1), 14, date(2024, 1, 1)) == date(2024, 1, 5)
