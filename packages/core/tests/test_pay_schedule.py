"""Tests for pay date generation."""

from datetime import date
from decimal import Decimal

import pytest

from paycal_core.dates import YearMonth
from paycal_core.models import IncomeProfile
from paycal_core.pay_schedule import (
    generate_pay_dates,
    next_pay_date_after,
    pay_dates_between,
    upcoming_pay_dates,
)


@pytest.fixture
def fortnightly() -> IncomeProfile:
    return IncomeProfile(amount_per_period=Decimal("1000"), next_pay_date=date(2024, 1, 5))


class TestGeneratePayDates:
    """Test suite for generate_pay_dates."""

    def test_fortnightly_in_january(self, fortnightly: IncomeProfile):
        """Anchor on Jan 5 gives pay on the 5th and 19th."""
        assert generate_pay_dates(fortnightly, YearMonth(2024, 1)) == [
            date(2024, 1, 5),
            date(2024, 1, 19),
        ]

    def test_three_paydays_in_a_month(self, fortnightly: IncomeProfile):
        """Some months get a third pay date."""
        assert generate_pay_dates(fortnightly, YearMonth(2024, 3)) == [
            date(2024, 3, 1),
            date(2024, 3, 15),
            date(2024, 3, 29),
        ]

    def test_months_before_anchor_step_backwards(self, fortnightly: IncomeProfile):
        """The anchor is a point on the schedule, not its start."""
        assert generate_pay_dates(fortnightly, YearMonth(2023, 12)) == [
            date(2023, 12, 8),
            date(2023, 12, 22),
        ]

    def test_tracking_start_filters_pay_dates(self, fortnightly: IncomeProfile):
        assert generate_pay_dates(fortnightly, YearMonth(2024, 1), date(2024, 1, 10)) == [
            date(2024, 1, 19),
        ]

    @pytest.mark.parametrize(
        "income",
        [
            None,
            IncomeProfile(amount_per_period=Decimal("1000")),
            IncomeProfile(amount_per_period=Decimal("0"), next_pay_date=date(2024, 1, 5)),
        ],
    )
    def test_no_income_means_no_pay_dates(self, income):
        """Missing profile, anchor or amount gives no pay events."""
        assert generate_pay_dates(income, YearMonth(2024, 1)) == []

    def test_gross_income_is_scheduled(self):
        """Gross pay with tax still produces pay dates."""
        income = IncomeProfile(
            amount_per_period=Decimal("1500"),
            amount_is_gross=True,
            tax_rate=Decimal("0.2"),
            next_pay_date=date(2024, 1, 5),
        )
        assert income.net_per_period == Decimal("1200.0")
        assert len(generate_pay_dates(income, YearMonth(2024, 1))) == 2

    def test_weekly_period(self):
        weekly = IncomeProfile(
            amount_per_period=Decimal("500"), next_pay_date=date(2024, 2, 2), pay_period_days=7
        )
        assert generate_pay_dates(weekly, YearMonth(2024, 2)) == [
            date(2024, 2, 2),
            date(2024, 2, 9),
            date(2024, 2, 16),
            date(2024, 2, 23),
        ]


class TestPayDateHelpers:
    """Test suite for pay date lookups."""

    def test_pay_dates_between(self, fortnightly: IncomeProfile):
        assert pay_dates_between(fortnightly, date(2024, 1, 1), date(2024, 1, 31)) == [
            date(2024, 1, 5),
            date(2024, 1, 19),
        ]

    def test_next_pay_date_is_strictly_after(self, fortnightly: IncomeProfile):
        """On a payday, the next payday is one period later."""
        assert next_pay_date_after(fortnightly, date(2024, 1, 19)) == date(2024, 2, 2)
        assert next_pay_date_after(fortnightly, date(2024, 1, 18)) == date(2024, 1, 19)

    def test_next_pay_date_without_income(self):
        assert next_pay_date_after(None, date(2024, 1, 1)) is None

    def test_upcoming_pay_dates(self, fortnightly: IncomeProfile):
        assert upcoming_pay_dates(fortnightly, date(2024, 1, 6), count=3) == [
            date(2024, 1, 19),
            date(2024, 2, 2),
            date(2024, 2, 16),
        ]

    def test_monthly_net(self, fortnightly: IncomeProfile):
        """Fortnightly pay converts with 26 periods a year."""
        assert fortnightly.periods_per_year == Decimal("26")
        assert fortnightly.monthly_net == Decimal("1000") * 26 / 12
