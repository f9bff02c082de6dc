"""Tests for BudgetEngine."""

from datetime import date
from decimal import Decimal

import pytest

from paycal_core import BudgetEngine, snapshot_from_budget_data
from paycal_core.config import PaycalConfig, PayoffSettings, ProjectionSettings
from paycal_core.ledger import InMemoryLedgerRepository
from paycal_core.models import BillStatus, PayoffStatus, PayoffStrategy


@pytest.fixture
def snapshot():
    return snapshot_from_budget_data(
        {
            "income": {"biweeklyNet": 1000, "nextPayDate": "2024-01-05"},
            "expenses": {
                "fixed": [{"id": "rent", "name": "Rent", "amount": 1200, "dueDayOfMonth": 1}],
                "variable": [{"id": "power", "name": "Power", "amount": 150, "dueDayOfMonth": 12}],
            },
            "debts": [
                {"id": "a", "name": "A", "balance": 1000, "interestRate": 20,
                 "minimumPayment": 50, "paymentDate": 25},
                {"id": "b", "name": "B", "balance": 500, "interestRate": 10,
                 "minimumPayment": 30, "paymentDate": 25},
            ],
            "startingBalance": 500,
            "trackingStartDate": "2024-01-01",
        }
    )


@pytest.fixture
def engine(snapshot) -> BudgetEngine:
    config = PaycalConfig(projection=ProjectionSettings(), payoff=PayoffSettings())
    return BudgetEngine(snapshot, config=config, as_of=date(2024, 1, 10))


class TestCalendar:
    """Test suite for calendar projections through the engine."""

    def test_project_month(self, engine: BudgetEngine):
        january = engine.project_month("2024-01")

        # 500 - 1200 + 1000 - 150 + 1000 - 80
        assert january.ending_balance == Decimal("1070")
        assert january.pay_dates == [date(2024, 1, 5), date(2024, 1, 19)]

    def test_project_range_carries_forward(self, engine: BudgetEngine):
        months = engine.project_range("2024-01", "2024-03")

        assert [m.month_key for m in months] == ["2024-01", "2024-02", "2024-03"]
        assert months[1].starting_balance == months[0].ending_balance
        assert months[2].starting_balance == months[1].ending_balance

    def test_upcoming_pay_dates(self, engine: BudgetEngine):
        assert engine.upcoming_pay_dates(2) == [date(2024, 1, 19), date(2024, 2, 2)]


class TestBillTracker:
    """Test suite for the bill tracker round trip."""

    def test_bill_tracker_statuses(self, engine: BudgetEngine):
        tracker = dict((o.bill_id, status) for o, status in engine.bill_tracker("2024-01"))

        assert tracker["fixed-rent"] == BillStatus.OVERDUE
        assert tracker["variable-power"] == BillStatus.DUE_SOON
        assert tracker["debt-a"] == BillStatus.UPCOMING

    def test_toggle_persists_through_repository(self, snapshot):
        """Toggling saves the ledger and later projections see it."""
        repository = InMemoryLedgerRepository()
        engine = BudgetEngine(snapshot, repository, as_of=date(2024, 1, 10))

        bill = engine.toggle_bill("2024-01", "fixed-rent")

        assert bill.is_paid is True
        assert bill.paid_date == date(2024, 1, 10)
        assert repository.saves == 1
        assert repository.load_ledger().is_paid("2024-01", "fixed-rent")
        # Paid rent no longer moves the balance
        assert engine.project_month("2024-01").ending_balance == Decimal("2270")

    def test_toggle_twice_restores_unpaid(self, engine: BudgetEngine):
        engine.toggle_bill("2024-01", "fixed-rent")
        bill = engine.toggle_bill("2024-01", "fixed-rent")

        assert bill.is_paid is False
        assert bill.paid_date is None

    def test_toggle_unknown_bill(self, engine: BudgetEngine):
        with pytest.raises(KeyError):
            engine.toggle_bill("2024-01", "fixed-nope")

    def test_bill_summary(self, engine: BudgetEngine):
        engine.toggle_bill("2024-01", "fixed-rent")
        summary = engine.bill_summary("2024-01")

        assert summary.total_bills == 4
        assert summary.paid_bills == 1
        assert summary.overdue_bills == 0
        assert summary.total_amount == Decimal("1430")

    def test_snapshot_ledger_seeds_repository(self, snapshot):
        """Without a repository the snapshot's own ledger is used."""
        paid = snapshot.model_copy(
            update={"bill_payments": snapshot.bill_payments.with_payment(
                "2024-01", "fixed-rent", True, date(2024, 1, 1)
            )}
        )
        engine = BudgetEngine(paid, as_of=date(2024, 1, 10))

        assert engine.bills("2024-01")[0].is_paid is True


class TestDebtsAndAnalysis:
    """Test suite for payoff and analysis through the engine."""

    def test_simulate_payoff(self, engine: BudgetEngine):
        result = engine.simulate_payoff(PayoffStrategy.AVALANCHE)

        assert result.status == PayoffStatus.COMPLETE
        assert [e.debt_id for e in result.events] == ["a", "b"]

    def test_compare_strategies(self, engine: BudgetEngine):
        results = engine.compare_strategies(Decimal("100"))

        assert set(results) == {PayoffStrategy.AVALANCHE, PayoffStrategy.SNOWBALL}
        assert results[PayoffStrategy.SNOWBALL].events[0].debt_id == "b"

    def test_payoff_cap_from_config(self, snapshot):
        config = PaycalConfig(payoff=PayoffSettings(max_months=3))
        engine = BudgetEngine(snapshot, config=config, as_of=date(2024, 1, 10))

        assert engine.simulate_payoff().status == PayoffStatus.CAP_REACHED

    def test_debt_summary(self, engine: BudgetEngine):
        assert engine.debt_summary().total_minimum_payment == Decimal("80")

    def test_budget_summary(self, engine: BudgetEngine):
        summary = engine.budget_summary()
        assert summary.total_expenses == Decimal("1430")

    def test_twenty_eight_day_impact_starts_at_as_of(self, engine: BudgetEngine):
        impact = engine.twenty_eight_day_impact(months=2)
        assert [m.month_key for m in impact] == ["2024-01", "2024-02"]
