"""Tests for the debt payoff simulator."""

from decimal import Decimal

import pytest

from paycal_core.config import PayoffSettings
from paycal_core.models import Debt, PayoffStatus, PayoffStrategy
from paycal_core.payoff import (
    DebtPayoffSimulator,
    monthly_interest,
    order_debts,
    simulate_payoff,
)


@pytest.fixture
def debts() -> list[Debt]:
    """A: 1000 at 20% (min 50), B: 500 at 10% (min 30)."""
    return [
        Debt(id="a", name="A", balance=Decimal("1000"), interest_rate=Decimal("20"),
             minimum_payment=Decimal("50")),
        Debt(id="b", name="B", balance=Decimal("500"), interest_rate=Decimal("10"),
             minimum_payment=Decimal("30")),
    ]


class TestOrdering:
    """Test suite for strategy ordering."""

    def test_avalanche_highest_rate_first(self, debts):
        assert [d.name for d in order_debts(debts, PayoffStrategy.AVALANCHE)] == ["A", "B"]

    def test_snowball_smallest_balance_first(self, debts):
        assert [d.name for d in order_debts(debts, PayoffStrategy.SNOWBALL)] == ["B", "A"]

    def test_ties_keep_input_order(self):
        same = [
            Debt(id=str(i), name=f"D{i}", balance=Decimal("100"), interest_rate=Decimal("5"))
            for i in range(3)
        ]
        assert [d.id for d in order_debts(same, PayoffStrategy.AVALANCHE)] == ["0", "1", "2"]
        assert [d.id for d in order_debts(same, PayoffStrategy.SNOWBALL)] == ["0", "1", "2"]

    def test_monthly_interest(self):
        debt = Debt(id="x", name="X", balance=Decimal("1200"), interest_rate=Decimal("12"))
        assert monthly_interest(debt) == Decimal("12")


class TestDebtPayoffSimulator:
    """Test suite for DebtPayoffSimulator."""

    def test_avalanche_clears_a_before_b(self, debts):
        """The higher-rate debt is cleared first."""
        result = simulate_payoff(debts, PayoffStrategy.AVALANCHE, Decimal("0"))

        assert result.status == PayoffStatus.COMPLETE
        assert [e.debt_id for e in result.events] == ["a", "b"]
        first = result.events[0]
        assert first.remaining_debts_count == 1
        assert first.total_remaining_balance == Decimal("500")
        assert result.months_to_payoff == result.events[-1].month
        assert result.remaining_balance == Decimal("0")
        assert result.payoff_order == ["A", "B"]

    def test_snowball_clears_b_before_a(self, debts):
        result = simulate_payoff(debts, PayoffStrategy.SNOWBALL, Decimal("0"))

        assert result.is_complete
        assert [e.debt_id for e in result.events] == ["b", "a"]

    def test_exact_schedule_without_interest(self):
        """300 at 0% paying 100 a month takes three months."""
        loan = Debt(id="l", name="Loan", balance=Decimal("300"), minimum_payment=Decimal("100"))
        result = simulate_payoff([loan])

        assert result.months_to_payoff == 3
        assert result.total_interest_paid == Decimal("0")
        assert result.events[0].month == 3

    def test_extra_payment_never_slows_payoff(self, debts):
        """More extra payment never adds months or interest."""
        results = [
            simulate_payoff(debts, PayoffStrategy.AVALANCHE, Decimal(extra))
            for extra in ("0", "25", "100", "400")
        ]

        months = [r.months_to_payoff for r in results]
        interest = [r.total_interest_paid for r in results]
        assert all(r.is_complete for r in results)
        assert months == sorted(months, reverse=True)
        assert interest == sorted(interest, reverse=True)
        assert months[-1] < months[0]

    def test_non_convergent_when_interest_exceeds_payment(self):
        """Payments that can't cover interest stop the simulation."""
        card = Debt(id="c", name="Card", balance=Decimal("10000"), interest_rate=Decimal("24"),
                    minimum_payment=Decimal("100"))
        result = simulate_payoff([card])

        assert result.status == PayoffStatus.NON_CONVERGENT
        assert result.months_to_payoff is None
        assert result.months_simulated == 0
        assert result.remaining_balance == Decimal("10000")

    def test_cap_reached(self):
        """Slow payoff stops at the month cap."""
        mortgage = Debt(id="m", name="Mortgage", balance=Decimal("100000"),
                        minimum_payment=Decimal("100"))
        result = simulate_payoff([mortgage])

        assert result.status == PayoffStatus.CAP_REACHED
        assert result.months_simulated == 120
        assert result.remaining_balance == Decimal("88000")
        assert result.months_to_payoff is None

    def test_max_months_setting(self):
        loan = Debt(id="l", name="Loan", balance=Decimal("1000"), minimum_payment=Decimal("100"))
        simulator = DebtPayoffSimulator(PayoffSettings(max_months=5))

        result = simulator.simulate([loan])

        assert result.status == PayoffStatus.CAP_REACHED
        assert result.months_simulated == 5

    def test_zero_balance_debts_ignored(self):
        paid_off = Debt(id="z", name="Old card", balance=Decimal("0"), minimum_payment=Decimal("25"))
        result = simulate_payoff([paid_off])

        assert result.is_complete
        assert result.events == []
        assert result.months_to_payoff == 0

    def test_inputs_not_mutated(self, debts):
        """The simulation runs on copies."""
        simulate_payoff(debts, PayoffStrategy.AVALANCHE, Decimal("100"))

        assert debts[0].balance == Decimal("1000")
        assert debts[1].balance == Decimal("500")

    def test_strategy_accepts_string(self, debts):
        result = simulate_payoff(debts, "snowball")
        assert result.strategy == PayoffStrategy.SNOWBALL
