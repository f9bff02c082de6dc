"""Debt payoff simulation using the avalanche or snowball method.

The simulator works month by month on copies of the debts. All minimum
payments plus the extra payment form a fixed monthly budget. Every debt
except the current target receives its minimum; the target receives the
rest. Once the target is cleared it is removed and its minimum is freed up
for the next target.

Only the target accrues interest in this model, and its balance falls by
the payment less that month's interest. Running out of months or being
unable to cover the target's interest are reported in the result, never
raised.
"""

from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .config import PayoffSettings
from .models import (
    Debt,
    PayoffEvent,
    PayoffResult,
    PayoffStatus,
    PayoffStrategy,
)

logger = structlog.get_logger()

MONTHS_PER_YEAR = Decimal("12")


def order_debts(debts: Sequence[Debt], strategy: PayoffStrategy) -> list[Debt]:
    """Order debts for payoff; ties keep their input order."""
    if strategy == PayoffStrategy.AVALANCHE:
        return sorted(debts, key=lambda d: d.interest_rate, reverse=True)
    if strategy == PayoffStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: d.balance)
    raise ValueError(f"Unknown payoff strategy: {strategy}")


def monthly_interest(debt: Debt) -> Decimal:
    """One month of simple interest on the current balance."""
    return debt.balance * (debt.interest_rate / Decimal("100")) / MONTHS_PER_YEAR


class DebtPayoffSimulator:
    """
    Simulate paying off a set of debts with a fixed monthly budget.

    The caller's Debt records are never modified; the simulation runs on
    deep copies so balances can be reduced locally.
    """

    def __init__(self, settings: Optional[PayoffSettings] = None):
        self.settings = settings or PayoffSettings()

    def simulate(
        self,
        debts: Sequence[Debt],
        strategy: PayoffStrategy = PayoffStrategy.AVALANCHE,
        extra_monthly_payment: Decimal = Decimal("0"),
    ) -> PayoffResult:
        """
        Run the payoff simulation.

        Args:
            debts: Debts to pay off. Debts with no balance are ignored.
            strategy: AVALANCHE (highest rate first) or SNOWBALL (smallest
                balance first).
            extra_monthly_payment: Amount paid on top of all minimums.

        Returns:
            PayoffResult with one PayoffEvent per cleared debt and a terminal
            status of COMPLETE, NON_CONVERGENT or CAP_REACHED.
        """
        strategy = PayoffStrategy(strategy)
        extra = Decimal(str(extra_monthly_payment))
        max_months = self.settings.max_months

        working = [
            debt.model_copy(deep=True)
            for debt in order_debts(debts, strategy)
            if debt.balance > 0
        ]
        payoff_order = [debt.name for debt in working]
        total_available = sum((d.minimum_payment for d in working), Decimal("0")) + extra

        events: list[PayoffEvent] = []
        total_interest = Decimal("0")
        status = PayoffStatus.COMPLETE
        month = 0

        while working:
            if month >= max_months:
                status = PayoffStatus.CAP_REACHED
                break

            target = working[0]
            minimum_for_others = sum((d.minimum_payment for d in working[1:]), Decimal("0"))
            available_for_target = total_available - minimum_for_others
            interest = monthly_interest(target)
            principal = max(Decimal("0"), available_for_target - interest)

            if principal <= 0:
                status = PayoffStatus.NON_CONVERGENT
                logger.info(
                    "payoff_non_convergent",
                    month=month + 1,
                    debt=target.name,
                    available=str(available_for_target),
                    interest=str(interest),
                )
                break

            month += 1
            total_interest += interest
            target.balance = max(Decimal("0"), target.balance - principal)

            if target.balance <= 0:
                working.pop(0)
                event = PayoffEvent(
                    month=month,
                    debt_id=target.id,
                    debt_name=target.name,
                    remaining_debts_count=len(working),
                    total_remaining_balance=sum((d.balance for d in working), Decimal("0")),
                )
                events.append(event)
                logger.info(
                    "debt_paid_off",
                    month=month,
                    debt=target.name,
                    remaining_debts=event.remaining_debts_count,
                    remaining_balance=str(event.total_remaining_balance),
                )

        result = PayoffResult(
            strategy=strategy,
            extra_monthly_payment=extra,
            status=status,
            events=events,
            months_simulated=month,
            total_interest_paid=total_interest,
            remaining_balance=sum((d.balance for d in working), Decimal("0")),
            payoff_order=payoff_order,
        )

        logger.info(
            "payoff_simulated",
            strategy=strategy.value,
            status=status.value,
            months=month,
            debts_cleared=len(events),
            total_interest=str(total_interest),
        )
        return result


def simulate_payoff(
    debts: Sequence[Debt],
    strategy: PayoffStrategy = PayoffStrategy.AVALANCHE,
    extra_monthly_payment: Decimal = Decimal("0"),
    *,
    max_months: Optional[int] = None,
) -> PayoffResult:
    """Convenience wrapper around DebtPayoffSimulator."""
    settings = PayoffSettings(max_months=max_months) if max_months else PayoffSettings()
    return DebtPayoffSimulator(settings).simulate(debts, strategy, extra_monthly_payment)
