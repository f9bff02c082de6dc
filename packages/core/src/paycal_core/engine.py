"""BudgetEngine - the entry point used by the application.

Binds a budget snapshot, a ledger repository and configuration, and exposes
the calendar projection, bill tracker, payoff simulation and budget
analysis. Every call works from fresh state: the ledger is loaded from the
repository and a new projector is built, so results never depend on an
earlier call.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from .analysis import (
    BillTrackerSummary,
    BudgetSummary,
    DebtSummary,
    TwentyEightDayMonth,
    bill_status,
    summarize_bills,
    summarize_budget,
    summarize_debts,
    twenty_eight_day_impact,
)
from .config import PaycalConfig
from .dates import YearMonth
from .ledger import InMemoryLedgerRepository, LedgerRepository, toggle_bill_payment
from .models import (
    BillOccurrence,
    BillStatus,
    BudgetSnapshot,
    MonthProjection,
    PayoffResult,
    PayoffStrategy,
)
from .pay_schedule import upcoming_pay_dates
from .payoff import DebtPayoffSimulator
from .projector import CashFlowProjector

logger = structlog.get_logger()


class BudgetEngine:
    """
    Pay & bill calendar engine for one budget.

    Usage:
        engine = BudgetEngine(snapshot, as_of=date(2024, 1, 10))
        january = engine.project_month("2024-01")
        for day in january.days:
            print(day.date, day.running_balance, day.status)

        engine.toggle_bill("2024-01", "fixed-rent")
        plan = engine.simulate_payoff(PayoffStrategy.AVALANCHE, Decimal("200"))
    """

    def __init__(
        self,
        snapshot: BudgetSnapshot,
        repository: Optional[LedgerRepository] = None,
        config: Optional[PaycalConfig] = None,
        *,
        as_of: Optional[date] = None,
    ):
        """
        Initialize the engine.

        Args:
            snapshot: Budget inputs. Its ``bill_payments`` seed the in-memory
                repository when no repository is given.
            repository: Ledger storage; the ledger stored there replaces the
                snapshot's ledger on every call.
            config: Settings; defaults to PaycalConfig() from the environment.
            as_of: The application's "today"; defaults to date.today().
        """
        self.snapshot = snapshot
        self.repository = repository or InMemoryLedgerRepository(snapshot.bill_payments)
        self.config = config or PaycalConfig()
        self.as_of = as_of or date.today()

    def _current_snapshot(self) -> BudgetSnapshot:
        return self.snapshot.model_copy(update={"bill_payments": self.repository.load_ledger()})

    def _projector(self) -> CashFlowProjector:
        return CashFlowProjector(
            self._current_snapshot(),
            self.config.projection,
            as_of=self.as_of,
        )

    # -------------------------------------------------------------------------
    # Calendar
    # -------------------------------------------------------------------------

    def project_month(self, month: YearMonth) -> MonthProjection:
        return self._projector().project(YearMonth.parse(month))

    def project_range(self, start: YearMonth, end: YearMonth) -> list[MonthProjection]:
        """Projections for ``start`` through ``end`` sharing one carry-forward fold."""
        return self._projector().project_range(start, end)

    def upcoming_pay_dates(self, count: int = 6) -> list[date]:
        return upcoming_pay_dates(self.snapshot.income, self.as_of, count)

    # -------------------------------------------------------------------------
    # Bill tracker
    # -------------------------------------------------------------------------

    def bills(self, month: YearMonth) -> list[BillOccurrence]:
        """The month's bills with their current paid status."""
        return self._projector().occurrences(YearMonth.parse(month))

    def bill_tracker(self, month: YearMonth) -> list[tuple[BillOccurrence, BillStatus]]:
        return [(o, bill_status(o, self.as_of)) for o in self.bills(month)]

    def bill_summary(self, month: YearMonth) -> BillTrackerSummary:
        month = YearMonth.parse(month)
        return summarize_bills(month, self.bills(month), self.as_of)

    def toggle_bill(self, month: YearMonth, bill_id: str) -> BillOccurrence:
        """Flip a bill between paid and unpaid and persist the ledger.

        Returns the bill as regenerated from the saved ledger.

        Raises:
            KeyError: If ``bill_id`` is not a bill of ``month``.
        """
        month = YearMonth.parse(month)
        if not any(o.bill_id == bill_id for o in self.bills(month)):
            raise KeyError(f"No bill {bill_id!r} in {month.key}")

        ledger = toggle_bill_payment(self.repository.load_ledger(), month, bill_id, self.as_of)
        self.repository.save_ledger(ledger)
        logger.debug("ledger_saved", month=month.key, months=len(ledger.months))

        for occurrence in self.bills(month):
            if occurrence.bill_id == bill_id:
                return occurrence
        raise KeyError(f"No bill {bill_id!r} in {month.key}")

    # -------------------------------------------------------------------------
    # Debts and analysis
    # -------------------------------------------------------------------------

    def simulate_payoff(
        self,
        strategy: PayoffStrategy = PayoffStrategy.AVALANCHE,
        extra_monthly_payment: Decimal = Decimal("0"),
    ) -> PayoffResult:
        simulator = DebtPayoffSimulator(self.config.payoff)
        return simulator.simulate(self.snapshot.debts, strategy, extra_monthly_payment)

    def compare_strategies(
        self, extra_monthly_payment: Decimal = Decimal("0")
    ) -> dict[PayoffStrategy, PayoffResult]:
        """Avalanche and snowball results for the same extra payment."""
        return {
            strategy: self.simulate_payoff(strategy, extra_monthly_payment)
            for strategy in PayoffStrategy
        }

    def debt_summary(self) -> DebtSummary:
        return summarize_debts(self.snapshot.debts)

    def budget_summary(self) -> BudgetSummary:
        return summarize_budget(self.snapshot)

    def twenty_eight_day_impact(self, months: int = 12) -> list[TwentyEightDayMonth]:
        """28-day bill load per month, starting with the as-of month."""
        return twenty_eight_day_impact(self.snapshot, YearMonth.of(self.as_of), months)
