"""Cash-flow projection over the pay & bill calendar.

This module provides:
1. project_month - pure projection of one month from an opening balance
2. CashFlowProjector - snapshot-bound projector that carries balances
   forward month by month from the tracking start date

The walk merges pay events (money in) with bill occurrences (money out),
groups them by date, and keeps a running balance. Each day is classified
against the caution threshold, and on pay days a reserve is recommended
when the bills due before the next payday would eat into the buffer.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .config import ProjectionSettings
from .dates import DEFAULT_TRACKING_START, YearMonth, iter_months
from .models import (
    BillCategory,
    BillOccurrence,
    BudgetSnapshot,
    CalendarEvent,
    DayProjection,
    EventKind,
    IncomeProfile,
    MonthProjection,
    classify_balance,
)
from .pay_schedule import generate_pay_dates, next_pay_date_after
from .recurrence import expand_occurrences

logger = structlog.get_logger()


def _pay_label(income: IncomeProfile) -> str:
    if income.pay_period_days == 14:
        return "Fortnightly Pay"
    return f"Pay ({income.pay_period_days}-day)"


def _counts_toward_balance(occurrence: BillOccurrence, settings: ProjectionSettings) -> bool:
    return settings.paid_bills_reduce_balance or not occurrence.is_paid


def _reserve_for_payday(
    payday: date,
    balance: Decimal,
    day_income: Decimal,
    income: IncomeProfile,
    occurrences: Sequence[BillOccurrence],
    tracking_start: date,
    settings: ProjectionSettings,
) -> tuple[bool, Decimal]:
    """Reserve advice for a payday: (recommended, amount).

    Sums the unpaid bills due after today and up to the next payday. If
    paying them would leave less than the buffer, recommend setting aside
    enough of today's pay to cover them plus the buffer.
    """
    next_payday = next_pay_date_after(income, payday)
    if next_payday is None:
        return False, Decimal("0")

    due_before_next = sum(
        (
            o.amount
            for o in occurrences
            if not o.is_paid and payday < o.due_date <= next_payday and o.due_date >= tracking_start
        ),
        Decimal("0"),
    )
    if due_before_next > 0 and balance - due_before_next < settings.reserve_buffer:
        balance_before_pay = balance - day_income
        amount = max(Decimal("0"), due_before_next + settings.reserve_buffer - balance_before_pay)
        return True, amount
    return False, Decimal("0")


def project_month(
    month: YearMonth,
    income: Optional[IncomeProfile],
    occurrences: Sequence[BillOccurrence],
    starting_balance: Decimal,
    tracking_start: Optional[date] = None,
    settings: Optional[ProjectionSettings] = None,
) -> MonthProjection:
    """Project the running balance through one month.

    Args:
        month: Month to project.
        income: Pay profile; None (or no anchor / zero pay) means no pay events.
        occurrences: Bill occurrences. Those outside ``month`` are used only
            for the reserve look-ahead on late-month paydays.
        starting_balance: Balance at the start of the month.
        tracking_start: Events dated before this are ignored.
        settings: Thresholds and policies; defaults to ProjectionSettings().

    Returns:
        MonthProjection with one DayProjection per date that has events.
    """
    month = YearMonth.parse(month)
    settings = settings or ProjectionSettings()
    tracking_start = tracking_start or DEFAULT_TRACKING_START
    if not isinstance(starting_balance, Decimal):
        starting_balance = Decimal(str(starting_balance))

    pay_dates = generate_pay_dates(income, month, tracking_start, settings.pay_search_window_days)
    in_month = [
        o for o in occurrences if month.contains(o.due_date) and o.due_date >= tracking_start
    ]

    events_by_date: dict[date, list[CalendarEvent]] = defaultdict(list)
    for pay_date in pay_dates:
        events_by_date[pay_date].append(
            CalendarEvent(
                date=pay_date,
                is_incoming=True,
                amount=income.net_per_period,
                label=_pay_label(income),
                kind=EventKind.PAY,
            )
        )
    for occurrence in in_month:
        events_by_date[occurrence.due_date].append(
            CalendarEvent(
                date=occurrence.due_date,
                is_incoming=False,
                amount=occurrence.amount,
                label=occurrence.name,
                kind=EventKind.DEBT if occurrence.category == BillCategory.DEBT else EventKind.BILL,
                occurrence=occurrence,
            )
        )

    days: list[DayProjection] = []
    running_balance = starting_balance
    for day in sorted(events_by_date):
        events = events_by_date[day]
        day_income = sum((e.amount for e in events if e.is_incoming), Decimal("0"))
        day_outgoings = sum(
            (
                e.amount
                for e in events
                if not e.is_incoming and _counts_toward_balance(e.occurrence, settings)
            ),
            Decimal("0"),
        )
        running_balance += day_income - day_outgoings

        reserve_recommended, reserve_amount = False, Decimal("0")
        if day_income > 0:
            reserve_recommended, reserve_amount = _reserve_for_payday(
                day, running_balance, day_income, income, occurrences, tracking_start, settings
            )

        days.append(
            DayProjection(
                date=day,
                running_balance=running_balance,
                events=events,
                reserve_recommended=reserve_recommended,
                reserve_amount=reserve_amount,
                status=classify_balance(running_balance, settings.caution_threshold),
            )
        )

    total_income = income.net_per_period * len(pay_dates) if pay_dates else Decimal("0")
    projection = MonthProjection(
        month_key=month.key,
        starting_balance=starting_balance,
        ending_balance=running_balance,
        days=days,
        pay_dates=pay_dates,
        occurrences=in_month,
        total_income=total_income,
        total_bills=sum((o.amount for o in in_month), Decimal("0")),
        total_unpaid_bills=sum((o.amount for o in in_month if not o.is_paid), Decimal("0")),
        caution_threshold=settings.caution_threshold,
    )

    logger.debug(
        "month_projected",
        month=month.key,
        starting_balance=str(starting_balance),
        ending_balance=str(running_balance),
        pay_events=len(pay_dates),
        bills=len(in_month),
        reserve_days=projection.reserve_days,
    )
    return projection


class CashFlowProjector:
    """Projects months of a budget snapshot with carried-forward balances.

    The snapshot's starting balance is the balance at the start of the
    tracking-start month. Every later month opens with the previous month's
    ending balance, computed by folding month projections forward from the
    tracking-start month. Ending balances are memoized per instance, so
    projecting a range of months costs one fold.

    When no tracking start date is set, there is nothing to carry forward
    from and every month opens at the starting balance.
    """

    def __init__(
        self,
        snapshot: BudgetSnapshot,
        settings: Optional[ProjectionSettings] = None,
        *,
        as_of: Optional[date] = None,
    ):
        """
        Initialize the projector.

        Args:
            snapshot: Budget snapshot; treated as immutable.
            settings: Projection thresholds and policies.
            as_of: Reference "today" for the overdue one-off policy.
        """
        self.snapshot = snapshot
        self.settings = settings or ProjectionSettings()
        self.as_of = as_of
        self._ending_balances: dict[YearMonth, Decimal] = {}

    @property
    def tracking_start(self) -> date:
        return self.snapshot.tracking_start_date

    @property
    def carries_forward(self) -> bool:
        return self.tracking_start > DEFAULT_TRACKING_START

    def occurrences(self, month: YearMonth) -> list[BillOccurrence]:
        """Bill occurrences due in ``month`` with ledger status filled in."""
        return expand_occurrences(
            self.snapshot.expenses,
            self.snapshot.debts,
            YearMonth.parse(month),
            self.tracking_start,
            self.snapshot.bill_payments,
            as_of=self.as_of,
            include_overdue_one_offs=self.settings.include_overdue_one_offs,
        )

    def pay_dates(self, month: YearMonth) -> list[date]:
        return generate_pay_dates(
            self.snapshot.income,
            YearMonth.parse(month),
            self.tracking_start,
            self.settings.pay_search_window_days,
        )

    def _project_with_opening(self, month: YearMonth, opening: Decimal) -> MonthProjection:
        # Next month's bills are included for the reserve look-ahead only
        occurrences = self.occurrences(month) + self.occurrences(month.next())
        return project_month(
            month,
            self.snapshot.income,
            occurrences,
            opening,
            self.tracking_start,
            self.settings,
        )

    def carry_forward_balance(self, month: YearMonth) -> Decimal:
        """Opening balance of ``month``.

        Folds month by month from the tracking-start month through the month
        before ``month``. Paid bills don't reduce the carried balance unless
        ``paid_bills_reduce_balance`` is set, exactly as in the month walk.
        """
        month = YearMonth.parse(month)
        balance = self.snapshot.starting_balance
        if not self.carries_forward:
            return balance

        origin = YearMonth.of(self.tracking_start)
        if month <= origin:
            return balance

        for current in iter_months(origin, month.previous()):
            cached = self._ending_balances.get(current)
            if cached is None:
                cached = self._project_with_opening(current, balance).ending_balance
                self._ending_balances[current] = cached
            balance = cached
        return balance

    def month_ending_balance(self, month: YearMonth) -> Decimal:
        month = YearMonth.parse(month)
        if not self.carries_forward:
            return self.project(month).ending_balance
        return self.carry_forward_balance(month.next())

    def project(self, month: YearMonth) -> MonthProjection:
        """Project ``month`` starting from its carried-forward balance."""
        month = YearMonth.parse(month)
        opening = self.carry_forward_balance(month)
        projection = self._project_with_opening(month, opening)
        if self.carries_forward:
            self._ending_balances[month] = projection.ending_balance

        logger.info(
            "cash_flow_projection",
            month=month.key,
            opening_balance=str(opening),
            ending_balance=str(projection.ending_balance),
            lowest_balance=str(projection.lowest_balance),
            critical_days=len(projection.critical_days),
            reserve_days=projection.reserve_days,
        )
        return projection

    def project_range(self, start: YearMonth, end: YearMonth) -> list[MonthProjection]:
        """Consecutive month projections from ``start`` to ``end`` inclusive."""
        return [self.project(month) for month in iter_months(YearMonth.parse(start), YearMonth.parse(end))]
