"""Recurrence expansion: expense and debt schedules -> dated bill occurrences.

Each expense category has its own rule, applied independently and unioned:

- Fixed / Variable: one bill a month on ``min(due_day, days_in_month)``
- 28-day cycle: every ``anchor + 28k`` that lands in the month (0, 1 or 2)
- One-off: the single ``due_date`` if it lands in the month
- Debt: one minimum payment a month on ``min(due_day, days_in_month)``
- Discretionary: never scheduled

Bills dated before the tracking start date are dropped. Items without a
usable schedule are skipped, since the application lets users fill in
expense records incrementally.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import structlog

from .dates import DEFAULT_TRACKING_START, YearMonth, first_step_on_or_after, iter_months
from .models import (
    BillCategory,
    BillOccurrence,
    BillPaymentLedger,
    Debt,
    DiscretionaryExpense,
    FixedExpense,
    OneOffExpense,
    TwentyEightDayExpense,
    VariableExpense,
)

logger = structlog.get_logger()

TWENTY_EIGHT_DAY_CYCLE = 28

_CATEGORY_ORDER = {category: index for index, category in enumerate(BillCategory)}


# =============================================================================
# BILL IDS
# =============================================================================

def fixed_bill_id(source_id: str) -> str:
    return f"fixed-{source_id}"


def variable_bill_id(source_id: str) -> str:
    return f"variable-{source_id}"


def twenty_eight_day_bill_id(source_id: str, due_date: date) -> str:
    """Embeds the date so two charges in one month are tracked separately."""
    return f"28day-{source_id}-{due_date.isoformat()}"


def one_off_bill_id(source_id: str) -> str:
    return f"oneoff-{source_id}"


def debt_bill_id(source_id: str) -> str:
    return f"debt-{source_id}"


# =============================================================================
# PER-CATEGORY RULES
# =============================================================================

def _monthly_due_date(due_day: Optional[int], month: YearMonth) -> Optional[date]:
    if due_day is None:
        return None
    return month.clamp_day(due_day)


def twenty_eight_day_dates(anchor: date, month: YearMonth) -> list[date]:
    """All ``anchor + 28k`` (k >= 0) dates inside ``month``."""
    if anchor > month.end:
        return []
    current = max(anchor, first_step_on_or_after(anchor, TWENTY_EIGHT_DAY_CYCLE, month.start))
    dates = []
    while current <= month.end:
        dates.append(current)
        current += timedelta(days=TWENTY_EIGHT_DAY_CYCLE)
    return dates


def _expense_occurrences(expense, month: YearMonth) -> list[tuple[str, date, BillCategory]]:
    """(bill_id, due_date, category) triples for one expense, before any cutoff."""
    if isinstance(expense, FixedExpense):
        due = _monthly_due_date(expense.due_day_of_month, month)
        return [] if due is None else [(fixed_bill_id(expense.id), due, BillCategory.FIXED)]
    if isinstance(expense, VariableExpense):
        due = _monthly_due_date(expense.due_day_of_month, month)
        return [] if due is None else [(variable_bill_id(expense.id), due, BillCategory.VARIABLE)]
    if isinstance(expense, TwentyEightDayExpense):
        if expense.anchor_date is None:
            return []
        return [
            (twenty_eight_day_bill_id(expense.id, due), due, BillCategory.TWENTY_EIGHT_DAY)
            for due in twenty_eight_day_dates(expense.anchor_date, month)
        ]
    if isinstance(expense, OneOffExpense):
        if expense.due_date is None or not month.contains(expense.due_date):
            return []
        return [(one_off_bill_id(expense.id), expense.due_date, BillCategory.ONE_OFF)]
    if isinstance(expense, DiscretionaryExpense):
        return []
    raise TypeError(f"Unsupported expense type: {type(expense).__name__}")


def _is_unscheduled(expense) -> bool:
    if isinstance(expense, (FixedExpense, VariableExpense)):
        return expense.due_day_of_month is None
    if isinstance(expense, TwentyEightDayExpense):
        return expense.anchor_date is None
    if isinstance(expense, OneOffExpense):
        return expense.due_date is None
    return False


def _display_name(expense, category: BillCategory) -> str:
    if category == BillCategory.TWENTY_EIGHT_DAY:
        return f"{expense.name} (28-day)"
    if category == BillCategory.DEBT:
        return f"{expense.name} Payment"
    return expense.name


# =============================================================================
# EXPANSION
# =============================================================================

def expand_occurrences(
    expenses: Sequence,
    debts: Sequence[Debt],
    month: YearMonth,
    tracking_start: Optional[date] = None,
    ledger: Optional[BillPaymentLedger] = None,
    *,
    as_of: Optional[date] = None,
    include_overdue_one_offs: bool = True,
) -> list[BillOccurrence]:
    """Expand expense and debt schedules into the bills due in ``month``.

    Args:
        expenses: Expense items (any category).
        debts: Debts; each contributes its minimum payment.
        month: The calendar month to expand.
        tracking_start: Bills dated before this are excluded.
        ledger: Payment ledger used to backfill ``is_paid``/``paid_date``.
        as_of: Reference "today" for the overdue one-off policy.
        include_overdue_one_offs: When False (and ``as_of`` is given), one-off
            expenses dated before ``as_of`` are dropped instead of kept as
            overdue.

    Returns:
        Occurrences sorted by due date, then category order, then input order.
    """
    tracking_start = tracking_start or DEFAULT_TRACKING_START
    ledger = ledger or BillPaymentLedger()
    month = YearMonth.parse(month)

    candidates: list[tuple[str, str, str, date, Decimal, BillCategory]] = []
    skipped = 0

    for expense in expenses:
        if _is_unscheduled(expense):
            skipped += 1
            continue
        for bill_id, due, category in _expense_occurrences(expense, month):
            if (
                category == BillCategory.ONE_OFF
                and not include_overdue_one_offs
                and as_of is not None
                and due < as_of
            ):
                continue
            candidates.append(
                (bill_id, expense.id, _display_name(expense, category), due, expense.amount, category)
            )

    for debt in debts:
        due = _monthly_due_date(debt.payment_due_day, month)
        if due is None:
            skipped += 1
            continue
        candidates.append(
            (debt_bill_id(debt.id), debt.id, _display_name(debt, BillCategory.DEBT),
             due, debt.minimum_payment, BillCategory.DEBT)
        )

    occurrences = []
    for bill_id, source_id, name, due, amount, category in candidates:
        # Skip, never stop: later dates of the same schedule may still qualify
        if due < tracking_start:
            continue
        record = ledger.find(month.key, bill_id)
        occurrences.append(
            BillOccurrence(
                bill_id=bill_id,
                source_id=source_id,
                name=name,
                due_date=due,
                amount=amount,
                category=category,
                is_paid=record.is_paid if record else False,
                paid_date=record.paid_date if record and record.is_paid else None,
            )
        )

    occurrences.sort(key=lambda o: (o.due_date, _CATEGORY_ORDER[o.category]))

    logger.debug(
        "occurrences_expanded",
        month=month.key,
        occurrences=len(occurrences),
        unscheduled_skipped=skipped,
    )
    return occurrences


def expand_range(
    expenses: Sequence,
    debts: Sequence[Debt],
    start: YearMonth,
    end: YearMonth,
    tracking_start: Optional[date] = None,
    ledger: Optional[BillPaymentLedger] = None,
    **kwargs,
) -> list[BillOccurrence]:
    """Occurrences for every month from ``start`` to ``end`` inclusive."""
    occurrences: list[BillOccurrence] = []
    for month in iter_months(YearMonth.parse(start), YearMonth.parse(end)):
        occurrences.extend(
            expand_occurrences(expenses, debts, month, tracking_start, ledger, **kwargs)
        )
    return occurrences


def unpaid_total(occurrences: Iterable[BillOccurrence]) -> Decimal:
    """Sum of the amounts of occurrences not marked paid."""
    return sum((o.amount for o in occurrences if not o.is_paid), Decimal("0"))
