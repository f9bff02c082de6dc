"""Budget analysis over a snapshot: monthly totals, health score, 28-day
impact, bill tracker status and debt summary.

Monthly totals use monthly equivalents: 28-day bills count 13/12 of their
amount, one-off expenses count nothing, and pay is converted with the
number of pay periods in a year.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import structlog
from pydantic import BaseModel, Field, computed_field

from .dates import YearMonth, iter_months
from .models import (
    BillOccurrence,
    BillStatus,
    BudgetSnapshot,
    Debt,
    ExpenseCategory,
    TwentyEightDayExpense,
)
from .recurrence import twenty_eight_day_dates

logger = structlog.get_logger()

DUE_SOON_DAYS = 3


# =============================================================================
# RESULT MODELS
# =============================================================================

class CategoryTotals(BaseModel):
    """Monthly equivalent spend per expense category."""
    fixed: Decimal = Decimal("0")
    variable: Decimal = Decimal("0")
    discretionary: Decimal = Decimal("0")
    twenty_eight_day: Decimal = Decimal("0")
    one_off: Decimal = Decimal("0")

    @computed_field
    @property
    def total(self) -> Decimal:
        return self.fixed + self.variable + self.discretionary + self.twenty_eight_day


class BudgetSummary(BaseModel):
    monthly_income: Decimal
    expenses: CategoryTotals
    debt_payments: Decimal
    total_expenses: Decimal
    monthly_surplus: Decimal
    health_score: int = Field(ge=0, le=100)
    total_debt: Decimal
    warnings: list[str] = Field(default_factory=list)


class TwentyEightDayMonth(BaseModel):
    """28-day bill load of one month compared with the average month."""
    month_key: str
    total: Decimal
    occurrences: int
    is_high_month: bool


class BillTrackerSummary(BaseModel):
    month_key: str
    total_bills: int
    paid_bills: int
    total_amount: Decimal
    paid_amount: Decimal
    overdue_bills: int

    @computed_field
    @property
    def unpaid_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount


class DebtSummary(BaseModel):
    total_debt: Decimal
    total_minimum_payment: Decimal
    average_interest_rate: Decimal = Field(description="Balance-weighted annual rate")


# =============================================================================
# TOTALS
# =============================================================================

def monthly_income(snapshot: BudgetSnapshot) -> Decimal:
    if snapshot.income is None:
        return Decimal("0")
    return snapshot.income.monthly_net


def category_totals(snapshot: BudgetSnapshot) -> CategoryTotals:
    """Monthly equivalents by category (one-off is always zero)."""
    totals = {}
    for category in ExpenseCategory:
        totals[category.value] = sum(
            (e.monthly_equivalent for e in snapshot.expenses_in(category)),
            Decimal("0"),
        )
    return CategoryTotals(**totals)


def debt_payments(debts: Sequence[Debt]) -> Decimal:
    return sum((d.minimum_payment for d in debts), Decimal("0"))


def health_score(
    income: Decimal,
    expenses: CategoryTotals,
    debt_total_payments: Decimal,
    emergency_fund: Decimal,
) -> int:
    """Financial health score from 0 to 100.

    Starts at 100 and adjusts for a deficit, heavy debt payments, a thin
    emergency fund, high discretionary spending and a strong surplus.
    """
    surplus = income - expenses.total - debt_total_payments
    score = 100

    if surplus < 0:
        score -= 30
    if debt_total_payments > income * Decimal("0.3"):
        score -= 20
    if emergency_fund < expenses.fixed * 3:
        score -= 15
    if expenses.discretionary > income * Decimal("0.2"):
        score -= 10
    if surplus > income * Decimal("0.2"):
        score += 15

    return max(0, min(100, score))


def summarize_budget(snapshot: BudgetSnapshot) -> BudgetSummary:
    """Monthly budget overview of a snapshot."""
    income = monthly_income(snapshot)
    expenses = category_totals(snapshot)
    debts_monthly = debt_payments(snapshot.debts)
    total_expenses = expenses.total + debts_monthly
    surplus = income - total_expenses
    warnings: list[str] = []

    if income == 0:
        warnings.append("No income configured; projections will only decline.")
    if surplus < 0:
        warnings.append("Monthly expenses exceed income.")
    if snapshot.expenses_in(ExpenseCategory.TWENTY_EIGHT_DAY):
        warnings.append(
            "28-day bills don't align with calendar months; some months carry two charges."
        )

    summary = BudgetSummary(
        monthly_income=income,
        expenses=expenses,
        debt_payments=debts_monthly,
        total_expenses=total_expenses,
        monthly_surplus=surplus,
        health_score=health_score(income, expenses, debts_monthly, snapshot.emergency_fund.current),
        total_debt=sum((d.balance for d in snapshot.debts), Decimal("0")),
        warnings=warnings,
    )
    logger.info(
        "budget_summarized",
        monthly_income=str(income),
        total_expenses=str(total_expenses),
        surplus=str(surplus),
        health_score=summary.health_score,
    )
    return summary


# =============================================================================
# 28-DAY IMPACT
# =============================================================================

def twenty_eight_day_impact(
    snapshot: BudgetSnapshot,
    start: YearMonth,
    months: int = 12,
) -> list[TwentyEightDayMonth]:
    """Per-month 28-day bill load for ``months`` months from ``start``.

    A month is "high" when its load exceeds the average monthly equivalent
    (13/12 of the combined 28-day amounts).
    """
    bills = [
        e for e in snapshot.expenses_in(ExpenseCategory.TWENTY_EIGHT_DAY)
        if isinstance(e, TwentyEightDayExpense) and e.anchor_date is not None
    ]
    average = sum((e.monthly_equivalent for e in bills), Decimal("0"))
    start = YearMonth.parse(start)

    analysis = []
    for month in iter_months(start, start.add(months - 1)):
        total = Decimal("0")
        count = 0
        for expense in bills:
            hits = len(twenty_eight_day_dates(expense.anchor_date, month))
            total += expense.amount * hits
            count += hits
        analysis.append(
            TwentyEightDayMonth(
                month_key=month.key,
                total=total,
                occurrences=count,
                is_high_month=total > average,
            )
        )
    return analysis


# =============================================================================
# BILL TRACKER
# =============================================================================

def bill_status(occurrence: BillOccurrence, as_of: date) -> BillStatus:
    """Paid, overdue, due within three days, or upcoming."""
    if occurrence.is_paid:
        return BillStatus.PAID
    days_until = (occurrence.due_date - as_of).days
    if days_until < 0:
        return BillStatus.OVERDUE
    if days_until <= DUE_SOON_DAYS:
        return BillStatus.DUE_SOON
    return BillStatus.UPCOMING


def summarize_bills(
    month: YearMonth,
    occurrences: Sequence[BillOccurrence],
    as_of: Optional[date] = None,
) -> BillTrackerSummary:
    """Counts and amounts for a month's bill tracker."""
    month = YearMonth.parse(month)
    paid = [o for o in occurrences if o.is_paid]
    overdue = 0
    if as_of is not None:
        overdue = sum(1 for o in occurrences if bill_status(o, as_of) == BillStatus.OVERDUE)
    return BillTrackerSummary(
        month_key=month.key,
        total_bills=len(occurrences),
        paid_bills=len(paid),
        total_amount=sum((o.amount for o in occurrences), Decimal("0")),
        paid_amount=sum((o.amount for o in paid), Decimal("0")),
        overdue_bills=overdue,
    )


# =============================================================================
# DEBTS
# =============================================================================

def summarize_debts(debts: Sequence[Debt]) -> DebtSummary:
    total = sum((d.balance for d in debts), Decimal("0"))
    weighted = Decimal("0")
    if total > 0:
        weighted = sum((d.interest_rate * d.balance for d in debts), Decimal("0")) / total
    return DebtSummary(
        total_debt=total,
        total_minimum_payment=debt_payments(debts),
        average_interest_rate=weighted,
    )
