"""Data models for paycal-core.

This package provides:
- Budget snapshot inputs: income, tagged expense union, debts, savings (budget.py)
- The bill payment ledger (ledger.py)
- Derived occurrences, calendar days, month projections and payoff results
  (projection.py)
"""

from paycal_core.models.ledger import (
    BillPaymentLedger,
    BillPaymentRecord,
)
from paycal_core.models.budget import (
    # Enumerations
    ExpenseCategory,
    # Income
    IncomeProfile,
    # Expenses
    ExpenseItem,
    FixedExpense,
    VariableExpense,
    DiscretionaryExpense,
    TwentyEightDayExpense,
    OneOffExpense,
    # Debts
    Debt,
    # Savings
    EmergencyFund,
    SavingsGoal,
    # Snapshot
    BudgetSnapshot,
)
from paycal_core.models.projection import (
    # Enumerations
    BillCategory,
    BillStatus,
    DayStatus,
    EventKind,
    PayoffStatus,
    PayoffStrategy,
    # Calendar
    BillOccurrence,
    CalendarEvent,
    DayProjection,
    MonthProjection,
    TimelinePoint,
    classify_balance,
    # Debt payoff
    PayoffEvent,
    PayoffResult,
)

__all__ = [
    # Ledger
    "BillPaymentLedger",
    "BillPaymentRecord",
    # Budget inputs
    "ExpenseCategory",
    "IncomeProfile",
    "ExpenseItem",
    "FixedExpense",
    "VariableExpense",
    "DiscretionaryExpense",
    "TwentyEightDayExpense",
    "OneOffExpense",
    "Debt",
    "EmergencyFund",
    "SavingsGoal",
    "BudgetSnapshot",
    # Projection
    "BillCategory",
    "BillStatus",
    "DayStatus",
    "EventKind",
    "BillOccurrence",
    "CalendarEvent",
    "DayProjection",
    "MonthProjection",
    "TimelinePoint",
    "classify_balance",
    # Payoff
    "PayoffStatus",
    "PayoffStrategy",
    "PayoffEvent",
    "PayoffResult",
]
