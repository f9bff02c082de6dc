"""Mapper from the application's budget-data dictionary to a BudgetSnapshot.

The application stores budget data as one JSON document with camelCase
keys. This module converts that document into the engine's typed inputs:

- ``income.biweeklyNet`` (or ``biweeklyGross`` with ``taxRate``) and
  ``nextPayDate``
- ``expenses.fixed`` / ``variable`` / ``discretionary`` / ``twentyEightDay``
  / ``oneOff`` with ``dueDayOfMonth`` or ``dueDate``
- ``debts[]`` with ``paymentDate`` as the day of the month
- ``billPayments`` keyed by month, ``startingBalance``,
  ``trackingStartDate``, ``emergencyFund`` and ``savingsGoals``

Missing sections are treated as empty. A section with the wrong shape, or a
value pydantic can't coerce, raises ValidationError naming the field.
"""

from datetime import date
from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError
from .models import (
    BillPaymentLedger,
    BillPaymentRecord,
    BudgetSnapshot,
    Debt,
    DiscretionaryExpense,
    EmergencyFund,
    FixedExpense,
    IncomeProfile,
    OneOffExpense,
    SavingsGoal,
    TwentyEightDayExpense,
    VariableExpense,
)

logger = structlog.get_logger()

# Application section name -> (expense model, schedule key in the raw item)
EXPENSE_SECTIONS = {
    "fixed": (FixedExpense, "dueDayOfMonth"),
    "variable": (VariableExpense, "dueDayOfMonth"),
    "discretionary": (DiscretionaryExpense, None),
    "twentyEightDay": (TwentyEightDayExpense, "dueDate"),
    "oneOff": (OneOffExpense, "dueDate"),
}

_SCHEDULE_FIELDS = {
    FixedExpense: "due_day_of_month",
    VariableExpense: "due_day_of_month",
    TwentyEightDayExpense: "anchor_date",
    OneOffExpense: "due_date",
}


def _blank_to_none(value: Any) -> Any:
    """The application stores unset fields as "" or 0."""
    if value in ("", 0, None):
        return None
    return value


def _require_mapping(value: Any, field: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(
            f"Expected an object for '{field}'",
            field=field,
            value=type(value).__name__,
            constraint="object",
        )
    return value


def _require_list(value: Any, field: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(
            f"Expected a list for '{field}'",
            field=field,
            value=type(value).__name__,
            constraint="array",
        )
    return value


def _build(model, field: str, **values):
    """Construct a model, re-raising pydantic errors as ValidationError."""
    try:
        return model(**values)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(
            f"Invalid value for '{field}.{location}': {first.get('msg')}",
            field=f"{field}.{location}" if location else field,
            value=first.get("input"),
            constraint=first.get("type"),
        ) from exc


# =============================================================================
# SECTIONS
# =============================================================================

def map_income(raw: Any) -> Optional[IncomeProfile]:
    """Map the ``income`` section; None when no pay amount is present."""
    income = _require_mapping(raw, "income")
    if not income:
        return None

    next_pay = _blank_to_none(income.get("nextPayDate"))
    if income.get("biweeklyNet") not in (None, ""):
        return _build(
            IncomeProfile,
            "income",
            amount_per_period=income["biweeklyNet"],
            next_pay_date=next_pay,
        )
    if income.get("biweeklyGross") not in (None, ""):
        return _build(
            IncomeProfile,
            "income",
            amount_per_period=income["biweeklyGross"],
            amount_is_gross=True,
            tax_rate=income.get("taxRate") or 0,
            next_pay_date=next_pay,
        )
    return None


def map_expenses(raw: Any) -> list:
    """Map every expense section, in section order then item order."""
    sections = _require_mapping(raw, "expenses")
    expenses = []
    for section, (model, schedule_key) in EXPENSE_SECTIONS.items():
        items = _require_list(sections.get(section), f"expenses.{section}")
        for index, item in enumerate(items):
            field = f"expenses.{section}[{index}]"
            item = _require_mapping(item, field)
            values = {
                "id": item.get("id", f"{section}-{index}"),
                "name": item.get("name", ""),
                "amount": item.get("amount", 0),
            }
            if schedule_key is not None:
                values[_SCHEDULE_FIELDS[model]] = _blank_to_none(item.get(schedule_key))
            expenses.append(_build(model, field, **values))
    return expenses


def map_debts(raw: Any) -> list[Debt]:
    debts = []
    for index, item in enumerate(_require_list(raw, "debts")):
        field = f"debts[{index}]"
        item = _require_mapping(item, field)
        debts.append(
            _build(
                Debt,
                field,
                id=item.get("id", f"debt-{index}"),
                name=item.get("name", ""),
                balance=item.get("balance", 0),
                interest_rate=item.get("interestRate", 0),
                minimum_payment=item.get("minimumPayment", 0),
                payment_due_day=_blank_to_none(item.get("paymentDate")),
            )
        )
    return debts


def map_bill_payments(raw: Any) -> BillPaymentLedger:
    """Map ``billPayments``: ``{"YYYY-MM": [{billId, isPaid, paidDate}]}``."""
    months = {}
    for month_key, records in _require_mapping(raw, "billPayments").items():
        field = f"billPayments.{month_key}"
        entries = []
        for record in _require_list(records, field):
            record = _require_mapping(record, field)
            entries.append(
                _build(
                    BillPaymentRecord,
                    field,
                    bill_id=record.get("billId"),
                    is_paid=bool(record.get("isPaid", False)),
                    paid_date=_blank_to_none(record.get("paidDate")),
                )
            )
        months[month_key] = entries
    return BillPaymentLedger(months=months)


def map_savings_goals(raw: Any) -> list[SavingsGoal]:
    goals = []
    for index, item in enumerate(_require_list(raw, "savingsGoals")):
        field = f"savingsGoals[{index}]"
        item = _require_mapping(item, field)
        goals.append(
            _build(
                SavingsGoal,
                field,
                id=item.get("id", f"goal-{index}"),
                name=item.get("name", ""),
                target_amount=item.get("targetAmount", 0),
                current_amount=item.get("currentAmount", 0),
                target_date=_blank_to_none(item.get("targetDate")),
            )
        )
    return goals


# =============================================================================
# SNAPSHOT
# =============================================================================

def snapshot_from_budget_data(raw: dict) -> BudgetSnapshot:
    """Build a BudgetSnapshot from the application's budget-data document.

    Args:
        raw: The decoded budget-data JSON object.

    Returns:
        A validated BudgetSnapshot.

    Raises:
        ValidationError: If a section has the wrong shape or a value is
            invalid (e.g. a negative amount or a malformed date).
    """
    data = _require_mapping(raw, "budgetData")
    fund = _require_mapping(data.get("emergencyFund"), "emergencyFund")
    tracking_start: Optional[date] = _blank_to_none(data.get("trackingStartDate"))

    snapshot = _build(
        BudgetSnapshot,
        "budgetData",
        income=map_income(data.get("income")),
        expenses=map_expenses(data.get("expenses")),
        debts=map_debts(data.get("debts")),
        starting_balance=data.get("startingBalance") or 0,
        tracking_start_date=tracking_start,
        bill_payments=map_bill_payments(data.get("billPayments")),
        emergency_fund=_build(
            EmergencyFund,
            "emergencyFund",
            current=fund.get("current", 0),
            target=fund.get("target", 0),
        ),
        savings_goals=map_savings_goals(data.get("savingsGoals")),
    )

    logger.info(
        "budget_data_mapped",
        expenses=len(snapshot.expenses),
        debts=len(snapshot.debts),
        has_income=snapshot.income is not None,
        tracking_start=snapshot.tracking_start_date.isoformat(),
        ledger_months=len(snapshot.bill_payments.months),
    )
    return snapshot
