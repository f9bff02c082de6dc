"""Budget snapshot models: income, expenses, debts and savings.

These are the inputs handed to the engine by the application. Expenses
are a tagged union on ``category`` so every schedule shape is explicit:

- Fixed / Variable: due on a day of the month (clamped to month length)
- 28-day cycle: recurs every 28 days from an anchor date
- One-off: a single dated expense, excluded from monthly totals
- Discretionary: unscheduled, counted in totals only

Schedules may be incomplete (a missing due day, anchor or date). Such
items are valid models; the expander treats them as not yet scheduled.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field, field_validator

from ..dates import DEFAULT_TRACKING_START
from .ledger import BillPaymentLedger

PERIODS_PER_YEAR_DAYS = 364
TWENTY_EIGHT_DAY_CYCLES_PER_YEAR = 13


def _coerce_decimal(v):
    """Coerce string and float amounts to Decimal."""
    if isinstance(v, (str, float)):
        return Decimal(str(v))
    return v


# =============================================================================
# ENUMERATIONS
# =============================================================================

class ExpenseCategory(str, Enum):
    """Expense categories, one per schedule shape."""
    FIXED = "fixed"
    VARIABLE = "variable"
    DISCRETIONARY = "discretionary"
    TWENTY_EIGHT_DAY = "twenty_eight_day"
    ONE_OFF = "one_off"


# =============================================================================
# INCOME
# =============================================================================

class IncomeProfile(BaseModel):
    """Pay received every ``pay_period_days`` days, anchored on ``next_pay_date``.

    The per-period amount is net unless ``amount_is_gross`` is set, in which
    case ``tax_rate`` is deducted.
    """

    amount_per_period: Decimal = Field(default=Decimal("0"), ge=0)
    amount_is_gross: bool = False
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=1)
    next_pay_date: Optional[date] = None
    pay_period_days: int = Field(default=14, gt=0)

    @field_validator("amount_per_period", "tax_rate", mode="before")
    @classmethod
    def coerce_amounts(cls, v):
        return _coerce_decimal(v)

    @computed_field
    @property
    def net_per_period(self) -> Decimal:
        """Take-home pay per period."""
        if self.amount_is_gross:
            return self.amount_per_period * (Decimal("1") - self.tax_rate)
        return self.amount_per_period

    @computed_field
    @property
    def periods_per_year(self) -> Decimal:
        """26 for fortnightly pay."""
        return Decimal(PERIODS_PER_YEAR_DAYS) / Decimal(self.pay_period_days)

    @computed_field
    @property
    def monthly_net(self) -> Decimal:
        """Average monthly take-home pay."""
        return self.net_per_period * self.periods_per_year / Decimal("12")

    @property
    def is_scheduled(self) -> bool:
        """True when pay events can be generated."""
        return self.next_pay_date is not None and self.net_per_period > 0


# =============================================================================
# EXPENSES
# =============================================================================

class _ExpenseBase(BaseModel):
    id: str
    name: str
    amount: Decimal = Field(ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return _coerce_decimal(v)

    @property
    def monthly_equivalent(self) -> Decimal:
        """Contribution to a monthly budget total."""
        return self.amount


class FixedExpense(_ExpenseBase):
    """Same amount due on the same day every month (rent, subscriptions)."""
    category: Literal["fixed"] = "fixed"
    due_day_of_month: Optional[int] = Field(default=None, ge=1, le=31)


class VariableExpense(_ExpenseBase):
    """Monthly bill whose amount is an estimate (utilities, groceries)."""
    category: Literal["variable"] = "variable"
    due_day_of_month: Optional[int] = Field(default=None, ge=1, le=31)


class DiscretionaryExpense(_ExpenseBase):
    """Unscheduled spending, only counted in totals."""
    category: Literal["discretionary"] = "discretionary"


class TwentyEightDayExpense(_ExpenseBase):
    """Bill charged every 28 days from ``anchor_date``.

    Thirteen charges fall in a year, so some calendar months carry two.
    """
    category: Literal["twenty_eight_day"] = "twenty_eight_day"
    anchor_date: Optional[date] = None

    @property
    def monthly_equivalent(self) -> Decimal:
        return self.amount * TWENTY_EIGHT_DAY_CYCLES_PER_YEAR / Decimal("12")


class OneOffExpense(_ExpenseBase):
    """A single future expense; never part of recurring monthly totals."""
    category: Literal["one_off"] = "one_off"
    due_date: Optional[date] = None

    @property
    def monthly_equivalent(self) -> Decimal:
        return Decimal("0")


ExpenseItem = Annotated[
    Union[
        FixedExpense,
        VariableExpense,
        DiscretionaryExpense,
        TwentyEightDayExpense,
        OneOffExpense,
    ],
    Field(discriminator="category"),
]


# =============================================================================
# DEBTS
# =============================================================================

class Debt(BaseModel):
    """A debt with a monthly minimum payment due on ``payment_due_day``."""

    id: str
    name: str
    balance: Decimal = Field(ge=0)
    interest_rate: Decimal = Field(default=Decimal("0"), ge=0, description="Annual percentage rate")
    minimum_payment: Decimal = Field(default=Decimal("0"), ge=0)
    payment_due_day: Optional[int] = Field(default=None, ge=1, le=31)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v

    @field_validator("balance", "interest_rate", "minimum_payment", mode="before")
    @classmethod
    def coerce_amounts(cls, v):
        return _coerce_decimal(v)


# =============================================================================
# SAVINGS
# =============================================================================

class EmergencyFund(BaseModel):
    current: Decimal = Field(default=Decimal("0"), ge=0)
    target: Decimal = Field(default=Decimal("0"), ge=0)

    @field_validator("current", "target", mode="before")
    @classmethod
    def coerce_amounts(cls, v):
        return _coerce_decimal(v)

    @computed_field
    @property
    def progress_percent(self) -> Decimal:
        """Percentage of the target reached, 0 when no target is set."""
        if self.target <= 0:
            return Decimal("0")
        return self.current / self.target * Decimal("100")


class SavingsGoal(BaseModel):
    id: str
    name: str
    target_amount: Decimal = Field(ge=0)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    target_date: Optional[date] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v

    @field_validator("target_amount", "current_amount", mode="before")
    @classmethod
    def coerce_amounts(cls, v):
        return _coerce_decimal(v)

    @computed_field
    @property
    def progress_percent(self) -> Decimal:
        if self.target_amount <= 0:
            return Decimal("0")
        return min(self.current_amount / self.target_amount * Decimal("100"), Decimal("100"))

    @computed_field
    @property
    def remaining(self) -> Decimal:
        return max(self.target_amount - self.current_amount, Decimal("0"))


# =============================================================================
# SNAPSHOT
# =============================================================================

class BudgetSnapshot(BaseModel):
    """Everything the engine reads, captured at one point in time.

    The engine never mutates a snapshot; callers treat it as immutable for
    the duration of a call.
    """

    income: Optional[IncomeProfile] = None
    expenses: list[ExpenseItem] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)
    starting_balance: Decimal = Decimal("0")
    tracking_start_date: date = DEFAULT_TRACKING_START
    bill_payments: BillPaymentLedger = Field(default_factory=BillPaymentLedger)
    emergency_fund: EmergencyFund = Field(default_factory=EmergencyFund)
    savings_goals: list[SavingsGoal] = Field(default_factory=list)

    @field_validator("starting_balance", mode="before")
    @classmethod
    def coerce_starting_balance(cls, v):
        return _coerce_decimal(v)

    @field_validator("tracking_start_date", mode="before")
    @classmethod
    def default_tracking_start(cls, v):
        return DEFAULT_TRACKING_START if v is None else v

    def expenses_in(self, category: ExpenseCategory) -> list:
        return [e for e in self.expenses if e.category == category.value]
