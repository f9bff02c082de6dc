"""Derived projection models.

None of these are persisted. Every projection request rebuilds them from
the current snapshot, ledger and tracking start date.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from ..dates import YearMonth, generate_date_range


# =============================================================================
# ENUMERATIONS
# =============================================================================

class BillCategory(str, Enum):
    """Category of a generated bill occurrence.

    The declaration order is the tie-break order for bills due the same day.
    """
    FIXED = "fixed"
    VARIABLE = "variable"
    TWENTY_EIGHT_DAY = "twenty_eight_day"
    ONE_OFF = "one_off"
    DEBT = "debt"


class EventKind(str, Enum):
    PAY = "pay"
    BILL = "bill"
    DEBT = "debt"


class DayStatus(str, Enum):
    """Health of the running balance at the end of a day."""
    GOOD = "good"
    CAUTION = "caution"
    CRITICAL = "critical"


class BillStatus(str, Enum):
    """Bill tracker status relative to an as-of date."""
    PAID = "paid"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"


# =============================================================================
# OCCURRENCES AND EVENTS
# =============================================================================

class BillOccurrence(BaseModel):
    """A single dated instance of an expense or debt payment."""

    bill_id: str = Field(description="Stable id used as the ledger key")
    source_id: str
    name: str
    due_date: date
    amount: Decimal
    category: BillCategory
    is_paid: bool = False
    paid_date: Optional[date] = None

    @computed_field
    @property
    def month_key(self) -> str:
        return YearMonth.of(self.due_date).key


class CalendarEvent(BaseModel):
    """A pay event or a bill event placed on the calendar."""

    date: date
    is_incoming: bool
    amount: Decimal
    label: str
    kind: EventKind
    occurrence: Optional[BillOccurrence] = None

    @property
    def is_paid(self) -> bool:
        return self.occurrence is not None and self.occurrence.is_paid


class DayProjection(BaseModel):
    """Running balance and advice for one day that has events."""

    date: date
    running_balance: Decimal
    events: list[CalendarEvent] = Field(default_factory=list)
    reserve_recommended: bool = False
    reserve_amount: Decimal = Decimal("0")
    status: DayStatus = DayStatus.GOOD

    @property
    def income(self) -> Decimal:
        return sum((e.amount for e in self.events if e.is_incoming), Decimal("0"))

    @property
    def outgoings(self) -> Decimal:
        return sum((e.amount for e in self.events if not e.is_incoming), Decimal("0"))


class TimelinePoint(BaseModel):
    date: date
    balance: Decimal
    status: DayStatus


class MonthProjection(BaseModel):
    """Projection of one calendar month."""

    month_key: str
    starting_balance: Decimal
    ending_balance: Decimal
    days: list[DayProjection] = Field(default_factory=list)
    pay_dates: list[date] = Field(default_factory=list)
    occurrences: list[BillOccurrence] = Field(default_factory=list)
    total_income: Decimal = Decimal("0")
    total_bills: Decimal = Decimal("0")
    total_unpaid_bills: Decimal = Decimal("0")
    caution_threshold: Decimal = Decimal("200")

    @property
    def month(self) -> YearMonth:
        return YearMonth.parse(self.month_key)

    @computed_field
    @property
    def reserve_days(self) -> int:
        return sum(1 for d in self.days if d.reserve_recommended)

    @computed_field
    @property
    def lowest_balance(self) -> Decimal:
        """Lowest end-of-day balance in the month, counting the opening balance."""
        return min([self.starting_balance] + [d.running_balance for d in self.days])

    @property
    def critical_days(self) -> list[date]:
        return [d.date for d in self.days if d.status == DayStatus.CRITICAL]

    def balance_on(self, day: date) -> Decimal:
        """End-of-day balance on any date of the month."""
        balance = self.starting_balance
        for projection in self.days:
            if projection.date > day:
                break
            balance = projection.running_balance
        return balance

    def timeline(self) -> list[TimelinePoint]:
        """One point per calendar day; quiet days repeat the previous balance."""
        month = self.month
        by_date = {d.date: d for d in self.days}
        points = []
        balance = self.starting_balance
        for day in generate_date_range(month.start, month.end):
            if day in by_date:
                balance = by_date[day].running_balance
            points.append(
                TimelinePoint(
                    date=day,
                    balance=balance,
                    status=classify_balance(balance, self.caution_threshold),
                )
            )
        return points


def classify_balance(balance: Decimal, caution_threshold: Decimal) -> DayStatus:
    if balance < 0:
        return DayStatus.CRITICAL
    if balance < caution_threshold:
        return DayStatus.CAUTION
    return DayStatus.GOOD


# =============================================================================
# DEBT PAYOFF
# =============================================================================

class PayoffStrategy(str, Enum):
    """Debt payoff ordering."""
    AVALANCHE = "avalanche"  # Highest interest rate first
    SNOWBALL = "snowball"  # Smallest balance first


class PayoffStatus(str, Enum):
    COMPLETE = "complete"
    NON_CONVERGENT = "non_convergent"  # Payments don't cover interest on the target
    CAP_REACHED = "cap_reached"


class PayoffEvent(BaseModel):
    """A debt reaching a zero balance during the simulation."""

    month: int = Field(ge=1)
    debt_id: str
    debt_name: str
    remaining_debts_count: int = Field(ge=0)
    total_remaining_balance: Decimal


class PayoffResult(BaseModel):
    """Outcome of a payoff simulation."""

    strategy: PayoffStrategy
    extra_monthly_payment: Decimal
    status: PayoffStatus
    events: list[PayoffEvent] = Field(default_factory=list)
    months_simulated: int = 0
    total_interest_paid: Decimal = Decimal("0")
    remaining_balance: Decimal = Decimal("0")
    payoff_order: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def is_complete(self) -> bool:
        return self.status == PayoffStatus.COMPLETE

    @computed_field
    @property
    def months_to_payoff(self) -> Optional[int]:
        """Months until the last debt is cleared; None if it never is."""
        if not self.is_complete:
            return None
        return self.events[-1].month if self.events else 0
