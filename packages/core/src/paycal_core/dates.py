"""Calendar month arithmetic used by the expander and projector."""

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Union

from .exceptions import ValidationError

DEFAULT_TRACKING_START = date(1900, 1, 1)


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month, e.g. ``YearMonth(2024, 1)`` for January 2024."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValidationError(
                f"Invalid month number: {self.month}",
                field="month",
                value=self.month,
                constraint="1-12",
            )

    @classmethod
    def parse(cls, value: Union[str, date, "YearMonth"]) -> "YearMonth":
        """Build a YearMonth from ``"YYYY-MM"``, a date, or another YearMonth."""
        if isinstance(value, YearMonth):
            return value
        if isinstance(value, date):
            return cls(value.year, value.month)
        try:
            year_part, month_part = value.strip().split("-")[:2]
            return cls(int(year_part), int(month_part))
        except (AttributeError, ValueError) as exc:
            raise ValidationError(
                f"Invalid month key: {value!r}",
                field="month",
                value=value,
                constraint="YYYY-MM",
            ) from exc

    @classmethod
    def of(cls, day: date) -> "YearMonth":
        return cls(day.year, day.month)

    @property
    def key(self) -> str:
        """Ledger key, ``"YYYY-MM"``."""
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def days(self) -> int:
        return monthrange(self.year, self.month)[1]

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, self.days)

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def clamp_day(self, day_of_month: int) -> date:
        """Date for ``day_of_month`` in this month, clamped to the last day."""
        return date(self.year, self.month, min(max(day_of_month, 1), self.days))

    def add(self, months: int) -> "YearMonth":
        index = self.year * 12 + (self.month - 1) + months
        return YearMonth(index // 12, index % 12 + 1)

    def next(self) -> "YearMonth":
        return self.add(1)

    def previous(self) -> "YearMonth":
        return self.add(-1)

    def __str__(self) -> str:
        return self.key


def iter_months(start: YearMonth, end: YearMonth) -> Iterator[YearMonth]:
    """Yield every month from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current = current.next()


def month_key(day: date) -> str:
    return YearMonth.of(day).key


def generate_date_range(start: date, end: date) -> list[date]:
    """Generate list of dates from start to end (inclusive)."""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def first_step_on_or_after(anchor: date, step_days: int, target: date) -> date:
    """First date ``anchor + k * step_days`` (k may be negative) that is >= target."""
    offset = (target - anchor).days
    steps = -(-offset // step_days)  # ceiling division
    return anchor + timedelta(days=steps * step_days)
