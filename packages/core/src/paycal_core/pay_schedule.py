"""Pay date generation from an anchor date and a fixed pay period."""

from datetime import date, timedelta
from typing import Optional

from .dates import DEFAULT_TRACKING_START, YearMonth, first_step_on_or_after
from .models import IncomeProfile

DEFAULT_SEARCH_WINDOW_DAYS = 30


def pay_dates_between(income: Optional[IncomeProfile], start: date, end: date) -> list[date]:
    """Every pay date in ``[start, end]``, stepping both ways from the anchor.

    Returns an empty list when no income is configured (no profile, no
    anchor date, or nothing paid per period).
    """
    if income is None or not income.is_scheduled or start > end:
        return []
    period = income.pay_period_days
    current = first_step_on_or_after(income.next_pay_date, period, start)
    dates = []
    while current <= end:
        dates.append(current)
        current += timedelta(days=period)
    return dates


def generate_pay_dates(
    income: Optional[IncomeProfile],
    month: YearMonth,
    tracking_start: Optional[date] = None,
    window_days: int = DEFAULT_SEARCH_WINDOW_DAYS,
) -> list[date]:
    """Pay dates that fall in ``month`` on or after the tracking start.

    The search covers ``window_days`` either side of the month so pay
    periods spanning a month boundary are found, then keeps the in-month
    dates only.
    """
    month = YearMonth.parse(month)
    tracking_start = tracking_start or DEFAULT_TRACKING_START
    window = timedelta(days=window_days)
    candidates = pay_dates_between(income, month.start - window, month.end + window)
    return [d for d in candidates if month.contains(d) and d >= tracking_start]


def next_pay_date_after(income: Optional[IncomeProfile], day: date) -> Optional[date]:
    """First pay date strictly after ``day``."""
    if income is None or not income.is_scheduled:
        return None
    return first_step_on_or_after(
        income.next_pay_date, income.pay_period_days, day + timedelta(days=1)
    )


def upcoming_pay_dates(income: Optional[IncomeProfile], as_of: date, count: int = 6) -> list[date]:
    """The next ``count`` pay dates on or after ``as_of``."""
    if income is None or not income.is_scheduled or count <= 0:
        return []
    first = first_step_on_or_after(income.next_pay_date, income.pay_period_days, as_of)
    return [first + timedelta(days=i * income.pay_period_days) for i in range(count)]
