#!/usr/bin/env python3
"""
Pay & Bill Calendar Demonstration

This script walks through the main engine workflow:
1. Map application budget data to a snapshot
2. Project a quarter of cash flow with carried-forward balances
3. Mark a bill paid and compare debt payoff strategies

Run: python packages/core/examples/cashflow_demo.py
"""

from datetime import date
from decimal import Decimal

from paycal_core import BudgetEngine, snapshot_from_budget_data
from paycal_core.config import load_config
from paycal_core.logging_config import configure_logging
from paycal_core.models import PayoffStrategy
from paycal_core.money import format_currency

BUDGET_DATA = {
    "income": {"biweeklyNet": 2150, "nextPayDate": "2024-01-05"},
    "expenses": {
        "fixed": [
            {"id": "rent", "name": "Rent", "amount": 1850, "dueDayOfMonth": 1},
            {"id": "gym", "name": "Gym", "amount": 45, "dueDayOfMonth": 31},
        ],
        "variable": [
            {"id": "power", "name": "Electricity", "amount": 140, "dueDayOfMonth": 18},
        ],
        "discretionary": [{"id": "fun", "name": "Eating out", "amount": 250}],
        "twentyEightDay": [
            {"id": "phone", "name": "Phone plan", "amount": 55, "dueDate": "2024-01-03"},
        ],
        "oneOff": [{"id": "rego", "name": "Car registration", "amount": 780, "dueDate": "2024-02-20"}],
    },
    "debts": [
        {"id": "visa", "name": "Visa", "balance": 4200, "interestRate": 21.9,
         "minimumPayment": 126, "paymentDate": 22},
        {"id": "car", "name": "Car loan", "balance": 9800, "interestRate": 7.5,
         "minimumPayment": 310, "paymentDate": 8},
    ],
    "startingBalance": 900,
    "trackingStartDate": "2024-01-01",
    "emergencyFund": {"current": 1500, "target": 6000},
}


def print_month(projection) -> None:
    print(f"\n{projection.month_key}: opens {format_currency(projection.starting_balance)}")
    for day in projection.days:
        labels = ", ".join(e.label for e in day.events)
        reserve = f"  reserve {format_currency(day.reserve_amount)}" if day.reserve_recommended else ""
        print(
            f"  {day.date:%d %b}  {format_currency(day.running_balance):>12}  "
            f"[{day.status.value:8}] {labels}{reserve}"
        )
    print(f"  closes {format_currency(projection.ending_balance)}")


def main() -> None:
    config = load_config()
    configure_logging(config.log_level)

    snapshot = snapshot_from_budget_data(BUDGET_DATA)
    engine = BudgetEngine(snapshot, config=config, as_of=date(2024, 1, 10))

    for projection in engine.project_range("2024-01", "2024-03"):
        print_month(projection)

    bill = engine.toggle_bill("2024-01", "fixed-rent")
    print(f"\nMarked {bill.name} paid on {bill.paid_date}")

    summary = engine.budget_summary()
    print(f"\nMonthly surplus: {format_currency(summary.monthly_surplus)}")
    print(f"Health score: {summary.health_score}/100")

    for strategy, result in engine.compare_strategies(Decimal("200")).items():
        months = result.months_to_payoff if result.is_complete else result.status.value
        print(
            f"{strategy.value:>10}: {months} months, "
            f"interest {format_currency(result.total_interest_paid)}, "
            f"order {' -> '.join(result.payoff_order)}"
        )


if __name__ == "__main__":
    main()
