"""Paycal Core - Pay & bill calendar projection and debt payoff planning."""

__version__ = "0.1.0"

from .engine import BudgetEngine
from .mapper import snapshot_from_budget_data
from .models import BudgetSnapshot, MonthProjection, PayoffResult
from .projector import CashFlowProjector, project_month
from .payoff import DebtPayoffSimulator, simulate_payoff
from .recurrence import expand_occurrences

__all__ = [
    "BudgetEngine",
    "BudgetSnapshot",
    "CashFlowProjector",
    "DebtPayoffSimulator",
    "MonthProjection",
    "PayoffResult",
    "expand_occurrences",
    "project_month",
    "simulate_payoff",
    "snapshot_from_budget_data",
]
