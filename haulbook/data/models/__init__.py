"""
Pydantic data models for haulbook.

Core models:
- Load: A revenue-generating trip, revenue stamped from miles
- Expense: A manually entered cost
- Period / SettlementCycle: Reporting windows
"""

from .expense import Expense, ExpenseCategory
from .load import Load
from .period import Period, PeriodKind, SettlementCycle

__all__ = [
    "Expense",
    "ExpenseCategory",
    "Load",
    "Period",
    "PeriodKind",
    "SettlementCycle",
]
