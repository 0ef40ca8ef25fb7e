"""
All-time dashboard totals and the history listing.
"""

import datetime as dt
from collections.abc import Sequence
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel

from haulbook.core.config import OperatingCosts, get_config
from haulbook.data.models.expense import Expense
from haulbook.data.models.load import Load

ZERO = Decimal("0")


class HistoryFilter(str, Enum):
    """Which records the history listing shows."""

    ALL = "all"
    LOADS = "loads"
    EXPENSES = "expenses"


class DashboardSummary(BaseModel):
    """Totals across every recorded load and expense."""

    total_revenue: Decimal
    total_miles: int
    total_loads: int
    total_expenses: int
    fixed_costs: Decimal
    variable_costs: Decimal
    manual_expenses: Decimal
    total_costs: Decimal
    net_profit: Decimal
    avg_cost_per_mile: Decimal
    avg_profit_per_mile: Decimal

    @property
    def is_empty(self) -> bool:
        return self.total_loads == 0 and self.total_expenses == 0


class HistoryEntry(BaseModel):
    """One row of the history listing."""

    record: Union[Load, Expense]
    revenue_per_mile: Decimal = ZERO
    cost_per_mile: Decimal = ZERO
    profit_per_mile: Decimal = ZERO

    @property
    def date(self) -> dt.date:
        return self.record.date

    @property
    def is_load(self) -> bool:
        return isinstance(self.record, Load)


def summarize(
    loads: Sequence[Load],
    expenses: Sequence[Expense],
    include_lease: bool,
    costs: Optional[OperatingCosts] = None,
) -> DashboardSummary:
    """
    Summarize all records.

    Fixed costs here are a single week's worth (plus the truck payment when
    the lease is included), not scaled to the span of the records.
    """
    costs = costs or get_config().get_operating_costs()

    total_revenue = sum((load.revenue for load in loads), ZERO)
    total_miles = sum(load.miles for load in loads)
    fixed_costs = costs.weekly_fixed(include_lease)
    variable_costs = Decimal(total_miles) * costs.variable_cost_per_mile
    manual_expenses = sum((expense.amount for expense in expenses), ZERO)

    total_costs = fixed_costs + variable_costs + manual_expenses
    net_profit = total_revenue - total_costs

    avg_cost_per_mile = ZERO
    avg_profit_per_mile = ZERO
    if total_miles > 0:
        avg_cost_per_mile = total_costs / Decimal(total_miles)
        avg_profit_per_mile = net_profit / Decimal(total_miles)

    return DashboardSummary(
        total_revenue=total_revenue,
        total_miles=total_miles,
        total_loads=len(loads),
        total_expenses=len(expenses),
        fixed_costs=fixed_costs,
        variable_costs=variable_costs,
        manual_expenses=manual_expenses,
        total_costs=total_costs,
        net_profit=net_profit,
        avg_cost_per_mile=avg_cost_per_mile,
        avg_profit_per_mile=avg_profit_per_mile,
    )


def history_entries(
    loads: Sequence[Load],
    expenses: Sequence[Expense],
    record_filter: HistoryFilter = HistoryFilter.ALL,
    costs: Optional[OperatingCosts] = None,
) -> list[HistoryEntry]:
    """
    List records newest first with per-mile figures.

    Load rows carry revenue, variable cost and profit per mile; expense rows
    carry the amount per recorded mile in ``cost_per_mile``.
    """
    costs = costs or get_config().get_operating_costs()
    entries: list[HistoryEntry] = []

    if record_filter in (HistoryFilter.ALL, HistoryFilter.LOADS):
        for load in loads:
            revenue_per_mile = load.rate_per_mile
            cost_per_mile = costs.variable_cost_per_mile
            entries.append(
                HistoryEntry(
                    record=load,
                    revenue_per_mile=revenue_per_mile,
                    cost_per_mile=cost_per_mile,
                    profit_per_mile=revenue_per_mile - cost_per_mile,
                )
            )

    if record_filter in (HistoryFilter.ALL, HistoryFilter.EXPENSES):
        for expense in expenses:
            entries.append(HistoryEntry(record=expense, cost_per_mile=expense.per_mile))

    # Stable sort keeps store order within a day
    entries.sort(key=lambda entry: entry.date, reverse=True)
    return entries
