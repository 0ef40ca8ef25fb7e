"""
Settlement-week views: the weekly profit gauge and the pay cycle preview.
"""

import datetime as dt
from collections.abc import Sequence
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel

from haulbook.core.config import OperatingCosts, get_config
from haulbook.data.models.expense import Expense
from haulbook.data.models.load import Load
from haulbook.data.models.period import SettlementCycle
from haulbook.engine.fixed_costs import ProratedFixedCosts, prorate_fixed_costs
from haulbook.engine.settlement_cycle import next_settlement_cycle, settlement_cycle_boundaries

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
# Weekly profit at which the gauge pegs
MAX_GAUGE_PROFIT = Decimal("2000")
GAUGE_MIDPOINT = Decimal("50")
GAUGE_MAX = Decimal("100")


class WeeklyGauge(BaseModel):
    """Current cycle revenue against prorated costs, with a 0-100 gauge reading."""

    cycle: SettlementCycle
    revenue: Decimal
    miles: int
    variable_costs: Decimal
    fixed_costs: ProratedFixedCosts
    manual_expenses: Decimal
    total_costs: Decimal
    profit: Decimal
    gauge_value: Decimal  # below 50 is a loss, above 50 a profit


class CycleTotals(BaseModel):
    """Load totals for one settlement cycle."""

    cycle: SettlementCycle
    revenue: Decimal = ZERO
    miles: int = 0
    variable_costs: Decimal = ZERO
    profit: Decimal = ZERO


class PayCyclePreview(BaseModel):
    """What the current and the upcoming settlements look like so far."""

    current: CycleTotals
    next: CycleTotals


def gauge_value(revenue: Decimal, total_costs: Decimal, profit: Decimal) -> Decimal:
    """
    Map weekly results onto a half-circle gauge.

    A loss fills the lower half in proportion to revenue / costs; a profit
    fills the upper half, pegging at MAX_GAUGE_PROFIT.
    """
    if profit <= 0:
        if total_costs <= 0:
            return ZERO
        return min(GAUGE_MAX, max(ZERO, revenue / total_costs * GAUGE_MIDPOINT))
    profit_ratio = min(profit / MAX_GAUGE_PROFIT, Decimal("1"))
    return GAUGE_MIDPOINT + profit_ratio * GAUGE_MIDPOINT


def weekly_gauge(
    loads: Sequence[Load],
    expenses: Sequence[Expense],
    include_lease: bool,
    now: dt.datetime,
    costs: Optional[OperatingCosts] = None,
) -> WeeklyGauge:
    """
    Calculate the current settlement week's profit picture.

    Args:
        loads: All loads
        expenses: All expenses
        include_lease: Count the truck payment in the prorated fixed costs
        now: Current instant
        costs: Cost constants (defaults to configured values)

    Returns:
        WeeklyGauge for the cycle containing now
    """
    costs = costs or get_config().get_operating_costs()
    cycle = settlement_cycle_boundaries(now)

    cycle_loads = [load for load in loads if cycle.contains(load.date)]
    revenue = sum((load.revenue for load in cycle_loads), ZERO)
    miles = sum(load.miles for load in cycle_loads)
    manual_expenses = sum(
        (expense.amount for expense in expenses if cycle.contains(expense.date)), ZERO
    )

    fixed_costs = prorate_fixed_costs(include_lease, now, costs)
    variable_costs = Decimal(miles) * costs.variable_cost_per_mile
    total_costs = fixed_costs.prorated + variable_costs + manual_expenses
    profit = revenue - total_costs

    logger.debug("weekly_gauge_calculated", cycle=str(cycle), profit=str(profit))
    return WeeklyGauge(
        cycle=cycle,
        revenue=revenue,
        miles=miles,
        variable_costs=variable_costs,
        fixed_costs=fixed_costs,
        manual_expenses=manual_expenses,
        total_costs=total_costs,
        profit=profit,
        gauge_value=gauge_value(revenue, total_costs, profit),
    )


def pay_cycle_preview(
    loads: Sequence[Load],
    now: dt.datetime,
    costs: Optional[OperatingCosts] = None,
) -> PayCyclePreview:
    """Revenue, miles and variable-cost profit for this cycle and the next."""
    costs = costs or get_config().get_operating_costs()
    current_cycle = settlement_cycle_boundaries(now)
    upcoming_cycle = next_settlement_cycle(current_cycle)

    current = CycleTotals(cycle=current_cycle)
    upcoming = CycleTotals(cycle=upcoming_cycle)

    for load in loads:
        if current_cycle.contains(load.date):
            totals = current
        elif upcoming_cycle.contains(load.date):
            totals = upcoming
        else:
            continue
        totals.revenue += load.revenue
        totals.miles += load.miles

    for totals in (current, upcoming):
        totals.variable_costs = Decimal(totals.miles) * costs.variable_cost_per_mile
        totals.profit = totals.revenue - totals.variable_costs

    return PayCyclePreview(current=current, next=upcoming)
