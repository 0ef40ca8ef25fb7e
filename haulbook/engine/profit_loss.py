"""
Profit and loss reports.

Aggregates loads and expenses over a reporting period:
- Load revenue plus monthly incentive pay (current month only)
- Variable costs per mile
- Fixed costs and truck payment scaled to the period length
- Manually entered expenses
- Per-mile and margin ratios, guarded against empty periods
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
from haulbook.data.models.period import Period, PeriodKind
from haulbook.engine.incentive import incentive_for_month, month_to_date_miles

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
DAYS_PER_WEEK = Decimal("7")


class ProfitLossReport(BaseModel):
    """Complete profit and loss breakdown for a period."""

    period: Period
    load_count: int
    expense_count: int

    # Revenue
    load_revenue: Decimal
    incentive_pay: Decimal
    total_revenue: Decimal
    total_miles: int

    # Costs
    variable_costs: Decimal
    gross_profit: Decimal
    weeks_in_period: Decimal
    fixed_costs: Decimal
    truck_payment: Decimal
    manual_expenses: Decimal
    total_operating_expenses: Decimal
    total_costs: Decimal

    # Bottom line
    net_profit: Decimal
    profit_per_mile: Decimal
    profit_margin_pct: Decimal
    revenue_per_mile: Decimal
    cost_per_mile: Decimal

    @property
    def is_profitable(self) -> bool:
        return self.net_profit >= 0


def _per_mile(amount: Decimal, miles: int) -> Decimal:
    if miles <= 0:
        return ZERO
    return amount / Decimal(miles)


def aggregate(
    period: Period,
    loads: Sequence[Load],
    expenses: Sequence[Expense],
    now: dt.datetime,
    costs: Optional[OperatingCosts] = None,
) -> ProfitLossReport:
    """
    Build the profit and loss report for a period.

    Args:
        period: Reporting window
        loads: All loads (filtered here by period)
        expenses: All expenses (filtered here by period)
        now: Current instant, used for the current-month incentive
        costs: Cost constants (defaults to configured values)

    Returns:
        ProfitLossReport with full-precision amounts
    """
    costs = costs or get_config().get_operating_costs()

    period_loads = [load for load in loads if period.contains(load.date)]
    period_expenses = [expense for expense in expenses if period.contains(expense.date)]

    load_revenue = sum((load.revenue for load in period_loads), ZERO)
    total_miles = sum(load.miles for load in period_loads)

    # Incentive is a calendar-month concept: it only shows on the current month
    # and counts every load of that month up to now, not just the period's.
    incentive_pay = ZERO
    if period.kind is PeriodKind.CURRENT_MONTH:
        incentive = incentive_for_month(month_to_date_miles(loads, now))
        incentive_pay = incentive.total_incentive_pay

    total_revenue = load_revenue + incentive_pay
    variable_costs = Decimal(total_miles) * costs.variable_cost_per_mile
    gross_profit = total_revenue - variable_costs

    weeks_in_period = Decimal(period.days) / DAYS_PER_WEEK
    fixed_costs = costs.fixed_costs_weekly * weeks_in_period
    truck_payment = costs.truck_payment_weekly * weeks_in_period
    manual_expenses = sum((expense.amount for expense in period_expenses), ZERO)

    total_operating_expenses = fixed_costs + truck_payment + manual_expenses
    net_profit = gross_profit - total_operating_expenses
    total_costs = variable_costs + total_operating_expenses

    profit_margin_pct = ZERO
    if total_revenue > 0:
        profit_margin_pct = net_profit / total_revenue * 100

    report = ProfitLossReport(
        period=period,
        load_count=len(period_loads),
        expense_count=len(period_expenses),
        load_revenue=load_revenue,
        incentive_pay=incentive_pay,
        total_revenue=total_revenue,
        total_miles=total_miles,
        variable_costs=variable_costs,
        gross_profit=gross_profit,
        weeks_in_period=weeks_in_period,
        fixed_costs=fixed_costs,
        truck_payment=truck_payment,
        manual_expenses=manual_expenses,
        total_operating_expenses=total_operating_expenses,
        total_costs=total_costs,
        net_profit=net_profit,
        profit_per_mile=_per_mile(net_profit, total_miles),
        profit_margin_pct=profit_margin_pct,
        revenue_per_mile=_per_mile(total_revenue, total_miles),
        cost_per_mile=_per_mile(total_costs, total_miles),
    )

    logger.debug(
        "profit_loss_aggregated",
        period=period.kind.value,
        loads=len(period_loads),
        expenses=len(period_expenses),
        net_profit=str(net_profit),
    )
    return report
