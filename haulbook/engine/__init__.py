"""
Time-windowed financial calculations.

This package contains:
- pay: Mileage-tiered load pay
- settlement_cycle: Wednesday-to-Tuesday settlement weeks
- fixed_costs: Fixed cost proration across the current cycle
- incentive: Monthly mileage incentive tiers
- periods: Named reporting periods
- profit_loss: Profit and loss reports
- weekly: Weekly gauge and pay cycle preview
- dashboard: All-time summary and history listing
"""

__all__ = []
