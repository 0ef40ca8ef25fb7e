"""
Fixed cost proration across the current settlement cycle.

Weekly fixed costs (and the truck payment, when the lease is included) accrue
linearly over the cycle's wall-clock time, regardless of which days had loads.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel

from haulbook.core.config import OperatingCosts, get_config
from haulbook.data.models.period import SettlementCycle
from haulbook.engine.settlement_cycle import (
    previous_settlement_cycle,
    settlement_cycle_boundaries,
)

logger = structlog.get_logger(__name__)

MICROSECONDS_PER_SECOND = 1_000_000


class ProratedFixedCosts(BaseModel):
    """Fixed costs accrued so far in the cycle containing now."""

    prorated: Decimal
    full: Decimal
    progress: Decimal  # 0 at cycle start, 1 at cycle end
    cycle: SettlementCycle


def _microseconds(delta: dt.timedelta) -> int:
    return (
        delta.days * 24 * 60 * 60 + delta.seconds
    ) * MICROSECONDS_PER_SECOND + delta.microseconds


def cycle_containing(now: dt.datetime) -> SettlementCycle:
    """
    Settlement cycle to prorate against.

    Falls back to the preceding cycle when ``now`` is earlier than the start
    of the cycle computed from its own date.
    """
    cycle = settlement_cycle_boundaries(now)
    if now < cycle.start:
        logger.debug("prorating_previous_cycle", now=now.isoformat())
        cycle = previous_settlement_cycle(cycle)
    return cycle


def cycle_progress(cycle: SettlementCycle, now: dt.datetime) -> Decimal:
    """Elapsed fraction of ``cycle`` at ``now``, clamped to [0, 1]."""
    total = _microseconds(cycle.duration)
    elapsed = min(_microseconds(now - cycle.start), total)
    elapsed = max(0, elapsed)
    return Decimal(elapsed) / Decimal(total)


def prorate_fixed_costs(
    include_lease: bool,
    now: dt.datetime,
    costs: Optional[OperatingCosts] = None,
) -> ProratedFixedCosts:
    """
    Prorate weekly fixed costs to the elapsed share of the current cycle.

    Args:
        include_lease: Add the weekly truck payment to the fixed costs
        now: Current instant
        costs: Cost constants (defaults to configured values)

    Returns:
        ProratedFixedCosts with the accrued amount, full weekly amount and progress
    """
    costs = costs or get_config().get_operating_costs()
    full = costs.weekly_fixed(include_lease)

    cycle = cycle_containing(now)
    progress = cycle_progress(cycle, now)

    return ProratedFixedCosts(
        prorated=full * progress,
        full=full,
        progress=progress,
        cycle=cycle,
    )
