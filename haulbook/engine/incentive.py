"""
Monthly mileage incentive.

Month-to-date miles unlock a flat incentive rate that applies to every mile of
the month, not just the miles above the threshold.
"""

import datetime as dt
from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel

from haulbook.data.models.load import Load

logger = structlog.get_logger(__name__)

# (inclusive lower bound in miles, rate per mile), highest first
INCENTIVE_TIERS: tuple[tuple[int, Decimal], ...] = (
    (8000, Decimal("0.07")),
    (6000, Decimal("0.06")),
    (4000, Decimal("0.05")),
)
BASE_RATE = Decimal("0.00")
GAUGE_CAP = 8000


class IncentiveSegments(BaseModel):
    """Gauge slices; they sum to max(miles, 8000)."""

    first: int  # 0-3999
    second: int  # 4000-5999
    third: int  # 6000-7999
    overflow: int  # beyond 8000
    remaining: int  # left to reach 8000

    @property
    def total(self) -> int:
        return self.first + self.second + self.third + self.overflow + self.remaining

    def as_list(self) -> list[int]:
        return [self.first, self.second, self.third, self.overflow, self.remaining]


class IncentiveStatus(BaseModel):
    """Incentive standing for month-to-date miles."""

    month_to_date_miles: int
    rate: Decimal
    next_tier_at: Optional[int]
    miles_to_next_tier: int
    segments: IncentiveSegments
    total_incentive_pay: Decimal


def incentive_rate(miles: int) -> Decimal:
    """Rate of the highest tier reached by ``miles``."""
    for threshold, rate in INCENTIVE_TIERS:
        if miles >= threshold:
            return rate
    return BASE_RATE


def next_tier(miles: int) -> Optional[int]:
    """Threshold of the next tier above ``miles``, None once the top tier is reached."""
    upcoming = [threshold for threshold, _ in INCENTIVE_TIERS if threshold > miles]
    return min(upcoming) if upcoming else None


def tier_segments(miles: int) -> IncentiveSegments:
    """Split month-to-date miles into gauge slices."""
    first_tier, second_tier, third_tier = 4000, 6000, 8000
    return IncentiveSegments(
        first=min(miles, first_tier),
        second=min(max(miles - first_tier, 0), second_tier - first_tier),
        third=min(max(miles - second_tier, 0), third_tier - second_tier),
        overflow=max(miles - third_tier, 0),
        remaining=max(GAUGE_CAP - miles, 0),
    )


def incentive_for_month(month_to_date_miles: int) -> IncentiveStatus:
    """
    Calculate the incentive standing for the month so far.

    Args:
        month_to_date_miles: Miles run from the 1st of the month through now

    Returns:
        IncentiveStatus with rate, distance to the next tier, gauge segments
        and the flat-rate incentive pay
    """
    rate = incentive_rate(month_to_date_miles)
    upcoming = next_tier(month_to_date_miles)
    miles_to_next = upcoming - month_to_date_miles if upcoming is not None else 0

    status = IncentiveStatus(
        month_to_date_miles=month_to_date_miles,
        rate=rate,
        next_tier_at=upcoming,
        miles_to_next_tier=miles_to_next,
        segments=tier_segments(month_to_date_miles),
        total_incentive_pay=Decimal(month_to_date_miles) * rate,
    )
    logger.debug(
        "incentive_calculated",
        miles=month_to_date_miles,
        rate=str(rate),
        miles_to_next_tier=miles_to_next,
    )
    return status


def month_to_date_miles(loads: Iterable[Load], now: dt.datetime) -> int:
    """Miles of loads dated from the first of ``now``'s month through ``now``."""
    month_start = now.date().replace(day=1)
    today = now.date()
    return sum(load.miles for load in loads if month_start <= load.date <= today)
