"""
Settlement cycle boundaries.

The carrier settles Wednesday through Tuesday, independent of calendar weeks.
"""

import datetime as dt

import structlog

from haulbook.data.models.period import SettlementCycle

logger = structlog.get_logger(__name__)

TUESDAY = 2  # Sunday-based weekday index
CYCLE_DAYS = 7
END_OF_DAY = dt.time(23, 59, 59, 999000)
ONE_MILLISECOND = dt.timedelta(milliseconds=1)


def sunday_based_weekday(day: dt.date) -> int:
    """Weekday index with 0=Sunday ... 6=Saturday."""
    return (day.weekday() + 1) % 7


def settlement_cycle_boundaries(reference: dt.datetime) -> SettlementCycle:
    """
    Get the settlement cycle ending on the first Tuesday on or after ``reference``.

    Only the calendar date of ``reference`` matters: a Tuesday reference ends
    its own cycle, any other day rolls forward to the coming Tuesday.

    Args:
        reference: Reference instant (naive local time)

    Returns:
        SettlementCycle from Wednesday 00:00 to Tuesday 23:59:59.999
    """
    days_until_tuesday = (TUESDAY - sunday_based_weekday(reference.date()) + 7) % 7
    end_date = reference.date() + dt.timedelta(days=days_until_tuesday)
    start_date = end_date - dt.timedelta(days=CYCLE_DAYS - 1)

    cycle = SettlementCycle(
        start=dt.datetime.combine(start_date, dt.time.min),
        end=dt.datetime.combine(end_date, END_OF_DAY),
    )
    logger.debug(
        "settlement_cycle_resolved",
        reference=reference.isoformat(),
        start=cycle.start.isoformat(),
        end=cycle.end.isoformat(),
    )
    return cycle


def previous_settlement_cycle(cycle: SettlementCycle) -> SettlementCycle:
    """The cycle ending one millisecond before ``cycle`` starts."""
    end = cycle.start - ONE_MILLISECOND
    start_date = end.date() - dt.timedelta(days=CYCLE_DAYS - 1)
    return SettlementCycle(start=dt.datetime.combine(start_date, dt.time.min), end=end)


def next_settlement_cycle(cycle: SettlementCycle) -> SettlementCycle:
    """The cycle starting the day after ``cycle`` ends."""
    start_date = cycle.end.date() + dt.timedelta(days=1)
    end_date = start_date + dt.timedelta(days=CYCLE_DAYS - 1)
    return SettlementCycle(
        start=dt.datetime.combine(start_date, dt.time.min),
        end=dt.datetime.combine(end_date, END_OF_DAY),
    )
