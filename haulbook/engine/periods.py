"""
Reporting period resolution.

Calendar-month periods end at midnight of their last day; year-to-date ends at
"now". Record filtering is by calendar date, so both include the final day.
"""

import calendar
import datetime as dt
from typing import Union

from haulbook.core.errors import InvalidPeriodError
from haulbook.data.models.period import Period, PeriodKind
from haulbook.engine.settlement_cycle import settlement_cycle_boundaries


def _month_bounds(year: int, month: int) -> tuple[dt.datetime, dt.datetime]:
    last_day = calendar.monthrange(year, month)[1]
    return dt.datetime(year, month, 1), dt.datetime(year, month, last_day)


def parse_period_kind(value: Union[str, PeriodKind]) -> PeriodKind:
    """Convert a period name such as "last-month" to a PeriodKind."""
    try:
        return PeriodKind(value)
    except ValueError:
        valid = ", ".join(kind.value for kind in PeriodKind if kind is not PeriodKind.CUSTOM)
        raise InvalidPeriodError(f"Unknown period '{value}'. Expected one of: {valid}") from None


def resolve_period(kind: Union[str, PeriodKind], now: dt.datetime) -> Period:
    """
    Resolve a named period relative to ``now``.

    Args:
        kind: current-month, last-month, ytd or settlement-cycle
        now: Current instant

    Returns:
        Period with start, end and a display title

    Raises:
        InvalidPeriodError: For unknown names or CUSTOM (use custom_period)
    """
    kind = parse_period_kind(kind)

    if kind is PeriodKind.CURRENT_MONTH:
        start, end = _month_bounds(now.year, now.month)
        title = start.strftime("%B %Y")
    elif kind is PeriodKind.LAST_MONTH:
        year, month = (now.year - 1, 12) if now.month == 1 else (now.year, now.month - 1)
        start, end = _month_bounds(year, month)
        title = start.strftime("%B %Y")
    elif kind is PeriodKind.YTD:
        start = dt.datetime(now.year, 1, 1)
        end = now
        title = f"{now.year} Year to Date"
    elif kind is PeriodKind.SETTLEMENT_CYCLE:
        cycle = settlement_cycle_boundaries(now)
        start, end = cycle.start, cycle.end
        title = f"Settlement {cycle}"
    else:
        raise InvalidPeriodError("Custom periods need explicit dates; use custom_period()")

    return Period(start=start, end=end, title=title, kind=kind)


def custom_period(start_date: dt.date, end_date: dt.date) -> Period:
    """
    Build an explicit date-range period.

    Records dated on both ends are included, but the range runs from midnight
    to midnight, so fixed costs and the truck payment are charged for
    ``(end_date - start_date)`` days: a single-day range carries none.

    Raises:
        InvalidPeriodError: If end_date is before start_date
    """
    if end_date < start_date:
        raise InvalidPeriodError(f"Period end {end_date} is before start {start_date}")
    return Period(
        start=dt.datetime.combine(start_date, dt.time.min),
        end=dt.datetime.combine(end_date, dt.time.min),
        title=f"{start_date:%b %d, %Y} - {end_date:%b %d, %Y}",
        kind=PeriodKind.CUSTOM,
    )
