"""
Time windows used for aggregation.

Both windows are ephemeral: they are recomputed from "now" on every query and
never persisted. Bounds are inclusive on both ends and records match on their
calendar date.
"""

import datetime as dt
import math
from enum import Enum

from pydantic import BaseModel

SECONDS_PER_DAY = 24 * 60 * 60


class PeriodKind(str, Enum):
    """Kind of reporting period."""

    CURRENT_MONTH = "current-month"
    LAST_MONTH = "last-month"
    YTD = "ytd"
    SETTLEMENT_CYCLE = "settlement-cycle"
    CUSTOM = "custom"


class SettlementCycle(BaseModel):
    """Wednesday 00:00:00.000 through the following Tuesday 23:59:59.999."""

    start: dt.datetime
    end: dt.datetime

    class Config:
        """Pydantic configuration."""

        frozen = True

    @property
    def duration(self) -> dt.timedelta:
        return self.end - self.start

    def contains(self, day: dt.date) -> bool:
        """Whether a record dated ``day`` falls in this cycle."""
        return self.start.date() <= day <= self.end.date()

    def __str__(self) -> str:
        return f"{self.start:%a %b %d} - {self.end:%a %b %d, %Y}"


class Period(BaseModel):
    """A named or explicit reporting window."""

    start: dt.datetime
    end: dt.datetime
    title: str
    kind: PeriodKind

    class Config:
        """Pydantic configuration."""

        frozen = True

    def contains(self, day: dt.date) -> bool:
        """Whether a record dated ``day`` falls in this period."""
        return self.start.date() <= day <= self.end.date()

    @property
    def days(self) -> int:
        """Whole days spanned by the period, rounded up."""
        return math.ceil((self.end - self.start).total_seconds() / SECONDS_PER_DAY)
