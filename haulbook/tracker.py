"""
Tracker - the entry point tying the record store to the calculations.

This is the only layer that reads the wall clock: every method takes an
optional ``now`` and falls back to ``datetime.now()`` when it is omitted.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional, Union

import structlog

from haulbook.core.config import ConfigManager, OperatingCosts, get_config
from haulbook.data.models.expense import Expense, ExpenseCategory
from haulbook.data.models.load import Load
from haulbook.data.models.period import PeriodKind
from haulbook.data.store import RecordStore
from haulbook.engine.dashboard import (
    DashboardSummary,
    HistoryEntry,
    HistoryFilter,
    history_entries,
    summarize,
)
from haulbook.engine.fixed_costs import ProratedFixedCosts, prorate_fixed_costs
from haulbook.engine.incentive import IncentiveStatus, incentive_for_month, month_to_date_miles
from haulbook.engine.periods import custom_period, resolve_period
from haulbook.engine.profit_loss import ProfitLossReport, aggregate
from haulbook.engine.weekly import PayCyclePreview, WeeklyGauge, pay_cycle_preview, weekly_gauge


class Tracker:
    """
    Owner-operator load and expense tracker.

    Provides:
    - Recording, editing and deleting loads and expenses
    - Profit and loss by named period or date range
    - Weekly gauge, incentive standing and pay cycle preview
    - All-time summary and history listing
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        config_manager: Optional[ConfigManager] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        """
        Initialize the tracker.

        Args:
            store: Record store (defaults to HAULBOOK_DATA_FILE)
            config_manager: Optional config manager (defaults to global instance)
            logger: Optional structured logger
        """
        self.config_manager = config_manager or get_config()
        self.store = store or RecordStore(self.config_manager.env.data_file)
        self.logger = logger or structlog.get_logger(__name__)

    @property
    def costs(self) -> OperatingCosts:
        return self.config_manager.get_operating_costs()

    @property
    def include_lease(self) -> bool:
        """Configured default for the lease toggle."""
        return self.config_manager.env.include_lease

    @staticmethod
    def _now(now: Optional[dt.datetime]) -> dt.datetime:
        return now if now is not None else dt.datetime.now()

    # -- records ----------------------------------------------------------

    def record_load(
        self,
        date: dt.date,
        miles: int,
        load_number: str = "",
        origin: str = "",
        destination: str = "",
        notes: str = "",
    ) -> Load:
        """Validate and store a load; its revenue is stamped from miles."""
        load = Load(
            date=date,
            miles=miles,
            load_number=load_number,
            origin=origin,
            destination=destination,
            notes=notes,
        )
        return self.store.add_load(load)

    def record_expense(
        self,
        date: dt.date,
        category: Union[str, ExpenseCategory],
        amount: Union[str, Decimal],
        miles: Optional[int] = None,
        notes: str = "",
    ) -> Expense:
        """Validate and store an expense."""
        expense = Expense(date=date, category=category, amount=amount, miles=miles, notes=notes)
        return self.store.add_expense(expense)

    def edit_load(self, load_id: int, **changes: Any) -> Load:
        return self.store.update_load(load_id, **changes)

    def edit_expense(self, expense_id: int, **changes: Any) -> Expense:
        return self.store.update_expense(expense_id, **changes)

    def remove_load(self, load_id: int) -> None:
        self.store.delete_load(load_id)

    def remove_expense(self, expense_id: int) -> None:
        self.store.delete_expense(expense_id)

    # -- reports ----------------------------------------------------------

    def profit_and_loss(
        self,
        period: Union[str, PeriodKind] = PeriodKind.CURRENT_MONTH,
        now: Optional[dt.datetime] = None,
    ) -> ProfitLossReport:
        """Profit and loss for a named period."""
        now = self._now(now)
        records = self.store.read()
        resolved = resolve_period(period, now)
        self.logger.info("building_profit_loss", period=resolved.kind.value, title=resolved.title)
        return aggregate(resolved, records.loads, records.expenses, now, self.costs)

    def profit_and_loss_for_range(
        self,
        start: dt.date,
        end: dt.date,
        now: Optional[dt.datetime] = None,
    ) -> ProfitLossReport:
        """Profit and loss for an explicit date range."""
        now = self._now(now)
        records = self.store.read()
        resolved = custom_period(start, end)
        self.logger.info("building_profit_loss", period=resolved.kind.value, title=resolved.title)
        return aggregate(resolved, records.loads, records.expenses, now, self.costs)

    def fixed_costs(
        self,
        include_lease: Optional[bool] = None,
        now: Optional[dt.datetime] = None,
    ) -> ProratedFixedCosts:
        if include_lease is None:
            include_lease = self.include_lease
        return prorate_fixed_costs(include_lease, self._now(now), self.costs)

    def weekly(
        self,
        include_lease: Optional[bool] = None,
        now: Optional[dt.datetime] = None,
    ) -> WeeklyGauge:
        """Current settlement week gauge."""
        if include_lease is None:
            include_lease = self.include_lease
        records = self.store.read()
        return weekly_gauge(
            records.loads, records.expenses, include_lease, self._now(now), self.costs
        )

    def incentive(self, now: Optional[dt.datetime] = None) -> IncentiveStatus:
        """Month-to-date incentive standing."""
        miles = month_to_date_miles(self.store.loads, self._now(now))
        return incentive_for_month(miles)

    def pay_cycles(self, now: Optional[dt.datetime] = None) -> PayCyclePreview:
        return pay_cycle_preview(self.store.loads, self._now(now), self.costs)

    def summary(self, include_lease: Optional[bool] = None) -> DashboardSummary:
        """All-time totals."""
        if include_lease is None:
            include_lease = self.include_lease
        records = self.store.read()
        return summarize(records.loads, records.expenses, include_lease, self.costs)

    def history(
        self, record_filter: Union[str, HistoryFilter] = HistoryFilter.ALL
    ) -> list[HistoryEntry]:
        records = self.store.read()
        return history_entries(
            records.loads, records.expenses, HistoryFilter(record_filter), self.costs
        )

    def __repr__(self) -> str:
        """String representation of the tracker."""
        return f"{self.__class__.__name__}(store='{self.store.path}')"
