"""Tests for the weekly gauge and pay cycle preview."""

import datetime as dt
from decimal import Decimal

import pytest

from conftest import make_expense, make_load
from haulbook.engine.weekly import gauge_value, pay_cycle_preview, weekly_gauge

CYCLE_START = dt.datetime(2026, 10, 14)


class TestGaugeValue:
    def test_loss_scales_with_revenue_over_costs(self):
        assert gauge_value(Decimal("50"), Decimal("100"), Decimal("-50")) == Decimal("25")

    def test_no_costs_and_no_profit(self):
        assert gauge_value(Decimal("0"), Decimal("0"), Decimal("0")) == 0

    def test_break_even_sits_at_midpoint(self):
        assert gauge_value(Decimal("100"), Decimal("100"), Decimal("0")) == Decimal("50")

    def test_profit_fills_upper_half(self):
        assert gauge_value(Decimal("1500"), Decimal("500"), Decimal("1000")) == Decimal("75")

    def test_profit_pegs_at_max(self):
        assert gauge_value(Decimal("9000"), Decimal("1000"), Decimal("8000")) == Decimal("100")


class TestWeeklyGauge:
    def test_at_cycle_start(self, costs):
        """No fixed cost has accrued yet at Wednesday midnight."""
        loads = [
            make_load(dt.date(2026, 10, 14), 500),
            make_load(dt.date(2026, 10, 13), 800),  # previous cycle
        ]
        expenses = [
            make_expense(dt.date(2026, 10, 14), "100"),
            make_expense(dt.date(2026, 10, 21), "999"),  # next cycle
        ]
        gauge = weekly_gauge(loads, expenses, True, CYCLE_START, costs)

        assert gauge.revenue == Decimal("675.00")
        assert gauge.miles == 500
        assert gauge.variable_costs == Decimal("186.000")
        assert gauge.fixed_costs.prorated == 0
        assert gauge.fixed_costs.full == Decimal("1112")
        assert gauge.manual_expenses == Decimal("100")
        assert gauge.total_costs == Decimal("286")
        assert gauge.profit == Decimal("389")
        assert gauge.gauge_value == Decimal("59.725")

    def test_empty_week_is_a_loss(self, costs, now):
        gauge = weekly_gauge([], [], False, now, costs)
        assert gauge.revenue == 0
        assert gauge.total_costs == gauge.fixed_costs.prorated
        assert gauge.profit < 0
        assert gauge.gauge_value == 0

    def test_lease_toggle(self, costs, now):
        without = weekly_gauge([], [], False, now, costs)
        with_lease = weekly_gauge([], [], True, now, costs)
        assert with_lease.fixed_costs.prorated > without.fixed_costs.prorated
        assert with_lease.fixed_costs.progress == without.fixed_costs.progress


class TestPayCyclePreview:
    def test_splits_current_and_next_cycle(self, costs, now):
        loads = [
            make_load(dt.date(2026, 10, 15), 100),
            make_load(dt.date(2026, 10, 22), 200),
            make_load(dt.date(2026, 10, 30), 999),  # two cycles out
            make_load(dt.date(2026, 10, 12), 999),  # last cycle
        ]
        preview = pay_cycle_preview(loads, now, costs)

        assert preview.current.cycle.start == CYCLE_START
        assert preview.current.revenue == Decimal("185.00")
        assert preview.current.miles == 100
        assert preview.current.variable_costs == Decimal("37.200")
        assert preview.current.profit == Decimal("147.80")

        assert preview.next.cycle.start == dt.datetime(2026, 10, 21)
        assert preview.next.revenue == Decimal("340.00")
        assert preview.next.miles == 200
        assert preview.next.profit == Decimal("265.60")

    @pytest.mark.parametrize("day", [dt.date(2026, 10, 20), dt.date(2026, 10, 21)])
    def test_cycle_edges(self, costs, now, day):
        preview = pay_cycle_preview([make_load(day, 50)], now, costs)
        in_current = day <= dt.date(2026, 10, 20)
        assert (preview.current.miles == 50) is in_current
        assert (preview.next.miles == 50) is not in_current

    def test_no_loads(self, costs, now):
        preview = pay_cycle_preview([], now, costs)
        assert preview.current.revenue == 0
        assert preview.next.profit == 0
