"""Tests for fixed cost proration over the settlement cycle."""

import datetime as dt
from decimal import Decimal

import pytest

from haulbook.core.config import OperatingCosts
from haulbook.engine import fixed_costs
from haulbook.engine.fixed_costs import cycle_containing, prorate_fixed_costs
from haulbook.engine.settlement_cycle import next_settlement_cycle, settlement_cycle_boundaries

CYCLE_START = dt.datetime(2026, 10, 14)
CYCLE_END = dt.datetime(2026, 10, 20, 23, 59, 59, 999000)


class TestProration:
    def test_full_weekly_cost_without_lease(self, costs):
        result = prorate_fixed_costs(False, CYCLE_START, costs)
        assert result.full == Decimal("277")

    def test_full_weekly_cost_with_lease(self, costs):
        result = prorate_fixed_costs(True, CYCLE_START, costs)
        assert result.full == Decimal("1112")

    def test_progress_zero_at_cycle_start(self, costs):
        result = prorate_fixed_costs(True, CYCLE_START, costs)
        assert result.progress == 0
        assert result.prorated == 0

    def test_progress_one_at_cycle_end(self, costs):
        result = prorate_fixed_costs(True, CYCLE_END, costs)
        assert result.progress == 1
        assert result.prorated == result.full

    def test_midweek_is_linear(self, costs):
        """Half of the cycle's wall time accrues (almost exactly) half the cost."""
        midpoint = CYCLE_START + (CYCLE_END - CYCLE_START) / 2
        result = prorate_fixed_costs(False, midpoint, costs)
        assert abs(result.progress - Decimal("0.5")) < Decimal("1e-9")
        assert abs(result.prorated - Decimal("138.5")) < Decimal("1e-6")

    def test_monotonic_within_cycle(self, costs):
        previous = Decimal("-1")
        instant = CYCLE_START
        while instant <= CYCLE_END:
            prorated = prorate_fixed_costs(True, instant, costs).prorated
            assert prorated >= previous
            previous = prorated
            instant += dt.timedelta(hours=5)

    def test_uses_configured_costs(self):
        custom = OperatingCosts(fixed_costs_weekly=Decimal("100"), truck_payment_weekly=Decimal("50"))
        result = prorate_fixed_costs(True, CYCLE_END, custom)
        assert result.full == Decimal("150")

    def test_reports_the_cycle(self, costs):
        result = prorate_fixed_costs(False, dt.datetime(2026, 10, 19, 10), costs)
        assert result.cycle.start == CYCLE_START
        assert result.cycle.end == CYCLE_END


class TestCycleSelection:
    @pytest.mark.parametrize("day_offset", range(7))
    @pytest.mark.parametrize("hour", [0, 6, 12, 23])
    def test_every_weekday_uses_own_cycle(self, costs, day_offset, hour):
        """For every weekday as "now", the prorated cycle contains now."""
        now = CYCLE_START + dt.timedelta(days=day_offset, hours=hour)
        result = prorate_fixed_costs(True, now, costs)
        assert result.cycle == settlement_cycle_boundaries(now)
        assert result.cycle.start <= now <= result.cycle.end
        assert 0 <= result.progress <= 1

    def test_falls_back_to_previous_cycle_when_now_precedes_start(self, costs, monkeypatch):
        """When the computed cycle starts after now, the preceding cycle is used."""
        now = dt.datetime(2026, 10, 19, 10)
        real_cycle = settlement_cycle_boundaries(now)
        monkeypatch.setattr(
            fixed_costs,
            "settlement_cycle_boundaries",
            lambda reference: next_settlement_cycle(settlement_cycle_boundaries(reference)),
        )

        assert cycle_containing(now) == real_cycle
        result = prorate_fixed_costs(False, now, costs)
        assert result.cycle == real_cycle
        assert 0 < result.progress < 1
