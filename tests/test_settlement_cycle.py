"""Tests for Wednesday-to-Tuesday settlement cycle boundaries."""

import datetime as dt

import pytest

from haulbook.engine.settlement_cycle import (
    next_settlement_cycle,
    previous_settlement_cycle,
    settlement_cycle_boundaries,
    sunday_based_weekday,
)

WEDNESDAY = 2  # date.weekday()
TUESDAY = 1

# Wed Oct 14 through Tue Oct 20, 2026
CYCLE_DAYS = [dt.date(2026, 10, 14) + dt.timedelta(days=offset) for offset in range(7)]


class TestBoundaries:
    @pytest.mark.parametrize("day", CYCLE_DAYS)
    def test_every_weekday_maps_to_same_cycle(self, day):
        cycle = settlement_cycle_boundaries(dt.datetime.combine(day, dt.time(13, 30)))
        assert cycle.start == dt.datetime(2026, 10, 14, 0, 0, 0)
        assert cycle.end == dt.datetime(2026, 10, 20, 23, 59, 59, 999000)

    @pytest.mark.parametrize("offset", range(-14, 15))
    def test_start_is_wednesday_end_is_tuesday(self, offset):
        reference = dt.datetime(2026, 10, 19, 8, 0) + dt.timedelta(days=offset)
        cycle = settlement_cycle_boundaries(reference)
        assert cycle.start.weekday() == WEDNESDAY
        assert cycle.end.weekday() == TUESDAY
        assert cycle.end.date() - cycle.start.date() == dt.timedelta(days=6)
        assert cycle.start.time() == dt.time.min

    def test_tuesday_ends_its_own_cycle(self):
        tuesday = dt.datetime(2026, 10, 13, 23, 0)
        cycle = settlement_cycle_boundaries(tuesday)
        assert cycle.end.date() == tuesday.date()
        assert cycle.start.date() == dt.date(2026, 10, 7)

    def test_wednesday_starts_a_new_cycle(self):
        cycle = settlement_cycle_boundaries(dt.datetime(2026, 10, 21, 0, 0))
        assert cycle.start == dt.datetime(2026, 10, 21)
        assert cycle.end.date() == dt.date(2026, 10, 27)

    def test_crosses_month_and_year(self):
        cycle = settlement_cycle_boundaries(dt.datetime(2026, 12, 31, 9, 0))
        assert cycle.start.date() == dt.date(2026, 12, 30)
        assert cycle.end.date() == dt.date(2027, 1, 5)

    def test_time_of_day_is_ignored(self):
        morning = settlement_cycle_boundaries(dt.datetime(2026, 10, 16, 0, 0, 1))
        night = settlement_cycle_boundaries(dt.datetime(2026, 10, 16, 23, 59, 59))
        assert morning == night

    def test_contains_is_inclusive(self):
        cycle = settlement_cycle_boundaries(dt.datetime(2026, 10, 19))
        assert cycle.contains(dt.date(2026, 10, 14))
        assert cycle.contains(dt.date(2026, 10, 20))
        assert not cycle.contains(dt.date(2026, 10, 13))
        assert not cycle.contains(dt.date(2026, 10, 21))


class TestAdjacentCycles:
    def test_previous_cycle_ends_a_millisecond_before(self):
        cycle = settlement_cycle_boundaries(dt.datetime(2026, 10, 19))
        previous = previous_settlement_cycle(cycle)
        assert previous.end == dt.datetime(2026, 10, 13, 23, 59, 59, 999000)
        assert previous.start == dt.datetime(2026, 10, 7)

    def test_next_cycle_starts_the_following_day(self):
        cycle = settlement_cycle_boundaries(dt.datetime(2026, 10, 19))
        upcoming = next_settlement_cycle(cycle)
        assert upcoming.start == dt.datetime(2026, 10, 21)
        assert upcoming.end == dt.datetime(2026, 10, 27, 23, 59, 59, 999000)

    def test_round_trip(self):
        cycle = settlement_cycle_boundaries(dt.datetime(2026, 10, 19))
        assert previous_settlement_cycle(next_settlement_cycle(cycle)) == cycle


def test_sunday_based_weekday():
    assert sunday_based_weekday(dt.date(2026, 10, 18)) == 0  # Sunday
    assert sunday_based_weekday(dt.date(2026, 10, 20)) == 2  # Tuesday
    assert sunday_based_weekday(dt.date(2026, 10, 24)) == 6  # Saturday
