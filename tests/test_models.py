"""Tests for the load and expense records."""

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from haulbook.data.models import Expense, ExpenseCategory, Load


class TestLoad:
    def test_revenue_follows_miles(self):
        load = Load(date=dt.date(2026, 10, 5), miles=100)
        assert load.revenue == Decimal("185.00")
        assert load.rate_per_mile == Decimal("1.85")

    def test_incoming_revenue_is_ignored(self):
        load = Load.model_validate({"date": "2026-10-05", "miles": 100, "revenue": 9999})
        assert load.revenue == Decimal("185.00")

    def test_reads_camel_case_record(self):
        load = Load.model_validate(
            {
                "id": 1760400000000,
                "type": "load",
                "date": "2025-10-14",
                "loadNumber": "A-1204",
                "origin": "Dallas, TX",
                "destination": "Waco, TX",
                "miles": 95,
                "revenue": 175.75,
                "notes": "Drop and hook",
            }
        )
        assert load.id == 1760400000000
        assert load.load_number == "A-1204"
        assert load.route == "Dallas, TX to Waco, TX"
        assert load.revenue == Decimal("175.75")

    def test_optional_fields_default_blank(self):
        load = Load.model_validate({"date": "2026-10-05", "miles": 40, "origin": None})
        assert load.load_number == ""
        assert load.origin == ""
        assert load.route == ""

    def test_route_with_one_side(self):
        load = Load(date=dt.date(2026, 10, 5), miles=40, origin="Tyler, TX")
        assert load.route == "Tyler, TX to N/A"

    @pytest.mark.parametrize("miles", [0, -5])
    def test_miles_must_be_positive(self, miles):
        with pytest.raises(ValidationError):
            Load(date=dt.date(2026, 10, 5), miles=miles)

    def test_expense_record_is_not_a_load(self):
        with pytest.raises(ValidationError):
            Load.model_validate({"type": "expense", "date": "2026-10-05", "miles": 40})

    def test_revise_reprices(self):
        load = Load(id=7, date=dt.date(2026, 10, 5), miles=150, notes="short")
        revised = load.revise(miles=151)
        assert revised.id == 7
        assert revised.notes == "short"
        assert revised.revenue == Decimal("256.70")
        assert load.revenue == Decimal("277.50")

    def test_frozen(self):
        load = Load(date=dt.date(2026, 10, 5), miles=100)
        with pytest.raises(ValidationError):
            load.miles = 200

    def test_serializes_camel_case_with_revenue(self):
        load = Load(id=1, date=dt.date(2026, 10, 5), miles=100, load_number="X9")
        data = load.model_dump(mode="json", by_alias=True)
        assert data["type"] == "load"
        assert data["loadNumber"] == "X9"
        assert data["date"] == "2026-10-05"
        assert Decimal(data["revenue"]) == Decimal("185")
        assert Load.model_validate(data).model_dump() == load.model_dump()


class TestExpense:
    def test_reads_camel_case_record(self):
        expense = Expense.model_validate(
            {
                "id": 1760400000001,
                "type": "expense",
                "date": "2025-10-14",
                "category": "fuel-tractor",
                "amount": 412.37,
                "miles": None,
                "notes": "Love's",
            }
        )
        assert expense.category is ExpenseCategory.FUEL_TRACTOR
        assert expense.amount == Decimal("412.37")
        assert expense.miles is None
        assert expense.per_mile == 0

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            Expense(date=dt.date(2026, 10, 5), category="snacks", amount=Decimal("5"))

    @pytest.mark.parametrize("amount", ["0", "-10"])
    def test_amount_must_be_positive(self, amount):
        with pytest.raises(ValidationError):
            Expense(date=dt.date(2026, 10, 5), category="other", amount=Decimal(amount))

    def test_per_mile(self):
        expense = Expense(date=dt.date(2026, 10, 5), category="fuel-tax", amount="60", miles=400)
        assert expense.per_mile == Decimal("0.15")

    def test_category_labels(self):
        assert len(ExpenseCategory) == 11
        assert ExpenseCategory.PARKING_TOLLS.label == "Parking, Scales & Tolls"
        assert all(category.label for category in ExpenseCategory)

    def test_revise(self):
        expense = Expense(id=3, date=dt.date(2026, 10, 5), category="supplies", amount="12.50")
        revised = expense.revise(amount="15", category="maintenance")
        assert revised.id == 3
        assert revised.amount == Decimal("15")
        assert revised.category is ExpenseCategory.MAINTENANCE
        with pytest.raises(ValidationError):
            expense.revise(amount="0")
