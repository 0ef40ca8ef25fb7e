"""
Expense data model - a manually entered operating cost.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from haulbook.data.models.load import new_record_id


class ExpenseCategory(str, Enum):
    """Expense category enumeration."""

    FUEL_TRACTOR = "fuel-tractor"
    FUEL_TAX = "fuel-tax"
    MAINTENANCE = "maintenance"
    PARKING_TOLLS = "parking-tolls"
    SUPPLIES = "supplies"
    TRAVEL_LODGING = "travel-lodging"
    TRUCK_PAYMENT = "truck-payment"
    INSURANCE_PHYSICAL = "insurance-physical"
    INSURANCE_BOBTAIL = "insurance-bobtail"
    INSURANCE_WORKCOMP = "insurance-workcomp"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Human-readable category name."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ExpenseCategory.FUEL_TRACTOR: "Fuel - Tractor",
    ExpenseCategory.FUEL_TAX: "Fuel Tax",
    ExpenseCategory.MAINTENANCE: "Maintenance & Repairs",
    ExpenseCategory.PARKING_TOLLS: "Parking, Scales & Tolls",
    ExpenseCategory.SUPPLIES: "Supplies",
    ExpenseCategory.TRAVEL_LODGING: "Travel & Lodging",
    ExpenseCategory.TRUCK_PAYMENT: "Truck Payment",
    ExpenseCategory.INSURANCE_PHYSICAL: "Insurance - Physical Damage",
    ExpenseCategory.INSURANCE_BOBTAIL: "Insurance - Bobtail",
    ExpenseCategory.INSURANCE_WORKCOMP: "Insurance - Work Comp",
    ExpenseCategory.OTHER: "Other",
}


class Expense(BaseModel):
    """A single cost record, optionally tied to per-mile usage."""

    type: Literal["expense"] = "expense"
    id: int = Field(default_factory=new_record_id, description="Creation timestamp (ms)")
    date: dt.date = Field(..., description="Day the expense was incurred")
    category: ExpenseCategory = Field(..., description="Expense category")
    amount: Decimal = Field(..., gt=0, description="Amount (USD)")
    miles: Optional[int] = Field(None, ge=0, description="Miles, for per-mile expenses")
    notes: str = Field("", description="Description")

    @field_validator("amount", mode="before")
    @classmethod
    def _exact_amount(cls, value: Any) -> Any:
        if isinstance(value, float):
            return Decimal(str(value))
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def per_mile(self) -> Decimal:
        """Amount per recorded mile, 0 when no miles were recorded."""
        if not self.miles:
            return Decimal("0")
        return self.amount / Decimal(self.miles)

    def revise(self, **changes: Any) -> "Expense":
        """Return a re-validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return Expense.model_validate(data)

    class Config:
        """Pydantic configuration."""

        alias_generator = to_camel
        populate_by_name = True
        frozen = True
        extra = "ignore"
