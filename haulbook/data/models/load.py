"""
Load data model - represents a single revenue-generating trip.
"""

import datetime as dt
from decimal import Decimal
from time import time
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from haulbook.engine.pay import calculate_pay, effective_rate


def new_record_id() -> int:
    """Creation timestamp in milliseconds, used as the record id."""
    return int(time() * 1000)


class Load(BaseModel):
    """
    A completed load.

    Revenue is never stored independently: it is derived from miles through
    the pay table every time the model is built, so an edited or re-imported
    load can't carry stale pay.
    """

    type: Literal["load"] = "load"
    id: int = Field(default_factory=new_record_id, description="Creation timestamp (ms)")
    date: dt.date = Field(..., description="Day the load was run")
    miles: int = Field(..., gt=0, description="Trip miles")

    load_number: str = Field("", description="Load or dispatch number")
    origin: str = Field("", description="Starting location")
    destination: str = Field("", description="Ending location")
    notes: str = Field("", description="Additional details")

    @field_validator("load_number", "origin", "destination", "notes", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: Any) -> Any:
        return "" if value is None else value

    @computed_field
    @property
    def revenue(self) -> Decimal:
        """Pay for the trip at its mileage bracket."""
        return calculate_pay(self.miles)

    @property
    def rate_per_mile(self) -> Decimal:
        """Revenue per mile."""
        return effective_rate(self.miles)

    @property
    def route(self) -> str:
        """Origin to destination, with N/A for whichever side is blank."""
        if not self.origin and not self.destination:
            return ""
        return f"{self.origin or 'N/A'} to {self.destination or 'N/A'}"

    def revise(self, **changes: Any) -> "Load":
        """Return a re-validated copy with ``changes`` applied."""
        data = self.model_dump(exclude={"revenue"})
        data.update(changes)
        return Load.model_validate(data)

    class Config:
        """Pydantic configuration."""

        alias_generator = to_camel
        populate_by_name = True
        frozen = True
        extra = "ignore"
