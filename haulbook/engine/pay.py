"""
Mileage-tiered load pay.

The whole trip is paid at the single rate of the bracket its total mileage
falls into. Crossing a bracket boundary by one mile reprices every mile of
the trip, so pay is not monotonic in miles.
"""

from decimal import Decimal

# (inclusive upper bound in miles, rate per mile)
PAY_BRACKETS: tuple[tuple[int, Decimal], ...] = (
    (20, Decimal("2.85")),
    (75, Decimal("2.00")),
    (150, Decimal("1.85")),
    (275, Decimal("1.70")),
    (425, Decimal("1.45")),
    (600, Decimal("1.35")),
    (800, Decimal("1.28")),
    (1000, Decimal("1.25")),
    (1200, Decimal("1.20")),
    (1800, Decimal("1.13")),
)
LONG_HAUL_RATE = Decimal("1.12")


def rate_for_miles(miles: int) -> Decimal:
    """Per-mile rate of the bracket containing ``miles``."""
    for upper_bound, rate in PAY_BRACKETS:
        if miles <= upper_bound:
            return rate
    return LONG_HAUL_RATE


def calculate_pay(miles: int) -> Decimal:
    """
    Calculate load revenue for a trip.

    Args:
        miles: Trip miles, already validated as non-negative

    Returns:
        Full-precision pay (miles * bracket rate); rounding is left to display
    """
    return Decimal(miles) * rate_for_miles(miles)


def effective_rate(miles: int) -> Decimal:
    """Pay divided by miles, 0 for a zero-mile trip."""
    if miles <= 0:
        return Decimal("0")
    return calculate_pay(miles) / Decimal(miles)
