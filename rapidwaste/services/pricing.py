"""
Pickup price calculation.

The same table drives the client side preview and the authoritative price
stored on the booking, so the calculation has to stay a pure function.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

BASE_PRICES = {
    "regular": 45,
    "emergency": 50,
    "bulk": 79,
}

BAG_SURCHARGES = {
    "1-5": 0,
    "6-10": 5,
    "11+": 10,
}

URGENT_FEE = 15


def _key(value) -> str:
    return value.value if hasattr(value, "value") else str(value)


def calculate_price(service_type, bag_count, urgent_pickup: bool = False) -> int:
    """Return base + bag surcharge + urgent fee.

    Unknown service types are priced as ``regular``; unknown bag counts add
    nothing.
    """
    base_price = BASE_PRICES.get(_key(service_type), BASE_PRICES["regular"])
    bag_surcharge = BAG_SURCHARGES.get(_key(bag_count), 0)
    urgent_fee = URGENT_FEE if urgent_pickup else 0
    return base_price + bag_surcharge + urgent_fee


def to_minor_units(amount: Union[int, float, Decimal]) -> int:
    """Convert a price to integer cents, rounding half up."""
    cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


def from_minor_units(amount_minor: int) -> float:
    return float(Decimal(amount_minor) / 100)
