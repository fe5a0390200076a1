"""Naira amounts.

Prices live in the domain as integers in kobo (minor units). Conversion from
what a person types or sees (``"₦1,500.50"``) happens at the API boundary.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CURRENCY = "NGN"
CURRENCY_SYMBOL = "₦"
MINOR_UNITS_PER_MAJOR = 100

_STRIP = re.compile(rf"[\s,{CURRENCY_SYMBOL}]|^{CURRENCY}", re.IGNORECASE)


def to_minor_units(value) -> int:
    """Convert a naira amount (number or display string) to kobo."""
    if isinstance(value, bool) or value is None:
        raise ValidationError({"price": [f"Invalid price: {value!r}"]})

    if isinstance(value, str):
        cleaned = _STRIP.sub("", value.strip())
        if not cleaned:
            raise ValidationError({"price": [f"Invalid price: {value!r}"]})
        value = cleaned

    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError({"price": [f"Invalid price: {value!r}"]}) from None

    if not amount.is_finite() or amount < 0:
        raise ValidationError({"price": [f"Price must be a non-negative amount, got {value!r}"]})

    return int((amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_price(minor_units: int) -> str:
    """Display form of a kobo amount, e.g. ``150050`` → ``"₦1,500.50"``."""
    major = Decimal(minor_units) / MINOR_UNITS_PER_MAJOR
    return f"{CURRENCY_SYMBOL}{major:,.2f}"
