"""Conversion between API amounts (major units, two decimals) and stored cents."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from united_pets.config import settings
from united_pets.exceptions import ValidationError

_CENT = Decimal("0.01")


def to_cents(amount: float, field: str = "amount") -> int:
    """
    Convert a positive major-unit amount to integer cents.

    Goes through str() so 19.99 becomes 1999 rather than 1998.9999...
    Amounts above settings.max_amount are rejected before they reach storage.
    """
    try:
        value = Decimal(str(amount))
        if not value.is_finite():
            raise InvalidOperation
        value = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(message=f"'{amount}' is not a valid amount", field=field)

    if value <= 0:
        raise ValidationError(message="Amount must be greater than zero", field=field)
    if value > Decimal(str(settings.max_amount)):
        raise ValidationError(
            message=f"Amount must not exceed {settings.max_amount:g}", field=field
        )
    return int(value * 100)


def from_cents(cents: int) -> float:
    return float(Decimal(cents) / 100)
