"""
Decimal helpers for monetary values.

Every amount in the package is a Decimal quantized to cents with
ROUND_HALF_UP. Binary floats are converted through str() so that 0.1
stays 0.1.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from homecost.mortgage.errors import InvalidInputError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest amount a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def to_money(value: Decimal) -> Decimal:
    """
    Round a Decimal half-up to whole cents.

    Raises:
        InvalidInputError: if the value has too many digits to carry cents
    """
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInputError(f"Amount {value} is too large")


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "").lstrip("$")
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite():
        return None
    return number


def parse_decimal(value: Any, field: str) -> Decimal:
    """
    Parse a required number.

    Raises:
        InvalidInputError: if the value is missing or not a finite number
    """
    number = _to_decimal(value)
    if number is None:
        raise InvalidInputError(f"{field} must be a number", field=field)
    return number


def parse_optional_decimal(value: Any) -> Optional[Decimal]:
    """Parse an optional number; blank or unparseable input means "not given"."""
    return _to_decimal(value)


def parse_money_or_zero(value: Any) -> Decimal:
    """Parse an edited amount, treating blank, unparseable or out-of-range input as 0."""
    number = _to_decimal(value)
    if number is None or abs(number) > MAX_AMOUNT:
        return ZERO
    return to_money(number)


def format_money(value: Optional[Decimal]) -> Optional[str]:
    """Render an amount as a decimal string with two fraction digits."""
    if value is None:
        return None
    return str(to_money(Decimal(value)))
