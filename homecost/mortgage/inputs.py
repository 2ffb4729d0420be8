"""
Immutable inputs to a mortgage calculation.

BorrowerProfile is a snapshot of the user's financial profile taken when the
calculation runs. PropertyInput is the validated address/price form.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from homecost.mortgage.errors import InvalidInputError
from homecost.mortgage.money import MAX_AMOUNT, parse_decimal

MORTGAGE_TYPES = ["30-year-fixed", "15-year-fixed", "arm", "fha", "va"]

MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850


@dataclass(frozen=True)
class BorrowerProfile:
    age: Optional[int] = None
    annual_income: Optional[Decimal] = None
    credit_score: Optional[int] = None
    down_payment: Optional[Decimal] = None
    mortgage_type: Optional[str] = None
    monthly_debt: Optional[Decimal] = None
    homestead_exemption: bool = False


@dataclass(frozen=True)
class PropertyInput:
    address: str
    asking_price: Decimal
    photo_reference: Optional[str] = None

    @classmethod
    def from_form(cls, address: Any, asking_price: Any, photo_reference: Optional[str] = None) -> "PropertyInput":
        """
        Validate raw form values.

        Raises:
            InvalidInputError: blank address, or a price that is not a positive number
        """
        address = (address or "").strip() if isinstance(address, str) else ""
        if not address:
            raise InvalidInputError("Address is required", field="address")

        price = parse_decimal(asking_price, "askingPrice")
        if price <= 0:
            raise InvalidInputError("Asking price must be greater than 0", field="askingPrice")
        if price > MAX_AMOUNT:
            raise InvalidInputError(f"Asking price cannot exceed {MAX_AMOUNT:,}", field="askingPrice")

        return cls(address=address, asking_price=price, photo_reference=photo_reference or None)
