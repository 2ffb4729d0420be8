"""
Fixed-rate amortization: first-month principal and interest, plus PMI.

The payment follows the standard formula

    M = P * r(1+r)^n / ((1+r)^n - 1)

with r the monthly rate and n the number of monthly payments. Rates are
picked from credit-score tiers rather than a live rate feed.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from homecost.mortgage.errors import InvalidInputError
from homecost.mortgage.money import MAX_AMOUNT, ZERO, to_money

DEFAULT_CREDIT_SCORE = 720

# (minimum score, annual rate %), checked top-down
RATE_TIERS = [
    (780, Decimal("6.00")),
    (740, Decimal("6.25")),
    (700, Decimal("6.50")),
    (660, Decimal("7.00")),
]
FLOOR_RATE = Decimal("7.50")

PMI_ANNUAL_RATE = Decimal("0.008")
PMI_DOWN_PAYMENT_THRESHOLD = Decimal("20")


@dataclass(frozen=True)
class PrincipalInterestPMI:
    principal: Decimal
    interest: Decimal
    pmi: Decimal


def interest_rate_for_credit_score(credit_score: Optional[int]) -> Decimal:
    """Annual interest rate (percent) for a credit score; 720 when unknown."""
    score = DEFAULT_CREDIT_SCORE if credit_score is None else credit_score
    for minimum, rate in RATE_TIERS:
        if score >= minimum:
            return rate
    return FLOOR_RATE


def term_months(mortgage_type: Optional[str]) -> int:
    """180 months for any 15-year product, 360 otherwise."""
    years = 15 if mortgage_type and "15" in mortgage_type else 30
    return years * 12


def monthly_payment(loan_amount: Decimal, annual_rate: Decimal, months: int) -> Decimal:
    """
    Unrounded level monthly payment for a fully amortizing loan.

    Raises:
        InvalidInputError: if loan_amount is not positive
    """
    if loan_amount <= 0:
        raise InvalidInputError("Loan amount must be greater than 0", field="downPayment")
    r = annual_rate / 100 / 12
    if r == 0:
        return loan_amount / months
    growth = (1 + r) ** months
    return loan_amount * r * growth / (growth - 1)


def compute_principal_interest_pmi(
    asking_price: Decimal,
    down_payment: Optional[Decimal],
    credit_score: Optional[int],
    mortgage_type: Optional[str],
) -> PrincipalInterestPMI:
    """
    First-month principal, interest and PMI for a purchase.

    Args:
        asking_price: Purchase price, must be positive
        down_payment: Cash down, or None when the borrower didn't say
        credit_score: Drives the rate tier; None means 720
        mortgage_type: Anything containing "15" is a 15-year term

    Raises:
        InvalidInputError: price not positive or above MAX_AMOUNT, negative down payment, or a
            down payment that leaves nothing to finance
    """
    if asking_price is None or asking_price <= 0:
        raise InvalidInputError("Asking price must be greater than 0", field="askingPrice")
    if asking_price > MAX_AMOUNT:
        raise InvalidInputError(f"Asking price cannot exceed {MAX_AMOUNT:,}", field="askingPrice")

    down = down_payment if down_payment is not None else ZERO
    if down < 0:
        raise InvalidInputError("Down payment cannot be negative", field="downPayment")

    loan_amount = asking_price - down
    down_payment_percent = down / asking_price * 100

    annual_rate = interest_rate_for_credit_score(credit_score)
    months = term_months(mortgage_type)
    payment = monthly_payment(loan_amount, annual_rate, months)

    interest = loan_amount * annual_rate / 100 / 12
    principal = payment - interest

    # No down payment on file counts as unknown, not as 100% financed
    if 0 < down_payment_percent < PMI_DOWN_PAYMENT_THRESHOLD:
        pmi = to_money(loan_amount * PMI_ANNUAL_RATE / 12)
    else:
        pmi = ZERO

    return PrincipalInterestPMI(
        principal=to_money(principal),
        interest=to_money(interest),
        pmi=pmi,
    )
