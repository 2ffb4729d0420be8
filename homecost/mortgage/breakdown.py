"""
Assembly of the monthly payment breakdown.

assemble_breakdown is the only place a total monthly payment is computed.
The edit flow (recompute_total, rebuild_breakdown) goes through it too, so a
stored total always equals the sum of its stored components.
"""

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from homecost.mortgage.amortization import PrincipalInterestPMI
from homecost.mortgage.money import ZERO, format_money, parse_money_or_zero, to_money

# Order matches the breakdown screen and the saved_calculations columns
COMPONENT_FIELDS = (
    "principal",
    "interest",
    "property_taxes",
    "hoa",
    "pmi",
    "homeowners_insurance",
    "flood_insurance",
    "other",
)

# Components a user may edit on a saved calculation
EDITABLE_FIELDS = (
    "property_taxes",
    "hoa",
    "pmi",
    "homeowners_insurance",
    "flood_insurance",
    "other",
)


@dataclass(frozen=True)
class LocationCosts:
    property_taxes: Decimal
    hoa: Decimal
    homeowners_insurance: Decimal
    flood_insurance: Decimal
    other: Decimal


@dataclass(frozen=True)
class PaymentBreakdown:
    principal: Decimal
    interest: Decimal
    property_taxes: Decimal
    hoa: Decimal
    pmi: Decimal
    homeowners_insurance: Decimal
    flood_insurance: Decimal
    other: Decimal
    total_monthly_payment: Decimal

    def as_record(self) -> Dict[str, str]:
        """All nine amounts as two-fraction-digit strings, ready for storage."""
        return {f.name: format_money(getattr(self, f.name)) for f in fields(self)}


def _component(value: Decimal) -> Decimal:
    # Estimators should never return negatives, but the total must stay sane if one does
    return max(to_money(value), ZERO)


def assemble_breakdown(pi_and_pmi: PrincipalInterestPMI, location_costs: LocationCosts) -> PaymentBreakdown:
    """Combine both calculation phases and derive the total."""
    components = {
        "principal": _component(pi_and_pmi.principal),
        "interest": _component(pi_and_pmi.interest),
        "property_taxes": _component(location_costs.property_taxes),
        "hoa": _component(location_costs.hoa),
        "pmi": _component(pi_and_pmi.pmi),
        "homeowners_insurance": _component(location_costs.homeowners_insurance),
        "flood_insurance": _component(location_costs.flood_insurance),
        "other": _component(location_costs.other),
    }
    total = sum(components.values(), ZERO)
    return PaymentBreakdown(total_monthly_payment=to_money(total), **components)


def rebuild_breakdown(fixed: Mapping[str, Any], edited: Mapping[str, Any]) -> PaymentBreakdown:
    """
    Breakdown for a saved calculation after the user edits it.

    Args:
        fixed: principal and interest, which are never edited
        edited: the EDITABLE_FIELDS; blank or unparseable values count as 0
    """
    pi_and_pmi = PrincipalInterestPMI(
        principal=parse_money_or_zero(fixed.get("principal")),
        interest=parse_money_or_zero(fixed.get("interest")),
        pmi=parse_money_or_zero(edited.get("pmi")),
    )
    location_costs = LocationCosts(
        property_taxes=parse_money_or_zero(edited.get("property_taxes")),
        hoa=parse_money_or_zero(edited.get("hoa")),
        homeowners_insurance=parse_money_or_zero(edited.get("homeowners_insurance")),
        flood_insurance=parse_money_or_zero(edited.get("flood_insurance")),
        other=parse_money_or_zero(edited.get("other")),
    )
    return assemble_breakdown(pi_and_pmi, location_costs)


def recompute_total(fixed: Mapping[str, Any], edited: Mapping[str, Any]) -> Decimal:
    """Total monthly payment for an in-progress edit."""
    return rebuild_breakdown(fixed, edited).total_monthly_payment


def effective_annual_rate(
    monthly_interest: Any,
    asking_price: Any,
    down_payment: Optional[Any],
) -> Decimal:
    """
    Annual interest rate (percent) implied by a first-month interest amount.

    Display only; returns 0.00 when nothing is financed.
    """
    loan_amount = parse_money_or_zero(asking_price) - parse_money_or_zero(down_payment)
    if loan_amount <= 0:
        return ZERO
    return to_money(parse_money_or_zero(monthly_interest) * 12 * 100 / loan_amount)
