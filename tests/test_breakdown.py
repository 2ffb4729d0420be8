"""
Tests for breakdown assembly, the edit flow, and the full estimator.
"""

import asyncio
import pytest
from decimal import Decimal

from homecost.mortgage.amortization import PrincipalInterestPMI
from homecost.mortgage.breakdown import (
    COMPONENT_FIELDS,
    LocationCosts,
    PaymentBreakdown,
    assemble_breakdown,
    effective_annual_rate,
    rebuild_breakdown,
    recompute_total,
)
from homecost.mortgage.calculator import MortgageEstimator
from homecost.mortgage.errors import InvalidInputError
from homecost.mortgage.estimators import CostEstimator, HeuristicCostEstimator
from homecost.mortgage.inputs import BorrowerProfile, PropertyInput


def component_sum(breakdown: PaymentBreakdown) -> Decimal:
    return sum((getattr(breakdown, name) for name in COMPONENT_FIELDS), Decimal("0"))


class FixedCostEstimator(CostEstimator):
    """Returns the same costs for every property."""

    def __init__(self, costs: LocationCosts):
        self.costs = costs
        self.calls = []

    async def estimate(self, property_input, homestead_exemption):
        self.calls.append((property_input, homestead_exemption))
        return self.costs


class TestAssembleBreakdown:
    """Test suite for the single total computation."""

    def test_total_is_sum_of_components(self):
        breakdown = assemble_breakdown(
            PrincipalInterestPMI(Decimal("256.19"), Decimal("1406.25"), Decimal("180.00")),
            LocationCosts(Decimal("300.00"), Decimal("0.00"), Decimal("150.00"), Decimal("0.00"), Decimal("50.00")),
        )
        assert breakdown.total_monthly_payment == Decimal("2342.44")
        assert breakdown.total_monthly_payment == component_sum(breakdown)

    def test_components_are_rounded_before_summing(self):
        breakdown = assemble_breakdown(
            PrincipalInterestPMI(Decimal("0.005"), Decimal("0.005"), Decimal("0")),
            LocationCosts(Decimal("0.005"), Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0")),
        )
        assert breakdown.principal == Decimal("0.01")
        assert breakdown.total_monthly_payment == Decimal("0.03")
        assert breakdown.total_monthly_payment == component_sum(breakdown)

    def test_as_record_uses_two_fraction_digits(self):
        breakdown = assemble_breakdown(
            PrincipalInterestPMI(Decimal("100"), Decimal("50.5"), Decimal("0")),
            LocationCosts(Decimal("1"), Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0")),
        )
        record = breakdown.as_record()
        assert record["principal"] == "100.00"
        assert record["interest"] == "50.50"
        assert record["total_monthly_payment"] == "151.50"
        assert len(record) == 9


class TestEditFlow:
    """Test suite for recalculating an edited calculation."""

    FIXED = {"principal": "1000", "interest": "800"}

    def test_all_zero_edits(self):
        edited = {name: "0" for name in
                  ("property_taxes", "hoa", "pmi", "homeowners_insurance", "flood_insurance", "other")}
        assert recompute_total(self.FIXED, edited) == Decimal("1800.00")

    def test_blank_and_garbage_count_as_zero(self):
        edited = {"property_taxes": "", "hoa": "abc", "pmi": None, "other": "25.5"}
        assert recompute_total(self.FIXED, edited) == Decimal("1825.50")

    def test_out_of_range_counts_as_zero(self):
        assert recompute_total(self.FIXED, {"hoa": "1e40", "other": "10"}) == Decimal("1810.00")

    def test_rebuilt_breakdown_keeps_invariant(self):
        edited = {"property_taxes": "333.33", "hoa": "12.345", "pmi": "99.99",
                  "homeowners_insurance": "120", "flood_insurance": "45.10", "other": "0.01"}
        breakdown = rebuild_breakdown(self.FIXED, edited)
        assert breakdown.hoa == Decimal("12.35")
        assert breakdown.total_monthly_payment == component_sum(breakdown)


class TestEffectiveAnnualRate:
    """Test suite for the display-only interest rate."""

    def test_rate_from_first_month_interest(self):
        assert effective_annual_rate("1406.25", "300000", "30000") == Decimal("6.25")

    def test_no_down_payment_snapshot(self):
        assert effective_annual_rate("1562.50", "300000", None) == Decimal("6.25")

    def test_nothing_financed(self):
        assert effective_annual_rate("0", "300000", "300000") == Decimal("0.00")


class TestMortgageEstimator:
    """Test suite for the full calculation."""

    def test_example_breakdown(self):
        estimator = MortgageEstimator(HeuristicCostEstimator())
        profile = BorrowerProfile(credit_score=760, down_payment=Decimal("30000"), mortgage_type="30-year-fixed")
        property_input = PropertyInput.from_form("123 Main St, Austin, TX 78701", "300000")

        breakdown = asyncio.run(estimator.estimate(property_input, profile))

        assert breakdown.interest == Decimal("1406.25")
        assert breakdown.pmi == Decimal("180.00")
        assert breakdown.property_taxes == Decimal("300.00")
        assert breakdown.total_monthly_payment == component_sum(breakdown)

    def test_uses_injected_estimator_and_homestead_flag(self):
        costs = LocationCosts(Decimal("10"), Decimal("20"), Decimal("30"), Decimal("40"), Decimal("50"))
        fake = FixedCostEstimator(costs)
        estimator = MortgageEstimator(fake)
        profile = BorrowerProfile(down_payment=Decimal("60000"), homestead_exemption=True)
        property_input = PropertyInput.from_form("1 Elm St", "300000")

        breakdown = asyncio.run(estimator.estimate(property_input, profile))

        assert fake.calls == [(property_input, True)]
        assert breakdown.pmi == Decimal("0.00")
        assert breakdown.flood_insurance == Decimal("40.00")
        assert breakdown.total_monthly_payment == component_sum(breakdown)

    def test_invalid_price_stops_before_estimation(self):
        fake = FixedCostEstimator(None)
        property_input = PropertyInput(address="1 Elm St", asking_price=Decimal("0"))
        with pytest.raises(InvalidInputError):
            asyncio.run(MortgageEstimator(fake).estimate(property_input, BorrowerProfile()))
        assert fake.calls == []


class TestPropertyInput:
    """Test suite for property form validation."""

    def test_parses_price_string(self):
        property_input = PropertyInput.from_form("  1 Elm St ", "$450,000.50", "")
        assert property_input.address == "1 Elm St"
        assert property_input.asking_price == Decimal("450000.50")
        assert property_input.photo_reference is None

    @pytest.mark.parametrize("address,price,field", [
        ("", "300000", "address"),
        ("   ", "300000", "address"),
        ("1 Elm St", "", "askingPrice"),
        ("1 Elm St", "abc", "askingPrice"),
        ("1 Elm St", "0", "askingPrice"),
        ("1 Elm St", "-100", "askingPrice"),
        ("1 Elm St", "NaN", "askingPrice"),
        ("1 Elm St", "1e30", "askingPrice"),
    ])
    def test_rejects_bad_input(self, address, price, field):
        with pytest.raises(InvalidInputError) as exc:
            PropertyInput.from_form(address, price)
        assert exc.value.field == field
