from homecost.logging_config import get_logger
from homecost.mortgage.amortization import compute_principal_interest_pmi
from homecost.mortgage.breakdown import PaymentBreakdown, assemble_breakdown
from homecost.mortgage.estimators import CostEstimator
from homecost.mortgage.inputs import BorrowerProfile, PropertyInput

logger = get_logger(__name__)


class MortgageEstimator:
    """Runs one full calculation: amortization, location costs, assembly."""

    def __init__(self, cost_estimator: CostEstimator):
        self.cost_estimator = cost_estimator

    async def estimate(self, property_input: PropertyInput, profile: BorrowerProfile) -> PaymentBreakdown:
        pi_and_pmi = compute_principal_interest_pmi(
            property_input.asking_price,
            profile.down_payment,
            profile.credit_score,
            profile.mortgage_type,
        )
        location_costs = await self.cost_estimator.estimate(property_input, profile.homestead_exemption)
        breakdown = assemble_breakdown(pi_and_pmi, location_costs)

        logger.info(
            f"Estimated {breakdown.total_monthly_payment}/mo for {property_input.address} "
            f"(price {property_input.asking_price}, estimator {type(self.cost_estimator).__name__})"
        )
        return breakdown
