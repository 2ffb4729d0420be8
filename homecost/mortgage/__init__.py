"""
Mortgage payment estimation.

    amortization  first-month principal/interest and PMI
    estimators    property taxes, HOA, insurance (heuristic or remote)
    breakdown     assembly of the eight components and their total
    calculator    MortgageEstimator, which runs all of the above
"""

from homecost.mortgage.amortization import (
    PrincipalInterestPMI,
    compute_principal_interest_pmi,
    interest_rate_for_credit_score,
    monthly_payment,
    term_months,
)
from homecost.mortgage.breakdown import (
    LocationCosts,
    PaymentBreakdown,
    assemble_breakdown,
    effective_annual_rate,
    rebuild_breakdown,
    recompute_total,
)
from homecost.mortgage.calculator import MortgageEstimator
from homecost.mortgage.errors import EstimationUnavailableError, InvalidInputError, MortgageError
from homecost.mortgage.estimators import (
    CostEstimator,
    HeuristicCostEstimator,
    RemoteCostEstimator,
    build_cost_estimator,
    extract_zip_code,
)
from homecost.mortgage.inputs import BorrowerProfile, PropertyInput
