"""
Mortgage calculation routes for the HomeCost application.

Every calculation is stored as soon as it is computed; the breakdown page
reads it back by id and may edit the non-amortized components.

Routes:
    POST /api/calculate-mortgage - Compute a breakdown and store it
    GET /api/calculations - List the user's calculations, newest first
    GET /api/calculations/{id} - One calculation, with its effective interest rate
    POST /api/calculations/{id}/save - Acknowledge a save (rows are stored on creation)
    PATCH /api/calculations/{id} - Edit components; the total is re-derived
    DELETE /api/calculations/{id} - Delete a calculation
"""

from functools import lru_cache
from typing import Optional, Union

from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from homecost.config import Settings, get_settings
from homecost.db import get_db
from homecost.models.calculation import SavedCalculation
from homecost.models.financial_profile import FinancialProfile
from homecost.mortgage.breakdown import EDITABLE_FIELDS, effective_annual_rate, rebuild_breakdown
from homecost.mortgage.calculator import MortgageEstimator
from homecost.mortgage.errors import EstimationUnavailableError, InvalidInputError
from homecost.mortgage.estimators import CostEstimator, build_cost_estimator
from homecost.mortgage.inputs import BorrowerProfile, PropertyInput
from homecost.mortgage.money import MAX_AMOUNT, format_money, parse_optional_decimal
from homecost.utils.auth import get_current_user
from homecost.logging_config import get_logger

# Module logger for calculation operations
logger = get_logger(__name__)

router = APIRouter()

# Request body keys for the editable components
EDITABLE_REQUEST_KEYS = {
    "propertyTaxes": "property_taxes",
    "hoa": "hoa",
    "pmi": "pmi",
    "homeownersInsurance": "homeowners_insurance",
    "floodInsurance": "flood_insurance",
    "other": "other",
}


class MortgageCalculationRequest(BaseModel):
    """Request model for the property form."""
    address: Optional[str] = None
    askingPrice: Optional[Union[float, str]] = None
    propertyPhotoUrl: Optional[str] = None


class CalculationUpdateRequest(BaseModel):
    """
    Request model for editing a saved calculation.

    Omitted fields keep their stored value; blank or unparseable ones count as 0.
    Any total sent by the client is ignored.
    """
    propertyTaxes: Optional[Union[float, str]] = None
    hoa: Optional[Union[float, str]] = None
    pmi: Optional[Union[float, str]] = None
    homeownersInsurance: Optional[Union[float, str]] = None
    floodInsurance: Optional[Union[float, str]] = None
    other: Optional[Union[float, str]] = None


@lru_cache(maxsize=None)
def _estimator_for(settings: Settings) -> CostEstimator:
    return build_cost_estimator(settings)


def get_cost_estimator(settings: Settings = Depends(get_settings)) -> CostEstimator:
    """FastAPI dependency for the configured cost estimator (tests override it)."""
    return _estimator_for(settings)


def serialize_calculation(calculation: SavedCalculation, include_rate: bool = False) -> dict:
    data = {
        "id": calculation.id,
        "userId": calculation.user_id,
        "address": calculation.address,
        "askingPrice": format_money(calculation.asking_price),
        "propertyPhotoUrl": calculation.property_photo_url,
        "principal": format_money(calculation.principal),
        "interest": format_money(calculation.interest),
        "propertyTaxes": format_money(calculation.property_taxes),
        "hoa": format_money(calculation.hoa),
        "pmi": format_money(calculation.pmi),
        "homeownersInsurance": format_money(calculation.homeowners_insurance),
        "floodInsurance": format_money(calculation.flood_insurance),
        "other": format_money(calculation.other),
        "totalMonthlyPayment": format_money(calculation.total_monthly_payment),
        "snapshotAge": calculation.snapshot_age,
        "snapshotAnnualIncome": format_money(calculation.snapshot_annual_income),
        "snapshotCreditScore": calculation.snapshot_credit_score,
        "snapshotAmountDown": format_money(calculation.snapshot_amount_down),
        "snapshotMortgageType": calculation.snapshot_mortgage_type,
        "snapshotMonthlyDebt": format_money(calculation.snapshot_monthly_debt),
        "snapshotHomesteadExemption": calculation.snapshot_homestead_exemption,
        "createdAt": calculation.created_at.isoformat() if calculation.created_at else None,
        "updatedAt": calculation.updated_at.isoformat() if calculation.updated_at else None,
    }
    if include_rate:
        rate = effective_annual_rate(
            calculation.interest, calculation.asking_price, calculation.snapshot_amount_down
        )
        data["effectiveInterestRate"] = format_money(rate)
    return data


def get_owned_calculation(db: Session, calculation_id: int, user):
    """
    Look up a calculation and check ownership.

    Returns:
        (calculation, None) on success, (None, JSONResponse) otherwise
    """
    calculation = db.query(SavedCalculation).filter(SavedCalculation.id == calculation_id).first()
    if not calculation:
        logger.warning(f"Calculation {calculation_id} not found for user {user.username}")
        return None, JSONResponse({"error": "Calculation not found"}, status_code=404)
    if calculation.user_id != user.id:
        logger.warning(f"User {user.username} denied access to calculation {calculation_id}")
        return None, JSONResponse({"error": "Forbidden"}, status_code=403)
    return calculation, None


@router.post("/api/calculate-mortgage")
async def calculate_mortgage(
    request: Request,
    data: MortgageCalculationRequest,
    db: Session = Depends(get_db),
    cost_estimator: CostEstimator = Depends(get_cost_estimator),
):
    """
    Compute a payment breakdown for the posted property and store it.

    Uses a snapshot of the user's financial profile; a user without a
    profile is priced with the calculator defaults.
    """
    user = get_current_user(request, db)
    if not user:
        logger.warning("Unauthenticated attempt to calculate a mortgage")
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    profile_row = db.query(FinancialProfile).filter(FinancialProfile.user_id == user.id).first()
    profile = profile_row.to_borrower_profile() if profile_row else BorrowerProfile()

    try:
        property_input = PropertyInput.from_form(data.address, data.askingPrice, data.propertyPhotoUrl)
        breakdown = await MortgageEstimator(cost_estimator).estimate(property_input, profile)
    except InvalidInputError as e:
        logger.warning(f"Invalid calculation input from user {user.username}: {e}")
        return JSONResponse({"error": str(e), "field": e.field}, status_code=400)
    except EstimationUnavailableError as e:
        return JSONResponse({"error": str(e), "retryable": True}, status_code=503)

    try:
        calculation = SavedCalculation.from_breakdown(user.id, property_input, profile, breakdown)
        db.add(calculation)
        db.commit()
        db.refresh(calculation)
    except Exception as e:
        logger.error(f"Error saving calculation: {e}")
        db.rollback()
        return JSONResponse({"error": "Failed to save calculation"}, status_code=500)

    logger.info(f"Calculation saved (ID: {calculation.id}) for user {user.username}")
    return JSONResponse(serialize_calculation(calculation, include_rate=True))


@router.get("/api/calculations")
def list_calculations(request: Request, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    calculations = db.query(SavedCalculation).filter(
        SavedCalculation.user_id == user.id
    ).order_by(SavedCalculation.created_at.desc(), SavedCalculation.id.desc()).all()

    logger.debug(f"Loaded {len(calculations)} calculations for user {user.username}")
    return JSONResponse([serialize_calculation(c) for c in calculations])


@router.get("/api/calculations/{calculation_id}")
def get_calculation(request: Request, calculation_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    calculation, error = get_owned_calculation(db, calculation_id, user)
    if error:
        return error
    return JSONResponse(serialize_calculation(calculation, include_rate=True))


@router.post("/api/calculations/{calculation_id}/save")
def save_calculation(request: Request, calculation_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    calculation, error = get_owned_calculation(db, calculation_id, user)
    if error:
        return error
    return JSONResponse({"message": "Calculation saved successfully"})


@router.patch("/api/calculations/{calculation_id}")
def update_calculation(
    request: Request,
    calculation_id: int,
    data: CalculationUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    Apply user edits to a saved calculation.

    Principal and interest are fixed. The breakdown is rebuilt through the
    assembler so the stored total always matches the stored components.
    """
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    calculation, error = get_owned_calculation(db, calculation_id, user)
    if error:
        return error

    submitted = data.model_dump(exclude_unset=True)
    edited = {field: getattr(calculation, field) for field in EDITABLE_FIELDS}
    for key, field in EDITABLE_REQUEST_KEYS.items():
        if key not in submitted:
            continue
        value = submitted[key]
        amount = parse_optional_decimal(value)
        if amount is not None and amount < 0:
            return JSONResponse(
                {"error": f"{key} cannot be negative", "field": key}, status_code=400
            )
        if amount is not None and amount > MAX_AMOUNT:
            return JSONResponse(
                {"error": f"{key} cannot exceed {MAX_AMOUNT:,}", "field": key}, status_code=400
            )
        edited[field] = value

    breakdown = rebuild_breakdown(
        {"principal": calculation.principal, "interest": calculation.interest}, edited
    )

    try:
        calculation.apply_breakdown(breakdown)
        db.commit()
        db.refresh(calculation)
    except Exception as e:
        logger.error(f"Error updating calculation {calculation_id}: {e}")
        db.rollback()
        return JSONResponse({"error": "Failed to update calculation"}, status_code=500)

    logger.info(f"Calculation {calculation_id} updated by {user.username}; total now {breakdown.total_monthly_payment}")
    return JSONResponse(serialize_calculation(calculation, include_rate=True))


@router.delete("/api/calculations/{calculation_id}")
def delete_calculation(request: Request, calculation_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    calculation, error = get_owned_calculation(db, calculation_id, user)
    if error:
        return error

    try:
        db.delete(calculation)
        db.commit()
    except Exception as e:
        logger.error(f"Error deleting calculation {calculation_id}: {e}")
        db.rollback()
        return JSONResponse({"error": "Failed to delete calculation"}, status_code=500)

    logger.info(f"Calculation deleted (ID: {calculation_id}) for user {user.username}")
    return JSONResponse({"message": "Calculation deleted successfully"})
