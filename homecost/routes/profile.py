"""
Financial profile routes.

Routes:
    GET /api/profile - Current user's financial profile (defaults if none saved)
    PUT /api/profile - Create or replace the financial profile
    POST /api/profile/delete-account - Delete the user and everything they own
"""

from typing import Optional, Union

from fastapi import APIRouter, Request, Form, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from homecost.db import get_db
from homecost.models.financial_profile import FinancialProfile, DEFAULT_CREDIT_SCORE
from homecost.mortgage.errors import InvalidInputError
from homecost.mortgage.inputs import MORTGAGE_TYPES, MIN_CREDIT_SCORE, MAX_CREDIT_SCORE
from homecost.mortgage.money import MAX_AMOUNT, parse_optional_decimal, format_money
from homecost.utils.auth import get_current_user, verify_password
from homecost.logging_config import get_logger

# Module logger for profile operations
logger = get_logger(__name__)

router = APIRouter()

MIN_AGE = 18
MAX_AGE = 100


class FinancialProfileRequest(BaseModel):
    """Request model for saving a financial profile. Numbers may arrive as strings."""
    age: Optional[Union[int, str]] = None
    annualIncome: Optional[Union[float, str]] = None
    creditScore: Optional[Union[int, str]] = None
    amountDown: Optional[Union[float, str]] = None
    mortgageType: Optional[str] = None
    monthlyDebt: Optional[Union[float, str]] = None
    homesteadExemption: bool = False


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_int_field(value, field: str, minimum: int, maximum: int) -> Optional[int]:
    """Parse an optional bounded integer form field."""
    if _blank(value):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        raise InvalidInputError(f"{field} must be a whole number", field=field)
    if number < minimum or number > maximum:
        raise InvalidInputError(f"{field} must be between {minimum} and {maximum}", field=field)
    return number


def parse_amount_field(value, field: str):
    """Parse an optional money form field between 0 and MAX_AMOUNT."""
    if _blank(value):
        return None
    amount = parse_optional_decimal(value)
    if amount is None:
        raise InvalidInputError(f"{field} must be a number", field=field)
    if amount < 0:
        raise InvalidInputError(f"{field} cannot be negative", field=field)
    if amount > MAX_AMOUNT:
        raise InvalidInputError(f"{field} cannot exceed {MAX_AMOUNT:,}", field=field)
    return amount


def serialize_profile(user_id: int, profile: Optional[FinancialProfile]) -> dict:
    if profile is None:
        return {
            "userId": user_id,
            "age": None,
            "annualIncome": None,
            "creditScore": DEFAULT_CREDIT_SCORE,
            "amountDown": None,
            "mortgageType": None,
            "monthlyDebt": None,
            "homesteadExemption": False,
        }
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "age": profile.age,
        "annualIncome": format_money(profile.annual_income),
        "creditScore": profile.credit_score,
        "amountDown": format_money(profile.amount_down),
        "mortgageType": profile.mortgage_type,
        "monthlyDebt": format_money(profile.monthly_debt),
        "homesteadExemption": bool(profile.homestead_exemption),
        "updatedAt": profile.updated_at.isoformat() if profile.updated_at else None,
    }


@router.get("/api/profile")
def get_profile(request: Request, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    profile = db.query(FinancialProfile).filter(FinancialProfile.user_id == user.id).first()
    return JSONResponse(serialize_profile(user.id, profile))


@router.put("/api/profile")
def update_profile(request: Request, data: FinancialProfileRequest, db: Session = Depends(get_db)):
    """
    Create or replace the user's financial profile.

    A missing credit score is stored as 720, the same default the
    calculator assumes.
    """
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    try:
        age = parse_int_field(data.age, "age", MIN_AGE, MAX_AGE)
        credit_score = parse_int_field(data.creditScore, "creditScore", MIN_CREDIT_SCORE, MAX_CREDIT_SCORE)
        annual_income = parse_amount_field(data.annualIncome, "annualIncome")
        amount_down = parse_amount_field(data.amountDown, "amountDown")
        monthly_debt = parse_amount_field(data.monthlyDebt, "monthlyDebt")
        mortgage_type = (data.mortgageType or "").strip() or None
        if mortgage_type is not None and mortgage_type not in MORTGAGE_TYPES:
            raise InvalidInputError(
                f"mortgageType must be one of: {', '.join(MORTGAGE_TYPES)}", field="mortgageType"
            )
    except InvalidInputError as e:
        logger.warning(f"Invalid profile data from user {user.username}: {e}")
        return JSONResponse({"error": "Invalid profile data", "field": e.field, "message": str(e)}, status_code=400)

    profile = db.query(FinancialProfile).filter(FinancialProfile.user_id == user.id).first()
    if profile is None:
        profile = FinancialProfile(user_id=user.id)
        db.add(profile)

    profile.age = age
    profile.annual_income = annual_income
    profile.credit_score = credit_score if credit_score is not None else DEFAULT_CREDIT_SCORE
    profile.amount_down = amount_down
    profile.mortgage_type = mortgage_type
    profile.monthly_debt = monthly_debt
    profile.homestead_exemption = data.homesteadExemption

    try:
        db.commit()
        db.refresh(profile)
    except Exception as e:
        logger.error(f"Error saving financial profile: {e}")
        db.rollback()
        return JSONResponse({"error": "Failed to save financial profile"}, status_code=500)

    logger.info(f"Financial profile saved for user {user.username}")
    return JSONResponse(serialize_profile(user.id, profile))


@router.post("/api/profile/delete-account")
def delete_account(
    request: Request,
    db: Session = Depends(get_db),
    password: str = Form(...)
):
    """Delete the user; their profile and saved calculations go with them."""
    user = get_current_user(request, db)
    if not user:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)

    if not verify_password(password, user.password_hash):
        logger.warning(f"Account deletion refused for {user.username}: password verification failed")
        return JSONResponse({"error": "Password verification failed"}, status_code=403)

    username = user.username
    try:
        db.delete(user)
        db.commit()
    except Exception as e:
        logger.error(f"Error deleting account {username}: {e}")
        db.rollback()
        return JSONResponse({"error": "Failed to delete account"}, status_code=500)

    logger.info(f"Account deleted: {username}")
    response = JSONResponse({"success": True})
    response.delete_cookie("auth")
    response.delete_cookie("username")
    return response
