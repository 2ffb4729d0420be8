"""
Financial Profile Model

Each user keeps one financial profile. Calculations never read it directly:
they take a BorrowerProfile snapshot of it at calculation time.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from homecost.models import Base
from homecost.mortgage.amortization import DEFAULT_CREDIT_SCORE
from homecost.mortgage.inputs import BorrowerProfile


class FinancialProfile(Base):
    """
    Borrower information used to price a mortgage.

    Attributes:
        user_id: Owner (one profile per user)
        age: Borrower age
        annual_income: Gross yearly income
        credit_score: FICO-style score, 300 to 850
        amount_down: Cash available for the down payment
        mortgage_type: One of MORTGAGE_TYPES
        monthly_debt: Existing monthly debt obligations
        homestead_exemption: Whether the property will be a primary residence
    """
    __tablename__ = "financial_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    age = Column(Integer, nullable=True)
    annual_income = Column(Numeric(12, 2), nullable=True)
    credit_score = Column(Integer, nullable=True)
    amount_down = Column(Numeric(12, 2), nullable=True)
    mortgage_type = Column(String(50), nullable=True)
    monthly_debt = Column(Numeric(12, 2), nullable=True)
    homestead_exemption = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="financial_profile")

    def to_borrower_profile(self) -> BorrowerProfile:
        return BorrowerProfile(
            age=self.age,
            annual_income=self.annual_income,
            credit_score=self.credit_score,
            down_payment=self.amount_down,
            mortgage_type=self.mortgage_type,
            monthly_debt=self.monthly_debt,
            homestead_exemption=bool(self.homestead_exemption),
        )
