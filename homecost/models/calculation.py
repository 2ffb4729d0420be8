"""
Saved Calculation Model

A saved calculation is a payment breakdown plus a frozen copy of the
borrower's financial profile and the property form as they were when the
calculation ran. Later profile edits never touch existing rows.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Numeric, Text, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from homecost.models import Base
from homecost.mortgage.breakdown import PaymentBreakdown
from homecost.mortgage.inputs import BorrowerProfile, PropertyInput


class SavedCalculation(Base):
    """
    Model for a user's mortgage calculations.

    Attributes:
        user_id: Owner; rows are deleted with the user
        address, asking_price, property_photo_url: The property form
        principal .. total_monthly_payment: The payment breakdown
        snapshot_*: BorrowerProfile at calculation time
    """
    __tablename__ = "saved_calculations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    address = Column(Text, nullable=False)
    asking_price = Column(Numeric(12, 2), nullable=False)
    property_photo_url = Column(Text, nullable=True)

    principal = Column(Numeric(12, 2), nullable=False)
    interest = Column(Numeric(12, 2), nullable=False)
    property_taxes = Column(Numeric(12, 2), nullable=False)
    hoa = Column(Numeric(12, 2), nullable=False)
    pmi = Column(Numeric(12, 2), nullable=False)
    homeowners_insurance = Column(Numeric(12, 2), nullable=False)
    flood_insurance = Column(Numeric(12, 2), nullable=False)
    other = Column(Numeric(12, 2), nullable=False)
    total_monthly_payment = Column(Numeric(12, 2), nullable=False)

    snapshot_age = Column(Integer, nullable=True)
    snapshot_annual_income = Column(Numeric(12, 2), nullable=True)
    snapshot_credit_score = Column(Integer, nullable=True)
    snapshot_amount_down = Column(Numeric(12, 2), nullable=True)
    snapshot_mortgage_type = Column(String(50), nullable=True)
    snapshot_monthly_debt = Column(Numeric(12, 2), nullable=True)
    snapshot_homestead_exemption = Column(Boolean, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="calculations")

    @classmethod
    def from_breakdown(
        cls,
        user_id: int,
        property_input: PropertyInput,
        profile: BorrowerProfile,
        breakdown: PaymentBreakdown,
    ) -> "SavedCalculation":
        calculation = cls(
            user_id=user_id,
            address=property_input.address,
            asking_price=property_input.asking_price,
            property_photo_url=property_input.photo_reference,
            snapshot_age=profile.age,
            snapshot_annual_income=profile.annual_income,
            snapshot_credit_score=profile.credit_score,
            snapshot_amount_down=profile.down_payment,
            snapshot_mortgage_type=profile.mortgage_type,
            snapshot_monthly_debt=profile.monthly_debt,
            snapshot_homestead_exemption=profile.homestead_exemption,
        )
        calculation.apply_breakdown(breakdown)
        return calculation

    def apply_breakdown(self, breakdown: PaymentBreakdown):
        """Overwrite all nine amounts, total included, from an assembled breakdown."""
        self.principal = breakdown.principal
        self.interest = breakdown.interest
        self.property_taxes = breakdown.property_taxes
        self.hoa = breakdown.hoa
        self.pmi = breakdown.pmi
        self.homeowners_insurance = breakdown.homeowners_insurance
        self.flood_insurance = breakdown.flood_insurance
        self.other = breakdown.other
        self.total_monthly_payment = breakdown.total_monthly_payment
