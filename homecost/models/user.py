from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from homecost.models import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Deleting the account removes everything it owns
    financial_profile = relationship(
        "FinancialProfile", back_populates="user", uselist=False,
        cascade="all, delete-orphan"
    )
    calculations = relationship(
        "SavedCalculation", back_populates="user",
        cascade="all, delete-orphan"
    )
