from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from homecost.config import settings
from homecost.models import Base
from homecost.models.user import User
from homecost.models.financial_profile import FinancialProfile
from homecost.models.calculation import SavedCalculation

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

connect_args = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """
    Create tables if they don't exist.
    For schema changes, use Alembic migrations instead:
        alembic revision --autogenerate -m "Description of change"
        alembic upgrade head
    """
    Base.metadata.create_all(bind=engine)


# Only create tables on first run if database doesn't exist
init_db()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
