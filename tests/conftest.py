"""
Pytest fixtures and configuration for HomeCost tests.

This module provides common fixtures used across all test modules,
including database setup, test client, and a fixed cost estimator.
"""

import pytest
from decimal import Decimal
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from homecost.main import app
from homecost.db import get_db, Base
from homecost.models.user import User
from homecost.models.financial_profile import FinancialProfile
from homecost.mortgage.estimators import HeuristicCostEstimator
from homecost.routes.calculations import get_cost_estimator
from homecost.utils.auth import hash_password


# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with overridden database and estimator dependencies.

    The heuristic estimator is used so no test ever reaches the network.
    """
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_cost_estimator] = lambda: HeuristicCostEstimator()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session: Session) -> User:
    """
    Create a test user in the database.
    """
    user = User(
        username="testuser",
        password_hash=hash_password(TEST_PASSWORD),
        name="Test User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session: Session) -> User:
    """
    A second user, for ownership checks.
    """
    user = User(
        username="otheruser",
        password_hash=hash_password("otherpassword456"),
        name="Other User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user_with_auth(client: TestClient, test_user: User) -> User:
    """
    Create a test user and set authentication cookie.
    """
    client.cookies.set("username", test_user.username)
    return test_user


@pytest.fixture
def test_profile(db_session: Session, test_user: User) -> FinancialProfile:
    """
    A financial profile with 10% down on a $300k home and a 760 credit score.
    """
    profile = FinancialProfile(
        user_id=test_user.id,
        age=35,
        annual_income=Decimal("120000.00"),
        credit_score=760,
        amount_down=Decimal("30000.00"),
        mortgage_type="30-year-fixed",
        monthly_debt=Decimal("500.00"),
        homestead_exemption=False,
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile
