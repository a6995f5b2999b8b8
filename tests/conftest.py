"""Pytest fixtures for testing"""

import pytest
from typing import Any, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from underwriting_gateway.api.main import create_app
from underwriting_gateway.infrastructure.database.models import Base
from underwriting_gateway.infrastructure.database.session import get_db
from underwriting_gateway.domain.models import ApplicantProfile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def strong_profile() -> ApplicantProfile:
    """Salaried homeowner with growing income, light debt, and moderate investments"""
    return ApplicantProfile(
        current_salary=80000,
        previous_salary=70000,
        employment_type="permanent",
        experience_years=6,
        existing_emis=5000,
        credit_card_debt=0,
        monthly_savings=15000,
        owns_house="yes",
        mall_visits=0,
        mall_spending=0,
        entertainment_budget=0,
        grocery_expense=8000,
        investment_habit="moderate",
        desired_amount=200000,
    )


@pytest.fixture
def indebted_profile() -> ApplicantProfile:
    """Otherwise solid applicant whose existing EMIs eat most of the salary"""
    return ApplicantProfile(
        current_salary=30000,
        employment_type="permanent",
        experience_years=6,
        existing_emis=20000,
        credit_card_debt=10000,
        owns_house="yes",
        grocery_expense=3000,
        investment_habit="moderate",
        desired_amount=100000,
    )


@pytest.fixture
def risky_profile() -> ApplicantProfile:
    """Contract renter with a salary cut, heavy lifestyle spending, and no savings"""
    return ApplicantProfile(
        current_salary=40000,
        previous_salary=50000,
        employment_type="contract",
        experience_years=1,
        owns_house="no",
        rent_amount=18000,
        mall_visits=10,
        mall_spending=1000,
        entertainment_budget=5000,
        grocery_expense=8000,
        investment_habit="none",
        desired_amount=100000,
    )


@pytest.fixture
def application_payload() -> Dict[str, Any]:
    """Request body for POST /v1/applications that qualifies for a loan"""
    return {
        "user_id": "user_strong",
        "loan_purpose": "home renovation",
        "current_salary": "80000.00",
        "previous_salary": "70000.00",
        "employment_type": "permanent",
        "experience_years": 6,
        "existing_emis": "5000.00",
        "credit_card_debt": "0",
        "owns_house": "yes",
        "grocery_expense": "8000.00",
        "mall_visits": 0,
        "mall_spending": "0",
        "entertainment_budget": "0",
        "investment_habit": "moderate",
        "monthly_savings": "15000.00",
        "desired_amount": "200000.00",
    }
