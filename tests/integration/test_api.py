"""Integration tests for API endpoints"""

import uuid
import pytest
from typing import Any, Dict
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY


@pytest.fixture
def rejected_payload(application_payload: Dict[str, Any]) -> Dict[str, Any]:
    """Applicant whose debt-to-income ratio is above the 50% limit"""
    return {
        **application_payload,
        "user_id": "user_indebted",
        "current_salary": "30000",
        "previous_salary": None,
        "existing_emis": "20000",
        "credit_card_debt": "10000",
        "monthly_savings": "0",
        "grocery_expense": "3000",
        "desired_amount": "100000",
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "underwriting_assessment_total" in response.text


def test_request_id_header_round_trip(client: TestClient):
    """Test caller-supplied request ID is echoed back"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    assert client.get("/health").headers["X-Request-ID"]


def test_submit_application_approval(client: TestClient, application_payload: Dict[str, Any]):
    """Test POST /v1/applications with an eligible applicant"""
    response = client.post("/v1/applications", json=application_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "approved"
    assert data["loan_id"] is not None

    assessment = data["assessment"]
    assert assessment["is_eligible"] is True
    assert assessment["overall_risk_score"] == 100
    assert assessment["approved_amount"] == pytest.approx(180000)
    assert assessment["interest_rate"] == 11.5
    assert assessment["tenure_months"] == 24
    assert assessment["monthly_emi"] > 0
    assert assessment["negative_factors"] == []


def test_submit_application_rejection(client: TestClient, rejected_payload: Dict[str, Any]):
    """Test POST /v1/applications with DTI above the limit"""
    response = client.post("/v1/applications", json=rejected_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "rejected"
    assert data["loan_id"] is None

    assessment = data["assessment"]
    assert assessment["is_eligible"] is False
    assert assessment["approved_amount"] is None
    assert assessment["interest_rate"] is None
    assert assessment["tenure_months"] is None
    assert assessment["monthly_emi"] is None
    assert assessment["debt_to_income_ratio"] == pytest.approx(68.33, abs=0.01)
    assert "Debt-to-income ratio exceeds maximum limit" in assessment["negative_factors"]


@pytest.mark.parametrize(
    "field,value",
    [
        ("owns_house", "rented"),
        ("current_salary", "not-a-number"),
        ("desired_amount", None),
        ("mall_visits", 2.5),
    ],
)
def test_submit_application_invalid_profile(
    client: TestClient, application_payload: Dict[str, Any], field: str, value: Any
):
    """Test request bodies with wrong types or missing fields are rejected with 422"""
    application_payload[field] = value

    response = client.post("/v1/applications", json=application_payload)

    assert response.status_code == 422


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("current_salary", "0", "current_salary must be greater than zero"),
        ("existing_emis", "-500", "existing_emis must be a finite non-negative number"),
        ("experience_years", -1, "experience_years must be a finite non-negative number"),
    ],
)
def test_submit_application_rejected_by_profile_validation(
    client: TestClient, application_payload: Dict[str, Any], field: str, value: Any, message: str
):
    """Test well-typed values outside the allowed range fail profile validation"""
    before = REGISTRY.get_sample_value("underwriting_invalid_profile_total") or 0.0
    application_payload[field] = value

    response = client.post("/v1/applications", json=application_payload)

    assert response.status_code == 422
    assert response.json()["detail"] == message
    assert REGISTRY.get_sample_value("underwriting_invalid_profile_total") == before + 1

    history = client.get("/v1/applications/history", params={"user_id": "user_strong"}).json()
    assert history["applications"] == []


def test_get_application_round_trip(client: TestClient, application_payload: Dict[str, Any]):
    """Test GET /v1/applications/{id} returns the stored assessment"""
    created = client.post("/v1/applications", json=application_payload).json()

    response = client.get(f"/v1/applications/{created['application_id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "approved"
    assert data["loan_purpose"] == "home renovation"
    assert data["loan_id"] == created["loan_id"]
    assert data["assessment"] == created["assessment"]


def test_get_application_not_found(client: TestClient):
    """Test unknown and malformed application IDs"""
    assert client.get(f"/v1/applications/{uuid.uuid4()}").status_code == 404
    assert client.get("/v1/applications/not-a-uuid").status_code == 400


def test_application_history(
    client: TestClient,
    application_payload: Dict[str, Any],
    rejected_payload: Dict[str, Any],
):
    """Test GET /v1/applications/history lists only the user's applications"""
    client.post("/v1/applications", json=application_payload)
    client.post("/v1/applications", json={**application_payload, "desired_amount": "50000"})
    client.post("/v1/applications", json=rejected_payload)

    response = client.get("/v1/applications/history", params={"user_id": "user_strong"})

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "user_strong"
    assert len(data["applications"]) == 2
    assert all(item["status"] == "approved" for item in data["applications"])
    assert all(item["overall_risk_score"] == 100 for item in data["applications"])


def test_loan_schedule(client: TestClient, application_payload: Dict[str, Any]):
    """Test GET /v1/loans/{id} returns a 24-month amortisation schedule"""
    created = client.post("/v1/applications", json=application_payload).json()

    response = client.get(f"/v1/loans/{created['loan_id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["loan_number"].startswith("QL")
    assert data["principal_amount"] == pytest.approx(180000)
    assert data["outstanding_amount"] == pytest.approx(180000)
    assert data["tenure_months"] == 24
    assert len(data["installments"]) == 24
    assert data["installments"][0]["due_date"] == data["next_due_date"]
    assert data["installments"][-1]["closing_balance"] == 0
    assert sum(i["principal_component"] for i in data["installments"]) == pytest.approx(180000, abs=0.01)


def test_list_loans(
    client: TestClient,
    application_payload: Dict[str, Any],
    rejected_payload: Dict[str, Any],
):
    """Test GET /v1/loans lists only the user's active loans"""
    assert client.get("/v1/loans", params={"user_id": "user_strong"}).json()["loans"] == []

    first = client.post("/v1/applications", json=application_payload).json()
    second = client.post("/v1/applications", json={**application_payload, "desired_amount": "50000"}).json()
    client.post("/v1/applications", json=rejected_payload)

    response = client.get("/v1/loans", params={"user_id": "user_strong"})

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "user_strong"
    assert {loan["loan_id"] for loan in data["loans"]} == {first["loan_id"], second["loan_id"]}
    assert all(loan["status"] == "active" for loan in data["loans"])
    assert sorted(loan["principal_amount"] for loan in data["loans"]) == pytest.approx([45000, 180000])

    assert client.get("/v1/loans", params={"user_id": "user_indebted"}).json()["loans"] == []
    assert client.get("/v1/loans").status_code == 422


def test_loan_not_found(client: TestClient):
    """Test unknown and malformed loan IDs"""
    assert client.get(f"/v1/loans/{uuid.uuid4()}").status_code == 404
    assert client.get("/v1/loans/123").status_code == 400


def test_dashboard_stats(client: TestClient, application_payload: Dict[str, Any]):
    """Test GET /v1/dashboard/stats aggregates active loans"""
    empty = client.get("/v1/dashboard/stats", params={"user_id": "user_strong"}).json()
    assert empty["active_loans_count"] == 0
    assert empty["next_due_date"] is None

    created = client.post("/v1/applications", json=application_payload).json()
    stats = client.get("/v1/dashboard/stats", params={"user_id": "user_strong"}).json()

    assert stats["active_loans_count"] == 1
    assert stats["total_outstanding"] == pytest.approx(180000)
    assert stats["next_emi_amount"] == pytest.approx(created["assessment"]["monthly_emi"])
    assert stats["next_due_date"] is not None


def test_emi_calculator(client: TestClient):
    """Test POST /v1/emi rounds to whole units"""
    response = client.post("/v1/emi", json={"principal": 100000, "rate": 12, "tenure_months": 12})

    assert response.status_code == 200
    assert response.json() == {
        "emi": 8885,
        "total_amount": 106619,
        "total_interest": 6619,
        "principal": 100000,
    }


@pytest.mark.parametrize(
    "body",
    [
        {"principal": 100000, "rate": 12, "tenure_months": 0},
        {"principal": 100000, "rate": 12},
        {"principal": "lots", "rate": 12, "tenure_months": 12},
        {"principal": -5, "rate": 12, "tenure_months": 12},
    ],
)
def test_emi_calculator_invalid_input(client: TestClient, body: Dict[str, Any]):
    """Test missing, non-numeric, and out-of-range EMI inputs"""
    response = client.post("/v1/emi", json=body)

    assert response.status_code == 422
