"""Integration tests for API endpoints"""

import json
import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def loan_payload():
    """Four weekly installments of exactly 100"""
    return {
        "borrower_id": "9b2d7c4e-6a51-4f1e-8c3b-2f0d5e7a9c10",
        "principal_amount": 320,
        "interest_rate": 0.25,
        "payment_frequency": "weekly",
        "total_payments": 4,
    }


def create_loan(client: TestClient, payload: dict) -> str:
    response = client.post("/api/loans", json=payload)
    assert response.status_code == 201
    return response.json()["id"]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, loan_payload: dict):
    """Test Prometheus metrics endpoint"""
    create_loan(client, loan_payload)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "billing_loans_created_total" in response.text


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.integration
def test_create_loan(client: TestClient, loan_payload: dict):
    """Test POST /api/loans"""
    response = client.post("/api/loans", json={**loan_payload, "principal_amount": 5_000_000, "interest_rate": 0.1, "total_payments": 50})

    assert response.status_code == 201
    data = response.json()
    assert data["borrower_id"] == loan_payload["borrower_id"]
    assert data["principal_amount"] == 5_000_000
    assert data["interest_rate"] == 0.1
    assert data["payment_frequency"] == "weekly"
    assert data["total_payments"] == 50
    assert data["started_at"] == "2024-05-17"
    assert data["ended_at"] == "2025-05-02"  # 350 days later


@pytest.mark.integration
def test_create_loan_frequency_is_case_insensitive(client: TestClient, loan_payload: dict):
    response = client.post("/api/loans", json={**loan_payload, "payment_frequency": "Weekly"})

    assert response.status_code == 201
    assert response.json()["payment_frequency"] == "weekly"


@pytest.mark.integration
@pytest.mark.parametrize(
    "field, value",
    [
        ("borrower_id", ""),
        ("principal_amount", 0),
        ("principal_amount", -10),
        ("interest_rate", 0),
        ("payment_frequency", "monthly"),
        ("total_payments", 0),
        ("total_payments", 2.5),
    ],
)
def test_create_loan_validation(client: TestClient, loan_payload: dict, field: str, value):
    response = client.post("/api/loans", json={**loan_payload, field: value})

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "VALIDATION_ERROR"
    assert field in data["message"]


@pytest.mark.integration
@pytest.mark.parametrize("field", ["principal_amount", "interest_rate"])
def test_create_loan_rejects_infinity(client: TestClient, loan_payload: dict, field: str):
    """Python's JSON decoder reads a bare Infinity token as float('inf')"""
    body = json.dumps({**loan_payload, field: float("inf")})

    response = client.post("/api/loans", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "VALIDATION_ERROR"
    assert field in data["message"]


@pytest.mark.integration
def test_pay_loan_rejects_infinity(client: TestClient, loan_payload: dict):
    loan_id = create_loan(client, loan_payload)

    response = client.post(
        "/api/loans/pay",
        content=f'{{"id": "{loan_id}", "amount": Infinity}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "VALIDATION_ERROR"
    assert "amount" in data["message"]


@pytest.mark.integration
def test_create_loan_missing_field(client: TestClient, loan_payload: dict):
    del loan_payload["total_payments"]

    response = client.post("/api/loans", json=loan_payload)

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.integration
def test_create_loan_invalid_json(client: TestClient):
    response = client.post(
        "/api/loans",
        content=b'{"borrower_id": ',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json() == {"error_code": "UNPROCESSABLE_CONTENT_ERROR", "message": "Invalid json."}


@pytest.mark.integration
def test_get_loan_with_schedule(client: TestClient, loan_payload: dict):
    """Test GET /api/loans/{loan_id}"""
    loan_id = create_loan(client, loan_payload)

    response = client.get(f"/api/loans/{loan_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == loan_id
    assert data["loan_term_days"] == 28
    assert data["term_amount"] == "100"
    assert [i["seq"] for i in data["installments"]] == [1, 2, 3, 4]
    assert [i["due_date"] for i in data["installments"]] == ["2024-05-24", "2024-05-31", "2024-06-07", "2024-06-14"]
    assert all(i["status"] == "unpaid" for i in data["installments"])


@pytest.mark.integration
def test_outstanding_and_pending(client: TestClient, loan_payload: dict, clock):
    loan_id = create_loan(client, loan_payload)
    clock.advance(days=8)

    outstanding = client.get(f"/api/loans/{loan_id}/outstanding")
    pending = client.get(f"/api/loans/{loan_id}/pending")

    assert outstanding.status_code == 200
    assert outstanding.json() == {"id": loan_id, "outstanding_amount": "400"}
    assert pending.status_code == 200
    assert pending.json() == {"id": loan_id, "pending_amount": "100"}


@pytest.mark.integration
def test_delinquency(client: TestClient, loan_payload: dict, clock):
    loan_id = create_loan(client, loan_payload)

    clock.advance(days=15)
    response = client.get(f"/api/loans/{loan_id}/delinquency")
    assert response.json() == {"loan_id": loan_id, "is_delinquent": False}

    clock.advance(days=7)
    response = client.get(f"/api/loans/{loan_id}/delinquency")
    assert response.json() == {"loan_id": loan_id, "is_delinquent": True}


@pytest.mark.integration
def test_pay_loan_flow(client: TestClient, loan_payload: dict, clock):
    """Exact payment settles, a repeat is rejected as a mismatch"""
    loan_id = create_loan(client, loan_payload)
    clock.advance(days=15)

    response = client.post("/api/loans/pay", json={"id": loan_id, "amount": 200})
    assert response.status_code == 200
    assert response.json() == {"status": "success"}

    assert client.get(f"/api/loans/{loan_id}/pending").json()["pending_amount"] == "0"
    assert client.get(f"/api/loans/{loan_id}/outstanding").json()["outstanding_amount"] == "200"

    repeat = client.post("/api/loans/pay", json={"id": loan_id, "amount": 200})
    assert repeat.status_code == 400
    assert repeat.json()["error_code"] == "PAYMENT_AMOUNT_MISMATCH"


@pytest.mark.integration
@pytest.mark.parametrize("amount", [99.99, 100.01])
def test_pay_loan_mismatch(client: TestClient, loan_payload: dict, clock, amount: float):
    loan_id = create_loan(client, loan_payload)
    clock.advance(days=8)

    response = client.post("/api/loans/pay", json={"id": loan_id, "amount": amount})

    assert response.status_code == 400
    assert response.json() == {
        "error_code": "PAYMENT_AMOUNT_MISMATCH",
        "message": "Payment amount is not equal to pending amount",
    }
    assert client.get(f"/api/loans/{loan_id}/pending").json()["pending_amount"] == "100"


@pytest.mark.integration
def test_pay_loan_requires_positive_amount(client: TestClient, loan_payload: dict):
    loan_id = create_loan(client, loan_payload)

    response = client.post("/api/loans/pay", json={"id": loan_id, "amount": 0})

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.integration
@pytest.mark.parametrize("suffix", ["", "/outstanding", "/pending", "/delinquency"])
def test_loan_not_found(client: TestClient, suffix: str):
    fake_uuid = "00000000-0000-0000-0000-000000000000"

    response = client.get(f"/api/loans/{fake_uuid}{suffix}")

    assert response.status_code == 400
    assert response.json() == {"error_code": "LOAN_NOT_FOUND", "message": "Loan not found"}


@pytest.mark.integration
def test_pay_unknown_loan(client: TestClient):
    response = client.post("/api/loans/pay", json={"id": "00000000-0000-0000-0000-000000000000", "amount": 100})

    assert response.status_code == 400
    assert response.json()["error_code"] == "LOAN_NOT_FOUND"


@pytest.mark.integration
@pytest.mark.parametrize("path", ["/api/loans/not-a-uuid/outstanding", "/api/loans/not-a-uuid/delinquency"])
def test_invalid_loan_id(client: TestClient, path: str):
    response = client.get(path)

    assert response.status_code == 400
    assert response.json() == {"error_code": "INVALID_UUID", "message": "UUID provided is invalid"}


@pytest.mark.integration
def test_pay_invalid_loan_id(client: TestClient):
    response = client.post("/api/loans/pay", json={"id": "not-a-uuid", "amount": 100})

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_UUID"
