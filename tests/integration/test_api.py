"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient

HEADERS = {"X-User-ID": "admin_1"}


@pytest.fixture
def loan_payload():
    """Reference loan: 12000 at 12% over 12 months"""
    return {
        "borrower": {"type": "user", "id": "user_good"},
        "principal_amount": 12000,
        "interest_rate": 0.12,
        "term_months": 12,
        "start_date": "2024-01-15",
        "payment_frequency": "monthly",
    }


@pytest.fixture
def loan_id(client: TestClient, loan_payload) -> str:
    response = client.post("/v1/loans", json=loan_payload, headers=HEADERS)
    assert response.status_code == 200
    return response.json()["loan_id"]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "capital_ledger_payments_total" in response.text


def test_run_server_uses_configured_address(monkeypatch):
    from capital_ledger.api import main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(main.settings, "port", 9100)

    main.run_server()

    assert calls == [
        ("capital_ledger.api.main:app", {"host": main.settings.host, "port": 9100, "log_config": None})
    ]


def test_request_id_header(client: TestClient):
    assert client.get("/health").headers["X-Request-ID"]
    assert client.get("/health", headers={"X-Request-ID": "trace-1"}).headers["X-Request-ID"] == "trace-1"


def test_create_loan(client: TestClient, loan_payload):
    response = client.post("/v1/loans", json=loan_payload, headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "active"
    assert data["payment_amount"] == 1066
    assert data["remaining_balance"] == 12000
    assert data["end_date"] == "2025-01-15"
    assert data["next_payment_due"] == "2024-02-15"
    assert data["created_by"] == "admin_1"
    assert data["payment_history"] == []


def test_create_loan_requires_user_header(client: TestClient, loan_payload):
    response = client.post("/v1/loans", json=loan_payload)
    assert response.status_code == 422


def test_create_loan_validates_body(client: TestClient, loan_payload):
    loan_payload["interest_rate"] = 1.5
    response = client.post("/v1/loans", json=loan_payload, headers=HEADERS)
    assert response.status_code == 422


def test_make_payment_endpoint(client: TestClient, loan_id: str):
    response = client.post(f"/v1/loans/{loan_id}/payment", json={"amount": 1066})

    assert response.status_code == 200
    data = response.json()
    assert data["remaining_balance"] == 11054
    assert data["next_payment_due"] == "2024-03-15"
    assert len(data["payment_history"]) == 1
    assert data["payment_history"][0]["type"] == "principal"
    assert data["payment_history"][0]["amount"] == 1066


def test_make_payment_invalid_amount(client: TestClient, loan_id: str):
    too_much = client.post(f"/v1/loans/{loan_id}/payment", json={"amount": 20000})
    assert too_much.status_code == 400
    assert "exceeds remaining balance" in too_much.json()["detail"]

    negative = client.post(f"/v1/loans/{loan_id}/payment", json={"amount": -1})
    assert negative.status_code == 400

    loan = client.get(f"/v1/loans/{loan_id}").json()
    assert loan["remaining_balance"] == 12000
    assert loan["payment_history"] == []


@pytest.mark.parametrize("raw_amount", ["NaN", "Infinity"])
def test_make_payment_non_finite_amount(client: TestClient, loan_id: str, raw_amount: str):
    response = client.post(
        f"/v1/loans/{loan_id}/payment",
        content=f'{{"amount": {raw_amount}}}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422

    loan = client.get(f"/v1/loans/{loan_id}").json()
    assert loan["remaining_balance"] == 12000
    assert loan["payment_history"] == []


def test_make_payment_inactive_loan(client: TestClient, loan_id: str):
    status = client.patch(f"/v1/loans/{loan_id}/status", json={"status": "defaulted"})
    assert status.status_code == 200
    assert status.json()["status"] == "defaulted"

    response = client.post(f"/v1/loans/{loan_id}/payment", json={"amount": 100})
    assert response.status_code == 409


def test_update_loan_status_rejects_pending(client: TestClient, loan_id: str):
    response = client.patch(f"/v1/loans/{loan_id}/status", json={"status": "pending"})
    assert response.status_code == 422


def test_get_loan_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/v1/loans/{fake_uuid}").status_code == 404
    assert client.post(f"/v1/loans/{fake_uuid}/payment", json={"amount": 10}).status_code == 404


def test_get_loan_invalid_id(client: TestClient):
    assert client.get("/v1/loans/not-a-uuid").status_code == 400


def test_get_borrower_loans(client: TestClient, loan_id: str):
    response = client.get("/v1/loans/borrower/user/user_good")
    assert response.status_code == 200
    assert [loan["loan_id"] for loan in response.json()] == [loan_id]

    assert client.get("/v1/loans/borrower/business/user_good").json() == []
    assert client.get("/v1/loans/borrower/robot/user_good").status_code == 400


def test_get_schedule(client: TestClient, loan_id: str):
    response = client.get(f"/v1/loans/{loan_id}/schedule")

    assert response.status_code == 200
    entries = response.json()["entries"]
    assert len(entries) == 12
    assert entries[0]["interest"] == 120
    assert entries[0]["principal"] == 946
    assert entries[-1]["balance"] == 0


def test_security_endpoints(client: TestClient):
    create = client.post(
        "/v1/securities",
        json={
            "owner": {"type": "business", "id": "biz_1"},
            "name": "Municipal Bond",
            "cost": 100,
            "amount": 10,
            "interest_rate": 0.05,
            "start_date": "2023-01-01",
            "maturity_date": "2024-01-01",
            "payment_frequency": "monthly",
        },
        headers=HEADERS,
    )
    assert create.status_code == 200
    security_id = create.json()["security_id"]

    earnings = client.get(f"/v1/securities/{security_id}/earnings", params={"as_of": "2023-06-15"})
    assert earnings.status_code == 200
    assert earnings.json() == {"total_interest": 50, "next_payment_date": "2023-07-01", "remaining_payments": 7}

    owned = client.get("/v1/securities/owner/business/biz_1")
    assert [s["name"] for s in owned.json()] == ["Municipal Bond"]

    status = client.patch(f"/v1/securities/{security_id}/status", json={"status": "cancelled"})
    assert status.json()["status"] == "cancelled"


def test_open_ended_security_earnings(client: TestClient):
    create = client.post(
        "/v1/securities",
        json={
            "owner": {"type": "user", "id": "user_1"},
            "name": "Savings Certificate",
            "cost": 100,
            "amount": 10,
            "interest_rate": 0.05,
            "start_date": "2023-01-01",
            "payment_frequency": "quarterly",
        },
        headers=HEADERS,
    )
    security_id = create.json()["security_id"]
    assert create.json()["maturity_date"] is None

    earnings = client.get(f"/v1/securities/{security_id}/earnings", params={"as_of": "2024-01-01"}).json()
    assert earnings["total_interest"] == 50
    assert earnings["remaining_payments"] is None


def test_create_security_maturity_before_start(client: TestClient):
    response = client.post(
        "/v1/securities",
        json={
            "owner": {"type": "user", "id": "user_1"},
            "name": "Backdated Note",
            "cost": 100,
            "amount": 1,
            "interest_rate": 0.05,
            "start_date": "2024-01-01",
            "maturity_date": "2024-01-01",
            "payment_frequency": "monthly",
        },
        headers=HEADERS,
    )

    assert response.status_code == 400
    assert client.get("/v1/securities/owner/user/user_1").json() == []


def test_security_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/v1/securities/{fake_uuid}").status_code == 404
    assert client.get(f"/v1/securities/{fake_uuid}/earnings").status_code == 404


def test_transaction_balance(client: TestClient):
    owner = {"type": "user", "id": "user_1"}
    for type_, amount in [("income", 500), ("withdrawal", 200), ("income", 100)]:
        response = client.post(
            "/v1/transactions",
            json={"owner": owner, "amount": amount, "description": "Entry", "category": "misc", "type": type_},
            headers=HEADERS,
        )
        assert response.status_code == 200

    balance = client.get("/v1/transactions/owner/user/user_1/balance")
    assert balance.status_code == 200
    assert balance.json()["balance"] == 400

    assert client.get("/v1/transactions/owner/business/user_1/balance").json()["balance"] == 0
    assert len(client.get("/v1/transactions/owner/user/user_1").json()) == 3
    assert len(client.get("/v1/transactions/creator/admin_1").json()) == 3


def test_get_transaction(client: TestClient):
    created = client.post(
        "/v1/transactions",
        json={
            "owner": {"type": "business", "id": "biz_1"},
            "amount": 42.5,
            "description": "Consulting",
            "category": "services",
            "type": "income",
        },
        headers=HEADERS,
    ).json()

    response = client.get(f"/v1/transactions/{created['transaction_id']}")
    assert response.status_code == 200
    assert response.json()["amount"] == 42.5

    assert client.get("/v1/transactions/00000000-0000-0000-0000-000000000000").status_code == 404


def test_create_transaction_rejects_infinite_amount(client: TestClient):
    body = (
        '{"owner": {"type": "user", "id": "user_1"}, "amount": Infinity,'
        ' "description": "Overflow", "category": "misc", "type": "income"}'
    )
    response = client.post(
        "/v1/transactions",
        content=body,
        headers={**HEADERS, "Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert client.get("/v1/transactions/owner/user/user_1/balance").json()["balance"] == 0


def test_create_transaction_rejects_negative_amount(client: TestClient):
    response = client.post(
        "/v1/transactions",
        json={
            "owner": {"type": "user", "id": "user_1"},
            "amount": -10,
            "description": "Bad",
            "category": "misc",
            "type": "withdrawal",
        },
        headers=HEADERS,
    )
    assert response.status_code == 422
