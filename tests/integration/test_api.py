"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from vaultswipe.config import settings
from vaultswipe.infrastructure.database.repositories import SnapshotRepository


@pytest.fixture
def card_id(client: TestClient) -> str:
    """One card due on the 31st"""
    response = client.post("/v1/cards", json={"name": "Wells Fargo Cash Back", "due_day": 31})
    assert response.status_code == 201
    return response.json()["id"]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "vaultswipe_command_total" in response.text
    assert "http_request_duration_seconds" in response.text


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_request_id_unsafe_header_replaced(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "bad id with spaces"})

    assert response.headers["X-Request-ID"] != "bad id with spaces"
    assert len(response.headers["X-Request-ID"]) == 32


def test_metrics_label_unknown_paths_once(client: TestClient):
    client.get("/v1/no-such-route-abc123")
    response = client.get("/metrics")

    assert 'endpoint="unmatched"' in response.text
    assert "no-such-route-abc123" not in response.text
    assert 'endpoint="/health"' in response.text


def test_empty_ledger(client: TestClient):
    response = client.get("/v1/ledger")

    assert response.status_code == 200
    assert response.json() == {"checking_balance": 0.0, "vault_balance": 0.0, "cards": [], "transactions": []}


def test_pending_then_cleared_flow(client: TestClient, card_id: str):
    """Test 40.00 pending on a card due the 31st, then cleared"""
    response = client.post("/v1/transactions", json={"card_id": card_id, "amount": 40.00, "merchant": "Amazon"})
    assert response.status_code == 201
    txn = response.json()
    assert txn["date"] == "2025-02-15"
    assert txn["cleared"] is False

    summary = client.get("/v1/summary").json()
    assert summary["total_pending"] == 40.0
    assert summary["remind"] is True
    row = summary["cards"][0]
    assert row["pending"] == 40.0
    assert row["days_until_due"] == 13
    assert row["next_due"] == "2025-02-28"
    assert row["due_label"] == "Due on the 31st (in 13 days)"
    assert row["due_soon"] is False

    toggled = client.post(f"/v1/transactions/{txn['id']}/toggle")
    assert toggled.status_code == 200
    assert toggled.json()["cleared"] is True

    summary = client.get("/v1/summary").json()
    assert summary["cards"][0]["pending"] == 0.0
    assert summary["total_pending"] == 0.0
    assert summary["remind"] is False


def test_add_card_rejected_leaves_state(client: TestClient):
    response = client.post("/v1/cards", json={"name": "   "})

    assert response.status_code == 422
    assert client.get("/v1/ledger").json()["cards"] == []


def test_add_transaction_validation(client: TestClient, card_id: str):
    zero = client.post("/v1/transactions", json={"card_id": card_id, "amount": 0})
    missing = client.post("/v1/transactions", json={"card_id": card_id})
    unknown = client.post("/v1/transactions", json={"card_id": "nope", "amount": 5})

    assert zero.status_code == 422
    assert missing.status_code == 422
    assert unknown.status_code == 404
    assert client.get("/v1/ledger").json()["transactions"] == []


def test_update_card(client: TestClient, card_id: str):
    response = client.patch(
        f"/v1/cards/{card_id}",
        json={"name": "WF", "color": "#FF0000", "due_day": 20, "current_balance": 310.25},
    )

    assert response.status_code == 200
    assert response.json() == {
        "id": card_id,
        "name": "WF",
        "color": "#FF0000",
        "due_day": 20,
        "current_balance": 310.25,
    }

    cleared = client.patch(f"/v1/cards/{card_id}", json={"current_balance": None})
    assert cleared.json()["current_balance"] is None
    assert cleared.json()["name"] == "WF"


def test_update_card_rejects_whole_request(client: TestClient, card_id: str):
    """Test a bad field stores none of the other fields either"""
    response = client.patch(f"/v1/cards/{card_id}", json={"color": "#FF0000", "name": ""})

    assert response.status_code == 422
    card = client.get("/v1/ledger").json()["cards"][0]
    assert card["name"] == "Wells Fargo Cash Back"
    assert card["color"] != "#FF0000"


def test_update_unknown_card(client: TestClient):
    response = client.patch("/v1/cards/nope", json={"name": "X"})
    assert response.status_code == 404


def test_delete_card_cascades(client: TestClient, card_id: str):
    other = client.post("/v1/cards", json={"name": "United"}).json()["id"]
    client.post("/v1/transactions", json={"card_id": card_id, "amount": 1})
    client.post("/v1/transactions", json={"card_id": card_id, "amount": 2})
    kept = client.post("/v1/transactions", json={"card_id": other, "amount": 3}).json()["id"]

    response = client.delete(f"/v1/cards/{card_id}")

    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data["cards"]] == [other]
    assert [t["id"] for t in data["transactions"]] == [kept]
    assert client.delete(f"/v1/cards/{card_id}").status_code == 404


def test_update_note(client: TestClient, card_id: str):
    txn_id = client.post("/v1/transactions", json={"card_id": card_id, "amount": 12.57}).json()["id"]

    response = client.put(f"/v1/transactions/{txn_id}/note", json={"note": "Waiting for refund"})

    assert response.status_code == 200
    assert response.json()["note"] == "Waiting for refund"
    assert client.put("/v1/transactions/nope/note", json={"note": "x"}).status_code == 404


def test_strict_transfer_insufficient_funds(client: TestClient):
    """Test a short checking balance answers 409 and changes nothing"""
    client.put("/v1/balances/checking", json={"amount": 25})
    client.put("/v1/balances/vault", json={"amount": 5})

    response = client.post("/v1/transfers", json={"direction": "checking_to_vault", "amount": 30})

    assert response.status_code == 409
    ledger = client.get("/v1/ledger").json()
    assert (ledger["checking_balance"], ledger["vault_balance"]) == (25.0, 5.0)


def test_transfer_both_directions(client: TestClient):
    client.put("/v1/balances/checking", json={"amount": 100})

    there = client.post("/v1/transfers", json={"amount": 60})
    assert there.json() == {"checking_balance": 40.0, "vault_balance": 60.0}

    back = client.post("/v1/transfers", json={"direction": "vault_to_checking", "amount": 10.5})
    assert back.json() == {"checking_balance": 50.5, "vault_balance": 49.5}

    invalid = client.post("/v1/transfers", json={"amount": 0})
    assert invalid.status_code == 422


def test_unchecked_transfer_may_overdraw(client: TestClient):
    response = client.post("/v1/transfers", json={"amount": 15, "strict": False})

    assert response.status_code == 200
    assert response.json() == {"checking_balance": -15.0, "vault_balance": 15.0}


def test_vault_transaction_skips_funds_check(client: TestClient, card_id: str):
    client.put("/v1/balances/checking", json={"amount": 10})
    txn_id = client.post("/v1/transactions", json={"card_id": card_id, "amount": 40}).json()["id"]

    response = client.post(f"/v1/transactions/{txn_id}/vault")

    assert response.status_code == 200
    assert response.json() == {"checking_balance": -30.0, "vault_balance": 40.0}


def test_summary_modes(client: TestClient, card_id: str):
    """Test auto mode switches to stated balances once a card has one"""
    other = client.post("/v1/cards", json={"name": "United", "due_day": 20}).json()["id"]
    client.post("/v1/transactions", json={"card_id": card_id, "amount": 80})
    client.put("/v1/balances/vault", json={"amount": 100})

    pending = client.get("/v1/summary").json()
    assert pending["mode"] == "pending_sum"
    assert pending["total_card_balances"] == 80.0
    assert pending["pending_difference"] == 0.0
    assert pending["cards"][1]["due_soon"] is True

    client.patch(f"/v1/cards/{other}", json={"current_balance": 250})

    auto = client.get("/v1/summary").json()
    assert auto["mode"] == "stated_balances"
    assert auto["total_card_balances"] == 250.0
    assert auto["pending_difference"] == 150.0

    forced = client.get("/v1/summary", params={"mode": "pending_sum"}).json()
    assert forced["total_card_balances"] == 80.0


def test_corrupt_snapshot_served_as_empty(client: TestClient, db: Session):
    """Test an unreadable stored record does not break reads"""
    SnapshotRepository(db, settings.storage_key).save_raw("not json at all")
    db.commit()

    response = client.get("/v1/ledger")

    assert response.status_code == 200
    assert response.json()["cards"] == []


def test_seed_demo_data(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "seed_demo_data", True)

    data = client.get("/v1/ledger").json()

    assert [c["name"] for c in data["cards"]] == ["Wells Fargo Cash Back", "United Mileage Plus"]
    assert len(data["transactions"]) == 3


def test_seeded_ids_stay_stable(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    """Test demo data is stored once so its ids can be acted on"""
    monkeypatch.setattr(settings, "seed_demo_data", True)

    first = client.get("/v1/ledger").json()
    second = client.get("/v1/ledger").json()
    txn_id = first["transactions"][0]["id"]

    assert [t["id"] for t in second["transactions"]] == [t["id"] for t in first["transactions"]]

    response = client.post(f"/v1/transactions/{txn_id}/toggle")

    assert response.status_code == 200
    assert response.json()["cleared"] is True
    assert client.get("/v1/ledger").json()["transactions"][0]["cleared"] is True
