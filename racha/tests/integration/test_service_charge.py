"""
Integration tests for /api/v1/service-charge.
"""

from __future__ import annotations

import pytest

from .conftest import add_participant, make_expense, session_state


@pytest.fixture
def dinner(client):
    add_participant(client, "Ana")
    add_participant(client, "Bruno")
    make_expense(client, name="Dinner", amount="300.00", paid_by="u1")
    make_expense(client, name="Drinks", amount="60.00", paid_by="u2")
    return client


def test_percentage_charge_becomes_expense(dinner):
    resp = dinner.post("/api/v1/service-charge/", json={"percentage": 15})

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["id"] == "tip-e3"
    assert data["name"] == "Service charge (15%)"
    assert data["amount"] == "54.00"
    assert data["category"] == "service_charge"
    assert data["paid_by"] == "u1"
    assert data["split_among"] == ["u1", "u2"]


def test_charge_flows_into_settlement(dinner):
    dinner.post("/api/v1/service-charge/", json={"percentage": 15})

    balances = dinner.get("/api/v1/balances/").get_json()["data"]

    assert balances["total_spent"] == "414.00"
    assert [(t["from_id"], t["to_id"], t["amount"]) for t in balances["transfers"]] == [
        ("u2", "u1", "147.00"),
    ]


def test_manual_charge_with_payer(dinner):
    resp = dinner.post(
        "/api/v1/service-charge/", json={"manual_amount": "20.00", "paid_by": "u2"},
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["name"] == "Service charge (manual)"
    assert data["amount"] == "20.00"
    assert data["paid_by"] == "u2"


def test_payer_is_remembered_across_requests(app, dinner):
    dinner.post("/api/v1/service-charge/", json={"percentage": 10, "paid_by": "u2"})

    data = dinner.post("/api/v1/service-charge/", json={"percentage": 10}).get_json()["data"]

    assert data["paid_by"] == "u2"
    assert session_state(app).ui.service_charge_payer_id == "u2"


def test_charge_can_be_removed_like_any_expense(dinner):
    dinner.post("/api/v1/service-charge/", json={"percentage": 10})

    resp = dinner.delete("/api/v1/expenses/tip-e3")

    assert resp.status_code == 200
    total = dinner.get("/api/v1/balances/").get_json()["data"]["total_spent"]
    assert total == "360.00"


@pytest.mark.parametrize("payload", [
    {},
    {"percentage": 10, "manual_amount": "5.00"},
])
def test_exactly_one_source_required(dinner, payload):
    resp = dinner.post("/api/v1/service-charge/", json=payload)

    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "INVALID_SERVICE_CHARGE"
    assert "field" not in error


def test_unoffered_percentage_rejected(dinner):
    resp = dinner.post("/api/v1/service-charge/", json={"percentage": 18})

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "INVALID_SERVICE_CHARGE"


def test_zero_manual_amount_rejected(dinner):
    resp = dinner.post("/api/v1/service-charge/", json={"manual_amount": "0"})

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "INVALID_AMOUNT"


def test_unknown_payer_rejected(dinner):
    resp = dinner.post("/api/v1/service-charge/", json={"percentage": 10, "paid_by": "u7"})

    assert resp.status_code == 422
    assert resp.get_json()["error"]["code"] == "UNKNOWN_PARTICIPANT"
    assert len(dinner.get("/api/v1/expenses/").get_json()["data"]) == 2


def test_nothing_to_charge_on_empty_ledger(client):
    add_participant(client, "Ana")

    resp = client.post("/api/v1/service-charge/", json={"percentage": 10})

    assert resp.status_code == 422
    assert resp.get_json()["error"]["code"] == "NOTHING_TO_CHARGE"


def test_oversized_manual_amount_rejected(dinner):
    resp = dinner.post("/api/v1/service-charge/", json={"manual_amount": "1e30"})

    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "INVALID_AMOUNT"
    assert error["field"] == "manual_amount"
    assert len(dinner.get("/api/v1/expenses/").get_json()["data"]) == 2
