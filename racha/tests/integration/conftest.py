"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Each test gets its own app from create_app("testing"), and with it its own
    empty in-memory ledger. Nothing needs cleaning between tests.
  - TestingConfig seeds no participants and sets a dummy GEMINI_API_KEY; the
    AI tests patch the gateway functions, so no request leaves the process.

Helper functions (not fixtures) are provided for common operations:
  - add_participant(client, name)  → participant dict
  - make_expense(client, ...)      → HTTP response
  - session_state(app)             → the app's SessionState

These are plain functions (not pytest fixtures) so they can be called with
arbitrary arguments in any test without fixture parameterization overhead.
"""

from __future__ import annotations

import pytest

from racha.app import create_app


# ═══════════════════════════════════════════════════════════════════════════
# App and client fixtures
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app():
    """A fresh Flask application in 'testing' mode."""
    return create_app("testing")


@pytest.fixture
def client(app):
    """Flask test client bound to the per-test app."""
    return app.test_client()


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def add_participant(client, name: str) -> dict:
    """Adds a participant and returns the participant data dict."""
    resp = client.post("/api/v1/participants/", json={"name": name})
    assert resp.status_code == 201, f"add_participant failed: {resp.get_json()}"
    return resp.get_json()["data"]


def make_expense(
    client,
    name: str = "Dinner",
    amount: str = "90.00",
    paid_by: str | None = None,
    split_among: list[str] | None = None,
    **extra,
):
    """Posts an expense. Omitted paid_by / split_among use the API defaults."""
    payload = {"name": name, "amount": amount, **extra}
    if paid_by is not None:
        payload["paid_by"] = paid_by
    if split_among is not None:
        payload["split_among"] = split_among
    return client.post("/api/v1/expenses/", json=payload)


def session_state(app):
    """Direct access to the app's SessionState (ledger + UI state)."""
    return app.extensions["racha_session"]
