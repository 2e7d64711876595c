"""
routes/balances.py — Balance route handlers.

Layer rules:
  - Call the settlement engine via balance_service, return envelope.
  - No business logic. Both endpoints recompute from the current ledger;
    nothing is cached between requests.

Endpoints (base url_prefix=/api/v1/balances):
  GET /balances         → 200  per-participant summary + transfers
  GET /balances/share   → 200  plain-text summary + WhatsApp deep link
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from racha.app.extensions import store
from racha.app.services import balance_service, share_service

balances_bp = Blueprint("balances", __name__)


@balances_bp.route("/", methods=["GET"])
def get_balances():
    """
    GET /balances

    Amounts are two-decimal strings. balance_sum is "0.00" for any
    consistent ledger; an inconsistent one surfaces as INTERNAL_ERROR (500).
    """
    result = balance_service.get_balance_response(store.ledger)
    return jsonify({"data": result, "warnings": []}), 200


@balances_bp.route("/share", methods=["GET"])
def share_balances():
    """GET /balances/share — Text for the messaging hand-off."""
    snapshot = store.ledger.snapshot()
    settlement = balance_service.compute_settlement(snapshot)
    message = share_service.build_share_message(
        settlement["summary"],
        settlement["transfers"],
        snapshot.participants,
        current_app.config["CURRENCY_LABEL"],
    )
    return jsonify({
        "data": {
            "text": message,
            "url": share_service.build_share_url(message),
        },
        "warnings": [],
    }), 200
