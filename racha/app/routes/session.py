"""
routes/session.py — Dashboard view of the current session.

Endpoints (base url_prefix=/api/v1/session):
  GET /session   → 200  totals, counts, service-charge options, UI state
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from racha.app.extensions import store
from racha.app.services import ledger_service
from racha.app.services.balance_service import to_money_str

session_bp = Blueprint("session", __name__)


@session_bp.route("/", methods=["GET"])
def get_session():
    """GET /session"""
    ledger = store.ledger
    return jsonify({
        "data": {
            "total_spent": to_money_str(ledger_service.total_spent(ledger)),
            "participant_count": len(ledger.participants),
            "expense_count": len(ledger.expenses),
            "currency": current_app.config["CURRENCY_LABEL"],
            "service_charge_percentages": list(
                current_app.config["SERVICE_CHARGE_PERCENTAGES"]
            ),
            "ui": store.ui.to_dict(),
        },
        "warnings": [],
    }), 200
