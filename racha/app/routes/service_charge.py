"""
routes/service_charge.py — Service charge / tip route handler.

Endpoints (base url_prefix=/api/v1/service-charge):
  POST /service-charge   → 201  append a service-charge expense

Body: {"percentage": 10} or {"manual_amount": "25.00"}, optional "paid_by".
The created expense is returned in the same shape as POST /expenses.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from racha.app.extensions import store
from racha.app.routes.expenses import serialize_expense
from racha.app.schemas.service_charge_schema import CreateServiceChargeSchema
from racha.app.services import service_charge_service

service_charge_bp = Blueprint("service_charge", __name__)


@service_charge_bp.route("/", methods=["POST"])
def add_service_charge():
    """
    POST /service-charge

    Rejected with NOTHING_TO_CHARGE (422) while the ledger total is zero.
    """
    data = CreateServiceChargeSchema().load(request.get_json(force=True) or {})
    expense = service_charge_service.add_service_charge(
        store.ledger,
        store.ui,
        paid_by=data["paid_by"],
        percentage=data["percentage"],
        manual_amount=data["manual_amount"],
        allowed_percentages=current_app.config["SERVICE_CHARGE_PERCENTAGES"],
    )
    return jsonify({"data": serialize_expense(expense), "warnings": []}), 201
