"""
routes/expenses.py — Expense route handlers.

Layer rules:
  - Parse, validate, call ONE service, return envelope.
  - No business logic. serialize_expense() is a pure data-shape helper.

Endpoints (base url_prefix=/api/v1/expenses):
  GET    /expenses        → 200  list in insertion order
  POST   /expenses        → 201  record an expense
  DELETE /expenses/:id    → 200  remove (no cascade)
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from racha.app.extensions import store
from racha.app.models.expense import Expense
from racha.app.schemas.expense_schema import CreateExpenseSchema
from racha.app.services import ledger_service
from racha.app.services.balance_service import to_money_str

expenses_bp = Blueprint("expenses", __name__)


# ── Serialization helper ───────────────────────────────────────────────────
# Pure data-shaping, no logic. Amounts as two-decimal strings.

def serialize_expense(expense: Expense) -> dict:
    """Converts an Expense to a plain dict for JSON output."""
    return {
        "id": expense.id,
        "name": expense.name,
        "amount": to_money_str(expense.amount),
        "category": expense.category,
        "paid_by": expense.paid_by,
        "split_among": list(expense.split_among),
        "date": expense.date.isoformat(),
    }


@expenses_bp.route("/", methods=["GET"])
def list_expenses():
    """GET /expenses"""
    expenses = ledger_service.list_expenses(store.ledger)
    return jsonify({
        "data": [serialize_expense(e) for e in expenses],
        "warnings": [],
    }), 200


@expenses_bp.route("/", methods=["POST"])
def create_expense():
    """
    POST /expenses — Record a new expense.

    Omitted paid_by → first participant. Omitted split_among → everyone.
    """
    data = CreateExpenseSchema().load(request.get_json(force=True) or {})
    ledger = store.ledger

    paid_by = data["paid_by"]
    if paid_by is None:
        paid_by = ledger_service.default_payer_id(ledger)

    split_among = data["split_among"]
    if split_among is None:
        split_among = ledger.participant_ids()

    expense = ledger_service.add_expense(
        ledger,
        name=data["name"],
        amount=data["amount"],
        paid_by=paid_by,
        split_among=split_among,
        category=data["category"].strip(),
    )
    # A saved expense consumes the receipt draft, like resetting the form.
    store.ui.expense_draft = None
    return jsonify({"data": serialize_expense(expense), "warnings": []}), 201


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
def delete_expense(expense_id: str):
    """DELETE /expenses/:id — Unconditional removal."""
    ledger_service.remove_expense(store.ledger, expense_id)
    return jsonify({
        "data": {
            "deleted": True,
            "expense_id": expense_id,
        },
        "warnings": [],
    }), 200
