"""
routes/ai.py — AI gateway route handlers (async views).

Both views are guarded by @single_flight: while one receipt parse (or one
insights request) is outstanding, another of the same kind gets
AI_REQUEST_IN_PROGRESS (409). Ledger state is only touched after the
awaited gateway call has resolved.

Endpoints (base url_prefix=/api/v1/ai):
  POST /ai/receipt    → 200  parsed receipt + expense draft
                        502  EXTERNAL_SERVICE_ERROR (nothing stored)
  POST /ai/insights   → 200  free-text insights (fallback text on failure)
                        422  NO_EXPENSES
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from racha.app.errors import AppError, ErrorCode
from racha.app.extensions import store
from racha.app.middleware.busy_guard import single_flight
from racha.app.schemas.ai_schema import ReceiptTextSchema
from racha.app.services import ai_service
from racha.app.services.balance_service import to_money_str

ai_bp = Blueprint("ai", __name__)


def _serialize_receipt(receipt: dict) -> dict:
    return {
        "items": [
            {
                "description": item["description"],
                "amount": to_money_str(item["amount"]),
                "category": item["category"],
                "suggested_split_strategy": item["suggested_split_strategy"],
            }
            for item in receipt["items"]
        ],
        "currency": receipt["currency"],
        "total": to_money_str(receipt["total"]),
    }


@ai_bp.route("/receipt", methods=["POST"])
@single_flight("is_parsing_receipt")
async def parse_receipt():
    """
    POST /ai/receipt — Parse free-form receipt text.

    On success the draft (name + amount) is kept in the session so the
    client can prefill its add-expense form; the expense itself is only
    recorded by a later POST /expenses. A receipt with no items answers
    draft=None and keeps any earlier draft.
    """
    data = ReceiptTextSchema().load(request.get_json(force=True) or {})
    receipt = await ai_service.analyze_receipt_text(
        data["text"],
        api_key=current_app.config["GEMINI_API_KEY"],
        model=current_app.config["GEMINI_MODEL"],
    )
    draft = ai_service.build_expense_draft(receipt)
    if draft is not None:
        store.ui.expense_draft = draft

    return jsonify({
        "data": {
            "receipt": _serialize_receipt(receipt),
            "draft": draft,
        },
        "warnings": [],
    }), 200


@ai_bp.route("/insights", methods=["POST"])
@single_flight("is_generating_insights")
async def generate_insights():
    """POST /ai/insights — Commentary on the current expenses."""
    snapshot = store.ledger.snapshot()
    if not snapshot.expenses:
        raise AppError(
            ErrorCode.NO_EXPENSES,
            "Add expenses before asking for insights.",
            422,
        )

    text = await ai_service.generate_spending_insights(
        snapshot.expenses,
        snapshot.participants,
        api_key=current_app.config["GEMINI_API_KEY"],
        model=current_app.config["GEMINI_MODEL"],
    )
    store.ui.insights = text
    return jsonify({"data": {"insights": text}, "warnings": []}), 200
