"""
services/ai_service.py — Gemini gateway: receipt parsing and spending insights.

Both calls are coroutines; the async route awaits them and nothing else in
the app runs inside them. There is no retry and no cancellation.

Failure policy:
  analyze_receipt_text()       — any failure (no key, network, bad JSON,
                                 schema mismatch) → ExternalServiceError with
                                 one generic user-facing message. Details go
                                 to the log only.
  generate_spending_insights() — never raises; answers FALLBACK_INSIGHTS.

Layer rules:
  - No Flask imports. The route passes api_key and model from app config.
"""

from __future__ import annotations

import functools
import json
import logging
from decimal import Decimal
from typing import Sequence

from google import genai
from google.genai import types
from marshmallow import ValidationError

from racha.app.errors import ExternalServiceError
from racha.app.models.expense import Expense
from racha.app.models.participant import Participant
from racha.app.schemas.ai_schema import AIReceiptResponseSchema


logger = logging.getLogger(__name__)

FALLBACK_INSIGHTS = "Could not generate insights right now. Please try again later."

# Draft names are cut to this many characters before the "..." marker.
DRAFT_NAME_LIMIT = 30


# ── Prompts and response schema ────────────────────────────────────────────

_RECEIPT_PROMPT = """\
You are a financial assistant that specialises in splitting restaurant and travel bills.
Analyse the following receipt text (it may be messy or just a typed list).

Extract every item with its price and give it a category.
For every item, suggest a split strategy (e.g. 'EVERYONE', 'ALCOHOL_DRINKERS', 'INDIVIDUAL').

Receipt text:
"{text}"
"""

_INSIGHTS_PROMPT = """\
You are a friendly assistant for a group splitting shared expenses.
In at most three short sentences, point out who spent the most, the biggest
categories, and one practical tip for the group. Reply in plain text.

Participants:
{participants}

Expenses (JSON):
{expenses}
"""

_RECEIPT_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "items": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "description": types.Schema(type=types.Type.STRING),
                    "amount": types.Schema(type=types.Type.NUMBER),
                    "category": types.Schema(
                        type=types.Type.STRING,
                        description="Category, e.g. Food, Drinks, Service, Transport",
                    ),
                    "suggestedSplitStrategy": types.Schema(
                        type=types.Type.STRING,
                        description="Suggested way to split this item",
                    ),
                },
                required=["description", "amount", "category"],
            ),
        ),
        "currency": types.Schema(type=types.Type.STRING),
        "total": types.Schema(type=types.Type.NUMBER),
    },
    required=["items", "total", "currency"],
)


# ── Client ─────────────────────────────────────────────────────────────────

@functools.lru_cache(maxsize=4)
def _client(api_key: str) -> genai.Client:
    """One client per key for the life of the process."""
    return genai.Client(api_key=api_key)


def _require_key(api_key: str | None) -> str:
    if not api_key:
        logger.error("GEMINI_API_KEY is not configured; AI gateway unavailable.")
        raise ExternalServiceError()
    return api_key


# ── Public service functions ───────────────────────────────────────────────

async def analyze_receipt_text(text: str, api_key: str | None, model: str) -> dict:
    """
    Sends free-form receipt text to Gemini and returns the structured result.

    Returns:
        {"items": [{"description", "amount", "category",
                    "suggested_split_strategy"}],
         "currency": str, "total": Decimal}

    Raises:
        ExternalServiceError (502) -- the call failed or the answer is unusable.
    """
    client = _client(_require_key(api_key))

    try:
        response = await client.aio.models.generate_content(
            model=model,
            contents=_RECEIPT_PROMPT.format(text=text),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=_RECEIPT_RESPONSE_SCHEMA,
            ),
        )
    except Exception:
        logger.exception("Gemini receipt request failed.")
        raise ExternalServiceError()

    if not response.text:
        logger.error("Gemini returned no text for a receipt request.")
        raise ExternalServiceError()

    try:
        return AIReceiptResponseSchema().load(json.loads(response.text))
    except (json.JSONDecodeError, ValidationError, TypeError) as exc:
        logger.error("Gemini receipt response could not be parsed: %s", exc)
        raise ExternalServiceError()


async def generate_spending_insights(
        expenses: Sequence[Expense],
        participants: Sequence[Participant],
        api_key: str | None,
        model: str,
) -> str:
    """
    Asks Gemini for a short free-text commentary on the group's spending.

    Never raises: any failure is logged and FALLBACK_INSIGHTS is returned.
    """
    if not api_key:
        logger.warning("GEMINI_API_KEY is not configured; returning fallback insights.")
        return FALLBACK_INSIGHTS

    names = {p.id: p.name for p in participants}
    payload = [
        {
            "name": e.name,
            "amount": str(e.amount),
            "category": e.category,
            "paid_by": names.get(e.paid_by, e.paid_by),
            "split_among": [names.get(pid, pid) for pid in e.split_among],
        }
        for e in expenses
    ]
    prompt = _INSIGHTS_PROMPT.format(
        participants=", ".join(p.name for p in participants),
        expenses=json.dumps(payload, ensure_ascii=False),
    )

    try:
        response = await _client(api_key).aio.models.generate_content(
            model=model,
            contents=prompt,
        )
    except Exception:
        logger.exception("Gemini insights request failed.")
        return FALLBACK_INSIGHTS

    text = (response.text or "").strip()
    return text or FALLBACK_INSIGHTS


def build_expense_draft(receipt: dict) -> dict | None:
    """
    Turns a parsed receipt into a prefill for the add-expense form.

    Name: item descriptions joined with ", ", cut to 30 characters, with
    "..." appended when there is more than one item. Amount: the receipt
    total. A receipt without items gives no draft (None).
    """
    items = receipt.get("items") or []
    if not items:
        return None
    total: Decimal = receipt.get("total", Decimal("0"))

    name = ", ".join(item["description"] for item in items)[:DRAFT_NAME_LIMIT]
    if len(items) > 1:
        name += "..."

    return {
        "name": name,
        "amount": total,
        "currency": receipt.get("currency", ""),
    }
