"""
schemas/ai_schema.py — Schemas on both sides of the AI gateway.

  ReceiptTextSchema       — what the client sends to POST /ai/receipt.
  AIReceiptResponseSchema — what Gemini must send back. A payload that does
                            not load is treated as an upstream failure
                            (ExternalServiceError), not as a client error.

Gemini's JSON uses camelCase (`suggestedSplitStrategy`); data_key maps it
to the snake_case name used everywhere else.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from racha.app.models.expense import MAX_AMOUNT
from racha.app.schemas.validators import validate_non_empty_after_trim


class ReceiptTextSchema(Schema):

    text = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=5000,
                error="Receipt text must be between 1 and 5000 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )


class AIReceiptItemSchema(Schema):

    class Meta:
        unknown = EXCLUDE

    description = fields.Str(required=True)
    # Discount lines may be negative.
    amount = fields.Decimal(
        required=True,
        validate=validate.Range(min=-MAX_AMOUNT, max=MAX_AMOUNT),
    )
    category = fields.Str(required=True)

    # Advisory only. Not required by the response schema sent to Gemini.
    suggested_split_strategy = fields.Str(
        data_key="suggestedSplitStrategy",
        load_default="",
    )


class AIReceiptResponseSchema(Schema):

    class Meta:
        unknown = EXCLUDE

    items = fields.List(fields.Nested(AIReceiptItemSchema), required=True)
    currency = fields.Str(required=True)
    total = fields.Decimal(
        required=True,
        validate=validate.Range(min=0, max=MAX_AMOUNT),
    )
