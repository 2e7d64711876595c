"""
schemas/expense_schema.py — Marshmallow schema for expense creation.

Validation responsibility:
  - This file:
      - Field types and lengths
      - Decimal precision (INVALID_AMOUNT_PRECISION)
      - Non-empty-after-trim enforcement for name and category
  - services/ledger_service.py:
      - amount > 0                        (InvalidAmountError)
      - split_among non-empty             (EmptySplitError)
      - payer / consumers known           (UNKNOWN_PARTICIPANT)

`paid_by` and `split_among` are optional. When omitted the route fills in
the defaults the client form used: first participant pays, everybody shares.
An explicitly empty `split_among` is NOT replaced — it reaches the service
and is rejected with EMPTY_SPLIT.

IMPORTANT: Inherits from marshmallow.Schema directly — never a Flask-bound
schema class — so unit tests need no app context.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from racha.app.models.expense import Category
from racha.app.schemas.validators import (
    validate_amount_precision,
    validate_amount_upper_bound,
    validate_non_empty_after_trim,
)


class CreateExpenseSchema(Schema):
    """POST /expenses"""

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=100,
                error="Expense name must be between 1 and 100 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )

    amount = fields.Decimal(
        required=True,
        validate=[validate_amount_precision, validate_amount_upper_bound],
    )

    paid_by = fields.Str(load_default=None)

    split_among = fields.List(
        fields.Str(validate=validate.Length(min=1)),
        load_default=None,
    )

    category = fields.Str(
        load_default=Category.GENERAL.value,
        validate=[
            validate.Length(max=40, error="Category must be at most 40 characters."),
            validate_non_empty_after_trim,
        ],
    )
