"""
schemas/validators.py — Field validators shared by several schemas.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import ValidationError, validate

from racha.app.errors import ErrorCode
from racha.app.models.expense import MAX_AMOUNT


# ── Shared non-empty string validator ─────────────────────────────────────
#
# Length(min=1) accepts "   "; names and categories must have visible text.
# ──────────────────────────────────────────────────────────────────────────

def validate_non_empty_after_trim(value: str) -> None:
    """Raises ValidationError if the string is blank or contains only whitespace."""
    if not value.strip():
        raise ValidationError("Must contain at least one non-space character.")


# ── Shared monetary precision validator ───────────────────────────────────
#
# Client-entered amounts carry at most 2 decimal places. Input with more is
# REJECTED with INVALID_AMOUNT_PRECISION, never rounded.
#
# The sign is checked by ledger_service (InvalidAmountError), not here.
# ──────────────────────────────────────────────────────────────────────────

def validate_amount_precision(value: Decimal) -> None:
    """
    Decimal.as_tuple().exponent gives the scale as a negative integer:
      Decimal("10.123") → -3 → REJECT
      Decimal("10.12")  → -2 → accept
      Decimal("10")     →  0 → accept
    """
    if value.as_tuple().exponent < -2:
        raise ValidationError(ErrorCode.INVALID_AMOUNT_PRECISION)


# ── Shared monetary bound ─────────────────────────────────────────────────
#
# Amounts above MAX_AMOUNT are rejected with INVALID_AMOUNT before any
# service runs. Lower bounds are a business rule and live in the services.
# ──────────────────────────────────────────────────────────────────────────

validate_amount_upper_bound = validate.Range(
    max=MAX_AMOUNT,
    error=ErrorCode.INVALID_AMOUNT,
)
