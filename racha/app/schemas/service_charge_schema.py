"""
schemas/service_charge_schema.py — Marshmallow schema for POST /service-charge.

Exactly one of `percentage` and `manual_amount` must be present. Whether the
percentage is one of the offered options is checked by the service, because
the options come from app config.
"""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validates_schema

from racha.app.errors import ErrorCode
from racha.app.schemas.validators import (
    validate_amount_precision,
    validate_amount_upper_bound,
)


class CreateServiceChargeSchema(Schema):

    percentage = fields.Int(
        strict=True,  # reject floats like 10.0 and strings like "10"
        load_default=None,
    )

    manual_amount = fields.Decimal(
        load_default=None,
        validate=[validate_amount_precision, validate_amount_upper_bound],
    )

    # Omitted → remembered payer, else the first participant.
    paid_by = fields.Str(load_default=None)

    @validates_schema
    def validate_one_source(self, data: dict, **kwargs) -> None:
        has_pct = data.get("percentage") is not None
        has_manual = data.get("manual_amount") is not None
        if has_pct == has_manual:
            raise ValidationError(ErrorCode.INVALID_SERVICE_CHARGE)
