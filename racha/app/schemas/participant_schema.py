"""
schemas/participant_schema.py — Marshmallow schema for participant creation.

Validation responsibility:
  - This file: field type, length, non-empty-after-trim.
  - services/ledger_service.py: id issuing and the referential guard on removal.

IMPORTANT: Inherits from marshmallow.Schema directly so schemas can be
instantiated in unit tests without a Flask application context.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from racha.app.schemas.validators import validate_non_empty_after_trim


class CreateParticipantSchema(Schema):
    """
    POST /participants

    name — non-empty after trim, max 60 chars. Surrounding whitespace is
    stripped by the service before storing.
    """

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=60,
                error="Participant name must be between 1 and 60 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )
