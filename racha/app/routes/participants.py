"""
routes/participants.py — Participant route handlers.

Layer rules:
  - Parse, validate, call ONE service, return envelope.
  - No business logic.

Endpoints (base url_prefix=/api/v1/participants):
  GET    /participants        → 200  list in insertion order
  POST   /participants        → 201  add participant
  DELETE /participants/:id    → 200  remove (409 if referenced by an expense)
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from racha.app.extensions import store
from racha.app.schemas.participant_schema import CreateParticipantSchema
from racha.app.services import ledger_service

participants_bp = Blueprint("participants", __name__)


@participants_bp.route("/", methods=["GET"])
def list_participants():
    """GET /participants"""
    participants = ledger_service.list_participants(store.ledger)
    return jsonify({
        "data": [p.to_dict() for p in participants],
        "warnings": [],
    }), 200


@participants_bp.route("/", methods=["POST"])
def add_participant():
    """POST /participants — Add someone to the group."""
    data = CreateParticipantSchema().load(request.get_json(force=True) or {})
    participant = ledger_service.add_participant(store.ledger, data["name"])
    return jsonify({"data": participant.to_dict(), "warnings": []}), 201


@participants_bp.route("/<participant_id>", methods=["DELETE"])
def remove_participant(participant_id: str):
    """
    DELETE /participants/:id

    Refused with PARTICIPANT_IN_USE (409) while any expense names this
    participant as payer or consumer; the ledger is left unchanged.
    """
    ledger_service.remove_participant(store.ledger, participant_id)
    return jsonify({
        "data": {
            "removed": True,
            "participant_id": participant_id,
        },
        "warnings": [],
    }), 200
