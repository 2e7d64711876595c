"""
models/participant.py — Participant record.

No business logic. No imports from services or routes.
A participant's id is an opaque handle issued by the Ledger; it is never
used as a list index and never reused within a session.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Participant:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
