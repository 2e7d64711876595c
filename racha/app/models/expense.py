"""
models/expense.py — Expense record and category values.

No business logic. No imports from services or routes.

Key design points:
  - `amount` is a Decimal. Never float.
  - Expenses are immutable once created; the only mutation is removal.
  - `split_among` is an ordered tuple of participant ids with no duplicates.
    Every listed participant consumes an equal share of `amount`.
  - Category is a free-form label. The two values below are the ones the
    application itself assigns; AI-prefilled drafts may carry others.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


# Largest amount a single expense may carry (12 digits, 2 decimals).
MAX_AMOUNT = Decimal("9999999999.99")


class Category(str, enum.Enum):
    GENERAL        = "general"
    SERVICE_CHARGE = "service_charge"


@dataclass(frozen=True)
class Expense:
    id: str
    name: str
    amount: Decimal
    category: str
    paid_by: str
    split_among: tuple[str, ...]
    date: datetime

    def involves(self, participant_id: str) -> bool:
        """True if the participant paid for or consumed this expense."""
        return self.paid_by == participant_id or participant_id in self.split_among

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Expense id={self.id} "
            f"amount={self.amount} "
            f"paid_by={self.paid_by} "
            f"split={len(self.split_among)}>"
        )
