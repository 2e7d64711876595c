"""
models/ledger.py — The in-memory Ledger and its immutable snapshot.

The Ledger is the authoritative store for one session: an ordered list of
participants, an ordered list of expenses, and the id counters. It has no
business rules of its own — ledger_service.py enforces those before calling
the append/remove primitives here.

The settlement engine never sees a Ledger. It receives a LedgerSnapshot
(tuples), so nothing it does can reach back and mutate session state.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator, NamedTuple

from racha.app.models.expense import Expense
from racha.app.models.participant import Participant


class LedgerSnapshot(NamedTuple):
    participants: tuple[Participant, ...]
    expenses: tuple[Expense, ...]


@dataclass
class Ledger:
    participants: list[Participant] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)

    _participant_seq: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), repr=False
    )
    _expense_seq: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), repr=False
    )

    # ── Id issuing ─────────────────────────────────────────────────────────
    # Counters only move forward, so an id freed by a removal is never
    # handed out again in the same session.

    def next_participant_id(self) -> str:
        return f"u{next(self._participant_seq)}"

    def next_expense_id(self) -> str:
        return f"e{next(self._expense_seq)}"

    # ── Lookups ────────────────────────────────────────────────────────────

    def get_participant(self, participant_id: str) -> Participant | None:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def get_expense(self, expense_id: str) -> Expense | None:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None

    def participant_ids(self) -> list[str]:
        return [p.id for p in self.participants]

    def total_spent(self) -> Decimal:
        return sum((e.amount for e in self.expenses), Decimal("0"))

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(tuple(self.participants), tuple(self.expenses))
