"""
services/ledger_service.py — Participant and expense mutations.

Invariants enforced here:
  - Participant names are non-blank after trim.
  - Expense amount > 0                          (InvalidAmountError, 400)
  - Expense split_among is non-empty            (EmptySplitError, 400)
  - paid_by and every split id are known ids    (UNKNOWN_PARTICIPANT, 422)
  - A participant referenced by any expense
    cannot be removed                           (ReferentialIntegrityError, 409)

Every check runs before the Ledger is touched, so a rejected call leaves the
session exactly as it was.

Layer rules:
  - No Flask imports. No current_app, request, g, or HTTP knowledge.
  - Receives the Ledger as an argument; returns models or raises AppError.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from racha.app.errors import (
    AppError,
    EmptySplitError,
    ErrorCode,
    InvalidAmountError,
    ReferentialIntegrityError,
)
from racha.app.models.expense import MAX_AMOUNT, Category, Expense
from racha.app.models.ledger import Ledger
from racha.app.models.participant import Participant


logger = logging.getLogger(__name__)


# ── Lookup helpers ─────────────────────────────────────────────────────────

def _get_participant_or_404(ledger: Ledger, participant_id: str) -> Participant:
    """Returns the Participant or raises PARTICIPANT_NOT_FOUND (404)."""
    participant = ledger.get_participant(participant_id)
    if participant is None:
        raise AppError(
            ErrorCode.PARTICIPANT_NOT_FOUND,
            f"Participant {participant_id} does not exist.",
            404,
        )
    return participant


def require_known_participant(ledger: Ledger, participant_id: str, field: str) -> None:
    """Raises UNKNOWN_PARTICIPANT (422) if the id is not in the ledger."""
    if ledger.get_participant(participant_id) is None:
        raise AppError(
            ErrorCode.UNKNOWN_PARTICIPANT,
            f"Participant {participant_id} is not part of this group.",
            422,
            field=field,
        )


def _dedupe(ids: Iterable[str]) -> tuple[str, ...]:
    """Drops repeated ids, keeping first-seen order."""
    return tuple(dict.fromkeys(ids))


# ── Participants ───────────────────────────────────────────────────────────

def add_participant(ledger: Ledger, name: str) -> Participant:
    """
    Appends a new participant with a fresh id.

    Raises:
      AppError(INVALID_FIELD, 400) — name is blank or whitespace-only.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise AppError(
            ErrorCode.INVALID_FIELD,
            "Participant name must not be blank.",
            400,
            field="name",
        )

    participant = Participant(id=ledger.next_participant_id(), name=cleaned)
    ledger.participants.append(participant)
    logger.debug("Added participant %s (%s).", participant.id, participant.name)
    return participant


def remove_participant(ledger: Ledger, participant_id: str) -> None:
    """
    Removes a participant that no expense refers to.

    Raises:
      AppError(PARTICIPANT_NOT_FOUND, 404) — unknown id.
      ReferentialIntegrityError (409)      — participant paid for or consumed
                                             at least one expense.
    """
    participant = _get_participant_or_404(ledger, participant_id)

    if any(expense.involves(participant_id) for expense in ledger.expenses):
        raise ReferentialIntegrityError(participant_id)

    ledger.participants.remove(participant)
    logger.debug("Removed participant %s.", participant_id)


def list_participants(ledger: Ledger) -> list[Participant]:
    return list(ledger.participants)


# ── Expenses ───────────────────────────────────────────────────────────────

def add_expense(
        ledger: Ledger,
        name: str,
        amount: Decimal,
        paid_by: str,
        split_among: Iterable[str],
        category: str = Category.GENERAL.value,
        expense_id: str | None = None,
) -> Expense:
    """
    Validates and appends a new expense, stamped with the current UTC time.

    Args:
        split_among: Participant ids sharing the cost equally. Duplicates are
                     collapsed; order is kept.
        expense_id:  Pre-issued id. Only the service-charge constructor passes
                     one (it prefixes the id); everyone else gets a fresh id.

    Raises:
      InvalidAmountError (400)        — amount <= 0 or above MAX_AMOUNT.
      EmptySplitError (400)           — split_among is empty.
      AppError(UNKNOWN_PARTICIPANT)   — payer or a consumer is not in the ledger.
    """
    if amount is None or amount <= 0:
        raise InvalidAmountError()
    if amount > MAX_AMOUNT:
        raise InvalidAmountError(f"Amount must be at most {MAX_AMOUNT}.")

    consumers = _dedupe(split_among)
    if not consumers:
        raise EmptySplitError()

    require_known_participant(ledger, paid_by, field="paid_by")
    for consumer_id in consumers:
        require_known_participant(ledger, consumer_id, field="split_among")

    expense = Expense(
        id=expense_id or ledger.next_expense_id(),
        name=name.strip(),
        amount=amount,
        category=category,
        paid_by=paid_by,
        split_among=consumers,
        date=datetime.now(timezone.utc),
    )
    ledger.expenses.append(expense)
    logger.info(
        "Recorded expense %s: %s paid %s split %d way(s).",
        expense.id, paid_by, amount, len(consumers),
    )
    return expense


def remove_expense(ledger: Ledger, expense_id: str) -> None:
    """
    Removes an expense. No cascade — participants are independent.

    Raises:
      AppError(EXPENSE_NOT_FOUND, 404) — unknown id.
    """
    expense = ledger.get_expense(expense_id)
    if expense is None:
        raise AppError(
            ErrorCode.EXPENSE_NOT_FOUND,
            f"Expense {expense_id} does not exist.",
            404,
        )
    ledger.expenses.remove(expense)
    logger.info("Removed expense %s.", expense_id)


def list_expenses(ledger: Ledger) -> list[Expense]:
    return list(ledger.expenses)


def total_spent(ledger: Ledger) -> Decimal:
    """Sum of all expense amounts, service charges included."""
    return ledger.total_spent()


def default_payer_id(ledger: Ledger) -> str:
    """
    The participant who pays when the client does not say: the first one.

    Raises:
      AppError(NO_PARTICIPANTS, 422) — the ledger has nobody in it.
    """
    if not ledger.participants:
        raise AppError(
            ErrorCode.NO_PARTICIPANTS,
            "Add a participant before recording expenses.",
            422,
        )
    return ledger.participants[0].id
