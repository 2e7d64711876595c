"""
services/balance_service.py — Net balances, per-participant summary, and
greedy debt settlement.

This file is the SINGLE SOURCE OF TRUTH for how balances are computed.
Every view of the money (balance screen, share text, session dashboard)
consumes the output of this module; none of them recompute it.

Layer rules:
  - No Flask imports. No current_app, request, g, or HTTP knowledge.
  - The engine functions take (participants, expenses) sequences — a
    LedgerSnapshot — and return plain dicts and lists. They never mutate
    their input and never raise.
  - Participant ids are opaque keys of a dict, never positions in a list.

Conservation:
  - sum(net) over all participants is zero up to Decimal division residue
    (< 1e-9). get_balance_response() checks this before answering.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from racha.app.errors import AppError, ErrorCode
from racha.app.models.expense import Expense
from racha.app.models.ledger import Ledger, LedgerSnapshot
from racha.app.models.participant import Participant


# Balances within one cent of zero are treated as settled. Repeated division
# (100 / 3) leaves residue far below this.
SETTLEMENT_TOLERANCE = Decimal("0.01")

# Largest |sum(net)| accepted as "zero" by the integrity check.
CONSERVATION_TOLERANCE = Decimal("1e-9")

_CENT = Decimal("0.01")
_ZERO = Decimal("0")


def to_money_str(value: Decimal) -> str:
    """Fixed-point, two decimals, half-up: Decimal("33.335") -> "33.34"."""
    quantized = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    if quantized == _ZERO:
        quantized = abs(quantized)  # no "-0.00"
    return f"{quantized:.2f}"


# ── Core algorithms ────────────────────────────────────────────────────────

def _paid_and_consumed(
        participants: Sequence[Participant],
        expenses: Sequence[Expense],
) -> tuple[dict[str, Decimal], dict[str, Decimal]]:
    """
    Accumulates, per participant id, what they fronted and what they consumed.

    Only ids of known participants are tracked; the Ledger already refuses
    expenses that name anyone else.
    """
    paid: dict[str, Decimal] = {p.id: _ZERO for p in participants}
    consumed: dict[str, Decimal] = {p.id: _ZERO for p in participants}

    for expense in expenses:
        if expense.paid_by in paid:
            paid[expense.paid_by] += expense.amount

        split_count = len(expense.split_among)
        if split_count == 0:
            continue
        share = expense.amount / split_count
        for consumer_id in expense.split_among:
            if consumer_id in consumed:
                consumed[consumer_id] += share

    return paid, consumed


def compute_net_balances(
        participants: Sequence[Participant],
        expenses: Sequence[Expense],
) -> dict[str, Decimal]:
    """
    Returns {participant_id: paid - consumed} for every participant.

    Positive = is owed money. Negative = owes money.
    A participant with no expense involvement has a net of exactly 0.
    """
    paid, consumed = _paid_and_consumed(participants, expenses)
    return {p.id: paid[p.id] - consumed[p.id] for p in participants}


def compute_summary(
        participants: Sequence[Participant],
        expenses: Sequence[Expense],
) -> list[dict]:
    """
    Per-participant statement in participant insertion order.

    Returns:
        List of {"participant_id", "name", "paid", "consumed", "net"};
        amounts are unrounded Decimals.
    """
    paid, consumed = _paid_and_consumed(participants, expenses)
    return [
        {
            "participant_id": p.id,
            "name": p.name,
            "paid": paid[p.id],
            "consumed": consumed[p.id],
            "net": paid[p.id] - consumed[p.id],
        }
        for p in participants
    ]


def settle_balances(
        participants: Sequence[Participant],
        net_balances: dict[str, Decimal],
) -> list[dict]:
    """
    Greedy two-pointer settlement over a net-balance vector.

    Debtors (net < -0.01) are taken most-negative first, creditors
    (net > 0.01) most-positive first; ties keep participant order. Each step
    moves min(debt, credit) from the current debtor to the current creditor
    and advances whichever side has dropped below one cent.

    Not guaranteed to produce the fewest transfers — it is an approximation
    whose output depends only on the sort order, so it is reproducible.
    Sub-cent residue left over at the end is dropped.

    Returns:
        List of {"from_id", "to_id", "amount"}; every amount > 0.01.
        An empty list means nobody owes anybody.
    """
    remaining = {p.id: net_balances.get(p.id, _ZERO) for p in participants}

    debtors = sorted(
        (p.id for p in participants if remaining[p.id] < -SETTLEMENT_TOLERANCE),
        key=lambda pid: remaining[pid],
    )
    creditors = sorted(
        (p.id for p in participants if remaining[p.id] > SETTLEMENT_TOLERANCE),
        key=lambda pid: remaining[pid],
        reverse=True,
    )

    transfers: list[dict] = []
    i = j = 0

    while i < len(debtors) and j < len(creditors):
        debtor_id = debtors[i]
        creditor_id = creditors[j]

        amount = min(abs(remaining[debtor_id]), remaining[creditor_id])
        if amount > SETTLEMENT_TOLERANCE:
            transfers.append({
                "from_id": debtor_id,
                "to_id": creditor_id,
                "amount": amount,
            })

        remaining[debtor_id] += amount
        remaining[creditor_id] -= amount

        if abs(remaining[debtor_id]) < SETTLEMENT_TOLERANCE:
            i += 1
        if remaining[creditor_id] < SETTLEMENT_TOLERANCE:
            j += 1

    return transfers


def compute_transfers(
        participants: Sequence[Participant],
        expenses: Sequence[Expense],
) -> list[dict]:
    """Net balances from the expenses, then settle_balances()."""
    return settle_balances(participants, compute_net_balances(participants, expenses))


def compute_settlement(snapshot: LedgerSnapshot) -> dict:
    """
    Combined engine call: {"summary": [...], "transfers": [...]}.

    Both halves come from the same snapshot, so they always agree.
    """
    participants, expenses = snapshot
    return {
        "summary": compute_summary(participants, expenses),
        "transfers": compute_transfers(participants, expenses),
    }


# ── Presentation payload ───────────────────────────────────────────────────

def balance_status(net: Decimal) -> str:
    """'owed' / 'owes' / 'settled' using the one-cent threshold."""
    if net > SETTLEMENT_TOLERANCE:
        return "owed"
    if net < -SETTLEMENT_TOLERANCE:
        return "owes"
    return "settled"


def get_balance_response(ledger: Ledger) -> dict:
    """
    Builds the full payload for GET /balances.

    Runs the engine on a snapshot, enriches transfers with names, renders
    every amount as a two-decimal string, and checks conservation.

    Raises:
        AppError(INTERNAL_ERROR, 500) -- sum of net balances is not zero.
    """
    snapshot = ledger.snapshot()
    settlement = compute_settlement(snapshot)
    names = {p.id: p.name for p in snapshot.participants}

    balance_sum = sum((row["net"] for row in settlement["summary"]), _ZERO)
    if abs(balance_sum) > CONSERVATION_TOLERANCE:
        # Only reachable if the ledger holds an expense naming an unknown
        # participant, i.e. the session data is corrupt.
        raise AppError(
            ErrorCode.INTERNAL_ERROR,
            f"Balance integrity check failed: sum was {balance_sum} (expected 0).",
            500,
        )

    return {
        "total_spent": to_money_str(ledger.total_spent()),
        "balances": [
            {
                "participant_id": row["participant_id"],
                "name": row["name"],
                "paid": to_money_str(row["paid"]),
                "consumed": to_money_str(row["consumed"]),
                "net": to_money_str(row["net"]),
                "status": balance_status(row["net"]),
            }
            for row in settlement["summary"]
        ],
        "transfers": [
            {
                "from_id": t["from_id"],
                "from_name": names.get(t["from_id"], t["from_id"]),
                "to_id": t["to_id"],
                "to_name": names.get(t["to_id"], t["to_id"]),
                "amount": to_money_str(t["amount"]),
            }
            for t in settlement["transfers"]
        ],
        "balance_sum": to_money_str(balance_sum),
    }
