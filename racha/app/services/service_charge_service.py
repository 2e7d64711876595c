"""
services/service_charge_service.py — Service charge / tip as a synthetic expense.

A service charge is an ordinary Expense built from the current total:
  - amount       = total * percentage / 100, or a manual value
  - paid_by      = the chosen payer
  - split_among  = every current participant
  - category     = service_charge

After creation it flows through the settlement engine like any other
expense; balance_service has no special case for it.

Layer rules:
  - No Flask imports.
  - Creation goes through ledger_service.add_expense so the usual expense
    invariants (positive amount, known ids, non-empty split) still apply.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from racha.app.errors import AppError, ErrorCode, InvalidAmountError
from racha.app.models.expense import MAX_AMOUNT, Category, Expense
from racha.app.models.ledger import Ledger
from racha.app.models.ui_state import UIState
from racha.app.services import ledger_service


DEFAULT_PERCENTAGES = (10, 12, 15)


def compute_service_charge(
        total: Decimal,
        percentage: int | None = None,
        manual_amount: Decimal | None = None,
) -> tuple[Decimal, str]:
    """
    Returns (amount, expense name) for a service charge on `total`.

    Exactly one of percentage / manual_amount must be given; the caller
    (schema) guarantees that.

    Raises:
      AppError(NOTHING_TO_CHARGE, 422) — total is zero.
      InvalidAmountError (400)         — the resulting amount is <= 0 or
                                         above MAX_AMOUNT.
    """
    if total <= 0:
        raise AppError(
            ErrorCode.NOTHING_TO_CHARGE,
            "Add expenses before applying a service charge.",
            422,
        )

    if manual_amount is not None:
        amount = manual_amount
        name = "Service charge (manual)"
    else:
        amount = total * Decimal(percentage or 0) / Decimal(100)
        name = f"Service charge ({percentage}%)"

    if amount <= 0:
        raise InvalidAmountError(
            "Service charge must be greater than zero.",
            field="manual_amount" if manual_amount is not None else "percentage",
        )
    if amount > MAX_AMOUNT:
        raise InvalidAmountError(
            f"Service charge must be at most {MAX_AMOUNT}.",
            field="manual_amount" if manual_amount is not None else "percentage",
        )
    return amount, name


def resolve_payer(ledger: Ledger, ui: UIState, paid_by: str | None) -> str:
    """
    Picks who pays the service charge.

    An explicit id is remembered for next time. Otherwise the remembered
    payer is used while they are still in the ledger, falling back to the
    first participant.
    """
    if paid_by is not None:
        ledger_service.require_known_participant(ledger, paid_by, field="paid_by")
        ui.service_charge_payer_id = paid_by
        return paid_by

    remembered = ui.service_charge_payer_id
    if remembered is not None and ledger.get_participant(remembered) is not None:
        return remembered
    return ledger_service.default_payer_id(ledger)


def add_service_charge(
        ledger: Ledger,
        ui: UIState,
        paid_by: str | None = None,
        percentage: int | None = None,
        manual_amount: Decimal | None = None,
        allowed_percentages: Iterable[int] = DEFAULT_PERCENTAGES,
) -> Expense:
    """
    Appends a service-charge expense split among everyone.

    Raises:
      AppError(INVALID_SERVICE_CHARGE, 400) — percentage not offered.
      AppError(NOTHING_TO_CHARGE, 422)      — current total is zero.
      InvalidAmountError (400)              — computed amount <= 0.
      AppError(UNKNOWN_PARTICIPANT, 422)    — paid_by not in the ledger.
    """
    allowed = tuple(allowed_percentages)
    if manual_amount is None and percentage not in allowed:
        raise AppError(
            ErrorCode.INVALID_SERVICE_CHARGE,
            f"percentage must be one of {', '.join(str(p) for p in allowed)}.",
            400,
            field="percentage",
        )

    amount, name = compute_service_charge(
        ledger.total_spent(), percentage, manual_amount,
    )
    payer_id = resolve_payer(ledger, ui, paid_by)

    return ledger_service.add_expense(
        ledger,
        name=name,
        amount=amount,
        paid_by=payer_id,
        split_among=ledger.participant_ids(),
        category=Category.SERVICE_CHARGE.value,
        expense_id=f"tip-{ledger.next_expense_id()}",
    )
