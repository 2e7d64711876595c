"""
services/share_service.py — Plain-text settlement summary for messaging apps.

The text is a pure function of the settlement engine's output (summary +
transfers) plus the currency label. Amounts use balance_service.to_money_str,
so the same ledger always yields byte-identical text.
"""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from racha.app.models.participant import Participant
from racha.app.services.balance_service import (
    SETTLEMENT_TOLERANCE,
    to_money_str,
)


WHATSAPP_URL = "https://wa.me/?text={text}"

_HEADER = "*📊 Racha summary*"
_FOOTER = "_Generated by Racha_ 🐾"


def _status_line(row: dict, currency: str) -> str:
    net = row["net"]
    if net > SETTLEMENT_TOLERANCE:
        status = f"Receives {currency} {to_money_str(net)}"
    elif net < -SETTLEMENT_TOLERANCE:
        status = f"Pays {currency} {to_money_str(abs(net))}"
    else:
        status = "Settled"
    return f"👤 {row['name']}: {status}"


def build_share_message(
        summary: Sequence[dict],
        transfers: Sequence[dict],
        participants: Sequence[Participant],
        currency: str,
) -> str:
    """
    Renders the per-participant statement and the required payments.

    Args:
        summary:   balance_service.compute_summary() output.
        transfers: balance_service.compute_transfers() output.
    """
    names = {p.id: p.name for p in participants}

    lines = [_HEADER, "", "*Individual statement:*"]
    lines.extend(_status_line(row, currency) for row in summary)
    lines.append("")

    if not transfers:
        lines.append("✅ *All settled! Nobody owes anything.*")
    else:
        lines.append("*💸 Required payments:*")
        for txn in transfers:
            payer = names.get(txn["from_id"], "Unknown")
            receiver = names.get(txn["to_id"], "Unknown")
            lines.append(
                f"🔴 *{payer}* pays *{receiver}*: {currency} {to_money_str(txn['amount'])}"
            )

    lines.append("")
    lines.append(_FOOTER)
    return "\n".join(lines)


def build_share_url(message: str) -> str:
    """Deep link that opens WhatsApp with `message` prefilled."""
    return WHATSAPP_URL.format(text=quote(message, safe=""))
