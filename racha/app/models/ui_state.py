"""
models/ui_state.py — Interaction state that sits next to the Ledger.

Everything here is about the client's affordances, not about money:
busy flags for the two AI calls, the last insights text, the last
receipt-derived expense draft, and the remembered service-charge payer.
The settlement engine never reads it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class UIState:
    is_parsing_receipt: bool = False
    is_generating_insights: bool = False
    insights: str | None = None
    expense_draft: dict | None = None
    service_charge_payer_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "is_parsing_receipt": self.is_parsing_receipt,
            "is_generating_insights": self.is_generating_insights,
            "insights": self.insights,
            "expense_draft": self.expense_draft,
            "service_charge_payer_id": self.service_charge_payer_id,
        }
