"""
errors.py — AppError base class, its typed subclasses, and the error code registry.

Every error returned by the Racha API must use a code defined here.
Services and routes raise these, never bare exceptions or strings.

Rules:
  - Error codes are a contract with the client. They do not change once published.
  - Messages are for people and may be reworded freely.
  - None of these errors is fatal: each one is rendered by the global handler in
    app/__init__.py and the in-memory ledger is left exactly as it was.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Grouped by the HTTP status they are sent with. The values are what
# clients match on, so they never change.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Schema / Input Errors (400) ────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"
    INVALID_AMOUNT             = "INVALID_AMOUNT"
    INVALID_AMOUNT_PRECISION   = "INVALID_AMOUNT_PRECISION"
    EMPTY_SPLIT                = "EMPTY_SPLIT"
    INVALID_SERVICE_CHARGE     = "INVALID_SERVICE_CHARGE"

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    PARTICIPANT_NOT_FOUND      = "PARTICIPANT_NOT_FOUND"
    EXPENSE_NOT_FOUND          = "EXPENSE_NOT_FOUND"

    # ── Conflict Errors (409) ──────────────────────────────────────────────
    PARTICIPANT_IN_USE         = "PARTICIPANT_IN_USE"
    AI_REQUEST_IN_PROGRESS     = "AI_REQUEST_IN_PROGRESS"

    # ── Business Rule Violations (422) ────────────────────────────────────
    UNKNOWN_PARTICIPANT        = "UNKNOWN_PARTICIPANT"    # payer / consumer id not in ledger
    NO_PARTICIPANTS            = "NO_PARTICIPANTS"
    NOTHING_TO_CHARGE          = "NOTHING_TO_CHARGE"      # service charge on a zero total
    NO_EXPENSES                = "NO_EXPENSES"            # insights with an empty ledger

    # ── Upstream Errors (502) ──────────────────────────────────────────────
    EXTERNAL_SERVICE_ERROR     = "EXTERNAL_SERVICE_ERROR"

    # ── System Errors (500) ────────────────────────────────────────────────
    INTERNAL_ERROR             = "INTERNAL_ERROR"


# ── Typed errors ───────────────────────────────────────────────────────────
#
# The four kinds a user action can run into. They carry a fixed code and
# status so call sites only supply the message (and, where useful, the field).
# ──────────────────────────────────────────────────────────────────────────

class InvalidAmountError(AppError):
    """Non-positive expense or service-charge amount."""

    def __init__(
            self,
            message: str = "Amount must be greater than zero.",
            field: str | None = "amount",
    ) -> None:
        super().__init__(ErrorCode.INVALID_AMOUNT, message, 400, field=field)


class EmptySplitError(AppError):
    """No participant selected to share an expense."""

    def __init__(
            self,
            message: str = "Select at least one participant to split the expense.",
            field: str | None = "split_among",
    ) -> None:
        super().__init__(ErrorCode.EMPTY_SPLIT, message, 400, field=field)


class ReferentialIntegrityError(AppError):
    """Removal of a participant that an expense still refers to."""

    def __init__(self, participant_id: str) -> None:
        super().__init__(
            ErrorCode.PARTICIPANT_IN_USE,
            f"Participant {participant_id} has recorded expenses and cannot be removed.",
            409,
        )
        self.participant_id = participant_id


class ExternalServiceError(AppError):
    """The AI gateway failed or answered with something unusable."""

    def __init__(
            self,
            message: str = "Could not process the receipt. Try again or enter it manually.",
    ) -> None:
        super().__init__(ErrorCode.EXTERNAL_SERVICE_ERROR, message, 502)
