"""
middleware/busy_guard.py — Single-flight decorator for the async AI routes.

The @single_flight(flag) decorator:
  1. Reads the named boolean flag on the session's UIState
  2. Raises AI_REQUEST_IN_PROGRESS (409) if it is already set
  3. Sets the flag, awaits the view, and clears the flag however the view ends

This is the server-side counterpart of the client disabling its button while
a receipt is being parsed: one outstanding call per affordance, no queueing,
no cancellation. The flag is visible to clients through GET /session.

Strict responsibility boundary:
  - The decorator only manages the flag. Gateway errors raised by the view
    propagate unchanged to the global error handler.
"""

from __future__ import annotations

import functools
import threading
from typing import Awaitable, Callable

from racha.app.errors import AppError, ErrorCode
from racha.app.extensions import store


# Serialises the test-and-set across request threads.
_flag_lock = threading.Lock()


def single_flight(flag: str) -> Callable:
    """
    Route decorator guarding an async view with a UIState busy flag.

    Usage:
        @ai_bp.route("/receipt", methods=["POST"])
        @single_flight("is_parsing_receipt")
        async def parse_receipt():
            ...
    """
    def decorator(f: Callable[..., Awaitable]) -> Callable[..., Awaitable]:
        @functools.wraps(f)
        async def decorated(*args, **kwargs):
            ui = store.ui
            with _flag_lock:
                if getattr(ui, flag):
                    raise AppError(
                        ErrorCode.AI_REQUEST_IN_PROGRESS,
                        "A request of this kind is already in progress. Wait for it to finish.",
                        409,
                    )
                setattr(ui, flag, True)
            try:
                return await f(*args, **kwargs)
            finally:
                setattr(ui, flag, False)

        return decorated

    return decorator
