"""
extensions.py — Flask extension singletons.

Holds the session store as a module-level object so it can be imported
anywhere without creating circular dependencies.

Pattern:
    1. Create the extension object here (no app attached yet).
    2. Call init_app(app) inside the app factory in app/__init__.py.
    3. Import `store` from here wherever needed.

    from racha.app.extensions import store

Do not build the Ledger at import time — every app instance (and therefore
every test) must get its own, empty session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from flask import Flask, current_app

from racha.app.models.ledger import Ledger
from racha.app.models.ui_state import UIState
from racha.app.services import ledger_service


logger = logging.getLogger(__name__)

_EXTENSION_KEY = "racha_session"


@dataclass
class SessionState:
    ledger: Ledger = field(default_factory=Ledger)
    ui: UIState = field(default_factory=UIState)


class SessionStore:
    """
    Keeps one SessionState per Flask app in `app.extensions`.

    The state lives as long as the app process; nothing is written to disk.
    """

    def init_app(self, app: Flask) -> None:
        state = SessionState()
        app.extensions[_EXTENSION_KEY] = state

        for name in app.config.get("SEED_PARTICIPANTS", []):
            ledger_service.add_participant(state.ledger, name)
        logger.debug(
            "Session initialised with %d seed participant(s).",
            len(state.ledger.participants),
        )

    @property
    def state(self) -> SessionState:
        return current_app.extensions[_EXTENSION_KEY]

    @property
    def ledger(self) -> Ledger:
        return self.state.ledger

    @property
    def ui(self) -> UIState:
        return self.state.ui


store = SessionStore()
