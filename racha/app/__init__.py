"""
app/__init__.py — Racha application factory.

    flask --app "racha.app:create_app('development')" run

create_app() builds a self-contained app: its own config, its own in-memory
session (Ledger + UIState), the /api/v1 blueprints and the JSON error
envelope. Nothing is built at import time, so every test can ask for a
fresh app and get an empty ledger.
"""

from __future__ import annotations

import logging
import traceback
from decimal import Decimal

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from racha.config import config_by_name, validate_production_config


_LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(name)s: %(message)s"

_API_PREFIX = "/api/v1"


# ── JSON ───────────────────────────────────────────────────────────────────

class DecimalJSONProvider(DefaultJSONProvider):
    """
    Renders any Decimal that reaches jsonify() as a two-decimal money string,
    e.g. the receipt draft amount: Decimal("113.9") -> "113.90".
    """

    def default(self, o):
        if isinstance(o, Decimal):
            from racha.app.services.balance_service import to_money_str
            return to_money_str(o)
        return super().default(o)


# ── Factory ────────────────────────────────────────────────────────────────

def create_app(config_name: str = "development") -> Flask:
    """
    Args:
        config_name: "development", "testing" or "production". Unknown names
                     fall back to development.
    """
    app = Flask(__name__)
    app.json_provider_class = DecimalJSONProvider
    app.json = DecimalJSONProvider(app)

    app.config.from_object(config_by_name.get(config_name, config_by_name["development"]))
    if config_name == "production":
        validate_production_config(app)

    _configure_logging(app)

    from racha.app.extensions import store
    store.init_app(app)

    _register_blueprints(app)
    _register_error_handlers(app)
    _register_cors(app)

    app.logger.debug("Racha app created with %s config.", config_name)
    return app


def _configure_logging(app: Flask) -> None:
    """LOG_LEVEL applies to app.logger and to the `racha` service loggers."""
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    app.logger.setLevel(level)
    package_logger = logging.getLogger("racha")
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        package_logger.addHandler(handler)


def _register_blueprints(app: Flask) -> None:
    from racha.app.routes.ai import ai_bp
    from racha.app.routes.balances import balances_bp
    from racha.app.routes.expenses import expenses_bp
    from racha.app.routes.participants import participants_bp
    from racha.app.routes.service_charge import service_charge_bp
    from racha.app.routes.session import session_bp

    for blueprint, path in (
        (participants_bp,   "/participants"),
        (expenses_bp,       "/expenses"),
        (service_charge_bp, "/service-charge"),
        (balances_bp,       "/balances"),
        (session_bp,        "/session"),
        (ai_bp,             "/ai"),
    ):
        app.register_blueprint(blueprint, url_prefix=_API_PREFIX + path)


# ── Error envelope ─────────────────────────────────────────────────────────

def _register_error_handlers(app: Flask) -> None:
    """
    Every failure leaves as {"error": {"code", "message", "field"?}}.

      AppError        → its own code and status
      ValidationError → 400, first field error only
      HTTPException   → returned untouched (unknown route, wrong method)
      anything else   → 500 INTERNAL_ERROR, traceback to the log only
    """
    from racha.app.errors import AppError, ErrorCode

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        if error.http_status >= 500:
            app.logger.error("%r", error)
        else:
            app.logger.info("Rejected request: %r", error)
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        field, raw_message = _first_validation_error(error.messages)
        code = _classify_message(raw_message, ErrorCode)

        # Schemas raise some errors with the bare code as the message.
        message = raw_message
        if raw_message == code:
            message = _CODE_MESSAGES.get(code, "Invalid input.")

        body = {"code": code, "message": message}
        if field is not None:
            body["field"] = field
        return jsonify({"error": body}), 400

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error

        app.logger.error(
            "Unhandled %s on %s %s\n%s",
            type(error).__name__,
            request.method,
            request.path,
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "Something went wrong on our side. Please try again.",
            }
        }), 500


def _first_validation_error(messages) -> tuple[str | None, str]:
    """
    Flattens marshmallow's error structure to (field, message).

    {"amount": ["..."]}               → ("amount", "...")
    {"split_among": {1: ["..."]}}     → ("split_among", "...")
    {"_schema": ["..."]}              → (None, "...")
    """
    if isinstance(messages, list):
        return None, str(messages[0]) if messages else "Invalid input."

    if not isinstance(messages, dict) or not messages:
        return None, "Invalid input."

    field_name, errors = next(iter(messages.items()))
    field = None if field_name == "_schema" else field_name

    while isinstance(errors, dict) and errors:
        errors = next(iter(errors.values()))
    if isinstance(errors, list):
        errors = errors[0] if errors else "Invalid value."
    return field, str(errors)


def _classify_message(raw_message: str, error_codes) -> str:
    if raw_message in vars(error_codes).values():
        return raw_message
    if raw_message.startswith("Missing data for required field"):
        return error_codes.MISSING_FIELD
    return error_codes.INVALID_FIELD


_CODE_MESSAGES = {
    "INVALID_AMOUNT": "Amount must be at most 9999999999.99.",
    "INVALID_AMOUNT_PRECISION": "Amount must have at most 2 decimal places.",
    "INVALID_SERVICE_CHARGE": "Send exactly one of 'percentage' or 'manual_amount'.",
}


# ── Local development ──────────────────────────────────────────────────────

def _register_cors(app: Flask) -> None:
    """Permissive CORS in DEBUG/TESTING so a local web client can call the API."""
    if not (app.config.get("DEBUG") or app.config.get("TESTING")):
        return

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = request.headers.get("Origin", "*")
        response.headers["Vary"] = "Origin"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response
