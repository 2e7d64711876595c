import os
from pathlib import Path

from dotenv import load_dotenv


_PACKAGE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _PACKAGE_DIR.parent

_PLACEHOLDER_SECRET = "change-me-in-production"

# Root .env is canonical; racha/.env remains a fallback for local overrides.
load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv(_PACKAGE_DIR / ".env")


def _first_non_empty_env(*names: str, default: str) -> str:
    """First of `names` that is set and non-empty, else `default`."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def _parse_list_env(*names: str, default: str) -> list[str]:
    """Splits a comma-separated env var into trimmed, non-empty entries."""
    raw = _first_non_empty_env(*names, default=default)
    return [part.strip() for part in raw.split(",") if part.strip()]


def _parse_percentages_env(*names: str, default: str) -> tuple[int, ...]:
    """
    Parses the allowed service-charge percentages, e.g. "10,12,15".

    Entries that are not positive integers are ignored; if nothing valid
    remains the default is used.
    """
    values = []
    for part in _parse_list_env(*names, default=default):
        try:
            pct = int(part)
        except ValueError:
            continue
        if pct > 0:
            values.append(pct)
    if not values:
        return tuple(int(p) for p in default.split(","))
    return tuple(values)


class BaseConfig:

    SECRET_KEY: str = _first_non_empty_env("SECRET_KEY", default=_PLACEHOLDER_SECRET)

    JSON_SORT_KEYS: bool = False

    # Gemini credentials. API_KEY is accepted as an alias; GEMINI_API_KEY wins.
    GEMINI_API_KEY: str = _first_non_empty_env(
        "GEMINI_API_KEY",
        "API_KEY",
        default="",
    )
    GEMINI_MODEL: str = _first_non_empty_env(
        "GEMINI_MODEL",
        default="gemini-2.5-flash",
    )

    # Display label only; amounts are never converted.
    CURRENCY_LABEL: str = _first_non_empty_env("CURRENCY_LABEL", default="R$")

    # Participants created when the app starts (the "me" entry).
    SEED_PARTICIPANTS: list[str] = _parse_list_env(
        "SEED_PARTICIPANTS",
        default="Me",
    )

    SERVICE_CHARGE_PERCENTAGES: tuple[int, ...] = _parse_percentages_env(
        "SERVICE_CHARGE_PERCENTAGES",
        default="10,12,15",
    )

    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG:   bool = True
    TESTING: bool = False
    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="DEBUG")


class TestingConfig(BaseConfig):

    DEBUG:   bool = True
    TESTING: bool = True

    # Tests start from an empty ledger and never reach the real gateway.
    SEED_PARTICIPANTS: list[str] = []
    GEMINI_API_KEY: str = "test-key"
    CURRENCY_LABEL: str = "R$"
    SERVICE_CHARGE_PERCENTAGES: tuple[int, ...] = (10, 12, 15)
    LOG_LEVEL: str = "WARNING"


class ProductionConfig(BaseConfig):

    DEBUG:   bool = False
    TESTING: bool = False


def validate_production_config(app) -> None:
    """
    Refuses to start production with placeholder settings. Raises ValueError.

    A missing GEMINI_API_KEY is not fatal: the ledger works without the AI
    gateway, whose routes then answer EXTERNAL_SERVICE_ERROR.
    """
    if app.config.get("SECRET_KEY") == _PLACEHOLDER_SECRET:
        raise ValueError("Set SECRET_KEY before running Racha in production.")
    if not app.config.get("SERVICE_CHARGE_PERCENTAGES"):
        raise ValueError("SERVICE_CHARGE_PERCENTAGES must list at least one value.")


# create_app() picks one of these by name; FLASK_ENV selects ActiveConfig.
config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
}

ActiveConfig: type[BaseConfig] = config_by_name.get(
    os.getenv("FLASK_ENV", "development"),
    DevelopmentConfig,
)
