"""
Unit tests for config.py helpers and the production guard.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from racha import config


def test_first_non_empty_env_prefers_earlier_names(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("API_KEY", "alias-key")

    assert config._first_non_empty_env("GEMINI_API_KEY", "API_KEY", default="x") == "alias-key"


def test_first_non_empty_env_default(monkeypatch):
    monkeypatch.delenv("RACHA_UNSET_VAR", raising=False)
    assert config._first_non_empty_env("RACHA_UNSET_VAR", default="fallback") == "fallback"


def test_parse_list_env_trims_entries(monkeypatch):
    monkeypatch.setenv("SEED_PARTICIPANTS", " Ana, ,Bruno ")
    assert config._parse_list_env("SEED_PARTICIPANTS", default="Me") == ["Ana", "Bruno"]


@pytest.mark.parametrize("raw, expected", [
    ("5, 10,20", (5, 10, 20)),
    ("abc,-3,8", (8,)),
    ("nope", (10, 12, 15)),
])
def test_parse_percentages_env(monkeypatch, raw, expected):
    monkeypatch.setenv("SERVICE_CHARGE_PERCENTAGES", raw)
    assert config._parse_percentages_env(
        "SERVICE_CHARGE_PERCENTAGES", default="10,12,15",
    ) == expected


def _app_with(**settings):
    return SimpleNamespace(config=settings)


def test_production_guard_rejects_placeholder_secret():
    app = _app_with(SECRET_KEY="change-me-in-production", SERVICE_CHARGE_PERCENTAGES=(10,))
    with pytest.raises(ValueError):
        config.validate_production_config(app)


def test_production_guard_rejects_empty_percentages():
    app = _app_with(SECRET_KEY="s3cret", SERVICE_CHARGE_PERCENTAGES=())
    with pytest.raises(ValueError):
        config.validate_production_config(app)


def test_production_guard_accepts_real_settings():
    app = _app_with(SECRET_KEY="s3cret", SERVICE_CHARGE_PERCENTAGES=(10, 12, 15))
    config.validate_production_config(app)


def test_testing_config_is_isolated():
    assert config.TestingConfig.SEED_PARTICIPANTS == []
    assert config.config_by_name["testing"] is config.TestingConfig
