from __future__ import annotations

import pytest

from crypto_gateway.config import settings as settings_module
from crypto_gateway.config.settings import Settings, parse_bool, parse_csv, parse_float, parse_int

_ENV_KEYS = (
    "COINGECKO_BASE_URL",
    "COINGECKO_TIMEOUT",
    "COINGECKO_MAX_ATTEMPTS",
    "COINGECKO_RETRY_DELAY_MS",
    "APP_DEBUG",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.from_env()
    assert s.COINGECKO_BASE_URL == "https://api.coingecko.com/api/v3"
    assert s.COINGECKO_TIMEOUT == 10.0
    assert s.COINGECKO_MAX_ATTEMPTS == 3
    assert s.COINGECKO_RETRY_DELAY_MS == 100
    assert s.APP_DEBUG is False
    assert s.CORS_ALLOW_ORIGINS == ["*"]
    assert s.LOG_LEVEL == "INFO"


def test_env_overrides(clean_env):
    clean_env.setenv("COINGECKO_BASE_URL", "http://localhost:9999/v3")
    clean_env.setenv("COINGECKO_TIMEOUT", "2.5")
    clean_env.setenv("COINGECKO_MAX_ATTEMPTS", "0")
    clean_env.setenv("APP_DEBUG", "yes")
    clean_env.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000, https://app.example.com")
    clean_env.setenv("LOG_LEVEL", "debug")

    s = Settings.from_env()
    assert s.COINGECKO_BASE_URL == "http://localhost:9999/v3"
    assert s.COINGECKO_TIMEOUT == 2.5
    assert s.COINGECKO_MAX_ATTEMPTS == 1
    assert s.APP_DEBUG is True
    assert s.CORS_ALLOW_ORIGINS == ["http://localhost:3000", "https://app.example.com"]
    assert s.LOG_LEVEL == "DEBUG"


def test_bad_number_raises(clean_env):
    clean_env.setenv("COINGECKO_TIMEOUT", "ten")
    with pytest.raises(ValueError):
        Settings.from_env()


def test_get_settings_is_cached(clean_env):
    clean_env.setattr(settings_module, "_settings", None)
    first = settings_module.get_settings()
    clean_env.setenv("APP_DEBUG", "true")
    assert settings_module.get_settings() is first


def test_parsers():
    assert parse_bool(None, True) is True
    assert parse_bool(" On ", False) is True
    assert parse_bool("0", True) is False
    assert parse_int("", 7) == 7
    assert parse_float(None, 1.5) == 1.5
    assert parse_csv(" a, ,b ", ["x"]) == ["a", "b"]
    assert parse_csv("", ["x"]) == ["x"]
