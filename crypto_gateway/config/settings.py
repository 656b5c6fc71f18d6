# crypto_gateway/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


def parse_csv(value: str | None, default: List[str]) -> List[str]:
    if not value:
        return default
    items = [x.strip() for x in value.split(",")]
    return [x for x in items if x]


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass(frozen=True)
class Settings:
    COINGECKO_BASE_URL: str
    COINGECKO_TIMEOUT: float
    COINGECKO_MAX_ATTEMPTS: int
    COINGECKO_RETRY_DELAY_MS: int
    APP_DEBUG: bool
    CORS_ALLOW_ORIGINS: List[str]
    LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            COINGECKO_BASE_URL=os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3"),
            COINGECKO_TIMEOUT=parse_float(os.getenv("COINGECKO_TIMEOUT"), 10.0),
            COINGECKO_MAX_ATTEMPTS=max(1, parse_int(os.getenv("COINGECKO_MAX_ATTEMPTS"), 3)),
            COINGECKO_RETRY_DELAY_MS=max(0, parse_int(os.getenv("COINGECKO_RETRY_DELAY_MS"), 100)),
            APP_DEBUG=parse_bool(os.getenv("APP_DEBUG"), False),
            CORS_ALLOW_ORIGINS=parse_csv(os.getenv("CORS_ALLOW_ORIGINS"), ["*"]),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
