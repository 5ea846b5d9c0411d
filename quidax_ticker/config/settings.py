# quidax_ticker/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass


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


LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
LOG_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def parse_log_level(value: str | None, default: str) -> str:
    """
    Returns a level name both `logging` and uvicorn accept:
      - "warn" -> "WARNING"
      - "fatal" -> "CRITICAL"
    """
    if value is None or value.strip() == "":
        return default
    v = value.strip().upper()
    v = LOG_LEVEL_ALIASES.get(v, v)
    if v not in LOG_LEVELS:
        raise ValueError(f"Bad LOG_LEVEL: {value}")
    return v


def parse_prefix(value: str | None, default: str) -> str:
    """
    Normalizes a route prefix:
      - "api/v1/markets/" -> "/api/v1/markets"
      - "" or "/"         -> ""
    """
    if value is None:
        return default
    v = value.strip().strip("/")
    return f"/{v}" if v else ""


@dataclass(frozen=True)
class Settings:
    QUIDAX_BASE_URL: str
    API_PREFIX: str
    UPSTREAM_TIMEOUT_SECONDS: float
    TICKER_NOT_FOUND_AS_404: bool
    LOG_LEVEL: str
    HOST: str
    PORT: int

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            QUIDAX_BASE_URL=os.getenv("QUIDAX_BASE_URL", "https://app.quidax.io").rstrip("/"),
            API_PREFIX=parse_prefix(os.getenv("API_PREFIX"), "/api/v1/markets"),
            UPSTREAM_TIMEOUT_SECONDS=parse_float(os.getenv("UPSTREAM_TIMEOUT_SECONDS"), 5.0),
            TICKER_NOT_FOUND_AS_404=parse_bool(os.getenv("TICKER_NOT_FOUND_AS_404"), False),
            LOG_LEVEL=parse_log_level(os.getenv("LOG_LEVEL"), "INFO"),
            HOST=os.getenv("HOST", "127.0.0.1"),
            PORT=parse_int(os.getenv("PORT"), 8000),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
