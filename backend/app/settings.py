from __future__ import annotations

import os
from dataclasses import dataclass


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _list_env(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_env: str
    max_existing_candidates: int
    likely_duplicate_min_confidence: int
    log_level: str
    cors_allow_origins: tuple[str, ...]


def load_settings() -> Settings:
    return Settings(
        app_env=os.getenv("APP_ENV", "development"),
        max_existing_candidates=max(1, min(5000, _int_env("MAX_EXISTING_CANDIDATES", 500))),
        likely_duplicate_min_confidence=max(
            50, min(100, _int_env("LIKELY_DUPLICATE_MIN_CONFIDENCE", 70))
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        cors_allow_origins=_list_env("CORS_ALLOW_ORIGINS", "*") or ("*",),
    )
