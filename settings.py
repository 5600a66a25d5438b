from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple


_SOURCES_ENV = "SENSOR_SOURCES"
_BASE_DIR_ENV = "SENSOR_BASE_DIR"
_WINDOW_ENV = "SENSOR_MA_WINDOW"
_PM_WINDOW_ENV = "SENSOR_PM_MA_WINDOW"
_FETCH_TIMEOUT_ENV = "SENSOR_FETCH_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    sources: Tuple[str, ...]
    base_dir: str
    window: int
    pm_window: int
    fetch_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_sources(default: str) -> Tuple[str, ...]:
    raw = _read_str_env(_SOURCES_ENV, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _read_window(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_timeout(default: float) -> float:
    value = os.getenv(_FETCH_TIMEOUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        sources=_read_sources("data/readings.json"),
        base_dir=_read_str_env(_BASE_DIR_ENV, "."),
        window=_read_window(_WINDOW_ENV, 7),
        pm_window=_read_window(_PM_WINDOW_ENV, 9),
        fetch_timeout=_read_timeout(10.0),
        log_level=_read_log_level("INFO"),
    )
