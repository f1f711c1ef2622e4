from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_UNHEALTHY_PPM_ENV = "CO2_UNHEALTHY_PPM"
_MIN_PPM_ENV = "CO2_MIN_PPM"
_MAX_PPM_ENV = "CO2_MAX_PPM"
_SKIP_COLUMNS_ENV = "CO2_SKIP_COLUMNS"
_CSV_PATH_ENV = "CO2INFO_CSV_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    unhealthy_ppm: float
    min_ppm: float
    max_ppm: float
    skip_columns: int
    csv_path: Optional[str]
    log_level: str


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return float(candidate)
    except ValueError:
        return default


def _read_skip_columns(default: int) -> int:
    value = os.getenv(_SKIP_COLUMNS_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def is_log_level(name: str) -> bool:
    """Return True when ``name`` is a level name known to ``logging``."""
    return isinstance(logging.getLevelName(name.strip().upper()), int)


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    if not is_log_level(candidate):
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    min_ppm = _read_float_env(_MIN_PPM_ENV, 0.0)
    max_ppm = _read_float_env(_MAX_PPM_ENV, 10000.0)
    if min_ppm > max_ppm:
        min_ppm, max_ppm = 0.0, 10000.0
    return Settings(
        unhealthy_ppm=_read_float_env(_UNHEALTHY_PPM_ENV, 1000.0),
        min_ppm=min_ppm,
        max_ppm=max_ppm,
        skip_columns=_read_skip_columns(1),
        csv_path=_read_optional_env(_CSV_PATH_ENV, None),
        log_level=_read_log_level("WARNING"),
    )
