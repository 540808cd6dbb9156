from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)
DEFAULT_GRID_CACHE_SIZE = 32
DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class AppSettings:
    cors_allow_origins: tuple[str, ...]
    grid_cache_size: int
    log_level: str


def load_settings() -> AppSettings:
    origins_raw = os.environ.get("CORS_ALLOW_ORIGINS", "").strip()
    origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip()) or DEFAULT_CORS_ORIGINS

    cache_raw = os.environ.get("GRID_CACHE_SIZE", str(DEFAULT_GRID_CACHE_SIZE)).strip()
    try:
        grid_cache_size = int(cache_raw)
    except ValueError:
        logger.warning("Invalid GRID_CACHE_SIZE value: %s. Falling back to %d.", cache_raw, DEFAULT_GRID_CACHE_SIZE)
        grid_cache_size = DEFAULT_GRID_CACHE_SIZE
    if grid_cache_size < 1:
        logger.warning("GRID_CACHE_SIZE must be >= 1, got %d. Falling back to %d.", grid_cache_size, DEFAULT_GRID_CACHE_SIZE)
        grid_cache_size = DEFAULT_GRID_CACHE_SIZE

    log_level = os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in _LOG_LEVELS:
        logger.warning("Invalid LOG_LEVEL value: %s. Falling back to '%s'.", log_level, DEFAULT_LOG_LEVEL)
        log_level = DEFAULT_LOG_LEVEL

    return AppSettings(
        cors_allow_origins=origins,
        grid_cache_size=grid_cache_size,
        log_level=log_level,
    )
