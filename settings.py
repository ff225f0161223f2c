"""
Runtime settings, read from the environment (and a local .env file if present).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CAR_ID_PATTERN = r"^[A-Z]{2}-\d{2}-[A-Z]{2}-\d{4}$"
CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 3000
    environment: str = "development"
    api_prefix: str = "/api"
    api_version: str = "v1"
    cors_origin: str = "*"
    log_level: str = "INFO"
    log_format: str = "text"    # "text" / "json"
    max_capacity: int = 1000
    car_id_pattern: str = DEFAULT_CAR_ID_PATTERN
    rate_limit_max: int = 100
    rate_limit_window_minutes: int = 15
    cors_methods: list[str] = field(default_factory=lambda: list(CORS_METHODS))
    cors_headers: list[str] = field(default_factory=lambda: list(CORS_HEADERS))

    @property
    def debug(self) -> bool:
        return self.environment == "development"

    @property
    def rate_limit(self) -> str:
        return f"{self.rate_limit_max} per {self.rate_limit_window_minutes} minutes"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using %d", name, raw, default)
        return default


def _level_env(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name, default).strip().upper()
    # getLevelName maps known names to their int value
    if not isinstance(logging.getLevelName(raw), int):
        logger.warning("Ignoring unknown %s=%r, using %s", name, raw, default)
        return default
    return raw


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``env`` (defaults to os.environ after loading .env)."""
    if env is None:
        load_dotenv()
        env = os.environ

    environment = env.get("APP_ENV", "development")
    prefix = "/" + env.get("API_PREFIX", "/api").strip("/")

    return Settings(
        host=env.get("HOST", "127.0.0.1"),
        port=_int_env(env, "PORT", 3000),
        environment=environment,
        api_prefix=prefix,
        api_version=env.get("API_VERSION", "v1"),
        cors_origin=env.get("CORS_ORIGIN", "*"),
        log_level=_level_env(env, "LOG_LEVEL", "INFO"),
        log_format=env.get("LOG_FORMAT", "json" if environment == "production" else "text"),
        max_capacity=_int_env(env, "MAX_CAPACITY", 1000),
        car_id_pattern=env.get("CAR_ID_PATTERN", DEFAULT_CAR_ID_PATTERN),
        rate_limit_max=_int_env(env, "RATE_LIMIT_MAX", 100),
        rate_limit_window_minutes=_int_env(env, "RATE_LIMIT_WINDOW_MINUTES", 15),
    )
