"""Environment-driven settings for spindle.

Settings are read from ``SPINDLE_*`` environment variables and an optional
``.env`` file. Unknown keys are ignored so that a shared ``.env`` does not
break startup.

Fields
──────
log_level     : Level passed to :func:`spindle.core.logging.configure_logging`
log_json      : JSON output (True), console output (False), auto-detect (None)
service_name  : ``service.name`` attached to every log event
retry_times   : Default attempt budget for :func:`spindle.execution.retry.retry`

Examples:
    >>> import os
    >>> os.environ["SPINDLE_RETRY_TIMES"] = "5"
    >>> get_settings.cache_clear()
    >>> get_settings().retry_times
    5
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spindle.core.errors import ConfigError


class SpindleSettings(BaseSettings):
    """Process-wide defaults for logging and the retry combinator."""

    model_config = SettingsConfigDict(
        env_prefix="SPINDLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = "spindle"

    # ── Combinators ──────────────────────────────────────────────
    retry_times: int = Field(default=3, ge=1, description="Default attempts for retry()")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> SpindleSettings:
    """Return the cached settings instance.

    Raises:
        ConfigError: The environment or ``.env`` holds an invalid value.
    """
    try:
        return SpindleSettings()
    except ValidationError as e:
        raise ConfigError(f"invalid spindle settings: {e}", cause=e) from e


__all__ = ["SpindleSettings", "get_settings"]
