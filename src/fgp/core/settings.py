"""Environment-driven settings for fgp.

Library defaults that deployments may want to tune without code changes:
log level and format, and the default retry policy used by
``RetryPolicy.from_settings``.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked when loaded
    - **Environment-driven:** Reads ``FGP_*`` env vars and a ``.env`` file
    - **Extra ignore:** Unknown env vars don't cause startup failures

Examples:
    >>> from fgp.core.settings import FgpSettings
    >>> FgpSettings().retry_attempts
    3

Tags:
    settings, configuration, pydantic, environment, fgp-core

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FgpSettings(BaseSettings):
    """Settings shared by every fgp module.

    Fields
    ──────
    log_level      : Structlog log level
    log_json       : JSON output (True), console (False), auto-detect (None)
    service_name   : ``service.name`` stamped on every log line
    retry_attempts : Default attempts for ``RetryPolicy.from_settings``
    retry_delay    : Default delay in seconds between attempts
    """

    model_config = SettingsConfigDict(
        env_prefix="FGP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = "fgp"

    # ── Retry defaults ───────────────────────────────────────────
    retry_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=0.1, ge=0.0)


@lru_cache(maxsize=1)
def get_settings() -> FgpSettings:
    """Return the process-wide settings, loaded once."""
    return FgpSettings()


__all__ = ["FgpSettings", "get_settings"]
