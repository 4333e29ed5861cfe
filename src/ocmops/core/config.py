"""Runtime settings for ocmops.

Settings come from environment variables only and are collected once into an
immutable value that is passed explicitly to the code that needs it:

- ``OCM_URL``: control-plane API root (default ``https://api.openshift.com``)
- ``OCM_TOKEN``: bearer access token for the control plane
- ``OCMOPS_HTTP_TIMEOUT``: per-request timeout in seconds (default 30)
- ``OCMOPS_RETRY_TIMEOUT``: budget for retried cloud calls (default 60)
- ``OCMOPS_LOG_LEVEL``: log level name (default ``WARNING``)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

URL_ENV = "OCM_URL"
TOKEN_ENV = "OCM_TOKEN"
HTTP_TIMEOUT_ENV = "OCMOPS_HTTP_TIMEOUT"
RETRY_TIMEOUT_ENV = "OCMOPS_RETRY_TIMEOUT"
LOG_LEVEL_ENV = "OCMOPS_LOG_LEVEL"

DEFAULT_URL = "https://api.openshift.com"


class ConfigError(RuntimeError):
    """Raised when an environment setting cannot be parsed."""


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration."""

    api_url: str = DEFAULT_URL
    token: str | None = None
    http_timeout: float = 30.0
    retry_timeout: float = 60.0
    log_level: str = "WARNING"


def _sanitize_url(url: str) -> str:
    """Strip query strings and trailing slashes from an API root URL."""
    return url.split("?", 1)[0].rstrip("/")


def _seconds(environ: Mapping[str, str], key: str, default: float) -> float:
    """Parse a non-negative number of seconds from the environment."""
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number of seconds, got '{raw}'") from exc
    if value < 0:
        raise ConfigError(f"{key} must not be negative, got '{raw}'")
    return value


def _log_level(environ: Mapping[str, str]) -> str:
    """Return a validated, upper-cased log level name."""
    level = (environ.get(LOG_LEVEL_ENV) or "WARNING").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{LOG_LEVEL_ENV} is not a valid log level: '{level}'")
    return level


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the given mapping (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    token = (env.get(TOKEN_ENV) or "").strip() or None
    return Settings(
        api_url=_sanitize_url(env.get(URL_ENV) or DEFAULT_URL),
        token=token,
        http_timeout=_seconds(env, HTTP_TIMEOUT_ENV, 30.0),
        retry_timeout=_seconds(env, RETRY_TIMEOUT_ENV, 60.0),
        log_level=_log_level(env),
    )
