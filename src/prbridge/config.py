"""Configuration parsing and validation for the GitHub PR bridge."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the bridge."""

    api_url: str
    timeout_seconds: int
    github_token: Optional[str] = None


def _parse_timeout(raw: str) -> int:
    try:
        timeout = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid value for 'GITHUB_TIMEOUT_SECONDS': expected an integer, got {raw!r}."
        ) from exc

    if timeout <= 0:
        raise ConfigurationError(
            "Invalid value for 'GITHUB_TIMEOUT_SECONDS': expected an integer greater than 0."
        )
    return timeout


def load_config(
    api_url: Optional[str] = None,
    timeout_seconds: Optional[int] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Build and validate application configuration.

    Explicit arguments (typically from the command line) take precedence over
    environment values.

    Args:
        api_url: Override for ``GITHUB_API_URL``.
        timeout_seconds: Override for ``GITHUB_TIMEOUT_SECONDS``.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        A validated ``Config`` instance. ``github_token`` is ``None`` when
        ``GITHUB_TOKEN`` is unset or blank.

    Raises:
        ConfigurationError: If the timeout is not a positive integer.
    """
    env = os.environ if environ is None else environ

    token = env.get("GITHUB_TOKEN", "").strip() or None

    resolved_url = (api_url or env.get("GITHUB_API_URL", "").strip() or DEFAULT_API_URL).rstrip("/")

    if timeout_seconds is not None:
        if timeout_seconds <= 0:
            raise ConfigurationError("Invalid value for 'timeout': expected an integer greater than 0.")
        resolved_timeout = timeout_seconds
    else:
        raw_timeout = env.get("GITHUB_TIMEOUT_SECONDS", "").strip()
        resolved_timeout = _parse_timeout(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS

    return Config(
        api_url=resolved_url,
        timeout_seconds=resolved_timeout,
        github_token=token,
    )
