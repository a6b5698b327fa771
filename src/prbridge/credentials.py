"""Holder for the single bearer token shared by every GitHub call."""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


def mask_token(token: str) -> str:
    """Return a log-safe rendering of ``token``."""
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"


class CredentialStore:
    """Mutable cell holding zero or one GitHub bearer token.

    The token is replaced wholesale on every ``initialize`` call. Readers
    capture the current value once per operation, so replacing the token does
    not affect operations already in flight.
    """

    def __init__(self, token: Optional[str] = None) -> None:
        self._token: Optional[str] = token or None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def initialize(self, token: str) -> None:
        self._token = token
        logger.info("GitHub token replaced", extra={"token": mask_token(token), "token_length": len(token)})

    def is_ready(self) -> bool:
        return self._token is not None
