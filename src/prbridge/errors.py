"""Custom exception types for the GitHub PR bridge."""

from __future__ import annotations

from typing import Optional


class BridgeError(Exception):
    """Base exception for all recoverable bridge errors."""


class ConfigurationError(BridgeError):
    """Raised when runtime configuration values are missing or invalid."""


class MissingCredentialError(BridgeError):
    """Raised when a GitHub call is attempted before a token has been supplied."""


class UpstreamError(BridgeError):
    """Raised when a GitHub API request fails or returns an unexpected response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnknownToolError(BridgeError):
    """Raised when a tool call names a tool outside the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class NotFoundError(BridgeError):
    """Raised when a requested pull request is absent from the fetched set."""


class InvalidArgumentsError(BridgeError):
    """Raised when a tool call is missing a required argument."""
