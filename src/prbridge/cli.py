"""Command-line argument parsing for the GitHub PR bridge."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the bridge process.

    Every option is optional; unset options fall back to the environment
    (``GITHUB_API_URL``, ``GITHUB_TIMEOUT_SECONDS``).
    """
    parser = argparse.ArgumentParser(
        prog="github-pr-bridge",
        description=(
            "Serve GitHub pull-request data as JSON-RPC tools over standard "
            "input/output (one JSON message per line)."
        ),
    )

    parser.add_argument(
        "--api-url",
        default=None,
        help="GitHub REST API root (default: GITHUB_API_URL or https://api.github.com).",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_int,
        default=None,
        help="Per-request HTTP timeout in seconds (default: GITHUB_TIMEOUT_SECONDS or 30).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Log level for diagnostics written to stderr (default: INFO).",
    )

    return parser.parse_args(argv)
