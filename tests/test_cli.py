"""Tests for command-line argument parsing."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prbridge.cli import parse_args


def test_parse_args_defaults():
    """Verify every option is optional and defers to the environment."""
    args = parse_args([])

    assert args.api_url is None
    assert args.timeout is None
    assert args.log_level == "INFO"


def test_parse_args_with_valid_arguments():
    """Verify CLI parsing accepts all supported options."""
    args = parse_args(["--api-url", "https://ghe/api/v3", "--timeout", "15", "--log-level", "debug"])

    assert args.api_url == "https://ghe/api/v3"
    assert args.timeout == 15
    assert args.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["0", "-1", "abc"])
def test_parse_args_rejects_invalid_timeout(value):
    """Verify non-positive or non-numeric timeouts exit with usage error."""
    with pytest.raises(SystemExit):
        parse_args(["--timeout", value])
