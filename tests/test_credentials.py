"""Tests for the credential store."""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prbridge.credentials import CredentialStore, mask_token


def test_store_starts_empty():
    store = CredentialStore()

    assert not store.is_ready()
    assert store.token is None


def test_initialize_replaces_existing_token():
    """Verify a second token replaces the first instead of merging."""
    store = CredentialStore("first-token")

    store.initialize("second-token")

    assert store.is_ready()
    assert store.token == "second-token"


def test_mask_token_hides_middle_of_token():
    assert mask_token("ghp_abcdefghijklmnop") == "ghp_...mnop"
    assert mask_token("short") == "***"
