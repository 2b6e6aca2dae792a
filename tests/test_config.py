"""Tests for secrets loading."""

import pytest

from common.config import load_secrets
from common.errors import ConfigError


def test_both_secrets_present():
    secrets = load_secrets({"DISCORD_TOKEN": "d", "BASE44_AUTH_TOKEN": " b "})
    assert secrets.discord_token == "d"
    assert secrets.completion_token == "b"


def test_missing_secrets_listed_together():
    with pytest.raises(ConfigError) as info:
        load_secrets({})
    assert "DISCORD_TOKEN" in str(info.value)
    assert "BASE44_AUTH_TOKEN" in str(info.value)


def test_blank_secret_counts_as_missing():
    with pytest.raises(ConfigError) as info:
        load_secrets({"DISCORD_TOKEN": "d", "BASE44_AUTH_TOKEN": "   "})
    assert "BASE44_AUTH_TOKEN" in str(info.value)
    assert "DISCORD_TOKEN" not in str(info.value)
