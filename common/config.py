"""
Shared Configuration for the relay bot.

Centralizes the completion endpoint identity, command prefix, history
and serialization knobs, and the two required secrets so every module
resolves the same values without hardcoding them.

Locally:
    Put the values in a .env file next to the repo root; python-dotenv
    loads it on import.

Required:
    DISCORD_TOKEN       - gateway credential for the bot account
    BASE44_AUTH_TOKEN   - bearer credential for the completion endpoint
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from common.errors import ConfigError

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


# ---------------------------------------------------------------------------
# Completion endpoint
# Override via env var if you point the bot at a different app
# ---------------------------------------------------------------------------

COMPLETION_APP_ID = os.environ.get("COMPLETION_APP_ID", "687ed6bea54c832b17eb40bc")

COMPLETION_API_URL = os.environ.get(
    "COMPLETION_API_URL",
    f"https://base44.app/api/apps/{COMPLETION_APP_ID}/integration-endpoints/Core/InvokeLLM",
)

# Origin markers the endpoint expects on every request
COMPLETION_ORIGIN = os.environ.get("COMPLETION_ORIGIN", "https://schoolace.org")
COMPLETION_ORIGIN_URL = os.environ.get("COMPLETION_ORIGIN_URL", f"{COMPLETION_ORIGIN}/AIPersonalAgent")

# ---------------------------------------------------------------------------
# Conversation behaviour
# ---------------------------------------------------------------------------

# Text commands live under this prefix (ai~start, ai~stop, ...)
COMMAND_PREFIX = os.environ.get("COMMAND_PREFIX", "ai~")

# Max turns kept per channel. 0 = unbounded for the process lifetime.
HISTORY_LIMIT = _env_int("HISTORY_LIMIT", 0)

# Hold a per-channel lock around each completion so prompts never interleave
SERIALIZE_CHANNELS = _env_bool("SERIALIZE_CHANNELS", True)

# ---------------------------------------------------------------------------
# Discord surface
# ---------------------------------------------------------------------------

DISCORD_MESSAGE_LIMIT = 2000

PRESENCE_TEXT = os.environ.get("PRESENCE_TEXT", "thinking about cats")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Secrets:
    discord_token: str
    completion_token: str


SECRET_ENV_VARS = ("DISCORD_TOKEN", "BASE44_AUTH_TOKEN")


def load_secrets(environ=None) -> Secrets:
    """
    Read both required secrets, failing with every missing name at once.

    Called by the bot entry point before the gateway client is built so a
    bad deployment dies at startup instead of on the first message.
    """
    environ = os.environ if environ is None else environ
    missing = [name for name in SECRET_ENV_VARS if not (environ.get(name) or "").strip()]
    if missing:
        raise ConfigError(f"{', '.join(missing)} not set.")
    return Secrets(
        discord_token=environ["DISCORD_TOKEN"].strip(),
        completion_token=environ["BASE44_AUTH_TOKEN"].strip(),
    )
