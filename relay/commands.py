"""
ai~ text commands.

    ai~start                 enable the bot in this channel      (Manage Channels)
    ai~stop                  disable the bot in this channel     (Manage Channels)
    ai~blacklist <user_id>   ignore a user everywhere            (Manage Server)
    ai~whitelist <user_id>   stop ignoring a user                (Manage Server)

Names are case-sensitive. start and stop only match with nothing after
them, so "ai~start now" or "ai~START" is just reserved text. A bare
ai~blacklist / ai~whitelist answers with the usage line instead of being
ignored. Everything else under the prefix is reserved and dropped silently.
"""

import re
from typing import Optional

from interactions import Permissions

from common.config import COMMAND_PREFIX
from common.logger import get_logger
from relay.state import ChannelStateStore

logger = get_logger(__name__)

MENTION_PATTERN = re.compile(r'^<@!?(\d+)>$')

INSUFFICIENT_PERMISSIONS = "Insufficient permissions."


def parse_user_id(arg: str) -> Optional[str]:
    """Accept a raw id or a user mention; return the bare id."""
    tokens = arg.split()
    if not tokens:
        return None
    match = MENTION_PATTERN.match(tokens[0])
    return match.group(1) if match else tokens[0]


def has_permission(message, permission) -> bool:
    """Guild members only; DM authors never pass."""
    check = getattr(message.author, "has_permission", None)
    if check is None:
        return False
    return bool(check(permission))


class CommandHandler:
    def __init__(self, store: ChannelStateStore, prefix: str = COMMAND_PREFIX):
        self.store = store
        self.prefix = prefix
        self._commands = {
            "start": (Permissions.MANAGE_CHANNELS, self._start, False),
            "stop": (Permissions.MANAGE_CHANNELS, self._stop, False),
            "blacklist": (Permissions.MANAGE_GUILD, self._blacklist, True),
            "whitelist": (Permissions.MANAGE_GUILD, self._whitelist, True),
        }

    def is_command(self, content: str) -> bool:
        return content.startswith(self.prefix)

    async def handle(self, message, content: str) -> bool:
        """Returns True when content was in the command namespace (handled or ignored)."""
        if not self.is_command(content):
            return False

        parts = content[len(self.prefix):].split(maxsplit=1)
        name = parts[0] if parts else ""
        arg = parts[1] if len(parts) > 1 else ""

        entry = self._commands.get(name)
        if entry is None:
            return True

        permission, handler, takes_arg = entry
        if arg and not takes_arg:
            return True

        if not has_permission(message, permission):
            await message.reply(INSUFFICIENT_PERMISSIONS)
            return True

        await handler(message, arg)
        return True

    async def _start(self, message, arg: str):
        channel_id = message.channel.id
        self.store.set_active(channel_id, True)
        logger.info(f"Bot ENABLED in {channel_id} by {message.author.id}")
        await message.reply(f"Bot active in <#{channel_id}>.")

    async def _stop(self, message, arg: str):
        channel_id = message.channel.id
        self.store.set_active(channel_id, False)
        logger.info(f"Bot DISABLED in {channel_id} by {message.author.id}")
        await message.reply(f"Bot stopped in <#{channel_id}>.")

    async def _blacklist(self, message, arg: str):
        user_id = parse_user_id(arg)
        if not user_id:
            await message.reply(f"Usage: `{self.prefix}blacklist <user_id>`")
            return
        self.store.blacklist(user_id)
        logger.info(f"User {user_id} blacklisted by {message.author.id}")
        await message.reply(f"User `{user_id}` blacklisted.")

    async def _whitelist(self, message, arg: str):
        user_id = parse_user_id(arg)
        if not user_id:
            await message.reply(f"Usage: `{self.prefix}whitelist <user_id>`")
            return
        self.store.whitelist(user_id)
        logger.info(f"User {user_id} whitelisted by {message.author.id}")
        await message.reply(f"User `{user_id}` whitelisted.")
