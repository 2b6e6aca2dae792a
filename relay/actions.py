"""
Action executor - runs the auto-executable actions a completion asked for.

The vocabulary is closed: send_message, reply, react, delete_message.
Unknown types are skipped without error so newer responses don't break
older bots. Every action is isolated; one failure never stops the rest
of the batch and nothing is raised to the caller.
"""

from typing import Iterable

from common.config import DISCORD_MESSAGE_LIMIT
from common.errors import ActionExecutionError
from common.logger import get_logger
from common.models import Action, ActionType

logger = get_logger(__name__)


def clip(text: str, limit: int = DISCORD_MESSAGE_LIMIT) -> str:
    return text if len(text) <= limit else text[:limit]


class ActionExecutor:
    def __init__(self, client):
        # Anything with get_channel(id) -> channel | None; the interactions Client in production
        self.client = client
        self._handlers = {
            ActionType.SEND_MESSAGE: self._send_message,
            ActionType.REPLY: self._reply,
            ActionType.REACT: self._react,
            ActionType.DELETE_MESSAGE: self._delete_message,
        }

    async def execute(self, message, actions: Iterable[Action]) -> int:
        """Run eligible actions in order. Returns how many produced a side effect."""
        performed = 0
        for action in actions:
            if not action.is_eligible:
                continue

            handler = self._handlers.get(action.kind)
            if handler is None:
                logger.debug(f"Ignoring unknown action type '{action.type}'")
                continue

            try:
                await handler(message, action)
                performed += 1
            except Exception as e:
                error = ActionExecutionError(action.type, e)
                logger.error(str(error))

        return performed

    def resolve_channel(self, target: str, fallback):
        channel = None
        if target and target.isdigit():
            channel = self.client.get_channel(int(target))
        return channel if channel is not None else fallback

    async def _send_message(self, message, action: Action):
        channel = self.resolve_channel(action.target, message.channel)
        await channel.send(clip(action.text))
        logger.info(f"send_message -> {getattr(channel, 'id', '?')}")

    async def _reply(self, message, action: Action):
        await message.reply(clip(action.text))

    async def _react(self, message, action: Action):
        await message.add_reaction(action.target)

    async def _delete_message(self, message, action: Action):
        await message.delete()
        logger.info(f"Deleted message {message.id} on model request")
