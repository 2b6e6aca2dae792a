"""
Message router - the one entry point for inbound chat messages.

    bot author        -> dropped
    ai~ text          -> CommandHandler
    inactive channel  -> dropped
    blacklisted user  -> dropped
    otherwise         -> completion, reply with content, run actions

A failed completion becomes a single "Error: ..." reply; the router never
raises back into the gateway.
"""

from contextlib import nullcontext

from common.config import SERIALIZE_CHANNELS
from common.logger import get_logger
from relay.actions import ActionExecutor, clip
from relay.commands import CommandHandler
from relay.completion import CompletionClient
from relay.state import ChannelStateStore

logger = get_logger(__name__)


class MessageRouter:
    def __init__(self,
                 store: ChannelStateStore,
                 completion: CompletionClient,
                 executor: ActionExecutor,
                 commands: CommandHandler,
                 serialize_channels: bool = SERIALIZE_CHANNELS):
        self.store = store
        self.completion = completion
        self.executor = executor
        self.commands = commands
        self.serialize_channels = serialize_channels

    def is_eligible(self, channel_id, user_id) -> bool:
        if not self.store.is_active(channel_id):
            return False
        if self.store.is_blacklisted(user_id):
            return False
        return True

    async def on_message(self, message):
        if message.author.bot:
            return

        # Attachment-only posts carry no text and are not forwarded
        content = (message.content or "").strip()
        if not content:
            return

        if await self.commands.handle(message, content):
            return

        channel_id = message.channel.id
        if not self.is_eligible(channel_id, message.author.id):
            return

        guard = self.store.lock_for(channel_id) if self.serialize_channels else nullcontext()
        async with guard:
            await self._relay(message, channel_id, content)

    async def _relay(self, message, channel_id, content: str):
        try:
            response = await self.completion.complete(channel_id, content)
        except Exception as e:
            logger.error(f"API error in channel {channel_id}: {e}")
            try:
                await message.reply(clip(f"Error: {e}"))
            except Exception as reply_error:
                logger.error(f"Failed to report error to channel {channel_id}: {reply_error}")
            return

        if response.content:
            try:
                await message.reply(clip(response.content))
            except Exception as e:
                logger.error(f"Failed to send reply in channel {channel_id}: {e}")

        if response.actions:
            performed = await self.executor.execute(message, response.actions)
            logger.debug(f"Ran {performed}/{len(response.actions)} action(s) in channel {channel_id}")
