"""
Relay Bot - forwards channel chat to a remote completion endpoint and
relays the answer (plus any auto-executable actions) back into Discord.

Setup:
    1. Create a Discord application and bot with the Message Content intent
    2. Put DISCORD_TOKEN and BASE44_AUTH_TOKEN in .env
    3. Run: python -m bots.relay.relay_bot
    4. In a channel: ai~start
"""

import signal
import sys

import interactions
from interactions import Client, Intents
from interactions.api.events import MessageCreate

from common.config import load_secrets, HISTORY_LIMIT, SERIALIZE_CHANNELS, PRESENCE_TEXT, COMPLETION_API_URL
from common.errors import ConfigError
from common.logger import get_logger
from relay import ChannelStateStore, CompletionClient, ActionExecutor, CommandHandler, MessageRouter

logger = get_logger("RelayBot")

try:
    SECRETS = load_secrets()
except ConfigError as e:
    logger.critical(f"Startup aborted: {e}")
    raise SystemExit(1)

client = Client(
    token=SECRETS.discord_token,
    intents=Intents.GUILDS | Intents.GUILD_MESSAGES | Intents.MESSAGE_CONTENT,
)

store = ChannelStateStore(history_limit=HISTORY_LIMIT)
router = MessageRouter(
    store=store,
    completion=CompletionClient(store, SECRETS.completion_token),
    executor=ActionExecutor(client),
    commands=CommandHandler(store),
    serialize_channels=SERIALIZE_CHANNELS,
)


# ============== EVENT HANDLERS ==============

@client.listen()
async def on_ready():
    """Called when the bot is ready."""
    logger.info(f"Logged in as {client.user.display_name} (ID: {client.user.id})")
    logger.info(f"Completion endpoint: {COMPLETION_API_URL}")
    logger.info(f"History limit: {HISTORY_LIMIT or 'unbounded'}, per-channel serialization: {SERIALIZE_CHANNELS}")

    try:
        await client.change_presence(
            status=interactions.Status.ONLINE,
            activity=interactions.Activity(
                name=PRESENCE_TEXT,
                type=interactions.ActivityType.CUSTOM,
                state=PRESENCE_TEXT,
            )
        )
    except Exception as e:
        logger.warning(f"Failed to set presence: {e}")


@client.listen()
async def on_message_create(event: MessageCreate):
    await router.on_message(event.message)


# ============== MAIN ENTRY POINT ==============

def handle_shutdown(signum, frame):
    sig_name = signal.Signals(signum).name
    logger.info(f"Received {sig_name}, shutting down ({store.channel_count()} channels in memory)")
    sys.exit(0)


if __name__ == "__main__":
    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)

    # Reconnects are handled inside the gateway client
    logger.info("Starting relay bot...")
    client.start()
