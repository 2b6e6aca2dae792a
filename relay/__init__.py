"""Conversation relay core: channel state, completion client, actions, routing."""

from .state import ChannelStateStore
from .completion import CompletionClient, normalize_payload, PayloadKind, to_json
from .actions import ActionExecutor
from .commands import CommandHandler
from .router import MessageRouter

__all__ = [
    'ChannelStateStore',
    'CompletionClient',
    'normalize_payload',
    'PayloadKind',
    'to_json',
    'ActionExecutor',
    'CommandHandler',
    'MessageRouter',
]
