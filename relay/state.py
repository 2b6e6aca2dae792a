"""
Per-channel conversation state and the process-wide blacklist.

Everything here lives for the process lifetime. Histories grow without
bound unless a history limit is configured, in which case the oldest
turns are dropped after each append.
"""

import asyncio
from typing import Dict, Set

from common.logger import get_logger
from common.models import ChannelConversation, Turn, USER_ROLE, ASSISTANT_ROLE

logger = get_logger(__name__)


class ChannelStateStore:
    def __init__(self, history_limit: int = 0):
        self.history_limit = history_limit
        self._channels: Dict[str, ChannelConversation] = {}
        self._blacklist: Set[str] = set()
        self._locks: Dict[str, asyncio.Lock] = {}

    # ---------- Conversations ----------

    def get_or_create(self, channel_id) -> ChannelConversation:
        key = str(channel_id)
        conversation = self._channels.get(key)
        if conversation is None:
            conversation = ChannelConversation(channel_id=key)
            self._channels[key] = conversation
        return conversation

    def set_active(self, channel_id, active: bool):
        self.get_or_create(channel_id).active = bool(active)

    def is_active(self, channel_id) -> bool:
        return self.get_or_create(channel_id).active

    def append_user_turn(self, channel_id, text: str):
        self._append(channel_id, Turn(role=USER_ROLE, content=text))

    def append_assistant_turn(self, channel_id, content: str):
        self._append(channel_id, Turn(role=ASSISTANT_ROLE, content=content))

    def _append(self, channel_id, turn: Turn):
        history = self.get_or_create(channel_id).history
        history.append(turn)
        if self.history_limit > 0 and len(history) > self.history_limit:
            dropped = len(history) - self.history_limit
            del history[:dropped]
            logger.debug(f"Trimmed {dropped} turn(s) from channel {channel_id}")

    def history_payload(self, channel_id) -> list:
        """History in wire form, oldest first."""
        return [turn.as_dict() for turn in self.get_or_create(channel_id).history]

    def channel_count(self) -> int:
        return len(self._channels)

    def lock_for(self, channel_id) -> asyncio.Lock:
        key = str(channel_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    # ---------- Blacklist ----------

    def blacklist(self, user_id):
        self._blacklist.add(str(user_id))

    def whitelist(self, user_id):
        self._blacklist.discard(str(user_id))

    def is_blacklisted(self, user_id) -> bool:
        return str(user_id) in self._blacklist
