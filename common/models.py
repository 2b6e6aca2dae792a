"""
Shared data models for the relay bot.

These dataclasses document the exact shapes that move between the state
store, the completion client and the action executor.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any

from common.logger import get_logger

logger = get_logger(__name__)

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass
class Turn:
    """One entry of a channel's history, replayed verbatim in the prompt."""
    role: str
    content: str

    def as_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class ChannelConversation:
    """
    Per-channel state, created lazily on first reference.

    History is append-only and ordered; alternation of user/assistant
    turns is not enforced.
    """
    channel_id: str
    history: List[Turn] = field(default_factory=list)
    active: bool = False


class ActionType(Enum):
    SEND_MESSAGE = "send_message"
    REPLY = "reply"
    REACT = "react"
    DELETE_MESSAGE = "delete_message"

    @classmethod
    def parse(cls, value) -> Optional["ActionType"]:
        """Map a wire tag to a member, or None for anything unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class Action:
    """
    A side effect requested by the model.

    Only actions with auto_execute set to literal True are run here; the
    rest are meant for a human to confirm somewhere else.
    """
    type: str
    label: str = ""
    target: str = ""
    params: Dict[str, Any] = field(default_factory=dict)
    auto_execute: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        params = data.get("params")
        return cls(
            type=str(data.get("type", "")),
            label="" if data.get("label") is None else str(data["label"]),
            target="" if data.get("target") is None else str(data["target"]),
            params=params if isinstance(params, dict) else {},
            auto_execute=data.get("auto_execute") is True,
        )

    @property
    def kind(self) -> Optional[ActionType]:
        return ActionType.parse(self.type)

    @property
    def is_eligible(self) -> bool:
        return self.auto_execute is True

    @property
    def text(self) -> str:
        """Message body for send/reply: params.content when given, else the label."""
        content = self.params.get("content")
        return self.label if content is None else str(content)


@dataclass
class CompletionResponse:
    """
    Normalized assistant payload.

    raw is the normalized object exactly as it is stringified into history.
    """
    content: str
    actions: List[Action] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict) -> "CompletionResponse":
        content = payload.get("content")
        if content is None:
            content = ""
        elif not isinstance(content, str):
            content = str(content)

        actions = []
        raw_actions = payload.get("actions")
        if isinstance(raw_actions, list):
            for entry in raw_actions:
                if not isinstance(entry, dict):
                    logger.warning(f"Dropping malformed action entry: {entry!r}")
                    continue
                actions.append(Action.from_dict(entry))

        return cls(content=content, actions=actions, raw=payload)
