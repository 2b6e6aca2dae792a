"""
Completion client - sends a channel's history to the remote endpoint and
turns whatever comes back into a CompletionResponse.

The endpoint wraps its answer: the "response" field holds either a ready
object or a string that is itself JSON. normalize_payload() resolves that
in a fixed order:

    1. body["response"] if present, else the whole body
    2. a string is parsed as JSON; if that fails (or doesn't give an
       object) the string becomes {"content": <string>}
    3. an object is used as-is
    4. anything else is a MalformedResponse
"""

import json
import asyncio
from enum import Enum
from typing import Optional, Tuple

import aiohttp

from common.config import COMPLETION_API_URL
from common.errors import RemoteAPIError, TransportError, MalformedResponse
from common.logger import get_logger
from common.models import CompletionResponse
from relay.config import RESPONSE_SCHEMA, RESPONSE_WRAPPER_FIELD, build_headers
from relay.state import ChannelStateStore

logger = get_logger(__name__)


def to_json(value) -> str:
    """Compact JSON with non-ASCII text left as-is, matching what the endpoint expects."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class PayloadKind(Enum):
    OBJECT = "object"              # wrapper held a ready object
    JSON_STRING = "json_string"    # wrapper held a string that parsed to an object
    PLAIN_STRING = "plain_string"  # wrapper held text, wrapped as content


def normalize_payload(body) -> Tuple[PayloadKind, dict]:
    if isinstance(body, dict) and body.get(RESPONSE_WRAPPER_FIELD) is not None:
        value = body[RESPONSE_WRAPPER_FIELD]
    else:
        value = body

    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return PayloadKind.PLAIN_STRING, {"content": value}
        if isinstance(parsed, dict):
            return PayloadKind.JSON_STRING, parsed
        return PayloadKind.PLAIN_STRING, {"content": value}

    if isinstance(value, dict):
        return PayloadKind.OBJECT, value

    raise MalformedResponse(f"Unexpected response payload type: {type(value).__name__}")


class CompletionClient:
    """
    One request per call, no retries.

    The user turn is recorded before the request goes out, so a failed call
    still leaves it in history. Only a successful call appends the
    assistant turn.
    """

    def __init__(self,
                 store: ChannelStateStore,
                 token: str,
                 api_url: str = COMPLETION_API_URL,
                 session: Optional[aiohttp.ClientSession] = None):
        self.store = store
        self.api_url = api_url
        self.headers = build_headers(token)
        self._session = session

    def build_payload(self, channel_id) -> dict:
        return {
            "prompt": to_json(self.store.history_payload(channel_id)),
            "response_json_schema": RESPONSE_SCHEMA,
        }

    async def complete(self, channel_id, user_text: str) -> CompletionResponse:
        self.store.append_user_turn(channel_id, user_text)
        payload = self.build_payload(channel_id)

        status, text = await self._post(payload)
        if not 200 <= status < 300:
            logger.warning(f"Completion endpoint returned {status} for channel {channel_id}")
            raise RemoteAPIError(status, text)

        try:
            body = json.loads(text)
        except ValueError as e:
            raise MalformedResponse(f"Response body is not JSON: {e}")

        kind, normalized = normalize_payload(body)
        logger.debug(f"Normalized {kind.value} response for channel {channel_id}")

        self.store.append_assistant_turn(channel_id, to_json(normalized))
        return CompletionResponse.from_payload(normalized)

    async def _post(self, payload: dict) -> Tuple[int, str]:
        try:
            if self._session is not None:
                return await self._send(self._session, payload)
            async with aiohttp.ClientSession() as session:
                return await self._send(session, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Could not reach completion endpoint: {e}") from e

    async def _send(self, session, payload: dict) -> Tuple[int, str]:
        async with session.post(self.api_url, headers=self.headers, json=payload) as resp:
            return resp.status, await resp.text()
