"""Completion endpoint wire constants."""
from common.config import COMPLETION_APP_ID, COMPLETION_ORIGIN, COMPLETION_ORIGIN_URL

# Shape the endpoint is asked to answer in. Sent verbatim on every request.
RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "content": {"type": "string"},
        "actions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string"},
                    "label": {"type": "string"},
                    "target": {"type": "string", "minLength": 1},
                    "params": {"type": "object"},
                    "auto_execute": {"type": "boolean"},
                },
                "required": ["type", "label", "target"],
            },
        },
    },
    "required": ["content"],
}

# Field of the wrapper object that carries the assistant payload
RESPONSE_WRAPPER_FIELD = "response"


def build_headers(token: str) -> dict:
    """Fixed header set identifying the calling app and origin."""
    return {
        "accept": "application/json",
        "accept-language": "en-US,en;q=0.9",
        "authorization": f"Bearer {token}",
        "content-type": "application/json",
        "origin": COMPLETION_ORIGIN,
        "referer": f"{COMPLETION_ORIGIN}/",
        "x-app-id": COMPLETION_APP_ID,
        "x-origin-url": COMPLETION_ORIGIN_URL,
    }
