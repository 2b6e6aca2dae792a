"""
Error taxonomy for the relay bot.

Completion errors propagate to the message router, which turns them into
a single chat reply. Action errors are logged where they happen and never
leave the executor. ConfigError aborts startup.
"""


class RelayError(Exception):
    """Base class for everything the relay raises on purpose."""


class ConfigError(RelayError):
    """Missing or invalid process configuration."""


class CompletionError(RelayError):
    """A single completion call failed."""


class RemoteAPIError(CompletionError):
    """The completion endpoint answered with a non-2xx status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"API {status}: {body}")


class TransportError(CompletionError):
    """The completion endpoint could not be reached."""


class MalformedResponse(CompletionError):
    """
    The response body could not be turned into an assistant payload.

    Only raised when the body is not JSON at all, or when it normalizes to
    something that is neither an object nor a string. A string that fails
    to parse is wrapped as content instead.
    """


class ActionExecutionError(RelayError):
    """One model-requested action failed against the chat surface."""

    def __init__(self, action_type: str, cause: BaseException):
        self.action_type = action_type
        self.cause = cause
        super().__init__(f"Action '{action_type}' failed: {cause}")
