"""
common - Shared library for the relay bot.

Quick imports:
    from common.config import load_secrets, COMMAND_PREFIX
    from common.logger import get_logger
    from common.models import Action, CompletionResponse
    from common.errors import CompletionError, RemoteAPIError
"""
