"""Provider client construction.

Maps each `ProviderKind` to its concrete client so that nothing outside this
module branches on the provider name.
"""

from collections.abc import Callable
import logging
from typing import TypeAlias

from snapsolve.config.types import ProviderConfig
from snapsolve.core.types import ProviderKind

from .base import ProviderClient, UnavailableClient
from .gemini_client import GeminiClient
from .openai_client import OpenAIClient

log = logging.getLogger(__name__)

ClientFactory: TypeAlias = Callable[[ProviderConfig], ProviderClient]

_CLIENT_TYPES: dict[ProviderKind, Callable[[str], ProviderClient]] = {
    ProviderKind.OPENAI: OpenAIClient,
    ProviderKind.GEMINI: GeminiClient,
}


def initialize_client(config: ProviderConfig) -> ProviderClient:
    """Create the client for ``config`` without any network I/O.

    Returns an `UnavailableClient` when no API key is configured or the SDK
    client cannot be constructed.
    """
    if not config.has_api_key:
        log.info("%s client not initialized: no API key provided", config.provider)
        return UnavailableClient(config.provider)

    client_type = _CLIENT_TYPES[config.provider]
    try:
        client = client_type(config.api_key)
    except Exception as e:
        log.error("Error initializing %s client: %s", config.provider, e)
        return UnavailableClient(config.provider, reason=str(e))

    log.info("%s client initialized successfully", config.provider)
    return client
