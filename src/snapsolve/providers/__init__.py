"""LLM provider clients (OpenAI-style and Gemini-style)."""

from .base import KeyCheck, ProviderClient, UnavailableClient
from .gemini_client import GeminiClient
from .openai_client import OpenAIClient
from .registry import ClientFactory, initialize_client
from .verify import verify_api_key

__all__ = [  # noqa: RUF022
    "ProviderClient",
    "OpenAIClient",
    "GeminiClient",
    "UnavailableClient",
    "ClientFactory",
    "initialize_client",
    "KeyCheck",
    "verify_api_key",
]
