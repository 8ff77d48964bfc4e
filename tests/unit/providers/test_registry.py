"""Client construction and live key verification."""

from unittest.mock import AsyncMock, MagicMock

from google.genai import errors
import httpx
import openai
import pytest

from snapsolve.config import ProviderConfig
from snapsolve.core.types import Failure, ProblemInfo, ProviderKind
from snapsolve.exceptions import ProviderUnavailableError
from snapsolve.providers import (
    GeminiClient,
    KeyCheck,
    OpenAIClient,
    UnavailableClient,
    initialize_client,
    registry,
    verify,
    verify_api_key,
)

pytestmark = pytest.mark.unit


class TestInitializeClient:
    def test_without_key_returns_unavailable(self):
        client = initialize_client(ProviderConfig.create("openai"))

        assert isinstance(client, UnavailableClient)
        assert client.available is False
        assert client.kind is ProviderKind.OPENAI

    @pytest.mark.parametrize(
        ("provider", "expected"),
        [("openai", OpenAIClient), ("gemini", GeminiClient)],
    )
    def test_selects_backend(self, provider, expected):
        client = initialize_client(ProviderConfig.create(provider, api_key="key-1234567890"))

        assert isinstance(client, expected)
        assert client.available is True

    def test_construction_error_returns_unavailable(self, monkeypatch):
        def broken(_api_key):
            raise ValueError("bad proxy settings")

        monkeypatch.setitem(registry._CLIENT_TYPES, ProviderKind.OPENAI, broken)

        client = initialize_client(ProviderConfig.create("openai", api_key="sk-x"))

        assert isinstance(client, UnavailableClient)
        assert "bad proxy settings" in client.reason

    @pytest.mark.asyncio
    async def test_unavailable_client_fails_fast(self):
        client = UnavailableClient(ProviderKind.GEMINI)

        extracted = await client.extract((), "python", "m")
        solved = await client.solve(ProblemInfo("P"), "python", "m")

        assert isinstance(extracted, Failure)
        assert isinstance(extracted.error, ProviderUnavailableError)
        assert isinstance(solved.error, ProviderUnavailableError)


class TestVerifyApiKey:
    @pytest.mark.asyncio
    async def test_empty_key_is_invalid_without_network(self):
        assert await verify_api_key("openai", "  ") == KeyCheck(False, "API key is empty.")

    @pytest.mark.asyncio
    async def test_openai_valid(self, monkeypatch):
        sdk = MagicMock()
        sdk.models.list = AsyncMock(return_value=[])
        sdk.close = AsyncMock()
        monkeypatch.setattr(verify.openai, "AsyncOpenAI", MagicMock(return_value=sdk))

        assert await verify_api_key("openai", "sk-good") == KeyCheck(True)
        sdk.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_openai_rejected(self, monkeypatch):
        request = httpx.Request("GET", "https://api.openai.com/v1/models")
        sdk = MagicMock()
        sdk.models.list = AsyncMock(
            side_effect=openai.AuthenticationError(
                "Incorrect API key provided",
                response=httpx.Response(401, request=request),
                body=None,
            )
        )
        sdk.close = AsyncMock()
        monkeypatch.setattr(verify.openai, "AsyncOpenAI", MagicMock(return_value=sdk))

        result = await verify_api_key(ProviderKind.OPENAI, "sk-bad")

        assert result.valid is False
        assert "Invalid API key" in result.error
        sdk.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_gemini_rate_limited(self, monkeypatch):
        sdk = MagicMock()
        sdk.aio.models.list = AsyncMock(
            side_effect=errors.ClientError(
                429, {"error": {"code": 429, "message": "Quota", "status": "RESOURCE_EXHAUSTED"}}
            )
        )
        sdk.aio.aclose = AsyncMock()
        monkeypatch.setattr(verify.genai, "Client", MagicMock(return_value=sdk))

        result = await verify_api_key("gemini", "AIza-key")

        assert result.valid is False
        assert "Rate limit" in result.error
        sdk.aio.aclose.assert_awaited_once()
