"""OpenAI-style chat completion backend."""

from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI, AuthenticationError, PermissionDeniedError

from snapsolve.constants import (
    MAX_OUTPUT_TOKENS,
    MAX_RETRIES,
    REQUEST_TEMPERATURE,
    REQUEST_TIMEOUT,
)
from snapsolve.core.types import ProviderKind, ScreenshotInput
from snapsolve.exceptions import ProviderUnavailableError, SnapSolveError
from snapsolve.prompts import Prompt

from .base import ProviderClient


class OpenAIClient(ProviderClient):
    """Sends chat messages with image parts to the chat completions API."""

    kind = ProviderKind.OPENAI

    def __init__(self, api_key: str, *, client: AsyncOpenAI | None = None) -> None:
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            timeout=REQUEST_TIMEOUT,
            max_retries=MAX_RETRIES,
        )

    @staticmethod
    def build_messages(
        prompt: Prompt, images: tuple[ScreenshotInput, ...]
    ) -> list[dict[str, Any]]:
        content: list[dict[str, Any]] = [{"type": "text", "text": prompt.user}]
        content.extend(
            {"type": "image_url", "image_url": {"url": image.data_url()}}
            for image in images
        )
        return [
            {"role": "system", "content": prompt.system},
            {"role": "user", "content": content},
        ]

    async def _generate(
        self,
        prompt: Prompt,
        images: tuple[ScreenshotInput, ...],
        model: str,
    ) -> str | None:
        response = await self._client.chat.completions.create(
            model=model,
            messages=self.build_messages(prompt, images),
            temperature=REQUEST_TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    def _translate_error(self, exc: Exception) -> SnapSolveError:
        if isinstance(exc, AuthenticationError | PermissionDeniedError):
            return ProviderUnavailableError(f"OpenAI rejected the API key: {exc}")
        return super()._translate_error(exc)
