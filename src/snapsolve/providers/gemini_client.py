"""Gemini-style generate-content backend."""

from __future__ import annotations

import base64

from google import genai
from google.genai import errors, types

from snapsolve.constants import MAX_OUTPUT_TOKENS, REQUEST_TEMPERATURE, REQUEST_TIMEOUT
from snapsolve.core.types import ProviderKind, ScreenshotInput
from snapsolve.exceptions import ProviderUnavailableError, SnapSolveError
from snapsolve.prompts import Prompt

from .base import ProviderClient

_AUTH_STATUS_CODES = (401, 403)


class GeminiClient(ProviderClient):
    """Sends a text part plus inline image data to ``generate_content``."""

    kind = ProviderKind.GEMINI

    def __init__(self, api_key: str, *, client: genai.Client | None = None) -> None:
        self._client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(REQUEST_TIMEOUT * 1000)),
        )

    @staticmethod
    def build_contents(
        prompt: Prompt, images: tuple[ScreenshotInput, ...]
    ) -> list[types.Content]:
        parts = [types.Part.from_text(text=prompt.user)]
        parts.extend(
            types.Part.from_bytes(
                data=base64.b64decode(image.image_data),
                mime_type=image.mime_type,
            )
            for image in images
        )
        return [types.Content(role="user", parts=parts)]

    async def _generate(
        self,
        prompt: Prompt,
        images: tuple[ScreenshotInput, ...],
        model: str,
    ) -> str | None:
        response = await self._client.aio.models.generate_content(
            model=model,
            contents=self.build_contents(prompt, images),
            config=types.GenerateContentConfig(
                system_instruction=prompt.system,
                temperature=REQUEST_TEMPERATURE,
                max_output_tokens=MAX_OUTPUT_TOKENS,
            ),
        )
        return response.text

    def _translate_error(self, exc: Exception) -> SnapSolveError:
        if isinstance(exc, errors.ClientError) and (
            exc.code in _AUTH_STATUS_CODES or "api key" in str(exc).lower()
        ):
            return ProviderUnavailableError(f"Gemini rejected the API key: {exc}")
        return super()._translate_error(exc)
