"""Extraction stage: screenshots to a structured problem description."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from snapsolve.core.types import Failure, ProblemInfo, Result, ScreenshotInput, Success
from snapsolve.exceptions import CallFailureError, NoScreenshotsError, SnapSolveError
from snapsolve.providers.base import ProviderClient

from .base import BaseAsyncHandler

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionCommand:
    """Input of the extraction stage."""

    images: tuple[ScreenshotInput, ...]
    language: str
    model: str


class ExtractionStage(BaseAsyncHandler[ExtractionCommand, ProblemInfo, SnapSolveError]):
    """Turns an ordered screenshot batch into a `ProblemInfo` with one model call."""

    def __init__(self, client: ProviderClient) -> None:
        self._client = client

    async def handle(
        self, command: ExtractionCommand
    ) -> Result[ProblemInfo, SnapSolveError]:
        """Run the extraction call.

        Zero images is a precondition failure and never reaches the provider.
        """
        if not command.images:
            return Failure(NoScreenshotsError())

        try:
            result = await self._client.extract(
                command.images, command.language, command.model
            )
        except Exception as e:  # Normalize to a Failure
            return Failure(CallFailureError(f"Extraction failed: {e}"))

        if isinstance(result, Success):
            log.info(
                "Problem extracted from %d screenshot(s) with %s",
                len(command.images),
                command.model,
            )
        else:
            log.warning("Extraction failed: %s", result.error)
        return result
