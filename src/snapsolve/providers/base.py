"""Provider client contract shared by every LLM backend.

A `ProviderClient` owns the request/response plumbing for one backend. The
two public calls mirror the pipeline's two stages:

- ``extract(images, language, model)`` returns a parsed `ProblemInfo`
- ``solve(problem, language, model)`` returns the raw solution text

Both return a `Result` and never raise for provider-side problems. Backends
only implement ``_generate`` and, optionally, ``_translate_error``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
import logging
from typing import ClassVar

from snapsolve.core.types import (
    Failure,
    ProblemInfo,
    ProviderKind,
    Result,
    ScreenshotInput,
    Success,
)
from snapsolve.exceptions import (
    CallFailureError,
    EmptyResponseError,
    NoScreenshotsError,
    ProviderUnavailableError,
    SnapSolveError,
)
from snapsolve.prompts import Prompt, build_extraction_prompt, build_solution_prompt
from snapsolve.response.parser import parse_problem_info

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class KeyCheck:
    """Outcome of a live API key check."""

    valid: bool
    error: str | None = None


class ProviderClient(ABC):
    """Uniform interface over the supported LLM backends."""

    kind: ClassVar[ProviderKind]
    available: ClassVar[bool] = True

    async def extract(
        self,
        images: Sequence[ScreenshotInput],
        language: str,
        model: str,
    ) -> Result[ProblemInfo, SnapSolveError]:
        """Ask the model for the problem description and parse its JSON."""
        if not images:
            return Failure(NoScreenshotsError())
        prompt = build_extraction_prompt(language)
        log.debug(
            "Extraction request: provider=%s model=%s images=%d",
            self.kind,
            model,
            len(images),
        )
        raw = await self._call(prompt, tuple(images), model)
        if isinstance(raw, Failure):
            return raw
        return parse_problem_info(raw.value)

    async def solve(
        self,
        problem: ProblemInfo,
        language: str,
        model: str,
    ) -> Result[str, SnapSolveError]:
        """Ask the model for a solution and return its raw text."""
        prompt = build_solution_prompt(problem, language)
        log.debug("Solution request: provider=%s model=%s", self.kind, model)
        return await self._call(prompt, (), model)

    async def _call(
        self,
        prompt: Prompt,
        images: tuple[ScreenshotInput, ...],
        model: str,
    ) -> Result[str, SnapSolveError]:
        try:
            text = await self._generate(prompt, images, model)
        except SnapSolveError as e:
            return Failure(e)
        except Exception as e:
            log.warning("%s request failed: %s", self.kind, e)
            return Failure(self._translate_error(e))
        if not text or not text.strip():
            return Failure(EmptyResponseError())
        return Success(text)

    @abstractmethod
    async def _generate(
        self,
        prompt: Prompt,
        images: tuple[ScreenshotInput, ...],
        model: str,
    ) -> str | None:
        """Send one request and return the response text (None when empty)."""

    def _translate_error(self, exc: Exception) -> SnapSolveError:
        return CallFailureError(f"{self.kind.value} request failed: {exc}")


class UnavailableClient(ProviderClient):
    """Stand-in used when no API key is configured; every call fails fast."""

    available: ClassVar[bool] = False

    def __init__(self, provider: ProviderKind, reason: str = "no API key configured"):
        self.provider = provider
        self.reason = reason

    @property
    def kind(self) -> ProviderKind:  # type: ignore[override]
        return self.provider

    async def extract(self, images, language, model):  # noqa: D102, ARG002
        return Failure(self._error())

    async def solve(self, problem, language, model):  # noqa: D102, ARG002
        return Failure(self._error())

    async def _generate(self, prompt, images, model):  # noqa: ARG002
        raise self._error()

    def _error(self) -> ProviderUnavailableError:
        return ProviderUnavailableError(
            f"{self.provider.value} client unavailable: {self.reason}"
        )
