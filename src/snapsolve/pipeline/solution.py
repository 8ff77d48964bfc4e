"""Solution stage: problem description to code, insights and complexity."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from snapsolve.core.types import Failure, ProblemInfo, Result, SolutionResult, Success
from snapsolve.exceptions import CallFailureError, SnapSolveError
from snapsolve.providers.base import ProviderClient
from snapsolve.response.parser import parse_solution

from .base import BaseAsyncHandler

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SolutionCommand:
    """Input of the solution stage."""

    problem: ProblemInfo
    language: str
    model: str


class SolutionStage(BaseAsyncHandler[SolutionCommand, SolutionResult, SnapSolveError]):
    """Requests a solution and parses it into a `SolutionResult`.

    Only provider failures fail this stage. Irregular response structure is
    absorbed by the parser's defaults.
    """

    def __init__(self, client: ProviderClient) -> None:
        self._client = client

    async def handle(
        self, command: SolutionCommand
    ) -> Result[SolutionResult, SnapSolveError]:
        try:
            raw = await self._client.solve(
                command.problem, command.language, command.model
            )
        except Exception as e:  # Normalize to a Failure
            return Failure(CallFailureError(f"Solution generation failed: {e}"))

        if isinstance(raw, Failure):
            log.warning("Solution request failed: %s", raw.error)
            return raw

        solution = parse_solution(raw.value)
        log.info(
            "Solution parsed: %d thought(s), time=%s",
            len(solution.thoughts),
            solution.time_complexity.split(" - ", 1)[0],
        )
        return Success(solution)
