"""Core data types that flow through the pipeline.

This module defines the immutable data structures that represent the state
of a run as it moves from screenshots to an extracted problem and finally to
a parsed solution. Each stage produces a new value rather than mutating the
previous one.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from enum import StrEnum
from pathlib import Path
import typing
import uuid

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result Monad for Robust Error Handling ---
# Stages return Success|Failure instead of raising so that the orchestrator
# can turn every failure into exactly one lifecycle event.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful result in the pipeline."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failure in the pipeline, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]


# --- Enumerations ---


class ProviderKind(StrEnum):
    """Supported LLM backends."""

    OPENAI = "openai"
    GEMINI = "gemini"


class RunState(StrEnum):
    """Lifecycle of a single pipeline run."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    SOLVING = "solving"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.SUCCEEDED, RunState.FAILED, RunState.CANCELLED)


class CancelReason(StrEnum):
    """Why a run's token was cancelled."""

    USER = "user"
    SUPERSEDED = "superseded"
    SHUTDOWN = "shutdown"


# --- Core Data Models ---


@dataclasses.dataclass(frozen=True, slots=True)
class ScreenshotInput:
    """A single screenshot, base64 encoded, ready to be sent to a provider."""

    path: str
    image_data: str
    mime_type: str = "image/png"

    def __post_init__(self) -> None:
        """Validate invariants for type safety."""
        _require(
            condition=isinstance(self.path, str) and self.path.strip() != "",
            message="must be a non-empty str",
            field_name="path",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.image_data, str) and self.image_data != "",
            message="must be a non-empty base64 str",
            field_name="image_data",
            exc=TypeError,
        )

    @property
    def name(self) -> str:
        return Path(self.path).name

    def data_url(self) -> str:
        """Return the image as a ``data:`` URL."""
        return f"data:{self.mime_type};base64,{self.image_data}"


PROBLEM_FIELDS = ("problem_statement", "constraints", "example_input", "example_output")


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, list | tuple):
        return "\n".join(str(v) for v in value)
    return str(value)


@dataclasses.dataclass(frozen=True, slots=True)
class ProblemInfo:
    """Structured description of the coding problem shown in the screenshots."""

    problem_statement: str
    constraints: str | None = None
    example_input: str | None = None
    example_output: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, typing.Any]) -> ProblemInfo:
        """Build from decoded JSON, keeping only the known fields.

        Missing fields stay ``None``; they are never guessed.
        """
        values = {name: _as_text(data.get(name)) for name in PROBLEM_FIELDS}
        return cls(
            problem_statement=values["problem_statement"] or "",
            constraints=values["constraints"],
            example_input=values["example_input"],
            example_output=values["example_output"],
        )

    def to_dict(self) -> dict[str, str | None]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True, slots=True)
class SolutionResult:
    """Terminal artifact of a run."""

    code: str
    thoughts: tuple[str, ...]
    time_complexity: str
    space_complexity: str

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "code": self.code,
            "thoughts": list(self.thoughts),
            "time_complexity": self.time_complexity,
            "space_complexity": self.space_complexity,
        }


@dataclasses.dataclass(slots=True)
class RunHandle:
    """Identifies an in-flight run and carries its cancellation signal.

    The handle is owned by the orchestrator; the run itself only reads
    ``cancelled`` at its stage boundaries.
    """

    run_id: str = dataclasses.field(default_factory=lambda: uuid.uuid4().hex[:12])
    state: RunState = RunState.IDLE
    cancel_reason: CancelReason | None = None
    error: Exception | None = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_reason is not None

    @property
    def active(self) -> bool:
        return not self.state.is_terminal

    def cancel(self, reason: CancelReason = CancelReason.USER) -> bool:
        """Signal cancellation. Returns False if the run already finished."""
        if self.state.is_terminal or self.cancelled:
            return False
        self.cancel_reason = reason
        return True
