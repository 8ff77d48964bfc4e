"""Lifecycle events sent from the processing manager to the UI."""

from enum import StrEnum
import logging
from typing import Any, Protocol, runtime_checkable

log = logging.getLogger(__name__)


class PipelineEvent(StrEnum):
    """The fixed set of event names the UI listens for."""

    INITIAL_START = "initial-start"
    NO_SCREENSHOTS = "no-screenshots"
    INITIAL_SOLUTION_ERROR = "initial-solution-error"
    SOLUTION_SUCCESS = "solution-success"
    PROBLEM_EXTRACTED = "problem-extracted"
    API_KEY_INVALID = "api-key-invalid"


@runtime_checkable
class EventSink(Protocol):
    """The manager's only side-channel to the UI (a window handle)."""

    def send(self, event: PipelineEvent, payload: Any = None) -> None: ...  # noqa: D102


class LoggingEventSink:
    """Writes every event to the log; useful headless and in the CLI."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or log

    def send(self, event: PipelineEvent, payload: Any = None) -> None:
        if event in (PipelineEvent.INITIAL_SOLUTION_ERROR, PipelineEvent.API_KEY_INVALID):
            self._log.error("%s: %s", event, payload)
        else:
            self._log.info("%s", event)
