"""Screenshot-to-solution pipeline for coding problems."""

import importlib.metadata
import logging

from snapsolve.config import ConfigManager, ProviderConfig, resolve_config
from snapsolve.core.types import (
    CancelReason,
    Failure,
    ProblemInfo,
    ProviderKind,
    Result,
    RunHandle,
    RunState,
    ScreenshotInput,
    SolutionResult,
    Success,
)
from snapsolve.events import EventSink, LoggingEventSink, PipelineEvent
from snapsolve.exceptions import (
    CallFailureError,
    ConfigurationError,
    EmptyResponseError,
    MalformedJSONError,
    NoScreenshotsError,
    ProviderUnavailableError,
    RunCancelledError,
    SnapSolveError,
)
from snapsolve.orchestrator import ProcessingManager
from snapsolve.pipeline.screenshots import ScreenshotQueue, ScreenshotSource
from snapsolve.providers import ProviderClient, initialize_client
from snapsolve.telemetry import TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("snapsolve")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the host application configures it
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Orchestration
    "ProcessingManager",
    "PipelineEvent",
    "EventSink",
    "LoggingEventSink",
    # Configuration
    "ConfigManager",
    "ProviderConfig",
    "resolve_config",
    # Providers
    "ProviderClient",
    "initialize_client",
    # Screenshots
    "ScreenshotQueue",
    "ScreenshotSource",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    # Core Types & Data Models
    "ProviderKind",
    "ScreenshotInput",
    "ProblemInfo",
    "SolutionResult",
    "RunHandle",
    "RunState",
    "CancelReason",
    "Result",
    "Success",
    "Failure",
    # Exceptions
    "SnapSolveError",
    "ProviderUnavailableError",
    "EmptyResponseError",
    "MalformedJSONError",
    "NoScreenshotsError",
    "CallFailureError",
    "RunCancelledError",
    "ConfigurationError",
]
