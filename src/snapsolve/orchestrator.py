"""The processing manager: screenshots in, lifecycle events out.

`ProcessingManager` sequences the extraction and solution stages for the
queued screenshots and reports progress exclusively through an `EventSink`.
It is constructed once by the host application and owns all run state:

- the current provider client, replaced (never mutated) when the provider
  or API key changes
- the single primary `RunHandle`; starting a run cancels the previous one
  before any new provider call is made
- the UI-facing view, the extracted problem and the last solution

Cancellation is checked before the extraction call and before the solution
call. A provider call that is already in flight is not aborted; its result is
discarded when it arrives for a cancelled run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from typing import Literal

from snapsolve.config.types import ConfigSource, ProviderConfig
from snapsolve.core.types import (
    CancelReason,
    Failure,
    ProblemInfo,
    RunHandle,
    RunState,
    SolutionResult,
)
from snapsolve.events import EventSink, PipelineEvent
from snapsolve.exceptions import (
    CallFailureError,
    NoScreenshotsError,
    ProviderUnavailableError,
    RunCancelledError,
    SnapSolveError,
)
from snapsolve.pipeline.extraction import ExtractionCommand, ExtractionStage
from snapsolve.pipeline.screenshots import ScreenshotSource, load_screenshot_batch
from snapsolve.pipeline.solution import SolutionCommand, SolutionStage
from snapsolve.providers.base import ProviderClient
from snapsolve.providers.registry import ClientFactory, initialize_client
from snapsolve.telemetry import TelemetryContext, TelemetryContextProtocol

log = logging.getLogger(__name__)

View = Literal["queue", "solutions"]

# Cancellation reasons that end a run without telling the UI
_SILENT_CANCEL = (CancelReason.SUPERSEDED, CancelReason.SHUTDOWN)


class ProcessingManager:
    """Runs the two-stage pipeline with a single-flight policy."""

    def __init__(
        self,
        config_source: ConfigSource,
        screenshots: ScreenshotSource,
        events: EventSink,
        *,
        client_factory: ClientFactory = initialize_client,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._config_source = config_source
        self._screenshots = screenshots
        self._events = events
        self._client_factory = client_factory
        self._telemetry = telemetry or TelemetryContext()

        self._client: ProviderClient | None = None
        self._client_identity: tuple | None = None
        self._current_run: RunHandle | None = None
        self._tasks: set[asyncio.Task[RunHandle]] = set()

        self.view: View = "queue"
        self.problem_info: ProblemInfo | None = None
        self.solution: SolutionResult | None = None

        self._unsubscribe: Callable[[], None] | None = config_source.on_change(
            self._on_config_change
        )

    # --- Public surface ---

    @property
    def client(self) -> ProviderClient | None:
        return self._client

    @property
    def current_run(self) -> RunHandle | None:
        return self._current_run

    def run_pipeline(self) -> asyncio.Task[RunHandle]:
        """Start a run in the background. Results arrive as events.

        Must be called from within a running event loop. The returned task
        may be awaited but callers are not required to.
        """
        handle = self._begin_run()
        task = asyncio.get_running_loop().create_task(
            self._run(handle), name=f"snapsolve-run-{handle.run_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def process_screenshots(self) -> RunHandle:
        """Start a run and wait for it to finish."""
        return await self._run(self._begin_run())

    def cancel_current_run(self) -> bool:
        """Cancel the active run. Returns False if nothing was running."""
        run = self._current_run
        if run is None or not run.cancel(CancelReason.USER):
            return False
        log.info("Run %s cancelled by user", run.run_id)
        return True

    def reset(self) -> None:
        """Drop run state and return the UI to the queue view."""
        self.cancel_current_run()
        self.problem_info = None
        self.solution = None
        self.view = "queue"

    def close(self) -> None:
        """Unsubscribe from config changes and silently stop the active run."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._current_run is not None:
            self._current_run.cancel(CancelReason.SHUTDOWN)

    # --- Client lifecycle ---

    def _install_client(self, config: ProviderConfig) -> ProviderClient:
        client = self._client_factory(config)
        self._client = client
        self._client_identity = config.client_identity()
        return client

    def _ensure_client(self, config: ProviderConfig) -> ProviderClient:
        """Lazily (re)initialize the client once for this run."""
        client = self._client
        if (
            client is None
            or not client.available
            or self._client_identity != config.client_identity()
        ):
            client = self._install_client(config)
        return client

    def _on_config_change(self, config: ProviderConfig) -> None:
        if self._client_identity == config.client_identity() and self._client:
            return
        log.info("Provider settings changed; reinitializing %s client", config.provider)
        self._install_client(config)

    # --- Run execution ---

    def _begin_run(self) -> RunHandle:
        previous = self._current_run
        if previous is not None and previous.cancel(CancelReason.SUPERSEDED):
            log.info("Run %s superseded by a new run", previous.run_id)
        handle = RunHandle()
        self._current_run = handle
        return handle

    async def _run(self, handle: RunHandle) -> RunHandle:
        try:
            await self._execute(handle)
        except Exception as e:
            # Never leave a run without a terminal event
            log.exception("Run %s crashed", handle.run_id)
            self._fail(handle, CallFailureError(f"Unexpected error: {e}"))
        return handle

    def _stage_config(self, run_config: ProviderConfig) -> ProviderConfig:
        """Re-read config for the next stage, unless the client identity moved.

        A provider or key switch mid-run only applies to the next run, so the
        in-flight client is never paired with another provider's model.
        """
        latest = self._config_source.load()
        if latest.client_identity() != run_config.client_identity():
            return run_config
        return latest

    async def _execute(self, handle: RunHandle) -> None:
        log.info("Run %s started", handle.run_id)
        run_config = self._config_source.load()

        client = self._ensure_client(run_config)
        if not client.available:
            self._fail(handle, ProviderUnavailableError())
            return

        batch = load_screenshot_batch(self._screenshots)
        if not batch:
            self._no_screenshots(handle)
            return

        self._emit(handle, PipelineEvent.INITIAL_START)
        self._set_shared(handle, view="solutions")

        # Boundary 1: before the extraction call
        if handle.cancelled:
            self._cancelled(handle)
            return

        handle.state = RunState.EXTRACTING
        extraction = ExtractionStage(client)
        with self._telemetry("pipeline.extraction", run_id=handle.run_id):
            extracted = await extraction.handle(
                ExtractionCommand(
                    images=batch,
                    language=run_config.language,
                    model=run_config.extraction_model,
                )
            )
        if handle.cancelled:
            self._cancelled(handle)
            return
        if isinstance(extracted, Failure):
            self._fail(handle, extracted.error, stage="extraction")
            return

        problem = extracted.value
        self._set_shared(handle, problem_info=problem)
        self._emit(handle, PipelineEvent.PROBLEM_EXTRACTED, problem.to_dict())

        # Boundary 2: before the solution call
        stage_config = self._stage_config(run_config)
        if handle.cancelled:
            self._cancelled(handle)
            return

        handle.state = RunState.SOLVING
        solution_stage = SolutionStage(client)
        with self._telemetry("pipeline.solution", run_id=handle.run_id):
            solved = await solution_stage.handle(
                SolutionCommand(
                    problem=problem,
                    language=stage_config.language,
                    model=stage_config.solution_model,
                )
            )
        if handle.cancelled:
            self._cancelled(handle)
            return
        if isinstance(solved, Failure):
            self._fail(handle, solved.error, stage="solution")
            return

        handle.state = RunState.SUCCEEDED
        self._set_shared(handle, solution=solved.value)
        self._emit(handle, PipelineEvent.SOLUTION_SUCCESS, solved.value.to_dict())
        self._screenshots.clear_secondary_queue()
        log.info("Run %s succeeded", handle.run_id)

    # --- Terminal transitions ---

    def _is_current(self, handle: RunHandle) -> bool:
        return handle is self._current_run

    def _emit(self, handle: RunHandle, event: PipelineEvent, payload=None) -> None:
        if handle.cancel_reason in _SILENT_CANCEL:
            log.debug("Dropping %s from superseded run %s", event, handle.run_id)
            return
        self._events.send(event, payload)

    def _set_shared(self, handle: RunHandle, **values) -> None:
        """Update manager state, but only on behalf of the current run."""
        if not self._is_current(handle):
            return
        for name, value in values.items():
            setattr(self, name, value)

    def _no_screenshots(self, handle: RunHandle) -> None:
        handle.state = RunState.FAILED
        handle.error = NoScreenshotsError()
        log.info("Run %s: no screenshots to process", handle.run_id)
        self._emit(handle, PipelineEvent.NO_SCREENSHOTS)

    def _fail(
        self, handle: RunHandle, error: SnapSolveError, *, stage: str | None = None
    ) -> None:
        handle.state = RunState.FAILED
        handle.error = error
        self._telemetry.count("pipeline.error", stage=stage or "preconditions")
        self._set_shared(handle, problem_info=None, solution=None, view="queue")
        log.warning("Run %s failed: %s", handle.run_id, error)

        if isinstance(error, ProviderUnavailableError):
            # Force a fresh client on the next run
            if self._is_current(handle):
                self._client = None
                self._client_identity = None
            self._emit(handle, PipelineEvent.API_KEY_INVALID, str(error))
        else:
            self._emit(handle, PipelineEvent.INITIAL_SOLUTION_ERROR, str(error))

    def _cancelled(self, handle: RunHandle) -> None:
        handle.state = RunState.CANCELLED
        handle.error = RunCancelledError()
        log.info("Run %s cancelled (%s)", handle.run_id, handle.cancel_reason)
        if handle.cancel_reason in _SILENT_CANCEL:
            return
        self._set_shared(handle, problem_info=None, solution=None, view="queue")
        self._emit(handle, PipelineEvent.INITIAL_SOLUTION_ERROR, str(handle.error))
