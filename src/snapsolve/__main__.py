"""Command-line entry point: ``python -m snapsolve shot1.png shot2.png``."""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from snapsolve.config import ConfigManager, resolve_config
from snapsolve.core.types import RunState
from snapsolve.events import LoggingEventSink, PipelineEvent
from snapsolve.exceptions import ConfigurationError
from snapsolve.orchestrator import ProcessingManager
from snapsolve.pipeline.screenshots import ScreenshotQueue
from snapsolve.telemetry import SimpleReporter, TelemetryContext


class ConsoleEventSink(LoggingEventSink):
    """Logs every event and prints the final outcome to stdout."""

    def __init__(self, *, as_json: bool = False) -> None:
        super().__init__()
        self.as_json = as_json

    def send(self, event: PipelineEvent, payload: Any = None) -> None:
        super().send(event, payload)
        if event is PipelineEvent.SOLUTION_SUCCESS:
            self._print_solution(payload)
        elif event in (
            PipelineEvent.INITIAL_SOLUTION_ERROR,
            PipelineEvent.API_KEY_INVALID,
        ):
            print(f"Error: {payload}", file=sys.stderr)
        elif event is PipelineEvent.NO_SCREENSHOTS:
            print("No screenshots to process.", file=sys.stderr)

    def _print_solution(self, solution: dict[str, Any]) -> None:
        if self.as_json:
            print(json.dumps(solution, indent=2))
            return
        print(solution["code"])
        print("\nThoughts:")
        for thought in solution["thoughts"]:
            print(f"  - {thought}")
        print(f"\nTime complexity: {solution['time_complexity']}")
        print(f"Space complexity: {solution['space_complexity']}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve the coding problem shown in one or more screenshots",
        prog="python -m snapsolve",
    )
    parser.add_argument("images", nargs="*", help="Screenshot files, in order")
    parser.add_argument("--provider", help="LLM backend: openai or gemini")
    parser.add_argument("--language", help="Language for the generated solution")
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument(
        "--check-key",
        action="store_true",
        help="Verify the configured API key and exit (exit code 0=valid, 1=invalid)",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the solution as JSON"
    )
    parser.add_argument(
        "--telemetry", action="store_true", help="Print stage timings at the end"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


async def _check_key(manager: ConfigManager) -> int:
    result = await manager.test_api_key()
    if result.valid:
        print("API key is valid.")
        return 0
    print(f"API key check failed: {result.error}", file=sys.stderr)
    return 1


async def _solve(manager: ConfigManager, args: argparse.Namespace) -> int:
    queue = ScreenshotQueue(max_size=max(len(args.images), 1))
    for image in args.images:
        queue.add(image)

    reporter = None
    telemetry = None
    if args.telemetry:
        os.environ.setdefault("SNAPSOLVE_TELEMETRY", "1")
        reporter = SimpleReporter()
        telemetry = TelemetryContext(reporter)

    processor = ProcessingManager(
        manager, queue, ConsoleEventSink(as_json=args.json), telemetry=telemetry
    )
    try:
        handle = await processor.process_screenshots()
    finally:
        processor.close()

    if reporter is not None:
        print(reporter.get_report(), file=sys.stderr)
    return 0 if handle.state is RunState.SUCCEEDED else 1


def main() -> None:
    """CLI entry point."""
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {
        name: value
        for name, value in (("provider", args.provider), ("language", args.language))
        if value
    }
    try:
        config = resolve_config(overrides, profile=args.profile)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    manager = ConfigManager(config, profile=args.profile)
    if args.check_key:
        sys.exit(asyncio.run(_check_key(manager)))
    sys.exit(asyncio.run(_solve(manager, args)))


if __name__ == "__main__":
    main()
