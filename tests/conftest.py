"""
Global test configuration: environment isolation and shared fakes.
"""

import asyncio
from collections.abc import Callable
import logging
import os
from pathlib import Path
from typing import Any

import pytest

from snapsolve.config import ConfigManager, ProviderConfig
from snapsolve.core.types import Failure, ProblemInfo, ProviderKind, Result, Success
from snapsolve.events import PipelineEvent
from snapsolve.pipeline.screenshots import ScreenshotQueue
from snapsolve.providers.base import ProviderClient

# Minimal bytes that look like a PNG header; providers never decode them in tests
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16

SOLUTION_TEXT = """\
Code:
```python
def two_sum(nums, target):
    seen = {}
    for i, n in enumerate(nums):
        if target - n in seen:
            return [seen[target - n], i]
        seen[n] = i
```

Your Thoughts:
- Use a hash map of seen values
- One pass is enough

Time complexity: O(n) because each element is visited once.
Space complexity: O(n) - the map holds up to n entries.
"""

EXTRACTION_JSON = (
    '{"problem_statement": "Two Sum", "constraints": "2 <= n <= 10^4", '
    '"example_input": "[2,7,11,15], 9", "example_output": "[0,1]"}'
)


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_snapsolve_env(request, monkeypatch):
    """Ensure a clean SNAPSOLVE_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("SNAPSOLVE_"):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles affecting telemetry
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path, isolate_snapsolve_env):  # noqa: ARG001
    """Point the home-config path to an isolated temp file by default.

    Prevents reading a developer's real ~/.config/snapsolve.toml during tests.
    """
    if request.node.get_closest_marker("allow_real_home_config"):
        return

    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("SNAPSOLVE_CONFIG_HOME", str(fake_home_dir / "snapsolve.toml"))


@pytest.fixture
def home_config_file() -> Callable[[str], Path]:
    """Write TOML content to the isolated home config path."""

    def _write(content: str) -> Path:
        path = Path(os.environ["SNAPSOLVE_CONFIG_HOME"])
        path.write_text(content, encoding="utf-8")
        return path

    return _write


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Behavioural contracts between components",
        "allow_env_pollution: Keep SNAPSOLVE_* variables from the real environment",
        "allow_real_home_config: Read the developer's real home config file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Fakes ---


class RecordingSink:
    """EventSink that keeps every event in order."""

    def __init__(self) -> None:
        self.events: list[tuple[PipelineEvent, Any]] = []

    def send(self, event: PipelineEvent, payload: Any = None) -> None:
        self.events.append((event, payload))

    @property
    def names(self) -> list[str]:
        return [str(event) for event, _ in self.events]

    def payload(self, event: PipelineEvent) -> Any:
        return next(p for e, p in self.events if e is event)


class FakeProviderClient(ProviderClient):
    """Scriptable provider client recording every call.

    ``extract_results`` / ``solve_results`` are consumed in order; each entry
    is a `Result`, a raw string (wrapped in `Success`) or an exception to
    raise. Optional gates let a test hold a call open until it releases it.
    """

    kind = ProviderKind.OPENAI

    def __init__(
        self,
        *,
        extract_results: list[Any] | None = None,
        solve_results: list[Any] | None = None,
        extract_gate: asyncio.Event | None = None,
        solve_gate: asyncio.Event | None = None,
    ) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.extract_results = list(extract_results or [])
        self.solve_results = list(solve_results or [])
        self.extract_gate = extract_gate
        self.solve_gate = solve_gate
        self.extract_started = asyncio.Event()
        self.solve_started = asyncio.Event()

    async def extract(self, images, language, model):
        self.calls.append(("extract", {"images": tuple(images), "model": model}))
        self.extract_started.set()
        if self.extract_gate is not None:
            await self.extract_gate.wait()
        return self._next(self.extract_results, Success(ProblemInfo("Two Sum")))

    async def solve(self, problem, language, model):
        self.calls.append(("solve", {"problem": problem, "model": model}))
        self.solve_started.set()
        if self.solve_gate is not None:
            await self.solve_gate.wait()
        return self._next(self.solve_results, Success(SOLUTION_TEXT))

    async def _generate(self, prompt, images, model):  # noqa: ARG002
        raise AssertionError("FakeProviderClient does not generate")

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    @staticmethod
    def _next(queue: list[Any], default: Result) -> Result:
        if not queue:
            return default
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, Success | Failure):
            return item
        return Success(item)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fake_client() -> FakeProviderClient:
    return FakeProviderClient()


@pytest.fixture
def config_manager() -> ConfigManager:
    return ConfigManager(ProviderConfig.create("openai", api_key="sk-test-key"))


@pytest.fixture
def screenshot_queue(tmp_path) -> ScreenshotQueue:
    """A queue holding two real screenshot files."""
    queue = ScreenshotQueue()
    for name in ("first.png", "second.png"):
        path = tmp_path / name
        path.write_bytes(PNG_BYTES)
        queue.add(path)
    return queue


@pytest.fixture
def make_client() -> type[FakeProviderClient]:
    """The fake client class, for tests that script results or gates."""
    return FakeProviderClient
