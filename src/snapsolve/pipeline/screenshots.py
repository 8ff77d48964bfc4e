"""Screenshot sources and batch loading.

Capturing screenshots is the host application's job. The pipeline only needs
something that lists queued file paths and reads their bytes; `ScreenshotQueue`
is the in-process implementation used by the CLI and tests.
"""

from __future__ import annotations

import base64
from collections import deque
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from snapsolve.constants import (
    DEFAULT_IMAGE_MIME_TYPE,
    IMAGE_MIME_TYPES,
    MAX_QUEUED_SCREENSHOTS,
)
from snapsolve.core.types import ScreenshotInput

log = logging.getLogger(__name__)


@runtime_checkable
class ScreenshotSource(Protocol):
    """What the processing manager needs from the screenshot store."""

    def list_queued(self) -> list[str]: ...  # noqa: D102
    def read_bytes(self, path: str) -> bytes: ...  # noqa: D102
    def clear_secondary_queue(self) -> None: ...  # noqa: D102


class ScreenshotQueue:
    """Primary and secondary queues of screenshot file paths.

    Each queue keeps at most ``max_size`` entries; adding past the limit
    drops the oldest path. Files on disk are never deleted here.
    """

    def __init__(self, max_size: int = MAX_QUEUED_SCREENSHOTS) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._primary: deque[str] = deque(maxlen=max_size)
        self._secondary: deque[str] = deque(maxlen=max_size)

    def add(self, path: str | Path, *, secondary: bool = False) -> str:
        queue = self._secondary if secondary else self._primary
        entry = str(path)
        if len(queue) == self.max_size:
            log.debug("Screenshot queue full, dropping %s", queue[0])
        queue.append(entry)
        return entry

    def remove(self, path: str | Path) -> bool:
        entry = str(path)
        for queue in (self._primary, self._secondary):
            if entry in queue:
                queue.remove(entry)
                return True
        return False

    def list_queued(self) -> list[str]:
        return list(self._primary)

    def list_secondary(self) -> list[str]:
        return list(self._secondary)

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def clear_secondary_queue(self) -> None:
        self._secondary.clear()

    def clear(self) -> None:
        self._primary.clear()
        self._secondary.clear()


def mime_type_for(path: str | Path) -> str:
    return IMAGE_MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_IMAGE_MIME_TYPE)


def load_screenshot_batch(source: ScreenshotSource) -> tuple[ScreenshotInput, ...]:
    """Read the queued screenshots that still exist, in queue order.

    Paths whose file vanished (or is empty) are dropped from the batch.
    """
    batch: list[ScreenshotInput] = []
    for path in source.list_queued():
        if not Path(path).exists():
            log.info("Skipping missing screenshot: %s", path)
            continue
        try:
            data = source.read_bytes(path)
        except FileNotFoundError:
            log.info("Screenshot removed before it could be read: %s", path)
            continue
        if not data:
            log.warning("Skipping empty screenshot file: %s", path)
            continue
        batch.append(
            ScreenshotInput(
                path=str(path),
                image_data=base64.b64encode(data).decode("ascii"),
                mime_type=mime_type_for(path),
            )
        )
    return tuple(batch)
