"""Pipeline stages and their inputs."""

from .base import BaseAsyncHandler
from .extraction import ExtractionCommand, ExtractionStage
from .screenshots import (
    ScreenshotQueue,
    ScreenshotSource,
    load_screenshot_batch,
    mime_type_for,
)
from .solution import SolutionCommand, SolutionStage

__all__ = [  # noqa: RUF022
    "BaseAsyncHandler",
    "ExtractionCommand",
    "ExtractionStage",
    "SolutionCommand",
    "SolutionStage",
    "ScreenshotSource",
    "ScreenshotQueue",
    "load_screenshot_batch",
    "mime_type_for",
]
