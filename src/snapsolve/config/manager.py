"""The configuration source consumed by the processing manager.

`ConfigManager` holds the current `ProviderConfig` snapshot, applies in-memory
updates coming from a settings UI, and notifies subscribers when the snapshot
changes. Writing settings back to disk is left to the host application.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import re
from typing import TYPE_CHECKING, Any, TypeAlias

from snapsolve.core.types import ProviderKind
from snapsolve.exceptions import ConfigurationError

from .resolver import ConfigResolver
from .schema import FIELDS, SnapSolveSettings
from .types import ProviderConfig

if TYPE_CHECKING:
    from snapsolve.providers.base import KeyCheck

log = logging.getLogger(__name__)

ConfigListener: TypeAlias = Callable[[ProviderConfig], None]

_KEY_FORMATS = {
    ProviderKind.OPENAI: re.compile(r"^sk-[A-Za-z0-9_\-]{20,}$"),
    ProviderKind.GEMINI: re.compile(r"^[A-Za-z0-9_\-]{10,}$"),
}


class ConfigManager:
    """Current provider configuration plus change notification."""

    def __init__(
        self,
        initial: ProviderConfig | None = None,
        *,
        resolver: ConfigResolver | None = None,
        profile: str | None = None,
    ) -> None:
        self._resolver = resolver or ConfigResolver()
        self._profile = profile
        self._current = initial
        self._listeners: list[ConfigListener] = []

    # --- ConfigSource surface ---

    def load(self) -> ProviderConfig:
        """Return the current snapshot, resolving it on first use."""
        if self._current is None:
            self._current = self._resolver.resolve(profile=self._profile)
        return self._current

    def on_change(self, callback: ConfigListener) -> Callable[[], None]:
        """Subscribe to configuration changes.

        Returns:
            A callable that removes the subscription. Calling it twice is harmless.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # --- Mutation ---

    def update(self, **changes: Any) -> ProviderConfig:
        """Apply changes to the current snapshot and notify subscribers.

        Switching provider without naming models resets the models to the new
        provider's defaults.

        Raises:
            ConfigurationError: If a field is unknown or a value is invalid.
        """
        unknown = set(changes) - set(FIELDS)
        if unknown:
            raise ConfigurationError(f"Unknown configuration fields: {sorted(unknown)}")

        current = self.load()
        merged: dict[str, Any] = {
            "provider": current.provider,
            "api_key": current.api_key,
            "extraction_model": current.extraction_model,
            "solution_model": current.solution_model,
            "language": current.language,
        }
        if "provider" in changes and changes["provider"] != current.provider:
            merged["extraction_model"] = None
            merged["solution_model"] = None
        merged.update(changes)

        try:
            settings = SnapSolveSettings(**merged)
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        updated = ProviderConfig.create(**settings.to_dict())
        self._replace(updated)
        return updated

    def reload(self) -> ProviderConfig:
        """Re-resolve from env and file, notifying subscribers on change."""
        resolved = self._resolver.resolve(profile=self._profile)
        self._replace(resolved)
        return resolved

    def _replace(self, config: ProviderConfig) -> None:
        previous = self._current
        self._current = config
        if previous == config:
            return
        log.info("Configuration changed: %s", config)
        for listener in list(self._listeners):
            try:
                listener(config)
            except Exception as e:
                log.error(
                    "Config listener '%s' failed: %s",
                    getattr(listener, "__qualname__", type(listener).__name__),
                    e,
                    exc_info=True,
                )

    # --- API key helpers ---

    def has_api_key(self) -> bool:
        return self.load().has_api_key

    def is_valid_api_key_format(
        self, api_key: str, provider: ProviderKind | str | None = None
    ) -> bool:
        """Cheap, offline shape check for a provider API key."""
        kind = ProviderKind(provider) if provider else self.load().provider
        return bool(api_key) and bool(_KEY_FORMATS[kind].match(api_key.strip()))

    async def test_api_key(
        self,
        api_key: str | None = None,
        provider: ProviderKind | str | None = None,
    ) -> KeyCheck:
        """Check a key against the provider by listing models."""
        from snapsolve.providers.verify import verify_api_key

        config = self.load()
        kind = ProviderKind(provider) if provider else config.provider
        return await verify_api_key(kind, api_key or config.api_key or "")
