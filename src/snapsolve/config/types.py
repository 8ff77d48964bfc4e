"""Core configuration data types.

A `ProviderConfig` is the immutable snapshot a stage reads at its start.
Editing configuration while a run is in flight produces a new snapshot for
the next stage; it never changes one already handed out.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from snapsolve.constants import DEFAULT_LANGUAGE, DEFAULT_MODELS
from snapsolve.core.types import ProviderKind

ConfigOrigin = Literal["programmatic", "env", "file", "default"]


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Provider selection, credentials and per-stage models."""

    provider: ProviderKind
    api_key: str | None
    extraction_model: str
    solution_model: str
    language: str = DEFAULT_LANGUAGE

    @classmethod
    def create(
        cls,
        provider: ProviderKind | str,
        api_key: str | None = None,
        extraction_model: str | None = None,
        solution_model: str | None = None,
        language: str | None = None,
    ) -> "ProviderConfig":
        """Build a snapshot, filling provider-specific defaults.

        Unset models fall back to the provider's default model and an empty
        language falls back to ``"python"``.
        """
        kind = ProviderKind(provider)
        default_model = DEFAULT_MODELS[kind.value]
        return cls(
            provider=kind,
            api_key=api_key or None,
            extraction_model=extraction_model or default_model,
            solution_model=solution_model or default_model,
            language=(language or "").strip() or DEFAULT_LANGUAGE,
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def client_identity(self) -> tuple[ProviderKind, str | None]:
        """Fields whose change requires a new provider client."""
        return (self.provider, self.api_key)

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"ProviderConfig(provider={self.provider.value!r}, "
            f"api_key={api_key_display!r}, "
            f"extraction_model={self.extraction_model!r}, "
            f"solution_model={self.solution_model!r}, language={self.language!r})"
        )

    def __repr__(self) -> str:
        """Repr with redacted API key for safe debugging."""
        return self.__str__()


@runtime_checkable
class ConfigSource(Protocol):
    """Supplies the current configuration and notifies on change."""

    def load(self) -> ProviderConfig: ...  # noqa: D102
    def on_change(  # noqa: D102
        self, callback: Callable[[ProviderConfig], None]
    ) -> Callable[[], None]: ...
