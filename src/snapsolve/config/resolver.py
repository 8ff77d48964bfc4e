"""Configuration resolution with precedence handling.

Merges configuration from multiple sources according to the documented
precedence order: Programmatic > Environment > Home file > Defaults
"""

import logging
import os
from typing import Any

from snapsolve.constants import ENV_PREFIX
from snapsolve.exceptions import ConfigFileError, ConfigurationError

from .file_loader import FileConfigLoader
from .schema import FIELDS, SnapSolveSettings
from .types import ConfigOrigin, ProviderConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Resolves configuration from multiple sources with proper precedence."""

    def __init__(self, file_loader: FileConfigLoader | None = None) -> None:
        """Initialize the configuration resolver."""
        self.file_loader = file_loader or FileConfigLoader()
        self.last_origin: dict[str, ConfigOrigin] = {}

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
    ) -> ProviderConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence)
            profile: Profile name to load from the home file

        Returns:
            A frozen ProviderConfig snapshot.

        Raises:
            ConfigurationError: If validation fails.
        """
        origin: dict[str, ConfigOrigin] = {}
        merged: dict[str, Any] = {}

        if profile is None:
            profile = os.getenv(f"{ENV_PREFIX}PROFILE")

        # Step 1: Schema defaults
        for name in FIELDS:
            merged[name] = SnapSolveSettings.model_fields[name].default
            origin[name] = "default"

        # Step 2: Home file
        try:
            for name, value in self.file_loader.load_home_config(profile).items():
                if name in merged:
                    merged[name] = value
                    origin[name] = "file"
        except ConfigFileError as e:
            if profile is not None:
                raise
            # A broken base file should not keep the overlay from starting
            log.warning("Ignoring unreadable config file: %s", e)

        # Step 3: Environment variables
        for name, value in self._load_env().items():
            merged[name] = value
            origin[name] = "env"

        # Step 4: Programmatic overrides
        for name, value in (programmatic or {}).items():
            if name in merged:
                merged[name] = value
                origin[name] = "programmatic"

        # Step 5: Validate
        try:
            settings = SnapSolveSettings(**merged)
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        self.last_origin = origin
        values = settings.to_dict()
        return ProviderConfig.create(**values)

    @staticmethod
    def _load_env() -> dict[str, Any]:
        """Collect only the fields actually set in the environment."""
        found = {}
        for name in FIELDS:
            env_var = f"{ENV_PREFIX}{name.upper()}"
            if env_var in os.environ:
                found[name] = os.environ[env_var]
        return found


_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
) -> ProviderConfig:
    """Resolve configuration from all sources.

    Example:
        config = resolve_config()
        config = resolve_config({"provider": "gemini", "language": "go"})
    """
    return _resolver.resolve(programmatic, profile=profile)
