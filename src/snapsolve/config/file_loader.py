"""File-based configuration loading.

Reads the user's ``~/.config/snapsolve.toml``. The location can be moved with
the ``SNAPSOLVE_CONFIG_HOME`` environment variable, which tests use to keep a
developer's real file out of the picture.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from snapsolve.constants import HOME_CONFIG_ENV_VAR, HOME_CONFIG_FILENAME
from snapsolve.exceptions import ConfigFileError

# Keys used by the desktop app's settings store, accepted as aliases
_KEY_ALIASES = {
    "apiKey": "api_key",
    "apiProvider": "provider",
    "api_provider": "provider",
    "extractionModel": "extraction_model",
    "solutionModel": "solution_model",
}


class FileConfigLoader:
    """Loads configuration from the home TOML file."""

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load configuration from the home file.

        Args:
            profile: Optional profile name to load from ``[profiles.<name>]``.
                    If None, loads from the root level.

        Returns:
            Dictionary of configuration values from the file.
            Empty dict if the file doesn't exist.

        Raises:
            ConfigFileError: If the file exists but cannot be parsed, or the
                requested profile is missing.
        """
        path = self.home_config_path()
        if not path.exists():
            return {}

        try:
            with path.open(mode="rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

        if profile:
            profiles = data.get("profiles", {})
            if profile not in profiles:
                available = list(profiles.keys()) if profiles else []
                raise ConfigFileError(
                    path,
                    f"Profile '{profile}' not found. Available profiles: {available}",
                )
            return self._normalize_keys(profiles[profile])

        config = dict(data)
        config.pop("profiles", None)
        return self._normalize_keys(config)

    def home_config_path(self) -> Path:
        """Get the path to the home configuration file."""
        override = os.getenv(HOME_CONFIG_ENV_VAR)
        if override:
            return Path(override)
        return Path.home() / ".config" / HOME_CONFIG_FILENAME

    @staticmethod
    def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
        return {_KEY_ALIASES.get(key, key): value for key, value in data.items()}
