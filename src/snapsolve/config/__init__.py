"""Configuration management for snapsolve.

Configuration is resolved once into an immutable `ProviderConfig` snapshot:

- ProviderConfig: provider, key, per-stage models and output language
- ConfigManager: the live configuration source with change subscriptions
- resolve_config: one-shot resolution from env, home file and overrides
"""

from .file_loader import FileConfigLoader
from .manager import ConfigListener, ConfigManager
from .resolver import ConfigResolver, resolve_config
from .schema import SnapSolveSettings
from .types import ConfigOrigin, ConfigSource, ProviderConfig

__all__ = [  # noqa: RUF022
    "resolve_config",
    "ConfigManager",
    "ConfigListener",
    "ProviderConfig",
    "ConfigSource",
    "SnapSolveSettings",
    "ConfigResolver",
    "FileConfigLoader",
    "ConfigOrigin",
]
