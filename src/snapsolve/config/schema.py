"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from environment variables, the home config file and programmatic
overrides into the correct types with proper defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snapsolve.constants import DEFAULT_LANGUAGE, DEFAULT_PROVIDER, ENV_PREFIX
from snapsolve.core.types import ProviderKind

FIELDS = ("provider", "api_key", "extraction_model", "solution_model", "language")


class SnapSolveSettings(BaseSettings):
    """Pydantic settings schema for provider configuration.

    Integrates with environment variables using the SNAPSOLVE_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: ProviderKind = Field(
        default=ProviderKind(DEFAULT_PROVIDER),
        description="LLM backend: openai or gemini",
    )

    api_key: str | None = Field(
        default=None,
        description="API key for the selected provider",
    )

    extraction_model: str | None = Field(
        default=None,
        description="Model used to extract the problem from screenshots",
    )

    solution_model: str | None = Field(
        default=None,
        description="Model used to generate the solution",
    )

    language: str = Field(
        default=DEFAULT_LANGUAGE,
        description="Programming language for the generated solution",
    )

    # --- Validation Rules ---

    @field_validator("provider", mode="before")
    @classmethod
    def parse_provider(cls, v: Any) -> ProviderKind:
        """Parse provider name case-insensitively."""
        if isinstance(v, ProviderKind):
            return v
        if isinstance(v, str):
            normalized = v.strip().lower()
            if normalized in ("google", "genai"):
                normalized = ProviderKind.GEMINI.value
            try:
                return ProviderKind(normalized)
            except ValueError:
                pass
        raise ValueError(f"Invalid provider: {v}. Must be one of: openai, gemini")

    @field_validator("api_key", "extraction_model", "solution_model", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("language", mode="before")
    @classmethod
    def default_language(cls, v: Any) -> str:
        """Blank language falls back to the default rather than failing."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_LANGUAGE
        return str(v).strip()

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary keyed by field name."""
        return {name: getattr(self, name) for name in FIELDS}
