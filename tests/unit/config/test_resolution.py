"""Configuration resolution: precedence, home file, profiles and validation."""

import pytest

from snapsolve.config import ConfigResolver, ProviderConfig, resolve_config
from snapsolve.core.types import ProviderKind
from snapsolve.exceptions import ConfigFileError, ConfigurationError

pytestmark = pytest.mark.unit


def test_defaults_without_any_source():
    config = resolve_config()

    assert config.provider is ProviderKind.OPENAI
    assert config.api_key is None
    assert config.extraction_model == "gpt-4o"
    assert config.solution_model == "gpt-4o"
    assert config.language == "python"


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("SNAPSOLVE_PROVIDER", "Gemini")
    monkeypatch.setenv("SNAPSOLVE_API_KEY", "env-key-123")

    config = resolve_config()

    assert config.provider is ProviderKind.GEMINI
    assert config.api_key == "env-key-123"
    assert config.extraction_model == "gemini-2.0-flash"
    assert config.solution_model == "gemini-2.0-flash"


def test_precedence_programmatic_over_env_over_file(monkeypatch, home_config_file):
    home_config_file('provider = "gemini"\nlanguage = "go"\napi_key = "file-key"\n')
    monkeypatch.setenv("SNAPSOLVE_LANGUAGE", "rust")
    resolver = ConfigResolver()

    config = resolver.resolve({"language": "java"})

    assert config.provider is ProviderKind.GEMINI
    assert config.api_key == "file-key"
    assert config.language == "java"
    assert resolver.last_origin["provider"] == "file"
    assert resolver.last_origin["language"] == "programmatic"
    assert resolver.last_origin["solution_model"] == "default"


def test_env_beats_file(monkeypatch, home_config_file):
    home_config_file('language = "go"\n')
    monkeypatch.setenv("SNAPSOLVE_LANGUAGE", "rust")

    assert resolve_config().language == "rust"


def test_desktop_style_keys_are_accepted(home_config_file):
    home_config_file('apiProvider = "google"\napiKey = "AIza-test"\nsolutionModel = "pro"\n')

    config = resolve_config()

    assert config.provider is ProviderKind.GEMINI
    assert config.api_key == "AIza-test"
    assert config.solution_model == "pro"
    assert config.extraction_model == "gemini-2.0-flash"


def test_profile_selection(home_config_file):
    home_config_file(
        'provider = "gemini"\n\n'
        "[profiles.work]\n"
        'provider = "openai"\n'
        'solution_model = "gpt-4o-mini"\n'
    )

    assert resolve_config().provider is ProviderKind.GEMINI

    work = resolve_config(profile="work")
    assert work.provider is ProviderKind.OPENAI
    assert work.solution_model == "gpt-4o-mini"


def test_profile_from_environment(monkeypatch, home_config_file):
    home_config_file('[profiles.home]\nlanguage = "kotlin"\n')
    monkeypatch.setenv("SNAPSOLVE_PROFILE", "home")

    assert resolve_config().language == "kotlin"


def test_missing_profile_raises(home_config_file):
    home_config_file('[profiles.work]\nprovider = "openai"\n')

    with pytest.raises(ConfigFileError, match="Profile 'play' not found"):
        resolve_config(profile="play")


def test_broken_home_file_is_ignored(home_config_file):
    home_config_file("provider = [unterminated\n")

    assert resolve_config().provider is ProviderKind.OPENAI


def test_invalid_provider_is_rejected():
    with pytest.raises(ConfigurationError, match="Invalid provider"):
        resolve_config({"provider": "anthropic"})


def test_blank_values_fall_back(monkeypatch):
    monkeypatch.setenv("SNAPSOLVE_LANGUAGE", "   ")
    monkeypatch.setenv("SNAPSOLVE_API_KEY", "")

    config = resolve_config()

    assert config.language == "python"
    assert config.api_key is None
    assert config.has_api_key is False


class TestProviderConfig:
    def test_create_fills_provider_defaults(self):
        config = ProviderConfig.create("gemini", api_key="k", language="")

        assert config.extraction_model == "gemini-2.0-flash"
        assert config.solution_model == "gemini-2.0-flash"
        assert config.language == "python"

    def test_api_key_is_redacted(self):
        config = ProviderConfig.create("openai", api_key="sk-secret-value")

        assert "sk-secret-value" not in repr(config)
        assert "sk-secret-value" not in str(config)
        assert "[REDACTED]" in repr(config)

    def test_client_identity_ignores_models_and_language(self):
        base = ProviderConfig.create("openai", api_key="sk-a")
        changed = ProviderConfig.create(
            "openai", api_key="sk-a", solution_model="x", language="go"
        )
        rekeyed = ProviderConfig.create("openai", api_key="sk-b")

        assert base.client_identity() == changed.client_identity()
        assert rekeyed.client_identity() != base.client_identity()
