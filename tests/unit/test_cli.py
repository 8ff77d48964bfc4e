"""Command-line entry point."""

import sys

import pytest

from snapsolve.__main__ import ConsoleEventSink, main
from snapsolve.events import PipelineEvent
from snapsolve.providers.base import KeyCheck

pytestmark = pytest.mark.unit


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["snapsolve", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


def test_missing_key_exits_with_error(monkeypatch, capsys, tmp_path):
    shot = tmp_path / "shot.png"
    shot.write_bytes(b"png")

    code = run_main(monkeypatch, str(shot))

    assert code == 1
    assert "API key" in capsys.readouterr().err


def test_no_images_reports_empty_queue(monkeypatch, capsys):
    monkeypatch.setenv("SNAPSOLVE_API_KEY", "sk-test-key")

    code = run_main(monkeypatch)

    assert code == 1
    assert "No screenshots" in capsys.readouterr().err


def test_invalid_provider_is_a_configuration_error(monkeypatch, capsys):
    code = run_main(monkeypatch, "--provider", "anthropic", "shot.png")

    assert code == 2
    assert "Configuration error" in capsys.readouterr().err


def test_check_key(monkeypatch, capsys):
    async def fake_verify(provider, api_key):
        return KeyCheck(api_key == "sk-test-key", "rejected")

    monkeypatch.setattr("snapsolve.providers.verify.verify_api_key", fake_verify)
    monkeypatch.setenv("SNAPSOLVE_API_KEY", "sk-test-key")

    assert run_main(monkeypatch, "--check-key") == 0
    assert "valid" in capsys.readouterr().out

    monkeypatch.setenv("SNAPSOLVE_API_KEY", "sk-wrong-key")

    assert run_main(monkeypatch, "--check-key") == 1
    assert "rejected" in capsys.readouterr().err


def test_console_sink_prints_solution(capsys):
    sink = ConsoleEventSink()

    sink.send(
        PipelineEvent.SOLUTION_SUCCESS,
        {
            "code": "print(1)",
            "thoughts": ["trivial"],
            "time_complexity": "O(1) - constant",
            "space_complexity": "O(1) - constant",
        },
    )

    out = capsys.readouterr().out
    assert out.startswith("print(1)")
    assert "  - trivial" in out
    assert "Time complexity: O(1) - constant" in out
