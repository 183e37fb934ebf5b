"""Tests for environment-driven debug categories."""

from __future__ import annotations

from typing import Iterator

import pytest

from pydiz.utils import debug_enabled, debug_log, reload_debug_categories
from pydiz.utils.debug import ENV_VAR


@pytest.fixture
def debug_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    yield monkeypatch
    monkeypatch.delenv(ENV_VAR, raising=False)
    reload_debug_categories()


def test_disabled_without_environment(debug_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    debug_env.delenv(ENV_VAR, raising=False)
    assert reload_debug_categories() == set()

    assert debug_enabled("step") is False
    debug_log("step", "hidden")
    assert capsys.readouterr().out == ""


def test_selected_categories(debug_env: pytest.MonkeyPatch) -> None:
    debug_env.setenv(ENV_VAR, " Step , flow,,")

    assert reload_debug_categories() == {"step", "flow"}
    assert debug_enabled("step")
    assert debug_enabled("FLOW")
    assert not debug_enabled("loader")


def test_all_enables_everything(debug_env: pytest.MonkeyPatch) -> None:
    debug_env.setenv(ENV_VAR, "all")
    reload_debug_categories()

    assert debug_enabled("loader")
    assert debug_enabled()


def test_log_formats_arguments(debug_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    debug_env.setenv(ENV_VAR, "auto")
    reload_debug_categories()

    debug_log("auto", "stopped at %06x", 0x1234)
    debug_log("auto", "bad format %d", "text")

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "[PYDIZ][auto] stopped at 001234"
    assert lines[1] == "[PYDIZ][auto] bad format %d ('text',)"
