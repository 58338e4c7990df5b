# tests/conftest.py
"""Pytest configuration with shared fixtures for the tuiedit tests.

The engine is driven headless: ``ScriptedInputSource`` feeds events,
``MemoryRenderTarget`` records frames and a ``FakeClock`` replaces
``time.monotonic`` so double-click and throttle timing are deterministic.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Optional
from unittest.mock import MagicMock

import pytest

from tuiedit.core.Editor import Editor
from tuiedit.integrations.Localization import Localization
from tuiedit.ui.Targets import MemoryRenderTarget
from tuiedit.utils.utils import DEFAULT_CONFIG


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keeps config loading and env overrides away from the real home directory."""
    config_dir = tmp_path / "tuiedit-config"
    monkeypatch.setenv("TUIEDIT_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("TUIEDIT_LOCALE", raising=False)
    monkeypatch.delenv("TUIEDIT_KEYTRACE", raising=False)
    return config_dir


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """A private copy of the built-in defaults."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def localization() -> Localization:
    return Localization("en-US")


@pytest.fixture
def make_editor(
    mock_config: dict[str, Any], localization: Localization, clock: FakeClock
) -> Callable[..., Editor]:
    """Factory for a real ``Editor`` sized like a 24x80 terminal.

    Args (of the returned factory):
        lines: Initial buffer content.
        height/width: Terminal size used for the first frame.
        **overrides: Config sections merged over the defaults.
    """

    def _make(
        lines: Optional[list[str]] = None,
        height: int = 24,
        width: int = 80,
        **overrides: dict[str, Any],
    ) -> Editor:
        config = copy.deepcopy(mock_config)
        for section, values in overrides.items():
            config.setdefault(section, {}).update(values)
        editor = Editor(config, localization, clock=clock)
        if lines is not None:
            editor.buffer.set_lines(lines)
        editor.compose_frame(height, width)
        return editor

    return _make


@pytest.fixture
def memory_target() -> MemoryRenderTarget:
    return MemoryRenderTarget(24, 80)


@pytest.fixture
def mock_stdscr() -> MagicMock:
    """A mocked curses window reporting a 24x80 terminal."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def sample_text() -> list[str]:
    return [
        "def hello_world():",
        "    # This is a comment",
        "    print('Hello, world!')",
        "    return True",
        "",
    ]
