# tests/ui/test_terminal_app_mode.py
"""Tests for entering and leaving the editor's terminal mode."""

from unittest.mock import MagicMock, call, patch

import pytest

from tuiedit.ui.TerminalAppMode import MOUSE_TRACKING_OFF, MOUSE_TRACKING_ON, TerminalAppMode


class CursesError(Exception):
    pass


@pytest.fixture
def term():
    curses_mock = MagicMock()
    curses_mock.error = CursesError
    curses_mock.ALL_MOUSE_EVENTS = 0x0FFFFFFF
    curses_mock.REPORT_MOUSE_POSITION = 0x10000000
    curses_mock.mousemask.return_value = (0x1FFFFFFF, 0x42)

    def tigetstr(capname):
        return {"smcup": b"\x1b[?1049h", "rmcup": b"\x1b[?1049l", "smkx": b"\x1b[?1h", "rmkx": None}.get(capname)

    with patch("tuiedit.ui.TerminalAppMode.curses", curses_mock), \
            patch("tuiedit.ui.TerminalAppMode.setupterm") as setupterm, \
            patch("tuiedit.ui.TerminalAppMode.putp") as putp, \
            patch("tuiedit.ui.TerminalAppMode.tigetstr", side_effect=tigetstr):
        yield {"curses": curses_mock, "setupterm": setupterm, "putp": putp}


def test_enter_sets_up_terminal(term, mock_stdscr: MagicMock, capsys: pytest.CaptureFixture) -> None:
    mode = TerminalAppMode()
    mode.enter(mock_stdscr)
    curses_mock = term["curses"]

    assert mode.entered
    term["setupterm"].assert_called_once()
    assert term["putp"].call_args_list == [call(b"\x1b[?1049h"), call(b"\x1b[?1h")]
    curses_mock.raw.assert_called_once()
    curses_mock.noecho.assert_called_once()
    mock_stdscr.keypad.assert_called_with(True)
    mock_stdscr.scrollok.assert_called_with(False)
    curses_mock.mousemask.assert_called_once_with(0x0FFFFFFF | 0x10000000)
    curses_mock.mouseinterval.assert_called_once_with(0)
    assert MOUSE_TRACKING_ON in capsys.readouterr().out


def test_raw_failure_falls_back_to_cbreak(term, mock_stdscr: MagicMock) -> None:
    term["curses"].raw.side_effect = CursesError("no raw")
    TerminalAppMode().enter(mock_stdscr)
    term["curses"].cbreak.assert_called_once()


def test_exit_restores_terminal(term, mock_stdscr: MagicMock, capsys: pytest.CaptureFixture) -> None:
    mode = TerminalAppMode()
    mode.enter(mock_stdscr)
    capsys.readouterr()
    term["putp"].reset_mock()

    mode.exit()
    curses_mock = term["curses"]

    assert not mode.entered
    assert MOUSE_TRACKING_OFF in capsys.readouterr().out
    curses_mock.mousemask.assert_called_with(0x42)
    mock_stdscr.keypad.assert_called_with(False)
    curses_mock.noraw.assert_called_once()
    curses_mock.echo.assert_called_once()
    # rmkx is missing from this terminfo entry, so only rmcup is sent
    term["putp"].assert_called_once_with(b"\x1b[?1049l")


def test_mouse_can_be_disabled(term, mock_stdscr: MagicMock, capsys: pytest.CaptureFixture) -> None:
    mode = TerminalAppMode(mouse_enabled=False)
    mode.enter(mock_stdscr)
    mode.exit()
    term["curses"].mousemask.assert_not_called()
    out = capsys.readouterr().out
    assert MOUSE_TRACKING_ON not in out
    assert MOUSE_TRACKING_OFF not in out


def test_mouse_unavailable_is_not_fatal(term, mock_stdscr: MagicMock, capsys: pytest.CaptureFixture) -> None:
    term["curses"].mousemask.side_effect = CursesError("no mouse")
    mode = TerminalAppMode()
    mode.enter(mock_stdscr)
    assert mode.entered
    assert MOUSE_TRACKING_ON not in capsys.readouterr().out


def test_exit_without_enter_is_noop(term) -> None:
    TerminalAppMode().exit()
    term["curses"].noraw.assert_not_called()
    term["putp"].assert_not_called()
