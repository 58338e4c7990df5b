# tuiedit/ui/TerminalAppMode.py
from __future__ import annotations

import curses
import logging
import sys
from typing import Optional

from curses import putp, setupterm, tigetstr

# xterm "button-event tracking": press, release and motion while a button is held.
MOUSE_TRACKING_ON = "\033[?1002h"
MOUSE_TRACKING_OFF = "\033[?1002l"


class TerminalAppMode:
    """
    Put the terminal into the state the editor needs, and take it back out:

    - Alternate screen buffer (smcup/rmcup) so the shell scrollback is untouched.
    - Application cursor keys (smkx/rmkx) so modified arrows reach the editor.
    - raw + noecho (+ cbreak fallback), keypad(True), meta(True).
    - Mouse reporting: curses mousemask plus xterm drag tracking when enabled.
    - No curses-level scrolling (scrollok(False)).

    Always pair `enter(stdscr)` with `exit()` (try/finally).
    """

    def __init__(self, mouse_enabled: bool = True) -> None:
        self.mouse_enabled = mouse_enabled
        self._entered: bool = False
        self._mouse_on: bool = False
        self._previous_mousemask: int = 0
        self._stdscr: Optional[curses.window] = None

    @property
    def entered(self) -> bool:
        return self._entered

    def enter(self, stdscr: curses.window) -> None:
        self._stdscr = stdscr

        # tigetstr needs terminfo loaded.
        try:
            setupterm()
        except curses.error as e:
            logging.debug("setupterm() failed or not required: %r", e)

        self._tputs("smcup")
        self._tputs("smkx")

        try:
            curses.raw()  # deliver all control chars (including ^Q/^S) to us
        except curses.error:
            curses.cbreak()
        curses.noecho()

        stdscr.keypad(True)
        try:
            curses.meta(stdscr, True)
        except curses.error:
            pass

        try:
            curses.set_escdelay(35)
        except (curses.error, AttributeError):
            pass

        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error:
            pass

        if self.mouse_enabled:
            self._enable_mouse()

        stdscr.scrollok(False)
        stdscr.leaveok(False)
        stdscr.clearok(True)
        stdscr.erase()
        stdscr.refresh()

        self._entered = True
        logging.debug("TerminalAppMode: entered (alternate screen, app cursor keys, mouse=%s).", self._mouse_on)

    def exit(self) -> None:
        if not self._entered:
            return

        if self._mouse_on:
            self._disable_mouse()

        try:
            if self._stdscr is not None:
                self._stdscr.keypad(False)
        except curses.error:
            pass

        try:
            curses.noraw()
        except curses.error:
            try:
                curses.nocbreak()
            except curses.error:
                pass
        try:
            curses.echo()
        except curses.error:
            pass

        self._tputs("rmkx")
        self._tputs("rmcup")

        self._entered = False
        logging.debug("TerminalAppMode: exited (restored terminal modes).")

    # ── helpers ───────────────────────────────────────────────────────────────

    def _enable_mouse(self) -> None:
        try:
            _available, self._previous_mousemask = curses.mousemask(
                curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION
            )
            curses.mouseinterval(0)  # clicks are assembled by GestureInterpreter
        except curses.error as e:
            logging.warning("Mouse support unavailable: %r", e)
            return
        self._write_raw(MOUSE_TRACKING_ON)
        self._mouse_on = True

    def _disable_mouse(self) -> None:
        self._write_raw(MOUSE_TRACKING_OFF)
        try:
            curses.mousemask(self._previous_mousemask)
        except curses.error as e:
            logging.debug("mousemask restore failed: %r", e)
        self._mouse_on = False

    @staticmethod
    def _write_raw(sequence: str) -> None:
        try:
            sys.stdout.write(sequence)
            sys.stdout.flush()
        except OSError as e:
            logging.debug("Could not write terminal sequence %r: %r", sequence, e)

    def _tputs(self, capname: str) -> None:
        try:
            s = tigetstr(capname)
            if s:
                putp(s)
        except curses.error as e:
            # Missing capability (FreeBSD console, dumb terminals).
            logging.debug("tputs(%s) skipped: %r", capname, e)
