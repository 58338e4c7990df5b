# tuiedit/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Turns terminal input into editor events and editor events into action names.

Two pieces live here:

- ``KeyBinder`` loads the ``[keybindings]`` configuration (action -> list of
  key specs such as ``"ctrl+s"`` or ``"shift+home"``), normalizes every spec
  to its canonical ``ctrl+alt+shift+key`` form and answers ``lookup`` for a
  ``KeyEvent``.
- ``CursesInputSource`` reads from a curses window and produces ``KeyEvent``,
  ``PointerEvent`` and ``ResizeEvent`` objects. Escape sequences that curses
  does not decode itself are parsed with ``ESCAPE_SEQUENCE_MAP``; mouse
  reports from ``getmouse`` are split into down/drag/up/scroll events.

Intended Usage:
---------------
The editor owns a ``KeyBinder`` built from the merged configuration;
``main.py`` wraps ``stdscr`` in a ``CursesInputSource`` and hands it to
``Editor.run``.
"""

import curses
import logging
import re
from collections import deque
from typing import Any, Optional, Union

from tuiedit.core.Events import KeyEvent, MouseButton, PointerEvent, PointerKind, ResizeEvent
from tuiedit.utils.logging_config import KEY_LOGGER
from tuiedit.utils.utils import DEFAULT_CONFIG


# ncurses names for modified cursor keys whose numeric codes differ per terminfo entry.
EXTENDED_KEY_NAMES: dict[str, str] = {
    "kUP3": "alt+up", "kDN3": "alt+down", "kLFT3": "alt+left", "kRIT3": "alt+right",
    "kUP5": "ctrl+up", "kDN5": "ctrl+down", "kLFT5": "ctrl+left", "kRIT5": "ctrl+right",
    "kHOM5": "ctrl+home", "kEND5": "ctrl+end",
    "kUP6": "ctrl+shift+up", "kDN6": "ctrl+shift+down",
    "kLFT6": "ctrl+shift+left", "kRIT6": "ctrl+shift+right",
    "kHOM6": "ctrl+shift+home", "kEND6": "ctrl+shift+end",
    "kDC5": "ctrl+delete",
}


def _curses_key_names() -> dict[int, str]:
    names = {
        curses.KEY_UP: "up",
        curses.KEY_DOWN: "down",
        curses.KEY_LEFT: "left",
        curses.KEY_RIGHT: "right",
        curses.KEY_HOME: "home",
        getattr(curses, "KEY_END", curses.KEY_LL): "end",
        curses.KEY_PPAGE: "pageup",
        curses.KEY_NPAGE: "pagedown",
        curses.KEY_DC: "delete",
        curses.KEY_IC: "insert",
        curses.KEY_BACKSPACE: "backspace",
        curses.KEY_ENTER: "enter",
        curses.KEY_SLEFT: "shift+left",
        curses.KEY_SRIGHT: "shift+right",
        curses.KEY_SHOME: "shift+home",
        curses.KEY_SEND: "shift+end",
        getattr(curses, "KEY_SR", 337): "shift+up",
        getattr(curses, "KEY_SF", 336): "shift+down",
        getattr(curses, "KEY_BTAB", 353): "shift+tab",
    }
    for n in range(1, 13):
        names[curses.KEY_F0 + n] = f"f{n}"
    return names


CURSES_KEY_NAMES = _curses_key_names()

# Single characters with a fixed meaning, checked before the Ctrl+letter range.
CONTROL_CHAR_NAMES: dict[str, str] = {
    "\n": "enter",
    "\r": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x1b": "esc",
}


def translate_key(raw: Union[int, str]) -> Optional[KeyEvent]:
    """Maps a curses key code or ``get_wch`` character to a ``KeyEvent``.

    Returns None for codes with no meaning to the editor.
    """
    if isinstance(raw, str):
        if len(raw) != 1:
            return None
        if raw in CONTROL_CHAR_NAMES:
            return KeyEvent.parse(CONTROL_CHAR_NAMES[raw])
        code = ord(raw)
        if 1 <= code <= 26:
            # Ctrl+H arrives as 0x08; Backspace is 0x7f or KEY_BACKSPACE.
            return KeyEvent(chr(code + 96), frozenset({"ctrl"}))
        if raw.isprintable():
            return KeyEvent(raw)
        return None

    name = CURSES_KEY_NAMES.get(raw)
    if name is None and raw > 255:
        try:
            keyname = curses.keyname(raw).decode("ascii", "ignore")
        except (curses.error, ValueError):
            keyname = ""
        name = EXTENDED_KEY_NAMES.get(keyname)
    if name is None:
        if 0 <= raw <= 255:
            return translate_key(chr(raw))
        return None
    return KeyEvent.parse(name)


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Maps canonical key specs to action names.

    Attributes:
        config (dict): Merged application configuration.
        keybindings (dict): Action name -> list of canonical key specs.
        action_map (dict): Canonical key spec -> action name.
    """

    # Normalized escape sequences map. Keys do NOT include the leading ESC (0x1B),
    # because get_key_input() already strips/reads after ESC.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        # Arrows (CSI and SS3)
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",

        # xterm modifiers for arrows: ;2=Shift, ;3=Alt, ;5=Ctrl, ;6=Shift+Ctrl
        "[1;2A": "shift+up",    "[1;2B": "shift+down",
        "[1;2C": "shift+right", "[1;2D": "shift+left",

        "[1;3A": "alt+up",      "[1;3B": "alt+down",
        "[1;3C": "alt+right",   "[1;3D": "alt+left",

        "[1;5A": "ctrl+up",     "[1;5B": "ctrl+down",
        "[1;5C": "ctrl+right",  "[1;5D": "ctrl+left",

        "[1;6A": "shift+ctrl+up",    "[1;6B": "shift+ctrl+down",
        "[1;6C": "shift+ctrl+right", "[1;6D": "shift+ctrl+left",

        # Home/End with modifiers
        "[1;2H": "shift+home", "[1;2F": "shift+end",
        "[1;5H": "ctrl+home",  "[1;5F": "ctrl+end",
        "[1;6H": "shift+ctrl+home", "[1;6F": "shift+ctrl+end",

        # Home/End (CSI/SS3 and tilde variants)
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",

        # Insert/Delete/PageUp/PageDown (~ style)
        "[2~": "insert", "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",

        # Function keys (SS3 and tilde variants)
        "OP": "f1", "OQ": "f2", "OR": "f3", "OS": "f4",
        "[11~": "f1", "[12~": "f2", "[13~": "f3", "[14~": "f4",
        "[15~": "f5", "[17~": "f6", "[18~": "f7", "[19~": "f8",
        "[20~": "f9", "[21~": "f10", "[23~": "f11", "[24~": "f12",
    }

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        self.config = config or {}
        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()
        logging.debug("KeyBinder initialized with %d bound keys", len(self.action_map))

    def _decode_keystring(self, key_input: Union[str, KeyEvent]) -> str:
        """Canonical spec of ``key_input``. Raises ValueError on a malformed spec."""
        if isinstance(key_input, KeyEvent):
            return key_input.spec
        if not isinstance(key_input, str):
            raise ValueError(f"Key spec must be a string, got {type(key_input).__name__}")
        event = KeyEvent.parse(key_input)
        # Terminals report control and alt chords with the lowercase letter.
        if {"ctrl", "alt"} & event.modifiers:
            event = KeyEvent(event.code.lower(), event.modifiers)
        return event.spec

    def _load_keybindings(self) -> dict[str, list[str]]:
        """Default bindings overlaid with ``config["keybindings"]``.

        A user value may be a list of specs or a single string with ``|``
        separating alternatives. An empty value unbinds the action.
        """
        default_keybindings: dict[str, Any] = DEFAULT_CONFIG["keybindings"]
        user_keybindings: dict[str, Any] = self.config.get("keybindings", {}) or {}

        parsed_keybindings: dict[str, list[str]] = {}
        actions = list(default_keybindings) + [a for a in user_keybindings if a not in default_keybindings]

        for action in actions:
            spec_value = user_keybindings.get(action, default_keybindings.get(action))
            if not spec_value:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            if isinstance(spec_value, list):
                specs_to_process = spec_value
            elif isinstance(spec_value, str):
                specs_to_process = [s.strip() for s in spec_value.split("|")]
            else:
                logging.error("Invalid keybinding value %r for action %r. Ignored.", spec_value, action)
                continue

            key_specs: list[str] = []
            for key_spec_item in specs_to_process:
                if not key_spec_item:
                    continue
                try:
                    key_spec = self._decode_keystring(key_spec_item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        key_spec_item, action, e,
                    )
                    continue
                if key_spec not in key_specs:
                    key_specs.append(key_spec)

            if key_specs:
                parsed_keybindings[action] = key_specs
            else:
                logging.warning(
                    "No valid key specs found for action %r after parsing. It will not be bound.",
                    action,
                )

        logging.debug("Loaded keybindings (action -> specs): %s", parsed_keybindings)
        return parsed_keybindings

    def _setup_action_map(self) -> dict[str, str]:
        action_map: dict[str, str] = {}
        for action_name, key_specs in self.keybindings.items():
            for key_spec in key_specs:
                existing = action_map.get(key_spec)
                if existing and existing != action_name:
                    logging.warning(
                        "Keybinding for action '%s' (key: %s) is overwriting "
                        "an existing mapping for '%s'.",
                        action_name, key_spec, existing,
                    )
                action_map[key_spec] = action_name
        return action_map

    def lookup(self, key: Union[str, KeyEvent]) -> Optional[str]:
        """Action bound to ``key`` (an event or a spec string), or None."""
        try:
            decoded_key = self._decode_keystring(key)
        except ValueError:
            return None
        return self.action_map.get(decoded_key)

    def keys_for(self, action: str) -> list[str]:
        return list(self.keybindings.get(action, []))


# ==================== Curses input ====================
class CursesInputSource:
    """Reads one editor event at a time from a curses window.

    Args:
        stdscr: The window to read from (keypad mode should be on).
    """

    def __init__(self, stdscr: Any) -> None:
        self.stdscr = stdscr
        self._pending: deque[PointerEvent] = deque()
        self._primary_down = False

    def read_event(self, timeout_ms: int) -> Optional[Union[KeyEvent, PointerEvent, ResizeEvent]]:
        if self._pending:
            return self._pending.popleft()

        self.stdscr.timeout(timeout_ms)
        raw = self.get_key_input()
        if raw is None:
            return None

        KEY_LOGGER.debug("raw input: %r", raw)

        if isinstance(raw, KeyEvent):
            return raw
        if raw == curses.KEY_RESIZE:
            height, width = self.stdscr.getmaxyx()
            return ResizeEvent(height, width)
        if raw == curses.KEY_MOUSE:
            return self._read_mouse()

        event = translate_key(raw)
        if event is None:
            logging.debug("CursesInputSource: ignoring untranslatable input %r", raw)
        return event

    def get_key_input(self) -> Optional[Union[int, str, KeyEvent]]:
        """Read a single key or key sequence from the terminal with robust ESC parsing:
        - lone ESC -> ``KeyEvent("esc")``,
        - Alt/Meta chord: ESC + printable -> ``KeyEvent(char, {"alt"})``,
        - CSI/SS3 sequences (e.g., "[A", "OA", "[1;2A", "[5~", ...) via the map.

        Returns:
            The raw ``get_wch`` value (str or curses key code), a decoded
            ``KeyEvent`` for escape sequences, or None on timeout.
        """
        target = self.stdscr
        try:
            ch = target.get_wch()
        except curses.error:
            return None
        except KeyboardInterrupt:
            raise
        except Exception:
            logging.exception("get_key_input: unexpected error")
            return None

        if ch not in ("\x1b", 27):
            return ch  # fast path

        # ESC received: lone ESC, Alt chord, or an escape sequence
        seq = ""
        target.nodelay(True)
        try:
            while True:
                try:
                    nx = target.get_wch()
                except curses.error:
                    break
                if isinstance(nx, str):
                    seq += nx
                else:
                    # Extended code; keep as a marker, stripped by the cleanup below.
                    seq += f"<{nx}>"
        finally:
            target.nodelay(False)

        if not seq:
            logging.debug("get_key_input: standalone ESC")
            return KeyEvent("esc")

        # Some terminals deliver ESC-prefixed sequences: strip any leading ESC.
        if seq[0] == "\x1b":
            seq = seq[1:]

        if len(seq) == 1 and seq.isprintable():
            logging.debug("get_key_input: Alt chord -> alt+%s", seq)
            return KeyEvent(seq.lower() if seq.isalpha() else seq, frozenset({"alt"}))

        mapped = KeyBinder.ESCAPE_SEQUENCE_MAP.get(seq)
        if not mapped:
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", re.sub(r"<\d+>", "", seq)))
            mapped = KeyBinder.ESCAPE_SEQUENCE_MAP.get(cleaned)
            if mapped:
                logging.debug("get_key_input: cleaned %r -> %r -> %r", seq, cleaned, mapped)

        if mapped:
            return KeyEvent.parse(mapped)

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return KeyEvent("esc")

    # --- mouse ----------------------------------------------------------------

    def _read_mouse(self) -> Optional[PointerEvent]:
        try:
            _, x, y, _, bstate = curses.getmouse()
        except curses.error:
            logging.debug("CursesInputSource: getmouse() failed")
            return None
        events = self.pointer_events(bstate, y, x)
        if not events:
            return None
        self._pending.extend(events[1:])
        return events[0]

    def pointer_events(self, bstate: int, row: int, col: int) -> list[PointerEvent]:
        """Splits a curses button-state mask into pointer events.

        Clicks that curses already folded into ``BUTTON1_CLICKED`` (or a
        double-click) are expanded back into down/up pairs so the gesture
        interpreter sees the same stream as with ``mouseinterval(0)``.
        """
        primary, secondary, middle = MouseButton.PRIMARY, MouseButton.SECONDARY, MouseButton.MIDDLE
        button4 = getattr(curses, "BUTTON4_PRESSED", 0)
        button5 = getattr(curses, "BUTTON5_PRESSED", 0x200000)

        def ev(kind: PointerKind, button: MouseButton) -> PointerEvent:
            return PointerEvent(kind, button, row, col)

        if button4 and bstate & button4:
            return [ev(PointerKind.SCROLL_UP, MouseButton.NONE)]
        if button5 and bstate & button5:
            return [ev(PointerKind.SCROLL_DOWN, MouseButton.NONE)]

        if bstate & curses.BUTTON1_RELEASED:
            self._primary_down = False
            return [ev(PointerKind.UP, primary)]
        if bstate & curses.BUTTON1_PRESSED:
            self._primary_down = True
            return [ev(PointerKind.DOWN, primary)]
        if bstate & curses.REPORT_MOUSE_POSITION:
            if self._primary_down:
                return [ev(PointerKind.DRAG, primary)]
            return []
        if bstate & curses.BUTTON1_CLICKED:
            self._primary_down = False
            return [ev(PointerKind.DOWN, primary), ev(PointerKind.UP, primary)]
        if bstate & curses.BUTTON1_DOUBLE_CLICKED:
            self._primary_down = False
            return [
                ev(PointerKind.DOWN, primary), ev(PointerKind.UP, primary),
                ev(PointerKind.DOWN, primary), ev(PointerKind.UP, primary),
            ]

        if bstate & (curses.BUTTON3_PRESSED | curses.BUTTON3_CLICKED):
            return [ev(PointerKind.DOWN, secondary)]
        if bstate & curses.BUTTON3_RELEASED:
            return [ev(PointerKind.UP, secondary)]
        if bstate & (curses.BUTTON2_PRESSED | curses.BUTTON2_CLICKED):
            return [ev(PointerKind.DOWN, middle)]

        logging.debug("CursesInputSource: unhandled mouse state %#x at (%d, %d)", bstate, row, col)
        return []
