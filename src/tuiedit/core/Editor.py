# tuiedit/core/Editor.py
"""Editor.py
================
The editor engine: the single owner of all editing state and the control
loop that drives it.

One ``Editor`` holds the buffer, cursor, selection, viewport, gesture
interpreter and render throttle. ``run`` reads one event at a time from an
``InputSource``, dispatches it, and hands a composed ``Frame`` to a
``RenderTarget``. Curses is only one pair of those; tests drive the very same
loop with a scripted source and an in-memory target.

Every handler returns ``bool``: True when the screen needs a redraw.
Handlers that must be seen at once (save, open, toggles, language switch,
resize) also set ``_force_render`` so the frame bypasses the throttle.
"""

import enum
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from tuiedit.core import (
    Buffer,
    CursorController,
    Direction,
    KeyEvent,
    PointerEvent,
    RenderThrottle,
    ResizeEvent,
    Selection,
    Viewport,
)
from tuiedit.core.Selection import find_word_boundaries
from tuiedit.integrations.FileStore import FileStore, FileStoreError
from tuiedit.integrations.Highlighter import PLAIN_TEXT, Highlighter
from tuiedit.integrations.LinterBridge import LinterBridge, LintIssue, LintSeverity
from tuiedit.integrations.Localization import Localization
from tuiedit.ui.FrameRenderer import Frame, FrameRenderer, RenderInput, column_at_cell, gutter_width_for
from tuiedit.ui.KeyBinder import KeyBinder
from tuiedit.ui.MouseGestures import Gesture, GestureInterpreter, GestureKind
from tuiedit.ui.Targets import InputSource, RenderTarget
from tuiedit.utils.utils import get_file_icon

logger = logging.getLogger("tuiedit")

# Rows taken by the header line and the status bar.
HEADER_ROWS = 1
CHROME_ROWS = 2


class RedrawMode(enum.Enum):
    NONE = "none"
    IMMEDIATE = "immediate"
    THROTTLED = "throttled"
    FLUSH = "flush"


@dataclass
class Prompt:
    """Inline single-line prompt shown in the status bar."""

    kind: str
    label: str
    text: str = ""


class Editor:
    """Interactive editor state machine.

    Args:
        config (dict): Merged application configuration.
        localization (Localization): Source of every user-visible string.
        highlighter: Syntax highlighter; a pygments ``Highlighter`` by default.
        linter: Diagnostics provider; ``LinterBridge`` by default.
        file_store: Document persistence; ``FileStore`` by default.
        clock: Monotonic time source in seconds, shared by the gesture
            interpreter and the render throttle.

    Attributes:
        filename (str | None): Path of the current document.
        language (str): Language label used for highlighting.
        modified (bool): Buffer differs from what was last loaded or saved.
        status_message (str): Message shown in the middle of the status bar.
        quit_pending (bool): A quit was refused because of unsaved changes;
            pressing quit again exits, any other action cancels.
        prompt (Prompt | None): Active inline prompt.
    """

    def __init__(
        self,
        config: dict[str, Any],
        localization: Localization,
        highlighter: Optional[Highlighter] = None,
        linter: Optional[LinterBridge] = None,
        file_store: Optional[FileStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.l10n = localization

        editor_cfg = config.get("editor", {})
        mouse_cfg = config.get("mouse", {})
        render_cfg = config.get("render", {})
        linting_cfg = config.get("linting", {})

        self.tab_size: int = int(editor_cfg.get("tab_size", 4))
        self.use_spaces: bool = bool(editor_cfg.get("use_spaces", True))
        self.confirm_quit: bool = bool(editor_cfg.get("confirm_quit", True))
        self.default_language: str = editor_cfg.get("default_language", PLAIN_TEXT)
        self.mouse_enabled: bool = bool(mouse_cfg.get("enabled", True))
        self.scroll_step: int = max(1, int(mouse_cfg.get("scroll_step", 3)))
        self.input_timeout_ms: int = int(render_cfg.get("input_timeout_ms", 100))

        self.highlighter = highlighter or Highlighter()
        self.linter = linter or LinterBridge(
            enabled=bool(linting_cfg.get("enabled", True)),
            max_line_length=int(linting_cfg.get("max_line_length", 100)),
            python_max_line_length=int(linting_cfg.get("python_max_line_length", 79)),
        )
        self.file_store = file_store or FileStore()

        self.buffer = Buffer()
        self.cursor = CursorController(self.buffer)
        self.selection: Optional[Selection] = None
        self._selection_anchor: Optional[tuple[int, int]] = None
        self.viewport = Viewport()
        self.gestures = GestureInterpreter(
            double_click_ms=int(mouse_cfg.get("double_click_ms", 500)),
            column_tolerance=int(mouse_cfg.get("column_tolerance", 2)),
            clock=clock,
        )
        self.throttle = RenderThrottle(int(render_cfg.get("throttle_ms", 16)), clock=clock)
        self.renderer = FrameRenderer(
            truncation_marker=render_cfg.get("truncation_marker", "…"),
            filler_glyph=render_cfg.get("filler_glyph", "~"),
        )
        self.keybinder = KeyBinder(config)
        self.action_map = self._setup_action_map()

        self.filename: Optional[str] = None
        self.language: str = self.default_language
        self.modified = False
        self.highlighting_enabled = bool(config.get("highlighting", {}).get("enabled", True))
        self.lint_issues: list[LintIssue] = []
        self.status_message = ""
        self.status_is_error = False
        self.quit_pending = False
        self.prompt: Optional[Prompt] = None
        self.running = False
        self._force_render = True
        self.screen_height = 0
        self.screen_width = 0

        self._set_status_message(self.l10n.get("app.welcome"))
        logger.info("Editor initialized (language=%s, mouse=%s)", self.language, self.mouse_enabled)

    # --- action table --------------------------------------------------------

    def _setup_action_map(self) -> dict[str, Callable[[], bool]]:
        action_map: dict[str, Callable[[], bool]] = {
            "quit": self.request_quit,
            "save_file": self.save_file,
            "open_file": self.prompt_open_file,
            "new_file": self.new_file,
            "goto_line": self.prompt_goto_line,
            "duplicate_line": self.duplicate_line,
            "delete_line": self.delete_line,
            "toggle_highlighting": self.toggle_highlighting,
            "toggle_linting": self.toggle_linting,
            "cycle_language": self.cycle_language,
            "select_all": self.select_all,
            "cancel_operation": self.handle_escape,
            "handle_up": lambda: self._move(lambda: self.cursor.move_cursor(Direction.UP)),
            "handle_down": lambda: self._move(lambda: self.cursor.move_cursor(Direction.DOWN)),
            "handle_left": lambda: self._move(lambda: self.cursor.move_cursor(Direction.LEFT)),
            "handle_right": lambda: self._move(lambda: self.cursor.move_cursor(Direction.RIGHT)),
            "handle_home": lambda: self._move(self.cursor.move_to_line_start),
            "handle_end": lambda: self._move(self.cursor.move_to_line_end),
            "handle_page_up": lambda: self.handle_page(-1),
            "handle_page_down": lambda: self.handle_page(1),
            "document_start": self.handle_document_start,
            "document_end": self.handle_document_end,
            "word_left": lambda: self._move(self.cursor.move_word_left),
            "word_right": lambda: self._move(self.cursor.move_word_right),
            "extend_selection_up": lambda: self._move(lambda: self.cursor.move_cursor(Direction.UP), extend=True),
            "extend_selection_down": lambda: self._move(lambda: self.cursor.move_cursor(Direction.DOWN), extend=True),
            "extend_selection_left": lambda: self._move(lambda: self.cursor.move_cursor(Direction.LEFT), extend=True),
            "extend_selection_right": lambda: self._move(lambda: self.cursor.move_cursor(Direction.RIGHT), extend=True),
            "select_to_home": lambda: self._move(self.cursor.move_to_line_start, extend=True),
            "select_to_end": lambda: self._move(self.cursor.move_to_line_end, extend=True),
            "select_to_document_start": lambda: self._move(self.cursor.move_to_document_start, extend=True),
            "select_to_document_end": lambda: self._move(self.cursor.move_to_document_end, extend=True),
            "extend_word_left": lambda: self._move(self.cursor.move_word_left, extend=True),
            "extend_word_right": lambda: self._move(self.cursor.move_word_right, extend=True),
            "handle_enter": self.handle_enter,
            "handle_backspace": self.handle_backspace,
            "delete": self.handle_delete,
            "tab": self.handle_tab,
        }
        for action_name in self.keybinder.keybindings:
            if action_name not in action_map:
                logging.warning(f"Action '{action_name}' in keybindings but no corresponding method. Ignored.")
        return action_map

    # --- status ---------------------------------------------------------------

    def _set_status_message(self, message: str, is_error: bool = False) -> None:
        message = str(message)
        if self.status_message != message:
            self.status_message = message
            logging.debug(f"Status message set to: '{message}'")
        self.status_is_error = is_error

    def _state_text(self, enabled: bool) -> str:
        return self.l10n.get("state.on" if enabled else "state.off")

    # --- input dispatch -------------------------------------------------------

    def handle_event(self, event: Union[KeyEvent, PointerEvent, ResizeEvent]) -> RedrawMode:
        """Dispatches one input event and reports how the result should be drawn."""
        if isinstance(event, KeyEvent):
            return RedrawMode.IMMEDIATE if self.handle_key(event) else RedrawMode.NONE
        if isinstance(event, PointerEvent):
            return RedrawMode.THROTTLED if self.handle_pointer(event) else RedrawMode.NONE
        if isinstance(event, ResizeEvent):
            return RedrawMode.IMMEDIATE if self.handle_resize(event) else RedrawMode.NONE
        logging.warning("Editor: ignoring unknown event %r", event)
        return RedrawMode.NONE

    def handle_key(self, event: KeyEvent) -> bool:
        logging.debug("handle_key: %s", event.spec)

        if self.prompt is not None:
            return self._handle_prompt_key(event)

        action = self.keybinder.lookup(event)

        # Escape reports the cancellation itself.
        if self.quit_pending and action not in ("quit", "cancel_operation"):
            self.quit_pending = False
            logging.debug("Pending quit confirmation cancelled by '%s'", action or event.spec)

        if action is not None:
            handler = self.action_map.get(action)
            if handler is not None:
                return handler()

        if event.is_printable:
            return self.insert_text(event.code)

        self._set_status_message(self.l10n.get("status.unbound_key", key=event.spec))
        return True

    def handle_resize(self, event: ResizeEvent) -> bool:
        self.screen_height, self.screen_width = event.height, event.width
        self.viewport.resize(max(1, event.height - CHROME_ROWS), len(self.buffer))
        self._follow_cursor()
        self._set_status_message(self.l10n.get("status.resized", width=event.width, height=event.height))
        self._force_render = True
        logging.debug("Editor: resized to %dx%d, %r", event.width, event.height, self.viewport)
        return True

    # --- editing --------------------------------------------------------------

    def _after_edit(self) -> None:
        self.cursor.validate()
        self.modified = True
        self._refresh_lint()
        self._follow_cursor()

    def _delete_selection(self) -> bool:
        if self.selection is None:
            return False
        if not self.selection.is_empty:
            self.selection.delete_selected_text(self.buffer, self.cursor)
        self._clear_selection()
        return True

    def insert_text(self, text: str) -> bool:
        """Inserts text at the cursor, replacing the selection if there is one."""
        if not text:
            return False
        self._delete_selection()
        if len(text) == 1:
            self.cursor.insert_char(text)
        else:
            self.cursor.insert_text(text)
        self._after_edit()
        return True

    def handle_enter(self) -> bool:
        self._delete_selection()
        self.cursor.insert_newline()
        self._after_edit()
        return True

    def handle_backspace(self) -> bool:
        if self._delete_selection():
            self._after_edit()
            return True
        if self.cursor.delete_backward():
            self._after_edit()
            return True
        return False

    def handle_delete(self) -> bool:
        if self._delete_selection():
            self._after_edit()
            return True
        if self.cursor.delete_forward():
            self._after_edit()
            return True
        return False

    def handle_tab(self) -> bool:
        return self.insert_text(" " * self.tab_size if self.use_spaces else "\t")

    def duplicate_line(self) -> bool:
        self._clear_selection()
        new_row = self.buffer.duplicate_line(self.cursor.row)
        self.cursor.set_position(new_row, self.cursor.col)
        self._after_edit()
        self._set_status_message(self.l10n.get("status.line_duplicated"))
        return True

    def delete_line(self) -> bool:
        self._clear_selection()
        self.buffer.delete_line(self.cursor.row)
        self._after_edit()
        self._set_status_message(self.l10n.get("status.line_deleted"))
        return True

    # --- movement and selection ----------------------------------------------

    def _clear_selection(self) -> bool:
        had_selection = self.selection is not None or self._selection_anchor is not None
        self.selection = None
        self._selection_anchor = None
        return had_selection

    def _select(self, anchor: tuple[int, int], row: int, col: int) -> None:
        self._selection_anchor = anchor
        selection = Selection.between(anchor[0], anchor[1], row, col)
        self.selection = None if selection.is_empty else selection

    def _follow_cursor(self) -> bool:
        return self.viewport.follow(self.cursor.row, len(self.buffer))

    def _move(self, move: Callable[[], bool], extend: bool = False) -> bool:
        """Runs a cursor movement; ``extend`` grows the selection from its anchor."""
        if extend:
            if self._selection_anchor is None:
                self._selection_anchor = (self.cursor.row, self.cursor.col)
            changed = move()
            self._select(self._selection_anchor, self.cursor.row, self.cursor.col)
        else:
            cleared = self._clear_selection()
            changed = move() or cleared
        scrolled = self._follow_cursor()
        return changed or scrolled or extend

    def handle_page(self, direction: int) -> bool:
        step = self.viewport.page_size * (1 if direction > 0 else -1)
        cleared = self._clear_selection()
        moved = self.cursor.set_position(self.cursor.row + step, self.cursor.col)
        scrolled = self.viewport.scroll_by(step, len(self.buffer))
        scrolled = self._follow_cursor() or scrolled
        return moved or scrolled or cleared

    def handle_document_start(self) -> bool:
        self._move(self.cursor.move_to_document_start)
        self._set_status_message(self.l10n.get("status.doc_start"))
        return True

    def handle_document_end(self) -> bool:
        self._move(self.cursor.move_to_document_end)
        self._set_status_message(self.l10n.get("status.doc_end"))
        return True

    def select_all(self) -> bool:
        self.cursor.move_to_document_end()
        self._select((0, 0), self.cursor.row, self.cursor.col)
        self._follow_cursor()
        self._set_status_message(self.l10n.get("status.all_selected", count=self.buffer.char_count()))
        return True

    def handle_escape(self) -> bool:
        """Cancels the pending quit, else the selection, else any armed drag."""
        self.gestures.reset()
        if self.quit_pending:
            self.quit_pending = False
            self._set_status_message(self.l10n.get("status.quit_cancelled"))
        elif self._clear_selection():
            self._set_status_message(self.l10n.get("status.selection_cleared"))
        else:
            self._set_status_message(self.l10n.get("status.cancelled"))
        return True

    # --- pointer --------------------------------------------------------------

    def handle_pointer(self, event: PointerEvent) -> bool:
        """Feeds a raw pointer event (terminal cells) to the gesture interpreter."""
        if not self.mouse_enabled:
            return False

        row = max(0, min(event.row - HEADER_ROWS, self.viewport.height - 1))
        col = max(0, event.col - gutter_width_for(len(self.buffer)))
        gesture = self.gestures.interpret(PointerEvent(event.kind, event.button, row, col))
        if gesture.kind is GestureKind.NONE:
            return False

        if self.quit_pending:
            self.quit_pending = False
        logging.debug("handle_pointer: %s at (%d, %d)", gesture.kind.value, gesture.row, gesture.col)
        return self._apply_gesture(gesture)

    def _document_position(self, screen_row: int, cell: int) -> tuple[int, int]:
        """Document (row, codepoint column) under a content-area screen cell."""
        row = self.buffer.clamp_row(self.viewport.to_document_row(screen_row))
        return row, column_at_cell(self.buffer.line(row), cell)

    def _apply_gesture(self, gesture: Gesture) -> bool:
        kind = gesture.kind
        offset = self.viewport.scroll_offset
        total = len(self.buffer)

        if kind is GestureKind.SCROLL_UP:
            self.viewport.scroll_by(-self.scroll_step, total)
            self._set_status_message(self.l10n.get("status.scrolled_up"))
            return True
        if kind is GestureKind.SCROLL_DOWN:
            self.viewport.scroll_by(self.scroll_step, total)
            self._set_status_message(self.l10n.get("status.scrolled_down"))
            return True

        if kind is GestureKind.CLICK:
            self._clear_selection()
            _, col = self._document_position(gesture.row, gesture.col)
            self.cursor.move_to_position(gesture.row, col, offset)
            self._set_status_message(
                self.l10n.get("status.cursor_moved", row=self.cursor.row + 1, col=self.cursor.col + 1)
            )
        elif kind is GestureKind.DOUBLE_CLICK:
            row, col = self._document_position(gesture.row, gesture.col)
            start, end = find_word_boundaries(self.buffer.line(row), col)
            if end > start:
                self._select((row, start), row, end)
                self.cursor.set_position(row, end)
                self._set_status_message(self.l10n.get("status.word_selected"))
            else:
                self._clear_selection()
                self.cursor.set_position(row, col)
        elif kind is GestureKind.DRAG:
            _, col = self._document_position(gesture.row, gesture.col)
            self.cursor.move_to_position(gesture.row, col, offset)
            self._set_status_message(self.l10n.get("status.selecting"))
        elif kind is GestureKind.DRAG_END:
            anchor_row, anchor_col = gesture.anchor or (gesture.row, gesture.col)
            anchor = self._document_position(anchor_row, anchor_col)
            row, col = self._document_position(gesture.row, gesture.col)
            self.cursor.set_position(row, col)
            self._select(anchor, row, col)
            count = self.selection.char_count(self.buffer) if self.selection else 0
            self._set_status_message(self.l10n.get("status.selected_chars", count=count))
        elif kind is GestureKind.RIGHT_CLICK:
            _, col = self._document_position(gesture.row, gesture.col)
            self.cursor.move_to_position(gesture.row, col, offset)
            row, col = self.cursor.row + 1, self.cursor.col + 1
            if self.selection is not None:
                self._set_status_message(self.l10n.get(
                    "status.context_menu_selection",
                    count=self.selection.char_count(self.buffer), row=row, col=col,
                ))
            else:
                self._set_status_message(self.l10n.get("status.context_menu", row=row, col=col))
        else:
            return False

        self._follow_cursor()
        return True

    # --- files ----------------------------------------------------------------

    def open_file(self, path: str) -> bool:
        """Replaces the buffer with ``path``. Errors become a status message."""
        self._force_render = True
        path = os.path.expanduser(path)
        try:
            lines = self.file_store.load(path)
        except FileStoreError as e:
            logger.error("Failed to open '%s': %s", path, e, exc_info=True)
            self._set_status_message(
                self.l10n.get("status.load_error", filename=path, error=e.reason), is_error=True
            )
            return True

        self.buffer.set_lines(lines)
        self.cursor.set_position(0, 0)
        self._clear_selection()
        self.gestures.reset()
        self.viewport.scroll_offset = 0
        self.filename = path
        self.language = self.highlighter.detect_language(path)
        self.modified = False
        self._refresh_lint()
        self._set_status_message(self.l10n.get("status.loaded", filename=os.path.basename(path)))
        logger.info("Opened '%s' (%d lines, %s)", path, len(self.buffer), self.language)
        return True

    def name_new_document(self, path: str) -> None:
        """Names the empty buffer after a path that does not exist yet."""
        self.filename = os.path.expanduser(path)
        self.language = self.highlighter.detect_language(self.filename)
        self._refresh_lint()

    def save_file(self) -> bool:
        if not self.filename:
            return self._start_prompt("save_as")
        self._write_file(self.filename)
        return True

    def save_file_as(self, path: str) -> bool:
        path = os.path.expanduser(path)
        if self._write_file(path):
            self.filename = path
            if self.language == PLAIN_TEXT:
                self.language = self.highlighter.detect_language(path)
            self._refresh_lint()
        return True

    def _write_file(self, path: str) -> bool:
        """Saves the buffer to ``path``. Returns False when the write failed."""
        self._force_render = True
        try:
            self.file_store.save(path, self.buffer.lines)
        except FileStoreError as e:
            logger.error("Failed to save '%s': %s", path, e, exc_info=True)
            self._set_status_message(
                self.l10n.get("status.save_error", filename=path, error=e.reason), is_error=True
            )
            return False
        self.modified = False
        self.quit_pending = False
        self._set_status_message(self.l10n.get("status.saved", filename=os.path.basename(path)))
        return True

    def new_file(self) -> bool:
        if self.modified:
            self._set_status_message(self.l10n.get("status.new_file_refused"))
            return True
        self.buffer.set_lines([""])
        self.cursor.set_position(0, 0)
        self._clear_selection()
        self.gestures.reset()
        self.viewport.scroll_offset = 0
        self.filename = None
        self.language = self.default_language
        self.modified = False
        self._refresh_lint()
        self._set_status_message(self.l10n.get("status.new_file"))
        self._force_render = True
        return True

    def request_quit(self) -> bool:
        if self.modified and self.confirm_quit and not self.quit_pending:
            self.quit_pending = True
            self._set_status_message(self.l10n.get("status.unsaved_quit"))
            return True
        logger.info("Quit requested (modified=%s)", self.modified)
        self.running = False
        return False

    # --- prompts --------------------------------------------------------------

    def _start_prompt(self, kind: str, initial: str = "") -> bool:
        self.prompt = Prompt(kind, self.l10n.get(f"prompt.{kind}"), initial)
        return True

    def prompt_open_file(self) -> bool:
        if self.modified:
            self._set_status_message(self.l10n.get("status.open_refused"))
            return True
        return self._start_prompt("open")

    def prompt_goto_line(self) -> bool:
        return self._start_prompt("goto")

    def _handle_prompt_key(self, event: KeyEvent) -> bool:
        prompt = self.prompt
        if prompt is None:
            return False
        code, mods = event.code, event.modifiers
        if code == "esc":
            self.prompt = None
            self._set_status_message(self.l10n.get("status.cancelled"))
        elif code == "enter":
            self.prompt = None
            self._submit_prompt(prompt.kind, prompt.text.strip())
        elif code == "backspace" and not mods:
            prompt.text = prompt.text[:-1]
        elif event.is_printable:
            prompt.text += event.code
        return True

    def _submit_prompt(self, kind: str, value: str) -> None:
        if not value:
            self._set_status_message(self.l10n.get("status.cancelled"))
            return
        if kind == "open":
            self.open_file(value)
        elif kind == "save_as":
            self.save_file_as(value)
        elif kind == "goto":
            self.goto_line(value)

    def goto_line(self, value: str) -> bool:
        try:
            line_number = int(value)
        except ValueError:
            line_number = 0
        if not 1 <= line_number <= len(self.buffer):
            self._set_status_message(self.l10n.get("status.goto_invalid", value=value))
            return True
        self._clear_selection()
        self.cursor.set_position(line_number - 1, 0)
        self._follow_cursor()
        self._set_status_message(self.l10n.get("status.goto_done", line=line_number))
        return True

    # --- toggles --------------------------------------------------------------

    def toggle_highlighting(self) -> bool:
        self.highlighting_enabled = not self.highlighting_enabled
        self._set_status_message(
            self.l10n.get("status.highlighting", state=self._state_text(self.highlighting_enabled))
        )
        self._force_render = True
        return True

    def toggle_linting(self) -> bool:
        enabled = self.linter.toggle()
        self._refresh_lint()
        self._set_status_message(self.l10n.get("status.linting", state=self._state_text(enabled)))
        self._force_render = True
        return True

    def cycle_language(self) -> bool:
        self.language = self.highlighter.next_language(self.language)
        self._set_status_message(self.l10n.get("status.language", language=self.language))
        self._force_render = True
        return True

    def _refresh_lint(self) -> None:
        if not self.linter.enabled:
            self.lint_issues = []
            return
        self.lint_issues = self.linter.lint(self.buffer.text(), self.filename)

    # --- frame composition ----------------------------------------------------

    def _header_text(self) -> str:
        name = os.path.basename(self.filename) if self.filename else self.l10n.get("app.untitled")
        parts = [get_file_icon(self.filename, self.config), name]
        if self.modified:
            parts.append(self.l10n.get("statusbar.modified"))
        parts.append(f"[{self.language}]")
        return " ".join(parts)

    def _status_left(self) -> str:
        text = self.l10n.get("statusbar.position", row=self.cursor.row + 1, col=self.cursor.col + 1)
        if self.selection is not None:
            count = self.selection.char_count(self.buffer)
            text += " | " + self.l10n.get("statusbar.selection", count=count)
        return text

    def _status_right(self) -> str:
        text = f"{self.language} | " + self.l10n.get("statusbar.lines", count=len(self.buffer))
        if not self.linter.enabled:
            return text
        if not self.lint_issues:
            return text + " | " + self.l10n.get("statusbar.lint_clean")
        counts = self.linter.issue_counts(self.lint_issues)
        parts = [
            self.l10n.get(f"statusbar.lint_{severity.value}", count=counts[severity])
            for severity in LintSeverity
            if counts[severity]
        ]
        return text + " | " + " ".join(parts)

    def compose_frame(self, height: int, width: int) -> Frame:
        """Builds the frame for a terminal of ``height`` x ``width`` cells."""
        total = len(self.buffer)
        self.viewport.resize(max(1, height - CHROME_ROWS), total)
        offset = self.viewport.scroll_offset
        lines = self.buffer.slice(offset, offset + self.viewport.height)

        highlights = None
        if self.highlighting_enabled:
            highlights = [self.highlighter.highlight_line(line, self.language) for line in lines]

        markers = {
            row: severity.value
            for row, severity in self.linter.markers_by_line(self.lint_issues).items()
        }

        if self.prompt is not None:
            message, is_error = self.prompt.label + self.prompt.text, False
        else:
            message, is_error = self.status_message, self.status_is_error

        view = RenderInput(
            lines=lines,
            total_lines=total,
            scroll_offset=offset,
            height=self.viewport.height,
            width=width,
            cursor=self.cursor.position,
            selection=self.selection,
            highlights=highlights,
            lint_markers=markers,
            header_text=self._header_text(),
            status_left=self._status_left(),
            status_message=message,
            status_right=self._status_right(),
            status_is_error=is_error,
        )
        return self.renderer.render(view)

    # ------------------  Main editor loop  ------------------------
    def run(self, input_source: InputSource, render_target: RenderTarget) -> None:
        """The main event loop of the editor.

        Each iteration reads at most one event (waiting up to
        ``input_timeout_ms``), dispatches it, then redraws if needed. Key
        events redraw at once; pointer events go through the render throttle;
        a redraw the throttle deferred is flushed on the next idle tick.
        """
        logger.info("Editor main loop started.")
        self.running = True
        self._force_render = True

        while self.running:
            try:
                redraw = self._process_events_and_input(input_source)
                self._render_screen(render_target, redraw)
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt. Exiting.")
                self.running = False
                break
            except Exception as e:
                logger.critical("Unhandled exception in main loop: %s", e, exc_info=True)
                self.running = False
                break

        logger.info("Editor main loop finished.")

    def _process_events_and_input(self, input_source: InputSource) -> RedrawMode:
        event = input_source.read_event(self.input_timeout_ms)
        if event is None:
            return RedrawMode.FLUSH if self.throttle.pending else RedrawMode.NONE
        return self.handle_event(event)

    def _render_screen(self, render_target: RenderTarget, redraw: RedrawMode) -> None:
        if not self.running:
            return
        forced = self._force_render
        if redraw is RedrawMode.NONE and not forced:
            return
        if redraw is RedrawMode.THROTTLED and not self.throttle.should_render(forced):
            return

        height, width = render_target.size()
        self.screen_height, self.screen_width = height, width
        render_target.present(self.compose_frame(height, width))
        self.throttle.mark_rendered()
        self._force_render = False
