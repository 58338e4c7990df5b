# tests/test_core/test_editor_engine.py
"""Behavioural tests for the `Editor` engine.
=============================================

The editor is driven exactly as in production, through `Editor.run` or
`Editor.handle_event`, but with a scripted input source, an in-memory render
target and a fake clock (see conftest.py). No terminal is involved.

Covered here:
- Typing, deletion and selection replacement.
- Quit confirmation as explicit state.
- Pointer gestures mapped from screen cells to document positions.
- Render throttling for pointer bursts and the idle-tick flush.
- File open/save (including the save-as prompt) and error reporting.
- Prompts, toggles and the status bar.
"""

from tuiedit.core.Editor import RedrawMode
from tuiedit.core.Events import KeyEvent, MouseButton, PointerEvent, PointerKind, ResizeEvent
from tuiedit.integrations.Localization import Localization
from tuiedit.ui.FrameRenderer import gutter_width_for
from tuiedit.ui.Targets import ScriptedInputSource

key = KeyEvent.parse


def press(editor, *specs: str) -> None:
    for spec in specs:
        editor.handle_event(key(spec) if len(spec) > 1 else KeyEvent(spec))


def pointer(kind, row, col, button=MouseButton.PRIMARY) -> PointerEvent:
    return PointerEvent(kind, button, row, col)


def cell(editor, doc_row: int, col: int) -> tuple[int, int]:
    """Terminal cell of a document position (header row + gutter)."""
    screen_row = doc_row - editor.viewport.scroll_offset + 1
    return screen_row, col + gutter_width_for(len(editor.buffer))


# --- typing and editing -----------------------------------------------------

def test_typing_inserts_and_marks_modified(make_editor) -> None:
    editor = make_editor()
    assert editor.handle_event(KeyEvent("h")) is RedrawMode.IMMEDIATE
    press(editor, "i")
    assert editor.buffer.lines == ["hi"]
    assert editor.modified is True
    assert editor.cursor.col == 2


def test_enter_backspace_and_delete(make_editor) -> None:
    editor = make_editor(["abcd"])
    editor.cursor.set_position(0, 2)
    press(editor, "enter")
    assert editor.buffer.lines == ["ab", "cd"]
    press(editor, "backspace")
    assert editor.buffer.lines == ["abcd"]
    press(editor, "delete")
    assert editor.buffer.lines == ["abd"]


def test_tab_inserts_spaces(make_editor) -> None:
    editor = make_editor([""])
    press(editor, "tab")
    assert editor.buffer.lines == ["    "]


def test_duplicate_and_delete_line(make_editor) -> None:
    editor = make_editor(["one", "two"])
    press(editor, "ctrl+d")
    assert editor.buffer.lines == ["one", "one", "two"]
    assert editor.cursor.row == 1
    press(editor, "ctrl+k")
    assert editor.buffer.lines == ["one", "two"]


def test_unbound_key_reports_status(make_editor) -> None:
    editor = make_editor()
    press(editor, "f12")
    assert editor.status_message == "Unbound key: f12"
    assert editor.buffer.lines == [""]


# --- keyboard selection -------------------------------------------------------

def test_shift_arrows_extend_and_plain_arrow_clears(make_editor) -> None:
    editor = make_editor(["hello"])
    press(editor, "shift+right", "shift+right", "shift+right")
    assert editor.selection is not None
    assert (editor.selection.start_col, editor.selection.end_col) == (0, 3)

    press(editor, "right")
    assert editor.selection is None
    assert editor.cursor.col == 4


def test_typing_replaces_selection(make_editor) -> None:
    editor = make_editor(["hello world"])
    editor.cursor.set_position(0, 6)
    press(editor, "shift+end", "X")
    assert editor.buffer.lines == ["hello X"]
    assert editor.selection is None


def test_backspace_deletes_selection_only(make_editor) -> None:
    editor = make_editor(["abc", "def"])
    press(editor, "ctrl+a")
    assert editor.status_message == "Selected all (7 characters)"
    press(editor, "backspace")
    assert editor.buffer.lines == [""]
    assert (editor.cursor.row, editor.cursor.col) == (0, 0)


def test_escape_clears_selection(make_editor) -> None:
    editor = make_editor(["abc"])
    press(editor, "shift+right", "esc")
    assert editor.selection is None
    assert editor.status_message == "Selection cleared"
    press(editor, "esc")
    assert editor.status_message == "Cancelled"


# --- quit confirmation ----------------------------------------------------------

def test_quit_unmodified_stops_loop(make_editor, memory_target) -> None:
    editor = make_editor()
    source = ScriptedInputSource([key("ctrl+q")])
    editor.run(source, memory_target)
    assert editor.running is False
    assert memory_target.frames == []


def test_quit_with_changes_needs_confirmation(make_editor, memory_target) -> None:
    editor = make_editor()
    source = ScriptedInputSource([KeyEvent("h"), KeyEvent("i"), key("ctrl+q"), key("ctrl+q")])
    editor.run(source, memory_target)

    assert editor.running is False
    assert source.exhausted
    assert len(memory_target.frames) == 3
    assert "unsaved changes" in memory_target.last_frame.status.text
    assert memory_target.screen_text()[1].endswith("hi".ljust(memory_target.width - 5))


def test_other_action_cancels_pending_quit(make_editor) -> None:
    editor = make_editor(["abc"])
    press(editor, "x", "ctrl+q")
    assert editor.quit_pending is True
    press(editor, "right")
    assert editor.quit_pending is False

    press(editor, "ctrl+q", "esc")
    assert editor.quit_pending is False
    assert editor.status_message == "Quit cancelled"


# --- pointer gestures ---------------------------------------------------------

def test_click_places_cursor_through_gutter_and_header(make_editor) -> None:
    editor = make_editor([f"line {i:02d}" for i in range(50)])
    row, col = cell(editor, 2, 4)
    assert editor.handle_event(pointer(PointerKind.DOWN, row, col)) is RedrawMode.THROTTLED
    assert (editor.cursor.row, editor.cursor.col) == (2, 4)
    assert editor.handle_event(pointer(PointerKind.UP, row, col)) is RedrawMode.NONE
    assert editor.status_message == "Cursor moved to row 3, col 5"


def test_click_maps_through_scroll_offset(make_editor) -> None:
    editor = make_editor([f"line {i:02d}" for i in range(100)])
    editor.viewport.scroll_offset = 40
    editor.handle_event(pointer(PointerKind.DOWN, 1 + 3, gutter_width_for(100) + 1))
    assert (editor.cursor.row, editor.cursor.col) == (43, 1)


def test_click_on_wide_glyph_line_maps_cells_to_characters(make_editor) -> None:
    editor = make_editor(["日本語abc"])
    gutter = gutter_width_for(1)

    editor.handle_event(pointer(PointerKind.DOWN, 1, gutter + 6))
    assert (editor.cursor.row, editor.cursor.col) == (0, 3)
    editor.handle_event(pointer(PointerKind.UP, 1, gutter + 6))

    # right half of the second glyph
    editor.handle_event(pointer(PointerKind.DOWN, 2, gutter + 3))
    assert (editor.cursor.row, editor.cursor.col) == (0, 1)


def test_drag_over_wide_glyphs_selects_characters(make_editor) -> None:
    editor = make_editor(["日本語abc"])
    gutter = gutter_width_for(1)

    editor.handle_event(pointer(PointerKind.DOWN, 1, gutter + 2))
    editor.handle_event(pointer(PointerKind.DRAG, 1, gutter + 5))
    assert editor.cursor.col == 2
    editor.handle_event(pointer(PointerKind.UP, 1, gutter + 7))

    assert editor.selection.get_selected_text(editor.buffer) == "本語a"
    assert (editor.cursor.row, editor.cursor.col) == (0, 4)


def test_double_click_selects_word(make_editor, clock) -> None:
    editor = make_editor(["hello world"])
    row, col = cell(editor, 0, 7)
    editor.handle_event(pointer(PointerKind.DOWN, row, col))
    editor.handle_event(pointer(PointerKind.UP, row, col))
    clock.advance_ms(100)
    editor.handle_event(pointer(PointerKind.DOWN, row, col + 1))

    assert editor.selection is not None
    assert (editor.selection.start_col, editor.selection.end_col) == (6, 11)
    assert editor.selection.get_selected_text(editor.buffer) == "world"
    assert editor.status_message == "Word selected (double-click)"


def test_slow_second_click_is_a_plain_click(make_editor, clock) -> None:
    editor = make_editor(["hello world"])
    row, col = cell(editor, 0, 7)
    editor.handle_event(pointer(PointerKind.DOWN, row, col))
    editor.handle_event(pointer(PointerKind.UP, row, col))
    clock.advance_ms(700)
    editor.handle_event(pointer(PointerKind.DOWN, row, col))
    assert editor.selection is None


def test_drag_selects_on_release(make_editor) -> None:
    editor = make_editor(["hello world", "second"])
    start = cell(editor, 0, 0)
    middle = cell(editor, 0, 3)
    end = cell(editor, 1, 2)

    editor.handle_event(pointer(PointerKind.DOWN, *start))
    editor.handle_event(pointer(PointerKind.DRAG, *middle))
    assert editor.status_message == "Selecting text..."
    assert editor.cursor.col == 3
    assert editor.selection is None

    editor.handle_event(pointer(PointerKind.UP, *end))
    assert editor.selection is not None
    assert editor.selection.get_selected_text(editor.buffer) == "hello world\nse"
    assert editor.status_message == "Selected 14 characters"
    assert (editor.cursor.row, editor.cursor.col) == (1, 2)

    press(editor, "X")
    assert editor.buffer.lines == ["Xcond"]


def test_right_click_reports_position_and_keeps_selection(make_editor) -> None:
    editor = make_editor(["hello"])
    editor.handle_event(pointer(PointerKind.DOWN, *cell(editor, 0, 2), button=MouseButton.SECONDARY))
    assert editor.status_message == "Context menu at row 1, col 3"

    press(editor, "ctrl+a")
    editor.handle_event(pointer(PointerKind.DOWN, *cell(editor, 0, 1), button=MouseButton.SECONDARY))
    assert editor.selection is not None
    assert editor.status_message.startswith("Context menu: 5 characters selected")


def test_wheel_scrolls_without_moving_cursor(make_editor) -> None:
    editor = make_editor([str(i) for i in range(100)])
    editor.handle_event(pointer(PointerKind.SCROLL_DOWN, 5, 10, MouseButton.NONE))
    assert editor.viewport.scroll_offset == 3
    assert (editor.cursor.row, editor.cursor.col) == (0, 0)
    editor.handle_event(pointer(PointerKind.SCROLL_UP, 5, 10, MouseButton.NONE))
    editor.handle_event(pointer(PointerKind.SCROLL_UP, 5, 10, MouseButton.NONE))
    assert editor.viewport.scroll_offset == 0


def test_pointer_ignored_when_mouse_disabled(make_editor) -> None:
    editor = make_editor(["hello"], mouse={"enabled": False})
    assert editor.handle_event(pointer(PointerKind.DOWN, 1, 8)) is RedrawMode.NONE
    assert editor.cursor.col == 0


# --- control loop and throttling ----------------------------------------------

def test_pointer_burst_is_throttled_then_flushed(make_editor, memory_target) -> None:
    editor = make_editor([str(i) for i in range(100)])
    scroll = pointer(PointerKind.SCROLL_DOWN, 5, 10, MouseButton.NONE)
    source = ScriptedInputSource([scroll, scroll, None, key("ctrl+q")])
    editor.run(source, memory_target)

    assert len(memory_target.frames) == 2
    assert memory_target.frames[0].rows[0].document_row == 3
    assert memory_target.frames[1].rows[0].document_row == 6
    assert editor.throttle.pending is False


def test_idle_tick_without_pending_render_draws_nothing(make_editor, memory_target) -> None:
    editor = make_editor(["x"])
    source = ScriptedInputSource([KeyEvent("a"), None, None, key("ctrl+q"), key("ctrl+q")])
    editor.run(source, memory_target)
    assert len(memory_target.frames) == 2


def test_resize_adjusts_viewport(make_editor, memory_target) -> None:
    editor = make_editor([str(i) for i in range(100)])
    editor.cursor.set_position(50, 0)
    memory_target.resize(10, 40)
    source = ScriptedInputSource([ResizeEvent(10, 40), key("ctrl+q")])
    editor.run(source, memory_target)

    frame = memory_target.last_frame
    assert frame.height == 8
    assert editor.viewport.is_visible(50)
    assert editor.status_message == "Window resized to 40x10"


def test_run_survives_handler_exception(make_editor, memory_target) -> None:
    editor = make_editor()

    def boom():
        raise RuntimeError("broken handler")

    editor.action_map["select_all"] = boom
    editor.run(ScriptedInputSource([key("ctrl+a"), KeyEvent("z")]), memory_target)
    assert editor.running is False


# --- files --------------------------------------------------------------------

def test_open_file_detects_language_and_lints(make_editor, tmp_path) -> None:
    path = tmp_path / "a.py"
    path.write_text("import os\nprint(1)\n", encoding="utf-8")
    editor = make_editor()

    editor.open_file(str(path))
    assert editor.buffer.lines == ["import os", "print(1)"]
    assert editor.language == "Python"
    assert editor.modified is False
    assert editor.status_message == "Loaded: a.py"

    frame = editor.compose_frame(24, 80)
    assert "a.py" in frame.header.text
    assert "[Python]" in frame.header.text
    assert "1💡" in frame.status.text
    assert frame.rows[1].lint_severity == "hint"


def test_open_missing_file_is_a_status_error(make_editor, tmp_path) -> None:
    editor = make_editor(["keep"])
    editor.open_file(str(tmp_path / "missing.txt"))
    assert editor.status_is_error is True
    assert editor.status_message.startswith("Error loading")
    assert editor.buffer.lines == ["keep"]

    frame = editor.compose_frame(24, 80)
    assert "status_error" in {span.style for span in frame.status.spans}


def test_save_writes_and_clears_modified(make_editor, tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("old\n", encoding="utf-8")
    editor = make_editor()
    editor.open_file(str(path))

    press(editor, "end", "!", "ctrl+s")
    assert path.read_text(encoding="utf-8") == "old!\n"
    assert editor.modified is False
    assert editor.status_message == "Saved: notes.txt"
    assert editor._force_render is True


def test_save_without_name_prompts_for_path(make_editor, tmp_path) -> None:
    target = tmp_path / "new.py"
    editor = make_editor()
    press(editor, "x", "ctrl+s")
    assert editor.prompt is not None and editor.prompt.kind == "save_as"

    frame = editor.compose_frame(24, 80)
    assert "Save as:" in frame.status.text

    for ch in str(target):
        editor.handle_event(KeyEvent(ch))
    press(editor, "enter")

    assert editor.prompt is None
    assert target.read_text(encoding="utf-8") == "x\n"
    assert editor.filename == str(target)
    assert editor.language == "Python"


def test_prompt_escape_cancels(make_editor) -> None:
    editor = make_editor()
    press(editor, "ctrl+o", "a", "esc")
    assert editor.prompt is None
    assert editor.status_message == "Cancelled"
    assert editor.buffer.lines == [""]


def test_new_and_open_refused_while_modified(make_editor) -> None:
    editor = make_editor()
    press(editor, "x", "ctrl+n")
    assert editor.buffer.lines == ["x"]
    assert "before creating" in editor.status_message
    press(editor, "ctrl+o")
    assert editor.prompt is None
    assert "before opening" in editor.status_message


def test_new_file_resets_state(make_editor) -> None:
    editor = make_editor(["something"])
    editor.filename = "/tmp/old.py"
    press(editor, "ctrl+n")
    assert editor.buffer.lines == [""]
    assert editor.filename is None
    assert editor.language == "Plain Text"


# --- prompts and toggles --------------------------------------------------------

def test_goto_line(make_editor) -> None:
    editor = make_editor([str(i) for i in range(100)])
    press(editor, "ctrl+g", "7", "5", "enter")
    assert editor.cursor.row == 74
    assert editor.viewport.is_visible(74)
    assert editor.status_message == "Jumped to line 75"

    press(editor, "ctrl+g", "9", "9", "9", "enter")
    assert editor.status_message == "Invalid line number: 999"
    assert editor.cursor.row == 74


def test_toggles_force_render(make_editor) -> None:
    editor = make_editor(["x = 1"])
    editor._force_render = False
    press(editor, "f5")
    assert editor.highlighting_enabled is False
    assert editor._force_render is True
    assert editor.status_message == "Syntax highlighting disabled"

    press(editor, "f4")
    assert editor.linter.enabled is False
    assert "✅" not in editor.compose_frame(24, 80).status.text


def test_cycle_language(make_editor) -> None:
    editor = make_editor()
    press(editor, "f7")
    assert editor.language == "Python"
    assert editor.status_message == "Language: Python"


def test_page_down_moves_cursor_and_view(make_editor) -> None:
    editor = make_editor([str(i) for i in range(100)])
    press(editor, "pagedown")
    assert editor.cursor.row == editor.viewport.page_size
    assert editor.viewport.is_visible(editor.cursor.row)
    press(editor, "ctrl+end")
    assert editor.cursor.row == 99
    assert editor.status_message == "End of document"


# --- frame composition --------------------------------------------------------

def test_status_bar_shows_position_and_selection(make_editor) -> None:
    editor = make_editor(["hello"])
    press(editor, "shift+right", "shift+right")
    frame = editor.compose_frame(24, 80)
    assert frame.status.text.startswith("Ln 1, Col 3 | 2 chars selected")
    assert "Plain Text | 1 lines" in frame.status.text


def test_header_shows_modified_marker(make_editor) -> None:
    editor = make_editor()
    assert "●" not in editor.compose_frame(24, 80).header.text
    press(editor, "a")
    header = editor.compose_frame(24, 80).header.text
    assert "untitled" in header and "●" in header


def test_frame_always_has_exact_content_height(make_editor) -> None:
    for total in (1, 5, 22, 300):
        editor = make_editor([f"row {i}" for i in range(total)])
        frame = editor.compose_frame(24, 80)
        assert frame.height == 22
        assert len(frame.lines()) == 24


def test_localization_is_injected() -> None:
    from tuiedit.core.Editor import Editor

    german = Localization("de-DE")
    editor = Editor({}, german)
    assert editor.status_message == german.get("app.welcome")
    assert editor.status_message != Localization("en-US").get("app.welcome")
