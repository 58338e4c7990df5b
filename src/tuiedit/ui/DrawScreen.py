# tuiedit/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen is the curses ``RenderTarget``: it paints a composed ``Frame`` onto
the terminal.

It is responsible for:
- mapping the renderer's semantic style names to curses colour pairs,
- painting the header, the gutter and text rows, and the status bar,
- clipping by display cells (wcwidth) so wide glyphs are never split,
- placing the hardware cursor,
- double buffering (``noutrefresh`` + ``doupdate``) for flicker-free updates.

All layout decisions are already made by ``FrameRenderer``; this class only
translates them into curses calls. Curses errors are caught and logged per
call so a bad cell never takes the editor down.
"""

import curses
import logging
from typing import Any, Optional

from wcwidth import wcwidth

from tuiedit.ui.FrameRenderer import Frame, FrameRow, display_width
from tuiedit.utils.utils import CALM_BG_IDX, WHITE_FG_IDX, hex_to_xterm


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Paints frames on a curses window.

    Attributes:
        MIN_WINDOW_WIDTH (int): Minimum allowed width of the editor window.
        MIN_WINDOW_HEIGHT (int): Minimum allowed height of the editor window.
        stdscr (curses.window): The main curses window object.
        config (dict): Editor configuration (the ``[colors]`` table is used).
        colors (dict[str, int]): Style name -> curses attribute.
    """

    MIN_WINDOW_WIDTH = 20
    MIN_WINDOW_HEIGHT = 5

    def __init__(self, stdscr: Any, config: Optional[dict[str, Any]] = None) -> None:
        self.stdscr = stdscr
        self.config = config or {}
        self.colors: dict[str, int] = {}
        self.init_colors()

    # --- RenderTarget ---------------------------------------------------------

    def size(self) -> tuple[int, int]:
        height, width = self.stdscr.getmaxyx()
        return height, width

    def present(self, frame: Frame) -> None:
        """The main screen drawing method."""
        try:
            height, width = self.stdscr.getmaxyx()

            if height < self.MIN_WINDOW_HEIGHT or width < self.MIN_WINDOW_WIDTH:
                self._show_small_window_error(height, width)
                self._update_display()
                return

            self.stdscr.erase()

            self._draw_row(0, 0, frame.header, "header", width)
            for screen_row, row in enumerate(frame.rows, start=1):
                if screen_row >= height - 1:
                    break
                self._draw_text_row(screen_row, row, width)
            self._draw_row(height - 1, 0, frame.status, "status", width)

            self._position_cursor(frame, height, width)
            self._update_display()

        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.present(): {e}", exc_info=True)
        except Exception:
            logging.exception("Unexpected error in DrawScreen.present()")

    # --- colours --------------------------------------------------------------

    def init_colors(self) -> None:
        """Initializes curses color pairs with graceful degradation."""
        self.colors = {}

        if not curses.has_colors() or curses.COLORS < 8:
            logging.warning(
                "Terminal has no or limited color support (< 8). Using monochrome attributes."
            )
            self.colors = {
                "default": curses.A_NORMAL,
                "comment": curses.A_DIM,
                "keyword": curses.A_BOLD,
                "string": curses.A_NORMAL,
                "number": curses.A_NORMAL,
                "function": curses.A_BOLD,
                "constant": curses.A_BOLD,
                "type": curses.A_NORMAL,
                "operator": curses.A_NORMAL,
                "decorator": curses.A_BOLD,
                "builtin": curses.A_NORMAL,
                "variable": curses.A_NORMAL,
                "tag": curses.A_NORMAL,
                "attribute": curses.A_NORMAL,
                "error": curses.A_REVERSE | curses.A_BOLD,
                "selection": curses.A_REVERSE,
                "cursor": curses.A_REVERSE | curses.A_BOLD,
                "truncation": curses.A_DIM,
                "gutter": curses.A_DIM,
                "gutter_current": curses.A_BOLD,
                "filler": curses.A_DIM,
                "header": curses.A_REVERSE | curses.A_BOLD,
                "status": curses.A_REVERSE,
                "status_error": curses.A_REVERSE | curses.A_BOLD,
            }
            return

        curses.start_color()
        try:
            curses.use_default_colors()  # allow -1 as the "default background"
        except curses.error:
            pass

        # name -> (default hex, 8-colour fallback, attribute, background colour key)
        color_definitions = {
            # Syntax Highlighting
            "default": ("#C9D1D9", curses.COLOR_WHITE, curses.A_NORMAL, None),
            "comment": ("#8B949E", curses.COLOR_WHITE, curses.A_DIM, None),
            "keyword": ("#FF7B72", curses.COLOR_MAGENTA, curses.A_NORMAL, None),
            "string": ("#A5D6FF", curses.COLOR_CYAN, curses.A_NORMAL, None),
            "number": ("#79C0FF", curses.COLOR_BLUE, curses.A_NORMAL, None),
            "function": ("#D2A8FF", curses.COLOR_YELLOW, curses.A_BOLD, None),
            "constant": ("#79C0FF", curses.COLOR_CYAN, curses.A_BOLD, None),
            "type": ("#F2CC60", curses.COLOR_YELLOW, curses.A_NORMAL, None),
            "operator": ("#FF7B72", curses.COLOR_RED, curses.A_NORMAL, None),
            "decorator": ("#D2A8FF", curses.COLOR_MAGENTA, curses.A_BOLD, None),
            "builtin": ("#FFA657", curses.COLOR_YELLOW, curses.A_NORMAL, None),
            "variable": ("#C9D1D9", curses.COLOR_WHITE, curses.A_NORMAL, None),
            "tag": ("#7EE787", curses.COLOR_GREEN, curses.A_NORMAL, None),
            "attribute": ("#79C0FF", curses.COLOR_CYAN, curses.A_NORMAL, None),
            # UI Elements
            "error": ("#F85149", curses.COLOR_RED, curses.A_BOLD, None),
            "selection": ("#C9D1D9", curses.COLOR_WHITE, curses.A_NORMAL, "selection_bg"),
            "cursor": ("#C9D1D9", curses.COLOR_WHITE, curses.A_REVERSE, None),
            "truncation": ("#8B949E", curses.COLOR_WHITE, curses.A_DIM, None),
            "gutter": ("#817248", curses.COLOR_YELLOW, curses.A_DIM, None),
            "gutter_current": ("#F2CC60", curses.COLOR_YELLOW, curses.A_BOLD, None),
            "filler": ("#484F58", curses.COLOR_BLUE, curses.A_DIM, None),
            "header": ("#FFFFFF", curses.COLOR_WHITE, curses.A_BOLD, "header_bg"),
        }
        default_backgrounds = {"selection_bg": ("#264F78", curses.COLOR_BLUE), "header_bg": ("#1F6FEB", curses.COLOR_BLUE)}

        user_colors = self.config.get("colors", {})
        pair_id_counter = 1
        can_use_256_colors = curses.COLORS >= 256

        for name, (default_hex, default_8_color, attr, bg_key) in color_definitions.items():
            if pair_id_counter >= curses.COLOR_PAIRS:
                logging.warning(
                    f"Ran out of color pairs. Cannot initialize '{name}' and subsequent colors."
                )
                self.colors[name] = attr
                continue

            fg, bg = -1, -1
            if can_use_256_colors:
                fg = self._xterm_index(user_colors.get(name, default_hex), default_hex)
            else:
                fg = default_8_color

            if bg_key:
                bg_hex, bg_8_color = default_backgrounds[bg_key]
                if can_use_256_colors:
                    bg = self._xterm_index(user_colors.get(bg_key, bg_hex), bg_hex)
                else:
                    bg = bg_8_color

            try:
                curses.init_pair(pair_id_counter, fg, bg)
                self.colors[name] = curses.color_pair(pair_id_counter) | attr
                pair_id_counter += 1
            except curses.error as e:
                logging.error(f"Failed to initialize curses pair for '{name}': {e}")
                self.colors[name] = attr

        self._init_status_colors(pair_id_counter, pair_id_counter + 1)

    @staticmethod
    def _xterm_index(hex_code: Any, fallback_hex: str) -> int:
        if isinstance(hex_code, str):
            return hex_to_xterm(hex_code)
        return hex_to_xterm(fallback_hex)

    def _init_status_colors(self, pair_norm: int, pair_err: int) -> None:
        """Creates status bar pairs based on terminal capabilities.
        - GUI / 256-color: white on xterm-236 (#303030).
        - 16-color: white on black.
        - 8-color / TTY: white on terminal background.
        """
        max_colors = curses.COLORS

        if max_colors >= 256:
            fg_idx, bg_idx = WHITE_FG_IDX, CALM_BG_IDX
            err_fg = hex_to_xterm(self.config.get("colors", {}).get("error", "#F85149"))
        elif max_colors >= 16:
            fg_idx, bg_idx = curses.COLOR_WHITE, curses.COLOR_BLACK
            err_fg = curses.COLOR_RED
        else:  # 8-color mode
            fg_idx, bg_idx = curses.COLOR_WHITE, -1  # -1 - terminal background
            err_fg = curses.COLOR_RED

        try:
            curses.init_pair(pair_norm, fg_idx, bg_idx)
            curses.init_pair(pair_err, err_fg, bg_idx)
        except curses.error as exc:
            logging.warning("init_pair failed (%s) – roll back to A_REVERSE", exc)
            self.colors["status"] = curses.A_REVERSE
            self.colors["status_error"] = curses.A_REVERSE | curses.A_BOLD
            return

        self.colors["status"] = curses.color_pair(pair_norm)
        self.colors["status_error"] = curses.color_pair(pair_err) | curses.A_BOLD

    # --- painting -------------------------------------------------------------

    def _attr(self, style: str, base_style: str) -> int:
        if style == "default":
            return self.colors.get(base_style, curses.A_NORMAL)
        return self.colors.get(style, self.colors.get(base_style, curses.A_NORMAL))

    def _draw_text_row(self, y: int, row: FrameRow, width: int) -> None:
        self._put(y, 0, row.gutter, self._attr(row.gutter_style, "default"), width)
        self._draw_row(y, display_width(row.gutter), row, "default", width)

    def _draw_row(self, y: int, x: int, row: FrameRow, base_style: str, width: int) -> None:
        """Paints ``row.text`` from column ``x`` as runs of equal style."""
        text = row.text
        start = 0
        while start < len(text) and x < width:
            style = row.style_at(start)
            end = start + 1
            while end < len(text) and row.style_at(end) == style:
                end += 1
            run = text[start:end]
            x = self._put(y, x, run, self._attr(style, base_style), width)
            start = end

    def _put(self, y: int, x: int, text: str, attr: int, width: int) -> int:
        """addstr clipped to the screen width. Returns the next free column."""
        available = width - x
        if available <= 0 or not text:
            return x
        clipped = self.truncate_string(text, available)
        if not clipped:
            return width
        try:
            self.stdscr.addstr(y, x, clipped, attr)
        except curses.error as e:
            # The bottom-right cell raises after a successful write; others fall back to addch.
            logging.debug("addstr failed at (%d,%d): %s – falling back to addch", y, x, e)
            cx = x
            for ch in clipped:
                if cx >= width:
                    break
                try:
                    self.stdscr.addch(y, cx, ch, attr)
                except (curses.error, OverflowError, TypeError):
                    break
                cx += max(1, wcwidth(ch))
        return x + display_width(clipped)

    def truncate_string(self, s: str, max_width: int) -> str:
        """Return `s` clipped to visual width `max_width`."""
        result: list[str] = []
        consumed = 0

        for ch in s:
            w = wcwidth(ch)
            if w < 0:  # Non-printable → treat as single-cell
                w = 1
            if consumed + w > max_width:  # Would overflow → stop
                break
            result.append(ch)
            consumed += w

        return "".join(result)

    def _show_small_window_error(self, height: int, width: int) -> None:
        """Displays a message that the window is too small."""
        msg = f"Window too small ({width}x{height}). Minimum is {self.MIN_WINDOW_WIDTH}x{self.MIN_WINDOW_HEIGHT}."
        try:
            self.stdscr.clear()
            start_col = max(0, (width - len(msg)) // 2)
            self.stdscr.addstr(height // 2, start_col, msg[: max(0, width - 1)])
        except curses.error:
            # If even this doesn't work, the terminal is in a bad state
            pass

    def _position_cursor(self, frame: Frame, height: int, width: int) -> None:
        if frame.cursor_screen is None:
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            return

        screen_row, screen_col = frame.cursor_screen
        row = frame.rows[screen_row]
        content_col = screen_col - frame.gutter_width
        y = min(screen_row + 1, height - 2)
        x = min(display_width(row.gutter) + display_width(row.text[:content_col]), width - 1)
        try:
            curses.curs_set(1)
            self.stdscr.move(y, x)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({y}, {x}): {e}")

    def _update_display(self) -> None:
        """Physically updates the screen contents using the curses library.

        ``noutrefresh()`` collects the pending drawing operations in memory and
        ``curses.doupdate()`` applies them to the terminal at once.
        """
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
