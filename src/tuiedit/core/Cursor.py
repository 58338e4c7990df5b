# tuiedit/core/Cursor.py
"""tuiedit.core.Cursor
=====================

Single-cursor position tracking and the editing primitives that are expressed
relative to the cursor (insert at cursor, backspace, delete, newline).

Every public operation returns ``bool``: True when the cursor position
actually changed. Text mutations always go through the shared ``Buffer``;
the controller only decides *where*.
"""

import enum
import logging
from dataclasses import dataclass

from tuiedit.core.Buffer import Buffer


@dataclass(frozen=True, order=True)
class CursorPosition:
    row: int = 0
    col: int = 0


class Direction(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


def find_next_word_boundary(line: str, start_col: int) -> int:
    """Column after skipping the current word and the whitespace behind it."""
    col = max(0, start_col)
    while col < len(line) and not line[col].isspace():
        col += 1
    while col < len(line) and line[col].isspace():
        col += 1
    return min(col, len(line))


def find_prev_word_boundary(line: str, start_col: int) -> int:
    """Column of the start of the word left of ``start_col``."""
    if start_col <= 0 or not line:
        return 0
    col = min(start_col, len(line)) - 1
    while col > 0 and line[col].isspace():
        col -= 1
    while col > 0 and not line[col - 1].isspace():
        col -= 1
    return col


class CursorController:
    """Tracks one ``(row, col)`` position over a ``Buffer``.

    Args:
        buffer: The document the cursor lives in.
        row: Initial row (clamped).
        col: Initial column (clamped).
    """

    def __init__(self, buffer: Buffer, row: int = 0, col: int = 0) -> None:
        self.buffer = buffer
        self.row = 0
        self.col = 0
        self.set_position(row, col)

    @property
    def position(self) -> CursorPosition:
        return CursorPosition(self.row, self.col)

    def _move_to(self, row: int, col: int) -> bool:
        row = self.buffer.clamp_row(row)
        col = self.buffer.clamp_col(row, col)
        changed = (row, col) != (self.row, self.col)
        self.row, self.col = row, col
        return changed

    def set_position(self, row: int, col: int) -> bool:
        return self._move_to(row, col)

    def validate(self) -> bool:
        """Re-clamps the position into the buffer. Idempotent."""
        return self._move_to(self.row, self.col)

    # --- editing ------------------------------------------------------------

    def insert_char(self, ch: str) -> bool:
        if ch == "\n":
            return self.insert_newline()
        self.validate()
        self.buffer.insert_char(self.row, self.col, ch)
        self.col += 1
        return True

    def insert_text(self, text: str) -> bool:
        self.validate()
        row, col = self.buffer.insert_text(self.row, self.col, text)
        return self._move_to(row, col)

    def delete_backward(self) -> bool:
        """Backspace. Joins onto the previous row at column 0."""
        self.validate()
        if self.col > 0:
            self.buffer.delete_char(self.row, self.col - 1)
            self.col -= 1
            return True
        if self.row > 0:
            join_col = self.buffer.join_with_next(self.row - 1)
            self.row -= 1
            self.col = join_col if join_col is not None else 0
            return True
        return False

    def delete_forward(self) -> bool:
        """Delete key. Joins the next row at line end.

        The position never moves here, so the return value reports whether the
        buffer changed instead.
        """
        self.validate()
        if self.col < self.buffer.line_length(self.row):
            self.buffer.delete_char(self.row, self.col)
            return True
        return self.buffer.join_with_next(self.row) is not None

    def insert_newline(self) -> bool:
        self.validate()
        self.row = self.buffer.split_line(self.row, self.col)
        self.col = 0
        return True

    # --- movement -----------------------------------------------------------

    def move_cursor(self, direction: Direction) -> bool:
        """Moves one step. Left/Right wrap across lines, Up/Down clamp the column."""
        self.validate()
        row, col = self.row, self.col
        last_row = len(self.buffer) - 1

        if direction is Direction.UP:
            if row == 0:
                return False
            row -= 1
            col = min(col, self.buffer.line_length(row))
        elif direction is Direction.DOWN:
            if row >= last_row:
                return False
            row += 1
            col = min(col, self.buffer.line_length(row))
        elif direction is Direction.LEFT:
            if col > 0:
                col -= 1
            elif row > 0:
                row -= 1
                col = self.buffer.line_length(row)
        elif direction is Direction.RIGHT:
            if col < self.buffer.line_length(row):
                col += 1
            elif row < last_row:
                row += 1
                col = 0

        return self._move_to(row, col)

    def move_to_position(self, row: int, col: int, scroll_offset: int) -> bool:
        """Places the cursor at a screen-relative row. Rows past the end clamp to the last row."""
        target_row = row + scroll_offset
        logging.debug(
            "CursorController: move_to_position screen_row=%d offset=%d -> doc_row=%d col=%d",
            row, scroll_offset, target_row, col,
        )
        return self._move_to(target_row, col)

    def move_to_line_start(self) -> bool:
        return self._move_to(self.row, 0)

    def move_to_line_end(self) -> bool:
        return self._move_to(self.row, self.buffer.line_length(self.row))

    def move_to_document_start(self) -> bool:
        return self._move_to(0, 0)

    def move_to_document_end(self) -> bool:
        last_row = len(self.buffer) - 1
        return self._move_to(last_row, self.buffer.line_length(last_row))

    def move_word_right(self) -> bool:
        self.validate()
        line = self.buffer.line(self.row)
        if self.col >= len(line):
            return self.move_cursor(Direction.RIGHT)
        return self._move_to(self.row, find_next_word_boundary(line, self.col))

    def move_word_left(self) -> bool:
        self.validate()
        if self.col == 0:
            return self.move_cursor(Direction.LEFT)
        line = self.buffer.line(self.row)
        return self._move_to(self.row, find_prev_word_boundary(line, self.col))

    def screen_position(self, scroll_offset: int) -> CursorPosition:
        """Position relative to the top of the viewport (may be negative)."""
        return CursorPosition(self.row - scroll_offset, self.col)
