# tuiedit/core/Selection.py
"""tuiedit.core.Selection
========================

Normalized two-endpoint text range plus the word lookup used by
double-click selection.

A ``Selection`` is immutable. The start endpoint is always the earlier one
in row-major order, whichever order the endpoints were supplied in.
"""

from dataclasses import dataclass

from tuiedit.core.Buffer import Buffer
from tuiedit.core.Cursor import CursorController, CursorPosition


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def find_word_boundaries(line: str, col: int) -> tuple[int, int]:
    """Returns ``(start, end)`` of the word touching ``col``.

    Word characters are alphanumerics and ``_``. For an empty line or a column
    at or past the line end the empty range ``(col, col)`` is returned.
    """
    if not line or col >= len(line) or col < 0:
        return col, col

    start = col
    while start > 0 and _is_word_char(line[start - 1]):
        start -= 1

    end = col
    while end < len(line) and _is_word_char(line[end]):
        end += 1

    return start, end


@dataclass(frozen=True)
class Selection:
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @classmethod
    def between(cls, a_row: int, a_col: int, b_row: int, b_col: int) -> "Selection":
        """Builds a selection from two endpoints given in any order."""
        if (b_row, b_col) < (a_row, a_col):
            a_row, a_col, b_row, b_col = b_row, b_col, a_row, a_col
        return cls(a_row, a_col, b_row, b_col)

    @property
    def start(self) -> CursorPosition:
        return CursorPosition(self.start_row, self.start_col)

    @property
    def end(self) -> CursorPosition:
        return CursorPosition(self.end_row, self.end_col)

    @property
    def is_empty(self) -> bool:
        return (self.start_row, self.start_col) == (self.end_row, self.end_col)

    def contains(self, row: int, col: int) -> bool:
        """True when ``(row, col)`` lies inside the half-open range."""
        if row < self.start_row or row > self.end_row:
            return False
        if self.start_row == self.end_row:
            return self.start_col <= col < self.end_col
        if row == self.start_row:
            return col >= self.start_col
        if row == self.end_row:
            return col < self.end_col
        return True

    def get_selected_text(self, buffer: Buffer) -> str:
        return buffer.text_range(self.start_row, self.start_col, self.end_row, self.end_col)

    def char_count(self, buffer: Buffer) -> int:
        return len(self.get_selected_text(buffer))

    def delete_selected_text(self, buffer: Buffer, cursor: CursorController) -> str:
        """Removes the selected text and parks the cursor at the selection start."""
        removed = buffer.delete_range(self.start_row, self.start_col, self.end_row, self.end_col)
        cursor.set_position(self.start_row, self.start_col)
        return removed
