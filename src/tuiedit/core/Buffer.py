# tuiedit/core/Buffer.py
"""tuiedit.core.Buffer
=====================

The line buffer is the single owner of document text. Every mutation of the
document passes through one of the methods below; higher layers (cursor,
selection, editor) never touch the underlying list directly.

Invariants:
    - At least one line always exists. An empty document is ``[""]``.
    - Positions are counted in codepoints (plain ``str`` indexing).
    - Every method is total: out-of-range rows and columns are clamped,
      nothing here raises on a bad index.
"""

import logging
from typing import Iterable, Optional


class Buffer:
    """Ordered collection of text lines with clamped editing primitives."""

    def __init__(self, lines: Optional[Iterable[str]] = None) -> None:
        self._lines: list[str] = [""]
        if lines is not None:
            self.set_lines(lines)

    # --- read access -------------------------------------------------------

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(list(self._lines))

    @property
    def lines(self) -> list[str]:
        """A copy of all lines."""
        return list(self._lines)

    def line(self, row: int) -> str:
        return self._lines[self.clamp_row(row)]

    def line_length(self, row: int) -> int:
        return len(self.line(row))

    def slice(self, start: int, stop: int) -> list[str]:
        """Lines in ``[start, stop)``, clipped to the document."""
        start = max(0, start)
        return self._lines[start:max(start, stop)]

    def text(self) -> str:
        return "\n".join(self._lines)

    def char_count(self) -> int:
        """Number of characters including the newlines between rows."""
        return sum(len(line) for line in self._lines) + len(self._lines) - 1

    def clamp_row(self, row: int) -> int:
        return max(0, min(row, len(self._lines) - 1))

    def clamp_col(self, row: int, col: int) -> int:
        return max(0, min(col, len(self._lines[self.clamp_row(row)])))

    # --- whole-buffer replacement -------------------------------------------

    def set_lines(self, lines: Iterable[str]) -> None:
        new_lines = [str(line) for line in lines]
        self._lines = new_lines if new_lines else [""]
        logging.debug("Buffer: replaced content (%d lines)", len(self._lines))

    # --- single character edits ---------------------------------------------

    def insert_char(self, row: int, col: int, ch: str) -> None:
        """Inserts ``ch`` at ``(row, col)``. Newlines are routed to ``split_line``."""
        if ch == "\n":
            self.split_line(row, col)
            return
        row = self.clamp_row(row)
        col = self.clamp_col(row, col)
        line = self._lines[row]
        self._lines[row] = line[:col] + ch + line[col:]

    def insert_text(self, row: int, col: int, text: str) -> tuple[int, int]:
        """Inserts ``text`` (which may span several lines) at ``(row, col)``.

        Returns:
            The position just past the inserted text.
        """
        row = self.clamp_row(row)
        col = self.clamp_col(row, col)
        line = self._lines[row]
        head, tail = line[:col], line[col:]
        parts = text.split("\n")
        if len(parts) == 1:
            self._lines[row] = head + text + tail
            return row, col + len(text)

        new_rows = [head + parts[0], *parts[1:-1], parts[-1] + tail]
        self._lines[row:row + 1] = new_rows
        end_row = row + len(parts) - 1
        return end_row, len(parts[-1])

    def delete_char(self, row: int, col: int) -> str:
        """Removes the character at ``(row, col)`` and returns it ("" if none)."""
        row = self.clamp_row(row)
        line = self._lines[row]
        if col < 0 or col >= len(line):
            return ""
        self._lines[row] = line[:col] + line[col + 1:]
        return line[col]

    # --- line structure -----------------------------------------------------

    def split_line(self, row: int, col: int) -> int:
        """Splits ``row`` at ``col``; the tail becomes a new row. Returns its index."""
        row = self.clamp_row(row)
        col = self.clamp_col(row, col)
        line = self._lines[row]
        self._lines[row] = line[:col]
        self._lines.insert(row + 1, line[col:])
        return row + 1

    def join_with_next(self, row: int) -> Optional[int]:
        """Appends row ``row + 1`` onto ``row``.

        Returns:
            The column where the two lines meet, or None when ``row`` is last.
        """
        row = self.clamp_row(row)
        if row >= len(self._lines) - 1:
            return None
        join_col = len(self._lines[row])
        self._lines[row] += self._lines.pop(row + 1)
        return join_col

    def duplicate_line(self, row: int) -> int:
        row = self.clamp_row(row)
        self._lines.insert(row + 1, self._lines[row])
        return row + 1

    def delete_line(self, row: int) -> str:
        """Removes a whole row. Removing the only row leaves ``[""]``."""
        row = self.clamp_row(row)
        removed = self._lines.pop(row)
        if not self._lines:
            self._lines = [""]
        return removed

    # --- ranges -------------------------------------------------------------

    def _normalize_range(
        self, start_row: int, start_col: int, end_row: int, end_col: int
    ) -> tuple[int, int, int, int]:
        if (end_row, end_col) < (start_row, start_col):
            start_row, start_col, end_row, end_col = end_row, end_col, start_row, start_col
        start_row = self.clamp_row(start_row)
        end_row = self.clamp_row(end_row)
        start_col = self.clamp_col(start_row, start_col)
        end_col = self.clamp_col(end_row, end_col)
        return start_row, start_col, end_row, end_col

    def text_range(self, start_row: int, start_col: int, end_row: int, end_col: int) -> str:
        """Text between two positions; the end column is exclusive."""
        sr, sc, er, ec = self._normalize_range(start_row, start_col, end_row, end_col)
        if sr == er:
            return self._lines[sr][sc:ec]
        parts = [self._lines[sr][sc:]]
        parts.extend(self._lines[sr + 1:er])
        parts.append(self._lines[er][:ec])
        return "\n".join(parts)

    def delete_range(self, start_row: int, start_col: int, end_row: int, end_col: int) -> str:
        """Deletes the text between two positions and returns it.

        On a multi-row range the start prefix is joined with the end suffix
        and every row after the start up to and including the end row is
        removed.
        """
        sr, sc, er, ec = self._normalize_range(start_row, start_col, end_row, end_col)
        removed = self.text_range(sr, sc, er, ec)
        if sr == er:
            line = self._lines[sr]
            self._lines[sr] = line[:sc] + line[ec:]
        else:
            self._lines[sr] = self._lines[sr][:sc] + self._lines[er][ec:]
            del self._lines[sr + 1:er + 1]
        logging.debug(
            "Buffer: deleted range (%d,%d)-(%d,%d), %d chars", sr, sc, er, ec, len(removed)
        )
        return removed
