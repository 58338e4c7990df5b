# tuiedit/core/Viewport.py
"""tuiedit.core.Viewport
=======================

Vertical scroll management: which slice of the document is visible and how
screen rows map back to document rows.

``scroll_offset`` is the first visible document row. It is kept inside
``[0, max(0, total_lines - height)]`` by every mutating method.
"""

import logging
from typing import Optional


def adjust_scroll_for_visibility(
    scroll_offset: int, height: int, total_lines: int, cursor_row: int
) -> int:
    """Returns the scroll offset that keeps ``cursor_row`` on screen.

    Scrolls up to the cursor when it is above the viewport, down so the cursor
    is the last visible row when it is below, and otherwise leaves the offset
    alone. The result is always clamped to the valid range.
    """
    height = max(1, height)
    if cursor_row < scroll_offset:
        new_offset = cursor_row
    elif cursor_row >= scroll_offset + height:
        new_offset = cursor_row - height + 1
    else:
        new_offset = scroll_offset
    return max(0, min(new_offset, max(0, total_lines - height)))


class Viewport:
    """Scroll offset plus page height.

    Attributes:
        scroll_offset (int): First visible document row.
        height (int): Number of content rows on screen (never below 1).
    """

    def __init__(self, scroll_offset: int = 0, height: int = 1) -> None:
        self.scroll_offset = max(0, scroll_offset)
        self.height = max(1, height)

    def __repr__(self) -> str:
        return f"Viewport(scroll_offset={self.scroll_offset}, height={self.height})"

    @property
    def page_size(self) -> int:
        return max(1, self.height - 1)

    def max_scroll(self, total_lines: int) -> int:
        return max(0, total_lines - self.height)

    def clamp(self, total_lines: int) -> bool:
        clamped = max(0, min(self.scroll_offset, self.max_scroll(total_lines)))
        changed = clamped != self.scroll_offset
        self.scroll_offset = clamped
        return changed

    def resize(self, height: int, total_lines: Optional[int] = None) -> bool:
        new_height = max(1, height)
        changed = new_height != self.height
        self.height = new_height
        if total_lines is not None:
            changed = self.clamp(total_lines) or changed
        return changed

    def scroll_by(self, delta: int, total_lines: int) -> bool:
        """Shifts the offset by ``delta`` rows, clamped. Returns True if it moved."""
        before = self.scroll_offset
        self.scroll_offset = max(0, min(before + delta, self.max_scroll(total_lines)))
        if self.scroll_offset != before:
            logging.debug("Viewport: scrolled %+d -> offset %d", delta, self.scroll_offset)
        return self.scroll_offset != before

    def follow(self, cursor_row: int, total_lines: int) -> bool:
        """Adjusts the offset so ``cursor_row`` is visible."""
        new_offset = adjust_scroll_for_visibility(
            self.scroll_offset, self.height, total_lines, cursor_row
        )
        changed = new_offset != self.scroll_offset
        self.scroll_offset = new_offset
        return changed

    def to_screen_row(self, document_row: int) -> int:
        return document_row - self.scroll_offset

    def to_document_row(self, screen_row: int) -> int:
        return screen_row + self.scroll_offset

    def is_visible(self, document_row: int) -> bool:
        return self.scroll_offset <= document_row < self.scroll_offset + self.height

    def visible_range(self, total_lines: int) -> range:
        """Document rows currently on screen."""
        return range(self.scroll_offset, min(total_lines, self.scroll_offset + self.height))
