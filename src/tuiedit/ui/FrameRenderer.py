# tuiedit/ui/FrameRenderer.py
"""FrameRenderer.py
====================
Pure frame composition for the editor screen.

``FrameRenderer.render`` turns a ``RenderInput`` snapshot into a ``Frame``:
one header row, exactly ``height`` content rows and one status row. No
terminal calls happen here; a ``RenderTarget`` (curses ``DrawScreen`` or the
in-memory target used by tests) paints the result.

Layout rules:
    - Gutter: right-aligned 1-based line number (at least 3 wide), one lint
      marker cell and one space.
    - Content text is exactly ``content_width`` codepoints. Longer lines are
      cut to ``content_width - 1`` codepoints plus a single ``…`` marker;
      shorter lines are padded with spaces.
    - Rows past the end of the document are filler rows (``~`` gutter).
    - Styling is a list of ``StyleSpan`` per row; later spans win, so the
      cursor cell is painted over the selection for that one cell only.
    - Header and status rows are fitted by display cells (wcwidth) and never
      split a wide glyph.

Nothing here raises on odd input; oversized or malformed data is cut or
padded instead.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from wcwidth import wcwidth

from tuiedit.core.Cursor import CursorPosition
from tuiedit.core.Selection import Selection

TRUNCATION_MARKER = "…"
FILLER_GLYPH = "~"
MIN_NUMBER_WIDTH = 3

# Single-cell gutter markers, keyed by lint severity name.
LINT_GLYPHS: dict[str, str] = {
    "error": "E",
    "warning": "W",
    "info": "i",
    "hint": "·",
}


@dataclass(frozen=True)
class StyleSpan:
    start: int
    end: int
    style: str


@dataclass
class FrameRow:
    kind: str
    text: str
    gutter: str = ""
    gutter_style: str = "gutter"
    spans: list[StyleSpan] = field(default_factory=list)
    document_row: Optional[int] = None
    lint_severity: Optional[str] = None

    def style_at(self, col: int) -> str:
        """Effective style of a content cell (last covering span wins)."""
        style = "default"
        for span in self.spans:
            if span.start <= col < span.end:
                style = span.style
        return style

    def render_text(self) -> str:
        return self.gutter + self.text


@dataclass
class Frame:
    header: FrameRow
    rows: list[FrameRow]
    status: FrameRow
    width: int
    gutter_width: int
    content_width: int
    cursor_screen: Optional[tuple[int, int]] = None

    @property
    def height(self) -> int:
        return len(self.rows)

    def lines(self) -> list[str]:
        """Plain text of every row, top to bottom, header and status included."""
        return [self.header.text, *(r.render_text() for r in self.rows), self.status.text]


@dataclass
class RenderInput:
    lines: list[str]
    total_lines: int
    scroll_offset: int
    height: int
    width: int
    cursor: Optional[CursorPosition] = None
    selection: Optional[Selection] = None
    highlights: Optional[list[list[tuple[str, str]]]] = None
    lint_markers: dict[int, str] = field(default_factory=dict)
    header_text: str = ""
    status_left: str = ""
    status_message: str = ""
    status_right: str = ""
    status_is_error: bool = False


# --- display-width helpers --------------------------------------------------

def char_width(ch: str) -> int:
    w = wcwidth(ch)
    return w if w > 0 else (0 if w == 0 else 1)


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def column_at_cell(text: str, cell: int) -> int:
    """Codepoint index of the character drawn at display cell ``cell``.

    Both cells of a wide glyph map to that glyph; cells past the end of the
    text map to ``len(text)``.
    """
    consumed = 0
    for index, ch in enumerate(text):
        consumed += char_width(ch)
        if cell < consumed:
            return index
    return len(text)


def truncate_to_width(text: str, max_width: int) -> str:
    """Longest prefix of ``text`` that fits in ``max_width`` cells."""
    result: list[str] = []
    consumed = 0
    for ch in text:
        w = char_width(ch)
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w
    return "".join(result)


def fit_to_width(text: str, width: int) -> str:
    """Clips or pads ``text`` to exactly ``width`` cells."""
    clipped = truncate_to_width(text, max(0, width))
    return clipped + " " * (max(0, width) - display_width(clipped))


def _sanitize(text: str) -> str:
    return "".join(ch if ch.isprintable() else " " for ch in text)


def gutter_width_for(total_lines: int) -> int:
    """Cells taken by the gutter: line number, lint marker, one space."""
    return max(MIN_NUMBER_WIDTH, len(str(max(1, total_lines)))) + 2


class FrameRenderer:
    """Composes frames. Holds glyph choices only; keeps no per-frame state."""

    def __init__(
        self,
        truncation_marker: str = TRUNCATION_MARKER,
        filler_glyph: str = FILLER_GLYPH,
        lint_glyphs: Optional[dict[str, str]] = None,
    ) -> None:
        self.truncation_marker = truncation_marker[:1] or TRUNCATION_MARKER
        self.filler_glyph = filler_glyph[:1] or FILLER_GLYPH
        self.lint_glyphs = dict(LINT_GLYPHS if lint_glyphs is None else lint_glyphs)

    # --- public -------------------------------------------------------------

    def render(self, view: RenderInput) -> Frame:
        width = max(1, view.width)
        height = max(1, view.height)
        total_lines = max(1, view.total_lines)

        gutter_width = gutter_width_for(total_lines)
        number_width = gutter_width - 2
        content_width = max(1, width - gutter_width)

        rows: list[FrameRow] = []
        cursor_screen: Optional[tuple[int, int]] = None

        for screen_row in range(height):
            doc_row = view.scroll_offset + screen_row
            if screen_row >= len(view.lines) or doc_row >= total_lines:
                rows.append(self._filler_row(number_width, content_width))
                continue

            row = self._text_row(view, screen_row, doc_row, number_width, content_width)
            rows.append(row)

            if view.cursor is not None and view.cursor.row == doc_row:
                cursor_col = max(0, min(view.cursor.col, content_width - 1))
                cursor_screen = (screen_row, gutter_width + cursor_col)

        frame = Frame(
            header=self._header_row(view.header_text, width),
            rows=rows,
            status=self._status_row(view, width),
            width=width,
            gutter_width=gutter_width,
            content_width=content_width,
            cursor_screen=cursor_screen,
        )
        logging.debug(
            "FrameRenderer: %dx%d frame, offset=%d, gutter=%d",
            width, height, view.scroll_offset, gutter_width,
        )
        return frame

    # --- rows ---------------------------------------------------------------

    def _filler_row(self, number_width: int, content_width: int) -> FrameRow:
        return FrameRow(
            kind="filler",
            gutter=self.filler_glyph.rjust(number_width + 1) + " ",
            gutter_style="filler",
            text=" " * content_width,
        )

    def _text_row(
        self,
        view: RenderInput,
        screen_row: int,
        doc_row: int,
        number_width: int,
        content_width: int,
    ) -> FrameRow:
        raw_line = _sanitize(str(view.lines[screen_row]))
        truncated = len(raw_line) > content_width
        if truncated:
            visible_len = content_width - 1
            text = raw_line[:visible_len] + self.truncation_marker
        else:
            visible_len = len(raw_line)
            text = raw_line.ljust(content_width)

        severity = view.lint_markers.get(doc_row)
        glyph = self.lint_glyphs.get(severity, " ") if severity else " "
        is_current = view.cursor is not None and view.cursor.row == doc_row

        row = FrameRow(
            kind="text",
            gutter=f"{doc_row + 1:>{number_width}}{glyph[:1] or ' '} ",
            gutter_style="gutter_current" if is_current else "gutter",
            text=text,
            document_row=doc_row,
            lint_severity=severity,
        )

        if view.highlights is not None and screen_row < len(view.highlights):
            row.spans.extend(self._highlight_spans(view.highlights[screen_row], visible_len))

        if view.selection is not None:
            span = self._selection_span(view.selection, doc_row, len(raw_line), content_width)
            if span is not None:
                row.spans.append(span)

        if truncated:
            row.spans.append(StyleSpan(content_width - 1, content_width, "truncation"))

        if is_current and view.cursor is not None:
            col = max(0, min(view.cursor.col, content_width - 1))
            row.spans.append(StyleSpan(col, col + 1, "cursor"))

        return row

    @staticmethod
    def _highlight_spans(segments: list[tuple[str, str]], limit: int) -> list[StyleSpan]:
        spans: list[StyleSpan] = []
        offset = 0
        for segment, style in segments:
            start, offset = offset, offset + len(segment)
            if start >= limit:
                break
            if style and style != "default" and offset > start:
                spans.append(StyleSpan(start, min(offset, limit), style))
        return spans

    @staticmethod
    def _selection_span(
        selection: Selection, doc_row: int, line_len: int, content_width: int
    ) -> Optional[StyleSpan]:
        if not (selection.start_row <= doc_row <= selection.end_row) or selection.is_empty:
            return None
        start = selection.start_col if doc_row == selection.start_row else 0
        # A selected line break shows as one highlighted cell past the line end.
        end = selection.end_col if doc_row == selection.end_row else line_len + 1
        start, end = max(0, start), min(end, content_width)
        if end <= start:
            return None
        return StyleSpan(start, end, "selection")

    # --- header / status ----------------------------------------------------

    @staticmethod
    def _header_row(header_text: str, width: int) -> FrameRow:
        return FrameRow(kind="header", text=fit_to_width(_sanitize(header_text), width))

    @staticmethod
    def _status_row(view: RenderInput, width: int) -> FrameRow:
        left = _sanitize(view.status_left)
        right = _sanitize(view.status_right)
        message = _sanitize(view.status_message)

        left_w, right_w = display_width(left), display_width(right)
        spacing = width - left_w - right_w
        if spacing < display_width(message):
            message = truncate_to_width(message, max(0, spacing - 1))
        msg_w = display_width(message)
        pad_left = max(0, (spacing - msg_w) // 2)
        pad_right = max(0, spacing - msg_w - pad_left)

        text = fit_to_width(left + " " * pad_left + message + " " * pad_right + right, width)
        spans: list[StyleSpan] = []
        if view.status_is_error and message:
            start = len(left) + pad_left
            spans.append(StyleSpan(start, start + len(message), "status_error"))
        return FrameRow(kind="status", text=text, spans=spans)
