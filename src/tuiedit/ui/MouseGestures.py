# tuiedit/ui/MouseGestures.py
"""MouseGestures.py
====================
Translates raw pointer events into semantic gestures.

The interpreter is a small state machine (``IDLE`` -> ``PRESSED`` ->
``DRAGGING``) that tells a click from a double-click by comparing the event
time against the last recorded click. It never blocks or waits; the only
external dependency is an injectable monotonic clock returning seconds.

Coordinates handed in are already content-area relative (the caller strips
the header row and gutter); the interpreter itself is coordinate-agnostic.
"""

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from tuiedit.core.Events import MouseButton, PointerEvent, PointerKind


class GestureState(enum.Enum):
    IDLE = "idle"
    PRESSED = "pressed"
    DRAGGING = "dragging"


class GestureKind(enum.Enum):
    NONE = "none"
    CLICK = "click"
    DOUBLE_CLICK = "double_click"
    RIGHT_CLICK = "right_click"
    DRAG = "drag"
    DRAG_END = "drag_end"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"


@dataclass(frozen=True)
class Gesture:
    kind: GestureKind
    row: int = 0
    col: int = 0
    anchor: Optional[tuple[int, int]] = None


NO_GESTURE = Gesture(GestureKind.NONE)


class GestureInterpreter:
    """Stateful pointer-to-gesture translator.

    Args:
        double_click_ms: Maximum gap between two primary presses that still
            counts as a double-click.
        column_tolerance: Maximum column distance between those presses.
        clock: Monotonic time source in seconds (``time.monotonic`` by default).
    """

    def __init__(
        self,
        double_click_ms: int = 500,
        column_tolerance: int = 2,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.double_click_ms = double_click_ms
        self.column_tolerance = column_tolerance
        self._clock = clock

        self.state = GestureState.IDLE
        self.drag_anchor: Optional[tuple[int, int]] = None
        self.last_click_row: Optional[int] = None
        self.last_click_col: Optional[int] = None
        self.last_click_time: Optional[float] = None

    def reset(self) -> None:
        """Drops any armed drag anchor and returns to ``IDLE``."""
        self.state = GestureState.IDLE
        self.drag_anchor = None

    def _is_double_click(self, row: int, col: int, now: float) -> bool:
        if self.last_click_time is None or self.last_click_row is None:
            return False
        elapsed_ms = (now - self.last_click_time) * 1000.0
        return (
            elapsed_ms < self.double_click_ms
            and row == self.last_click_row
            and abs(col - (self.last_click_col or 0)) <= self.column_tolerance
        )

    def interpret(self, event: PointerEvent) -> Gesture:
        kind, button = event.kind, event.button
        row, col = event.row, event.col

        if kind is PointerKind.SCROLL_UP:
            return Gesture(GestureKind.SCROLL_UP, row, col)
        if kind is PointerKind.SCROLL_DOWN:
            return Gesture(GestureKind.SCROLL_DOWN, row, col)

        if kind is PointerKind.DOWN and button is MouseButton.SECONDARY:
            return Gesture(GestureKind.RIGHT_CLICK, row, col)

        if button is not MouseButton.PRIMARY:
            return NO_GESTURE

        if kind is PointerKind.DOWN:
            return self._primary_down(row, col)
        if kind is PointerKind.DRAG:
            return self._primary_drag(row, col)
        if kind is PointerKind.UP:
            return self._primary_up(row, col)
        return NO_GESTURE

    def _primary_down(self, row: int, col: int) -> Gesture:
        now = self._clock()
        double = self._is_double_click(row, col, now)

        # The click record moves on both branches so a third press is measured
        # against the second one.
        self.last_click_row = row
        self.last_click_col = col
        self.last_click_time = now

        if double:
            self.reset()
            logging.debug("GestureInterpreter: double-click at (%d, %d)", row, col)
            return Gesture(GestureKind.DOUBLE_CLICK, row, col)

        self.drag_anchor = (row, col)
        self.state = GestureState.PRESSED
        return Gesture(GestureKind.CLICK, row, col)

    def _primary_drag(self, row: int, col: int) -> Gesture:
        if self.state not in (GestureState.PRESSED, GestureState.DRAGGING) or self.drag_anchor is None:
            return NO_GESTURE
        self.state = GestureState.DRAGGING
        return Gesture(GestureKind.DRAG, row, col, anchor=self.drag_anchor)

    def _primary_up(self, row: int, col: int) -> Gesture:
        anchor = self.drag_anchor
        self.reset()
        if anchor is None or anchor == (row, col):
            return NO_GESTURE
        logging.debug("GestureInterpreter: drag %s -> (%d, %d)", anchor, row, col)
        return Gesture(GestureKind.DRAG_END, row, col, anchor=anchor)
