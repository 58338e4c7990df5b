# tuiedit/ui/Targets.py
"""Input sources and render targets the editor loop is parameterized over.

``CursesInputSource`` (KeyBinder.py) and ``DrawScreen`` are the terminal
implementations. The scripted source and the in-memory target below drive the
same loop headless, which is how the engine is tested.
"""

import logging
from collections import deque
from typing import Iterable, Optional, Protocol, Union

from tuiedit.core.Events import KeyEvent, PointerEvent, ResizeEvent
from tuiedit.ui.FrameRenderer import Frame

InputEvent = Union[KeyEvent, PointerEvent, ResizeEvent]


class InputSource(Protocol):
    def read_event(self, timeout_ms: int) -> Optional[InputEvent]:
        """Next event, or None when ``timeout_ms`` passed without input."""
        ...


class RenderTarget(Protocol):
    def size(self) -> tuple[int, int]:
        """Terminal size as ``(height, width)`` in cells."""
        ...

    def present(self, frame: Frame) -> None: ...


class ScriptedInputSource:
    """Replays a fixed list of events. ``None`` entries simulate timeouts.

    When the script runs out the source keeps returning None, so a loop that
    never quits would spin; tests always end their scripts with a quit.
    """

    def __init__(self, events: Iterable[Optional[InputEvent]] = ()) -> None:
        self._events: deque[Optional[InputEvent]] = deque(events)
        self.reads = 0

    def push(self, *events: Optional[InputEvent]) -> None:
        self._events.extend(events)

    @property
    def exhausted(self) -> bool:
        return not self._events

    def read_event(self, timeout_ms: int) -> Optional[InputEvent]:
        self.reads += 1
        if not self._events:
            return None
        return self._events.popleft()


class MemoryRenderTarget:
    """Keeps every presented frame; size is fixed unless ``resize`` is called."""

    def __init__(self, height: int = 24, width: int = 80) -> None:
        self.height = height
        self.width = width
        self.frames: list[Frame] = []

    def resize(self, height: int, width: int) -> None:
        self.height, self.width = height, width

    def size(self) -> tuple[int, int]:
        return self.height, self.width

    def present(self, frame: Frame) -> None:
        logging.debug("MemoryRenderTarget: frame %d (%d rows)", len(self.frames) + 1, frame.height)
        self.frames.append(frame)

    @property
    def last_frame(self) -> Optional[Frame]:
        return self.frames[-1] if self.frames else None

    def screen_text(self) -> list[str]:
        """Plain text of the last frame, one string per terminal row."""
        frame = self.last_frame
        return frame.lines() if frame else []
