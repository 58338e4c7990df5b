# tuiedit/core/RenderThrottle.py
"""Caps the frame rate during bursts of pointer events.

A render is allowed at most once per ``interval_ms``. Forced renders always
pass. A render refused by the throttle is remembered as ``pending`` so the
control loop can flush it on its next idle tick.
"""

import time
from typing import Callable, Optional


class RenderThrottle:
    def __init__(self, interval_ms: int = 16, clock: Callable[[], float] = time.monotonic) -> None:
        self.interval_ms = max(0, interval_ms)
        self._clock = clock
        self._last_render: Optional[float] = None
        self.pending = False

    def should_render(self, forced: bool = False) -> bool:
        if forced or self._last_render is None:
            return True
        elapsed_ms = (self._clock() - self._last_render) * 1000.0
        if elapsed_ms >= self.interval_ms:
            return True
        self.pending = True
        return False

    def mark_rendered(self) -> None:
        self._last_render = self._clock()
        self.pending = False
