# src/tuiedit/core/__init__.py
"""Public facade for tuiedit.core: re-export the state classes from CamelCase modules.

The engine itself lives in ``tuiedit.core.Editor`` and is imported from there;
it pulls in the ui and integrations layers, which in turn import these
leaf modules.
"""

# Re-export classes/symbols from CamelCase modules
from .Buffer import Buffer  # noqa: F401
from .Cursor import CursorController, CursorPosition, Direction  # noqa: F401
from .Events import KeyEvent, MouseButton, PointerEvent, PointerKind, ResizeEvent  # noqa: F401
from .RenderThrottle import RenderThrottle  # noqa: F401
from .Selection import Selection  # noqa: F401
from .Viewport import Viewport  # noqa: F401


__all__ = [
    "Buffer",
    "CursorController",
    "CursorPosition",
    "Direction",
    "KeyEvent",
    "MouseButton",
    "PointerEvent",
    "PointerKind",
    "ResizeEvent",
    "RenderThrottle",
    "Selection",
    "Viewport",
]
