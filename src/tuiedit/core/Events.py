# tuiedit/core/Events.py
"""Raw input events delivered by an ``InputSource``.

Key events carry a canonical key name (``"a"``, ``"enter"``, ``"up"``,
``"f7"``...) and a set of modifiers drawn from ``ctrl``, ``alt``, ``shift``.
Pointer events carry terminal cell coordinates (screen-relative).
"""

import enum
from dataclasses import dataclass, field

MODIFIER_ORDER = ("ctrl", "alt", "shift")


@dataclass(frozen=True)
class KeyEvent:
    code: str
    modifiers: frozenset = field(default_factory=frozenset)

    @classmethod
    def parse(cls, spec: str) -> "KeyEvent":
        """Builds an event from a spec such as ``"ctrl+shift+home"``."""
        parts = [p.strip() for p in spec.strip().split("+") if p.strip()]
        if not parts:
            raise ValueError(f"Empty key spec: {spec!r}")
        code = parts[-1]
        mods = frozenset(p.lower() for p in parts[:-1])
        unknown = mods - set(MODIFIER_ORDER)
        if unknown:
            raise ValueError(f"Unknown modifiers {sorted(unknown)} in {spec!r}")
        if len(code) > 1:
            code = code.lower()
        return cls(code, mods)

    @property
    def spec(self) -> str:
        """Canonical ``mod+mod+key`` form used for keybinding lookup."""
        mods = [m for m in MODIFIER_ORDER if m in self.modifiers]
        return "+".join([*mods, self.code])

    @property
    def is_printable(self) -> bool:
        return (
            len(self.code) == 1
            and self.code.isprintable()
            and not ({"ctrl", "alt"} & self.modifiers)
        )


class PointerKind(enum.Enum):
    DOWN = "down"
    UP = "up"
    DRAG = "drag"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"


class MouseButton(enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIDDLE = "middle"
    NONE = "none"


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    button: MouseButton
    row: int
    col: int


@dataclass(frozen=True)
class ResizeEvent:
    height: int
    width: int
