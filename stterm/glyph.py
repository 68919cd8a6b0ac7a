"""Character cells, their attribute flags and the cursor."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace

__all__ = ["Attr", "CursorState", "Glyph", "Cursor", "truecolor", "is_truecolor"]

_TRUECOLOR_FLAG = 1 << 24


class Attr(enum.IntFlag):
    """Attribute flags of a character cell."""

    NULL = 0
    BOLD = 1 << 0
    FAINT = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    REVERSE = 1 << 5
    INVISIBLE = 1 << 6
    STRUCK = 1 << 7
    WRAP = 1 << 8
    WIDE = 1 << 9
    WDUMMY = 1 << 10
    SIXEL = 1 << 13
    BOLD_FAINT = BOLD | FAINT


class CursorState(enum.IntFlag):
    """Cursor state flags."""

    DEFAULT = 0
    WRAPNEXT = 1
    ORIGIN = 2


def truecolor(r: int, g: int, b: int) -> int:
    """Pack an RGB colour into the form that marks it as direct colour."""
    return _TRUECOLOR_FLAG | (r << 16) | (g << 8) | b


def is_truecolor(color: int) -> bool:
    """Tell whether a colour value was made by truecolor()."""
    return bool(color & _TRUECOLOR_FLAG)


@dataclass(slots=True)
class Glyph:
    """One character cell: code point, attribute flags and colours."""

    u: int = 0
    mode: Attr = Attr.NULL
    fg: int = 0
    bg: int = 0

    def attr_differs(self, other: Glyph) -> bool:
        """True if the two cells would be drawn with different attributes."""
        return self.mode != other.mode or self.fg != other.fg or self.bg != other.bg

    def copy(self) -> Glyph:
        """Return an independent copy of this cell."""
        return replace(self)


@dataclass(slots=True)
class Cursor:
    """Cursor position, state and the attributes used for new characters."""

    attr: Glyph = field(default_factory=Glyph)
    x: int = 0
    y: int = 0
    state: CursorState = CursorState.DEFAULT

    def copy(self) -> Cursor:
        """Return an independent copy, including its attribute cell."""
        return Cursor(self.attr.copy(), self.x, self.y, self.state)