"""Text selection over a screen grid.

The screen object passed to the methods must provide ``cols``, ``rows``,
``top``, ``bot``, ``lines`` (rows of Glyph), ``altscreen``, ``config``,
``line_length(y)`` and ``set_dirty(top, bot)``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .glyph import Attr
from .utf8 import utf8_encode

__all__ = ["SelectionMode", "SelectionType", "SelectionSnap", "Selection"]


class SelectionMode(enum.IntEnum):
    IDLE = 0
    EMPTY = 1
    READY = 2


class SelectionType(enum.IntEnum):
    REGULAR = 1
    RECTANGULAR = 2


class SelectionSnap(enum.IntEnum):
    NONE = 0
    WORD = 1
    LINE = 2


@dataclass
class _Point:
    x: int = 0
    y: int = 0


@dataclass
class Selection:
    """Selection state: original (ob, oe) and normalized (nb, ne) corners."""

    mode: SelectionMode = SelectionMode.IDLE
    type: SelectionType = SelectionType.REGULAR
    snap: int = SelectionSnap.NONE
    alt: bool = False
    nb: _Point = field(default_factory=_Point)
    ne: _Point = field(default_factory=_Point)
    ob: _Point = field(default_factory=lambda: _Point(-1, 0))
    oe: _Point = field(default_factory=_Point)

    @property
    def active(self) -> bool:
        return self.ob.x != -1

    def clear(self, screen) -> None:
        """Drop the selection and mark its lines for redrawing."""
        if not self.active:
            return
        self.mode = SelectionMode.IDLE
        self.ob.x = -1
        screen.set_dirty(self.nb.y, self.ne.y)

    def start(self, screen, col: int, row: int, snap: int) -> None:
        """Begin a new selection at a cell."""
        self.clear(screen)
        self.mode = SelectionMode.EMPTY
        self.type = SelectionType.REGULAR
        self.alt = bool(screen.altscreen)
        self.snap = snap
        self.ob = _Point(col, row)
        self.oe = _Point(col, row)
        self.normalize(screen)
        if self.snap != SelectionSnap.NONE:
            self.mode = SelectionMode.READY
        screen.set_dirty(self.nb.y, self.ne.y)

    def extend(self, screen, col: int, row: int, type: int, done: bool) -> None:
        """Move the end of the selection; done finishes it."""
        if self.mode == SelectionMode.IDLE:
            return
        if done and self.mode == SelectionMode.EMPTY:
            self.clear(screen)
            return

        old_ey, old_ex = self.oe.y, self.oe.x
        old_sby, old_sey = self.nb.y, self.ne.y
        old_type = self.type

        self.oe.x = col
        self.oe.y = row
        self.normalize(screen)
        self.type = SelectionType(type)

        if (old_ey != self.oe.y or old_ex != self.oe.x or old_type != self.type
                or self.mode == SelectionMode.EMPTY):
            screen.set_dirty(min(self.nb.y, old_sby), max(self.ne.y, old_sey))

        self.mode = SelectionMode.IDLE if done else SelectionMode.READY

    def normalize(self, screen) -> None:
        """Compute the ordered, snapped corners from the original ones."""
        ob, oe = self.ob, self.oe
        if self.type == SelectionType.REGULAR and ob.y != oe.y:
            forward = ob.y < oe.y
            self.nb.x = ob.x if forward else oe.x
            self.ne.x = oe.x if forward else ob.x
        else:
            self.nb.x = min(ob.x, oe.x)
            self.ne.x = max(ob.x, oe.x)
        self.nb.y = min(ob.y, oe.y)
        self.ne.y = max(ob.y, oe.y)

        self.nb.x, self.nb.y = self._snap(screen, self.nb.x, self.nb.y, -1)
        self.ne.x, self.ne.y = self._snap(screen, self.ne.x, self.ne.y, +1)

        if self.type == SelectionType.RECTANGULAR:
            return
        length = screen.line_length(self.nb.y)
        if length < self.nb.x:
            self.nb.x = length
        if screen.line_length(self.ne.y) <= self.ne.x:
            self.ne.x = screen.cols - 1

    def _snap(self, screen, x: int, y: int, direction: int) -> tuple[int, int]:
        lines = screen.lines
        cols, rows = screen.cols, screen.rows
        if self.snap == SelectionSnap.WORD:
            prev = lines[y][x]
            prev_delim = screen.config.is_delimiter(prev.u)
            while True:
                new_x = x + direction
                new_y = y
                if not 0 <= new_x <= cols - 1:
                    new_y += direction
                    new_x = (new_x + cols) % cols
                    if not 0 <= new_y <= rows - 1:
                        break
                    yt, xt = (y, x) if direction > 0 else (new_y, new_x)
                    if not lines[yt][xt].mode & Attr.WRAP:
                        break
                if new_x >= screen.line_length(new_y):
                    break
                gp = lines[new_y][new_x]
                delim = screen.config.is_delimiter(gp.u)
                if not gp.mode & Attr.WDUMMY and (
                        delim != prev_delim or (delim and gp.u != prev.u)):
                    break
                x, y = new_x, new_y
                prev, prev_delim = gp, delim
        elif self.snap == SelectionSnap.LINE:
            x = 0 if direction < 0 else cols - 1
            if direction < 0:
                while y > 0 and lines[y - 1][cols - 1].mode & Attr.WRAP:
                    y -= 1
            elif direction > 0:
                while y < rows - 1 and lines[y][cols - 1].mode & Attr.WRAP:
                    y += 1
        return x, y

    def selected(self, x: int, y: int, altscreen: bool) -> bool:
        """Tell whether the cell at (x, y) lies inside the selection."""
        if (self.mode == SelectionMode.EMPTY or not self.active
                or self.alt != bool(altscreen)):
            return False
        nb, ne = self.nb, self.ne
        if self.type == SelectionType.RECTANGULAR:
            return nb.y <= y <= ne.y and nb.x <= x <= ne.x
        return (nb.y <= y <= ne.y
                and (y != nb.y or x >= nb.x)
                and (y != ne.y or x <= ne.x))

    def text(self, screen) -> str | None:
        """Return the selected text, or None when nothing is selected."""
        if not self.active:
            return None
        rect = self.type == SelectionType.RECTANGULAR
        out = bytearray()
        for y in range(self.nb.y, self.ne.y + 1):
            length = screen.line_length(y)
            if length == 0:
                out += b"\n"
                continue
            line = screen.lines[y]
            if rect:
                first, lastx = self.nb.x, self.ne.x
            else:
                first = self.nb.x if self.nb.y == y else 0
                lastx = self.ne.x if self.ne.y == y else screen.cols - 1
            last = min(lastx, length - 1)
            while last >= first and line[last].u == ord(" "):
                last -= 1

            for glyph in line[first:last + 1]:
                if not glyph.mode & Attr.WDUMMY:
                    out += utf8_encode(glyph.u)

            wrapped = last >= 0 and bool(line[last].mode & Attr.WRAP)
            if (y < self.ne.y or lastx >= length) and (not wrapped or rect):
                out += b"\n"
        return out.decode("utf-8")

    def scroll(self, screen, orig: int, n: int) -> None:
        """Follow a scroll of n lines starting at row orig."""
        if not self.active:
            return
        begin_in = orig <= self.nb.y <= screen.bot
        end_in = orig <= self.ne.y <= screen.bot
        if begin_in != end_in:
            self.clear(screen)
        elif begin_in:
            self.ob.y += n
            self.oe.y += n
            top, bot = screen.top, screen.bot
            if (self.ob.y < top or self.ob.y > bot
                    or self.oe.y < top or self.oe.y > bot):
                self.clear(screen)
            else:
                self.normalize(screen)