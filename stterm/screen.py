"""The character grid of the terminal: primary and alternate screens,
cursor, scrolling region, tab stops and the operations that edit them."""

from __future__ import annotations

import enum

from .config import Config
from .glyph import Attr, Cursor, CursorState, Glyph
from .selection import Selection
from .utf8 import utf8_encode

__all__ = ["TermMode", "Charset", "Screen"]


class TermMode(enum.IntFlag):
    """Terminal mode flags."""

    NONE = 0
    WRAP = 1 << 0
    INSERT = 1 << 1
    ALTSCREEN = 1 << 2
    CRLF = 1 << 3
    ECHO = 1 << 4
    PRINT = 1 << 5
    UTF8 = 1 << 6
    SIXEL = 1 << 7


class Charset(enum.IntEnum):
    """Character sets that can be designated to G0..G3."""

    GRAPHIC0 = 0
    GRAPHIC1 = 1
    UK = 2
    USA = 3
    MULTI = 4
    GER = 5
    FIN = 6


# DEC special graphics, applied when the active charset is GRAPHIC0.
_VT100_GRAPHICS = dict(
    zip(
        "ABCDEFG_`abcdefghijklmnopqrstuvwxyz{|}~",
        "↑↓→←█▚☃ ◆▒␉␌␍␊°±␤␋┘┐┌└┼⎺⎻─⎼⎽├┤┴┬│≤≥π≠£·",
        strict=True,
    )
)

_SPACE = ord(" ")


def _limit(value: int, low: int, high: int) -> int:
    return low if value < low else high if value > high else value


class Screen:
    """Screen contents and the state needed to edit them."""

    def __init__(self, cols: int, rows: int, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()
        self.cols = 0
        self.rows = 0
        self.lines: list[list[Glyph]] = []
        self.alt_lines: list[list[Glyph]] = []
        self.dirty: list[bool] = []
        self.tabs: list[bool] = []
        self.cursor = Cursor(Glyph(fg=self.config.defaultfg, bg=self.config.defaultbg))
        self.top = 0
        self.bot = 0
        self.mode = TermMode.NONE
        self.trantbl = [Charset.USA] * 4
        self.charset = 0
        self.icharset = 0
        self.selection = Selection()
        self._saved = [Cursor(), Cursor()]
        self.resize(cols, rows)
        self.reset()

    @property
    def altscreen(self) -> bool:
        return bool(self.mode & TermMode.ALTSCREEN)

    # -- geometry -----------------------------------------------------------

    def resize(self, cols: int, rows: int) -> None:
        """Change the grid size, keeping the cursor line on screen."""
        if cols < 1 or rows < 1:
            raise ValueError(f"cannot resize to {cols}x{rows}")
        old_cols, old_rows = self.cols, self.rows
        min_rows = min(rows, old_rows)
        min_cols = min(cols, old_cols)

        shift = max(0, self.cursor.y - rows + 1)
        screens = []
        for lines in (self.lines, self.alt_lines):
            kept = lines[shift:shift + rows]
            for line in kept:
                if len(line) > cols:
                    del line[cols:]
                else:
                    line.extend(Glyph() for _ in range(cols - len(line)))
            kept.extend([Glyph() for _ in range(cols)] for _ in range(rows - len(kept)))
            screens.append(kept)
        self.lines, self.alt_lines = screens
        self.dirty = [False] * rows

        tabs = self.tabs[:cols] + [False] * max(0, cols - len(self.tabs))
        if cols > old_cols:
            bp = old_cols - 1
            while bp > 0 and not tabs[bp]:
                bp -= 1
            bp = max(bp, 0)
            for i in range(bp + self.config.tabspaces, cols, self.config.tabspaces):
                tabs[i] = True
        self.tabs = tabs

        self.cols = cols
        self.rows = rows
        self.set_scroll_region(0, rows - 1)
        self.move_to(self.cursor.x, self.cursor.y)

        saved = self.cursor.copy()
        for _ in range(2):
            if min_cols < cols and 0 < min_rows:
                self.clear_region(min_cols, 0, cols - 1, min_rows - 1)
            if 0 < cols and min_rows < rows:
                self.clear_region(0, min_rows, cols - 1, rows - 1)
            self.swap_screen()
            self.load_cursor()
        self.cursor = saved

    def reset(self) -> None:
        """Return to the initial state, clearing both screens."""
        cfg = self.config
        self.cursor = Cursor(Glyph(mode=Attr.NULL, fg=cfg.defaultfg, bg=cfg.defaultbg))
        self.tabs = [False] * self.cols
        for i in range(cfg.tabspaces, self.cols, cfg.tabspaces):
            self.tabs[i] = True
        self.top = 0
        self.bot = self.rows - 1
        self.mode = TermMode.WRAP | TermMode.UTF8
        self.trantbl = [Charset.USA] * 4
        self.charset = 0
        for _ in range(2):
            self.move_to(0, 0)
            self.save_cursor()
            self.clear_region(0, 0, self.cols - 1, self.rows - 1)
            self.swap_screen()

    def line_length(self, y: int) -> int:
        """Length of row y without trailing blanks (full width if it wraps)."""
        line = self.lines[y]
        i = self.cols
        if line[i - 1].mode & Attr.WRAP:
            return i
        while i > 0 and line[i - 1].u == _SPACE:
            i -= 1
        return i

    # -- dirtiness ------------------------------------------------------------

    def set_dirty(self, top: int, bot: int) -> None:
        """Mark rows top..bot (clamped to the screen) for redrawing."""
        top = _limit(top, 0, self.rows - 1)
        bot = _limit(bot, 0, self.rows - 1)
        for i in range(top, bot + 1):
            self.dirty[i] = True

    def set_dirty_attr(self, attr: int) -> None:
        """Mark every row holding a cell with the given attribute."""
        for i, line in enumerate(self.lines[:self.rows - 1]):
            if any(g.mode & attr for g in line[:self.cols - 1]):
                self.set_dirty(i, i)

    def full_dirty(self) -> None:
        """Mark the whole screen for redrawing."""
        self.set_dirty(0, self.rows - 1)

    def has_attr(self, attr: int) -> bool:
        """Tell whether any cell on screen carries the given attribute."""
        return any(
            g.mode & attr
            for line in self.lines[:self.rows - 1]
            for g in line[:self.cols - 1]
        )

    # -- cursor ---------------------------------------------------------------

    def save_cursor(self) -> None:
        """Remember the cursor for the current screen."""
        self._saved[int(self.altscreen)] = self.cursor.copy()

    def load_cursor(self) -> None:
        """Restore the cursor remembered for the current screen."""
        saved = self._saved[int(self.altscreen)]
        self.cursor = saved.copy()
        self.move_to(saved.x, saved.y)

    def move_to(self, x: int, y: int) -> None:
        """Move the cursor, clamped to the screen or the origin region."""
        if self.cursor.state & CursorState.ORIGIN:
            miny, maxy = self.top, self.bot
        else:
            miny, maxy = 0, self.rows - 1
        self.cursor.state &= ~CursorState.WRAPNEXT
        self.cursor.x = _limit(x, 0, self.cols - 1)
        self.cursor.y = _limit(y, miny, maxy)

    def move_to_abs(self, x: int, y: int) -> None:
        """Move the cursor, with y relative to the region in origin mode."""
        offset = self.top if self.cursor.state & CursorState.ORIGIN else 0
        self.move_to(x, y + offset)

    # -- editing ----------------------------------------------------------------

    def set_char(self, u: int, attr: Glyph, x: int, y: int) -> None:
        """Store a character with the given attributes at (x, y)."""
        if self.trantbl[self.charset] == Charset.GRAPHIC0 and 0x41 <= u <= 0x7E:
            mapped = _VT100_GRAPHICS.get(chr(u))
            if mapped is not None:
                u = ord(mapped)

        line = self.lines[y]
        if line[x].mode & Attr.WIDE:
            if x + 1 < self.cols:
                line[x + 1].u = _SPACE
                line[x + 1].mode &= ~Attr.WDUMMY
        elif line[x].mode & Attr.WDUMMY:
            line[x - 1].u = _SPACE
            line[x - 1].mode &= ~Attr.WIDE

        self.dirty[y] = True
        glyph = attr.copy()
        glyph.u = u
        line[x] = glyph

    def clear_region(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Blank a rectangle using the cursor's colours."""
        if x1 > x2:
            x1, x2 = x2, x1
        if y1 > y2:
            y1, y2 = y2, y1
        x1 = _limit(x1, 0, self.cols - 1)
        x2 = _limit(x2, 0, self.cols - 1)
        y1 = _limit(y1, 0, self.rows - 1)
        y2 = _limit(y2, 0, self.rows - 1)

        fg, bg = self.cursor.attr.fg, self.cursor.attr.bg
        for y in range(y1, y2 + 1):
            self.dirty[y] = True
            line = self.lines[y]
            for x in range(x1, x2 + 1):
                if self.selection.selected(x, y, self.altscreen):
                    self.selection.clear(self)
                glyph = line[x]
                glyph.fg = fg
                glyph.bg = bg
                glyph.mode = Attr.NULL
                glyph.u = _SPACE

    def delete_chars(self, n: int) -> None:
        """Delete n cells at the cursor, shifting the rest of the line left."""
        x, y = self.cursor.x, self.cursor.y
        n = _limit(n, 0, self.cols - x)
        line = self.lines[y]
        line[x:] = line[x + n:] + [Glyph() for _ in range(n)]
        self.clear_region(self.cols - n, y, self.cols - 1, y)

    def insert_blanks(self, n: int) -> None:
        """Insert n blank cells at the cursor, shifting the line right."""
        x, y = self.cursor.x, self.cursor.y
        n = _limit(n, 0, self.cols - x)
        line = self.lines[y]
        line[x:] = [Glyph() for _ in range(n)] + line[x:self.cols - n]
        self.clear_region(x, y, x + n - 1, y)

    def insert_blank_lines(self, n: int) -> None:
        """Insert n blank lines at the cursor row inside the scroll region."""
        if self.top <= self.cursor.y <= self.bot:
            self.scroll_down(self.cursor.y, n)

    def delete_lines(self, n: int) -> None:
        """Delete n lines at the cursor row inside the scroll region."""
        if self.top <= self.cursor.y <= self.bot:
            self.scroll_up(self.cursor.y, n)

    def scroll_down(self, orig: int, n: int) -> None:
        """Scroll rows orig..bot down by n, blanking the rows that open up."""
        n = _limit(n, 0, self.bot - orig + 1)
        self.set_dirty(orig, self.bot - n)
        self.clear_region(0, self.bot - n + 1, self.cols - 1, self.bot)
        lines = self.lines
        for i in range(self.bot, orig + n - 1, -1):
            lines[i], lines[i - n] = lines[i - n], lines[i]
        self.selection.scroll(self, orig, n)

    def scroll_up(self, orig: int, n: int) -> None:
        """Scroll rows orig..bot up by n, blanking the rows that open up."""
        n = _limit(n, 0, self.bot - orig + 1)
        self.clear_region(0, orig, self.cols - 1, orig + n - 1)
        self.set_dirty(orig + n, self.bot)
        lines = self.lines
        for i in range(orig, self.bot - n + 1):
            lines[i], lines[i + n] = lines[i + n], lines[i]
        self.selection.scroll(self, orig, -n)

    def new_line(self, first_col: bool) -> None:
        """Move to the next line, scrolling at the bottom of the region."""
        y = self.cursor.y
        if y == self.bot:
            self.scroll_up(self.top, 1)
        else:
            y += 1
        self.move_to(0 if first_col else self.cursor.x, y)

    def put_tab(self, n: int) -> None:
        """Move the cursor n tab stops forward (n > 0) or back (n < 0)."""
        x = self.cursor.x
        if n > 0:
            while x < self.cols and n:
                n -= 1
                x += 1
                while x < self.cols and not self.tabs[x]:
                    x += 1
        elif n < 0:
            while x > 0 and n:
                n += 1
                x -= 1
                while x > 0 and not self.tabs[x]:
                    x -= 1
        self.cursor.x = _limit(x, 0, self.cols - 1)

    def set_scroll_region(self, top: int, bot: int) -> None:
        """Set the scrolling region, clamped and ordered."""
        top = _limit(top, 0, self.rows - 1)
        bot = _limit(bot, 0, self.rows - 1)
        if top > bot:
            top, bot = bot, top
        self.top = top
        self.bot = bot

    def swap_screen(self) -> None:
        """Exchange the primary and alternate screens."""
        self.lines, self.alt_lines = self.alt_lines, self.lines
        self.mode ^= TermMode.ALTSCREEN
        self.full_dirty()

    # -- output -----------------------------------------------------------------

    def dump_line(self, y: int) -> bytes:
        """Row y as UTF-8 without trailing blanks, followed by a newline."""
        line = self.lines[y]
        length = min(self.line_length(y), self.cols)
        out = bytearray()
        if length != 1 or line[0].u != _SPACE:
            for glyph in line[:length]:
                out += utf8_encode(glyph.u)
        out += b"\n"
        return bytes(out)

    def dump(self) -> bytes:
        """The whole screen as dumped lines."""
        return b"".join(self.dump_line(y) for y in range(self.rows))

    def selection_text(self) -> str | None:
        """The currently selected text, or None."""
        return self.selection.text(self)