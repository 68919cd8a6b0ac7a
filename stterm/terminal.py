"""Escape-sequence interpreter driving a Screen.

Bytes read from the child program are fed to Terminal.write(); control
codes, CSI, string (OSC/DCS/APC/PM) and simple escape sequences are
interpreted and the screen is updated. Requests that concern the window
system go through a WindowHooks object.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from wcwidth import wcwidth

from .config import Config
from .glyph import Attr, CursorState, truecolor
from .screen import Charset, Screen, TermMode
from .utf8 import UTF_SIZ, base64_decode, utf8_decode, utf8_encode

__all__ = ["WindowHooks", "CsiSequence", "Terminal", "parse_csi", "parse_str_args"]

log = logging.getLogger(__name__)

_ESC_BUF_SIZ = 128 * UTF_SIZ
_ESC_ARG_SIZ = 16
_STR_ARG_SIZ = _ESC_ARG_SIZ
_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)

_MOUSE_MODES = frozenset({"mouse_x10", "mouse_btn", "mouse_motion", "mouse_many"})

_NUMBER = re.compile(rb"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_ATOI = re.compile(r"\s*([+-]?[0-9]+)")


class _Esc(enum.IntFlag):
    NONE = 0
    START = 1
    CSI = 2
    STR = 4
    ALTCHARSET = 8
    STR_END = 16
    TEST = 32
    UTF8 = 64


def _is_control_c0(u: int) -> bool:
    return 0 <= u <= 0x1F or u == 0x7F


def _is_control_c1(u: int) -> bool:
    return 0x80 <= u <= 0x9F


def _is_control(u: int) -> bool:
    return _is_control_c0(u) or _is_control_c1(u)


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _dump_bytes(data: bytes, stop_at_nul: bool = False) -> str:
    out = []
    for c in data:
        if c == 0 and stop_at_nul:
            break
        if 0x20 <= c <= 0x7E:
            out.append(chr(c))
        elif c == 0x0A:
            out.append("(\\n)")
        elif c == 0x0D:
            out.append("(\\r)")
        elif c == 0x1B:
            out.append("(\\e)")
        else:
            out.append(f"({c:02x})")
    return "".join(out)


class WindowHooks:
    """Requests to the window system; this implementation records them."""

    def __init__(self) -> None:
        self.title: str | None = None
        self.icon_title: str | None = None
        self.modes: set[str] = set()
        self.pointer_motion = False
        self.cursor_style = 0
        self.bells = 0
        self.selection: str | None = None
        self.clip_copies = 0
        self.colors: dict[int, str] = {}
        self.window_clears = 0
        self.redraws = 0
        self.colors_loaded = 0

    def set_title(self, title: str | None) -> None:
        """Set the window title; None restores the default."""
        self.title = title

    def set_icon_title(self, title: str | None) -> None:
        """Set the icon title; None restores the default."""
        self.icon_title = title

    def set_mode(self, enable: bool, mode: str) -> None:
        """Switch a window mode; "mouse" stands for all mouse report modes."""
        names = _MOUSE_MODES if mode == "mouse" else {mode}
        if enable:
            self.modes |= names
        else:
            self.modes -= names

    def set_pointer_motion(self, enable: bool) -> None:
        """Ask for pointer motion events, or stop asking."""
        self.pointer_motion = bool(enable)

    def set_cursor_style(self, style: int) -> bool:
        """Set the cursor style (0-7); return True if the style is rejected."""
        if not 0 <= style <= 7:
            return True
        self.cursor_style = style
        return False

    def bell(self) -> None:
        """Ring the bell."""
        self.bells += 1

    def set_selection(self, text: str) -> None:
        """Take ownership of the selection with the given text."""
        self.selection = text

    def clip_copy(self) -> None:
        """Copy the selection to the clipboard."""
        self.clip_copies += 1

    def set_color_name(self, index: int, name: str | None) -> bool:
        """Set palette entry index to a colour name (None resets it).

        Returns True on failure.
        """
        if index < 0:
            return True
        if name is None:
            self.colors.pop(index, None)
        else:
            self.colors[index] = name
        return False

    def clear_window(self) -> None:
        """Clear the whole window with the background colour."""
        self.window_clears += 1

    def redraw(self) -> None:
        """Redraw the whole terminal."""
        self.redraws += 1

    def load_colors(self) -> None:
        """Reload the colour palette from the configuration."""
        self.colors.clear()
        self.colors_loaded += 1


@dataclass
class CsiSequence:
    """A parsed CSI sequence: ESC [ [?] args ; ... mode."""

    buf: bytes = b""
    priv: bool = False
    args: list[int] = field(default_factory=list)
    mode: str = "\0\0"


def parse_csi(data: bytes) -> CsiSequence:
    """Parse the bytes following ESC [ up to and including the final byte."""
    buf = bytes(data)
    end = len(buf)
    pos = 0
    priv = False
    if buf[:1] == b"?":
        priv = True
        pos = 1
    args: list[int] = []
    while pos < end:
        match = _NUMBER.match(buf, pos)
        if match:
            value = int(match.group(1))
            pos = match.end()
            if not _LONG_MIN < value < _LONG_MAX:
                value = -1
        else:
            value = 0
        args.append(value)
        if buf[pos:pos + 1] != b";" or len(args) == _ESC_ARG_SIZ:
            break
        pos += 1
    first = chr(buf[pos]) if pos < end else "\0"
    pos += 1
    second = chr(buf[pos]) if pos < end else "\0"
    return CsiSequence(buf, priv, args, first + second)


def parse_str_args(data: bytes) -> list[str]:
    """Split a string sequence body into at most 16 ';'-separated arguments."""
    body = bytes(data).partition(b"\0")[0]
    if not body:
        return []
    return [part.decode("utf-8", "replace") for part in body.split(b";")[:_STR_ARG_SIZ]]


def _arg(csi: CsiSequence, i: int, default: int = 0) -> int:
    value = csi.args[i] if i < len(csi.args) else 0
    return value or default


class Terminal:
    """Interprets program output and applies it to a Screen."""

    def __init__(
        self,
        cols: int = 80,
        rows: int = 24,
        config: Config | None = None,
        hooks: WindowHooks | None = None,
        tty_write: Callable[[bytes], object] | None = None,
        printer: Callable[[bytes], object] | None = None,
    ) -> None:
        self.screen = Screen(cols, rows, config)
        self.config = self.screen.config
        self.hooks = hooks if hooks is not None else WindowHooks()
        self.responses = bytearray()
        self.printed = bytearray()
        self._reply = tty_write if tty_write is not None else self.responses.extend
        self._printer = printer if printer is not None else self.printed.extend
        self.esc = _Esc.NONE
        self.lastc = 0
        self._csi_buf = bytearray()
        self._csi = CsiSequence()
        self._str_type = ""
        self._str_buf = bytearray()

    # -- input ------------------------------------------------------------------

    def write(self, data: bytes, show_ctrl: bool = False) -> int:
        """Interpret data; return the number of bytes consumed.

        An incomplete UTF-8 sequence at the end is left unconsumed.
        With show_ctrl, control characters are shown in caret notation.
        """
        view = memoryview(bytes(data))
        total = len(view)
        n = 0
        while n < total:
            if self.screen.mode & TermMode.UTF8:
                u, size = utf8_decode(view[n:n + UTF_SIZ])
                if size == 0:
                    break
            else:
                u, size = view[n], 1
            if show_ctrl and _is_control(u):
                if u & 0x80:
                    u &= 0x7F
                    self.put_char(ord("^"))
                    self.put_char(ord("["))
                elif u not in (0x0A, 0x0D, 0x09):
                    u ^= 0x40
                    self.put_char(ord("^"))
            self.put_char(u)
            n += size
        return n

    def put_char(self, u: int) -> None:
        """Interpret one character."""
        s = self.screen
        control = _is_control(u)
        width = 1
        if u < 127 or not s.mode & TermMode.UTF8:
            encoded = bytes([u & 0xFF])
        else:
            encoded = utf8_encode(u)
            if not control:
                width = wcwidth(chr(u))
                if width == -1:
                    width = 1

        if s.mode & TermMode.PRINT:
            self._printer(encoded)

        # A string sequence swallows everything up to its terminator.
        if self.esc & _Esc.STR:
            if u in (0x07, 0x18, 0x1A, 0x1B) or _is_control_c1(u):
                self.esc &= ~(_Esc.START | _Esc.STR)
                self.esc |= _Esc.STR_END
            else:
                self._str_buf += encoded
                return

        if control:
            self._control_code(u)
            if not self.esc:
                self.lastc = 0
            return

        if self.esc & _Esc.START:
            if self.esc & _Esc.CSI:
                self._csi_buf.append(u & 0xFF)
                if 0x40 <= u <= 0x7E or len(self._csi_buf) >= _ESC_BUF_SIZ - 1:
                    self.esc = _Esc.NONE
                    self._csi = parse_csi(bytes(self._csi_buf))
                    self.handle_csi(self._csi)
                return
            if self.esc & _Esc.UTF8:
                self._define_utf8(u)
            elif self.esc & _Esc.ALTCHARSET:
                self._define_translation(u)
            elif self.esc & _Esc.TEST:
                self._dec_test(u)
            elif not self._esc_handle(u):
                return
            self.esc = _Esc.NONE
            return

        if s.selection.selected(s.cursor.x, s.cursor.y, s.altscreen):
            s.selection.clear(s)

        if s.mode & TermMode.WRAP and s.cursor.state & CursorState.WRAPNEXT:
            s.lines[s.cursor.y][s.cursor.x].mode |= Attr.WRAP
            s.new_line(True)

        x, y = s.cursor.x, s.cursor.y
        if s.mode & TermMode.INSERT and x + width < s.cols:
            line = s.lines[y]
            line[x + width:s.cols] = [g.copy() for g in line[x:s.cols - width]]

        if s.cursor.x + width > s.cols:
            s.new_line(True)

        x, y = s.cursor.x, s.cursor.y
        s.set_char(u, s.cursor.attr, x, y)
        self.lastc = u

        if width == 2:
            line = s.lines[y]
            line[x].mode |= Attr.WIDE
            if x + 1 < s.cols:
                line[x + 1].u = 0
                line[x + 1].mode = Attr.WDUMMY
        if x + width < s.cols:
            s.move_to(x + width, y)
        else:
            s.cursor.state |= CursorState.WRAPNEXT

    # -- control codes and simple escapes ---------------------------------------

    def _csi_reset(self) -> None:
        self._csi_buf = bytearray()

    def _str_sequence(self, c: int) -> None:
        c = {0x90: ord("P"), 0x9F: ord("_"), 0x9E: ord("^"), 0x9D: ord("]")}.get(c, c)
        self._str_buf = bytearray()
        self._str_type = chr(c)
        self.esc |= _Esc.STR

    def _control_code(self, c: int) -> None:
        s = self.screen
        if c == 0x09:
            s.put_tab(1)
            return
        if c == 0x08:
            s.move_to(s.cursor.x - 1, s.cursor.y)
            return
        if c == 0x0D:
            s.move_to(0, s.cursor.y)
            return
        if c in (0x0A, 0x0B, 0x0C):
            s.new_line(bool(s.mode & TermMode.CRLF))
            return
        if c == 0x07:
            if self.esc & _Esc.STR_END:
                self.handle_str()
            else:
                self.hooks.bell()
        elif c == 0x1B:
            self._csi_reset()
            self.esc &= ~(_Esc.CSI | _Esc.ALTCHARSET | _Esc.TEST)
            self.esc |= _Esc.START
            return
        elif c in (0x0E, 0x0F):
            s.charset = 1 - (c - 0x0E)
            return
        elif c == 0x1A:
            s.set_char(ord("?"), s.cursor.attr, s.cursor.x, s.cursor.y)
            self._csi_reset()
        elif c == 0x18:
            self._csi_reset()
        elif c in (0x05, 0x00, 0x11, 0x13, 0x7F):
            return
        elif c == 0x85:
            s.new_line(True)
        elif c == 0x88:
            s.tabs[s.cursor.x] = True
        elif c == 0x9A:
            self._reply(self.config.vtiden.encode())
        elif c in (0x90, 0x9D, 0x9E, 0x9F):
            self._str_sequence(c)
            return
        # Only CAN, SUB, BEL and C1 controls interrupt a sequence.
        self.esc &= ~(_Esc.STR_END | _Esc.STR)

    def _esc_handle(self, c: int) -> bool:
        """Handle ESC c; return False while the sequence needs more input."""
        s = self.screen
        ch = chr(c)
        if ch == "[":
            self.esc |= _Esc.CSI
            return False
        if ch == "#":
            self.esc |= _Esc.TEST
            return False
        if ch == "%":
            self.esc |= _Esc.UTF8
            return False
        if ch in "P_^]k":
            self._str_sequence(c)
            return False
        if ch in "no":
            s.charset = 2 + (c - ord("n"))
        elif ch in "()*+":
            s.icharset = c - ord("(")
            self.esc |= _Esc.ALTCHARSET
            return False
        elif ch == "D":
            if s.cursor.y == s.bot:
                s.scroll_up(s.top, 1)
            else:
                s.move_to(s.cursor.x, s.cursor.y + 1)
        elif ch == "E":
            s.new_line(True)
        elif ch == "H":
            s.tabs[s.cursor.x] = True
        elif ch == "M":
            if s.cursor.y == s.top:
                s.scroll_down(s.top, 1)
            else:
                s.move_to(s.cursor.x, s.cursor.y - 1)
        elif ch == "Z":
            self._reply(self.config.vtiden.encode())
        elif ch == "c":
            s.reset()
            self.hooks.set_title(None)
            self.hooks.load_colors()
        elif ch == "=":
            self.hooks.set_mode(True, "appkeypad")
        elif ch == ">":
            self.hooks.set_mode(False, "appkeypad")
        elif ch == "7":
            s.save_cursor()
        elif ch == "8":
            s.load_cursor()
        elif ch == "\\":
            if self.esc & _Esc.STR_END:
                self.handle_str()
        else:
            shown = ch if 0x20 <= c <= 0x7E else "."
            log.warning("erresc: unknown sequence ESC 0x%02X '%s'", c & 0xFF, shown)
        return True

    def _define_utf8(self, c: int) -> None:
        if c == ord("G"):
            self.screen.mode |= TermMode.UTF8
        elif c == ord("@"):
            self.screen.mode &= ~TermMode.UTF8

    def _define_translation(self, c: int) -> None:
        charsets = {ord("0"): Charset.GRAPHIC0, ord("B"): Charset.USA}
        if c in charsets:
            self.screen.trantbl[self.screen.icharset] = charsets[c]
        else:
            log.warning("esc unhandled charset: ESC ( %s", chr(c))

    def _dec_test(self, c: int) -> None:
        if c == ord("8"):
            s = self.screen
            for x in range(s.cols):
                for y in range(s.rows):
                    s.set_char(ord("E"), s.cursor.attr, x, y)

    # -- SGR and modes ------------------------------------------------------------

    def _define_color(self, args: list[int], i: int) -> tuple[int, int]:
        def get(k: int) -> int:
            return args[k] if 0 <= k < len(args) else 0

        count = len(args)
        kind = get(i + 1)
        if kind == 2:
            if i + 4 >= count:
                log.warning("erresc(38): Incorrect number of parameters (%d)", i)
                return -1, i
            r, g, b = get(i + 2), get(i + 3), get(i + 4)
            i += 4
            if not all(0 <= v <= 255 for v in (r, g, b)):
                log.warning("erresc: bad rgb color (%d,%d,%d)", r, g, b)
                return -1, i
            return truecolor(r, g, b), i
        if kind == 5:
            if i + 2 >= count:
                log.warning("erresc(38): Incorrect number of parameters (%d)", i)
                return -1, i
            i += 2
            if not 0 <= get(i) <= 255:
                log.warning("erresc: bad fgcolor %d", get(i))
                return -1, i
            return get(i), i
        log.warning("erresc(38): gfx attr %d unknown", get(i))
        return -1, i

    def set_attributes(self, args: list[int]) -> None:
        """Apply SGR parameters to the cursor's attributes."""
        cfg = self.config
        attr = self.screen.cursor.attr
        set_flags = {1: Attr.BOLD, 2: Attr.FAINT, 3: Attr.ITALIC, 4: Attr.UNDERLINE,
                     5: Attr.BLINK, 6: Attr.BLINK, 7: Attr.REVERSE, 8: Attr.INVISIBLE,
                     9: Attr.STRUCK}
        clear_flags = {22: Attr.BOLD | Attr.FAINT, 23: Attr.ITALIC, 24: Attr.UNDERLINE,
                       25: Attr.BLINK, 27: Attr.REVERSE, 28: Attr.INVISIBLE,
                       29: Attr.STRUCK}
        i = 0
        while i < len(args):
            a = args[i]
            if a == 0:
                attr.mode &= ~(Attr.BOLD | Attr.FAINT | Attr.ITALIC | Attr.UNDERLINE
                               | Attr.BLINK | Attr.REVERSE | Attr.INVISIBLE | Attr.STRUCK)
                attr.fg = cfg.defaultfg
                attr.bg = cfg.defaultbg
            elif a in set_flags:
                attr.mode |= set_flags[a]
            elif a in clear_flags:
                attr.mode &= ~clear_flags[a]
            elif a in (38, 48):
                idx, i = self._define_color(args, i)
                if idx >= 0:
                    if a == 38:
                        attr.fg = idx
                    else:
                        attr.bg = idx
            elif a == 39:
                attr.fg = cfg.defaultfg
            elif a == 49:
                attr.bg = cfg.defaultbg
            elif 30 <= a <= 37:
                attr.fg = a - 30
            elif 40 <= a <= 47:
                attr.bg = a - 40
            elif 90 <= a <= 97:
                attr.fg = a - 90 + 8
            elif 100 <= a <= 107:
                attr.bg = a - 100 + 8
            else:
                log.warning("erresc(default): gfx attr %d unknown ESC[%s",
                            a, _dump_bytes(self._csi.buf))
            i += 1

    def _cursor(self, save: bool) -> None:
        if save:
            self.screen.save_cursor()
        else:
            self.screen.load_cursor()

    def set_modes(self, priv: bool, set: bool, args: list[int]) -> None:
        """Set or reset (private) modes from SM/RM parameters."""
        s = self.screen
        h = self.hooks
        enable = bool(set)
        for arg in args:
            if priv:
                if arg == 1:
                    h.set_mode(enable, "appcursor")
                elif arg == 5:
                    h.set_mode(enable, "reverse")
                elif arg == 6:
                    if enable:
                        s.cursor.state |= CursorState.ORIGIN
                    else:
                        s.cursor.state &= ~CursorState.ORIGIN
                    s.move_to_abs(0, 0)
                elif arg == 7:
                    if enable:
                        s.mode |= TermMode.WRAP
                    else:
                        s.mode &= ~TermMode.WRAP
                elif arg in (0, 2, 3, 4, 8, 18, 19, 42, 12, 1001, 1005, 1015):
                    pass
                elif arg == 25:
                    h.set_mode(not enable, "hide")
                elif arg in (9, 1000, 1002, 1003):
                    h.set_pointer_motion(enable if arg == 1003 else False)
                    h.set_mode(False, "mouse")
                    name = {9: "mouse_x10", 1000: "mouse_btn",
                            1002: "mouse_motion", 1003: "mouse_many"}[arg]
                    h.set_mode(enable, name)
                elif arg == 1004:
                    h.set_mode(enable, "focus")
                elif arg == 1006:
                    h.set_mode(enable, "mouse_sgr")
                elif arg == 1034:
                    h.set_mode(enable, "8bit")
                elif arg == 1048:
                    self._cursor(enable)
                elif arg in (1049, 47, 1047):
                    if not self.config.allowaltscreen:
                        continue
                    if arg == 1049:
                        self._cursor(enable)
                    alt = s.altscreen
                    if alt:
                        s.clear_region(0, 0, s.cols - 1, s.rows - 1)
                    if enable != alt:
                        s.swap_screen()
                    if arg == 1049:
                        self._cursor(enable)
                elif arg == 2004:
                    h.set_mode(enable, "brcktpaste")
                else:
                    log.warning("erresc: unknown private set/reset mode %d", arg)
            else:
                if arg == 0:
                    pass
                elif arg == 2:
                    h.set_mode(enable, "kbdlock")
                elif arg in (4, 12, 20):
                    flag = {4: TermMode.INSERT, 12: TermMode.ECHO, 20: TermMode.CRLF}[arg]
                    on = not enable if arg == 12 else enable
                    if on:
                        s.mode |= flag
                    else:
                        s.mode &= ~flag
                else:
                    log.warning("erresc: unknown set/reset mode %d", arg)

    # -- CSI --------------------------------------------------------------------

    def _unknown_csi(self, csi: CsiSequence) -> None:
        log.warning("erresc: unknown csi ESC[%s", _dump_bytes(csi.buf))

    def handle_csi(self, csi: CsiSequence) -> None:
        """Execute a parsed CSI sequence."""
        s = self.screen
        c = s.cursor
        match csi.mode[0]:
            case "@":
                s.insert_blanks(_arg(csi, 0, 1))
            case "A":
                s.move_to(c.x, c.y - _arg(csi, 0, 1))
            case "B" | "e":
                s.move_to(c.x, c.y + _arg(csi, 0, 1))
            case "i":
                mode = _arg(csi, 0)
                if mode == 0:
                    self.print_screen()
                elif mode == 1:
                    self._printer(s.dump_line(c.y))
                elif mode == 2:
                    self.print_selection()
                elif mode == 4:
                    s.mode &= ~TermMode.PRINT
                elif mode == 5:
                    s.mode |= TermMode.PRINT
            case "c":
                if _arg(csi, 0) == 0:
                    self._reply(self.config.vtiden.encode())
            case "b":
                count = _arg(csi, 0, 1)
                if self.lastc:
                    for _ in range(max(count, 0)):
                        self.put_char(self.lastc)
            case "C" | "a":
                s.move_to(c.x + _arg(csi, 0, 1), c.y)
            case "D":
                s.move_to(c.x - _arg(csi, 0, 1), c.y)
            case "E":
                s.move_to(0, c.y + _arg(csi, 0, 1))
            case "F":
                s.move_to(0, c.y - _arg(csi, 0, 1))
            case "g":
                mode = _arg(csi, 0)
                if mode == 0:
                    s.tabs[c.x] = False
                elif mode == 3:
                    s.tabs = [False] * s.cols
                else:
                    self._unknown_csi(csi)
            case "G" | "`":
                s.move_to(_arg(csi, 0, 1) - 1, c.y)
            case "H" | "f":
                s.move_to_abs(_arg(csi, 1, 1) - 1, _arg(csi, 0, 1) - 1)
            case "I":
                s.put_tab(_arg(csi, 0, 1))
            case "J":
                mode = _arg(csi, 0)
                if mode == 0:
                    s.clear_region(c.x, c.y, s.cols - 1, c.y)
                    if c.y < s.rows - 1:
                        s.clear_region(0, c.y + 1, s.cols - 1, s.rows - 1)
                elif mode == 1:
                    if c.y > 1:
                        s.clear_region(0, 0, s.cols - 1, c.y - 1)
                    s.clear_region(0, c.y, c.x, c.y)
                elif mode == 2:
                    s.clear_region(0, 0, s.cols - 1, s.rows - 1)
                else:
                    self._unknown_csi(csi)
            case "K":
                mode = _arg(csi, 0)
                if mode == 0:
                    s.clear_region(c.x, c.y, s.cols - 1, c.y)
                elif mode == 1:
                    s.clear_region(0, c.y, c.x, c.y)
                elif mode == 2:
                    s.clear_region(0, c.y, s.cols - 1, c.y)
            case "S":
                s.scroll_up(s.top, _arg(csi, 0, 1))
            case "T":
                s.scroll_down(s.top, _arg(csi, 0, 1))
            case "L":
                s.insert_blank_lines(_arg(csi, 0, 1))
            case "l":
                self.set_modes(csi.priv, False, csi.args)
            case "M":
                s.delete_lines(_arg(csi, 0, 1))
            case "X":
                s.clear_region(c.x, c.y, c.x + _arg(csi, 0, 1) - 1, c.y)
            case "P":
                s.delete_chars(_arg(csi, 0, 1))
            case "Z":
                s.put_tab(-_arg(csi, 0, 1))
            case "d":
                s.move_to_abs(c.x, _arg(csi, 0, 1) - 1)
            case "h":
                self.set_modes(csi.priv, True, csi.args)
            case "m":
                self.set_attributes(csi.args)
            case "n":
                if _arg(csi, 0) == 6:
                    self._reply(f"\033[{c.y + 1};{c.x + 1}R".encode())
            case "r":
                if csi.priv:
                    self._unknown_csi(csi)
                else:
                    s.set_scroll_region(_arg(csi, 0, 1) - 1, _arg(csi, 1, s.rows) - 1)
                    s.move_to_abs(0, 0)
            case "s":
                s.save_cursor()
            case "u":
                s.load_cursor()
            case " ":
                if csi.mode[1] != "q" or self.hooks.set_cursor_style(_arg(csi, 0)):
                    self._unknown_csi(csi)
            case _:
                self._unknown_csi(csi)

    # -- string sequences -----------------------------------------------------------

    def _unknown_str(self) -> None:
        log.warning("erresc: unknown str ESC%s%sESC\\", self._str_type,
                    _dump_bytes(bytes(self._str_buf), stop_at_nul=True))

    def handle_str(self) -> None:
        """Execute the collected string sequence (OSC, DCS, APC, PM, title)."""
        self.esc &= ~(_Esc.STR_END | _Esc.STR)
        args = parse_str_args(bytes(self._str_buf))
        narg = len(args)
        par = _atoi(args[0]) if args else 0
        hooks = self.hooks
        cfg = self.config
        kind = self._str_type

        if kind == "]":
            if par == 0:
                if narg > 1:
                    hooks.set_title(args[1])
                    hooks.set_icon_title(args[1])
                return
            if par == 1:
                if narg > 1:
                    hooks.set_icon_title(args[1])
                return
            if par == 2:
                if narg > 1:
                    hooks.set_title(args[1])
                return
            if par == 52:
                if narg > 2 and cfg.allowwindowops:
                    decoded = base64_decode(args[2])
                    hooks.set_selection(decoded.decode("utf-8", "replace"))
                    hooks.clip_copy()
                return
            if par in (4, 10, 11, 12, 104):
                name = None
                if par != 104:
                    if (par == 4 and narg < 3) or narg < 2:
                        self._unknown_str()
                        return
                    name = args[2 if par == 4 else 1]
                specials = {10: cfg.defaultfg, 11: cfg.defaultbg, 12: cfg.defaultcs}
                if par in specials:
                    index = specials[par]
                else:
                    index = _atoi(args[1]) if narg > 1 else -1
                if hooks.set_color_name(index, name):
                    if par == 104 and narg <= 1:
                        return
                    log.warning("erresc: invalid color j=%d, p=%s", index,
                                name if name is not None else "(null)")
                else:
                    if index == cfg.defaultbg:
                        hooks.clear_window()
                    hooks.redraw()
                return
        elif kind == "k":
            hooks.set_title(args[0] if args else "")
            return
        elif kind in ("P", "_", "^"):
            return

        self._unknown_str()

    # -- printing -------------------------------------------------------------------

    def print_screen(self) -> None:
        """Send the whole screen to the printer output."""
        self._printer(self.screen.dump())

    def print_selection(self) -> None:
        """Send the selected text to the printer output."""
        text = self.screen.selection_text()
        if text:
            self._printer(text.encode("utf-8"))

    def toggle_printer(self) -> None:
        """Toggle copying of all incoming characters to the printer output."""
        self.screen.mode ^= TermMode.PRINT