"""Decoder for DEC sixel graphics into an indexed image and BGRA pixels."""

from __future__ import annotations

import enum

from .hls import hls_to_rgb

__all__ = [
    "PARAMS_MAX",
    "PALETTE_MAX",
    "PARAMVALUE_MAX",
    "WIDTH_MAX",
    "HEIGHT_MAX",
    "SixelError",
    "ParseState",
    "SixelImage",
    "SixelParser",
]

PARAMS_MAX = 16
PALETTE_MAX = 1024
PARAMVALUE_MAX = 65535
WIDTH_MAX = 4096
HEIGHT_MAX = 4096


def _rgb(r: int, g: int, b: int) -> int:
    """Pack a colour with red in the low byte, as the sixel palette stores it."""
    return r + (g << 8) + (b << 16)


def _palval(n: int, a: int, m: int) -> int:
    return (n * a + m // 2) // m


def _xrgb(r: int, g: int, b: int) -> int:
    """Pack a colour given as percentages."""
    return _rgb(_palval(r, 255, 100), _palval(g, 255, 100), _palval(b, 255, 100))


_DEFAULT_COLORS = (
    _xrgb(0, 0, 0),     # Black
    _xrgb(20, 20, 80),  # Blue
    _xrgb(80, 13, 13),  # Red
    _xrgb(20, 80, 20),  # Green
    _xrgb(80, 20, 80),  # Magenta
    _xrgb(20, 80, 80),  # Cyan
    _xrgb(80, 80, 20),  # Yellow
    _xrgb(53, 53, 53),  # Gray 50%
    _xrgb(26, 26, 26),  # Gray 25%
    _xrgb(33, 33, 60),  # Blue*
    _xrgb(60, 26, 26),  # Red*
    _xrgb(33, 60, 33),  # Green*
    _xrgb(60, 33, 60),  # Magenta*
    _xrgb(33, 60, 60),  # Cyan*
    _xrgb(60, 60, 33),  # Yellow*
    _xrgb(80, 80, 80),  # Gray 75%
)


class SixelError(Exception):
    """Raised when sixel data cannot be decoded."""


class ParseState(enum.IntEnum):
    """States of the sixel parser."""

    ESC = 1
    DECSIXEL = 2
    DECGRA = 3
    DECGRI = 4
    DECGCI = 5


class SixelImage:
    """An indexed image: a row-major grid of palette indices and its palette."""

    def __init__(
        self,
        width: int = 1,
        height: int = 1,
        fgcolor: int = 0,
        bgcolor: int = 0,
        use_private_register: bool = False,
    ) -> None:
        self.width = width
        self.height = height
        self.data = [0] * (width * height)
        self.palette = [0] * PALETTE_MAX
        self.ncolors = 2
        self.palette_modified = False
        self.use_private_register = bool(use_private_register)
        self.palette[0] = bgcolor
        if self.use_private_register:
            self.palette[1] = fgcolor

    def resize(self, width: int, height: int) -> None:
        """Change the image size, keeping existing pixels and filling new ones with 0."""
        keep_w = min(width, self.width)
        keep_h = min(height, self.height)
        data = [0] * (width * height)
        for row in range(keep_h):
            src = row * self.width
            dst = row * width
            data[dst:dst + keep_w] = self.data[src:src + keep_w]
        self.data = data
        self.width = width
        self.height = height

    def _load_default_palette(self) -> None:
        self.palette[1:17] = _DEFAULT_COLORS
        cube = [
            _rgb(r * 51, g * 51, b * 51)
            for r in range(6)
            for g in range(6)
            for b in range(6)
        ]
        greys = [_rgb(i * 11, i * 11, i * 11) for i in range(24)]
        start = 17
        self.palette[start:start + len(cube)] = cube
        start += len(cube)
        self.palette[start:start + len(greys)] = greys
        start += len(greys)
        self.palette[start:] = [_rgb(255, 255, 255)] * (PALETTE_MAX - start)


class SixelParser:
    """Incremental sixel decoder; feed bytes with parse() and call finalize()."""

    def __init__(
        self,
        fgcolor: int = 0,
        bgcolor: int = 0,
        use_private_register: bool = False,
        cell_width: int = 1,
        cell_height: int = 1,
    ) -> None:
        if cell_width <= 0 or cell_height <= 0:
            raise ValueError("cell size must be positive")
        self.state = ParseState.DECSIXEL
        self.pos_x = 0
        self.pos_y = 0
        self.max_x = 0
        self.max_y = 0
        self.attributed_pan = 2
        self.attributed_pad = 1
        self.attributed_ph = 0
        self.attributed_pv = 0
        self.repeat_count = 1
        self.color_index = 16
        self.grid_width = cell_width
        self.grid_height = cell_height
        self.param = 0
        self.params: list[int] = []
        self.image = SixelImage(1, 1, fgcolor, bgcolor, use_private_register)
        self._resized = False

    def set_default_color(self) -> None:
        """Load the default VT340-style palette with colour cube and grey ramp."""
        self.image._load_default_palette()

    def parse(self, data: bytes) -> None:
        """Feed sixel body bytes; raises SixelError for data after an escape."""
        buf = bytes(data)
        self._resized = False
        pos = 0
        while pos < len(buf):
            if self.state is ParseState.ESC:
                if self._resized:
                    return
                raise SixelError("sixel data received after escape")
            handler = {
                ParseState.DECSIXEL: self._body,
                ParseState.DECGRA: self._raster_attributes,
                ParseState.DECGRI: self._repeat,
                ParseState.DECGCI: self._color,
            }[self.state]
            if handler(buf[pos]):
                pos += 1

    def finalize(self) -> bytes:
        """Trim the image to the drawn area and return its pixels as B, G, R, A bytes."""
        image = self.image
        self.max_x = max(self.max_x + 1, self.attributed_ph)
        self.max_y = max(self.max_y + 1, self.attributed_pv)

        sx = self._round_up(self.max_x, self.grid_width)
        sy = self._round_up(self.max_y, self.grid_height)
        if image.width > sx or image.height > sy:
            image.resize(sx, sy)

        if image.use_private_register and image.ncolors > 2 and not image.palette_modified:
            image._load_default_palette()

        pixels = bytearray(len(image.data) * 4)
        for offset, index in zip(range(0, len(pixels), 4), image.data):
            color = image.palette[index]
            pixels[offset] = color >> 16 & 0xFF
            pixels[offset + 1] = color >> 8 & 0xFF
            pixels[offset + 2] = color & 0xFF
        return bytes(pixels)

    @staticmethod
    def _round_up(value: int, grid: int) -> int:
        return (value + grid - 1) // grid * grid

    def _begin(self, state: ParseState) -> None:
        self.param = 0
        self.params = []
        self.state = state

    def _digit(self, byte: int) -> None:
        self.param = min(self.param * 10 + byte - 0x30, PARAMVALUE_MAX)

    def _push_param(self) -> None:
        if len(self.params) < PARAMS_MAX:
            self.params.append(self.param)
        self.param = 0

    def _body(self, byte: int) -> bool:
        ch = chr(byte)
        if ch == "\x1b":
            self.state = ParseState.ESC
        elif ch == '"':
            self._begin(ParseState.DECGRA)
        elif ch == "!":
            self._begin(ParseState.DECGRI)
        elif ch == "#":
            self._begin(ParseState.DECGCI)
        elif ch == "$":
            self.pos_x = 0
        elif ch == "-":
            self.pos_x = 0
            if self.pos_y < HEIGHT_MAX - 5 - 6:
                self.pos_y += 6
            else:
                self.pos_y = HEIGHT_MAX + 1
        elif 0x3F <= byte <= 0x7E:
            self._sixel(byte - 0x3F)
        return True

    def _sixel(self, bits: int) -> None:
        image = self.image
        need_w = self.pos_x + self.repeat_count
        need_h = self.pos_y + 6
        if ((image.width < need_w or image.height < need_h)
                and image.width < WIDTH_MAX and image.height < HEIGHT_MAX):
            sx, sy = image.width * 2, image.height * 2
            while sx < need_w or sy < need_h:
                sx *= 2
                sy *= 2
            image.resize(min(sx, WIDTH_MAX), min(sy, HEIGHT_MAX))
            self._resized = True

        if self.color_index > image.ncolors:
            image.ncolors = self.color_index

        if self.pos_x + self.repeat_count > image.width:
            self.repeat_count = image.width - self.pos_x

        repeat = self.repeat_count
        if repeat > 0 and self.pos_y - 5 < image.height and bits:
            run = [self.color_index] * repeat
            for i in range(6):
                y = self.pos_y + i
                if not bits >> i & 1 or y >= image.height:
                    continue
                start = y * image.width + self.pos_x
                image.data[start:start + repeat] = run
                self.max_x = max(self.max_x, self.pos_x + repeat - 1)
                self.max_y = max(self.max_y, y)

        if repeat > 0:
            self.pos_x += repeat
        self.repeat_count = 1

    def _raster_attributes(self, byte: int) -> bool:
        if byte == 0x1B:
            self.state = ParseState.ESC
            return True
        if 0x30 <= byte <= 0x39:
            self._digit(byte)
            return True
        if byte == ord(";"):
            self._push_param()
            return True

        self._push_param()
        params = self.params
        if len(params) > 0:
            self.attributed_pad = params[0]
        if len(params) > 1:
            self.attributed_pan = params[1]
        if len(params) > 2 and params[2] > 0:
            self.attributed_ph = params[2]
        if len(params) > 3 and params[3] > 0:
            self.attributed_pv = params[3]
        self.attributed_pan = max(self.attributed_pan, 1)
        self.attributed_pad = max(self.attributed_pad, 1)

        image = self.image
        if image.width < self.attributed_ph or image.height < self.attributed_pv:
            sx = self._round_up(max(self.attributed_ph, image.width), self.grid_width)
            sy = self._round_up(max(self.attributed_pv, image.height), self.grid_height)
            image.resize(min(sx, WIDTH_MAX), min(sy, HEIGHT_MAX))
            self._resized = True
        self._begin(ParseState.DECSIXEL)
        return False

    def _repeat(self, byte: int) -> bool:
        if byte == 0x1B:
            self.state = ParseState.ESC
            return True
        if 0x30 <= byte <= 0x39:
            self._digit(byte)
            return True
        self.repeat_count = self.param or 1
        self._begin(ParseState.DECSIXEL)
        return False

    def _color(self, byte: int) -> bool:
        if byte == 0x1B:
            self.state = ParseState.ESC
            return True
        if 0x30 <= byte <= 0x39:
            self._digit(byte)
            return True
        if byte == ord(";"):
            self._push_param()
            return True

        self.state = ParseState.DECSIXEL
        self._push_param()
        params = self.params
        if params:
            self.color_index = min(max(1 + params[0], 0), PALETTE_MAX - 1)

        if len(params) > 4:
            image = self.image
            image.palette_modified = True
            if params[1] == 1:
                image.palette[self.color_index] = hls_to_rgb(
                    min(params[2], 360), min(params[3], 100), min(params[4], 100)
                )
            elif params[1] == 2:
                image.palette[self.color_index] = _xrgb(
                    min(params[2], 100), min(params[3], 100), min(params[4], 100)
                )
        return False