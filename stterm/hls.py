"""Conversion of sixel HLS colour specifications to packed RGB values.

Primary colour hues in this colour model:
    blue:  0 degrees
    red:   120 degrees
    green: 240 degrees
"""

import math

__all__ = ["hls_to_rgb"]

_WHITE = (255 << 16) | (255 << 8) | 255


def _pack(r: int, g: int, b: int) -> int:
    return (r << 16) + (g << 8) + b


def _clamp_percent(value: int) -> int:
    return min(max(value, 0), 100)


def _scale(percent: int) -> int:
    # Integer division truncating toward zero.
    return int(percent * 255 / 100)


def hls_to_rgb(hue: int, lum: int, sat: int) -> int:
    """Convert hue (degrees), lightness and saturation (percent) to 0xRRGGBB."""
    if sat == 0:
        grey = _scale(lum)
        return _pack(grey, grey, grey)

    hs = float(math.fmod(hue + 240, 360))
    hv = hs / 360.0
    lv = lum / 100.0
    sv = sat / 100.0

    c = (1.0 - abs(2.0 * lv - 1.0)) * sv
    hpi = int(hv * 6.0)
    x = c if hpi & 1 else 0.0
    m = lv - 0.5 * c

    sectors = {
        0: (c, x, 0.0),
        1: (x, c, 0.0),
        2: (0.0, c, x),
        3: (0.0, x, c),
        4: (x, 0.0, c),
        5: (c, 0.0, x),
    }
    if hpi not in sectors:
        return _WHITE
    r1, g1, b1 = sectors[hpi]

    r, g, b = (_clamp_percent(int((v + m) * 100.0 + 0.5)) for v in (r1, g1, b1))
    return _pack(_scale(r), _scale(g), _scale(b))