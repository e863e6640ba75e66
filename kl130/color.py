"""
Colour conversion between the RGB values users pick and the HSB values the bulb takes.
"""

import math
from typing import NamedTuple


class ColorRGB(NamedTuple):
    red: int
    green: int
    blue: int


class ColorHSB(NamedTuple):
    hue: int
    saturation: int
    brightness: int


def _round_half_up(value: float) -> int:
    # Builtin round() uses banker's rounding; the bulb app rounds .5 up.
    return int(math.floor(value + 0.5))


def rgb_to_hsb(rgb: ColorRGB) -> ColorHSB:
    """Convert an RGB triple (0-255 per channel) to hue/saturation/brightness.

    Hue is in [0, 360), saturation and brightness in [0, 100]. Channels outside
    0-255 are not clamped; keeping them in range is up to the caller.
    """
    red, green, blue = rgb
    r = red / 255
    g = green / 255
    b = blue / 255

    v = max(r, g, b)
    n = v - min(r, g, b)

    if n == 0:
        h = 0
    elif v == r:
        h = (g - b) / n
    elif v == g:
        h = 2 + (b - r) / n
    else:
        h = 4 + (r - g) / n

    if h < 0:
        h += 6

    hue = _round_half_up(60 * h) % 360
    saturation = _round_half_up((n / v) * 100) if v else 0
    brightness = _round_half_up(v * 100)
    return ColorHSB(hue, saturation, brightness)
