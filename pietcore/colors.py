"""
Piet color palette: 18 hue/lightness colors plus black and white.
"""

from enum import Enum
from typing import Tuple

from .errors import InvariantViolation, UnrecognizedColor


N_HUES = 6
N_LIGHTS = 3


class Color(Enum):
    LIGHT_RED = 0xFFC0C0
    LIGHT_YELLOW = 0xFFFFC0
    LIGHT_GREEN = 0xC0FFC0
    LIGHT_CYAN = 0xC0FFFF
    LIGHT_BLUE = 0xC0C0FF
    LIGHT_MAGENTA = 0xFFC0FF

    RED = 0xFF0000
    YELLOW = 0xFFFF00
    GREEN = 0x00FF00
    CYAN = 0x00FFFF
    BLUE = 0x0000FF
    MAGENTA = 0xFF00FF

    DARK_RED = 0xC00000
    DARK_YELLOW = 0xC0C000
    DARK_GREEN = 0x00C000
    DARK_CYAN = 0x00C0C0
    DARK_BLUE = 0x0000C0
    DARK_MAGENTA = 0xC000C0

    BLACK = 0x000000
    WHITE = 0xFFFFFF

    @property
    def is_chromatic(self) -> bool:
        return self in _SCALE

    @property
    def rgb(self) -> Tuple[int, int, int]:
        v = self.value
        return (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF

    def __str__(self):
        return self.name.lower()


# (hue, lightness): hue order red..magenta, lightness light/normal/dark
_SCALE = {}
for _hue, _name in enumerate(['RED', 'YELLOW', 'GREEN', 'CYAN', 'BLUE', 'MAGENTA']):
    _SCALE[Color['LIGHT_' + _name]] = (_hue, 0)
    _SCALE[Color[_name]] = (_hue, 1)
    _SCALE[Color['DARK_' + _name]] = (_hue, 2)

PALETTE_CODES = frozenset(c.value for c in Color)


def pack(r: int, g: int, b: int) -> int:
    """Big-endian 24-bit value of an RGB triplet."""
    return (r << 16) | (g << 8) | b


def decode(sample) -> Color:
    """Decode three raw bytes into a palette color."""
    r, g, b = sample[0], sample[1], sample[2]
    if not all(0 <= v <= 0xFF for v in (r, g, b)):
        raise UnrecognizedColor((r, g, b))
    try:
        return Color(pack(r, g, b))
    except ValueError:
        raise UnrecognizedColor((r, g, b)) from None


def from_code(code: int) -> Color:
    """Decode an already-packed 24-bit value."""
    try:
        return Color(code)
    except ValueError:
        raise UnrecognizedColor(((code >> 16) & 0xFF, (code >> 8) & 0xFF, code & 0xFF)) from None


def encode(color: Color) -> bytes:
    return bytes(color.rgb)


def scale(color: Color) -> Tuple[int, int]:
    """
    Position of a color on the hue/lightness cycle.

    Black and white have no coordinate; callers branch on them first.
    """
    try:
        return _SCALE[color]
    except KeyError:
        raise InvariantViolation(f"{color} is not on the hue/lightness cycle") from None
