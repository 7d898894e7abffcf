"""
Program image as an immutable grid of palette colors.

The grid is built once from a decoded RGB buffer (row-major, 3 bytes per
pixel) and validated up front, so every later lookup is a known color.
"""

from collections import deque
from dataclasses import dataclass
from typing import FrozenSet, NamedTuple

import numpy as np

from .colors import PALETTE_CODES, Color, from_code
from .errors import OutOfBounds, UnrecognizedColor


_PALETTE_ARRAY = np.array(sorted(PALETTE_CODES), dtype=np.uint32)

# 4-connected neighbours
NEIGHBOUR_OFFSETS = [(1, 0), (0, 1), (-1, 0), (0, -1)]


class Position(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class Region:
    """Maximal 4-connected group of same-colored pixels."""

    color: Color
    members: FrozenSet[Position]
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def size(self) -> int:
        return len(self.members)

    def __contains__(self, pos) -> bool:
        return pos in self.members


def pack_pixels(pixels: np.ndarray) -> np.ndarray:
    """(h, w, 3) uint8 array -> (h, w) array of 24-bit color codes."""
    p = pixels.astype(np.uint32)
    return (p[..., 0] << 16) | (p[..., 1] << 8) | p[..., 2]


def validate_codes(codes: np.ndarray) -> None:
    """Reject the first pixel (row-major) that is not a palette color."""
    bad = ~np.isin(codes, _PALETTE_ARRAY)
    if bad.any():
        idx = int(np.flatnonzero(bad)[0])
        y, x = divmod(idx, codes.shape[1])
        code = int(codes[y, x])
        raise UnrecognizedColor(((code >> 16) & 0xFF, (code >> 8) & 0xFF, code & 0xFF),
                                Position(x, y))


def validate_buffer(buffer, width: int, height: int) -> np.ndarray:
    """
    Check a raw RGB buffer and return its packed color codes.

    Raises:
        ValueError: size does not match width * height * 3
        UnrecognizedColor: a pixel outside the palette
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid grid size {width}x{height}")

    raw = np.frombuffer(bytes(buffer), dtype=np.uint8)
    if raw.size != width * height * 3:
        raise ValueError(
            f"Buffer holds {raw.size} bytes, expected {width * height * 3} "
            f"for {width}x{height} RGB"
        )

    codes = pack_pixels(raw.reshape(height, width, 3))
    validate_codes(codes)
    return codes


class Grid:
    """Read-only color grid; safe to share between interpreters."""

    def __init__(self, codes: np.ndarray):
        codes = np.array(codes, dtype=np.uint32)
        codes.setflags(write=False)
        self._codes = codes
        self.height, self.width = codes.shape

    @classmethod
    def from_buffer(cls, buffer, width: int, height: int) -> "Grid":
        return cls(validate_buffer(buffer, width, height))

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "Grid":
        """Build from an (h, w, 3) uint8 array such as np.array(img)."""
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3 or 0 in pixels.shape:
            raise ValueError(f"Expected (h, w, 3) RGB array, got shape {pixels.shape}")
        codes = pack_pixels(pixels)
        validate_codes(codes)
        return cls(codes)

    def __repr__(self):
        return f"Grid({self.width}x{self.height})"

    def contains(self, pos) -> bool:
        return 0 <= pos[0] < self.width and 0 <= pos[1] < self.height

    def color_at(self, pos) -> Color:
        if not self.contains(pos):
            raise OutOfBounds(f"{tuple(pos)} outside {self.width}x{self.height} grid")
        return from_code(int(self._codes[pos[1], pos[0]]))

    def region_of(self, seed) -> Region:
        """
        Breadth-first 4-connected flood fill from seed.

        Recomputed on every call; the grid never changes so the result is
        stable, but cost is proportional to the region size.
        """
        color = self.color_at(seed)
        codes = self._codes
        target = codes[seed[1], seed[0]]
        seen = np.zeros(codes.shape, dtype=bool)

        seed = Position(seed[0], seed[1])
        seen[seed.y, seed.x] = True
        queue = deque([seed])
        members = []
        min_x, max_x, min_y, max_y = seed.x, seed.x, seed.y, seed.y

        while queue:
            pos = queue.popleft()
            members.append(pos)

            min_x = min(min_x, pos.x)
            max_x = max(max_x, pos.x)
            min_y = min(min_y, pos.y)
            max_y = max(max_y, pos.y)

            for dx, dy in NEIGHBOUR_OFFSETS:
                nx, ny = pos.x + dx, pos.y + dy
                if 0 <= nx < self.width and 0 <= ny < self.height \
                        and not seen[ny, nx] and codes[ny, nx] == target:
                    seen[ny, nx] = True
                    queue.append(Position(nx, ny))

        return Region(color, frozenset(members), min_x, max_x, min_y, max_y)
