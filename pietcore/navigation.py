"""
Direction pointer, codel chooser and the exit rule for leaving a region.
"""

from enum import Enum
from typing import Optional, Tuple

from .errors import InvariantViolation
from .grid import Position, Region


class Direction(Enum):
    RIGHT = 0
    DOWN = 1
    LEFT = 2
    UP = 3

    def clockwise(self, turns: int = 1) -> "Direction":
        return Direction((self.value + turns) % 4)


class Chooser(Enum):
    LEFT = 0
    RIGHT = 1

    def flipped(self) -> "Chooser":
        return Chooser.RIGHT if self is Chooser.LEFT else Chooser.LEFT


# Movement vectors, indexed by Direction
DP_VECS = {
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.UP: (0, -1),
}

# Facing direction, chooser picks your left or right hand side.
# (direction, chooser) -> (axis along the edge, pick max instead of min)
EXIT_RULES = {
    (Direction.RIGHT, Chooser.LEFT): ('y', False),
    (Direction.RIGHT, Chooser.RIGHT): ('y', True),
    (Direction.DOWN, Chooser.RIGHT): ('x', False),
    (Direction.DOWN, Chooser.LEFT): ('x', True),
    (Direction.LEFT, Chooser.LEFT): ('y', True),
    (Direction.LEFT, Chooser.RIGHT): ('y', False),
    (Direction.UP, Chooser.LEFT): ('x', False),
    (Direction.UP, Chooser.RIGHT): ('x', True),
}

# Obstructions tolerated before the program halts
MAX_OBSTRUCTIONS = 8


def edge(region: Region, direction: Direction):
    """Members on the bounding-box edge facing direction (may be disjoint)."""
    if direction is Direction.RIGHT:
        return [p for p in region.members if p.x == region.max_x]
    if direction is Direction.LEFT:
        return [p for p in region.members if p.x == region.min_x]
    if direction is Direction.DOWN:
        return [p for p in region.members if p.y == region.max_y]
    return [p for p in region.members if p.y == region.min_y]


def exit_pixel(region: Region, direction: Direction,
               chooser: Chooser) -> Tuple[Position, int]:
    """
    Pick the single pixel through which execution leaves a region.

    Returns:
        (exit position, region size)
    """
    candidates = edge(region, direction)
    if not candidates:
        raise InvariantViolation(f"Region at {min(region.members)} has no {direction.name} edge")

    axis, pick_max = EXIT_RULES[(direction, chooser)]
    key = (lambda p: p.y) if axis == 'y' else (lambda p: p.x)
    chosen = max(candidates, key=key) if pick_max else min(candidates, key=key)
    return chosen, region.size


def next_pixel(pos, direction: Direction) -> Optional[Position]:
    """One step past pos; None when that would go below zero."""
    dx, dy = DP_VECS[direction]
    x, y = pos[0] + dx, pos[1] + dy
    if x < 0 or y < 0:
        return None
    return Position(x, y)


def recover(count: int, direction: Direction,
            chooser: Chooser) -> Tuple[Direction, Chooser]:
    """
    Obstruction recovery policy.

    Even counts flip the chooser, odd counts turn the direction clockwise.
    """
    if count % 2 == 0:
        return direction, chooser.flipped()
    return direction.clockwise(), chooser
