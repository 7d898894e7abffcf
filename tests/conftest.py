"""
Shared fixtures: build grids from rows of palette colors.
"""

import random

import pytest

from pietcore import Color, ExecutionFault, Grid, Interpreter, encode


def build_grid(rows):
    height, width = len(rows), len(rows[0])
    buffer = b''.join(encode(c) for row in rows for c in row)
    return Grid.from_buffer(buffer, width, height)


@pytest.fixture
def make_grid():
    return build_grid


@pytest.fixture
def transition():
    """
    One step from a RED pixel into entry_color with a prepared stack.

    Returns (interpreter, op, error); error is the ExecutionFault raised,
    if any.
    """
    def run(entry_color, stack=(), input_text=None):
        vm = Interpreter(build_grid([[Color.RED, entry_color]]), input_text)
        vm.stack = list(stack)
        try:
            return vm, vm.step(), None
        except ExecutionFault as e:
            return vm, None, e
    return run


@pytest.fixture
def random_grid():
    """Reproducible grid drawn from a small palette."""
    def build(seed, width, height,
              palette=(Color.RED, Color.DARK_RED, Color.BLACK, Color.WHITE)):
        rng = random.Random(seed)
        return build_grid([[rng.choice(palette) for _ in range(width)]
                           for _ in range(height)])
    return build
