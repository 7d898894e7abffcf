"""
Transition decoder: color change between two regions -> operation.
"""

from enum import Enum

from .colors import N_HUES, N_LIGHTS, Color, scale
from .errors import InvariantViolation


class Op(Enum):
    NONE = 'none'
    PUSH = 'push'
    POP = 'pop'
    ADD = 'add'
    SUBTRACT = 'subtract'
    MULTIPLY = 'multiply'
    DIVIDE = 'divide'
    MOD = 'mod'
    NOT = 'not'
    GREATER = 'greater'
    POINTER = 'pointer'
    SWITCH = 'switch'
    DUPLICATE = 'duplicate'
    ROLL = 'roll'
    IN_NUMBER = 'in(number)'
    IN_CHAR = 'in(char)'
    OUT_NUMBER = 'out(number)'
    OUT_CHAR = 'out(char)'


# (darkness, hue) -> Op
OP_TABLE = {
    (0, 0): Op.NONE, (1, 0): Op.PUSH, (2, 0): Op.POP,
    (0, 1): Op.ADD, (1, 1): Op.SUBTRACT, (2, 1): Op.MULTIPLY,
    (0, 2): Op.DIVIDE, (1, 2): Op.MOD, (2, 2): Op.NOT,
    (0, 3): Op.GREATER, (1, 3): Op.POINTER, (2, 3): Op.SWITCH,
    (0, 4): Op.DUPLICATE, (1, 4): Op.ROLL, (2, 4): Op.IN_NUMBER,
    (0, 5): Op.IN_CHAR, (1, 5): Op.OUT_NUMBER, (2, 5): Op.OUT_CHAR,
}


def color_delta(exit_color: Color, entry_color: Color):
    """(darkness, hue) steps from exit_color to entry_color."""
    exit_hue, exit_light = scale(exit_color)
    entry_hue, entry_light = scale(entry_color)
    darkness = (entry_light + N_LIGHTS - exit_light) % N_LIGHTS
    hue = (entry_hue + N_HUES - exit_hue) % N_HUES
    return darkness, hue


def decode_op(exit_color: Color, entry_color: Color) -> Op:
    """
    Operation for leaving exit_color and entering entry_color.

    Transitions touching white carry no operation. Black never reaches here.
    """
    if exit_color is Color.WHITE or entry_color is Color.WHITE:
        return Op.NONE

    delta = color_delta(exit_color, entry_color)
    try:
        return OP_TABLE[delta]
    except KeyError:
        raise InvariantViolation(
            f"Unknown transition {exit_color} -> {entry_color} {delta}"
        ) from None
