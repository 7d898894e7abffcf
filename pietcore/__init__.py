"""
Piet interpreter core: palette, pixel grid, navigation and execution.
"""

from .colors import Color, decode, encode, scale
from .errors import (DivisionByZero, ExecutionFault, InputExhausted,
                     InvalidCharacter, InvalidNumber, InvariantViolation,
                     OutOfBounds, PietError, StackUnderflow, UnrecognizedColor,
                     UnsupportedOperation)
from .grid import Grid, Position, Region, validate_buffer
from .machine import Interpreter, State
from .navigation import Chooser, Direction, exit_pixel, next_pixel, recover
from .ops import Op, decode_op

__version__ = '0.1.0'
