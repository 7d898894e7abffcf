"""
Execution state machine.

One step leaves the current region through its exit pixel and either
enters the neighbouring region (running the operation encoded by the color
change) or, when blocked by black or the canvas edge, rotates the chooser
and direction pointer. Eight blocked steps in a row terminate the program.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .colors import Color
from .errors import (DivisionByZero, InputExhausted, InvalidCharacter,
                     InvalidNumber, StackUnderflow, UnsupportedOperation)
from .grid import Grid, Position
from .navigation import (MAX_OBSTRUCTIONS, Chooser, Direction, exit_pixel,
                         next_pixel, recover)
from .ops import Op, decode_op


log = logging.getLogger(__name__)

WORD_MASK = 0xFFFFFFFF
MAX_CODE_POINT = 0x10FFFF
SURROGATES = range(0xD800, 0xE000)


@dataclass(frozen=True)
class State:
    direction: Direction
    chooser: Chooser
    position: Position
    stack: Tuple[int, ...]
    obstructions: int
    output: str
    terminated: bool


class Interpreter:
    """
    Piet program runner over a validated Grid.

    Args:
        grid: program image
        input_text: characters consumed by in(char) and in(number);
            None means no input source is attached
    """

    def __init__(self, grid: Grid, input_text: Optional[str] = None):
        self.grid = grid
        self.direction = Direction.RIGHT
        self.chooser = Chooser.LEFT
        self.position = Position(0, 0)
        self.stack: List[int] = []
        self.obstructions = 0
        self.output = ''
        self.steps = 0

        self._input = input_text
        self._input_pos = 0

        # Nothing to execute from a black origin
        self._dead_start = grid.color_at(self.position) is Color.BLACK
        if self._dead_start:
            log.info("Origin pixel is black, nothing to run")

    @property
    def terminated(self) -> bool:
        return self._dead_start or self.obstructions >= MAX_OBSTRUCTIONS

    def feed(self, text: str) -> None:
        """Append text to the input source, attaching one if needed."""
        self._input = (self._input or '') + text

    def snapshot(self) -> State:
        return State(self.direction, self.chooser, self.position,
                     tuple(self.stack), self.obstructions, self.output,
                     self.terminated)

    def format_stack(self) -> str:
        return ''.join(f"{i}:\t0x{v:X}\n" for i, v in enumerate(self.stack))

    # Stepping

    def step(self) -> Optional[Op]:
        """
        Advance by one region transition.

        Returns the operation executed, or None when the step was obstructed
        or the program has already terminated.

        Raises:
            ExecutionFault: the operation could not run; the stack is left
                as it was and the position does not advance
        """
        if self.terminated:
            return None

        region = self.grid.region_of(self.position)
        exit_pos, size = exit_pixel(region, self.direction, self.chooser)
        target = next_pixel(exit_pos, self.direction)

        if target is None or not self.grid.contains(target) \
                or self.grid.color_at(target) is Color.BLACK:
            self._obstructed(exit_pos, target)
            return None

        entry_color = self.grid.color_at(target)
        op = decode_op(region.color, entry_color)
        self.obstructions = 0
        log.debug("%s | %s/%s => %s/%s [%s]", tuple(self.position), tuple(exit_pos),
                  region.color, tuple(target), entry_color, op.value)

        self._handlers[op](self, size)
        self.position = target
        self.steps += 1
        return op

    def run(self, max_steps: Optional[int] = None) -> int:
        """Step until terminated or max_steps reached; returns steps taken."""
        taken = 0
        while not self.terminated and (max_steps is None or taken < max_steps):
            self.step()
            taken += 1
        return taken

    def _obstructed(self, exit_pos, target) -> None:
        self.direction, self.chooser = recover(self.obstructions, self.direction, self.chooser)
        self.obstructions += 1
        log.debug("%s | %s => %s blocked #%d, now %s/%s", tuple(self.position),
                  tuple(exit_pos), target and tuple(target), self.obstructions,
                  self.direction.name, self.chooser.name)
        if self.terminated:
            log.info("Terminated after %d steps, output %r", self.steps, self.output)

    # Stack helpers

    def _require(self, count: int, op: Op) -> None:
        if len(self.stack) < count:
            raise StackUnderflow(
                f"{op.value} needs {count} value(s), stack has {len(self.stack)}", op)

    def _pop2(self, op: Op) -> Tuple[int, int]:
        """Pop a (top) then b (below it)."""
        self._require(2, op)
        a = self.stack.pop()
        b = self.stack.pop()
        return a, b

    def _push(self, value: int) -> None:
        self.stack.append(value & WORD_MASK)

    # Operations

    def _op_none(self, size):
        pass

    def _op_push(self, size):
        self._push(size)

    def _op_pop(self, size):
        self._require(1, Op.POP)
        self.stack.pop()

    def _op_add(self, size):
        a, b = self._pop2(Op.ADD)
        self._push(b + a)

    def _op_subtract(self, size):
        a, b = self._pop2(Op.SUBTRACT)
        self._push(b - a)

    def _op_multiply(self, size):
        a, b = self._pop2(Op.MULTIPLY)
        self._push(b * a)

    def _op_divide(self, size):
        self._require(2, Op.DIVIDE)
        if self.stack[-1] == 0:
            raise DivisionByZero("divide by zero", Op.DIVIDE)
        a, b = self._pop2(Op.DIVIDE)
        self._push(b // a)

    def _op_mod(self, size):
        self._require(2, Op.MOD)
        if self.stack[-1] == 0:
            raise DivisionByZero("mod by zero", Op.MOD)
        a, b = self._pop2(Op.MOD)
        self._push(b % a)

    def _op_not(self, size):
        self._require(1, Op.NOT)
        self._push(0 if self.stack.pop() else 1)

    def _op_greater(self, size):
        a, b = self._pop2(Op.GREATER)
        self._push(1 if b > a else 0)

    def _op_pointer(self, size):
        self._require(1, Op.POINTER)
        self.direction = self.direction.clockwise(self.stack.pop() % 4)

    def _op_switch(self, size):
        self._require(1, Op.SWITCH)
        if self.stack.pop() % 2:
            self.chooser = self.chooser.flipped()

    def _op_duplicate(self, size):
        self._require(1, Op.DUPLICATE)
        self._push(self.stack[-1])

    def _op_roll(self, size):
        self._require(2, Op.ROLL)
        rolls, depth = self.stack[-1], self.stack[-2]
        if depth > len(self.stack) - 2:
            raise StackUnderflow(
                f"roll depth {depth} exceeds stack of {len(self.stack) - 2}", Op.ROLL)
        del self.stack[-2:]
        if depth == 0:
            return

        r = rolls % depth
        if r:
            top = self.stack[-depth:]
            self.stack[-depth:] = top[-r:] + top[:-r]

    def _remaining_input(self, op: Op) -> str:
        if self._input is None:
            raise UnsupportedOperation(f"{op.value} with no input source attached", op)
        rest = self._input[self._input_pos:]
        if not rest:
            raise InputExhausted(f"{op.value} reached end of input", op)
        return rest

    def _op_in_number(self, size):
        rest = self._remaining_input(Op.IN_NUMBER)
        stripped = rest.lstrip()
        digits = 0
        while digits < len(stripped) and stripped[digits] in '0123456789':
            digits += 1
        if not digits:
            if not stripped:
                raise InputExhausted("in(number) reached end of input", Op.IN_NUMBER)
            raise InvalidNumber(f"in(number) expected digits, got {stripped[0]!r}", Op.IN_NUMBER)

        value = 0
        for ch in stripped[:digits]:
            value = (value * 10 + ord(ch) - 48) & WORD_MASK

        self._input_pos += len(rest) - len(stripped) + digits
        self._push(value)

    def _op_in_char(self, size):
        rest = self._remaining_input(Op.IN_CHAR)
        self._input_pos += 1
        self._push(ord(rest[0]))

    def _op_out_number(self, size):
        self._require(1, Op.OUT_NUMBER)
        self.output += str(self.stack.pop())

    def _op_out_char(self, size):
        self._require(1, Op.OUT_CHAR)
        value = self.stack[-1]
        if value > MAX_CODE_POINT or value in SURROGATES:
            raise InvalidCharacter(f"{value:#x} is not a Unicode scalar value", Op.OUT_CHAR)
        self.output += chr(self.stack.pop())

    _handlers = {
        Op.NONE: _op_none,
        Op.PUSH: _op_push,
        Op.POP: _op_pop,
        Op.ADD: _op_add,
        Op.SUBTRACT: _op_subtract,
        Op.MULTIPLY: _op_multiply,
        Op.DIVIDE: _op_divide,
        Op.MOD: _op_mod,
        Op.NOT: _op_not,
        Op.GREATER: _op_greater,
        Op.POINTER: _op_pointer,
        Op.SWITCH: _op_switch,
        Op.DUPLICATE: _op_duplicate,
        Op.ROLL: _op_roll,
        Op.IN_NUMBER: _op_in_number,
        Op.IN_CHAR: _op_in_char,
        Op.OUT_NUMBER: _op_out_number,
        Op.OUT_CHAR: _op_out_char,
    }
