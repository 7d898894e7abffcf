"""
Error types raised by the Piet core.

Load-time errors abort before an interpreter exists. Execution faults are
raised out of Interpreter.step() and leave the interpreter usable.
"""


class PietError(Exception):
    """Base class for everything the core raises."""


# Load time

class UnrecognizedColor(PietError, ValueError):
    """A byte triplet outside the 20-color palette."""

    def __init__(self, rgb, position=None):
        self.rgb = tuple(rgb)
        self.position = position
        where = f" at {tuple(position)}" if position is not None else ""
        super().__init__("Unrecognized color #%02X%02X%02X%s" % (*self.rgb, where))


# Internal invariants

class InvariantViolation(PietError):
    """Navigation or decoding produced something impossible."""


class OutOfBounds(InvariantViolation, IndexError):
    """Grid lookup outside width/height."""


# Execution faults

class ExecutionFault(PietError):
    """The interpreted program did something illegal."""

    def __init__(self, message, op=None):
        self.op = op
        super().__init__(message)


class StackUnderflow(ExecutionFault):
    pass


class InvalidCharacter(ExecutionFault):
    pass


class DivisionByZero(ExecutionFault):
    pass


class InvalidNumber(ExecutionFault):
    pass


class InputExhausted(ExecutionFault):
    pass


class UnsupportedOperation(ExecutionFault):
    pass
