# src/resonancecalc/errors.py
"""
Failure conditions raised by the operation catalogue and the engine.

Each class corresponds to exactly one violated precondition. They carry no
parameters; the class itself is the error identity.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for every engine failure."""

    def __init__(self, *args: object) -> None:
        super().__init__(*(args or (self.__class__.__doc__ or self.__class__.__name__,)))


class ZeroMagnitude(EngineError):
    """A magnitude argument must be nonzero."""


class PhaseOutOfRange(EngineError):
    """Phase is above MAX_PHASE."""


class MagnitudeBoundExceeded(EngineError):
    """Value is above the accepted bound."""


class NotCurator(EngineError):
    """Caller is not the Curator."""


class NotOracle(EngineError):
    """Caller is not the Oracle."""


class NotKeeper(EngineError):
    """Caller is not the Keeper."""


class ZeroAddress(EngineError):
    """Role address is the zero address."""


class ArithmeticOverflow(EngineError):
    """Result or operand outside the 256-bit unsigned range."""


class InvalidTriad(EngineError):
    """Operands do not form a resonant triad."""


class ArrayLengthMismatch(EngineError):
    """Sequence lengths differ or exceed the operand cap."""


class EmptyOperands(EngineError):
    """Sequence is empty."""


class DivisionByZero(EngineError):
    """Division or modulo by zero."""


class ReentrantCall(EngineError):
    """Guarded entry point re-entered before the outer call finished."""


class InvalidSlot(EngineError):
    """Slot index is not below MAX_SLOTS."""


class StaleBlock(EngineError):
    """Reserved; not raised by the current logic."""


ALL_ERRORS: tuple[type[EngineError], ...] = (
    ZeroMagnitude,
    PhaseOutOfRange,
    MagnitudeBoundExceeded,
    NotCurator,
    NotOracle,
    NotKeeper,
    ZeroAddress,
    ArithmeticOverflow,
    InvalidTriad,
    ArrayLengthMismatch,
    EmptyOperands,
    DivisionByZero,
    ReentrantCall,
    InvalidSlot,
    StaleBlock,
)
