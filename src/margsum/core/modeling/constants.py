from __future__ import annotations
import enum

from margsum.core import errors

DEBUG_MODE=True

MAX_ARITY=4

class VariableKind(enum.Enum):
    GENERIC = enum.auto()
    DISCRETE = enum.auto()

class Arity(enum.Enum):
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4

    @staticmethod
    def of(nvars: int) -> Arity:
        if nvars < 1 or nvars > MAX_ARITY:
            raise errors.ArityExceeded(nvars, MAX_ARITY)
        return Arity(nvars)
