"""
Failures raised by assignments, iterators and summaries.
None of these are recoverable inside the library, they always reach the caller.
"""


class VariableNotBound(KeyError):
    """A map-backed assignment was asked for a variable it never bound."""

    def __init__(self, variable) -> None:
        super().__init__(variable)
        self.variable = variable

    def __str__(self):
        return f"Variable not present: {self.variable}"


class DuplicateMarginal(ValueError):

    def __init__(self, variable) -> None:
        super().__init__(f"Marginal already present for variable {variable}")
        self.variable = variable


class UnsupportedOperation(NotImplementedError):
    pass


class ArityExceeded(ValueError):

    def __init__(self, nvars: int, max_arity: int) -> None:
        super().__init__(f"Cannot iterate over {nvars} variables, supported arity is 1 to {max_arity}")
        self.nvars = nvars


class UnsetVariableClass(TypeError):
    """Raised when writing a value back into a variable that cannot be set."""

    def __init__(self, variable) -> None:
        super().__init__(f"Cannot set variable of class {type(variable).__name__}: {variable}")
        self.variable = variable
