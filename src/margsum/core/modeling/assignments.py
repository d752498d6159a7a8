from __future__ import annotations
import itertools
from typing import Any, Iterator, Sequence

from margsum.core import errors
from margsum.core.interfaces import assignment, variable
from margsum.core.interfaces import diff as diff_
from margsum.core.modeling import constants

"""
Concrete assignments.

HashMapAssignment is the general purpose mutable one. Assignment1 to Assignment4
keep their (variable, value) pairs in slots instead of a dict, and look variables
up by identity; any variable they don't hold is answered with its own live value.
GlobalAssignment and TargetAssignment are stateless views of the live variables.
AssignmentStack layers assignments on top of each other.
"""
class HashMapAssignment(assignment.MutableAssignment):

    __slots__ = ("_map",)

    def __init__(self, variables: Sequence[variable.Variable] = ()) -> None:
        """Bind each of `variables` to its current live value."""
        self._map: dict[variable.Variable, Any] = {}
        for v in variables:
            self.update(v, v.value)

    def variables(self) -> list[variable.Variable]:
        return list(self._map.keys())

    def apply(self, v: variable.Variable) -> Any:
        try:
            return self._map[v]
        except KeyError:
            raise errors.VariableNotBound(v) from None

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        return self._map.get(v, default)

    def contains(self, v: variable.Variable) -> bool:
        return v in self._map

    def update(self, v: variable.Variable, value: Any) -> None:
        self._map[v] = value

    def __len__(self):
        return len(self._map)

    def __repr__(self):
        return f"HashMapAssignment({self._map})"

def _not_present(assignment_type, v):
    return errors.UnsupportedOperation(f"Cannot update {assignment_type} value for variable not present: {v}")

class Assignment1(assignment.MutableAssignment):

    __slots__ = ("var1", "value1")

    def __init__(self, var1: variable.Variable, value1: Any) -> None:
        self.var1 = var1
        self.value1 = value1

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self.var1,)

    def apply(self, v: variable.Variable) -> Any:
        if v is self.var1:
            return self.value1
        return v.value

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        if v is self.var1:
            return self.value1
        return default

    def contains(self, v: variable.Variable) -> bool:
        return v is self.var1

    def update(self, v: variable.Variable, value: Any) -> None:
        if v is self.var1:
            self.value1 = value
        else:
            raise _not_present("Assignment1", v)

    def __repr__(self):
        return f"Assignment1({self.var1}={self.value1!r})"

class DiscreteAssignment1(assignment.MutableAssignment):
    """Assignment of one discrete variable, stored as its integer code in the variable's domain."""

    __slots__ = ("var1", "int_value1")

    def __init__(self, var1: variable.DiscreteVariable, int_value1: int) -> None:
        self.var1 = var1
        self.int_value1 = int_value1

    @staticmethod
    def from_value(var1: variable.DiscreteVariable, value1: Any) -> DiscreteAssignment1:
        return DiscreteAssignment1(var1, var1.domain.index(value1))

    @property
    def value1(self) -> Any:
        return self.var1.domain[self.int_value1]

    @value1.setter
    def value1(self, value: Any) -> None:
        self.int_value1 = self.var1.domain.index(value)

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self.var1,)

    def apply(self, v: variable.Variable) -> Any:
        if v is self.var1:
            return self.value1
        return v.value

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        if v is self.var1:
            return self.value1
        return default

    def contains(self, v: variable.Variable) -> bool:
        return v is self.var1

    def update(self, v: variable.Variable, value: Any) -> None:
        if v is self.var1:
            self.value1 = value
        else:
            raise _not_present("DiscreteAssignment1", v)

    def globalize(self, diff: diff_.DiffLog | None = None) -> None:
        if not isinstance(self.var1, variable.MutableDiscreteVariable):
            raise errors.UnsetVariableClass(self.var1)
        self.var1.set_int(self.int_value1, diff)

    def __repr__(self):
        return f"DiscreteAssignment1({self.var1}={self.int_value1})"

class Assignment2(assignment.MutableAssignment):

    __slots__ = ("var1", "value1", "var2", "value2")

    def __init__(self, var1: variable.Variable, value1: Any, var2: variable.Variable, value2: Any) -> None:
        self.var1 = var1
        self.value1 = value1
        self.var2 = var2
        self.value2 = value2

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self.var1, self.var2)

    def apply(self, v: variable.Variable) -> Any:
        if v is self.var1:
            return self.value1
        elif v is self.var2:
            return self.value2
        return v.value

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        if v is self.var1:
            return self.value1
        elif v is self.var2:
            return self.value2
        return default

    def contains(self, v: variable.Variable) -> bool:
        return v is self.var1 or v is self.var2

    def update(self, v: variable.Variable, value: Any) -> None:
        if v is self.var1:
            self.value1 = value
        elif v is self.var2:
            self.value2 = value
        else:
            raise _not_present("Assignment2", v)

    def __repr__(self):
        return f"Assignment2({self.var1}={self.value1!r}, {self.var2}={self.value2!r})"

class Assignment3(assignment.MutableAssignment):

    __slots__ = ("var1", "value1", "var2", "value2", "var3", "value3")

    def __init__(self, var1: variable.Variable, value1: Any, var2: variable.Variable, value2: Any,
                 var3: variable.Variable, value3: Any) -> None:
        self.var1 = var1
        self.value1 = value1
        self.var2 = var2
        self.value2 = value2
        self.var3 = var3
        self.value3 = value3

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self.var1, self.var2, self.var3)

    def apply(self, v: variable.Variable) -> Any:
        if v is self.var1:
            return self.value1
        elif v is self.var2:
            return self.value2
        elif v is self.var3:
            return self.value3
        return v.value

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        if v is self.var1:
            return self.value1
        elif v is self.var2:
            return self.value2
        elif v is self.var3:
            return self.value3
        return default

    def contains(self, v: variable.Variable) -> bool:
        return v is self.var1 or v is self.var2 or v is self.var3

    def update(self, v: variable.Variable, value: Any) -> None:
        if v is self.var1:
            self.value1 = value
        elif v is self.var2:
            self.value2 = value
        elif v is self.var3:
            self.value3 = value
        else:
            raise _not_present("Assignment3", v)

    def __repr__(self):
        return f"Assignment3({self.var1}={self.value1!r}, {self.var2}={self.value2!r}, {self.var3}={self.value3!r})"

class Assignment4(assignment.MutableAssignment):

    __slots__ = ("var1", "value1", "var2", "value2", "var3", "value3", "var4", "value4")

    def __init__(self, var1: variable.Variable, value1: Any, var2: variable.Variable, value2: Any,
                 var3: variable.Variable, value3: Any, var4: variable.Variable, value4: Any) -> None:
        self.var1 = var1
        self.value1 = value1
        self.var2 = var2
        self.value2 = value2
        self.var3 = var3
        self.value3 = value3
        self.var4 = var4
        self.value4 = value4

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self.var1, self.var2, self.var3, self.var4)

    def apply(self, v: variable.Variable) -> Any:
        if v is self.var1:
            return self.value1
        elif v is self.var2:
            return self.value2
        elif v is self.var3:
            return self.value3
        elif v is self.var4:
            return self.value4
        return v.value

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        if v is self.var1:
            return self.value1
        elif v is self.var2:
            return self.value2
        elif v is self.var3:
            return self.value3
        elif v is self.var4:
            return self.value4
        return default

    def contains(self, v: variable.Variable) -> bool:
        return v is self.var1 or v is self.var2 or v is self.var3 or v is self.var4

    def update(self, v: variable.Variable, value: Any) -> None:
        if v is self.var1:
            self.value1 = value
        elif v is self.var2:
            self.value2 = value
        elif v is self.var3:
            self.value3 = value
        elif v is self.var4:
            self.value4 = value
        else:
            raise _not_present("Assignment4", v)

    def __repr__(self):
        return (f"Assignment4({self.var1}={self.value1!r}, {self.var2}={self.value2!r}, "
                f"{self.var3}={self.value3!r}, {self.var4}={self.value4!r})")

FIXED_ARITY_ASSIGNMENTS = {
    constants.Arity.ONE: Assignment1,
    constants.Arity.TWO: Assignment2,
    constants.Arity.THREE: Assignment3,
    constants.Arity.FOUR: Assignment4,
}

def fixed_arity_assignment(variables: Sequence[variable.Variable], values: Sequence[Any]) -> assignment.MutableAssignment:
    """Pairs variables[i] with values[i] in the AssignmentN matching len(variables)."""
    if len(variables) != len(values):
        raise ValueError(f"Got {len(variables)} variables but {len(values)} values")
    assignment_type = FIXED_ARITY_ASSIGNMENTS[constants.Arity.of(len(variables))]
    return assignment_type(*itertools.chain.from_iterable(zip(variables, values)))

class GlobalAssignment(assignment.Assignment):
    """The values stored inside the variables themselves."""

    __slots__ = ()

    def variables(self):
        raise errors.UnsupportedOperation("Cannot list all variables of the global assignment.")

    def apply(self, v: variable.Variable) -> Any:
        return v.value

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        return v.value

    def contains(self, v: variable.Variable) -> bool:
        return True

    def globalize(self, diff: diff_.DiffLog | None = None) -> None:
        pass

class TargetAssignment(assignment.Assignment):
    """The target value of labeled variables, the live value of every other variable."""

    __slots__ = ()

    def variables(self):
        raise errors.UnsupportedOperation("Cannot list all variables of the target assignment.")

    def apply(self, v: variable.Variable) -> Any:
        if isinstance(v, variable.LabeledVariable):
            return v.target_value
        return v.value

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        return self.apply(v)

    def contains(self, v: variable.Variable) -> bool:
        return True

    def globalize(self, diff: diff_.DiffLog | None = None) -> None:
        raise errors.UnsupportedOperation("Cannot set a target assignment. Instead set each variable to its target directly.")

class AssignmentStack(assignment.Assignment):
    """An assignment backed by a chain of assignments.
    The value returned comes from the first assignment in the chain that contains
    the variable; if none does, the last assignment in the chain decides.
    """

    __slots__ = ("assignment", "next")

    def __init__(self, assignment: assignment.Assignment, next: AssignmentStack | None = None) -> None:
        self.assignment = assignment
        self.next = next

    @staticmethod
    def of(*layers: assignment.Assignment) -> AssignmentStack:
        """Innermost layer first."""
        if len(layers) == 0:
            raise ValueError("AssignmentStack needs at least one layer")
        stack = None
        for layer in reversed(layers):
            stack = AssignmentStack(layer, stack)
        return stack # type:ignore

    def layers(self) -> Iterator[assignment.Assignment]:
        s = self
        while s is not None:
            yield s.assignment
            s = s.next

    def variables(self) -> list[variable.Variable]:
        seen = set()
        out = []
        for layer in self.layers():
            for v in layer.variables():
                if id(v) not in seen:
                    seen.add(id(v))
                    out.append(v)
        return out

    def apply(self, v: variable.Variable) -> Any:
        s = self
        while s.next is not None:
            if s.assignment.contains(v):
                return s.assignment.apply(v)
            s = s.next
        return s.assignment.apply(v)

    def get(self, v: variable.Variable, default: Any = None) -> Any:
        for layer in self.layers():
            if layer.contains(v):
                return layer.apply(v)
        return default

    def contains(self, v: variable.Variable) -> bool:
        return any(layer.contains(v) for layer in self.layers())

    def prepend(self, a: assignment.Assignment) -> AssignmentStack:
        """A new stack with `a` in front; this stack is shared as its tail, not copied."""
        return AssignmentStack(a, self)

    def __repr__(self):
        return f"AssignmentStack({list(self.layers())})"
