from __future__ import annotations
from typing import Any, Sequence

from margsum.core.interfaces import diff as diff_
from margsum.core.interfaces import variable
from margsum.core.modeling import diffs

"""
Small concrete variables and domains. Real models bring their own, these
only need to honor the contracts in margsum.core.interfaces.variable.
"""
class DiscreteDomain(variable.DiscreteDomain):

    def __init__(self, values: Sequence[Any]) -> None:
        self._values = tuple(values)
        self._indices = {value: i for i, value in enumerate(self._values)}
        if len(self._indices) != len(self._values):
            raise ValueError(f"Domain values must be distinct: {self._values}")

    @staticmethod
    def of_size(n: int) -> DiscreteDomain:
        return DiscreteDomain(range(n))

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, i: int) -> Any:
        return self._values[i]

    def index(self, value: Any) -> int:
        try:
            return self._indices[value]
        except KeyError:
            raise ValueError(f"{value!r} is not in domain {self._values}") from None

    def __repr__(self):
        return f"DiscreteDomain({list(self._values)})"

class Variable(variable.MutableVariable):

    def __init__(self, value: Any = None, name: str | None = None) -> None:
        self._value = value
        self.name = name

    @property
    def value(self) -> Any:
        return self._value

    def set(self, value: Any, diff: diff_.DiffLog | None = None) -> None:
        if diff is not None:
            diff.append(diffs.SetValueDiff(self, self._value, value, self._assign))
        self._value = value

    def _assign(self, value):
        self._value = value

    def __repr__(self):
        return f"{type(self).__name__}({self.name if self.name is not None else self._value!r})"

class ConstantVariable(variable.Variable):
    """A variable whose value never changes, so it cannot be globalized into."""

    def __init__(self, value: Any, name: str | None = None) -> None:
        self._value = value
        self.name = name

    @property
    def value(self) -> Any:
        return self._value

    def __repr__(self):
        return f"ConstantVariable({self.name if self.name is not None else self._value!r})"

class DiscreteVariable(variable.MutableDiscreteVariable):

    def __init__(self, domain: variable.DiscreteDomain, value: Any = None, name: str | None = None) -> None:
        self._domain = domain
        self._int_value = 0 if value is None else domain.index(value)
        self.name = name

    @property
    def domain(self) -> variable.DiscreteDomain:
        return self._domain

    @property
    def int_value(self) -> int:
        return self._int_value

    def set_int(self, i: int, diff: diff_.DiffLog | None = None) -> None:
        if i < 0 or i >= len(self._domain):
            raise ValueError(f"Index {i} out of range for domain of size {len(self._domain)}")
        if diff is not None:
            diff.append(diffs.SetValueDiff(self, self._int_value, i, self._assign_int))
        self._int_value = i

    def _assign_int(self, i):
        self._int_value = i

    def __repr__(self):
        return f"{type(self).__name__}({self.name if self.name is not None else self.value!r})"

class LabeledDiscreteVariable(DiscreteVariable, variable.LabeledVariable):

    def __init__(self, domain: variable.DiscreteDomain, value: Any = None, target: Any = None, name: str | None = None) -> None:
        super().__init__(domain, value, name=name)
        self._target_int_value = self.int_value if target is None else domain.index(target)

    @property
    def target_int_value(self) -> int:
        return self._target_int_value

    @property
    def target_value(self) -> Any:
        return self.domain[self._target_int_value]

    @property
    def is_correct(self) -> bool:
        return self.int_value == self._target_int_value

    def set_to_target(self, diff: diff_.DiffLog | None = None) -> None:
        self.set_int(self._target_int_value, diff)
