from __future__ import annotations
import abc
from typing import Any, Iterator

from margsum.core.interfaces import diff as diff_
from margsum.core.modeling import constants

"""
Contracts for the variables that assignments and summaries talk about.
Variables are compared by identity: two instances are never the same variable
even if a subclass defines value equality between them.
"""
class Variable(abc.ABC):

    @property
    @abc.abstractmethod
    def value(self) -> Any:
        raise NotImplementedError()

    @property
    def kind(self) -> constants.VariableKind:
        return constants.VariableKind.GENERIC

class MutableVariable(Variable):

    @abc.abstractmethod
    def set(self, value: Any, diff: diff_.DiffLog | None = None) -> None:
        """Overwrite the live value, recording the change in `diff` if one is given."""
        raise NotImplementedError()

class DiscreteDomain(abc.ABC):

    @abc.abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError()

    @abc.abstractmethod
    def __getitem__(self, i: int) -> Any:
        raise NotImplementedError()

    @abc.abstractmethod
    def index(self, value: Any) -> int:
        raise NotImplementedError()

    def __iter__(self) -> Iterator[Any]:
        for i in range(len(self)):
            yield self[i]

class DiscreteVariable(Variable):

    @property
    @abc.abstractmethod
    def domain(self) -> DiscreteDomain:
        raise NotImplementedError()

    @property
    @abc.abstractmethod
    def int_value(self) -> int:
        raise NotImplementedError()

    @property
    def value(self) -> Any:
        return self.domain[self.int_value]

    @property
    def kind(self) -> constants.VariableKind:
        return constants.VariableKind.DISCRETE

class MutableDiscreteVariable(DiscreteVariable, MutableVariable):

    @abc.abstractmethod
    def set_int(self, i: int, diff: diff_.DiffLog | None = None) -> None:
        raise NotImplementedError()

    def set(self, value: Any, diff: diff_.DiffLog | None = None) -> None:
        self.set_int(self.domain.index(value), diff)

class LabeledVariable(Variable):
    """A variable whose correct (supervised) value is known."""

    @property
    @abc.abstractmethod
    def target_value(self) -> Any:
        raise NotImplementedError()
