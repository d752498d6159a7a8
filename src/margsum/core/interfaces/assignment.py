from __future__ import annotations
import abc
import logging
from typing import Any, Iterable

from margsum.core import errors
from margsum.core.interfaces import diff as diff_
from margsum.core.interfaces import variable


class Assignment(abc.ABC):
    """A mapping from variables to values, stored apart from the variables themselves.

    Subclasses decide what happens for a variable they do not bind: fixed-arity
    and virtual assignments fall back to the variable's own live value, map-backed
    ones raise errors.VariableNotBound.
    """

    __slots__ = ()

    @abc.abstractmethod
    def variables(self) -> Iterable[variable.Variable]:
        """All variables with values in this assignment."""
        raise NotImplementedError()

    @abc.abstractmethod
    def apply(self, v: variable.Variable) -> Any:
        raise NotImplementedError()

    @abc.abstractmethod
    def get(self, v: variable.Variable, default: Any = None) -> Any:
        raise NotImplementedError()

    @abc.abstractmethod
    def contains(self, v: variable.Variable) -> bool:
        raise NotImplementedError()

    def __getitem__(self, v: variable.Variable) -> Any:
        return self.apply(v)

    def __contains__(self, v: variable.Variable) -> bool:
        return self.contains(v)

    def globalize(self, diff: diff_.DiffLog | None = None) -> None:
        """Set the live variables to the values in this assignment.

        Every variable is checked before any is written, so a failed call
        leaves the live state as it was.
        """
        vs = list(self.variables())
        for v in vs:
            if not isinstance(v, variable.MutableVariable):
                raise errors.UnsetVariableClass(v)
        logging.debug(f'globalizing {len(vs)} variables')
        for v in vs:
            v.set(self.apply(v), diff)

    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        self.globalize(diff)

class MutableAssignment(Assignment):

    __slots__ = ()

    @abc.abstractmethod
    def update(self, v: variable.Variable, value: Any) -> None:
        raise NotImplementedError()

    def __setitem__(self, v: variable.Variable, value: Any) -> None:
        self.update(v, value)
