from __future__ import annotations
from typing import Any, Sequence

import torch

from margsum.core import errors
from margsum.core.interfaces import diff as diff_
from margsum.core.interfaces import summary, variable
from margsum.core.modeling import constants


def _as_tensor(proportions: torch.Tensor | Sequence[float]) -> torch.Tensor:
    if isinstance(proportions, torch.Tensor):
        return proportions.to(torch.float)
    return torch.tensor(proportions, dtype=torch.float)

def _check_proportions(proportions: torch.Tensor, size: list[int]) -> None:
    if list(proportions.size()) != size:
        raise ValueError(f"Expected proportions size ({proportions.size()}) to match domain sizes ({size})")
    if (proportions < 0).any():
        raise ValueError(f"Proportions must be non-negative: {proportions}")
    if proportions.sum() <= 0:
        raise ValueError(f"Proportions must have positive total mass: {proportions}")

def _check_settable(v: variable.Variable) -> None:
    if not isinstance(v, variable.MutableDiscreteVariable):
        raise errors.UnsetVariableClass(v)

def _set_int(v: variable.Variable, i: int, diff: diff_.DiffLog | None) -> None:
    _check_settable(v)
    v.set_int(i, diff) # type:ignore

class PointMarginal(summary.Marginal):
    """All probability on a single value of a single variable."""

    def __init__(self, v: variable.Variable, value: Any) -> None:
        self._1 = v
        self.value = value

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self._1,)

    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        if not isinstance(self._1, variable.MutableVariable):
            raise errors.UnsetVariableClass(self._1)
        self._1.set(self.value, diff)

    def __repr__(self):
        return f"PointMarginal({self._1}={self.value!r})"

class DiscreteMarginal1(summary.DiscreteMarginal):
    """A distribution over the domain of one discrete variable.

    Internally keeps unnormalized masses so that weighted counts can be accumulated;
    `proportions` is the normalized view. Created without proportions, the marginal
    is a placeholder until proportions are supplied or counts incremented.
    """

    def __init__(self, v: variable.DiscreteVariable, proportions: torch.Tensor | Sequence[float] | None = None) -> None:
        self._1 = v
        self._masses = None
        if proportions is not None:
            self.set_proportions(proportions)

    @property
    def variable(self) -> variable.DiscreteVariable:
        return self._1

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self._1,)

    @property
    def is_initialized(self) -> bool:
        return self._masses is not None

    @property
    def masses(self) -> torch.Tensor | None:
        return self._masses

    @property
    def proportions(self) -> torch.Tensor | None:
        if self._masses is None:
            return None
        return self._masses / self._masses.sum()

    def set_proportions(self, proportions: torch.Tensor | Sequence[float]) -> None:
        proportions = _as_tensor(proportions)
        if constants.DEBUG_MODE:
            _check_proportions(proportions, [len(self._1.domain)])
        self._masses = proportions.clone()

    def increment_current_value(self, weight: float) -> None:
        if self._masses is None:
            self._masses = torch.zeros(len(self._1.domain))
        self._masses[self._1.int_value] += weight

    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        if self._masses is None:
            raise ValueError(f"Marginal of {self._1} has no proportions yet")
        _set_int(self._1, int(self._masses.argmax().item()), diff)

    def __repr__(self):
        return f"DiscreteMarginal1({self._1}, {self.proportions})"

class DiscreteMarginal2(summary.DiscreteMarginal):
    """A distribution over the joint domain of two discrete variables, axis i for variable i."""

    def __init__(self, v1: variable.DiscreteVariable, v2: variable.DiscreteVariable, proportions: torch.Tensor | Sequence[Sequence[float]]) -> None:
        self._1 = v1
        self._2 = v2
        proportions = _as_tensor(proportions)
        if constants.DEBUG_MODE:
            _check_proportions(proportions, [len(v1.domain), len(v2.domain)])
        self._proportions = proportions

    def variables(self) -> tuple[variable.Variable, ...]:
        return (self._1, self._2)

    @property
    def proportions(self) -> torch.Tensor:
        return self._proportions

    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        _check_settable(self._1)
        _check_settable(self._2)
        i, j = divmod(int(self._proportions.argmax().item()), len(self._2.domain))
        _set_int(self._1, i, diff)
        _set_int(self._2, j, diff)

    def __repr__(self):
        return f"DiscreteMarginal2({self._1}, {self._2}, {self._proportions})"
