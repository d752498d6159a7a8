from __future__ import annotations

import torch

from margsum.core.interfaces import assignment as assignment_
from margsum.core.interfaces import factor, variable
from margsum.core.modeling import assignments

"""
Fixed-arity factors. Each holds its neighbors by position and an optional
table of log potentials with one axis per neighbor, in neighbor order.
"""
class TableFactor(factor.Factor):

    def __init__(self, neighbors: tuple[variable.Variable, ...], log_potentials: torch.Tensor | None = None) -> None:
        self._neighbors = neighbors
        if log_potentials is not None:
            size = [len(v.domain) for v in neighbors] # type:ignore neighbors of a table must be discrete
            if list(log_potentials.size()) != size:
                raise ValueError(f"Expected log_potentials size ({log_potentials.size()}) to match neighbor domain sizes ({size})")
        self.log_potentials = log_potentials

    def variables(self) -> tuple[variable.Variable, ...]:
        return self._neighbors

    def current_assignment(self) -> assignment_.Assignment:
        """An assignment holding the neighbors' current live values."""
        return assignments.fixed_arity_assignment(self._neighbors, [v.value for v in self._neighbors])

    def log_potential_value(self, assignment: assignment_.Assignment) -> torch.Tensor:
        if self.log_potentials is None:
            raise ValueError(f"{self} has no log potential table")
        index = tuple(v.domain.index(assignment.apply(v)) for v in self._neighbors) # type:ignore
        return self.log_potentials[index]

    def __repr__(self):
        return f"{type(self).__name__}{self._neighbors}"

class Factor1(TableFactor):

    def __init__(self, v1, log_potentials=None) -> None:
        super().__init__((v1,), log_potentials)

class Factor2(TableFactor):

    def __init__(self, v1, v2, log_potentials=None) -> None:
        super().__init__((v1, v2), log_potentials)

class Factor3(TableFactor):

    def __init__(self, v1, v2, v3, log_potentials=None) -> None:
        super().__init__((v1, v2, v3), log_potentials)

class Factor4(TableFactor):

    def __init__(self, v1, v2, v3, v4, log_potentials=None) -> None:
        super().__init__((v1, v2, v3, v4), log_potentials)
