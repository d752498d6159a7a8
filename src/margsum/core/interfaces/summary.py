from __future__ import annotations
import abc
from typing import Iterable, Sequence

import torch

from margsum.core import errors
from margsum.core.interfaces import diff as diff_
from margsum.core.interfaces import factor as factor_
from margsum.core.interfaces import variable


class Marginal(abc.ABC):
    """A distribution (or point value) over an ordered, non-empty tuple of variables."""

    @abc.abstractmethod
    def variables(self) -> tuple[variable.Variable, ...]:
        raise NotImplementedError()

    @abc.abstractmethod
    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        """Set the variables to the value(s) with the highest probability."""
        raise NotImplementedError()

class DiscreteMarginal(Marginal):

    @property
    @abc.abstractmethod
    def proportions(self) -> torch.Tensor | None:
        raise NotImplementedError()

class Summary(abc.ABC):
    """The result of inference: a collection of Marginal objects."""

    @abc.abstractmethod
    def marginals(self) -> Iterable[Marginal]:
        raise NotImplementedError()

    @abc.abstractmethod
    def marginal(self, *variables: variable.Variable) -> Marginal | None:
        """The marginal over exactly these variables, or None if this summary has none."""
        raise NotImplementedError()

    def factor_marginal(self, factor: factor_.Factor) -> Marginal | None:
        """The marginal that touches the largest subset of the factor's neighbors, or None."""
        neighbors = {id(v) for v in factor.variables()}
        best, best_coverage = None, 0
        for m in self.marginals():
            ids = {id(v) for v in m.variables()}
            if ids <= neighbors and len(ids) > best_coverage:
                best, best_coverage = m, len(ids)
        return best

    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        # order matters if marginals overlap with each other
        for m in self.marginals():
            m.set_to_maximize(diff)

    def log_z(self) -> float:
        raise errors.UnsupportedOperation(f"Summary class {type(self).__name__} does not provide log_z")

    def factors(self) -> Sequence[factor_.Factor] | None:
        """The model factors used to compute this summary, if they were recorded."""
        return None

class IncrementableSummary(Summary):
    """A summary that gathers weighted samples into its marginals."""

    @abc.abstractmethod
    def increment_current_values(self, weight: float) -> None:
        raise NotImplementedError()
