from __future__ import annotations
import logging
from typing import Iterable, Sequence

import torch

from margsum.core import errors
from margsum.core.interfaces import assignment as assignment_
from margsum.core.interfaces import diff as diff_
from margsum.core.interfaces import factor, summary, variable
from margsum.core.modeling import constants, marginals as marginals_


class Summary1(summary.Summary):
    """Marginals over single variables, at most one per variable."""

    def __init__(self, factors: Sequence[factor.Factor] | None = None) -> None:
        self._marginals: dict[variable.Variable, summary.Marginal] = {}
        self._factors = factors

    def marginals(self) -> list[summary.Marginal]:
        return list(self._marginals.values())

    def variables(self) -> list[variable.Variable]:
        return list(self._marginals.keys())

    def marginal(self, *variables: variable.Variable) -> summary.Marginal | None:
        if len(variables) != 1:
            return None
        return self._marginals.get(variables[0])

    def factor_marginal(self, f: factor.Factor) -> summary.Marginal | None:
        if len(f.variables()) == 1:
            return self._marginals.get(f.variables()[0])
        return None

    def add(self, m: summary.Marginal) -> None:
        vars = m.variables()
        if len(vars) != 1:
            raise ValueError(f"{type(self).__name__} only holds marginals of one variable, got {len(vars)}")
        if vars[0] in self._marginals:
            raise errors.DuplicateMarginal(vars[0])
        self._marginals[vars[0]] = m

    def __iadd__(self, m: summary.Marginal) -> Summary1:
        self.add(m)
        return self

    def __len__(self):
        return len(self._marginals)

    def factors(self) -> Sequence[factor.Factor] | None:
        return self._factors

class SingletonSummary(summary.Summary):
    """A summary containing only one marginal."""

    def __init__(self, marginal: summary.Marginal) -> None:
        self._marginal = marginal

    def marginals(self) -> list[summary.Marginal]:
        return [self._marginal]

    def marginal(self, *variables: variable.Variable) -> summary.Marginal | None:
        # compared as sets, so the order of the query doesn't matter
        query = {id(v) for v in variables}
        own = {id(v) for v in self._marginal.variables()}
        if len(variables) == len(self._marginal.variables()) and query == own:
            return self._marginal
        return None

    def factor_marginal(self, f: factor.Factor) -> summary.Marginal | None:
        return None

class AssignmentSummary(summary.Summary):
    """All probability on one assignment of the variables."""

    def __init__(self, assignment: assignment_.Assignment) -> None:
        self.assignment = assignment

    def marginals(self) -> list[summary.Marginal]:
        return [marginals_.PointMarginal(v, self.assignment.apply(v)) for v in self.assignment.variables()]

    def marginal(self, *variables: variable.Variable) -> summary.Marginal | None:
        return None

    def factor_marginal(self, f: factor.Factor) -> summary.Marginal | None:
        return None

    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        self.assignment.globalize(diff)

class DiscreteSummary1(Summary1, summary.IncrementableSummary):
    """A separate distribution over the domain of each of its discrete variables.

    Joint marginals of two variables are the outer product of their own distributions,
    which is only exact if the two are independent.
    """

    def __init__(self, variables: Iterable[variable.DiscreteVariable] = (), factors: Sequence[factor.Factor] | None = None) -> None:
        super().__init__(factors)
        for v in variables:
            self.add_variable(v)

    def add_variable(self, v: variable.DiscreteVariable) -> None:
        """Register `v` with a marginal whose proportions are not yet known."""
        self.add(marginals_.DiscreteMarginal1(v))

    def add(self, m: marginals_.DiscreteMarginal1) -> None: # type:ignore
        if not isinstance(m, marginals_.DiscreteMarginal1):
            raise ValueError(f"DiscreteSummary1 holds DiscreteMarginal1, got {type(m).__name__}")
        existing = self._marginals.get(m.variable)
        if existing is not None:
            # a placeholder may be filled in once, anything else is a second marginal
            if existing is m or existing.is_initialized or not m.is_initialized: # type:ignore
                raise errors.DuplicateMarginal(m.variable)
            logging.debug(f'replacing placeholder marginal of {m.variable}')
        self._marginals[m.variable] = m

    def set_proportions(self, v: variable.DiscreteVariable, proportions: torch.Tensor | Sequence[float]) -> None:
        m = self._marginals.get(v)
        if m is None:
            raise ValueError(f"Variable {v} is not in this summary")
        m.set_proportions(proportions) # type:ignore

    def marginal(self, *variables: variable.Variable) -> marginals_.DiscreteMarginal1 | marginals_.DiscreteMarginal2 | None: # type:ignore
        if len(variables) == 1:
            return self._marginals.get(variables[0]) # type:ignore
        elif len(variables) == 2:
            v, w = variables
            # each variable is checked on its own, they need not share a type
            if v.kind is not constants.VariableKind.DISCRETE or w.kind is not constants.VariableKind.DISCRETE:
                return None
            mv, mw = self._marginals.get(v), self._marginals.get(w)
            if mv is None or mw is None or mv.proportions is None or mw.proportions is None: # type:ignore
                return None
            joint = torch.outer(mv.proportions, mw.proportions) # type:ignore
            return marginals_.DiscreteMarginal2(v, w, joint) # type:ignore
        return None

    def factor_marginal(self, f: factor.Factor) -> summary.Marginal | None:
        if len(f.variables()) in (1, 2):
            return self.marginal(*f.variables())
        return None

    def set_to_maximize(self, diff: diff_.DiffLog | None = None) -> None:
        ms = list(self._marginals.values())
        for m in ms:
            if not m.is_initialized: # type:ignore
                raise ValueError(f"Marginal of {m.variable} has no proportions yet") # type:ignore
            if not isinstance(m.variable, variable.MutableDiscreteVariable): # type:ignore
                raise errors.UnsetVariableClass(m.variable) # type:ignore
        for m in ms:
            m.set_to_maximize(diff)

    def increment_current_values(self, weight: float) -> None:
        for m in self._marginals.values():
            m.increment_current_value(weight) # type:ignore
