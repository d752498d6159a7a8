from __future__ import annotations
import itertools
import logging
import math
from typing import Any, Collection, Iterator, Sequence

import tqdm

from margsum.core import errors
from margsum.core.interfaces import assignment, factor, variable
from margsum.core.modeling import assignments, constants


class AssignmentIterator:
    """Iterates over the joint assignments to a tuple of variables (at most four).

    Variables in `varying` run over their whole discrete domain, every other variable
    is held at its current value. Assignments come out in row-major order: the first
    variable changes slowest and the last fastest, the same order as flattening a
    table with one axis per variable. The iterator is single pass, build a new one
    to start over.
    """

    def __init__(self, variables: Sequence[variable.Variable], varying: Collection[variable.Variable]) -> None:
        self.arity = constants.Arity.of(len(variables))
        self.variables = tuple(variables)
        varying_ids = {id(v) for v in varying}
        self._values = [self._values_of(v, id(v) in varying_ids) for v in self.variables]
        self.total = math.prod(len(values) for values in self._values)
        self._assignment_type = assignments.FIXED_ARITY_ASSIGNMENTS[self.arity]
        self._product = itertools.product(*self._values)
        logging.debug(f'enumerating {self.total} assignments over {self.variables}')

    @staticmethod
    def _values_of(v: variable.Variable, is_varying: bool) -> Sequence[Any]:
        if not is_varying:
            return (v.value,)
        if v.kind is not constants.VariableKind.DISCRETE:
            raise errors.UnsupportedOperation(f"Only discrete variables can vary, got {v} of kind {v.kind}")
        return list(v.domain) # type:ignore

    @staticmethod
    def from_factor(f: factor.Factor, varying: Collection[variable.Variable]) -> AssignmentIterator:
        return AssignmentIterator(f.variables(), varying)

    def __iter__(self) -> AssignmentIterator:
        return self

    def __next__(self) -> assignment.MutableAssignment:
        values = next(self._product)
        return self._assignment_type(*itertools.chain.from_iterable(zip(self.variables, values)))

def assignments_of(f: factor.Factor, varying: Collection[variable.Variable]) -> AssignmentIterator:
    return AssignmentIterator.from_factor(f, varying)

def variable_assignments(variables: Sequence[variable.Variable]) -> AssignmentIterator:
    """Every joint assignment of `variables`, all of them varying."""
    return AssignmentIterator(variables, variables)

def enumerate_assignments(f: factor.Factor, varying: Collection[variable.Variable], progress: bool = False) -> Iterator[assignment.MutableAssignment]:
    iterator = AssignmentIterator.from_factor(f, varying)
    if progress:
        return iter(tqdm.tqdm(iterator, total=iterator.total, leave=False))
    return iterator
