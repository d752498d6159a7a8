from __future__ import annotations
import abc

from margsum.core.interfaces import variable
from margsum.core.modeling import constants


class Factor(abc.ABC):
    """A potential over a small, fixed tuple of neighbor variables.
    Only the neighbors are consumed here, potentials are never evaluated by assignments or summaries.
    """

    @abc.abstractmethod
    def variables(self) -> tuple[variable.Variable, ...]:
        raise NotImplementedError()

    @property
    def arity(self) -> constants.Arity:
        return constants.Arity.of(len(self.variables()))
