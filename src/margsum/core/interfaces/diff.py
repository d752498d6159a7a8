from __future__ import annotations
import abc


class Diff(abc.ABC):
    """One recorded change to a live variable."""

    @property
    @abc.abstractmethod
    def variable(self):
        raise NotImplementedError()

    @abc.abstractmethod
    def undo(self) -> None:
        raise NotImplementedError()

    @abc.abstractmethod
    def redo(self) -> None:
        raise NotImplementedError()

class DiffLog(abc.ABC):

    @abc.abstractmethod
    def append(self, diff: Diff) -> None:
        raise NotImplementedError()
