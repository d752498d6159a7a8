from __future__ import annotations
from typing import Any, Callable

from margsum.core.interfaces import diff


class SetValueDiff(diff.Diff):
    """Records that `variable` went from `old` to `new`; `assign` writes a value without logging."""

    def __init__(self, variable, old: Any, new: Any, assign: Callable[[Any], None]) -> None:
        self._variable = variable
        self.old = old
        self.new = new
        self._assign = assign

    @property
    def variable(self):
        return self._variable

    def undo(self) -> None:
        self._assign(self.old)

    def redo(self) -> None:
        self._assign(self.new)

    def __repr__(self):
        return f"SetValueDiff({self._variable}, {self.old!r} -> {self.new!r})"

class DiffList(list, diff.DiffLog):
    """An ordered log of changes that can be rolled back and replayed."""

    def undo(self) -> None:
        for d in reversed(self):
            d.undo()

    def redo(self) -> None:
        for d in self:
            d.redo()
