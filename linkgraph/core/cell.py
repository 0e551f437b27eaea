"""Scoped shared/exclusive access to a mutable slot.

A :class:`BorrowCell` hands out any number of shared :class:`Ref` guards or
exactly one exclusive :class:`RefMut` guard. Conflicts are detected when a guard
is acquired and raise :class:`~linkgraph.core.errors.BorrowError`.

Guards acquire on construction and release on ``__exit__``, on an explicit
:meth:`release`, or when they are garbage collected::

    with node.get_value_mut() as slot:
        slot.value = slot.value + 1

An optional ``on_write`` callback runs each time an exclusive guard is
released, including the momentary one taken by :meth:`BorrowCell.replace`.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .errors import BorrowError

logger = logging.getLogger(__name__)

# borrow counter: > 0 shared readers, -1 one writer
_EXCLUSIVE = -1


class BorrowCell:
    """Mutable slot guarded by a shared/exclusive borrow counter."""

    def __init__(self, value: Any = None, on_write: Optional[Callable[[], Any]] = None):
        self._value = value
        self._borrows = 0
        self._on_write = on_write

    def __repr__(self) -> str:
        return f"<BorrowCell {self.borrow_state}>"

    @property
    def borrow_state(self) -> str:
        if self._borrows == _EXCLUSIVE:
            return "exclusive"
        return "shared" if self._borrows else "unborrowed"

    def borrow(self) -> "Ref":
        """Acquire shared (read) access."""
        return Ref(self)

    def borrow_mut(self) -> "RefMut":
        """Acquire exclusive (read/write) access."""
        return RefMut(self)

    def get(self) -> Any:
        """Read the slot through a momentary shared borrow."""
        with self.borrow() as ref:
            return ref.value

    def replace(self, value: Any) -> Any:
        """Swap the slot content through a momentary exclusive borrow; return the old value."""
        with self.borrow_mut() as ref:
            old = ref.value
            ref.value = value
        return old

    # borrow bookkeeping

    def _acquire_shared(self) -> None:
        if self._borrows == _EXCLUSIVE:
            logger.error("shared borrow requested while an exclusive borrow is outstanding")
            raise BorrowError("already mutably borrowed")
        self._borrows += 1

    def _acquire_exclusive(self) -> None:
        if self._borrows != 0:
            logger.error("exclusive borrow requested while cell is %s", self.borrow_state)
            raise BorrowError(f"already borrowed ({self.borrow_state})")
        self._borrows = _EXCLUSIVE

    def _release_shared(self) -> None:
        self._borrows -= 1

    def _release_exclusive(self) -> None:
        self._borrows = 0
        if self._on_write is not None:
            self._on_write()


class Ref:
    """Shared guard on a :class:`BorrowCell`."""

    def __init__(self, cell: BorrowCell):
        self._cell = None
        cell._acquire_shared()
        self._cell = cell

    def _live_cell(self) -> BorrowCell:
        if self._cell is None:
            raise BorrowError("guard used after release")
        return self._cell

    @property
    def value(self) -> Any:
        return self._live_cell()._value

    @property
    def released(self) -> bool:
        return self._cell is None

    def release(self) -> None:
        if self._cell is not None:
            self._cell._release_shared()
            self._cell = None

    def __enter__(self) -> "Ref":
        self._live_cell()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False

    def __del__(self):
        self.release()

    def __repr__(self) -> str:
        if self._cell is None:
            return "<Ref released>"
        return f"<Ref {self._cell._value!r}>"


class RefMut(Ref):
    """Exclusive guard on a :class:`BorrowCell`; ``value`` is assignable."""

    def __init__(self, cell: BorrowCell):
        self._cell = None
        cell._acquire_exclusive()
        self._cell = cell

    @property
    def value(self) -> Any:
        return self._live_cell()._value

    @value.setter
    def value(self, new: Any) -> None:
        self._live_cell()._value = new

    def release(self) -> None:
        if self._cell is not None:
            self._cell._release_exclusive()
            self._cell = None

    def __enter__(self) -> "RefMut":
        self._live_cell()
        return self

    def __repr__(self) -> str:
        if self._cell is None:
            return "<RefMut released>"
        return f"<RefMut {self._cell._value!r}>"
