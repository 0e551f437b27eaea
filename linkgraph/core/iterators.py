from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Optional

if TYPE_CHECKING:
    from .edge import Edge
    from .node import Node

__all__ = [
    "IterEdges",
    "iter_resolved",
]


class IterEdges:
    """
    Lazy iterator over the edges registered on a node.

    The iterator tracks a position, not a snapshot: edges appended while it is
    running become visible. The first missing position ends it for good, even
    if edges are appended afterwards.
    """

    def __init__(self, node: "Node"):
        self._node = node
        self._position = 0
        self._finished = False

    def __iter__(self) -> "IterEdges":
        return self

    def __next__(self) -> "Edge":
        if self._finished:
            raise StopIteration
        edge = self._node.get_edge(self._position)
        if edge is None:
            self._finished = True
            raise StopIteration
        self._position += 1
        return edge

    def __length_hint__(self) -> int:
        if self._finished:
            return 0
        return max(self._node.len_edges() - self._position, 0)

    @property
    def position(self) -> int:
        return self._position

    @property
    def finished(self) -> bool:
        return self._finished


def iter_resolved(
    edges: Iterable["Edge"], resolve: Callable[["Edge"], Optional["Node"]]
) -> Iterator["Node"]:
    # edges that do not resolve (wrong position, dead weak end) are skipped
    for edge in edges:
        node = resolve(edge)
        if node is not None:
            yield node
