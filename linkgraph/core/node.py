from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any, Iterator, Optional

from .cell import BorrowCell, Ref, RefMut
from .context import Context
from .iterators import IterEdges, iter_resolved

if TYPE_CHECKING:
    from .edge import Edge

__all__ = [
    "Node",
]

logger = logging.getLogger(__name__)


class Node:
    """
    Graph node carrying a mutable value and the edges it participates in.

    A node owns every edge registered on it (strong references), keeps a weak
    handle to itself so it can hand out strong handles on demand, and a weak
    handle to the context that issued its id.

    Parameters
    ----------
    value : Any
        Payload, reachable through :meth:`get_value` / :meth:`get_value_mut`.
    context : Context
        Context that issues the node id. If the context was created with
        ``auto_cache_nodes=True`` the node is cached on it immediately.

    Raises
    ------
    ValueError
        If ``context`` is not a :class:`Context`.
    """

    def __init__(self, value: Any, context: Context):
        if not isinstance(context, Context):
            raise ValueError(f"context must be a Context, got {type(context).__name__}")
        self._id = context.new_node_id()
        self._value = BorrowCell(value, on_write=context._state.bump)
        self._edges = BorrowCell([])
        self._selfie = weakref.ref(self)
        self._context = weakref.ref(context)
        if context.auto_cache_nodes:
            context.cache_node(self)

    @classmethod
    def new(cls, value: Any, context: Context) -> "Node":
        return cls(value, context)

    @classmethod
    def alpha(cls, value: Any, **context_options) -> tuple["Node", Context]:
        """
        First node of a new graph.

        Parameters
        ----------
        value : Any
            Payload of the node.
        **context_options
            Keyword options for the new :class:`Context`.

        Returns
        -------
        tuple[Node, Context]
            The node and its context. The node only holds the context weakly,
            so keep the returned context alive for as long as it is needed.
        """
        context = Context(**context_options)
        return cls(value, context), context

    def __repr__(self) -> str:
        return f"<Node id={self._id}>"

    # Value

    def get_value(self) -> Ref:
        """Shared (read) guard on the payload."""
        return self._value.borrow()

    def get_value_mut(self) -> RefMut:
        """Exclusive (read/write) guard on the payload."""
        return self._value.borrow_mut()

    @property
    def value(self) -> Any:
        return self._value.get()

    def set_value(self, value: Any) -> Any:
        """Replace the payload; returns the previous one."""
        return self._value.replace(value)

    # Identity

    def get_id(self) -> int:
        return self._id

    @property
    def id(self) -> int:
        return self._id

    def get_self(self) -> Optional["Node"]:
        """Strong handle to this node, or None if it has already been destroyed."""
        return self._selfie()

    def get_context(self) -> Optional[Context]:
        return self._context()

    def cache(self) -> None:
        """Retain this node on its context (no-op if the context is gone)."""
        context = self._context()
        if context is not None:
            context.cache_node(self)

    # Edges

    def add_edge(self, edge: "Edge") -> "Edge":
        """
        Register ``edge`` as owned by this node.

        Parameters
        ----------
        edge : Edge
            Edge to append. Parallel and duplicate registrations are kept.

        Returns
        -------
        Edge
            The same edge, for chaining.

        Raises
        ------
        ValueError
            If ``edge`` is not an :class:`~linkgraph.core.edge.Edge`.
        """
        from .edge import Edge

        if not isinstance(edge, Edge):
            raise ValueError(f"add_edge expects an Edge, got {type(edge).__name__}")
        with self._edges.borrow_mut() as edges:
            edges.value.append(edge)
        context = self._context()
        if context is not None:
            context._state.bump()
        logger.debug("node %d registered edge %d", self._id, edge.get_id())
        return edge

    def len_edges(self) -> int:
        with self._edges.borrow() as edges:
            return len(edges.value)

    def degree(self) -> int:
        return self.len_edges()

    def get_edge(self, index: int) -> Optional["Edge"]:
        """Edge at ``index`` in registration order, or None if out of range."""
        with self._edges.borrow() as edges:
            if 0 <= index < len(edges.value):
                return edges.value[index]
        return None

    def get_edge_by_id(self, edge_id: int) -> Optional["Edge"]:
        """First registered edge whose id is ``edge_id``, or None."""
        with self._edges.borrow() as edges:
            for edge in edges.value:
                if edge.get_id() == edge_id:
                    return edge
        return None

    # Traversal

    def iter_edges(self) -> IterEdges:
        return IterEdges(self)

    def iter_heads(self) -> Iterator["Node"]:
        """Nodes this node points to through its registered edges."""
        node_id = self._id
        return iter_resolved(self.iter_edges(), lambda edge: edge.try_head_node(node_id))

    def iter_tails(self) -> Iterator["Node"]:
        """Nodes pointing to this node through its registered edges."""
        node_id = self._id
        return iter_resolved(self.iter_edges(), lambda edge: edge.try_tail_node(node_id))

    def iter_nodes(self) -> Iterator["Node"]:
        """Neighbours reachable through registered edges in either direction."""
        node_id = self._id
        return iter_resolved(self.iter_edges(), lambda edge: edge.opposite_node(node_id))
