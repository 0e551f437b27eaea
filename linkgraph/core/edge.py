"""
Edges in three shapes with an asymmetric ownership policy per end.

==========  ==================  ==================
shape       alpha end           omega end
==========  ==================  ==================
ARROW       non-owning (tail)   owning (head)
LINK        non-owning (left)   non-owning (right)
LOOP        absent              non-owning (node)
==========  ==================  ==================

At most one end of an edge keeps its node alive, so two nodes sharing several
edges never form an ownership cycle through them. Nodes reached only through
non-owning ends must be kept alive elsewhere, typically by the context roster.

Edges are never registered on their nodes by the constructors; register them
with :meth:`Node.add_edge` on every node that should discover them.
"""
from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Optional

from .cell import BorrowCell, Ref, RefMut
from .context import Context
from .node import Node
from .structure import EdgePos, EdgeType

__all__ = [
    "Edge",
    "WeightedEdge",
]

logger = logging.getLogger(__name__)


class _Absent:
    owning = False

    def resolve(self) -> Optional[Node]:
        return None


class _NonOwning:
    owning = False

    def __init__(self, node: Node):
        self._ref = weakref.ref(node)

    def resolve(self) -> Optional[Node]:
        return self._ref()


class _Owning:
    owning = True

    def __init__(self, node: Node):
        self._node = node

    def resolve(self) -> Optional[Node]:
        return self._node


_ABSENT = _Absent()

# shape -> (number of nodes, builder of (alpha, omega))
_END_POLICY = {
    EdgeType.ARROW: (2, lambda tail, head: (_NonOwning(tail), _Owning(head))),
    EdgeType.LINK: (2, lambda left, right: (_NonOwning(left), _NonOwning(right))),
    EdgeType.LOOP: (1, lambda node: (_ABSENT, _NonOwning(node))),
}


def _check_nodes(nodes) -> None:
    for node in nodes:
        if not isinstance(node, Node):
            raise ValueError(f"edge endpoints must be Node, got {type(node).__name__}")


def _matches(node: Optional[Node], node_id: int) -> bool:
    return node is not None and node.get_id() == node_id


class Edge:
    """
    Edge between one or two nodes; its shape is fixed at construction.

    Use the :meth:`new_arrow`, :meth:`new_link` and :meth:`new_loop`
    constructors (or their ``try_*`` variants) rather than calling the class.

    Parameters
    ----------
    edge_type : EdgeType or str
        Shape of the edge.
    nodes : tuple[Node, ...]
        ``(tail, head)`` for arrows, ``(left, right)`` for links, ``(node,)``
        for loops.
    context : Context
        Context that issues the edge id. If it was created with
        ``auto_cache_edges=True`` the edge is cached on it immediately.

    Raises
    ------
    ValueError
        If the number or type of nodes does not fit the shape, or ``context``
        is not a :class:`Context`.
    """

    def __init__(self, edge_type, nodes: tuple, context: Context):
        edge_type = EdgeType(edge_type)
        arity, build_ends = _END_POLICY[edge_type]
        if len(nodes) != arity:
            raise ValueError(f"{edge_type.value} edge needs {arity} node(s), got {len(nodes)}")
        _check_nodes(nodes)
        if not isinstance(context, Context):
            raise ValueError(f"context must be a Context, got {type(context).__name__}")

        self._id = context.new_edge_id()
        self._edge_type = edge_type
        self._alpha, self._omega = build_ends(*nodes)
        self._selfie = weakref.ref(self)
        self._context = weakref.ref(context)
        logger.debug(
            "created %s edge %d over nodes %s",
            edge_type.value,
            self._id,
            [node.get_id() for node in nodes],
        )
        if context.auto_cache_edges:
            context.cache_edge(self)

    # Construction

    @classmethod
    def new_arrow(cls, tail: Node, head: Node, context: Context, **kwargs) -> "Edge":
        """Directed edge: keeps ``head`` alive, observes ``tail`` weakly."""
        return cls(EdgeType.ARROW, (tail, head), context, **kwargs)

    @classmethod
    def new_link(cls, left: Node, right: Node, context: Context, **kwargs) -> "Edge":
        """Undirected edge: observes both ends weakly."""
        return cls(EdgeType.LINK, (left, right), context, **kwargs)

    @classmethod
    def new_loop(cls, node: Node, context: Context, **kwargs) -> "Edge":
        """Self edge: observes ``node`` weakly."""
        return cls(EdgeType.LOOP, (node,), context, **kwargs)

    @classmethod
    def try_arrow(cls, tail: Node, head: Node, context: Context, **kwargs) -> Optional["Edge"]:
        """Like :meth:`new_arrow`, but None if an end belongs to another context."""
        _check_nodes((tail, head))
        if tail.get_context() is context and head.get_context() is context:
            return cls.new_arrow(tail, head, context, **kwargs)
        return None

    @classmethod
    def try_link(cls, left: Node, right: Node, context: Context, **kwargs) -> Optional["Edge"]:
        """Like :meth:`new_link`, but None if an end belongs to another context."""
        _check_nodes((left, right))
        if left.get_context() is context and right.get_context() is context:
            return cls.new_link(left, right, context, **kwargs)
        return None

    @classmethod
    def try_loop(cls, node: Node, context: Context, **kwargs) -> Optional["Edge"]:
        """Like :meth:`new_loop`, but None if ``node`` belongs to another context."""
        _check_nodes((node,))
        if node.get_context() is context:
            return cls.new_loop(node, context, **kwargs)
        return None

    def __repr__(self) -> str:
        ends = "->" if self._edge_type is EdgeType.ARROW else "--"
        if self._edge_type is EdgeType.LOOP:
            node = self._omega.resolve()
            label = "?" if node is None else node.get_id()
            return f"<{type(self).__name__} loop id={self._id} {label}>"
        alpha, omega = self._alpha.resolve(), self._omega.resolve()
        a = "?" if alpha is None else alpha.get_id()
        o = "?" if omega is None else omega.get_id()
        return f"<{type(self).__name__} {self._edge_type.value} id={self._id} {a}{ends}{o}>"

    # Identity

    def get_id(self) -> int:
        return self._id

    @property
    def id(self) -> int:
        return self._id

    def get_self(self) -> Optional["Edge"]:
        return self._selfie()

    def get_edge_type(self) -> EdgeType:
        return self._edge_type

    @property
    def edge_type(self) -> EdgeType:
        return self._edge_type

    def get_context(self) -> Optional[Context]:
        return self._context()

    def cache(self) -> None:
        """Retain this edge on its context (no-op if the context is gone)."""
        context = self._context()
        if context is not None:
            context.cache_edge(self)

    # Adjacency queries

    def try_head_node(self, node_id: int) -> Optional[Node]:
        """
        Node this edge leads to from ``node_id``.

        Parameters
        ----------
        node_id : int
            Id of the node the query is made from.

        Returns
        -------
        Node or None
            Arrow: the head if ``node_id`` is the tail. Link: the opposite end
            if ``node_id`` is either end. Loop: the node itself if it matches.
            None otherwise, or when the end cannot be resolved any more.
        """
        if self._edge_type is EdgeType.ARROW:
            if _matches(self._alpha.resolve(), node_id):
                return self._omega.resolve()
        elif self._edge_type is EdgeType.LINK:
            return self._opposite_link_end(node_id)
        else:
            node = self._omega.resolve()
            if _matches(node, node_id):
                return node
        return None

    def try_tail_node(self, node_id: int) -> Optional[Node]:
        """
        Node this edge comes from when it leads to ``node_id``.

        Mirror of :meth:`try_head_node`: for an arrow the tail is returned when
        ``node_id`` is the head; links and loops behave exactly as in
        :meth:`try_head_node`.
        """
        if self._edge_type is EdgeType.ARROW:
            if _matches(self._omega.resolve(), node_id):
                return self._alpha.resolve()
        elif self._edge_type is EdgeType.LINK:
            return self._opposite_link_end(node_id)
        else:
            node = self._omega.resolve()
            if _matches(node, node_id):
                return node
        return None

    def _opposite_link_end(self, node_id: int) -> Optional[Node]:
        left, right = self._alpha.resolve(), self._omega.resolve()
        if _matches(left, node_id):
            return right
        if _matches(right, node_id):
            return left
        return None

    def opposite_node(self, node_id: int) -> Optional[Node]:
        """Neighbour of ``node_id`` through this edge, whichever direction it runs."""
        node = self.try_head_node(node_id)
        if node is None:
            node = self.try_tail_node(node_id)
        return node

    def edge_end(self, node_id: int) -> EdgePos:
        """Position of ``node_id`` inside this edge."""
        if self._edge_type is EdgeType.ARROW:
            if _matches(self._alpha.resolve(), node_id):
                return EdgePos.TAIL
            if _matches(self._omega.resolve(), node_id):
                return EdgePos.HEAD
        elif self._edge_type is EdgeType.LINK:
            if _matches(self._alpha.resolve(), node_id) or _matches(self._omega.resolve(), node_id):
                return EdgePos.LINK
        elif _matches(self._omega.resolve(), node_id):
            return EdgePos.LOOP
        return EdgePos.NONE

    def is_owning(self, node_id: int) -> bool:
        """True if this edge keeps node ``node_id`` alive."""
        for end in (self._alpha, self._omega):
            if end.owning and _matches(end.resolve(), node_id):
                return True
        return False

    def nodes(self) -> tuple[Node, ...]:
        """Endpoints that still resolve, alpha end first."""
        return tuple(n for n in (self._alpha.resolve(), self._omega.resolve()) if n is not None)

    # Shape specific accessors; None for any other shape

    def head_node(self) -> Optional[Node]:
        if self._edge_type is EdgeType.ARROW:
            return self._omega.resolve()
        return None

    def tail_node(self) -> Optional[Node]:
        if self._edge_type is EdgeType.ARROW:
            return self._alpha.resolve()
        return None

    def left_node(self) -> Optional[Node]:
        if self._edge_type is EdgeType.LINK:
            return self._alpha.resolve()
        return None

    def right_node(self) -> Optional[Node]:
        if self._edge_type is EdgeType.LINK:
            return self._omega.resolve()
        return None

    def loop_node(self) -> Optional[Node]:
        if self._edge_type is EdgeType.LOOP:
            return self._omega.resolve()
        return None


_UNSET = object()


class WeightedEdge(Edge):
    """
    Edge carrying a mutable weight.

    Parameters
    ----------
    weight : Any, optional
        Initial weight. When omitted, ``weight_factory()`` is used.
    weight_factory : callable, optional
        Zero-argument factory for the default weight (``float`` -> ``0.0``).

    Examples
    --------
    >>> e = WeightedEdge.new_arrow(a, b, ctx, weight=2.5)
    >>> with e.get_weight_mut() as w:
    ...     w.value *= 2
    """

    def __init__(
        self,
        edge_type,
        nodes: tuple,
        context: Context,
        weight: Any = _UNSET,
        weight_factory: Callable[[], Any] = float,
    ):
        super().__init__(edge_type, nodes, context)
        self._weight = BorrowCell(
            weight_factory() if weight is _UNSET else weight,
            on_write=context._state.bump,
        )

    def get_weight(self) -> Ref:
        """Shared (read) guard on the weight."""
        return self._weight.borrow()

    def get_weight_mut(self) -> RefMut:
        """Exclusive (read/write) guard on the weight."""
        return self._weight.borrow_mut()

    @property
    def weight(self) -> Any:
        return self._weight.get()

    def set_weight(self, weight: Any) -> Any:
        """Replace the weight; returns the previous one."""
        return self._weight.replace(weight)
