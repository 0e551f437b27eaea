from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

from ._state import _State
from .errors import IdExhaustedError

if TYPE_CHECKING:
    import polars as pl

    from ..adapters._proxy import BackendProxy
    from .edge import Edge
    from .matrix import MatrixCache
    from .node import Node

__all__ = [
    "Context",
]

logger = logging.getLogger(__name__)


class Context:
    """
    Identity and retention point for one graph.

    A context issues node and edge identifiers from two independent,
    monotonically increasing counters and, optionally, keeps a strong roster
    of nodes and edges. The roster is what keeps nodes alive when every edge
    that references them does so through a non-owning (weak) end.

    Parameters
    ----------
    auto_cache_nodes : bool, optional
        Cache every node constructed through this context. Off by default;
        callers opt in per entity with :meth:`cache_node` otherwise.
    auto_cache_edges : bool, optional
        Same as ``auto_cache_nodes`` for edges.
    id_limit : int, optional
        Highest identifier either counter may issue. Exceeding it raises
        :class:`~linkgraph.core.errors.IdExhaustedError`.

    Notes
    -----
    - Node and edge id spaces overlap in value but are tracked separately.
    - Counters live on the instance, so independent graphs in one process
      never interfere.

    See Also
    --------
    Node, Edge
    """

    def __init__(
        self,
        *,
        auto_cache_nodes: bool = False,
        auto_cache_edges: bool = False,
        id_limit: int = sys.maxsize,
    ):
        if id_limit < 0:
            raise ValueError(f"id_limit must be non-negative, got {id_limit!r}")
        self.auto_cache_nodes = bool(auto_cache_nodes)
        self.auto_cache_edges = bool(auto_cache_edges)
        self.id_limit = id_limit

        # next id to issue
        self._next_node_id = 0
        self._next_edge_id = 0

        # strong rosters, insertion order
        self._node_roster: list[Node] = []
        self._edge_roster: list[Edge] = []

        self._state = _State()
        self._matrices: Optional[MatrixCache] = None

    def __repr__(self) -> str:
        return (
            f"<Context | nodes issued={self._next_node_id} · edges issued={self._next_edge_id}"
            f" · cached V={len(self._node_roster)} E={len(self._edge_roster)}>"
        )

    # Identity

    def _issue(self, kind: str, issued: int) -> int:
        if issued > self.id_limit:
            logger.error("%s id space exhausted at limit %d", kind, self.id_limit)
            raise IdExhaustedError(f"{kind} id space exhausted (limit {self.id_limit})")
        logger.debug("issued %s id %d", kind, issued)
        return issued

    def new_node_id(self) -> int:
        """Issue the next unused node identifier."""
        node_id = self._issue("node", self._next_node_id)
        self._next_node_id += 1
        return node_id

    def new_edge_id(self) -> int:
        """Issue the next unused edge identifier."""
        edge_id = self._issue("edge", self._next_edge_id)
        self._next_edge_id += 1
        return edge_id

    def last_node_id(self) -> Optional[int]:
        """Most recently issued node id, or None if none was issued yet."""
        return self._next_node_id - 1 if self._next_node_id else None

    def last_edge_id(self) -> Optional[int]:
        """Most recently issued edge id, or None if none was issued yet."""
        return self._next_edge_id - 1 if self._next_edge_id else None

    # Retention

    def cache_node(self, node: "Node") -> None:
        """
        Retain a strong handle to ``node`` for the lifetime of this context.

        Parameters
        ----------
        node : Node
            Node to retain. Caching it twice only duplicates the roster entry.
        """
        self._node_roster.append(node)
        self._state.bump()
        logger.debug("cached node %d (roster size %d)", node.get_id(), len(self._node_roster))

    def cache_edge(self, edge: "Edge") -> None:
        """
        Retain a strong handle to ``edge`` for the lifetime of this context.

        Parameters
        ----------
        edge : Edge
            Edge to retain. Caching it twice only duplicates the roster entry.
        """
        self._edge_roster.append(edge)
        self._state.bump()
        logger.debug("cached edge %d (roster size %d)", edge.get_id(), len(self._edge_roster))

    def get_node_cache(self) -> tuple["Node", ...]:
        """Snapshot of every cached node in insertion order."""
        return tuple(self._node_roster)

    def get_edge_cache(self) -> tuple["Edge", ...]:
        """Snapshot of every cached edge in insertion order."""
        return tuple(self._edge_roster)

    def get_cached_node(self, node_id: int) -> Optional["Node"]:
        for node in self._node_roster:
            if node.get_id() == node_id:
                return node
        return None

    def get_cached_edge(self, edge_id: int) -> Optional["Edge"]:
        for edge in self._edge_roster:
            if edge.get_id() == edge_id:
                return edge
        return None

    def number_of_nodes(self) -> int:
        """Roster size (duplicates included)."""
        return len(self._node_roster)

    def number_of_edges(self) -> int:
        """Roster size (duplicates included)."""
        return len(self._edge_roster)

    def clear_cache(self) -> None:
        """
        Release both rosters.

        Notes
        -----
        Counters are not reset: ids issued so far are never reissued.
        Entities held only by the rosters become unreachable.
        """
        self._node_roster.clear()
        self._edge_roster.clear()
        self._state.bump()

    # Views

    def nodes_view(self) -> "pl.DataFrame":
        """Polars table of cached nodes (``node_id``, ``value``, ``degree``)."""
        from ..adapters.dataframe_adapter import nodes_dataframe

        return nodes_dataframe(self)

    def edges_view(self) -> "pl.DataFrame":
        """Polars table of cached edges (``edge_id``, ``edge_type``, ``source``, ``target``, ``weight``)."""
        from ..adapters.dataframe_adapter import edges_dataframe

        return edges_dataframe(self)

    @property
    def matrices(self) -> "MatrixCache":
        """Versioned sparse incidence/adjacency matrices of the cached graph."""
        if self._matrices is None:
            from .matrix import MatrixCache

            self._matrices = MatrixCache(self)
        return self._matrices

    def export(self, fmt: str = "networkx", **kwargs) -> Any:
        """
        Export the cached graph using the specified adapter.

        Parameters
        ----------
        fmt : str
            Name of the adapter to use, e.g. ``"networkx"``.
        **kwargs
            Passed to the adapter.

        Returns
        -------
        Any
            Library-specific graph object.
        """
        from ..adapters import manager as _backend_manager

        adapter = _backend_manager.get_adapter(fmt)
        return adapter.export(self, **kwargs)

    @property
    def nx(self) -> "BackendProxy":
        """On-demand accessor for NetworkX algorithms.

        Examples
        --------
        >>> ctx.nx.number_weakly_connected_components()
        """
        from ..adapters import manager as _backend_manager

        return _backend_manager.get_proxy("networkx", self)
