from __future__ import annotations

import logging
import numbers
import weakref
from typing import TYPE_CHECKING

import numpy as np
import scipy.sparse as sp

from ..utils.validation import unique_edges, unique_nodes
from .edge import WeightedEdge
from .structure import EdgeType

if TYPE_CHECKING:
    from .context import Context

__all__ = [
    "MatrixCache",
]

logger = logging.getLogger(__name__)


def _numeric_weight(edge) -> float:
    if isinstance(edge, WeightedEdge):
        w = edge.weight
        if isinstance(w, numbers.Real) and not isinstance(w, bool):
            return float(w)
    return 1.0


class MatrixCache:
    """Sparse matrix views of a context's cached graph.

    Rows follow the node roster, columns the edge roster (first occurrence of
    each id). Every matrix is rebuilt lazily once the context version moves.

    Incidence encodes orientation: -w on the tail and +w on the head of an
    arrow, +w on both ends of a link, +w on the node of a loop. An arrow whose
    tail is its head is recorded like a loop. ``w`` is the edge weight when
    numeric, 1.0 otherwise.

    Roster changes, edge registration and writes to node values or edge
    weights move the version. A non-cached node that disappears behind a weak
    end is picked up after :meth:`invalidate`.
    """

    def __init__(self, context: "Context"):
        self._ctx_ref = weakref.ref(context)
        self._node_index: dict[int, int] = {}
        self._edge_index: dict[int, int] = {}
        self._incidence = None
        self._adjacency = None
        self._built_version = None
        self._csr = None
        self._csc = None
        self._csr_version = None
        self._csc_version = None

    def _context(self) -> "Context":
        context = self._ctx_ref()
        if context is None:
            raise ReferenceError("context has been released")
        return context

    def _version(self) -> int:
        return self._context()._state.version

    def _ensure_built(self) -> None:
        version = self._version()
        if self._incidence is not None and self._built_version == version:
            return
        context = self._context()
        nodes = unique_nodes(context)
        edges = unique_edges(context)
        self._node_index = {node.get_id(): row for row, node in enumerate(nodes)}
        self._edge_index = {edge.get_id(): col for col, edge in enumerate(edges)}

        n, m = len(nodes), len(edges)
        B = sp.dok_matrix((n, m), dtype=np.float64)
        A = sp.dok_matrix((n, n), dtype=np.float64)
        rows = self._node_index

        for col, edge in enumerate(edges):
            w = _numeric_weight(edge)
            if edge.edge_type is EdgeType.ARROW:
                tail, head = edge.tail_node(), edge.head_node()
                t = rows.get(tail.get_id()) if tail is not None else None
                h = rows.get(head.get_id()) if head is not None else None
                if t is not None and t == h:
                    # tail is head: recorded like a loop
                    B[t, col] += w
                else:
                    if t is not None:
                        B[t, col] += -w
                    if h is not None:
                        B[h, col] += w
                if t is not None and h is not None:
                    A[t, h] += w
            elif edge.edge_type is EdgeType.LINK:
                left, right = edge.left_node(), edge.right_node()
                li = rows.get(left.get_id()) if left is not None else None
                ri = rows.get(right.get_id()) if right is not None else None
                if li is not None:
                    B[li, col] += w
                if ri is not None:
                    B[ri, col] += w
                if li is not None and ri is not None:
                    A[li, ri] += w
                    if li != ri:
                        A[ri, li] += w
            else:
                node = edge.loop_node()
                x = rows.get(node.get_id()) if node is not None else None
                if x is not None:
                    B[x, col] += w
                    A[x, x] += w

        self._incidence = B
        self._adjacency = A.tocsr()
        self._built_version = version
        logger.debug("rebuilt matrices at version %d (%d x %d)", version, n, m)

    # ==================== Matrices ====================

    @property
    def incidence(self):
        """Incidence matrix in DOK (Dictionary Of Keys) format, shape (nodes, edges)."""
        self._ensure_built()
        return self._incidence

    @property
    def adjacency(self):
        """Node adjacency (CSR), shape (nodes, nodes)."""
        self._ensure_built()
        return self._adjacency

    @property
    def csr(self):
        """CSR (Compressed Sparse Row) copy of the incidence matrix."""
        if self._csr is None or self._csr_version != self._version():
            self._csr = self.incidence.tocsr()
            self._csr_version = self._built_version
        return self._csr

    @property
    def csc(self):
        """CSC (Compressed Sparse Column) copy of the incidence matrix."""
        if self._csc is None or self._csc_version != self._version():
            self._csc = self.incidence.tocsc()
            self._csc_version = self._built_version
        return self._csc

    @property
    def node_index(self) -> dict[int, int]:
        """Node id -> row."""
        self._ensure_built()
        return dict(self._node_index)

    @property
    def edge_index(self) -> dict[int, int]:
        """Edge id -> column."""
        self._ensure_built()
        return dict(self._edge_index)

    def has_incidence(self) -> bool:
        """True if the cached matrices match the current context version."""
        return self._incidence is not None and self._built_version == self._version()

    # ==================== Cache Management ====================

    def invalidate(self) -> None:
        """Drop every cached matrix."""
        self._incidence = None
        self._adjacency = None
        self._built_version = None
        self._csr = None
        self._csc = None
        self._csr_version = None
        self._csc_version = None

    def info(self) -> dict:
        """
        Get cache status.

        Returns
        -------
        dict
            Status of each cached format
        """

        def _format_info(matrix, version):
            if matrix is None:
                return {"cached": False}
            return {
                "cached": True,
                "version": version,
                "nnz": matrix.nnz,
                "shape": matrix.shape,
            }

        return {
            "incidence": _format_info(self._incidence, self._built_version),
            "adjacency": _format_info(self._adjacency, self._built_version),
            "csr": _format_info(self._csr, self._csr_version),
            "csc": _format_info(self._csc, self._csc_version),
        }
