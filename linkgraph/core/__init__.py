from .cell import BorrowCell, Ref, RefMut
from .context import Context
from .edge import Edge, WeightedEdge
from .errors import BorrowError, IdExhaustedError, LinkGraphError
from .iterators import IterEdges
from .node import Node
from .structure import EdgePos, EdgeType

__all__ = [
    "BorrowCell",
    "BorrowError",
    "Context",
    "Edge",
    "EdgePos",
    "EdgeType",
    "IdExhaustedError",
    "IterEdges",
    "LinkGraphError",
    "Node",
    "Ref",
    "RefMut",
    "WeightedEdge",
]
