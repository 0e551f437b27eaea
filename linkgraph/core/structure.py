from enum import Enum


class EdgeType(str, Enum):
    """Edge shape (ARROW, LINK, LOOP).

    Attributes:
        ARROW: Directed edge with a tail (source) and a head (target)
        LINK: Undirected edge with two symmetric ends
        LOOP: Edge whose single end is both source and target
    """

    ARROW = "arrow"
    LINK = "link"
    LOOP = "loop"


class EdgePos(str, Enum):
    """Position of a node (identified by its id) inside an edge.

    Attributes:
        TAIL: Edge points from the node to its target
        HEAD: Edge points from its source to the node
        LINK: Undirected edge, node and linked node point to each other
        LOOP: Looped edge, node points to itself
        NONE: Node is not part of the edge
    """

    TAIL = "tail"
    HEAD = "head"
    LINK = "link"
    LOOP = "loop"
    NONE = "none"
