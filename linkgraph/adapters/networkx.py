import warnings

try:
    import networkx as nx
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "Optional dependency 'networkx' is not installed. "
        "Install with: pip install linkgraph[networkx]"
    ) from e

from ..core.edge import WeightedEdge
from ..core.structure import EdgeType
from ..utils.validation import unique_edges, unique_nodes
from ._base import GraphAdapter

__all__ = [
    "NetworkXAdapter",
    "to_backend",
    "to_nx",
]


def _edge_ends(edge):
    if edge.edge_type is EdgeType.ARROW:
        return edge.tail_node(), edge.head_node()
    if edge.edge_type is EdgeType.LINK:
        return edge.left_node(), edge.right_node()
    node = edge.loop_node()
    return node, node


def to_nx(context, *, directed: bool = True, include_values: bool = True):
    """
    Export the cached graph of a context to a NetworkX Multi(Di)Graph.

    Parameters
    ----------
    context : Context
        Source context; only its node and edge rosters are exported.
    directed : bool
        If True, export as MultiDiGraph; else MultiGraph.
        Links in a directed export are emitted in both directions.
    include_values : bool
        If True, store each node payload under the ``value`` attribute.

    Returns
    -------
    networkx.MultiGraph | networkx.MultiDiGraph
        Nodes keyed by node id, edges keyed by edge id with ``edge_type`` and,
        for weighted edges, ``weight`` attributes.

    Notes
    -----
    Edges with an end that no longer resolves are dropped and reported with a
    ``RuntimeWarning``. Endpoints that are not cached themselves are added as
    bare nodes.
    """
    G = nx.MultiDiGraph() if directed else nx.MultiGraph()

    for node in unique_nodes(context):
        attrs = {"value": node.value} if include_values else {}
        G.add_node(node.get_id(), **attrs)

    skipped = 0
    for edge in unique_edges(context):
        u, v = _edge_ends(edge)
        if u is None or v is None:
            skipped += 1
            continue
        e_attr = {"edge_type": edge.edge_type.value}
        if isinstance(edge, WeightedEdge):
            e_attr["weight"] = edge.weight

        G.add_edge(u.get_id(), v.get_id(), key=edge.get_id(), **e_attr)
        if directed and edge.edge_type is EdgeType.LINK and u is not v:
            G.add_edge(v.get_id(), u.get_id(), key=edge.get_id(), **e_attr)

    if skipped:
        warnings.warn(
            f"to_nx: dropped {skipped} edge(s) whose endpoints no longer resolve",
            RuntimeWarning,
            stacklevel=2,
        )
    return G


def to_backend(context, **kwargs):
    return to_nx(context, **kwargs)


class NetworkXAdapter(GraphAdapter):
    def export(self, context, **kwargs):
        return to_nx(context, **kwargs)
