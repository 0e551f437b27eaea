from __future__ import annotations

from typing import Dict

import polars as pl

from ..core.edge import WeightedEdge
from ..core.structure import EdgeType
from ..utils.validation import unique_edges, unique_nodes

__all__ = [
    "edges_dataframe",
    "nodes_dataframe",
    "to_dataframes",
]

NODE_SCHEMA = {"node_id": pl.Int64, "value": pl.Object, "degree": pl.Int64}
EDGE_SCHEMA = {
    "edge_id": pl.Int64,
    "edge_type": pl.Utf8,
    "source": pl.Int64,
    "target": pl.Int64,
    "weight": pl.Object,
}


def _frame(columns: dict, schema: dict) -> pl.DataFrame:
    return pl.DataFrame([pl.Series(name, columns[name], dtype=dtype) for name, dtype in schema.items()])


def _end_ids(edge):
    if edge.edge_type is EdgeType.ARROW:
        src, tgt = edge.tail_node(), edge.head_node()
    elif edge.edge_type is EdgeType.LINK:
        src, tgt = edge.left_node(), edge.right_node()
    else:
        src = tgt = edge.loop_node()
    return (
        src.get_id() if src is not None else None,
        tgt.get_id() if tgt is not None else None,
    )


def nodes_dataframe(context) -> pl.DataFrame:
    """
    Nodes table of a context's cached graph.

    Returns
    -------
    polars.DataFrame
        One row per cached node id (first roster occurrence) with columns
        ``node_id``, ``value`` (Object) and ``degree`` (registered edges).
    """
    columns = {name: [] for name in NODE_SCHEMA}
    for node in unique_nodes(context):
        columns["node_id"].append(node.get_id())
        columns["value"].append(node.value)
        columns["degree"].append(node.len_edges())
    return _frame(columns, NODE_SCHEMA)


def edges_dataframe(context) -> pl.DataFrame:
    """
    Edges table of a context's cached graph.

    Returns
    -------
    polars.DataFrame
        One row per cached edge id with columns ``edge_id``, ``edge_type``,
        ``source``, ``target`` and ``weight``. Links use left/right as
        source/target, loops repeat their node. Ends that no longer resolve
        are null, as is the weight of unweighted edges.
    """
    columns = {name: [] for name in EDGE_SCHEMA}
    for edge in unique_edges(context):
        src, tgt = _end_ids(edge)
        columns["edge_id"].append(edge.get_id())
        columns["edge_type"].append(edge.edge_type.value)
        columns["source"].append(src)
        columns["target"].append(tgt)
        columns["weight"].append(edge.weight if isinstance(edge, WeightedEdge) else None)
    return _frame(columns, EDGE_SCHEMA)


def to_dataframes(context) -> Dict[str, pl.DataFrame]:
    """
    Export the cached graph of a context to Polars DataFrames.

    Returns
    -------
    dict[str, polars.DataFrame]
        ``{"nodes": ..., "edges": ...}``; both tables keep their schema when
        nothing is cached.
    """
    return {
        "nodes": nodes_dataframe(context),
        "edges": edges_dataframe(context),
    }
