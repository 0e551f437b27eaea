import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]  # project root
sys.path.insert(0, str(ROOT))

from linkgraph import Context, Edge, Node, WeightedEdge  # noqa: E402


@pytest.fixture
def ctx():
    return Context()


@pytest.fixture
def cached_ctx():
    return Context(auto_cache_nodes=True, auto_cache_edges=True)


@pytest.fixture
def mixed_graph(cached_ctx):
    """Three cached nodes a, b, c with a weighted arrow a->b, a link b--c and a loop on c.

    Each edge is registered on every node it touches.
    """
    ctx = cached_ctx
    a = Node("A", ctx)
    b = Node("B", ctx)
    c = Node("C", ctx)
    arrow = WeightedEdge.new_arrow(a, b, ctx, weight=2.0)
    link = Edge.new_link(b, c, ctx)
    loop = Edge.new_loop(c, ctx)
    a.add_edge(arrow)
    b.add_edge(arrow)
    b.add_edge(link)
    c.add_edge(link)
    c.add_edge(loop)
    return {
        "ctx": ctx,
        "a": a,
        "b": b,
        "c": c,
        "arrow": arrow,
        "link": link,
        "loop": loop,
    }
