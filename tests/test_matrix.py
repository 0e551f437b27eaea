import numpy as np

from linkgraph import Edge, Node, WeightedEdge


class TestMatrixCache:

    def test_incidence_orientation(self, mixed_graph):
        m = mixed_graph["ctx"].matrices
        expected = np.array(
            [
                [-2.0, 0.0, 0.0],
                [2.0, 1.0, 0.0],
                [0.0, 1.0, 1.0],
            ]
        )
        np.testing.assert_array_equal(m.incidence.toarray(), expected)
        np.testing.assert_array_equal(m.csr.toarray(), expected)
        np.testing.assert_array_equal(m.csc.toarray(), expected)

    def test_adjacency(self, mixed_graph):
        adj = mixed_graph["ctx"].matrices.adjacency.toarray()
        expected = np.array(
            [
                [0.0, 2.0, 0.0],
                [0.0, 0.0, 1.0],
                [0.0, 1.0, 1.0],
            ]
        )
        np.testing.assert_array_equal(adj, expected)

    def test_indices_follow_roster(self, mixed_graph):
        m = mixed_graph["ctx"].matrices
        assert m.node_index == {0: 0, 1: 1, 2: 2}
        assert m.edge_index == {0: 0, 1: 1, 2: 2}

    def test_rebuilt_after_roster_change(self, mixed_graph):
        ctx = mixed_graph["ctx"]
        m = ctx.matrices
        assert m.incidence.shape == (3, 3)
        assert m.has_incidence()
        d = Node("D", ctx)
        assert not m.has_incidence()
        Edge.new_arrow(mixed_graph["c"], d, ctx)
        assert m.incidence.shape == (4, 4)
        assert m.incidence[2, 3] == -1.0
        assert m.incidence[3, 3] == 1.0

    def test_rebuilt_after_weight_change(self, mixed_graph):
        m = mixed_graph["ctx"].matrices
        assert m.adjacency[0, 1] == 2.0
        mixed_graph["arrow"].set_weight(5.0)
        assert m.adjacency[0, 1] == 5.0
        assert m.incidence[0, 0] == -5.0
        with mixed_graph["arrow"].get_weight_mut() as w:
            w.value = 3.0
        assert m.csc[1, 0] == 3.0

    def test_self_arrow_recorded_like_loop(self, cached_ctx):
        a = Node("A", cached_ctx)
        Edge.new_arrow(a, a, cached_ctx)
        np.testing.assert_array_equal(cached_ctx.matrices.incidence.toarray(), [[1.0]])
        np.testing.assert_array_equal(cached_ctx.matrices.adjacency.toarray(), [[1.0]])

    def test_duplicate_roster_entries_counted_once(self, cached_ctx):
        a = Node("A", cached_ctx)
        cached_ctx.cache_node(a)
        loop = Edge.new_loop(a, cached_ctx)
        cached_ctx.cache_edge(loop)
        assert cached_ctx.matrices.incidence.shape == (1, 1)

    def test_non_numeric_weight_counts_as_one(self, cached_ctx):
        a, b = Node("A", cached_ctx), Node("B", cached_ctx)
        WeightedEdge.new_arrow(a, b, cached_ctx, weight="heavy")
        WeightedEdge.new_arrow(a, b, cached_ctx, weight=True)
        np.testing.assert_array_equal(
            cached_ctx.matrices.incidence.toarray(), [[-1.0, -1.0], [1.0, 1.0]]
        )

    def test_uncached_endpoint_has_no_row(self):
        from linkgraph import Context

        ctx = Context(auto_cache_edges=True)
        a, b = Node("A", ctx), Node("B", ctx)
        ctx.cache_node(b)
        Edge.new_arrow(a, b, ctx)
        np.testing.assert_array_equal(ctx.matrices.incidence.toarray(), [[1.0]])
        assert ctx.matrices.adjacency.nnz == 0

    def test_empty(self, ctx):
        assert ctx.matrices.incidence.shape == (0, 0)
        assert ctx.matrices.adjacency.shape == (0, 0)

    def test_invalidate_and_info(self, mixed_graph):
        m = mixed_graph["ctx"].matrices
        assert m.info()["incidence"] == {"cached": False}
        m.csr
        info = m.info()
        assert info["incidence"]["cached"] and info["csr"]["shape"] == (3, 3)
        m.invalidate()
        assert not m.has_incidence()
        assert m.info()["csr"] == {"cached": False}
