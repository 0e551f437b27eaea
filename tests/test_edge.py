import pytest

from linkgraph import BorrowError, Context, Edge, EdgePos, EdgeType, Node, WeightedEdge


@pytest.fixture
def trio(ctx):
    return Node("T", ctx), Node("H", ctx), Node("X", ctx)


class TestArrow:

    def test_directionality(self, ctx, trio):
        t, h, _ = trio
        arrow = Edge.new_arrow(t, h, ctx)
        assert arrow.try_head_node(t.id) is h
        assert arrow.try_head_node(h.id) is None
        assert arrow.try_tail_node(h.id) is t
        assert arrow.try_tail_node(t.id) is None

    def test_accessors(self, ctx, trio):
        t, h, _ = trio
        arrow = Edge.new_arrow(t, h, ctx)
        assert arrow.get_edge_type() is EdgeType.ARROW
        assert arrow.head_node() is h
        assert arrow.tail_node() is t
        assert arrow.left_node() is None
        assert arrow.right_node() is None
        assert arrow.loop_node() is None
        assert arrow.nodes() == (t, h)

    def test_ownership_policy(self, ctx, trio):
        t, h, x = trio
        arrow = Edge.new_arrow(t, h, ctx)
        assert arrow.is_owning(h.id)
        assert not arrow.is_owning(t.id)
        assert not arrow.is_owning(x.id)

    def test_edge_end(self, ctx, trio):
        t, h, x = trio
        arrow = Edge.new_arrow(t, h, ctx)
        assert arrow.edge_end(t.id) is EdgePos.TAIL
        assert arrow.edge_end(h.id) is EdgePos.HEAD
        assert arrow.edge_end(x.id) is EdgePos.NONE

    def test_unknown_id_resolves_nothing(self, ctx, trio):
        t, h, x = trio
        arrow = Edge.new_arrow(t, h, ctx)
        assert arrow.try_head_node(x.id) is None
        assert arrow.try_tail_node(x.id) is None
        assert arrow.opposite_node(x.id) is None


class TestLink:

    def test_symmetry(self, ctx, trio):
        left, right, _ = trio
        link = Edge.new_link(left, right, ctx)
        assert link.try_head_node(left.id) is right
        assert link.try_head_node(right.id) is left
        assert link.try_tail_node(left.id) is right
        assert link.try_tail_node(right.id) is left

    def test_accessors(self, ctx, trio):
        left, right, _ = trio
        link = Edge.new_link(left, right, ctx)
        assert link.edge_type is EdgeType.LINK
        assert link.left_node() is left
        assert link.right_node() is right
        assert link.head_node() is None
        assert link.tail_node() is None
        assert not link.is_owning(left.id)
        assert not link.is_owning(right.id)
        assert link.edge_end(right.id) is EdgePos.LINK


class TestLoop:

    def test_reflexivity(self, ctx, trio):
        _, other, x = trio
        loop = Edge.new_loop(x, ctx)
        assert loop.try_head_node(x.id) is x
        assert loop.try_tail_node(x.id) is x
        assert loop.try_head_node(other.id) is None
        assert loop.try_tail_node(other.id) is None

    def test_accessors(self, ctx, trio):
        *_, x = trio
        loop = Edge.new_loop(x, ctx)
        assert loop.edge_type is EdgeType.LOOP
        assert loop.loop_node() is x
        assert loop.nodes() == (x,)
        assert loop.edge_end(x.id) is EdgePos.LOOP
        assert loop.head_node() is None
        assert not loop.is_owning(x.id)


class TestConstruction:

    def test_ids_and_self(self, ctx, trio):
        t, h, x = trio
        edges = [Edge.new_arrow(t, h, ctx), Edge.new_link(h, x, ctx), Edge.new_loop(x, ctx)]
        assert [e.get_id() for e in edges] == [0, 1, 2]
        assert all(e.get_self() is e for e in edges)
        assert all(e.get_context() is ctx for e in edges)

    def test_constructors_do_not_register(self, ctx, trio):
        t, h, _ = trio
        Edge.new_arrow(t, h, ctx)
        assert t.len_edges() == 0
        assert h.len_edges() == 0

    def test_shape_from_string(self, ctx, trio):
        t, h, _ = trio
        assert Edge("arrow", (t, h), ctx).edge_type is EdgeType.ARROW

    def test_wrong_arity(self, ctx, trio):
        t, h, _ = trio
        with pytest.raises(ValueError):
            Edge(EdgeType.LOOP, (t, h), ctx)
        with pytest.raises(ValueError):
            Edge(EdgeType.ARROW, (t,), ctx)

    def test_invalid_endpoints_and_context(self, ctx, trio):
        t, *_ = trio
        with pytest.raises(ValueError):
            Edge.new_link(t, "x", ctx)
        with pytest.raises(ValueError):
            Edge.new_loop(t, None)

    def test_invalid_shape(self, ctx, trio):
        t, *_ = trio
        with pytest.raises(ValueError):
            Edge("hyper", (t,), ctx)

    def test_try_constructors_check_context(self, ctx, trio):
        t, h, _ = trio
        other = Context()
        stranger = Node("S", other)
        assert Edge.try_arrow(t, stranger, ctx) is None
        assert Edge.try_link(stranger, h, ctx) is None
        assert Edge.try_loop(stranger, ctx) is None
        assert Edge.try_arrow(t, h, ctx).head_node() is h
        assert Edge.try_link(t, h, ctx).right_node() is h
        assert Edge.try_loop(stranger, other).loop_node() is stranger

    def test_try_constructors_reject_non_nodes(self, ctx, trio):
        t, _, _ = trio
        with pytest.raises(ValueError):
            Edge.try_arrow(t, "H", ctx)
        with pytest.raises(ValueError):
            Edge.try_link(None, t, ctx)
        with pytest.raises(ValueError):
            WeightedEdge.try_loop(42, ctx)

    def test_unweighted_edge_takes_no_weight(self, ctx, trio):
        t, h, _ = trio
        with pytest.raises(TypeError):
            Edge.new_arrow(t, h, ctx, weight=1.0)

    def test_repr(self, ctx, trio):
        t, h, x = trio
        assert repr(Edge.new_arrow(t, h, ctx)) == "<Edge arrow id=0 0->1>"
        assert repr(Edge.new_loop(x, ctx)) == "<Edge loop id=1 2>"


class TestWeightedEdge:

    def test_default_weight(self, ctx, trio):
        t, h, _ = trio
        edge = WeightedEdge.new_arrow(t, h, ctx)
        assert edge.weight == 0.0

    def test_explicit_weight_and_factory(self, ctx, trio):
        t, h, x = trio
        assert WeightedEdge.new_link(t, h, ctx, weight=2.5).weight == 2.5
        tagged = WeightedEdge.new_loop(x, ctx, weight_factory=dict)
        with tagged.get_weight_mut() as w:
            w.value["kind"] = "self"
        assert tagged.weight == {"kind": "self"}

    def test_scoped_weight_access(self, ctx, trio):
        t, h, _ = trio
        edge = WeightedEdge.new_arrow(t, h, ctx, weight=1.0)
        with edge.get_weight_mut() as w:
            w.value *= 4
            with pytest.raises(BorrowError):
                edge.get_weight()
        with edge.get_weight() as w:
            assert w.value == 4.0

    def test_set_weight(self, ctx, trio):
        t, h, _ = trio
        edge = WeightedEdge.new_arrow(t, h, ctx)
        assert edge.set_weight(7) == 0.0
        assert edge.set_weight(8) == 7
        assert edge.weight == 8

    def test_weight_writes_move_context_version(self, ctx, trio):
        t, h, _ = trio
        edge = WeightedEdge.new_arrow(t, h, ctx, weight=1.0)
        start = ctx._state.version
        edge.get_weight()
        assert ctx._state.version == start
        edge.set_weight(2.0)
        assert ctx._state.version == start + 1
        with edge.get_weight_mut() as w:
            w.value += 1
        assert ctx._state.version == start + 2

    def test_weighted_edge_keeps_shape_semantics(self, ctx, trio):
        t, h, _ = trio
        edge = WeightedEdge.new_arrow(t, h, ctx, weight=1.0)
        assert isinstance(edge, Edge)
        assert edge.try_head_node(t.id) is h
        assert repr(edge).startswith("<WeightedEdge arrow")
