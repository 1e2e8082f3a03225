"""Tests for the layout engine: levels, columns, bounds and routing."""

import pytest

from processgraph.layout.bounds import DEFAULT_LAYOUT, LayoutConfig, compute_bounds
from processgraph.layout.columns import assign_columns, column_offsets, round_half_up
from processgraph.layout.engine import compute_layout
from processgraph.layout.levels import assign_levels, traversal_order
from processgraph.layout.routing import route_edge
from processgraph.models.layout import Bounds, Point
from processgraph.models.process_graph import GraphModel, NodeKind, ProcessNode, SequenceFlow


def build_model(nodes: list[tuple[str, NodeKind]], edges: list[tuple[str, str]]) -> GraphModel:
    """Model with flows named f1, f2, ... in edge order."""
    return GraphModel(
        id="P",
        nodes=[ProcessNode(id=node_id, kind=kind) for node_id, kind in nodes],
        flows=[
            SequenceFlow(id=f"f{i + 1}", source_id=source, target_id=target)
            for i, (source, target) in enumerate(edges)
        ],
    )


def linear_model() -> GraphModel:
    return build_model(
        [("s", NodeKind.start), ("t", NodeKind.task), ("e", NodeKind.end)],
        [("s", "t"), ("t", "e")],
    )


def split_merge_model() -> GraphModel:
    return build_model(
        [
            ("s", NodeKind.start),
            ("g", NodeKind.exclusive_gateway),
            ("a", NodeKind.task),
            ("b", NodeKind.task),
            ("j", NodeKind.exclusive_gateway),
            ("e", NodeKind.end),
        ],
        [("s", "g"), ("g", "a"), ("g", "b"), ("a", "j"), ("b", "j"), ("j", "e")],
    )


class TestLevels:
    """Test level (row) assignment."""

    def test_linear(self):
        assert assign_levels(linear_model()) == {"s": 0, "t": 1, "e": 2}

    def test_split_and_merge(self):
        levels = assign_levels(split_merge_model())
        assert levels == {"s": 0, "g": 1, "a": 2, "b": 2, "j": 3, "e": 4}

    def test_longest_path_wins(self):
        """A join sits below its deepest predecessor."""
        model = build_model(
            [
                ("s", NodeKind.start),
                ("g", NodeKind.exclusive_gateway),
                ("a1", NodeKind.task),
                ("a2", NodeKind.task),
                ("j", NodeKind.exclusive_gateway),
                ("e", NodeKind.end),
            ],
            [("s", "g"), ("g", "a1"), ("a1", "a2"), ("a2", "j"), ("g", "j"), ("j", "e")],
        )
        levels = assign_levels(model)
        assert levels["j"] == 4
        assert levels["e"] == 5

    def test_monotone_on_acyclic_graphs(self):
        """Every flow goes strictly downwards when the graph has no cycle."""
        model = split_merge_model()
        levels = assign_levels(model)
        for flow in model.flows:
            assert levels[flow.target_id] > levels[flow.source_id]

    def test_cycle_terminates_and_levels_every_node(self):
        model = build_model(
            [("s", NodeKind.start), ("a", NodeKind.task), ("b", NodeKind.task), ("e", NodeKind.end)],
            [("s", "a"), ("a", "b"), ("b", "a"), ("b", "e")],
        )
        levels = assign_levels(model)
        assert set(levels) == {"s", "a", "b", "e"}
        assert levels["s"] == 0
        assert levels == {"s": 0, "a": 1, "b": 2, "e": 3}

    def test_back_edge_into_start_keeps_start_at_top(self):
        model = build_model(
            [("s", NodeKind.start), ("t", NodeKind.task), ("e", NodeKind.end)],
            [("s", "t"), ("t", "s"), ("t", "e")],
        )
        assert assign_levels(model) == {"s": 0, "t": 1, "e": 2}

    def test_unreachable_node_gets_level_zero(self):
        model = build_model(
            [("s", NodeKind.start), ("e", NodeKind.end), ("island", NodeKind.task)],
            [("s", "e")],
        )
        levels = assign_levels(model)
        assert levels["island"] == 0
        assert traversal_order(model) == ["s", "e", "island"]

    def test_empty_model(self):
        assert assign_levels(GraphModel(id="P")) == {}
        assert traversal_order(GraphModel(id="P")) == []


class TestColumns:
    """Test column (lane) assignment."""

    def test_offsets(self):
        assert column_offsets(0) == []
        assert column_offsets(1) == [-1]
        assert column_offsets(2) == [-1, 1]
        assert column_offsets(5) == [-1, 1, -2, 2, -3]

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-0.5) == 0
        assert round_half_up(-1.5) == -1
        assert round_half_up(-2 / 3) == -1

    def test_linear_stays_centered(self):
        assert assign_columns(linear_model()) == {"s": 0, "t": 0, "e": 0}

    def test_split_is_symmetric(self):
        columns = assign_columns(split_merge_model())
        assert {columns["a"], columns["b"]} == {-1, 1}
        assert columns["a"] == -1  # first declared successor goes left

    def test_merge_is_centered(self):
        columns = assign_columns(split_merge_model())
        assert columns["j"] == 0

    def test_three_way_split(self):
        model = build_model(
            [
                ("s", NodeKind.start),
                ("g", NodeKind.exclusive_gateway),
                ("a", NodeKind.task),
                ("b", NodeKind.task),
                ("c", NodeKind.task),
                ("j", NodeKind.exclusive_gateway),
                ("e", NodeKind.end),
            ],
            [("s", "g"), ("g", "a"), ("g", "b"), ("g", "c"),
             ("a", "j"), ("b", "j"), ("c", "j"), ("j", "e")],
        )
        columns = assign_columns(model)
        assert (columns["a"], columns["b"], columns["c"]) == (-1, 1, -2)
        # mean of -1, 1, -2 is -2/3
        assert columns["j"] == -1

    def test_cycle_terminates(self):
        model = build_model(
            [("s", NodeKind.start), ("a", NodeKind.task), ("b", NodeKind.task), ("e", NodeKind.end)],
            [("s", "a"), ("a", "b"), ("b", "a"), ("b", "e")],
        )
        columns = assign_columns(model)
        assert set(columns) == {"s", "a", "b", "e"}

    def test_unreachable_node_defaults_to_center(self):
        model = build_model(
            [("s", NodeKind.start), ("e", NodeKind.end), ("island", NodeKind.task)],
            [("s", "e")],
        )
        assert assign_columns(model)["island"] == 0

    def test_deep_chain_does_not_recurse(self):
        """Long chains must not hit the recursion limit."""
        count = 3000
        nodes = [("n0", NodeKind.start)] + [(f"n{i}", NodeKind.task) for i in range(1, count)]
        edges = [(f"n{i}", f"n{i + 1}") for i in range(count - 1)]
        columns = assign_columns(build_model(nodes, edges))
        assert len(columns) == count
        assert set(columns.values()) == {0}


class TestBounds:
    """Test pixel placement."""

    def test_linear_positions(self):
        model = linear_model()
        bounds = compute_bounds(model, assign_levels(model), assign_columns(model))
        assert bounds["s"] == Bounds(x=482, y=80, w=36, h=36)
        assert bounds["t"] == Bounds(x=425, y=220, w=150, h=90)
        assert bounds["e"] == Bounds(x=482, y=360, w=36, h=36)

    def test_gateway_and_column_offset(self):
        model = split_merge_model()
        bounds = compute_bounds(model, assign_levels(model), assign_columns(model))
        assert bounds["g"] == Bounds(x=475, y=220, w=50, h=50)
        assert bounds["a"] == Bounds(x=165, y=360, w=150, h=90)
        assert bounds["b"] == Bounds(x=685, y=360, w=150, h=90)

    def test_custom_config(self):
        model = linear_model()
        config = LayoutConfig(base_center_x=100, top_margin=0, row_spacing=100)
        bounds = compute_bounds(model, assign_levels(model), assign_columns(model), config)
        assert bounds["t"] == Bounds(x=25, y=100, w=150, h=90)

    def test_config_is_hashable(self):
        assert hash(DEFAULT_LAYOUT) == hash(LayoutConfig())
        assert LayoutConfig() == DEFAULT_LAYOUT
        assert len({DEFAULT_LAYOUT, LayoutConfig(), LayoutConfig(top_margin=0)}) == 2

    def test_default_sizes(self):
        assert DEFAULT_LAYOUT.size_for(NodeKind.task) == (150, 90)
        assert DEFAULT_LAYOUT.size_for(NodeKind.exclusive_gateway) == (50, 50)
        assert DEFAULT_LAYOUT.size_for(NodeKind.start) == (36, 36)
        assert DEFAULT_LAYOUT.size_for(NodeKind.end) == (36, 36)


class TestRouting:
    """Test orthogonal edge routing."""

    def test_aligned_endpoints_give_straight_segment(self):
        source = Bounds(x=482, y=80, w=36, h=36)
        target = Bounds(x=425, y=220, w=150, h=90)
        assert route_edge(source, target) == [Point(500, 116), Point(500, 220)]

    def test_offset_target_uses_rail(self):
        source = Bounds(x=475, y=220, w=50, h=50)
        target = Bounds(x=165, y=360, w=150, h=90)
        assert route_edge(source, target) == [
            Point(500, 270),
            Point(500, 308),
            Point(240, 308),
            Point(240, 360),
        ]

    def test_target_above_source(self):
        source = Bounds(x=0, y=300, w=100, h=50)
        target = Bounds(x=200, y=0, w=100, h=50)
        assert route_edge(source, target) == [
            Point(50, 350),
            Point(50, 90),
            Point(250, 90),
            Point(250, 0),
        ]

    def test_paths_are_orthogonal(self):
        layout = compute_layout(split_merge_model())
        for points in layout.waypoints.values():
            for a, b in zip(points, points[1:]):
                assert a.x == b.x or a.y == b.y


class TestComputeLayout:
    """Test the full layout pass."""

    def test_every_node_and_flow_placed(self):
        model = split_merge_model()
        layout = compute_layout(model)
        assert set(layout.bounds) == set(model.node_ids())
        assert set(layout.waypoints) == {flow.id for flow in model.flows}

    def test_idempotent(self):
        """Two passes over the same model give identical geometry."""
        model = split_merge_model()
        assert compute_layout(model).to_dict() == compute_layout(model).to_dict()

    def test_to_dict_shape(self):
        data = compute_layout(linear_model()).to_dict()
        assert data["levels"] == {"s": 0, "t": 1, "e": 2}
        assert data["bounds"]["t"] == {"x": 425, "y": 220, "width": 150, "height": 90}
        assert data["waypoints"]["f1"] == [{"x": 500, "y": 116}, {"x": 500, "y": 220}]

    def test_dangling_flow_gets_no_waypoints(self):
        model = build_model(
            [("s", NodeKind.start), ("e", NodeKind.end)],
            [("s", "e"), ("s", "ghost")],
        )
        layout = compute_layout(model)
        assert "f2" not in layout.waypoints

    @pytest.mark.parametrize("kind", [NodeKind.task, NodeKind.exclusive_gateway])
    def test_single_node_model(self, kind):
        model = build_model([("only", kind)], [])
        layout = compute_layout(model)
        assert layout.levels == {"only": 0}
        assert layout.columns == {"only": 0}
