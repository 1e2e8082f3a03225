"""Tests for structural validation."""

from processgraph.analysis.validator import (
    MISSING_END,
    MISSING_START,
    is_valid,
    validate_process,
)
from processgraph.models.process_graph import GraphModel, NodeKind, ProcessNode, SequenceFlow


def node(node_id: str, kind: NodeKind) -> ProcessNode:
    return ProcessNode(id=node_id, kind=kind)


def flow(flow_id: str, source: str, target: str) -> SequenceFlow:
    return SequenceFlow(id=flow_id, source_id=source, target_id=target)


class TestValidateProcess:
    """Test validate_process() checks."""

    def test_linear_process_is_valid(self):
        model = GraphModel(
            id="P",
            nodes=[node("s", NodeKind.start), node("t", NodeKind.task), node("e", NodeKind.end)],
            flows=[flow("f1", "s", "t"), flow("f2", "t", "e")],
        )
        assert validate_process(model) == []
        assert is_valid(model)

    def test_empty_model_reports_start_and_end(self):
        """All checks run; errors are reported in a fixed order."""
        assert validate_process(GraphModel(id="P")) == [MISSING_START, MISSING_END]

    def test_missing_end(self):
        model = GraphModel(
            id="P",
            nodes=[node("s", NodeKind.start), node("t", NodeKind.task)],
            flows=[flow("f1", "s", "t")],
        )
        assert validate_process(model) == ["No end event found"]

    def test_gateway_without_outgoing_flow(self):
        model = GraphModel(
            id="P",
            nodes=[node("s", NodeKind.start), node("g", NodeKind.exclusive_gateway), node("e", NodeKind.end)],
            flows=[flow("f1", "s", "g")],
        )
        assert validate_process(model) == ["Gateway g has open edges"]

    def test_gateway_without_any_flow_reported_once(self):
        """A gateway with neither edge appears in exactly one error."""
        model = GraphModel(
            id="P",
            nodes=[node("s", NodeKind.start), node("gw", NodeKind.exclusive_gateway), node("e", NodeKind.end)],
            flows=[flow("f1", "s", "e")],
        )
        errors = validate_process(model)
        assert errors == ["Gateway gw has open edges"]
        assert sum("gw" in error for error in errors) == 1

    def test_dangling_flow(self):
        model = GraphModel(
            id="P",
            nodes=[node("s", NodeKind.start), node("e", NodeKind.end)],
            flows=[flow("f1", "s", "e"), flow("f2", "s", "nowhere")],
        )
        assert validate_process(model) == ["Flow f2 references unknown nodes"]

    def test_flow_counting_includes_dangling_flows(self):
        """A gateway fed by a flow from an unknown node still has an incoming edge."""
        model = GraphModel(
            id="P",
            nodes=[node("s", NodeKind.start), node("g", NodeKind.exclusive_gateway), node("e", NodeKind.end)],
            flows=[flow("f1", "ghost", "g"), flow("f2", "g", "e")],
        )
        assert validate_process(model) == ["Flow f1 references unknown nodes"]

    def test_reports_every_problem(self):
        model = GraphModel(
            id="P",
            nodes=[node("g1", NodeKind.exclusive_gateway), node("g2", NodeKind.exclusive_gateway)],
            flows=[flow("f1", "x", "y")],
        )
        assert validate_process(model) == [
            MISSING_START,
            MISSING_END,
            "Gateway g1 has open edges",
            "Gateway g2 has open edges",
            "Flow f1 references unknown nodes",
        ]

    def test_deterministic(self):
        """The same model gives the same errors on every call."""
        model = GraphModel(
            id="P",
            nodes=[node("g", NodeKind.exclusive_gateway)],
            flows=[flow("f", "g", "missing")],
        )
        assert validate_process(model) == validate_process(model)

    def test_does_not_require_connectivity(self):
        """Unreachable nodes are not a validation error."""
        model = GraphModel(
            id="P",
            nodes=[node("s", NodeKind.start), node("e", NodeKind.end), node("island", NodeKind.task)],
            flows=[flow("f1", "s", "e")],
        )
        assert validate_process(model) == []
