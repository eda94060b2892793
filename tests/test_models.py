"""Tests for graph data models."""

import pytest

from marketflow.errors import ValidationError
from marketflow.graph import (
    Edge,
    Node,
    NodeDefinition,
    WorkflowData,
    validate_workflow_data,
)


class TestNode:
    """Tests for Node serialization."""

    def test_round_trip_keeps_renderer_fields(self):
        raw = {
            "id": "gpt4-abc123",
            "type": "gpt4",
            "position": {"x": 10, "y": 20},
            "data": {"label": "GPT-4 Model", "temperature": 0.7},
            "width": 180,
            "height": 64,
        }
        node = Node.from_dict(raw)
        assert node.extra == {"width": 180, "height": 64}
        out = node.to_dict()
        assert out["width"] == 180
        assert out["position"] == {"x": 10.0, "y": 20.0}
        assert out["data"]["temperature"] == 0.7

    def test_missing_position_defaults_to_origin(self):
        node = Node.from_dict({"id": "a", "type": "crm"})
        assert (node.position.x, node.position.y) == (0.0, 0.0)


class TestEdge:
    """Tests for Edge serialization."""

    def test_handles_use_camel_case(self):
        edge = Edge.from_dict(
            {"id": "e1", "source": "a", "target": "b", "sourceHandle": "out", "animated": True}
        )
        assert edge.source_handle == "out"
        out = edge.to_dict()
        assert out["sourceHandle"] == "out"
        assert "targetHandle" not in out
        assert out["animated"] is True

    def test_touches(self):
        edge = Edge(id="e1", source="a", target="b")
        assert edge.touches("a")
        assert edge.touches("b")
        assert not edge.touches("c")


class TestWorkflowData:
    """Tests for WorkflowData."""

    def test_snapshot_is_detached(self):
        data = WorkflowData(nodes=[Node(id="a", type="crm", data={"entity": "Leads"})])
        snap = data.snapshot()
        data.nodes[0].data["entity"] = "Accounts"
        assert snap.nodes[0].data["entity"] == "Leads"

    def test_from_none(self):
        data = WorkflowData.from_dict(None)
        assert data.nodes == []
        assert data.edges == []


class TestValidateWorkflowData:
    """Tests for graph invariant checks."""

    def test_valid_graph(self):
        data = WorkflowData(
            nodes=[Node(id="a", type="crm"), Node(id="b", type="email")],
            edges=[Edge(id="e1", source="a", target="b")],
        )
        assert validate_workflow_data(data) == []

    def test_duplicate_node_ids(self):
        data = WorkflowData(nodes=[Node(id="a", type="crm"), Node(id="a", type="email")])
        errors = validate_workflow_data(data)
        assert any("Duplicate node id" in e for e in errors)

    def test_dangling_edge(self):
        data = WorkflowData(
            nodes=[Node(id="a", type="crm")],
            edges=[Edge(id="e1", source="a", target="missing")],
        )
        errors = validate_workflow_data(data)
        assert errors == ["Edge 'e1' references unknown target node 'missing'"]


class TestNodeDefinition:
    """Tests for NodeDefinition parsing."""

    def test_from_dict(self):
        definition = NodeDefinition.from_dict(
            {"type": "crm", "label": "CRM", "category": "data", "defaultData": {"entity": "Leads"}}
        )
        assert definition.type == "crm"
        assert definition.default_data == {"entity": "Leads"}

    def test_requires_type(self):
        with pytest.raises(ValidationError) as exc_info:
            NodeDefinition.from_dict({"label": "No type"})
        assert exc_info.value.field == "type"

    def test_rejects_non_object_default_data(self):
        with pytest.raises(ValidationError):
            NodeDefinition.from_dict({"type": "crm", "defaultData": ["x"]})
