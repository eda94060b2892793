"""Data models for ReactFlow-style workflow graphs."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from marketflow.errors import ValidationError

_NODE_KEYS = {"id", "type", "position", "data", "selected"}
_EDGE_KEYS = {
    "id",
    "source",
    "target",
    "sourceHandle",
    "targetHandle",
    "animated",
    "style",
    "type",
    "label",
    "selected",
}


@dataclass
class NodePosition:
    """Position of a node in the graph canvas."""

    x: float
    y: float

    @classmethod
    def from_dict(cls, data: dict | None) -> NodePosition:
        data = data or {}
        return cls(x=float(data.get("x", 0)), y=float(data.get("y", 0)))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    def offset(self, dx: float, dy: float) -> NodePosition:
        return NodePosition(self.x + dx, self.y + dy)


@dataclass
class Node:
    """A node in the workflow graph.

    ``type`` is a palette key (``gpt4``, ``crm``, ...). ``data`` holds the
    type-specific configuration; keys the current type does not know about
    are kept untouched so they survive a save/load cycle. Renderer-owned
    fields (width, height, dragging, ...) are carried in ``extra``.
    """

    id: str
    type: str
    position: NodePosition = field(default_factory=lambda: NodePosition(0, 0))
    data: dict[str, Any] = field(default_factory=dict)
    selected: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Node:
        """Create a Node from a dictionary (ReactFlow format)."""
        return cls(
            id=data["id"],
            type=data.get("type", "default"),
            position=NodePosition.from_dict(data.get("position")),
            data=dict(data.get("data") or {}),
            selected=bool(data.get("selected", False)),
            extra={k: v for k, v in data.items() if k not in _NODE_KEYS},
        )

    def to_dict(self) -> dict:
        """Convert to dictionary (ReactFlow format)."""
        result = dict(self.extra)
        result.update(
            {
                "id": self.id,
                "type": self.type,
                "position": self.position.to_dict(),
                "data": self.data,
                "selected": self.selected,
            }
        )
        return result


@dataclass
class Edge:
    """A directed connection between two nodes.

    Edges describe display order only; nothing executes along them.
    """

    id: str
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None
    animated: bool = False
    style: dict[str, Any] = field(default_factory=dict)
    type: str = "default"
    label: str | None = None
    selected: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Edge:
        """Create an Edge from a dictionary (ReactFlow format)."""
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            source_handle=data.get("sourceHandle"),
            target_handle=data.get("targetHandle"),
            animated=bool(data.get("animated", False)),
            style=dict(data.get("style") or {}),
            type=data.get("type") or "default",
            label=data.get("label"),
            selected=bool(data.get("selected", False)),
            extra={k: v for k, v in data.items() if k not in _EDGE_KEYS},
        )

    def to_dict(self) -> dict:
        """Convert to dictionary (ReactFlow format)."""
        result = dict(self.extra)
        result.update(
            {
                "id": self.id,
                "source": self.source,
                "target": self.target,
                "animated": self.animated,
                "style": self.style,
                "type": self.type,
                "selected": self.selected,
            }
        )
        if self.source_handle:
            result["sourceHandle"] = self.source_handle
        if self.target_handle:
            result["targetHandle"] = self.target_handle
        if self.label:
            result["label"] = self.label
        return result

    def touches(self, node_id: str) -> bool:
        """True if the edge starts or ends at ``node_id``."""
        return self.source == node_id or self.target == node_id


@dataclass
class Connection:
    """A user gesture linking a source handle to a target handle."""

    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Connection:
        return cls(
            source=data["source"],
            target=data["target"],
            source_handle=data.get("sourceHandle"),
            target_handle=data.get("targetHandle"),
        )


@dataclass
class WorkflowData:
    """The serializable ``{nodes, edges}`` unit used for persistence,
    undo/redo snapshots and loading."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)

    def snapshot(self) -> WorkflowData:
        """Deep copy, detached from every live node and edge."""
        return copy.deepcopy(self)

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    @classmethod
    def from_dict(cls, data: dict | None) -> WorkflowData:
        """Create WorkflowData from a dictionary (ReactFlow format)."""
        data = data or {}
        return cls(
            nodes=[Node.from_dict(n) for n in data.get("nodes") or []],
            edges=[Edge.from_dict(e) for e in data.get("edges") or []],
        )

    def to_dict(self) -> dict:
        """Convert to dictionary (ReactFlow format)."""
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


@dataclass(frozen=True)
class NodeDefinition:
    """A palette entry: the static template new nodes are stamped from."""

    type: str
    label: str
    category: str
    color: str
    default_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> NodeDefinition:
        """Create a NodeDefinition from a palette payload.

        Raises:
            ValidationError: If ``type`` is missing or not a non-empty string.
        """
        if not isinstance(data, dict):
            raise ValidationError("Node definition must be an object")
        node_type = data.get("type")
        if not isinstance(node_type, str) or not node_type.strip():
            raise ValidationError("Node definition requires a type", field="type")
        label = data.get("label") or node_type
        default_data = data.get("defaultData", data.get("default_data")) or {}
        if not isinstance(default_data, dict):
            raise ValidationError("defaultData must be an object", field="defaultData")
        return cls(
            type=node_type,
            label=str(label),
            category=str(data.get("category", "processing")),
            color=str(data.get("color", "primary")),
            default_data=dict(default_data),
        )

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "label": self.label,
            "category": self.category,
            "color": self.color,
            "defaultData": dict(self.default_data),
        }


def validate_workflow_data(data: WorkflowData) -> list[str]:
    """Check the structural invariants of a graph.

    Returns:
        List of human-readable problems; empty when the graph is valid.
    """
    errors: list[str] = []

    node_ids: set[str] = set()
    for node in data.nodes:
        if node.id in node_ids:
            errors.append(f"Duplicate node id: {node.id}")
        node_ids.add(node.id)

    edge_ids: set[str] = set()
    for edge in data.edges:
        if edge.id in edge_ids:
            errors.append(f"Duplicate edge id: {edge.id}")
        edge_ids.add(edge.id)
        if edge.source not in node_ids:
            errors.append(f"Edge '{edge.id}' references unknown source node '{edge.source}'")
        if edge.target not in node_ids:
            errors.append(f"Edge '{edge.id}' references unknown target node '{edge.target}'")

    return errors
