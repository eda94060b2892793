"""Workflow Graph Editing.

Node/edge models, change-sets, snapshot undo/redo, the node palette and the
WorkflowStore that ties them together for the builder UI.
"""

from .changes import (
    DEFAULT_EDGE_STYLE,
    EdgeChange,
    NodeChange,
    add_edge,
    apply_edge_changes,
    apply_node_changes,
    remove_dangling_edges,
)
from .dragdrop import decode_drag_payload, encode_drag_payload
from .factory import create_node, duplicate_node, generate_node_id
from .history import UndoJournal
from .layout import DEFAULT_LAYERS, align_nodes, auto_layout, next_free_position
from .models import (
    Connection,
    Edge,
    Node,
    NodeDefinition,
    NodePosition,
    WorkflowData,
    validate_workflow_data,
)
from .node_data import NODE_DATA_MODELS, editable_fields, validate_node_data
from .palette import NODE_DEFINITIONS, definitions_by_category, get_definition
from .selection import PropertySelection, SelectionState
from .store import WorkflowStore

__all__ = [
    "WorkflowStore",
    "WorkflowData",
    "Node",
    "NodePosition",
    "Edge",
    "Connection",
    "NodeDefinition",
    "validate_workflow_data",
    "NodeChange",
    "EdgeChange",
    "apply_node_changes",
    "apply_edge_changes",
    "add_edge",
    "remove_dangling_edges",
    "DEFAULT_EDGE_STYLE",
    "UndoJournal",
    "PropertySelection",
    "SelectionState",
    "create_node",
    "duplicate_node",
    "generate_node_id",
    "encode_drag_payload",
    "decode_drag_payload",
    "auto_layout",
    "align_nodes",
    "next_free_position",
    "DEFAULT_LAYERS",
    "NODE_DATA_MODELS",
    "validate_node_data",
    "editable_fields",
    "NODE_DEFINITIONS",
    "get_definition",
    "definitions_by_category",
]
