"""Workflow store: the state container behind the builder UI.

The canvas, palette sidebar, toolbar and property panel all read and write
one ``WorkflowStore``. It is an ordinary object: each editor session
constructs its own and hands it to the components that need it.

Every operation runs to completion synchronously. Structural mutations take
an undo snapshot first; operations that turn out to have nothing to do
(stale ids, empty stacks, malformed drops) return without touching history.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any

from .changes import (
    EdgeChange,
    NodeChange,
    add_edge,
    apply_edge_changes,
    apply_node_changes,
    connection_exists,
    remove_dangling_edges,
)
from .dragdrop import decode_drag_payload
from .factory import create_node, duplicate_node
from .history import UndoJournal
from .layout import DEFAULT_LAYERS, align_nodes, auto_layout
from .models import Connection, Edge, Node, NodeDefinition, NodePosition, WorkflowData
from .node_data import validate_node_data
from .selection import PropertySelection

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOW_NAME = "Untitled Workflow"

Listener = Callable[["WorkflowStore"], None]


class WorkflowStore:
    """Graph state, undo/redo, selection and UI flags for one editor session.

    Args:
        history_limit: Maximum undo depth; None keeps every snapshot.
        type_to_layer: Layer table used by :meth:`auto_layout`.
    """

    def __init__(
        self,
        history_limit: int | None = None,
        type_to_layer: Mapping[str, int] = DEFAULT_LAYERS,
    ):
        # Workflow metadata
        self.workflow_id: int | None = None
        self.workflow_name: str = DEFAULT_WORKFLOW_NAME
        self.workflow_description: str = ""

        # Canvas state
        self.nodes: list[Node] = []
        self.edges: list[Edge] = []

        # UI state
        self.is_sidebar_collapsed = False
        self.show_property_panel = False
        self.selection = PropertySelection()
        self.history = UndoJournal(limit=history_limit)

        self.type_to_layer = type_to_layer
        self._issued_ids: set[str] = set()
        self._listeners: list[Listener] = []

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def has_selected_elements(self) -> bool:
        return any(n.selected for n in self.nodes) or any(e.selected for e in self.edges)

    @property
    def selected_node(self) -> Node | None:
        """The node open in the property panel."""
        if self.selection.node_id is None:
            return None
        return self.get_node(self.selection.node_id)

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every state change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Workflow store listener failed")

    # =========================================================================
    # Workflow management
    # =========================================================================

    def set_workflow_id(self, workflow_id: int | None) -> None:
        self.workflow_id = workflow_id
        self._notify()

    def set_workflow_name(self, name: str) -> None:
        self.workflow_name = name
        self._notify()

    def set_workflow_description(self, description: str) -> None:
        self.workflow_description = description
        self._notify()

    def get_workflow_data(self) -> WorkflowData:
        """Snapshot of the current graph for persistence."""
        return WorkflowData(nodes=self.nodes, edges=self.edges).snapshot()

    def load_workflow(
        self,
        data: WorkflowData | dict | None,
        workflow_id: int | None = None,
        name: str | None = None,
        description: str | None = None,
    ) -> None:
        """Replace the live graph and clear both history stacks.

        Loading is a reset boundary: it cannot be undone, and nothing done
        before the load can be undone after it.
        """
        if not isinstance(data, WorkflowData):
            data = WorkflowData.from_dict(data)
        data = data.snapshot()

        self.nodes = data.nodes
        self.edges = remove_dangling_edges(data.nodes, data.edges)
        if len(self.edges) != len(data.edges):
            logger.warning(
                "Dropped %d dangling edge(s) while loading workflow",
                len(data.edges) - len(self.edges),
            )
        self._issued_ids.update(n.id for n in self.nodes)
        if workflow_id is not None:
            self.workflow_id = workflow_id
        if name is not None:
            self.workflow_name = name
        if description is not None:
            self.workflow_description = description

        self.history.clear()
        self.close_panel(notify=False)
        logger.debug("Loaded workflow with %d nodes, %d edges", len(self.nodes), len(self.edges))
        self._notify()

    def new_workflow(self) -> None:
        """Reset to an empty, unsaved workflow."""
        self.workflow_id = None
        self.workflow_name = DEFAULT_WORKFLOW_NAME
        self.workflow_description = ""
        self.load_workflow(WorkflowData())

    # =========================================================================
    # Canvas events
    # =========================================================================

    def on_nodes_change(self, changes: Iterable[NodeChange | dict]) -> None:
        """Apply a batch of node changes reported by the canvas.

        Removing a node also removes every edge attached to it.
        """
        changes = [c if isinstance(c, NodeChange) else NodeChange.from_dict(c) for c in changes]
        if not changes:
            return
        self.save_state()
        self._issued_ids.update(c.item.id for c in changes if c.type == "add" and c.item)
        self.nodes = apply_node_changes(changes, self.nodes)
        self.edges = remove_dangling_edges(self.nodes, self.edges)
        self._close_if_missing()
        self._notify()

    def on_edges_change(self, changes: Iterable[EdgeChange | dict]) -> None:
        """Apply a batch of edge changes reported by the canvas."""
        changes = [c if isinstance(c, EdgeChange) else EdgeChange.from_dict(c) for c in changes]
        if not changes:
            return
        self.save_state()
        edges = apply_edge_changes(changes, self.edges)
        self.edges = remove_dangling_edges(self.nodes, edges)
        self._notify()

    def on_connect(self, connection: Connection | dict) -> Edge | None:
        """Connect two handles with an animated edge.

        Returns:
            The new edge, or None when an endpoint is missing or the same
            connection already exists.
        """
        if not isinstance(connection, Connection):
            connection = Connection.from_dict(connection)
        if self.get_node(connection.source) is None or self.get_node(connection.target) is None:
            logger.debug(
                "Ignoring connection %s -> %s: unknown node", connection.source, connection.target
            )
            return None
        if connection_exists(connection, self.edges):
            return None

        self.save_state()
        self.edges = add_edge(connection, self.edges)
        self._notify()
        return self.edges[-1]

    def on_node_click(self, node_id: str) -> None:
        """Open the property panel for a node."""
        self.select_node(node_id)

    # =========================================================================
    # Node management
    # =========================================================================

    def add_node(self, definition: NodeDefinition, position: NodePosition) -> Node:
        """Create a node from a palette definition at a graph position.

        Raises:
            ValidationError: If the definition has no type.
        """
        node = create_node(definition, position, taken=self._issued_ids)
        self.save_state()
        self._issued_ids.add(node.id)
        self.nodes = [*self.nodes, node]
        logger.debug(
            "Added node %s at (%s, %s)",
            node.id,
            position.x,
            position.y,
            extra={"node_id": node.id},
        )
        self._notify()
        return node

    def drop_node(self, payload: str | dict | None, position: NodePosition) -> Node | None:
        """Handle a palette drop; malformed payloads create nothing."""
        definition = decode_drag_payload(payload)
        if definition is None:
            return None
        return self.add_node(definition, position)

    def update_node_data(self, node_id: str, data: dict[str, Any]) -> Node | None:
        """Replace a node's data.

        Raises:
            ValidationError: If ``data`` does not fit the node's type.
        """
        node = self.get_node(node_id)
        if node is None:
            return None

        validated = validate_node_data(node.type, data)
        self.save_state()
        updated = replace(node, data=validated)
        self.nodes = [updated if n.id == node_id else n for n in self.nodes]
        self.selection.committed(updated)
        self._notify()
        return updated

    def delete_node(self, node_id: str) -> None:
        """Delete a node and every edge attached to it."""
        if self.get_node(node_id) is None:
            return
        self.save_state()
        self.nodes = [n for n in self.nodes if n.id != node_id]
        self.edges = [e for e in self.edges if not e.touches(node_id)]
        self._close_if_missing()
        self._notify()

    def delete_selected_elements(self) -> None:
        """Delete selected nodes, selected edges, and edges of deleted nodes."""
        if not self.has_selected_elements:
            return
        self.save_state()
        self.nodes = [n for n in self.nodes if not n.selected]
        self.edges = remove_dangling_edges(self.nodes, [e for e in self.edges if not e.selected])
        self._close_if_missing()
        self._notify()

    def duplicate_node(self, node_id: str) -> Node | None:
        """Clone a node at a (+50, +50) offset, without its edges."""
        source = self.get_node(node_id)
        if source is None:
            return None
        clone = duplicate_node(source, taken=self._issued_ids)
        self.save_state()
        self._issued_ids.add(clone.id)
        self.nodes = [*self.nodes, clone]
        self._notify()
        return clone

    # =========================================================================
    # Property panel
    # =========================================================================

    def select_node(self, node_id: str) -> None:
        node = self.get_node(node_id)
        if node is None:
            return
        self.selection.select(node)
        self.show_property_panel = True
        self._notify()

    def edit_draft(self, **fields: Any) -> None:
        """Change fields of the property panel draft (not committed)."""
        self.selection.edit(**fields)
        self._notify()

    def apply_edits(self, draft: dict[str, Any] | None = None) -> Node | None:
        """Commit the draft into the selected node as one undoable step."""
        if draft is not None:
            self.selection.replace_draft(draft)
        node = self.selected_node
        if node is None or self.selection.draft is None:
            return None
        return self.update_node_data(node.id, self.selection.draft)

    def reset_edits(self) -> None:
        """Discard draft changes; history is not touched."""
        node = self.selected_node
        if node is None:
            return
        self.selection.reset(node)
        self._notify()

    def close_panel(self, notify: bool = True) -> None:
        self.selection.close()
        self.show_property_panel = False
        if notify:
            self._notify()

    # =========================================================================
    # UI flags
    # =========================================================================

    def set_sidebar_collapsed(self, collapsed: bool) -> None:
        self.is_sidebar_collapsed = collapsed
        self._notify()

    def set_show_property_panel(self, show: bool) -> None:
        self.show_property_panel = show
        self._notify()

    # =========================================================================
    # Layout
    # =========================================================================

    def align_selected_nodes(self) -> None:
        """Line up selected nodes on their average x (needs two or more)."""
        if sum(1 for n in self.nodes if n.selected) <= 1:
            return
        self.save_state()
        self.nodes = align_nodes(self.nodes)
        self._notify()

    def auto_layout(self) -> None:
        """Arrange nodes in type layers as a single undoable step."""
        self.save_state()
        self.nodes = auto_layout(self.nodes, self.type_to_layer)
        self._notify()

    # =========================================================================
    # Undo / redo
    # =========================================================================

    def save_state(self) -> None:
        """Record the current graph on the undo stack and clear redo."""
        self.history.record(WorkflowData(nodes=self.nodes, edges=self.edges))

    def undo(self) -> None:
        previous = self.history.undo(WorkflowData(nodes=self.nodes, edges=self.edges))
        if previous is None:
            return
        self._restore(previous)

    def redo(self) -> None:
        following = self.history.redo(WorkflowData(nodes=self.nodes, edges=self.edges))
        if following is None:
            return
        self._restore(following)

    def _restore(self, data: WorkflowData) -> None:
        self.nodes = data.nodes
        self.edges = data.edges
        self._close_if_missing()
        self._notify()

    def _close_if_missing(self) -> None:
        node_id = self.selection.node_id
        if node_id is not None and self.get_node(node_id) is None:
            self.close_panel(notify=False)
