"""Incremental change-sets for node and edge collections.

The canvas reports user gestures as batches of small changes (a node moved,
an edge got selected, a node was removed). These helpers apply a batch and
return a new collection; the input list and the objects in it are never
modified, so the caller can keep the previous collection for history.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any, Literal

from marketflow.errors import ValidationError

from .models import Connection, Edge, Node, NodePosition

ChangeType = Literal["add", "position", "select", "remove"]
_CHANGE_TYPES = ("add", "position", "select", "remove")

DEFAULT_EDGE_STYLE = {"stroke": "#CBD5E1", "strokeWidth": 2}


@dataclass
class NodeChange:
    """One change to the node collection."""

    type: ChangeType
    id: str | None = None
    position: NodePosition | None = None
    dragging: bool | None = None
    selected: bool | None = None
    item: Node | None = None

    @classmethod
    def from_dict(cls, data: dict) -> NodeChange:
        change_type = data.get("type")
        if change_type not in _CHANGE_TYPES:
            raise ValidationError(f"Unsupported node change type: {change_type}", field="type")
        position = data.get("position")
        item = data.get("item")
        return cls(
            type=change_type,
            id=data.get("id"),
            position=NodePosition.from_dict(position) if position else None,
            dragging=data.get("dragging"),
            selected=data.get("selected"),
            item=Node.from_dict(item) if item else None,
        )


@dataclass
class EdgeChange:
    """One change to the edge collection."""

    type: ChangeType
    id: str | None = None
    selected: bool | None = None
    item: Edge | None = None

    @classmethod
    def from_dict(cls, data: dict) -> EdgeChange:
        change_type = data.get("type")
        if change_type not in ("add", "select", "remove"):
            raise ValidationError(f"Unsupported edge change type: {change_type}", field="type")
        item = data.get("item")
        return cls(
            type=change_type,
            id=data.get("id"),
            selected=data.get("selected"),
            item=Edge.from_dict(item) if item else None,
        )


def apply_node_changes(changes: Iterable[NodeChange], nodes: list[Node]) -> list[Node]:
    """Apply a batch of node changes and return the new collection.

    Changes that reference unknown ids are skipped.
    """
    result = list(nodes)
    for change in changes:
        if change.type == "add":
            if change.item is not None:
                result.append(change.item)
            continue

        index = _index_of(result, change.id)
        if index is None:
            continue

        if change.type == "remove":
            del result[index]
        elif change.type == "position":
            if change.position is not None:
                result[index] = replace(result[index], position=change.position)
        elif change.type == "select":
            result[index] = replace(result[index], selected=bool(change.selected))
    return result


def apply_edge_changes(changes: Iterable[EdgeChange], edges: list[Edge]) -> list[Edge]:
    """Apply a batch of edge changes and return the new collection."""
    result = list(edges)
    for change in changes:
        if change.type == "add":
            if change.item is not None:
                result.append(change.item)
            continue

        index = _index_of(result, change.id)
        if index is None:
            continue

        if change.type == "remove":
            del result[index]
        elif change.type == "select":
            result[index] = replace(result[index], selected=bool(change.selected))
    return result


def edge_id_for(connection: Connection) -> str:
    """Deterministic edge id for a connection, as the canvas generates it."""
    return (
        f"reactflow__edge-{connection.source}{connection.source_handle or ''}"
        f"-{connection.target}{connection.target_handle or ''}"
    )


def connection_exists(connection: Connection, edges: list[Edge]) -> bool:
    """True if an edge already joins the same handles."""
    return any(
        e.source == connection.source
        and e.target == connection.target
        and (e.source_handle or None) == (connection.source_handle or None)
        and (e.target_handle or None) == (connection.target_handle or None)
        for e in edges
    )


def add_edge(connection: Connection, edges: list[Edge], **options: Any) -> list[Edge]:
    """Append an edge for ``connection`` and return the new collection.

    The edge is animated with the default stroke. Cardinality is not limited
    and no cycle or ordering check is made. A connection that already exists
    leaves the collection unchanged.
    """
    if connection_exists(connection, edges):
        return list(edges)

    edge = Edge(
        id=options.pop("id", None) or edge_id_for(connection),
        source=connection.source,
        target=connection.target,
        source_handle=connection.source_handle,
        target_handle=connection.target_handle,
        animated=options.pop("animated", True),
        style=dict(options.pop("style", DEFAULT_EDGE_STYLE)),
        type=options.pop("type", "default"),
        label=options.pop("label", None),
    )
    return [*edges, edge]


def remove_dangling_edges(nodes: list[Node], edges: list[Edge]) -> list[Edge]:
    """Drop every edge whose source or target is not in ``nodes``."""
    node_ids = {n.id for n in nodes}
    return [e for e in edges if e.source in node_ids and e.target in node_ids]


def _index_of(items: list, item_id: str | None) -> int | None:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return None
