"""Deterministic layouts for the workflow canvas."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace

from .models import Node, NodePosition

LAYER_WIDTH = 320
NODE_HEIGHT = 200
NODE_SPACING = 50
ORIGIN = 100

# Data sources feed processing, which feeds AI models, which feed outputs
DEFAULT_LAYERS: dict[str, int] = {
    "crm": 0,
    "cms": 0,
    "database": 0,
    "filter": 1,
    "transform": 1,
    "merge": 1,
    "gpt4": 2,
    "claude": 2,
    "custom-llm": 2,
    "email": 3,
    "social": 3,
    "webhook": 3,
}


def layer_of(node: Node, type_to_layer: Mapping[str, int] = DEFAULT_LAYERS) -> int:
    """Layer index for a node; unknown types sit in layer 0."""
    return type_to_layer.get(node.type, 0)


def auto_layout(
    nodes: list[Node],
    type_to_layer: Mapping[str, int] = DEFAULT_LAYERS,
) -> list[Node]:
    """Arrange nodes in horizontal layers by type.

    Within a layer nodes keep their collection order. Edges are not
    consulted, so the result depends only on the node types and their order.
    """
    next_slot: dict[int, int] = {}
    result = []
    for node in nodes:
        layer = layer_of(node, type_to_layer)
        index = next_slot.get(layer, 0)
        next_slot[layer] = index + 1
        position = NodePosition(
            x=layer * LAYER_WIDTH + ORIGIN,
            y=index * (NODE_HEIGHT + NODE_SPACING) + ORIGIN,
        )
        result.append(replace(node, position=position))
    return result


def align_nodes(nodes: list[Node]) -> list[Node]:
    """Give every selected node the average x of the selection.

    Fewer than two selected nodes leaves the collection unchanged.
    """
    selected = [n for n in nodes if n.selected]
    if len(selected) <= 1:
        return list(nodes)

    avg_x = sum(n.position.x for n in selected) / len(selected)
    return [
        replace(n, position=NodePosition(avg_x, n.position.y)) if n.selected else n for n in nodes
    ]


def next_free_position(nodes: list[Node], columns: int = 3) -> NodePosition:
    """Grid slot for a node added without a drop point."""
    count = len(nodes)
    col = count % columns
    row = count // columns
    return NodePosition(x=ORIGIN + col * 250, y=ORIGIN + row * 180)
