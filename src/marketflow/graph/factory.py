"""Node construction from palette definitions."""

from __future__ import annotations

import copy
import secrets
import string
from collections.abc import Container

from marketflow.errors import ValidationError

from .models import Node, NodeDefinition, NodePosition

# URL-safe alphabet, 64 symbols
ID_ALPHABET = string.ascii_letters + string.digits + "_-"
ID_SUFFIX_LENGTH = 6
DUPLICATE_OFFSET = (50.0, 50.0)
_MAX_ID_ATTEMPTS = 100


def generate_node_id(node_type: str, taken: Container[str] = ()) -> str:
    """Generate ``{type}-{6 random chars}``, avoiding every id in ``taken``."""
    for _ in range(_MAX_ID_ATTEMPTS):
        suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
        node_id = f"{node_type}-{suffix}"
        if node_id not in taken:
            return node_id
    raise RuntimeError(f"Could not generate a unique id for node type '{node_type}'")


def create_node(
    definition: NodeDefinition,
    position: NodePosition,
    taken: Container[str] = (),
) -> Node:
    """Stamp a new node from a palette definition.

    Args:
        definition: Palette template.
        position: Canvas position, already in graph coordinates.
        taken: Ids that must not be issued.

    Raises:
        ValidationError: If the definition has no type.
    """
    node_type = getattr(definition, "type", None)
    if not isinstance(node_type, str) or not node_type:
        raise ValidationError("Node definition requires a type", field="type")

    return Node(
        id=generate_node_id(node_type, taken),
        type=node_type,
        position=NodePosition(position.x, position.y),
        data=dict(definition.default_data or {}),
    )


def duplicate_node(node: Node, taken: Container[str] = ()) -> Node:
    """Clone ``node`` with a fresh id, offset position and a deep copy of its data.

    Edges are never cloned.
    """
    dx, dy = DUPLICATE_OFFSET
    return Node(
        id=generate_node_id(node.type, taken),
        type=node.type,
        position=node.position.offset(dx, dy),
        data=copy.deepcopy(node.data),
    )
