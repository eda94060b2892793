"""Drag-and-drop payloads between the palette and the canvas."""

from __future__ import annotations

import json
import logging

from marketflow.errors import ValidationError

from .models import NodeDefinition

logger = logging.getLogger(__name__)

# MIME types the palette sets on the drag event
DRAG_TYPE_MIME = "application/reactflow/type"
DRAG_DEFINITION_MIME = "application/reactflow/nodeDefinition"


def encode_drag_payload(definition: NodeDefinition) -> dict[str, str]:
    """Serialize a palette definition the way the sidebar puts it on a drag event."""
    return {
        DRAG_TYPE_MIME: definition.type,
        DRAG_DEFINITION_MIME: json.dumps(definition.to_dict()),
    }


def decode_drag_payload(payload: str | dict | None) -> NodeDefinition | None:
    """Parse a drop payload back into a NodeDefinition.

    Accepts either the JSON text of the definition or the full mapping
    produced by :func:`encode_drag_payload`. Malformed payloads are dropped:
    the result is None and nothing is raised.
    """
    if isinstance(payload, dict):
        if not payload.get(DRAG_TYPE_MIME):
            return None
        payload = payload.get(DRAG_DEFINITION_MIME)

    if not payload or not isinstance(payload, str):
        return None

    try:
        data = json.loads(payload)
        return NodeDefinition.from_dict(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.debug("Ignoring malformed drop payload: %s", e)
        return None
