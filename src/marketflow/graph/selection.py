"""Property panel selection and draft tracking."""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any

from .models import Node


class SelectionState(str, Enum):
    """Property panel state."""

    UNSELECTED = "unselected"
    SELECTED = "selected"


class PropertySelection:
    """Tracks the node open in the property panel and its uncommitted draft.

    Only one node is edited at a time. The draft is a private copy of the
    node's data; nothing reaches the graph until the store commits it.
    Multi-select for align/delete lives on ``Node.selected`` instead.
    """

    def __init__(self):
        self.node_id: str | None = None
        self.draft: dict[str, Any] | None = None

    @property
    def state(self) -> SelectionState:
        if self.node_id is None:
            return SelectionState.UNSELECTED
        return SelectionState.SELECTED

    @property
    def is_selected(self) -> bool:
        return self.node_id is not None

    def select(self, node: Node) -> None:
        self.node_id = node.id
        self.draft = copy.deepcopy(node.data)

    def edit(self, **fields: Any) -> None:
        """Change draft fields; ignored while nothing is selected."""
        if self.draft is None:
            return
        self.draft.update(fields)

    def replace_draft(self, data: dict[str, Any]) -> None:
        if self.node_id is None:
            return
        self.draft = copy.deepcopy(data)

    def reset(self, node: Node) -> None:
        """Throw away draft changes and reload from the live node."""
        if node.id != self.node_id:
            return
        self.draft = copy.deepcopy(node.data)

    def committed(self, node: Node) -> None:
        """The store wrote ``node``; draft now mirrors the committed data."""
        if node.id == self.node_id:
            self.draft = copy.deepcopy(node.data)

    def is_dirty(self, node: Node) -> bool:
        """True if the draft differs from the live node data."""
        return self.node_id == node.id and self.draft != node.data

    def close(self) -> None:
        self.node_id = None
        self.draft = None
