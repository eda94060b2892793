"""Snapshot-based undo/redo journal."""

from __future__ import annotations

import logging

from .models import WorkflowData

logger = logging.getLogger(__name__)


class UndoJournal:
    """Two stacks of whole-graph snapshots.

    ``record`` is called with the graph as it is *before* a mutation. Every
    new record clears the redo stack, so there is never a branching
    timeline. Snapshots are deep copies taken on every mutation, including
    each drag-move batch the canvas reports.

    Args:
        limit: Maximum number of undo snapshots to keep. The oldest snapshot
            is discarded once the limit is exceeded. ``None`` keeps every
            snapshot for the lifetime of the journal.
    """

    def __init__(self, limit: int | None = None):
        if limit is not None and limit < 1:
            raise ValueError("limit must be a positive integer or None")
        self.limit = limit
        self._undo: list[WorkflowData] = []
        self._redo: list[WorkflowData] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def record(self, current: WorkflowData) -> None:
        """Push a deep copy of ``current`` and invalidate redo."""
        self._undo.append(current.snapshot())
        self._redo.clear()
        if self.limit is not None and len(self._undo) > self.limit:
            dropped = len(self._undo) - self.limit
            del self._undo[:dropped]
            logger.debug("Undo history capped at %d, dropped %d snapshot(s)", self.limit, dropped)

    def undo(self, current: WorkflowData) -> WorkflowData | None:
        """Step back one snapshot.

        Returns:
            The graph to restore, or None when there is nothing to undo.
        """
        if not self._undo:
            return None
        self._redo.append(current.snapshot())
        return self._undo.pop()

    def redo(self, current: WorkflowData) -> WorkflowData | None:
        """Step forward one snapshot.

        Returns:
            The graph to restore, or None when there is nothing to redo.
        """
        if not self._redo:
            return None
        self._undo.append(current.snapshot())
        return self._redo.pop()

    def clear(self) -> None:
        """Forget all history (used when a different workflow is loaded)."""
        self._undo.clear()
        self._redo.clear()
