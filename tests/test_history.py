"""Tests for the undo journal."""

import pytest

from marketflow.graph import Node, UndoJournal, WorkflowData


def _graph(*ids):
    return WorkflowData(nodes=[Node(id=i, type="crm") for i in ids])


def _ids(data):
    return [n.id for n in data.nodes]


class TestUndoJournal:
    """Tests for UndoJournal."""

    def test_empty_journal(self):
        journal = UndoJournal()
        assert not journal.can_undo
        assert not journal.can_redo
        assert journal.undo(_graph()) is None
        assert journal.redo(_graph()) is None

    def test_undo_then_redo(self):
        journal = UndoJournal()
        journal.record(_graph())
        restored = journal.undo(_graph("a"))
        assert _ids(restored) == []
        assert journal.can_redo

        forward = journal.redo(restored)
        assert _ids(forward) == ["a"]
        assert journal.can_undo
        assert not journal.can_redo

    def test_record_clears_redo(self):
        journal = UndoJournal()
        journal.record(_graph())
        journal.undo(_graph("a"))
        journal.record(_graph())
        assert not journal.can_redo

    def test_snapshots_are_deep_copies(self):
        journal = UndoJournal()
        live = _graph("a")
        journal.record(live)
        live.nodes[0].data["label"] = "changed"
        restored = journal.undo(live)
        assert restored.nodes[0].data == {}

    def test_limit_drops_oldest(self):
        journal = UndoJournal(limit=2)
        journal.record(_graph())
        journal.record(_graph("a"))
        journal.record(_graph("a", "b"))
        assert journal.undo_depth == 2
        assert _ids(journal.undo(_graph("a", "b", "c"))) == ["a", "b"]
        assert _ids(journal.undo(_graph("a", "b"))) == ["a"]
        assert journal.undo(_graph("a")) is None

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            UndoJournal(limit=0)

    def test_clear(self):
        journal = UndoJournal()
        journal.record(_graph())
        journal.undo(_graph("a"))
        journal.record(_graph())
        journal.clear()
        assert journal.undo_depth == 0
        assert journal.redo_depth == 0
