"""Tests for the Streamlit workflow builder state helpers."""

import pytest

from marketflow.dashboard import (
    _add_from_palette,
    _get_store,
    _init_session_state,
    _load_workflow,
    _mark_dirty,
    _new_workflow,
    _save_workflow,
)
from marketflow.graph import NodePosition, WorkflowStore


@pytest.fixture
def mock_session_state(monkeypatch):
    """Mock Streamlit session state."""

    class MockSessionState:
        def __contains__(self, key):
            return key in self.__dict__

    mock_state = MockSessionState()

    # Patch streamlit session_state
    import streamlit as st

    monkeypatch.setattr(st, "session_state", mock_state)

    return mock_state


class TestSessionState:
    """Test session state initialization."""

    def test_init_creates_store(self, mock_session_state):
        _init_session_state()
        assert isinstance(mock_session_state.workflow_store, WorkflowStore)
        assert mock_session_state.workflow_manager is None
        assert mock_session_state.builder_dirty is False

    def test_init_keeps_existing_store(self, mock_session_state):
        _init_session_state()
        store = _get_store()
        _init_session_state()
        assert _get_store() is store

    def test_history_limit_from_settings(self, mock_session_state, monkeypatch):
        from marketflow.config import get_settings

        monkeypatch.setenv("UNDO_HISTORY_LIMIT", "5")
        get_settings.cache_clear()
        _init_session_state()
        assert _get_store().history.limit == 5

    def test_mark_dirty(self, mock_session_state):
        _init_session_state()
        _mark_dirty()
        assert mock_session_state.builder_dirty is True


class TestPalette:
    """Test adding nodes from the sidebar palette."""

    def test_add_places_on_grid_and_selects(self, mock_session_state):
        _init_session_state()
        first = _add_from_palette("crm")
        second = _add_from_palette("gpt4")

        store = _get_store()
        assert [n.id for n in store.nodes] == [first.id, second.id]
        assert first.position == NodePosition(100, 100)
        assert second.position == NodePosition(350, 100)
        assert store.selection.node_id == second.id
        assert store.show_property_panel
        assert mock_session_state.builder_dirty is True

    def test_unknown_type(self, mock_session_state):
        _init_session_state()
        assert _add_from_palette("fax") is None
        assert _get_store().nodes == []

    def test_add_is_undoable(self, mock_session_state):
        _init_session_state()
        _add_from_palette("email")
        _get_store().undo()
        assert _get_store().nodes == []


class TestPersistence:
    """Test saving and loading from the builder."""

    def test_save_and_load(self, mock_session_state):
        _init_session_state()
        store = _get_store()
        store.set_workflow_name("Drip Campaign")
        node = _add_from_palette("email")

        record = _save_workflow()
        assert record.name == "Drip Campaign"
        assert store.workflow_id == record.id
        assert mock_session_state.builder_dirty is False

        _new_workflow()
        assert store.nodes == []
        assert store.workflow_id is None

        _load_workflow(record.id)
        assert [n.id for n in store.nodes] == [node.id]
        assert store.workflow_name == "Drip Campaign"
        assert not store.can_undo
