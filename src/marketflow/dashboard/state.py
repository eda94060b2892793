"""Session state management for the Streamlit workflow builder.

Each browser session keeps its own ``WorkflowStore`` in
``st.session_state``; every widget callback goes through it.
"""

from __future__ import annotations

import logging

import streamlit as st

from marketflow.config import get_settings
from marketflow.graph import (
    Node,
    WorkflowStore,
    encode_drag_payload,
    get_definition,
    next_free_position,
)
from marketflow.workflows import WorkflowManager, WorkflowRecord, load_into_store, save_store

logger = logging.getLogger(__name__)


def _init_session_state() -> None:
    """Initialize session state for the workflow builder."""
    if "workflow_store" not in st.session_state:
        st.session_state.workflow_store = WorkflowStore(
            history_limit=get_settings().history_limit
        )
    if "workflow_manager" not in st.session_state:
        st.session_state.workflow_manager = None
    if "builder_dirty" not in st.session_state:
        st.session_state.builder_dirty = False


def _get_store() -> WorkflowStore:
    return st.session_state.workflow_store


def _get_manager() -> WorkflowManager:
    """Workflow repository, created on first use."""
    if st.session_state.workflow_manager is None:
        st.session_state.workflow_manager = WorkflowManager()
    return st.session_state.workflow_manager


def _mark_dirty() -> None:
    """Mark the current workflow as having unsaved changes."""
    st.session_state.builder_dirty = True


def _add_from_palette(node_type: str) -> Node | None:
    """Drop a palette entry at the next free grid slot.

    Streamlit has no drag-and-drop canvas, so the sidebar builds the same
    payload the canvas would receive and drops it programmatically.
    """
    definition = get_definition(node_type)
    if definition is None:
        return None
    store = _get_store()
    node = store.drop_node(encode_drag_payload(definition), next_free_position(store.nodes))
    if node is not None:
        store.select_node(node.id)
        _mark_dirty()
    return node


def _new_workflow() -> None:
    """Reset to a new empty workflow."""
    _get_store().new_workflow()
    st.session_state.builder_dirty = False


def _save_workflow() -> WorkflowRecord:
    record = save_store(_get_manager(), _get_store())
    st.session_state.builder_dirty = False
    logger.info(f"Saved workflow {record.id} from builder")
    return record


def _load_workflow(workflow_id: int) -> WorkflowRecord:
    record = load_into_store(_get_manager(), _get_store(), workflow_id)
    st.session_state.builder_dirty = False
    return record
