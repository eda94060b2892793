"""Main entry point for the Streamlit workflow builder."""

from __future__ import annotations

import streamlit as st

from .renderers import (
    _render_canvas,
    _render_palette,
    _render_property_panel,
    _render_saved_workflows,
    _render_toolbar,
)
from .state import _get_store, _init_session_state


def render_workflow_builder() -> None:
    """Render the builder page for the current session."""
    st.title("Marketflow Workflow Builder")

    _init_session_state()
    store = _get_store()

    status_text = store.workflow_name
    if store.workflow_id is not None:
        status_text = f"{store.workflow_name} (#{store.workflow_id})"
    if st.session_state.builder_dirty:
        status_text += " *"
    st.caption(f"Current: {status_text}")

    name = st.text_input("Workflow name", value=store.workflow_name)
    if name != store.workflow_name:
        store.set_workflow_name(name)

    _render_toolbar()
    st.divider()

    with st.sidebar:
        collapsed = st.toggle("Collapse palette", value=store.is_sidebar_collapsed)
        if collapsed != store.is_sidebar_collapsed:
            store.set_sidebar_collapsed(collapsed)
        if not store.is_sidebar_collapsed:
            _render_palette()
        st.divider()
        _render_saved_workflows()

    canvas, panel = st.columns([3, 2])
    with canvas:
        _render_canvas()
    with panel:
        _render_property_panel()
