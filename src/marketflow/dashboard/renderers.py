"""Rendering functions for the Streamlit workflow builder."""

from __future__ import annotations

import json
from typing import Any

import streamlit as st

from marketflow.errors import MarketflowError, ValidationError
from marketflow.graph.node_data import editable_fields
from marketflow.graph.palette import CATEGORIES, definitions_by_category

from .state import (
    _add_from_palette,
    _get_manager,
    _get_store,
    _load_workflow,
    _mark_dirty,
    _new_workflow,
    _save_workflow,
)

_CATEGORY_TITLES = {
    "ai": "AI Models",
    "data": "Data Sources",
    "processing": "Processing",
    "output": "Output Actions",
    "sales": "Sales",
    "marketing": "Marketing",
}


def _render_palette() -> None:
    """Sidebar palette: one button per node definition."""
    grouped = definitions_by_category()
    for category in CATEGORIES:
        with st.expander(_CATEGORY_TITLES.get(category, category), expanded=category == "ai"):
            for definition in grouped.get(category, []):
                if st.button(
                    definition.label,
                    key=f"palette_{definition.type}",
                    use_container_width=True,
                ):
                    _add_from_palette(definition.type)
                    st.rerun()


def _render_toolbar() -> None:
    """Undo/redo, layout, save and load controls."""
    store = _get_store()
    cols = st.columns(6)

    with cols[0]:
        if st.button(
            "Undo",
            disabled=not store.can_undo,
            key="toolbar_undo",
            use_container_width=True,
        ):
            store.undo()
            _mark_dirty()
            st.rerun()
    with cols[1]:
        if st.button(
            "Redo",
            disabled=not store.can_redo,
            key="toolbar_redo",
            use_container_width=True,
        ):
            store.redo()
            _mark_dirty()
            st.rerun()
    with cols[2]:
        if st.button("Auto Layout", disabled=not store.nodes, use_container_width=True):
            store.auto_layout()
            _mark_dirty()
            st.rerun()
    with cols[3]:
        selected = sum(1 for n in store.nodes if n.selected)
        if st.button("Align", disabled=selected < 2, use_container_width=True):
            store.align_selected_nodes()
            _mark_dirty()
            st.rerun()
    with cols[4]:
        if st.button("Save", type="primary", use_container_width=True):
            try:
                record = _save_workflow()
                st.toast(f"Saved workflow {record.id}")
            except ValidationError as e:
                st.error(f"Cannot save: {e.message}")
    with cols[5]:
        if st.button("New", use_container_width=True):
            _new_workflow()
            st.rerun()


def _render_saved_workflows() -> None:
    """Picker for stored workflows."""
    try:
        summaries = _get_manager().list_summaries()
    except MarketflowError as e:
        st.error(f"Database unavailable: {e.message}")
        return

    if not summaries:
        st.info("No saved workflows yet")
        return

    options = {f"{s.name} (#{s.id})": s.id for s in summaries}
    choice = st.selectbox("Saved workflows", list(options), key="saved_workflow_choice")
    if st.button("Load", use_container_width=True):
        record = _load_workflow(options[choice])
        st.toast(f"Loaded {record.name}")
        st.rerun()


def _toggle_selected(node_id: str) -> None:
    """Checkbox callback: report a selection change to the store."""
    selected = st.session_state[f"sel_{node_id}"]
    _get_store().on_nodes_change([{"type": "select", "id": node_id, "selected": selected}])


def _render_canvas() -> None:
    """Node list standing in for the graph canvas."""
    store = _get_store()
    if not store.nodes:
        st.info("Add nodes from the palette to start building")
        return

    for node in store.nodes:
        label = node.data.get("label") or node.type
        cols = st.columns([4, 1, 1, 1, 1])
        with cols[0]:
            marker = "**" if store.selection.node_id == node.id else ""
            st.markdown(
                f"{marker}{label}{marker}  \n"
                f"`{node.id}` at ({node.position.x:g}, {node.position.y:g})"
            )
        with cols[1]:
            # Widget state follows the store so undo/redo/load show through
            st.session_state[f"sel_{node.id}"] = node.selected
            st.checkbox(
                "Sel",
                key=f"sel_{node.id}",
                on_change=_toggle_selected,
                args=(node.id,),
            )
        with cols[2]:
            if st.button("Edit", key=f"edit_{node.id}"):
                store.on_node_click(node.id)
                st.rerun()
        with cols[3]:
            if st.button("Copy", key=f"dup_{node.id}"):
                store.duplicate_node(node.id)
                _mark_dirty()
                st.rerun()
        with cols[4]:
            if st.button("Delete", key=f"del_{node.id}"):
                store.delete_node(node.id)
                _mark_dirty()
                st.rerun()

    _render_connect_form()

    if store.edges:
        st.caption("Connections")
        for edge in store.edges:
            st.markdown(f"- `{edge.source}` → `{edge.target}`")


def _render_connect_form() -> None:
    store = _get_store()
    ids = [n.id for n in store.nodes]
    if len(ids) < 2:
        return
    with st.form("connect_nodes", clear_on_submit=True):
        cols = st.columns(2)
        source = cols[0].selectbox("From", ids, key="connect_source")
        target = cols[1].selectbox("To", ids, key="connect_target")
        if st.form_submit_button("Connect"):
            if store.on_connect({"source": source, "target": target}) is not None:
                _mark_dirty()
            st.rerun()


def _field_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, list | dict):
        return "json"
    return "text"


def _widget_value(kind: str, value: Any) -> Any:
    """Draft value as the widget for ``kind`` displays it."""
    if kind == "json":
        return json.dumps(value)
    if kind == "text":
        return "" if value is None else str(value)
    return value


def _edit_field(field: str, key: str, kind: str) -> None:
    """Property widget callback: copy the widget value into the draft."""
    raw = st.session_state[key]
    if kind == "json":
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            st.session_state.builder_json_error = field
            return
    else:
        value = raw
    _get_store().edit_draft(**{field: value})


def _render_property_panel() -> None:
    """Draft editor for the selected node.

    The draft is the source of truth: every widget is reset to it before
    rendering and reports changes back through ``_edit_field``.
    """
    store = _get_store()
    node = store.selected_node
    if not store.show_property_panel or node is None:
        return

    st.subheader(f"Properties: {node.data.get('label') or node.type}")
    draft = store.selection.draft or {}

    for field in editable_fields(node.type):
        value = draft.get(field)
        kind = _field_kind(value)
        key = f"prop_{node.id}_{field}"
        st.session_state[key] = _widget_value(kind, value)
        callback = {"on_change": _edit_field, "args": (field, key, kind)}
        if kind == "bool":
            st.checkbox(field, key=key, **callback)
        elif kind == "number":
            step = 1 if isinstance(value, int) else 0.1
            st.number_input(field, step=step, key=key, **callback)
        elif kind == "json":
            st.text_area(field, key=key, **callback)
        else:
            st.text_input(field, key=key, **callback)
        if st.session_state.get("builder_json_error") == field:
            st.warning(f"{field}: invalid JSON, keeping previous value")
            del st.session_state["builder_json_error"]

    cols = st.columns(3)
    with cols[0]:
        if st.button(
            "Apply",
            type="primary",
            disabled=not store.selection.is_dirty(node),
            key="panel_apply",
        ):
            try:
                store.apply_edits()
                _mark_dirty()
                st.rerun()
            except ValidationError as e:
                st.error(e.message)
                for problem in e.errors:
                    st.caption(f"{problem['field']}: {problem['message']}")
    with cols[1]:
        if st.button("Reset", key="panel_reset"):
            store.reset_edits()
            st.rerun()
    with cols[2]:
        if st.button("Close", key="panel_close"):
            store.close_panel()
            st.rerun()
