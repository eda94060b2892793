"""Streamlit workflow builder."""

from .builder import render_workflow_builder
from .state import (
    _add_from_palette,
    _get_store,
    _init_session_state,
    _load_workflow,
    _mark_dirty,
    _new_workflow,
    _save_workflow,
)

__all__ = [
    "render_workflow_builder",
    "_add_from_palette",
    "_get_store",
    "_init_session_state",
    "_load_workflow",
    "_mark_dirty",
    "_new_workflow",
    "_save_workflow",
]
