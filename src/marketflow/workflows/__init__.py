"""Workflow persistence: records, repository and editor bridge."""

from .manager import EXAMPLE_WORKFLOWS, WorkflowManager
from .models import (
    WorkflowCreate,
    WorkflowRecord,
    WorkflowSummary,
    WorkflowUpdate,
    check_graph,
)
from .sync import load_into_store, save_store

__all__ = [
    "WorkflowManager",
    "EXAMPLE_WORKFLOWS",
    "WorkflowCreate",
    "WorkflowUpdate",
    "WorkflowRecord",
    "WorkflowSummary",
    "check_graph",
    "save_store",
    "load_into_store",
]
