"""Workflow CRUD and layout endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response

from marketflow import api_state as state
from marketflow.api_errors import CRUD_RESPONSES, not_found
from marketflow.config import get_settings
from marketflow.graph import WorkflowStore
from marketflow.workflows import (
    WorkflowCreate,
    WorkflowRecord,
    WorkflowUpdate,
    load_into_store,
    save_store,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/workflows", response_model=list[WorkflowRecord])
def list_workflows():
    """List all workflows."""
    return state.workflow_manager.list_workflows()


@router.get("/workflows/{workflow_id}", response_model=WorkflowRecord, responses=CRUD_RESPONSES)
def get_workflow(workflow_id: int):
    """Get a specific workflow."""
    record = state.workflow_manager.get_workflow(workflow_id)
    if record is None:
        raise not_found("Workflow", workflow_id)
    return record


@router.post(
    "/workflows",
    response_model=WorkflowRecord,
    status_code=201,
    responses=CRUD_RESPONSES,
)
def create_workflow(workflow: WorkflowCreate):
    """Create a new workflow. Invalid graphs are rejected with 400."""
    return state.workflow_manager.create_workflow(workflow)


@router.put("/workflows/{workflow_id}", response_model=WorkflowRecord, responses=CRUD_RESPONSES)
def update_workflow(workflow_id: int, update: WorkflowUpdate):
    """Partially update a workflow."""
    record = state.workflow_manager.update_workflow(workflow_id, update)
    if record is None:
        raise not_found("Workflow", workflow_id)
    return record


@router.delete("/workflows/{workflow_id}", status_code=204, responses=CRUD_RESPONSES)
def delete_workflow(workflow_id: int):
    """Delete a workflow."""
    if not state.workflow_manager.delete_workflow(workflow_id):
        raise not_found("Workflow", workflow_id)
    return Response(status_code=204)


@router.post(
    "/workflows/{workflow_id}/layout",
    response_model=WorkflowRecord,
    responses=CRUD_RESPONSES,
)
def layout_workflow(workflow_id: int):
    """Auto-layout a stored workflow and save the new positions."""
    if state.workflow_manager.get_workflow(workflow_id) is None:
        raise not_found("Workflow", workflow_id)

    store = WorkflowStore(history_limit=get_settings().history_limit)
    load_into_store(state.workflow_manager, store, workflow_id)
    store.auto_layout()
    record = save_store(state.workflow_manager, store)
    logger.info(f"Auto-laid out workflow {workflow_id} ({len(store.nodes)} nodes)")
    return record
