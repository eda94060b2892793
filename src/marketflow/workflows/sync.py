"""Bridge between an editor's WorkflowStore and the workflow repository."""

from __future__ import annotations

import logging

from marketflow.graph.store import WorkflowStore

from .manager import WorkflowManager
from .models import WorkflowCreate, WorkflowRecord, WorkflowUpdate

logger = logging.getLogger(__name__)


def save_store(manager: WorkflowManager, store: WorkflowStore) -> WorkflowRecord:
    """Persist the store's graph and metadata.

    Creates a record when the store has no ``workflow_id`` (or its record was
    deleted meanwhile), otherwise overwrites the existing one.
    """
    data = store.get_workflow_data().to_dict()
    record = None

    if store.workflow_id is not None:
        record = manager.update_workflow(
            store.workflow_id,
            WorkflowUpdate(
                name=store.workflow_name,
                description=store.workflow_description,
                data=data,
            ),
        )
        if record is None:
            logger.warning(f"Workflow {store.workflow_id} no longer exists, saving as new")

    if record is None:
        record = manager.create_workflow(
            WorkflowCreate(
                name=store.workflow_name,
                description=store.workflow_description,
                data=data,
            )
        )

    store.set_workflow_id(record.id)
    return record


def load_into_store(manager: WorkflowManager, store: WorkflowStore, workflow_id: int) -> WorkflowRecord:
    """Load a stored workflow into the editor, resetting its history.

    Raises:
        WorkflowNotFoundError: If the workflow does not exist.
    """
    record = manager.require_workflow(workflow_id)
    store.load_workflow(
        record.graph(),
        workflow_id=record.id,
        name=record.name,
        description=record.description or "",
    )
    return record
