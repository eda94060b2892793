"""Workflow repository backed by the configured database."""

from __future__ import annotations

import json
import logging
from datetime import datetime

from marketflow.errors import StateError, WorkflowNotFoundError
from marketflow.state import DatabaseBackend, get_database

from .models import WorkflowCreate, WorkflowRecord, WorkflowSummary, WorkflowUpdate, check_graph

logger = logging.getLogger(__name__)

EXAMPLE_WORKFLOWS = (
    WorkflowCreate(
        name="Sales Outreach",
        description="AI-powered sales outreach campaign with personalized messages",
    ),
    WorkflowCreate(
        name="Lead Qualification",
        description="Automatically qualify and score leads based on CRM data",
    ),
)


def _parse_datetime(value) -> datetime:
    """Parse datetime from database (handles both strings and datetime objects)."""
    if isinstance(value, datetime):
        return value
    if value is None:
        return datetime.now()
    return datetime.fromisoformat(value)


class WorkflowManager:
    """Stores workflows as rows with the graph serialized in a JSON column.

    Writes are last-write-wins: there is no version column or concurrency
    token, so two editors saving the same workflow silently overwrite each
    other.
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS workflows (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            data TEXT NOT NULL DEFAULT '{}',
            user_id INTEGER,
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_workflows_updated ON workflows(updated_at DESC);
    """

    def __init__(self, backend: DatabaseBackend | None = None):
        self.backend = backend or get_database()
        self._init_schema()

    def _init_schema(self):
        """Initialize database schema."""
        self.backend.executescript(self.SCHEMA)

    def _row_to_record(self, row: dict) -> WorkflowRecord:
        data = row.get("data") or "{}"
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as e:
                raise StateError(
                    f"Workflow {row['id']} has corrupt graph data", {"workflow_id": row["id"]}
                ) from e
        return WorkflowRecord(
            id=row["id"],
            name=row["name"],
            description=row.get("description"),
            data=data,
            user_id=row.get("user_id"),
            created_at=_parse_datetime(row.get("created_at")),
            updated_at=_parse_datetime(row.get("updated_at")),
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def list_workflows(self) -> list[WorkflowRecord]:
        """All workflows in id order."""
        rows = self.backend.fetchall("SELECT * FROM workflows ORDER BY id")
        return [self._row_to_record(row) for row in rows]

    def list_summaries(self) -> list[WorkflowSummary]:
        summaries = []
        for record in self.list_workflows():
            summaries.append(
                WorkflowSummary(
                    id=record.id,
                    name=record.name,
                    description=record.description,
                    node_count=len(record.data.get("nodes") or []),
                    edge_count=len(record.data.get("edges") or []),
                    updated_at=record.updated_at,
                )
            )
        return summaries

    def get_workflow(self, workflow_id: int) -> WorkflowRecord | None:
        row = self.backend.fetchone("SELECT * FROM workflows WHERE id = ?", (workflow_id,))
        if not row:
            return None
        return self._row_to_record(row)

    def require_workflow(self, workflow_id: int) -> WorkflowRecord:
        """Like :meth:`get_workflow` but raises WorkflowNotFoundError."""
        record = self.get_workflow(workflow_id)
        if record is None:
            raise WorkflowNotFoundError(workflow_id)
        return record

    # =========================================================================
    # Mutations
    # =========================================================================

    def create_workflow(self, workflow: WorkflowCreate) -> WorkflowRecord:
        """Insert a workflow.

        Raises:
            ValidationError: If the graph payload is invalid.
        """
        graph = check_graph(workflow.data)
        now = datetime.now().isoformat()
        with self.backend.transaction():
            workflow_id = self.backend.insert(
                """
                INSERT INTO workflows (name, description, data, user_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    workflow.name,
                    workflow.description,
                    json.dumps(graph.to_dict()),
                    workflow.user_id,
                    now,
                    now,
                ),
            )
        logger.info(
            f"Created workflow {workflow_id}: {workflow.name}",
            extra={"workflow_id": workflow_id},
        )
        return self.require_workflow(workflow_id)

    def update_workflow(self, workflow_id: int, update: WorkflowUpdate) -> WorkflowRecord | None:
        """Apply a partial update and bump ``updated_at``.

        Returns:
            The updated record, or None if the workflow does not exist.

        Raises:
            ValidationError: If the graph payload is invalid.
        """
        existing = self.get_workflow(workflow_id)
        if existing is None:
            return None

        fields = update.model_dump(exclude_unset=True)
        if "data" in fields:
            if fields["data"] is None:
                del fields["data"]
            else:
                fields["data"] = json.dumps(check_graph(fields["data"]).to_dict())
        if fields.get("name") is None:
            fields.pop("name", None)

        fields["updated_at"] = datetime.now().isoformat()
        assignments = ", ".join(f"{column} = ?" for column in fields)
        with self.backend.transaction():
            self.backend.execute(
                f"UPDATE workflows SET {assignments} WHERE id = ?",
                (*fields.values(), workflow_id),
            )
        logger.debug(
            f"Updated workflow {workflow_id}: {sorted(fields)}",
            extra={"workflow_id": workflow_id},
        )
        return self.get_workflow(workflow_id)

    def delete_workflow(self, workflow_id: int) -> bool:
        """Delete a workflow. Returns False if it did not exist."""
        if self.get_workflow(workflow_id) is None:
            return False
        with self.backend.transaction():
            self.backend.execute("DELETE FROM workflows WHERE id = ?", (workflow_id,))
        logger.info(f"Deleted workflow {workflow_id}", extra={"workflow_id": workflow_id})
        return True

    def seed_examples(self) -> list[WorkflowRecord]:
        """Create the example workflows if the table is empty."""
        row = self.backend.fetchone("SELECT COUNT(*) AS count FROM workflows")
        if row and row["count"]:
            return []
        created = [self.create_workflow(example) for example in EXAMPLE_WORKFLOWS]
        logger.info(f"Seeded {len(created)} example workflows")
        return created
