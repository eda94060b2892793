"""Workflow record models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from marketflow.errors import ValidationError
from marketflow.graph.models import WorkflowData, validate_workflow_data


def _empty_graph() -> dict[str, Any]:
    return {"nodes": [], "edges": []}


class WorkflowCreate(BaseModel):
    """Request to create a workflow."""

    name: str = Field(..., min_length=1, description="Workflow name")
    description: str | None = Field(None, description="Workflow description")
    data: dict[str, Any] = Field(default_factory=_empty_graph, description="{nodes, edges}")
    user_id: int | None = Field(None, description="Owning user (informational)")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class WorkflowUpdate(BaseModel):
    """Partial workflow update; unset fields are left alone."""

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    data: dict[str, Any] | None = None
    user_id: int | None = None


class WorkflowRecord(BaseModel):
    """A stored workflow."""

    id: int
    name: str
    description: str | None = None
    data: dict[str, Any] = Field(default_factory=_empty_graph)
    user_id: int | None = None
    created_at: datetime
    updated_at: datetime

    def graph(self) -> WorkflowData:
        return WorkflowData.from_dict(self.data)


class WorkflowSummary(BaseModel):
    """Workflow listing entry."""

    id: int
    name: str
    description: str | None = None
    node_count: int = 0
    edge_count: int = 0
    updated_at: datetime


def check_graph(data: dict[str, Any]) -> WorkflowData:
    """Parse and validate a ``{nodes, edges}`` payload.

    Raises:
        ValidationError: If the payload is malformed or breaks graph invariants.
    """
    if not isinstance(data, dict):
        raise ValidationError("Workflow data must be an object", field="data")
    for key in ("nodes", "edges"):
        if key in data and not isinstance(data[key], list):
            raise ValidationError(f"'{key}' must be a list", field=f"data.{key}")

    try:
        graph = WorkflowData.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Malformed workflow data: {e}", field="data") from e

    problems = validate_workflow_data(graph)
    if problems:
        raise ValidationError("Invalid workflow graph", field="data", errors=problems)
    return graph
