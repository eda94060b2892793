"""Marketflow Error Hierarchy.

Structured exception types for the workflow builder.
"""

from __future__ import annotations


class MarketflowError(Exception):
    """Base error for all Marketflow exceptions."""

    code = "MARKETFLOW_ERROR"

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(MarketflowError):
    """Data validation failed."""

    code = "VALIDATION"

    def __init__(self, message: str, field: str = None, errors: list = None):
        details = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, details)
        self.field = field
        self.errors = errors or []


# Workflow Errors
class WorkflowError(MarketflowError):
    """Base error for workflow persistence and execution failures."""

    code = "WORKFLOW_ERROR"


class WorkflowNotFoundError(WorkflowError):
    """Workflow record does not exist."""

    code = "WORKFLOW_NOT_FOUND"

    def __init__(self, workflow_id: int):
        super().__init__(f"Workflow '{workflow_id}' not found", {"workflow_id": workflow_id})
        self.workflow_id = workflow_id


class WorkflowRunningError(WorkflowError):
    """A marketing run is already in progress."""

    code = "CONFLICT"


# State Errors
class StateError(MarketflowError):
    """Base error for state persistence failures."""

    code = "STATE_ERROR"
