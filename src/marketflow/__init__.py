"""Marketflow - a visual workflow builder for marketing automation pipelines."""

__version__ = "0.3.0"

from .config import Settings, get_settings
from .errors import MarketflowError, ValidationError
from .graph import NodeDefinition, NodePosition, WorkflowData, WorkflowStore

__all__ = [
    "Settings",
    "get_settings",
    "MarketflowError",
    "ValidationError",
    "WorkflowStore",
    "WorkflowData",
    "NodeDefinition",
    "NodePosition",
]
