"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from marketflow.config import get_settings  # noqa: E402
from marketflow.graph import Node, NodePosition, WorkflowStore, get_definition  # noqa: E402
from marketflow.state import SQLiteBackend, reset_database  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a throwaway database and make simulated steps instant."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path}/marketflow.db")
    monkeypatch.setenv("SIMULATED_STEP_DELAY_SECONDS", "0")
    monkeypatch.setenv("SEED_EXAMPLE_WORKFLOWS", "false")
    get_settings.cache_clear()
    reset_database()
    yield
    reset_database()
    get_settings.cache_clear()


@pytest.fixture
def backend(tmp_path):
    """Create a temporary SQLite backend."""
    backend = SQLiteBackend(db_path=str(tmp_path / "test.db"))
    yield backend
    backend.close()


@pytest.fixture
def store():
    return WorkflowStore()


def make_node(node_id: str, node_type: str = "gpt4", x: float = 0, y: float = 0, **data) -> Node:
    return Node(id=node_id, type=node_type, position=NodePosition(x, y), data=data)


def add_palette_node(store: WorkflowStore, node_type: str, x: float = 0, y: float = 0) -> Node:
    return store.add_node(get_definition(node_type), NodePosition(x, y))
