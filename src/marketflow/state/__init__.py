"""State Persistence.

SQLite/PostgreSQL backends shared by the workflow repository.
"""

from .backends import (
    DatabaseBackend,
    PostgresBackend,
    SQLiteBackend,
    create_backend,
)
from .database import get_database, reset_database

__all__ = [
    "DatabaseBackend",
    "SQLiteBackend",
    "PostgresBackend",
    "create_backend",
    "get_database",
    "reset_database",
]
