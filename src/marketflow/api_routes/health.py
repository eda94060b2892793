"""Health check and root endpoints."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException

from marketflow import __version__
from marketflow import api_state as state
from marketflow.state import PostgresBackend, SQLiteBackend, get_database

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def root() -> dict:
    """Root endpoint."""
    return {"app": "Marketflow", "version": __version__, "status": "running"}


@router.get("/health")
def health_check() -> dict:
    """Basic health check (liveness probe)."""
    return {
        "status": "healthy",
        "ready": state._app_state["ready"],
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/health/db")
def database_health_check() -> dict:
    """Database health check endpoint."""
    try:
        backend = get_database()
        backend.ping()

        if isinstance(backend, PostgresBackend):
            backend_type = "postgresql"
        elif isinstance(backend, SQLiteBackend):
            backend_type = "sqlite"
        else:
            backend_type = "unknown"

        return {
            "status": "healthy",
            "database": "connected",
            "backend": backend_type,
            "timestamp": datetime.now().isoformat(),
        }
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "database": "disconnected",
                "timestamp": datetime.now().isoformat(),
            },
        )
