"""Shared mutable state for API modules.

The lifespan (in api.py) fills these in; route modules import this *module*
so they see the objects it created:

    from marketflow import api_state as state
    state.workflow_manager.list_workflows()
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from slowapi import Limiter
from slowapi.util import get_remote_address

if TYPE_CHECKING:
    from marketflow.agents import MarketingWorkflowRunner
    from marketflow.workflows import WorkflowManager

# ---------------------------------------------------------------------------
# Rate limiter
# ---------------------------------------------------------------------------
limiter = Limiter(key_func=get_remote_address)

# ---------------------------------------------------------------------------
# Managers (initialized in lifespan)
# ---------------------------------------------------------------------------
workflow_manager: WorkflowManager | None = None

# The most recent marketing run, kept for status polling
marketing_runner: MarketingWorkflowRunner | None = None

# ---------------------------------------------------------------------------
# Application health state
# ---------------------------------------------------------------------------
_app_state: dict = {
    "ready": False,
    "start_time": None,
    "active_requests": 0,
}
_state_lock = asyncio.Lock()


async def increment_active_requests() -> None:
    """Increment active request counter."""
    async with _state_lock:
        _app_state["active_requests"] += 1


async def decrement_active_requests() -> None:
    """Decrement active request counter."""
    async with _state_lock:
        _app_state["active_requests"] -= 1
