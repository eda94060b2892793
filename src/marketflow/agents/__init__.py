"""Simulated multi-agent marketing pipeline."""

from .definitions import (
    AGENT_TYPES,
    MARKETING_AGENTS,
    AgentConfig,
    AgentDefinition,
    default_configs,
    get_agent,
)
from .runner import (
    AgentExecutor,
    AgentResult,
    MarketingPipeline,
    MarketingWorkflowRunner,
    SimulatedAgentExecutor,
)

__all__ = [
    "MARKETING_AGENTS",
    "AGENT_TYPES",
    "AgentConfig",
    "AgentDefinition",
    "default_configs",
    "get_agent",
    "AgentExecutor",
    "AgentResult",
    "SimulatedAgentExecutor",
    "MarketingPipeline",
    "MarketingWorkflowRunner",
]
