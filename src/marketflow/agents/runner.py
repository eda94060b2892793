"""Marketing pipeline execution.

The pipeline is a fixed chain of six agents. Which agents run is decided by
each agent's ``active`` flag and by the five connection toggles between
neighbouring agents. Running an agent is delegated to an ``AgentExecutor``;
the bundled ``SimulatedAgentExecutor`` only waits and returns canned output.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from marketflow.errors import ValidationError, WorkflowRunningError

from .definitions import (
    CONNECTION_COUNT,
    MARKETING_AGENTS,
    AgentConfig,
    AgentDefinition,
    default_configs,
    get_agent,
)

logger = logging.getLogger(__name__)


@dataclass
class AgentResult:
    """Output of one agent step."""

    agent_type: str
    success: bool
    output: Any = None
    error: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result = {
            "agentType": self.agent_type,
            "success": self.success,
            "output": self.output,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.error:
            result["error"] = self.error
        return result


class AgentExecutor(ABC):
    """Capability interface for running a single marketing agent."""

    @abstractmethod
    async def run(
        self,
        agent: AgentDefinition,
        config: AgentConfig,
        context: dict[str, AgentResult],
    ) -> AgentResult:
        """Run ``agent`` with ``config``.

        Args:
            agent: The agent being run.
            config: Its current configuration.
            context: Results of the agents that already ran, keyed by type.
        """


class SimulatedAgentExecutor(AgentExecutor):
    """Waits a fixed delay and returns placeholder output."""

    def __init__(self, delay: float = 2.0):
        self.delay = delay

    async def run(
        self,
        agent: AgentDefinition,
        config: AgentConfig,
        context: dict[str, AgentResult],
    ) -> AgentResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        return AgentResult(
            agent_type=agent.type,
            success=True,
            output=f"Sample output from {agent.type} agent",
        )


class MarketingPipeline:
    """Agent configurations plus the connection toggles between agents.

    ``connections[i]`` is the link leaving agent ``i`` towards agent ``i + 1``.
    """

    def __init__(
        self,
        configs: dict[str, AgentConfig] | None = None,
        connections: list[bool] | None = None,
    ):
        self.configs = default_configs()
        for agent_type, config in (configs or {}).items():
            self.set_config(agent_type, config)

        if connections is None:
            connections = [True] * CONNECTION_COUNT
        if len(connections) != CONNECTION_COUNT:
            raise ValidationError(
                f"Expected {CONNECTION_COUNT} connection toggles, got {len(connections)}",
                field="connections",
            )
        self.connections = [bool(c) for c in connections]

    def set_config(self, agent_type: str, config: AgentConfig | dict) -> None:
        if get_agent(agent_type) is None:
            raise ValidationError(f"Unknown agent type: {agent_type}", field="agent_type")
        if not isinstance(config, AgentConfig):
            config = AgentConfig.model_validate(config)
        self.configs[agent_type] = config

    def set_active(self, agent_type: str, active: bool) -> None:
        if agent_type not in self.configs:
            raise ValidationError(f"Unknown agent type: {agent_type}", field="agent_type")
        self.configs[agent_type] = self.configs[agent_type].model_copy(update={"active": active})

    def set_connection(self, index: int, enabled: bool) -> None:
        if not 0 <= index < CONNECTION_COUNT:
            raise ValidationError(f"Connection index out of range: {index}", field="index")
        self.connections[index] = enabled

    def toggle_connection(self, index: int) -> bool:
        """Flip connection ``index`` and return its new state."""
        if not 0 <= index < CONNECTION_COUNT:
            raise ValidationError(f"Connection index out of range: {index}", field="index")
        self.connections[index] = not self.connections[index]
        return self.connections[index]

    def execution_path(self) -> list[str]:
        """Agent types that will run, in pipeline order.

        The first active agent always runs. Each later active agent runs when
        the connection leaving the active agent before it is enabled, so a
        disabled connection skips one agent without ending the path.
        """
        order = [a.type for a in MARKETING_AGENTS]
        active = [t for t in order if self.configs[t].active]
        if not active:
            return []

        path = [active[0]]
        for previous, agent_type in zip(active, active[1:]):
            if self.connections[order.index(previous)]:
                path.append(agent_type)
        return path


StepCallback = Callable[[str, AgentResult | None], None]


class MarketingWorkflowRunner:
    """Runs a pipeline's execution path one agent at a time.

    A started run cannot be cancelled.
    """

    def __init__(
        self,
        pipeline: MarketingPipeline,
        executor: AgentExecutor | None = None,
        step_callback: StepCallback | None = None,
    ):
        """Initialize runner.

        Args:
            pipeline: Agent configs and connections
            executor: Runs each agent (defaults to a simulated executor)
            step_callback: Called with (agent_type, None) when a step starts
                and (agent_type, result) when it finishes
        """
        self.pipeline = pipeline
        self.executor = executor or SimulatedAgentExecutor()
        self.step_callback = step_callback

        self.is_running = False
        self.current_step: str | None = None
        self.results: dict[str, AgentResult] = {}
        self.complete = False

    def reset(self) -> None:
        if self.is_running:
            raise WorkflowRunningError("Cannot reset while a marketing run is in progress")
        self.current_step = None
        self.results = {}
        self.complete = False

    async def run(self) -> dict[str, AgentResult]:
        """Execute the path sequentially and return results keyed by agent type.

        Raises:
            WorkflowRunningError: If a run is already in progress.
        """
        if self.is_running:
            raise WorkflowRunningError("A marketing run is already in progress")

        self.is_running = True
        self.results = {}
        self.complete = False
        self.current_step = None
        path = self.pipeline.execution_path()
        logger.info(f"Starting marketing run: {' -> '.join(path) or '(no active agents)'}")

        try:
            for agent_type in path:
                self.current_step = agent_type
                self._notify(agent_type, None)

                agent = get_agent(agent_type)
                try:
                    result = await self.executor.run(
                        agent, self.pipeline.configs[agent_type], dict(self.results)
                    )
                except Exception as e:
                    logger.error(f"Agent {agent_type} failed: {e}")
                    result = AgentResult(agent_type=agent_type, success=False, error=str(e))

                self.results[agent_type] = result
                self._notify(agent_type, result)

            self.complete = True
        finally:
            self.current_step = None
            self.is_running = False

        logger.info(f"Marketing run complete: {len(self.results)} step(s)")
        return self.results

    def _notify(self, agent_type: str, result: AgentResult | None) -> None:
        if self.step_callback is None:
            return
        try:
            self.step_callback(agent_type, result)
        except Exception as e:
            logger.warning(f"Step callback failed for {agent_type}: {e}")
