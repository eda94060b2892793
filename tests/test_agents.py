"""Tests for the marketing agent pipeline."""

import pytest

from marketflow.agents import (
    AGENT_TYPES,
    MARKETING_AGENTS,
    AgentConfig,
    AgentExecutor,
    AgentResult,
    MarketingPipeline,
    MarketingWorkflowRunner,
    SimulatedAgentExecutor,
    default_configs,
    get_agent,
)
from marketflow.errors import ValidationError, WorkflowRunningError


class FailingExecutor(AgentExecutor):
    """Fails on one agent type, succeeds elsewhere."""

    def __init__(self, fail_on: str):
        self.fail_on = fail_on
        self.seen_context: dict[str, list[str]] = {}

    async def run(self, agent, config, context):
        self.seen_context[agent.type] = list(context)
        if agent.type == self.fail_on:
            raise RuntimeError("model unavailable")
        return AgentResult(agent_type=agent.type, success=True, output=config.name)


class TestDefinitions:
    """Tests for the agent catalogue."""

    def test_six_agents_in_order(self):
        assert AGENT_TYPES == ("strategy", "copyGen", "design", "videoGen", "approval", "scheduler")

    def test_to_dict_uses_camel_case(self):
        payload = get_agent("strategy").to_dict()
        assert payload["defaultConfig"]["maxTokens"] == 2048
        assert payload["tools"][0] == "OpenAI GPT-4"

    def test_default_configs_are_copies(self):
        configs = default_configs()
        configs["strategy"].properties["planningHorizon"] = "1 week"
        assert MARKETING_AGENTS[0].default_config.properties["planningHorizon"] == "3 months"

    def test_config_rejects_bad_temperature(self):
        with pytest.raises(ValueError):
            AgentConfig(name="x", temperature=1.5)


class TestExecutionPath:
    """Tests for MarketingPipeline.execution_path."""

    def test_all_enabled(self):
        assert MarketingPipeline().execution_path() == list(AGENT_TYPES)

    def test_disabled_connection_skips_next_agent(self):
        pipeline = MarketingPipeline()
        pipeline.set_connection(1, False)
        assert pipeline.execution_path() == [
            "strategy",
            "copyGen",
            "videoGen",
            "approval",
            "scheduler",
        ]

    def test_inactive_agent_is_bridged(self):
        pipeline = MarketingPipeline()
        pipeline.set_active("design", False)
        assert "design" not in pipeline.execution_path()
        assert pipeline.execution_path()[2] == "videoGen"

    def test_connection_of_previous_active_agent_decides(self):
        pipeline = MarketingPipeline()
        pipeline.set_active("design", False)
        pipeline.set_connection(1, False)
        # copyGen's outgoing link is off, so videoGen is skipped
        assert pipeline.execution_path() == ["strategy", "copyGen", "approval", "scheduler"]

    def test_first_active_agent_always_runs(self):
        pipeline = MarketingPipeline(connections=[False] * 5)
        pipeline.set_active("strategy", False)
        assert pipeline.execution_path() == ["copyGen"]

    def test_no_active_agents(self):
        pipeline = MarketingPipeline()
        for agent_type in AGENT_TYPES:
            pipeline.set_active(agent_type, False)
        assert pipeline.execution_path() == []

    def test_toggle_connection(self):
        pipeline = MarketingPipeline()
        assert pipeline.toggle_connection(0) is False
        assert pipeline.toggle_connection(0) is True

    def test_wrong_connection_count(self):
        with pytest.raises(ValidationError):
            MarketingPipeline(connections=[True, True])

    def test_unknown_agent(self):
        with pytest.raises(ValidationError):
            MarketingPipeline(configs={"seo": {"name": "SEO"}})

    def test_connection_index_out_of_range(self):
        with pytest.raises(ValidationError):
            MarketingPipeline().set_connection(5, False)

    def test_config_from_dict(self):
        pipeline = MarketingPipeline(configs={"design": {"name": "Brand Design", "maxTokens": 10}})
        assert pipeline.configs["design"].max_tokens == 10


class TestRunner:
    """Tests for MarketingWorkflowRunner."""

    async def test_runs_path_in_order(self):
        steps = []
        runner = MarketingWorkflowRunner(
            MarketingPipeline(),
            SimulatedAgentExecutor(delay=0),
            step_callback=lambda agent_type, result: steps.append((agent_type, result is None)),
        )

        results = await runner.run()

        assert list(results) == list(AGENT_TYPES)
        assert results["strategy"].output == "Sample output from strategy agent"
        assert runner.complete
        assert not runner.is_running
        assert steps[:2] == [("strategy", True), ("strategy", False)]
        assert len(steps) == 12

    async def test_failed_step_is_recorded(self):
        executor = FailingExecutor(fail_on="design")
        runner = MarketingWorkflowRunner(MarketingPipeline(), executor)

        results = await runner.run()

        assert results["design"].success is False
        assert results["design"].error == "model unavailable"
        assert results["videoGen"].success is True
        assert executor.seen_context["videoGen"] == ["strategy", "copyGen", "design"]

    async def test_concurrent_run_rejected(self):
        runner = MarketingWorkflowRunner(MarketingPipeline(), SimulatedAgentExecutor(delay=0))
        runner.is_running = True
        with pytest.raises(WorkflowRunningError):
            await runner.run()
        with pytest.raises(WorkflowRunningError):
            runner.reset()

    async def test_callback_errors_are_swallowed(self):
        def boom(agent_type, result):
            raise RuntimeError("ui gone")

        runner = MarketingWorkflowRunner(
            MarketingPipeline(), SimulatedAgentExecutor(delay=0), step_callback=boom
        )
        results = await runner.run()
        assert len(results) == 6

    async def test_reset(self):
        runner = MarketingWorkflowRunner(MarketingPipeline(), SimulatedAgentExecutor(delay=0))
        await runner.run()
        runner.reset()
        assert runner.results == {}
        assert not runner.complete

    def test_result_to_dict(self):
        result = AgentResult(agent_type="design", success=False, error="nope")
        payload = result.to_dict()
        assert payload["agentType"] == "design"
        assert payload["error"] == "nope"
        assert "timestamp" in payload
