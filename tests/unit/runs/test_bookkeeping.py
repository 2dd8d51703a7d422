"""
Unit tests for RunBookkeeper (best-effort run lifecycle).
"""

import asyncio
from unittest.mock import AsyncMock, call

import pytest

from reply_qualification.models.enums import RunStatus, SourceTier
from reply_qualification.runs.bookkeeping import RunBookkeeper, cost_items_for
from reply_qualification.runs.client import CostItem, Run, RunParams, RunsServiceClient
from reply_qualification.runs.exceptions import RunsServiceError


@pytest.fixture
def runs_client():
    client = AsyncMock(spec=RunsServiceClient)
    client.create_run.return_value = Run(id="run_1", status="running")
    return client


class TestCostItems:
    def test_items_carry_tier_and_token_counts(self, create_test_result):
        result = create_test_result(input_tokens=1200, output_tokens=80, source_tier=SourceTier.ORG)

        items = cost_items_for(result)

        assert items == [
            CostItem(cost_name="anthropic-haiku-4.5-tokens-input", cost_source="org", quantity=1200),
            CostItem(cost_name="anthropic-haiku-4.5-tokens-output", cost_source="org", quantity=80),
        ]


class TestSuccessfulBlock:
    @pytest.mark.asyncio
    async def test_costs_then_completed(self, runs_client, create_test_result):
        bookkeeper = RunBookkeeper(runs_client)
        result = create_test_result(source_tier=SourceTier.PLATFORM)

        async with bookkeeper.track(RunParams(org_id="org_123")) as run:
            assert run.run_id == "run_1"
            run.record_usage(result)

        runs_client.create_run.assert_awaited_once_with(RunParams(org_id="org_123"))
        runs_client.add_costs.assert_awaited_once_with("run_1", cost_items_for(result))
        runs_client.update_run_status.assert_awaited_once_with("run_1", RunStatus.COMPLETED)

    @pytest.mark.asyncio
    async def test_no_usage_recorded_skips_costs(self, runs_client):
        async with RunBookkeeper(runs_client).track(RunParams()):
            pass

        runs_client.add_costs.assert_not_awaited()
        runs_client.update_run_status.assert_awaited_once_with("run_1", RunStatus.COMPLETED)


class TestFailingBlock:
    @pytest.mark.asyncio
    async def test_marks_failed_and_reraises_original(self, runs_client):
        original = RuntimeError("llm exploded")

        with pytest.raises(RuntimeError) as exc_info:
            async with RunBookkeeper(runs_client).track(RunParams()):
                raise original

        assert exc_info.value is original
        runs_client.add_costs.assert_not_awaited()
        assert runs_client.update_run_status.await_args_list == [call("run_1", RunStatus.FAILED)]

    @pytest.mark.asyncio
    async def test_cancelled_block_marks_failed(self, runs_client):
        with pytest.raises(asyncio.CancelledError):
            async with RunBookkeeper(runs_client).track(RunParams()):
                raise asyncio.CancelledError()

        assert runs_client.update_run_status.await_args_list == [call("run_1", RunStatus.FAILED)]

    @pytest.mark.asyncio
    async def test_fail_run_error_does_not_mask_original(self, runs_client):
        runs_client.update_run_status.side_effect = RunsServiceError("runs down")

        with pytest.raises(ValueError, match="bad reply"):
            async with RunBookkeeper(runs_client).track(RunParams()):
                raise ValueError("bad reply")


class TestRunsServiceFailures:
    @pytest.mark.asyncio
    async def test_create_run_failure_yields_no_run_id(self, runs_client, create_test_result):
        runs_client.create_run.side_effect = RunsServiceError("runs down", status_code=503)

        async with RunBookkeeper(runs_client).track(RunParams()) as run:
            assert run.run_id is None
            run.record_usage(create_test_result())

        runs_client.add_costs.assert_not_awaited()
        runs_client.update_run_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_run_failure_then_block_error_propagates(self, runs_client):
        runs_client.create_run.side_effect = RunsServiceError("runs down")

        with pytest.raises(KeyError):
            async with RunBookkeeper(runs_client).track(RunParams()):
                raise KeyError("missing")

        runs_client.update_run_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_costs_failure_still_completes(self, runs_client, create_test_result):
        runs_client.add_costs.side_effect = RunsServiceError("costs rejected", status_code=400)

        async with RunBookkeeper(runs_client).track(RunParams()) as run:
            run.record_usage(create_test_result())

        runs_client.update_run_status.assert_awaited_once_with("run_1", RunStatus.COMPLETED)

    @pytest.mark.asyncio
    async def test_complete_failure_is_swallowed(self, runs_client, create_test_result):
        runs_client.update_run_status.side_effect = RunsServiceError("patch failed")

        async with RunBookkeeper(runs_client).track(RunParams()) as run:
            run.record_usage(create_test_result())

        runs_client.add_costs.assert_awaited_once()
