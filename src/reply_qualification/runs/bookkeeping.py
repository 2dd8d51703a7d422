"""
Best-effort run bookkeeping around one classification.

RunBookkeeper.track() is an async context manager:

    async with bookkeeper.track(params) as run:
        result = await invoker.qualify(...)
        run.record_usage(result)

On entry a run is opened (a failure leaves run.run_id as None). On normal
exit the token cost items are appended and the run is marked completed. If
the block raises (cancellation included), the run is marked failed and the original exception is
re-raised unchanged. Every runs service call is caught and logged on its own;
none of them can fail the block.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

import structlog

from reply_qualification.llm.pricing import get_pricing
from reply_qualification.models.enums import RunStatus
from reply_qualification.models.output_models import QualificationResult
from reply_qualification.monitoring.metrics import run_tracker_failures_total
from reply_qualification.runs.client import CostItem, RunParams, RunsServiceClient


logger = structlog.get_logger(__name__)


class TrackedRun:
    """Handle yielded by RunBookkeeper.track()."""

    def __init__(self, run_id: Optional[str]):
        self.run_id = run_id
        self.result: Optional[QualificationResult] = None

    def record_usage(self, result: QualificationResult) -> None:
        self.result = result


def cost_items_for(result: QualificationResult) -> list[CostItem]:
    """Input/output token cost items, tagged with the tier used for the call."""
    pricing = get_pricing(result.model)
    return [
        CostItem(
            cost_name=pricing.input_cost_name,
            cost_source=result.source_tier.value,
            quantity=result.input_tokens,
        ),
        CostItem(
            cost_name=pricing.output_cost_name,
            cost_source=result.source_tier.value,
            quantity=result.output_tokens,
        ),
    ]


class RunBookkeeper:
    """Opens, costs and closes runs in the runs service."""

    def __init__(self, runs_client: RunsServiceClient):
        self.runs_client = runs_client

    @asynccontextmanager
    async def track(self, params: RunParams) -> AsyncIterator[TrackedRun]:
        run_id = await self._open(params)
        tracked = TrackedRun(run_id)

        try:
            yield tracked
        # Cancellation marks the run failed too
        except BaseException:
            if run_id is not None:
                await self._best_effort(
                    "fail_run",
                    run_id,
                    lambda: self.runs_client.update_run_status(run_id, RunStatus.FAILED),
                )
            raise

        if run_id is None:
            return

        if tracked.result is not None:
            result = tracked.result
            await self._best_effort(
                "add_costs",
                run_id,
                lambda: self.runs_client.add_costs(run_id, cost_items_for(result)),
            )
        await self._best_effort(
            "complete_run",
            run_id,
            lambda: self.runs_client.update_run_status(run_id, RunStatus.COMPLETED),
        )

    async def _open(self, params: RunParams) -> Optional[str]:
        try:
            run = await self.runs_client.create_run(params)
        except Exception as e:
            run_tracker_failures_total.labels(operation="create_run").inc()
            logger.warning(
                "RunsService createRun failed, continuing without run",
                org_id=params.org_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        return run.id

    async def _best_effort(
        self,
        operation: str,
        run_id: str,
        call: Callable[[], Awaitable[object]],
    ) -> None:
        try:
            await call()
        except Exception as e:
            run_tracker_failures_total.labels(operation=operation).inc()
            logger.warning(
                "RunsService call failed",
                operation=operation,
                run_id=run_id,
                error=str(e),
                error_type=type(e).__name__,
            )
