"""
Unit tests for the runs service HTTP client.
"""

import json

import httpx
import pytest

from reply_qualification.models.enums import RunStatus
from reply_qualification.runs.client import CostItem, RunParams
from reply_qualification.runs.exceptions import RunsServiceError


def _ok(body=None, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    return handler


class TestCreateRun:
    @pytest.mark.asyncio
    async def test_payload_tags_identity_and_service(self, recording_transport, make_runs_client):
        transport = recording_transport(_ok({"id": "run_1", "status": "running"}, 201))
        client = make_runs_client(transport)
        params = RunParams(
            org_id="org_123",
            user_id="user_456",
            brand_id="brand_1",
            campaign_id="campaign_1",
            parent_run_id="parent_run_1",
        )

        run = await client.create_run(params)

        assert run.id == "run_1"
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/runs"
        assert request.headers["X-API-Key"] == "runs-service-test-key"
        assert json.loads(request.content) == {
            "orgId": "org_123",
            "userId": "user_456",
            "brandId": "brand_1",
            "campaignId": "campaign_1",
            "parentRunId": "parent_run_1",
            "taskName": "qualify-reply",
            "appId": "reply-qualification-service",
            "serviceName": "reply-qualification-service",
        }

    @pytest.mark.asyncio
    async def test_absent_identity_fields_are_omitted(self, recording_transport, make_runs_client):
        transport = recording_transport(_ok({"id": "run_1"}))
        client = make_runs_client(transport)

        await client.create_run(RunParams(app_id="custom-app"))

        body = transport.json_bodies()[0]
        assert "orgId" not in body
        assert "parentRunId" not in body
        assert body["appId"] == "custom-app"

    @pytest.mark.asyncio
    async def test_response_without_id_raises(self, recording_transport, make_runs_client):
        client = make_runs_client(recording_transport(_ok({"status": "running"})))

        with pytest.raises(RunsServiceError, match="no run id"):
            await client.create_run(RunParams())

    @pytest.mark.asyncio
    async def test_error_status_raises(self, recording_transport, make_runs_client):
        client = make_runs_client(recording_transport(lambda r: httpx.Response(500, text="oops")))

        with pytest.raises(RunsServiceError) as exc_info:
            await client.create_run(RunParams())

        assert exc_info.value.status_code == 500
        assert "oops" in exc_info.value.message


class TestCostsAndStatus:
    @pytest.mark.asyncio
    async def test_add_costs_wraps_items(self, recording_transport, make_runs_client):
        transport = recording_transport(_ok({"ok": True}))
        client = make_runs_client(transport)

        await client.add_costs(
            "run_1",
            [
                CostItem(cost_name="anthropic-haiku-4.5-tokens-input", cost_source="org", quantity=1000),
                CostItem(cost_name="anthropic-haiku-4.5-tokens-output", cost_source="org", quantity=500),
            ],
        )

        request = transport.requests[0]
        assert request.url.path == "/v1/runs/run_1/costs"
        assert json.loads(request.content) == {
            "items": [
                {"costName": "anthropic-haiku-4.5-tokens-input", "costSource": "org", "quantity": 1000},
                {"costName": "anthropic-haiku-4.5-tokens-output", "costSource": "org", "quantity": 500},
            ]
        }

    @pytest.mark.asyncio
    async def test_update_status_patches_run(self, recording_transport, make_runs_client):
        transport = recording_transport(_ok())
        client = make_runs_client(transport)

        result = await client.update_run_status("run_1", RunStatus.COMPLETED)

        assert result is None
        request = transport.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/v1/runs/run_1"
        assert json.loads(request.content) == {"status": "completed"}


class TestFailures:
    @pytest.mark.asyncio
    async def test_missing_api_key_raises_before_request(self, recording_transport, make_runs_client):
        transport = recording_transport(_ok({"id": "run_1"}))
        client = make_runs_client(transport, api_key=None)

        with pytest.raises(RunsServiceError, match="RUNS_SERVICE_API_KEY"):
            await client.create_run(RunParams())

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, make_runs_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_runs_client(httpx.MockTransport(handler))

        with pytest.raises(RunsServiceError) as exc_info:
            await client.update_run_status("run_1", RunStatus.FAILED)

        assert exc_info.value.details["error_type"] == "ReadTimeout"
        await client.close()
