"""Integration test fixtures.

The full FastAPI app is driven through httpx.ASGITransport. Upstream
services are replaced at the dependency layer:
- key service and runs service: real clients over an httpx.MockTransport
- classification provider: AsyncMock BaseLLMClient returning LLMCompletion
- database: in-memory SQLite
"""

from typing import Optional
from unittest.mock import AsyncMock

import httpx
import pytest

from reply_qualification.api.dependencies import (
    get_database,
    get_key_service_client,
    get_llm_client,
    get_runs_client,
    get_settings,
)
from reply_qualification.keys.client import KeyServiceClient
from reply_qualification.llm.base_client import BaseLLMClient
from reply_qualification.main import app
from reply_qualification.models.llm_models import LLMCompletion
from reply_qualification.runs.client import RunsServiceClient


CLASSIFIER_OUTPUT = (
    '{"classification": "willing_to_meet", "confidence": 0.91, '
    '"reasoning": "Proposes a call on Tuesday", "suggested_action": "forward_to_client", '
    '"extracted_details": {"meeting_preference": "Tuesday 3pm"}}'
)


class UpstreamStub:
    """
    In-process stand-in for the key service and the runs service.

    keys maps an endpoint kind ("platform", "org", "app") to a
    (status_code, body) tuple; kinds without an entry answer 404.
    """

    def __init__(self):
        self.keys: dict[str, tuple[int, object]] = {}
        self.runs_status: Optional[int] = None  # None = healthy
        self.key_requests: list[httpx.Request] = []
        self.run_requests: list[httpx.Request] = []

    def key_handler(self, request: httpx.Request) -> httpx.Response:
        self.key_requests.append(request)
        path = request.url.path
        if path.startswith("/internal/platform-keys/"):
            kind = "platform"
        elif path.startswith("/internal/app-keys/"):
            kind = "app"
        else:
            kind = "org"
        status_code, body = self.keys.get(kind, (404, {"error": "not found"}))
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)

    def runs_handler(self, request: httpx.Request) -> httpx.Response:
        self.run_requests.append(request)
        if self.runs_status is not None:
            return httpx.Response(self.runs_status, text="runs service unavailable")
        if request.method == "POST" and request.url.path == "/v1/runs":
            return httpx.Response(201, json={"id": "run_svc_1", "status": "running"})
        return httpx.Response(200, json={"ok": True})

    def run_calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.run_requests]


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def llm_client():
    client = AsyncMock(spec=BaseLLMClient)
    client.complete.return_value = LLMCompletion(
        content=CLASSIFIER_OUTPUT,
        model="claude-3-haiku-20240307",
        input_tokens=1000,
        output_tokens=500,
        stop_reason="end_turn",
        latency_ms=350,
        raw_response={"id": "msg_int"},
    )
    return client


@pytest.fixture
async def api_client(test_settings, database, upstream, llm_client):
    """AsyncClient bound to the app with every upstream replaced."""
    key_client = KeyServiceClient(
        base_url=test_settings.KEY_SERVICE_URL,
        api_key=test_settings.KEY_SERVICE_API_KEY,
        transport=httpx.MockTransport(upstream.key_handler),
    )
    runs_client = RunsServiceClient(
        base_url=test_settings.RUNS_SERVICE_URL,
        api_key=test_settings.RUNS_SERVICE_API_KEY,
        service_name=test_settings.SERVICE_NAME,
        transport=httpx.MockTransport(upstream.runs_handler),
    )

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_key_service_client] = lambda: key_client
    app.dependency_overrides[get_runs_client] = lambda: runs_client
    app.dependency_overrides[get_llm_client] = lambda: llm_client

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-API-Key": test_settings.REPLY_QUALIFICATION_SERVICE_API_KEY},
    ) as client:
        yield client

    app.dependency_overrides.clear()
    await key_client.close()
    await runs_client.close()
