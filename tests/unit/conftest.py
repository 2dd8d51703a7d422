"""Unit test fixtures (mocks and stubs).

Provides mock objects and httpx mock transports for testing without
external services.
"""

import json
from typing import Callable

import httpx
import pytest

from reply_qualification.keys.client import KeyServiceClient
from reply_qualification.runs.client import RunsServiceClient


class RecordingTransport(httpx.MockTransport):
    """httpx.MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def json_bodies(self) -> list[dict]:
        return [json.loads(r.content) if r.content else None for r in self.requests]


@pytest.fixture
def recording_transport():
    """Factory: build a RecordingTransport from a handler function."""
    return RecordingTransport


@pytest.fixture
def make_key_client():
    """Factory: KeyServiceClient wired to a mock transport."""
    def _create(transport: httpx.AsyncBaseTransport, api_key: str | None = "key-service-test-key"):
        return KeyServiceClient(
            base_url="http://keys.test",
            api_key=api_key,
            transport=transport,
        )

    return _create


@pytest.fixture
def make_runs_client():
    """Factory: RunsServiceClient wired to a mock transport."""
    def _create(transport: httpx.AsyncBaseTransport, api_key: str | None = "runs-service-test-key"):
        return RunsServiceClient(
            base_url="http://runs.test",
            api_key=api_key,
            service_name="reply-qualification-service",
            transport=transport,
        )

    return _create
