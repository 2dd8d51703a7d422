"""
HTTP client for the runs service (cost and lifecycle tracking).

Endpoints:
- POST /v1/runs: open a run
- POST /v1/runs/{id}/costs: append cost line items
- PATCH /v1/runs/{id}: set a terminal status

All calls send X-API-Key. Any non-2xx response raises RunsServiceError.
"""

from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import structlog

from reply_qualification.models.enums import RunStatus
from reply_qualification.runs.exceptions import RunsServiceError


logger = structlog.get_logger(__name__)


class RunParams(BaseModel):
    """Identity tags attached to a new run."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    org_id: Optional[str] = None
    user_id: Optional[str] = None
    app_id: Optional[str] = None
    brand_id: Optional[str] = None
    campaign_id: Optional[str] = None
    parent_run_id: Optional[str] = None
    task_name: str = "qualify-reply"


class CostItem(BaseModel):
    """One cost line item (e.g. input tokens of one call)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    cost_name: str
    cost_source: str
    quantity: int = Field(..., ge=0)


class Run(BaseModel):
    """Run record as returned by the runs service."""

    model_config = ConfigDict(extra="ignore")

    id: str
    status: str = RunStatus.RUNNING.value


class RunsServiceClient:
    """
    Async client for the runs service.

    Every method performs exactly one request and never retries.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        service_name: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize runs service client.

        Args:
            base_url: Runs service base URL
            api_key: Service API key sent as X-API-Key (None if unconfigured)
            service_name: serviceName tag on created runs, also the default appId
            timeout: Request timeout in seconds (None disables the timeout)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.service_name = service_name
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
            logger.debug("Created runs service httpx AsyncClient", base_url=self.base_url)
        return self._client

    async def create_run(self, params: RunParams) -> Run:
        payload = params.model_dump(by_alias=True, exclude_none=True)
        payload["appId"] = params.app_id or self.service_name
        payload["serviceName"] = self.service_name

        data = await self._request("POST", "/v1/runs", json=payload)
        if not isinstance(data, dict) or not data.get("id"):
            raise RunsServiceError("RunsService POST /v1/runs returned no run id")
        run = Run.model_validate(data)
        logger.info("Run created", run_id=run.id, parent_run_id=params.parent_run_id)
        return run

    async def add_costs(self, run_id: str, items: list[CostItem]) -> Any:
        payload = {"items": [item.model_dump(by_alias=True) for item in items]}
        return await self._request("POST", f"/v1/runs/{run_id}/costs", json=payload)

    async def update_run_status(self, run_id: str, status: RunStatus) -> Any:
        return await self._request("PATCH", f"/v1/runs/{run_id}", json={"status": status.value})

    async def _request(self, method: str, path: str, json: dict[str, Any]) -> Any:
        if not self._api_key:
            raise RunsServiceError("RUNS_SERVICE_API_KEY is not configured")

        client = await self._get_client()
        try:
            response = await client.request(
                method,
                path,
                json=json,
                headers={"X-API-Key": self._api_key},
            )
        except httpx.HTTPError as e:
            raise RunsServiceError(
                f"RunsService {method} {path} failed: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        if not response.is_success:
            raise RunsServiceError(
                f"RunsService {method} {path} failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RunsServiceError(
                f"RunsService {method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from e

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed runs service client connection")
