"""
HTTP client for the key service (key vault).

Every lookup is a single GET decorated with the service API key and the
caller audit headers. The response is mapped to one of three variants:

- KeyFound: 2xx with a key in the body
- KeyNotConfigured: 404, the scope has no key configured
- KeyLookupFailed: any other status, an unreadable body or a transport error

Only KeyNotConfigured may trigger a fallback in the resolver.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

import httpx
import structlog

from reply_qualification.keys.exceptions import KeyServiceConfigurationError
from reply_qualification.models.credential_models import CallerContext


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class KeyFound:
    scope: str
    provider: str
    key: str = field(repr=False)


@dataclass(frozen=True)
class KeyNotConfigured:
    scope: str


@dataclass(frozen=True)
class KeyLookupFailed:
    scope: str
    path: str
    status_code: Optional[int]
    body: str

    def describe(self) -> str:
        if self.status_code is None:
            return f"KeyService GET {self.path} failed: {self.body}"
        return f"KeyService GET {self.path} failed ({self.status_code}): {self.body}"


KeyLookupResult = Union[KeyFound, KeyNotConfigured, KeyLookupFailed]


def platform_scope() -> str:
    return "platform"


def org_scope(org_id: str) -> str:
    return f"org:{org_id}"


def app_scope(app_id: str) -> str:
    return f"app:{app_id}"


class KeyServiceClient:
    """
    Async client for the key service decrypt endpoints.

    Endpoints:
    - GET /internal/platform-keys/{provider}/decrypt
    - GET /internal/keys/{provider}/decrypt?orgId=...
    - GET /internal/app-keys/{provider}/decrypt?appId=...

    Keys are never cached here. Each call performs one round trip.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize key service client.

        Args:
            base_url: Key service base URL
            api_key: Service API key sent as X-API-Key (None if unconfigured)
            timeout: Request timeout in seconds (None disables the timeout)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
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
            logger.debug("Created key service httpx AsyncClient", base_url=self.base_url)
        return self._client

    async def get_platform_key(self, provider: str, caller: CallerContext) -> KeyLookupResult:
        return await self._lookup(
            f"/internal/platform-keys/{provider}/decrypt",
            params=None,
            scope=platform_scope(),
            caller=caller,
        )

    async def get_org_key(
        self, provider: str, org_id: str, caller: CallerContext
    ) -> KeyLookupResult:
        return await self._lookup(
            f"/internal/keys/{provider}/decrypt",
            params={"orgId": org_id},
            scope=org_scope(org_id),
            caller=caller,
        )

    async def get_app_key(
        self, provider: str, app_id: str, caller: CallerContext
    ) -> KeyLookupResult:
        return await self._lookup(
            f"/internal/app-keys/{provider}/decrypt",
            params={"appId": app_id},
            scope=app_scope(app_id),
            caller=caller,
        )

    async def _lookup(
        self,
        path: str,
        params: Optional[dict[str, str]],
        scope: str,
        caller: CallerContext,
    ) -> KeyLookupResult:
        if not self._api_key:
            raise KeyServiceConfigurationError(
                "KEY_SERVICE_API_KEY is not configured",
                details={"scope": scope},
            )

        headers = {"X-API-Key": self._api_key, **caller.as_headers()}
        client = await self._get_client()

        try:
            response = await client.get(path, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(
                "Key service request failed",
                path=path,
                scope=scope,
                error=str(e),
                error_type=type(e).__name__,
            )
            return KeyLookupFailed(scope=scope, path=path, status_code=None, body=str(e))

        if response.status_code == 404:
            logger.info("Key not configured", path=path, scope=scope)
            return KeyNotConfigured(scope=scope)

        if not response.is_success:
            logger.warning(
                "Key service returned error status",
                path=path,
                scope=scope,
                status_code=response.status_code,
            )
            return KeyLookupFailed(
                path=path,
                scope=scope,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError:
            return KeyLookupFailed(
                path=path,
                scope=scope,
                status_code=response.status_code,
                body="Response body is not valid JSON",
            )

        key = data.get("key") if isinstance(data, dict) else None
        if not isinstance(key, str) or not key:
            return KeyLookupFailed(
                path=path,
                scope=scope,
                status_code=response.status_code,
                body="Response body has no key",
            )

        logger.debug("Key lookup succeeded", path=path, scope=scope)
        return KeyFound(scope=scope, provider=str(data.get("provider", "")), key=key)

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed key service client connection")
