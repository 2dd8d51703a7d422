"""
Credential resolution for the upstream AI provider.

The resolution mode is picked once per request:

- ExplicitMode(key_source): the caller asked for one specific source. Only
  that path is tried and "not configured" is terminal.
- LegacyFallbackMode: no preference given. The org key is tried first (when
  an org id is known), then the app key. Only "not configured" falls through.

A failed lookup (non-404 status or transport error) aborts resolution in both
modes. Resolved keys are never cached.
"""

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import SecretStr
import structlog

from reply_qualification.keys.client import (
    KeyFound,
    KeyLookupFailed,
    KeyLookupResult,
    KeyNotConfigured,
    KeyServiceClient,
)
from reply_qualification.keys.exceptions import (
    KeyNotConfiguredError,
    KeyResolutionError,
    KeyServiceError,
    MissingOrganizationError,
)
from reply_qualification.models.credential_models import (
    CallerContext,
    IdentityContext,
    ResolvedCredential,
)
from reply_qualification.models.enums import KeySource, SourceTier
from reply_qualification.monitoring.metrics import key_resolutions_total


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ExplicitMode:
    key_source: KeySource

    @property
    def label(self) -> str:
        return f"explicit_{self.key_source.value}"


@dataclass(frozen=True)
class LegacyFallbackMode:
    @property
    def label(self) -> str:
        return "legacy_fallback"


ResolutionMode = Union[ExplicitMode, LegacyFallbackMode]


def resolution_mode_for(key_source: Optional[KeySource]) -> ResolutionMode:
    if key_source is None:
        return LegacyFallbackMode()
    return ExplicitMode(KeySource(key_source))


class CredentialResolver:
    """
    Resolves the API key used for one classification call.

    Usage:
        resolver = CredentialResolver(key_client, default_app_id="reply-qualification-service")
        credential = await resolver.resolve(identity, key_source, caller)
        credential.source_tier  # platform | org | app
    """

    def __init__(
        self,
        key_client: KeyServiceClient,
        default_app_id: str,
        provider: str = "anthropic",
    ):
        """
        Args:
            key_client: Client for the key service
            default_app_id: App id used for app-scoped lookups when the request has none
            provider: Provider name used in key service paths
        """
        self.key_client = key_client
        self.default_app_id = default_app_id
        self.provider = provider
        self._provider_label = provider.capitalize()

    async def resolve(
        self,
        identity: IdentityContext,
        key_source: Optional[KeySource],
        caller: CallerContext,
    ) -> ResolvedCredential:
        """
        Resolve a credential for the given identity.

        Args:
            identity: Org/app identity of the inbound request
            key_source: Explicit key source preference (None for legacy fallback)
            caller: Audit metadata forwarded to the key service

        Returns:
            ResolvedCredential with the key and the tier that supplied it

        Raises:
            MissingOrganizationError: byok requested without org id (no network call made)
            KeyNotConfiguredError: requested scope(s) have no key
            KeyServiceError: key service failed with anything other than 404
            KeyServiceConfigurationError: this service has no key service API key
        """
        mode = resolution_mode_for(key_source)

        try:
            if isinstance(mode, ExplicitMode):
                credential = await self._resolve_explicit(mode, identity, caller)
            else:
                credential = await self._resolve_legacy(identity, caller)
        except KeyResolutionError as e:
            key_resolutions_total.labels(
                mode=mode.label, source_tier="none", outcome=e.reason.value
            ).inc()
            logger.warning(
                "Credential resolution failed",
                mode=mode.label,
                org_id=identity.org_id,
                reason=e.reason.value,
                error=e.message,
            )
            raise

        key_resolutions_total.labels(
            mode=mode.label, source_tier=credential.source_tier.value, outcome="success"
        ).inc()
        logger.info(
            "Credential resolved",
            mode=mode.label,
            org_id=identity.org_id,
            source_tier=credential.source_tier.value,
        )
        return credential

    async def _resolve_explicit(
        self,
        mode: ExplicitMode,
        identity: IdentityContext,
        caller: CallerContext,
    ) -> ResolvedCredential:
        if mode.key_source == KeySource.PLATFORM:
            result = await self.key_client.get_platform_key(self.provider, caller)
            return self._unwrap(
                result,
                SourceTier.PLATFORM,
                f"No {self._provider_label} platform key found",
            )

        if mode.key_source == KeySource.BYOK:
            if not identity.org_id:
                raise MissingOrganizationError('keySource "byok" requires orgId')
            result = await self.key_client.get_org_key(self.provider, identity.org_id, caller)
            return self._unwrap(
                result,
                SourceTier.ORG,
                f"No BYOK {self._provider_label} key found for org {identity.org_id}",
            )

        app_id = identity.app_id or self.default_app_id
        result = await self.key_client.get_app_key(self.provider, app_id, caller)
        return self._unwrap(
            result,
            SourceTier.APP,
            f"No {self._provider_label} app key found for app {app_id}",
        )

    async def _resolve_legacy(
        self,
        identity: IdentityContext,
        caller: CallerContext,
    ) -> ResolvedCredential:
        attempted: list[str] = []

        if identity.org_id:
            result = await self.key_client.get_org_key(self.provider, identity.org_id, caller)
            if not isinstance(result, KeyNotConfigured):
                return self._unwrap(result, SourceTier.ORG, "")
            attempted.append(result.scope)
            logger.debug("Org key not configured, falling back to app key", org_id=identity.org_id)

        app_id = identity.app_id or self.default_app_id
        result = await self.key_client.get_app_key(self.provider, app_id, caller)
        if not isinstance(result, KeyNotConfigured):
            return self._unwrap(result, SourceTier.APP, "")
        attempted.append(result.scope)

        raise KeyNotConfiguredError(
            f"No {self._provider_label} key found (tried {', '.join(attempted)})",
            attempted_scopes=attempted,
        )

    @staticmethod
    def _unwrap(
        result: KeyLookupResult,
        tier: SourceTier,
        not_configured_message: str,
    ) -> ResolvedCredential:
        if isinstance(result, KeyFound):
            return ResolvedCredential(api_key=SecretStr(result.key), source_tier=tier)
        if isinstance(result, KeyLookupFailed):
            raise KeyServiceError(
                result.describe(),
                status_code=result.status_code,
                body=result.body,
                details={"scope": result.scope},
            )
        raise KeyNotConfiguredError(not_configured_message, attempted_scopes=[result.scope])
