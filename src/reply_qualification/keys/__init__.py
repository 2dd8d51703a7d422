"""
Credential resolution against the key service.

Components:
- KeyServiceClient: GETs keys from the key service, returns lookup variants
- CredentialResolver: explicit / legacy-fallback precedence policy
- exceptions: resolution errors and the failure-reason classifier
"""

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
    KeyResolutionFailure,
    KeyServiceConfigurationError,
    KeyServiceError,
    MissingOrganizationError,
    key_resolution_failure_reason,
)
from reply_qualification.keys.resolver import (
    CredentialResolver,
    ExplicitMode,
    LegacyFallbackMode,
    resolution_mode_for,
)

__all__ = [
    "KeyFound",
    "KeyLookupFailed",
    "KeyLookupResult",
    "KeyNotConfigured",
    "KeyServiceClient",
    "KeyNotConfiguredError",
    "KeyResolutionError",
    "KeyResolutionFailure",
    "KeyServiceConfigurationError",
    "KeyServiceError",
    "MissingOrganizationError",
    "key_resolution_failure_reason",
    "CredentialResolver",
    "ExplicitMode",
    "LegacyFallbackMode",
    "resolution_mode_for",
]
