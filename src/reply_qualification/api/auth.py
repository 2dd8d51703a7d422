"""
Service-to-service authentication and identity headers.

Callers authenticate with X-API-Key. Identity (org/user) can be sent in the
body or in the x-org-id / x-user-id headers; the body wins.
"""

import secrets
from typing import Optional

from fastapi import Depends, Header, Request

from reply_qualification.api.dependencies import get_settings
from reply_qualification.api.exceptions import AuthenticationError
from reply_qualification.config import Settings
from reply_qualification.models.credential_models import CallerContext, IdentityContext
from reply_qualification.models.input_models import QualifyRequest


async def require_api_key(
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
    settings: Settings = Depends(get_settings),
) -> None:
    if not x_api_key:
        raise AuthenticationError("Missing X-API-Key header")

    expected = settings.REPLY_QUALIFICATION_SERVICE_API_KEY
    if not expected or not secrets.compare_digest(x_api_key, expected):
        raise AuthenticationError("Invalid API key")


class IdentityHeaders:
    """x-org-id / x-user-id headers of the inbound request."""

    def __init__(
        self,
        x_org_id: Optional[str] = Header(default=None, alias="x-org-id"),
        x_user_id: Optional[str] = Header(default=None, alias="x-user-id"),
    ):
        self.org_id = x_org_id or None
        self.user_id = x_user_id or None


def identity_for(request: QualifyRequest, headers: IdentityHeaders) -> IdentityContext:
    return IdentityContext(
        org_id=request.org_id or headers.org_id,
        user_id=request.user_id or headers.user_id,
        app_id=request.app_id,
        brand_id=request.brand_id,
        campaign_id=request.campaign_id,
        parent_run_id=request.run_id,
    )


def caller_context_for(request: Request, service_name: str) -> CallerContext:
    return CallerContext(
        caller_service=service_name,
        caller_method=request.method,
        caller_path=request.url.path,
    )
