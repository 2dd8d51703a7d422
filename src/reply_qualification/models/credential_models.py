"""
Identity and credential models threaded through a single request.

None of these are persisted. ResolvedCredential wraps the API key in a
SecretStr so it never shows up in reprs or log events.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from reply_qualification.models.enums import SourceTier


class CallerContext(BaseModel):
    """Audit metadata sent to the key service with every lookup."""

    model_config = ConfigDict(frozen=True)

    caller_service: str = Field(..., description="Service making the call")
    caller_method: str = Field(..., description="HTTP method of the inbound request")
    caller_path: str = Field(..., description="Path of the inbound request")

    def as_headers(self) -> dict[str, str]:
        return {
            "x-caller-service": self.caller_service,
            "x-caller-method": self.caller_method,
            "x-caller-path": self.caller_path,
        }


class IdentityContext(BaseModel):
    """Organizational identity of an inbound request."""

    model_config = ConfigDict(frozen=True)

    org_id: Optional[str] = None
    user_id: Optional[str] = None
    app_id: Optional[str] = None
    brand_id: Optional[str] = None
    campaign_id: Optional[str] = None
    parent_run_id: Optional[str] = None


class ResolvedCredential(BaseModel):
    """Upstream API key plus the tier that supplied it."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    source_tier: SourceTier
