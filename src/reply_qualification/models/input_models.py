"""
Input data models for the Reply Qualification Service.

QualifyRequest mirrors the JSON body accepted by POST /qualify. Field names
are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl
from pydantic.alias_generators import to_camel

from reply_qualification.models.enums import KeySource


class EmailContent(BaseModel):
    """The parts of an email reply that are sent to the classifier."""

    model_config = ConfigDict(frozen=True)

    subject: Optional[str] = None
    body_text: Optional[str] = None
    body_html: Optional[str] = None


class QualifyRequest(BaseModel):
    """
    Request to qualify a single email reply.

    Identity fields (org_id, user_id) may also be supplied through the
    x-org-id / x-user-id headers; the body takes precedence.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Source identification (which project/service sent this)
    source_service: str = Field(..., min_length=1, description="Calling service, e.g. 'mcpfactory'")
    source_org_id: str = Field(..., min_length=1, description="Organization id in the calling service")
    source_ref_id: Optional[str] = Field(None, description="Campaign run id, pitch id, etc.")

    # Identity and key selection
    app_id: Optional[str] = None
    org_id: Optional[str] = None
    user_id: Optional[str] = None
    key_source: Optional[KeySource] = Field(
        None,
        description="Explicit credential source; omit for org-then-app fallback",
    )

    # Context for aggregation
    brand_id: Optional[str] = None
    campaign_id: Optional[str] = None
    run_id: Optional[str] = Field(None, description="Parent run id in the runs service")

    # Email content
    from_email: EmailStr
    to_email: EmailStr
    subject: Optional[str] = None
    body_text: Optional[str] = None
    body_html: Optional[str] = None
    in_reply_to_message_id: Optional[str] = None
    email_received_at: Optional[datetime] = None

    webhook_url: Optional[HttpUrl] = None

    def email_content(self) -> EmailContent:
        return EmailContent(
            subject=self.subject or None,
            body_text=self.body_text or None,
            body_html=self.body_html or None,
        )
