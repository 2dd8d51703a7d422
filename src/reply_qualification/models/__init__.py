"""
Pydantic data models for the Reply Qualification Service.

Includes:
- Enums (Classification, KeySource, SourceTier, RunStatus)
- Credential models (CallerContext, IdentityContext, ResolvedCredential)
- Input models (EmailContent, QualifyRequest)
- Output models (QualificationResult, QualificationOutcome)
- LLM models (LLMCompletion)
"""

from reply_qualification.models.credential_models import (
    CallerContext,
    IdentityContext,
    ResolvedCredential,
)
from reply_qualification.models.enums import (
    Classification,
    KeySource,
    RunStatus,
    SourceTier,
)
from reply_qualification.models.input_models import EmailContent, QualifyRequest
from reply_qualification.models.llm_models import LLMCompletion
from reply_qualification.models.output_models import (
    QualificationOutcome,
    QualificationResult,
)

__all__ = [
    # Enums
    "Classification",
    "KeySource",
    "RunStatus",
    "SourceTier",
    # Credential models
    "CallerContext",
    "IdentityContext",
    "ResolvedCredential",
    # Input models
    "EmailContent",
    "QualifyRequest",
    # Output models
    "QualificationResult",
    "QualificationOutcome",
    # LLM models
    "LLMCompletion",
]
