"""
LLM-specific data models for the request/response cycle.

These models are internal to the LLM layer and hide the provider SDK types
from the qualification logic.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class LLMCompletion(BaseModel):
    """
    Text completion returned by a provider client.

    Contains the raw generated text plus usage metadata. Parsing of the
    content into a QualificationResult happens in the qualification layer.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Concatenated text blocks of the reply")
    model: str = Field(..., description="Model that served the request")
    input_tokens: int = Field(..., ge=0)
    output_tokens: int = Field(..., ge=0)
    stop_reason: str | None = Field(default=None, description="end_turn, max_tokens, ...")
    latency_ms: int = Field(..., ge=0, description="Round-trip latency in milliseconds")
    raw_response: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific payload (for debugging)",
    )
