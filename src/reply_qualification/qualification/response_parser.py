"""
Tolerant parser for the classifier's free-form output.

The model is asked for a JSON object but may wrap it in prose or markdown
fences. The outermost {...} span is extracted greedily and decoded. When no
object can be decoded the fixed fallback judgement is returned; parsing never
raises.
"""

import json
import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
import structlog

from reply_qualification.models.enums import Classification
from reply_qualification.monitoring.metrics import response_parse_fallbacks_total


logger = structlog.get_logger(__name__)


_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

DEFAULT_CONFIDENCE = 0.5
DEFAULT_SUGGESTED_ACTION = "ignore"
FALLBACK_REASONING = "Failed to parse AI response"


class ParsedJudgement(BaseModel):
    """Classification fields extracted from one model reply."""

    model_config = ConfigDict(frozen=True)

    classification: Classification
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    suggested_action: str
    extracted_details: dict[str, Any] = Field(default_factory=dict)


def fallback_judgement() -> ParsedJudgement:
    return ParsedJudgement(
        classification=Classification.OTHER,
        confidence=DEFAULT_CONFIDENCE,
        reasoning=FALLBACK_REASONING,
        suggested_action=DEFAULT_SUGGESTED_ACTION,
        extracted_details={},
    )


def coerce_classification(value: Any) -> Classification:
    try:
        return Classification(value)
    except (TypeError, ValueError):
        return Classification.OTHER


def coerce_confidence(value: Any) -> float:
    """
    Coerce a confidence value to a float in [0, 1].

    Numbers and numeric strings inside [0, 1] pass through. Anything else
    (missing, booleans, non-numeric, NaN, out of range) becomes 0.5.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_CONFIDENCE
    if isinstance(value, str):
        value = value.strip()
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
        return DEFAULT_CONFIDENCE
    return confidence


def _text_or(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)


def parse_classification_output(content: str) -> ParsedJudgement:
    """
    Parse the model's reply into a ParsedJudgement.

    Args:
        content: Text of the model reply

    Returns:
        Judgement with coerced fields, or the fallback judgement when no
        JSON object could be decoded
    """
    match = _JSON_OBJECT.search(content or "")
    if match is None:
        response_parse_fallbacks_total.labels(reason="no_json_object").inc()
        logger.warning("No JSON object in model output", content_length=len(content or ""))
        return fallback_judgement()

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        response_parse_fallbacks_total.labels(reason="json_decode_error").inc()
        logger.warning("Failed to decode model output", error=e.msg, line=e.lineno, col=e.colno)
        return fallback_judgement()

    if not isinstance(parsed, dict):
        response_parse_fallbacks_total.labels(reason="not_json_object").inc()
        return fallback_judgement()

    details = parsed.get("extracted_details")
    return ParsedJudgement(
        classification=coerce_classification(parsed.get("classification")),
        confidence=coerce_confidence(parsed.get("confidence")),
        reasoning=_text_or(parsed.get("reasoning"), ""),
        suggested_action=_text_or(parsed.get("suggested_action"), DEFAULT_SUGGESTED_ACTION),
        extracted_details=details if isinstance(details, dict) else {},
    )
