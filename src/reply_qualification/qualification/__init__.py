"""
Reply qualification core.

Components:
- QualificationInvoker: one classification call, cost computation, tolerant parsing
- QualificationService: run bookkeeping + resolution + invocation + persistence
- response_parser: extraction and coercion of the model's JSON output
"""

from reply_qualification.qualification.invoker import QualificationInvoker
from reply_qualification.qualification.response_parser import (
    ParsedJudgement,
    fallback_judgement,
    parse_classification_output,
)
from reply_qualification.qualification.service import QualificationService

__all__ = [
    "QualificationInvoker",
    "QualificationService",
    "ParsedJudgement",
    "fallback_judgement",
    "parse_classification_output",
]
