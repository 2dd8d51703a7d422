"""
Run tracking against the runs service.

Components:
- RunsServiceClient: create run, add costs, update status
- RunBookkeeper: best-effort async context manager around one classification
"""

from reply_qualification.runs.bookkeeping import RunBookkeeper, TrackedRun, cost_items_for
from reply_qualification.runs.client import CostItem, Run, RunParams, RunsServiceClient
from reply_qualification.runs.exceptions import RunsServiceError

__all__ = [
    "RunBookkeeper",
    "TrackedRun",
    "cost_items_for",
    "CostItem",
    "Run",
    "RunParams",
    "RunsServiceClient",
    "RunsServiceError",
]
