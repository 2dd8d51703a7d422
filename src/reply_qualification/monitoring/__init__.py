"""Monitoring module for Prometheus metrics."""

from reply_qualification.monitoring.metrics import (
    key_resolutions_total,
    llm_cost_usd_total,
    llm_latency_seconds,
    llm_tokens_total,
    qualifications_total,
    response_parse_fallbacks_total,
    run_tracker_failures_total,
)

__all__ = [
    "key_resolutions_total",
    "llm_cost_usd_total",
    "llm_latency_seconds",
    "llm_tokens_total",
    "qualifications_total",
    "response_parse_fallbacks_total",
    "run_tracker_failures_total",
]
