"""Custom Prometheus metrics for the Reply Qualification Service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- key_resolutions_total{outcome!="success"} (orgs without usable credentials)
- run_tracker_failures_total (run tracker unreachable, costs not recorded)
- llm_latency_seconds (provider slowdowns)
"""

from prometheus_client import Counter, Histogram

# === Qualification Metrics ===

qualifications_total = Counter(
    "qualifications_total",
    "Total qualified replies by classification and credential tier",
    ["classification", "source_tier"],
)
"""
Qualification counter by classification and credential tier.

Labels:
- classification: willing_to_meet, interested, ..., other
- source_tier: platform, org, app

A rising share of "other" usually means the model output failed to parse.
"""

# === Credential Resolution Metrics ===

key_resolutions_total = Counter(
    "key_resolutions_total",
    "Credential resolutions by mode, tier and outcome",
    ["mode", "source_tier", "outcome"],
)
"""
Credential resolution counter.

Labels:
- mode: explicit_platform, explicit_byok, explicit_app, legacy_fallback
- source_tier: platform, org, app, none (failed resolution)
- outcome: success, missing_org_id, not_configured, upstream_failure, service_misconfigured
"""

# === Run Tracker Metrics ===

run_tracker_failures_total = Counter(
    "run_tracker_failures_total",
    "Best-effort run tracker calls that failed",
    ["operation"],
)
"""
Run tracker side-channel failures.

Labels:
- operation: create_run, add_costs, complete_run, fail_run

Failures here never affect the response but mean cost was not recorded.

Alert thresholds:
- WARN: any add_costs failure (unbilled tokens)
"""

# === LLM Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM classification call latency in seconds",
    ["model", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by direction and credential tier",
    ["model", "direction", "source_tier"],
)
"""
LLM token usage.

Labels:
- model: Model name (e.g., claude-3-haiku-20240307)
- direction: input, output
- source_tier: platform, org, app
"""

llm_cost_usd_total = Counter(
    "llm_cost_usd_total",
    "Total LLM spend in USD by model and credential tier",
    ["model", "source_tier"],
)

# === Output Parsing Metrics ===

response_parse_fallbacks_total = Counter(
    "response_parse_fallbacks_total",
    "Model outputs replaced by the fallback classification",
    ["reason"],
)
"""
Fallback substitutions by reason.

Labels:
- reason: no_json_object, json_decode_error, not_json_object

Alert thresholds:
- WARN: rate > 2% of qualifications (prompt or model regression)
"""
