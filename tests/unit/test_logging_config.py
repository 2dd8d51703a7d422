"""Unit tests for logging processors."""

from reply_qualification.logging_config import REDACTED, redact_secrets, service_context


def test_redacts_top_level_secret_keys():
    event = redact_secrets(None, "info", {"event": "x", "api_key": "sk-ant-123", "org_id": "org_1"})

    assert event["api_key"] == REDACTED
    assert event["org_id"] == "org_1"


def test_redacts_inside_header_dicts():
    event = redact_secrets(
        None,
        "info",
        {"event": "x", "headers": {"X-API-Key": "secret", "x-caller-path": "/qualify"}},
    )

    assert event["headers"] == {"X-API-Key": REDACTED, "x-caller-path": "/qualify"}


def test_service_context_does_not_override():
    processor = service_context("reply-qualification-service", "0.1.0")

    event = processor(None, "info", {"event": "x", "version": "custom"})

    assert event["service"] == "reply-qualification-service"
    assert event["version"] == "custom"
