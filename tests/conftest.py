"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from typing import Any, Dict

import pytest

from reply_qualification.config import Settings
from reply_qualification.models.credential_models import (
    CallerContext,
    IdentityContext,
    ResolvedCredential,
)
from reply_qualification.models.enums import Classification, SourceTier
from reply_qualification.models.output_models import QualificationResult
from reply_qualification.persistence.database import Database
from reply_qualification.persistence.repository import QualificationRepository


TEST_SERVICE_API_KEY = "test-service-key"


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.KEY_SERVICE_URL = "http://custom-keys"
    """
    return Settings(
        # === Application ===
        APP_NAME="Reply Qualification Service (Test)",
        APP_VERSION="0.1.0",
        SERVICE_NAME="reply-qualification-service",
        DEBUG=False,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Auth & upstream services ===
        REPLY_QUALIFICATION_SERVICE_API_KEY=TEST_SERVICE_API_KEY,
        KEY_SERVICE_URL="http://keys.test",
        KEY_SERVICE_API_KEY="key-service-test-key",
        RUNS_SERVICE_URL="http://runs.test",
        RUNS_SERVICE_API_KEY="runs-service-test-key",

        # === LLM ===
        ANTHROPIC_MODEL="claude-3-haiku-20240307",
        LLM_MAX_TOKENS=1024,

        # === Database ===
        DATABASE_URL="sqlite+aiosqlite:///:memory:",  # In-memory for tests
        DB_AUTO_CREATE=True,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def caller_context() -> CallerContext:
    return CallerContext(
        caller_service="reply-qualification-service",
        caller_method="POST",
        caller_path="/qualify",
    )


@pytest.fixture
def org_identity() -> IdentityContext:
    return IdentityContext(
        org_id="org_123",
        user_id="user_456",
        brand_id="brand_1",
        campaign_id="campaign_1",
        parent_run_id="parent_run_1",
    )


@pytest.fixture
def platform_credential() -> ResolvedCredential:
    return ResolvedCredential(api_key="sk-ant-platform", source_tier=SourceTier.PLATFORM)


@pytest.fixture
def org_credential() -> ResolvedCredential:
    return ResolvedCredential(api_key="sk-ant-org", source_tier=SourceTier.ORG)


@pytest.fixture
def qualify_payload() -> Dict[str, Any]:
    """Minimal valid POST /qualify body (camelCase, as sent on the wire)."""
    return {
        "sourceService": "mcpfactory",
        "sourceOrgId": "source_org_1",
        "sourceRefId": "campaign_run_42",
        "orgId": "org_123",
        "userId": "user_456",
        "brandId": "brand_1",
        "campaignId": "campaign_1",
        "runId": "parent_run_1",
        "fromEmail": "prospect@example.com",
        "toEmail": "sales@example.com",
        "subject": "Re: Quick question",
        "bodyText": "Sounds great, can we talk Tuesday at 3pm?",
    }


@pytest.fixture
def create_test_result():
    """Factory fixture to create QualificationResult with custom values.

    Usage:
        def test_something(create_test_result):
            result = create_test_result(source_tier=SourceTier.ORG)
    """
    def _create(
        classification: Classification = Classification.WILLING_TO_MEET,
        confidence: float = 0.92,
        input_tokens: int = 1000,
        output_tokens: int = 500,
        cost_usd: float = 0.000875,
        source_tier: SourceTier = SourceTier.PLATFORM,
        model: str = "claude-3-haiku-20240307",
    ) -> QualificationResult:
        return QualificationResult(
            classification=classification,
            confidence=confidence,
            reasoning="Asked for a call on Tuesday",
            suggested_action="forward_to_client",
            extracted_details={"meeting_preference": "Tuesday 3pm"},
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=cost_usd,
            source_tier=source_tier,
            raw_provider_response={"id": "msg_test"},
        )

    return _create


@pytest.fixture
async def database():
    """In-memory SQLite database with all tables created."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def repository(database) -> QualificationRepository:
    return QualificationRepository(database)
