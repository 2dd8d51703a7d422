"""
FastAPI dependency injection for the Reply Qualification Service.

Provides singleton instances of expensive resources (HTTP clients, database
engine, prompt builder) and a factory for the qualification service.
"""

from functools import lru_cache

from fastapi import Depends

from reply_qualification.config import Settings, settings
from reply_qualification.keys.client import KeyServiceClient
from reply_qualification.keys.resolver import CredentialResolver
from reply_qualification.llm.anthropic_client import AnthropicClient
from reply_qualification.llm.base_client import BaseLLMClient
from reply_qualification.llm.pricing import get_pricing
from reply_qualification.llm.prompt_builder import PromptBuilder
from reply_qualification.persistence.database import Database
from reply_qualification.persistence.repository import QualificationRepository
from reply_qualification.qualification.invoker import QualificationInvoker
from reply_qualification.qualification.service import QualificationService
from reply_qualification.runs.bookkeeping import RunBookkeeper
from reply_qualification.runs.client import RunsServiceClient


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_database() -> Database:
    """
    Get singleton database (engine + session factory).

    Returns:
        Database instance
    """
    config = get_settings()
    return Database(
        config.DATABASE_URL,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        echo=config.DEBUG,
    )


@lru_cache()
def get_key_service_client() -> KeyServiceClient:
    """Get singleton key service client (persistent httpx connection pool)."""
    config = get_settings()
    return KeyServiceClient(
        base_url=config.KEY_SERVICE_URL,
        api_key=config.KEY_SERVICE_API_KEY,
        timeout=config.KEY_SERVICE_TIMEOUT,
    )


@lru_cache()
def get_runs_client() -> RunsServiceClient:
    """Get singleton runs service client (persistent httpx connection pool)."""
    config = get_settings()
    return RunsServiceClient(
        base_url=config.RUNS_SERVICE_URL,
        api_key=config.RUNS_SERVICE_API_KEY,
        service_name=config.SERVICE_NAME,
        timeout=config.RUNS_SERVICE_TIMEOUT,
    )


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton LLM client.

    The client memoizes the platform-tier SDK client across requests.
    Fails fast if the configured model has no pricing entry.

    Returns:
        AnthropicClient instance
    """
    config = get_settings()
    if config.LLM_PROVIDER != "anthropic":
        raise ValueError(f"Unsupported LLM provider: {config.LLM_PROVIDER}")
    get_pricing(config.ANTHROPIC_MODEL)
    return AnthropicClient(
        model=config.ANTHROPIC_MODEL,
        max_tokens=config.LLM_MAX_TOKENS,
        timeout=config.LLM_TIMEOUT,
    )


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """
    Get singleton prompt builder.

    Loads Jinja2 templates once and reuses them across requests.
    """
    return PromptBuilder()


def get_repository(database: Database = Depends(get_database)) -> QualificationRepository:
    return QualificationRepository(database)


def get_qualification_service(
    repository: QualificationRepository = Depends(get_repository),
    key_client: KeyServiceClient = Depends(get_key_service_client),
    runs_client: RunsServiceClient = Depends(get_runs_client),
    llm_client: BaseLLMClient = Depends(get_llm_client),
    prompt_builder: PromptBuilder = Depends(get_prompt_builder),
    settings: Settings = Depends(get_settings),
) -> QualificationService:
    """
    Create the qualification service with injected dependencies.

    Note: the service is NOT cached because it is lightweight and stateless.
    All heavy resources (clients, engine, templates) are singletons.
    """
    return QualificationService(
        resolver=CredentialResolver(
            key_client,
            default_app_id=settings.SERVICE_NAME,
            provider=settings.LLM_PROVIDER,
        ),
        invoker=QualificationInvoker(llm_client, prompt_builder),
        bookkeeper=RunBookkeeper(runs_client),
        repository=repository,
    )
