"""
Unit tests for application startup and shutdown.
"""

from unittest.mock import AsyncMock

import pytest

from reply_qualification.api import dependencies
from reply_qualification.api.dependencies import (
    get_database,
    get_key_service_client,
    get_llm_client,
    get_runs_client,
    get_settings,
)
from reply_qualification.main import app, lifespan


SINGLETONS = (get_settings, get_database, get_key_service_client, get_runs_client, get_llm_client)


def _clear_singletons():
    for factory in SINGLETONS:
        factory.cache_clear()


@pytest.fixture
def app_settings(test_settings, monkeypatch):
    """Point the cached dependencies at test settings for one lifespan run."""
    monkeypatch.setattr(dependencies, "settings", test_settings)
    _clear_singletons()
    yield test_settings
    _clear_singletons()


class TestStartup:
    @pytest.mark.asyncio
    async def test_unpriced_model_aborts_startup(self, app_settings):
        app_settings.ANTHROPIC_MODEL = "claude-sonnet-4-5"

        with pytest.raises(ValueError, match="No pricing configured"):
            async with lifespan(app):
                pass

        assert get_database.cache_info().currsize == 0

    @pytest.mark.asyncio
    async def test_unsupported_provider_aborts_startup(self, app_settings):
        app_settings.LLM_PROVIDER = "ollama"

        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            async with lifespan(app):
                pass

    @pytest.mark.asyncio
    async def test_llm_client_built_before_serving(self, app_settings):
        async with lifespan(app):
            assert get_llm_client.cache_info().currsize == 1
            assert await get_database().check_connection()


class TestShutdown:
    @pytest.mark.asyncio
    async def test_closes_clients_and_disposes_database(self, app_settings, monkeypatch):
        database = get_database()
        monkeypatch.setattr(database, "dispose", AsyncMock(wraps=database.dispose))
        llm_client = get_llm_client()
        monkeypatch.setattr(llm_client, "close", AsyncMock())

        async with lifespan(app):
            pass

        llm_client.close.assert_awaited_once()
        database.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_database_disposed_when_client_close_fails(self, app_settings, monkeypatch):
        database = get_database()
        monkeypatch.setattr(database, "dispose", AsyncMock(wraps=database.dispose))
        key_client = get_key_service_client()
        monkeypatch.setattr(key_client, "close", AsyncMock(side_effect=RuntimeError("close failed")))

        with pytest.raises(RuntimeError, match="close failed"):
            async with lifespan(app):
                pass

        database.dispose.assert_awaited_once()
