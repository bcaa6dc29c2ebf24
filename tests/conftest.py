"""Test configuration for Search Arena."""

import pytest

from search_arena.config import get_settings
from search_arena.config.settings import AppSettings


@pytest.fixture
def mock_env(monkeypatch):
    """Mock environment variables for testing."""
    monkeypatch.setenv("PARALLEL_API_KEY", "test_parallel_key")
    monkeypatch.setenv("FIRECRAWL_API_KEY", "test_firecrawl_key")
    monkeypatch.setenv("EXA_API_KEY", "test_exa_key")
    monkeypatch.setenv("OPENAI_API_KEY", "test_openai_key")
    monkeypatch.setenv("PERPLEXITY_API_KEY", "test_perplexity_key")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    # Clear lru_cache to ensure it picks up the new env vars
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path):
    """Settings with every credential set and snapshots under tmp_path."""
    return AppSettings(
        _env_file=None,
        parallel_api_key="test_parallel_key",
        firecrawl_api_key="test_firecrawl_key",
        exa_api_key="test_exa_key",
        openai_api_key="test_openai_key",
        perplexity_api_key="test_perplexity_key",
        results_dir=tmp_path / "results",
    )
