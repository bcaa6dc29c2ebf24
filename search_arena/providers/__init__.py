"""Providers package."""

import httpx

from ..config.settings import AppSettings
from .base import SearchProvider
from .exa import ExaProvider
from .firecrawl import FirecrawlProvider
from .openai_search import OpenAISearchProvider
from .parallel import ParallelProvider
from .perplexity import PerplexityProvider

PROVIDER_CLASSES: dict[str, type[SearchProvider]] = {
    "parallel": ParallelProvider,
    "firecrawl": FirecrawlProvider,
    "exa": ExaProvider,
    "openai": OpenAISearchProvider,
    "perplexity": PerplexityProvider,
}


def create_providers(
    settings: AppSettings, client: httpx.AsyncClient
) -> dict[str, SearchProvider]:
    """Instantiate every enabled provider, in configuration order."""
    return {
        name: PROVIDER_CLASSES[name](settings, client)
        for name in settings.get_enabled_providers()
    }


__all__ = [
    "PROVIDER_CLASSES",
    "SearchProvider",
    "ExaProvider",
    "FirecrawlProvider",
    "OpenAISearchProvider",
    "ParallelProvider",
    "PerplexityProvider",
    "create_providers",
]
