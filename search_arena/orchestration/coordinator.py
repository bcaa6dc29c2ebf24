"""Concurrent fan-out of one query to every configured provider."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from ..models.results import ProviderFailure, ProviderOutcome, SearchComparison
from ..providers.base import SearchProvider
from ..utils.logging import get_logger, log_outcomes

logger = get_logger(__name__)


class FanOutCoordinator:
    """Dispatches a query to all providers at once and collects every outcome.

    The coordinator never short-circuits: it waits for each provider to
    settle, and any exception that escapes a provider becomes that
    provider's failure outcome instead of affecting its siblings.
    """

    def __init__(self, providers: Iterable[SearchProvider]):
        self.providers: dict[str, SearchProvider] = {}
        for provider in providers:
            if provider.name in self.providers:
                raise ValueError(f"Duplicate provider: {provider.name}")
            self.providers[provider.name] = provider

    @property
    def provider_names(self) -> list[str]:
        return list(self.providers)

    async def dispatch(self, query: str, limit: int) -> dict[str, ProviderOutcome]:
        """Run every provider concurrently for one query.

        Returns:
            Exactly one outcome per configured provider, keyed by provider id
            in configuration order.
        """
        names = list(self.providers)
        settled = await asyncio.gather(
            *(self.providers[name].fetch(query, limit) for name in names),
            return_exceptions=True,
        )

        outcomes: dict[str, ProviderOutcome] = {}
        for name, result in zip(names, settled, strict=True):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.error(f"Provider {name} raised unexpectedly: {result!r}")
                outcomes[name] = ProviderFailure(
                    provider=name, error=str(result) or result.__class__.__name__
                )
            else:
                outcomes[name] = result

        log_outcomes(logger, query, outcomes)
        return outcomes

    async def compare(self, query: str, limit: int) -> SearchComparison:
        """Dispatch a query and wrap the outcomes with a timestamp."""
        logger.info(f'[Search] Query: "{query}"')
        outcomes = await self.dispatch(query, limit)
        return SearchComparison(query=query, outcomes=outcomes)
