"""Base class for all search providers.

Every provider is a variant of one capability: ``fetch(query, limit)``
issues exactly one outbound call and returns a provider outcome. The
provider-specific request shape and field mapping live in the subclasses;
:class:`NormalizedResult` is the only type that crosses this boundary.

Configuration, upstream and timeout errors are raised inside the provider
and converted to :class:`ProviderFailure` here, so callers never see them.

Example:
    Creating a new provider:
        >>> class MyProvider(SearchProvider):
        ...     name = "mine"
        ...     display_name = "Mine"
        ...     default_url = "https://api.example.com/search"
        ...
        ...     def build_headers(self):
        ...         return {"Authorization": f"Bearer {self.api_key}"}
        ...
        ...     def build_payload(self, query, limit):
        ...         return {"q": query, "n": limit}
        ...
        ...     def normalize(self, data, limit):
        ...         return [NormalizedResult(url=r.get("url")) for r in data["hits"]], None
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..config.settings import AppSettings, ProviderSettings
from ..models.results import NormalizedResult, ProviderFailure, ProviderSuccess
from ..utils.errors import (
    ProviderConfigurationError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUpstreamError,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)


def as_dict(value: Any) -> dict[str, Any]:
    """Return value if it is a dict, else an empty dict."""
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    """Return value if it is a list, else an empty list."""
    return value if isinstance(value, list) else []


def as_text(*candidates: Any) -> str:
    """Return the first non-empty string among candidates, or ``""``."""
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return ""


class SearchProvider(ABC):
    """Base class for all search providers."""

    name: str = ""
    display_name: str = ""
    default_url: str = ""
    # Providers with a hard deadline abandon the call after config.timeout
    enforce_deadline: bool = False

    def __init__(self, settings: AppSettings, client: httpx.AsyncClient):
        """Bind the provider to immutable settings and a shared HTTP client."""
        self.settings = settings
        self.config: ProviderSettings = settings.get_provider_config(self.name) or (
            ProviderSettings()
        )
        self.api_key = settings.get_api_key(self.name)
        self.client = client
        self.url = self.config.base_url or self.default_url

    @property
    def env_key(self) -> str:
        return f"{self.name.upper()}_API_KEY"

    @abstractmethod
    def build_headers(self) -> dict[str, str]:
        """Return request headers, including the credential."""
        ...

    @abstractmethod
    def build_payload(self, query: str, limit: int) -> dict[str, Any]:
        """Return the JSON request body."""
        ...

    @abstractmethod
    def normalize(
        self, data: dict[str, Any], limit: int
    ) -> tuple[list[NormalizedResult], str | None]:
        """Map the native response to normalized results and an optional answer."""
        ...

    async def fetch(self, query: str, limit: int) -> ProviderSuccess | ProviderFailure:
        """Execute one search and return its outcome.

        Args:
            query: Non-empty query text
            limit: Result-count hint; providers may cap or ignore it

        Returns:
            ProviderSuccess with results in provider order and latency in
            milliseconds, or ProviderFailure with a descriptive message.
        """
        try:
            if not self.api_key:
                raise ProviderConfigurationError(self.name, self.env_key)

            start_time = time.perf_counter()
            data = await self._call(query, limit)
            latency = int(round((time.perf_counter() - start_time) * 1000))

            results, answer = self.normalize(data, limit)
            logger.info(
                f'[{self.display_name}] Got {len(results)} results for "{query}" '
                f"in {latency}ms"
            )
            return ProviderSuccess(
                provider=self.name,
                query=query,
                results=results,
                latency=latency,
                synthesized_answer=answer,
            )

        except ProviderError as e:
            logger.warning(f'[{self.display_name}] Failed for "{query}": {e.message}')
            return ProviderFailure(provider=self.name, error=e.message)
        except httpx.HTTPError as e:
            detail = str(e) or e.__class__.__name__
            message = f"{self.display_name} request failed: {detail}"
            logger.warning(f'[{self.display_name}] Failed for "{query}": {message}')
            return ProviderFailure(provider=self.name, error=message)

    async def _call(self, query: str, limit: int) -> dict[str, Any]:
        """Issue the request, enforcing the hard deadline where configured."""
        if not self.enforce_deadline:
            return await self._post(query, limit)
        try:
            return await asyncio.wait_for(
                self._post(query, limit), timeout=self.config.timeout
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                self.name,
                timeout=self.config.timeout,
                message=f"{self.display_name} timeout (>{self.config.timeout:g}s)",
                original_error=e,
            ) from e

    async def _post(self, query: str, limit: int) -> dict[str, Any]:
        try:
            response = await self.client.post(
                self.url,
                headers=self.build_headers(),
                json=self.build_payload(query, limit),
                timeout=self.config.timeout,
            )
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                self.name,
                timeout=self.config.timeout,
                message=f"{self.display_name} timeout (>{self.config.timeout:g}s)",
                original_error=e,
            ) from e

        if not response.is_success:
            raise ProviderUpstreamError(
                self.name,
                f"{self.display_name} API error: {response.status_code} - {response.text}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderUpstreamError(
                self.name,
                f"{self.display_name} API returned malformed JSON",
                upstream_status=response.status_code,
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            raise ProviderUpstreamError(
                self.name,
                f"{self.display_name} API returned an unexpected response shape",
                upstream_status=response.status_code,
            )
        return data

