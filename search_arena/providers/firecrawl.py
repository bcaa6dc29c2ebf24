"""Firecrawl search provider implementation."""

from typing import Any

from ..models.results import NormalizedResult
from ..utils.urls import truncate
from .base import SearchProvider, as_dict, as_list, as_text

SNIPPET_CHARS = 300


class FirecrawlProvider(SearchProvider):
    """Firecrawl search provider.

    Firecrawl searches can stall while pages are scraped, so this provider
    enforces a hard deadline (``FIRECRAWL__TIMEOUT``, 30 seconds by default)
    and reports an abandoned call as a timeout failure.
    """

    name = "firecrawl"
    display_name = "Firecrawl"
    default_url = "https://api.firecrawl.dev/v1/search"
    enforce_deadline = True

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def build_payload(self, query: str, limit: int) -> dict[str, Any]:
        return {"query": query, "limit": limit}

    def normalize(
        self, data: dict[str, Any], limit: int
    ) -> tuple[list[NormalizedResult], str | None]:
        results = []
        for item in as_list(data.get("data")):
            item = as_dict(item)
            metadata = as_dict(item.get("metadata"))
            results.append(
                NormalizedResult(
                    title=as_text(metadata.get("title"), item.get("title")),
                    url=as_text(item.get("url"), metadata.get("sourceURL")),
                    snippet=as_text(
                        metadata.get("description"),
                        truncate(as_text(item.get("markdown")), SNIPPET_CHARS),
                    ),
                    published_date=as_text(metadata.get("publishedDate")) or None,
                )
            )
        return results, None
