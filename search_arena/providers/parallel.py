"""Parallel search provider implementation."""

from typing import Any

from ..models.results import NormalizedResult
from ..utils.urls import truncate
from .base import SearchProvider, as_dict, as_list, as_text

SNIPPET_CHARS = 300


class ParallelProvider(SearchProvider):
    """Parallel Search API provider."""

    name = "parallel"
    display_name = "Parallel"
    default_url = "https://api.parallel.ai/v1beta/search"

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "parallel-beta": "search-extract-2025-10-10",
        }

    def build_payload(self, query: str, limit: int) -> dict[str, Any]:
        return {
            "objective": query,
            "search_queries": [query],
            "max_results": limit,
            "excerpts": {"max_chars_per_result": 5000},
        }

    def normalize(
        self, data: dict[str, Any], limit: int
    ) -> tuple[list[NormalizedResult], str | None]:
        results = []
        for item in as_list(data.get("results")):
            item = as_dict(item)
            excerpts = item.get("excerpts")
            # Excerpts arrive as a list of short fragments, occasionally a string
            if isinstance(excerpts, list):
                snippet = " ".join(e for e in excerpts if isinstance(e, str))
            else:
                snippet = as_text(excerpts)
            results.append(
                NormalizedResult(
                    title=as_text(item.get("title")),
                    url=as_text(item.get("url")),
                    snippet=truncate(snippet, SNIPPET_CHARS),
                    published_date=as_text(item.get("publish_date")) or None,
                )
            )
        return results, None
