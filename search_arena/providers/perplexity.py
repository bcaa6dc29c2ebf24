"""Perplexity search provider implementation."""

from typing import Any

from ..models.results import NormalizedResult
from ..utils.urls import extract_urls, host_label, truncate
from .base import SearchProvider, as_dict, as_list, as_text

ANSWER_CHARS = 500


class PerplexityProvider(SearchProvider):
    """Perplexity Sonar chat completions with citations."""

    name = "perplexity"
    display_name = "Perplexity"
    default_url = "https://api.perplexity.ai/chat/completions"
    default_model = "sonar"

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def build_payload(self, query: str, limit: int) -> dict[str, Any]:
        return {
            "model": self.config.model or self.default_model,
            "messages": [
                {
                    "role": "system",
                    "content": "You are a helpful search assistant. "
                    "Return relevant information with citations.",
                },
                {"role": "user", "content": query},
            ],
            "max_tokens": 1024,
            "return_citations": True,
            "return_related_questions": False,
        }

    def normalize(
        self, data: dict[str, Any], limit: int
    ) -> tuple[list[NormalizedResult], str | None]:
        choices = as_list(data.get("choices"))
        message = as_dict(as_dict(choices[0]).get("message")) if choices else {}
        answer = as_text(message.get("content"))

        results: list[NormalizedResult] = []
        seen: set[str] = set()

        # search_results carries titles and dates; citations is a bare URL list
        for entry in as_list(data.get("search_results")) + as_list(data.get("citations")):
            if isinstance(entry, str):
                entry = {"url": entry}
            entry = as_dict(entry)
            url = as_text(entry.get("url"))
            if not url or url in seen:
                continue
            seen.add(url)
            results.append(
                NormalizedResult(
                    title=as_text(entry.get("title"), host_label(url)),
                    url=url,
                    snippet=as_text(entry.get("snippet")),
                    published_date=as_text(entry.get("date")) or None,
                )
            )

        if not results:
            results = [
                NormalizedResult(title=host_label(url), url=url)
                for url in extract_urls(answer, limit)
            ]

        return results[:limit], truncate(answer, ANSWER_CHARS) or None
