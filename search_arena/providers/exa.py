"""Exa search provider implementation."""

from typing import Any

from ..models.results import NormalizedResult
from ..utils.urls import truncate
from .base import SearchProvider, as_dict, as_list, as_text

SNIPPET_CHARS = 500


class ExaProvider(SearchProvider):
    """Exa neural search provider."""

    name = "exa"
    display_name = "Exa"
    default_url = "https://api.exa.ai/search"

    def build_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "x-api-key": self.api_key}

    def build_payload(self, query: str, limit: int) -> dict[str, Any]:
        return {
            "query": query,
            "numResults": limit,
            "useAutoprompt": True,
            "type": "neural",
            "contents": {
                "text": {"maxCharacters": SNIPPET_CHARS},
                "highlights": True,
            },
        }

    def normalize(
        self, data: dict[str, Any], limit: int
    ) -> tuple[list[NormalizedResult], str | None]:
        results = []
        for item in as_list(data.get("results")):
            item = as_dict(item)
            highlights = " ".join(
                h for h in as_list(item.get("highlights")) if isinstance(h, str)
            )
            results.append(
                NormalizedResult(
                    title=as_text(item.get("title")),
                    url=as_text(item.get("url")),
                    snippet=truncate(as_text(item.get("text"), highlights), SNIPPET_CHARS),
                    published_date=as_text(item.get("publishedDate")) or None,
                )
            )
        return results, None
