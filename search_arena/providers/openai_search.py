"""OpenAI web-search provider implementation.

The Responses API answers in prose; results are the URL citations attached
to the answer, with a URL scan of the answer text as fallback.
"""

from typing import Any

from ..models.results import NormalizedResult
from ..utils.urls import extract_urls, host_label, truncate
from .base import SearchProvider, as_dict, as_list, as_text

ANSWER_CHARS = 500


class OpenAISearchProvider(SearchProvider):
    """OpenAI Responses API with the web search tool."""

    name = "openai"
    display_name = "OpenAI"
    default_url = "https://api.openai.com/v1/responses"
    default_model = "gpt-4o"

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def build_payload(self, query: str, limit: int) -> dict[str, Any]:
        return {
            "model": self.config.model or self.default_model,
            "tools": [{"type": "web_search_preview"}],
            "input": query,
        }

    def normalize(
        self, data: dict[str, Any], limit: int
    ) -> tuple[list[NormalizedResult], str | None]:
        answer = self._answer_text(data)
        results: list[NormalizedResult] = []
        seen: set[str] = set()

        for annotation in self._annotations(data):
            url = as_text(annotation.get("url"))
            if annotation.get("type") != "url_citation" or not url or url in seen:
                continue
            seen.add(url)
            results.append(
                NormalizedResult(
                    title=as_text(annotation.get("title"), host_label(url)), url=url
                )
            )

        if not results:
            results = [
                NormalizedResult(title=host_label(url), url=url)
                for url in extract_urls(answer, limit)
            ]

        return results[:limit], truncate(answer, ANSWER_CHARS) or None

    def _annotations(self, data: dict[str, Any]) -> list[dict[str, Any]]:
        annotations = []
        for item in as_list(data.get("output")):
            item = as_dict(item)
            if item.get("type") != "message":
                continue
            for content in as_list(item.get("content")):
                for annotation in as_list(as_dict(content).get("annotations")):
                    annotations.append(as_dict(annotation))
        return annotations

    def _answer_text(self, data: dict[str, Any]) -> str:
        # output_text is only present on some payloads; rebuild it from the parts
        text = as_text(data.get("output_text"))
        if text:
            return text
        parts = []
        for item in as_list(data.get("output")):
            for content in as_list(as_dict(item).get("content")):
                content = as_dict(content)
                if content.get("type") == "output_text":
                    parts.append(as_text(content.get("text")))
        return "".join(parts)
