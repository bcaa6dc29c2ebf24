"""Tests for the search provider adapters."""

import asyncio
import json

import httpx
import pytest
import pytest_asyncio
import respx

from search_arena.config.settings import AppSettings, ProviderSettings
from search_arena.models.results import ProviderFailure, ProviderSuccess
from search_arena.providers import (
    ExaProvider,
    FirecrawlProvider,
    OpenAISearchProvider,
    ParallelProvider,
    PerplexityProvider,
    create_providers,
)


@pytest_asyncio.fixture
async def client():
    async with httpx.AsyncClient() as http_client:
        yield http_client


class TestCreateProviders:
    def test_enabled_providers_in_order(self, settings):
        providers = create_providers(settings, httpx.AsyncClient())
        assert list(providers) == ["parallel", "firecrawl", "exa", "openai"]
        assert isinstance(providers["firecrawl"], FirecrawlProvider)

    def test_base_url_override(self, settings):
        custom = AppSettings(
            _env_file=None,
            exa_api_key="k",
            exa=ProviderSettings(base_url="http://localhost:9999/search"),
        )
        provider = ExaProvider(custom, httpx.AsyncClient())
        assert provider.url == "http://localhost:9999/search"
        assert ExaProvider(settings, httpx.AsyncClient()).url == "https://api.exa.ai/search"


class TestProviderFailures:
    """Failures are returned as outcomes, never raised."""

    @pytest.mark.asyncio
    async def test_missing_api_key(self, client):
        settings = AppSettings(_env_file=None)
        provider = ExaProvider(settings, client)

        with respx.mock(assert_all_called=False) as router:
            route = router.post("https://api.exa.ai/search")
            outcome = await provider.fetch("query", 5)

        assert isinstance(outcome, ProviderFailure)
        assert outcome.provider == "exa"
        assert outcome.error == "EXA_API_KEY not configured"
        assert not route.called

    @pytest.mark.asyncio
    async def test_non_2xx_includes_status_and_body(self, settings, client):
        provider = ParallelProvider(settings, client)

        with respx.mock:
            respx.post("https://api.parallel.ai/v1beta/search").mock(
                return_value=httpx.Response(429, text="rate limited")
            )
            outcome = await provider.fetch("query", 5)

        assert isinstance(outcome, ProviderFailure)
        assert outcome.error == "Parallel API error: 429 - rate limited"

    @pytest.mark.asyncio
    async def test_malformed_json(self, settings, client):
        provider = ExaProvider(settings, client)

        with respx.mock:
            respx.post("https://api.exa.ai/search").mock(
                return_value=httpx.Response(200, text="<html>oops</html>")
            )
            outcome = await provider.fetch("query", 5)

        assert isinstance(outcome, ProviderFailure)
        assert "malformed JSON" in outcome.error

    @pytest.mark.asyncio
    async def test_transport_error(self, settings, client):
        provider = ExaProvider(settings, client)

        with respx.mock:
            respx.post("https://api.exa.ai/search").mock(
                side_effect=httpx.ConnectError("connection refused")
            )
            outcome = await provider.fetch("query", 5)

        assert isinstance(outcome, ProviderFailure)
        assert outcome.error == "Exa request failed: connection refused"

    @pytest.mark.asyncio
    async def test_httpx_timeout(self, settings, client):
        provider = ExaProvider(settings, client)

        with respx.mock:
            respx.post("https://api.exa.ai/search").mock(
                side_effect=httpx.ReadTimeout("timed out")
            )
            outcome = await provider.fetch("query", 5)

        assert isinstance(outcome, ProviderFailure)
        assert outcome.error == "Exa timeout (>60s)"

    @pytest.mark.asyncio
    async def test_firecrawl_hard_deadline(self):
        """A stalled Firecrawl call is abandoned after its deadline."""

        async def stall(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json={"data": []})

        settings = AppSettings(
            _env_file=None,
            firecrawl_api_key="k",
            firecrawl=ProviderSettings(timeout=0.05),
        )
        async with httpx.AsyncClient(transport=httpx.MockTransport(stall)) as client:
            outcome = await FirecrawlProvider(settings, client).fetch("slow query", 5)

        assert isinstance(outcome, ProviderFailure)
        assert outcome.error == "Firecrawl timeout (>0.05s)"

    def test_default_firecrawl_deadline_message(self, settings):
        provider = FirecrawlProvider(settings, httpx.AsyncClient())
        assert provider.enforce_deadline is True
        assert f"{provider.config.timeout:g}" == "30"


class TestParallelProvider:
    @pytest.mark.asyncio
    async def test_fetch(self, settings, client):
        provider = ParallelProvider(settings, client)
        payload = {
            "results": [
                {
                    "title": "Python 3.13 release",
                    "url": "https://python.org/3.13",
                    "excerpts": ["First part.", "Second part."],
                    "publish_date": "2024-10-07",
                },
                {"title": None, "url": "https://b.example.com", "excerpts": ["x" * 400]},
            ]
        }

        with respx.mock:
            route = respx.post("https://api.parallel.ai/v1beta/search").mock(
                return_value=httpx.Response(200, json=payload)
            )
            outcome = await provider.fetch("python release", 7)

        request = route.calls.last.request
        assert request.headers["x-api-key"] == "test_parallel_key"
        body = json.loads(request.content)
        assert body["objective"] == "python release"
        assert body["max_results"] == 7

        assert isinstance(outcome, ProviderSuccess)
        assert outcome.result_count == 2
        first, second = outcome.results
        assert first.title == "Python 3.13 release"
        assert first.snippet == "First part. Second part."
        assert first.published_date == "2024-10-07"
        assert second.title == ""
        assert len(second.snippet) == 300
        assert outcome.latency >= 0
        assert outcome.synthesized_answer is None


class TestFirecrawlProvider:
    def test_normalize(self, settings):
        provider = FirecrawlProvider(settings, httpx.AsyncClient())
        data = {
            "data": [
                {
                    "url": "https://a.example.com",
                    "markdown": "# Heading",
                    "metadata": {"title": "Meta title", "description": "Meta description"},
                },
                {
                    "title": "Top-level title",
                    "markdown": "m" * 500,
                    "metadata": {"sourceURL": "https://b.example.com"},
                },
            ]
        }
        results, answer = provider.normalize(data, 5)

        assert answer is None
        assert results[0].title == "Meta title"
        assert results[0].snippet == "Meta description"
        assert results[1].title == "Top-level title"
        assert results[1].url == "https://b.example.com"
        assert results[1].snippet == "m" * 300

    @pytest.mark.asyncio
    async def test_fetch_sends_bearer(self, settings, client):
        provider = FirecrawlProvider(settings, client)

        with respx.mock:
            route = respx.post("https://api.firecrawl.dev/v1/search").mock(
                return_value=httpx.Response(200, json={"success": True, "data": []})
            )
            outcome = await provider.fetch("q", 3)

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer test_firecrawl_key"
        assert json.loads(request.content) == {"query": "q", "limit": 3}
        assert isinstance(outcome, ProviderSuccess)
        assert outcome.results == []
        assert outcome.result_count == 0


class TestExaProvider:
    def test_normalize_prefers_text_then_highlights(self, settings):
        provider = ExaProvider(settings, httpx.AsyncClient())
        data = {
            "results": [
                {
                    "title": "With text",
                    "url": "https://a.example.com",
                    "text": "t" * 600,
                    "publishedDate": "2024-01-01",
                },
                {
                    "title": "With highlights",
                    "url": "https://b.example.com",
                    "highlights": ["one", "two"],
                },
            ]
        }
        results, _ = provider.normalize(data, 5)

        assert results[0].snippet == "t" * 500
        assert results[0].published_date == "2024-01-01"
        assert results[1].snippet == "one two"

    def test_payload(self, settings):
        provider = ExaProvider(settings, httpx.AsyncClient())
        payload = provider.build_payload("neural search", 4)
        assert payload["query"] == "neural search"
        assert payload["numResults"] == 4


class TestOpenAISearchProvider:
    def test_normalize_uses_citations(self, settings):
        provider = OpenAISearchProvider(settings, httpx.AsyncClient())
        data = {
            "output": [
                {"type": "web_search_call", "status": "completed"},
                {
                    "type": "message",
                    "content": [
                        {
                            "type": "output_text",
                            "text": "Answer text citing sources.",
                            "annotations": [
                                {
                                    "type": "url_citation",
                                    "url": "https://www.docs.example.com/a",
                                    "title": "Doc A",
                                },
                                {"type": "url_citation", "url": "https://b.example.com/"},
                                {"type": "url_citation", "url": "https://www.docs.example.com/a"},
                            ],
                        }
                    ],
                },
            ]
        }
        results, answer = provider.normalize(data, 10)

        assert [r.url for r in results] == [
            "https://www.docs.example.com/a",
            "https://b.example.com/",
        ]
        assert results[0].title == "Doc A"
        assert results[1].title == "b.example.com"
        assert answer == "Answer text citing sources."

    def test_normalize_falls_back_to_url_scan(self, settings):
        provider = OpenAISearchProvider(settings, httpx.AsyncClient())
        text = "See https://www.one.com/x and https://two.org/y. " + "z" * 600
        results, answer = provider.normalize({"output_text": text}, 1)

        assert [(r.title, r.url) for r in results] == [("one.com", "https://www.one.com/x")]
        assert len(answer) == 500

    def test_payload_uses_configured_model(self, settings):
        provider = OpenAISearchProvider(settings, httpx.AsyncClient())
        payload = provider.build_payload("q", 5)
        assert payload["model"] == "gpt-4o"
        assert payload["input"] == "q"


class TestPerplexityProvider:
    def test_disabled_by_default(self, settings):
        assert "perplexity" not in create_providers(settings, httpx.AsyncClient())

    @pytest.mark.asyncio
    async def test_fetch(self, settings, client):
        provider = PerplexityProvider(settings, client)
        payload = {
            "choices": [{"message": {"content": "Sonar answer."}}],
            "search_results": [
                {"title": "Result One", "url": "https://one.com", "date": "2025-01-02"}
            ],
            "citations": ["https://one.com", "https://www.two.com/page"],
        }

        with respx.mock:
            respx.post("https://api.perplexity.ai/chat/completions").mock(
                return_value=httpx.Response(200, json=payload)
            )
            outcome = await provider.fetch("q", 5)

        assert isinstance(outcome, ProviderSuccess)
        assert [(r.title, r.url) for r in outcome.results] == [
            ("Result One", "https://one.com"),
            ("two.com", "https://www.two.com/page"),
        ]
        assert outcome.results[0].published_date == "2025-01-02"
        assert outcome.synthesized_answer == "Sonar answer."
