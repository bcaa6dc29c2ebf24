"""FastMCP server exposing the search comparison pipeline.

This module provides the SearchServer class that wires the whole system
together: immutable settings, one shared HTTP client, the provider
adapters, the fan-out coordinator, the judge, the batch runner and the
snapshot store. The pipeline is exposed both as MCP tools and as JSON HTTP
routes for the comparison frontend.

Example:
    Basic server initialization:
        >>> server = SearchServer()
        >>> server.run(transport="streamable-http", host="0.0.0.0", port=3001)
"""

from __future__ import annotations

import asyncio
import functools
import json
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

import httpx
from fastmcp import FastMCP
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .config.settings import AppSettings, get_settings
from .judging.judge import Judge
from .judging.llm_client import ChatCompletionClient
from .models.requests import (
    GenerateRequest,
    JudgeRequest,
    RunSuiteRequest,
    SaveQueryRequest,
    SaveSuiteRequest,
    SearchRequest,
)
from .models.results import ProviderOutcome, parse_outcome
from .orchestration.batch_runner import BatchRunner
from .orchestration.coordinator import FanOutCoordinator
from .providers import create_providers
from .storage.results_store import ResultStore
from .utils.errors import QueryValidationError, SearchError, http_error_response
from .utils.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[Request], Awaitable[JSONResponse]]


def validation_error(exc: ValidationError) -> QueryValidationError:
    """Convert a pydantic validation error into a 400 error for the first problem."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    if first.get("type") == "missing" and field:
        message = f"{field[0].upper()}{field[1:]} is required"
    else:
        message = first.get("msg", "Invalid request")
    return QueryValidationError(message, field=field)


def json_endpoint(handler):
    """Render SearchError and validation problems as JSON error responses."""

    @functools.wraps(handler)
    async def wrapper(self, request: Request) -> JSONResponse:
        try:
            return await handler(self, request)
        except ValidationError as e:
            error = validation_error(e)
            return JSONResponse(http_error_response(error), status_code=error.status_code)
        except json.JSONDecodeError:
            error = QueryValidationError("Request body must be valid JSON")
            return JSONResponse(http_error_response(error), status_code=error.status_code)
        except SearchError as e:
            logger.warning(f"{request.url.path} failed: {e.message}")
            return JSONResponse(http_error_response(e), status_code=e.status_code)
        except Exception as e:
            logger.exception(f"Unhandled error in {request.url.path}")
            return JSONResponse(http_error_response(e), status_code=500)

    return wrapper


class SearchServer:
    """Search comparison server.

    Attributes:
        settings: Immutable application settings
        client: Shared httpx client used by every provider and the judge
        providers: Enabled provider adapters by id
        coordinator: Concurrent fan-out over the providers
        judge: Rubric scoring and test-query generation
        batch_runner: Sequential batch evaluation
        store: JSON snapshot persistence
        mcp: FastMCP server instance
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client or httpx.AsyncClient(
            limits=httpx.Limits(max_connections=20)
        )

        self.providers = create_providers(self.settings, self.client)
        logger.info(f"Initialized providers: {list(self.providers)}")

        self.coordinator = FanOutCoordinator(self.providers.values())
        self.judge = Judge(
            ChatCompletionClient(self.settings, self.client), self.settings.judge
        )
        self.batch_runner = BatchRunner(
            self.coordinator, self.judge, self.settings.batch_num_results
        )
        self.store = ResultStore(self.settings.results_dir)

        self.mcp = FastMCP(
            name=self.settings.app_name,
            instructions="""
            This server compares several web search providers. Use compare_search
            to run one query against every provider, judge_results to score the
            outcome, and generate_test_queries / run_test_suite for batch runs.
            """,
        )
        self._register_tools()
        self._register_custom_routes()

    # Pipeline operations shared by the MCP tools and the HTTP routes

    def outcomes_from_payload(self, results: dict[str, Any]) -> dict[str, ProviderOutcome]:
        """Rebuild outcomes from client JSON.

        Every configured provider is included; one the client left out is
        judged with no results.
        """
        configured = self.coordinator.provider_names
        names = [*configured, *(name for name in results if name not in configured)]
        return {name: parse_outcome(name, results.get(name)) for name in names}

    async def compare(self, request: SearchRequest) -> dict[str, Any]:
        comparison = await self.coordinator.compare(request.query, request.num_results)
        return comparison.to_payload()

    async def evaluate(self, request: JudgeRequest) -> dict[str, Any]:
        outcomes = self.outcomes_from_payload(request.results)
        judgment = await self.judge.evaluate(request.query, outcomes)
        return judgment.to_payload()

    async def generate(self, request: GenerateRequest) -> list[str]:
        return await self.judge.generate(request.description, request.count)

    async def run_suite(self, request: RunSuiteRequest) -> dict[str, Any]:
        report = await self.batch_runner.run(request.queries)
        return report.to_payload()

    def _register_tools(self):
        """Register the pipeline as MCP tools."""

        @self.mcp.tool(
            name="compare_search",
            description="Run one query against every configured search provider",
        )
        async def compare_search(query: str, num_results: int = 10) -> dict[str, Any]:
            return await self.compare(SearchRequest(query=query, num_results=num_results))

        @self.mcp.tool(
            name="judge_results",
            description="Score provider results for a query and pick a winner",
        )
        async def judge_results(query: str, results: dict[str, Any]) -> dict[str, Any]:
            return await self.evaluate(JudgeRequest(query=query, results=results))

        @self.mcp.tool(
            name="generate_test_queries",
            description="Generate realistic test queries for a batch run",
        )
        async def generate_test_queries(description: str = "", count: int = 10) -> list[str]:
            return await self.generate(GenerateRequest(description=description, count=count))

        @self.mcp.tool(
            name="run_test_suite",
            description="Compare and judge every query in order and aggregate wins",
        )
        async def run_test_suite(queries: list[str]) -> dict[str, Any]:
            return await self.run_suite(RunSuiteRequest(queries=queries))

    # HTTP routes

    @json_endpoint
    async def health_check(self, request: Request) -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(
            {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
        )

    @json_endpoint
    async def search(self, request: Request) -> JSONResponse:
        """Run one query against every provider."""
        body = SearchRequest.model_validate(await request.json())
        return JSONResponse(await self.compare(body))

    @json_endpoint
    async def judge_endpoint(self, request: Request) -> JSONResponse:
        """Score a comparison with the judge."""
        body = JudgeRequest.model_validate(await request.json())
        return JSONResponse(await self.evaluate(body))

    @json_endpoint
    async def generate_suite(self, request: Request) -> JSONResponse:
        """Generate test queries."""
        body = GenerateRequest.model_validate(await request.json())
        return JSONResponse({"queries": await self.generate(body)})

    @json_endpoint
    async def run_suite_endpoint(self, request: Request) -> JSONResponse:
        """Run a batch of queries and return all results at once."""
        body = RunSuiteRequest.model_validate(await request.json())
        return JSONResponse(await self.run_suite(body))

    @json_endpoint
    async def save_query(self, request: Request) -> JSONResponse:
        """Persist a single-query comparison."""
        body = SaveQueryRequest.model_validate(await request.json())
        saved = self.store.save_query(body.query, body.results, body.judgment)
        return JSONResponse(saved.model_dump())

    @json_endpoint
    async def save_suite(self, request: Request) -> JSONResponse:
        """Persist a batch report."""
        body = SaveSuiteRequest.model_validate(await request.json())
        saved = self.store.save_suite(body.summary, body.results)
        return JSONResponse(saved.model_dump())

    @json_endpoint
    async def load_result(self, request: Request) -> JSONResponse:
        """Load a saved snapshot by id."""
        return JSONResponse(self.store.load(request.path_params["result_id"]))

    def route_table(self) -> list[tuple[str, list[str], Handler]]:
        """HTTP routes as (path, methods, handler)."""
        return [
            ("/api/health", ["GET"], self.health_check),
            ("/api/search", ["POST"], self.search),
            ("/api/judge", ["POST"], self.judge_endpoint),
            ("/api/test-suite/generate", ["POST"], self.generate_suite),
            ("/api/test-suite/run", ["POST"], self.run_suite_endpoint),
            ("/api/query/save", ["POST"], self.save_query),
            ("/api/query/results/{result_id}", ["GET"], self.load_result),
            ("/api/test-suite/save", ["POST"], self.save_suite),
            ("/api/test-suite/results/{result_id}", ["GET"], self.load_result),
        ]

    def routes(self) -> list[Route]:
        """Starlette routes, for mounting outside FastMCP."""
        return [
            Route(path, endpoint=handler, methods=methods)
            for path, methods, handler in self.route_table()
        ]

    def _register_custom_routes(self):
        """Register the HTTP routes on the FastMCP app."""
        for path, methods, handler in self.route_table():
            self.mcp.custom_route(path, methods=methods)(handler)

    async def start(
        self,
        transport: str = "streamable-http",
        host: str = "0.0.0.0",
        port: int = 3001,
    ):
        """Start the FastMCP server and release the HTTP client on exit."""
        logger.info(
            f"Starting {self.settings.app_name} with transport {transport}; "
            f"comparing {', '.join(self.providers) or 'no providers'}"
        )
        try:
            if transport == "stdio":
                await self.mcp.run_async(transport="stdio")
            else:
                await self.mcp.run_async(transport=transport, host=host, port=port)
        finally:
            await self.close()

    def run(
        self,
        transport: str = "streamable-http",
        host: str = "0.0.0.0",
        port: int = 3001,
    ):
        """Run the server synchronously."""
        asyncio.run(self.start(transport=transport, host=host, port=port))

    async def close(self):
        """Close the shared HTTP client."""
        logger.info("Closing HTTP client...")
        await self.client.aclose()
