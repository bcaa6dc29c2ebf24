"""Request body models for the HTTP and MCP surface."""

from typing import Any

from pydantic import Field, field_validator

from .results import WireModel


class SearchRequest(WireModel):
    """A single query to fan out to every provider."""

    query: str = Field(..., min_length=1, description="The search query text")
    num_results: int = Field(
        10, ge=1, le=100, description="Result-count hint passed to each provider"
    )

    @field_validator("query")
    @classmethod
    def _strip(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Query is required")
        return v


class JudgeRequest(WireModel):
    """Provider outcomes to evaluate for one query."""

    query: str = Field(..., min_length=1)
    results: dict[str, Any] = Field(
        default_factory=dict, description="Provider id -> outcome JSON"
    )


class GenerateRequest(WireModel):
    """Parameters for test-query generation."""

    description: str = Field("", description="Product or audience context")
    count: int = Field(10, ge=1, le=50, description="Number of queries to generate")


class RunSuiteRequest(WireModel):
    """A batch of queries to run end to end."""

    queries: list[str] = Field(..., min_length=1)


class SaveQueryRequest(WireModel):
    """A single-query comparison to persist."""

    query: str = Field(..., min_length=1)
    results: dict[str, Any]
    judgment: dict[str, Any] | None = None


class SaveSuiteRequest(WireModel):
    """A batch report to persist."""

    summary: dict[str, Any]
    results: list[Any]
