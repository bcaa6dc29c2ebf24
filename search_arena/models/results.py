"""Result models."""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model serialized with camelCase keys for the JSON surface."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Dump to the JSON shape exposed over HTTP and stored on disk."""
        return self.model_dump(mode="json", by_alias=True)


class NormalizedResult(WireModel):
    """A single search result in the provider-independent shape."""

    title: str = Field("", description="Result title")
    url: str = Field("", description="Result URL")
    snippet: str = Field("", description="Result snippet or summary")
    published_date: str | None = Field(None, description="Publication date if known")

    @model_validator(mode="before")
    @classmethod
    def _none_to_empty(cls, data: Any) -> Any:
        # Upstream payloads carry explicit nulls; text fields stay strings
        if isinstance(data, dict):
            data = dict(data)
            for key in ("title", "url", "snippet"):
                if data.get(key) is None:
                    data.pop(key, None)
        return data


class ProviderSuccess(WireModel):
    """Outcome of a provider call that returned results."""

    status: Literal["success"] = "success"
    provider: str = Field(..., description="Provider name")
    query: str = Field(..., description="Original query")
    results: list[NormalizedResult] = Field(
        default_factory=list, description="Results in provider relevance order"
    )
    latency: int = Field(..., ge=0, description="Wall-clock latency in milliseconds")
    result_count: int = Field(0, description="Number of results returned")
    synthesized_answer: str | None = Field(
        None, description="Trimmed natural-language answer, for answer-style providers"
    )

    @model_validator(mode="after")
    def _sync_result_count(self) -> "ProviderSuccess":
        self.result_count = len(self.results)
        return self


class ProviderFailure(WireModel):
    """Outcome of a provider call that failed."""

    status: Literal["error"] = "error"
    provider: str = Field(..., description="Provider name")
    error: str = Field(..., description="Error message")


ProviderOutcome = Annotated[
    ProviderSuccess | ProviderFailure, Field(discriminator="status")
]


def parse_outcome(provider: str, payload: Any) -> ProviderSuccess | ProviderFailure:
    """Build an outcome from a client-supplied JSON object.

    Accepts both the tagged shape produced by :meth:`WireModel.to_payload` and
    the untagged shape (``{"error": ...}`` or a bare success object). Missing
    or non-object payloads count as a failure so the judge still sees the
    provider.
    """
    if not isinstance(payload, dict):
        return ProviderFailure(provider=provider, error="No results supplied")
    if payload.get("status") == "error" or "error" in payload:
        return ProviderFailure(
            provider=provider, error=str(payload.get("error") or "Unknown error")
        )
    data = {"latency": 0, "query": "", **payload, "provider": provider}
    data["status"] = "success"
    return ProviderSuccess.model_validate(data)


class SearchComparison(BaseModel):
    """All provider outcomes for a single query."""

    query: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    outcomes: dict[str, ProviderOutcome] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Dump with each provider's outcome under its own key."""
        payload: dict[str, Any] = {
            "query": self.query,
            "timestamp": self.timestamp.isoformat(),
        }
        for name, outcome in self.outcomes.items():
            payload[name] = outcome.to_payload()
        return payload
