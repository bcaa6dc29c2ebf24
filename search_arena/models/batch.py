"""Batch run models."""

import math
from typing import Any, Literal

from pydantic import Field, PrivateAttr

from .results import ProviderOutcome, ProviderSuccess, WireModel
from .verdict import JudgeOutcome, Verdict


class BatchSummary(WireModel):
    """Running aggregate of a batch run.

    Win and tie counters and latency sums are folded in query by query;
    ``avg_latency`` only holds averages once :meth:`finalize` has run.
    """

    total: int = Field(0, ge=0, description="Number of queries in the batch")
    wins: dict[str, int] = Field(default_factory=dict)
    ties: int = Field(0, ge=0)
    avg_latency: dict[str, int] = Field(default_factory=dict)
    finalized: bool = False

    _latency_sums: dict[str, int] = PrivateAttr(default_factory=dict)

    @classmethod
    def for_providers(cls, providers: list[str], total: int) -> "BatchSummary":
        """Create an empty summary with a zeroed counter per provider."""
        summary = cls(
            total=total,
            wins={name: 0 for name in providers},
            avg_latency={name: 0 for name in providers},
        )
        summary._latency_sums = {name: 0 for name in providers}
        return summary

    def record_judgment(self, judgment: JudgeOutcome) -> None:
        """Count the winner of one query; anything else counts as a tie."""
        self._ensure_open()
        if isinstance(judgment, Verdict) and judgment.winner in self.wins:
            self.wins[judgment.winner] += 1
        else:
            self.ties += 1

    def record_latencies(self, outcomes: dict[str, ProviderOutcome]) -> None:
        """Add each successful provider's latency to its running sum."""
        self._ensure_open()
        for name, outcome in outcomes.items():
            if isinstance(outcome, ProviderSuccess) and outcome.latency:
                self._latency_sums[name] = self._latency_sums.get(name, 0) + outcome.latency

    def latency_sum(self, provider: str) -> int:
        return self._latency_sums.get(provider, 0)

    def finalize(self, valid_count: int) -> None:
        """Compute average latencies once the whole batch has been folded in.

        Every provider's sum is divided by the number of queries that
        completed without error, not by that provider's own success count, so
        a provider that failed on some queries reports a lower average than
        its true per-call latency.
        """
        self._ensure_open()
        if valid_count > 0:
            for name, total in self._latency_sums.items():
                # Half-up rounding, matching the JSON clients' Math.round
                self.avg_latency[name] = math.floor(total / valid_count + 0.5)
        self.finalized = True

    def _ensure_open(self) -> None:
        if self.finalized:
            raise RuntimeError("Batch summary is already finalized")


class QueryRecord(WireModel):
    """Per-query detail of a batch run."""

    query: str
    search_results: dict[str, ProviderOutcome] | None = None
    judgment: JudgeOutcome | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchReport(WireModel):
    """Final result of a batch run."""

    type: Literal["complete"] = "complete"
    summary: BatchSummary
    results: list[QueryRecord] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["summary"].pop("finalized", None)
        return payload
