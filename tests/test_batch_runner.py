"""Tests for batch evaluation."""

from unittest.mock import AsyncMock

import httpx
import pytest

from search_arena.config.settings import JudgeSettings
from search_arena.judging.judge import Judge
from search_arena.judging.llm_client import ChatCompletionClient
from search_arena.models.batch import BatchSummary
from search_arena.models.results import ProviderFailure, ProviderSuccess
from search_arena.models.verdict import ParseFailure, Verdict
from search_arena.orchestration.batch_runner import BatchRunner
from search_arena.orchestration.coordinator import FanOutCoordinator
from search_arena.utils.errors import JudgeError
from tests.helpers import FakeProvider, judge_reply


def make_runner(providers, replies, num_results=10):
    llm = AsyncMock(spec=ChatCompletionClient)
    llm.complete.side_effect = replies
    judge = Judge(llm, JudgeSettings())
    return BatchRunner(FanOutCoordinator(providers), judge, num_results)


class TestBatchRunner:
    @pytest.mark.asyncio
    async def test_two_wins_for_same_provider(self):
        runner = make_runner(
            [FakeProvider("x", latency=100), FakeProvider("y", latency=300)],
            [judge_reply("x", ["x", "y"]), judge_reply("X", ["x", "y"])],
        )

        report = await runner.run(["q1", "q2"])

        summary = report.summary
        assert summary.total == 2
        assert summary.wins == {"x": 2, "y": 0}
        assert summary.ties == 0
        assert summary.avg_latency == {"x": 100, "y": 300}
        assert [r.query for r in report.results] == ["q1", "q2"]
        assert all(isinstance(r.judgment, Verdict) for r in report.results)

    @pytest.mark.asyncio
    async def test_queries_run_in_order(self):
        provider = FakeProvider("x")
        runner = make_runner(
            [provider],
            [judge_reply("x", ["x"]) for _ in range(3)],
            num_results=4,
        )

        await runner.run(["first", "second", "third"])

        assert provider.calls == [("first", 4), ("second", 4), ("third", 4)]

    @pytest.mark.asyncio
    async def test_tie_and_parse_failure_count_as_ties(self):
        runner = make_runner(
            [FakeProvider("x"), FakeProvider("y")],
            [judge_reply("tie", ["x", "y"]), "no verdict", judge_reply("y", ["x", "y"])],
        )

        report = await runner.run(["q1", "q2", "q3"])

        assert report.summary.ties == 2
        assert report.summary.wins == {"x": 0, "y": 1}
        assert isinstance(report.results[1].judgment, ParseFailure)

    @pytest.mark.asyncio
    async def test_judge_error_is_recorded_and_run_continues(self):
        runner = make_runner(
            [FakeProvider("x", latency=100)],
            [
                judge_reply("x", ["x"]),
                JudgeError("OpenAI API error: 500 - down"),
                judge_reply("x", ["x"]),
            ],
        )

        report = await runner.run(["q1", "q2", "q3"])

        assert report.summary.total == 3
        assert len(report.results) == 3
        failed = report.results[1]
        assert failed.error == "OpenAI API error: 500 - down"
        assert failed.search_results is None
        assert failed.judgment is None
        assert report.summary.wins == {"x": 2}
        assert report.summary.ties == 0
        # Errored queries are excluded from the latency denominator
        assert report.summary.avg_latency == {"x": 100}

    @pytest.mark.asyncio
    async def test_transport_error_is_recorded(self):
        runner = make_runner(
            [FakeProvider("x")],
            [httpx.ConnectError("connection refused")],
        )

        report = await runner.run(["q1"])

        assert report.results[0].error == "connection refused"
        assert report.summary.avg_latency == {"x": 0}

    @pytest.mark.asyncio
    async def test_failed_provider_lowers_average(self):
        """Averages divide by every valid query, including ones a provider failed."""
        flaky = FakeProvider("y", latency=200)
        runner = make_runner(
            [FakeProvider("x", latency=100), flaky],
            [judge_reply("x", ["x", "y"]), judge_reply("x", ["x", "y"])],
        )

        original_fetch = flaky.fetch

        async def fail_first(query, limit):
            if query == "q1":
                return ProviderFailure(provider="y", error="Y timeout (>30s)")
            return await original_fetch(query, limit)

        flaky.fetch = fail_first
        report = await runner.run(["q1", "q2"])

        assert report.summary.avg_latency == {"x": 100, "y": 100}

    @pytest.mark.asyncio
    async def test_overflowing_score_does_not_abort_run(self):
        bad_reply = judge_reply("x", ["x", "y"]).replace('"relevance": 8', '"relevance": 1e999', 1)
        runner = make_runner(
            [FakeProvider("x"), FakeProvider("y")],
            [bad_reply, judge_reply("x", ["x", "y"])],
        )

        report = await runner.run(["q1", "q2"])

        assert report.summary.total == 2
        assert len(report.results) == 2
        assert isinstance(report.results[0].judgment, ParseFailure)
        assert report.results[0].judgment.raw == bad_reply
        assert report.summary.ties == 1
        assert report.summary.wins == {"x": 1, "y": 0}

    @pytest.mark.asyncio
    async def test_payload_shape(self):
        runner = make_runner([FakeProvider("x")], [judge_reply("x", ["x"])])

        payload = (await runner.run(["q1"])).to_payload()

        assert payload["type"] == "complete"
        assert set(payload["summary"]) == {"total", "wins", "ties", "avgLatency"}
        record = payload["results"][0]
        assert record["query"] == "q1"
        assert record["searchResults"]["x"]["status"] == "success"
        assert record["judgment"]["winner"] == "x"
        assert record["error"] is None


class TestBatchSummary:
    def test_finalize_rounds_half_up(self):
        summary = BatchSummary.for_providers(["x"], total=2)
        for latency in (101, 100):
            summary.record_latencies(
                {"x": ProviderSuccess(provider="x", query="q", latency=latency)}
            )

        summary.finalize(valid_count=2)

        assert summary.latency_sum("x") == 201
        assert summary.avg_latency == {"x": 101}

    def test_zero_latency_is_not_counted(self):
        summary = BatchSummary.for_providers(["x"], total=1)
        summary.record_latencies({"x": ProviderSuccess(provider="x", query="q", latency=0)})
        assert summary.latency_sum("x") == 0

    def test_no_valid_queries_keeps_zero_averages(self):
        summary = BatchSummary.for_providers(["x", "y"], total=1)
        summary.finalize(valid_count=0)
        assert summary.avg_latency == {"x": 0, "y": 0}

    def test_finalize_twice_raises(self):
        summary = BatchSummary.for_providers(["x"], total=1)
        summary.finalize(valid_count=1)

        with pytest.raises(RuntimeError):
            summary.finalize(valid_count=1)
        with pytest.raises(RuntimeError):
            summary.record_judgment(ParseFailure(raw=""))
