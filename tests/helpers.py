"""Shared fakes for orchestration and judge tests."""

import asyncio
import json

from search_arena.models.results import (
    NormalizedResult,
    ProviderFailure,
    ProviderSuccess,
)


class FakeProvider:
    """Provider stand-in with a scripted outcome."""

    def __init__(
        self,
        name,
        result_count=3,
        latency=100,
        error=None,
        raises=None,
        delay=0.0,
    ):
        self.name = name
        self.result_count = result_count
        self.latency = latency
        self.error = error
        self.raises = raises
        self.delay = delay
        self.calls = []

    async def fetch(self, query, limit):
        self.calls.append((query, limit))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        if self.error is not None:
            return ProviderFailure(provider=self.name, error=self.error)
        return ProviderSuccess(
            provider=self.name,
            query=query,
            results=[
                NormalizedResult(
                    title=f"{self.name} result {i}",
                    url=f"https://{self.name}.example.com/{i}",
                    snippet=f"snippet {i}",
                )
                for i in range(self.result_count)
            ],
            latency=self.latency,
        )


def score_entry(total=40):
    return {
        "scores": {
            "relevance": 8,
            "freshness": 8,
            "actionability": 8,
            "sourceQuality": 8,
            "coverage": 8,
        },
        "totalScore": total,
        "strengths": ["on topic"],
        "weaknesses": ["few dates"],
    }


def judge_reply(winner, providers, prose=True):
    """A judge reply scoring every provider, optionally wrapped in prose."""
    body = {name: score_entry() for name in providers}
    body.update(
        {
            "winner": winner,
            "recommendation": "Use the winner for this kind of query.",
            "reasoning": "It returned the most relevant sources.",
        }
    )
    text = json.dumps(body, indent=2)
    if prose:
        return f"Here is my evaluation:\n```json\n{text}\n```\nLet me know if you need more."
    return text
