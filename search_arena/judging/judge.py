"""Language-model judge for provider comparisons."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ..config.settings import JudgeSettings
from ..models.results import ProviderOutcome
from ..models.verdict import TIE, ParseFailure, RubricScore, Verdict
from ..utils.logging import get_logger
from .extraction import extract_json_array, extract_json_object
from .llm_client import ChatCompletionClient
from .prompts import (
    GENERATE_SYSTEM,
    JUDGE_SYSTEM,
    build_generate_prompt,
    build_judge_prompt,
)

logger = get_logger(__name__)


def parse_verdict(text: str, provider_ids: list[str]) -> Verdict | ParseFailure:
    """Turn a judge reply into a verdict, or a ParseFailure carrying the reply.

    The winner must be one of the providers that received valid scores, or
    ``"tie"``; anything else is reported as a parse failure.
    """
    extraction = extract_json_object(text)
    if not extraction.ok:
        return ParseFailure(raw=text)

    data: dict[str, Any] = extraction.value
    # Accept scores at the top level (requested shape) or under "scores"
    nested = data.get("scores") if isinstance(data.get("scores"), dict) else {}

    scores: dict[str, RubricScore] = {}
    for provider in provider_ids:
        entry = data.get(provider, nested.get(provider))
        if not isinstance(entry, dict):
            continue
        try:
            scores[provider] = RubricScore.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Invalid scores for {provider}: {e.error_count()} errors")
            return ParseFailure(error=f"Invalid scores for provider '{provider}'", raw=text)

    if not scores:
        return ParseFailure(error="Judgment contained no provider scores", raw=text)

    winner = data.get("winner")
    candidate = winner.strip().lower() if isinstance(winner, str) else ""
    by_lower = {name.lower(): name for name in scores}
    if candidate == TIE:
        resolved = TIE
    elif candidate in by_lower:
        resolved = by_lower[candidate]
    else:
        return ParseFailure(
            error=f"Winner {winner!r} is not a scored provider or 'tie'", raw=text
        )

    recommendation = data.get("recommendation")
    reasoning = data.get("reasoning")
    return Verdict(
        scores=scores,
        winner=resolved,
        recommendation=recommendation if isinstance(recommendation, str) else "",
        reasoning=reasoning if isinstance(reasoning, str) else "",
    )


def _has_query(items: list) -> bool:
    return any(isinstance(item, str) and item.strip() for item in items)


def parse_queries(text: str) -> list[str]:
    """Extract a list of query strings from a generator reply; empty on failure."""
    extraction = extract_json_array(text, accept=_has_query)
    if not extraction.ok:
        logger.warning(f"Could not extract queries: {extraction.error}")
        return []
    return [item.strip() for item in extraction.value if isinstance(item, str) and item.strip()]


class Judge:
    """Scores provider outcomes against a fixed rubric with a language model."""

    def __init__(self, llm: ChatCompletionClient, config: JudgeSettings):
        self.llm = llm
        self.config = config

    async def evaluate(
        self, query: str, outcomes: dict[str, ProviderOutcome]
    ) -> Verdict | ParseFailure:
        """Score every provider's results for one query.

        Raises:
            SearchError: If the language-model backend is unavailable. Replies
                that cannot be parsed are returned as ParseFailure instead.
        """
        logger.info(f'[Judge] Evaluating results for: "{query}"')
        prompt = build_judge_prompt(query, outcomes, self.config.results_per_provider)
        text = await self.llm.complete(
            JUDGE_SYSTEM,
            prompt,
            temperature=self.config.judge_temperature,
            max_tokens=self.config.judge_max_tokens,
        )

        judgment = parse_verdict(text, list(outcomes))
        if isinstance(judgment, Verdict):
            logger.info(f"[Judge] Winner: {judgment.winner}")
        else:
            logger.warning(f"[Judge] {judgment.error}")
        return judgment

    async def generate(self, description: str, count: int) -> list[str]:
        """Generate realistic test queries for an audience description."""
        logger.info(f"[TestSuite] Generating {count} queries")
        text = await self.llm.complete(
            GENERATE_SYSTEM,
            build_generate_prompt(description, count),
            temperature=self.config.generate_temperature,
            max_tokens=self.config.generate_max_tokens,
        )
        return parse_queries(text)
