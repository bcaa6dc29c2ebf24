"""Prompt templates for judging and test-query generation."""

import json

from ..models.results import ProviderOutcome, ProviderSuccess

JUDGE_SYSTEM = (
    "You are a technical search quality evaluator. Always respond with valid JSON only."
)

GENERATE_SYSTEM = "You are a helpful assistant. Respond with valid JSON only."

DEFAULT_DESCRIPTION = (
    "A general audience using web search to research products, learn how to do "
    "things, follow current events, and compare options before making decisions."
)

CRITERIA = """\
**Evaluation Criteria:**
1. **Relevance** (0-10): How well do the results match what the user is looking for?
2. **Freshness** (0-10): Are the results up to date for this topic?
3. **Actionability** (0-10): Can the results be used directly to answer or act on the query?
4. **Source Quality** (0-10): Are the sources authoritative and reputable?
5. **Coverage** (0-10): Do the results cover the topic comprehensively?"""


def _results_block(outcome: ProviderOutcome, limit: int) -> str:
    # Failed providers are shown with no results so the judge can penalize them
    results = outcome.results[:limit] if isinstance(outcome, ProviderSuccess) else []
    return json.dumps([r.to_payload() for r in results], indent=2)


def build_judge_prompt(
    query: str, outcomes: dict[str, ProviderOutcome], results_per_provider: int = 5
) -> str:
    """Build the rubric-scoring prompt for one query."""
    providers = list(outcomes)
    sections = [
        "You are an expert evaluator comparing the results of several search APIs "
        "for the same query.",
        f'**Query:** "{query}"',
    ]
    for name in providers:
        sections.append(
            f"**Results from `{name}`:**\n{_results_block(outcomes[name], results_per_provider)}"
        )
    sections.append(CRITERIA)

    score_shape = {
        "scores": {
            "relevance": "X",
            "freshness": "X",
            "actionability": "X",
            "sourceQuality": "X",
            "coverage": "X",
        },
        "totalScore": "X",
        "strengths": ["..."],
        "weaknesses": ["..."],
    }
    shape: dict[str, object] = {name: score_shape for name in providers}
    shape["winner"] = " | ".join([*providers, "tie"])
    shape["recommendation"] = "Brief recommendation based on this query"
    shape["reasoning"] = "2-3 sentence explanation of the winner choice"

    sections.append(
        "Score every provider, including those with no results. Use integers for "
        "all scores; totalScore is the sum of the five criteria. The winner must be "
        "one of the provider ids above, or \"tie\".\n\n"
        f"Provide your evaluation as JSON:\n{json.dumps(shape, indent=2)}"
    )
    return "\n\n".join(sections)


def build_generate_prompt(description: str, count: int) -> str:
    """Build the prompt asking for a list of realistic test queries."""
    return f"""Generate {count} realistic search queries that this audience would ask.

Context: {description or DEFAULT_DESCRIPTION}

The queries should cover a mix of scenarios:
- Current events and recent developments
- How-to and tutorial questions
- Product and service comparisons
- Factual lookups with a single correct answer
- Open-ended research questions that need several sources

Return as JSON array of strings:
["query 1", "query 2", ...]

Make queries specific and realistic - what a person would actually type."""
