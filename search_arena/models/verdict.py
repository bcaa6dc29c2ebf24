"""Judge verdict models."""

import math
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, Field

from .results import WireModel

TIE = "tie"


def _round_number(value: Any) -> Any:
    # Models sometimes emit 7.5 or "8"; round half up to an integer
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        # Non-finite values are left for the int check to reject
        return math.floor(value + 0.5) if math.isfinite(value) else value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return value
        return math.floor(number + 0.5) if math.isfinite(number) else value
    return value


CriterionScore = Annotated[int, BeforeValidator(_round_number), Field(ge=0, le=10)]


class CriteriaScores(WireModel):
    """The five rubric criteria, each scored 0-10."""

    relevance: CriterionScore
    freshness: CriterionScore
    actionability: CriterionScore
    source_quality: CriterionScore
    coverage: CriterionScore

    def total(self) -> int:
        return (
            self.relevance
            + self.freshness
            + self.actionability
            + self.source_quality
            + self.coverage
        )


class RubricScore(WireModel):
    """A provider's scored evaluation."""

    scores: CriteriaScores
    total_score: Annotated[int, BeforeValidator(_round_number), Field(ge=0)]
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class Verdict(WireModel):
    """Structured judge output: per-provider scores plus a single winner."""

    kind: Literal["verdict"] = "verdict"
    scores: dict[str, RubricScore]
    winner: str = Field(..., description="A scored provider id or 'tie'")
    recommendation: str = ""
    reasoning: str = ""

    @property
    def is_tie(self) -> bool:
        return self.winner == TIE


class ParseFailure(WireModel):
    """Judge or generator output that could not be turned into structured data."""

    kind: Literal["parse_failure"] = "parse_failure"
    error: str = "Failed to parse judgment"
    raw: str = Field(..., description="The model's reply, unmodified")


JudgeOutcome = Annotated[Verdict | ParseFailure, Field(discriminator="kind")]
