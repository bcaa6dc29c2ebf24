"""Data models."""

from .batch import BatchReport, BatchSummary, QueryRecord
from .results import (
    NormalizedResult,
    ProviderFailure,
    ProviderOutcome,
    ProviderSuccess,
    SearchComparison,
    parse_outcome,
)
from .verdict import TIE, CriteriaScores, JudgeOutcome, ParseFailure, RubricScore, Verdict

__all__ = [
    "TIE",
    "BatchReport",
    "BatchSummary",
    "CriteriaScores",
    "JudgeOutcome",
    "NormalizedResult",
    "ParseFailure",
    "ProviderFailure",
    "ProviderOutcome",
    "ProviderSuccess",
    "QueryRecord",
    "RubricScore",
    "SearchComparison",
    "Verdict",
    "parse_outcome",
]
