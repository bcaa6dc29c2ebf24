"""Judging components."""

from .extraction import Extraction, extract_json_array, extract_json_object
from .judge import Judge, parse_queries, parse_verdict
from .llm_client import ChatCompletionClient

__all__ = [
    "ChatCompletionClient",
    "Extraction",
    "Judge",
    "extract_json_array",
    "extract_json_object",
    "parse_queries",
    "parse_verdict",
]
