"""Logging setup for the search_arena logger tree."""

import logging
import sys

from ..models.results import ProviderOutcome, ProviderSuccess

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(log_level: str = "INFO") -> logging.Logger:
    """Attach a stdout handler to the ``search_arena`` logger.

    Unknown level names fall back to INFO. Calling this again only updates
    the level; it never adds a second handler.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger("search_arena")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the application namespace."""
    return logging.getLogger(name)


def log_outcomes(
    logger: logging.Logger, query: str, outcomes: dict[str, ProviderOutcome]
):
    """Log a one-line latency summary for a fan-out."""
    parts = []
    for name, outcome in outcomes.items():
        if isinstance(outcome, ProviderSuccess):
            parts.append(f"{name}: {outcome.latency}ms")
        else:
            parts.append(f"{name}: error")
    logger.info(f'[Search] Complete for "{query}" - {", ".join(parts)}')
