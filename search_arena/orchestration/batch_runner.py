"""Sequential batch evaluation over a list of queries."""

from __future__ import annotations

import httpx

from ..judging.judge import Judge
from ..models.batch import BatchReport, BatchSummary, QueryRecord
from ..utils.errors import SearchError
from ..utils.logging import get_logger
from .coordinator import FanOutCoordinator

logger = get_logger(__name__)


class BatchRunner:
    """Runs dispatch, judge and fold for each query, one query at a time.

    Queries are processed strictly in order so the judging backend sees one
    request at a time and the summary has a single writer. A query that
    fails is recorded with its error and the loop moves on.
    """

    def __init__(self, coordinator: FanOutCoordinator, judge: Judge, num_results: int = 10):
        self.coordinator = coordinator
        self.judge = judge
        self.num_results = num_results

    async def run(self, queries: list[str]) -> BatchReport:
        """Evaluate every query and return the finalized summary with per-query records."""
        total = len(queries)
        logger.info(f"[TestSuite] Running {total} queries")
        summary = BatchSummary.for_providers(self.coordinator.provider_names, total)
        records: list[QueryRecord] = []

        for index, query in enumerate(queries, start=1):
            logger.info(f'[TestSuite] Processing {index}/{total}: "{query}"')
            try:
                outcomes = await self.coordinator.dispatch(query, self.num_results)
                judgment = await self.judge.evaluate(query, outcomes)
            except (SearchError, httpx.HTTPError) as e:
                logger.error(f'[TestSuite] Error for query "{query}": {e}')
                records.append(QueryRecord(query=query, error=str(e)))
                continue

            summary.record_judgment(judgment)
            summary.record_latencies(outcomes)
            records.append(
                QueryRecord(query=query, search_results=outcomes, judgment=judgment)
            )

        summary.finalize(valid_count=sum(1 for r in records if r.ok))
        wins = ", ".join(f"{name}={count}" for name, count in summary.wins.items())
        logger.info(f"[TestSuite] Complete - Winner counts: {wins}, ties={summary.ties}")
        return BatchReport(summary=summary, results=records)
