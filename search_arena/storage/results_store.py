"""JSON snapshot storage for comparisons and batch reports."""

import json
import re
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from ..utils.errors import ResultNotFoundError
from ..utils.logging import get_logger

logger = get_logger(__name__)

RESULT_ID_PATTERN = re.compile(r"^(q|ts)-[0-9a-f]{8}$")


class SavedSnapshot(BaseModel):
    """Identifier and frontend URL of a saved snapshot."""

    id: str
    url: str


class ResultStore:
    """Writes and reads snapshots as pretty-printed JSON files.

    Snapshot ids are ``q-<8 hex>`` for single queries and ``ts-<8 hex>`` for
    test suites; anything else is rejected before touching the filesystem.
    """

    def __init__(self, results_dir: Path | str):
        self.results_dir = Path(results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)

    def save_query(
        self,
        query: str,
        results: dict[str, Any],
        judgment: dict[str, Any] | None = None,
    ) -> SavedSnapshot:
        """Persist one comparison and its judgment."""
        result_id = self._new_id("q")
        self._write(
            result_id,
            {
                "id": result_id,
                "type": "single-query",
                "createdAt": self._now(),
                "query": query,
                "results": results,
                "judgment": judgment,
            },
        )
        return SavedSnapshot(id=result_id, url=f"/q/{result_id}")

    def save_suite(self, summary: dict[str, Any], results: list[Any]) -> SavedSnapshot:
        """Persist a batch summary with its per-query records."""
        result_id = self._new_id("ts")
        self._write(
            result_id,
            {
                "id": result_id,
                "type": "test-suite",
                "createdAt": self._now(),
                "summary": summary,
                "results": results,
            },
        )
        return SavedSnapshot(id=result_id, url=f"/suite/{result_id}")

    def load(self, result_id: str) -> dict[str, Any]:
        """Read a snapshot back.

        Raises:
            ResultNotFoundError: If the id is malformed or no snapshot exists
        """
        if not RESULT_ID_PATTERN.match(result_id):
            raise ResultNotFoundError(result_id)
        path = self._path(result_id)
        if not path.exists():
            raise ResultNotFoundError(result_id)
        return json.loads(path.read_text(encoding="utf-8"))

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-{secrets.token_hex(4)}"

    def _path(self, result_id: str) -> Path:
        return self.results_dir / f"{result_id}.json"

    def _write(self, result_id: str, document: dict[str, Any]) -> None:
        path = self._path(result_id)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        logger.info(f"Saved {document['type']} snapshot {result_id}")

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
