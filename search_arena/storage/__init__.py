"""Snapshot persistence."""

from .results_store import ResultStore, SavedSnapshot

__all__ = ["ResultStore", "SavedSnapshot"]
