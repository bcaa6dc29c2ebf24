"""Fan-out and batch orchestration."""

from .batch_runner import BatchRunner
from .coordinator import FanOutCoordinator

__all__ = ["BatchRunner", "FanOutCoordinator"]
