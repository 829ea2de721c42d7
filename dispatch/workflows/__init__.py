"""Distribution runs for dispatch - batch orchestration and statistics."""

from dispatch.workflows.orchestrator import DistributionOrchestrator
from dispatch.workflows.models import BatchResult, BatchStats, OutcomeKind, TaskOutcome
from dispatch.workflows.service import DistributionService, TaskNotFoundError, preview_distribution
from dispatch.workflows.stats import StatsAccumulator

__all__ = [
    "DistributionOrchestrator",
    "BatchResult",
    "BatchStats",
    "OutcomeKind",
    "TaskOutcome",
    "DistributionService",
    "TaskNotFoundError",
    "preview_distribution",
    "StatsAccumulator",
]
