"""Data models for distribution runs."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from dispatch.delegation.models import Recommendation
from dispatch.policy.models import DistributionSettings


class OutcomeKind(str, Enum):
    """What happened to a task during a batch run."""
    AUTO_ASSIGNED = "auto_assigned"
    DEFERRED = "deferred"  # below threshold, left for manual review
    SKIPPED_CONFLICT = "skipped_conflict"  # another caller claimed it first
    UNASSIGNABLE = "unassignable"  # nobody eligible this pass
    NOT_FOUND = "not_found"  # task vanished before commit


class TaskOutcome(BaseModel):
    """Per-task result of a batch run."""
    task_id: str
    kind: OutcomeKind
    confidence: float
    staff_id: Optional[str] = None
    message: str = ""
    recommendation: Recommendation


class BatchStats(BaseModel):
    """Read-only counters for one batch run."""
    model_config = ConfigDict(frozen=True)

    tasks_processed: int = 0
    auto_assignments: int = 0
    manual_overrides: int = 0
    skipped_conflicts: int = 0
    unassignable: int = 0
    deferred: int = 0
    not_found: int = 0
    average_confidence: float = 0.0


class BatchResult(BaseModel):
    """Result of one orchestrated pass."""
    settings: DistributionSettings
    outcomes: List[TaskOutcome]
    stats: BatchStats
    cancelled: bool = False

    def outcomes_of(self, kind: OutcomeKind) -> List[TaskOutcome]:
        return [o for o in self.outcomes if o.kind == kind]
