"""
Distribution service - the entry points other systems call.

Wraps one store with the batch run, single-task previews, manual
assignment and last-run statistics.
"""

import logging
import threading
from typing import Iterable, Optional
from dispatch.assignment.committer import AssignmentCommitter
from dispatch.assignment.models import CommitResult
from dispatch.assignment.store import AssignmentStore, InMemoryAssignmentStore
from dispatch.delegation.models import Recommendation
from dispatch.delegation.selector import recommend
from dispatch.policy.models import DistributionSettings, Staff, Task
from dispatch.policy.rules import validate_settings
from dispatch.policy.scoring import ScoringPolicy
from dispatch.workflows.models import BatchResult, BatchStats
from dispatch.workflows.orchestrator import DistributionOrchestrator
from dispatch.workflows.stats import StatsAccumulator

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """Raised when a task id is unknown to the store."""


class DistributionService:
    """Batch, preview and manual assignment over one store."""

    def __init__(
        self,
        store: AssignmentStore,
        settings: Optional[DistributionSettings] = None,
        policy: Optional[ScoringPolicy] = None,
    ):
        if settings is None:
            from dispatch.policy.config import load_settings_from_env
            settings = load_settings_from_env()

        self.store = store
        self.settings = validate_settings(settings)
        self.policy = policy
        self.committer = AssignmentCommitter(store)
        self.orchestrator = DistributionOrchestrator(store, self.committer, policy)

        self._stats = StatsAccumulator()
        self._last_result: Optional[BatchResult] = None
        self._batch_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._cancel_event: Optional[threading.Event] = None  # set only while a pass runs

    @property
    def last_result(self) -> Optional[BatchResult]:
        return self._last_result

    def run_batch(self, settings: Optional[DistributionSettings] = None) -> BatchResult:
        """
        Run one distribution pass; concurrent calls wait their turn.

        Raises:
            ConfigurationError: before anything runs, for unusable settings
        """
        settings = validate_settings(settings if settings is not None else self.settings)

        with self._batch_lock:
            cancel_event = threading.Event()
            stats = StatsAccumulator()
            with self._run_lock:
                self._cancel_event = cancel_event
                self._stats = stats
            try:
                result = self.orchestrator.run_batch(
                    settings,
                    stats=stats,
                    cancel_event=cancel_event,
                )
            finally:
                with self._run_lock:
                    self._cancel_event = None
            self._last_result = result
            return result

    def cancel_batch(self) -> bool:
        """Ask a running pass to stop after its current task."""
        with self._run_lock:
            if self._cancel_event is None:
                return False
            self._cancel_event.set()
        logger.info("Cancellation requested for running distribution pass")
        return True

    def recommend(self, task_id: str, settings: Optional[DistributionSettings] = None) -> Recommendation:
        """Score a single task against the current roster without committing."""
        settings = validate_settings(settings if settings is not None else self.settings)
        task = self.store.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id!r} not found")
        return recommend(task, self.store.get_available_staff(), settings, self.policy)

    def commit(self, task_id: str, staff_id: str) -> CommitResult:
        """Manual assignment; same atomic contract as the batch, no threshold."""
        result = self.committer.commit(task_id, staff_id)
        if result.ok:
            self._stats.record_manual_override()
        return result

    def get_stats(self) -> BatchStats:
        return self._stats.snapshot()


def preview_distribution(
    tasks: Iterable[Task],
    staff: Iterable[Staff],
    settings: DistributionSettings,
    policy: Optional[ScoringPolicy] = None,
) -> BatchResult:
    """Run a pass against a private copy of the given snapshots."""
    store = InMemoryAssignmentStore(staff=staff, tasks=tasks)
    return DistributionOrchestrator(store, policy=policy).run_batch(settings)


_default_service: Optional[DistributionService] = None
_default_lock = threading.Lock()


def get_default_service() -> DistributionService:
    """Service backed by the configured database, created on first use."""
    global _default_service

    with _default_lock:
        if _default_service is None:
            from dispatch.db.database import init_db
            from dispatch.db.store import SqlAssignmentStore

            init_db()
            _default_service = DistributionService(SqlAssignmentStore())
            logger.info("Default distribution service initialized")
        return _default_service
