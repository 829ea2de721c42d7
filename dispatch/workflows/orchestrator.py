"""
Distribution orchestrator for batch assignment passes.

Tasks are handled one at a time in priority order. Each step re-reads the
task and the staff roster, so the load added by one commit is seen when
scoring the next task, and a task claimed elsewhere since the pass started
is skipped rather than scored. Steps are independent: a conflict, a missing task or a
cancellation never undoes earlier commits.
"""

import logging
import threading
from typing import Iterable, List, Optional
from dispatch.assignment.committer import AssignmentCommitter
from dispatch.assignment.models import CommitStatus
from dispatch.assignment.store import AssignmentStore
from dispatch.delegation.models import Recommendation
from dispatch.delegation.selector import recommend
from dispatch.policy.models import PRIORITY_RANK, DistributionSettings, Task, TaskStatus
from dispatch.policy.rules import describe_settings, validate_settings
from dispatch.policy.scoring import ScoringPolicy
from dispatch.workflows.models import BatchResult, OutcomeKind, TaskOutcome
from dispatch.workflows.stats import StatsAccumulator

logger = logging.getLogger(__name__)


def sort_by_priority(tasks: Iterable[Task]) -> List[Task]:
    """Urgent first; equal priorities keep their creation order."""
    return sorted(tasks, key=lambda t: -PRIORITY_RANK[t.priority])


class DistributionOrchestrator:
    """Drives one batch pass over pending tasks."""

    def __init__(
        self,
        store: AssignmentStore,
        committer: Optional[AssignmentCommitter] = None,
        policy: Optional[ScoringPolicy] = None,
    ):
        self.store = store
        self.committer = committer or AssignmentCommitter(store)
        self.policy = policy

    def run_batch(
        self,
        settings: DistributionSettings,
        tasks: Optional[Iterable[Task]] = None,
        stats: Optional[StatsAccumulator] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchResult:
        """
        Run one distribution pass.

        Args:
            settings: Policy configuration, validated before anything runs
            tasks: Tasks to place; defaults to the store's pending tasks
            stats: Accumulator to record into (a fresh one if omitted)
            cancel_event: Checked between tasks; when set the pass stops

        Returns:
            BatchResult with one outcome per processed task

        Raises:
            ConfigurationError: settings are unusable; nothing was scored
        """
        validate_settings(settings)
        stats = stats or StatsAccumulator()

        queue = sort_by_priority(self.store.get_pending_tasks() if tasks is None else tasks)
        logger.info(f"Starting distribution pass over {len(queue)} tasks with {describe_settings(settings)}")

        outcomes = []
        cancelled = False

        for task in queue:
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                logger.info(f"Distribution pass cancelled after {len(outcomes)} of {len(queue)} tasks")
                break

            outcome = self._process_task(task, settings)
            stats.record(outcome.kind, outcome.confidence)
            outcomes.append(outcome)

        result = BatchResult(
            settings=settings,
            outcomes=outcomes,
            stats=stats.snapshot(),
            cancelled=cancelled,
        )
        logger.info(
            f"Distribution pass done: {result.stats.auto_assignments} auto-assigned, "
            f"{result.stats.deferred} deferred, {result.stats.skipped_conflicts} conflicts, "
            f"{result.stats.unassignable} unassignable"
        )
        return result

    def _process_task(self, task: Task, settings: DistributionSettings) -> TaskOutcome:
        """Snapshot, decide, then commit at most once."""
        current = self.store.get_task(task.id)
        if current is None:
            logger.warning(f"Task {task.id} vanished before scoring")
            return TaskOutcome(
                task_id=task.id,
                kind=OutcomeKind.NOT_FOUND,
                confidence=0.0,
                message=f"Task {task.id!r} not found",
                recommendation=Recommendation(task_id=task.id),
            )
        if current.status != TaskStatus.PENDING or current.assigned_to is not None:
            logger.info(f"Task {task.id} claimed by {current.assigned_to} since the pass started")
            return TaskOutcome(
                task_id=task.id,
                kind=OutcomeKind.SKIPPED_CONFLICT,
                confidence=0.0,
                staff_id=current.assigned_to,
                message="skipped, already assigned",
                recommendation=Recommendation(task_id=task.id),
            )

        task = current
        staff_pool = self.store.get_available_staff()
        recommendation = recommend(task, staff_pool, settings, self.policy)

        if not recommendation.has_candidate:
            return TaskOutcome(
                task_id=task.id,
                kind=OutcomeKind.UNASSIGNABLE,
                confidence=recommendation.confidence,
                message="; ".join(recommendation.reasoning),
                recommendation=recommendation,
            )

        if recommendation.confidence < settings.auto_assign_threshold:
            logger.info(
                f"Task {task.id} deferred: confidence {recommendation.confidence:.1f} "
                f"< {settings.auto_assign_threshold}"
            )
            return TaskOutcome(
                task_id=task.id,
                kind=OutcomeKind.DEFERRED,
                confidence=recommendation.confidence,
                staff_id=recommendation.primary_choice,
                message="deferred for manual review",
                recommendation=recommendation,
            )

        result = self.committer.commit(task.id, recommendation.primary_choice)

        if result.status == CommitStatus.OK:
            kind, message = OutcomeKind.AUTO_ASSIGNED, "auto-assigned"
        elif result.status == CommitStatus.ALREADY_ASSIGNED:
            kind, message = OutcomeKind.SKIPPED_CONFLICT, "skipped, already assigned"
        else:
            kind, message = OutcomeKind.NOT_FOUND, result.message

        return TaskOutcome(
            task_id=task.id,
            kind=kind,
            confidence=recommendation.confidence,
            staff_id=recommendation.primary_choice,
            message=message,
            recommendation=recommendation,
        )
