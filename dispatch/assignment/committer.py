"""
Assignment committer - the single writer of task and staff state.

Both the batch run and manual assignment go through commit(), so the
first caller to claim a task wins and every later caller gets
ALREADY_ASSIGNED without side effects.
"""

import logging
from dispatch.assignment.models import CommitResult, CommitStatus
from dispatch.assignment.store import AssignmentStore

logger = logging.getLogger(__name__)


class AssignmentCommitter:
    """Moves a task from pending to in_progress for one staff member."""

    def __init__(self, store: AssignmentStore):
        self.store = store

    def commit(self, task_id: str, staff_id: str) -> CommitResult:
        """
        Atomically assign a pending task.

        Args:
            task_id: Task to claim
            staff_id: Staff member to assign

        Returns:
            CommitResult with OK, ALREADY_ASSIGNED or NOT_FOUND
        """
        if not staff_id or self.store.get_staff(staff_id) is None:
            logger.warning(f"Commit of task {task_id} refused: staff {staff_id!r} not found")
            return CommitResult(
                status=CommitStatus.NOT_FOUND,
                task_id=task_id,
                staff_id=staff_id,
                message=f"Staff {staff_id!r} not found",
            )

        status = self.store.persist_commit(task_id, staff_id)

        if status == CommitStatus.ALREADY_ASSIGNED:
            logger.info(f"Task {task_id} already assigned, commit to {staff_id} skipped")
            return CommitResult(
                status=status,
                task_id=task_id,
                staff_id=staff_id,
                message="Task already assigned",
            )

        if status == CommitStatus.NOT_FOUND:
            logger.warning(f"Task {task_id} not found at commit time")
            return CommitResult(
                status=status,
                task_id=task_id,
                staff_id=staff_id,
                message=f"Task {task_id!r} not found",
            )

        staff = self.store.record_assignment(staff_id)
        load = staff.current_load if staff else None
        logger.info(f"Assigned task {task_id} to {staff_id} (load now: {load})")

        return CommitResult(
            status=CommitStatus.OK,
            task_id=task_id,
            staff_id=staff_id,
            message="Task assigned",
            staff_load=load,
        )
