"""
Task and staff storage behind the committer.

AssignmentStore is the interface the engine consumes: snapshot reads for
scoring, plus the two writes the committer performs. Any backend works as
long as persist_commit is an atomic conditional update.
"""

import threading
from typing import Dict, Iterable, List, Optional, Protocol
from dispatch.assignment.models import CommitStatus
from dispatch.delegation.roster import add_task_load, derive_availability
from dispatch.policy.models import Availability, Staff, Task, TaskStatus


class AssignmentStore(Protocol):
    def get_available_staff(self) -> List[Staff]:
        """Current roster snapshot, offline staff included."""
        ...

    def get_pending_tasks(self) -> List[Task]:
        """Pending, unassigned tasks in creation order."""
        ...

    def get_task(self, task_id: str) -> Optional[Task]:
        ...

    def get_staff(self, staff_id: str) -> Optional[Staff]:
        ...

    def persist_commit(self, task_id: str, staff_id: str) -> CommitStatus:
        """Claim a pending task for a staff member, atomically."""
        ...

    def record_assignment(self, staff_id: str) -> Optional[Staff]:
        """Count one more active task for the staff member and recompute load."""
        ...


class InMemoryAssignmentStore:
    """
    Process-local store guarded by per-task locks.

    Snapshots are immutable models; writes replace them, so a snapshot
    handed to a scorer never changes underneath it.
    """

    def __init__(self, staff: Iterable[Staff] = (), tasks: Iterable[Task] = ()):
        self._staff: Dict[str, Staff] = {}
        self._tasks: Dict[str, Task] = {}  # insertion order is creation order
        self._task_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._staff_lock = threading.Lock()

        for member in staff:
            self.add_staff(member)
        for task in tasks:
            self.add_task(task)

    def add_staff(self, staff: Staff) -> None:
        with self._registry_lock:
            self._staff[staff.id] = staff

    def add_task(self, task: Task) -> None:
        with self._registry_lock:
            self._tasks[task.id] = task
            self._task_locks.setdefault(task.id, threading.Lock())

    def remove_task(self, task_id: str) -> None:
        with self._registry_lock:
            self._tasks.pop(task_id, None)

    def get_available_staff(self) -> List[Staff]:
        with self._registry_lock:
            return list(self._staff.values())

    def get_pending_tasks(self) -> List[Task]:
        with self._registry_lock:
            return [
                t for t in self._tasks.values()
                if t.status == TaskStatus.PENDING and t.assigned_to is None
            ]

    def get_tasks(self) -> List[Task]:
        with self._registry_lock:
            return list(self._tasks.values())

    def get_task(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def get_staff(self, staff_id: str) -> Optional[Staff]:
        return self._staff.get(staff_id)

    def persist_commit(self, task_id: str, staff_id: str) -> CommitStatus:
        with self._registry_lock:
            lock = self._task_locks.get(task_id)
        if lock is None:
            return CommitStatus.NOT_FOUND

        with lock:
            task = self._tasks.get(task_id)
            if task is None:
                return CommitStatus.NOT_FOUND
            if task.status != TaskStatus.PENDING or task.assigned_to is not None:
                return CommitStatus.ALREADY_ASSIGNED

            self._tasks[task_id] = task.model_copy(update={
                "status": TaskStatus.IN_PROGRESS,
                "assigned_to": staff_id,
            })
            return CommitStatus.OK

    def record_assignment(self, staff_id: str) -> Optional[Staff]:
        with self._staff_lock:
            staff = self._staff.get(staff_id)
            if staff is None:
                return None

            load = add_task_load(staff.current_load)
            on_shift = staff.availability != Availability.OFFLINE
            updated = staff.model_copy(update={
                "current_load": load,
                "active_task_count": staff.active_task_count + 1,
                "availability": derive_availability(on_shift, load),
            })
            self._staff[staff_id] = updated
            return updated
