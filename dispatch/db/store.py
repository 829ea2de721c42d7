"""
SQL-backed assignment store.

The claim is a single conditional UPDATE:

    UPDATE tasks SET status = 'in_progress', assigned_to = :staff_id
    WHERE id = :task_id AND status = 'pending' AND assigned_to IS NULL

so the database decides which of two racing callers wins. Load changes
are applied with an expression update, never read-modify-write.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import case, update
from sqlalchemy.orm import Session, sessionmaker
from dispatch.assignment.models import CommitStatus
from dispatch.db.models import StaffRecord, TaskRecord
from dispatch.delegation.roster import (
    LOAD_PER_ACTIVE_TASK,
    MAX_LOAD,
    build_staff,
    derive_availability,
)
from dispatch.policy.extraction import extract_task_from_request
from dispatch.policy.models import Availability, Performance, Staff, Task, TaskStatus

logger = logging.getLogger(__name__)


def _staff_from_record(record: StaffRecord) -> Staff:
    return Staff(
        id=record.id,
        name=record.name,
        role=record.role,
        current_load=record.current_load,
        active_task_count=record.active_task_count,
        availability=derive_availability(record.on_shift, record.current_load),
        skills=set(record.skills or []),
        performance=Performance(
            efficiency=record.efficiency,
            quality=record.quality,
            speed=record.speed,
        ),
        location=record.location,
    )


def _task_from_record(record: TaskRecord) -> Task:
    return Task(
        id=record.id,
        title=record.title,
        description=record.description,
        priority=record.priority,
        category=record.category,
        location=record.location,
        estimated_duration_hours=record.estimated_duration_hours,
        required_skills=set(record.required_skills or []),
        complexity=record.complexity,
        status=record.status,
        assigned_to=record.assigned_to,
    )


def _find_task(db: Session, task_id: str) -> Optional[TaskRecord]:
    return db.query(TaskRecord).filter(TaskRecord.id == task_id).one_or_none()


class SqlAssignmentStore:
    """AssignmentStore over the staff and tasks tables."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        if session_factory is None:
            from dispatch.db.database import SessionLocal
            session_factory = SessionLocal
        self._session_factory = session_factory

    def _session(self) -> Session:
        return self._session_factory()

    # =============================================================================
    # Snapshots
    # =============================================================================

    def get_available_staff(self) -> List[Staff]:
        with self._session() as db:
            records = db.query(StaffRecord).order_by(StaffRecord.id).all()
            return [_staff_from_record(r) for r in records]

    def get_pending_tasks(self) -> List[Task]:
        with self._session() as db:
            records = db.query(TaskRecord).filter(
                TaskRecord.status == TaskStatus.PENDING.value,
                TaskRecord.assigned_to.is_(None),
            ).order_by(TaskRecord.sequence).all()
            return [_task_from_record(r) for r in records]

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._session() as db:
            record = _find_task(db, task_id)
            return _task_from_record(record) if record else None

    def get_staff(self, staff_id: str) -> Optional[Staff]:
        with self._session() as db:
            record = db.get(StaffRecord, staff_id)
            return _staff_from_record(record) if record else None

    # =============================================================================
    # Writes (committer only)
    # =============================================================================

    def persist_commit(self, task_id: str, staff_id: str) -> CommitStatus:
        with self._session() as db:
            stmt = (
                update(TaskRecord)
                .where(
                    TaskRecord.id == task_id,
                    TaskRecord.status == TaskStatus.PENDING.value,
                    TaskRecord.assigned_to.is_(None),
                )
                .values(
                    status=TaskStatus.IN_PROGRESS.value,
                    assigned_to=staff_id,
                    assigned_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            result = db.execute(stmt)

            if result.rowcount == 1:
                db.commit()
                return CommitStatus.OK

            db.rollback()
            if _find_task(db, task_id) is None:
                return CommitStatus.NOT_FOUND
            return CommitStatus.ALREADY_ASSIGNED

    def record_assignment(self, staff_id: str) -> Optional[Staff]:
        with self._session() as db:
            next_load = StaffRecord.current_load + LOAD_PER_ACTIVE_TASK
            stmt = (
                update(StaffRecord)
                .where(StaffRecord.id == staff_id)
                .values(
                    current_load=case((next_load > MAX_LOAD, MAX_LOAD), else_=next_load),
                    active_task_count=StaffRecord.active_task_count + 1,
                )
                .execution_options(synchronize_session=False)
            )
            db.execute(stmt)
            db.commit()

            record = db.get(StaffRecord, staff_id)
            return _staff_from_record(record) if record else None

    # =============================================================================
    # Intake (external collaborators)
    # =============================================================================

    def add_task(self, task: Task) -> Task:
        with self._session() as db:
            db.add(TaskRecord(
                id=task.id,
                title=task.title,
                description=task.description,
                priority=task.priority.value,
                category=task.category,
                location=task.location,
                estimated_duration_hours=task.estimated_duration_hours,
                required_skills=sorted(task.required_skills),
                complexity=task.complexity.value,
                status=task.status.value,
                assigned_to=task.assigned_to,
            ))
            db.commit()
        logger.info(f"Added task {task.id} ({task.priority.value})")
        return task

    def add_request(self, request: Dict[str, Any]) -> Task:
        """Store a raw maintenance request, deriving skills/duration/complexity."""
        return self.add_task(extract_task_from_request(request))

    def add_staff(self, staff: Staff) -> Staff:
        with self._session() as db:
            db.merge(StaffRecord(
                id=staff.id,
                name=staff.name,
                role=staff.role,
                current_load=staff.current_load,
                active_task_count=staff.active_task_count,
                on_shift=staff.availability != Availability.OFFLINE,
                skills=sorted(staff.skills),
                efficiency=staff.performance.efficiency,
                quality=staff.performance.quality,
                speed=staff.performance.speed,
                location=staff.location,
            ))
            db.commit()
        return staff

    def add_profile(
        self,
        profile: Dict[str, Any],
        active_task_count: int = 0,
        on_shift: bool = True,
        skills: Optional[Iterable[str]] = None,
        performance: Optional[Performance] = None,
    ) -> Staff:
        """Store a raw staff profile with its live counters."""
        staff = build_staff(profile, active_task_count, on_shift, skills, performance)
        return self.add_staff(staff)

    def remove_task(self, task_id: str) -> None:
        with self._session() as db:
            record = _find_task(db, task_id)
            if record is not None:
                db.delete(record)
                db.commit()
