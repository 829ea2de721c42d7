"""Database package for staff and task persistence."""

from dispatch.db.database import get_db, init_db, get_session, make_engine
from dispatch.db.models import Base, StaffRecord, TaskRecord
from dispatch.db.store import SqlAssignmentStore

__all__ = [
    "get_db",
    "init_db",
    "get_session",
    "make_engine",
    "Base",
    "StaffRecord",
    "TaskRecord",
    "SqlAssignmentStore",
]
