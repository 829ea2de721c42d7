"""
Database models for staff and tasks.

Availability is not stored: it is derived from on_shift and current_load
when a snapshot is read.
"""

from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean,
    JSON, Float, ForeignKey
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StaffRecord(Base):
    """A staff member and their live workload counters."""
    __tablename__ = "staff"

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False, default="")
    role = Column(String(100), nullable=False, default="field_staff", index=True)
    current_load = Column(Float, nullable=False, default=0.0)  # 0-100
    active_task_count = Column(Integer, nullable=False, default=0)
    on_shift = Column(Boolean, nullable=False, default=True)
    skills = Column(JSON, nullable=False, default=list)
    efficiency = Column(Float, nullable=False, default=85.0)
    quality = Column(Float, nullable=False, default=90.0)
    speed = Column(Float, nullable=False, default=75.0)
    location = Column(String(255), nullable=False, default="Ground Floor")
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)


class TaskRecord(Base):
    """A maintenance task; assigned_to is set only once status leaves pending."""
    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}

    sequence = Column(Integer, primary_key=True, autoincrement=True)  # creation order, assigned by the database
    id = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(String(500), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    priority = Column(String(20), nullable=False, default="medium", index=True)
    category = Column(String(255), nullable=False, default="General")
    location = Column(String(255), nullable=False, default="")
    estimated_duration_hours = Column(Float, nullable=False, default=0.0)
    required_skills = Column(JSON, nullable=False, default=list)
    complexity = Column(String(20), nullable=False, default="simple")
    status = Column(String(20), nullable=False, default="pending", index=True)  # 'pending', 'in_progress', ...
    assigned_to = Column(String(255), ForeignKey("staff.id"), nullable=True, index=True)
    assigned_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)
