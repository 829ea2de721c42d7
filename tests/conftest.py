"""Shared fixtures for dispatch tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dispatch.assignment.store import InMemoryAssignmentStore
from dispatch.db.database import init_db
from dispatch.db.store import SqlAssignmentStore
from dispatch.policy.models import (
    Availability,
    DistributionSettings,
    Performance,
    Priority,
    Staff,
    Task,
)
from dispatch.workflows.service import DistributionService


@pytest.fixture
def make_staff():
    """Factory for Staff snapshots with sensible defaults."""

    def _make(
        staff_id,
        load=0.0,
        skills=("Electrical",),
        performance=90.0,
        location="Floor1",
        availability=Availability.AVAILABLE,
        active_task_count=0,
    ):
        if isinstance(performance, (int, float)):
            performance = Performance(efficiency=performance, quality=performance, speed=performance)
        return Staff(
            id=staff_id,
            name=staff_id.upper(),
            current_load=load,
            active_task_count=active_task_count,
            availability=availability,
            skills=set(skills),
            performance=performance,
            location=location,
        )

    return _make


@pytest.fixture
def make_task():
    """Factory for pending Task snapshots."""

    def _make(task_id, priority=Priority.MEDIUM, skills=("Electrical",), location="Floor1"):
        return Task(
            id=task_id,
            title=f"Task {task_id}",
            priority=priority,
            required_skills=set(skills),
            location=location,
        )

    return _make


@pytest.fixture
def settings():
    """All criteria on, adaptive matching, threshold 85."""
    return DistributionSettings()


@pytest.fixture
def memory_store():
    return InMemoryAssignmentStore()


@pytest.fixture
def service(memory_store, settings):
    return DistributionService(memory_store, settings=settings)


@pytest.fixture
def sql_store():
    """SQL store on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    yield SqlAssignmentStore(factory)
    engine.dispose()
