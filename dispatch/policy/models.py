"""Data models for the scoring policy."""

from enum import Enum
from typing import Optional, Set
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Priority(str, Enum):
    """Task priority, highest first."""
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class TaskStatus(str, Enum):
    """Lifecycle of a task. Only pending -> in_progress is owned here."""
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Availability(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"  # on shift but load above 80
    OFFLINE = "offline"  # not on shift


class SkillMatching(str, Enum):
    """How partial skill matches are treated."""
    STRICT = "strict"  # every required skill, or excluded
    FLEXIBLE = "flexible"  # proportional, weight 0.3
    ADAPTIVE = "adaptive"  # proportional, weight 0.4


class Performance(BaseModel):
    """Ratings on a 0-100 scale."""
    model_config = ConfigDict(frozen=True)

    efficiency: float = 85.0
    quality: float = 90.0
    speed: float = 75.0

    @property
    def average(self) -> float:
        return (self.efficiency + self.quality + self.speed) / 3


class Staff(BaseModel):
    """Point-in-time snapshot of a staff member."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    role: str = "field_staff"
    current_load: float = Field(default=0.0, ge=0, le=100)
    active_task_count: int = Field(default=0, ge=0)
    availability: Availability = Availability.AVAILABLE
    skills: Set[str] = set()
    performance: Performance = Performance()
    location: str = "Ground Floor"


class Task(BaseModel):
    """Point-in-time snapshot of a work item."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    description: str = ""
    priority: Priority = Priority.MEDIUM
    category: str = "General"
    location: str = ""
    estimated_duration_hours: float = 0.0
    required_skills: Set[str] = set()
    complexity: Complexity = Complexity.SIMPLE
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: Optional[str] = None

    @model_validator(mode="after")
    def _check_assignment(self) -> "Task":
        # assigned_to is set exactly when the task has left pending
        if (self.assigned_to is not None) != (self.status != TaskStatus.PENDING):
            raise ValueError(
                f"Task {self.id}: assigned_to={self.assigned_to!r} "
                f"inconsistent with status={self.status.value}"
            )
        return self


class DistributionSettings(BaseModel):
    """Policy configuration, fixed for the duration of one batch run."""
    model_config = ConfigDict(frozen=True)

    prioritize_efficiency: bool = True
    balance_workload: bool = True
    consider_location: bool = True
    skill_matching: SkillMatching = SkillMatching.ADAPTIVE
    auto_assign_threshold: int = 85
