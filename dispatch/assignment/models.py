"""Data models for assignment commits."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class CommitStatus(str, Enum):
    """Outcome of a compare-and-swap assignment."""
    OK = "ok"
    ALREADY_ASSIGNED = "already_assigned"  # another caller claimed it first
    NOT_FOUND = "not_found"  # unknown task or staff id


class CommitResult(BaseModel):
    """Result of a commit attempt."""
    status: CommitStatus
    task_id: str
    staff_id: str
    message: str = ""
    staff_load: Optional[float] = None  # assignee load after a successful commit

    @property
    def ok(self) -> bool:
        return self.status == CommitStatus.OK
