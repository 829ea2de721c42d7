"""Assignment commits for dispatch - compare-and-swap task claims."""

from dispatch.assignment.committer import AssignmentCommitter
from dispatch.assignment.models import CommitResult, CommitStatus
from dispatch.assignment.store import AssignmentStore, InMemoryAssignmentStore

__all__ = [
    "AssignmentCommitter",
    "CommitResult",
    "CommitStatus",
    "AssignmentStore",
    "InMemoryAssignmentStore",
]
