"""Data models for candidate selection."""

from typing import Dict, List
from pydantic import BaseModel


class CandidateScore(BaseModel):
    """Scored staff member with reasoning."""
    staff_id: str
    score: float
    current_load: float
    reasoning: List[str]
    factors: Dict[str, float] = {}


class Recommendation(BaseModel):
    """
    Ranked assignment suggestion for one task.

    Never persisted; stale as soon as staff or task state changes.
    """
    task_id: str
    primary_choice: str = ""  # empty when nobody is eligible
    alternate_choices: List[str] = []  # at most two, best first
    confidence: float = 0.0
    reasoning: List[str] = []
    candidates: List[CandidateScore] = []

    @property
    def has_candidate(self) -> bool:
        return bool(self.primary_choice)
