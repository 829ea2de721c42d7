"""Delegation engine for dispatch - candidate ranking and recommendations."""

from dispatch.delegation.selector import recommend, rank_candidates
from dispatch.delegation.models import CandidateScore, Recommendation

__all__ = [
    "recommend",
    "rank_candidates",
    "CandidateScore",
    "Recommendation",
]
