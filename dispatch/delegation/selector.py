"""
Staff selection algorithm.

Ranks every eligible staff member for a task:
- Offline staff are never candidates
- Candidates excluded by a criterion (strict skills) are dropped
- Zero scores are dropped
- Ties go to the lower current load, then the lower staff id
"""

import logging
from typing import Iterable, List, Optional
from dispatch.delegation.models import CandidateScore, Recommendation
from dispatch.policy.models import Availability, DistributionSettings, Staff, Task
from dispatch.policy.scoring import ScoringPolicy, score

logger = logging.getLogger(__name__)

MAX_ALTERNATES = 2
NO_CANDIDATE_REASON = "No suitable staff found"


def rank_candidates(
    task: Task,
    staff_pool: Iterable[Staff],
    settings: DistributionSettings,
    policy: Optional[ScoringPolicy] = None,
) -> List[CandidateScore]:
    """Score all eligible staff for a task, best first."""
    scored = []

    for staff in staff_pool:
        if staff.availability == Availability.OFFLINE:
            continue

        result = score(task, staff, settings, policy)
        if result.excluded or result.value <= 0:
            logger.debug(f"Dropped {staff.id} for task {task.id}: {'; '.join(result.contributions)}")
            continue

        scored.append(CandidateScore(
            staff_id=staff.id,
            score=result.value,
            current_load=staff.current_load,
            reasoning=result.contributions,
            factors=result.factors,
        ))

    scored.sort(key=lambda c: (-c.score, c.current_load, c.staff_id))
    return scored


def recommend(
    task: Task,
    staff_pool: Iterable[Staff],
    settings: DistributionSettings,
    policy: Optional[ScoringPolicy] = None,
) -> Recommendation:
    """
    Build a recommendation for one task.

    Args:
        task: Task to place
        staff_pool: Current staff snapshot
        settings: Policy configuration

    Returns:
        Recommendation with primary choice, up to two alternates and the
        primary's score as confidence; an empty recommendation with
        confidence 0 when nobody is eligible
    """
    candidates = rank_candidates(task, staff_pool, settings, policy)

    if not candidates:
        logger.info(f"No suitable staff for task {task.id}")
        return Recommendation(
            task_id=task.id,
            confidence=0.0,
            reasoning=[NO_CANDIDATE_REASON],
        )

    best = candidates[0]
    logger.info(f"Recommended {best.staff_id} for task {task.id} (confidence: {best.score:.1f})")

    return Recommendation(
        task_id=task.id,
        primary_choice=best.staff_id,
        alternate_choices=[c.staff_id for c in candidates[1:1 + MAX_ALTERNATES]],
        confidence=best.score,
        reasoning=best.reasoning,
        candidates=candidates,
    )
