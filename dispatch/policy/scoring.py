"""
Scoring system for candidate selection.

Scores one (task, staff) pair from independently toggled criteria:
- Workload: spare capacity of the staff member
- Skills: share of the task's required skills the staff member holds
- Performance: average of efficiency, quality and speed ratings
- Location: same floor as the task or not

Each criterion is a plain callable returning its weight, raw value and
label, so criteria can be added or swapped without touching ranking or
commit code.
"""

from typing import Callable, Dict, List, Optional, Sequence
from pydantic import BaseModel
from dispatch.policy.models import (
    Availability,
    DistributionSettings,
    SkillMatching,
    Staff,
    Task,
)

MAX_SCORE = 100.0

WORKLOAD_WEIGHT = 0.30
SKILL_WEIGHT = 0.30
ADAPTIVE_SKILL_WEIGHT = 0.40
PERFORMANCE_WEIGHT = 0.25
LOCATION_WEIGHT = 0.15

SAME_LOCATION_SCORE = 100.0
OTHER_LOCATION_SCORE = 70.0

OFFLINE_REASON = "Staff is offline"
MISSING_SKILLS_REASON = "Missing required skills"


class CriterionResult(BaseModel):
    """Contribution of a single criterion."""
    name: str
    weight: float
    value: float  # raw 0-100 value before weighting
    label: str
    excluded: bool = False  # candidate must be dropped regardless of other terms

    @property
    def weighted(self) -> float:
        return self.value * self.weight


class ScoreResult(BaseModel):
    """Total score with its reasoning trace."""
    value: float
    contributions: List[str]
    excluded: bool = False
    factors: Dict[str, float] = {}


Criterion = Callable[[Task, Staff, DistributionSettings], Optional[CriterionResult]]


def workload_criterion(
    task: Task, staff: Staff, settings: DistributionSettings
) -> Optional[CriterionResult]:
    if not settings.balance_workload:
        return None
    capacity = max(0.0, MAX_SCORE - staff.current_load)
    return CriterionResult(
        name="workload",
        weight=WORKLOAD_WEIGHT,
        value=capacity,
        label=f"Workload: {capacity:.0f}% available capacity",
    )


def skill_criterion(
    task: Task, staff: Staff, settings: DistributionSettings
) -> Optional[CriterionResult]:
    required = task.required_skills
    matched = len(required & staff.skills)

    if settings.skill_matching == SkillMatching.STRICT and matched < len(required):
        return CriterionResult(
            name="skills",
            weight=0.0,
            value=0.0,
            label=MISSING_SKILLS_REASON,
            excluded=True,
        )

    # Nothing required means nothing is missing
    skill_score = MAX_SCORE * matched / len(required) if required else MAX_SCORE
    weight = ADAPTIVE_SKILL_WEIGHT if settings.skill_matching == SkillMatching.ADAPTIVE else SKILL_WEIGHT
    return CriterionResult(
        name="skills",
        weight=weight,
        value=skill_score,
        label=f"Skills: {matched}/{len(required)} match",
    )


def performance_criterion(
    task: Task, staff: Staff, settings: DistributionSettings
) -> Optional[CriterionResult]:
    if not settings.prioritize_efficiency:
        return None
    average = staff.performance.average
    return CriterionResult(
        name="performance",
        weight=PERFORMANCE_WEIGHT,
        value=average,
        label=f"Performance: {round(average)}% avg rating",
    )


def location_criterion(
    task: Task, staff: Staff, settings: DistributionSettings
) -> Optional[CriterionResult]:
    if not settings.consider_location:
        return None
    same_floor = staff.location == task.location
    return CriterionResult(
        name="location",
        weight=LOCATION_WEIGHT,
        value=SAME_LOCATION_SCORE if same_floor else OTHER_LOCATION_SCORE,
        label=f"Location: {'same floor' if same_floor else 'different floor'}",
    )


DEFAULT_CRITERIA: Sequence[Criterion] = (
    workload_criterion,
    skill_criterion,
    performance_criterion,
    location_criterion,
)


class ScoringPolicy:
    """Sums the enabled criteria for a (task, staff) pair."""

    def __init__(self, criteria: Optional[Sequence[Criterion]] = None):
        self.criteria = list(criteria) if criteria is not None else list(DEFAULT_CRITERIA)

    def evaluate(
        self,
        task: Task,
        staff: Staff,
        settings: DistributionSettings,
    ) -> List[CriterionResult]:
        results = []
        for criterion in self.criteria:
            result = criterion(task, staff, settings)
            if result is not None:
                results.append(result)
        return results

    def score(
        self,
        task: Task,
        staff: Staff,
        settings: DistributionSettings,
    ) -> ScoreResult:
        """
        Score a candidate from 0-100.

        Offline staff and candidates excluded by a criterion score 0.
        The weighted sum is clamped to 100, since enabling every
        criterion allows a raw total of 110.
        """
        if staff.availability == Availability.OFFLINE:
            return ScoreResult(value=0.0, contributions=[OFFLINE_REASON], excluded=True)

        results = self.evaluate(task, staff, settings)

        for result in results:
            if result.excluded:
                return ScoreResult(value=0.0, contributions=[result.label], excluded=True)

        total = sum(result.weighted for result in results)
        return ScoreResult(
            value=round(min(max(total, 0.0), MAX_SCORE), 2),
            contributions=[result.label for result in results],
            factors={result.name: result.value for result in results},
        )


default_policy = ScoringPolicy()


def score(
    task: Task,
    staff: Staff,
    settings: DistributionSettings,
    policy: Optional[ScoringPolicy] = None,
) -> ScoreResult:
    """Score one candidate for one task with the given (or default) policy."""
    return (policy or default_policy).score(task, staff, settings)
