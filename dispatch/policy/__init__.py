"""Policy engine for dispatch - candidate scoring and settings."""

from dispatch.policy.models import (
    Availability,
    Complexity,
    DistributionSettings,
    Performance,
    Priority,
    SkillMatching,
    Staff,
    Task,
    TaskStatus,
)
from dispatch.policy.scoring import ScoringPolicy, ScoreResult, score
from dispatch.policy.rules import ConfigurationError, validate_settings, parse_settings

__all__ = [
    "Availability",
    "Complexity",
    "DistributionSettings",
    "Performance",
    "Priority",
    "SkillMatching",
    "Staff",
    "Task",
    "TaskStatus",
    "ScoringPolicy",
    "ScoreResult",
    "score",
    "ConfigurationError",
    "validate_settings",
    "parse_settings",
]
