"""
Configuration checks for distribution settings.

Settings are rejected before any scoring starts, so a bad configuration
never produces a partially applied batch.
"""

from typing import Any, Dict, List, Mapping
from pydantic import ValidationError
from dispatch.policy.models import DistributionSettings, SkillMatching


class ConfigurationError(ValueError):
    """Distribution settings that cannot be used for a run."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


def check_settings(settings: DistributionSettings) -> List[str]:
    """Return a list of problems with the settings (empty if usable)."""
    problems = []

    threshold = settings.auto_assign_threshold
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        problems.append(f"auto_assign_threshold must be an integer, got {threshold!r}")
    elif not 0 <= threshold <= 100:
        problems.append(f"auto_assign_threshold must be within [0, 100], got {threshold}")

    # model_construct() skips validation, so the enum is not guaranteed
    if not isinstance(settings.skill_matching, SkillMatching):
        try:
            SkillMatching(settings.skill_matching)
        except ValueError:
            problems.append(f"unknown skill_matching value {settings.skill_matching!r}")

    return problems


def validate_settings(settings: DistributionSettings) -> DistributionSettings:
    """Raise ConfigurationError if the settings are unusable."""
    problems = check_settings(settings)
    if problems:
        raise ConfigurationError(problems)
    return settings


def parse_settings(raw: Mapping[str, Any]) -> DistributionSettings:
    """Build and validate settings from a plain mapping (request body, env)."""
    try:
        settings = DistributionSettings.model_validate(dict(raw))
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigurationError(problems) from e
    return validate_settings(settings)


def describe_settings(settings: DistributionSettings) -> Dict[str, Any]:
    """Flat summary of the settings for log lines and traces."""
    return {
        "prioritize_efficiency": settings.prioritize_efficiency,
        "balance_workload": settings.balance_workload,
        "consider_location": settings.consider_location,
        "skill_matching": getattr(settings.skill_matching, "value", settings.skill_matching),
        "auto_assign_threshold": settings.auto_assign_threshold,
    }
