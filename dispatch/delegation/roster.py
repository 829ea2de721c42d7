"""
Staff roster derivation.

Turns raw staff profiles into Staff snapshots:
- Load from the count of active assigned tasks
- Availability from shift status and load
- Skills from the profile, or the defaults for the role
- Performance from the latest score, or from recent completed work
"""

from typing import Any, Dict, Iterable, List, Optional
from dispatch.policy.models import Availability, Performance, Staff

LOAD_PER_ACTIVE_TASK = 25.0
MAX_LOAD = 100.0
BUSY_LOAD_THRESHOLD = 80.0

ROLE_SKILLS = {
    "field_staff": ["General Maintenance", "Electrical", "Plumbing", "HVAC"],
    "ops_supervisor": ["Management", "Quality Control", "Training", "Complex Repairs"],
}


def calculate_load(active_task_count: int) -> float:
    """Load percentage for a number of active tasks, clamped to [0, 100]."""
    return min(max(active_task_count, 0) * LOAD_PER_ACTIVE_TASK, MAX_LOAD)


def add_task_load(current_load: float) -> float:
    """Load after one more task is assigned."""
    return min(max(current_load + LOAD_PER_ACTIVE_TASK, 0.0), MAX_LOAD)


def derive_availability(on_shift: bool, current_load: float) -> Availability:
    if not on_shift:
        return Availability.OFFLINE
    if current_load > BUSY_LOAD_THRESHOLD:
        return Availability.BUSY
    return Availability.AVAILABLE


def default_skills_for_role(role: str) -> List[str]:
    return list(ROLE_SKILLS.get(role, ["General Maintenance"]))


def fallback_performance(
    completed: int,
    sla_compliant: int,
    avg_completion_hours: Optional[float] = None,
) -> Performance:
    """
    Estimate performance from the last 30 days of completed work.

    Used when no stored performance score exists. Efficiency follows SLA
    compliance, quality drops with slow completions, speed grows with
    throughput.
    """
    sla_rate = (sla_compliant / completed) * 100 if completed > 0 else 100.0
    if avg_completion_hours is None or completed == 0:
        avg_completion_hours = 24.0

    return Performance(
        efficiency=min(100.0, max(50.0, sla_rate)),
        quality=min(100.0, max(60.0, 100 - (avg_completion_hours - 2) * 5)),
        speed=min(100.0, max(50.0, 80.0 + completed * 2)),
    )


def build_staff(
    profile: Dict[str, Any],
    active_task_count: int = 0,
    on_shift: bool = True,
    skills: Optional[Iterable[str]] = None,
    performance: Optional[Performance] = None,
) -> Staff:
    """Build a Staff snapshot from a profile record and live counters."""
    role = profile.get("role") or "field_staff"
    load = calculate_load(active_task_count)

    name = profile.get("name")
    if not name:
        name = f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip() or "Unknown"

    skill_list = list(skills) if skills else (profile.get("skills") or default_skills_for_role(role))

    return Staff(
        id=str(profile["id"]),
        name=name,
        role=role,
        current_load=load,
        active_task_count=active_task_count,
        availability=derive_availability(on_shift, load),
        skills=set(skill_list),
        performance=performance or Performance(),
        location=profile.get("location") or profile.get("floor") or "Ground Floor",
    )
