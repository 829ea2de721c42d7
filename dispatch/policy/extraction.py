"""
Build Task snapshots from raw maintenance requests.

Requests arrive from the intake side with free-text descriptions; the
required skills, duration and complexity are derived here when the
request does not carry them.
"""

from typing import Any, Dict, List, Optional
from dispatch.policy.models import Complexity, Priority, Task, TaskStatus

DEFAULT_SKILL = "General Maintenance"

SKILL_KEYWORDS = {
    "Electrical": ["electrical", "power", "lighting"],
    "Plumbing": ["water", "plumbing", "pipe"],
    "HVAC": ["hvac", "air", "heating"],
}

BASE_DURATION_HOURS = {
    Priority.URGENT: 2,
    Priority.HIGH: 4,
    Priority.MEDIUM: 6,
    Priority.LOW: 8,
}


def extract_required_skills(description: str, category: Optional[str] = None) -> List[str]:
    """Keyword match on the description, plus the request category."""
    skills = []
    lower_desc = (description or "").lower()

    for skill, keywords in SKILL_KEYWORDS.items():
        if any(keyword in lower_desc for keyword in keywords):
            skills.append(skill)

    if category and category not in skills:
        skills.append(category)

    return skills or [DEFAULT_SKILL]


def estimate_duration(priority: Priority, description: str) -> int:
    """Hours of work; long descriptions take half again as long."""
    base = BASE_DURATION_HOURS[Priority(priority)]
    factor = 1.5 if len(description or "") > 100 else 1.0
    return round(base * factor)


def determine_complexity(description: str, priority: Priority) -> Complexity:
    priority = Priority(priority)
    length = len(description or "")
    if priority == Priority.URGENT or length > 150:
        return Complexity.COMPLEX
    if priority == Priority.HIGH or length > 75:
        return Complexity.MEDIUM
    return Complexity.SIMPLE


def extract_task_from_request(request: Dict[str, Any]) -> Task:
    """
    Build a Task from a maintenance request record.

    Expected keys: id, title, description, priority, location and either
    category or maintenance_categories.name. Explicit required_skills,
    estimated_duration_hours or complexity override the derived values.
    """
    description = request.get("description") or ""
    priority = Priority(request.get("priority") or Priority.MEDIUM)

    category = request.get("category")
    if not category:
        category = (request.get("maintenance_categories") or {}).get("name")

    required_skills = request.get("required_skills")
    if not required_skills:
        required_skills = extract_required_skills(description, category)

    duration = request.get("estimated_duration_hours")
    if duration is None:
        duration = estimate_duration(priority, description)

    complexity = request.get("complexity") or determine_complexity(description, priority)

    assigned_to = request.get("assigned_to")
    status = request.get("status") or (TaskStatus.IN_PROGRESS if assigned_to else TaskStatus.PENDING)

    return Task(
        id=str(request["id"]),
        title=request.get("title") or "",
        description=description,
        priority=priority,
        category=category or "General",
        location=request.get("location") or "",
        estimated_duration_hours=duration,
        required_skills=set(required_skills),
        complexity=complexity,
        status=status,
        assigned_to=assigned_to,
    )
