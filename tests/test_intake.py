"""
Tests for policy/extraction.py and delegation/roster.py

Test Coverage:
- Required skill extraction from descriptions
- Duration and complexity estimates
- Task construction from raw requests
- Load, availability and performance derivation for staff
"""

import pytest
from dispatch.delegation.roster import (
    build_staff,
    calculate_load,
    default_skills_for_role,
    derive_availability,
    fallback_performance,
)
from dispatch.policy.extraction import (
    determine_complexity,
    estimate_duration,
    extract_required_skills,
    extract_task_from_request,
)
from dispatch.policy.models import Availability, Complexity, Priority, TaskStatus


class TestTaskExtraction:
    """Deriving task requirements from requests"""

    def test_keywords_map_to_skills(self):
        assert extract_required_skills("Power outage, lighting flickers") == ["Electrical"]
        assert extract_required_skills("Leaking pipe under sink") == ["Plumbing"]

    def test_category_is_added_once(self):
        assert extract_required_skills("Water on the floor", "Plumbing") == ["Plumbing"]
        assert extract_required_skills("Water on the floor", "Cleaning") == ["Plumbing", "Cleaning"]

    def test_no_match_defaults_to_general_maintenance(self):
        assert extract_required_skills("Broken desk") == ["General Maintenance"]

    @pytest.mark.parametrize("priority,description,hours", [
        (Priority.URGENT, "short", 2),
        (Priority.HIGH, "short", 4),
        (Priority.MEDIUM, "x" * 101, 9),
        (Priority.LOW, "x" * 120, 12),
    ])
    def test_duration_estimate(self, priority, description, hours):
        assert estimate_duration(priority, description) == hours

    @pytest.mark.parametrize("priority,length,expected", [
        (Priority.URGENT, 10, Complexity.COMPLEX),
        (Priority.LOW, 151, Complexity.COMPLEX),
        (Priority.HIGH, 10, Complexity.MEDIUM),
        (Priority.MEDIUM, 80, Complexity.MEDIUM),
        (Priority.LOW, 20, Complexity.SIMPLE),
    ])
    def test_complexity(self, priority, length, expected):
        assert determine_complexity("x" * length, priority) == expected

    def test_request_becomes_pending_task(self):
        task = extract_task_from_request({
            "id": 42,
            "title": "Lights out",
            "description": "No power in the east wing",
            "priority": "urgent",
            "location": "Floor3",
            "maintenance_categories": {"name": "Electrical"},
        })

        assert task.id == "42"
        assert task.category == "Electrical"
        assert task.required_skills == {"Electrical"}
        assert task.estimated_duration_hours == 2
        assert task.complexity == Complexity.COMPLEX
        assert task.status == TaskStatus.PENDING
        assert task.assigned_to is None

    def test_explicit_values_override_derivation(self):
        task = extract_task_from_request({
            "id": "t1",
            "description": "No power",
            "required_skills": ["HVAC"],
            "estimated_duration_hours": 3,
            "complexity": "simple",
        })

        assert task.required_skills == {"HVAC"}
        assert task.estimated_duration_hours == 3
        assert task.complexity == Complexity.SIMPLE

    def test_assigned_request_is_not_pending(self):
        task = extract_task_from_request({"id": "t1", "assigned_to": "s1"})

        assert task.status == TaskStatus.IN_PROGRESS

    def test_inconsistent_assignment_is_rejected(self):
        with pytest.raises(ValueError):
            extract_task_from_request({"id": "t1", "status": "pending", "assigned_to": "s1"})


class TestRoster:
    """Deriving staff snapshots from profiles"""

    @pytest.mark.parametrize("active,load", [(0, 0.0), (2, 50.0), (4, 100.0), (6, 100.0)])
    def test_load_from_active_tasks(self, active, load):
        assert calculate_load(active) == load

    def test_availability(self):
        assert derive_availability(False, 0) == Availability.OFFLINE
        assert derive_availability(True, 85) == Availability.BUSY
        assert derive_availability(True, 80) == Availability.AVAILABLE

    def test_role_skills(self):
        assert "Electrical" in default_skills_for_role("field_staff")
        assert default_skills_for_role("visitor") == ["General Maintenance"]

    def test_fallback_performance_without_history(self):
        performance = fallback_performance(completed=0, sla_compliant=0)

        assert performance.efficiency == 100.0
        assert performance.quality == 60.0
        assert performance.speed == 80.0

    def test_fallback_performance_with_history(self):
        performance = fallback_performance(completed=10, sla_compliant=8, avg_completion_hours=4.0)

        assert performance.efficiency == 80.0
        assert performance.quality == 90.0
        assert performance.speed == 100.0

    def test_build_staff_from_profile(self):
        staff = build_staff(
            {"id": 7, "first_name": "Ann", "last_name": "Lee", "role": "field_staff", "floor": "Floor2"},
            active_task_count=4,
        )

        assert staff.id == "7"
        assert staff.name == "Ann Lee"
        assert staff.current_load == 100.0
        assert staff.availability == Availability.BUSY
        assert staff.skills == set(default_skills_for_role("field_staff"))
        assert staff.location == "Floor2"

    def test_off_shift_staff_is_offline(self):
        staff = build_staff({"id": "s1", "skills": ["HVAC"]}, on_shift=False)

        assert staff.availability == Availability.OFFLINE
        assert staff.skills == {"HVAC"}
        assert staff.name == "Unknown"
