"""
Tests for policy/scoring.py

Test Coverage:
- Individual criterion values and labels
- Settings toggles and skill matching weights
- Strict skill exclusion and offline staff
- Clamping of the weighted total
- Pluggable criteria
"""

import pytest
from dispatch.policy.models import (
    Availability,
    DistributionSettings,
    SkillMatching,
)
from dispatch.policy.scoring import (
    CriterionResult,
    ScoringPolicy,
    score,
)


def _only_skills(skill_matching=SkillMatching.ADAPTIVE):
    return DistributionSettings(
        prioritize_efficiency=False,
        balance_workload=False,
        consider_location=False,
        skill_matching=skill_matching,
    )


# ═══════════════════════════════════════════════════════════════════════════
# Test Criteria
# ═══════════════════════════════════════════════════════════════════════════


class TestCriteria:
    """Each criterion contributes its weighted raw value"""

    def test_reasoning_trace_lists_every_enabled_term(self, make_staff, make_task, settings):
        staff = make_staff("a", load=20, performance=90, location="Floor1")
        task = make_task("t1", location="Floor1")

        result = score(task, staff, settings)

        assert result.contributions == [
            "Workload: 80% available capacity",
            "Skills: 1/1 match",
            "Performance: 90% avg rating",
            "Location: same floor",
        ]
        assert result.factors == {
            "workload": 80.0,
            "skills": 100.0,
            "performance": 90.0,
            "location": 100.0,
        }

    def test_adaptive_weights_skills_more_than_flexible(self, make_staff, make_task):
        staff = make_staff("a")
        task = make_task("t1")

        assert score(task, staff, _only_skills(SkillMatching.ADAPTIVE)).value == 40.0
        assert score(task, staff, _only_skills(SkillMatching.FLEXIBLE)).value == 30.0

    def test_partial_skill_match_is_proportional(self, make_staff, make_task):
        staff = make_staff("a", skills=("Electrical",))
        task = make_task("t1", skills=("Electrical", "Plumbing"))

        result = score(task, staff, _only_skills(SkillMatching.FLEXIBLE))

        assert result.value == 15.0
        assert result.contributions == ["Skills: 1/2 match"]

    def test_no_required_skills_scores_full_skill_term(self, make_staff, make_task):
        staff = make_staff("a", skills=())
        task = make_task("t1", skills=())

        assert score(task, staff, _only_skills()).value == 40.0

    def test_different_location_scores_seventy(self, make_staff, make_task):
        settings = DistributionSettings(prioritize_efficiency=False, balance_workload=False)
        task = make_task("t1", location="Floor1")

        same = score(task, make_staff("a", location="Floor1"), settings)
        other = score(task, make_staff("b", location="Floor3"), settings)

        assert same.value == 55.0
        assert other.value == 50.5
        assert other.contributions[-1] == "Location: different floor"

    def test_disabled_criteria_do_not_contribute(self, make_staff, make_task):
        result = score(make_task("t1"), make_staff("a", load=0), _only_skills())

        assert result.contributions == ["Skills: 1/1 match"]
        assert set(result.factors) == {"skills"}


# ═══════════════════════════════════════════════════════════════════════════
# Test Exclusions
# ═══════════════════════════════════════════════════════════════════════════


class TestExclusions:
    """Offline staff and strict skill misses score zero"""

    def test_strict_missing_skill_excludes_candidate(self, make_staff, make_task):
        settings = DistributionSettings(skill_matching=SkillMatching.STRICT)
        staff = make_staff("a", load=0, skills=("Electrical",))
        task = make_task("t1", skills=("Electrical", "HVAC"))

        result = score(task, staff, settings)

        assert result.excluded
        assert result.value == 0.0
        assert result.contributions == ["Missing required skills"]

    def test_strict_full_match_is_scored(self, make_staff, make_task):
        settings = DistributionSettings(skill_matching=SkillMatching.STRICT)
        staff = make_staff("a", skills=("Electrical", "HVAC"))
        task = make_task("t1", skills=("Electrical", "HVAC"))

        result = score(task, staff, settings)

        assert not result.excluded
        assert result.value > 0

    @pytest.mark.parametrize("skill_matching", list(SkillMatching))
    def test_offline_staff_always_scores_zero(self, make_staff, make_task, skill_matching):
        settings = DistributionSettings(skill_matching=skill_matching)
        staff = make_staff("a", availability=Availability.OFFLINE)

        result = score(make_task("t1"), staff, settings)

        assert result.value == 0.0
        assert result.excluded


# ═══════════════════════════════════════════════════════════════════════════
# Test Totals
# ═══════════════════════════════════════════════════════════════════════════


class TestTotals:
    """Weighted sums, clamping and custom policies"""

    def test_total_is_clamped_to_one_hundred(self, make_staff, make_task, settings):
        # 24 + 40 + 22.5 + 15 = 101.5 before clamping
        staff = make_staff("a", load=20, performance=90, location="Floor1")

        assert score(make_task("t1", location="Floor1"), staff, settings).value == 100.0

    def test_busy_staff_with_remote_location(self, make_staff, make_task, settings):
        # 3 + 40 + 23.75 + 10.5
        staff = make_staff("b", load=90, performance=95, location="Floor2")

        assert score(make_task("t1", location="Floor1"), staff, settings).value == 77.25

    def test_custom_criteria_replace_defaults(self, make_staff, make_task, settings):
        def flat(task, staff, settings):
            return CriterionResult(name="flat", weight=1.0, value=42.0, label="Flat")

        policy = ScoringPolicy([flat])
        result = score(make_task("t1"), make_staff("a"), settings, policy)

        assert result.value == 42.0
        assert result.contributions == ["Flat"]

    def test_criterion_returning_none_is_skipped(self, make_staff, make_task, settings):
        policy = ScoringPolicy([lambda task, staff, settings: None])

        result = policy.score(make_task("t1"), make_staff("a"), settings)

        assert result.value == 0.0
        assert result.contributions == []
