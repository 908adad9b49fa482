import pytest

from budget_core.domain.models import SavingsGoal
from budget_core.services.goals import (
    aggregate_progress,
    goal_progress,
    project_completion,
    rank_by_urgency,
    required_increase,
    total_goal_contributions,
)


def _goal(goal_id="g1", target=10_000, current=4000, due="2025-12", contribution=500):
    return SavingsGoal(goal_id, goal_id.upper(), target, current, due, "emergency", contribution)


def test_goal_behind_schedule():
    progress = goal_progress(_goal(), "2025-01")
    assert progress.progress_percentage == pytest.approx(0.4)
    assert progress.months_remaining == 11
    assert progress.required_monthly == pytest.approx(545.45)
    assert not progress.is_on_track
    assert progress.projected_completion_date == "2026-01"
    assert required_increase(_goal(), "2025-01") == pytest.approx(6000 / 11 - 500)


def test_goal_on_track():
    progress = goal_progress(_goal(current=5000), "2025-01")
    assert progress.progress_percentage == pytest.approx(0.5)
    assert progress.required_monthly == pytest.approx(454.55)
    assert progress.is_on_track
    assert progress.projected_completion_date is None
    assert required_increase(_goal(current=5000), "2025-01") == 0


def test_projected_completion_for_slow_saver():
    progress = goal_progress(_goal(current=2000, due="2025-06", contribution=200), "2025-01")
    assert not progress.is_on_track
    assert progress.projected_completion_date == "2028-05"


def test_past_due_goal_needs_whole_remainder():
    progress = goal_progress(_goal(due="2024-06"), "2025-01")
    assert progress.months_remaining == 0
    assert progress.required_monthly == 6000


def test_reached_goal_is_on_track_without_contribution():
    progress = goal_progress(_goal(current=10_000, contribution=None), "2025-01")
    assert progress.is_on_track
    assert progress.progress_percentage == 1


def test_project_completion():
    goal = _goal(current=2000)
    assert project_completion(goal, 1000, "2025-01") == "2025-09"
    assert project_completion(goal, 0, "2025-01") is None
    assert project_completion(_goal(current=10_000), 0, "2025-01") == "2025-01"


def test_rank_by_urgency_puts_off_track_and_near_deadlines_first():
    on_track = _goal("calm", current=9000, due="2025-12", contribution=500)
    late_far = _goal("late-far", current=0, due="2027-12", contribution=10)
    late_near = _goal("late-near", current=0, due="2025-06", contribution=10)
    ranked = rank_by_urgency([on_track, late_far, late_near], "2025-01")
    assert [g.id for g in ranked] == ["late-near", "late-far", "calm"]


def test_aggregate_progress_and_contributions():
    goals = [_goal("a", current=5000), _goal("b", current=4000)]
    agg = aggregate_progress(goals, "2025-01")
    assert agg.total_target == 20_000
    assert agg.total_current == 9000
    assert agg.overall_progress == pytest.approx(0.45)
    assert agg.on_track_count == 1
    assert agg.off_track_count == 1
    assert total_goal_contributions(goals + [_goal("c", contribution=None)]) == 1000


def test_aggregate_of_no_goals():
    agg = aggregate_progress([], "2025-01")
    assert agg.overall_progress == 0
    assert agg.on_track_count == agg.off_track_count == 0


def test_required_increase_is_positive_whenever_off_track():
    goal = _goal(contribution=545.45)
    progress = goal_progress(goal, "2025-01")
    assert progress.required_monthly == pytest.approx(545.45)
    assert not progress.is_on_track
    assert required_increase(goal, "2025-01") > 0
    assert required_increase(goal, "2025-01") == pytest.approx(6000 / 11 - 545.45)
