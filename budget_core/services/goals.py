from __future__ import annotations

import math
from typing import Iterable, List, Optional

from budget_core.domain.models import AggregateGoalProgress, GoalProgress, SavingsGoal
from budget_core.domain.months import add_months, current_month, months_between
from budget_core.domain.rounding import round_half_up


def _required_monthly(goal: SavingsGoal, month: str) -> float:
    months_remaining = max(0, months_between(month, goal.target_date))
    remaining = goal.target_amount - goal.current_amount
    return remaining / months_remaining if months_remaining > 0 else remaining


def goal_progress(goal: SavingsGoal, month: Optional[str] = None) -> GoalProgress:
    """
    Progress and projections for ``goal`` as of ``month``.

    When the target date is this month or already past, the required monthly
    amount is the whole remaining balance. ``target_amount`` must be positive.
    """
    month = month or current_month()
    months_remaining = max(0, months_between(month, goal.target_date))
    remaining = goal.target_amount - goal.current_amount
    progress_percentage = goal.current_amount / goal.target_amount
    required_monthly = _required_monthly(goal, month)

    contribution = goal.monthly_contribution or 0.0
    is_on_track = contribution >= required_monthly or goal.current_amount >= goal.target_amount

    projected: Optional[str] = None
    if not is_on_track and contribution > 0:
        projected = add_months(month, math.ceil(remaining / contribution))

    return GoalProgress(
        goal_id=goal.id,
        current_amount=goal.current_amount,
        target_amount=goal.target_amount,
        progress_percentage=progress_percentage,
        months_remaining=months_remaining,
        required_monthly=round_half_up(required_monthly, 2),
        is_on_track=is_on_track,
        projected_completion_date=projected,
    )


def total_goal_contributions(goals: Iterable[SavingsGoal]) -> float:
    return sum((g.monthly_contribution or 0.0 for g in goals), 0.0)


def project_completion(goal: SavingsGoal, contribution: float, start_month: Optional[str] = None) -> Optional[str]:
    month = start_month or current_month()
    if goal.current_amount >= goal.target_amount:
        return month
    if contribution <= 0:
        return None
    remaining = goal.target_amount - goal.current_amount
    return add_months(month, math.ceil(remaining / contribution))


def required_increase(goal: SavingsGoal, month: Optional[str] = None) -> float:
    """Extra monthly amount needed, measured against the unrounded requirement."""
    month = month or current_month()
    if goal_progress(goal, month).is_on_track:
        return 0.0
    return max(0.0, _required_monthly(goal, month) - (goal.monthly_contribution or 0.0))


def rank_by_urgency(goals: Iterable[SavingsGoal], month: Optional[str] = None) -> List[SavingsGoal]:
    """Off-track first, then nearest deadline, then lowest progress."""
    month = month or current_month()

    def urgency(goal: SavingsGoal):
        p = goal_progress(goal, month)
        return (p.is_on_track, p.months_remaining, p.progress_percentage)

    return sorted(goals, key=urgency)


def aggregate_progress(goals: Iterable[SavingsGoal], month: Optional[str] = None) -> AggregateGoalProgress:
    goals = list(goals)
    month = month or current_month()
    on_track = sum(1 for g in goals if goal_progress(g, month).is_on_track)
    total_target = sum((g.target_amount for g in goals), 0.0)
    total_current = sum((g.current_amount for g in goals), 0.0)
    return AggregateGoalProgress(
        total_target=total_target,
        total_current=total_current,
        overall_progress=total_current / total_target if total_target > 0 else 0.0,
        on_track_count=on_track,
        off_track_count=len(goals) - on_track,
    )
