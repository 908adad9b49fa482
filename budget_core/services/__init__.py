from budget_core.services.aggregation import (  # noqa: F401
    group_by,
    monthly_snapshot,
    monthly_total,
    top_categories,
    total_by_tag,
)
from budget_core.services.entries import amount_for_month, is_active, normalize_to_monthly  # noqa: F401
from budget_core.services.goals import goal_progress, rank_by_urgency  # noqa: F401
from budget_core.services.insights import compute_insights  # noqa: F401
from budget_core.services.investments import portfolio_summary, project_growth, years_to_target  # noqa: F401
from budget_core.services.pl_generator import generate_pl  # noqa: F401

__all__ = [
    "amount_for_month",
    "compute_insights",
    "generate_pl",
    "goal_progress",
    "group_by",
    "is_active",
    "monthly_snapshot",
    "monthly_total",
    "normalize_to_monthly",
    "portfolio_summary",
    "project_growth",
    "rank_by_urgency",
    "top_categories",
    "total_by_tag",
    "years_to_target",
]
