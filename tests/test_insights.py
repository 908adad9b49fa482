import pytest

from budget_core.domain.models import (
    BudgetConfig,
    BudgetSettings,
    CashReserve,
    Investment,
    RecurringExpense,
    RecurringIncome,
)
from budget_core.services.insights import BurdenPolicy, compute_insights, resolve_reference_month


def _config(**overrides):
    base = dict(
        settings=BudgetSettings(year=2025),
        income=(RecurringIncome("inc-job", "Job", "salary", 5000),),
        expenses=(
            RecurringExpense("exp-rent", "Rent", "housing", 2000),
            RecurringExpense("exp-card", "Hector Capital One QuickSilver", "family", 136),
            RecurringExpense("exp-groc", "Parents Groceries", "family", 1400),
            RecurringExpense("exp-car", "Hector Car Payment", "family", 320),
        ),
        investments=(Investment("inv-1", "Brokerage", 10_000, 0, 0.05),),
        cash_reserve=CashReserve(target=5000, current=2000),
    )
    base.update(overrides)
    return BudgetConfig(**base)


def test_monthly_summary_and_top_expenses():
    result = compute_insights(_config(), "2025-03")
    summary = result.monthly_summary
    assert result.current_month == "2025-03"
    assert summary.total_expenses == 3856
    assert summary.net_cash_flow == 1144
    assert summary.savings_rate == pytest.approx(1144 / 5000)
    assert [t.category for t in result.top_expenses] == ["housing", "family"]
    assert result.top_expenses[1].amount == 1856
    assert result.top_expenses[0].percent_of_income == pytest.approx(0.4)


def test_burden_buckets():
    burden = compute_insights(_config(), "2025-03").burden
    assert burden.category == "family"
    assert burden.total_monthly == 1856
    assert burden.bucket_totals == {"credit_card": 136, "household": 1400, "other": 320}
    assert [item.bucket for item in burden.items] == ["credit_card", "household", "other"]


def test_custom_burden_policy():
    policy = BurdenPolicy(category="housing", buckets=(("rent", ("Rent",)),), fallback="misc")
    burden = compute_insights(_config(), "2025-03", policy).burden
    assert burden.bucket_totals == {"rent": 2000, "misc": 0}


def test_cash_reserve_months_to_target():
    reserve = compute_insights(_config(), "2025-03").cash_reserve
    assert reserve.gap == 3000
    assert reserve.progress_percent == pytest.approx(0.4)
    assert reserve.months_to_target == 3


def test_cash_reserve_unreachable_with_deficit():
    config = _config(income=(RecurringIncome("inc-job", "Job", "salary", 1000),))
    assert compute_insights(config, "2025-03").cash_reserve.months_to_target is None


def test_yearly_projection_adds_net_flow_to_cash():
    result = compute_insights(_config(), "2025-03")
    projection = result.yearly_projection
    assert len(result.monthly_trend) == 12
    assert projection.total_net_cash_flow == 1144 * 12
    assert projection.projected_year_end_cash == 2000 + 1144 * 12
    assert projection.projected_year_end_net_worth == 2000 + 1144 * 12 + 10_000


def test_reference_month_defaults_to_february_outside_year():
    assert resolve_reference_month(1999) == "1999-02"
    assert resolve_reference_month(2025, "2025-07") == "2025-07"
