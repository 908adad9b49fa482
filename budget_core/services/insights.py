from __future__ import annotations

import dataclasses
import logging
import math
from typing import Dict, List, Optional, Tuple

from budget_core.domain.models import (
    CATEGORY_LABELS,
    BudgetConfig,
    BurdenBreakdown,
    BurdenItem,
    CashReserveStatus,
    CategoryShare,
    InsightsData,
    MonthlySummary,
    TrendPoint,
    YearlyProjection,
)
from budget_core.domain.months import current_month, format_month, months_for_year, parse_month
from budget_core.services.aggregation import monthly_total, top_categories, yearly_by_month
from budget_core.services.entries import amount_for_month

logger = logging.getLogger(__name__)

TOP_EXPENSE_LIMIT = 11


@dataclasses.dataclass(frozen=True)
class BurdenPolicy:
    """
    Splits one expense category into named buckets by substring match on entry
    names. Buckets are checked in order; unmatched items land in ``fallback``.
    """

    category: str
    buckets: Tuple[Tuple[str, Tuple[str, ...]], ...]
    fallback: str = "other"

    def classify(self, name: str) -> str:
        for bucket, keywords in self.buckets:
            if any(keyword in name for keyword in keywords):
                return bucket
        return self.fallback

    @property
    def bucket_names(self) -> List[str]:
        return [bucket for bucket, _ in self.buckets] + [self.fallback]


DEFAULT_BURDEN_POLICY = BurdenPolicy(
    category="family",
    buckets=(
        ("credit_card", ("Capital One", "Marriott", "Visa Prime", "American Express")),
        ("household", ("Groceries", "Uber Eats", "Pharmacy", "Transit", "Misc")),
    ),
)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def resolve_reference_month(year: int, month: Optional[str] = None) -> str:
    """Explicit month, else today if it falls in ``year``, else February of ``year``."""
    if month is not None:
        parse_month(month)
        return month
    today = current_month()
    if parse_month(today)[0] == year:
        return today
    return format_month(year, 2)


def _burden(config: BudgetConfig, month: str, income: float, policy: BurdenPolicy) -> BurdenBreakdown:
    items: List[BurdenItem] = []
    totals: Dict[str, float] = {name: 0.0 for name in policy.bucket_names}
    for expense in config.expenses:
        if expense.category != policy.category:
            continue
        amount = amount_for_month(expense, month)
        if amount <= 0:
            continue
        bucket = policy.classify(expense.name)
        items.append(BurdenItem(name=expense.name, amount=amount, bucket=bucket))
        totals[bucket] += amount
    total = sum((item.amount for item in items), 0.0)
    return BurdenBreakdown(
        category=policy.category,
        total_monthly=total,
        percent_of_income=_ratio(total, income),
        items=items,
        bucket_totals=totals,
    )


def _cash_reserve(config: BudgetConfig, net_cash_flow: float) -> CashReserveStatus:
    current = config.cash_reserve.current
    target = config.cash_reserve.target
    gap = max(0.0, target - current)
    months_to_target = math.ceil(gap / net_cash_flow) if net_cash_flow > 0 and gap > 0 else None
    return CashReserveStatus(
        current=current,
        target=target,
        gap=gap,
        progress_percent=min(1.0, current / target) if target > 0 else 0.0,
        months_to_target=months_to_target,
    )


def _trend(config: BudgetConfig, year: int) -> Tuple[List[TrendPoint], Dict[str, float], Dict[str, float]]:
    income = yearly_by_month(config.income, year)
    expenses = yearly_by_month(config.expenses, year)
    points = []
    for month in months_for_year(year):
        net = income[month] - expenses[month]
        points.append(
            TrendPoint(
                month=month,
                income=income[month],
                expenses=expenses[month],
                net_cash_flow=net,
                savings_rate=_ratio(net, income[month]),
            )
        )
    return points, income, expenses


def compute_insights(
    config: BudgetConfig,
    reference_month: Optional[str] = None,
    policy: BurdenPolicy = DEFAULT_BURDEN_POLICY,
) -> InsightsData:
    """
    Single-month dashboard for ``reference_month`` plus the full-year trend.

    The year-end cash projection adds the year's net cash flow to the opening
    cash balance as-is; it does not apply the cash-first/investment policy used
    by the P&L running balances, so the two can differ.
    """
    year = config.settings.year
    month = resolve_reference_month(year, reference_month)
    logger.debug("Computing insights for %s (year %s)", month, year)

    total_income = monthly_total(config.income, month)
    total_expenses = monthly_total(config.expenses, month)
    net_cash_flow = total_income - total_expenses

    top = [
        CategoryShare(
            category=category,
            label=CATEGORY_LABELS[category],
            amount=amount,
            percent_of_income=_ratio(amount, total_income),
        )
        for category, amount in top_categories(config.expenses, month, TOP_EXPENSE_LIMIT)
    ]

    trend, yearly_income, yearly_expenses = _trend(config, year)
    year_income = sum(yearly_income.values(), 0.0)
    year_expenses = sum(yearly_expenses.values(), 0.0)
    year_net = year_income - year_expenses
    year_end_cash = config.cash_reserve.current + year_net
    investment_balance = sum((inv.balance for inv in config.investments), 0.0)

    return InsightsData(
        year=year,
        current_month=month,
        monthly_summary=MonthlySummary(
            total_income=total_income,
            total_expenses=total_expenses,
            net_cash_flow=net_cash_flow,
            savings_rate=_ratio(net_cash_flow, total_income),
        ),
        top_expenses=top,
        burden=_burden(config, month, total_income, policy),
        cash_reserve=_cash_reserve(config, net_cash_flow),
        monthly_trend=trend,
        yearly_projection=YearlyProjection(
            total_income=year_income,
            total_expenses=year_expenses,
            total_net_cash_flow=year_net,
            average_monthly_savings_rate=_ratio(year_net, year_income),
            projected_year_end_cash=year_end_cash,
            projected_year_end_net_worth=year_end_cash + investment_balance,
        ),
    )
