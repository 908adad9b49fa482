from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from budget_core.domain.models import (
    EXPENSE_CATEGORIES,
    INCOME_SOURCES,
    BudgetConfig,
    Entry,
    MonthlySnapshot,
    TaggedTotal,
)
from budget_core.domain.months import months_for_year
from budget_core.services.entries import amount_for_month, is_recurring

KEY_SETS: Dict[str, Tuple[str, ...]] = {
    "source": INCOME_SOURCES,
    "category": EXPENSE_CATEGORIES,
}


def monthly_total(entries: Iterable[Entry], month: str) -> float:
    return sum((amount_for_month(e, month) for e in entries), 0.0)


def total_by_tag(entries: Iterable[Entry], month: str) -> TaggedTotal:
    recurring = 0.0
    one_time = 0.0
    for entry in entries:
        if is_recurring(entry):
            recurring += amount_for_month(entry, month)
        else:
            one_time += amount_for_month(entry, month)
    return TaggedTotal(recurring=recurring, one_time=one_time)


def group_by(entries: Iterable[Entry], month: str, key: str) -> Dict[str, float]:
    """
    Sum amounts per ``key`` ("source" or "category").
    Every key of the enumeration is present, in enumeration order.
    """
    try:
        keys = KEY_SETS[key]
    except KeyError as exc:
        raise ValueError(f"Cannot group by {key!r}; expected one of {sorted(KEY_SETS)}") from exc
    grouped = {k: 0.0 for k in keys}
    for entry in entries:
        grouped[getattr(entry, key)] += amount_for_month(entry, month)
    return grouped


def group_income_by_source(entries: Iterable[Entry], month: str) -> Dict[str, float]:
    return group_by(entries, month, "source")


def group_expenses_by_category(entries: Iterable[Entry], month: str) -> Dict[str, float]:
    return group_by(entries, month, "category")


def top_categories(entries: Iterable[Entry], month: str, limit: int = 5) -> List[Tuple[str, float]]:
    """
    Non-zero categories by descending amount. Equal amounts keep
    EXPENSE_CATEGORIES order (sorted() is stable).
    """
    grouped = group_expenses_by_category(entries, month)
    nonzero = [(cat, amount) for cat, amount in grouped.items() if amount > 0]
    ranked = sorted(nonzero, key=lambda item: item[1], reverse=True)
    return ranked[: max(limit, 0)]


def yearly_by_month(entries: Sequence[Entry], year: int) -> Dict[str, float]:
    return {month: monthly_total(entries, month) for month in months_for_year(year)}


def monthly_snapshot(config: BudgetConfig, month: str) -> MonthlySnapshot:
    income = total_by_tag(config.income, month)
    expenses = total_by_tag(config.expenses, month)
    net = income.total - expenses.total
    return MonthlySnapshot(
        month=month,
        total_income=income.total,
        recurring_income=income.recurring,
        one_time_income=income.one_time,
        total_expenses=expenses.total,
        recurring_expenses=expenses.recurring,
        one_time_expenses=expenses.one_time,
        net_cash_flow=net,
        savings_rate=net / income.total if income.total > 0 else 0.0,
        income_by_source=group_income_by_source(config.income, month),
        expenses_by_category=group_expenses_by_category(config.expenses, month),
    )
