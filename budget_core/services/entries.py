from __future__ import annotations

from typing import Iterable, List

from budget_core.domain.models import (
    Entry,
    OneTimeExpense,
    OneTimeIncome,
    RecurringExpense,
    RecurringIncome,
)
from budget_core.domain.months import is_month_in_range, parse_month

_PERIODS_PER_YEAR = {
    "weekly": 52,
    "biweekly": 26,
    "monthly": 12,
    "annual": 1,
}


def normalize_to_monthly(amount: float, recurrence: str) -> float:
    """Convert a per-period amount to its monthly equivalent. No rounding."""
    if recurrence == "monthly":
        return amount
    try:
        periods = _PERIODS_PER_YEAR[recurrence]
    except KeyError as exc:
        raise ValueError(f"Unknown recurrence: {recurrence!r}") from exc
    return (amount * periods) / 12


def is_recurring(entry: Entry) -> bool:
    if isinstance(entry, (RecurringIncome, RecurringExpense)):
        return True
    if isinstance(entry, (OneTimeIncome, OneTimeExpense)):
        return False
    raise TypeError(f"Not a budget entry: {type(entry).__name__}")


def is_active(entry: Entry, month: str) -> bool:
    if is_recurring(entry):
        return is_month_in_range(month, entry.start_date, entry.end_date)
    parse_month(month)
    return entry.month == month


def amount_for_month(entry: Entry, month: str) -> float:
    """What ``entry`` contributes in ``month`` (0 when inactive)."""
    if not is_active(entry, month):
        return 0.0
    if isinstance(entry, RecurringIncome):
        return normalize_to_monthly(entry.amount, entry.recurrence)
    if isinstance(entry, RecurringExpense):
        return entry.monthly_overrides.get(month, entry.amount)
    return entry.amount


def recurring_entries(entries: Iterable[Entry]) -> List[Entry]:
    return [e for e in entries if is_recurring(e)]


def one_time_entries(entries: Iterable[Entry]) -> List[Entry]:
    return [e for e in entries if not is_recurring(e)]
