from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from budget_core.domain.models import (
    EXPENSE_CATEGORIES,
    GOAL_CATEGORIES,
    INCOME_SOURCES,
    RECURRENCES,
    BudgetConfig,
    BudgetSettings,
    CashReserve,
    ExpenseEntry,
    IncomeEntry,
    Investment,
    OneTimeExpense,
    OneTimeIncome,
    RecurringExpense,
    RecurringIncome,
    SavingsGoal,
)
from budget_core.domain.months import MonthFormatError, parse_month
from budget_core.services.insights import DEFAULT_BURDEN_POLICY, BurdenPolicy

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for budget configuration documents that cannot be loaded."""


def load_budget_config(path: str | Path) -> BudgetConfig:
    data = _read_json(path)
    config = budget_config_from_dict(data)
    logger.debug(
        "Loaded %s: %d income, %d expenses, %d investments, %d goals",
        path,
        len(config.income),
        len(config.expenses),
        len(config.investments),
        len(config.savings_goals),
    )
    return config


def load_burden_policy(path: str | Path) -> BurdenPolicy:
    """Read the ``burden`` table from a config file, falling back to the default policy."""
    data = _read_json(path)
    return burden_policy_from_dict(data.get("burden"))


def budget_config_from_dict(data: Dict[str, Any]) -> BudgetConfig:
    settings = data.get("settings") or {}
    if "year" not in settings:
        raise ConfigError("settings.year is required")
    reserve = data.get("cash_reserve") or {}
    return BudgetConfig(
        settings=BudgetSettings(
            year=int(settings["year"]),
            currency=str(settings.get("currency", "USD")),
        ),
        income=tuple(_income(item) for item in data.get("income", []) or []),
        expenses=tuple(_expense(item) for item in data.get("expenses", []) or []),
        investments=tuple(_investment(item) for item in data.get("investments", []) or []),
        savings_goals=tuple(_goal(item) for item in data.get("savings_goals", []) or []),
        cash_reserve=CashReserve(
            target=float(reserve.get("target", 0.0)),
            current=float(reserve.get("current", 0.0)),
        ),
    )


def burden_policy_from_dict(data: Optional[Dict[str, Any]]) -> BurdenPolicy:
    if not data:
        return DEFAULT_BURDEN_POLICY
    category = _choice(data.get("category", DEFAULT_BURDEN_POLICY.category), EXPENSE_CATEGORIES, "burden.category")
    buckets: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(
        (str(name), tuple(str(k) for k in keywords)) for name, keywords in (data.get("buckets") or {}).items()
    )
    return BurdenPolicy(
        category=category,
        buckets=buckets or DEFAULT_BURDEN_POLICY.buckets,
        fallback=str(data.get("fallback", "other")),
    )


def _income(item: Dict[str, Any]) -> IncomeEntry:
    base = _entry_base(item, "income")
    source = _choice(item.get("source", "other"), INCOME_SOURCES, f"income {base['id']} source")
    if "recurrence" in item and "month" in item:
        raise ConfigError(f"Income {base['id']} has both 'recurrence' and 'month'")
    if "recurrence" in item:
        return RecurringIncome(
            source=source,
            recurrence=_choice(item["recurrence"], RECURRENCES, f"income {base['id']} recurrence"),
            start_date=_month(item.get("start_date"), base["id"]),
            end_date=_month(item.get("end_date"), base["id"]),
            **base,
        )
    if "month" in item:
        return OneTimeIncome(source=source, month=_month(item["month"], base["id"]), **base)
    raise ConfigError(f"Income {base['id']} needs either 'recurrence' or 'month'")


def _expense(item: Dict[str, Any]) -> ExpenseEntry:
    base = _entry_base(item, "expense")
    category = _choice(item.get("category", "other"), EXPENSE_CATEGORIES, f"expense {base['id']} category")
    if "month" in item:
        if "recurrence" in item or "start_date" in item or "end_date" in item or "monthly_overrides" in item:
            raise ConfigError(f"Expense {base['id']} mixes one-time 'month' with recurring fields")
        return OneTimeExpense(category=category, month=_month(item["month"], base["id"]), **base)
    overrides = {
        _month(month, base["id"]): float(amount)
        for month, amount in (item.get("monthly_overrides") or {}).items()
    }
    return RecurringExpense(
        category=category,
        start_date=_month(item.get("start_date"), base["id"]),
        end_date=_month(item.get("end_date"), base["id"]),
        monthly_overrides=overrides,
        **base,
    )


def _investment(item: Dict[str, Any]) -> Investment:
    return Investment(
        id=str(item["id"]),
        name=str(item.get("name", item["id"])),
        balance=float(item.get("balance", 0.0)),
        monthly_contribution=float(item.get("monthly_contribution", 0.0)),
        expected_return=float(item.get("expected_return", 0.0)),
    )


def _goal(item: Dict[str, Any]) -> SavingsGoal:
    goal_id = str(item["id"])
    contribution = item.get("monthly_contribution")
    return SavingsGoal(
        id=goal_id,
        name=str(item.get("name", goal_id)),
        target_amount=float(item["target_amount"]),
        current_amount=float(item.get("current_amount", 0.0)),
        target_date=_month(item["target_date"], goal_id),
        category=_choice(item.get("category", "other"), GOAL_CATEGORIES, f"goal {goal_id} category"),
        monthly_contribution=float(contribution) if contribution is not None else None,
    )


def _entry_base(item: Dict[str, Any], kind: str) -> Dict[str, Any]:
    if "id" not in item or "amount" not in item:
        raise ConfigError(f"Every {kind} entry needs 'id' and 'amount': {item!r}")
    return {
        "id": str(item["id"]),
        "name": str(item.get("name", item["id"])),
        "amount": float(item["amount"]),
    }


def _choice(value: Any, allowed: Iterable[str], what: str) -> Any:
    allowed = tuple(allowed)
    if value not in allowed:
        raise ConfigError(f"Unknown {what} {value!r}; expected one of {list(allowed)}")
    return value


def _month(value: Optional[str], entry_id: str) -> Optional[str]:
    if value is None:
        return None
    try:
        parse_month(value)
    except MonthFormatError as exc:
        raise ConfigError(f"Entry {entry_id}: {exc}") from exc
    return value


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
