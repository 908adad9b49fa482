from budget_core.domain.models import (  # noqa: F401
    CATEGORY_LABELS,
    EXPENSE_CATEGORIES,
    GOAL_CATEGORIES,
    INCOME_SOURCES,
    RECURRENCES,
    BudgetConfig,
    BudgetSettings,
    CashReserve,
    Investment,
    OneTimeExpense,
    OneTimeIncome,
    PLData,
    PLRow,
    RecurringExpense,
    RecurringIncome,
    SavingsGoal,
)
from budget_core.domain.months import MonthFormatError  # noqa: F401

__all__ = [
    "CATEGORY_LABELS",
    "EXPENSE_CATEGORIES",
    "GOAL_CATEGORIES",
    "INCOME_SOURCES",
    "RECURRENCES",
    "BudgetConfig",
    "BudgetSettings",
    "CashReserve",
    "Investment",
    "MonthFormatError",
    "OneTimeExpense",
    "OneTimeIncome",
    "PLData",
    "PLRow",
    "RecurringExpense",
    "RecurringIncome",
    "SavingsGoal",
]
