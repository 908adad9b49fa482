from __future__ import annotations

import dataclasses
from typing import Dict, Iterator, List, Literal, Mapping, Optional, Tuple, Union

import pandas as pd

Recurrence = Literal["weekly", "biweekly", "monthly", "annual"]
IncomeSource = Literal["salary", "freelance", "investment", "other"]
ExpenseCategory = Literal[
    "housing",
    "transportation",
    "utilities",
    "food",
    "healthcare",
    "insurance",
    "entertainment",
    "personal",
    "debt",
    "family",
    "other",
]
GoalCategory = Literal["emergency", "vacation", "purchase", "retirement", "education", "other"]

# Order is observable: tie-break order in top categories and group order in the P&L.
RECURRENCES: Tuple[str, ...] = ("weekly", "biweekly", "monthly", "annual")
INCOME_SOURCES: Tuple[str, ...] = ("salary", "freelance", "investment", "other")
EXPENSE_CATEGORIES: Tuple[str, ...] = (
    "housing",
    "transportation",
    "utilities",
    "food",
    "healthcare",
    "insurance",
    "entertainment",
    "personal",
    "debt",
    "family",
    "other",
)
GOAL_CATEGORIES: Tuple[str, ...] = ("emergency", "vacation", "purchase", "retirement", "education", "other")

CATEGORY_LABELS: Dict[str, str] = {
    "housing": "Housing",
    "transportation": "Transportation",
    "utilities": "Utilities",
    "food": "Food",
    "healthcare": "Healthcare",
    "insurance": "Insurance",
    "entertainment": "Entertainment",
    "personal": "Personal",
    "debt": "Debt",
    "family": "Family",
    "other": "Other",
}


# --- configuration inputs ---


@dataclasses.dataclass(frozen=True)
class RecurringIncome:
    id: str
    name: str
    source: IncomeSource
    amount: float
    recurrence: Recurrence = "monthly"
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class OneTimeIncome:
    id: str
    name: str
    source: IncomeSource
    amount: float
    month: str


@dataclasses.dataclass(frozen=True)
class RecurringExpense:
    id: str
    name: str
    category: ExpenseCategory
    amount: float
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    monthly_overrides: Mapping[str, float] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class OneTimeExpense:
    id: str
    name: str
    category: ExpenseCategory
    amount: float
    month: str


IncomeEntry = Union[RecurringIncome, OneTimeIncome]
ExpenseEntry = Union[RecurringExpense, OneTimeExpense]
Entry = Union[IncomeEntry, ExpenseEntry]


@dataclasses.dataclass(frozen=True)
class Investment:
    id: str
    name: str
    balance: float
    monthly_contribution: float
    expected_return: float  # annual, decimal (0.07 = 7%)


@dataclasses.dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: str
    category: GoalCategory = "other"
    monthly_contribution: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class CashReserve:
    target: float = 0.0
    current: float = 0.0


@dataclasses.dataclass(frozen=True)
class BudgetSettings:
    year: int
    currency: str = "USD"


@dataclasses.dataclass(frozen=True)
class BudgetConfig:
    settings: BudgetSettings
    income: Tuple[IncomeEntry, ...] = ()
    expenses: Tuple[ExpenseEntry, ...] = ()
    investments: Tuple[Investment, ...] = ()
    savings_goals: Tuple[SavingsGoal, ...] = ()
    cash_reserve: CashReserve = dataclasses.field(default_factory=CashReserve)


# --- P&L output ---


@dataclasses.dataclass(frozen=True)
class PLRow:
    id: str
    name: str
    depth: int  # 0 = total, 1 = category/subtotal, 2 = line item
    values: Dict[str, float]
    is_group: bool = False
    is_subtotal: bool = False

    @property
    def ytd(self) -> float:
        return sum(self.values.values())


@dataclasses.dataclass(frozen=True)
class PLSection:
    title: str
    rows: List[PLRow]
    total: PLRow


@dataclasses.dataclass(frozen=True)
class PLBlock:
    recurring: PLSection
    one_time: PLSection
    total: PLRow


@dataclasses.dataclass(frozen=True)
class AllocationBlock:
    investments: PLSection
    savings_goals: PLSection
    total: PLRow


@dataclasses.dataclass(frozen=True)
class BalanceRow:
    """Running balance per month; ``closing`` is the last recorded value."""

    id: str
    name: str
    depth: int
    values: Dict[str, int]

    @property
    def closing(self) -> int:
        if not self.values:
            return 0
        return self.values[list(self.values)[-1]]


@dataclasses.dataclass(frozen=True)
class RunningBalances:
    cash: BalanceRow
    investments: BalanceRow
    net_worth: BalanceRow


@dataclasses.dataclass(frozen=True)
class PLData:
    year: int
    months: List[str]
    income: PLBlock
    expenses: PLBlock
    net_cash_flow: PLRow
    allocations: AllocationBlock
    unallocated: PLRow
    balances: RunningBalances

    def iter_rows(self) -> Iterator[PLRow]:
        """Rows in display order (balances excluded)."""
        for block in (self.income, self.expenses):
            for section in (block.recurring, block.one_time):
                yield from section.rows
                yield section.total
            yield block.total
        yield self.net_cash_flow
        for section in (self.allocations.investments, self.allocations.savings_goals):
            yield from section.rows
            yield section.total
        yield self.allocations.total
        yield self.unallocated

    def to_frame(self) -> pd.DataFrame:
        records = []
        for row in self.iter_rows():
            record = {"id": row.id, "name": row.name, "depth": row.depth}
            record.update({m: row.values.get(m, 0.0) for m in self.months})
            record["ytd"] = row.ytd
            records.append(record)
        for row in (self.balances.cash, self.balances.investments, self.balances.net_worth):
            record = {"id": row.id, "name": row.name, "depth": row.depth}
            record.update({m: row.values.get(m, 0) for m in self.months})
            record["ytd"] = row.closing
            records.append(record)
        return pd.DataFrame.from_records(records, columns=["id", "name", "depth", *self.months, "ytd"]).set_index("id")


# --- projections and progress ---


@dataclasses.dataclass(frozen=True)
class InvestmentProjection:
    month: str
    investment_id: str
    balance: float
    total_contributed: float
    total_gains: float


@dataclasses.dataclass(frozen=True)
class PortfolioSummary:
    total_value: float
    total_monthly_contributions: float
    weighted_average_return: float
    projected_one_year: int
    projected_five_year: int
    projected_ten_year: int


@dataclasses.dataclass(frozen=True)
class GoalProgress:
    goal_id: str
    current_amount: float
    target_amount: float
    progress_percentage: float
    months_remaining: int
    required_monthly: float
    is_on_track: bool
    projected_completion_date: Optional[str]


@dataclasses.dataclass(frozen=True)
class AggregateGoalProgress:
    total_target: float
    total_current: float
    overall_progress: float
    on_track_count: int
    off_track_count: int


@dataclasses.dataclass(frozen=True)
class TaggedTotal:
    recurring: float
    one_time: float

    @property
    def total(self) -> float:
        return self.recurring + self.one_time


@dataclasses.dataclass(frozen=True)
class MonthlySnapshot:
    month: str
    total_income: float
    recurring_income: float
    one_time_income: float
    total_expenses: float
    recurring_expenses: float
    one_time_expenses: float
    net_cash_flow: float
    savings_rate: float
    income_by_source: Dict[str, float]
    expenses_by_category: Dict[str, float]


# --- insights ---


@dataclasses.dataclass(frozen=True)
class MonthlySummary:
    total_income: float
    total_expenses: float
    net_cash_flow: float
    savings_rate: float


@dataclasses.dataclass(frozen=True)
class CategoryShare:
    category: str
    label: str
    amount: float
    percent_of_income: float


@dataclasses.dataclass(frozen=True)
class BurdenItem:
    name: str
    amount: float
    bucket: str


@dataclasses.dataclass(frozen=True)
class BurdenBreakdown:
    category: str
    total_monthly: float
    percent_of_income: float
    items: List[BurdenItem]
    bucket_totals: Dict[str, float]


@dataclasses.dataclass(frozen=True)
class CashReserveStatus:
    current: float
    target: float
    gap: float
    progress_percent: float
    months_to_target: Optional[int]


@dataclasses.dataclass(frozen=True)
class TrendPoint:
    month: str
    income: float
    expenses: float
    net_cash_flow: float
    savings_rate: float


@dataclasses.dataclass(frozen=True)
class YearlyProjection:
    total_income: float
    total_expenses: float
    total_net_cash_flow: float
    average_monthly_savings_rate: float
    projected_year_end_cash: float
    projected_year_end_net_worth: float


@dataclasses.dataclass(frozen=True)
class InsightsData:
    year: int
    current_month: str
    monthly_summary: MonthlySummary
    top_expenses: List[CategoryShare]
    burden: BurdenBreakdown
    cash_reserve: CashReserveStatus
    monthly_trend: List[TrendPoint]
    yearly_projection: YearlyProjection
