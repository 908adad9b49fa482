from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Dict, List, Sequence, Tuple

from budget_core.domain.models import (
    CATEGORY_LABELS,
    EXPENSE_CATEGORIES,
    AllocationBlock,
    BalanceRow,
    BudgetConfig,
    Entry,
    PLBlock,
    PLData,
    PLRow,
    PLSection,
    RunningBalances,
)
from budget_core.domain.months import months_for_year
from budget_core.domain.rounding import round_whole
from budget_core.services.entries import amount_for_month, one_time_entries, recurring_entries
from budget_core.services.investments import grow_one_month

logger = logging.getLogger(__name__)


def _create_row(
    id: str,
    name: str,
    depth: int,
    months: Sequence[str],
    value_for_month: Callable[[str], float],
    *,
    is_group: bool = False,
    is_subtotal: bool = False,
) -> PLRow:
    return PLRow(
        id=id,
        name=name,
        depth=depth,
        values={m: value_for_month(m) for m in months},
        is_group=is_group,
        is_subtotal=is_subtotal,
    )


def _sum_rows(
    id: str,
    name: str,
    depth: int,
    rows: Sequence[PLRow],
    months: Sequence[str],
    *,
    is_subtotal: bool = False,
) -> PLRow:
    return _create_row(
        id,
        name,
        depth,
        months,
        lambda m: sum((row.values.get(m, 0.0) for row in rows), 0.0),
        is_subtotal=is_subtotal,
    )


def _entry_row(entry: Entry, months: Sequence[str]) -> PLRow:
    return _create_row(entry.id, entry.name, 2, months, lambda m: amount_for_month(entry, m))


def _income_block(entries: Sequence[Entry], months: Sequence[str]) -> PLBlock:
    recurring_rows = [_entry_row(e, months) for e in recurring_entries(entries)]
    recurring_total = _sum_rows(
        "income-recurring-total", "Subtotal Recurring", 1, recurring_rows, months, is_subtotal=True
    )
    one_time_rows = [_entry_row(e, months) for e in one_time_entries(entries)]
    one_time_total = _sum_rows(
        "income-onetime-total", "Subtotal One-Time", 1, one_time_rows, months, is_subtotal=True
    )
    total = _sum_rows("income-total", "TOTAL INCOME", 0, [recurring_total, one_time_total], months)
    return PLBlock(
        recurring=PLSection(title="Recurring", rows=recurring_rows, total=recurring_total),
        one_time=PLSection(title="One-Time", rows=one_time_rows, total=one_time_total),
        total=total,
    )


def _expense_block(entries: Sequence[Entry], months: Sequence[str]) -> PLBlock:
    by_category: Dict[str, List[Entry]] = {}
    for expense in recurring_entries(entries):
        by_category.setdefault(expense.category, []).append(expense)

    recurring_rows: List[PLRow] = []
    group_rows: List[PLRow] = []
    for category in EXPENSE_CATEGORIES:
        members = by_category.get(category)
        if not members:
            continue
        item_rows = [_entry_row(e, months) for e in members]
        group = dataclasses.replace(
            _sum_rows(f"expense-{category}", CATEGORY_LABELS[category], 1, item_rows, months),
            is_group=True,
        )
        group_rows.append(group)
        recurring_rows.append(group)
        recurring_rows.extend(item_rows)

    recurring_total = _sum_rows(
        "expense-recurring-total", "Subtotal Recurring", 1, group_rows, months, is_subtotal=True
    )
    one_time_rows = [_entry_row(e, months) for e in one_time_entries(entries)]
    one_time_total = _sum_rows(
        "expense-onetime-total", "Subtotal One-Time", 1, one_time_rows, months, is_subtotal=True
    )
    total = _sum_rows("expense-total", "TOTAL EXPENSES", 0, [recurring_total, one_time_total], months)
    return PLBlock(
        recurring=PLSection(title="Recurring", rows=recurring_rows, total=recurring_total),
        one_time=PLSection(title="One-Time", rows=one_time_rows, total=one_time_total),
        total=total,
    )


def _allocation_block(config: BudgetConfig, months: Sequence[str]) -> AllocationBlock:
    investment_rows = [
        _create_row(inv.id, inv.name, 2, months, lambda m, c=inv.monthly_contribution: c)
        for inv in config.investments
    ]
    investment_total = _sum_rows(
        "allocation-investments-total", "Total Investments", 1, investment_rows, months, is_subtotal=True
    )
    goal_rows = [
        _create_row(goal.id, goal.name, 2, months, lambda m, c=goal.monthly_contribution: c)
        for goal in config.savings_goals
        if goal.monthly_contribution and goal.monthly_contribution > 0
    ]
    goal_total = _sum_rows(
        "allocation-goals-total", "Total Savings Goals", 1, goal_rows, months, is_subtotal=True
    )
    total = _sum_rows("allocation-total", "TOTAL ALLOCATED", 0, [investment_total, goal_total], months)
    return AllocationBlock(
        investments=PLSection(title="Investments", rows=investment_rows, total=investment_total),
        savings_goals=PLSection(title="Savings Goals", rows=goal_rows, total=goal_total),
        total=total,
    )


# --- running balances ---


@dataclasses.dataclass(frozen=True)
class BalancePolicy:
    cash_target: float
    annual_return: float  # simple mean of the investments' expected returns


@dataclasses.dataclass(frozen=True)
class BalanceState:
    cash: float
    investments: float

    @property
    def net_worth(self) -> float:
        return self.cash + self.investments


@dataclasses.dataclass(frozen=True)
class BalanceStep:
    month: str
    net_cash_flow: float
    cash_contribution: float
    investment_contribution: float
    state: BalanceState


def advance_balances(
    state: BalanceState, month: str, net_cash_flow: float, policy: BalancePolicy
) -> Tuple[BalanceState, BalanceStep]:
    """
    One month of the cash-first allocation policy.

    Positive cash flow tops the cash reserve up to its target first and the
    overflow is invested. Deficits never draw cash down. Both balances are
    rounded to whole dollars and the rounded values carry forward.
    """
    cash_needed = max(0.0, policy.cash_target - state.cash)
    cash_contribution = min(cash_needed, max(0.0, net_cash_flow))
    investment_contribution = max(0.0, net_cash_flow - cash_contribution)
    invested = grow_one_month(state.investments, investment_contribution, policy.annual_return)
    new_state = BalanceState(
        cash=round_whole(state.cash + cash_contribution),
        investments=round_whole(invested),
    )
    step = BalanceStep(
        month=month,
        net_cash_flow=net_cash_flow,
        cash_contribution=cash_contribution,
        investment_contribution=investment_contribution,
        state=new_state,
    )
    return new_state, step


def run_balances(
    months: Sequence[str],
    net_cash_flow: Dict[str, float],
    policy: BalancePolicy,
    start: BalanceState,
) -> List[BalanceStep]:
    steps: List[BalanceStep] = []
    state = start
    for month in months:
        state, step = advance_balances(state, month, net_cash_flow.get(month, 0.0), policy)
        steps.append(step)
    return steps


def _balance_policy(config: BudgetConfig) -> BalancePolicy:
    returns = [inv.expected_return for inv in config.investments]
    return BalancePolicy(
        cash_target=config.cash_reserve.target,
        annual_return=sum(returns) / len(returns) if returns else 0.0,
    )


def _balances(config: BudgetConfig, months: Sequence[str], net_cash_flow: PLRow) -> RunningBalances:
    start = BalanceState(
        cash=config.cash_reserve.current,
        investments=sum((inv.balance for inv in config.investments), 0.0),
    )
    steps = run_balances(months, net_cash_flow.values, _balance_policy(config), start)
    return RunningBalances(
        cash=BalanceRow("balance-cash", "Cash Reserve", 1, {s.month: s.state.cash for s in steps}),
        investments=BalanceRow(
            "balance-investments", "Investments", 1, {s.month: s.state.investments for s in steps}
        ),
        net_worth=BalanceRow("balance-net-worth", "NET WORTH", 0, {s.month: s.state.net_worth for s in steps}),
    )


def generate_pl(config: BudgetConfig) -> PLData:
    """Build the full P&L table and running balances for ``config.settings.year``."""
    year = config.settings.year
    months = months_for_year(year)
    logger.debug(
        "Generating P&L for %s: %d income, %d expense entries",
        year,
        len(config.income),
        len(config.expenses),
    )

    income = _income_block(config.income, months)
    expenses = _expense_block(config.expenses, months)
    net_cash_flow = _create_row(
        "net-cash-flow",
        "NET CASH FLOW",
        0,
        months,
        lambda m: income.total.values[m] - expenses.total.values[m],
    )
    allocations = _allocation_block(config, months)
    unallocated = _create_row(
        "unallocated",
        "UNALLOCATED SURPLUS",
        0,
        months,
        lambda m: net_cash_flow.values[m] - allocations.total.values[m],
    )
    balances = _balances(config, months, net_cash_flow)
    logger.debug("P&L %s closing net worth %s", year, balances.net_worth.closing)

    return PLData(
        year=year,
        months=months,
        income=income,
        expenses=expenses,
        net_cash_flow=net_cash_flow,
        allocations=allocations,
        unallocated=unallocated,
        balances=balances,
    )
