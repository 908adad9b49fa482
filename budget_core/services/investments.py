from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from budget_core.domain.models import Investment, InvestmentProjection, PortfolioSummary
from budget_core.domain.months import add_months
from budget_core.domain.rounding import round_half_up, round_whole


def grow_one_month(balance: float, contribution: float, annual_return: float) -> float:
    """Monthly compounding: growth on the opening balance, then the contribution."""
    return balance * (1 + annual_return / 12) + contribution


def project_growth(investment: Investment, months: int, start_month: str) -> List[InvestmentProjection]:
    """
    Snapshots for ``months + 1`` months starting at ``start_month``.
    Index 0 is the untouched opening balance.
    """
    projections: List[InvestmentProjection] = []
    balance = investment.balance
    total_contributed = 0.0

    for i in range(months + 1):
        projections.append(
            InvestmentProjection(
                month=add_months(start_month, i),
                investment_id=investment.id,
                balance=round_half_up(balance, 2),
                total_contributed=total_contributed,
                total_gains=round_half_up(balance - investment.balance - total_contributed, 2),
            )
        )
        if i < months:
            balance = grow_one_month(balance, investment.monthly_contribution, investment.expected_return)
            total_contributed += investment.monthly_contribution

    return projections


def project_portfolio(
    investments: Iterable[Investment], months: int, start_month: str
) -> Dict[str, List[InvestmentProjection]]:
    return {inv.id: project_growth(inv, months, start_month) for inv in investments}


def years_to_target(
    balance: float,
    contribution: float,
    annual_return: float,
    target: float,
    max_years: int = 100,
) -> Optional[float]:
    """
    Years (1 decimal) until ``balance`` first reaches ``target``.
    Returns None when the target is not reached within ``max_years``.
    """
    if balance >= target:
        return 0
    for months in range(1, max_years * 12 + 1):
        balance = grow_one_month(balance, contribution, annual_return)
        if balance >= target:
            return round_half_up(months / 12, 1)
    return None


def _simulate(investments: Sequence[Investment], months: int) -> np.ndarray:
    balances = np.array([inv.balance for inv in investments], dtype=float)
    contributions = np.array([inv.monthly_contribution for inv in investments], dtype=float)
    returns = np.array([inv.expected_return for inv in investments], dtype=float)
    for _ in range(months):
        balances = grow_one_month(balances, contributions, returns)
    return balances


def portfolio_balance_at(investments: Iterable[Investment], months_from_now: int) -> float:
    """Sum of each investment's balance after ``months_from_now`` independent steps."""
    investments = list(investments)
    if not investments:
        return 0.0
    return float(sum(_simulate(investments, months_from_now).tolist()))


def portfolio_summary(investments: Iterable[Investment]) -> PortfolioSummary:
    investments = list(investments)
    total_value = sum((inv.balance for inv in investments), 0.0)
    total_contributions = sum((inv.monthly_contribution for inv in investments), 0.0)
    weighted = (
        sum(inv.balance * inv.expected_return for inv in investments) / total_value
        if total_value > 0
        else 0.0
    )
    return PortfolioSummary(
        total_value=total_value,
        total_monthly_contributions=total_contributions,
        weighted_average_return=weighted,
        projected_one_year=round_whole(portfolio_balance_at(investments, 12)),
        projected_five_year=round_whole(portfolio_balance_at(investments, 60)),
        projected_ten_year=round_whole(portfolio_balance_at(investments, 120)),
    )


def yearly_projections(investment: Investment, years: Iterable[int]) -> Dict[int, int]:
    """Whole-dollar balance after each requested number of years, each simulated from scratch."""
    result: Dict[int, int] = {}
    for year in years:
        balance = investment.balance
        for _ in range(year * 12):
            balance = grow_one_month(balance, investment.monthly_contribution, investment.expected_return)
        result[year] = round_whole(balance)
    return result
