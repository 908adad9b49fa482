from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from budget_core.domain.models import BalanceRow, BudgetConfig, PLData, PLRow
from budget_core.domain.months import MonthFormatError, current_month
from budget_core.io import config as config_io
from budget_core.services import aggregation, goals as goals_service, insights as insights_service
from budget_core.services import investments as investments_service
from budget_core.services import pl_generator, taxes

app = typer.Typer(help="Household budget projector: P&L, insights, portfolio and goals.")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _emit(payload, out: Optional[Path], label: str):
    if out:
        _save_json(out, payload)
        typer.echo(f"{label} written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


def _load(config: Path, year: Optional[int] = None) -> BudgetConfig:
    try:
        loaded = config_io.load_budget_config(config)
    except (OSError, ValueError, KeyError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    if year is not None:
        loaded = dataclasses.replace(loaded, settings=dataclasses.replace(loaded.settings, year=year))
    return loaded


def _row_to_json(row: PLRow) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "depth": row.depth,
        "is_group": row.is_group,
        "is_subtotal": row.is_subtotal,
        "values": row.values,
        "ytd": row.ytd,
    }


def _balance_to_json(row: BalanceRow) -> dict:
    return {"id": row.id, "name": row.name, "depth": row.depth, "values": row.values, "closing": row.closing}


def _section_to_json(section) -> dict:
    return {
        "title": section.title,
        "rows": [_row_to_json(r) for r in section.rows],
        "total": _row_to_json(section.total),
    }


def _pl_to_json(data: PLData) -> dict:
    blocks = {}
    for key, block in (("income", data.income), ("expenses", data.expenses)):
        blocks[key] = {
            "recurring": _section_to_json(block.recurring),
            "one_time": _section_to_json(block.one_time),
            "total": _row_to_json(block.total),
        }
    return {
        "year": data.year,
        "months": data.months,
        **blocks,
        "net_cash_flow": _row_to_json(data.net_cash_flow),
        "allocations": {
            "investments": _section_to_json(data.allocations.investments),
            "savings_goals": _section_to_json(data.allocations.savings_goals),
            "total": _row_to_json(data.allocations.total),
        },
        "unallocated": _row_to_json(data.unallocated),
        "balances": {
            "cash": _balance_to_json(data.balances.cash),
            "investments": _balance_to_json(data.balances.investments),
            "net_worth": _balance_to_json(data.balances.net_worth),
        },
    }


def _pl_table(data: PLData) -> Table:
    table = Table(title=f"P&L {data.year}", show_lines=False)
    table.add_column("Line", no_wrap=True)
    for month in data.months:
        table.add_column(month[5:], justify="right")
    table.add_column("YTD", justify="right", style="bold")
    for row in data.iter_rows():
        label = "  " * row.depth + row.name
        style = "bold" if row.depth == 0 else ("cyan" if row.is_group or row.is_subtotal else None)
        table.add_row(label, *[f"{row.values[m]:,.0f}" for m in data.months], f"{row.ytd:,.0f}", style=style)
    for row in (data.balances.cash, data.balances.investments, data.balances.net_worth):
        label = "  " * row.depth + row.name
        table.add_row(label, *[f"{row.values[m]:,}" for m in data.months], f"{row.closing:,}", style="green")
    return table


@app.command()
def pl(
    config: Path = typer.Option(..., help="Budget configuration JSON"),
    year: Optional[int] = typer.Option(None, help="Override settings.year"),
    fmt: str = typer.Option("json", "--format", help="Output format: json|table|csv"),
    out: Optional[Path] = typer.Option(None, help="Output path (json or csv)"),
):
    """Generate the yearly P&L table with running balances."""
    data = pl_generator.generate_pl(_load(config, year))
    if fmt == "table":
        Console().print(_pl_table(data))
    elif fmt == "csv":
        frame = data.to_frame()
        if out:
            out.parent.mkdir(parents=True, exist_ok=True)
            frame.to_csv(out)
            typer.echo(f"P&L written to {out}")
        else:
            typer.echo(frame.to_csv())
    elif fmt == "json":
        _emit(_pl_to_json(data), out, "P&L")
    else:
        raise typer.BadParameter("Expected json, table or csv", param_hint="--format")


@app.command()
def insights(
    config: Path = typer.Option(..., help="Budget configuration JSON"),
    month: Optional[str] = typer.Option(None, help="Reference month YYYY-MM"),
    out: Optional[Path] = typer.Option(None, help="Output path for insights JSON"),
):
    """Single-month dashboard summary with the yearly trend."""
    budget = _load(config)
    try:
        policy = config_io.load_burden_policy(config)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    try:
        result = insights_service.compute_insights(budget, month, policy)
    except MonthFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint="--month") from exc
    _emit(dataclasses.asdict(result), out, "Insights")


@app.command()
def snapshot(
    config: Path = typer.Option(..., help="Budget configuration JSON"),
    month: str = typer.Option(..., help="Month YYYY-MM"),
):
    """Income/expense totals for one month, split by tag, source and category."""
    budget = _load(config)
    try:
        result = aggregation.monthly_snapshot(budget, month)
    except MonthFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint="--month") from exc
    typer.echo(json.dumps(dataclasses.asdict(result), indent=2))


@app.command()
def portfolio(
    config: Path = typer.Option(..., help="Budget configuration JSON"),
    years: List[int] = typer.Option([1, 5, 10, 20], "--years", help="Milestone years (repeatable)"),
    target: Optional[float] = typer.Option(None, help="Target balance for years-to-target"),
    months: int = typer.Option(0, help="Monthly snapshots to include per investment"),
    start: Optional[str] = typer.Option(None, help="First snapshot month YYYY-MM (default: this month)"),
    out: Optional[Path] = typer.Option(None, help="Output path for portfolio JSON"),
):
    """Portfolio summary and per-investment milestone projections."""
    budget = _load(config)
    snapshots = {}
    if months > 0:
        try:
            projected = investments_service.project_portfolio(budget.investments, months, start or current_month())
        except MonthFormatError as exc:
            raise typer.BadParameter(str(exc), param_hint="--start") from exc
        snapshots = {
            inv_id: [dataclasses.asdict(p) for p in points] for inv_id, points in projected.items()
        }
    per_investment = []
    for inv in budget.investments:
        item = {
            "id": inv.id,
            "name": inv.name,
            "milestones": investments_service.yearly_projections(inv, years),
        }
        if target is not None:
            item["years_to_target"] = investments_service.years_to_target(
                inv.balance, inv.monthly_contribution, inv.expected_return, target
            )
        if inv.id in snapshots:
            item["projections"] = snapshots[inv.id]
        per_investment.append(item)
    payload = {
        "summary": dataclasses.asdict(investments_service.portfolio_summary(budget.investments)),
        "investments": per_investment,
    }
    _emit(payload, out, "Portfolio")


@app.command()
def goals(
    config: Path = typer.Option(..., help="Budget configuration JSON"),
    month: Optional[str] = typer.Option(None, help="Evaluation month YYYY-MM (default: this month)"),
    out: Optional[Path] = typer.Option(None, help="Output path for goals JSON"),
):
    """Savings goal progress, most urgent first."""
    budget = _load(config)
    try:
        ranked = goals_service.rank_by_urgency(budget.savings_goals, month)
        payload = {
            "goals": [
                {
                    **dataclasses.asdict(goals_service.goal_progress(goal, month)),
                    "name": goal.name,
                    "required_increase": goals_service.required_increase(goal, month),
                }
                for goal in ranked
            ],
            "aggregate": dataclasses.asdict(goals_service.aggregate_progress(budget.savings_goals, month)),
        }
    except MonthFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint="--month") from exc
    _emit(payload, out, "Goals")


@app.command("taxes")
def taxes_command(
    earner1: float = typer.Option(..., help="Earner 1 gross annual income"),
    earner2: float = typer.Option(0.0, help="Earner 2 gross annual income"),
    pre_tax1: float = typer.Option(0.0, help="Earner 1 pre-tax contributions (401k, HSA)"),
    pre_tax2: float = typer.Option(0.0, help="Earner 2 pre-tax contributions"),
):
    """Rough household take-home estimate (illustrative, not tax advice)."""
    try:
        result = taxes.household_take_home(earner1, earner2, pre_tax1, pre_tax2)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(json.dumps(dataclasses.asdict(result), indent=2))


if __name__ == "__main__":
    app()
