import json
from pathlib import Path

from typer.testing import CliRunner

from budget_core.cli import app

runner = CliRunner()
DATA = Path(__file__).parent / "data" / "budget.json"


def test_cli_pl_flow(tmp_path):
    out = tmp_path / "pl.json"
    result = runner.invoke(app, ["pl", "--config", str(DATA), "--out", str(out)])
    assert result.exit_code == 0, result.stdout
    payload = json.loads(out.read_text())
    assert payload["year"] == 2025
    assert len(payload["months"]) == 12
    net = payload["net_cash_flow"]["values"]
    # January carries the rent override, June the movers, December the bonus
    assert net["2025-01"] == 5000 - 2500 - 400 - 320 - 136
    assert net["2025-06"] == 5000 - 2000 - 400 - 320 - 136 - 3000
    assert net["2025-12"] == 5000 + 3000 - 2000 - 400 - 136
    assert payload["balances"]["cash"]["closing"] == 10_000


def test_cli_pl_csv_and_year_override(tmp_path):
    out = tmp_path / "pl.csv"
    result = runner.invoke(app, ["pl", "--config", str(DATA), "--year", "2026", "--format", "csv", "--out", str(out)])
    assert result.exit_code == 0, result.stdout
    header = out.read_text().splitlines()[0]
    assert "2026-01" in header and header.endswith("ytd")


def test_cli_pl_table():
    result = runner.invoke(app, ["pl", "--config", str(DATA), "--format", "table"])
    assert result.exit_code == 0, result.stdout
    assert "P&L 2025" in result.stdout


def test_cli_insights_flow(tmp_path):
    out = tmp_path / "insights.json"
    result = runner.invoke(app, ["insights", "--config", str(DATA), "--month", "2025-03", "--out", str(out)])
    assert result.exit_code == 0, result.stdout
    payload = json.loads(out.read_text())
    assert payload["current_month"] == "2025-03"
    assert payload["burden"]["bucket_totals"]["credit_card"] == 136
    assert payload["burden"]["bucket_totals"]["other"] == 320
    assert len(payload["monthly_trend"]) == 12


def test_cli_rejects_bad_month():
    result = runner.invoke(app, ["insights", "--config", str(DATA), "--month", "2025-3"])
    assert result.exit_code != 0


def test_cli_snapshot_and_goals():
    result = runner.invoke(app, ["snapshot", "--config", str(DATA), "--month", "2025-06"])
    assert result.exit_code == 0, result.stdout
    snap = json.loads(result.stdout)
    assert snap["one_time_expenses"] == 3000

    result = runner.invoke(app, ["goals", "--config", str(DATA), "--month", "2025-01"])
    assert result.exit_code == 0, result.stdout
    goals = json.loads(result.stdout)
    assert goals["goals"][0]["goal_id"] == "goal-trip"
    assert goals["goals"][0]["is_on_track"] is False


def test_cli_portfolio_and_taxes():
    result = runner.invoke(app, ["portfolio", "--config", str(DATA), "--years", "1", "--target", "30000"])
    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    assert payload["summary"]["total_value"] == 20_000
    assert payload["investments"][0]["years_to_target"] is not None

    result = runner.invoke(app, ["taxes", "--earner1", "100000"])
    assert result.exit_code == 0, result.stdout
    assert json.loads(result.stdout)["net_annual"] == 84_318


def test_cli_missing_year_is_bad_parameter(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"settings": {}}))
    result = runner.invoke(app, ["pl", "--config", str(path)])
    assert result.exit_code != 0


def test_cli_portfolio_monthly_projections():
    result = runner.invoke(
        app, ["portfolio", "--config", str(DATA), "--years", "1", "--months", "2", "--start", "2025-12"]
    )
    assert result.exit_code == 0, result.stdout
    points = json.loads(result.stdout)["investments"][0]["projections"]
    assert [p["month"] for p in points] == ["2025-12", "2026-01", "2026-02"]
    assert points[0]["balance"] == 20_000


def test_cli_missing_config_is_bad_parameter(tmp_path):
    result = runner.invoke(app, ["pl", "--config", str(tmp_path / "missing.json")])
    assert result.exit_code == 2
    assert not isinstance(result.exception, FileNotFoundError)
