"""Tests for the CLI entry point."""

import json
import sys

import pytest
import yaml
from click.testing import CliRunner
from loguru import logger

from finstate.core.cli import main


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.yaml"
    path.write_text(
        yaml.dump(
            {
                "today": "2026-01-15",
                "monthly_income": 10_000,
                "monthly_budget_expenses": 6_000,
                "settings": {"inflation_rate": 0, "income_growth_rate": 0},
            }
        )
    )
    return str(path)


@pytest.fixture
def store_file(tmp_path, make_lot, make_holding):
    path = tmp_path / "store.json"
    path.write_text(
        json.dumps(
            {
                "transactions": [
                    make_lot("t1", quantity=2, cost_basis=200, remaining=1),
                    make_lot("t2", ticker="ETH", account_id="acct-2", quantity=3, cost_basis=300),
                ],
                "holdings": [
                    make_holding("h1", quantity=2, cost_basis_total=200),
                    make_holding("h2", ticker="ETH", account_id="acct-2", quantity=3, cost_basis_total=300),
                ],
            }
        )
    )
    return path


class TestCliGroup:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "project" in result.output
        assert "reconcile" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_config_file(self, tmp_path, snapshot_file):
        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(tmp_path / "nope.yaml"), "project", snapshot_file])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestProjectCommand:
    def test_json_output(self, snapshot_file):
        runner = CliRunner()
        result = runner.invoke(main, ["project", snapshot_file, "--horizon", "2", "--json"])
        assert result.exit_code == 0, result.output

        payload = json.loads(result.output)
        series = payload["series"]
        assert [r["year"] for r in series] == [2026, 2027, 2028]
        assert series[0]["totalIncome"] == 120_000
        assert series[0]["totalExpenses"] == 72_000
        assert series[0]["netCashFlow"] == 48_000
        assert payload["summary"]["averageNetCashFlow"] == 48_000

    def test_horizon_from_config(self, snapshot_file, tmp_config_file):
        runner = CliRunner()
        result = runner.invoke(main, ["--config", tmp_config_file, "project", snapshot_file, "--json"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["series"]) == 6

    def test_table_output(self, snapshot_file):
        runner = CliRunner()
        result = runner.invoke(main, ["project", snapshot_file, "--horizon", "1"])
        assert result.exit_code == 0, result.output
        assert "Average net cash flow" in result.output

    def test_bad_snapshot(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- just\n- a list\n")
        runner = CliRunner()
        result = runner.invoke(main, ["project", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestReconcileCommand:
    def test_reconcile_all(self, store_file):
        runner = CliRunner()
        result = runner.invoke(main, ["reconcile", str(store_file), "--json"])
        assert result.exit_code == 0, result.output

        statuses = {r["ticker"]: r["status"] for r in json.loads(result.output)}
        assert statuses == {"BTC": "updated", "ETH": "converged"}

        saved = json.loads(store_file.read_text())
        btc = next(h for h in saved["holdings"] if h["id"] == "h1")
        assert btc["quantity"] == 1
        assert btc["cost_basis_total"] == 100

    def test_single_ticker(self, store_file):
        runner = CliRunner()
        result = runner.invoke(main, ["reconcile", str(store_file), "--account", "acct-2", "--ticker", "ETH"])
        assert result.exit_code == 0, result.output
        assert "1 pairs checked, 0 holdings written." in result.output
