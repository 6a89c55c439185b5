"""CLI workflows through Typer's test runner."""

import logging

import pytest
from typer.testing import CliRunner

from transitmix import __version__
from transitmix.app import app
from transitmix.utils.logging import LogLevel, TransitmixLogger

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    # setup_logging exports the effective level; keep it out of other tests
    monkeypatch.setenv("TRANSITMIX_EFFECTIVE_LOG_LEVEL", "NORMAL")
    monkeypatch.delenv("TRANSITMIX_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    handlers = root.handlers[:]
    yield
    root.handlers[:] = handlers
    TransitmixLogger.set_level(LogLevel.NORMAL)


def test_plan_prints_tables_and_saves_json(long_demand_csv, tmp_path):
    output = tmp_path / "results"

    result = runner.invoke(
        app, ["plan", "--demand", str(long_demand_csv), "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert "Fleet Plan" in result.output
    assert "Plan KPIs" in result.output
    assert "Trips per Route" in result.output
    assert len(list(output.glob("transit_plan_*.json"))) == 1


def test_plan_quiet_mode(long_demand_csv, tmp_path):
    result = runner.invoke(
        app,
        ["plan", "-d", str(long_demand_csv), "-o", str(tmp_path / "q"), "--quiet"],
    )

    assert result.exit_code == 0
    assert "Fleet Plan" not in result.output


def test_missing_demand_file_exits_with_error(tmp_path):
    result = runner.invoke(app, ["plan", "--demand", str(tmp_path / "nope.csv")])

    assert result.exit_code == 1


def test_missing_config_file_exits_with_error(long_demand_csv, tmp_path):
    result = runner.invoke(
        app,
        ["plan", "--demand", str(long_demand_csv), "--config", str(tmp_path / "nope.yaml")],
    )

    assert result.exit_code == 1


def test_invalid_config_exits_with_error(long_demand_csv, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("vehicle_classes:\n  bus:\n    capacity: 50\n")

    result = runner.invoke(
        app, ["plan", "--demand", str(long_demand_csv), "--config", str(config)]
    )

    assert result.exit_code == 1


def test_abort_on_infeasible(long_demand_csv, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("vehicle_classes:\n  bus:\n    capacity: 50\n    fleet_count: 1\n")

    result = runner.invoke(
        app,
        [
            "plan",
            "--demand",
            str(long_demand_csv),
            "--config",
            str(config),
            "--output",
            str(tmp_path / "out"),
            "--abort-on-infeasible",
        ],
    )

    assert result.exit_code == 1


def test_infeasible_without_abort_still_succeeds(long_demand_csv, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("vehicle_classes:\n  bus:\n    capacity: 50\n    fleet_count: 1\n")

    result = runner.invoke(
        app,
        [
            "plan",
            "--demand",
            str(long_demand_csv),
            "--config",
            str(config),
            "--output",
            str(tmp_path / "out"),
            "-q",
        ],
    )

    assert result.exit_code == 0


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
