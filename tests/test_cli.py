"""CLI tests."""

import signal

import pytest
from typer.testing import CliRunner

from stepviz.cli import app

runner = CliRunner()


def test_layout_single_step():
    result = runner.invoke(app, ["layout", "1", "--width", "1200", "--height", "800"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "0\t460.0\t350.0"


def test_layout_lists_every_step():
    result = runner.invoke(app, ["layout", "5"])

    assert result.exit_code == 0
    assert len(result.stdout.strip().splitlines()) == 5


def test_layout_zero_steps():
    result = runner.invoke(app, ["layout", "0"])

    assert result.exit_code == 0
    assert "No steps" in result.stdout


def test_simulate_writes_svg(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STEPVIZ_CONFIG", raising=False)
    output = tmp_path / "demo.svg"

    result = runner.invoke(app, ["simulate", "--output", str(output), "--speed", "50"])

    assert result.exit_code == 0, result.stdout
    assert "5 of 5 steps completed" in result.stdout
    svg = output.read_text(encoding="utf-8")
    assert "Data Processing" in svg
    assert ' hidden"' not in svg


def test_simulate_rejects_non_positive_speed(tmp_path):
    result = runner.invoke(app, ["simulate", "--output", str(tmp_path / "x.svg"), "--speed", "0"])

    assert result.exit_code == 1


def test_watch_registers_reconnect_signal(tmp_path, monkeypatch):
    if not hasattr(signal, "SIGHUP"):
        pytest.skip("SIGHUP is not available on this platform")
    monkeypatch.delenv("STEPVIZ_CONFIG", raising=False)
    calls = []

    async def fake_run(self, lifespan=None, reconnect_signal=None):
        calls.append((lifespan, reconnect_signal))

    monkeypatch.setattr("stepviz.cli.WorkflowVisualization.run", fake_run)
    result = runner.invoke(
        app, ["watch", "--output", str(tmp_path / "run.svg"), "--lifespan", "1"]
    )

    assert result.exit_code == 0
    assert calls == [(1.0, signal.SIGHUP)]
    assert "SIGHUP" in result.stdout
