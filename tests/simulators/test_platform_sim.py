"""Tests for the scenario catalogue, the bench CLI and run plotting.

Run from repo root:
    python -m pytest -q tests/simulators/test_platform_sim.py
"""

from __future__ import annotations

import csv

import pytest

from simulators.platform_sim import main, run_platform_sim
from simulators.plotting import plot_run
from simulators.scenarios import default_scenarios, get_scenario, list_scenarios


def test_catalogue_names():
    assert list_scenarios() == ["steady", "offset_roll", "offset_both", "docking", "noisy", "night_pass"]
    with pytest.raises(KeyError):
        get_scenario("eclipse")


@pytest.mark.parametrize("name", [s.name for s in default_scenarios()])
def test_every_scenario_runs(name):
    recs = run_platform_sim(scenario=name, ticks=8, verbose=False)
    assert len(recs) == 8


def test_offset_both_makes_progress():
    recs = run_platform_sim(scenario="offset_both", ticks=150, verbose=False)
    assert recs[-1]["sun_angle_deg"] < recs[0]["sun_angle_deg"]


def test_csv_export(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_platform_sim(scenario="docking", ticks=10, verbose=False, csv_path="dock.csv")
    out = tmp_path / "data" / "runs" / "dock.csv"
    with out.open(newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 10
    assert "flow_solar_avail" in rows[0]
    assert "cells_docked" in rows[5]["events"]


def test_plot_written(tmp_path):
    recs = run_platform_sim(scenario="offset_roll", ticks=5, verbose=False)
    out = plot_run(recs, tmp_path / "run.png")
    assert out.exists() and out.stat().st_size > 0


def test_plot_rejects_empty(tmp_path):
    with pytest.raises(ValueError):
        plot_run([], tmp_path / "run.png")


def test_cli_quiet(capsys):
    assert main(["--scenario", "steady", "--ticks", "2", "--quiet"]) == 0
    assert capsys.readouterr().out == ""


def test_cli_with_config(tmp_path, capsys):
    cfg = tmp_path / "platform.json"
    cfg.write_text('{"min_power_percent": 50}', encoding="utf-8")
    assert main(["--scenario", "offset_roll", "--ticks", "1", "--config", str(cfg)]) == 0
    assert "ALIGNED" in capsys.readouterr().out
