"""
platform_sim.py

Convenience runner for bench experiments.

This script is a *thinner* wrapper than `engine.py`. It focuses on:
- picking a named scenario (via `simulators.scenarios`),
- running the tick controller against the simulated platform,
- printing / returning JSON-friendly samples, with optional CSV and plot.

Examples
--------
# sun offset along roll
python -m simulators.platform_sim --scenario offset_roll

# docking run with a plot, quiet console
python -m simulators.platform_sim --scenario docking --ticks 120 --plot docking.png --quiet

# use an operator config written by ConfigCreator.py
python -m simulators.platform_sim --config platform.json --csv run.csv
"""

import argparse
import csv
import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from simulators.engine import SimulationConfig, SimulationEngine
from simulators.scenarios import get_scenario, list_scenarios
from sunward.controller import PlatformConfig, PlatformError, load_config

RUNS_DIR = Path("data") / "runs"


def _flatten(rec: Dict[str, Any]) -> Dict[str, Any]:
    row = dict(rec)
    flow = row.pop("flow", None)
    if isinstance(flow, dict):
        for k, v in flow.items():
            row[f"flow_{k}"] = v
    events = row.pop("events", None)
    row["events"] = ";".join(e["type"] for e in events or [])
    return row


def write_csv(records: List[Dict[str, Any]], name: str) -> Path:
    """Write flattened records under data/runs/ and return the path."""
    RUNS_DIR.mkdir(parents=True, exist_ok=True)
    out_path = RUNS_DIR / name
    rows = [_flatten(r) for r in records]
    fieldnames = sorted({k for r in rows for k in r.keys()})
    with out_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
    return out_path


# Runner
def run_platform_sim(
    scenario: str = "offset_roll",
    ticks: int = 60,
    platform_cfg: Optional[PlatformConfig] = None,
    verbose: bool = True,
    csv_path: Optional[str] = None,
    plot_path: Optional[str] = None,
    realtime: bool = False,
    tick_ms: int = 0,
) -> List[Dict[str, Any]]:
    """Run one scenario and return the list of records."""
    sc = get_scenario(scenario)
    records: List[Dict[str, Any]] = []

    def _collect(rec: Dict[str, Any]) -> None:
        records.append(rec)
        if verbose:
            print(
                f"[{rec['tick']:4d}] {rec['branch']:<8} "
                f"P={rec['power'] / 1000.0:8.2f} kW  angle={rec['sun_angle_deg']:6.2f}  "
                f"route={rec['route']}"
            )
            for ev in rec["events"]:
                print("       event:", json.dumps(ev))

    cfg = SimulationConfig(
        ticks=ticks,
        platform_cfg=platform_cfg,
        on_sample=_collect,
        **sc.sim_kwargs(),
    )
    eng = SimulationEngine(cfg)

    if realtime:
        # Wall-clock paced stepping for demos
        tick_s = max(0.0, float(tick_ms) / 1000.0)
        while eng.step() is not None:
            if tick_s > 0:
                time.sleep(tick_s)
    else:
        for _ in eng.run():
            pass

    if csv_path and records:
        out = write_csv(records, csv_path)
        if verbose:
            print(f"[platform_sim] CSV written to {out}")

    if plot_path and records:
        from simulators.plotting import plot_run

        out = plot_run(records, plot_path, title=f"Sunward: {sc.name}")
        if verbose:
            print(f"[platform_sim] plot written to {out}")

    return records


# CLI
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the Sunward controller against a simulated platform.")
    parser.add_argument(
        "--scenario",
        type=str,
        default="offset_roll",
        choices=list_scenarios(),
        help="Named scenario from simulators.scenarios",
    )
    parser.add_argument("--ticks", type=int, default=60, help="Number of controller ticks")
    parser.add_argument("--config", type=str, default=None, help="Platform config JSON (see ConfigCreator.py)")
    parser.add_argument("--quiet", action="store_true", help="Do not print each sample")
    parser.add_argument("--csv", type=str, default=None, help="CSV file name under data/runs/")
    parser.add_argument("--plot", type=str, default=None, help="Path of a PNG plot of the run")
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Pace the simulation in wall-clock time (one tick per --tick-ms).",
    )
    parser.add_argument("--tick-ms", type=int, default=2000, help="Tick interval for --realtime")
    args = parser.parse_args(argv)

    platform_cfg = load_config(args.config) if args.config else None
    try:
        run_platform_sim(
            scenario=args.scenario,
            ticks=args.ticks,
            platform_cfg=platform_cfg,
            verbose=not args.quiet,
            csv_path=args.csv,
            plot_path=args.plot,
            realtime=args.realtime,
            tick_ms=args.tick_ms,
        )
    except PlatformError as exc:
        print(f"[platform_sim] {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
