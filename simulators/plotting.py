"""Matplotlib rendering of a bench run (headless, Agg backend)."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402


def plot_run(records: List[Dict[str, Any]], path: Union[str, Path], title: str = "Sunward run") -> Path:
    """Save power vs. target, sun angle and stored energy against tick time."""
    if not records:
        raise ValueError("no records to plot")
    t = [r["t"] for r in records]

    fig, (ax_p, ax_a, ax_e) = plt.subplots(3, 1, sharex=True, figsize=(8, 8))
    ax_p.plot(t, [r["power"] / 1000.0 for r in records], label="sampled power")
    ax_p.plot(t, [r["target"] / 1000.0 for r in records], "--", label="target")
    ax_p.set_ylabel("kW")
    ax_p.legend(loc="lower right")
    ax_p.set_title(title)

    ax_a.plot(t, [r["sun_angle_deg"] for r in records])
    ax_a.set_ylabel("sun angle [deg]")

    ax_e.plot(t, [r["stored_local"] / 1000.0 for r in records], label="local")
    ax_e.plot(t, [r["stored_docked"] / 1000.0 for r in records], label="docked")
    ax_e.set_ylabel("stored [kWh]")
    ax_e.set_xlabel("t [s]")
    ax_e.legend(loc="upper right")

    for ax in (ax_p, ax_a, ax_e):
        ax.grid(True, alpha=0.3)
    fig.tight_layout()

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out)
    plt.close(fig)
    return out
