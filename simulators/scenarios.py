"""Scenario library for the Sunward bench.

Scenarios are pure data: a sun direction, optional noise, and a tick-ordered
list of events that `SimulationEngine` applies before sampling.

Event schema (one dict per event):
    {
        "tick": <int>,                 # tick index the event fires on
        "sun": [x, y, z],              # optional: new sun direction
        "dock": {SimCell kwargs},      # optional: a cell docks
        "undock": True,                # optional: every docked cell leaves
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from simulators.engine import sun_from_tilt


# -----------------------------------------------------------------------------
# Event helpers
# -----------------------------------------------------------------------------


def event(
    tick: int,
    *,
    sun: Optional[Sequence[float]] = None,
    dock: Optional[Dict[str, Any]] = None,
    undock: bool = False,
) -> Dict[str, Any]:
    """Create a single scheduled event."""
    e: Dict[str, Any] = {"tick": int(tick)}
    if sun is not None:
        e["sun"] = [float(x) for x in sun]
    if dock is not None:
        e["dock"] = dict(dock)
    if undock:
        e["undock"] = True
    return e


def _sorted(events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(events, key=lambda d: int(d.get("tick", 0)))


# -----------------------------------------------------------------------------
# Scenario container
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Scenario:
    name: str
    sun: Sequence[float] = (0.0, 0.0, 1.0)
    events: List[Dict[str, Any]] = field(default_factory=list)
    noise_std: float = 0.0
    description: str = ""

    def sim_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for `SimulationConfig`."""
        return {
            "sun": list(self.sun),
            "events": list(self.events),
            "noise_std": self.noise_std,
        }


# -----------------------------------------------------------------------------
# Event schedules
# -----------------------------------------------------------------------------


def docking_schedule(
    *,
    t_dock: int = 5,
    t_undock: int = 80,
    stored: float = 100_000.0,
    capacity: float = 1_000_000.0,
) -> List[Dict[str, Any]]:
    """One drained cell docks, then leaves."""
    return _sorted([
        event(t_dock, dock={"stored": stored, "capacity": capacity}),
        event(t_undock, undock=True),
    ])


def night_pass(
    *,
    t_dark: int = 20,
    t_light: int = 40,
    roll_deg: float = 15.0,
) -> List[Dict[str, Any]]:
    """Sun goes behind the panels, then comes back at an offset."""
    return _sorted([
        event(t_dark, sun=(0.0, 0.0, -1.0)),
        event(t_light, sun=sun_from_tilt(roll_deg=roll_deg)),
    ])


# -----------------------------------------------------------------------------
# Scenario catalog (public API)
# -----------------------------------------------------------------------------


def default_scenarios() -> List[Scenario]:
    """Canonical scenario set for the bench."""
    return [
        Scenario(
            name="steady",
            description="Sun straight overhead; nothing to do.",
        ),
        Scenario(
            name="offset_roll",
            sun=sun_from_tilt(roll_deg=20.0),
            description="Sun 20 deg off along roll.",
        ),
        Scenario(
            name="offset_both",
            sun=sun_from_tilt(roll_deg=-15.0, pitch_deg=25.0),
            description="Sun off on both search axes.",
        ),
        Scenario(
            name="docking",
            sun=sun_from_tilt(roll_deg=10.0),
            events=docking_schedule(),
            description="Drained cell docks mid-run and later leaves.",
        ),
        Scenario(
            name="noisy",
            sun=sun_from_tilt(roll_deg=20.0),
            noise_std=0.002,
            description="Offset sun with noisy panel readings.",
        ),
        Scenario(
            name="night_pass",
            events=night_pass(),
            description="Darkness then sunrise at an offset.",
        ),
    ]


def list_scenarios() -> List[str]:
    return [s.name for s in default_scenarios()]


def get_scenario(name: str) -> Scenario:
    for s in default_scenarios():
        if s.name == name:
            return s
    raise KeyError(f"Unknown scenario '{name}'. Available: {list_scenarios()}")
