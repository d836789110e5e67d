"""
Simulation engine for Sunward.

This module glues together:
- a simulated vehicle (rigid body orientation, solar panels, storage cells,
  gyros) that renders device status text the way the host does,
- the tick controller (`sunward.controller.SolarRechargeController`),
- and a simple tick loop that moves the body, solves the power flow and lets
  the controller act.

The goal is to have one place that:
1. builds a default platform,
2. runs the control loop for N ticks,
3. emits JSON-friendly dicts (so the CLI / plots can consume them).

Frames: body x = roll axis, y = pitch axis, z = yaw axis. Panels face body +z
by default, so Roll + Pitch tilt them and Yaw spins them flat.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence

import numpy as np

from sunward.controller import PlatformConfig, SolarRechargeController
from sunward.controller.tick import TickResult
from sunward.sizing import ShipSize
from sunward.telemetry import format_quantity

# Body-frame rotation axis per gyro control name
_AXIS_INDEX = {"roll": 0, "pitch": 1, "yaw": 2}


def rotation(axis: int, angle: float) -> np.ndarray:
    """Right-handed rotation matrix about body axis 0/1/2 by ``angle`` [rad]."""
    c, s = np.cos(angle), np.sin(angle)
    if axis == 0:
        return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])
    if axis == 1:
        return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def sun_from_tilt(roll_deg: float = 0.0, pitch_deg: float = 0.0) -> List[float]:
    """Sun direction reached from body +z by rolling then pitching."""
    r = rotation(0, np.radians(roll_deg)) @ rotation(1, np.radians(pitch_deg))
    return [float(x) for x in r @ np.array([0.0, 0.0, 1.0])]


# Simulated devices
@dataclass
class SimGyro:
    """Gyro with three axis control values and a manual-override flag."""

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    override: bool = True

    def get_axis(self, name: str) -> float:
        return float(getattr(self, name.lower()))

    def set_axis(self, name: str, value: float) -> None:
        setattr(self, name.lower(), float(value))

    def set_override(self, enabled: bool) -> None:
        self.override = bool(enabled)


@dataclass
class SimPanel:
    """Solar panel; ``max_output`` is what it could deliver at this attitude."""

    panel_max: float
    normal: Sequence[float] = (0.0, 0.0, 1.0)
    max_output: float = 0.0
    current_output: float = 0.0

    @property
    def detailed_info(self) -> str:
        return (
            "Type: Solar Panel\n"
            f"Max Output: {format_quantity(self.max_output)}\n"
            f"Current Output: {format_quantity(self.current_output)}\n"
        )


@dataclass
class SimCell:
    """Storage cell with host-style status text.

    ``capacity`` and ``stored`` are in Wh; input/output figures in W.
    """

    capacity: float = 1_000_000.0
    stored: float = 500_000.0
    max_input: float = 200_000.0
    max_output: float = 200_000.0
    enabled: bool = True
    recharge: bool = False
    functional: bool = True
    current_input: float = 0.0
    current_output: float = 0.0

    @property
    def detailed_info(self) -> str:
        lines = [
            "Type: Battery",
            f"Max Output: {format_quantity(self.max_output)}",
            f"Max Required Input: {format_quantity(self.max_input)}",
            f"Max Stored Power: {format_quantity(self.capacity, 'Wh')}",
            f"Current Input: {format_quantity(self.current_input)}",
            f"Current Output: {format_quantity(self.current_output)}",
            f"Stored power: {format_quantity(self.stored, 'Wh')}",
        ]
        if self.recharge:
            lines.append("Fully recharged in: 1 hours")
        else:
            lines.append("Fully depleted in: 1 hours")
        return "\n".join(lines) + "\n"

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)

    def set_recharge(self, recharge: bool) -> None:
        self.recharge = bool(recharge)


class SimPlatform:
    """The simulated vehicle; also the host's device query for the controller."""

    def __init__(
        self,
        gyros: List[SimGyro],
        panels: List[SimPanel],
        local_cells: Optional[List[SimCell]] = None,
        docked_cells: Optional[List[SimCell]] = None,
    ) -> None:
        self.gyros = gyros
        self.panels = panels
        self.local_cells = list(local_cells or [])
        self.docked_cells = list(docked_cells or [])
        self.attitude = np.eye(3)  # body -> world

    # DeviceQuery
    def list_actuators(self) -> List[SimGyro]:
        return list(self.gyros)

    def list_solar_panels(self) -> List[SimPanel]:
        return list(self.panels)

    def list_local_cells(self) -> List[SimCell]:
        return [c for c in self.local_cells if c.functional]

    def list_docked_cells(self) -> List[SimCell]:
        return [c for c in self.docked_cells if c.functional]

    # Physics
    def turn(self, dt: float, deg_per_unit_s: float) -> None:
        """Integrate the gyros' commanded rates over ``dt`` seconds.

        Gyros only move the body while overridden; the group's mean value
        per axis is used.
        """
        active = [g for g in self.gyros if g.override]
        if not active:
            return
        for name, idx in _AXIS_INDEX.items():
            rate = float(np.mean([g.get_axis(name) for g in active]))
            if rate != 0.0:
                angle = np.radians(rate * deg_per_unit_s * dt)
                self.attitude = self.attitude @ rotation(idx, angle)

    def expose(self, sun: np.ndarray, rng: Optional[np.random.Generator] = None, noise_std: float = 0.0) -> None:
        """Update each panel's attainable output for the given sun direction."""
        for p in self.panels:
            n_world = self.attitude @ np.asarray(p.normal, dtype=float)
            cos_theta = float(np.dot(n_world, sun))
            value = p.panel_max * max(0.0, cos_theta)
            if rng is not None and noise_std > 0.0:
                value += float(rng.normal(0.0, noise_std * p.panel_max))
            p.max_output = float(np.clip(value, 0.0, p.panel_max))

    def sun_angle_deg(self, sun: np.ndarray) -> float:
        """Angle between the first panel's normal and the sun [deg]."""
        n = np.asarray(self.panels[0].normal, dtype=float) if self.panels else np.array([0.0, 0.0, 1.0])
        cos_theta = float(np.clip(np.dot(self.attitude @ n, sun), -1.0, 1.0))
        return float(np.degrees(np.arccos(cos_theta)))

    def flow(self, load: float, dt: float) -> Dict[str, float]:
        """Solve one tick of power flow and integrate stored energy.

        Supply (panels, then discharging cells) serves the platform load
        first and recharging cells second, pro rata to their max input.
        """
        cells = [c for c in self.local_cells + self.docked_cells if c.functional]
        for c in cells:
            c.current_input = 0.0
            c.current_output = 0.0

        solar_avail = sum(p.max_output for p in self.panels)
        sources = [c for c in cells if c.enabled and not c.recharge and c.stored > 0.0]
        sinks = [c for c in cells if c.enabled and c.recharge and c.stored < c.capacity]
        source_cap = sum(c.max_output for c in sources)
        sink_demand = sum(c.max_input for c in sinks)

        total = min(solar_avail + source_cap, load + sink_demand)
        to_sinks = max(0.0, total - load)
        solar_out = min(solar_avail, total)
        cell_out = total - solar_out

        for p in self.panels:
            p.current_output = p.max_output * (solar_out / solar_avail) if solar_avail > 0.0 else 0.0
        hours = dt / 3600.0
        if source_cap > 0.0:
            for c in sources:
                c.current_output = c.max_output * (cell_out / source_cap)
                c.stored = max(0.0, c.stored - c.current_output * hours)
        if sink_demand > 0.0:
            for c in sinks:
                c.current_input = c.max_input * (to_sinks / sink_demand)
                c.stored = min(c.capacity, c.stored + c.current_input * hours)

        return {
            "solar_avail": solar_avail,
            "solar_out": solar_out,
            "cell_out": cell_out,
            "to_sinks": to_sinks,
            "unserved": max(0.0, load - min(load, total)),
        }


# Plant construction helpers
def build_default_platform(
    n_gyros: int = 2,
    n_panels: int = 4,
    n_local_cells: int = 2,
    ship_size: ShipSize = ShipSize.LARGE,
) -> SimPlatform:
    """Build a small platform with upward-facing panels."""
    size = ShipSize.parse(ship_size)
    return SimPlatform(
        gyros=[SimGyro() for _ in range(n_gyros)],
        panels=[SimPanel(panel_max=size.panel_max) for _ in range(n_panels)],
        local_cells=[SimCell() for _ in range(n_local_cells)],
    )


# Simulation config / result types
@dataclass
class SimulationConfig:
    ticks: int = 60                   # controller invocations
    dt: float = 2.0                   # seconds between ticks
    sun: Sequence[float] = (0.0, 0.0, 1.0)
    load: float = 150_000.0           # constant platform draw [W]
    deg_per_unit_s: float = 40.0      # body turn per gyro unit per second
    noise_std: float = 0.0            # panel reading noise, fraction of panel max
    seed: Optional[int] = 0
    platform_kwargs: Dict[str, Any] = field(default_factory=dict)
    platform_cfg: Optional[PlatformConfig] = None

    # Optional: scheduled events as dicts with a "tick" key and one of
    #   "sun": [x, y, z] | "dock": {SimCell kwargs} | "undock": True
    events: List[Dict[str, Any]] = field(default_factory=list)
    # Optional: per-sample callback for CLIs/loggers
    on_sample: Optional[Callable[[Dict[str, Any]], None]] = None

    def build_platform(self) -> SimPlatform:
        return build_default_platform(**self.platform_kwargs)

    def build_controller(self, platform: SimPlatform) -> SolarRechargeController:
        return SolarRechargeController(platform, self.platform_cfg or PlatformConfig())


def _unit(v: Sequence[float]) -> np.ndarray:
    a = np.asarray(v, dtype=float)
    norm = float(np.linalg.norm(a))
    if norm == 0.0:
        raise ValueError("sun direction must be non-zero")
    return a / norm


# Engine
class SimulationEngine:
    """
    Tick-stepped closed-loop simulation.

    Usage:
        eng = SimulationEngine(SimulationConfig(ticks=30))
        for rec in eng.run():
            print(rec["power"], rec["branch"])
    """

    def __init__(self, cfg: SimulationConfig):
        self.cfg = cfg
        self.platform = cfg.build_platform()
        self.ctrl = cfg.build_controller(self.platform)
        self.on_sample = cfg.on_sample
        self.sun = _unit(cfg.sun)
        self.rng = np.random.default_rng(cfg.seed)
        self.tick = 0
        self._iter: Optional[Generator[Dict[str, Any], None, None]] = None

    def _apply_events(self) -> None:
        for ev in self.cfg.events:
            if int(ev.get("tick", -1)) != self.tick:
                continue
            if "sun" in ev:
                self.sun = _unit(ev["sun"])
            if "dock" in ev:
                self.platform.docked_cells.append(SimCell(**(ev["dock"] or {})))
            if ev.get("undock"):
                self.platform.docked_cells.clear()

    def step(self) -> Optional[Dict[str, Any]]:
        """Advance one tick; ``None`` once ``cfg.ticks`` have run."""
        if self._iter is None:
            self._iter = self.run()
        try:
            return next(self._iter)
        except StopIteration:
            return None

    def run(self) -> Generator[Dict[str, Any], None, None]:
        """Run the loop and yield JSON-friendly dicts per tick."""
        while self.tick < self.cfg.ticks:
            self._apply_events()
            if self.tick > 0:
                self.platform.turn(self.cfg.dt, self.cfg.deg_per_unit_s)
            self.platform.expose(self.sun, self.rng, self.cfg.noise_std)
            flow = self.platform.flow(self.cfg.load, self.cfg.dt)

            result = self.ctrl.tick()
            rec = self._to_record(result, flow)
            self.tick += 1
            if self.on_sample is not None:
                self.on_sample(rec)
            yield rec

    def _to_record(self, result: TickResult, flow: Dict[str, float]) -> Dict[str, Any]:
        g = self.platform.gyros[0]
        routing = result.routing
        action = routing.action if routing is not None else None
        return {
            "tick": self.tick,
            "t": self.tick * self.cfg.dt,
            "power": result.power,
            "target": result.target_power,
            "branch": result.search.branch.value,
            "sun_angle_deg": self.platform.sun_angle_deg(self.sun),
            "roll": g.roll,
            "pitch": g.pitch,
            "yaw": g.yaw,
            "route": routing.branch.value if routing is not None else None,
            "route_action": None if action is None else action.reason,
            "stored_local": sum(c.stored for c in self.platform.local_cells),
            "stored_docked": sum(c.stored for c in self.platform.docked_cells),
            "flow": flow,
            "events": self.ctrl.get_events(clear=True),
        }


# CLI demo
def _demo() -> None:
    cfg = SimulationConfig(
        ticks=20,
        sun=sun_from_tilt(roll_deg=20.0),
        on_sample=lambda rec: print(rec["tick"], rec["branch"], round(rec["power"], 1)),
    )
    for _ in SimulationEngine(cfg).run():
        pass


if __name__ == "__main__":
    _demo()
