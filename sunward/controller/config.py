"""
Platform configuration

Operator-facing knobs for the tick controller. Everything has a sensible
default so ``PlatformConfig()`` runs out of the box.

Choosing the two search axes:
- panels facing up/down: Roll + Pitch
- panels facing forward/back: Pitch + Yaw
- panels facing left/right: Roll + Yaw
Pick the pair that tilts the panels rather than spinning them flat.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

from ..alignment.types import Axis
from ..sizing import ShipSize


def _as_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "yes", "on"}
    return bool(v)


@dataclass
class PlatformConfig:
    """Configuration for :class:`~sunward.controller.tick.SolarRechargeController`.

    Parameters
    ship_size : ShipSize
        Size class; selects panel and cell constants.
    min_power_percent : float
        Minimum acceptable power as a percentage of one panel's rating.
        Values near or above 100 keep the search running forever.
    turn_rate : float
        Rotation speed; slower is more precise.
    primary_axis, secondary_axis : Axis
        The two axes the search alternates between.
    auto_override : bool
        Take gyro override while searching and release it once aligned.
    battery_management : bool
        Run the charge router after alignment.
    charge_docked : bool
        Let the router charge docked cells.
    keep_cells_on : bool
        Keep local cells on and discharging except when charging them.
    """

    ship_size: ShipSize = ShipSize.LARGE
    min_power_percent: float = 98.0
    turn_rate: float = 2.5
    primary_axis: Axis = Axis.ROLL
    secondary_axis: Axis = Axis.PITCH
    auto_override: bool = False
    battery_management: bool = True
    charge_docked: bool = True
    keep_cells_on: bool = True

    def __post_init__(self) -> None:
        self.ship_size = ShipSize.parse(self.ship_size)
        self.primary_axis = Axis.parse(self.primary_axis)
        self.secondary_axis = Axis.parse(self.secondary_axis)
        self.min_power_percent = float(self.min_power_percent)
        self.turn_rate = float(self.turn_rate)
        self.validate()

    # Derived
    @property
    def target_power(self) -> float:
        """Minimum acceptable average panel output [W]."""
        return self.min_power_percent / 100.0 * self.ship_size.panel_max

    @property
    def base_rate(self) -> float:
        """Actuator control value for direction +1."""
        return 0.01 * self.turn_rate

    def validate(self) -> None:
        if self.min_power_percent <= 0.0:
            raise ValueError("min_power_percent must be > 0")
        if self.turn_rate <= 0.0:
            raise ValueError("turn_rate must be > 0")
        if self.primary_axis == self.secondary_axis:
            raise ValueError("primary_axis and secondary_axis must differ")

    # ---- Frontend helpers ----
    def describe(self) -> Dict[str, Any]:
        """Return UI metadata for tunable platform parameters."""
        axes = [a.value for a in Axis]
        return {
            "key": "platform",
            "label": "Platform",
            "params": [
                {"name": "ship_size",         "type": "choice", "choices": [s.value for s in ShipSize], "default": self.ship_size.value},
                {"name": "min_power_percent", "type": "number", "min": 1.0, "max": 100.0, "step": 0.5, "unit": "%", "default": self.min_power_percent},
                {"name": "turn_rate",         "type": "number", "min": 0.1, "max": 20.0,  "step": 0.1, "default": self.turn_rate, "help": "Slower is more precise"},
                {"name": "primary_axis",      "type": "choice", "choices": axes, "default": self.primary_axis.value},
                {"name": "secondary_axis",    "type": "choice", "choices": axes, "default": self.secondary_axis.value},
                {"name": "auto_override",     "type": "bool",   "default": self.auto_override},
                {"name": "battery_management","type": "bool",   "default": self.battery_management},
                {"name": "charge_docked",     "type": "bool",   "default": self.charge_docked},
                {"name": "keep_cells_on",     "type": "bool",   "default": self.keep_cells_on},
            ],
        }

    def to_dict(self) -> Dict[str, Any]:
        """Dataclass -> JSON-friendly dict (enums as their values)."""
        return {
            "ship_size": self.ship_size.value,
            "min_power_percent": self.min_power_percent,
            "turn_rate": self.turn_rate,
            "primary_axis": self.primary_axis.value,
            "secondary_axis": self.secondary_axis.value,
            "auto_override": self.auto_override,
            "battery_management": self.battery_management,
            "charge_docked": self.charge_docked,
            "keep_cells_on": self.keep_cells_on,
        }

    def update(self, **kw: Any) -> None:
        """Apply updates with coercion; unknown keys are ignored.

        The whole update is validated before anything is changed.
        """
        merged = self.to_dict()
        merged.update({k: v for k, v in kw.items() if k in merged})
        fresh = PlatformConfig.from_dict(merged)
        for f in fields(self):
            setattr(self, f.name, getattr(fresh, f.name))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlatformConfig":
        known = {f.name for f in fields(cls)}
        kw = {k: v for k, v in (data or {}).items() if k in known}
        for k in ("auto_override", "battery_management", "charge_docked", "keep_cells_on"):
            if k in kw:
                kw[k] = _as_bool(kw[k])
        return cls(**kw)


def load_config(path: Union[str, Path]) -> PlatformConfig:
    """Read a JSON platform config; missing keys keep their defaults."""
    p = Path(path)
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{p}: expected a JSON object")
    return PlatformConfig.from_dict(data)


def save_config(cfg: PlatformConfig, path: Union[str, Path]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(cfg.to_dict(), indent=2) + "\n", encoding="utf-8")
    return p


__all__ = ["PlatformConfig", "load_config", "save_config"]
