"""
SolarRechargeController: one sample → align → route pass per tick

Wires the telemetry parser, the persisted search record, the gyro group, the
hill climber and the charge router into a single call the host makes on a
fixed cadence (2 s works well). Ticks never overlap and nothing runs between
them; the next tick is the retry for every recoverable condition.

Per tick:
  1. Fail fast (before any actuation) if there are no gyros or no panels.
  2. Sample power: mean Max Output over readable panels.
  3. Load the record, verify the gyro group, step the hill climber, apply its
     commands, save the record.
  4. If battery management is on and any cell exists: dock intake, budget,
     cascade, apply.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..alignment.gyros import GyroGroup
from ..alignment.hill_climb import AxisHillClimb
from ..alignment.state_store import StateStore
from ..alignment.types import SearchBranch, SearchStep
from ..battery.budget import snapshot_cells
from ..battery.router import ChargeRouter, RoutingDecision, apply_decision
from ..battery.types import CellPool
from ..devices import DeviceQuery
from ..telemetry.aggregate import average_max_output
from ..telemetry.parser import parse_solar
from .config import PlatformConfig
from .errors import NoActuatorsError, NoSolarPanelsError


@dataclass
class TickResult:
    """Everything one tick sampled and decided."""

    tick: int
    power: float
    target_power: float
    search: SearchStep
    routing: Optional[RoutingDecision] = None
    debug: Dict[str, Any] = field(default_factory=dict)

    @property
    def aligned(self) -> bool:
        return self.search.branch == SearchBranch.ALIGNED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "power": self.power,
            "target_power": self.target_power,
            "search": self.search.to_dict(),
            "routing": None if self.routing is None else self.routing.to_dict(),
            "debug": self.debug,
        }


class SolarRechargeController:
    """Tick orchestrator for sun alignment and battery routing.

    Parameters
    devices : DeviceQuery
        Host collaborator listing actuators, panels and both cell pools.
    cfg : PlatformConfig, optional
        Operator configuration; defaults to ``PlatformConfig()``.
    store : StateStore, optional
        Holder of the persisted search record; a fresh one by default.
    """

    def __init__(
        self,
        devices: DeviceQuery,
        cfg: Optional[PlatformConfig] = None,
        store: Optional[StateStore] = None,
    ) -> None:
        self.devices = devices
        self.cfg = cfg if cfg is not None else PlatformConfig()
        self.store = store if store is not None else StateStore()
        self._build()
        self._tick = 0
        self._last_branch: Optional[SearchBranch] = None
        self._last_power: Optional[float] = None
        # Event log for operators/frontends (branch transitions, routing changes)
        self.events: List[dict] = []

    def _build(self) -> None:
        self.climber = AxisHillClimb(
            primary=self.cfg.primary_axis,
            secondary=self.cfg.secondary_axis,
            target_power=self.cfg.target_power,
            auto_override=self.cfg.auto_override,
            rate=self.cfg.base_rate,
        )
        self.router = ChargeRouter(
            ship_size=self.cfg.ship_size,
            target_power=self.cfg.target_power,
            keep_cells_on=self.cfg.keep_cells_on,
            charge_docked=self.cfg.charge_docked,
        )

    # Core tick
    def tick(self) -> TickResult:
        """Run one full sample → align → route pass.

        Raises NoActuatorsError / NoSolarPanelsError before touching any
        device when either list is empty.
        """
        gyro_handles = list(self.devices.list_actuators())
        if not gyro_handles:
            raise NoActuatorsError()
        panels = list(self.devices.list_solar_panels())
        if not panels:
            raise NoSolarPanelsError()

        self._tick += 1
        readings = [parse_solar(p.detailed_info) for p in panels]
        power = average_max_output(readings)
        skipped = sum(1 for r in readings if r is None)

        # Alignment
        group = GyroGroup(gyro_handles, self.cfg.base_rate)
        directions = group.refresh((self.cfg.primary_axis, self.cfg.secondary_axis))
        state = self.store.load()
        step = self.climber.step(power, state, group.verify(), directions)
        group.apply(step)
        self.store.save(step.state)
        self._log_search(step)

        # Battery routing
        routing: Optional[RoutingDecision] = None
        if self.cfg.battery_management:
            local_h = list(self.devices.list_local_cells())
            docked_h = list(self.devices.list_docked_cells())
            if local_h or docked_h:
                local = snapshot_cells(local_h, CellPool.LOCAL)
                docked = snapshot_cells(docked_h, CellPool.DOCKED)
                routing = self.router.route(power, readings, local, docked)
                apply_decision(routing, local_h, docked_h)
                self._log_routing(routing)

        self._last_power = power
        return TickResult(
            tick=self._tick,
            power=power,
            target_power=self.cfg.target_power,
            search=step,
            routing=routing,
            debug={"panels": len(panels), "panels_skipped": skipped},
        )

    # Event helpers
    def _emit(self, kind: str, **payload: Any) -> None:
        ev = {"tick": self._tick, "type": kind}
        ev.update(payload)
        self.events.append(ev)

    def _log_search(self, step: SearchStep) -> None:
        branch = step.branch
        if branch == SearchBranch.RESET:
            self._emit("alignment_reset")
        elif branch == SearchBranch.ALIGNED and self._last_branch != SearchBranch.ALIGNED:
            self._emit("aligned", power=step.debug.get("p"))
        elif branch == SearchBranch.START and self._last_branch != SearchBranch.START:
            self._emit("search_start", axis=self.cfg.primary_axis.value)
        elif branch == SearchBranch.REVERSE:
            self._emit("reverse", axis=step.debug.get("axis"))
        elif branch == SearchBranch.SWITCH:
            to_axis = step.rotations[-1].axis.value if step.rotations else None
            self._emit("axis_switch", **{"from": step.debug.get("axis"), "to": to_axis})
        self._last_branch = branch

    def _log_routing(self, decision: RoutingDecision) -> None:
        if decision.intake:
            self._emit("cells_docked", count=len(decision.intake))
        if decision.floor:
            self._emit("safety_floor", count=len(decision.floor))
        if decision.action is not None:
            self._emit("charge_action", branch=decision.branch.value, **decision.action.to_dict())

    # ---- Frontend helpers ----
    def get_state(self) -> str:
        """Return the last search branch name for UI convenience."""
        return self._last_branch.value if self._last_branch is not None else "IDLE"

    def get_snapshot(self) -> Dict[str, Any]:
        return {
            "tick": self._tick,
            "state": self.get_state(),
            "last_power": self._last_power,
            "target_power": self.cfg.target_power,
            "record": self.store.text,
        }

    def get_events(self, clear: bool = True) -> List[dict]:
        """Return accumulated events; clear by default for streaming semantics."""
        ev = list(self.events)
        if clear:
            self.events.clear()
        return ev

    def describe(self) -> Dict[str, Any]:
        return {
            "platform": self.cfg.describe(),
            "search": self.climber.describe(),
            "router": self.router.describe(),
        }

    def get_config(self) -> Dict[str, Any]:
        return {
            "platform": self.cfg.to_dict(),
            "search": self.climber.get_config(),
            "router": self.router.get_config(),
        }

    def update_params(self, **kw: Any) -> None:
        """Apply live platform updates and rebuild the climber and router."""
        self.cfg.update(**kw)
        self._build()


__all__ = ["TickResult", "SolarRechargeController"]
