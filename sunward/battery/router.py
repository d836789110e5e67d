"""
ChargeRouter: one-change-per-tick battery routing

Routes solar surplus/deficit across local cells and docked cells. The
cascade is a pure decision over a :class:`PowerBudget` snapshot and returns
at most one :class:`ChargeAction`; the effect of a change is only visible on
the next sample, so changing several cells at once would overshoot.

Cascade (first rule that applies wins):
  1. Safety floor: keep-on policy and power below target -> every local cell
     on and discharging. Exempt from the one-change rule; if it changed
     anything the tick ends here.
  2. Drain full: keep-on policy -> one full local cell on and discharging.
  3. Overload (array and local cells have no spare output):
     ignore a shortfall below one cell's capacity when nothing docked wants
     charge and power is at target; otherwise shed one charging local cell,
     else bring one charged local cell online, else shed one charging docked
     cell if the net deficit is large; else hold.
  4. No docked demand: release one discharging local cell (keep-on off), or
     charge one local cell when power is at target or the array alone has a
     full cell's worth of spare output. Never while the safety floor holds.
  5. All docked cells charging with large spare output: hold.
  6. Docked cells need charge: start one docked cell charging if supply has
     headroom, else bring one charged local cell online to help. Cells taken
     in by this tick's dock intake are not candidates.

Newly docked cells are handled before aggregation by
:func:`~sunward.battery.budget.dock_intake`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence

from ..devices import StorageCellHandle
from ..sizing import LARGE_CELL_CAPACITY, SMALL_CELL_CAPACITY, ShipSize
from ..telemetry.parser import is_recharging
from ..telemetry.types import PowerReading
from .budget import PowerBudget, compute_budget, dock_intake
from .types import (
    CHARGE_ON,
    DISCHARGE_ON,
    CellPool,
    CellSnapshot,
    ChargeAction,
    ChargeIntent,
    action_for,
)


class RouteBranch(str, Enum):
    SAFETY_FLOOR = "SAFETY_FLOOR"
    DRAIN_FULL = "DRAIN_FULL"
    OVERLOAD_IGNORED = "OVERLOAD_IGNORED"
    OVERLOAD_SHED_LOCAL = "OVERLOAD_SHED_LOCAL"
    OVERLOAD_DISCHARGE_LOCAL = "OVERLOAD_DISCHARGE_LOCAL"
    OVERLOAD_SHED_DOCKED = "OVERLOAD_SHED_DOCKED"
    OVERLOAD_HOLD = "OVERLOAD_HOLD"
    LOCAL_RELEASE = "LOCAL_RELEASE"
    LOCAL_CHARGE = "LOCAL_CHARGE"
    NO_DOCKED_DEMAND = "NO_DOCKED_DEMAND"
    DOCKED_ALL_CHARGING = "DOCKED_ALL_CHARGING"
    DOCKED_CHARGE = "DOCKED_CHARGE"
    LOCAL_SUPPORT = "LOCAL_SUPPORT"
    DOCKED_HOLD = "DOCKED_HOLD"


@dataclass
class RoutingDecision:
    """Router output for one tick.

    Parameters
    branch : RouteBranch
        Rule of the cascade that decided.
    action : ChargeAction, optional
        The single rate-limited change, if any.
    floor : list of ChargeAction
        Safety-floor changes (exempt from the one-change rule).
    intake : list of ChargeAction
        Newly-docked changes (exempt from the one-change rule).
    budget : PowerBudget
        Snapshot the decision was made on.
    debug : Dict[str, Any]
        JSON-friendly trace.
    """

    branch: RouteBranch
    action: Optional[ChargeAction] = None
    floor: List[ChargeAction] = field(default_factory=list)
    intake: List[ChargeAction] = field(default_factory=list)
    budget: PowerBudget = field(default_factory=PowerBudget)
    debug: Dict[str, Any] = field(default_factory=dict)

    @property
    def actions(self) -> List[ChargeAction]:
        """Every change to apply, in order."""
        out = list(self.intake) + list(self.floor)
        if self.action is not None:
            out.append(self.action)
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branch": self.branch.value,
            "action": None if self.action is None else self.action.to_dict(),
            "floor": [a.to_dict() for a in self.floor],
            "intake": [a.to_dict() for a in self.intake],
            "budget": self.budget.to_dict(),
            "debug": self.debug,
        }


def _first(cells: Iterable[CellSnapshot], pred) -> Optional[CellSnapshot]:
    for cell in cells:
        if pred(cell):
            return cell
    return None


class ChargeRouter:
    """Decision cascade over both cell pools.

    Parameters
    ship_size : ShipSize
        Selects the one-cell capacity used as noise/headroom threshold.
    target_power : float
        Minimum acceptable solar power [W].
    keep_cells_on : bool
        Keep local cells on and discharging except when charging them.
    charge_docked : bool
        Allow routing power into docked cells.
    """

    name = "charge_router"

    def __init__(
        self,
        ship_size: ShipSize = ShipSize.LARGE,
        target_power: float = 0.0,
        keep_cells_on: bool = True,
        charge_docked: bool = True,
    ) -> None:
        self.ship_size = ShipSize.parse(ship_size)
        self.target_power = float(target_power)
        self.keep_cells_on = bool(keep_cells_on)
        self.charge_docked = bool(charge_docked)

    @property
    def cell_capacity(self) -> float:
        return self.ship_size.cell_capacity

    # Core decision
    def decide(
        self,
        budget: PowerBudget,
        local: Sequence[CellSnapshot],
        docked: Sequence[CellSnapshot],
        power: float,
        fresh: Collection[int] = (),
    ) -> RoutingDecision:
        """Run the cascade on one snapshot; no side effects.

        ``fresh`` holds the docked indices taken in this tick; they stay off
        until a later tick.
        """
        below_target = power < self.target_power
        floor_held = self.keep_cells_on and below_target
        debug: Dict[str, Any] = {
            "algo": self.name,
            "p": float(power),
            "target": self.target_power,
        }

        def done(branch: RouteBranch, action: Optional[ChargeAction] = None,
                 floor: Optional[List[ChargeAction]] = None) -> RoutingDecision:
            return RoutingDecision(branch, action, floor or [], [], budget, debug)

        # 1-2. keep-on policy
        if floor_held:
            floor = [
                action_for(c, DISCHARGE_ON, "safety_floor")
                for c in local
                if c.charging or not c.enabled
            ]
            if floor:
                return done(RouteBranch.SAFETY_FLOOR, floor=floor)
        elif self.keep_cells_on:
            cell = _first(local, lambda c: c.is_full and (c.charging or not c.enabled))
            if cell is not None:
                return done(RouteBranch.DRAIN_FULL, action_for(cell, DISCHARGE_ON, "drain_full"))

        # 3. overload
        if budget.array_spare == 0.0 and budget.local_spare == 0.0:
            if not budget.docked_demand and not below_target:
                shortfall = abs(budget.array_output_max - budget.local_input_max)
                debug["shortfall"] = shortfall
                if shortfall < self.cell_capacity:
                    return done(RouteBranch.OVERLOAD_IGNORED)

            cell = _first(local, lambda c: c.charging and c.enabled)
            if cell is not None:
                intent = ChargeIntent(charging=True, enabled=False)
                return done(RouteBranch.OVERLOAD_SHED_LOCAL, action_for(cell, intent, "overload_shed"))

            cell = _first(local, lambda c: c.has_charge and (not c.enabled or c.charging))
            if cell is not None:
                return done(RouteBranch.OVERLOAD_DISCHARGE_LOCAL, action_for(cell, DISCHARGE_ON, "overload_discharge"))

            deficit = (budget.array_output_max + budget.local_output_max) - (
                budget.docked_input_current + budget.local_input_current
            )
            debug["deficit"] = deficit
            if deficit < -SMALL_CELL_CAPACITY and self.charge_docked:
                cell = _first(docked, lambda c: c.functional and c.enabled and c.charging)
                if cell is not None:
                    intent = ChargeIntent(charging=True, enabled=False)
                    return done(RouteBranch.OVERLOAD_SHED_DOCKED, action_for(cell, intent, "overload_shed"))

            return done(RouteBranch.OVERLOAD_HOLD)

        # 4. nothing docked wants charge
        if not budget.docked_demand or not self.charge_docked:
            if not self.keep_cells_on:
                cell = _first(local, lambda c: c.enabled and not c.charging)
                if cell is not None:
                    intent = ChargeIntent(charging=False, enabled=False)
                    return done(RouteBranch.LOCAL_RELEASE, action_for(cell, intent, "release"))

            if not floor_held and (not below_target or budget.array_spare > self.cell_capacity):
                cell = _first(
                    local,
                    lambda c: c.not_full
                    and budget.array_output_max > budget.array_output_current
                    and (not c.charging or not c.enabled),
                )
                if cell is not None:
                    return done(RouteBranch.LOCAL_CHARGE, action_for(cell, CHARGE_ON, "charge_local"))
            return done(RouteBranch.NO_DOCKED_DEMAND)

        # 5. everything docked is already charging and there is plenty spare
        if (
            budget.docked_input_max == budget.docked_input_current
            and budget.array_spare > LARGE_CELL_CAPACITY
            and not budget.docked_needs_charge
        ):
            # TODO: route the spare into local cells here once a policy is agreed.
            return done(RouteBranch.DOCKED_ALL_CHARGING)

        # 6. docked cells need charge
        if self.charge_docked:
            supply_max = budget.local_output_max + budget.array_output_max
            supply_cur = budget.local_output_current + budget.array_output_current
            cell = _first(
                docked,
                lambda c: c.index not in fresh
                and c.not_full
                and supply_max > supply_cur
                and (not c.charging or not c.enabled),
            )
            if cell is not None:
                return done(RouteBranch.DOCKED_CHARGE, action_for(cell, CHARGE_ON, "charge_docked"))

            cell = _first(local, lambda c: c.has_charge and (not c.enabled or c.charging))
            if cell is not None:
                return done(RouteBranch.LOCAL_SUPPORT, action_for(cell, DISCHARGE_ON, "support_docked"))

        return done(RouteBranch.DOCKED_HOLD)

    def route(
        self,
        power: float,
        array: Iterable[Optional[PowerReading]],
        local: Sequence[CellSnapshot],
        docked: Sequence[CellSnapshot],
    ) -> RoutingDecision:
        """Dock intake, budget aggregation and the cascade for one tick."""
        intake, docked_after = dock_intake(docked)
        budget = compute_budget(array, local, docked_after)
        fresh = {a.index for a in intake}
        decision = self.decide(budget, local, docked_after, power, fresh)
        decision.intake = intake
        return decision

    # Frontend helpers
    def describe(self) -> Dict[str, Any]:
        return {
            "key": self.name,
            "label": "Charge router",
            "params": [
                {"name": "ship_size", "type": "choice", "choices": [s.value for s in ShipSize], "default": self.ship_size.value},
                {"name": "keep_cells_on", "type": "bool", "default": self.keep_cells_on},
                {"name": "charge_docked", "type": "bool", "default": self.charge_docked},
            ],
        }

    def get_config(self) -> Dict[str, Any]:
        return {
            "ship_size": self.ship_size.value,
            "target_power": self.target_power,
            "keep_cells_on": self.keep_cells_on,
            "charge_docked": self.charge_docked,
        }


def apply_action(action: ChargeAction, handle: StorageCellHandle) -> bool:
    """Command ``handle`` toward ``action.intent``; return True if anything changed."""
    changed = False
    if is_recharging(handle.detailed_info) != action.intent.charging:
        handle.set_recharge(action.intent.charging)
        changed = True
    if bool(handle.enabled) != action.intent.enabled:
        handle.set_enabled(action.intent.enabled)
        changed = True
    return changed


def apply_decision(
    decision: RoutingDecision,
    local: Sequence[StorageCellHandle],
    docked: Sequence[StorageCellHandle],
) -> int:
    """Apply every change in ``decision``; return how many handles changed."""
    pools = {CellPool.LOCAL: local, CellPool.DOCKED: docked}
    changed = 0
    for action in decision.actions:
        if apply_action(action, pools[action.pool][action.index]):
            changed += 1
    return changed


__all__ = ["RouteBranch", "RoutingDecision", "ChargeRouter", "apply_action", "apply_decision"]
