"""
Power budget
- Per-tick aggregate of what the solar array and both cell pools can deliver
  or absorb right now. Recomputed from live status text every tick.

Includes:
- snapshot_cells(handles, pool): read handles into CellSnapshot records
- dock_intake(docked): force newly docked cells to charge, powered off
- compute_budget(array, local, docked): build the PowerBudget

Aggregation rules (per readable cell):
- local, has charge, on, discharging  -> local output max/current
- local, has charge, otherwise        -> local idle output
- local, on, charging, not full       -> local input max/current
- local, not full, otherwise          -> local cells still need charge
- docked, on, charging, not full      -> docked input max/current
- docked, not full, off               -> docked cells still need charge
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..devices import StorageCellHandle
from ..telemetry.parser import parse_storage, is_recharging
from ..telemetry.aggregate import total_output
from ..telemetry.types import PowerReading
from .types import CellPool, CellSnapshot, ChargeAction, ChargeIntent, action_for


@dataclass(frozen=True)
class PowerBudget:
    """Aggregated power figures for one tick [W].

    Parameters
    array_output_max, array_output_current : float
        Solar array rated and delivered output.
    local_output_max, local_output_current : float
        Output of local cells that are on and discharging.
    local_output_idle : float
        Rated output of local cells holding charge but not delivering.
    local_input_max, local_input_current : float
        Input of local cells that are on, charging and not full.
    docked_input_max, docked_input_current : float
        Input of docked cells that are on, charging and not full.
    docked_needs_charge, local_needs_charge : bool
        An undercharged cell exists that is not currently taking charge.
    """

    array_output_max: float = 0.0
    array_output_current: float = 0.0
    local_output_max: float = 0.0
    local_output_current: float = 0.0
    local_output_idle: float = 0.0
    local_input_max: float = 0.0
    local_input_current: float = 0.0
    docked_input_max: float = 0.0
    docked_input_current: float = 0.0
    docked_needs_charge: bool = False
    local_needs_charge: bool = False

    @property
    def array_spare(self) -> float:
        return self.array_output_max - self.array_output_current

    @property
    def local_spare(self) -> float:
        return self.local_output_max - self.local_output_current

    @property
    def local_input_needed(self) -> float:
        # NOTE: cancels to zero. The intended headroom formula is unresolved;
        # nothing downstream depends on it.
        return self.local_input_max - self.local_input_max

    @property
    def docked_input_needed(self) -> float:
        return self.docked_input_max - self.docked_input_current

    @property
    def docked_demand(self) -> bool:
        """Some docked cell is drawing, or waiting to draw, charge."""
        return self.docked_input_max > 0.0 or self.docked_needs_charge

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d.update({
            "array_spare": self.array_spare,
            "local_spare": self.local_spare,
            "local_input_needed": self.local_input_needed,
            "docked_input_needed": self.docked_input_needed,
        })
        return d


def snapshot_cells(handles: Sequence[StorageCellHandle], pool: CellPool) -> List[CellSnapshot]:
    """Read every handle once; unparseable status yields ``reading=None``."""
    out: List[CellSnapshot] = []
    for idx, h in enumerate(handles):
        text = h.detailed_info
        out.append(CellSnapshot(
            pool=pool,
            index=idx,
            reading=parse_storage(text),
            enabled=bool(h.enabled),
            charging=is_recharging(text),
            functional=bool(h.functional),
        ))
    return out


def dock_intake(docked: Sequence[CellSnapshot]) -> Tuple[List[ChargeAction], List[CellSnapshot]]:
    """Force readable docked cells that are not charging to charge, powered off.

    Powering them off keeps a batch of freshly docked cells from loading the
    array all at once; the router brings them back one per tick.
    Returns (actions, snapshots as they will be after the actions).
    """
    actions: List[ChargeAction] = []
    updated: List[CellSnapshot] = []
    for cell in docked:
        if cell.parsed and not cell.charging:
            intent = ChargeIntent(charging=True, enabled=False)
            actions.append(action_for(cell, intent, "dock_intake"))
            cell = cell.with_intent(intent)
        updated.append(cell)
    return actions, updated


def compute_budget(
    array: Iterable[Optional[PowerReading]],
    local: Sequence[CellSnapshot],
    docked: Sequence[CellSnapshot],
) -> PowerBudget:
    """Aggregate the array and both pools into a :class:`PowerBudget`."""
    array_max, array_cur = total_output(array)

    d_in_max = d_in_cur = 0.0
    docked_needs = False
    for cell in docked:
        r = cell.reading
        if r is None:
            continue
        if cell.enabled and cell.charging and cell.not_full:
            d_in_max += r.max_input or 0.0
            d_in_cur += r.current_input or 0.0
        elif cell.not_full and not cell.enabled:
            docked_needs = True

    l_out_max = l_out_cur = l_idle = 0.0
    l_in_max = l_in_cur = 0.0
    local_needs = False
    for cell in local:
        r = cell.reading
        if r is None:
            continue
        if cell.has_charge and cell.enabled and not cell.charging:
            l_out_max += r.max_output
            l_out_cur += r.current_output
        elif cell.has_charge:
            l_idle += r.max_output

        if cell.enabled and cell.charging and cell.not_full:
            l_in_max += r.max_input or 0.0
            l_in_cur += r.current_input or 0.0
        elif cell.not_full:
            local_needs = True

    return PowerBudget(
        array_output_max=array_max,
        array_output_current=array_cur,
        local_output_max=l_out_max,
        local_output_current=l_out_cur,
        local_output_idle=l_idle,
        local_input_max=l_in_max,
        local_input_current=l_in_cur,
        docked_input_max=d_in_max,
        docked_input_current=d_in_cur,
        docked_needs_charge=docked_needs,
        local_needs_charge=local_needs,
    )


__all__ = ["PowerBudget", "snapshot_cells", "dock_intake", "compute_budget"]
