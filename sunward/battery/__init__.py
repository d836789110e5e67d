"""
Sunward battery package

Thin re-export layer: cell snapshots, the per-tick power budget and the
charge router. Import from here for stability.
"""
from __future__ import annotations

from .types import (
    CellPool,
    CellSnapshot,
    ChargeIntent,
    ChargeAction,
    CHARGE_ON,
    DISCHARGE_ON,
)
from .budget import PowerBudget, snapshot_cells, dock_intake, compute_budget
from .router import RouteBranch, RoutingDecision, ChargeRouter, apply_action, apply_decision

__all__ = [
    "CellPool", "CellSnapshot", "ChargeIntent", "ChargeAction",
    "CHARGE_ON", "DISCHARGE_ON",
    "PowerBudget", "snapshot_cells", "dock_intake", "compute_budget",
    "RouteBranch", "RoutingDecision", "ChargeRouter", "apply_action", "apply_decision",
]
