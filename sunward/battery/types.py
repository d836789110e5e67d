"""
Core types for battery charge routing

Snapshots are taken once per tick from the device handles; intents and
actions are what the router decides to change. Nothing here is persisted.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from ..telemetry.types import PowerReading


class CellPool(str, Enum):
    LOCAL = "local"    # rigidly part of the controlled body
    DOCKED = "docked"  # belongs to a temporarily attached body


@dataclass(frozen=True)
class CellSnapshot:
    """Per-tick view of one storage cell.

    Parameters
    pool : CellPool
        Which pool the cell belongs to.
    index : int
        Position of the cell in its pool's device list.
    reading : PowerReading, optional
        Parsed status; ``None`` when the status text failed to parse.
    enabled : bool
        Powered on.
    charging : bool
        Set to receive charge (status-text marker present).
    functional : bool
        Reported functional by the host.
    """

    pool: CellPool
    index: int
    reading: Optional[PowerReading]
    enabled: bool
    charging: bool
    functional: bool = True

    @property
    def parsed(self) -> bool:
        return self.reading is not None

    @property
    def is_full(self) -> bool:
        return self.reading is not None and self.reading.is_full

    @property
    def not_full(self) -> bool:
        """Parsed and below capacity."""
        return self.reading is not None and not self.reading.is_full

    @property
    def has_charge(self) -> bool:
        return self.reading is not None and self.reading.has_charge

    def with_intent(self, intent: "ChargeIntent") -> "CellSnapshot":
        return replace(self, charging=intent.charging, enabled=intent.enabled)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pool": self.pool.value,
            "index": self.index,
            "enabled": self.enabled,
            "charging": self.charging,
            "functional": self.functional,
            "reading": None if self.reading is None else self.reading.to_dict(),
        }


@dataclass(frozen=True)
class ChargeIntent:
    """Target charge direction and power state for one cell."""

    charging: bool
    enabled: bool


CHARGE_ON = ChargeIntent(charging=True, enabled=True)
DISCHARGE_ON = ChargeIntent(charging=False, enabled=True)


@dataclass(frozen=True)
class ChargeAction:
    """One cell's change, tagged with the rule that produced it."""

    pool: CellPool
    index: int
    intent: ChargeIntent
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pool": self.pool.value,
            "index": self.index,
            "charging": self.intent.charging,
            "enabled": self.intent.enabled,
            "reason": self.reason,
        }


def action_for(cell: CellSnapshot, intent: ChargeIntent, reason: str) -> ChargeAction:
    return ChargeAction(cell.pool, cell.index, intent, reason)


__all__ = [
    "CellPool",
    "CellSnapshot",
    "ChargeIntent",
    "CHARGE_ON",
    "DISCHARGE_ON",
    "ChargeAction",
    "action_for",
]
