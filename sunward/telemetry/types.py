"""
Core types for device telemetry

Minimal, dependency-free dataclasses shared by the alignment search and the
battery router. Keep this file stable to avoid churn across the codebase.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

# JSON-friendly value type used by debug payloads
JSONValue = Union[str, int, float, bool, None]


class DeviceShape(str, Enum):
    """Status-text shapes the parser understands."""

    SOLAR = "solar"      # max/current output
    STORAGE = "storage"  # output, input and stored energy


@dataclass(frozen=True)
class PowerReading:
    """Normalized power quantities extracted from one device's status text.

    Parameters
    max_output, current_output : float
        Rated and present output [W].
    max_input, current_input : float, optional
        Rated and present input [W]. ``None`` for devices that cannot draw.
    max_stored, current_stored : float, optional
        Capacity and present stored energy [Wh]. ``None`` for devices that
        cannot store.
    """

    max_output: float
    current_output: float
    max_input: Optional[float] = None
    current_input: Optional[float] = None
    max_stored: Optional[float] = None
    current_stored: Optional[float] = None

    @property
    def shape(self) -> DeviceShape:
        return DeviceShape.SOLAR if self.max_stored is None else DeviceShape.STORAGE

    @property
    def spare_output(self) -> float:
        """Rated output not currently delivered [W]."""
        return self.max_output - self.current_output

    @property
    def is_full(self) -> bool:
        """True when stored energy has reached capacity (storage only)."""
        if self.max_stored is None or self.current_stored is None:
            return False
        return self.current_stored >= self.max_stored

    @property
    def has_charge(self) -> bool:
        return bool(self.current_stored) and self.current_stored > 0.0

    def to_dict(self) -> Dict[str, JSONValue]:
        """Shallow dict conversion suitable for JSON serialization."""
        return {
            "max_output": self.max_output,
            "current_output": self.current_output,
            "max_input": self.max_input,
            "current_input": self.current_input,
            "max_stored": self.max_stored,
            "current_stored": self.current_stored,
        }


__all__ = ["DeviceShape", "PowerReading", "JSONValue"]
