"""
Core types for the alignment search

Minimal, dependency-free dataclasses shared by the gyro coordinator, the
hill climber and the tick orchestrator.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Axis(str, Enum):
    ROLL = "Roll"
    PITCH = "Pitch"
    YAW = "Yaw"

    @classmethod
    def parse(cls, name: "str | Axis") -> "Axis":
        """Resolve an axis from its name, case-insensitively."""
        if isinstance(name, Axis):
            return name
        key = str(name).strip().lower()
        for axis in cls:
            if axis.value.lower() == key:
                return axis
        raise ValueError(
            f"Unknown axis '{name}'. Available: {[a.value for a in cls]}"
        )


# Order in which an actuator's axes are inspected by verification.
VERIFY_ORDER = (Axis.YAW, Axis.PITCH, Axis.ROLL)


@dataclass(frozen=True)
class AxisIntent:
    """One commanded rotation: axis, signed direction and configured rate."""

    axis: Axis
    direction: int = 0
    rate: float = 0.0

    @property
    def value(self) -> float:
        """Control value written to the actuator for this intent."""
        return self.rate * self.direction


@dataclass(frozen=True)
class AlignmentState:
    """Persisted record carried between ticks.

    Parameters
    last_power : float
        Power sampled on the previous tick [W].
    highest_power : float
        Best power seen on the current search leg [W].
    """

    last_power: float = 0.0
    highest_power: float = 0.0

    @property
    def is_reset(self) -> bool:
        return self.last_power == 0.0 and self.highest_power == 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"last_power": self.last_power, "highest_power": self.highest_power}


class SearchBranch(str, Enum):
    RESET = "RESET"          # actuator group failed verification
    ALIGNED = "ALIGNED"      # power at/above target
    START = "START"          # neither active axis moving
    WAIT = "WAIT"            # first sample on a fresh leg
    REVERSE = "REVERSE"      # immediate drop, flip direction
    CONTINUE = "CONTINUE"    # still improving
    SWITCH = "SWITCH"        # passed the peak, change axis


@dataclass
class SearchStep:
    """Hill-climber output for one tick.

    Commands are applied in order: zero all axes (if requested), then each
    rotation, then the override change (if any).

    Parameters
    branch : SearchBranch
        Which branch of the state machine ran.
    state : AlignmentState
        Record to persist for the next tick.
    zero_all : bool
        Command every axis on every actuator to 0 first.
    rotations : list of AxisIntent
        Rotations to command after zeroing.
    override : bool, optional
        Desired manual-override flag; ``None`` leaves it untouched.
    debug : Dict[str, Any]
        JSON-friendly trace of the decision.
    """

    branch: SearchBranch
    state: AlignmentState
    zero_all: bool = False
    rotations: List[AxisIntent] = field(default_factory=list)
    override: Optional[bool] = None
    debug: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branch": self.branch.value,
            "state": self.state.to_dict(),
            "zero_all": self.zero_all,
            "rotations": [
                {"axis": r.axis.value, "direction": r.direction, "value": r.value}
                for r in self.rotations
            ],
            "override": self.override,
            "debug": self.debug,
        }


__all__ = [
    "Axis",
    "VERIFY_ORDER",
    "AxisIntent",
    "AlignmentState",
    "SearchBranch",
    "SearchStep",
]
