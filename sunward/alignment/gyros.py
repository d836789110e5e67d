"""
Gyro coordination

All rotation actuators on the controlled body must behave as one unit: at most
one axis may carry a non-zero value, and every actuator that reports a value
on that axis must report the same signed magnitude. :class:`GyroGroup` reads,
checks and commands the group; :meth:`GyroGroup.rotate` is the only actuation
point of the alignment search.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ..devices import GyroHandle
from .types import Axis, AxisIntent, SearchStep, VERIFY_ORDER


def _sign(x: float) -> int:
    if x > 0.0:
        return 1
    if x < 0.0:
        return -1
    return 0


class GyroGroup:
    """Coordinated view over a set of gyro handles.

    Parameters
    gyros : sequence of GyroHandle
        Actuators on the controlled body. Must be non-empty.
    base_rate : float
        Control value written for direction +1.
    """

    def __init__(self, gyros: Sequence[GyroHandle], base_rate: float) -> None:
        if not gyros:
            raise ValueError("GyroGroup needs at least one actuator")
        self.gyros: List[GyroHandle] = list(gyros)
        self.base_rate = float(base_rate)
        # Commanded direction per axis for this tick; seeded by refresh().
        self.states: Dict[Axis, int] = {axis: 0 for axis in Axis}

    # Reading
    def read_axis_states(self) -> List[AxisIntent]:
        """Return the active-axis intent of every actuator.

        An actuator with no non-zero axis reports direction 0 on Roll.
        """
        intents: List[AxisIntent] = []
        for gyro in self.gyros:
            intent = AxisIntent(Axis.ROLL, 0, 0.0)
            for axis in VERIFY_ORDER:
                value = float(gyro.get_axis(axis.value))
                if value != 0.0:
                    intent = AxisIntent(axis, _sign(value), abs(value))
                    break
            intents.append(intent)
        return intents

    def refresh(self, axes: Optional[Iterable[Axis]] = None) -> Dict[Axis, int]:
        """Seed :attr:`states` from the first actuator's axis values."""
        first = self.gyros[0]
        for axis in (axes if axes is not None else Axis):
            self.states[axis] = _sign(float(first.get_axis(axis.value)))
        return dict(self.states)

    def state(self, axis: Axis) -> int:
        return self.states[axis]

    # Checks
    def verify(self) -> bool:
        """True iff the group agrees on a single active axis and magnitude."""
        active: Optional[Axis] = None
        magnitude = 0.0
        for gyro in self.gyros:
            for axis in VERIFY_ORDER:
                value = float(gyro.get_axis(axis.value))
                if value == 0.0:
                    continue
                if active is not None and active != axis:
                    return False
                if magnitude != 0.0 and value != magnitude:
                    return False
                active, magnitude = axis, value
        return True

    # Commands
    def zero(self) -> None:
        """Command every axis on every actuator to 0 (idempotent)."""
        for axis in (Axis.YAW, Axis.ROLL, Axis.PITCH):
            self.rotate(axis, 0)

    def set_override(self, enabled: bool) -> int:
        """Toggle override only where it differs; return how many changed."""
        changed = 0
        for gyro in self.gyros:
            if bool(gyro.override) != bool(enabled):
                gyro.set_override(bool(enabled))
                changed += 1
        return changed

    def rotate(self, axis: Axis, direction: int) -> None:
        """Command ``base_rate * direction`` on ``axis`` for every actuator."""
        self.states[axis] = int(direction)
        value = self.base_rate * int(direction)
        for gyro in self.gyros:
            gyro.set_axis(axis.value, value)

    def apply(self, step: SearchStep) -> None:
        """Execute a hill-climber step's commands in order."""
        if step.zero_all:
            self.zero()
        for intent in step.rotations:
            self.rotate(intent.axis, intent.direction)
        if step.override is not None:
            self.set_override(step.override)


__all__ = ["GyroGroup"]
