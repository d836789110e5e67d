"""
AxisHillClimb: one-axis-at-a-time hill climb on noisy solar power

Coordinate-ascent search over two rotation axes driven by a single power
sample per tick, with no gradient information:

- Start moving the primary axis in the + direction.
- Ignore the first sample of a leg (it only seeds the trend).
- If power dropped straight away, the guessed direction was wrong: reverse.
- While power keeps rising, keep going and remember the best value.
- Once power drops after having risen, the peak on this axis is behind us:
  stop and start the other axis in the + direction.
- At or above the target power, stop everything and clear the record.

Notes
- After the first commitment on an axis the direction is never reversed
  again; an optimum that lies the other way is only reached via the other
  axis. This can leave the search oscillating between the two axes around a
  local optimum.
- The climber is pure: it reads the sample, the persisted record and the
  current axis directions, and returns a :class:`SearchStep`. The gyro group
  applies it.
"""
from typing import Any, Dict, Mapping

from .types import Axis, AxisIntent, AlignmentState, SearchBranch, SearchStep


class AxisHillClimb:
    """Two-axis coordinate-ascent state machine.

    Parameters
    primary, secondary : Axis
        The two active rotation axes (A and B). The remaining axis is only
        used by the group sanity check.
    target_power : float
        Minimum acceptable power [W]; reaching it ends the search.
    auto_override : bool
        Acquire manual override while searching and release it once aligned.
    rate : float
        Control value for direction +1 (reported on the intents).
    """

    name = "axis_hill_climb"

    def __init__(
        self,
        primary: Axis = Axis.ROLL,
        secondary: Axis = Axis.PITCH,
        target_power: float = 0.0,
        auto_override: bool = False,
        rate: float = 0.025,
    ) -> None:
        self.primary = Axis.parse(primary)
        self.secondary = Axis.parse(secondary)
        if self.primary == self.secondary:
            raise ValueError("primary and secondary axes must differ")
        self.target_power = float(target_power)
        self.auto_override = bool(auto_override)
        self.rate = float(rate)

    def _intent(self, axis: Axis, direction: int) -> AxisIntent:
        return AxisIntent(axis, int(direction), self.rate)

    # Core step
    def step(
        self,
        power: float,
        state: AlignmentState,
        verified: bool,
        directions: Mapping[Axis, int],
    ) -> SearchStep:
        """Decide the next commands from this tick's power sample.

        Parameters
        power : float
            Current solar power sample [W].
        state : AlignmentState
            Record persisted by the previous tick.
        verified : bool
            Result of the actuator group consistency check.
        directions : Mapping[Axis, int]
            Commanded direction of each axis as read back this tick.
        """
        debug: Dict[str, Any] = {
            "algo": self.name,
            "p": float(power),
            "last": float(state.last_power),
            "high": float(state.highest_power),
            "target": self.target_power,
        }

        if not verified:
            return SearchStep(SearchBranch.RESET, AlignmentState(), zero_all=True, debug=debug)

        if power >= self.target_power:
            return SearchStep(
                SearchBranch.ALIGNED,
                AlignmentState(),
                zero_all=True,
                override=False if self.auto_override else None,
                debug=debug,
            )

        override = True if self.auto_override else None
        dir_a = int(directions.get(self.primary, 0))
        dir_b = int(directions.get(self.secondary, 0))

        if dir_a == 0 and dir_b == 0:
            return SearchStep(
                SearchBranch.START,
                AlignmentState(last_power=power, highest_power=0.0),
                zero_all=True,
                rotations=[self._intent(self.primary, 1)],
                override=override,
                debug=debug,
            )

        if dir_a != 0:
            moving, other, direction = self.primary, self.secondary, dir_a
        else:
            moving, other, direction = self.secondary, self.primary, dir_b
        debug["axis"] = moving.value
        debug["dir"] = direction

        last, highest = state.last_power, state.highest_power

        if highest == 0.0 and last == 0.0:
            branch = SearchBranch.WAIT
            new_state = AlignmentState(last_power=power, highest_power=highest)
            rotations = []
        elif highest == 0.0 and power < last:
            branch = SearchBranch.REVERSE
            new_state = AlignmentState(last_power=power, highest_power=highest)
            rotations = [self._intent(moving, -direction)]
        elif power >= last:
            branch = SearchBranch.CONTINUE
            new_state = AlignmentState(last_power=power, highest_power=power)
            rotations = []
        else:
            branch = SearchBranch.SWITCH
            new_state = AlignmentState()
            rotations = [self._intent(moving, 0), self._intent(other, 1)]

        return SearchStep(branch, new_state, rotations=rotations, override=override, debug=debug)

    # Frontend helpers
    def describe(self) -> Dict[str, Any]:
        """Return UI metadata for tunable parameters."""
        axes = [a.value for a in Axis]
        return {
            "key": self.name,
            "label": "Axis hill climb",
            "params": [
                {"name": "primary", "type": "choice", "choices": axes, "default": self.primary.value},
                {"name": "secondary", "type": "choice", "choices": axes, "default": self.secondary.value},
                {"name": "target_power", "type": "number", "min": 0.0, "unit": "W", "default": self.target_power},
                {"name": "auto_override", "type": "bool", "default": self.auto_override},
            ],
        }

    def get_config(self) -> Dict[str, Any]:
        return {
            "primary": self.primary.value,
            "secondary": self.secondary.value,
            "target_power": self.target_power,
            "auto_override": self.auto_override,
            "rate": self.rate,
        }


__all__ = ["AxisHillClimb"]
