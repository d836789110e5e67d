"""
Persisted alignment state

The only memory the controller keeps between ticks is a two-field record
serialized to an opaque string of the form ``"<lastPower>|<highestPower>"``.
An empty string means "no prior state". Each field decodes independently;
a segment that does not parse as a finite, non-negative number reads as 0
rather than failing the tick.
"""
from __future__ import annotations

import math
from typing import Optional

from .types import AlignmentState

SEPARATOR = "|"


def _field(text: str) -> float:
    try:
        value = float(text.strip())
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value < 0.0:
        return 0.0
    return value


def encode(state: AlignmentState) -> str:
    """Serialize ``state``; ``repr`` keeps floats round-trip exact."""
    return f"{float(state.last_power)!r}{SEPARATOR}{float(state.highest_power)!r}"


def decode(text: Optional[str]) -> AlignmentState:
    """Parse a persisted string back into an :class:`AlignmentState`."""
    if not text:
        return AlignmentState()
    last, sep, highest = text.partition(SEPARATOR)
    return AlignmentState(
        last_power=_field(last),
        highest_power=_field(highest) if sep else 0.0,
    )


class StateStore:
    """In-memory holder for the persisted string.

    Hosts that keep the string elsewhere can read/write :attr:`text`
    directly between ticks.
    """

    def __init__(self, text: str = "") -> None:
        self.text = text

    def load(self) -> AlignmentState:
        return decode(self.text)

    def save(self, state: AlignmentState) -> None:
        self.text = encode(state)

    def clear(self) -> None:
        self.save(AlignmentState())


__all__ = ["SEPARATOR", "encode", "decode", "StateStore"]
