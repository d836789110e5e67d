"""
Aggregation helpers over parsed readings.

Failed parses arrive as ``None`` and are skipped: a device that could not be
read is excluded from the tick, never counted as zero.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .types import PowerReading


def valid(readings: Iterable[Optional[PowerReading]]) -> List[PowerReading]:
    """Drop failed parses."""
    return [r for r in readings if r is not None]


def average_max_output(readings: Iterable[Optional[PowerReading]]) -> float:
    """Mean *Max Output* over readable sources [W]; 0 when none are readable.

    The host reports a panel's present attainable output as its Max Output,
    so this is the power sample the alignment search climbs on.
    """
    ok = valid(readings)
    if not ok:
        return 0.0
    return sum(r.max_output for r in ok) / len(ok)


def total_output(readings: Iterable[Optional[PowerReading]]) -> Tuple[float, float]:
    """Return (sum of max output, sum of current output) over readable sources."""
    ok = valid(readings)
    return sum(r.max_output for r in ok), sum(r.current_output for r in ok)


__all__ = ["valid", "average_max_output", "total_output"]
