"""
Telemetry parser
- Turns a device's free-text status block into a :class:`PowerReading`.

Each quantity in the text looks like ``<label>: <mantissa> <prefix><unit>``,
e.g. ``Max Output: 118.00 kW`` or ``Stored power: 6.00 MWh``. The prefix is a
single optional letter scaled by powers of 1000.

Includes:
- scale(mantissa, prefix): apply the magnitude prefix
- parse_solar(text): 2-quantity shape (max/current output)
- parse_storage(text): 6-quantity shape (output, input, stored)
- parse(text, shape): dispatch on :class:`DeviceShape`
- is_recharging(text): charge-direction marker
- format_quantity(value, unit): inverse of scale(), used by simulators/tests

Parsing never raises and never fabricates zeros: a text that does not match
its shape returns ``None`` and callers drop the device for that tick.
"""
from __future__ import annotations

import re
from typing import Dict, Optional

from .types import DeviceShape, PowerReading

MAGNITUDE_PREFIXES: Dict[str, float] = {
    "": 1.0,
    "k": 1e3,
    "M": 1e6,
    "G": 1e9,
    "T": 1e12,
    "P": 1e15,
    "E": 1e18,
    "Z": 1e21,
    "Y": 1e24,
}
_PREFIX_ORDER = ("", "k", "M", "G", "T", "P", "E", "Z", "Y")

# Marker the host prints only for a cell that is set to receive charge
# ("Fully recharged in: ...").
RECHARGE_MARKER = "recharged"

_POWER = r"(\d+\.?\d*) (\w?)W"
_ENERGY = r"(\d+\.?\d*) (\w?)Wh"

SOLAR_PATTERN = re.compile(
    rf"Max Output: {_POWER}.*Current Output: {_POWER}",
    re.DOTALL,
)

# Field order is fixed by the host's storage-cell status block.
STORAGE_PATTERN = re.compile(
    rf"Max Output: {_POWER}"
    rf".*Max Required Input: {_POWER}"
    rf".*Max Stored Power: {_ENERGY}"
    rf".*Current Input: {_POWER}"
    rf".*Current Output: {_POWER}"
    rf".*Stored power: {_ENERGY}",
    re.DOTALL,
)


def scale(mantissa: str, prefix: str) -> float:
    """Return ``mantissa`` scaled by its magnitude ``prefix``.

    Raises ValueError for an unknown prefix or an unparseable mantissa.
    """
    try:
        factor = MAGNITUDE_PREFIXES[prefix]
    except KeyError as e:
        raise ValueError(f"Unknown magnitude prefix '{prefix}'") from e
    return float(mantissa) * factor


def _scaled_groups(match: re.Match) -> Optional[list]:
    groups = match.groups()
    values = []
    for k in range(0, len(groups), 2):
        try:
            values.append(scale(groups[k], groups[k + 1]))
        except ValueError:
            return None
    return values


def parse_solar(text: str) -> Optional[PowerReading]:
    """Extract max/current output from a solar source's status text."""
    match = SOLAR_PATTERN.search(text or "")
    if match is None:
        return None
    values = _scaled_groups(match)
    if values is None:
        return None
    max_out, cur_out = values
    return PowerReading(max_output=max_out, current_output=cur_out)


def parse_storage(text: str) -> Optional[PowerReading]:
    """Extract the six storage-cell quantities from its status text."""
    match = STORAGE_PATTERN.search(text or "")
    if match is None:
        return None
    values = _scaled_groups(match)
    if values is None:
        return None
    max_out, max_in, max_stored, cur_in, cur_out, cur_stored = values
    return PowerReading(
        max_output=max_out,
        current_output=cur_out,
        max_input=max_in,
        current_input=cur_in,
        max_stored=max_stored,
        current_stored=cur_stored,
    )


def parse(text: str, shape: DeviceShape) -> Optional[PowerReading]:
    """Parse ``text`` as the given device ``shape``."""
    if shape == DeviceShape.SOLAR:
        return parse_solar(text)
    if shape == DeviceShape.STORAGE:
        return parse_storage(text)
    raise ValueError(f"Unknown device shape: {shape!r}")


def is_recharging(text: str) -> bool:
    """True iff the status text says the device is set to receive charge."""
    return RECHARGE_MARKER in (text or "")


def format_quantity(value: float, unit: str = "W") -> str:
    """Render ``value`` the way the host does, e.g. 95320.0 -> '95.32 kW'."""
    value = max(0.0, float(value))
    idx = 0
    while idx < len(_PREFIX_ORDER) - 1 and value >= 1000.0 ** (idx + 1):
        idx += 1
    prefix = _PREFIX_ORDER[idx]
    return f"{value / MAGNITUDE_PREFIXES[prefix]:.2f} {prefix}{unit}"


__all__ = [
    "MAGNITUDE_PREFIXES",
    "RECHARGE_MARKER",
    "SOLAR_PATTERN",
    "STORAGE_PATTERN",
    "scale",
    "parse",
    "parse_solar",
    "parse_storage",
    "is_recharging",
    "format_quantity",
]
