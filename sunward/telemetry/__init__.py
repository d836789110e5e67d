"""
Sunward telemetry package

Thin re-export layer for the public API. Import from here for stability.
"""
from __future__ import annotations

from .types import DeviceShape, PowerReading
from .parser import (
    MAGNITUDE_PREFIXES,
    RECHARGE_MARKER,
    scale,
    parse,
    parse_solar,
    parse_storage,
    is_recharging,
    format_quantity,
)
from .aggregate import valid, average_max_output, total_output

__all__ = [
    "DeviceShape", "PowerReading",
    "MAGNITUDE_PREFIXES", "RECHARGE_MARKER",
    "scale", "parse", "parse_solar", "parse_storage",
    "is_recharging", "format_quantity",
    "valid", "average_max_output", "total_output",
]
