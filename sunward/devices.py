"""
Device boundary

Structural types for the handles the host hands to the control core. The host
is responsible for enumerating devices, filtering them by type, functional
status and grid membership, and returning them already classified; the core
never performs its own type discrimination.

These are ``typing.Protocol`` classes so simulators, tests and real host
adapters can satisfy them without inheriting from anything.
"""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class StatusDevice(Protocol):
    """Anything that reports a free-text status block."""

    @property
    def detailed_info(self) -> str: ...


@runtime_checkable
class SolarPanelHandle(StatusDevice, Protocol):
    """A power source; only its status text is consumed."""


@runtime_checkable
class StorageCellHandle(StatusDevice, Protocol):
    """A storage cell that can be switched on/off and set to charge/discharge.

    The charge direction is read from the status text (see
    :func:`sunward.telemetry.is_recharging`), never from a cached flag.
    """

    @property
    def enabled(self) -> bool: ...

    @property
    def functional(self) -> bool: ...

    def set_enabled(self, enabled: bool) -> None: ...

    def set_recharge(self, recharge: bool) -> None: ...


@runtime_checkable
class GyroHandle(Protocol):
    """A rotation actuator with three axis values and a manual-override flag."""

    @property
    def override(self) -> bool: ...

    def get_axis(self, name: str) -> float: ...

    def set_axis(self, name: str, value: float) -> None: ...

    def set_override(self, enabled: bool) -> None: ...


class DeviceQuery(Protocol):
    """Host collaborator that lists the devices of the controlled vehicle."""

    def list_actuators(self) -> Sequence[GyroHandle]: ...

    def list_solar_panels(self) -> Sequence[SolarPanelHandle]: ...

    def list_local_cells(self) -> Sequence[StorageCellHandle]: ...

    def list_docked_cells(self) -> Sequence[StorageCellHandle]: ...


__all__ = [
    "StatusDevice",
    "SolarPanelHandle",
    "StorageCellHandle",
    "GyroHandle",
    "DeviceQuery",
]
