"""Pytest fixtures shared by the Sunward test suite.

In-memory fake device handles and host-style status text builders, so tests
can drive the parser, router and tick controller without a simulator.

Run tests from the repo root:
    python -m pytest -q
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest

from sunward.battery import CellPool, CellSnapshot
from sunward.telemetry import PowerReading, format_quantity


def solar_text(max_w: float, cur_w: float = 0.0) -> str:
    return (
        "Type: Solar Panel\n"
        f"Max Output: {format_quantity(max_w)}\n"
        f"Current Output: {format_quantity(cur_w)}\n"
    )


def storage_text(
    stored: float,
    capacity: float = 3_000_000.0,
    max_out: float = 12_000_000.0,
    max_in: float = 12_000_000.0,
    cur_in: float = 0.0,
    cur_out: float = 0.0,
    recharging: bool = False,
) -> str:
    marker = "Fully recharged in: 2 hours" if recharging else "Fully depleted in: 5 hours"
    return (
        "Type: Battery\n"
        f"Max Output: {format_quantity(max_out)}\n"
        f"Max Required Input: {format_quantity(max_in)}\n"
        f"Max Stored Power: {format_quantity(capacity, 'Wh')}\n"
        f"Current Input: {format_quantity(cur_in)}\n"
        f"Current Output: {format_quantity(cur_out)}\n"
        f"Stored power: {format_quantity(stored, 'Wh')}\n"
        f"{marker}\n"
    )


# Fake handles
@dataclass
class FakeGyro:
    values: Dict[str, float] = field(default_factory=lambda: {"Roll": 0.0, "Pitch": 0.0, "Yaw": 0.0})
    override: bool = False
    override_calls: int = 0

    def get_axis(self, name: str) -> float:
        return self.values[name]

    def set_axis(self, name: str, value: float) -> None:
        self.values[name] = value

    def set_override(self, enabled: bool) -> None:
        self.override_calls += 1
        self.override = enabled


@dataclass
class FakePanel:
    detailed_info: str


@dataclass
class FakeCell:
    stored: float = 1_000_000.0
    capacity: float = 3_000_000.0
    enabled: bool = True
    recharge: bool = False
    functional: bool = True
    cur_in: float = 0.0
    cur_out: float = 0.0

    @property
    def detailed_info(self) -> str:
        return storage_text(
            self.stored,
            capacity=self.capacity,
            cur_in=self.cur_in,
            cur_out=self.cur_out,
            recharging=self.recharge,
        )

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def set_recharge(self, recharge: bool) -> None:
        self.recharge = recharge


@dataclass
class FakeDevices:
    gyros: List[FakeGyro] = field(default_factory=list)
    panels: List[FakePanel] = field(default_factory=list)
    local: List[FakeCell] = field(default_factory=list)
    docked: List[FakeCell] = field(default_factory=list)

    def list_actuators(self):
        return self.gyros

    def list_solar_panels(self):
        return self.panels

    def list_local_cells(self):
        return self.local

    def list_docked_cells(self):
        return self.docked


# Fixtures
@pytest.fixture
def make_gyro():
    """Factory: make_gyro(Roll=0.025, override=True)."""
    def _make(override: bool = False, **axes: float) -> FakeGyro:
        g = FakeGyro(override=override)
        g.values.update({k: float(v) for k, v in axes.items()})
        return g

    return _make


@pytest.fixture
def make_panel():
    """Factory: make_panel(max_w, cur_w) or make_panel(text='garbage')."""
    def _make(max_w: float = 0.0, cur_w: float = 0.0, text: Optional[str] = None) -> FakePanel:
        return FakePanel(text if text is not None else solar_text(max_w, cur_w))

    return _make


@pytest.fixture
def make_cell():
    return FakeCell


@pytest.fixture
def make_devices():
    return FakeDevices


@pytest.fixture
def snap():
    """Factory for CellSnapshot records with a parsed storage reading.

    Example:
        c = snap(stored=0.0, charging=True, max_in=1e6, cur_in=0.0)
    """
    def _make(
        pool: CellPool = CellPool.LOCAL,
        index: int = 0,
        stored: float = 1_000_000.0,
        capacity: float = 3_000_000.0,
        enabled: bool = True,
        charging: bool = False,
        max_out: float = 12_000_000.0,
        cur_out: float = 0.0,
        max_in: float = 12_000_000.0,
        cur_in: float = 0.0,
        parsed: bool = True,
        functional: bool = True,
    ) -> CellSnapshot:
        reading = None
        if parsed:
            reading = PowerReading(
                max_output=max_out,
                current_output=cur_out,
                max_input=max_in,
                current_input=cur_in,
                max_stored=capacity,
                current_stored=stored,
            )
        return CellSnapshot(pool, index, reading, enabled, charging, functional)

    return _make


@pytest.fixture
def array():
    """Factory: array((max, cur), ...) -> list of solar PowerReadings."""
    def _make(*pairs) -> List[PowerReading]:
        return [PowerReading(max_output=float(m), current_output=float(c)) for m, c in pairs]

    return _make


@pytest.fixture(name="solar_text", scope="session")
def solar_text_fixture():
    """Return the solar status text builder solar_text(max_w, cur_w)."""
    return solar_text


@pytest.fixture(name="storage_text", scope="session")
def storage_text_fixture():
    """Return the storage status text builder storage_text(stored, ...)."""
    return storage_text
