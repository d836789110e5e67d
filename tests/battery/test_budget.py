"""Unit tests for power budget aggregation and newly-docked intake.

Run from repo root:
    python -m pytest -q tests/battery/test_budget.py
"""

from __future__ import annotations

import pytest

from sunward.battery import CellPool, compute_budget, dock_intake, snapshot_cells

L, D = CellPool.LOCAL, CellPool.DOCKED


def test_array_totals(array):
    b = compute_budget(array((100_000, 40_000), (120_000, 60_000)) + [None], [], [])
    assert b.array_output_max == pytest.approx(220_000)
    assert b.array_output_current == pytest.approx(100_000)
    assert b.array_spare == pytest.approx(120_000)


def test_local_discharging_contributes_output(snap):
    b = compute_budget([], [snap(max_out=5e6, cur_out=1e6)], [])
    assert b.local_output_max == pytest.approx(5e6)
    assert b.local_output_current == pytest.approx(1e6)
    assert b.local_spare == pytest.approx(4e6)
    assert b.local_output_idle == 0.0


def test_local_charged_but_off_is_idle(snap):
    b = compute_budget([], [snap(enabled=False, max_out=5e6)], [])
    assert b.local_output_max == 0.0
    assert b.local_output_idle == pytest.approx(5e6)
    assert b.local_needs_charge


def test_local_charging_contributes_input(snap):
    b = compute_budget([], [snap(stored=0.0, charging=True, max_in=2e6, cur_in=5e5)], [])
    assert b.local_input_max == pytest.approx(2e6)
    assert b.local_input_current == pytest.approx(5e5)
    assert not b.local_needs_charge
    assert b.local_input_needed == 0.0


def test_full_local_cell_never_needs_charge(snap):
    b = compute_budget([], [snap(stored=3e6, capacity=3e6, enabled=False)], [])
    assert not b.local_needs_charge
    assert b.local_input_max == 0.0


def test_docked_aggregation(snap):
    docked = [
        snap(pool=D, index=0, stored=0.0, charging=True, max_in=3e6, cur_in=1e6),
        snap(pool=D, index=1, stored=0.0, charging=True, enabled=False),
    ]
    b = compute_budget([], [], docked)
    assert b.docked_input_max == pytest.approx(3e6)
    assert b.docked_input_current == pytest.approx(1e6)
    assert b.docked_input_needed == pytest.approx(2e6)
    assert b.docked_needs_charge
    assert b.docked_demand


def test_unparsed_cells_are_skipped(snap):
    b = compute_budget([], [snap(parsed=False, enabled=False)], [snap(pool=D, parsed=False, enabled=False)])
    assert not b.local_needs_charge
    assert not b.docked_needs_charge
    assert not b.docked_demand


def test_dock_intake_forces_charge_off(snap):
    docked = [
        snap(pool=D, index=0),                         # fresh, discharging
        snap(pool=D, index=1, charging=True),          # already charging
        snap(pool=D, index=2, parsed=False),           # unreadable
    ]
    actions, after = dock_intake(docked)
    assert len(actions) == 1
    a = actions[0]
    assert (a.pool, a.index, a.reason) == (D, 0, "dock_intake")
    assert a.intent.charging and not a.intent.enabled
    assert after[0].charging and not after[0].enabled
    assert after[1] == docked[1]
    assert after[2] == docked[2]


def test_snapshot_cells_reads_text_marker(make_cell):
    handles = [make_cell(recharge=True), make_cell(enabled=False)]
    cells = snapshot_cells(handles, L)
    assert [c.index for c in cells] == [0, 1]
    assert cells[0].charging and cells[0].enabled
    assert not cells[1].charging and not cells[1].enabled
    assert cells[0].reading.current_stored == pytest.approx(1e6)
