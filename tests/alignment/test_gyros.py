"""Unit tests for GyroGroup (read / verify / zero / override / rotate).

Run from repo root:
    python -m pytest -q tests/alignment/test_gyros.py
"""

from __future__ import annotations

import pytest

from sunward.alignment import Axis, AxisIntent, GyroGroup, SearchBranch, SearchStep, AlignmentState

RATE = 0.025


def test_empty_group_rejected():
    with pytest.raises(ValueError):
        GyroGroup([], RATE)


def test_verify_all_idle(make_gyro):
    assert GyroGroup([make_gyro(), make_gyro()], RATE).verify()


def test_verify_agreeing_group(make_gyro):
    group = GyroGroup([make_gyro(Roll=RATE), make_gyro(Roll=RATE), make_gyro()], RATE)
    assert group.verify()


def test_verify_fails_on_different_axes(make_gyro):
    group = GyroGroup([make_gyro(Roll=RATE), make_gyro(Pitch=RATE)], RATE)
    assert not group.verify()


def test_verify_fails_on_two_axes_in_one_gyro(make_gyro):
    group = GyroGroup([make_gyro(Yaw=RATE, Pitch=RATE)], RATE)
    assert not group.verify()


@pytest.mark.parametrize("other", [2 * RATE, -RATE])
def test_verify_fails_on_different_magnitude(make_gyro, other):
    group = GyroGroup([make_gyro(Roll=RATE), make_gyro(Roll=other)], RATE)
    assert not group.verify()


def test_refresh_reads_first_gyro_sign(make_gyro):
    group = GyroGroup([make_gyro(Pitch=-RATE), make_gyro(Roll=RATE)], RATE)
    states = group.refresh((Axis.ROLL, Axis.PITCH))
    assert states[Axis.ROLL] == 0
    assert states[Axis.PITCH] == -1
    assert group.state(Axis.PITCH) == -1


def test_read_axis_states(make_gyro):
    group = GyroGroup([make_gyro(Pitch=-RATE), make_gyro()], RATE)
    intents = group.read_axis_states()
    assert intents[0] == AxisIntent(Axis.PITCH, -1, RATE)
    assert intents[1].direction == 0


def test_rotate_writes_every_gyro(make_gyro):
    gyros = [make_gyro(), make_gyro()]
    group = GyroGroup(gyros, RATE)
    group.rotate(Axis.PITCH, -1)
    assert all(g.values["Pitch"] == -RATE for g in gyros)
    assert group.state(Axis.PITCH) == -1


def test_zero_clears_everything(make_gyro):
    gyros = [make_gyro(Roll=RATE), make_gyro(Yaw=-RATE)]
    group = GyroGroup(gyros, RATE)
    group.zero()
    assert all(v == 0.0 for g in gyros for v in g.values.values())
    assert group.verify()


def test_override_only_toggles_differing(make_gyro):
    gyros = [make_gyro(override=True), make_gyro(override=False)]
    group = GyroGroup(gyros, RATE)
    assert group.set_override(True) == 1
    assert gyros[0].override_calls == 0
    assert gyros[1].override_calls == 1
    assert group.set_override(True) == 0


def test_apply_runs_zero_then_rotations_then_override(make_gyro):
    gyros = [make_gyro(Pitch=RATE)]
    group = GyroGroup(gyros, RATE)
    step = SearchStep(
        SearchBranch.START,
        AlignmentState(),
        zero_all=True,
        rotations=[AxisIntent(Axis.ROLL, 1, RATE)],
        override=True,
    )
    group.apply(step)
    assert gyros[0].values == {"Roll": RATE, "Pitch": 0.0, "Yaw": 0.0}
    assert gyros[0].override
