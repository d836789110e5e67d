"""Unit tests for PlatformConfig and its JSON persistence.

Run from repo root:
    python -m pytest -q tests/controller/test_config.py
"""

from __future__ import annotations

import json

import pytest

from sunward.alignment import Axis
from sunward.controller import PlatformConfig, load_config, save_config
from sunward.sizing import ShipSize


def test_defaults_and_derived_values():
    cfg = PlatformConfig()
    assert cfg.ship_size == ShipSize.LARGE
    assert cfg.target_power == pytest.approx(117_600.0)
    assert cfg.base_rate == pytest.approx(0.025)
    assert (cfg.primary_axis, cfg.secondary_axis) == (Axis.ROLL, Axis.PITCH)


def test_small_ship_target():
    cfg = PlatformConfig(ship_size="small")
    assert cfg.target_power == pytest.approx(29_400.0)
    assert cfg.ship_size.cell_capacity == 4_320_000.0


def test_axis_names_case_insensitive():
    cfg = PlatformConfig(primary_axis="pitch", secondary_axis="YAW")
    assert (cfg.primary_axis, cfg.secondary_axis) == (Axis.PITCH, Axis.YAW)


@pytest.mark.parametrize(
    "kw",
    [
        {"min_power_percent": 0.0},
        {"turn_rate": -1.0},
        {"primary_axis": "Roll", "secondary_axis": "roll"},
        {"ship_size": "medium"},
        {"primary_axis": "sideways"},
    ],
)
def test_invalid_values_rejected(kw):
    with pytest.raises(ValueError):
        PlatformConfig(**kw)


def test_update_is_all_or_nothing():
    cfg = PlatformConfig()
    with pytest.raises(ValueError):
        cfg.update(turn_rate=5.0, secondary_axis="Roll")
    assert cfg.turn_rate == 2.5
    assert cfg.secondary_axis == Axis.PITCH


def test_update_coerces_and_ignores_unknown():
    cfg = PlatformConfig()
    cfg.update(min_power_percent="50", auto_override="yes", bogus=1)
    assert cfg.min_power_percent == 50.0
    assert cfg.auto_override is True
    assert cfg.target_power == pytest.approx(60_000.0)


def test_from_dict_bool_strings():
    cfg = PlatformConfig.from_dict({"keep_cells_on": "false", "charge_docked": "0"})
    assert cfg.keep_cells_on is False
    assert cfg.charge_docked is False


def test_describe_lists_every_field():
    names = {p["name"] for p in PlatformConfig().describe()["params"]}
    assert names == set(PlatformConfig().to_dict())


def test_save_load_round_trip(tmp_path):
    cfg = PlatformConfig(ship_size="small", turn_rate=1.0, primary_axis="Yaw", auto_override=True)
    path = save_config(cfg, tmp_path / "cfg" / "platform.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["ship_size"] == "small"
    assert data["primary_axis"] == "Yaw"
    assert load_config(path) == cfg


def test_load_ignores_unknown_keys(tmp_path):
    p = tmp_path / "platform.json"
    p.write_text(json.dumps({"turn_rate": 4.0, "legacy": True}), encoding="utf-8")
    assert load_config(p).turn_rate == 4.0


def test_load_rejects_non_object(tmp_path):
    p = tmp_path / "platform.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(p)
