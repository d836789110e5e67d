"""Unit tests for the status-text parser and aggregation helpers.

Run from repo root:
    python -m pytest -q tests/telemetry/test_parser.py
"""

from __future__ import annotations

import pytest

from sunward.telemetry import (
    DeviceShape,
    PowerReading,
    average_max_output,
    format_quantity,
    is_recharging,
    parse,
    parse_solar,
    parse_storage,
    scale,
    total_output,
)


@pytest.mark.parametrize(
    "mantissa, prefix, expected",
    [
        ("42", "", 42.0),
        ("250", "k", 250e3),
        ("1.5", "M", 1.5e6),
        ("2", "G", 2e9),
        ("3.25", "T", 3.25e12),
        ("7", "P", 7e15),
        ("1.0", "E", 1e18),
        ("4.5", "Z", 4.5e21),
        ("9", "Y", 9e24),
    ],
)
def test_scale_applies_prefix(mantissa, prefix, expected):
    assert scale(mantissa, prefix) == pytest.approx(expected)


def test_scale_rejects_unknown_prefix():
    with pytest.raises(ValueError):
        scale("1.0", "q")


def test_parse_solar_reads_both_fields():
    r = parse_solar("Type: Solar Panel\nMax Output: 1.50 MW\nCurrent Output: 250 kW\n")
    assert r is not None
    assert r.max_output == pytest.approx(1.5e6)
    assert r.current_output == pytest.approx(250e3)
    assert r.shape == DeviceShape.SOLAR
    assert r.spare_output == pytest.approx(1.25e6)


def test_parse_solar_malformed_returns_none():
    assert parse_solar("Max Output: 100 kW\n") is None  # missing current output
    assert parse_solar("") is None
    assert parse_solar("Max Output: 1.00 qW\nCurrent Output: 1.00 kW") is None


def test_parse_storage_six_fields(storage_text):
    r = parse_storage(storage_text(2_500_000.0, capacity=3_000_000.0, cur_in=1_000.0, cur_out=500.0))
    assert r is not None
    assert r.shape == DeviceShape.STORAGE
    assert r.max_output == pytest.approx(12e6)
    assert r.max_input == pytest.approx(12e6)
    assert r.max_stored == pytest.approx(3e6)
    assert r.current_input == pytest.approx(1e3)
    assert r.current_output == pytest.approx(500.0)
    assert r.current_stored == pytest.approx(2.5e6)
    assert not r.is_full
    assert r.has_charge


def test_parse_storage_full_and_empty(storage_text):
    full = parse_storage(storage_text(3_000_000.0, capacity=3_000_000.0))
    empty = parse_storage(storage_text(0.0))
    assert full.is_full
    assert not empty.has_charge


def test_parse_storage_rejects_solar_text(solar_text):
    assert parse_storage(solar_text(100_000.0, 50_000.0)) is None


def test_parse_dispatches_on_shape(solar_text):
    text = solar_text(100_000.0)
    assert parse(text, DeviceShape.SOLAR) == parse_solar(text)
    assert parse(text, DeviceShape.STORAGE) is None


def test_recharge_marker(storage_text):
    assert is_recharging(storage_text(0.0, recharging=True))
    assert not is_recharging(storage_text(0.0, recharging=False))
    assert not is_recharging("")


@pytest.mark.parametrize(
    "value, unit, expected",
    [(95_320.0, "W", "95.32 kW"), (0.0, "W", "0.00 W"), (6e6, "Wh", "6.00 MWh"), (999.0, "W", "999.00 W")],
)
def test_format_quantity(value, unit, expected):
    assert format_quantity(value, unit) == expected


def test_average_max_output_skips_failed_parses():
    readings = [
        PowerReading(max_output=100.0, current_output=0.0),
        None,
        PowerReading(max_output=200.0, current_output=50.0),
    ]
    assert average_max_output(readings) == pytest.approx(150.0)
    assert total_output(readings) == (300.0, 50.0)


def test_average_max_output_all_unreadable_is_zero():
    assert average_max_output([None, None]) == 0.0
    assert average_max_output([]) == 0.0
