"""Unit tests for the persisted "<last>|<highest>" record.

Run from repo root:
    python -m pytest -q tests/alignment/test_state_store.py
"""

from __future__ import annotations

import pytest

from sunward.alignment import AlignmentState, StateStore, decode, encode


def test_empty_string_is_no_prior_state():
    assert decode("") == AlignmentState(0.0, 0.0)
    assert decode(None).is_reset


def test_fields_decode_independently():
    assert decode("garbage|3.0") == AlignmentState(0.0, 3.0)
    assert decode("4.5|junk") == AlignmentState(4.5, 0.0)


def test_missing_separator_reads_last_only():
    assert decode("5.0") == AlignmentState(5.0, 0.0)


@pytest.mark.parametrize("text", ["-1|2", "nan|2", "inf|2"])
def test_negative_or_non_finite_reads_zero(text):
    assert decode(text) == AlignmentState(0.0, 2.0)


def test_encode_is_exact():
    state = AlignmentState(117_523.123456789, 118_000.5)
    assert decode(encode(state)) == state
    assert encode(AlignmentState()) == "0.0|0.0"


def test_store_save_load_clear():
    store = StateStore()
    assert store.load().is_reset

    store.save(AlignmentState(10.0, 20.0))
    assert store.text == "10.0|20.0"
    assert store.load() == AlignmentState(10.0, 20.0)

    store.clear()
    assert store.load().is_reset
