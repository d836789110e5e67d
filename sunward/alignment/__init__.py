"""
Sunward alignment package

Thin re-export layer: persisted search state, gyro coordination and the
two-axis hill climber. Import from here for stability.
"""
from __future__ import annotations

from .types import Axis, AxisIntent, AlignmentState, SearchBranch, SearchStep
from .state_store import StateStore, encode, decode
from .gyros import GyroGroup
from .hill_climb import AxisHillClimb

__all__ = [
    "Axis", "AxisIntent", "AlignmentState", "SearchBranch", "SearchStep",
    "StateStore", "encode", "decode",
    "GyroGroup",
    "AxisHillClimb",
]
