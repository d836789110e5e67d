"""
Vehicle size classes and the per-size constants the host reports.

Values are in the host's units: panel output in W, cell capacity as the
host's stored-power figure. Change them only if the host changes them.
"""
from enum import Enum

SMALL_CELL_CAPACITY: float = 4_320_000.0
LARGE_CELL_CAPACITY: float = 12_000_000.0
SMALL_PANEL_MAX: float = 30_000.0
LARGE_PANEL_MAX: float = 120_000.0


class ShipSize(str, Enum):
    LARGE = "large"
    SMALL = "small"

    @classmethod
    def parse(cls, name: "str | ShipSize") -> "ShipSize":
        if isinstance(name, ShipSize):
            return name
        key = str(name).strip().lower()
        try:
            return cls(key)
        except ValueError as e:
            raise ValueError(
                f"Unknown ship size '{name}'. Available: {[s.value for s in cls]}"
            ) from e

    @property
    def panel_max(self) -> float:
        """Rated output of one solar panel [W]."""
        return LARGE_PANEL_MAX if self is ShipSize.LARGE else SMALL_PANEL_MAX

    @property
    def cell_capacity(self) -> float:
        """Full capacity of one storage cell."""
        return LARGE_CELL_CAPACITY if self is ShipSize.LARGE else SMALL_CELL_CAPACITY


__all__ = [
    "ShipSize",
    "SMALL_CELL_CAPACITY",
    "LARGE_CELL_CAPACITY",
    "SMALL_PANEL_MAX",
    "LARGE_PANEL_MAX",
]
