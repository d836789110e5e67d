# sunward/controller/__init__.py
from .config import PlatformConfig, load_config, save_config
from .errors import PlatformError, NoActuatorsError, NoSolarPanelsError
from .tick import SolarRechargeController, TickResult
__all__ = [
    "PlatformConfig", "load_config", "save_config",
    "PlatformError", "NoActuatorsError", "NoSolarPanelsError",
    "SolarRechargeController", "TickResult",
]
