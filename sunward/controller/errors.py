"""Fatal-at-startup conditions reported to the operator."""


class PlatformError(RuntimeError):
    """Base class for conditions that abort a tick before any actuation."""


class NoActuatorsError(PlatformError):
    def __init__(self) -> None:
        super().__init__("No gyros found, cannot position")


class NoSolarPanelsError(PlatformError):
    def __init__(self) -> None:
        super().__init__("No solar panels found")


__all__ = ["PlatformError", "NoActuatorsError", "NoSolarPanelsError"]
