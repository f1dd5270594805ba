"""
batterybridge/platforms/desktop.py

Desktop (Linux/Windows/macOS) platform: there is no background battery
restriction model, so the tier sits below every restriction threshold.
"""

import getpass

from batterybridge.core.exceptions import PlatformUnavailable
from batterybridge.platforms.base import BatteryPlatform


NO_RESTRICTION_TIER = 0


class DesktopBatteryPlatform(BatteryPlatform):

    def __init__(self, name: str = "desktop"):
        self.name = name

    def get_capability_tier(self) -> int:
        return NO_RESTRICTION_TIER

    def get_package_name(self) -> str:
        try:
            return f"desktop.{getpass.getuser()}"
        except (KeyError, OSError):
            return "desktop"

    def is_ignoring_battery_optimizations(self, package_name: str) -> bool:
        return False

    def request_ignore_battery_optimizations(self, package_name: str) -> None:
        raise PlatformUnavailable(f"Battery optimization exemption is not available on {self.name}")
