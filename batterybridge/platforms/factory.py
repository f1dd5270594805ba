"""
batterybridge/platforms/factory.py

Picks the platform collaborator for the running OS (plyer's platform probe).
"""

from typing import Optional

from plyer.utils import platform as plyer_platform

from batterybridge.platforms.base import BatteryPlatform
from batterybridge.platforms.android import AndroidBatteryPlatform
from batterybridge.platforms.desktop import DesktopBatteryPlatform
from batterybridge.utils.logger import get_logger

logger = get_logger(__name__)


def detect_platform() -> str:
    """'android', 'ios', 'win', 'linux', 'macosx' or 'unknown'."""
    return str(plyer_platform)


def get_battery_platform(platform_name: Optional[str] = None) -> BatteryPlatform:
    platform_name = platform_name or detect_platform()
    if platform_name == "android":
        platform = AndroidBatteryPlatform()
    else:
        platform = DesktopBatteryPlatform(name=platform_name)
    logger.debug(f"Using battery platform: {platform!r}")
    return platform
