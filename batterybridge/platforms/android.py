"""
batterybridge/platforms/android.py

BatteryBridge - Android Platform (pyjnius)
------------------------------------------
• Capability tier from android.os.Build.VERSION.SDK_INT
• Exemption status from PowerManager.isIgnoringBatteryOptimizations(package)
• Issuance via Settings.ACTION_REQUEST_IGNORE_BATTERY_OPTIMIZATIONS with a
  "package:<id>" data URI, started from the current Kivy activity

The app manifest must declare REQUEST_IGNORE_BATTERY_OPTIMIZATIONS
(buildozer.spec: android.permissions) or the system ignores the intent.

License: Apache 2.0
"""

# pyjnius only exists inside python-for-android builds
try:
    from jnius import autoclass, cast
    HAS_JNI = True
except ImportError:
    HAS_JNI = False

from batterybridge.core.exceptions import PlatformUnavailable
from batterybridge.platforms.base import BatteryPlatform
from batterybridge.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ACTIVITY_CLASS = "org.kivy.android.PythonActivity"


class AndroidBatteryPlatform(BatteryPlatform):
    """PowerManager/Settings access through pyjnius."""

    name = "android"

    def __init__(self, activity_class: str = DEFAULT_ACTIVITY_CLASS):
        self.activity_class = activity_class

    def _autoclass(self, java_name: str):
        if not HAS_JNI:
            raise PlatformUnavailable("pyjnius is not available; not running inside an Android build")
        return autoclass(java_name)

    def _get_activity(self):
        activity = self._autoclass(self.activity_class).mActivity
        if activity is None:
            raise PlatformUnavailable(f"{self.activity_class}.mActivity is not set")
        return activity

    def _get_power_manager(self, activity):
        Context = self._autoclass("android.content.Context")
        service = activity.getSystemService(Context.POWER_SERVICE)
        if service is None:
            raise PlatformUnavailable("POWER_SERVICE is not available")
        return cast("android.os.PowerManager", service)

    def get_capability_tier(self) -> int:
        return int(self._autoclass("android.os.Build$VERSION").SDK_INT)

    def get_package_name(self) -> str:
        return self._get_activity().getApplicationContext().getPackageName()

    def is_ignoring_battery_optimizations(self, package_name: str) -> bool:
        power_manager = self._get_power_manager(self._get_activity())
        return bool(power_manager.isIgnoringBatteryOptimizations(package_name))

    def request_ignore_battery_optimizations(self, package_name: str) -> None:
        Intent = self._autoclass("android.content.Intent")
        Settings = self._autoclass("android.provider.Settings")
        Uri = self._autoclass("android.net.Uri")

        activity = self._get_activity()
        intent = Intent(Settings.ACTION_REQUEST_IGNORE_BATTERY_OPTIMIZATIONS)
        intent.setData(Uri.parse(f"package:{package_name}"))
        activity.startActivity(intent)
        logger.debug(f"Started ACTION_REQUEST_IGNORE_BATTERY_OPTIMIZATIONS for {package_name}")
