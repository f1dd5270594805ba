"""
batterybridge/platforms/base.py

BatteryBridge - Platform Collaborator Interface
-----------------------------------------------
The three platform operations the exemption requester depends on, plus the
application identity they are keyed by. Implementations must raise (not
return sentinels) when a platform service is unavailable.
"""

from abc import ABC, abstractmethod


class BatteryPlatform(ABC):
    """Capability tier query, exemption status query and request issuance."""

    name = "unknown"

    @abstractmethod
    def get_capability_tier(self) -> int:
        """Ordinal OS version tier (Android API level)."""

    @abstractmethod
    def get_package_name(self) -> str:
        """Identity the exemption is keyed by."""

    @abstractmethod
    def is_ignoring_battery_optimizations(self, package_name: str) -> bool:
        """Current exemption status for ``package_name``. Never cached."""

    @abstractmethod
    def request_ignore_battery_optimizations(self, package_name: str) -> None:
        """Start the platform's user-facing exemption flow. Does not wait for the user."""

    def __repr__(self):
        return f"<{type(self).__name__} platform={self.name}>"
