"""
batterybridge/core/exceptions.py

BatteryBridge - Exception Hierarchy
"""


class BatteryBridgeError(Exception):
    """Base error for BatteryBridge."""
    pass


class PlatformUnavailable(BatteryBridgeError):
    """A platform service (pyjnius, activity, system service) cannot be reached."""
    pass


class RequestNotIssued(BatteryBridgeError):
    """
    The exemption request could not be issued.

    This is the only failure the requester reports, and it never leaves the
    requester as an exception: it is carried on the result and collapsed to
    ``False`` at the boundary. The platform fault is kept as ``__cause__``.
    """
    pass
