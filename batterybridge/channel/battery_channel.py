"""
batterybridge/channel/battery_channel.py

Battery channel: exposes requestIgnoreBatteryOptimization to app logic.
Every other method name is answered with "not implemented".
"""

from typing import Optional

from batterybridge.channel.method_channel import BinaryMessenger, MethodCall, MethodChannel, MethodResult
from batterybridge.core.config_loader import DEFAULT_CHANNEL_NAME
from batterybridge.core.exemption import ExemptionRequester, get_exemption_requester
from batterybridge.utils.logger import get_logger

logger = get_logger(__name__)

METHOD_REQUEST_IGNORE_BATTERY_OPTIMIZATION = "requestIgnoreBatteryOptimization"


class BatteryChannelHandler:
    """Method call handler backed by an ExemptionRequester."""

    def __init__(self, requester: ExemptionRequester):
        self.requester = requester

    def __call__(self, call: MethodCall, result: MethodResult):
        if call.method == METHOD_REQUEST_IGNORE_BATTERY_OPTIMIZATION:
            result.success(self.requester.request_ignore_battery_optimization())
        else:
            logger.debug(f"Battery channel: '{call.method}' not implemented")
            result.not_implemented()


def configure_battery_channel(
    messenger: BinaryMessenger,
    requester: Optional[ExemptionRequester] = None,
    name: Optional[str] = None,
) -> MethodChannel:
    """Create the battery channel on ``messenger`` and install its handler."""
    channel = MethodChannel(name or DEFAULT_CHANNEL_NAME, messenger)
    channel.set_method_call_handler(BatteryChannelHandler(requester or get_exemption_requester()))
    logger.info(f"Battery channel configured: {channel.name}")
    return channel
