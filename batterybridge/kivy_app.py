"""
batterybridge/kivy_app.py

BatteryBridge - Kivy Host App
-----------------------------
• Hosts the battery channel inside a Kivy/python-for-android app
• Configures the channel on its messenger when the app is built, and removes
  it when the app stops
"""

from __future__ import annotations

from typing import Optional

import kivy
kivy.require("2.3.0")

from kivy.app import App
from kivy.uix.label import Label

from batterybridge.channel.battery_channel import configure_battery_channel
from batterybridge.channel.method_channel import BinaryMessenger, MethodChannel
from batterybridge.core.config_loader import BatteryBridgeConfig, get_config
from batterybridge.core.exemption import ExemptionRequester, get_exemption_requester
from batterybridge.utils.logger import get_logger

logger = get_logger(__name__)


class BatteryBridgeApp(App):
    """Kivy app that owns the messenger and the battery channel."""

    def __init__(
        self,
        messenger: Optional[BinaryMessenger] = None,
        requester: Optional[ExemptionRequester] = None,
        bridge_config: Optional[BatteryBridgeConfig] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.messenger = messenger or BinaryMessenger()
        self.bridge_config = bridge_config or get_config()
        self.requester = requester
        self.battery_channel: Optional[MethodChannel] = None

    def configure_channels(self) -> MethodChannel:
        requester = self.requester or get_exemption_requester(self.bridge_config)
        self.battery_channel = configure_battery_channel(
            self.messenger, requester, name=self.bridge_config.channel.name
        )
        return self.battery_channel

    def build(self):
        channel = self.configure_channels()
        return Label(text=f"BatteryBridge\n{channel.name}", halign="center")

    def on_stop(self):
        if self.battery_channel is not None:
            self.battery_channel.set_method_call_handler(None)
            logger.debug(f"Battery channel released: {self.battery_channel.name}")
            self.battery_channel = None
