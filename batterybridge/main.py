"""
batterybridge/main.py

BatteryBridge - Command Line Entry Point
----------------------------------------
Invokes a battery channel method in-process and prints the JSON reply, or
starts the Kivy host app with --gui.
"""

import argparse
import json
import sys
from typing import List, Optional

from batterybridge.channel.battery_channel import (
    METHOD_REQUEST_IGNORE_BATTERY_OPTIMIZATION,
    configure_battery_channel,
)
from batterybridge.channel.method_channel import STATUS_SUCCESS, BinaryMessenger
from batterybridge.core.config_loader import load_config
from batterybridge.core.exemption import ExemptionRequester
from batterybridge.platforms.factory import get_battery_platform
from batterybridge.utils.logger import get_logger, set_verbosity, setup_logging

logger = get_logger(__name__)

APP_NAME = "BatteryBridge"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Request exemption from background battery optimization"


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=APP_NAME.lower(), description=APP_DESCRIPTION)

    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Path to configuration file'
    )
    parser.add_argument(
        '--method', '-m',
        default=METHOD_REQUEST_IGNORE_BATTERY_OPTIMIZATION,
        help='Channel method to invoke'
    )
    parser.add_argument(
        '--channel',
        type=str,
        help='Override the battery channel name'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Set logging level'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--gui',
        action='store_true',
        help='Start the Kivy host app instead of a one-shot call'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    config = load_config(config_paths=[args.config] if args.config else None)
    setup_logging(config.model_dump(mode="json"))
    if args.verbose:
        set_verbosity("DEBUG")
    elif args.log_level:
        set_verbosity(args.log_level)

    channel_name = args.channel or config.channel.name
    requester = ExemptionRequester.from_config(get_battery_platform(), config)
    messenger = BinaryMessenger()

    if args.gui:
        from batterybridge.kivy_app import BatteryBridgeApp
        config.channel.name = channel_name
        BatteryBridgeApp(messenger=messenger, requester=requester, bridge_config=config).run()
        return 0

    configure_battery_channel(messenger, requester, name=channel_name)
    reply = messenger.send(channel_name, {"method": args.method, "arguments": None})
    print(json.dumps(reply))
    return 0 if reply.get("status") == STATUS_SUCCESS else 1


if __name__ == "__main__":
    sys.exit(main())
