"""
tests/conftest.py

Shared fixtures: a spec'd platform collaborator and singleton resets.
"""

import os

# Kivy parses sys.argv on import unless told not to
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")

import pytest
from unittest.mock import Mock

from batterybridge.core import config_loader, exemption
from batterybridge.platforms.base import BatteryPlatform
from batterybridge.utils.logger import setup_logging


@pytest.fixture
def fake_platform():
    """Android-like platform at API 31, not yet exempt."""
    platform = Mock(spec=BatteryPlatform)
    platform.name = "android"
    platform.get_capability_tier.return_value = 31
    platform.get_package_name.return_value = "org.example.app"
    platform.is_ignoring_battery_optimizations.return_value = False
    platform.request_ignore_battery_optimizations.return_value = None
    return platform


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    monkeypatch.setattr(exemption, "_global_requester", None)
    monkeypatch.setattr(config_loader, "_global_config", None)
    for key in list(os.environ):
        if key.startswith("BATTERYBRIDGE_"):
            monkeypatch.delenv(key)
    yield
    # Drop handlers (and open log files) configured by the test
    setup_logging()
