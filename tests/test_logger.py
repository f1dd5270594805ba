"""
tests/test_logger.py

BatteryBridge - Logging Configuration Tests
-------------------------------------------
• File/console switches apply to loggers created at import time
• Exemption fault tracebacks land in the configured rotating log file
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from unittest.mock import patch

from batterybridge.core.exemption import ExemptionRequester
from batterybridge.main import main
from batterybridge.utils.logger import get_logger, set_verbosity, setup_logging


def _file_config(log_file, **overrides):
    cfg = {"log_to_file": True, "log_to_console": False, "log_file": str(log_file)}
    cfg.update(overrides)
    return {"logging": cfg}


class TestSetupLogging:

    def test_existing_module_loggers_get_file_handler(self, tmp_path):
        module_logger = get_logger("batterybridge.core.exemption")

        setup_logging(_file_config(tmp_path / "bb.log", max_bytes=4096, backup_count=2))

        handlers = module_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert handlers[0].maxBytes == 4096
        assert handlers[0].backupCount == 2

    def test_console_disabled(self, tmp_path):
        setup_logging(_file_config(tmp_path / "bb.log"))
        for name in ("batterybridge", "batterybridge.main"):
            assert not any(type(h) is logging.StreamHandler for h in get_logger(name).handlers)

    def test_nothing_enabled_keeps_console(self):
        setup_logging({"logging": {"log_to_file": False, "log_to_console": False}})
        assert any(type(h) is logging.StreamHandler for h in get_logger("batterybridge").handlers)

    def test_new_logger_shares_configured_handlers(self, tmp_path):
        setup_logging(_file_config(tmp_path / "bb.log"))
        assert get_logger("batterybridge.tests.fresh").handlers == get_logger("batterybridge").handlers

    def test_level_and_verbosity(self, tmp_path):
        setup_logging({"logging": {"level": "WARNING"}})
        assert get_logger("batterybridge.main").level == logging.WARNING

        set_verbosity("DEBUG")
        assert get_logger("batterybridge.main").level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in get_logger("batterybridge.main").handlers)

    def test_exemption_fault_written_to_file(self, tmp_path, fake_platform, capsys):
        log_file = tmp_path / "logs" / "bb.log"
        setup_logging(_file_config(log_file))
        fake_platform.is_ignoring_battery_optimizations.side_effect = RuntimeError("service not bound")

        assert ExemptionRequester(fake_platform).request_ignore_battery_optimization() is False

        for handler in get_logger("batterybridge").handlers:
            handler.flush()
        content = log_file.read_text(encoding="utf-8")
        assert "service not bound" in content
        assert "RuntimeError" in content
        assert "service not bound" not in capsys.readouterr().out


class TestCommandLineLogging:

    def test_config_file_logging_section(self, tmp_path, monkeypatch, fake_platform, capsys):
        monkeypatch.chdir(tmp_path)
        config_file = tmp_path / "bridge.yaml"
        config_file.write_text(
            "logging:\n  log_to_file: true\n  log_to_console: false\n  log_file: bb.log\n",
            encoding="utf-8",
        )
        fake_platform.is_ignoring_battery_optimizations.side_effect = RuntimeError("service not bound")

        with patch("batterybridge.main.get_battery_platform", return_value=fake_platform):
            assert main(["--config", str(config_file)]) == 0

        for handler in get_logger("batterybridge").handlers:
            handler.flush()
        assert "service not bound" in (tmp_path / "bb.log").read_text(encoding="utf-8")
        out = capsys.readouterr().out
        assert "service not bound" not in out
        assert '"result": false' in out
