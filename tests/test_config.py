"""
tests/test_config.py

BatteryBridge - Configuration Loader Tests
"""

import json

import pytest
from pydantic import ValidationError

from batterybridge.core.config_loader import (
    DEFAULT_CHANNEL_NAME,
    DEFAULT_RESTRICTION_THRESHOLD,
    BatteryBridgeConfig,
    ConfigEnvironment,
    ConfigLoadError,
    ConfigLoader,
    ConfigValidationError,
    get_config,
    load_config,
    reload_config,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    return tmp_path


class TestConfigLoader:

    def test_defaults_without_files(self, workdir):
        config = load_config()

        assert config.channel.name == DEFAULT_CHANNEL_NAME
        assert config.exemption.restriction_threshold == DEFAULT_RESTRICTION_THRESHOLD == 31
        assert config.exemption.package_name is None
        assert config.environment is ConfigEnvironment.DEVELOPMENT

    def test_yaml_base_file(self, workdir):
        (workdir / "config" / "batterybridge.yaml").write_text(
            "channel:\n  name: app/battery\nexemption:\n  restriction_threshold: 23\n",
            encoding="utf-8",
        )
        loader = ConfigLoader()
        config = loader.load_config()

        assert config.channel.name == "app/battery"
        assert config.exemption.restriction_threshold == 23
        assert loader.loaded_files == ["config/batterybridge.yaml"]

    def test_json_file(self, workdir):
        path = workdir / "bridge.json"
        path.write_text(json.dumps({"exemption": {"package_name": "org.example.app"}}), encoding="utf-8")

        config = load_config(config_paths=[path])

        assert config.exemption.package_name == "org.example.app"

    def test_environment_overlay_merges(self, workdir):
        (workdir / "config" / "batterybridge.yaml").write_text(
            "exemption:\n  restriction_threshold: 23\n  package_name: base.app\n", encoding="utf-8"
        )
        (workdir / "config" / "prod.yaml").write_text(
            "exemption:\n  package_name: prod.app\n", encoding="utf-8"
        )

        config = load_config(environment="production")

        assert config.environment is ConfigEnvironment.PRODUCTION
        assert config.exemption.restriction_threshold == 23
        assert config.exemption.package_name == "prod.app"

    def test_env_var_override(self, workdir, monkeypatch):
        monkeypatch.setenv("BATTERYBRIDGE_EXEMPTION__RESTRICTION_THRESHOLD", "29")
        monkeypatch.setenv("BATTERYBRIDGE_DEBUG", "true")

        config = load_config()

        assert config.exemption.restriction_threshold == 29
        assert config.debug is True

    def test_environment_from_env_var(self, workdir, monkeypatch):
        monkeypatch.setenv("BATTERYBRIDGE_ENV", "testing")
        assert ConfigLoader().environment is ConfigEnvironment.TESTING

    def test_unknown_environment_defaults_to_development(self, workdir):
        assert ConfigLoader(environment="moon").environment is ConfigEnvironment.DEVELOPMENT

    def test_invalid_values_fall_back_to_defaults(self, workdir):
        (workdir / "config" / "batterybridge.yaml").write_text(
            "exemption:\n  restriction_threshold: 0\n", encoding="utf-8"
        )

        config = load_config()

        assert config.exemption.restriction_threshold == DEFAULT_RESTRICTION_THRESHOLD

    def test_strict_raises_validation_error(self, workdir):
        (workdir / "config" / "batterybridge.yaml").write_text("unknown_key: 1\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError):
            load_config(strict=True)

    def test_strict_raises_load_error_on_bad_yaml(self, workdir):
        (workdir / "config" / "batterybridge.yaml").write_text("channel: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            load_config(strict=True)

    def test_non_mapping_file_rejected(self, workdir):
        (workdir / "config" / "batterybridge.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            load_config(strict=True)

    def test_empty_file_is_defaults(self, workdir):
        (workdir / "config" / "batterybridge.yaml").write_text("", encoding="utf-8")
        assert load_config(strict=True).channel.name == DEFAULT_CHANNEL_NAME


class TestGlobalConfig:

    def test_cached_until_reload(self, workdir):
        first = get_config()
        assert get_config() is first
        assert reload_config() is not first

    def test_schema_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            BatteryBridgeConfig(surprise=True)
