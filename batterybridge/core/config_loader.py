"""
batterybridge/core/config_loader.py

BatteryBridge - Configuration Management
----------------------------------------
• YAML/JSON configuration loader with Pydantic schema validation
• Environment-specific overlays and BATTERYBRIDGE_* environment variable injection
• Falls back to built-in defaults when a configuration cannot be loaded
"""

from __future__ import annotations

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional, List, Union
from enum import Enum

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from batterybridge.utils.logger import get_logger

logger = get_logger(__name__)

# -------------------------------
# Enumerations and Constants
# -------------------------------

class ConfigEnvironment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

DEFAULT_CONFIG_PATHS = [
    "config/batterybridge.yaml",
    "batterybridge.yaml",
    "config.yaml",
]

DEFAULT_ENV_CONFIG_PATHS = {
    ConfigEnvironment.DEVELOPMENT: ["config/dev.yaml", "config/development.yaml"],
    ConfigEnvironment.TESTING: ["config/test.yaml", "config/testing.yaml"],
    ConfigEnvironment.PRODUCTION: ["config/prod.yaml", "config/production.yaml"],
}

# Android 12 (API 31): first tier with the restriction model this bridge targets
DEFAULT_RESTRICTION_THRESHOLD = 31
DEFAULT_CHANNEL_NAME = "batterybridge/battery"

# -------------------------------
# Configuration Schema Models
# -------------------------------

class ChannelConfig(BaseModel):
    """Method channel configuration."""
    name: str = Field(default=DEFAULT_CHANNEL_NAME, min_length=1, description="Battery channel name")


class ExemptionConfig(BaseModel):
    """Battery-optimization exemption settings."""
    restriction_threshold: int = Field(
        default=DEFAULT_RESTRICTION_THRESHOLD, ge=1,
        description="Lowest capability tier (API level) where exemption must be requested"
    )
    package_name: Optional[str] = Field(
        default=None, description="Override for the application identity (defaults to the activity's package)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration schema."""
    level: str = Field(default="INFO", description="Log level")
    log_to_console: bool = Field(default=True, description="Log to stdout")
    log_to_file: bool = Field(default=False, description="Enable rotating file logging")
    log_file: str = Field(default="logs/batterybridge.log", description="Log file path")
    max_bytes: int = Field(default=1024 * 1024, ge=1024, description="Maximum log file size")
    backup_count: int = Field(default=3, ge=1, le=20, description="Number of backup log files")


class BatteryBridgeConfig(BaseSettings):
    """Root BatteryBridge configuration."""

    app_name: str = Field(default="BatteryBridge", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    environment: ConfigEnvironment = Field(default=ConfigEnvironment.DEVELOPMENT, description="Environment")
    debug: bool = Field(default=False, description="Debug mode")

    channel: ChannelConfig = Field(default_factory=ChannelConfig)
    exemption: ExemptionConfig = Field(default_factory=ExemptionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix='BATTERYBRIDGE_',
        env_nested_delimiter='__',
        case_sensitive=False,
        validate_default=True,
        extra='forbid',
    )

# -------------------------------
# Configuration Exceptions
# -------------------------------

class ConfigError(Exception):
    """Base configuration error."""
    pass

class ConfigLoadError(ConfigError):
    """Configuration loading error."""
    pass

class ConfigValidationError(ConfigError):
    """Configuration validation error."""
    pass

# -------------------------------
# Configuration Loader
# -------------------------------

class ConfigLoader:
    """
    Layered configuration loader.

    Sources, lowest priority first:
    - the first existing base file in ``config_paths``
    - the first existing overlay for the active environment
    - ``BATTERYBRIDGE_*`` environment variables (nested keys joined with ``__``)

    With ``strict=False`` (default) any load or validation failure is logged and
    the built-in defaults are returned instead.
    """

    def __init__(
        self,
        config_paths: Optional[List[Union[str, Path]]] = None,
        environment: Optional[Union[str, ConfigEnvironment]] = None,
        strict: bool = False,
    ):
        self.config_paths = [Path(p) for p in (config_paths or DEFAULT_CONFIG_PATHS)]
        self.environment = self._parse_environment(environment)
        self.strict = strict
        self.loaded_files: List[str] = []

        logger.debug(f"ConfigLoader initialized for environment: {self.environment.value}")

    def _parse_environment(self, env: Optional[Union[str, ConfigEnvironment]]) -> ConfigEnvironment:
        if env is None:
            env = os.getenv('BATTERYBRIDGE_ENV', 'development')

        if isinstance(env, str):
            try:
                return ConfigEnvironment(env.lower())
            except ValueError:
                logger.warning(f"Unknown environment '{env}', defaulting to development")
                return ConfigEnvironment.DEVELOPMENT

        return env

    def load_config(self) -> BatteryBridgeConfig:
        """Load, merge and validate configuration."""
        try:
            base_config = self._load_first(self.config_paths)
            env_config = self._load_first(
                [Path(p) for p in DEFAULT_ENV_CONFIG_PATHS.get(self.environment, [])]
            )
            merged = self._merge_configs(base_config, env_config)
            merged.setdefault('environment', self.environment.value)

            config = self._validate_config(merged)
            logger.info(f"Configuration loaded from {len(self.loaded_files)} file(s)")
            return config

        except ConfigError as e:
            if self.strict:
                raise
            logger.error(f"Configuration loading failed: {e}")
            return self._get_fallback_config()

    def _load_first(self, paths: List[Path]) -> Dict[str, Any]:
        """Load the first existing file in ``paths``."""
        for path in paths:
            if not path.exists():
                continue
            data = self._load_config_file(path)
            self.loaded_files.append(str(path))
            logger.debug(f"Loaded config from: {path}")
            return data
        return {}

    def _load_config_file(self, file_path: Path) -> Dict[str, Any]:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()

            if file_path.suffix.lower() == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"Failed to parse config file {file_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Config file {file_path} must contain a mapping, got {type(data).__name__}")
        return data

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge configuration dictionaries."""
        merged = dict(base)
        for key, value in (override or {}).items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _validate_config(self, config_data: Dict[str, Any]) -> BatteryBridgeConfig:
        try:
            return BatteryBridgeConfig(**config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}") from e

    def _get_fallback_config(self) -> BatteryBridgeConfig:
        logger.warning("Using fallback configuration")
        # Skip the settings sources: they may be what failed
        return BatteryBridgeConfig.model_construct()

# -------------------------------
# Convenience Functions
# -------------------------------

def load_config(
    config_paths: Optional[List[Union[str, Path]]] = None,
    environment: Optional[Union[str, ConfigEnvironment]] = None,
    strict: bool = False,
) -> BatteryBridgeConfig:
    """Load BatteryBridge configuration."""
    return ConfigLoader(config_paths=config_paths, environment=environment, strict=strict).load_config()


_global_config: Optional[BatteryBridgeConfig] = None

def get_config(force_reload: bool = False) -> BatteryBridgeConfig:
    """Get global configuration instance."""
    global _global_config
    if _global_config is None or force_reload:
        _global_config = load_config()
    return _global_config

def reload_config() -> BatteryBridgeConfig:
    """Reload global configuration."""
    return get_config(force_reload=True)
