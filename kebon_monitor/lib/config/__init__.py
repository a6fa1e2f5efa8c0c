"""Configuration management library with YAML support.

This library provides configuration management for the telemetry monitor,
including:

- YAML file loading and saving
- Configuration validation and schema checking
- Environment variable overrides
- Configuration defaults and export

Usage:
    from kebon_monitor.lib.config import ConfigManager

    config_manager = ConfigManager("config.yaml")
    config = config_manager.load_config()

    # Strict validation rejects unknown keys
    config_manager = ConfigManager("config.yaml", strict_validation=True)
    config = config_manager.load_config()
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional, Callable, Union
from datetime import datetime

import yaml

from ...models.monitor_configuration import MonitorConfiguration
from .validation import (
    ConfigValidator,
    ValidationResult,
    KNOWN_SECTIONS,
    generate_example_config,
)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""
    pass


class ConfigManager:
    """Configuration manager with YAML support and validation."""

    # Environment variable suffix -> (config path, type)
    ENV_MAPPINGS = {
        "HOST": (["server", "host"], str),
        "PORT": (["server", "port"], int),
        "ADVERTISED_IP": (["server", "advertised_ip"], str),
        "STATIC_DIR": (["server", "static_dir"], str),
        "DEVICE_TIMEOUT": (["liveness", "timeout_seconds"], float),
        "CHECK_INTERVAL": (["liveness", "check_interval_seconds"], float),
        "HISTORY_CAPACITY": (["storage", "history_capacity"], int),
        "LOG_LEVEL": (["logging", "level"], str),
        "JSON_LOGS": (["logging", "structured"], bool),
    }

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        validate: bool = True,
        strict_validation: bool = False,
        create_if_missing: bool = False
    ):
        self.config_path = Path(config_path) if config_path is not None else None
        self.validate = validate
        self.strict_validation = strict_validation
        self.create_if_missing = create_if_missing

        # State
        self._current_config: Optional[MonitorConfiguration] = None
        self._last_loaded: Optional[datetime] = None
        self._last_validation: Optional[ValidationResult] = None

        # Callbacks
        self.on_validation_warning: Optional[Callable[[ValidationResult], None]] = None

        # Environment variable prefix for overrides
        self.env_prefix = "KEBON_MONITOR_"

        if self.create_if_missing and self.config_path and not self.config_path.exists():
            self._save_yaml_file(generate_example_config())

    def load_config(self) -> MonitorConfiguration:
        """Load and return the current configuration."""
        config_data = self._load_yaml_file()
        config_data = self._apply_env_overrides(config_data)

        if self.validate:
            validation_result = self._validate_config(config_data)
            self._last_validation = validation_result

            if not validation_result.is_valid:
                raise ConfigurationError(
                    f"Configuration validation failed: {validation_result.errors[0]}"
                )

            if validation_result.warnings and self.on_validation_warning:
                self.on_validation_warning(validation_result)

        try:
            self._current_config = MonitorConfiguration(**{
                key: value for key, value in config_data.items() if key in KNOWN_SECTIONS
            })
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        self._last_loaded = datetime.now()
        return self._current_config

    def save_config(self, config: MonitorConfiguration) -> None:
        """Save configuration to YAML file."""
        self._save_yaml_file(config.export_dict())
        self._current_config = config
        self._last_loaded = datetime.now()

    def get_current_config(self) -> Optional[MonitorConfiguration]:
        """Get the currently loaded configuration without reloading."""
        return self._current_config

    def get_validation_result(self) -> Optional[ValidationResult]:
        """Get the last validation result."""
        return self._last_validation

    def _load_yaml_file(self) -> Dict[str, Any]:
        """Load YAML configuration file."""
        if self.config_path is None:
            return {}

        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML parsing error: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading config file: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a mapping")
        return data

    def _save_yaml_file(self, config_data: Dict[str, Any]) -> None:
        """Save configuration data to YAML file."""
        if self.config_path is None:
            raise ConfigurationError("No configuration file path set")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                f.write(dict_to_yaml(config_data))
        except OSError as e:
            raise ConfigurationError(f"Error writing config file: {e}") from e

    def _validate_config(self, config_data: Dict[str, Any]) -> ValidationResult:
        """Validate configuration data."""
        validator = ConfigValidator(strict_mode=self.strict_validation)
        return validator.validate_config(config_data)

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        modified_data = copy.deepcopy(config_data)

        for suffix, (path, value_type) in self.ENV_MAPPINGS.items():
            env_value = os.getenv(f"{self.env_prefix}{suffix}")
            if env_value is not None:
                converted_value = self._convert_env_value(env_value, value_type)
                self._set_nested_value(modified_data, path, converted_value)

        return modified_data

    def _convert_env_value(self, value: str, value_type: type) -> Any:
        """Convert environment variable string to appropriate type."""
        if value_type is bool:
            return value.lower() in ('true', '1', 'yes', 'on')
        try:
            return value_type(value)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment override {value!r}: {e}") from e

    def _set_nested_value(self, data: Dict[str, Any], path: list, value: Any) -> None:
        """Set nested dictionary value using path list."""
        current = data
        for key in path[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = value


def dict_to_yaml(data: Dict[str, Any]) -> str:
    """Convert dictionary to formatted YAML string with a header."""
    header = f"""# Ruang Kebon Telemetry Monitor Configuration
# Generated: {datetime.now().isoformat()}
#
# Sensor classes: power, suhu, ph, tds, pompa

"""
    yaml_content = yaml.dump(
        data,
        default_flow_style=False,
        indent=2,
        sort_keys=False,
        allow_unicode=True
    )
    return header + yaml_content


# Convenience functions
def load_configuration(
    config_path: Union[str, Path],
    validate: bool = True
) -> MonitorConfiguration:
    """Load configuration from YAML file."""
    manager = ConfigManager(config_path, validate=validate)
    return manager.load_config()


def load_default_configuration() -> MonitorConfiguration:
    """Built-in defaults plus environment overrides, without reading any file."""
    return ConfigManager().load_config()


def export_configuration(
    config: MonitorConfiguration,
    config_path: Union[str, Path]
) -> None:
    """Save configuration to YAML file."""
    manager = ConfigManager(config_path, validate=False)
    manager.save_config(config)


__all__ = [
    "ConfigManager",
    "ConfigurationError",
    "ConfigValidator",
    "ValidationResult",
    "dict_to_yaml",
    "generate_example_config",
    "load_configuration",
    "load_default_configuration",
    "export_configuration",
]
