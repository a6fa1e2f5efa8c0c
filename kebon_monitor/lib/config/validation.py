"""Configuration validation utilities for YAML config files.

This module validates telemetry monitor configuration files: schema
validation through the pydantic model, unknown-key detection and
logical consistency checks between liveness and storage settings.
"""

from pathlib import Path
from typing import Dict, List, Any, Optional, Union
from pydantic import ValidationError

from ...models.monitor_configuration import MonitorConfiguration


class ConfigValidationError(Exception):
    """Custom exception for configuration validation errors."""

    def __init__(self, message: str, path: str = "", details: Optional[Dict] = None):
        self.message = message
        self.path = path
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.path:
            return f"Config validation error at '{self.path}': {self.message}"
        return f"Config validation error: {self.message}"


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self):
        self.is_valid = True
        self.errors: List[ConfigValidationError] = []
        self.warnings: List[str] = []
        self.info: List[str] = []

    def add_error(self, error: ConfigValidationError) -> None:
        """Add validation error."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, message: str, path: str = "") -> None:
        """Add validation warning."""
        warning_msg = f"Warning at '{path}': {message}" if path else f"Warning: {message}"
        self.warnings.append(warning_msg)

    def add_info(self, message: str) -> None:
        self.info.append(message)

    def get_summary(self) -> Dict[str, Any]:
        """Get validation summary."""
        return {
            "valid": self.is_valid,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "info_count": len(self.info),
            "errors": [str(error) for error in self.errors],
            "warnings": self.warnings,
            "info": self.info
        }

    def print_results(self, verbose: bool = True) -> None:
        """Print validation results to console."""
        if self.is_valid:
            print("✓ Configuration validation passed")
        else:
            print("✗ Configuration validation failed")

        if self.errors:
            print(f"\nErrors ({len(self.errors)}):")
            for error in self.errors:
                print(f"  • {error}")

        if self.warnings and verbose:
            print(f"\nWarnings ({len(self.warnings)}):")
            for warning in self.warnings:
                print(f"  • {warning}")

        if self.info and verbose:
            print(f"\nInfo ({len(self.info)}):")
            for info in self.info:
                print(f"  • {info}")


KNOWN_SECTIONS = {"server", "liveness", "storage", "logging"}


class ConfigValidator:
    """Configuration validator for monitor settings."""

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode
        self.result = ValidationResult()

    def validate_config(self, config_data: Dict[str, Any]) -> ValidationResult:
        """Validate complete configuration dictionary."""
        self.result = ValidationResult()

        if not isinstance(config_data, dict):
            self.result.add_error(ConfigValidationError(
                "Configuration root must be a mapping"
            ))
            return self.result

        self._validate_structure(config_data)

        config_obj = self._validate_pydantic_model(config_data)
        if config_obj:
            self._validate_liveness_settings(config_obj)
            self._validate_server_settings(config_obj)
            self._validate_storage_settings(config_obj)

        return self.result

    def validate_yaml_file(self, file_path: Union[str, Path]) -> ValidationResult:
        """Validate YAML configuration file."""
        self.result = ValidationResult()
        file_path = Path(file_path)

        if not file_path.exists():
            self.result.add_error(ConfigValidationError(
                f"Configuration file does not exist: {file_path}"
            ))
            return self.result

        if not file_path.is_file():
            self.result.add_error(ConfigValidationError(
                f"Path is not a file: {file_path}"
            ))
            return self.result

        import yaml
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self.result.add_error(ConfigValidationError(
                f"YAML parsing error: {str(e)}"
            ))
            return self.result

        return self.validate_config(config_data or {})

    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Check for unknown top-level sections."""
        unknown_keys = set(config.keys()) - KNOWN_SECTIONS

        if unknown_keys:
            if self.strict_mode:
                for key in sorted(unknown_keys):
                    self.result.add_error(ConfigValidationError(
                        f"Unknown configuration key: {key}",
                        path=key
                    ))
            else:
                self.result.add_warning(
                    f"Unknown configuration keys (will be ignored): {', '.join(sorted(unknown_keys))}"
                )

    def _validate_pydantic_model(self, config: Dict[str, Any]) -> Optional[MonitorConfiguration]:
        """Validate using Pydantic model."""
        known = {key: value for key, value in config.items() if key in KNOWN_SECTIONS}
        try:
            config_obj = MonitorConfiguration(**known)
            self.result.add_info("Pydantic model validation passed")
            return config_obj

        except ValidationError as e:
            for error in e.errors():
                field_path = ".".join(str(x) for x in error['loc'])
                self.result.add_error(ConfigValidationError(
                    error['msg'],
                    path=field_path,
                    details={"type": error['type'], "input": error.get('input')}
                ))
            return None

    def _validate_liveness_settings(self, config: MonitorConfiguration) -> None:
        """The offline check must run more often than the timeout elapses."""
        liveness = config.liveness

        if liveness.check_interval_seconds >= liveness.timeout_seconds:
            self.result.add_warning(
                f"Check interval ({liveness.check_interval_seconds}s) should be shorter "
                f"than the device timeout ({liveness.timeout_seconds}s)",
                path="liveness.check_interval_seconds"
            )

        self.result.add_info(
            f"Silent devices are reported offline within "
            f"{liveness.worst_case_detection_seconds:.1f}s"
        )

    def _validate_server_settings(self, config: MonitorConfiguration) -> None:
        """Validate server binding settings."""
        if config.server.port < 1024:
            self.result.add_warning(
                f"Port {config.server.port} requires elevated privileges",
                path="server.port"
            )

        static_dir = config.server.static_dir
        if static_dir and not Path(static_dir).is_dir():
            self.result.add_warning(
                f"Static directory not found: {static_dir}",
                path="server.static_dir"
            )

    def _validate_storage_settings(self, config: MonitorConfiguration) -> None:
        """Validate history sizing."""
        if config.storage.history_capacity > 10000:
            self.result.add_warning(
                f"Large history capacity ({config.storage.history_capacity}) "
                f"is held in memory for every sensor class",
                path="storage.history_capacity"
            )


def validate_config_dict(config_data: Dict[str, Any], strict: bool = False) -> ValidationResult:
    """Validate configuration dictionary (convenience function)."""
    validator = ConfigValidator(strict_mode=strict)
    return validator.validate_config(config_data)


def validate_config_file(file_path: Union[str, Path], strict: bool = False) -> ValidationResult:
    """Validate configuration YAML file (convenience function)."""
    validator = ConfigValidator(strict_mode=strict)
    return validator.validate_yaml_file(file_path)


def generate_example_config() -> Dict[str, Any]:
    """Generate example configuration dictionary."""
    return MonitorConfiguration().export_dict()
