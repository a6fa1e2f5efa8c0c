"""Command-line interface for configuration management.

Provides CLI tools for validating, creating and inspecting telemetry
monitor configuration files.

Usage:
    python -m kebon_monitor.lib.config [COMMAND] [OPTIONS]

Commands:
    validate    - Validate configuration file
    create      - Create new configuration file
    show        - Show effective configuration (file plus environment overrides)

Examples:
    # Validate configuration
    python -m kebon_monitor.lib.config validate config.yaml

    # Create default configuration
    python -m kebon_monitor.lib.config create --output config.yaml

    # Show the effective configuration as JSON
    python -m kebon_monitor.lib.config show config.yaml --format json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from . import (
    ConfigManager,
    ConfigurationError,
    dict_to_yaml,
    export_configuration,
)
from ...models import MonitorConfiguration
from .validation import validate_config_file


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="python -m kebon_monitor.lib.config",
        description="Telemetry Monitor Configuration Management",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        metavar="COMMAND"
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate configuration file"
    )
    validate_parser.add_argument(
        "config_file",
        type=Path,
        help="Path to configuration file to validate"
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat unknown keys as errors"
    )
    validate_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format for validation results"
    )

    create_parser_ = subparsers.add_parser(
        "create",
        help="Create new configuration file"
    )
    create_parser_.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output file path"
    )
    create_parser_.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file"
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Show effective configuration"
    )
    show_parser.add_argument(
        "config_file",
        type=Path,
        help="Path to configuration file"
    )
    show_parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Output format"
    )

    return parser


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a configuration file."""
    result = validate_config_file(args.config_file, strict=args.strict)

    if args.format == "json":
        print(json.dumps(result.get_summary(), indent=2))
    else:
        result.print_results(verbose=args.verbose)

    return 0 if result.is_valid else 1


def cmd_create(args: argparse.Namespace) -> int:
    """Write the default configuration."""
    if args.output.exists() and not args.force:
        print(f"Error: {args.output} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    export_configuration(MonitorConfiguration(), args.output)
    print(f"✓ Configuration created: {args.output}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the effective configuration."""
    config = ConfigManager(args.config_file).load_config()
    data = config.export_dict()

    if args.format == "json":
        print(json.dumps(data, indent=2))
    else:
        print(dict_to_yaml(data), end="")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    commands = {
        "validate": cmd_validate,
        "create": cmd_create,
        "show": cmd_show,
    }

    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        return commands[args.command](args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
