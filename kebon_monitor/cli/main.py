"""Main CLI application for the telemetry monitor."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import structlog

from ..lib.api_server import run_server
from ..lib.config import (
    ConfigurationError,
    export_configuration,
    load_configuration,
    load_default_configuration,
)
from ..models import MonitorConfiguration
from ..services import MonitorState, seed_demo_data


logger = structlog.get_logger(__name__)

PROBED_ENDPOINTS = [
    "/api/health",
    "/api/health/detailed",
    "/api/status/all",
    "/api/latest/power",
    "/api/all/power",
]


def configure_logging(level: str = "INFO", structured: bool = False) -> None:
    """Configure structlog with a console or JSON renderer."""
    renderer = (
        structlog.processors.JSONRenderer()
        if structured
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="kebon-monitor",
        description="Ruang Kebon telemetry monitor - sensor ingestion and liveness API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kebon-monitor                              # Start on 0.0.0.0:3000 with defaults
  kebon-monitor --config config.yaml         # Load specific configuration
  kebon-monitor --port 8080 --debug          # Override port, verbose logging
  kebon-monitor --demo                       # Seed demo readings on startup
  kebon-monitor --export-config config.yaml  # Export default config and exit
  kebon-monitor --test-endpoints             # Probe a running server and exit
        """
    )

    parser.add_argument("--config", type=str, help="Path to YAML configuration file")
    parser.add_argument("--host", type=str, help="Host to bind (overrides config)")
    parser.add_argument("--port", type=int, help="Port to listen on (overrides config)")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Start with one demo reading per sensor class"
    )
    parser.add_argument(
        "--export-config",
        type=str,
        metavar="PATH",
        help="Export default configuration to PATH and exit"
    )
    parser.add_argument(
        "--test-endpoints",
        action="store_true",
        help="Test the API endpoints of a running server and exit"
    )

    return parser


def resolve_configuration(args: argparse.Namespace) -> MonitorConfiguration:
    """Load the configuration file if given, then apply CLI overrides."""
    if args.config:
        config = load_configuration(args.config)
    else:
        config = load_default_configuration()

    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.debug:
        config.logging.level = "DEBUG"

    return config


async def probe_endpoints(host: str, port: int) -> int:
    """Probe the read-only endpoints of a running server."""
    import httpx

    base_url = f"http://{host}:{port}"
    failures = 0

    logger.info("Testing API endpoints", base_url=base_url)

    async with httpx.AsyncClient() as client:
        for endpoint in PROBED_ENDPOINTS:
            url = f"{base_url}{endpoint}"
            try:
                response = await client.get(url, timeout=5.0)

                if response.status_code == 200:
                    logger.info("✓ Endpoint OK", endpoint=endpoint, status=response.status_code)
                else:
                    failures += 1
                    logger.warning("✗ Endpoint error", endpoint=endpoint, status=response.status_code)

            except httpx.ConnectError:
                failures += 1
                logger.error("✗ Connection failed", endpoint=endpoint, message="Server not running?")
            except httpx.TimeoutException:
                failures += 1
                logger.error("✗ Timeout", endpoint=endpoint)

    logger.info("Endpoint testing completed", failures=failures)
    return 0 if failures == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_configuration(args)
    except ConfigurationError as e:
        configure_logging()
        logger.error("Failed to load configuration", error=str(e))
        return 1

    configure_logging(config.logging.level, config.logging.structured)

    if args.export_config:
        try:
            export_configuration(config, args.export_config)
        except ConfigurationError as e:
            logger.error("Failed to export configuration", error=str(e))
            return 1
        logger.info("Configuration exported successfully", path=args.export_config)
        return 0

    if args.test_endpoints:
        probe_host = "127.0.0.1" if config.server.host == "0.0.0.0" else config.server.host
        return asyncio.run(probe_endpoints(probe_host, config.server.port))

    state = MonitorState.from_configuration(config)
    if args.demo:
        logger.info("Starting API server in demo mode")
        seed_demo_data(state)

    try:
        run_server(config, state, debug=args.debug)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error("Server error", error=str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
