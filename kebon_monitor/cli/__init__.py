"""Command-line entry point for the telemetry monitor."""
