"""Ruang Kebon telemetry monitor."""

__version__ = "1.0.0"
