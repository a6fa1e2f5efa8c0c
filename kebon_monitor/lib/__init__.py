"""Transport and configuration libraries for the telemetry monitor."""
