"""
Contract tests for the telemetry monitor HTTP API.

These tests verify that the API endpoints return the documented response
shapes and status codes, and that malformed requests are rejected without
touching stored state.

Test Categories:
- Data endpoint: telemetry submission and body validation
- Pump endpoint: actuator control requests
- Query endpoints: latest snapshot, history and reset
- Health endpoints: summary, detailed and aggregate status

Usage:
    pytest tests/contract/ -m contract
"""
