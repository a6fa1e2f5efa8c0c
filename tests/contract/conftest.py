"""Fixtures for API contract tests."""

import pytest
from fastapi.testclient import TestClient

from kebon_monitor.lib.api_server import create_app


@pytest.fixture
def client(monitor_config, monitor_state):
    """TestClient bound to an isolated MonitorState, lifespan included."""
    app = create_app(monitor_config, monitor_state)
    with TestClient(app) as test_client:
        yield test_client
