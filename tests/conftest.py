"""
Pytest configuration and fixtures for brisk-log tests.
"""

from unittest.mock import Mock, patch

import pytest
from brisk_log import LoggerRegistry, reset_registry
from brisk_log.sinks import Sink


@pytest.fixture(autouse=True)
def fresh_process_registry():
    """Give every test its own process registry."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def registry():
    """Create an isolated registry."""
    registry = LoggerRegistry()
    yield registry
    registry.close()


@pytest.fixture
def mock_sink():
    """Replace sink construction with a shared mock that records writes."""
    sink = Mock(spec=Sink)
    with patch("brisk_log.logger.build_sink", return_value=sink):
        yield sink
