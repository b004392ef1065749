"""Pytest configuration and fixtures for icon-bridge tests."""

import logging
import os
import tempfile

import pytest

# Redirect log files and settings before any icon_bridge module is
# imported: module-level loggers set up the file handler on import.
os.environ.setdefault(
    "ICON_BRIDGE_LOG_DIR", tempfile.mkdtemp(prefix="icon-bridge-logs-")
)
os.environ.setdefault(
    "ICON_BRIDGE_CONFIG_DIR", tempfile.mkdtemp(prefix="icon-bridge-config-")
)

from tests.fakes import (  # noqa: E402
    FakeDocument,
    FakeTransport,
    RecordingUiChannel,
)


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("icon_bridge"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture
def transport():
    """Provide a scripted HTTP transport."""
    return FakeTransport()


@pytest.fixture
def ui():
    """Provide a UI channel that records every event."""
    return RecordingUiChannel()


@pytest.fixture
def document():
    """Provide an in-memory host document."""
    return FakeDocument()
