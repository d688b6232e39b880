"""
Shared fixtures for the fiatbridge test suites.
"""

import pytest

from fiatbridge.domain import Domain
from fiatbridge.logging import LogConfig, LogLevel, MemoryHandler, get_manager, setup_logging
from fiatbridge.testing import BridgeFixtures


@pytest.fixture
def bridges():
    """A wired lock/mint bridge pair."""
    return BridgeFixtures()


@pytest.fixture
def funded_user(bridges):
    """A user holding 1000 native tokens on the lock side."""
    return bridges.create_user("alice", balance=1000)


@pytest.fixture
def domain():
    """An empty domain."""
    return Domain("test", 1337)


@pytest.fixture
def memory_logs():
    """Capture log entries at debug level in memory."""
    setup_logging(LogConfig(level=LogLevel.DEBUG, handlers=["memory"]))
    handler = MemoryHandler()
    get_manager().add_handler("memory", handler)
    yield handler
    setup_logging(LogConfig())
