"""
Global pytest configuration and fixtures.

This file configures pytest behavior for all tests in the project.
"""

import uuid
from collections import namedtuple
from unittest.mock import Mock

import pytest

from node_telemetry.config.settings import Settings, reset_settings
from node_telemetry.core.kstat.sampler import KstatSampler
from node_telemetry.core.metrics.metrics_manager import MetricsManager
from node_telemetry.core.types.identity_types import UnknownBaseboard

# Same fields as psutil's per-NIC counters
LinkCounters = namedtuple(
    "LinkCounters",
    "bytes_sent bytes_recv packets_sent packets_recv errin errout dropin dropout",
)

NODE_ID = uuid.UUID("6f0a4c54-6a53-4a4e-9a3b-0d1c2b3a4f51")
CLUSTER_ID = uuid.UUID("0c7f5f39-1d5e-4c41-8f5a-3c1b2e6d7a80")


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "slow: mark test as slow running test")


def make_counters(seed: int = 0) -> LinkCounters:
    return LinkCounters(
        bytes_sent=1000 + seed,
        bytes_recv=2000 + seed,
        packets_sent=10 + seed,
        packets_recv=20 + seed,
        errin=0,
        errout=1,
        dropin=0,
        dropout=0,
    )


@pytest.fixture(autouse=True)
def clean_settings():
    """Make sure no test leaks global settings into another."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def link_counters():
    """Counters the fake kernel reports, keyed by link name. Mutable."""
    return {"net0": make_counters(0), "net1": make_counters(1)}


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def mock_logger():
    logger = Mock()
    logger.child.return_value = logger
    return logger


@pytest.fixture
def sampler_factory(link_counters):
    """Builds real samplers reading from the fake kernel counters."""

    def _factory(logger):
        return KstatSampler(logger, counters_reader=lambda: link_counters)

    return _factory


@pytest.fixture
def make_manager(settings, mock_logger, sampler_factory):
    """Factory for metrics managers on a kstat-capable platform by default."""

    def _make(platform="sunos5", **overrides):
        kwargs = dict(
            baseboard=UnknownBaseboard(),
            logger=mock_logger,
            platform=platform,
            settings=settings,
            sampler_factory=sampler_factory,
            hostname_resolver=lambda: "node-a",
        )
        kwargs.update(overrides)
        return MetricsManager(NODE_ID, CLUSTER_ID, **kwargs)

    return _make


@pytest.fixture
def counters_factory():
    return make_counters


@pytest.fixture
def node_id():
    return NODE_ID


@pytest.fixture
def cluster_id():
    return CLUSTER_ID
