"""
Node Telemetry

Dynamic registry of datalink telemetry targets for a cluster node.
"""

from node_telemetry.core.errors import (
    HostnameError,
    HostnameMissingNullError,
    KstatError,
    MetricsError,
    NonUtf8HostnameError,
    RegistryError,
)
from node_telemetry.core.metrics import (
    LINK_SAMPLE_INTERVAL,
    METRIC_COLLECTION_INTERVAL,
    MetricsManager,
)
from node_telemetry.core.registry import ProducerRegistry
from node_telemetry.core.types import (
    NodeIdentifiers,
    PcBaseboard,
    ServerBaseboard,
    UnknownBaseboard,
    baseboard_serial,
)

__all__ = [
    "HostnameError",
    "HostnameMissingNullError",
    "KstatError",
    "MetricsError",
    "NonUtf8HostnameError",
    "RegistryError",
    "LINK_SAMPLE_INTERVAL",
    "METRIC_COLLECTION_INTERVAL",
    "MetricsManager",
    "ProducerRegistry",
    "NodeIdentifiers",
    "PcBaseboard",
    "ServerBaseboard",
    "UnknownBaseboard",
    "baseboard_serial",
]
