"""
Metrics System

Node metrics management and datalink tracking.
"""

from .metrics_manager import (
    LINK_SAMPLE_INTERVAL,
    METRIC_COLLECTION_INTERVAL,
    MetricsManager,
)
from .link_tracker import KstatLinkTracker, LinkTelemetryTracker, UnsupportedLinkTracker
from .target_tracker import TargetTracker

__all__ = [
    "LINK_SAMPLE_INTERVAL",
    "METRIC_COLLECTION_INTERVAL",
    "MetricsManager",
    "KstatLinkTracker",
    "LinkTelemetryTracker",
    "UnsupportedLinkTracker",
    "TargetTracker",
]
