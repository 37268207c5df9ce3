"""Datalink counters exported for every sampled link."""

from __future__ import annotations
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from prometheus_client.core import CounterMetricFamily

from node_telemetry.core.types.link_types import LINK_LABEL_NAMES, LinkTarget

# (metric name, help text, psutil counter attribute)
LINK_METRICS: List[Tuple[str, str, str]] = [
    ("datalink_bytes_sent", "Total bytes sent on the link", "bytes_sent"),
    ("datalink_bytes_received", "Total bytes received on the link", "bytes_recv"),
    ("datalink_packets_sent", "Total packets sent on the link", "packets_sent"),
    ("datalink_packets_received", "Total packets received on the link", "packets_recv"),
    ("datalink_errors_sent", "Total errors while sending on the link", "errout"),
    ("datalink_errors_received", "Total errors while receiving on the link", "errin"),
]


def empty_families() -> Dict[str, CounterMetricFamily]:
    return {
        name: CounterMetricFamily(name, documentation, labels=LINK_LABEL_NAMES)
        for name, documentation, _ in LINK_METRICS
    }


def link_families(
    samples: Iterable[Tuple[LinkTarget, Any]],
) -> Iterator[CounterMetricFamily]:
    """Build one counter family per link metric from (target, counters) pairs."""
    families = empty_families()
    for target, counters in samples:
        labels = target.labels()
        label_values = [labels[name] for name in LINK_LABEL_NAMES]
        for name, _, attribute in LINK_METRICS:
            families[name].add_metric(label_values, getattr(counters, attribute))
    yield from families.values()
