"""
Producer registry polled by the metrics collector.

A thin layer over a `prometheus_client.CollectorRegistry`: each producer is a
Prometheus custom collector carrying a `producer_id`, and the registry refuses
a second producer with the same id or with colliding metric names.
"""

from __future__ import annotations
import threading
from typing import Dict, List, Optional, Protocol, runtime_checkable
from uuid import UUID

from prometheus_client import CollectorRegistry, generate_latest

from node_telemetry.core.errors import ProducerRegistryError
from node_telemetry.utils.logging import Logger


@runtime_checkable
class MetricProducer(Protocol):
    """Protocol for objects the collector can pull samples from."""

    producer_id: UUID

    def collect(self): ...

    def describe(self): ...


class ProducerRegistry:
    """Directory of metric producers for one node, keyed by node id."""

    def __init__(self, registry_id: UUID, logger: Optional[Logger] = None):
        self.id = registry_id
        self.logger = logger or Logger("ProducerRegistry", "registry")
        self._collector_registry = CollectorRegistry(auto_describe=True)
        self._producers: Dict[UUID, MetricProducer] = {}
        self._lock = threading.Lock()

    @classmethod
    def with_id(
        cls, registry_id: UUID, logger: Optional[Logger] = None
    ) -> "ProducerRegistry":
        """Create an empty registry identified by `registry_id`."""
        return cls(registry_id, logger=logger)

    @property
    def collector_registry(self) -> CollectorRegistry:
        """The Prometheus registry scraped by the pull path."""
        return self._collector_registry

    @property
    def producers(self) -> List[MetricProducer]:
        with self._lock:
            return list(self._producers.values())

    def register_producer(self, producer: MetricProducer) -> None:
        """
        Register a producer.

        Raises:
            ProducerRegistryError: if a producer with the same id is already
                registered, or its metric names collide with another producer.
        """
        with self._lock:
            if producer.producer_id in self._producers:
                raise ProducerRegistryError(
                    f"producer {producer.producer_id} is already registered"
                )
            try:
                self._collector_registry.register(producer)
            except ValueError as e:
                raise ProducerRegistryError(str(e)) from e
            self._producers[producer.producer_id] = producer

        self.logger.debug(
            f"Registered producer {producer.producer_id} in registry {self.id}"
        )

    def unregister_producer(self, producer: MetricProducer) -> None:
        """Remove a previously registered producer."""
        with self._lock:
            if self._producers.pop(producer.producer_id, None) is None:
                raise ProducerRegistryError(
                    f"producer {producer.producer_id} is not registered"
                )
            self._collector_registry.unregister(producer)

        self.logger.debug(f"Unregistered producer {producer.producer_id}")

    def exposition(self) -> bytes:
        """Render all producers in the Prometheus text format."""
        return generate_latest(self._collector_registry)
