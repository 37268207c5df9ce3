from __future__ import annotations
import sys
from datetime import timedelta
from typing import Callable, Dict, Optional
from uuid import UUID

from node_telemetry.config.settings import Settings, TelemetrySettings, get_settings
from node_telemetry.core.errors import (
    KstatError,
    ProducerRegistryError,
    RegistryError,
    SamplerError,
)
from node_telemetry.core.kstat.sampler import KstatSampler
from node_telemetry.core.metrics.link_tracker import (
    Interval,
    KstatLinkTracker,
    LinkTelemetryTracker,
    UnsupportedLinkTracker,
)
from node_telemetry.core.registry.producer_registry import ProducerRegistry
from node_telemetry.core.types.identity_types import (
    Baseboard,
    NodeIdentifiers,
    UnknownBaseboard,
)
from node_telemetry.core.types.link_types import TargetId
from node_telemetry.utils.hostname import hostname as local_hostname
from node_telemetry.utils.logging import Logger

# The interval on which we ask the collector to poll us for metric data.
METRIC_COLLECTION_INTERVAL = timedelta(
    seconds=TelemetrySettings.metric_collection_interval
)

# The interval on which we sample link metrics.
LINK_SAMPLE_INTERVAL = timedelta(seconds=TelemetrySettings.link_sample_interval)


class MetricsManager:
    """
    Owns all telemetry produced by a node.

    The manager holds the node's identity, a producer registry keyed by the
    node id, and the link tracker for the current platform. Where kernel
    statistics are available, a kstat sampler is registered into the registry
    at construction time; elsewhere the tracking operations always fail with
    `KstatError`.

    Create one manager per process and pass it to whatever needs to start or
    stop tracking links.
    """

    def __init__(
        self,
        node_id: UUID,
        cluster_id: UUID,
        baseboard: Optional[Baseboard] = None,
        logger: Optional[Logger] = None,
        platform: Optional[str] = None,
        settings: Optional[Settings] = None,
        sampler_factory: Optional[Callable[[Logger], KstatSampler]] = None,
        hostname_resolver: Optional[Callable[[], str]] = None,
    ):
        """
        Construct a new metrics manager.

        Args:
            node_id: ID of this node, also the id of the producer registry
            cluster_id: ID of the cluster the node belongs to
            baseboard: Hardware identity used to derive the serial number
            logger: Logger to use; one is created if omitted
            platform: Platform to select the link tracker for (default: sys.platform)
            settings: Settings to use instead of the global ones
            sampler_factory: Builds the kstat sampler from a logger
            hostname_resolver: Returns the local hostname

        Raises:
            KstatError: if the kstat sampler cannot be created
            RegistryError: if the sampler cannot be registered as a producer
        """
        self.settings = settings or get_settings()
        level = "debug" if self.settings.debug else self.settings.logging.log_level
        self.logger = logger or Logger("MetricsManager", "manager", level.lower())
        self.platform = platform or sys.platform
        self._identifiers = NodeIdentifiers(
            node_id=node_id,
            cluster_id=cluster_id,
            baseboard=baseboard or UnknownBaseboard(),
        )
        self._registry = ProducerRegistry.with_id(
            node_id, logger=self.logger.child("ProducerRegistry", "registry")
        )

        if self.settings.is_kstat_platform(self.platform):
            self._links: LinkTelemetryTracker = self._kstat_tracker(
                sampler_factory or KstatSampler, hostname_resolver
            )
        else:
            self.logger.info(
                f"Kernel statistics are unavailable on '{self.platform}', "
                "link tracking is disabled"
            )
            self._links = UnsupportedLinkTracker()

    def _kstat_tracker(
        self,
        sampler_factory: Callable[[Logger], KstatSampler],
        hostname_resolver: Optional[Callable[[], str]],
    ) -> KstatLinkTracker:
        try:
            sampler = sampler_factory(self.logger.child("KstatSampler", "sampler"))
        except SamplerError as e:
            self.logger.error(f"Failed to create kstat sampler: {e}")
            raise KstatError(f"failed to create kstat sampler: {e}") from e

        try:
            self._registry.register_producer(sampler)
        except ProducerRegistryError as e:
            self.logger.error(f"Failed to register kstat sampler: {e}")
            raise RegistryError(f"failed to register kstat sampler: {e}") from e

        max_len = self.settings.telemetry.hostname_max_len
        return KstatLinkTracker(
            identifiers=self._identifiers,
            sampler=sampler,
            logger=self.logger,
            hostname_resolver=hostname_resolver or (lambda: local_hostname(max_len)),
        )

    @property
    def registry(self) -> ProducerRegistry:
        """The producer registry the collector pulls from."""
        return self._registry

    @property
    def identifiers(self) -> NodeIdentifiers:
        return self._identifiers

    @property
    def serial_number(self) -> str:
        return self._identifiers.serial

    @property
    def is_supported(self) -> bool:
        """Whether link tracking works on this platform."""
        return self._links.supported

    @property
    def collection_interval(self) -> timedelta:
        """How often the collector should poll the registry."""
        return timedelta(seconds=self.settings.telemetry.metric_collection_interval)

    def tracked_links(self) -> Dict[str, TargetId]:
        return self._links.tracked_links()

    def is_tracking(self, link_name: str) -> bool:
        return link_name in self._links.tracked_links()

    def _interval(self, interval: Optional[Interval]) -> Interval:
        if interval is None:
            return timedelta(seconds=self.settings.telemetry.link_sample_interval)
        return interval

    async def track_physical_link(
        self, link_name: str, interval: Optional[Interval] = None
    ) -> None:
        """Track metrics for a physical datalink."""
        await self._links.track_physical_link(link_name, self._interval(interval))

    async def stop_tracking_link(self, link_name: str) -> None:
        """
        Stop tracking metrics for a datalink.

        Stopping a link that is not tracked succeeds without doing anything.
        """
        await self._links.stop_tracking_link(link_name)

    async def track_virtual_link(
        self,
        link_name: str,
        hostname: str,
        interval: Optional[Interval] = None,
    ) -> TargetId:
        """
        Track metrics for a virtual datalink.

        Virtual links are not tracked by name, so `stop_tracking_link` does not
        stop them; pass the returned handle to `stop_tracking_target` instead.
        """
        return await self._links.track_virtual_link(
            link_name, hostname, self._interval(interval)
        )

    async def stop_tracking_target(self, target_id: TargetId) -> None:
        """Stop tracking a target by the handle returned when it was added."""
        await self._links.stop_tracking_target(target_id)

    async def close(self) -> None:
        """Release every tracked target and stop sampling."""
        await self._links.close()
