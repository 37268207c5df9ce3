"""
Datalink tracking backends.

`LinkTelemetryTracker` is the interface the metrics manager delegates to.
`KstatLinkTracker` samples links through the kstat sampler;
`UnsupportedLinkTracker` is used where kernel statistics are unavailable and
fails every operation without touching any state.
"""

from __future__ import annotations
import asyncio
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Callable, Dict, Tuple, Type, Union

from pydantic import ValidationError

from node_telemetry.core.errors import KstatError, SamplerError
from node_telemetry.core.kstat.sampler import KstatSampler
from node_telemetry.core.metrics.target_tracker import TargetTracker
from node_telemetry.core.types.identity_types import NodeIdentifiers
from node_telemetry.core.types.link_types import (
    CollectionDetails,
    LinkTarget,
    PhysicalDataLink,
    TargetId,
    VirtualDataLink,
)
from node_telemetry.utils.logging import Logger

Interval = Union[timedelta, float]

UNSUPPORTED_MESSAGE = "kstat metrics are not supported on this platform"


class LinkTelemetryTracker(ABC):
    """Interface for starting and stopping datalink telemetry."""

    supported: bool = True

    @abstractmethod
    async def track_physical_link(self, link_name: str, interval: Interval) -> None:
        """Track metrics for a physical datalink."""

    @abstractmethod
    async def stop_tracking_link(self, link_name: str) -> None:
        """Stop tracking metrics for a datalink tracked by name."""

    @abstractmethod
    async def track_virtual_link(
        self, link_name: str, hostname: str, interval: Interval
    ) -> TargetId:
        """Track metrics for a virtual datalink."""

    @abstractmethod
    async def stop_tracking_target(self, target_id: TargetId) -> None:
        """Stop tracking a target by its sampler handle."""

    @abstractmethod
    def tracked_links(self) -> Dict[str, TargetId]:
        """Snapshot of the links tracked by name."""

    async def close(self) -> None:
        return None


class KstatLinkTracker(LinkTelemetryTracker):
    """Tracks datalinks by sampling their kernel statistics."""

    def __init__(
        self,
        identifiers: NodeIdentifiers,
        sampler: KstatSampler,
        logger: Logger,
        hostname_resolver: Callable[[], str],
    ):
        self.identifiers = identifiers
        self.sampler = sampler
        self.logger = logger
        self.hostname_resolver = hostname_resolver
        # TODO: namespace keys (e.g. "datalink:{name}") once disks or other
        # kinds of target are tracked here as well.
        self.tracker = TargetTracker()

    async def track_physical_link(self, link_name: str, interval: Interval) -> None:
        hostname = await asyncio.to_thread(self.hostname_resolver)
        link, details = self._describe(PhysicalDataLink, link_name, hostname, interval)
        target_id = await self._add(link, details)

        previous = self.tracker.insert(link_name, target_id)
        self.logger.info(f"Tracking physical link '{link_name}' as {target_id}")
        if previous is not None:
            # The displaced handle must not keep sampling.
            self.logger.info(
                f"Link '{link_name}' was already tracked as {previous}, releasing it"
            )
            await self._release(previous, link_name)

    async def stop_tracking_link(self, link_name: str) -> None:
        target_id = self.tracker.remove(link_name)
        if target_id is None:
            self.logger.debug(f"Link '{link_name}' is not tracked, nothing to stop")
            return
        await self._release(target_id, link_name)
        self.logger.info(f"Stopped tracking link '{link_name}'")

    async def track_virtual_link(
        self, link_name: str, hostname: str, interval: Interval
    ) -> TargetId:
        link, details = self._describe(VirtualDataLink, link_name, hostname, interval)
        # Virtual links are not recorded by name; the handle is the only
        # way to stop them.
        target_id = await self._add(link, details)
        self.logger.info(
            f"Tracking virtual link '{link_name}' of '{hostname}' as {target_id}"
        )
        return target_id

    async def stop_tracking_target(self, target_id: TargetId) -> None:
        # A handle may also be recorded under a link name
        names = self.tracker.remove_handle(target_id)
        if names:
            self.logger.info(f"Stopped tracking link(s) {', '.join(names)} by handle")
        await self._release(target_id, ", ".join(names) or str(target_id))

    def tracked_links(self) -> Dict[str, TargetId]:
        return self.tracker.snapshot()

    async def close(self) -> None:
        await self.sampler.close()
        for name in self.tracker.snapshot():
            self.tracker.remove(name)

    def _describe(
        self,
        link_type: Type[LinkTarget],
        link_name: str,
        hostname: str,
        interval: Interval,
    ) -> Tuple[LinkTarget, CollectionDetails]:
        try:
            link = link_type(
                cluster_id=self.identifiers.cluster_id,
                node_id=self.identifiers.node_id,
                serial=self.identifiers.serial,
                hostname=hostname,
                link_name=link_name,
            )
            details = CollectionDetails.never(interval)
        except ValidationError as e:
            self.logger.warning(f"Invalid link '{link_name}': {e}")
            raise KstatError(f"invalid link '{link_name}': {e}") from e
        return link, details

    async def _add(self, link: LinkTarget, details: CollectionDetails) -> TargetId:
        try:
            return await self.sampler.add_target(link, details)
        except SamplerError as e:
            self.logger.warning(f"Failed to track {link.kind} link '{link.link_name}': {e}")
            raise KstatError(f"failed to track link '{link.link_name}': {e}") from e

    async def _release(self, target_id: TargetId, description: str) -> None:
        try:
            await self.sampler.remove_target(target_id)
        except SamplerError as e:
            self.logger.warning(f"Failed to release target {target_id} ({description}): {e}")
            raise KstatError(f"failed to stop tracking '{description}': {e}") from e


class UnsupportedLinkTracker(LinkTelemetryTracker):
    """Stand-in for platforms without kernel statistics; every call fails."""

    supported = False

    async def track_physical_link(self, link_name: str, interval: Interval) -> None:
        raise KstatError(UNSUPPORTED_MESSAGE)

    async def stop_tracking_link(self, link_name: str) -> None:
        raise KstatError(UNSUPPORTED_MESSAGE)

    async def track_virtual_link(
        self, link_name: str, hostname: str, interval: Interval
    ) -> TargetId:
        raise KstatError(UNSUPPORTED_MESSAGE)

    async def stop_tracking_target(self, target_id: TargetId) -> None:
        raise KstatError(UNSUPPORTED_MESSAGE)

    def tracked_links(self) -> Dict[str, TargetId]:
        return {}
