"""
Kernel statistics sampler for datalinks.

The sampler polls per-link counters through psutil, one asyncio task per
target, and caches the latest counters. It is itself a Prometheus custom
collector: the collector pulls cached samples through `collect()` without
triggering a kernel read.
"""

from __future__ import annotations
import asyncio
import contextlib
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional
from uuid import uuid4

import psutil

from node_telemetry.core.errors import SamplerError
from node_telemetry.core.kstat.link import empty_families, link_families
from node_telemetry.core.types.link_types import CollectionDetails, LinkTarget, TargetId
from node_telemetry.utils.logging import Logger

CountersReader = Callable[[], Mapping[str, Any]]

# Errors psutil raises when kernel statistics cannot be read
READ_ERRORS = (OSError, RuntimeError, NotImplementedError)


def read_link_counters() -> Mapping[str, Any]:
    """Read the counters of every datalink known to the kernel."""
    return psutil.net_io_counters(pernic=True, nowrap=True)


@dataclass
class SampledTarget:
    """Sampling state of one target."""

    target: LinkTarget
    details: CollectionDetails
    counters: Any = None
    samples: int = 0
    failing_since: Optional[float] = None
    task: Optional[asyncio.Task] = field(default=None, repr=False)


class KstatSampler:
    """Samples datalink counters for a dynamic set of targets."""

    def __init__(
        self,
        logger: Optional[Logger] = None,
        counters_reader: Optional[CountersReader] = None,
    ):
        self.producer_id = uuid4()
        self.logger = logger or Logger("KstatSampler", "sampler")
        self._read_counters = counters_reader or read_link_counters
        self._targets: Dict[TargetId, SampledTarget] = {}
        self._lock = threading.Lock()

        try:
            self._read_counters()
        except READ_ERRORS as e:
            raise SamplerError(f"failed to open kernel statistics: {e}") from e

    async def add_target(
        self, target: LinkTarget, details: CollectionDetails
    ) -> TargetId:
        """
        Start sampling `target` according to `details`.

        Returns:
            The handle identifying the target in later calls.

        Raises:
            SamplerError: if the datalink does not exist or cannot be read.
        """
        counters = await self._sample(target.link_name)
        target_id = TargetId(uuid4())
        state = SampledTarget(target=target, details=details, counters=counters, samples=1)
        with self._lock:
            self._targets[target_id] = state
        state.task = asyncio.create_task(
            self._poll(target_id, state), name=f"kstat-{target.link_name}"
        )
        self.logger.debug(
            f"Added {target.kind} link '{target.link_name}' as target {target_id}, "
            f"sampling every {details.interval.total_seconds()}s"
        )
        return target_id

    async def remove_target(self, target_id: TargetId) -> None:
        """
        Stop sampling a target and forget its samples.

        Raises:
            SamplerError: if no target has this id.
        """
        with self._lock:
            state = self._targets.pop(target_id, None)
        if state is None:
            raise SamplerError(f"no such target: {target_id}")
        await self._stop(state)
        self.logger.debug(f"Removed target {target_id} ('{state.target.link_name}')")

    def target_ids(self) -> List[TargetId]:
        with self._lock:
            return list(self._targets)

    def get_target(self, target_id: TargetId) -> Optional[SampledTarget]:
        with self._lock:
            return self._targets.get(target_id)

    async def close(self) -> None:
        """Stop every polling task and drop all targets."""
        with self._lock:
            states = list(self._targets.values())
            self._targets.clear()
        for state in states:
            await self._stop(state)

    def collect(self):
        with self._lock:
            samples = [
                (state.target, state.counters)
                for state in self._targets.values()
                if state.counters is not None
            ]
        return link_families(samples)

    def describe(self):
        return list(empty_families().values())

    async def _sample(self, link_name: str) -> Any:
        try:
            counters = await asyncio.to_thread(self._read_counters)
        except READ_ERRORS as e:
            raise SamplerError(f"failed to read datalink statistics: {e}") from e
        if link_name not in counters:
            raise SamplerError(f"no such datalink: '{link_name}'")
        return counters[link_name]

    async def _poll(self, target_id: TargetId, state: SampledTarget) -> None:
        interval = state.details.interval.total_seconds()
        expiration = state.details.expiration
        while True:
            await asyncio.sleep(interval)
            try:
                counters = await self._sample(state.target.link_name)
            except SamplerError as e:
                now = time.monotonic()
                if state.failing_since is None:
                    state.failing_since = now
                self.logger.warning(f"Sampling target {target_id} failed: {e}")
                if (
                    expiration is not None
                    and now - state.failing_since >= expiration.total_seconds()
                ):
                    with self._lock:
                        self._targets.pop(target_id, None)
                    self.logger.info(
                        f"Expired target {target_id} ('{state.target.link_name}') "
                        f"after {expiration.total_seconds()}s of failures"
                    )
                    return
                continue

            with self._lock:
                state.counters = counters
                state.samples += 1
                state.failing_since = None

    async def _stop(self, state: SampledTarget) -> None:
        task = state.task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
