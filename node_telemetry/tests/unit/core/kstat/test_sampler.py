"""
Tests for KstatSampler.

Tests adding and removing targets, background polling, expiration, and the
Prometheus collector interface.
"""

import asyncio
import uuid
from unittest.mock import Mock, patch

import pytest

from node_telemetry.core.errors import SamplerError
from node_telemetry.core.kstat.sampler import KstatSampler
from node_telemetry.core.types.link_types import (
    CollectionDetails,
    PhysicalDataLink,
    VirtualDataLink,
)


class TestKstatSampler:
    """Test cases for KstatSampler."""

    @pytest.fixture
    def sampler(self, link_counters):
        return KstatSampler(Mock(), counters_reader=lambda: link_counters)

    @pytest.fixture
    def make_link(self, node_id, cluster_id):
        def _make(link_name="net0", cls=PhysicalDataLink, hostname="node-a"):
            return cls(
                cluster_id=cluster_id,
                node_id=node_id,
                serial="BRM42220010",
                hostname=hostname,
                link_name=link_name,
            )

        return _make

    def test_initialization_reads_psutil(self, counters_factory):
        with patch(
            "node_telemetry.core.kstat.sampler.psutil.net_io_counters",
            return_value={"net0": counters_factory()},
        ) as mock_counters:
            sampler = KstatSampler(Mock())

        mock_counters.assert_called_once_with(pernic=True, nowrap=True)
        assert sampler.target_ids() == []

    def test_initialization_failure(self):
        with patch(
            "node_telemetry.core.kstat.sampler.psutil.net_io_counters",
            side_effect=OSError("no kstat"),
        ):
            with pytest.raises(SamplerError, match="failed to open kernel statistics"):
                KstatSampler(Mock())

    def test_each_sampler_has_its_own_producer_id(self, link_counters):
        first = KstatSampler(Mock(), counters_reader=lambda: link_counters)
        second = KstatSampler(Mock(), counters_reader=lambda: link_counters)
        assert first.producer_id != second.producer_id

    @pytest.mark.asyncio
    async def test_add_target_returns_handle(self, sampler, make_link, link_counters):
        target_id = await sampler.add_target(make_link(), CollectionDetails.never(10))

        assert sampler.target_ids() == [target_id]
        state = sampler.get_target(target_id)
        assert state.counters == link_counters["net0"]
        assert state.samples == 1
        assert not state.task.done()

        await sampler.close()

    @pytest.mark.asyncio
    async def test_add_missing_datalink_fails(self, sampler, make_link):
        with pytest.raises(SamplerError, match="no such datalink"):
            await sampler.add_target(make_link("net9"), CollectionDetails.never(10))
        assert sampler.target_ids() == []

    @pytest.mark.asyncio
    async def test_add_same_link_twice_gives_distinct_handles(self, sampler, make_link):
        first = await sampler.add_target(make_link(), CollectionDetails.never(10))
        second = await sampler.add_target(make_link(), CollectionDetails.never(10))

        assert first != second
        assert len(sampler.target_ids()) == 2

        await sampler.close()

    @pytest.mark.asyncio
    async def test_remove_target_stops_polling(self, sampler, make_link):
        target_id = await sampler.add_target(make_link(), CollectionDetails.never(10))
        task = sampler.get_target(target_id).task

        await sampler.remove_target(target_id)

        assert sampler.target_ids() == []
        assert task.cancelled()

    @pytest.mark.asyncio
    async def test_remove_unknown_target_fails(self, sampler):
        with pytest.raises(SamplerError, match="no such target"):
            await sampler.remove_target(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_polling_refreshes_counters(
        self, sampler, make_link, link_counters, counters_factory
    ):
        target_id = await sampler.add_target(make_link(), CollectionDetails.never(0.01))
        link_counters["net0"] = counters_factory(500)

        await asyncio.sleep(0.2)

        state = sampler.get_target(target_id)
        assert state.counters.bytes_sent == 1500
        assert state.samples > 1

        await sampler.close()

    @pytest.mark.asyncio
    async def test_never_policy_survives_missing_link(
        self, sampler, make_link, link_counters
    ):
        target_id = await sampler.add_target(make_link(), CollectionDetails.never(0.01))
        del link_counters["net0"]

        await asyncio.sleep(0.1)

        state = sampler.get_target(target_id)
        assert state is not None
        assert state.failing_since is not None

        await sampler.close()

    @pytest.mark.asyncio
    async def test_psutil_runtime_error_keeps_polling(self, make_link, link_counters):
        failing = []

        def reader():
            if failing:
                raise RuntimeError("kstat chain changed")
            return link_counters

        sampler = KstatSampler(Mock(), counters_reader=reader)
        target_id = await sampler.add_target(make_link(), CollectionDetails.never(0.01))
        failing.append(True)

        await asyncio.sleep(0.1)

        state = sampler.get_target(target_id)
        assert state.failing_since is not None
        assert not state.task.done()

        failing.clear()
        await asyncio.sleep(0.1)
        assert state.failing_since is None

        await sampler.close()

    @pytest.mark.asyncio
    async def test_duration_policy_expires_failing_target(
        self, sampler, make_link, link_counters
    ):
        target_id = await sampler.add_target(
            make_link(), CollectionDetails.duration(0.01, 0.03)
        )
        del link_counters["net0"]

        await asyncio.sleep(0.3)

        assert target_id not in sampler.target_ids()

    @pytest.mark.asyncio
    async def test_collect_yields_counters_per_link(self, sampler, make_link):
        await sampler.add_target(make_link("net0"), CollectionDetails.never(10))
        await sampler.add_target(
            make_link("net1", cls=VirtualDataLink, hostname="guest-7"),
            CollectionDetails.never(10),
        )

        families = {family.name: family for family in sampler.collect()}

        bytes_sent = families["datalink_bytes_sent"]
        by_link = {s.labels["link_name"]: s for s in bytes_sent.samples}
        assert by_link["net0"].value == 1000
        assert by_link["net0"].labels["kind"] == "physical"
        assert by_link["net0"].labels["serial"] == "BRM42220010"
        assert by_link["net1"].value == 1001
        assert by_link["net1"].labels["kind"] == "virtual"
        assert by_link["net1"].labels["hostname"] == "guest-7"
        assert families["datalink_errors_sent"].samples[0].value == 1

        await sampler.close()

    def test_describe_lists_metric_names(self, sampler):
        names = {family.name for family in sampler.describe()}
        assert "datalink_bytes_received" in names
        assert all(not family.samples for family in sampler.describe())

    @pytest.mark.asyncio
    async def test_close_drops_all_targets(self, sampler, make_link):
        await sampler.add_target(make_link("net0"), CollectionDetails.never(10))
        await sampler.add_target(make_link("net1"), CollectionDetails.never(10))

        await sampler.close()

        assert sampler.target_ids() == []
        assert list(sampler.collect())[0].samples == []
