"""
Tests for the poll loop.
"""

from __future__ import annotations

import asyncio

import pytest

from xsip_dashboard.api.models import StatsSnapshot
from xsip_dashboard.sync.fetcher import SnapshotFetcher
from xsip_dashboard.sync.poller import POLLED_RESOURCES, Poller
from xsip_dashboard.view.render import Renderer


@pytest.fixture
def fetcher(backend, document, fixed_now) -> SnapshotFetcher:
    return SnapshotFetcher(backend, Renderer(document, clock=lambda: fixed_now))


class TestPoller:
    """Tests for Poller."""

    def test_polled_resources(self):
        """Test only stats and active calls are polled."""
        assert [r.value for r in POLLED_RESOURCES] == ["stats", "active-calls"]

    def test_invalid_interval(self, fetcher):
        """Test the interval must be positive."""
        with pytest.raises(ValueError):
            Poller(fetcher, 0)

    def test_tick_fetches_and_reports_stats(self, fetcher, backend, document):
        """Test one tick fetches both resources and reports stats."""
        seen: list[StatsSnapshot] = []
        poller = Poller(fetcher, on_stats=seen.append)

        asyncio.run(poller.tick())

        assert sorted(backend.requested("GET")) == ["/calls/active", "/stats"]
        assert document.text_of("kpi-calls") == "2"
        assert document.text_of("call-count") == "2"
        assert seen[0].active_calls == 2
        assert poller.ticks == 1

    def test_tick_without_stats(self, fetcher, backend):
        """Test a failed stats fetch skips the stats callback."""
        backend.fail("GET", "/stats")
        seen: list[StatsSnapshot] = []
        asyncio.run(Poller(fetcher, on_stats=seen.append).tick())
        assert seen == []

    def test_start_ticks_immediately_and_repeats(self, fetcher, backend):
        """Test the loop ticks at start and then on every interval."""

        async def scenario() -> Poller:
            poller = Poller(fetcher, 0.02)
            poller.start()
            assert poller.running
            await asyncio.sleep(0.11)
            await poller.stop(drain=True)
            return poller

        poller = asyncio.run(scenario())
        assert not poller.running
        assert poller.ticks >= 3
        assert backend.requested("GET").count("/stats") == poller.ticks

    def test_start_twice_is_one_loop(self, fetcher):
        """Test starting a running poller does not add a second loop."""

        async def scenario() -> int:
            poller = Poller(fetcher, 10)
            poller.start()
            poller.start()
            await asyncio.sleep(0.05)
            await poller.stop(drain=True)
            return poller.ticks

        assert asyncio.run(scenario()) == 1

    def test_stop_before_start(self, fetcher):
        """Test stopping an idle poller is harmless."""
        poller = Poller(fetcher)
        asyncio.run(poller.stop())
        assert not poller.running

    def test_failures_do_not_stop_the_loop(self, fetcher, backend):
        """Test the loop keeps ticking while the backend is down."""
        backend.fail("GET", "/stats")
        backend.fail("GET", "/calls/active")

        async def scenario() -> Poller:
            poller = Poller(fetcher, 0.02)
            poller.start()
            await asyncio.sleep(0.07)
            running = poller.running
            await poller.stop(drain=True)
            assert running
            return poller

        assert asyncio.run(scenario()).ticks >= 2
