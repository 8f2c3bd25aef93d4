"""
Fixed-interval refresh of the always-visible resources.

Stats and active calls are fetched on every tick whichever page is shown.
Subscribers and config are left to navigation. Ticks are launched on a
fixed cadence and not awaited by the loop, so a slow backend can leave
several ticks in flight at once.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from xsip_dashboard.api.models import Resource, StatsSnapshot
from xsip_dashboard.core.logging import EventType, get_logger, log_event
from xsip_dashboard.sync.fetcher import SnapshotFetcher

logger = get_logger(__name__)

POLLED_RESOURCES: tuple[Resource, ...] = (Resource.STATS, Resource.ACTIVE_CALLS)


class Poller:
    """Drives periodic fetches on the running event loop."""

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        interval_seconds: float = 4.0,
        *,
        on_stats: Callable[[StatsSnapshot], None] | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._fetcher = fetcher
        self._interval = interval_seconds
        self._on_stats = on_stats
        self._loop_task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self.ticks = 0

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def tick(self) -> None:
        """Fetch every polled resource concurrently."""
        self.ticks += 1
        results = await asyncio.gather(*(self._fetcher.fetch(resource) for resource in POLLED_RESOURCES))
        stats = results[0]
        if self._on_stats is not None and isinstance(stats, StatsSnapshot):
            self._on_stats(stats)

    def start(self) -> None:
        """Start ticking now and every interval after. Needs a running loop."""
        if self.running:
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._run())
        log_event(logger, logging.INFO, EventType.POLLER_STARTED, "poller", "started", interval=self._interval)

    async def _run(self) -> None:
        while True:
            task = asyncio.create_task(self.tick())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            await asyncio.sleep(self._interval)

    async def stop(self, *, drain: bool = False) -> None:
        """Stop scheduling ticks.

        In-flight ticks are never cancelled; with ``drain`` they are awaited.
        """
        if self._loop_task is not None:
            self._loop_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._loop_task
            self._loop_task = None
            log_event(logger, logging.INFO, EventType.POLLER_STOPPED, "poller", "stopped", ticks=self.ticks)
        if drain and self._in_flight:
            await asyncio.gather(*self._in_flight)
