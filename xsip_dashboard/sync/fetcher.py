"""
Per-resource snapshot fetching.

A fetch is one backend request followed, on success, by one render. Any
failure (transport, status, payload or schema) ends the fetch quietly: the
previous snapshot and its rendering stay in place and nothing is retried
until the caller fetches again.

Overlapping fetches of the same resource are not cancelled. By default
whichever response resolves last is rendered last. With
``discard_stale=True`` each fetch gets a sequence number and a response
older than the last one applied for its resource is dropped.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from xsip_dashboard.api.models import (
    CallSession,
    PlatformConfig,
    Resource,
    Snapshot,
    StatsSnapshot,
    Subscriber,
)
from xsip_dashboard.core.exceptions import BackendError, UnknownResourceError
from xsip_dashboard.core.logging import EventType, get_logger, log_event
from xsip_dashboard.core.protocols import BackendTransport
from xsip_dashboard.view.render import Renderer

logger = get_logger(__name__)

_ADAPTERS: dict[Resource, TypeAdapter[Any]] = {
    Resource.STATS: TypeAdapter(StatsSnapshot),
    Resource.SUBSCRIBERS: TypeAdapter(list[Subscriber]),
    Resource.ACTIVE_CALLS: TypeAdapter(list[CallSession]),
    Resource.CONFIG: TypeAdapter(PlatformConfig),
}

_COLLECTIONS = frozenset({Resource.SUBSCRIBERS, Resource.ACTIVE_CALLS})


def parse_snapshot(resource: Resource, payload: Any) -> Snapshot:
    """Validate a decoded payload into the resource's snapshot type.

    A null collection is an empty collection.

    Raises:
        pydantic.ValidationError: The payload does not have the expected shape.
    """
    if payload is None and resource in _COLLECTIONS:
        payload = []
    return _ADAPTERS[resource].validate_python(payload)


class SnapshotFetcher:
    """Fetches resource snapshots and hands successful ones to the renderer."""

    def __init__(
        self,
        client: BackendTransport,
        renderer: Renderer,
        *,
        discard_stale: bool = False,
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._discard_stale = discard_stale
        self._sequence = itertools.count(1)
        self._applied: dict[Resource, int] = {}
        self._snapshots: dict[Resource, Snapshot] = {}

    def last_snapshot(self, resource: Resource) -> Snapshot | None:
        """Most recently rendered snapshot for ``resource``, if any."""
        return self._snapshots.get(resource)

    async def fetch(self, resource: Resource | str) -> Snapshot | None:
        """Fetch and render one resource.

        Returns the rendered snapshot, or None when the fetch failed or its
        response was discarded. Never raises for backend failures.
        """
        try:
            resource = Resource(resource)
        except ValueError as e:
            raise UnknownResourceError(resource) from e

        sequence = next(self._sequence)

        try:
            payload = await asyncio.to_thread(self._client.get_json, resource.path)
            snapshot = parse_snapshot(resource, payload)
        except (BackendError, ValidationError) as e:
            log_event(logger, logging.DEBUG, EventType.SNAPSHOT_FAILED, resource.value, str(e))
            return None

        if self._discard_stale and sequence < self._applied.get(resource, 0):
            log_event(
                logger,
                logging.DEBUG,
                EventType.SNAPSHOT_DISCARDED,
                resource.value,
                "older than the last applied response",
                sequence=sequence,
                applied=self._applied[resource],
            )
            return None

        self._applied[resource] = sequence
        self._snapshots[resource] = snapshot
        self._renderer.render(resource, snapshot)
        log_event(logger, logging.DEBUG, EventType.SNAPSHOT_FETCHED, resource.value, "rendered", sequence=sequence)
        return snapshot
