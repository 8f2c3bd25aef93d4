"""
Dashboard controller: one owner for the document and all view state.

Wires the backend client, renderer, fetcher, mutation client, navigator,
modal controller, activity log and poller around a single document.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from xsip_dashboard.api.models import Resource, RowAction, StatsSnapshot
from xsip_dashboard.backend.client import CarrierBackendClient
from xsip_dashboard.core.config import DashboardConfig, get_config
from xsip_dashboard.core.logging import get_logger
from xsip_dashboard.core.protocols import BackendTransport
from xsip_dashboard.sync.fetcher import SnapshotFetcher
from xsip_dashboard.sync.mutations import MutationClient
from xsip_dashboard.sync.poller import Poller
from xsip_dashboard.view.activity import ActivityLog
from xsip_dashboard.view.dom import Document
from xsip_dashboard.view.layout import build_dashboard_document
from xsip_dashboard.view.modals import ModalController
from xsip_dashboard.view.navigation import Navigator
from xsip_dashboard.view.render import Renderer

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DashboardController:
    """Owns the dashboard document and every component that touches it."""

    def __init__(
        self,
        config: DashboardConfig | None = None,
        client: BackendTransport | None = None,
        *,
        document: Document | None = None,
        clock: Callable[[], datetime] = _utcnow,
        local_clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or get_config()
        self.client = client or CarrierBackendClient(config=self.config.backend)
        self.document = document or build_dashboard_document()

        sync = self.config.sync
        self.activity = ActivityLog(
            sync.activity_log_capacity,
            clock=local_clock,
            element=self.document.get("activity-log"),
        )
        self.modals = ModalController(self.document)
        self.renderer = Renderer(self.document, clock=clock)
        self.fetcher = SnapshotFetcher(
            self.client,
            self.renderer,
            discard_stale=sync.discard_stale_responses,
        )
        self.navigator = Navigator(self.document, refresh=self.fetcher.fetch)
        self.mutations = MutationClient(
            self.client,
            self.fetcher,
            self.modals,
            self.activity,
            self.document,
            default_tenant=sync.default_tenant,
        )
        self.throughput: deque[int] = deque(maxlen=sync.throughput_window)
        self.poller = Poller(
            self.fetcher,
            sync.poll_interval_seconds,
            on_stats=self._record_throughput,
        )

    def _record_throughput(self, stats: StatsSnapshot) -> None:
        self.throughput.append(stats.active_calls)
        self.renderer.render_throughput(
            list(self.throughput),
            step_seconds=self.config.sync.poll_interval_seconds,
        )

    async def start(self) -> None:
        """Start the poll loop on the running event loop."""
        self.poller.start()

    async def stop(self, drain: bool = False) -> None:
        await self.poller.stop(drain=drain)

    def reset_view(self) -> None:
        """Return the view state to what a freshly loaded page shows.

        The initial page is active, every dialog is closed with its inputs
        cleared and the activity log is empty. Rendered snapshots are kept.
        """
        self.navigator.reset()
        self.modals.close_all()
        for form in self.document.query_class("modal-form"):
            form.reset()
        self.activity.clear()

    async def refresh(self, resource: Resource | str) -> Any:
        return await self.fetcher.fetch(resource)

    async def dispatch_action(
        self,
        action: RowAction | str,
        subscriber_id: str,
        *,
        confirmed: bool = False,
        balance: float | None = None,
    ) -> bool:
        """Run a delegated row action for ``subscriber_id``.

        ``confirmed`` is the answer the browser got from the user for
        destructive actions.
        """
        action = RowAction(action)
        if action is RowAction.DELETE:
            return await self.mutations.delete_subscriber(subscriber_id, lambda _message: confirmed)
        self.mutations.open_balance(subscriber_id, balance)
        return True

    def view_state(self) -> dict[str, Any]:
        """Serializable summary of the current view state."""
        return {
            "active_page": self.navigator.active_page.value,
            "title": self.navigator.title,
            "subtitle": self.navigator.subtitle,
            "open_modals": self.modals.open_modals(),
            "activity": [
                {"timestamp": entry.timestamp.isoformat(), "message": entry.message}
                for entry in self.activity.entries
            ],
            "poller_running": self.poller.running,
        }
