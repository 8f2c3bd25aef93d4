"""
Snapshot renderers for the dashboard document.

Every render is a full replace of its targets from one snapshot, so
rendering the same snapshot twice leaves identical markup. Server strings
go through ``escape`` before they reach markup; row buttons carry the
subscriber id in data attributes captured at render time.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from xsip_dashboard.api.models import (
    CallSession,
    PlatformConfig,
    Resource,
    StatsSnapshot,
    Subscriber,
)
from xsip_dashboard.core.exceptions import UnknownResourceError
from xsip_dashboard.view.dom import Document, Element
from xsip_dashboard.view.escape import escape
from xsip_dashboard.view.layout import CALL_COLUMNS, SUBSCRIBER_COLUMNS

NO_SUBSCRIBERS = "No subscribers yet. Add the first one to get started."
NO_CALLS = "No active calls at this time"

BALANCE_NEGATIVE = "balance-negative"
BALANCE_POSITIVE = "balance-positive"

CALL_DISTRIBUTION_LABELS = ("00:00", "04:00", "08:00", "12:00", "16:00", "20:00")
DEFAULT_THROUGHPUT_STEP_SECONDS = 4.0


# =============================================================================
# Formatting
# =============================================================================


def format_currency(value: float, places: int = 2) -> str:
    return f"${value:.{places}f}"


def format_duration(seconds: int) -> str:
    """``minutes:seconds`` with zero-padded seconds (125 -> ``2:05``)."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_count(value: int) -> str:
    """Exact count with thousands separators."""
    return f"{value:,}"


def format_capacity(value: float) -> str:
    """Abbreviated capacity for display only (100000 -> ``100K``)."""
    if abs(value) < 1000:
        return f"{value:g}"
    return f"{value / 1000:g}K"


def balance_class(balance: float) -> str:
    return BALANCE_NEGATIVE if balance < 0 else BALANCE_POSITIVE


def status_label(system_status: str) -> str:
    return "Healthy" if system_status == "operational" else system_status


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _empty_row(columns: int, message: str) -> Element:
    return Element(
        "tr",
        children=[Element("td", classes=["empty-state"], attrs={"colspan": str(columns)}, text=message)],
    )


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Writes resource snapshots into a dashboard document."""

    def __init__(self, document: Document, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._document = document
        self._clock = clock
        self._dispatch: dict[Resource, Callable[[Any], None]] = {
            Resource.STATS: self.render_stats,
            Resource.SUBSCRIBERS: self.render_subscribers,
            Resource.ACTIVE_CALLS: self.render_calls,
            Resource.CONFIG: self.render_config,
        }

    def render(self, resource: Resource, snapshot: Any) -> None:
        try:
            renderer = self._dispatch[Resource(resource)]
        except (KeyError, ValueError) as e:
            raise UnknownResourceError(resource) from e
        renderer(snapshot)

    def render_stats(self, stats: StatsSnapshot) -> None:
        self._document.set_text("kpi-calls", stats.active_calls)
        self._document.set_text("kpi-users", stats.total_users)
        self._document.set_text("kpi-status", status_label(stats.system_status))
        self._document.set_text("kpi-version", stats.version or "—")

    def render_subscribers(self, subscribers: Sequence[Subscriber]) -> None:
        tbody = self._document.get("sub-tbody")
        if tbody is not None:
            if subscribers:
                tbody.replace_children(self._subscriber_row(sub) for sub in subscribers)
            else:
                tbody.replace_children([_empty_row(len(SUBSCRIBER_COLUMNS), NO_SUBSCRIBERS)])
        self._document.set_text("sub-count", len(subscribers))

    def _subscriber_row(self, sub: Subscriber) -> Element:
        sub_id = escape(sub.id)
        tier = sub.tier
        markup = (
            f"<td><strong>{escape(sub.display_name)}</strong></td>"
            f"<td>{sub_id}</td>"
            f'<td class="mono">{escape(sub.sip_uri)}</td>'
            f'<td class="balance {balance_class(sub.balance)}">{format_currency(sub.balance)}</td>'
            f'<td><span class="tier tier-{tier.label.lower()}">{tier.label}</span></td>'
            "<td>"
            f'<button class="btn-sm" data-action="balance" data-subscriber-id="{sub_id}" '
            f'data-balance="{sub.balance}">Balance</button> '
            f'<button class="btn-sm danger" data-action="delete" data-subscriber-id="{sub_id}">Delete</button>'
            "</td>"
        )
        row = Element("tr", attrs={"data-subscriber-id": sub.id})
        row.set_markup(markup)
        return row

    def render_calls(self, calls: Sequence[CallSession]) -> None:
        tbody = self._document.get("call-tbody")
        if tbody is not None:
            if calls:
                now = self._clock()
                tbody.replace_children(self._call_row(call, now) for call in calls)
            else:
                tbody.replace_children([_empty_row(len(CALL_COLUMNS), NO_CALLS)])
        self._document.set_text("call-count", len(calls))
        self.render_call_distribution(calls)

    def _call_row(self, call: CallSession, now: datetime) -> Element:
        markup = (
            f'<td class="mono">{escape(call.from_)}</td>'
            f'<td class="mono">{escape(call.to)}</td>'
            f'<td><span class="tier tier-admin">{escape(call.state)}</span></td>'
            f"<td>{format_duration(call.elapsed_seconds(now))}</td>"
            f"<td>{format_currency(call.rate, 3)}</td>"
            f"<td>{escape(call.tenant_id)}</td>"
        )
        row = Element("tr")
        row.set_markup(markup)
        return row

    def render_config(self, config: PlatformConfig) -> None:
        self._document.set_text("cfg-proto", config.sip_protocol)
        self._document.set_text("cfg-max", format_count(config.max_concurrent_calls))
        self._document.set_text("cfg-rate", f"${config.billing_rate:g}")
        self._document.set_text("cfg-ttl", config.registration_ttl)
        self._document.set_text("cfg-fw", f"{config.firewall_threshold} attempts")
        self._document.set_text("net-proto", config.sip_protocol)
        self._document.set_text("net-cap", format_capacity(config.max_concurrent_calls))

    # -- charts --------------------------------------------------------------

    def _set_chart(self, element_id: str, labels: Sequence[str], data: Sequence[float]) -> None:
        element = self._document.get(element_id)
        if element is None:
            return
        element.attrs["data-chart"] = json.dumps({"labels": list(labels), "data": list(data)})

    def render_call_distribution(self, calls: Sequence[CallSession]) -> None:
        """Active calls bucketed into six 4-hour windows by start hour."""
        buckets = [0] * len(CALL_DISTRIBUTION_LABELS)
        for call in calls:
            buckets[call.start_time.hour // 4] += 1
        self._set_chart("callDistChart", CALL_DISTRIBUTION_LABELS, buckets)

    def render_throughput(
        self,
        samples: Sequence[float],
        step_seconds: float = DEFAULT_THROUGHPUT_STEP_SECONDS,
    ) -> None:
        """Recent active-call samples, one per poll tick ``step_seconds`` apart."""
        labels = [f"{i * step_seconds:g}s" for i in range(len(samples))]
        self._set_chart("throughputChart", labels, samples)
