"""
Sync module - snapshot fetching, mutations and the poll loop.
"""

from xsip_dashboard.sync.fetcher import SnapshotFetcher, parse_snapshot
from xsip_dashboard.sync.mutations import MutationClient, parse_amount, parse_balance
from xsip_dashboard.sync.poller import POLLED_RESOURCES, Poller

__all__ = [
    "SnapshotFetcher",
    "parse_snapshot",
    "MutationClient",
    "parse_amount",
    "parse_balance",
    "POLLED_RESOURCES",
    "Poller",
]
