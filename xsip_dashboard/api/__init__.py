"""
API module - data models for the carrier backend and dashboard requests.
"""

from xsip_dashboard.api.models import (
    DEFAULT_CALL_RATE,
    ActionRequest,
    BalanceAdjustment,
    BalanceForm,
    CallSession,
    PlatformConfig,
    Resource,
    RowAction,
    Snapshot,
    StatsSnapshot,
    Subscriber,
    SubscriberCreate,
    SubscriberForm,
    SubscriberLevel,
)

__all__ = [
    "DEFAULT_CALL_RATE",
    # Enums
    "Resource",
    "RowAction",
    "SubscriberLevel",
    # Snapshots
    "Snapshot",
    "StatsSnapshot",
    "Subscriber",
    "CallSession",
    "PlatformConfig",
    # Requests
    "SubscriberCreate",
    "BalanceAdjustment",
    "SubscriberForm",
    "ActionRequest",
    "BalanceForm",
]
