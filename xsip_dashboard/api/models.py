"""
Pydantic data models for the carrier backend resources.

This module defines the data contracts consumed by the dashboard:
- Snapshot payloads (stats, subscribers, active calls, config)
- Mutation request bodies (create subscriber, balance adjustment)
- Dashboard action payloads posted by the browser

Missing or null fields fall back to the same defaults the dashboard has
always shown, so a sparse backend response still renders.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from xsip_dashboard.core.config import DEFAULT_TENANT

# Go's time.Time marshals nanoseconds; trim to the microseconds datetime holds.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")

DEFAULT_CALL_RATE = 0.01


# =============================================================================
# Enumerations
# =============================================================================


class Resource(str, Enum):
    """Backend resources the dashboard keeps a snapshot of."""

    STATS = "stats"
    SUBSCRIBERS = "subscribers"
    ACTIVE_CALLS = "active-calls"
    CONFIG = "config"

    @property
    def path(self) -> str:
        """Backend path serving this resource."""
        return _RESOURCE_PATHS[self]


_RESOURCE_PATHS: dict[Resource, str] = {
    Resource.STATS: "/stats",
    Resource.SUBSCRIBERS: "/users",
    Resource.ACTIVE_CALLS: "/calls/active",
    Resource.CONFIG: "/config",
}


class SubscriberLevel(int, Enum):
    """Ordinal subscriber privilege tier."""

    USER = 0
    RESELLER = 1
    ADMIN = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_value(cls, value: Any) -> SubscriberLevel:
        """Map a raw level to a tier; anything unrecognised is a plain user."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.USER


# =============================================================================
# Snapshot Models
# =============================================================================


class StatsSnapshot(BaseModel):
    """Scalar KPIs from ``GET /stats``."""

    model_config = ConfigDict(extra="ignore")

    active_calls: int = 0
    total_users: int = 0
    system_status: str = ""
    version: str = ""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Subscriber(BaseModel):
    """A subscriber account. ``id`` doubles as the SIP username.

    The password is accepted on input and never serialized back out.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    username: str = ""
    password: str | None = Field(None, exclude=True, repr=False)
    balance: float = 0.0
    level: int = SubscriberLevel.USER.value
    tenant_id: str = DEFAULT_TENANT

    @field_validator("id", "username", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("balance", mode="before")
    @classmethod
    def default_balance(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("level", mode="before")
    @classmethod
    def default_level(cls, value: Any) -> Any:
        return SubscriberLevel.USER.value if value is None else value

    @field_validator("tenant_id", mode="before")
    @classmethod
    def default_tenant(cls, value: Any) -> Any:
        return value or DEFAULT_TENANT

    @property
    def tier(self) -> SubscriberLevel:
        return SubscriberLevel.from_value(self.level)

    @property
    def display_name(self) -> str:
        return self.username or self.id

    @property
    def sip_uri(self) -> str:
        return f"sip:{self.id}@server"


class CallSession(BaseModel):
    """An in-progress call from ``GET /calls/active``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    from_: str = Field("", alias="from")
    to: str = ""
    state: str = ""
    start_time: datetime
    rate: float = DEFAULT_CALL_RATE
    tenant_id: str = DEFAULT_TENANT
    session_id: str | None = None
    call_id: str | None = None
    source: str | None = None

    @field_validator("start_time", mode="before")
    @classmethod
    def trim_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _FRACTION_RE.sub(r"\1", value)
        return value

    @field_validator("rate", mode="before")
    @classmethod
    def default_rate(cls, value: Any) -> Any:
        # A zero rate is shown as the platform default, same as a missing one
        return value or DEFAULT_CALL_RATE

    @field_validator("tenant_id", mode="before")
    @classmethod
    def default_tenant(cls, value: Any) -> Any:
        return value or DEFAULT_TENANT

    def elapsed_seconds(self, now: datetime) -> int:
        """Whole seconds since the call started, never negative.

        Naive timestamps on either side are taken as UTC.
        """
        start = self.start_time
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return max(0, math.floor((now - start).total_seconds()))


class PlatformConfig(BaseModel):
    """Read-only platform configuration from ``GET /config``.

    Empty values (null, zero, blank) render as the platform defaults.
    """

    model_config = ConfigDict(extra="ignore")

    sip_protocol: str = "TCP"
    max_concurrent_calls: int = 100000
    billing_rate: float = 0.01
    registration_ttl: str = "1h"
    firewall_threshold: int = 5

    @model_validator(mode="before")
    @classmethod
    def drop_empty(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v}
        return data

    @field_validator("registration_ttl", mode="before")
    @classmethod
    def ttl_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


Snapshot = StatsSnapshot | list[Subscriber] | list[CallSession] | PlatformConfig


# =============================================================================
# Request Models
# =============================================================================


class SubscriberCreate(BaseModel):
    """Body of ``POST /users``."""

    id: str
    username: str
    password: str = ""
    balance: float = 0.0
    tenant_id: str = DEFAULT_TENANT
    level: int = SubscriberLevel.USER.value


class BalanceAdjustment(BaseModel):
    """Body of ``POST /users/{id}/balance``."""

    amount: float


class SubscriberForm(BaseModel):
    """Raw create-dialog fields as posted by the browser."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    username: str | None = None
    password: str | None = None
    balance: str | float | None = None


class RowAction(str, Enum):
    """Per-row affordances bound by data attributes."""

    BALANCE = "balance"
    DELETE = "delete"


class ActionRequest(BaseModel):
    """A delegated click on a subscriber row button."""

    action: RowAction
    subscriber_id: str
    confirmed: bool = False
    balance: float | None = None


class BalanceForm(BaseModel):
    """Balance dialog submission."""

    subscriber_id: str
    amount: str | float
