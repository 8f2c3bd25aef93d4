"""
Core module - configuration, exceptions and logging.
"""

from xsip_dashboard.core.config import (
    DEFAULT_TENANT,
    BackendConfig,
    DashboardConfig,
    ServerConfig,
    SyncConfig,
    get_config,
    reset_config,
    set_config,
)
from xsip_dashboard.core.exceptions import (
    BackendError,
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
    DashboardError,
    SubscriberValidationError,
    UnknownModalError,
    UnknownResourceError,
)
from xsip_dashboard.core.logging import (
    EventType,
    LogContext,
    configure_logging,
    get_logger,
    log_event,
)

__all__ = [
    # Config
    "DEFAULT_TENANT",
    "BackendConfig",
    "DashboardConfig",
    "ServerConfig",
    "SyncConfig",
    "get_config",
    "reset_config",
    "set_config",
    # Exceptions
    "DashboardError",
    "BackendError",
    "BackendPayloadError",
    "BackendResponseError",
    "BackendUnavailableError",
    "SubscriberValidationError",
    "UnknownModalError",
    "UnknownResourceError",
    # Logging
    "EventType",
    "LogContext",
    "configure_logging",
    "get_logger",
    "log_event",
]
