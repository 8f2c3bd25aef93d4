"""
Backend module - HTTP client for the carrier platform admin API.
"""

from xsip_dashboard.backend.client import (
    CarrierBackendClient,
    balance_path,
    subscriber_path,
)

__all__ = [
    "CarrierBackendClient",
    "balance_path",
    "subscriber_path",
]
