"""
XSIP Carrier Dashboard.

Polls the carrier platform admin API and keeps a live view of active calls,
subscriber accounts and platform configuration, with subscriber create,
delete and balance adjustment.

Package Structure:
    - core: Configuration, exceptions, logging, protocols
    - api: Pydantic models for backend resources and dashboard requests
    - backend: HTTP client for the carrier admin API
    - view: Document model, renderers and view state
    - sync: Snapshot fetcher, mutation client and poll loop
    - web: FastAPI app serving the dashboard

Example usage:
    from xsip_dashboard import DashboardController, get_config
    from xsip_dashboard.web import create_app

    app = create_app(DashboardController(get_config()))
"""

__version__ = "1.0.0"

from xsip_dashboard.controller import DashboardController
from xsip_dashboard.core.config import DashboardConfig, get_config
from xsip_dashboard.core.exceptions import DashboardError
from xsip_dashboard.core.logging import configure_logging, get_logger

__all__ = [
    "__version__",
    "DashboardController",
    "DashboardConfig",
    "get_config",
    "DashboardError",
    "configure_logging",
    "get_logger",
]
