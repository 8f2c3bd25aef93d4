"""
Web module - FastAPI app serving the dashboard.
"""

from xsip_dashboard.web.app import RequestLoggingMiddleware, create_app
from xsip_dashboard.web.page import render_page

__all__ = ["RequestLoggingMiddleware", "create_app", "render_page"]
