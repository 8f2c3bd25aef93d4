"""
XSIP Carrier Dashboard - web application.

Serves the dashboard document to the browser and turns browser
interactions (navigation, dialogs, subscriber actions) into controller
calls. The poll loop runs for the lifetime of the app.

Run with: python -m xsip_dashboard
Access at: http://localhost:8050
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

from xsip_dashboard import __version__
from xsip_dashboard.api.models import ActionRequest, BalanceForm, SubscriberForm
from xsip_dashboard.controller import DashboardController
from xsip_dashboard.core.config import DashboardConfig, get_config
from xsip_dashboard.core.exceptions import SubscriberValidationError, UnknownModalError
from xsip_dashboard.core.logging import get_logger
from xsip_dashboard.core.protocols import HealthCheckable
from xsip_dashboard.view.navigation import Page
from xsip_dashboard.web.page import render_page

logger = get_logger(__name__)
access_logger = get_logger("xsip_dashboard.access")


# ============================================================================
# Request Logging Middleware (nginx combined log format)
# ============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware using nginx combined log format."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_secs = time.perf_counter() - start_time

        client_host = request.client.host if request.client else "-"
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        http_version = request.scope.get("http_version", "1.1")
        content_length = response.headers.get("content-length", "-")
        referer = request.headers.get("referer", "-")
        user_agent = request.headers.get("user-agent", "-")

        # [16/Jan/2026:14:30:15 +0000]
        timestamp = datetime.now().astimezone().strftime("[%d/%b/%Y:%H:%M:%S %z]")

        access_logger.info(
            f'{client_host} - - {timestamp} '
            f'"{request.method} {path} HTTP/{http_version}" '
            f'{response.status_code} {content_length} '
            f'"{referer}" "{user_agent}" '
            f'{duration_secs:.3f}'
        )

        return response


class BackdropClick(BaseModel):
    """Click on a dialog overlay; ``target_id`` is the clicked element's id."""

    target_id: str | None = None


def create_app(
    controller: DashboardController | None = None,
    config: DashboardConfig | None = None,
) -> FastAPI:
    """Build the dashboard app around ``controller`` (created from config if omitted)."""
    if controller is None:
        controller = DashboardController(config or get_config())
    config = controller.config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await controller.start()
        logger.info(f"Dashboard polling {getattr(controller.client, 'endpoint', 'backend')} "
                    f"every {config.sync.poll_interval_seconds}s")
        yield
        await controller.stop(drain=True)
        close = getattr(controller.client, "close", None)
        if callable(close):
            close()

    app = FastAPI(title="XSIP Carrier Dashboard", version=__version__, lifespan=lifespan)
    app.state.controller = controller

    if config.server.access_log:
        app.add_middleware(RequestLoggingMiddleware)

    # ------------------------------------------------------------------
    # Page
    # ------------------------------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    async def dashboard_root() -> str:
        """Serve the full dashboard page as a fresh page session."""
        controller.reset_view()
        return render_page(controller.document.to_html(), config.sync.poll_interval_seconds)

    @app.get("/view", response_class=HTMLResponse)
    async def dashboard_view() -> str:
        """Serve the current document markup without starting a new session."""
        return controller.document.to_html()

    @app.get("/fragment/{element_id}", response_class=HTMLResponse)
    async def dashboard_fragment(element_id: str) -> str:
        """Serve the current inner markup of one element."""
        element = controller.document.get(element_id)
        if element is None:
            raise HTTPException(status_code=404, detail=f"No element {element_id}")
        return element.inner_html()

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    @app.post("/navigate/{page}")
    async def navigate(page: str) -> dict[str, Any]:
        try:
            target = Page(page)
        except ValueError:
            raise HTTPException(status_code=404, detail=f"Unknown page: {page}")
        await controller.navigator.navigate(target)
        return controller.view_state()

    @app.post("/modals/{name}/open")
    async def open_modal(name: str) -> dict[str, Any]:
        try:
            controller.modals.open(name)
        except UnknownModalError as e:
            raise HTTPException(status_code=404, detail=e.message)
        return controller.view_state()

    @app.post("/modals/{name}/close")
    async def close_modal(name: str) -> dict[str, Any]:
        try:
            controller.modals.close(name)
        except UnknownModalError as e:
            raise HTTPException(status_code=404, detail=e.message)
        return controller.view_state()

    @app.post("/modals/{name}/backdrop")
    async def backdrop_click(name: str, click: BackdropClick) -> dict[str, Any]:
        try:
            controller.modals.backdrop_click(name, click.target_id)
        except UnknownModalError as e:
            raise HTTPException(status_code=404, detail=e.message)
        return controller.view_state()

    @app.get("/api/state")
    async def view_state() -> dict[str, Any]:
        return controller.view_state()

    # ------------------------------------------------------------------
    # Subscriber mutations
    # ------------------------------------------------------------------

    @app.post("/subscribers")
    async def create_subscriber(form: SubscriberForm) -> dict[str, Any]:
        try:
            created = await controller.mutations.create_subscriber(form.model_dump(exclude_none=True))
        except SubscriberValidationError as e:
            raise HTTPException(status_code=422, detail=e.message)
        return {"created": created, **controller.view_state()}

    @app.post("/actions")
    async def row_action(action: ActionRequest) -> dict[str, Any]:
        """Delegated handler for subscriber row buttons."""
        ok = await controller.dispatch_action(
            action.action,
            action.subscriber_id,
            confirmed=action.confirmed,
            balance=action.balance,
        )
        return {"ok": ok, **controller.view_state()}

    @app.post("/balance")
    async def submit_balance(form: BalanceForm) -> dict[str, Any]:
        try:
            updated = await controller.mutations.adjust_balance(form.subscriber_id, form.amount)
        except SubscriberValidationError as e:
            raise HTTPException(status_code=422, detail=e.message)
        return {"updated": updated, **controller.view_state()}

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    async def health_check() -> dict[str, Any]:
        backend: dict[str, Any] = {"healthy": None}
        if isinstance(controller.client, HealthCheckable):
            _, backend = await asyncio.to_thread(controller.client.health_check)
        return {
            "status": "ok",
            "version": __version__,
            "poller_running": controller.poller.running,
            "backend": backend,
        }

    return app
