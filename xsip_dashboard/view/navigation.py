"""
Page selection for the dashboard.

Exactly one page is active at a time. Navigating swaps the active page and
nav item, updates the header from ``PAGE_TITLES`` and, for pages backed by
a resource that is not polled, fetches that resource.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from xsip_dashboard.api.models import Resource
from xsip_dashboard.core.logging import EventType, get_logger, log_event
from xsip_dashboard.view.dom import Document

logger = get_logger(__name__)

ACTIVE_CLASS = "active"


class Page(str, Enum):
    """Dashboard pages, in sidebar order."""

    OVERVIEW = "overview"
    SUBSCRIBERS = "subscribers"
    CALLS = "calls"
    CDR = "cdr"
    SECURITY = "security"
    NETWORK = "network"
    SETTINGS = "settings"

    @property
    def element_id(self) -> str:
        return f"page-{self.value}"

    @property
    def nav_id(self) -> str:
        return f"nav-{self.value}"


PAGE_TITLES: dict[Page, tuple[str, str]] = {
    Page.OVERVIEW: ("System Overview", "Real-time carrier network monitoring"),
    Page.SUBSCRIBERS: ("Subscribers", "Manage subscriber accounts and billing"),
    Page.CALLS: ("Live Calls", "Active call sessions across the network"),
    Page.CDR: ("Call Records", "Historical call detail records"),
    Page.SECURITY: ("Security", "Firewall rules and threat protection"),
    Page.NETWORK: ("Network", "Topology, protocols and client setup"),
    Page.SETTINGS: ("Settings", "System configuration parameters"),
}

# Pages whose data is fetched on entry rather than on every poll tick
PAGE_REFRESH: dict[Page, Resource] = {
    Page.SUBSCRIBERS: Resource.SUBSCRIBERS,
    Page.CALLS: Resource.ACTIVE_CALLS,
    Page.SETTINGS: Resource.CONFIG,
}

RefreshAction = Callable[[Resource], Awaitable[Any]]


class Navigator:
    """Mutually exclusive page selection over a document."""

    def __init__(self, document: Document, refresh: RefreshAction | None = None) -> None:
        self._document = document
        self._refresh = refresh
        self._initial = self._initial_page()
        self._active = self._initial

    def _initial_page(self) -> Page:
        # Whatever the markup marks active; overview if nothing is
        for page in Page:
            element = self._document.get(page.element_id)
            if element is not None and element.has_class(ACTIVE_CLASS):
                return page
        return Page.OVERVIEW

    @property
    def active_page(self) -> Page:
        return self._active

    @property
    def title(self) -> str:
        return PAGE_TITLES[self._active][0]

    @property
    def subtitle(self) -> str:
        return PAGE_TITLES[self._active][1]

    def activate(self, target: Page | str) -> Page:
        """Apply the view-state transition without fetching anything.

        Raises:
            ValueError: ``target`` is not a known page.
        """
        page = Page(target)

        for element in self._document.query_class("page"):
            element.remove_class(ACTIVE_CLASS)
        for element in self._document.query_class("nav-item"):
            element.remove_class(ACTIVE_CLASS)

        page_element = self._document.get(page.element_id)
        if page_element is not None:
            page_element.remove_class(ACTIVE_CLASS)
            page_element.force_reflow()
            page_element.add_class(ACTIVE_CLASS)

        nav_element = self._document.get(page.nav_id)
        if nav_element is not None:
            nav_element.add_class(ACTIVE_CLASS)

        title, subtitle = PAGE_TITLES[page]
        self._document.set_text("page-title", title)
        self._document.set_text("page-subtitle", subtitle)

        self._active = page
        log_event(logger, logging.DEBUG, EventType.NAVIGATED, page.value, title)
        return page

    def reset(self) -> Page:
        """Go back to the page the markup had active when this navigator was built."""
        return self.activate(self._initial)

    async def navigate(self, target: Page | str) -> Page:
        """Switch to ``target`` and run its refresh action, if it has one."""
        page = self.activate(target)
        resource = PAGE_REFRESH.get(page)
        if resource is not None and self._refresh is not None:
            await self._refresh(resource)
        return page
