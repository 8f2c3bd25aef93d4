"""
View module - document model, rendering and view state.

This module contains:
    - dom: Element/Document model the renderers write into
    - layout: static page structure
    - render: snapshot renderers and formatting
    - navigation, modals, activity: explicit view-state objects
"""

from xsip_dashboard.view.activity import ActivityLog, ActivityLogEntry
from xsip_dashboard.view.dom import Document, Element
from xsip_dashboard.view.escape import escape
from xsip_dashboard.view.layout import build_dashboard_document
from xsip_dashboard.view.modals import ADD_SUBSCRIBER, EDIT_BALANCE, ModalController
from xsip_dashboard.view.navigation import PAGE_REFRESH, PAGE_TITLES, Navigator, Page
from xsip_dashboard.view.render import Renderer

__all__ = [
    "ActivityLog",
    "ActivityLogEntry",
    "Document",
    "Element",
    "escape",
    "build_dashboard_document",
    "ADD_SUBSCRIBER",
    "EDIT_BALANCE",
    "ModalController",
    "PAGE_REFRESH",
    "PAGE_TITLES",
    "Navigator",
    "Page",
    "Renderer",
]
