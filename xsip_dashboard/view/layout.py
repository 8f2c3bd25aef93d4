"""Static structure of the dashboard document (the page markup)."""

from __future__ import annotations

from xsip_dashboard.view.dom import Document, Element
from xsip_dashboard.view.navigation import ACTIVE_CLASS, PAGE_TITLES, Page

SUBSCRIBER_COLUMNS = ("Name", "ID", "SIP URI", "Balance", "Tier", "Actions")
CALL_COLUMNS = ("From", "To", "State", "Duration", "Rate", "Tenant")

NAV_LABELS: dict[Page, str] = {
    Page.OVERVIEW: "Overview",
    Page.SUBSCRIBERS: "Subscribers",
    Page.CALLS: "Live Calls",
    Page.CDR: "Call Records",
    Page.SECURITY: "Security",
    Page.NETWORK: "Network",
    Page.SETTINGS: "Settings",
}


def _stat(element_id: str, label: str, initial: str = "—") -> Element:
    return Element(
        "div",
        classes=["kpi"],
        children=[
            Element("span", classes=["kpi-label"], text=label),
            Element("span", element_id, classes=["kpi-value"], text=initial),
        ],
    )


def _table(tbody_id: str, columns: tuple[str, ...]) -> Element:
    header = Element("tr", children=[Element("th", text=name) for name in columns])
    return Element(
        "table",
        classes=["data-table"],
        children=[Element("thead", children=[header]), Element("tbody", tbody_id)],
    )


def _field(element_id: str, label: str, input_type: str = "text", **attrs: str) -> Element:
    return Element(
        "label",
        children=[
            Element("span", text=label),
            Element("input", element_id, attrs={"type": input_type, "name": element_id, "value": "", **attrs}),
        ],
    )


def _modal(name: str, title: str, form: Element) -> Element:
    return Element(
        "div",
        f"modal-{name}",
        classes=["overlay"],
        attrs={"data-modal": name},
        children=[
            Element(
                "div",
                classes=["modal"],
                children=[
                    Element("h3", text=title),
                    form,
                    Element(
                        "button",
                        attrs={"type": "button", "data-modal-close": name},
                        classes=["btn", "btn-secondary"],
                        text="Cancel",
                    ),
                ],
            ),
        ],
    )


def _page(page: Page, *children: Element) -> Element:
    classes = ["page", ACTIVE_CLASS] if page is Page.OVERVIEW else ["page"]
    return Element("section", page.element_id, classes=classes, children=children)


def build_dashboard_document() -> Document:
    """Build the dashboard page with the overview page active."""
    nav = Element(
        "nav",
        "sidebar",
        children=[
            Element(
                "a",
                page.nav_id,
                classes=["nav-item", ACTIVE_CLASS] if page is Page.OVERVIEW else ["nav-item"],
                attrs={"data-page": page.value},
                text=NAV_LABELS[page],
            )
            for page in Page
        ],
    )

    title, subtitle = PAGE_TITLES[Page.OVERVIEW]
    header = Element(
        "header",
        children=[
            Element("h1", "page-title", text=title),
            Element("p", "page-subtitle", text=subtitle),
        ],
    )

    overview = _page(
        Page.OVERVIEW,
        Element(
            "div",
            classes=["kpi-grid"],
            children=[
                _stat("kpi-calls", "Active Calls", "0"),
                _stat("kpi-users", "Subscribers", "0"),
                _stat("kpi-status", "System Status"),
                _stat("kpi-version", "Version"),
            ],
        ),
        Element("canvas", "throughputChart", classes=["chart"]),
        Element("canvas", "callDistChart", classes=["chart"]),
        Element("h3", text="Recent Activity"),
        Element("ul", "activity-log", classes=["activity"]),
    )

    subscribers = _page(
        Page.SUBSCRIBERS,
        Element(
            "div",
            classes=["toolbar"],
            children=[
                Element("span", "sub-count", classes=["count"], text="0"),
                Element("button", classes=["btn"], attrs={"data-modal-open": "add-sub"}, text="Add Subscriber"),
            ],
        ),
        _table("sub-tbody", SUBSCRIBER_COLUMNS),
    )

    calls = _page(
        Page.CALLS,
        Element("div", classes=["toolbar"], children=[Element("span", "call-count", classes=["count"], text="0")]),
        _table("call-tbody", CALL_COLUMNS),
    )

    cdr = _page(Page.CDR, Element("p", classes=["empty-state"], text="Call detail records are kept by the billing service."))
    security = _page(Page.SECURITY, Element("p", classes=["empty-state"], text="Firewall rules are managed on the edge proxy."))

    network = _page(
        Page.NETWORK,
        _stat("net-proto", "Signalling Protocol"),
        _stat("net-cap", "Call Capacity"),
    )

    settings = _page(
        Page.SETTINGS,
        _stat("cfg-proto", "SIP Protocol"),
        _stat("cfg-max", "Max Concurrent Calls"),
        _stat("cfg-rate", "Billing Rate"),
        _stat("cfg-ttl", "Registration TTL"),
        _stat("cfg-fw", "Firewall Threshold"),
    )

    add_sub_form = Element(
        "form",
        "form-add-sub",
        classes=["modal-form"],
        attrs={"data-submit": "/subscribers"},
        children=[
            _field("f-id", "Extension / ID", required="required"),
            _field("f-name", "Display Name", required="required"),
            _field("f-pass", "Password", "password"),
            _field("f-bal", "Initial Balance", "number", step="0.01"),
            Element("button", attrs={"type": "submit"}, classes=["btn"], text="Create"),
        ],
    )
    edit_bal_form = Element(
        "form",
        "form-edit-bal",
        classes=["modal-form"],
        attrs={"data-submit": "/balance"},
        children=[
            _field("eb-id", "Subscriber", "hidden"),
            _field("eb-amount", "Balance", "number", step="0.01"),
            Element("button", attrs={"type": "submit"}, classes=["btn"], text="Save"),
        ],
    )

    root = Element(
        "div",
        "app",
        classes=["app"],
        children=[
            nav,
            Element(
                "main",
                children=[header, overview, subscribers, calls, cdr, security, network, settings],
            ),
            _modal("add-sub", "New Subscriber", add_sub_form),
            _modal("edit-bal", "Adjust Balance", edit_bal_form),
        ],
    )
    return Document(root)
