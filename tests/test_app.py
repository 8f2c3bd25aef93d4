"""
Tests for the dashboard web application.
"""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from xsip_dashboard import __version__
from xsip_dashboard.core import DashboardConfig, ServerConfig, SyncConfig
from xsip_dashboard.web import create_app, render_page


@pytest.fixture
def app(controller):
    return create_app(controller)


@pytest.fixture
def client(app) -> TestClient:
    """Client without the lifespan, so no poll loop runs."""
    return TestClient(app)


class TestPage:
    """Tests for page and fragment serving."""

    def test_render_page(self):
        """Test the shell carries the poll interval and body."""
        html = render_page("<div id=\"app\"></div>", 4.0)
        assert "const POLL_MS = 4000;" in html
        assert '<div id="app"></div>' in html
        assert "'kpi-calls'" in html

    def test_root(self, client):
        """Test the root serves the full dashboard."""
        response = client.get("/")
        assert response.status_code == 200
        assert 'id="page-overview"' in response.text
        assert 'id="modal-add-sub"' in response.text

    def test_fragment(self, client, controller):
        """Test a fragment is the element's inner markup."""
        controller.document.set_text("kpi-calls", 9)
        response = client.get("/fragment/kpi-calls")
        assert response.status_code == 200
        assert response.text == "9"

    def test_unknown_fragment(self, client):
        """Test missing elements are 404."""
        assert client.get("/fragment/nope").status_code == 404

    def test_view_keeps_session_state(self, client):
        """Test the in-page reload shows the current page and open dialogs."""
        client.post("/navigate/subscribers")
        client.post("/modals/add-sub/open")
        html = client.get("/view").text
        assert html.startswith('<div id="app"')
        assert 'id="page-subscribers" class="page active"' in html
        assert 'id="modal-add-sub" class="overlay open"' in html

    def test_reload_starts_a_clean_session(self, client, backend):
        """Test a fresh page load does not inherit the previous view state."""
        client.post("/navigate/subscribers")
        client.post("/modals/add-sub/open")
        client.post("/actions", json={"action": "delete", "subscriber_id": "1002", "confirmed": True})

        html = client.get("/").text
        state = client.get("/api/state").json()

        assert state["active_page"] == "overview"
        assert state["open_modals"] == []
        assert state["activity"] == []
        assert 'id="page-overview" class="page active"' in html
        assert 'id="modal-add-sub" class="overlay" ' in html
        assert "Subscriber removed" not in html
        assert "1002" not in backend.users

    def test_dialogs_have_cancel_buttons(self, client):
        """Test each dialog carries a close button the page script handles."""
        html = client.get("/").text
        assert 'data-modal-close="add-sub"' in html
        assert 'data-modal-close="edit-bal"' in html
        assert "closest('[data-modal-close]')" in html


class TestViewStateRoutes:
    """Tests for navigation and dialog routes."""

    def test_navigate(self, client, backend):
        """Test navigation switches page and fetches its data."""
        response = client.post("/navigate/subscribers")
        assert response.status_code == 200
        assert response.json()["active_page"] == "subscribers"
        assert response.json()["title"] == "Subscribers"
        assert backend.requested("GET") == ["/users"]

    def test_navigate_unknown(self, client, controller):
        """Test unknown pages are 404 and change nothing."""
        assert client.post("/navigate/billing").status_code == 404
        assert controller.navigator.active_page.value == "overview"

    def test_modal_open_close(self, client):
        """Test dialogs open and close by name."""
        assert client.post("/modals/add-sub/open").json()["open_modals"] == ["add-sub"]
        assert client.post("/modals/add-sub/close").json()["open_modals"] == []

    def test_backdrop(self, client):
        """Test only a click on the overlay itself closes the dialog."""
        client.post("/modals/add-sub/open")
        inside = client.post("/modals/add-sub/backdrop", json={"target_id": "f-name"})
        assert inside.json()["open_modals"] == ["add-sub"]
        outside = client.post("/modals/add-sub/backdrop", json={"target_id": "modal-add-sub"})
        assert outside.json()["open_modals"] == []

    def test_unknown_modal(self, client):
        """Test unknown dialogs are 404."""
        assert client.post("/modals/nope/open").status_code == 404

    def test_state(self, client):
        """Test the state endpoint reports the view state."""
        state = client.get("/api/state").json()
        assert state["active_page"] == "overview"
        assert state["poller_running"] is False


class TestMutationRoutes:
    """Tests for subscriber mutation routes."""

    def test_create(self, client, backend, controller):
        """Test creating a subscriber through the form route."""
        client.post("/modals/add-sub/open")
        response = client.post(
            "/subscribers",
            json={"id": "2001", "username": "dave", "password": "pw", "balance": "4"},
        )
        body = response.json()
        assert response.status_code == 200
        assert body["created"] is True
        assert body["open_modals"] == []
        assert body["activity"][0]["message"] == "Subscriber created: dave (2001)"
        assert backend.users["2001"]["balance"] == 4.0

    def test_create_missing_username(self, client, backend):
        """Test a create without a username is 422."""
        response = client.post("/subscribers", json={"id": "2001"})
        assert response.status_code == 422
        assert "username" in response.json()["detail"]
        assert "2001" not in backend.users

    def test_create_rejected_by_backend(self, client):
        """Test a backend rejection reports created False."""
        client.post("/modals/add-sub/open")
        body = client.post("/subscribers", json={"id": "1001", "username": "again"}).json()
        assert body["created"] is False
        assert body["open_modals"] == ["add-sub"]

    def test_rejected_create_keeps_typed_values(self, client):
        """Test the reloaded view still holds what the user typed after a rejection."""
        client.post("/modals/add-sub/open")
        body = client.post("/subscribers", json={"id": "1001", "username": "dup", "password": "pw"}).json()
        assert body["created"] is False
        html = client.get("/view").text
        assert 'id="f-id" type="text" name="f-id" value="1001"' in html
        assert 'id="f-name" type="text" name="f-name" value="dup"' in html
        assert 'id="modal-add-sub" class="overlay open"' in html

    def test_page_script_skips_reload_after_rejected_create(self, client):
        """Test the submit handler only reloads the view after an accepted create."""
        html = client.get("/").text
        assert "if (result.created === false) return;" in html
        assert "fetch('/view')" in html

    def test_delete_action(self, client, backend):
        """Test the delegated delete action."""
        body = client.post("/actions", json={"action": "delete", "subscriber_id": "1002", "confirmed": True}).json()
        assert body["ok"] is True
        assert "1002" not in backend.users

    def test_balance_action_then_submit(self, client, backend, controller):
        """Test opening the balance dialog and submitting a new amount."""
        opened = client.post("/actions", json={"action": "balance", "subscriber_id": "1002", "balance": -3.5}).json()
        assert opened["open_modals"] == ["edit-bal"]
        assert controller.document.get("eb-amount").attrs["value"] == "-3.5"

        body = client.post("/balance", json={"subscriber_id": "1002", "amount": "20"}).json()
        assert body["updated"] is True
        assert body["open_modals"] == []
        assert backend.users["1002"]["balance"] == 20.0

    def test_balance_not_a_number(self, client):
        """Test an unparsable amount is 422."""
        response = client.post("/balance", json={"subscriber_id": "1002", "amount": "abc"})
        assert response.status_code == 422

    def test_unknown_action(self, client):
        """Test unknown row actions fail validation."""
        assert client.post("/actions", json={"action": "promote", "subscriber_id": "1"}).status_code == 422


class TestLifecycle:
    """Tests for app lifespan and health."""

    def test_health(self, client):
        """Test health reports version and poller state."""
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["version"] == __version__
        assert body["backend"] == {"healthy": None}

    def test_lifespan_runs_poller(self, app, controller):
        """Test the poll loop runs for the lifetime of the app."""
        with TestClient(app) as client:
            assert client.get("/api/state").json()["poller_running"] is True
        assert controller.poller.running is False

    def test_lifespan_drains_in_flight_ticks(self, app, controller, monkeypatch):
        """Test shutdown waits for running ticks before closing the backend."""
        stop = controller.poller.stop
        drains: list[bool] = []

        async def recording_stop(*, drain: bool = False) -> None:
            drains.append(drain)
            await stop(drain=drain)

        monkeypatch.setattr(controller.poller, "stop", recording_stop)
        with TestClient(app):
            pass
        assert drains == [True]
        assert controller.poller.running is False

    def test_access_log(self, backend, make_controller, caplog):
        """Test requests are logged in combined log format when enabled."""
        config = DashboardConfig(sync=SyncConfig(poll_interval_seconds=60), server=ServerConfig(access_log=True))
        app = create_app(make_controller(backend, config))
        with caplog.at_level(logging.INFO, logger="xsip_dashboard.access"):
            TestClient(app).get("/api/state")
        assert any('"GET /api/state HTTP/1.1" 200' in record.getMessage() for record in caplog.records)
