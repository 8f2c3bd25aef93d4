"""
Pytest configuration and shared fixtures.

This module provides reusable fixtures for testing the xsip_dashboard package,
including an in-memory stand-in for the carrier backend.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import unquote

import pytest

from xsip_dashboard.controller import DashboardController
from xsip_dashboard.core import (
    BackendConfig,
    DashboardConfig,
    ServerConfig,
    SyncConfig,
    reset_config,
    set_config,
)
from xsip_dashboard.core.exceptions import BackendResponseError
from xsip_dashboard.view.layout import build_dashboard_document

FIXED_NOW = datetime(2026, 1, 16, 14, 30, 0, tzinfo=timezone.utc)
LOCAL_NOW = datetime(2026, 1, 16, 15, 30, 0)


# =============================================================================
# Fake Backend
# =============================================================================


class FakeCarrierBackend:
    """In-memory carrier backend speaking the client's transport methods.

    Requests are recorded in ``requests``; ``fail(method, path)`` makes a
    route answer with an error status until ``clear_failures`` is called.
    """

    def __init__(
        self,
        *,
        stats: dict[str, Any] | None = None,
        users: list[dict[str, Any]] | None = None,
        calls: list[dict[str, Any]] | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        self.stats = stats or {"active_calls": 0, "system_status": "operational", "version": "1.0.0"}
        self.users: dict[str, dict[str, Any]] = {str(u["id"]): dict(u) for u in users or []}
        self.calls = list(calls or [])
        self.config = config or {
            "sip_protocol": "TCP",
            "max_concurrent_calls": 100000,
            "billing_rate": 0.01,
            "registration_ttl": "1h",
            "firewall_threshold": 5,
        }
        self.failures: dict[tuple[str, str], Exception] = {}
        self.requests: list[tuple[str, str, Any]] = []
        self._lock = threading.Lock()

    def fail(self, method: str, path: str, status_code: int = 500) -> None:
        self.failures[(method, path)] = BackendResponseError(method, path, status_code=status_code)

    def clear_failures(self) -> None:
        self.failures.clear()

    def _record(self, method: str, path: str, body: Any = None) -> None:
        with self._lock:
            self.requests.append((method, path, body))
        error = self.failures.get((method, path))
        if error is not None:
            raise error

    def requested(self, method: str) -> list[str]:
        return [path for m, path, _ in self.requests if m == method]

    def get_json(self, path: str) -> Any:
        self._record("GET", path)
        if path == "/stats":
            return {**self.stats, "total_users": len(self.users)}
        if path == "/users":
            return list(self.users.values())
        if path == "/calls/active":
            return list(self.calls)
        if path == "/config":
            return dict(self.config)
        raise BackendResponseError("GET", path, status_code=404)

    def post_json(self, path: str, body: dict[str, Any]) -> Any:
        self._record("POST", path, body)
        if path == "/users":
            if body["id"] in self.users:
                raise BackendResponseError("POST", path, status_code=409, body="user exists")
            self.users[body["id"]] = dict(body)
            return dict(body)
        if path.startswith("/users/") and path.endswith("/balance"):
            subscriber_id = unquote(path[len("/users/"):-len("/balance")])
            if subscriber_id not in self.users:
                raise BackendResponseError("POST", path, status_code=404)
            self.users[subscriber_id]["balance"] = body["amount"]
            return None
        raise BackendResponseError("POST", path, status_code=404)

    def delete(self, path: str) -> None:
        self._record("DELETE", path)
        subscriber_id = unquote(path[len("/users/"):])
        if subscriber_id not in self.users:
            raise BackendResponseError("DELETE", path, status_code=404)
        del self.users[subscriber_id]


class GatedBackend(FakeCarrierBackend):
    """Backend whose GETs block until the test releases them.

    The n-th GET waits on ``gates[n]`` and then returns ``payloads[n]``, so
    a test can choose the order in which overlapping requests resolve.
    """

    def __init__(self, payloads: list[Any]) -> None:
        super().__init__()
        self._payloads = list(payloads)
        self.gates = [threading.Event() for _ in self._payloads]
        self.calls_started = 0

    def get_json(self, path: str) -> Any:
        with self._lock:
            index = self.calls_started
            self.calls_started += 1
            self.requests.append(("GET", path, None))
        if not self.gates[index].wait(timeout=5):
            raise TimeoutError(f"gate {index} never released")
        return self._payloads[index]


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> Generator[DashboardConfig, None, None]:
    """Provide a test configuration."""
    config = DashboardConfig(
        backend=BackendConfig(endpoint="http://mock-carrier:8080", timeout_seconds=2.0),
        sync=SyncConfig(poll_interval_seconds=0.05),
        server=ServerConfig(access_log=False),
    )
    set_config(config)
    yield config
    reset_config()


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def sample_users() -> list[dict[str, Any]]:
    """Provide subscriber payloads as the backend serves them."""
    return [
        {"id": "1001", "username": "alice", "balance": 10.5, "level": 0, "tenant_id": "default"},
        {"id": "1002", "username": "bob", "balance": -3.5, "level": 1, "tenant_id": "acme"},
        {"id": "1003", "username": "", "balance": 0, "level": 2, "tenant_id": "default"},
    ]


@pytest.fixture
def sample_calls() -> list[dict[str, Any]]:
    """Provide active call payloads started before FIXED_NOW."""
    return [
        {
            "from": "1001",
            "to": "1002",
            "state": "active",
            "start_time": (FIXED_NOW - timedelta(seconds=125)).isoformat(),
            "rate": 0.02,
            "tenant_id": "default",
        },
        {
            "from": "1003",
            "to": "5551234",
            "state": "ringing",
            "start_time": (FIXED_NOW - timedelta(seconds=5)).isoformat(),
            "rate": 0,
            "tenant_id": "",
        },
    ]


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def backend(sample_users: list[dict[str, Any]], sample_calls: list[dict[str, Any]]) -> FakeCarrierBackend:
    """Provide a populated fake backend."""
    return FakeCarrierBackend(
        stats={"active_calls": len(sample_calls), "system_status": "operational", "version": "2.4.1"},
        users=sample_users,
        calls=sample_calls,
    )


@pytest.fixture
def empty_backend() -> FakeCarrierBackend:
    """Provide a fake backend with no subscribers and no calls."""
    return FakeCarrierBackend()


@pytest.fixture
def document():
    """Provide a fresh dashboard document."""
    return build_dashboard_document()


@pytest.fixture
def fixed_now() -> datetime:
    """Provide the wall-clock instant the renderer sees."""
    return FIXED_NOW


@pytest.fixture
def make_controller() -> Callable[..., DashboardController]:
    """Provide a factory for controllers with fixed clocks."""

    def _make(client: Any, config: DashboardConfig | None = None) -> DashboardController:
        return DashboardController(
            config or DashboardConfig(
                sync=SyncConfig(poll_interval_seconds=0.05),
                server=ServerConfig(access_log=False),
            ),
            client,
            clock=lambda: FIXED_NOW,
            local_clock=lambda: LOCAL_NOW,
        )

    return _make


@pytest.fixture
def controller(backend: FakeCarrierBackend, make_controller) -> DashboardController:
    """Provide a controller wired to the populated fake backend."""
    return make_controller(backend)


@pytest.fixture
def empty_controller(empty_backend: FakeCarrierBackend, make_controller) -> DashboardController:
    """Provide a controller wired to the empty fake backend."""
    return make_controller(empty_backend)


@pytest.fixture
def gated_backend_factory() -> Generator[Callable[[list[Any]], GatedBackend], None, None]:
    """Provide a factory for backends with test-controlled response order."""
    created: list[GatedBackend] = []

    def _make(payloads: list[Any]) -> GatedBackend:
        gated = GatedBackend(payloads)
        created.append(gated)
        return gated

    yield _make
    # Never leave a worker thread parked on a gate
    for gated in created:
        for gate in gated.gates:
            gate.set()
