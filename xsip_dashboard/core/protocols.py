"""
Protocol definitions for the dashboard's collaborators.

This module defines interfaces that enable:
- Loose coupling between the sync loop and the HTTP client
- Easy in-process fakes of the carrier backend for testing
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BackendTransport(Protocol):
    """Blocking access to the carrier backend's JSON resources.

    Implementations raise ``BackendError`` subclasses on failure:
    ``BackendUnavailableError`` when no response arrived,
    ``BackendResponseError`` for non-2xx and ``BackendPayloadError`` for
    bodies that are not JSON.
    """

    def get_json(self, path: str) -> Any:
        """GET ``path`` and return the decoded body."""
        ...

    def post_json(self, path: str, body: dict[str, Any]) -> Any:
        """POST ``body`` to ``path``; returns the decoded body or None."""
        ...

    def delete(self, path: str) -> None:
        """DELETE ``path``."""
        ...


@runtime_checkable
class HealthCheckable(Protocol):
    """Anything that can report whether the backend is reachable."""

    def health_check(self, max_latency_ms: float = 5000) -> tuple[bool, dict[str, Any]]:
        ...
