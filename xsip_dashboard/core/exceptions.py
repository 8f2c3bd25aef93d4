"""
Custom exception hierarchy for the carrier dashboard.

This module provides a structured exception hierarchy that enables:
- Distinguishing transport, status and payload failures from the backend
- Rich error context for debugging
- Consistent error messages across the codebase
"""

from __future__ import annotations

from typing import Any


class DashboardError(Exception):
    """Base exception for all dashboard errors.

    All custom exceptions in the dashboard inherit from this class,
    enabling catching all dashboard-related errors with a single except clause.
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message including context."""
        parts = [self.message]
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"[{context_str}]")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " ".join(parts)


# =============================================================================
# Backend-Related Exceptions
# =============================================================================


class BackendError(DashboardError):
    """Base exception for carrier backend failures."""

    def __init__(
        self,
        message: str,
        *,
        method: str,
        path: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        full_context: dict[str, Any] = {"method": method, "path": path}
        if context:
            full_context.update(context)
        super().__init__(message, context=full_context, cause=cause)
        self.method = method
        self.path = path


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot be reached.

    Examples:
        - Connection refused
        - DNS failure
        - Timeout (only when a timeout is configured)
    """

    def __init__(self, method: str, path: str, *, cause: Exception | None = None) -> None:
        super().__init__(
            f"Backend unreachable for {method} {path}",
            method=method,
            path=path,
            cause=cause,
        )


class BackendResponseError(BackendError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, method: str, path: str, *, status_code: int, body: str | None = None) -> None:
        context: dict[str, Any] = {"status": status_code}
        if body:
            context["body"] = body[:200]
        super().__init__(
            f"Backend returned HTTP {status_code} for {method} {path}",
            method=method,
            path=path,
            context=context,
        )
        self.status_code = status_code
        self.body = body


class BackendPayloadError(BackendError):
    """Raised when a response body is not valid JSON."""

    def __init__(self, method: str, path: str, *, cause: Exception | None = None) -> None:
        super().__init__(
            f"Malformed payload from {method} {path}",
            method=method,
            path=path,
            cause=cause,
        )


# =============================================================================
# Dashboard-Side Exceptions
# =============================================================================


class SubscriberValidationError(DashboardError):
    """Raised when subscriber form input cannot be turned into a request.

    Examples:
        - Missing id or username on create
        - Balance amount that is not a number
    """

    def __init__(self, field: str, *, value: Any = None, reason: str) -> None:
        context: dict[str, Any] = {"field": field}
        if value is not None:
            context["value"] = value
        super().__init__(f"Invalid subscriber {field}: {reason}", context=context)
        self.field = field
        self.value = value


class UnknownResourceError(DashboardError):
    """Raised when a snapshot is requested for a resource with no endpoint."""

    def __init__(self, resource: Any) -> None:
        super().__init__(f"Unknown resource: {resource}", context={"resource": resource})
        self.resource = resource


class UnknownModalError(DashboardError):
    """Raised when a dialog name is not registered with the modal controller."""

    def __init__(self, name: str, *, available: list[str] | None = None) -> None:
        context: dict[str, Any] = {"modal": name}
        if available:
            context["available"] = available
        super().__init__(f"Unknown modal: {name}", context=context)
        self.name = name
