"""
HTTP client for the carrier platform admin API.

This module wraps a pooled ``requests`` session and turns every kind of
failure into the dashboard's exception hierarchy, so callers can tell
transport, status and payload problems apart.
"""

from __future__ import annotations

import time
from types import TracebackType
from typing import Any
from urllib.parse import quote

import requests
import urllib3

from xsip_dashboard.core.config import BackendConfig, get_config
from xsip_dashboard.core.exceptions import (
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
)
from xsip_dashboard.core.logging import get_logger

logger = get_logger(__name__)


def subscriber_path(subscriber_id: str) -> str:
    """Path of a single subscriber, with the id URL-quoted."""
    return f"/users/{quote(str(subscriber_id), safe='')}"


def balance_path(subscriber_id: str) -> str:
    """Path of a subscriber's balance endpoint."""
    return f"{subscriber_path(subscriber_id)}/balance"


class CarrierBackendClient:
    """Blocking client for the carrier backend.

    Provides:
    - Connection pooling for repeated polling of the same host
    - No automatic retries; the poll cadence is the only retry policy
    - Typed errors for transport, status and payload failures

    Example:
        >>> client = CarrierBackendClient("http://localhost:8080")
        >>> stats = client.get_json("/stats")
        >>> print(stats["active_calls"])
    """

    def __init__(
        self,
        endpoint: str | None = None,
        config: BackendConfig | None = None,
    ) -> None:
        """Initialize the backend client."""
        self._config = config or get_config().backend
        self._endpoint = (endpoint or self._config.endpoint).rstrip("/")
        self._session = self._create_session()

    @property
    def endpoint(self) -> str:
        """Get the configured endpoint."""
        return self._endpoint

    def _create_session(self) -> requests.Session:
        """Create a requests session with connection pooling and retries disabled."""
        session = requests.Session()

        adapter = requests.adapters.HTTPAdapter(
            pool_connections=self._config.pool_connections,
            pool_maxsize=self._config.pool_maxsize,
            max_retries=urllib3.util.retry.Retry(total=0, read=False),
            pool_block=False,
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def request(self, method: str, path: str, *, json: Any = None) -> requests.Response:
        """Issue one request and return the response if it is 2xx.

        Raises:
            BackendUnavailableError: The request never got a response.
            BackendResponseError: The response status was not 2xx.
        """
        try:
            response = self._session.request(
                method,
                f"{self._endpoint}{path}",
                json=json,
                timeout=self._config.timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise BackendUnavailableError(method, path, cause=e) from e

        logger.debug(f"{method} {path} -> HTTP {response.status_code}")

        if not 200 <= response.status_code < 300:
            raise BackendResponseError(
                method,
                path,
                status_code=response.status_code,
                body=response.text,
            )

        return response

    def _decode(self, method: str, path: str, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BackendPayloadError(method, path, cause=e) from e

    def get_json(self, path: str) -> Any:
        """GET a resource and return its decoded JSON body."""
        response = self.request("GET", path)
        return self._decode("GET", path, response)

    def post_json(self, path: str, body: dict[str, Any]) -> Any:
        """POST a JSON body; returns the decoded response body, or None when empty."""
        response = self.request("POST", path, json=body)
        if not response.content:
            return None
        return self._decode("POST", path, response)

    def delete(self, path: str) -> None:
        """DELETE a resource; only the status matters."""
        self.request("DELETE", path)

    def health_check(self, max_latency_ms: float = 5000) -> tuple[bool, dict[str, Any]]:
        """Check the backend is reachable by fetching its stats.

        Args:
            max_latency_ms: Maximum acceptable response time in milliseconds.

        Returns:
            Tuple of (is_healthy, details_dict) where details contains:
            - healthy: bool
            - latency_ms: response time in milliseconds
            - status_code: HTTP status code (if available)
            - error: error message (if any)
        """
        details: dict[str, Any] = {
            "healthy": False,
            "latency_ms": None,
            "status_code": None,
            "error": None,
        }

        try:
            start_time = time.time()
            response = self._session.get(
                f"{self._endpoint}/stats",
                timeout=self._config.timeout_seconds,
            )
            latency_ms = (time.time() - start_time) * 1000

            details["latency_ms"] = round(latency_ms, 2)
            details["status_code"] = response.status_code

            if response.status_code != 200:
                details["error"] = f"Unhealthy status code: {response.status_code}"
                return False, details

            if latency_ms > max_latency_ms:
                details["error"] = f"Response too slow: {latency_ms:.0f}ms > {max_latency_ms:.0f}ms threshold"
                return False, details

            details["healthy"] = True
            return True, details

        except requests.exceptions.Timeout:
            details["error"] = f"Request timed out after {self._config.timeout_seconds}s"
            return False, details
        except requests.exceptions.ConnectionError as e:
            details["error"] = f"Connection failed: {e}"
            return False, details
        except requests.RequestException as e:
            details["error"] = f"Request failed: {e}"
            return False, details

    def is_healthy(self, max_latency_ms: float = 5000) -> bool:
        """Simple health check returning only boolean."""
        healthy, _ = self.health_check(max_latency_ms)
        return healthy

    def close(self) -> None:
        """Close the session and clean up resources."""
        self._session.close()

    def __enter__(self) -> CarrierBackendClient:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()
