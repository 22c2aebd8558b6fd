"""YNAB REST API client.

Issues authenticated GET requests and returns decoded JSON bodies.
One request per call: no retries, pagination or delta requests.
Auth: static personal access token sent as a bearer header.

A requests session may be passed in; otherwise one is created on first use.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.ynab.com/v1"


class ApiError(Exception):
    """Raised when a request fails, returns a non-2xx status, or is not JSON."""

    def __init__(self, endpoint: str, message: str, status_code: int | None = None):
        self.endpoint = endpoint
        self.status_code = status_code
        prefix = f"GET {endpoint}"
        if status_code is not None:
            prefix += f" ({status_code})"
        super().__init__(f"{prefix}: {message}")


class YnabClient:
    """Minimal YNAB API client.

    Args:
        access_token: Personal access token from the YNAB developer settings.
        base_url: API root, without trailing slash.
        session: Optional requests.Session (or mock).
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = API_BASE_URL,
        session: requests.Session | None = None,
    ):
        if not access_token:
            raise ValueError("An access token is required")
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def get(self, endpoint: str) -> Any:
        """GET an endpoint path (e.g. "/budgets/abc/payees") and decode JSON.

        Raises:
            ApiError: On network failure, non-2xx status or a non-JSON body.
        """
        url = self.url(endpoint)
        logger.debug("GET %s", url)
        try:
            response = self.session.get(
                url, headers={"Authorization": f"bearer {self.access_token}"},
            )
        except requests.RequestException as e:
            raise ApiError(endpoint, f"request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise ApiError(endpoint, _error_detail(response), response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                endpoint, "response body is not valid JSON", response.status_code,
            ) from e


def _error_detail(response: requests.Response) -> str:
    """Extract a readable message from a YNAB error response.

    YNAB errors look like {"error": {"id": "401", "name": "unauthorized",
    "detail": "Unauthorized"}}. Falls back to the raw body text.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        err = body["error"]
        name = err.get("name") or "error"
        detail = err.get("detail") or ""
        return f"{name}: {detail}" if detail else name

    text = (response.text or "").strip()
    return text[:200] if text else "request failed"
