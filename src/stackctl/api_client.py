"""HTTP transport shared by the platform API clients.

Thin wrapper around a requests.Session:
- HTTPS base URL per service, overridable through the config file
- Bearer token forwarded from STACKCTL_ACCESS_TOKEN when present
- Per-request timeout
- Non-2xx responses raised as APIError with the status code attached

No retries happen here; a failed call is reported to the caller right away.
"""

import logging
import os
from typing import Any

import requests

from stackctl import __version__
from stackctl.exceptions import APIError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ENV = "STACKCTL_ACCESS_TOKEN"  # noqa: S105 - env var name, not a secret


class APIClient:
    """Base client for a single platform service."""

    DEFAULT_ENDPOINT = ""
    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: int | None = None,
        access_token: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = (endpoint or self.DEFAULT_ENDPOINT).rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": f"stackctl/{__version__}",
            }
        )
        token = access_token or os.environ.get(ACCESS_TOKEN_ENV)
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty).

        Raises:
            APIError: On connection failures and non-2xx responses
        """
        url = f"{self.endpoint}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method, url, params=params, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise APIError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise APIError(
                f"{method} {path} failed: {response.status_code} - {self._error_message(response)}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"{method} {path} returned invalid JSON: {e}") from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or "Unknown error"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body)
        return str(body)

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, json: dict[str, Any]) -> Any:
        return self._request("POST", path, json=json)

    def patch(self, path: str, json: dict[str, Any]) -> Any:
        return self._request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)


__all__ = ["ACCESS_TOKEN_ENV", "APIClient"]
