"""
HTTP client for the diary API.

Any session object with a ``request(method, url, json=..., params=...)``
method works; ``requests.Session`` is the default and FastAPI's
``TestClient`` can be passed in for in-process use.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api/v1"


class ApiError(Exception):
    """Raised for non-2xx responses and transport failures."""

    def __init__(self, status_code: int, error: str, details: Optional[str] = None):
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(f"{status_code}: {error}" + (f" ({details})" if details else ""))


class DiaryApiClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, session=None, timeout: Optional[float] = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        kwargs: Dict[str, Any] = {}
        if data is not None:
            kwargs["json"] = data
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise ApiError(0, "Could not reach the diary service", str(exc)) from exc

        if 200 <= response.status_code < 300:
            if not response.text:
                return {}
            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(response.status_code, "Response was not valid JSON", response.text) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        raise ApiError(
            response.status_code,
            body.get("error") or f"Request failed with status {response.status_code}",
            body.get("details"),
        )

    def list_entries(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/entries")
        return data if isinstance(data, list) else []

    def get_entry(self, entry_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/entries/{entry_id}")

    def create_entry(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/entries", payload)

    def update_entry(self, entry_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/entries/{entry_id}", payload)

    def delete_entry(self, entry_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/entries/{entry_id}")
