"""
Redmine REST API client used by the issue handlers.

A thin synchronous wrapper around httpx. Every call either returns the decoded
JSON body or raises RedmineApiError carrying a message suitable for showing to
the caller.
"""

from typing import Any, Dict, Optional

import httpx
from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 60.0


class RedmineApiError(Exception):
    """Raised when a Redmine API request fails."""

    def __init__(self, message: str, status_code: int = 0, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _error_message(e: Exception) -> str:
    """Build an error message, preferring Redmine's own ``errors`` list."""
    message = f"{e.__class__.__name__}: {e}"
    try:
        errors = e.response.json().get("errors")
    except Exception:
        return message

    if isinstance(errors, list) and errors:
        return f"{message} ({'; '.join(str(error) for error in errors)})"
    return message


class RedmineClient:
    """Redmine issues API client."""

    def __init__(self, url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the client.

        Args:
            url: Base URL of the Redmine instance
            api_key: Redmine REST API key
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self._http = httpx.Client(
            base_url=url,
            headers={"X-Redmine-API-Key": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def request(self, path: str, method: str = "get", data: Optional[dict] = None,
                params: Optional[dict] = None) -> Any:
        """
        Make a request to the Redmine API.

        Args:
            path: API endpoint path (e.g. 'issues.json')
            method: HTTP method to use
            data: Dictionary for the JSON request body
            params: Dictionary of query parameters

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            RedmineApiError: On transport errors and non-2xx responses
        """
        try:
            response = self._http.request(method.upper(), path.lstrip("/"), json=data, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = None
            try:
                body = e.response.json()
            except ValueError:
                body = e.response.text
            logger.warning(f"Redmine {method.upper()} {path} failed with status {e.response.status_code}")
            raise RedmineApiError(_error_message(e), e.response.status_code, body) from e
        except httpx.HTTPError as e:
            logger.warning(f"Redmine {method.upper()} {path} failed: {e}")
            raise RedmineApiError(f"{e.__class__.__name__}: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RedmineApiError(f"Invalid JSON in Redmine response: {e}", response.status_code,
                                  response.text) from e

    def get_issue(self, issue_id: int, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request(f"issues/{issue_id}.json", params=params)

    def get_issues(self, query: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("issues.json", params=query)

    def create_issue(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("issues.json", "post", data={"issue": payload})

    def update_issue(self, issue_id: int, payload: Dict[str, Any]) -> None:
        self.request(f"issues/{issue_id}.json", "put", data={"issue": payload})

    def delete_issue(self, issue_id: int) -> None:
        self.request(f"issues/{issue_id}.json", "delete")

    def add_watcher(self, issue_id: int, user_id: int) -> None:
        self.request(f"issues/{issue_id}/watchers.json", "post", data={"user_id": user_id})

    def remove_watcher(self, issue_id: int, user_id: int) -> None:
        self.request(f"issues/{issue_id}/watchers/{user_id}.json", "delete")

    def close(self) -> None:
        self._http.close()
