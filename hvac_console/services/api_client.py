"""
HTTP client for the scheduling REST backend.

All console pages talk to the backend through ApiClient. A single
httpx.AsyncClient is shared by the whole application (created in the
lifespan handler); ApiClient binds it to the signed-in user's bearer token
for the duration of one request.

Error handling:
- HTTP 401 raises SessionExpiredError (the web layer clears the session)
- Any other non-2xx response raises ApiError with the backend's message
- Transport failures raise ApiError with status_code=None
"""

import logging
import httpx
from typing import Any, Dict, Optional

from hvac_console.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Exception raised when a backend request fails."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SessionExpiredError(ApiError):
    """Exception raised when the backend rejects the bearer token (HTTP 401)."""

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(401, message)


def create_http_client(base_url: Optional[str] = None, **kwargs) -> httpx.AsyncClient:
    """
    Build the shared AsyncClient pointed at the versioned API root.

    Args:
        base_url: Override for settings.api_root
        **kwargs: Passed through to httpx.AsyncClient (e.g. transport in tests)
    """
    return httpx.AsyncClient(
        base_url=base_url or settings.api_root,
        headers={"Content-Type": "application/json", "Accept": "application/json"},
        timeout=settings.API_TIMEOUT_SECONDS,
        **kwargs
    )


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable error out of a failed backend response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            if body.get(key):
                return str(body[key])

    return f"Request failed with status {response.status_code}"


class ApiClient:
    """
    Stateless request/response wrapper around the backend.

    One request, one response: no retries, no caching.
    """

    def __init__(self, http: httpx.AsyncClient, token: Optional[str] = None):
        self.http = http
        self.token = token

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API root (e.g. "jobs/3")
            json: Optional JSON body
            params: Optional query parameters; None values are dropped

        Returns:
            Decoded JSON, or None for empty responses

        Raises:
            SessionExpiredError: Backend answered 401
            ApiError: Any other failure
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self.http.request(
                method,
                path.lstrip("/"),
                json=json,
                params=params or None,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(None, "Unable to reach the server") from e

        if response.status_code == 401:
            logger.warning(f"{method} {path} rejected with 401, session expired")
            raise SessionExpiredError(_error_message(response))

        if response.is_error:
            message = _error_message(response)
            logger.error(f"{method} {path} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message)

        if response.status_code == 204 or not response.content:
            return None

        return response.json()

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)


async def check_backend_health(http: httpx.AsyncClient) -> Dict[str, Any]:
    """
    Probe the backend's /health endpoint.

    Never raises; returns a status dict for the console's own health check.
    """
    url = f"{settings.backend_root}/health"
    try:
        response = await http.get(url, timeout=5.0)
    except httpx.HTTPError as e:
        logger.warning(f"Backend health check failed: {e}")
        return {"status": "unhealthy", "message": "Backend unreachable"}

    if response.status_code == 200:
        return {"status": "healthy", "message": "Backend reachable"}

    return {
        "status": "unhealthy",
        "message": f"Backend returned HTTP {response.status_code}"
    }
