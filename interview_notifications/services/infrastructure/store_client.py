"""
HTTP client for the managed document store that holds interviews and users.

The store exposes its server functions over HTTP:
    POST {base}/api/query     {"path": "interviews:getMyInterviews", "args": {...}, "format": "json"}
    POST {base}/api/mutation  {"path": "interviews:createInterview", "args": {...}, "format": "json"}
and answers {"status": "success", "value": ...} or
{"status": "error", "errorMessage": "...", "errorData": ...}.
"""

from typing import Any

import httpx

from interview_notifications.config import settings
from interview_notifications.errors import ConfigurationError
from interview_notifications.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class InterviewStoreError(Exception):
    """Custom exception for interview store failures."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_data: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_data = error_data


class StoreClient:
    """
    Thin async client for store queries and mutations.

    Every call may carry a bearer token: the end user's identity token when
    acting on their behalf, or the privileged store token for internal reads.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        if not base_url:
            raise ConfigurationError(["INTERVIEW_STORE_URL"])
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )

    async def close(self) -> None:
        await self._client.aclose()

    def _headers(self, token: str | None) -> dict:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def query(self, path: str, args: dict | None = None, token: str | None = None) -> Any:
        return await self._call("query", path, args, token)

    async def mutation(self, path: str, args: dict | None = None, token: str | None = None) -> Any:
        return await self._call("mutation", path, args, token)

    async def _call(self, kind: str, path: str, args: dict | None, token: str | None) -> Any:
        url = f"{self.base_url}/api/{kind}"
        body = {"path": path, "args": args or {}, "format": "json"}

        try:
            response = await self._client.post(url, json=body, headers=self._headers(token))
        except httpx.RequestError as e:
            logger.error("Interview store request failed", path=path, error=str(e))
            raise InterviewStoreError(f"Interview store unreachable: {e}") from e

        return self._handle_response(response, path)

    def _handle_response(self, response: httpx.Response, path: str) -> Any:
        try:
            data = response.json() if response.text else {}
        except ValueError:
            logger.error(
                "Interview store returned non-JSON response",
                path=path,
                status_code=response.status_code,
                response_text=response.text[:200] if response.text else "",
            )
            raise InterviewStoreError(
                f"Interview store error (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from None

        if response.is_success and data.get("status") == "success":
            return data.get("value")

        message = data.get("errorMessage") or f"Interview store error (HTTP {response.status_code})"
        logger.error(
            "Interview store function failed",
            path=path,
            status_code=response.status_code,
            error_message=message,
        )
        raise InterviewStoreError(
            message,
            status_code=response.status_code,
            error_data=data.get("errorData"),
        )


_store_client: StoreClient | None = None


def get_store_client() -> StoreClient:
    """Process-wide store client, created on first use."""
    global _store_client
    if _store_client is None:
        _store_client = StoreClient(settings.INTERVIEW_STORE_URL, settings.INTERVIEW_STORE_TIMEOUT)
    return _store_client


async def close_store_client() -> None:
    global _store_client
    if _store_client is not None:
        await _store_client.close()
        _store_client = None
