"""Thin async HTTP layer shared by the client services."""

import logging
from typing import Any

import httpx

from client.config import ClientSettings, get_client_settings

logger = logging.getLogger(__name__)

WORKSPACE_COOKIE = "currentWorkspaceId"


class ApiError(Exception):
    """A non-success response from the API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ApiClient:
    """Wraps an ``httpx.AsyncClient`` with auth, the workspace cookie and error mapping.

    Usage:
        async with ApiClient(token=token) as api:
            body = await api.request("GET", "/api/v1/workspaces", action="Failed to fetch workspaces")
    """

    def __init__(
        self,
        token: str | None = None,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_client_settings()
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            headers=headers,
            timeout=settings.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def set_workspace(self, workspace_id: str | None) -> None:
        """Send (or stop sending) the current workspace cookie."""
        if workspace_id:
            self._client.cookies.set(WORKSPACE_COOKIE, workspace_id)
        else:
            self._client.cookies.delete(WORKSPACE_COOKIE)

    async def request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: Any = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: on any non-2xx status. The message comes from the body's
                ``message`` field, or ``"<action>: <status> <reason>"``.
        """
        response = await self._client.request(method, path, params=params, json=json)
        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.is_success:
            return response.json()

        raise ApiError(_error_message(response, action), response.status_code)


def _error_message(response: httpx.Response, action: str) -> str:
    fallback = f"{action}: {response.status_code} {response.reason_phrase}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback
