"""
HTTP Client.

Async client for the Gumboard notes API. All requests carry
X-Frontend-ID: cli so server logs can tell CLI traffic apart.
"""

from typing import Any

import httpx

from gumboard.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class APIError(Exception):
    """Non-success response from the API, carrying the error envelope."""

    def __init__(self, status_code: int, code: str | None, message: str) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"{status_code} {code or ''}: {message}".strip())

    @classmethod
    def from_response(cls, response: httpx.Response) -> "APIError":
        try:
            error = response.json().get("error") or {}
        except (ValueError, AttributeError):
            error = {}
        return cls(
            response.status_code,
            error.get("code"),
            error.get("message") or response.reason_phrase,
        )


class APIClient:
    """
    HTTP client for the notes API.

    Usage:
        client = APIClient(token=token)
        page = await client.list_notes(board_id, limit=20, offset=0)
        note = await client.create_note(board_id, checklist_items=[{"content": "Ship it"}])
        await client.close()

    Args:
        base_url: API base URL (defaults to server host/port in application.yaml)
        timeout: Request timeout in seconds (defaults to timeouts.external_api)
        token: Bearer token identifying the caller; anonymous when None
        transport: Optional httpx transport (tests use ASGITransport or MockTransport)
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None or timeout is None:
            from gumboard.backend.core.config import get_server_base_url

            try:
                config_base_url, config_timeout = get_server_base_url()
            except Exception as e:
                if base_url is None:
                    raise RuntimeError(
                        "Could not determine server URL from config/settings/application.yaml"
                    ) from e
                config_base_url, config_timeout = base_url, 30.0
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"X-Frontend-ID": "cli"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Make an HTTP request to the backend.

        Raises:
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()
        log_with_source(logger, "client", "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "client",
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            "client",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    async def _json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self.request(method, path, **kwargs)
        if not response.is_success:
            raise APIError.from_response(response)
        return response.json()

    async def list_notes(
        self,
        board_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """
        Fetch one page of a board's notes.

        Returns:
            {"notes": [...], "pagination": {total, limit, offset, hasMore, nextOffset}}

        Raises:
            APIError: On a non-success response
        """
        params: dict[str, Any] = {"offset": offset}
        if limit is not None:
            params["limit"] = limit
        return await self._json("GET", f"/api/v1/boards/{board_id}/notes", params=params)

    async def create_note(
        self,
        board_id: str,
        color: str | None = None,
        checklist_items: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """
        Create a note on a board.

        Returns:
            The created note

        Raises:
            APIError: On a non-success response
        """
        body: dict[str, Any] = {}
        if color is not None:
            body["color"] = color
        if checklist_items is not None:
            body["checklistItems"] = checklist_items
        data = await self._json("POST", f"/api/v1/boards/{board_id}/notes", json=body)
        return data["note"]
