"""HTTP client for the Docfolio REST API."""

import logging
import os
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request failed; ``message`` is what the server (or transport) said."""

    def __init__(self, message: str, status_code: Optional[int] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code


def _error_from_response(resp: httpx.Response) -> ApiError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message") or body.get("error") or f"HTTP error! status: {resp.status_code}"
    return ApiError(message, status_code=resp.status_code, error_code=body.get("error"))


class DocfolioClient:
    """Async client wrapping the Docfolio backend REST API.

    Configuration via environment variables:
        DOCFOLIO_API_URL     -- Backend base URL (default: http://localhost:8000)
        DOCFOLIO_API_TIMEOUT -- Request timeout in seconds (default: 30)

    Failed requests are not retried; they raise ApiError carrying the
    server's message.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url or os.environ.get("DOCFOLIO_API_URL", "http://localhost:8000")
        self.timeout = timeout if timeout is not None else float(os.environ.get("DOCFOLIO_API_TIMEOUT", "30"))
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        client = await self._get_client()
        try:
            resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Request %s %s failed: %s", method, path, exc)
            raise ApiError(str(exc) or "Request failed") from exc

        if resp.status_code >= 400:
            error = _error_from_response(resp)
            logger.debug(
                "Request %s %s returned %d: %s", method, path, resp.status_code, error.message
            )
            raise error
        return resp.json()

    # -- Combined feed ----------------------------------------------------

    async def list_combined(self, user_id: int, page: int = 1, limit: int = 10) -> dict[str, Any]:
        """One page of the user's feed. Maps to GET /api/users/{id}/documents-folders."""
        return await self._request(
            "GET",
            f"/api/users/{user_id}/documents-folders",
            params={"page": page, "limit": limit},
        )

    async def search_combined(
        self, user_id: int, search: str, page: int = 1, limit: int = 10,
    ) -> dict[str, Any]:
        """Feed filtered by name. Maps to GET /api/users/{id}/search."""
        return await self._request(
            "GET",
            f"/api/users/{user_id}/search",
            params={"search": search, "page": page, "limit": limit},
        )

    async def list_users(self, page: int = 1, limit: int = 10) -> list[dict[str, Any]]:
        body = await self._request("GET", "/api/users", params={"page": page, "limit": limit})
        return body.get("data", [])

    # -- Documents --------------------------------------------------------

    async def create_document(
        self,
        name: str,
        file_size: str,
        user_id: int,
        folder_id: Optional[int] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": name,
            "file_size": file_size,
            "document_user_id": user_id,
        }
        if folder_id is not None:
            payload["folder_document_id"] = folder_id
        body = await self._request("POST", "/api/documents", json=payload)
        return body["data"]

    async def check_document_names(self, user_id: int, names: list[str]) -> list[str]:
        """Names from *names* that the user already has."""
        body = await self._request(
            "POST", f"/api/documents/user/{user_id}/check-names", json={"names": names},
        )
        return body["data"]["existingNames"]

    async def delete_document(self, document_id: int) -> None:
        await self._request("DELETE", f"/api/documents/{document_id}")

    async def delete_documents(self, document_ids: list[int]) -> int:
        body = await self._request("DELETE", "/api/documents", json={"ids": document_ids})
        return body["data"]["deletedCount"]

    # -- Folders ----------------------------------------------------------

    async def create_folder(
        self, name: str, user_id: int, document_ids: Optional[list[int]] = None,
    ) -> dict[str, Any]:
        body = await self._request(
            "POST",
            "/api/folders",
            json={"name": name, "folders_user_id": user_id, "document_ids": document_ids or []},
        )
        return body["data"]

    async def get_folder(self, folder_id: int) -> dict[str, Any]:
        body = await self._request("GET", f"/api/folders/{folder_id}")
        return body["data"]

    async def delete_folder(self, folder_id: int) -> None:
        await self._request("DELETE", f"/api/folders/{folder_id}")

    async def delete_folders(self, folder_ids: list[int]) -> int:
        body = await self._request("DELETE", "/api/folders", json={"ids": folder_ids})
        return body["data"]["deletedCount"]

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "DocfolioClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
