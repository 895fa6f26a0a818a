"""HTTP client for the notes API."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from notekeeper.config.settings import settings
from notekeeper.utils.filters import NoteFilter

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error response (or transport failure) from the notes API."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build from an error body, which is either ``{"detail": {"error": ...}}`` or ``{"error": ...}``."""
        code = "HTTP_ERROR"
        message = f"Request failed with status {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            return cls(response.status_code, code, message)

        if isinstance(body, dict):
            payload = body.get("detail", body)
            if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
                code = payload["error"].get("code", code)
                message = payload["error"].get("message", message)
            elif isinstance(payload, list):
                # Request validation errors from FastAPI
                code = "VALIDATION_ERROR"
                message = "; ".join(str(item.get("msg", item)) for item in payload if isinstance(item, dict)) or message
            elif isinstance(payload, str):
                message = payload
        return cls(response.status_code, code, message)


class NotesApiClient:
    """
    Async client for the notes API, authenticated with a bearer token.

    Usable as an async context manager; the editor session uses it as its
    gateway.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.NOTES_API_URL,
            headers=headers,
            timeout=timeout or settings.HTTP_DEFAULT_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "NotesApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Notes API request error: {method} {url}: {e}")
            raise ApiError(0, "CONNECTION_FAILED", f"Failed to connect to notes API: {e}") from e

        if response.is_error:
            error = ApiError.from_response(response)
            logger.error(f"Notes API error: {method} {url}: {response.status_code} {error.code}")
            raise error

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ============ Notes ============

    async def list_notes(self, note_filter: Optional[NoteFilter] = None) -> List[Dict[str, Any]]:
        params = note_filter.to_query_params() if note_filter else {}
        return await self._request("GET", "/notes", params=params)

    async def get_note(self, note_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/notes/{note_id}")

    async def view_note(self, note_id: str) -> Dict[str, Any]:
        """Note plus whether the requester owns it."""
        return await self._request("GET", f"/notes/{note_id}/view")

    async def get_shared_note(self, note_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/share/{note_id}")

    async def create_note(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/notes", json=data)

    async def update_note(self, note_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/notes/{note_id}", json=data)

    async def delete_note(self, note_id: str):
        await self._request("DELETE", f"/notes/{note_id}")

    # ============ Tags & categories ============

    async def list_tags(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/tags")

    async def list_categories(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/categories")

    async def create_tag(self, name: str) -> Dict[str, Any]:
        return await self._request("POST", "/tags", json={"name": name})

    async def create_category(self, name: str) -> Dict[str, Any]:
        return await self._request("POST", "/categories", json={"name": name})
