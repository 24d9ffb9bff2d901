"""
Backend access for the client core.

``APIClient`` is a thin httpx wrapper that tags every request with the
caller's frontend. ``NotesRemote`` turns the notes API into typed calls.
Every owner-scoped call takes the ``Identity`` to act as explicitly, so a
request started for one user can never complete as another.
"""

from functools import lru_cache
from typing import Any

import httpx
from pydantic import TypeAdapter

from inkline.backend.core.config import get_server_base_url
from inkline.backend.core.exceptions import ApplicationError
from inkline.backend.core.logging import get_logger, log_with_source
from inkline.backend.schemas.category import CategoryResponse
from inkline.backend.schemas.note import DeleteResult, NoteResponse, PublicNoteResponse
from inkline.backend.schemas.profile import ProfileResponse
from inkline.backend.schemas.stats import InsightsResponse
from inkline.client.session import Identity

logger = get_logger(__name__)

QUOTA_EXCEEDED = "NOTE_QUOTA_EXCEEDED"
NETWORK_ERROR = "NETWORK_ERROR"
BAD_RESPONSE = "BAD_RESPONSE"


class RemoteError(ApplicationError):
    """
    A backend call failed.

    ``code`` is the backend's error code, or NETWORK_ERROR when no response
    arrived; ``status_code`` is None in that case.
    """

    def __init__(
        self,
        message: str,
        code: str = NETWORK_ERROR,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.status_code = status_code


class APIClient:
    """
    One pooled httpx client per process.

    base_url and timeout default to the server in application.yaml. Tests
    pass ``transport`` to talk to an in-process app.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        frontend: str = "client",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None or timeout is None:
            default_url, default_timeout = get_server_base_url()
            base_url = base_url or default_url
            timeout = default_timeout if timeout is None else timeout
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.frontend = frontend
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": self.frontend},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Raises:
            httpx.HTTPError: No response was received
        """
        try:
            response = await self._http().request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger, self.frontend, "warning", "Backend unreachable",
                method=method, path=path, error=str(e) or type(e).__name__,
            )
            raise
        log_with_source(
            logger, self.frontend, "debug", "Backend call",
            method=method, path=path, status_code=response.status_code,
            request_id=response.headers.get("X-Request-ID"),
        )
        return response


def _auth(identity: Identity) -> dict[str, str]:
    return {"Authorization": f"Bearer {identity.access_token}"}


def _raise_for_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        error = response.json().get("error") or {}
    except (ValueError, AttributeError):
        error = {}
    raise RemoteError(
        error.get("message") or f"HTTP {response.status_code}",
        code=error.get("code") or "HTTP_ERROR",
        status_code=response.status_code,
        details=error.get("details"),
    )


@lru_cache(maxsize=None)
def _adapter(expect: Any) -> TypeAdapter:
    return TypeAdapter(expect)


class NotesRemote:
    """Typed notes API. Every failure surfaces as RemoteError."""

    def __init__(self, api: APIClient, api_prefix: str = "/api/v1") -> None:
        self.api = api
        self.prefix = api_prefix.rstrip("/")

    async def _call(self, method: str, path: str, expect: Any = None, **kwargs: Any) -> Any:
        """
        Send one request and decode the envelope's ``data`` as ``expect``.

        ``expect`` is a pydantic-compatible type, ``bytes`` for a raw body,
        or None when the body is ignored.

        Raises:
            RemoteError: The call failed or the response could not be decoded
        """
        try:
            response = await self.api.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteError(str(e) or type(e).__name__) from e
        _raise_for_error(response)
        if expect is None:
            return None
        if expect is bytes:
            return response.content
        try:
            if not response.headers.get("content-type", "").startswith("application/json"):
                raise ValueError(f"content-type {response.headers.get('content-type')!r}")
            return _adapter(expect).validate_python(response.json()["data"])
        except (ValueError, KeyError, TypeError) as e:
            # pydantic.ValidationError is a ValueError
            log_with_source(
                logger, self.api.frontend, "warning", "Undecodable backend response",
                method=method, path=path, status_code=response.status_code, error=str(e),
            )
            raise RemoteError(
                "Unexpected response from server",
                code=BAD_RESPONSE,
                status_code=response.status_code,
            ) from e

    async def list_notes(self, identity: Identity, archived: bool = False) -> list[NoteResponse]:
        return await self._call(
            "GET",
            f"{self.prefix}/notes",
            list[NoteResponse],
            params={"archived": str(archived).lower()},
            headers=_auth(identity),
        )

    async def create_note(self, identity: Identity) -> NoteResponse:
        return await self._call(
            "POST", f"{self.prefix}/notes", NoteResponse, headers=_auth(identity)
        )

    async def update_note(self, identity: Identity, note_id: str, **fields: Any) -> NoteResponse:
        """Partial update; only the keyword arguments given are sent."""
        return await self._call(
            "PATCH",
            f"{self.prefix}/notes/{note_id}",
            NoteResponse,
            json=fields,
            headers=_auth(identity),
        )

    async def archive_notes(self, identity: Identity, ids: list[str]) -> list[NoteResponse]:
        return await self._call(
            "POST", f"{self.prefix}/notes/archive", list[NoteResponse],
            json={"ids": ids}, headers=_auth(identity),
        )

    async def restore_notes(self, identity: Identity, ids: list[str]) -> list[NoteResponse]:
        return await self._call(
            "POST", f"{self.prefix}/notes/restore", list[NoteResponse],
            json={"ids": ids}, headers=_auth(identity),
        )

    async def delete_notes(self, identity: Identity, ids: list[str]) -> list[str]:
        result = await self._call(
            "POST", f"{self.prefix}/notes/delete", DeleteResult,
            json={"ids": ids}, headers=_auth(identity),
        )
        return result.deleted_ids

    async def set_sharing(self, identity: Identity, note_id: str, is_public: bool) -> NoteResponse:
        return await self._call(
            "POST",
            f"{self.prefix}/notes/{note_id}/share",
            NoteResponse,
            json={"is_public": is_public},
            headers=_auth(identity),
        )

    async def export_notes(self, identity: Identity, ids: list[str], filename: str) -> bytes:
        return await self._call(
            "POST",
            f"{self.prefix}/notes/export",
            bytes,
            json={"ids": ids, "filename": filename},
            headers=_auth(identity),
        )

    async def list_categories(self, identity: Identity) -> list[CategoryResponse]:
        return await self._call(
            "GET", f"{self.prefix}/categories", list[CategoryResponse], headers=_auth(identity)
        )

    async def upsert_category(self, identity: Identity, name: str) -> CategoryResponse:
        return await self._call(
            "POST", f"{self.prefix}/categories", CategoryResponse,
            json={"name": name}, headers=_auth(identity),
        )

    async def delete_category(self, identity: Identity, category_id: str) -> None:
        await self._call(
            "DELETE", f"{self.prefix}/categories/{category_id}", headers=_auth(identity)
        )

    async def insights(self, identity: Identity) -> InsightsResponse:
        return await self._call(
            "GET", f"{self.prefix}/stats", InsightsResponse, headers=_auth(identity)
        )

    async def public_note(self, share_id: str) -> PublicNoteResponse:
        return await self._call("GET", f"/share/{share_id}", PublicNoteResponse)

    async def get_profile(self, identity: Identity, profile_id: str = "me") -> ProfileResponse:
        return await self._call(
            "GET", f"{self.prefix}/profiles/{profile_id}", ProfileResponse,
            headers=_auth(identity),
        )

    async def update_profile(self, identity: Identity, **fields: Any) -> ProfileResponse:
        """Partial update of the caller's own profile."""
        return await self._call(
            "PATCH", f"{self.prefix}/profiles/me", ProfileResponse,
            json=fields, headers=_auth(identity),
        )
