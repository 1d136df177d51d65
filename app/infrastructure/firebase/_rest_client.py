"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
HTTP failures are classified into the store exceptions of
app.infrastructure.exceptions; nothing here retries.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx

from app.infrastructure.exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    PermissionDeniedError,
    PreconditionFailedError,
    StoreException,
    UnauthenticatedError,
    UnavailableError,
)
from app.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_document,
)
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"

_TRANSIENT_STATUSES = frozenset({408, 429, 500, 502, 503, 504})


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _error_status(resp: httpx.Response) -> str:
    """Return the google.rpc status string from an error body ('' if absent)."""
    try:
        body = resp.json()
    except ValueError:
        return ""
    if isinstance(body, list):
        body = body[0] if body else {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("status") or "")
    return ""


def classify_response(resp: httpx.Response, path: str) -> StoreException:
    """Map a failed Firestore REST response to a store exception."""
    status = resp.status_code
    rpc_status = _error_status(resp)
    if status == 401 or rpc_status == "UNAUTHENTICATED":
        return UnauthenticatedError()
    if status == 403 or rpc_status == "PERMISSION_DENIED":
        return PermissionDeniedError()
    if rpc_status == "FAILED_PRECONDITION":
        return PreconditionFailedError(status_code=status)
    if status == 404:
        return DocumentNotFoundError(path)
    if status == 409 or rpc_status == "ALREADY_EXISTS":
        return DocumentExistsError(path)
    if status in _TRANSIENT_STATUSES or rpc_status in ("UNAVAILABLE", "DEADLINE_EXCEEDED"):
        return UnavailableError(status_code=status)
    return StoreException(
        f"Document store request failed with HTTP {status} {rpc_status}".strip(),
        status_code=status,
    )


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    *,
    missing_ok: bool = True,
    params: list[tuple[str, str]] | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API.

    A 404 returns None when missing_ok is True (reads, deletes) and raises
    DocumentNotFoundError otherwise (updates). Transport failures become
    UnavailableError.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method not in ("GET", "PATCH", "POST", "DELETE"):
        raise ValueError(f"Unsupported method: {method!r}")
    try:
        resp = await client.request(
            method,
            url,
            headers=headers,
            json=body if method in ("PATCH", "POST") else None,
            params=params,
        )
    except httpx.TransportError as e:
        logger.warning("Firestore %s %s failed: %s", method, url, e)
        raise UnavailableError(f"Document store unreachable: {e}") from e
    if resp.status_code == 404 and missing_ok:
        return None
    if resp.status_code not in (200, 204):
        raise classify_response(resp, url.removeprefix(f"{_BASE}/"))
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH with full replace)."""
        await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    async def update(self, data: dict[str, Any]) -> None:
        """Merge the given fields into an existing document.

        Only the listed field paths are written; a missing document raises
        DocumentNotFoundError (Firestore updateDoc semantics).
        """
        params = [("updateMask.fieldPaths", field) for field in data]
        params.append(("currentDocument.exists", "true"))
        await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            missing_ok=False,
            params=params,
        )

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            access_token=await self._client.get_token(),
        )
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_document(out.get("fields")))

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="DELETE",
            access_token=await self._client.get_token(),
        )


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains": "ARRAY_CONTAINS",
    "array_contains_any": "ARRAY_CONTAINS_ANY",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}


def _field_filter(field: str, op: str, value: Any) -> dict[str, Any]:
    return {
        "fieldFilter": {
            "field": {"fieldPath": field},
            "op": _OP_MAP.get(op, op),
            "value": _encode_value(value),
        }
    }


class _Query:
    """Fluent query builder for a collection; runs via runQuery on the server.

    Several where() calls are combined with AND.
    """

    def __init__(
        self,
        client: "FirestoreRESTClient",
        parent: str,
        collection_id: str,
    ):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[dict[str, Any]] = []

    def where(self, field: str, op: str, value: Any) -> "_Query":
        self._filters.append(_field_filter(field, op, value))
        return self

    def _structured_query(self) -> dict[str, Any]:
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        if len(self._filters) == 1:
            structured["where"] = self._filters[0]
        elif self._filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": self._filters}
            }
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{self._parent}:runQuery",
            method="POST",
            body={"structuredQuery": self._structured_query()},
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            doc = item["document"]
            name = doc.get("name", "")
            doc_id = name.split("/")[-1] if name else ""
            yield DocumentSnapshot(doc_id, decode_document(doc.get("fields")))


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    _PAGE_SIZE = 300

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (DocumentExistsError if it exists)."""
        url = f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}"
        await _request_async(
            self._client._http,
            url,
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            missing_ok=False,
        )

    async def add(self, data: dict[str, Any]) -> str:
        """Create a document under a new auto id and return the id."""
        document_id = generate_cuid()
        await self.create(document_id, data)
        return document_id

    def where(self, field: str, op: str, value: Any) -> _Query:
        """Start a query with a filter. Chain .where(), then .stream()."""
        return self.query().where(field, op, value)

    def query(self) -> _Query:
        """Start an unfiltered structured query on this collection."""
        parent = self._path.rsplit("/", 1)[0]
        return _Query(self._client, parent, self.id)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List all documents in the collection (shallow), following page tokens."""
        page_token: str | None = None
        while True:
            params = [("pageSize", str(self._PAGE_SIZE))]
            if page_token:
                params.append(("pageToken", page_token))
            out = await _request_async(
                self._client._http,
                f"{_BASE}/{self._path}",
                access_token=await self._client.get_token(),
                params=params,
            )
            if not out:
                return
            for doc in out.get("documents", []):
                name = doc.get("name", "")
                doc_id = name.split("/")[-1] if name else ""
                yield DocumentSnapshot(doc_id, decode_document(doc.get("fields")))
            page_token = out.get("nextPageToken")
            if not page_token:
                return


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str | None:
        """Return a valid access token; refreshes in thread pool to avoid blocking.

        A client built without credentials (emulator) sends no Authorization header.
        """
        if self._credentials is None:
            return None
        from google.auth import exceptions as auth_exceptions

        try:
            return await asyncio.to_thread(_get_access_token, self._credentials)
        except auth_exceptions.TransportError as e:
            raise UnavailableError(f"Token endpoint unreachable: {e}") from e
        except auth_exceptions.GoogleAuthError as e:
            raise UnauthenticatedError(f"Could not obtain access token: {e}") from e

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")
