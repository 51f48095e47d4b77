"""Gateway genérico contra la API REST de Strapi.

Responsabilidad:
- Único componente que hace llamadas de red por entradas y media.
- CRUD parametrizado por UID de content type: la colección REST es el segundo
  segmento del UID (`api::article.article` -> `/api/article`).
- Añade/quita el sobre `{data: ...}` de Strapi para que los llamadores solo
  vean registros desenvueltos.

Mapeo de errores:
- 404 -> `NotFound`
- otro 4xx en escrituras (create/update/upload) -> `ValidationFailed`
- red, status no mapeado o cuerpo no JSON -> `BackendUnavailable`
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from adapters.http_client import build_async_client
from adapters.media import decode_file_data
from core.config import AppSettings
from core.domain.errors import (
    BackendUnavailable,
    InvalidParams,
    NotFound,
    ValidationFailed,
)
from core.domain.models import JsonValue, QuerySpec
from core.query import encode_query_params, to_backend_query

logger = logging.getLogger(__name__)


def collection_for(uid: str) -> str:
    """`api::article.article` -> `article`."""

    parts = uid.split(".")
    if len(parts) < 2 or not parts[1]:
        raise InvalidParams(f"Invalid content type UID: {uid!r} (expected 'namespace::name.collection')")
    return parts[1]


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if isinstance(message, str) and message:
            return message
    reason = response.reason_phrase or "error"
    return f"Request failed with status code {response.status_code} ({reason})"


class StrapiGateway:
    """Implementa `ContentTypeSource` y `EntryBackend` sobre httpx."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        failure: str,
        write: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("[Error] %s: %s", failure, exc)
            raise BackendUnavailable(f"{failure}: {exc}") from exc

        if response.is_success:
            return response

        detail = _error_detail(response)
        logger.error("[Error] %s: HTTP %s %s", failure, response.status_code, detail)
        if response.status_code == 404:
            raise NotFound(f"{failure}: {detail}")
        if write and 400 <= response.status_code < 500:
            raise ValidationFailed(f"{failure}: {detail}")
        raise BackendUnavailable(f"{failure}: {detail}")

    @staticmethod
    def _json(response: httpx.Response, *, failure: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise BackendUnavailable(f"{failure}: response body is not valid JSON") from exc

    def _unwrap(self, response: httpx.Response, *, failure: str) -> Any:
        body = self._json(response, failure=failure)
        if not isinstance(body, dict):
            raise BackendUnavailable(f"{failure}: unexpected response shape")
        return body.get("data")

    async def fetch_content_types(self) -> list[dict[str, Any]]:
        endpoint = self._settings.content_types_endpoint
        failure = f"GET {endpoint} failed"
        response = await self._request("GET", endpoint, failure=failure)
        items = self._unwrap(response, failure=failure)
        if not isinstance(items, list):
            raise BackendUnavailable(f"{failure}: expected a list under 'data'")
        return items

    async def list_entries(self, uid: str, query: QuerySpec | None = None) -> dict[str, Any]:
        logger.info("[API] Fetching entries for content type: %s", uid)
        collection = collection_for(uid)
        failure = f"Failed to fetch entries for {uid}"
        params = encode_query_params(to_backend_query(query))
        response = await self._request("GET", f"/api/{collection}", failure=failure, params=params)

        body = self._json(response, failure=failure)
        if not isinstance(body, dict):
            raise BackendUnavailable(f"{failure}: unexpected response shape")
        return {
            "data": body.get("data") or [],
            "meta": body.get("meta") or {},
        }

    async def get_entry(self, uid: str, entry_id: str) -> JsonValue:
        logger.info("[API] Fetching entry %s for content type: %s", entry_id, uid)
        collection = collection_for(uid)
        failure = f"Failed to fetch entry {entry_id} for {uid}"
        response = await self._request(
            "GET",
            f"/api/{collection}/{quote(str(entry_id), safe='')}",
            failure=failure,
        )
        return self._unwrap(response, failure=failure)

    async def create_entry(self, uid: str, data: dict[str, Any]) -> JsonValue:
        logger.info("[API] Creating new entry for content type: %s", uid)
        collection = collection_for(uid)
        failure = f"Failed to create entry for {uid}"
        response = await self._request(
            "POST",
            f"/api/{collection}",
            failure=failure,
            write=True,
            json={"data": data},
        )
        return self._unwrap(response, failure=failure)

    async def update_entry(self, uid: str, entry_id: str, data: dict[str, Any]) -> JsonValue:
        logger.info("[API] Updating entry %s for content type: %s", entry_id, uid)
        collection = collection_for(uid)
        failure = f"Failed to update entry {entry_id} for {uid}"
        response = await self._request(
            "PUT",
            f"/api/{collection}/{quote(str(entry_id), safe='')}",
            failure=failure,
            write=True,
            json={"data": data},
        )
        return self._unwrap(response, failure=failure)

    async def delete_entry(self, uid: str, entry_id: str) -> None:
        logger.info("[API] Deleting entry %s for content type: %s", entry_id, uid)
        collection = collection_for(uid)
        failure = f"Failed to delete entry {entry_id} for {uid}"
        await self._request(
            "DELETE",
            f"/api/{collection}/{quote(str(entry_id), safe='')}",
            failure=failure,
        )

    async def upload_media(self, file_data: str, file_name: str, file_type: str) -> JsonValue:
        """Sube un fichero a `/api/upload` y devuelve el primer asset.

        Strapi responde con una lista de assets; solo se envía un fichero, así
        que solo se devuelve el primero.
        """

        logger.info("[API] Uploading media file: %s", file_name)
        failure = "Failed to upload media"
        content = decode_file_data(file_data)
        response = await self._request(
            "POST",
            "/api/upload",
            failure=failure,
            write=True,
            files={"files": (file_name, content, file_type)},
        )

        body = self._json(response, failure=failure)
        if not isinstance(body, list) or not body:
            raise BackendUnavailable(f"{failure}: expected a non-empty list of uploaded files")
        return body[0]
