"""Despacho de operaciones MCP hacia el directorio y el gateway.

Este módulo es el único que conoce el conjunto cerrado de operaciones con
nombre. Cada miembro de `Operation` tiene exactamente un handler; la tabla se
comprueba al importar, así que un miembro nuevo no puede salir sin handler.

Aquí no hay tipos MCP: los resultados son texto (JSON indentado) y los fallos
son excepciones de `core.domain.errors`. El adaptador MCP decide cuáles son
faults de protocolo y cuáles resultados de error.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

from pydantic import ValidationError

from core.addressing import format_address, parse_address
from core.domain.errors import InvalidParams, UnknownOperation
from core.domain.models import QuerySpec
from core.interfaces.backend import EntryBackend
from core.services.content_types import ContentTypeDirectory

JSON_MIME_TYPE = "application/json"

_CONTENT_TYPE_ARG = {
    "type": "string",
    "description": "The content type UID (e.g., 'api::article.article')",
}


class Operation(str, Enum):
    LIST_CONTENT_TYPES = "list_content_types"
    GET_ENTRIES = "get_entries"
    GET_ENTRY = "get_entry"
    CREATE_ENTRY = "create_entry"
    UPDATE_ENTRY = "update_entry"
    DELETE_ENTRY = "delete_entry"
    UPLOAD_MEDIA = "upload_media"

    @classmethod
    def parse(cls, name: str) -> "Operation":
        try:
            return cls(name)
        except ValueError as exc:
            raise UnknownOperation(f"Unknown tool: {name}") from exc


@dataclass(frozen=True)
class ToolDefinition:
    """Descripción anunciada de una operación (no se valida en el borde)."""

    operation: Operation
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.operation.value


@dataclass(frozen=True)
class ResourceListing:
    uri: str
    name: str
    description: str
    mime_type: str = JSON_MIME_TYPE


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        operation=Operation.LIST_CONTENT_TYPES,
        description="List all available content types in Strapi",
        input_schema={"type": "object", "properties": {}},
    ),
    ToolDefinition(
        operation=Operation.GET_ENTRIES,
        description=(
            "Get entries for a specific content type with optional filtering, "
            "pagination, sorting, and population of relations"
        ),
        input_schema={
            "type": "object",
            "properties": {
                "contentType": _CONTENT_TYPE_ARG,
                "filters": {
                    "type": "object",
                    "description": "Filters to apply to the query (e.g., { title: { $contains: 'hello' } })",
                },
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "number", "description": "Page number"},
                        "pageSize": {"type": "number", "description": "Number of items per page"},
                    },
                    "description": "Pagination options",
                },
                "sort": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Sorting options (e.g., ['title:asc', 'createdAt:desc'])",
                },
                "populate": {
                    "oneOf": [
                        {"type": "string", "description": "Relation to populate (e.g., 'author')"},
                        {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Relations to populate (e.g., ['author', 'categories'])",
                        },
                        {"type": "object", "description": "Complex populate configuration"},
                    ],
                    "description": "Relations to populate",
                },
            },
            "required": ["contentType"],
        },
    ),
    ToolDefinition(
        operation=Operation.GET_ENTRY,
        description="Get a specific entry by ID",
        input_schema={
            "type": "object",
            "properties": {
                "contentType": _CONTENT_TYPE_ARG,
                "id": {"type": "string", "description": "The ID of the entry"},
            },
            "required": ["contentType", "id"],
        },
    ),
    ToolDefinition(
        operation=Operation.CREATE_ENTRY,
        description="Create a new entry for a content type",
        input_schema={
            "type": "object",
            "properties": {
                "contentType": _CONTENT_TYPE_ARG,
                "data": {"type": "object", "description": "The data for the new entry"},
            },
            "required": ["contentType", "data"],
        },
    ),
    ToolDefinition(
        operation=Operation.UPDATE_ENTRY,
        description="Update an existing entry",
        input_schema={
            "type": "object",
            "properties": {
                "contentType": _CONTENT_TYPE_ARG,
                "id": {"type": "string", "description": "The ID of the entry to update"},
                "data": {"type": "object", "description": "The updated data for the entry"},
            },
            "required": ["contentType", "id", "data"],
        },
    ),
    ToolDefinition(
        operation=Operation.DELETE_ENTRY,
        description="Delete an entry",
        input_schema={
            "type": "object",
            "properties": {
                "contentType": _CONTENT_TYPE_ARG,
                "id": {"type": "string", "description": "The ID of the entry to delete"},
            },
            "required": ["contentType", "id"],
        },
    ),
    ToolDefinition(
        operation=Operation.UPLOAD_MEDIA,
        description="Upload a media file to Strapi",
        input_schema={
            "type": "object",
            "properties": {
                "fileData": {
                    "type": "string",
                    "description": (
                        "Base64-encoded file data, optionally with data URL prefix "
                        "(e.g., 'data:image/jpeg;base64,...')"
                    ),
                },
                "fileName": {"type": "string", "description": "Name of the file (e.g., 'image.jpg')"},
                "fileType": {"type": "string", "description": "MIME type of the file (e.g., 'image/jpeg')"},
            },
            "required": ["fileData", "fileName", "fileType"],
        },
    ),
)


def to_json_text(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _string_arg(args: Mapping[str, Any], name: str) -> str | None:
    value = args.get(name)
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def _require_strings(args: Mapping[str, Any], names: tuple[str, ...], message: str) -> list[str]:
    values = [_string_arg(args, name) for name in names]
    if any(value is None for value in values):
        raise InvalidParams(message)
    return [value for value in values if value is not None]


def _require_data(args: Mapping[str, Any], message: str) -> dict[str, Any]:
    data = args.get("data")
    if not isinstance(data, dict):
        raise InvalidParams(message)
    return data


Handler = Callable[["OperationDispatcher", Mapping[str, Any]], Awaitable[str]]


class OperationDispatcher:
    """Punto de entrada de las tres rutas MCP: recursos, lectura y tools."""

    def __init__(self, directory: ContentTypeDirectory, backend: EntryBackend) -> None:
        self._directory = directory
        self._backend = backend

    # Recursos

    async def list_resources(self) -> list[ResourceListing]:
        content_types = await self._directory.list_content_types()
        return [
            ResourceListing(
                uri=format_address(ct.uid),
                name=ct.display_name or ct.uid,
                description=f"Strapi content type: {ct.display_name or ct.uid}",
            )
            for ct in content_types
        ]

    async def read_resource(self, uri: str) -> str:
        address = parse_address(uri)
        if address.entry_id is not None:
            entry = await self._backend.get_entry(address.content_type_uid, address.entry_id)
            return to_json_text(entry)
        entries = await self._backend.list_entries(address.content_type_uid, address.query)
        return to_json_text(entries)

    # Tools

    def list_tools(self) -> tuple[ToolDefinition, ...]:
        return TOOL_DEFINITIONS

    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> str:
        operation = Operation.parse(name)
        handler = _HANDLERS[operation]
        return await handler(self, arguments or {})

    async def _list_content_types(self, args: Mapping[str, Any]) -> str:
        content_types = await self._directory.list_content_types()
        return to_json_text([ct.summary() for ct in content_types])

    async def _get_entries(self, args: Mapping[str, Any]) -> str:
        (content_type,) = _require_strings(args, ("contentType",), "Content type is required")

        fields = {
            key: args[key]
            for key in ("filters", "pagination", "sort", "populate")
            if args.get(key) is not None
        }
        try:
            query = QuerySpec.model_validate(fields)
        except ValidationError as exc:
            raise InvalidParams(f"Invalid query arguments: {exc.errors()[0]['msg']}") from exc

        entries = await self._backend.list_entries(content_type, query)
        return to_json_text(entries)

    async def _get_entry(self, args: Mapping[str, Any]) -> str:
        content_type, entry_id = _require_strings(
            args, ("contentType", "id"), "Content type and ID are required"
        )
        entry = await self._backend.get_entry(content_type, entry_id)
        return to_json_text(entry)

    async def _create_entry(self, args: Mapping[str, Any]) -> str:
        message = "Content type and data are required"
        (content_type,) = _require_strings(args, ("contentType",), message)
        data = _require_data(args, message)
        entry = await self._backend.create_entry(content_type, data)
        return to_json_text(entry)

    async def _update_entry(self, args: Mapping[str, Any]) -> str:
        message = "Content type, ID, and data are required"
        content_type, entry_id = _require_strings(args, ("contentType", "id"), message)
        data = _require_data(args, message)
        entry = await self._backend.update_entry(content_type, entry_id, data)
        return to_json_text(entry)

    async def _delete_entry(self, args: Mapping[str, Any]) -> str:
        content_type, entry_id = _require_strings(
            args, ("contentType", "id"), "Content type and ID are required"
        )
        await self._backend.delete_entry(content_type, entry_id)
        return f"Successfully deleted entry {entry_id} from {content_type}"

    async def _upload_media(self, args: Mapping[str, Any]) -> str:
        file_data, file_name, file_type = _require_strings(
            args,
            ("fileData", "fileName", "fileType"),
            "File data, file name, and file type are required",
        )
        media = await self._backend.upload_media(file_data, file_name, file_type)
        return to_json_text(media)


_HANDLERS: dict[Operation, Handler] = {
    Operation.LIST_CONTENT_TYPES: OperationDispatcher._list_content_types,
    Operation.GET_ENTRIES: OperationDispatcher._get_entries,
    Operation.GET_ENTRY: OperationDispatcher._get_entry,
    Operation.CREATE_ENTRY: OperationDispatcher._create_entry,
    Operation.UPDATE_ENTRY: OperationDispatcher._update_entry,
    Operation.DELETE_ENTRY: OperationDispatcher._delete_entry,
    Operation.UPLOAD_MEDIA: OperationDispatcher._upload_media,
}

_unhandled = set(Operation) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"Operations without handler: {sorted(op.value for op in _unhandled)}")

_undocumented = set(Operation) - {tool.operation for tool in TOOL_DEFINITIONS}
if _undocumented:
    raise RuntimeError(f"Operations without tool definition: {sorted(op.value for op in _undocumented)}")
