"""Adaptador MCP (SDK oficial `mcp`, servidor low-level sobre stdio).

Responsabilidad:
- Registrar los handlers de recursos y tools sobre `mcp.server.Server`.
- Traducir errores del Core a `McpError` (una sola vez, con el mensaje de la
  causa dentro) o a resultados de tool con `isError`.

Política de errores:
- list/read resource: cualquier fallo es un fault de protocolo.
- call tool: tool desconocida o argumentos inválidos son fault; los fallos
  del backend se devuelven como texto `Error: ...` para que el asistente los
  pueda explicar en la conversación.
"""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Any

import httpx
from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from adapters.strapi_gateway import StrapiGateway
from core.config import AppSettings
from core.domain.errors import InvalidParams, StrapiMcpError, UnknownOperation
from core.services.content_types import ContentTypeCache, ContentTypeDirectory
from core.services.dispatcher import OperationDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "strapi-mcp"


def get_server_version() -> str:
    try:
        return version(SERVER_NAME)
    except PackageNotFoundError:
        return "unknown"


def to_mcp_error(exc: Exception, *, context: str) -> McpError:
    if isinstance(exc, StrapiMcpError):
        code, message = exc.code, exc.message
    else:
        code, message = types.INTERNAL_ERROR, str(exc)
    return McpError(types.ErrorData(code=code, message=f"{context}: {message}"))


class StrapiMcpServer:
    """Conecta el `OperationDispatcher` con el runtime MCP."""

    def __init__(self, dispatcher: OperationDispatcher, *, name: str = SERVER_NAME) -> None:
        self._dispatcher = dispatcher
        self.server: Server = Server(name, version=get_server_version())
        self._register()

    def _register(self) -> None:
        self.server.list_resources()(self.list_resources)
        self.server.read_resource()(self.read_resource)
        self.server.list_tools()(self.list_tools)
        self.server.call_tool(validate_input=False)(self.call_tool)

    async def list_resources(self) -> list[types.Resource]:
        try:
            listings = await self._dispatcher.list_resources()
        except Exception as exc:
            logger.error("[Error] Failed to list resources: %s", exc)
            raise to_mcp_error(exc, context="Failed to list resources") from exc

        return [
            types.Resource(
                uri=listing.uri,
                name=listing.name,
                description=listing.description,
                mimeType=listing.mime_type,
            )
            for listing in listings
        ]

    async def read_resource(self, uri: Any) -> list[ReadResourceContents]:
        raw_uri = str(uri)
        try:
            text = await self._dispatcher.read_resource(raw_uri)
        except Exception as exc:
            logger.error("[Error] Failed to read resource %s: %s", raw_uri, exc)
            raise to_mcp_error(exc, context="Failed to read resource") from exc

        return [ReadResourceContents(content=text, mime_type="application/json")]

    async def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in self._dispatcher.list_tools()
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        try:
            text = await self._dispatcher.call(name, arguments or {})
        except (UnknownOperation, InvalidParams) as exc:
            logger.error("[Error] Tool execution failed: %s", exc.message)
            raise to_mcp_error(exc, context=f"Tool '{name}' rejected") from exc
        except StrapiMcpError as exc:
            logger.error("[Error] Tool execution failed: %s", exc.message)
            return types.CallToolResult(
                content=[types.TextContent(type="text", text=f"Error: {exc.message}")],
                isError=True,
            )

        return types.CallToolResult(content=[types.TextContent(type="text", text=text)])

    async def run_stdio(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def build_server(settings: AppSettings, *, transport: httpx.AsyncBaseTransport | None = None) -> StrapiMcpServer:
    """Cablea gateway -> directorio -> dispatcher -> servidor MCP."""

    gateway = StrapiGateway(settings, transport=transport)
    directory = ContentTypeDirectory(gateway, ContentTypeCache())
    return StrapiMcpServer(OperationDispatcher(directory, gateway))
