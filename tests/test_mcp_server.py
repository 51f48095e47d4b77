import json

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from adapters.mcp_server import StrapiMcpServer, build_server
from core.domain.errors import BackendUnavailable


@pytest.fixture
def mcp_server(settings, backend, content_types_payload):
    backend.route("GET", "/api/content-types", json_body=content_types_payload)
    backend.route("GET", "/api/article/5", json_body={"data": {"id": 5, "title": "hello"}})
    backend.route("GET", "/api/article", json_body={"data": [], "meta": {"pagination": {"total": 0}}})
    backend.route("DELETE", "/api/article/5", status=204)
    return build_server(settings, transport=backend.transport)


def test_handlers_are_registered(mcp_server):
    handlers = mcp_server.server.request_handlers

    for request_type in (
        types.ListResourcesRequest,
        types.ReadResourceRequest,
        types.ListToolsRequest,
        types.CallToolRequest,
    ):
        assert request_type in handlers


async def test_list_resources(mcp_server):
    resources = await mcp_server.list_resources()

    assert [str(r.uri) for r in resources] == [
        "strapi://content-type/api::article.article",
        "strapi://content-type/api::category.category",
    ]
    assert resources[0].mimeType == "application/json"


async def test_read_resource_returns_json_contents(mcp_server):
    (contents,) = await mcp_server.read_resource("strapi://content-type/api::article.article/5")

    assert contents.mime_type == "application/json"
    assert json.loads(contents.content) == {"id": 5, "title": "hello"}


async def test_read_resource_failure_is_protocol_fault(mcp_server):
    with pytest.raises(McpError) as excinfo:
        await mcp_server.read_resource("strapi://content-type/api::article.article/404")

    assert excinfo.value.error.message.startswith("Failed to read resource: ")


async def test_read_resource_bad_address_is_invalid_request(mcp_server, backend):
    with pytest.raises(McpError) as excinfo:
        await mcp_server.read_resource("strapi://other/thing")

    assert excinfo.value.error.code == types.INVALID_REQUEST
    assert backend.requests == []


async def test_list_tools_advertises_schemas(mcp_server):
    tools = {tool.name: tool for tool in await mcp_server.list_tools()}

    assert set(tools) == {
        "list_content_types",
        "get_entries",
        "get_entry",
        "create_entry",
        "update_entry",
        "delete_entry",
        "upload_media",
    }
    assert tools["update_entry"].inputSchema["required"] == ["contentType", "id", "data"]


async def test_call_tool_delete(mcp_server, backend):
    result = await mcp_server.call_tool("delete_entry", {"contentType": "api::article.article", "id": "5"})

    assert not result.isError
    assert result.content[0].text == "Successfully deleted entry 5 from api::article.article"
    assert [(r.method, r.url.path) for r in backend.requests] == [("DELETE", "/api/article/5")]


async def test_call_tool_backend_failure_is_error_result(mcp_server):
    result = await mcp_server.call_tool("get_entry", {"contentType": "api::article.article", "id": "404"})

    assert result.isError
    assert result.content[0].text.startswith("Error: Failed to fetch entry 404")


async def test_call_tool_missing_arguments_is_invalid_params(mcp_server, backend):
    with pytest.raises(McpError) as excinfo:
        await mcp_server.call_tool("create_entry", {"contentType": "api::article.article"})

    assert excinfo.value.error.code == types.INVALID_PARAMS
    assert backend.requests == []


async def test_call_tool_unknown_name_is_method_not_found(mcp_server):
    with pytest.raises(McpError) as excinfo:
        await mcp_server.call_tool("nope", {})

    assert excinfo.value.error.code == types.METHOD_NOT_FOUND


async def test_list_resources_failure_is_protocol_fault():
    class _BrokenDispatcher:
        async def list_resources(self):
            raise BackendUnavailable("Failed to fetch content types: down")

    server = StrapiMcpServer(_BrokenDispatcher())

    with pytest.raises(McpError, match="Failed to list resources: Failed to fetch content types: down"):
        await server.list_resources()
