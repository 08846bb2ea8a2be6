"""Tests for server wiring and the FastMCP tool wrapper."""

import json

import httpx
import pytest
from fastmcp import Client

from hyperfabric_adapter.config import Settings
from hyperfabric_adapter.exceptions import SpecNotFoundError
from hyperfabric_adapter.server import OpenAPIProxyTool, build_server, build_service


@pytest.fixture
def settings(spec_file):
    return Settings(
        hyperfabric_api_token="secret-token-value",
        hyperfabric_api_base_url="https://hyperfabric.example.test",
        hyperfabric_spec_path=str(spec_file),
    )


class TestBuildService:
    async def test_tools_loaded_before_serving(self, settings, upstream):
        service = await build_service(settings, transport=upstream.transport())
        assert len(service.list_tools()) == 7
        assert service.tool_registry.loaded

    async def test_missing_spec_is_fatal(self, settings, tmp_path):
        settings.hyperfabric_spec_path = str(tmp_path / "absent.json")
        with pytest.raises(SpecNotFoundError):
            await build_service(settings)

    async def test_build_server_stdio(self, settings, upstream):
        mcp, app = await build_server(settings, transport=upstream.transport())
        assert mcp is not None
        assert app is None


class TestClientCalls:
    async def test_unknown_tool_reaches_service(self, settings, upstream):
        mcp, _ = await build_server(settings, transport=upstream.transport())

        async with Client(mcp) as client:
            result = await client.call_tool("unknown_tool", {}, raise_on_error=False)

        assert result.is_error is True
        assert [block.text for block in result.content] == [
            "Error: No operation found for tool: unknown_tool"
        ]
        assert upstream.requests == []

    async def test_known_tool_error_payload(self, settings, upstream):
        upstream.handler = lambda request: httpx.Response(404, json={"message": "nope"})
        mcp, _ = await build_server(settings, transport=upstream.transport())

        async with Client(mcp) as client:
            result = await client.call_tool(
                "fabricsGetFabric", {"fabricId": "f9"}, raise_on_error=False
            )

        assert result.is_error is True
        assert result.content[0].text == 'Error: API call failed: 404 Not Found - {"message": "nope"}'
        assert upstream.last.url.path == "/fabrics/f9"

    async def test_known_tool_success(self, settings, upstream):
        upstream.handler = lambda request: httpx.Response(200, json={"fabrics": []})
        mcp, _ = await build_server(settings, transport=upstream.transport())

        async with Client(mcp) as client:
            result = await client.call_tool("get_fabrics", {}, raise_on_error=False)

        assert result.is_error is False
        assert json.loads(result.content[0].text) == {
            "status": 200,
            "statusText": "OK",
            "data": {"fabrics": []},
        }


class TestOpenAPIProxyTool:
    async def test_run_success(self, settings, upstream):
        upstream.handler = lambda request: httpx.Response(200, json={"fabrics": []})
        service = await build_service(settings, transport=upstream.transport())
        descriptor = service.list_tools()[0]
        tool = OpenAPIProxyTool(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.input_schema,
            adapter_service=service,
        )

        result = await tool.run({"candidate": "c1"})

        assert result.is_error is False
        assert json.loads(result.content[0].text)["data"] == {"fabrics": []}
        assert upstream.last.headers["Authorization"] == "Bearer secret-token-value"

    async def test_run_error(self, settings, upstream):
        upstream.handler = lambda request: httpx.Response(500, json={"message": "boom"})
        service = await build_service(settings, transport=upstream.transport())
        tool = OpenAPIProxyTool(
            name="fabricsGetFabric",
            description="Get a fabric",
            parameters={"type": "object", "properties": {}, "required": []},
            adapter_service=service,
        )

        result = await tool.run({"fabricId": "f1"})

        assert result.is_error is True
        assert result.content[0].text.startswith("Error: API call failed: 500")
