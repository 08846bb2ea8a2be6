"""MCP server setup for the Hyperfabric Adapter."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools import Tool, ToolResult
from pydantic import Field
from pydantic.json_schema import SkipJsonSchema

from .config import Settings
from .executors import RestExecutor
from .generator import ToolGenerator
from .logging import mask_token
from .openapi import load_spec
from .resolver import SchemaResolver
from .service import AdapterService
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)


class OpenAPIProxyTool(Tool):
    """MCP tool whose input schema comes straight from an OpenAPI operation."""

    adapter_service: Annotated[SkipJsonSchema[Any], Field(exclude=True)] = None

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        result = await self.adapter_service.call_tool(self.name, arguments)
        return _to_tool_result(result)


class UnknownToolMiddleware(Middleware):
    """Answer calls for names outside the registry through the adapter service.

    FastMCP would otherwise reply with its own "Unknown tool" text before the
    call reaches the service.
    """

    def __init__(self, adapter_service: AdapterService) -> None:
        self.adapter_service = adapter_service

    async def on_call_tool(
        self,
        context: MiddlewareContext[Any],
        call_next: CallNext[Any, ToolResult],
    ) -> ToolResult:
        name = context.message.name
        if name in self.adapter_service.tool_registry:
            return await call_next(context)
        result = await self.adapter_service.call_tool(name, context.message.arguments)
        return _to_tool_result(result)


def _to_tool_result(result: Dict[str, Any]) -> ToolResult:
    text = "\n".join(block["text"] for block in result["content"])
    return ToolResult(content=text, is_error=result["isError"])


async def build_service(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> AdapterService:
    spec = await load_spec(settings.spec_path())
    resolver = SchemaResolver(spec.document)

    registry = ToolRegistry()
    registry.load(ToolGenerator(spec, resolver).generate())

    logger.info("Using token: %s", mask_token(settings.hyperfabric_api_token))
    executor = RestExecutor(
        registry,
        base_url=settings.hyperfabric_api_base_url,
        api_token=settings.hyperfabric_api_token,
        timeout_seconds=settings.hyperfabric_api_timeout_seconds,
        transport=transport,
    )
    return AdapterService(registry, executor)


async def build_server(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> tuple[FastMCP, object | None]:
    # Tools are fully registered before any transport is started.
    service = await build_service(settings, transport=transport)

    mcp = FastMCP(settings.service_name, instructions=_instructions())
    mcp.add_middleware(UnknownToolMiddleware(service))
    for descriptor in service.list_tools():
        mcp.add_tool(
            OpenAPIProxyTool(
                name=descriptor.name,
                description=descriptor.description,
                parameters=descriptor.input_schema,
                adapter_service=service,
            )
        )
        logger.debug("Registered tool: %s", descriptor.name)

    return mcp, _get_http_app(mcp, settings)


def _instructions() -> str:
    return (
        "Hyperfabric API adapter. "
        "Every tool maps to one operation of the Hyperfabric REST API and returns "
        "the HTTP status, status text and response data."
    )


def _get_http_app(mcp: FastMCP, settings: Settings):  # type: ignore[no-untyped-def]
    transport = settings.adapter_transport.lower()
    if transport in {"http"}:
        return mcp.http_app(transport="http", stateless_http=True, json_response=True)
    if transport in {"streamable-http", "streamablehttp"}:
        return mcp.http_app(
            transport="streamable-http", stateless_http=True, json_response=True
        )
    return None
