"""Shared fixtures: a small Hyperfabric-like OpenAPI document and a fake upstream."""

from __future__ import annotations

import copy
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from hyperfabric_adapter.executors import RestExecutor
from hyperfabric_adapter.generator import ToolGenerator
from hyperfabric_adapter.openapi import OpenAPISpec
from hyperfabric_adapter.resolver import SchemaResolver
from hyperfabric_adapter.service import AdapterService
from hyperfabric_adapter.tool_registry import ToolRegistry


API_BASE_URL = "https://hyperfabric.example.test"
API_TOKEN = "test-token-0123456789"

_FABRIC_ID = {
    "name": "fabricId",
    "in": "path",
    "required": True,
    "schema": {"type": "string"},
    "description": "Fabric id or name",
}
_NODE_ID = {
    "name": "nodeId",
    "in": "path",
    "required": True,
    "schema": {"type": "string"},
    "description": "Node id or name",
}

SPEC_DOCUMENT: Dict[str, Any] = {
    "openapi": "3.0.1",
    "info": {"title": "Hyperfabric API", "version": "1.0.0"},
    "paths": {
        "/fabrics": {
            "get": {
                "summary": "Get all fabrics",
                "parameters": [
                    {
                        "name": "candidate",
                        "in": "query",
                        "schema": {"type": "string"},
                        "description": "Candidate configuration name",
                    }
                ],
            },
            "post": {
                "operationId": "fabricsAddFabrics",
                "summary": "Add fabrics",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/AddFabricsRequest"}
                        }
                    },
                },
            },
        },
        "/fabrics/{fabricId}": {
            "parameters": [_FABRIC_ID],
            "get": {"operationId": "fabricsGetFabric", "summary": "Get a fabric"},
            "delete": {"operationId": "fabricsDeleteFabric"},
        },
        "/fabrics/{fabricId}/nodes/{nodeId}": {
            "get": {
                "description": "Get a node of a fabric",
                "parameters": [
                    _FABRIC_ID,
                    _NODE_ID,
                    {"name": "includeDetails", "in": "query", "schema": {"type": "boolean"}},
                    {"name": "X-Trace", "in": "header", "schema": {"type": "string"}},
                ],
            },
            "put": {
                "operationId": "nodesUpdateNode",
                "summary": "Update a node",
                "parameters": [_FABRIC_ID, _NODE_ID],
                "requestBody": {
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/Node"}}
                    }
                },
            },
        },
        "/devices/{deviceId}/bind": {
            "post": {
                "summary": "Bind ports of a device",
                "parameters": [
                    {"name": "deviceId", "in": "path", "required": True, "schema": {"type": "string"}}
                ],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"type": "array", "items": {"type": "string"}}
                        }
                    }
                },
            }
        },
        "/x-info": "not an operation map",
        "/broken": {"get": "not an operation"},
    },
    "components": {
        "schemas": {
            "AddFabricsRequest": {
                "type": "object",
                "required": ["fabrics"],
                "properties": {
                    "fabrics": {
                        "type": "array",
                        "items": {"$ref": "#/components/schemas/Fabric"},
                    }
                },
            },
            "Fabric": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "topology": {"type": "string", "enum": ["MESH", "SPINE_LEAF"]},
                },
            },
            "Node": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string"},
                    "roles": {"type": "array", "items": {"type": "string"}},
                    "location": {"$ref": "#/components/schemas/Location"},
                },
            },
            "Location": {"type": "object", "properties": {"rack": {"type": "string"}}},
            "TreeNode": {
                "type": "object",
                "properties": {"child": {"$ref": "#/components/schemas/TreeNode"}},
            },
        }
    },
}


@pytest.fixture
def spec_document() -> Dict[str, Any]:
    return copy.deepcopy(SPEC_DOCUMENT)


@pytest.fixture
def spec(spec_document) -> OpenAPISpec:
    return OpenAPISpec(document=spec_document)


@pytest.fixture
def resolver(spec) -> SchemaResolver:
    return SchemaResolver(spec.document)


@pytest.fixture
def generated_tools(spec, resolver):
    return ToolGenerator(spec, resolver).generate()


@pytest.fixture
def registry(generated_tools) -> ToolRegistry:
    registry = ToolRegistry()
    registry.load(generated_tools)
    return registry


@pytest.fixture
def spec_file(tmp_path, spec_document):
    path = tmp_path / "hf_spec_modified.json"
    path.write_text(json.dumps(spec_document), encoding="utf-8")
    return path


class FakeUpstream:
    """Records every request and answers through a pluggable handler."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"ok": True}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def executor(registry, upstream) -> RestExecutor:
    return RestExecutor(
        registry,
        base_url=API_BASE_URL,
        api_token=API_TOKEN,
        transport=upstream.transport(),
    )


@pytest.fixture
def service(registry, executor) -> AdapterService:
    return AdapterService(registry, executor)
