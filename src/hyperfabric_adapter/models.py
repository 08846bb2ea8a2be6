"""Internal models for OpenAPI operations and generated tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]
JsonObject = Dict[str, JsonValue]

HTTP_METHODS = frozenset({"get", "put", "post", "delete", "options", "head", "patch", "trace"})
MUTATING_METHODS = frozenset({"post", "put", "patch"})


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool = False
    schema: Dict[str, Any] = field(default_factory=dict)
    description: str = ""


@dataclass(frozen=True)
class Operation:
    method: str
    path: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: Tuple[Parameter, ...] = ()
    request_body: Optional[Dict[str, Any]] = None
    responses: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_mutating(self) -> bool:
        return self.method in MUTATING_METHODS

    def body_schema(self) -> Optional[Dict[str, Any]]:
        content = (self.request_body or {}).get("content") or {}
        json_body = content.get("application/json") or {}
        schema = json_body.get("schema")
        return schema if isinstance(schema, dict) else None


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class GeneratedTool:
    descriptor: ToolDescriptor
    method: str
    path: str
    operation: Operation
    # Deep-resolved application/json body schema; None when the call sends no body.
    body_schema: Optional[Dict[str, Any]] = None

    @property
    def name(self) -> str:
        return self.descriptor.name


@dataclass(frozen=True)
class RequestBinding:
    method: str
    url: str
    query: Dict[str, Any] = field(default_factory=dict)
    body: Optional[JsonValue] = None


@dataclass(frozen=True)
class ApiResponse:
    status: int
    status_text: str
    data: JsonValue = None

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "statusText": self.status_text, "data": self.data}
