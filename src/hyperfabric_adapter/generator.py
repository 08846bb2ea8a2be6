"""Build MCP tool descriptors from OpenAPI operations."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import GeneratedTool, Operation, ToolDescriptor
from .naming import build_tool_name
from .openapi import OpenAPISpec
from .resolver import SchemaResolver


logger = logging.getLogger(__name__)

EXPOSED_PARAMETER_LOCATIONS = ("path", "query")
LEGACY_BODY_ARGUMENT = "requestBody"


class ToolGenerator:
    def __init__(self, spec: OpenAPISpec, resolver: Optional[SchemaResolver] = None) -> None:
        self.spec = spec
        self.resolver = resolver or SchemaResolver(spec.document)

    def generate(self) -> List[GeneratedTool]:
        tools: List[GeneratedTool] = []
        for path, method, operation in self.spec.iter_operations():
            try:
                tool = self.build_tool(method, path, operation)
            except (TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping operation %s %s: %s", method.upper(), path, exc)
                continue
            tools.append(tool)
            logger.debug("Generated tool: %s", tool.name)

        logger.info("Generated %s tools from OpenAPI spec", len(tools))
        return tools

    def build_tool(self, method: str, path: str, operation: Operation) -> GeneratedTool:
        name = build_tool_name(method, path, operation.operation_id)
        body_schema = self.resolved_body_schema(operation) if operation.is_mutating else None
        input_schema = self.build_input_schema(operation, body_schema)
        descriptor = ToolDescriptor(
            name=name,
            description=self.build_description(method, path, operation, input_schema, body_schema),
            input_schema=input_schema,
        )
        return GeneratedTool(
            descriptor=descriptor,
            method=method,
            path=path,
            operation=operation,
            body_schema=body_schema,
        )

    def build_description(
        self,
        method: str,
        path: str,
        operation: Operation,
        input_schema: Mapping[str, Any],
        body_schema: Optional[Mapping[str, Any]] = None,
    ) -> str:
        description = operation.summary or operation.description or f"{method.upper()} {path}"
        if not operation.is_mutating:
            return description

        body_fields = body_properties(body_schema)
        if body_fields:
            names = ", ".join(body_fields)
            return (
                f"{description}\n\nRequest body fields are passed as top-level arguments "
                f"({names}); each one is sent as the matching field of the JSON body."
            )
        if LEGACY_BODY_ARGUMENT in input_schema.get("properties", {}):
            return (
                f"{description}\n\nPass the JSON request body as the "
                f"'{LEGACY_BODY_ARGUMENT}' argument."
            )
        return description

    def build_input_schema(
        self, operation: Operation, body_schema: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        required: List[str] = []

        for parameter in operation.parameters:
            if parameter.location not in EXPOSED_PARAMETER_LOCATIONS:
                continue
            schema = self.resolver.resolve_reference(parameter.schema)
            schema_type = schema.get("type") if isinstance(schema, Mapping) else None
            properties[parameter.name] = {
                "type": schema_type or "string",
                "description": parameter.description,
            }
            if parameter.required:
                _add_required(required, parameter.name)

        if operation.is_mutating and body_schema is not None:
            fields = body_properties(body_schema)
            if fields:
                required_fields = body_required(body_schema)
                for name, schema in fields.items():
                    if name in properties:
                        logger.debug(
                            "Body field %s shadowed by a parameter in %s %s",
                            name,
                            operation.method.upper(),
                            operation.path,
                        )
                        continue
                    properties[name] = schema
                    if name in required_fields:
                        _add_required(required, name)
            else:
                properties[LEGACY_BODY_ARGUMENT] = {
                    "type": "object",
                    "description": "Request body data",
                }
                if (operation.request_body or {}).get("required"):
                    _add_required(required, LEGACY_BODY_ARGUMENT)

        return {"type": "object", "properties": properties, "required": required}

    def resolved_body_schema(self, operation: Operation) -> Optional[Dict[str, Any]]:
        raw = operation.body_schema()
        if raw is None:
            return None
        schema = self.resolver.resolve_deep(raw)
        return schema if isinstance(schema, dict) else {}


def body_properties(body_schema: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    properties = (body_schema or {}).get("properties")
    return dict(properties) if isinstance(properties, Mapping) else {}


def body_required(body_schema: Optional[Mapping[str, Any]]) -> List[str]:
    required = (body_schema or {}).get("required")
    return [name for name in required if isinstance(name, str)] if isinstance(required, list) else []


def _add_required(required: List[str], name: str) -> None:
    if name not in required:
        required.append(name)
