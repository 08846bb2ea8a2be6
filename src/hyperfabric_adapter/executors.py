"""Execution layer: map a tool call onto the upstream REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from .exceptions import ApiCallError
from .generator import LEGACY_BODY_ARGUMENT, body_properties
from .logging import redact_payload
from .models import ApiResponse, GeneratedTool, JsonValue, RequestBinding
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves untouched besides A-Z a-z 0-9 - _ . ~
_PATH_SAFE_CHARS = "!*'()"


class RestExecutor:
    def __init__(
        self,
        registry: ToolRegistry,
        base_url: str,
        api_token: str,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.registry = registry
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def execute_api_call(self, tool_name: str, arguments: Mapping[str, Any]) -> ApiResponse:
        tool = self.registry.get(tool_name)
        binding = self.build_request(tool, arguments)

        logger.debug("Making API call: %s %s", binding.method, binding.url)
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout_seconds,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            response = await client.request(
                binding.method,
                binding.url,
                params=binding.query or None,
                json=binding.body,
            )

        data = self._decode(response)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ApiCallError(response.status_code, response.reason_phrase, data) from exc

        return ApiResponse(status=response.status_code, status_text=response.reason_phrase, data=data)

    def build_request(self, tool: GeneratedTool, arguments: Mapping[str, Any]) -> RequestBinding:
        url = tool.path
        query: Dict[str, Any] = {}

        for parameter in tool.operation.parameters:
            value = arguments.get(parameter.name)
            if value is None:
                continue
            if parameter.location == "path":
                url = url.replace(f"{{{parameter.name}}}", self._encode_path_value(value))
            elif parameter.location == "query":
                query[parameter.name] = value

        body: Optional[JsonValue] = None
        if tool.operation.is_mutating:
            body = self._build_body(tool, arguments)

        return RequestBinding(method=tool.method.upper(), url=url, query=query, body=body)

    def _build_body(self, tool: GeneratedTool, arguments: Mapping[str, Any]) -> Optional[JsonValue]:
        explicit_body = arguments.get(LEGACY_BODY_ARGUMENT)
        if explicit_body is not None:
            # The legacy opaque body wins over individually passed fields.
            return explicit_body

        declared = body_properties(tool.body_schema)
        body = {name: arguments[name] for name in declared if name in arguments}
        if not body:
            return None

        logger.debug("Request body for %s: %s", tool.name, redact_payload(body))
        return body

    def _encode_path_value(self, value: Any) -> str:
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, (dict, list)):
            text = json.dumps(value, separators=(",", ":"))
        else:
            text = str(value)
        return quote(text, safe=_PATH_SAFE_CHARS)

    def _decode(self, response: httpx.Response) -> JsonValue:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
