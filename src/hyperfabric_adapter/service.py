"""Core adapter service logic."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from .executors import RestExecutor
from .logging import redact_payload
from .models import ToolDescriptor
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)


class AdapterService:
    """
    Boundary between the MCP transport and the REST executor.

    Tool calls never raise: every failure, from an unknown tool name to a
    dropped connection, is reported as an error payload.
    """

    def __init__(self, tool_registry: ToolRegistry, rest_executor: RestExecutor) -> None:
        self.tool_registry = tool_registry
        self.rest_executor = rest_executor

    def list_tools(self) -> List[ToolDescriptor]:
        return self.tool_registry.list_tools()

    async def call_tool(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        payload = dict(arguments or {})
        logger.info("Calling tool=%s arguments=%s", name, redact_payload(payload))

        try:
            response = await self.rest_executor.execute_api_call(name, payload)
        except Exception as exc:
            logger.error("Error executing tool %s: %s", name, exc)
            return self._format_error(str(exc) or exc.__class__.__name__)

        return self._format_result(response.to_dict())

    def _format_result(self, result: Dict[str, Any]) -> Dict[str, Any]:
        text = json.dumps(result, indent=2, default=str)
        return {"content": [{"type": "text", "text": text}], "isError": False}

    def _format_error(self, message: str) -> Dict[str, Any]:
        return {"content": [{"type": "text", "text": f"Error: {message}"}], "isError": True}
