"""Derive MCP tool names from OpenAPI operations.

The same function is used when tools are generated and when a tool call is
mapped back to its operation, so it must stay pure.

Examples:
  operationId "fabricsGetAllFabrics"     -> fabricsGetAllFabrics
  GET  /fabrics                          -> get_fabrics
  GET  /fabrics/{fabricId}/nodes         -> get_fabrics_nodes
  POST /devices/{id}/bind-port           -> post_devices_bind_port
  GET  /                                 -> get_root
"""

from __future__ import annotations

import re
from typing import List, Optional

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")


def _path_segments(path: str) -> List[str]:
    """Literal path segments, without empty parts and {placeholders}."""
    return [part for part in path.split("/") if part and not part.startswith("{")]


def build_tool_name(method: str, path: str, operation_id: Optional[str] = None) -> str:
    if operation_id:
        return operation_id

    base = "_".join(_path_segments(path)) or "root"
    return _UNSAFE_CHARS.sub("_", f"{method.lower()}_{base}")
