"""Error types raised by the adapter."""

from __future__ import annotations

import json
from typing import Optional

from .models import JsonValue


class AdapterError(Exception):
    pass


class SpecError(AdapterError):
    """The OpenAPI document could not be loaded."""


class SpecNotFoundError(SpecError):
    pass


class SpecFormatError(SpecError):
    pass


class SpecLoadError(SpecError):
    pass


class SpecNotLoadedError(AdapterError):
    def __init__(self) -> None:
        super().__init__("OpenAPI spec not loaded")


class OperationNotFoundError(AdapterError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"No operation found for tool: {tool_name}")
        self.tool_name = tool_name


class ApiCallError(AdapterError):
    """The upstream API answered with a non-success status."""

    def __init__(
        self,
        status_code: Optional[int],
        status_text: Optional[str],
        data: JsonValue = None,
    ) -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.data = data
        super().__init__(
            f"API call failed: {status_code} {status_text} - {json.dumps(data, default=str)}"
        )
