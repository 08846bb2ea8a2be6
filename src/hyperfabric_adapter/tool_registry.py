"""Tool registry for the Hyperfabric Adapter."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from .exceptions import OperationNotFoundError, SpecNotLoadedError
from .models import GeneratedTool, ToolDescriptor


logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered tool descriptors plus the name -> operation table used for dispatch.

    Filled once at startup and only read afterwards.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, GeneratedTool] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, tools: Iterable[GeneratedTool]) -> None:
        for tool in tools:
            self.register(tool)
        self._loaded = True
        logger.info("Registered %s tools", len(self._tools))

    def register(self, tool: GeneratedTool) -> bool:
        existing = self._tools.get(tool.name)
        if existing is not None:
            logger.warning(
                "Duplicate tool name %s (%s %s); keeping %s %s",
                tool.name,
                tool.method.upper(),
                tool.path,
                existing.method.upper(),
                existing.path,
            )
            return False
        self._tools[tool.name] = tool
        return True

    def list_tools(self) -> List[ToolDescriptor]:
        return [tool.descriptor for tool in self._tools.values()]

    def get(self, name: str) -> GeneratedTool:
        if not self._loaded:
            raise SpecNotLoadedError()
        tool = self._tools.get(name)
        if tool is None:
            raise OperationNotFoundError(name)
        return tool

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
