"""OpenAPI spec loader and operation parser."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .exceptions import SpecFormatError, SpecLoadError, SpecNotFoundError
from .models import HTTP_METHODS, Operation, Parameter
from .resolver import SchemaResolver


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenAPISpec:
    document: Mapping[str, Any]

    @property
    def title(self) -> str:
        return str((self.document.get("info") or {}).get("title") or "")

    @property
    def version(self) -> str:
        return str((self.document.get("info") or {}).get("version") or "")

    @property
    def paths(self) -> Mapping[str, Any]:
        paths = self.document.get("paths")
        return paths if isinstance(paths, Mapping) else {}

    def iter_operations(self) -> Iterator[Tuple[str, str, Operation]]:
        if not self.paths:
            logger.error("No paths found in OpenAPI spec")
            return

        for path, path_item in self.paths.items():
            if not isinstance(path_item, Mapping):
                logger.debug("Skipping malformed path item: %s", path)
                continue
            shared_parameters = path_item.get("parameters")
            if not isinstance(shared_parameters, list):
                shared_parameters = []

            for method, raw_operation in path_item.items():
                if method.lower() not in HTTP_METHODS:
                    continue
                if not isinstance(raw_operation, Mapping):
                    logger.debug("Skipping malformed operation: %s %s", method, path)
                    continue
                yield path, method.lower(), self._parse_operation(
                    method.lower(), path, raw_operation, shared_parameters
                )

    def _parse_operation(
        self,
        method: str,
        path: str,
        raw: Mapping[str, Any],
        shared_parameters: List[Any],
    ) -> Operation:
        operation_id = raw.get("operationId")
        request_body = SchemaResolver(self.document).resolve_reference(raw.get("requestBody"))
        responses = raw.get("responses")
        return Operation(
            method=method,
            path=path,
            operation_id=operation_id if isinstance(operation_id, str) and operation_id else None,
            summary=raw.get("summary") or None,
            description=raw.get("description") or None,
            parameters=tuple(self._merge_parameters(shared_parameters, raw.get("parameters") or [])),
            request_body=dict(request_body) if isinstance(request_body, Mapping) else None,
            responses=dict(responses) if isinstance(responses, Mapping) else {},
        )

    def _merge_parameters(self, shared: List[Any], own: List[Any]) -> List[Parameter]:
        # Operation-level parameters override path-level ones with the same name and location.
        merged: Dict[Tuple[str, str], Parameter] = {}
        for raw in [*shared, *own]:
            parameter = self._parse_parameter(raw)
            if parameter is not None:
                merged[(parameter.name, parameter.location)] = parameter
        return list(merged.values())

    def _parse_parameter(self, raw: Any) -> Optional[Parameter]:
        if not isinstance(raw, Mapping):
            return None
        raw = SchemaResolver(self.document).resolve_reference(raw)
        if not isinstance(raw, Mapping):
            return None
        name = raw.get("name")
        location = raw.get("in")
        if not name or not location:
            return None
        schema = raw.get("schema")
        return Parameter(
            name=str(name),
            location=str(location),
            required=bool(raw.get("required", False)),
            schema=dict(schema) if isinstance(schema, Mapping) else {},
            description=raw.get("description") or "",
        )


def parse_spec(text: str, source: str = "<string>") -> OpenAPISpec:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SpecFormatError(f"The file at '{source}' is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise SpecFormatError(f"The file at '{source}' does not contain a JSON object")
    return OpenAPISpec(document=document)


async def load_spec(path: Path) -> OpenAPISpec:
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except FileNotFoundError as exc:
        raise SpecNotFoundError(f"The file was not found at '{path}'") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecLoadError(f"Error loading OpenAPI spec from '{path}': {exc}") from exc

    spec = parse_spec(text, source=str(path))
    logger.info("OpenAPI spec loaded: %s (version %s)", spec.title or "untitled", spec.version or "n/a")
    return spec
